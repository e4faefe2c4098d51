"""Tests for the orchestrator's browser session wiring (no real browser)."""

from unittest.mock import AsyncMock, Mock

import pytest

from usdjs_renderer.errors import RenderFailureError
from usdjs_renderer.models.config import CompareArgs, RenderArgs
from usdjs_renderer.orchestrator import Orchestrator

from conftest import SPOT_LIGHT_USDA


# ============================================================================
# Playwright doubles
# ============================================================================


@pytest.fixture
def mock_browser(mock_context):
    browser = AsyncMock()
    browser.new_context = AsyncMock(return_value=mock_context)
    return browser


@pytest.fixture
def playwright_session(mock_browser):
    """Stands in for ``async_playwright``: a callable returning an async context manager."""
    playwright = Mock()
    playwright.chromium.launch = AsyncMock(return_value=mock_browser)
    session = AsyncMock()
    session.__aenter__.return_value = playwright
    session.__aexit__.return_value = False
    return Mock(return_value=session)


@pytest.fixture
def load_playwright(monkeypatch, playwright_session):
    load = Mock(return_value=playwright_session)
    monkeypatch.setattr("usdjs_renderer.orchestrator.load_playwright", load)
    return load


class TestCompareSession:
    def test_routes_on_shared_context(
        self, usdjs_root, sample_root, viewer_dist, load_playwright,
        mock_browser, mock_context, mock_page, test_console,
    ):
        args = CompareArgs(usdjs_root=str(usdjs_root), viewer_dist=str(viewer_dist))
        report = Orchestrator(console=test_console).run_compare(args)

        # spot_light renders, point_light is missing, texture.usdz is unsupported
        assert (report.total, report.ok, report.skipped, report.failed) == (3, 1, 2, 0)

        mock_browser.new_context.assert_awaited_once_with(viewport={"width": 1024, "height": 1024})
        mock_context.route.assert_awaited_once()
        assert mock_context.route.call_args.args[0] == "**/*"
        mock_page.route.assert_not_called()
        mock_context.close.assert_awaited_once()
        mock_browser.close.assert_awaited_once()

    def test_batch_preloads_the_whole_sample_root(
        self, usdjs_root, sample_root, viewer_dist, load_playwright, mock_page, test_console,
    ):
        args = CompareArgs(usdjs_root=str(usdjs_root), viewer_dist=str(viewer_dist), sample="samples/light/spot_light.usda")
        Orchestrator(console=test_console).run_compare(args)

        load_call, render_call = mock_page.evaluate.call_args_list
        assert [f["path"] for f in load_call.args[1]] == ["samples/light/spot_light.usda"]
        assert render_call.args[1] == {"entryPath": "samples/light/spot_light.usda", "compose": True}

    def test_browser_closed_when_run_raises(
        self, usdjs_root, sample_root, viewer_dist, load_playwright, mock_browser, monkeypatch, test_console,
    ):
        monkeypatch.setattr(
            "usdjs_renderer.orchestrator.BatchComparisonRunner.run",
            AsyncMock(side_effect=RuntimeError("context crashed")),
        )
        args = CompareArgs(usdjs_root=str(usdjs_root), viewer_dist=str(viewer_dist))
        with pytest.raises(RuntimeError, match="context crashed"):
            Orchestrator(console=test_console).run_compare(args)
        mock_browser.close.assert_awaited_once()

    def test_readme_loaded_before_playwright(self, usdjs_root, sample_root, viewer_dist, load_playwright):
        (sample_root / "readme.md").unlink()
        args = CompareArgs(usdjs_root=str(usdjs_root), viewer_dist=str(viewer_dist))
        with pytest.raises(FileNotFoundError, match="Missing sample_usd readme"):
            Orchestrator().run_compare(args)
        load_playwright.assert_not_called()


class TestRenderSession:
    @pytest.fixture
    def scene_root(self, tmp_path):
        root = tmp_path / "scene"
        root.mkdir()
        (root / "scene.usda").write_text(SPOT_LIGHT_USDA)
        return root

    def test_routes_on_page_with_inline_layers(
        self, scene_root, viewer_dist, load_playwright, mock_browser, mock_context, mock_page, tmp_path,
    ):
        out = tmp_path / "out" / "scene.png"
        args = RenderArgs(root=str(scene_root), out=str(out), width="640", height="480", viewer_dist=str(viewer_dist))

        result = Orchestrator().run_render(args)

        assert result == out.resolve()
        mock_browser.new_context.assert_awaited_once_with(viewport={"width": 640, "height": 480})
        mock_page.route.assert_awaited_once()
        assert mock_page.route.call_args.args[0] == "**/*"
        mock_context.route.assert_not_called()

        # Single-shot passes layers with the render call, no separate preload
        assert mock_page.evaluate.await_count == 1
        opts = mock_page.evaluate.call_args.args[1]
        assert opts["entryPath"] == "scene.usda"
        assert opts["compose"] is True
        assert [f["path"] for f in opts["textFiles"]] == ["scene.usda"]
        mock_browser.close.assert_awaited_once()

    def test_browser_closed_when_capture_fails(
        self, scene_root, viewer_dist, load_playwright, mock_browser, mock_page, tmp_path,
    ):
        mock_page.evaluate.side_effect = Exception("WebGL unavailable")
        args = RenderArgs(root=str(scene_root), out=str(tmp_path / "a.png"), viewer_dist=str(viewer_dist))
        with pytest.raises(RenderFailureError, match="WebGL unavailable"):
            Orchestrator().run_render(args)
        mock_browser.close.assert_awaited_once()

    def test_launch_failure_is_a_render_failure(
        self, scene_root, viewer_dist, load_playwright, playwright_session, tmp_path,
    ):
        playwright = playwright_session.return_value.__aenter__.return_value
        playwright.chromium.launch.side_effect = Exception("Executable doesn't exist")
        args = RenderArgs(root=str(scene_root), out=str(tmp_path / "a.png"), viewer_dist=str(viewer_dist))
        with pytest.raises(RenderFailureError, match="Failed to launch Chromium: Executable doesn't exist"):
            Orchestrator().run_render(args)
