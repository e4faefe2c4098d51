"""Pytest configuration and shared fixtures."""

import io
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from rich.console import Console

from usdjs_renderer.models.config import FTLAB_SAMPLE_ROOT
from usdjs_renderer.models.corpus import SampleMapping


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_screenshot(path: Path) -> None:
    """Create a 1x1 pixel PNG."""
    png_data = (
        b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01'
        b'\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde\x00\x00'
        b'\x00\x0cIDATx\x9cc\x00\x01\x00\x00\x05\x00\x01\r\n-'
        b'\xb4\x00\x00\x00\x00IEND\xaeB`\x82'
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(png_data)


SPOT_LIGHT_USDA = '#usda 1.0\n(\n    defaultPrim = "World"\n)\n\ndef Xform "World"\n{\n}\n'

README_MD = """# sample_usd

|File|Description|Image|
|---|---|---|
|[spot_light.usda](samples/light/spot_light.usda)|-|![spot_light](samples/light/images/spot_light.jpg)|
|[point_light.usda](samples/light/point_light.usda)|-|![point_light](samples/light/images/point_light.jpg)|
|[texture.usdz](samples/material/texture.usdz)|-|![texture](samples/material/images/texture.png)|
"""


# ============================================================================
# Corpus Fixtures
# ============================================================================


@pytest.fixture
def usdjs_root(tmp_path: Path) -> Path:
    """A minimal usdjs repo: package.json plus the ft-lab corpus layout."""
    root = tmp_path / "cinevva-usdjs"
    (root / "test" / "corpus").mkdir(parents=True)
    (root / "package.json").write_text('{"name": "@cinevva/usdjs"}')
    return root


@pytest.fixture
def sample_root(usdjs_root: Path) -> Path:
    """ft-lab sample root with a README, two light samples and one usdz."""
    root = usdjs_root / FTLAB_SAMPLE_ROOT
    light = root / "samples" / "light"
    (light / "images").mkdir(parents=True)
    (light / "spot_light.usda").write_text(SPOT_LIGHT_USDA)
    create_mock_screenshot(light / "images" / "spot_light.jpg")

    material = root / "samples" / "material"
    (material / "images").mkdir(parents=True)
    (material / "texture.usdz").write_bytes(b"PK\x03\x04usdz")
    (material / "shader.mtlx").write_text('<?xml version="1.0"?><materialx version="1.38"/>')
    create_mock_screenshot(material / "images" / "texture.png")

    (root / "readme.md").write_text(README_MD)
    return root


@pytest.fixture
def viewer_dist(tmp_path: Path) -> Path:
    """A built viewer bundle: index.html plus one script asset."""
    dist = tmp_path / "usdjs-viewer" / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text('<!doctype html><canvas data-testid="usdjs-canvas"></canvas>')
    (dist / "assets" / "index-abc123.js").write_text("globalThis.__usdjsRender = async () => {};")
    return dist


@pytest.fixture
def spot_light_mapping() -> SampleMapping:
    return SampleMapping(
        sample_rel="samples/light/spot_light.usda",
        ref_image_rel="samples/light/images/spot_light.jpg",
    )


# ============================================================================
# Console / Playwright Fixtures
# ============================================================================


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def test_console(console_buffer: io.StringIO) -> Console:
    """A rich console writing plain text to a buffer."""
    return Console(file=console_buffer, width=200, color_system=None, force_terminal=False)


@pytest.fixture
def mock_page() -> AsyncMock:
    """A Playwright page double; locator() and on() are synchronous like the real API."""
    page = AsyncMock()
    page.on = Mock()
    canvas = AsyncMock()
    page.locator = Mock(return_value=canvas)
    return page


@pytest.fixture
def mock_context(mock_page: AsyncMock) -> AsyncMock:
    context = AsyncMock()
    context.new_page = AsyncMock(return_value=mock_page)
    return context
