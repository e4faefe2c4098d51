"""Render driver — runs one capture cycle against an open page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from usdjs_renderer.errors import RenderFailureError
from usdjs_renderer.models.config import CaptureSettings
from usdjs_renderer.models.corpus import TextFileRecord

from .browser import attach_page_logging
from .viewer import PageViewer, ViewerCapability

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


class RenderDriver:
    """Navigates to the viewer, renders one entry and screenshots its canvas.

    The steps are strictly ordered: navigate, wait for the render entry
    point, (optionally) preload text layers, render, settle, screenshot.
    """

    def __init__(
        self,
        settings: CaptureSettings | None = None,
        viewer_factory: Callable[[Page], ViewerCapability] = PageViewer,
    ):
        self.settings = settings or CaptureSettings()
        self.viewer_factory = viewer_factory

    async def capture(
        self,
        page: Page,
        entry_path: str,
        out_path: Path,
        compose: bool = True,
        text_files: Optional[Sequence[TextFileRecord]] = None,
        preload: Optional[Sequence[TextFileRecord]] = None,
    ) -> Path:
        """Render *entry_path* and write the canvas to *out_path* as PNG.

        Args:
            text_files: Layers passed inline with the render call (single-shot).
            preload: Layers pushed into the viewer core before rendering (batch).
        """
        out_path = Path(out_path)
        try:
            await self._capture(page, entry_path, out_path, compose, text_files, preload)
        except Exception as e:
            raise RenderFailureError(str(e)) from e
        return out_path

    async def _capture(
        self,
        page: Page,
        entry_path: str,
        out_path: Path,
        compose: bool,
        text_files: Optional[Sequence[TextFileRecord]],
        preload: Optional[Sequence[TextFileRecord]],
    ) -> None:
        s = self.settings
        attach_page_logging(page)

        logger.debug("Opening %s", s.index_url)
        await page.goto(s.index_url, wait_until="domcontentloaded")

        viewer = self.viewer_factory(page)
        await viewer.wait_until_ready()

        if preload is not None:
            logger.debug("Preloading %d text layers", len(preload))
            await viewer.load_text_files(preload)

        logger.debug("Rendering %s (compose=%s)", entry_path, compose)
        await viewer.render(entry_path, text_files=text_files, compose=compose)

        # Give async texture loads a chance to finish
        try:
            await page.wait_for_load_state("networkidle")
        except Exception:
            pass
        await page.wait_for_timeout(s.settle_ms)

        canvas = page.locator(s.canvas_selector)
        await canvas.wait_for(state="visible", timeout=s.canvas_timeout_ms)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        await canvas.screenshot(path=str(out_path), type="png")
        logger.debug("Captured %s", out_path)
