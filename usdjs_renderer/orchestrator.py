"""Command orchestrator — wires resolver, indexer, router and driver per command."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from rich.console import Console

from usdjs_renderer.corpus.gallery_index import find_gallery_entries
from usdjs_renderer.corpus.readme_index import load_mappings
from usdjs_renderer.corpus.text_files import read_text_files, safe_resolve_under_root
from usdjs_renderer.errors import EntryNotFoundError, EntryOutOfBoundsError
from usdjs_renderer.models.config import (
    FTLAB_SAMPLE_ROOT,
    CaptureSettings,
    CompareArgs,
    GalleryArgs,
    RenderArgs,
)
from usdjs_renderer.models.run_report import RunReport
from usdjs_renderer.renderer.browser import (
    create_render_context,
    install_router,
    launch_browser,
    load_playwright,
)
from usdjs_renderer.renderer.driver import RenderDriver
from usdjs_renderer.reporter.gallery_html import write_gallery
from usdjs_renderer.roots import resolve_usdjs_root, resolve_viewer_dist
from usdjs_renderer.runner.batch import BatchComparisonRunner, filter_mappings
from usdjs_renderer.server.router import VirtualFileRouter

logger = logging.getLogger(__name__)


def ftlab_sample_root(usdjs_root: Path) -> Path:
    return usdjs_root / FTLAB_SAMPLE_ROOT


def _read_viewer_index(viewer_dist: Path) -> str:
    index_path = viewer_dist / "index.html"
    if not index_path.exists():
        raise FileNotFoundError(f"Missing viewer index: {index_path}")
    return index_path.read_text(encoding="utf-8")


class Orchestrator:
    """Runs the three commands: single render, batch compare, gallery."""

    def __init__(self, settings: CaptureSettings | None = None, console: Console | None = None):
        self.settings = settings or CaptureSettings()
        self.console = console or Console()

    # -- single scene -------------------------------------------------------

    def run_render(self, args: RenderArgs) -> Path:
        """Render one entry under --root to a PNG."""
        return asyncio.run(self._render(args))

    async def _render(self, args: RenderArgs) -> Path:
        root = Path(args.root).resolve()
        entry_abs = safe_resolve_under_root(root, args.entry)
        if entry_abs is None:
            raise EntryOutOfBoundsError(f"Entry path escapes root: entry={args.entry} root={root}")
        if not entry_abs.is_file():
            raise EntryNotFoundError(f"Entry not found: {entry_abs}")

        async_playwright = load_playwright()

        viewer_dist = resolve_viewer_dist(args.viewer_dist)
        router = VirtualFileRouter(
            index_html=_read_viewer_index(viewer_dist),
            viewer_dist=viewer_dist,
            corpus_root=root,
            origin=self.settings.origin,
        )
        text_files = read_text_files(root)
        out_path = Path(args.out).resolve()
        driver = RenderDriver(self.settings)

        logger.info("Rendering %s (%dx%d) -> %s", args.entry, args.width, args.height, out_path)
        async with async_playwright() as p:
            browser = await launch_browser(p, headless=self.settings.headless)
            try:
                context = await create_render_context(browser, args.viewport)
                page = await context.new_page()
                await install_router(page, router)
                await driver.capture(
                    page,
                    entry_path=args.entry,
                    out_path=out_path,
                    compose=args.compose,
                    text_files=text_files,
                )
                await context.close()
            finally:
                await browser.close()
        return out_path

    # -- batch compare ------------------------------------------------------

    def run_compare(self, args: CompareArgs) -> RunReport:
        """Capture every ft-lab sample next to its reference image."""
        return asyncio.run(self._compare(args))

    async def _compare(self, args: CompareArgs) -> RunReport:
        start = time.time()
        sample_root = ftlab_sample_root(resolve_usdjs_root(args.usdjs_root))
        mappings = filter_mappings(load_mappings(sample_root), args.sample)
        if args.sample and not mappings:
            logger.warning("No README mapping matches --sample %s", args.sample)

        async_playwright = load_playwright()

        viewer_dist = resolve_viewer_dist(args.viewer_dist)
        router = VirtualFileRouter(
            index_html=_read_viewer_index(viewer_dist),
            viewer_dist=viewer_dist,
            corpus_root=sample_root,
            origin=self.settings.origin,
        )
        # Whole sample root, so entry keys can be relative sample paths
        text_files = read_text_files(sample_root)

        runner = BatchComparisonRunner(
            sample_root=sample_root,
            mappings=mappings,
            driver=RenderDriver(self.settings),
            compose=args.compose,
            text_files=text_files,
            console=self.console,
        )

        async with async_playwright() as p:
            browser = await launch_browser(p, headless=self.settings.headless)
            try:
                context = await create_render_context(browser, args.viewport)
                # Routed on the context so every fresh per-sample page is covered
                await install_router(context, router)
                report = await runner.run(context)
                await context.close()
            finally:
                await browser.close()

        logger.info("Compare complete: %d ok, %d skipped, %d failed in %.1fs",
                    report.ok, report.skipped, report.failed, time.time() - start)
        return report

    # -- gallery ------------------------------------------------------------

    def run_gallery(self, args: GalleryArgs) -> tuple[Path, int]:
        """Write the comparison gallery; returns (path, entry count)."""
        sample_root = ftlab_sample_root(resolve_usdjs_root(args.usdjs_root))
        if not sample_root.exists():
            raise FileNotFoundError(f"Missing sample root: {sample_root}")

        entries = find_gallery_entries(sample_root)
        out_path = Path(args.out).resolve() if args.out else sample_root / "gallery.html"
        write_gallery(sample_root, entries, out_path)
        return out_path, len(entries)
