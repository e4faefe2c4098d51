"""Batch comparison runner — captures every README sample in one browser context."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from rich.console import Console

from usdjs_renderer.corpus.text_files import TEXT_LAYER_EXTENSIONS
from usdjs_renderer.models.config import CAPTURE_SUFFIX
from usdjs_renderer.models.corpus import SampleMapping, TextFileRecord
from usdjs_renderer.models.run_report import ItemResult, RunReport
from usdjs_renderer.renderer.driver import RenderDriver

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

logger = logging.getLogger(__name__)

_SCENE_EXT_RE = re.compile(r"\.(usda|usd|usdc|usdz)$", re.IGNORECASE)


def filter_mappings(mappings: Sequence[SampleMapping], sample_rel: Optional[str]) -> list[SampleMapping]:
    """Restrict to the mapping whose sample path equals *sample_rel* exactly."""
    if not sample_rel:
        return list(mappings)
    return [m for m in mappings if m.sample_rel == sample_rel]


def capture_path_for(sample_root: Path, mapping: SampleMapping) -> Path:
    """``<reference image dir>/<sample base name>__cinevva.png``."""
    images_dir = (sample_root / mapping.ref_image_rel).parent
    base_name = _SCENE_EXT_RE.sub("", Path(mapping.sample_rel).name)
    return images_dir / f"{base_name}{CAPTURE_SUFFIX}"


def summarize(results: Iterable[ItemResult], total: int | None = None) -> RunReport:
    """Fold per-item outcomes into a report."""
    items = list(results)
    return RunReport(total=len(items) if total is None else total, items=items)


class BatchComparisonRunner:
    """Runs the render driver once per eligible sample, strictly in README order."""

    def __init__(
        self,
        sample_root: Path,
        mappings: Sequence[SampleMapping],
        driver: RenderDriver,
        compose: bool = True,
        text_files: Sequence[TextFileRecord] = (),
        console: Console | None = None,
    ):
        self.sample_root = sample_root
        self.mappings = list(mappings)
        self.driver = driver
        self.compose = compose
        self.text_files = list(text_files)
        self.console = console or Console()

    def precheck(self, mapping: SampleMapping) -> ItemResult | None:
        """Return a skip result when the item cannot be rendered, else None."""
        sample_abs = self.sample_root / mapping.sample_rel
        ref_abs = self.sample_root / mapping.ref_image_rel

        if not sample_abs.exists():
            return ItemResult(
                sample_rel=mapping.sample_rel, status="skipped",
                reason=f"missing sample file: {sample_abs}", missing_path=str(sample_abs),
            )
        if not ref_abs.exists():
            return ItemResult(
                sample_rel=mapping.sample_rel, status="skipped",
                reason=f"missing reference image: {ref_abs}", missing_path=str(ref_abs),
            )

        ext = sample_abs.suffix.lower()
        if ext not in TEXT_LAYER_EXTENSIONS:
            self.console.print(
                f"SKIP (unsupported {ext}): {mapping.sample_rel}",
                markup=False, highlight=False, soft_wrap=True,
            )
            return ItemResult(
                sample_rel=mapping.sample_rel, status="skipped", reason=f"unsupported {ext}",
            )
        return None

    async def run(self, context: BrowserContext) -> RunReport:
        """Process every mapping; one failing sample never aborts the batch."""
        total = len(self.mappings)
        results: list[ItemResult] = []
        ok = 0
        logger.info("Comparing %d samples", total)

        for mapping in self.mappings:
            skip = self.precheck(mapping)
            if skip is not None:
                logger.debug("Skipping %s: %s", mapping.sample_rel, skip.reason)
                results.append(skip)
                continue

            out_path = capture_path_for(self.sample_root, mapping)
            try:
                await self._capture_one(context, mapping, out_path)
            except Exception as e:
                logger.debug("Capture failed for %s: %s", mapping.sample_rel, e)
                results.append(ItemResult(sample_rel=mapping.sample_rel, status="failed", reason=str(e)))
                continue

            ok += 1
            self.console.print(f"OK {ok}/{total}: {mapping.sample_rel}", markup=False, highlight=False, soft_wrap=True)
            results.append(ItemResult(sample_rel=mapping.sample_rel, status="ok", output_path=str(out_path)))

        return summarize(results, total=total)

    async def _capture_one(self, context: BrowserContext, mapping: SampleMapping, out_path: Path) -> None:
        page = await context.new_page()
        try:
            # Entry key is relative to the sample root, matching the preloaded layer paths
            await self.driver.capture(
                page,
                entry_path=mapping.sample_rel,
                out_path=out_path,
                compose=self.compose,
                preload=self.text_files,
            )
        finally:
            await page.close()
