"""Extract sample -> reference image pairs from the ft-lab corpus README."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from usdjs_renderer.errors import EmptyCorpusError
from usdjs_renderer.models.config import FTLAB_README
from usdjs_renderer.models.corpus import SampleMapping

logger = logging.getLogger(__name__)

# Typical row:
# |[spot_light.usda](samples/light/spot_light.usda)|-|...![spot_light](samples/light/images/spot_light.jpg)|
_SAMPLE_LINK_RE = re.compile(
    r"\|\s*\[[^\]]+\]\((samples/[^)]+?\.(?:usda|usd|usdc|usdz))\)\s*\|", re.IGNORECASE
)
_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\((samples/[^)]+?\.(?:png|jpg|jpeg|webp|gif))\)", re.IGNORECASE
)
# Only LF and CRLF end a row; other Unicode breaks may appear inside a cell
_LINE_BREAK_RE = re.compile(r"\r?\n")


def extract_mappings_from_readme(readme_md: str) -> list[SampleMapping]:
    """Return one mapping per qualifying line, de-duplicated in first-seen order."""
    mappings: list[SampleMapping] = []
    seen: set[tuple[str, str]] = set()

    for line in _LINE_BREAK_RE.split(readme_md):
        file_match = _SAMPLE_LINK_RE.search(line)
        if not file_match:
            continue
        img_match = _IMAGE_RE.search(line)
        if not img_match:
            continue

        key = (file_match.group(1), img_match.group(1))
        if key in seen:
            continue
        seen.add(key)
        mappings.append(SampleMapping(sample_rel=key[0], ref_image_rel=key[1]))

    return mappings


def load_mappings(sample_root: Path) -> list[SampleMapping]:
    """Read the corpus README under *sample_root* and parse its mappings."""
    readme_path = sample_root / FTLAB_README
    if not readme_path.exists():
        raise FileNotFoundError(f"Missing sample_usd readme: {readme_path}")

    mappings = extract_mappings_from_readme(readme_path.read_text(encoding="utf-8"))
    if not mappings:
        raise EmptyCorpusError(f"No mappings found in {readme_path}")
    logger.info("Found %d sample mappings in %s", len(mappings), readme_path)
    return mappings
