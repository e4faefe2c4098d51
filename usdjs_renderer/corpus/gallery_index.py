"""Discover captured renders for the comparison gallery."""

from __future__ import annotations

import logging
from pathlib import Path

from usdjs_renderer.models.config import CAPTURE_SUFFIX
from usdjs_renderer.models.corpus import GalleryEntry

logger = logging.getLogger(__name__)

REF_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def entry_for_capture(sample_root: Path, capture_path: Path) -> GalleryEntry:
    """Derive the sample and reference paths that belong to one capture file."""
    base_name = capture_path.name[: -len(CAPTURE_SUFFIX)]
    images_dir_rel = capture_path.parent.relative_to(sample_root).as_posix()

    sample_dir_rel = images_dir_rel[: -len("/images")] if images_dir_rel.lower().endswith("/images") else images_dir_rel
    sample_rel = f"{sample_dir_rel}/{base_name}.usda"
    cinevva_rel = f"{images_dir_rel}/{base_name}{CAPTURE_SUFFIX}"

    candidates = [f"{images_dir_rel}/{base_name}{ext}" for ext in REF_IMAGE_EXTENSIONS]
    ref_rel = next((c for c in candidates if _file_exists(sample_root / c)), candidates[0])

    return GalleryEntry(
        sample_rel=sample_rel,
        images_dir_rel=images_dir_rel,
        ref_rel=ref_rel,
        cinevva_rel=cinevva_rel,
    )


def find_gallery_entries(sample_root: Path) -> list[GalleryEntry]:
    """Walk samples/ for captures and return entries sorted by sample path."""
    samples_dir = sample_root / "samples"
    entries = [
        entry_for_capture(sample_root, p)
        for p in samples_dir.rglob(f"*{CAPTURE_SUFFIX}")
        if p.is_file()
    ]
    entries.sort(key=lambda e: e.sample_rel)
    logger.debug("Discovered %d captures under %s", len(entries), samples_dir)
    return entries
