"""Filesystem helpers: contained path resolution and text layer snapshots."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from usdjs_renderer.models.corpus import TextFileRecord

logger = logging.getLogger(__name__)

# Layers the viewer accepts inline through textFiles
TEXT_LAYER_EXTENSIONS = (".usda", ".usd", ".txt")


def safe_resolve_under_root(root: Path | str, rel: str) -> Path | None:
    """Resolve *rel* below *root*, or return None if it would escape the root.

    Scene references use forward slashes, so backslashes are treated as
    separators before resolving.
    """
    root_abs = os.path.normpath(os.path.abspath(root))
    rel_fs = rel.replace("\\", "/")
    target = os.path.normpath(os.path.join(root_abs, rel_fs))
    if not target.startswith(os.path.join(root_abs, "")):
        return None
    return Path(target)


def read_text_files(root: Path) -> list[TextFileRecord]:
    """Snapshot every text layer below *root* with posix relative paths."""
    records: list[TextFileRecord] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        for name in sorted(filenames):
            if not name.lower().endswith(TEXT_LAYER_EXTENSIONS):
                continue
            rel = name if rel_dir == "." else f"{rel_dir}/{name}"
            text = (Path(dirpath) / name).read_text(encoding="utf-8", errors="replace")
            records.append(TextFileRecord(path=rel, text=text))

    logger.debug("Loaded %d text layers from %s", len(records), root)
    return records
