"""Locate the sibling usdjs repo and the built usdjs-viewer bundle."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from usdjs_renderer.errors import RootNotFoundError
from usdjs_renderer.models.config import USDJS_ROOT_ENV, VIEWER_DIST_ENV

logger = logging.getLogger(__name__)

_USDJS_DEFAULTS = ("packages/usdjs", "../cinevva-usdjs", "../usdjs")
_VIEWER_DEFAULTS = (
    "packages/usdjs-viewer/dist",
    "../cinevva-usdjs-viewer/dist",
    "../usdjs-viewer/dist",
)


def _candidates(
    arg: Optional[str],
    env_var: str,
    defaults: tuple[str, ...],
    environ: Mapping[str, str] | None,
    cwd: Path | None,
) -> list[Path]:
    environ = os.environ if environ is None else environ
    cwd = Path.cwd() if cwd is None else Path(cwd)
    raw = [arg, environ.get(env_var)]
    found = [Path(c) for c in raw if c]
    found += [cwd / d for d in defaults]
    return [Path(os.path.abspath(c if c.is_absolute() else cwd / c)) for c in found]


def _is_usdjs_root(path: Path) -> bool:
    return (
        path.is_dir()
        and (path / "package.json").exists()
        and (path / "test" / "corpus").is_dir()
    )


def resolve_usdjs_root(
    usdjs_root_arg: Optional[str] = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the usdjs repo root (holds package.json and test/corpus)."""
    for candidate in _candidates(usdjs_root_arg, USDJS_ROOT_ENV, _USDJS_DEFAULTS, environ, cwd):
        logger.debug("Probing usdjs root: %s", candidate)
        if _is_usdjs_root(candidate):
            return candidate

    raise RootNotFoundError(
        "Could not locate the @cinevva/usdjs repo root (needed for corpus-based scripts).\n"
        "Provide one of:\n"
        "- --usdjs-root /abs/path/to/cinevva-usdjs\n"
        f"- {USDJS_ROOT_ENV}=/abs/path/to/cinevva-usdjs\n"
        "Searched common defaults relative to the current directory."
    )


def resolve_viewer_dist(
    viewer_dist_arg: Optional[str] = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the usdjs-viewer build directory (holds index.html and assets/)."""
    for candidate in _candidates(viewer_dist_arg, VIEWER_DIST_ENV, _VIEWER_DEFAULTS, environ, cwd):
        logger.debug("Probing viewer dist: %s", candidate)
        if (candidate / "index.html").is_file():
            return candidate

    raise RootNotFoundError(
        "Could not locate usdjs-viewer dist.\n"
        "Provide one of:\n"
        "- --viewer-dist /abs/path/to/usdjs-viewer/dist\n"
        f"- {VIEWER_DIST_ENV}=/abs/path/to/usdjs-viewer/dist\n"
        "Searched common defaults relative to the current directory."
    )
