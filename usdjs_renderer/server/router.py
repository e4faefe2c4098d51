"""Virtual file router — answers intercepted requests for the virtual origin.

The viewer bundle issues requests against a fixed origin. Every request the
controlled browser makes to that origin is answered from disk:

- ``/`` and ``/index.html`` serve the pre-read viewer entry document,
- ``/assets/<rel>`` serves files from the viewer's ``assets/`` directory,
- ``/__usdjs_corpus?file=<rel>`` serves scene layers, textures and MaterialX
  documents from the corpus root.

Requests to any other origin are left alone so the automation library's own
traffic is unaffected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
from urllib.parse import parse_qs, unquote, urlsplit

from usdjs_renderer.corpus.text_files import safe_resolve_under_root

logger = logging.getLogger(__name__)

CORPUS_PATH = "/__usdjs_corpus"
OCTET_STREAM = "application/octet-stream"

_CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    # MaterialX
    ".mtlx": "application/xml; charset=utf-8",
    ".usda": "text/plain; charset=utf-8",
    ".usd": "text/plain; charset=utf-8",
    ".usdc": "text/plain; charset=utf-8",
    ".usdz": "text/plain; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
    ".exr": OCTET_STREAM,
    ".hdr": OCTET_STREAM,
}

# Served as decoded text rather than raw bytes
_CORPUS_TEXT_EXTENSIONS = {".usda", ".usd", ".usdc", ".usdz", ".txt", ".json"}


def mime_for_ext(ext_or_path: str) -> str:
    """Content type for an extension (".png") or a path ("a/b.png")."""
    ext = ext_or_path.lower() if ext_or_path.startswith(".") else Path(ext_or_path).suffix.lower()
    return _CONTENT_TYPES.get(ext, OCTET_STREAM)


@dataclass
class RouteResponse:
    status: int
    body: Union[str, bytes] = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")


def _text(status: int, body: str) -> RouteResponse:
    return RouteResponse(status=status, body=body)


class VirtualFileRouter:
    """Maps request URLs on the virtual origin to files on disk.

    The router holds no mutable state; it is built once per run and shared
    by every page of a browser context.
    """

    def __init__(self, index_html: str, viewer_dist: Path, corpus_root: Path, origin: str):
        self.index_html = index_html
        self.assets_dir = Path(viewer_dist) / "assets"
        self.corpus_root = Path(corpus_root)
        self.origin = origin.rstrip("/")

    def handle(self, url: str) -> RouteResponse | None:
        """Answer a request, or return None to let it through untouched."""
        try:
            parts = urlsplit(url)
            if f"{parts.scheme}://{parts.netloc}" != self.origin:
                return None
            response = self.handle_path(parts.path or "/", parse_qs(parts.query))
        except Exception as e:
            logger.warning("Routing %s failed: %s", url, e)
            response = _text(500, str(e))
        logger.debug("%d %s", response.status, url)
        return response

    def handle_path(self, path: str, query: dict[str, list[str]]) -> RouteResponse:
        if path in ("/", "/index.html"):
            return RouteResponse(
                status=200,
                headers={"content-type": "text/html; charset=utf-8"},
                body=self.index_html,
            )

        if path.startswith("/assets/"):
            return self._serve_asset(path)

        if path == CORPUS_PATH:
            rel = (query.get("file") or [""])[0]
            if not rel:
                return _text(400, "missing ?file=")
            return self._serve_corpus_file(rel)

        return _text(404, f"not found: {path}")

    def _serve_asset(self, path: str) -> RouteResponse:
        rel = unquote(path[len("/assets/"):])
        target = safe_resolve_under_root(self.assets_dir, rel)
        if target is None:
            return _text(403, f"forbidden: {path}")
        if not target.is_file():
            return _text(404, f"asset not found: {path}")
        return RouteResponse(
            status=200,
            headers={"content-type": mime_for_ext(target.name)},
            body=target.read_bytes(),
        )

    def _serve_corpus_file(self, rel: str) -> RouteResponse:
        # Requests are relative to the corpus root so "samples/..." references resolve
        target = safe_resolve_under_root(self.corpus_root, rel)
        if target is None:
            return _text(403, f"forbidden: {rel}")
        if not target.is_file():
            return _text(404, f"not found: {rel}")

        ext = target.suffix.lower()
        if ext == ".mtlx":
            return RouteResponse(
                status=200,
                headers={"content-type": "application/xml; charset=utf-8"},
                body=target.read_text(encoding="utf-8", errors="replace"),
            )
        if ext in _CORPUS_TEXT_EXTENSIONS:
            return RouteResponse(
                status=200,
                headers={"content-type": "text/plain; charset=utf-8"},
                body=target.read_text(encoding="utf-8", errors="replace"),
            )
        return RouteResponse(
            status=200,
            headers={"content-type": mime_for_ext(target.name)},
            body=target.read_bytes(),
        )
