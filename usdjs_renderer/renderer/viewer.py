"""Typed boundary around the globals the usdjs-viewer bundle exposes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence

from usdjs_renderer.models.corpus import TextFileRecord

if TYPE_CHECKING:
    from playwright.async_api import Page

_READY_JS = "() => typeof globalThis.__usdjsRender === 'function'"

_LOAD_TEXT_FILES_JS = """(textFiles) => {
    const core = globalThis.__usdjsViewerCore;
    if (!core) throw new Error('usdjs viewer core not initialized');
    core.loadTextFiles(textFiles);
    return true;
}"""

_RENDER_JS = """async (opts) => {
    await globalThis.__usdjsRender(opts);
    return true;
}"""


class ViewerCapability(ABC):
    """The viewer's headless rendering surface."""

    @abstractmethod
    async def wait_until_ready(self) -> None:
        ...

    @abstractmethod
    async def load_text_files(self, records: Sequence[TextFileRecord]) -> None:
        ...

    @abstractmethod
    async def render(
        self,
        entry_path: str,
        text_files: Optional[Sequence[TextFileRecord]] = None,
        compose: bool = True,
    ) -> None:
        ...


def _serialize(records: Sequence[TextFileRecord]) -> list[dict]:
    return [r.model_dump() for r in records]


class PageViewer(ViewerCapability):
    """ViewerCapability backed by a Playwright page running the viewer bundle."""

    def __init__(self, page: Page):
        self.page = page

    async def wait_until_ready(self) -> None:
        await self.page.wait_for_function(_READY_JS)

    async def load_text_files(self, records: Sequence[TextFileRecord]) -> None:
        await self.page.evaluate(_LOAD_TEXT_FILES_JS, _serialize(records))

    async def render(
        self,
        entry_path: str,
        text_files: Optional[Sequence[TextFileRecord]] = None,
        compose: bool = True,
    ) -> None:
        opts: dict = {"entryPath": entry_path, "compose": compose}
        if text_files is not None:
            opts["textFiles"] = _serialize(text_files)
        await self.page.evaluate(_RENDER_JS, opts)
