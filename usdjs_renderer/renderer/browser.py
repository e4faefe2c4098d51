"""Browser helpers — launch Chromium, size contexts, wire the virtual router."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from usdjs_renderer.errors import MissingDependencyError, RenderFailureError
from usdjs_renderer.server.router import VirtualFileRouter

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright, Request, Route

logger = logging.getLogger(__name__)

_INSTALL_HINT = (
    "Playwright is not installed.\n"
    "Install it and Chromium:\n"
    "  pip install playwright\n"
    "  playwright install chromium\n"
)


def load_playwright() -> Callable[[], Any]:
    """Return ``async_playwright`` or raise MissingDependencyError with install steps."""
    try:
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise MissingDependencyError(f"{_INSTALL_HINT}Original error: {e}") from e
    return async_playwright


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium for offscreen WebGL rendering."""
    try:
        return await playwright.chromium.launch(headless=headless)
    except Exception as e:
        # Usually the browser binary is missing: `playwright install chromium`
        raise RenderFailureError(f"Failed to launch Chromium: {e}") from e


async def create_render_context(browser: Browser, viewport: dict) -> BrowserContext:
    """Create a browser context whose viewport matches the capture size."""
    try:
        return await browser.new_context(viewport=viewport)
    except Exception as e:
        raise RenderFailureError(f"Failed to create browser context: {e}") from e


def make_route_handler(router: VirtualFileRouter):
    """Adapt the router to Playwright's ``route(pattern, handler)`` callback."""

    async def _handle(route: Route, request: Request) -> None:
        response = router.handle(request.url)
        if response is None:
            await route.fallback()
            return
        await route.fulfill(
            status=response.status,
            headers=response.headers,
            body=response.body,
        )

    return _handle


async def install_router(target: Page | BrowserContext, router: VirtualFileRouter) -> None:
    """Intercept every request of a page, or of every page opened from a context."""
    await target.route("**/*", make_route_handler(router))


def attach_page_logging(page: Page) -> None:
    """Forward the viewer's console output and uncaught errors to the logger."""
    page.on("console", lambda msg: logger.debug("[browser:%s] %s", msg.type, msg.text))
    page.on("pageerror", lambda err: logger.debug("[browser:pageerror] %s", err))
