from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

from playwright.sync_api import sync_playwright, Playwright, Browser, BrowserContext, Page
from playwright.sync_api import Error as PWError

from specrunner.config import RunOptions
from specrunner.exceptions import EngineError

def _normalize_viewport(viewport: Optional[Sequence[int]]) -> Optional[Dict[str, int]]:
    if not viewport:
        return None
    w, h = int(viewport[0]), int(viewport[1])
    if w > 0 and h > 0:
        return {"width": w, "height": h}
    return None

def _browser_ctor(p: Playwright, name: str):
    name = (name or "chromium").strip().lower()
    if name in ("chromium", "chrome"): return p.chromium
    if name in ("firefox", "ff"):       return p.firefox
    if name in ("webkit", "safari"):    return p.webkit
    raise EngineError(f"Unsupported browser: {name!r} (use chromium, firefox or webkit)")

def open_browser(
    browser_name: str,
    headless: bool,
    *,
    viewport: Optional[Sequence[int]] = None,
    timeout_ms: Optional[int] = None,
    slow_mo: int = 0,
) -> Tuple[Playwright, Browser, BrowserContext, Page]:
    p = sync_playwright().start()
    browser: Optional[Browser] = None
    try:
        browser_type = _browser_ctor(p, browser_name)

        launch_kwargs: Dict[str, Any] = {"headless": bool(headless)}
        if slow_mo and int(slow_mo) > 0:
            launch_kwargs["slow_mo"] = int(slow_mo)

        browser = browser_type.launch(**launch_kwargs)

        vp = _normalize_viewport(viewport)
        context_kwargs: Dict[str, Any] = {}
        if vp:
            context_kwargs["viewport"] = vp

        ctx: BrowserContext = browser.new_context(**context_kwargs)
        page: Page = ctx.new_page()

        if timeout_ms and int(timeout_ms) > 0:
            page.set_default_timeout(int(timeout_ms))
    except BaseException:
        # half-open session: release whatever was acquired, then re-raise
        try:
            if browser is not None:
                browser.close()
        finally:
            p.stop()
        raise

    return p, browser, ctx, page

def close_browser(p: Playwright, browser: Browser, ctx: BrowserContext) -> None:
    try:
        ctx.close()
    finally:
        try:
            browser.close()
        finally:
            p.stop()

@contextmanager
def browser_session(options: RunOptions) -> Iterator[Page]:
    """
    One browser, context and page for the lifetime of a spec run.
    Closed exactly once, also when the body raises.
    """
    try:
        p, browser, ctx, page = open_browser(
            options.browser,
            options.headless,
            viewport=options.viewport,
            timeout_ms=options.timeout_ms,
            slow_mo=options.slow_mo,
        )
    except PWError as e:
        raise EngineError(f"Could not launch {options.browser}: {e}") from e

    try:
        yield page
    finally:
        try:
            close_browser(p, browser, ctx)
        except PWError as e:
            raise EngineError(f"Could not close {options.browser}: {e}") from e
