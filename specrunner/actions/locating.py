from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Error as PWError, TimeoutError as PWTimeoutError

from specrunner.exceptions import EngineError, LocatorError

@contextmanager
def locating(what: str) -> Iterator[None]:
    """
    Maps Playwright failures while acting on `what`:
    a timeout means the element never showed up or never became actionable.
    """
    try:
        yield
    except PWTimeoutError as e:
        raise LocatorError(f"{what}: not found or not actionable ({_first_line(e)})") from e
    except PWError as e:
        raise EngineError(f"{what}: {_first_line(e)}") from e

@contextmanager
def engine(what: str) -> Iterator[None]:
    try:
        yield
    except PWError as e:
        raise EngineError(f"{what}: {_first_line(e)}") from e

def _first_line(e: Exception) -> str:
    msg = str(getattr(e, "message", None) or e).strip()
    return msg.splitlines()[0] if msg else type(e).__name__

def visible_text(page, text: str):
    """First element showing `text` that is actually visible; hidden copies earlier in the DOM are skipped."""
    return page.get_by_text(text).locator("visible=true").first
