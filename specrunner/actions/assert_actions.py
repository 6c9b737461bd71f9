from playwright.sync_api import Error as PWError, TimeoutError as PWTimeoutError

from specrunner.actions.locating import locating, visible_text
from specrunner.exceptions import EngineError

ASSERT_TIMEOUT_MS = 5000

def _assert_state(page, value, state: str):
    timeout = value.timeout or ASSERT_TIMEOUT_MS
    try:
        visible_text(page, value.text).wait_for(state=state, timeout=timeout)
    except PWTimeoutError:
        raise AssertionError(f"Expected {state.upper()}: {value.text!r} (waited {timeout}ms)") from None
    except PWError as e:
        raise EngineError(f"assert {state} {value.text!r}: {e}") from e

def action_assert_visible(page, *, value, **_):
    _assert_state(page, value, "visible")

def action_assert_hidden(page, *, value, **_):
    _assert_state(page, value, "hidden")

def action_assert_url(page, *, value, **_):
    """
    Current URL must contain value. Plain substring check, case-sensitive,
    evaluated once without waiting.
    """
    current = page.url
    if str(value) not in current:
        raise AssertionError(f'URL "{current}" does not contain "{value}"')

def _button_enabled(page, name: str, timeout_ms: int) -> bool:
    with locating(f"button {name!r}"):
        return page.get_by_role("button", name=name).first.is_enabled(timeout=timeout_ms)

def action_assert_enabled(page, *, value, timeout_ms=7000, **_):
    if not _button_enabled(page, str(value), timeout_ms):
        raise AssertionError(f"Expected button {value!r} to be ENABLED, but it is disabled")

def action_assert_disabled(page, *, value, timeout_ms=7000, **_):
    if _button_enabled(page, str(value), timeout_ms):
        raise AssertionError(f"Expected button {value!r} to be DISABLED, but it is enabled")
