from specrunner.actions.locating import engine, locating, visible_text
from specrunner.config import resolve_url
from specrunner.schema import SelectorTarget

# ===============================================================
#  ACTIONS: Navigation & Input
# ===============================================================

def action_goto(page, *, value, base_url=None, timeout_ms=7000, **_):
    url = resolve_url(base_url, value)
    with engine(f"goto {url}"):
        page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)


def action_press(page, *, value, **_):
    with engine(f"press {value!r}"):
        page.keyboard.press(str(value))


def action_wait(page, *, value, **_):
    """Unconditional pause; value is in milliseconds."""
    with engine(f"wait {value}ms"):
        page.wait_for_timeout(max(0.0, float(value)))


# ===============================================================
#  CLICK / HOVER
# ===============================================================

def action_click(page, *, value, timeout_ms=7000, **_):
    """
    - string: the element whose visible text matches
    - {selector: ...}: explicit CSS/Playwright selector
    """
    if isinstance(value, SelectorTarget):
        with locating(f"click selector {value.selector!r}"):
            page.locator(value.selector).first.click(timeout=timeout_ms)
        return
    with locating(f"click text {value!r}"):
        visible_text(page, str(value)).click(timeout=timeout_ms)


def _click_role(page, role: str, name: str, timeout_ms: int):
    with locating(f"click {role} {name!r}"):
        page.get_by_role(role, name=name).first.click(timeout=timeout_ms)


def action_click_button(page, *, value, timeout_ms=7000, **_):
    _click_role(page, "button", str(value), timeout_ms)


def action_click_link(page, *, value, timeout_ms=7000, **_):
    _click_role(page, "link", str(value), timeout_ms)


def action_hover(page, *, value, timeout_ms=7000, **_):
    with locating(f"hover text {value!r}"):
        visible_text(page, str(value)).hover(timeout=timeout_ms)
