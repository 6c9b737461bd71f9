import re
from pathlib import Path

from specrunner.actions.locating import engine, locating, visible_text
from specrunner.exceptions import EngineError

WAIT_FOR_TIMEOUT_MS = 10000

# ===== form controls =====

def action_fill(page, *, value, timeout_ms=7000, **_):
    """value: {selector, value}"""
    with locating(f"fill selector {value.selector!r}"):
        page.locator(value.selector).first.fill(value.value, timeout=timeout_ms)


def action_fill_field(page, *, value, timeout_ms=7000, **_):
    """value: {label, value}; the input is found through its <label> / aria-label."""
    with locating(f"fill field labelled {value.label!r}"):
        page.get_by_label(value.label).first.fill(value.value, timeout=timeout_ms)


def action_select(page, *, value, timeout_ms=7000, **_):
    """value: {label, option}; picks the <option> by its value attribute."""
    with locating(f"select {value.option!r} in {value.label!r}"):
        page.get_by_label(value.label).first.select_option(value.option, timeout=timeout_ms)


def action_check(page, *, value, timeout_ms=7000, **_):
    with locating(f"check {value!r}"):
        page.get_by_label(str(value)).first.check(timeout=timeout_ms)


def action_uncheck(page, *, value, timeout_ms=7000, **_):
    with locating(f"uncheck {value!r}"):
        page.get_by_label(str(value)).first.uncheck(timeout=timeout_ms)


# ===== waiting =====

def action_wait_for(page, *, value, **_):
    """Blocks until the text is visible; value.timeout overrides the 10s default."""
    timeout = value.timeout or WAIT_FOR_TIMEOUT_MS
    with locating(f"wait for {value.text!r} ({timeout}ms)"):
        visible_text(page, value.text).wait_for(state="visible", timeout=timeout)


# ===== artifacts =====

def screenshot_filename(name: str) -> str:
    stem = re.sub(r"\s+", "-", str(name).strip()).lower()
    stem = re.sub(r"[^a-z0-9_.-]+", "_", stem).strip("_") or "screenshot"
    return stem if stem.endswith(".png") else f"{stem}.png"


def action_screenshot(page, *, value, screenshots_dir: Path, **_):
    try:
        Path(screenshots_dir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EngineError(f"Cannot create screenshots directory {screenshots_dir}: {e}") from e
    path = Path(screenshots_dir) / screenshot_filename(value)
    with engine(f"screenshot {path}"):
        page.screenshot(path=str(path), full_page=True)
    print(f"     📸 {path}")
