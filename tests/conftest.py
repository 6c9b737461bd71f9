from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
import yaml
from playwright.sync_api import Error as PWError, TimeoutError as PWTimeoutError

from specrunner.config import RunOptions


@dataclass
class FakeElement:
    visible: bool = True
    enabled: bool = True
    checked: bool = False
    value: str = ""
    options: List[str] = field(default_factory=list)
    on_click: Optional[Callable[[], None]] = None


class FakeLocator:
    """Covers the slice of playwright's Locator the actions use; matches are kept in DOM order."""

    def __init__(self, page: "FakePage", key: tuple, visible_only: bool = False):
        self.page = page
        self.key = key
        self.visible_only = visible_only

    @property
    def first(self) -> "FakeLocator":
        return self

    def locator(self, selector: str) -> "FakeLocator":
        assert selector == "visible=true", selector
        return FakeLocator(self.page, self.key, visible_only=True)

    def _first_match(self) -> Optional[FakeElement]:
        matches = self.page.elements.get(self.key, [])
        if self.visible_only:
            matches = [el for el in matches if el.visible]
        return matches[0] if matches else None

    def _element(self, timeout) -> FakeElement:
        el = self._first_match()
        if el is None or not el.visible:
            raise PWTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.key}")
        return el

    def click(self, timeout=None):
        el = self._element(timeout)
        self.page.calls.append(("click",) + self.key)
        if el.on_click:
            el.on_click()

    def hover(self, timeout=None):
        self._element(timeout)
        self.page.calls.append(("hover",) + self.key)

    def fill(self, value, timeout=None):
        self._element(timeout).value = value
        self.page.calls.append(("fill",) + self.key + (value,))

    def check(self, timeout=None):
        self._element(timeout).checked = True

    def uncheck(self, timeout=None):
        self._element(timeout).checked = False

    def select_option(self, option, timeout=None):
        el = self._element(timeout)
        if option not in el.options:
            raise PWTimeoutError(f"Timeout {timeout}ms exceeded: option {option!r} not found")
        el.value = option

    def is_enabled(self, timeout=None) -> bool:
        return self._element(timeout).enabled

    def wait_for(self, state="visible", timeout=None):
        el = self._first_match()
        shown = el is not None and el.visible
        if (state == "visible" and not shown) or (state == "hidden" and shown):
            raise PWTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.key} to be {state}")


class FakeKeyboard:
    KEYS = {"Enter", "Tab", "Escape", "ArrowDown", "ArrowUp", "Backspace"}

    def __init__(self, page: "FakePage"):
        self.page = page

    def press(self, key):
        if key not in self.KEYS:
            raise PWError(f'Unknown key: "{key}"')
        self.page.calls.append(("press", key))


class FakePage:
    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.elements: Dict[tuple, List[FakeElement]] = {}
        self.calls: List[tuple] = []
        self.bad_urls: set = set()
        self.screenshots: List[Path] = []
        self.keyboard = FakeKeyboard(self)

    def add(self, how: str, target: str, **kw) -> FakeElement:
        el = FakeElement(**kw)
        self.elements.setdefault((how, target), []).append(el)
        return el

    def goto(self, url, wait_until=None, timeout=None):
        if url in self.bad_urls:
            raise PWError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.url = url
        self.calls.append(("goto", url))

    def wait_for_timeout(self, timeout):
        time.sleep(timeout / 1000.0)
        self.calls.append(("wait_for_timeout", timeout))

    def get_by_text(self, text):
        return FakeLocator(self, ("text", text))

    def get_by_label(self, label):
        return FakeLocator(self, ("label", label))

    def get_by_role(self, role, name=None):
        return FakeLocator(self, (role, name))

    def locator(self, selector):
        return FakeLocator(self, ("css", selector))

    def screenshot(self, path, full_page=False):
        p = Path(path)
        p.write_bytes(b"\x89PNG fake")
        self.screenshots.append(p)


class SessionRecorder:
    """Session factory handing out one FakePage; counts opens and closes."""

    def __init__(self, page: Optional[FakePage] = None, launch_error: Optional[Exception] = None):
        self.page = page or FakePage()
        self.launch_error = launch_error
        self.opened = 0
        self.closed = 0

    @contextmanager
    def __call__(self, options):
        if self.launch_error is not None:
            raise self.launch_error
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


@pytest.fixture()
def page():
    return FakePage()


@pytest.fixture()
def options():
    return RunOptions(headless=True, timeout_ms=1000)


@pytest.fixture()
def write_spec(tmp_path):
    def _write(data, name: str = "spec.yaml") -> Path:
        path = tmp_path / name
        text = data if isinstance(data, str) else yaml.safe_dump(data, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
