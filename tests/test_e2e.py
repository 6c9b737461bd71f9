from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest
from playwright.sync_api import Error as PWError, sync_playwright

from specrunner.config import RunOptions
from specrunner.runner import run_specs

LOGIN_PAGE = b"""<!doctype html>
<html><body>
  <form id="login">
    <label for="email">Email</label>
    <input id="email" type="email">
    <button type="submit">Sign In</button>
  </form>
  <p id="welcome" hidden>Welcome</p>
  <script>
    document.getElementById("login").addEventListener("submit", function (ev) {
      ev.preventDefault();
      if (document.getElementById("email").value.trim() !== "") {
        document.getElementById("welcome").hidden = false;
      }
    });
  </script>
</body></html>"""


def _start_fixture_server() -> tuple[HTTPServer, threading.Thread]:
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802 - HTTP handler requirement
            if self.path.split("?")[0] != "/login":
                self.send_response(404)
                self.end_headers()
                return
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.end_headers()
            self.wfile.write(LOGIN_PAGE)

        def log_message(self, format: str, *args: object) -> None:  # pragma: no cover - silence logs
            return

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, thread


@pytest.fixture(scope="module")
def chromium_available():
    try:
        with sync_playwright() as p:
            p.chromium.launch(headless=True).close()
    except PWError as e:
        pytest.skip(f"Playwright chromium not available: {e}")


@pytest.fixture()
def base_url():
    server, thread = _start_fixture_server()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    thread.join(timeout=2)


def _spec(email: str) -> dict:
    return {
        "feature": "Login",
        "status": "active",
        "scenarios": [{
            "name": "Sign in shows welcome",
            "steps": [
                {"goto": "/login"},
                {"fill_field": {"label": "Email", "value": email}},
                {"click_button": "Sign In"},
                {"assert_visible": "Welcome"},
                {"assert_url": "/login"},
            ],
        }],
    }


@pytest.mark.browser
def test_login_scenario_passes_end_to_end(chromium_available, base_url, write_spec):
    path = write_spec(_spec("a@b.com"), "login.yaml")
    summary = run_specs([path], RunOptions(headless=True, base_url=base_url, timeout_ms=5000))

    assert summary.active.passed == 1
    assert summary.active.failed == 0
    assert summary.exit_code == 0


@pytest.mark.browser
def test_login_without_email_fails_with_screenshot(chromium_available, base_url, write_spec, tmp_path):
    spec = _spec("")
    spec["scenarios"][0]["steps"][3] = {"assert_visible": {"text": "Welcome", "timeout": 500}}
    path = write_spec(spec, "login.yaml")

    summary = run_specs([path], RunOptions(headless=True, base_url=base_url, timeout_ms=5000))

    assert summary.active.failed == 1
    assert summary.exit_code == 1
    assert (tmp_path / "screenshots" / "login-sign-in-shows-welcome.png").exists()
