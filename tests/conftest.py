"""Shared fixtures for tiauth tests."""

from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest

from tiauth.config import AuthConfig
from tiauth.manager import AuthSessionManager
from tiauth.transport import HttpTransport

LOGIN_URL = "https://auth.example.com/sso-login"
LOGOUT_URL = "https://auth.example.com/sso-logout"
SESSION_COOKIE = "PHPSESSID=abc123; path=/; HttpOnly"

WIRED_INTERFACES = {
    "lo": {"mac_address": "00:00:00:00:00:00"},
    "wlan0": {"mac_address": "aa:bb:cc:dd:ee:ff"},
    "eth0": {"mac_address": "00:1a:2b:3c:4d:5e"},
}


class FakeAuthServer:
    """Records requests and answers with canned login/logout responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.login_json: object = {"success": True, "activated": True, "uid": "1"}
        self.login_cookies: list[str] = [SESSION_COOKIE]
        self.login_body: str | None = None
        self.logout_json: object = {"success": True}
        self.logout_body: str | None = None
        self.fail_with: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if request.method == "POST":
            headers = [("set-cookie", c) for c in self.login_cookies]
            if self.login_body is not None:
                return httpx.Response(200, text=self.login_body, headers=headers)
            return httpx.Response(200, json=self.login_json, headers=headers)
        if self.logout_body is not None:
            return httpx.Response(200, text=self.logout_body)
        return httpx.Response(200, json=self.logout_json)

    def form(self, index: int = 0) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode())
        return {k: v[0] for k, v in parsed.items()}


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """A not-yet-created home directory for session files."""
    return tmp_path / ".titanium"


@pytest.fixture
def server() -> FakeAuthServer:
    return FakeAuthServer()


@pytest.fixture
def config(home_dir: Path) -> AuthConfig:
    return AuthConfig(home_dir=home_dir, login_url=LOGIN_URL, logout_url=LOGOUT_URL)


@pytest.fixture
def manager(config: AuthConfig, server: FakeAuthServer) -> AuthSessionManager:
    """Manager wired to the fake server and a fixed set of interfaces."""
    transport = HttpTransport(transport=httpx.MockTransport(server))
    return AuthSessionManager(
        config, transport=transport, interfaces=lambda: WIRED_INTERFACES
    )
