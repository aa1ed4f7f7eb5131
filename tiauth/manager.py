"""Authentication manager — orchestrates login, logout and status."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable

from tiauth.config import ACCOUNT_URL, AuthConfig
from tiauth.errors import (
    AccountNotActiveError,
    BadCredentialsError,
    ConnectFailureError,
    InternalServerError,
    LoginServerError,
    LogoutServerError,
)
from tiauth.machine_id import Interfaces, MachineIdentity, list_interfaces
from tiauth.models import LogoutResult, SessionRecord, StatusSnapshot
from tiauth.session_store import SessionStore
from tiauth.transport import HttpTransport, TransportResponse

_logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "PHPSESSID"
# Codes the login service uses for an unknown user or a wrong password.
BAD_CREDENTIAL_CODES = (4, 5)


class AuthSessionManager:
    """Owns the session store, the machine identity and their caches.

    Create one per process and home directory. ``login`` and ``logout``
    share an asyncio lock so they never interleave on the same instance.
    """

    def __init__(
        self,
        config: AuthConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        interfaces: Callable[[], Interfaces] = list_interfaces,
    ) -> None:
        self.config = config or AuthConfig()
        self.store = SessionStore(self.config.home_dir)
        self.identity = MachineIdentity(self.config.home_dir, interfaces)
        self.transport = transport or HttpTransport(timeout=self.config.timeout)
        self._lock = asyncio.Lock()

    async def login(
        self,
        username: str,
        password: str,
        mid: str | None = None,
        login_url: str | None = None,
        proxy: str | None = None,
    ) -> SessionRecord:
        """Log in and persist the session.

        Passing ``mid`` means the caller manages identity itself: neither the
        session file nor the MID file is written in that case.

        Raises:
            PathNotWritableError: the session file cannot be written.
            ConnectFailureError: the server could not be reached.
            AccountNotActiveError: the account has not been activated.
            BadCredentialsError: wrong username or password.
            InternalServerError: no session cookie came back.
            LoginServerError: the server response was not understood.
        """
        suppress_write = bool(mid)
        async with self._lock:
            if not suppress_write:
                self.store.assert_writable()
            self.store.invalidate_cache()

            mid = self.identity.resolve(mid)
            try:
                resp = await self.transport.post(
                    login_url or self.config.login_url,
                    {"un": username, "pw": password, "mid": mid},
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    proxy=proxy or self.config.proxy,
                )
                cookie, data = self._interpret_login(resp)
                if suppress_write:
                    record = SessionRecord(logged_in=True, cookie=cookie, data=data)
                else:
                    record = self.store.write_logged_in(cookie, data)
            except Exception as exc:
                _logger.info("Login failed: %s", exc)
                if not suppress_write:
                    self.store.write_logged_out()
                raise

            _logger.info("Logged in as %s", data.get("email") or username)
            return record

    async def logout(
        self,
        logout_url: str | None = None,
        proxy: str | None = None,
    ) -> LogoutResult:
        """End the session on the server and locally.

        The local record is reset to logged out whatever the server says.
        When the server exchange fails the raised error carries that reset
        record as ``result``.
        """
        async with self._lock:
            self.store.assert_writable()
            self.store.invalidate_cache()

            if not self.store.exists():
                record = self.store.write_logged_out()
                return LogoutResult.from_record(
                    record, success=True, already_logged_out=True
                )

            session = self.store.read()
            if not session.logged_in:
                return LogoutResult.from_record(
                    session, success=True, already_logged_out=True
                )

            failure: ConnectFailureError | None = None
            try:
                resp = await self.transport.get(
                    logout_url or self.config.logout_url,
                    headers={"Cookie": session.cookie},
                    proxy=proxy or self.config.proxy,
                )
            except ConnectFailureError as exc:
                failure = exc

            reset = self.store.write_logged_out()
            _logger.info("Local session cleared")
            failed = LogoutResult.from_record(
                reset, success=False, already_logged_out=False
            )
            if failure is not None:
                failure.result = failed
                raise failure

            try:
                res = json.loads(resp.text)
            except ValueError as exc:
                raise LogoutServerError(
                    f"Invalid server response: {exc}", result=failed
                ) from exc

            if isinstance(res, dict) and res.get("success"):
                return LogoutResult.from_record(
                    reset, success=True, already_logged_out=False
                )
            reason = res.get("reason") if isinstance(res, dict) else res
            raise LogoutServerError(
                f"Error logging out from server: {reason}", result=failed
            )

    def status(self) -> StatusSnapshot:
        return self.store.status()

    def resolve_machine_id(self, mid: str | None = None) -> str:
        return self.identity.resolve(mid)

    def reset_machine_id_cache(self) -> None:
        self.identity.reset()

    @staticmethod
    def _interpret_login(resp: TransportResponse) -> tuple[str, dict[str, Any]]:
        """Return (cookie, data) for a successful login or raise AuthError."""
        try:
            res = json.loads(resp.text)
        except ValueError as exc:
            raise LoginServerError("Invalid server response", cause=exc) from exc
        if not isinstance(res, dict):
            raise LoginServerError("Invalid server response")

        if res.get("success"):
            if "activated" in res and not res["activated"]:
                raise AccountNotActiveError(
                    "Account not activated. Please activate your account "
                    "before continuing."
                )
            cookies = resp.headers.get_list("set-cookie")
            if len(cookies) != 1 or not cookies[0].startswith(SESSION_COOKIE_NAME):
                raise InternalServerError("Server did not return a session cookie")
            data = {k: v for k, v in res.items() if k != "success"}
            return cookies[0], data

        if res.get("code") in BAD_CREDENTIAL_CODES:
            raise BadCredentialsError(
                "Invalid username or password.",
                hint=f"If you have forgotten your password, please visit {ACCOUNT_URL}.",
            )
        raise LoginServerError("Invalid server response")
