"""Authentication error types."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tiauth.models import LogoutResult


class ErrorCode(str, Enum):
    """Stable codes for programmatic handling of auth failures."""

    PATH_NOT_WRITABLE = "AUTH_ERR_PATH_NOT_WRITABLE"
    CONNECT_FAILURE = "AUTH_ERR_CONNECT_FAILURE"
    ACCT_NOT_ACTIVE = "AUTH_ERR_ACCT_NOT_ACTIVE"
    INTERNAL_SVR_ERR = "AUTH_ERR_INTERNAL_SVR_ERR"
    BAD_UN_OR_PW = "AUTH_ERR_BAD_UN_OR_PW"
    LOGIN_SERVER_ERR = "AUTH_ERR_LOGIN_SERVER_ERR"
    LOGOUT_SERVER_ERR = "AUTH_ERR_LOGOUT_SERVER_ERR"
    CORRUPT_SESSION_FILE = "AUTH_ERR_CORRUPT_SESSION_FILE"


class AuthError(Exception):
    """Base class for every failure surfaced by login, logout and status.

    ``result`` is set on logout failures, where the local session has
    already been reset even though the server exchange went wrong.
    """

    code: ErrorCode = ErrorCode.INTERNAL_SVR_ERR

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        result: LogoutResult | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.result = result
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": str(self)}


class PathNotWritableError(AuthError):
    code = ErrorCode.PATH_NOT_WRITABLE


class ConnectFailureError(AuthError):
    code = ErrorCode.CONNECT_FAILURE


class AccountNotActiveError(AuthError):
    code = ErrorCode.ACCT_NOT_ACTIVE


class InternalServerError(AuthError):
    code = ErrorCode.INTERNAL_SVR_ERR


class BadCredentialsError(AuthError):
    code = ErrorCode.BAD_UN_OR_PW


class LoginServerError(AuthError):
    code = ErrorCode.LOGIN_SERVER_ERR


class LogoutServerError(AuthError):
    code = ErrorCode.LOGOUT_SERVER_ERR


class CorruptSessionFileError(AuthError):
    """Attached to a repaired SessionRecord as an advisory; never raised.

    ``previous_logged_in`` keeps whatever ``loggedIn`` value the bad file
    still carried, for diagnostics.
    """

    code = ErrorCode.CORRUPT_SESSION_FILE

    def __init__(
        self,
        message: str,
        *,
        previous_logged_in: Any = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.previous_logged_in = previous_logged_in
