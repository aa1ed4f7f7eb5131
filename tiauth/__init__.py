from tiauth._version import __version__
from tiauth.config import AuthConfig, load_config
from tiauth.errors import (
    AccountNotActiveError,
    AuthError,
    BadCredentialsError,
    ConnectFailureError,
    CorruptSessionFileError,
    ErrorCode,
    InternalServerError,
    LoginServerError,
    LogoutServerError,
    PathNotWritableError,
)
from tiauth.machine_id import MachineIdentity, derive_mid, list_interfaces
from tiauth.manager import AuthSessionManager
from tiauth.models import LogoutResult, SessionRecord, StatusSnapshot
from tiauth.session_store import SessionStore
from tiauth.transport import HttpTransport, TransportResponse

__all__ = [
    "__version__",
    "AccountNotActiveError",
    "AuthConfig",
    "AuthError",
    "AuthSessionManager",
    "BadCredentialsError",
    "ConnectFailureError",
    "CorruptSessionFileError",
    "derive_mid",
    "ErrorCode",
    "HttpTransport",
    "InternalServerError",
    "list_interfaces",
    "load_config",
    "LoginServerError",
    "LogoutResult",
    "LogoutServerError",
    "MachineIdentity",
    "PathNotWritableError",
    "SessionRecord",
    "SessionStore",
    "StatusSnapshot",
    "TransportResponse",
]
