"""Smoke test: public names importable from the top-level package."""


def test_importable_from_toplevel():
    from tiauth import (
        AuthConfig,
        AuthError,
        AuthSessionManager,
        ErrorCode,
        MachineIdentity,
        SessionStore,
        StatusSnapshot,
    )

    assert AuthConfig is not None
    assert AuthError is not None
    assert AuthSessionManager is not None
    assert ErrorCode is not None
    assert MachineIdentity is not None
    assert SessionStore is not None
    assert StatusSnapshot is not None


def test_error_codes_are_stable():
    from tiauth import ErrorCode

    assert {code.value for code in ErrorCode} == {
        "AUTH_ERR_PATH_NOT_WRITABLE",
        "AUTH_ERR_CONNECT_FAILURE",
        "AUTH_ERR_ACCT_NOT_ACTIVE",
        "AUTH_ERR_INTERNAL_SVR_ERR",
        "AUTH_ERR_BAD_UN_OR_PW",
        "AUTH_ERR_LOGIN_SERVER_ERR",
        "AUTH_ERR_LOGOUT_SERVER_ERR",
        "AUTH_ERR_CORRUPT_SESSION_FILE",
    }
