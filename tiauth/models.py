"""Data models for session state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SessionRecord(BaseModel):
    """The session as persisted in ``auth_session.json``.

    A record is either fully logged out (no cookie, no data) or fully
    logged in (non-empty cookie, data present).
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    logged_in: bool = Field(default=False, alias="loggedIn")
    cookie: str | None = None
    data: dict[str, Any] | None = None

    # Set only when a corrupt file was found and repaired; never persisted.
    error: Exception | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _check_consistent(self) -> SessionRecord:
        if self.logged_in:
            if not self.cookie or self.data is None:
                raise ValueError("logged-in session requires a cookie and data")
        elif self.cookie is not None or self.data is not None:
            raise ValueError("logged-out session must not carry a cookie or data")
        return self

    def to_file(self) -> dict[str, Any]:
        """Serialise to the on-disk JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LogoutResult(SessionRecord):
    """A logged-out record plus the outcome of the logout call."""

    success: bool = False
    already_logged_out: bool = Field(default=False, alias="alreadyLoggedOut")

    @classmethod
    def from_record(
        cls, record: SessionRecord, *, success: bool, already_logged_out: bool
    ) -> LogoutResult:
        return cls(
            logged_in=record.logged_in,
            cookie=record.cookie,
            data=record.data,
            error=record.error,
            success=success,
            already_logged_out=already_logged_out,
        )


class StatusSnapshot(BaseModel):
    """What ``tiauth status`` reports about the current session."""

    model_config = ConfigDict(populate_by_name=True)

    logged_in: bool = Field(default=False, alias="loggedIn")
    uid: Any = None
    guid: Any = None
    email: Any = None
    cookie: str | None = None

    @classmethod
    def from_record(cls, record: SessionRecord) -> StatusSnapshot:
        data = record.data or {}
        return cls(
            logged_in=record.logged_in,
            uid=data.get("uid"),
            guid=data.get("guid"),
            email=data.get("email"),
            cookie=record.cookie,
        )
