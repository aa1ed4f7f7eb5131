"""Session record persistence."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tiauth.errors import CorruptSessionFileError, PathNotWritableError
from tiauth.fs import is_dir_writable, is_file_writable, read_json, write_json_atomic
from tiauth.models import SessionRecord, StatusSnapshot

_logger = logging.getLogger(__name__)

SESSION_FILENAME = "auth_session.json"


class SessionStore:
    """Read and write ``auth_session.json`` in one home directory.

    Reads are self-healing: a missing or corrupt file is replaced with a
    logged-out record. The store also memoizes the status snapshot derived
    from the record; every write drops it.
    """

    def __init__(self, home_dir: str | Path) -> None:
        self.home_dir = Path(home_dir)
        self.session_file = self.home_dir / SESSION_FILENAME
        self._cached_status: StatusSnapshot | None = None

    def exists(self) -> bool:
        return self.session_file.exists()

    def assert_writable(self) -> None:
        """Raise PathNotWritableError unless the session file can be written."""
        if self.session_file.exists():
            if not is_file_writable(self.session_file):
                raise PathNotWritableError(
                    f'Session file "{self.session_file}" is not writable',
                    hint="Please ensure the CLI has access to modify this file.",
                )
        elif not is_dir_writable(self.home_dir):
            raise PathNotWritableError(
                f'Directory "{self.home_dir}" is not writable',
                hint="Please ensure the CLI has access to this directory.",
            )

    def read(self) -> SessionRecord:
        """Load the record, repairing the file if it is missing or corrupt."""
        if not self.session_file.exists():
            _logger.debug("No session file at %s, creating one", self.session_file)
            return self.write_logged_out()

        try:
            raw = read_json(self.session_file)
        except (OSError, ValueError) as exc:
            return self._repair(exc, previous=None)

        if not isinstance(raw, dict):
            return self._repair(ValueError("session file is not a JSON object"), previous=None)

        try:
            return SessionRecord.model_validate(raw)
        except ValidationError as exc:
            return self._repair(exc, previous=raw.get("loggedIn"))

    def write_logged_in(self, cookie: str, data: dict[str, Any]) -> SessionRecord:
        record = SessionRecord(logged_in=True, cookie=cookie, data=data)
        write_json_atomic(self.session_file, record.to_file())
        self.invalidate_cache()
        _logger.debug("Wrote logged-in session to %s", self.session_file)
        return record

    def write_logged_out(self) -> SessionRecord:
        record = SessionRecord(logged_in=False)
        write_json_atomic(self.session_file, record.to_file())
        self.invalidate_cache()
        _logger.debug("Wrote logged-out session to %s", self.session_file)
        return record

    def status(self) -> StatusSnapshot:
        """Return the memoized status, reading the record on first use."""
        if self._cached_status is None:
            self._cached_status = StatusSnapshot.from_record(self.read())
        return self._cached_status

    def invalidate_cache(self) -> None:
        self._cached_status = None

    def _repair(self, exc: Exception, previous: Any) -> SessionRecord:
        _logger.warning(
            "Session file %s is invalid (%s); resetting to logged out",
            self.session_file, exc,
        )
        record = self.write_logged_out()
        record.error = CorruptSessionFileError(
            f'Session file "{self.session_file}" was invalid and has been reset',
            previous_logged_in=previous,
            cause=exc,
        )
        return record
