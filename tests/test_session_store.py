"""Tests for tiauth.session_store.SessionStore."""

import json

import pytest

from tiauth.errors import CorruptSessionFileError, ErrorCode, PathNotWritableError
from tiauth.session_store import SessionStore


@pytest.fixture()
def store(home_dir):
    return SessionStore(home_dir)


def _on_disk(store):
    return json.loads(store.session_file.read_text())


class TestRead:
    def test_missing_file_is_created_logged_out(self, store):
        record = store.read()
        assert record.logged_in is False
        assert record.error is None
        assert _on_disk(store) == {"loggedIn": False}

    def test_round_trip_logged_in(self, store):
        store.write_logged_in("PHPSESSID=x", {"uid": "1", "email": "a@b.com"})
        record = store.read()
        assert record.logged_in is True
        assert record.cookie == "PHPSESSID=x"
        assert record.data == {"uid": "1", "email": "a@b.com"}

    def test_invalid_json_is_reset(self, store):
        store.home_dir.mkdir(parents=True)
        store.session_file.write_text("{not json")
        record = store.read()
        assert record.logged_in is False
        assert isinstance(record.error, CorruptSessionFileError)
        assert record.error.code is ErrorCode.CORRUPT_SESSION_FILE
        assert _on_disk(store) == {"loggedIn": False}

    def test_non_object_json_is_reset(self, store):
        store.home_dir.mkdir(parents=True)
        store.session_file.write_text("[1, 2, 3]")
        record = store.read()
        assert record.logged_in is False
        assert record.error is not None
        assert _on_disk(store) == {"loggedIn": False}

    def test_partial_logged_in_record_keeps_flag_in_advisory(self, store):
        store.home_dir.mkdir(parents=True)
        store.session_file.write_text(json.dumps({"loggedIn": True}))
        record = store.read()
        assert record.logged_in is False
        assert record.error.previous_logged_in is True
        assert _on_disk(store) == {"loggedIn": False}


class TestWrite:
    def test_write_logged_in_creates_directory(self, store):
        store.write_logged_in("PHPSESSID=x", {"uid": "1"})
        assert _on_disk(store) == {
            "loggedIn": True,
            "cookie": "PHPSESSID=x",
            "data": {"uid": "1"},
        }

    def test_write_logged_out_drops_cookie_and_data(self, store):
        store.write_logged_in("PHPSESSID=x", {"uid": "1"})
        record = store.write_logged_out()
        assert record.cookie is None
        assert record.data is None
        assert _on_disk(store) == {"loggedIn": False}

    def test_no_temp_files_left_behind(self, store):
        store.write_logged_in("PHPSESSID=x", {})
        store.write_logged_out()
        assert [p.name for p in store.home_dir.iterdir()] == ["auth_session.json"]


class TestStatusCache:
    def test_status_is_memoized(self, store):
        store.write_logged_in("PHPSESSID=x", {"uid": "1", "guid": "g", "email": "e"})
        first = store.status()
        store.session_file.write_text(json.dumps({"loggedIn": False}))
        assert store.status() is first
        assert first.logged_in is True
        assert (first.uid, first.guid, first.email) == ("1", "g", "e")

    def test_invalidate_cache_rereads(self, store):
        store.write_logged_in("PHPSESSID=x", {"uid": "1"})
        assert store.status().logged_in is True
        store.session_file.write_text(json.dumps({"loggedIn": False}))
        store.invalidate_cache()
        assert store.status().logged_in is False

    def test_writes_drop_cached_status(self, store):
        assert store.status().logged_in is False
        store.write_logged_in("PHPSESSID=x", {"uid": "1"})
        assert store.status().logged_in is True
        store.write_logged_out()
        assert store.status().logged_in is False


class TestAssertWritable:
    def test_missing_directory_under_writable_parent(self, store):
        store.assert_writable()

    def test_unwritable_directory(self, store, monkeypatch):
        monkeypatch.setattr("tiauth.session_store.is_dir_writable", lambda p: False)
        with pytest.raises(PathNotWritableError, match="not writable"):
            store.assert_writable()

    def test_unwritable_session_file(self, store, monkeypatch):
        store.write_logged_out()
        monkeypatch.setattr("tiauth.session_store.is_file_writable", lambda p: False)
        with pytest.raises(PathNotWritableError) as exc_info:
            store.assert_writable()
        assert exc_info.value.code is ErrorCode.PATH_NOT_WRITABLE
        assert exc_info.value.hint
