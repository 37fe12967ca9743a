"""
Unit tests for the per-owner preferences store.
"""

import pytest

from conftest import USER_A, USER_B
from eido.core.exceptions import UpstreamError
from eido.features.preferences.schemas import DEFAULT_WIDGETS, MAX_RECENT_FILES
from eido.features.preferences.service import PreferencesStore


class TestLoad:
    def test_first_use_returns_defaults_without_writing(self, fake_db):
        prefs = PreferencesStore(fake_db).load(USER_A)
        assert prefs == {"enabled_widgets": DEFAULT_WIDGETS, "recent_files": []}
        assert fake_db.rows("user_preferences") == []

    def test_defaults_are_not_shared_between_calls(self, fake_db):
        store = PreferencesStore(fake_db)
        store.load(USER_A)["recent_files"].append({"file_id": "x"})
        assert store.load(USER_A)["recent_files"] == []

    def test_isolated_per_owner(self, fake_db):
        store = PreferencesStore(fake_db)
        store.save(USER_A, {"enabled_widgets": ["practice"]})
        assert store.load(USER_B)["enabled_widgets"] == DEFAULT_WIDGETS

    def test_backing_store_error(self, fake_db):
        fake_db.fail_on.add(("user_preferences", "select"))
        with pytest.raises(UpstreamError):
            PreferencesStore(fake_db).load(USER_A)


class TestSave:
    def test_merges_and_persists(self, fake_db):
        store = PreferencesStore(fake_db)
        store.save(USER_A, {"chat_widget_position": "left"})
        prefs = store.save(USER_A, {"enabled_widgets": ["quizzes"]})

        assert prefs["chat_widget_position"] == "left"
        assert prefs["enabled_widgets"] == ["quizzes"]
        assert len(fake_db.rows("user_preferences")) == 1

    def test_unknown_widgets_dropped(self, fake_db):
        prefs = PreferencesStore(fake_db).save(USER_A, {"enabled_widgets": ["quizzes", "minesweeper"]})
        assert prefs["enabled_widgets"] == ["quizzes"]

    def test_no_known_widgets_falls_back_to_defaults(self, fake_db):
        prefs = PreferencesStore(fake_db).save(USER_A, {"enabled_widgets": ["minesweeper"]})
        assert prefs["enabled_widgets"] == DEFAULT_WIDGETS

    def test_recent_files_capped(self, fake_db):
        files = [{"file_id": str(i), "name": f"{i}.pdf"} for i in range(15)]
        prefs = PreferencesStore(fake_db).save(USER_A, {"recent_files": files})
        assert len(prefs["recent_files"]) == MAX_RECENT_FILES
        assert prefs["recent_files"][0]["file_id"] == "0"


class TestRecentFiles:
    def test_reopened_file_moves_to_front(self, fake_db):
        store = PreferencesStore(fake_db)
        store.add_recent_file(USER_A, {"file_id": "a", "name": "a.pdf"})
        store.add_recent_file(USER_A, {"file_id": "b", "name": "b.pdf"})
        prefs = store.add_recent_file(USER_A, {"file_id": "a", "name": "a.pdf"})
        assert [f["file_id"] for f in prefs["recent_files"]] == ["a", "b"]
