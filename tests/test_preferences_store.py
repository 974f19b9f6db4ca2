"""
Preferences Store Tests - Unit Tests for User Preferences

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- travelkit.adapters.persistence.preferences_store (PreferencesStore to test)
"""
from travelkit.adapters.persistence.preferences_store import PreferencesStore


class TestPreferencesStore:
    def test_defaults(self, tmp_path):
        prefs = PreferencesStore(tmp_path / "prefs.json", default_origin="United States")
        assert prefs.origin == "United States"
        assert prefs.is_first_launch is True

    def test_origin_persists(self, tmp_path):
        path = tmp_path / "prefs.json"
        PreferencesStore(path, default_origin="United States").origin = "Poland"

        assert PreferencesStore(path, default_origin="United States").origin == "Poland"

    def test_first_launch_flag_is_live(self, tmp_path):
        path = tmp_path / "prefs.json"
        prefs = PreferencesStore(path, default_origin="United States")
        seen = []
        prefs.is_first_launch_live().observe(seen.append)

        prefs.is_first_launch = False
        prefs.is_first_launch = False

        assert seen == [True, False]
        assert PreferencesStore(path, default_origin="United States").is_first_launch is False

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("not json", encoding="utf-8")

        prefs = PreferencesStore(path, default_origin="Japan")

        assert prefs.origin == "Japan"
        assert prefs.is_first_launch is True
