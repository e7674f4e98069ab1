"""pyfakefs-based shortcut scanner tests.

Uses pyfakefs to simulate shortcut directories without touching disk.
Validates discovery order, hidden-entry skipping, ignore paths, and that
missing roots are skipped rather than aborting the scan.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quicklaunch.config import SearchConfig
from quicklaunch.models import Candidate
from quicklaunch.scanner import ShortcutScanner


def _scanner(shortcut_paths: list[str], ignore_paths: list[str] | None = None) -> ShortcutScanner:
    return ShortcutScanner(
        SearchConfig(shortcut_paths=shortcut_paths, ignore_paths=ignore_paths or [], aliases={})
    )


@pytest.fixture
def menu(fs):
    """Start-menu-like tree under /menu.

    /menu
      Firefox.desktop
      .hidden.desktop
      Games/
        Chess.desktop
      Startup/
        Updater.desktop
      .cache/
        junk.desktop
    """
    fs.create_file("/menu/Firefox.desktop")
    fs.create_file("/menu/.hidden.desktop")
    fs.create_file("/menu/Games/Chess.desktop")
    fs.create_file("/menu/Startup/Updater.desktop")
    fs.create_file("/menu/.cache/junk.desktop")
    return Path("/menu")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestDiscovery:
    def test_finds_nested_files_in_sorted_order(self, menu):
        files = _scanner(["/menu"]).discover_files(menu)
        assert [f.name for f in files] == ["Firefox.desktop", "Chess.desktop", "Updater.desktop"]

    def test_skips_hidden_files_and_dirs(self, menu):
        names = {f.name for f in _scanner(["/menu"]).discover_files(menu)}
        assert ".hidden.desktop" not in names
        assert "junk.desktop" not in names

    def test_ignore_path_prunes_subtree(self, menu):
        files = _scanner(["/menu"], ["/menu/Startup"]).discover_files(menu)
        assert "Updater.desktop" not in {f.name for f in files}

    def test_ignore_path_can_name_a_file(self, menu):
        files = _scanner(["/menu"], ["/menu/Firefox.desktop"]).discover_files(menu)
        assert "Firefox.desktop" not in {f.name for f in files}

    def test_ignored_root_yields_nothing(self, menu):
        assert _scanner(["/menu"], ["/menu"]).discover_files(menu) == []

    def test_missing_root_is_skipped(self, fs, caplog):
        with caplog.at_level(logging.WARNING, logger="quicklaunch.scanner"):
            assert _scanner(["/nowhere"]).discover_files(Path("/nowhere")) == []
        assert "not a directory" in caplog.text

    def test_empty_directory(self, fs):
        fs.create_dir("/empty")
        assert _scanner(["/empty"]).discover_files(Path("/empty")) == []


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


class TestScan:
    def test_candidates_named_by_stem(self, menu):
        candidates = _scanner(["/menu"], ["/menu/Startup"]).scan()
        assert candidates == [
            Candidate(name="Firefox", path=str(Path("/menu/Firefox.desktop"))),
            Candidate(name="Chess", path=str(Path("/menu/Games/Chess.desktop"))),
        ]

    def test_roots_scanned_in_configured_order(self, fs):
        fs.create_file("/b/Zed.desktop")
        fs.create_file("/a/Atom.desktop")
        names = [c.name for c in _scanner(["/b", "/a"]).scan()]
        assert names == ["Zed", "Atom"]

    def test_missing_root_does_not_abort(self, fs):
        fs.create_file("/a/Atom.desktop")
        names = [c.name for c in _scanner(["/missing", "/a"]).scan()]
        assert names == ["Atom"]

    def test_env_vars_in_paths(self, fs, monkeypatch):
        monkeypatch.setenv("QL_MENU", "/menus")
        fs.create_file("/menus/Term.desktop")
        assert [c.name for c in _scanner(["${QL_MENU}"]).scan()] == ["Term"]

    def test_same_name_in_two_roots_kept_as_two_candidates(self, fs):
        fs.create_file("/a/Firefox.desktop")
        fs.create_file("/b/Firefox.desktop")
        candidates = _scanner(["/a", "/b"]).scan()
        assert [c.path for c in candidates] == [
            str(Path("/a/Firefox.desktop")),
            str(Path("/b/Firefox.desktop")),
        ]
