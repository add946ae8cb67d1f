"""
Unit tests for sftp_shell.state module.

Tests cover:
- Initial session values
- pwd changes push oldpwd and persist it
- exit_requested latching
- Pass-throughs resolve relative paths against pwd
- Cache mutation hooks
"""

import os

from sftp_shell.metadata import Metadata, PatternError
from sftp_shell.settings import Settings
from sftp_shell.state import State


class TestStateInit:
    """Tests for a fresh session."""

    def test_defaults(self, mock_client):
        state = State(mock_client)

        assert state.pwd == "/"
        assert state.oldpwd == "/"
        assert state.exit_requested is False
        assert "/" not in state.cache

    def test_oldpwd_read_from_settings(self, mock_client, settings):
        settings["oldpwd"] = "/d"

        state = State(mock_client, settings)

        assert state.oldpwd == "/d"
        assert state.pwd == "/"

    def test_local_oldpwd_starts_at_cwd(self, mock_client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert State(mock_client).local_oldpwd == os.getcwd()


class TestStatePwd:
    """Tests for working directory bookkeeping."""

    def test_setting_pwd_moves_old_value(self, state):
        state.pwd = "/a"
        state.pwd = "/a/b"

        assert state.pwd == "/a/b"
        assert state.oldpwd == "/a"

    def test_setting_pwd_persists_oldpwd(self, state, settings):
        state.pwd = "/a"
        state.pwd = "/d"

        assert Settings(settings.path)["oldpwd"] == "/a"

    def test_without_settings(self, mock_client):
        state = State(mock_client)
        state.pwd = "/a"
        assert state.oldpwd == "/"


class TestExitRequested:
    def test_latched(self, state):
        state.exit_requested = True
        state.exit_requested = False
        assert state.exit_requested is True


class TestStatePassThrough:
    """Tests for the cache and expansion wrappers."""

    def test_resolve_path_uses_pwd(self, state):
        state.pwd = "/a"
        assert state.resolve_path("b/../readme.md") == "/a/readme.md"

    def test_is_directory_relative(self, state):
        state.pwd = "/a"
        assert state.is_directory("b") is True
        assert state.is_directory("readme.md") is False

    def test_contents_relative(self, state):
        state.pwd = "/d"
        assert state.contents(".") == ["/d/a.txt", "/d/b.txt", "/d/c.md"]

    def test_metadata(self, state):
        state.pwd = "/d"
        assert state.metadata("a.txt").path == "/d/a.txt"
        assert state.metadata("missing") is None

    def test_expand_patterns_relative(self, state):
        state.pwd = "/d"
        assert state.expand_patterns(["*.txt", "*.zzz"]) == [
            "/d/a.txt",
            "/d/b.txt",
            PatternError("*.zzz"),
        ]

    def test_add_and_remove_hooks(self, state, mock_client):
        state.contents("/d")
        mock_client.metadata.reset_mock()

        state.add(Metadata(path="/d/new.txt", is_dir=False))
        assert "/d/new.txt" in state.contents("/d")

        state.pwd = "/d"
        state.remove("new.txt")
        assert "/d/new.txt" not in state.contents("/d")
        mock_client.metadata.assert_not_called()

    def test_forget_children_relative(self, state):
        state.contents("/d")
        state.pwd = "/d"
        assert state.forget_children(".") is True
        assert state.forget_children(".") is False
