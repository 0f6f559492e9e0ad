"""Tests for CLI Ensure utility class."""

from pathlib import Path

import pytest

from wtconfig.cli.ensure import Ensure
from wtconfig.core.context import WtConfigContext
from wtconfig.core.repo_discovery import NoRepoSentinel, RepoContext
from wtconfig.core.repository import MAIN_WORKTREE


class TestEnsureInvariant:
    """Tests for Ensure.invariant method."""

    def test_passes_when_true(self) -> None:
        """Ensure.invariant returns normally when the condition holds."""
        Ensure.invariant(True, "Should not fail")

    def test_exits_when_false(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ensure.invariant exits 1 with a red Error prefix on stderr."""
        with pytest.raises(SystemExit) as exc_info:
            Ensure.invariant(False, "Flags conflict")

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "Flags conflict" in captured.err
        assert captured.out == ""


class TestEnsureNotNone:
    """Tests for Ensure.not_none method."""

    def test_returns_value_when_not_none(self) -> None:
        """Ensure.not_none returns the value unchanged when not None."""
        result = Ensure.not_none("hello", "Value is None")
        assert result == "hello"

    def test_exits_when_none(self) -> None:
        """Ensure.not_none raises SystemExit when value is None."""
        with pytest.raises(SystemExit) as exc_info:
            Ensure.not_none(None, "Value is None")
        assert exc_info.value.code == 1

    def test_false_is_not_none(self) -> None:
        """Ensure.not_none returns False since False is not None."""
        result = Ensure.not_none(False, "Value is None")
        assert result is False

    def test_empty_string_is_not_none(self) -> None:
        """Ensure.not_none returns empty string since empty string is not None."""
        result = Ensure.not_none("", "Value is None")
        assert result == ""


class TestEnsureInRepo:
    """Tests for Ensure.in_repo method."""

    def test_returns_repo_context(self) -> None:
        repo = RepoContext(root=Path("/repo"), git_dir=Path("/repo/.git"), worktree=MAIN_WORKTREE)
        ctx = WtConfigContext.for_test(repo=repo)

        assert Ensure.in_repo(ctx) is repo

    def test_exits_outside_repo(self, capsys: pytest.CaptureFixture[str]) -> None:
        ctx = WtConfigContext.for_test(repo=NoRepoSentinel())

        with pytest.raises(SystemExit) as exc_info:
            Ensure.in_repo(ctx)

        assert exc_info.value.code == 1
        assert "Not inside a git repository" in capsys.readouterr().err
