"""Tests for the CLI error boundary."""

import pytest

from wtconfig.cli.error_boundary import cli_error_boundary
from wtconfig.core.errors import InvalidKey, StorageFailure


def test_passes_through_return_value() -> None:
    @cli_error_boundary
    def command(value: int) -> int:
        return value * 2

    assert command(21) == 42


@pytest.mark.parametrize(
    "error",
    [
        InvalidKey("nodot", "missing section"),
        StorageFailure("/repo/.git/config", "Cannot write config file"),
        ValueError("bad value"),
        PermissionError("denied"),
    ],
)
def test_known_errors_exit_1(error: Exception, capsys: pytest.CaptureFixture[str]) -> None:
    """Known errors print a styled message to stderr and exit 1."""

    @cli_error_boundary
    def command() -> None:
        raise error

    with pytest.raises(SystemExit) as exc_info:
        command()

    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert "Error:" in captured.err
    assert str(error) in captured.err


def test_unknown_errors_propagate() -> None:
    @cli_error_boundary
    def command() -> None:
        raise RuntimeError("unexpected")

    with pytest.raises(RuntimeError, match="unexpected"):
        command()
