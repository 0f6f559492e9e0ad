"""Tests for configuration key parsing."""

import pytest

from wtconfig.core.errors import InvalidKey
from wtconfig.core.keys import WORKTREE_CONFIG_KEY, ConfigKey, parse_bool


def test_parse_two_part_key() -> None:
    """section.name parses without a subsection."""
    key = ConfigKey.parse("core.bare")

    assert key.section == "core"
    assert key.subsection is None
    assert key.name == "bare"


def test_parse_three_part_key() -> None:
    """section.subsection.name keeps the middle part as subsection."""
    key = ConfigKey.parse("remote.origin.url")

    assert key.section == "remote"
    assert key.subsection == "origin"
    assert key.name == "url"


def test_subsection_may_contain_dots() -> None:
    """Everything between the first and last dot is the subsection."""
    key = ConfigKey.parse("branch.release.v1.2.merge")

    assert key.section == "branch"
    assert key.subsection == "release.v1.2"
    assert key.name == "merge"


def test_keys_compare_case_insensitively() -> None:
    """Casing differences do not make keys different."""
    assert ConfigKey.parse("Extensions.WorktreeConfig") == WORKTREE_CONFIG_KEY
    assert hash(ConfigKey.parse("REMOTE.Origin.URL")) == hash(ConfigKey.parse("remote.origin.url"))


def test_original_casing_is_preserved() -> None:
    """str() gives back the key as written."""
    assert str(ConfigKey.parse("extensions.worktreeConfig")) == "extensions.worktreeConfig"
    assert str(ConfigKey.parse("remote.Origin.URL")) == "remote.Origin.URL"


@pytest.mark.parametrize(
    "text",
    ["core", "core.", ".bare", "co re.bare", "core.1bare", "core.ba_re", "", "a.sub\nline.name"],
)
def test_malformed_keys_raise_invalid_key(text: str) -> None:
    """Malformed keys are rejected with InvalidKey."""
    with pytest.raises(InvalidKey):
        ConfigKey.parse(text)


def test_invalid_key_message_names_the_key() -> None:
    """The error message includes the offending key."""
    with pytest.raises(InvalidKey, match="'nodot'"):
        ConfigKey.parse("nodot")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        ("yes", True),
        ("on", True),
        ("1", True),
        ("false", False),
        ("No", False),
        ("off", False),
        ("0", False),
        ("maybe", None),
        ("", None),
    ],
)
def test_parse_bool(value: str, expected: bool | None) -> None:
    """Boolean-like values are recognized case-insensitively."""
    assert parse_bool(value) is expected
