"""Configuration key parsing and comparison.

Keys follow git's ``section[.subsection].name`` syntax: the section is the text
before the first dot, the name is the text after the last dot, and anything in
between is the subsection (which may itself contain dots).

All three parts compare case-insensitively. The casing a key was written with is
kept on the ``ConfigKey`` so that stores can round-trip it unchanged.
"""

import re
from dataclasses import dataclass

from wtconfig.core.errors import InvalidKey

_SECTION_RE = re.compile(r"^[A-Za-z0-9-]+$")
_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")

_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True, eq=False)
class ConfigKey:
    """A parsed configuration key.

    Equality and hashing use the case-normalized form, so ``Core.Bare`` and
    ``core.bare`` are the same key.
    """

    section: str
    subsection: str | None
    name: str

    @staticmethod
    def parse(text: str) -> "ConfigKey":
        """Parse ``section[.subsection].name`` into a ConfigKey.

        Raises:
            InvalidKey: If the text is not a well-formed key
        """
        first_dot = text.find(".")
        last_dot = text.rfind(".")
        if first_dot == -1:
            raise InvalidKey(text, "key does not contain a section")
        if last_dot == len(text) - 1:
            raise InvalidKey(text, "key does not contain a variable name")

        section = text[:first_dot]
        name = text[last_dot + 1 :]
        subsection = text[first_dot + 1 : last_dot] if first_dot != last_dot else None

        if not _SECTION_RE.match(section):
            raise InvalidKey(text, f"invalid section '{section}'")
        if not _NAME_RE.match(name):
            raise InvalidKey(text, f"invalid variable name '{name}'")
        if subsection is not None and ("\n" in subsection or "\0" in subsection):
            raise InvalidKey(text, "subsection must not contain newlines or NUL bytes")

        return ConfigKey(section=section, subsection=subsection, name=name)

    @property
    def normalized(self) -> tuple[str, str | None, str]:
        """Lower-cased (section, subsection, name) used for lookups."""
        subsection = self.subsection.lower() if self.subsection is not None else None
        return (self.section.lower(), subsection, self.name.lower())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigKey):
            return NotImplemented
        return self.normalized == other.normalized

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        if self.subsection is None:
            return f"{self.section}.{self.name}"
        return f"{self.section}.{self.subsection}.{self.name}"


def as_key(key: "ConfigKey | str") -> ConfigKey:
    """Accept either a parsed key or its text form."""
    if isinstance(key, ConfigKey):
        return key
    return ConfigKey.parse(key)


# Read from Shared only; see ExtensionGate.
WORKTREE_CONFIG_KEY = ConfigKey.parse("extensions.worktreeConfig")


def parse_bool(value: str) -> bool | None:
    """Interpret a git-style boolean value.

    Returns None when the value is not boolean-like.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None
