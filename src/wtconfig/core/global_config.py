"""Tool settings loaded from ~/.wtconfig/config.toml.

These are settings of the wtconfig tool itself (which scope `config set`
writes to by default, whether provenance is shown), not repository
configuration. Loaded once at the CLI entry point and stored in the context.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import tomlkit

from wtconfig.core.scope_store import Scope


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable tool settings.

    All fields are read-only after construction.
    """

    default_scope: Scope = Scope.SHARED
    show_origin: bool = False


class GlobalConfigStore(ABC):
    """Abstract interface for tool settings access.

    Provides dependency injection so tests can use an in-memory implementation
    without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if the settings file exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load settings, falling back to defaults when nothing is stored.

        Raises:
            ValueError: If stored settings are malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Save settings."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Path of the settings file (for error messages and debugging)."""
        ...


class FilesystemGlobalConfigStore(GlobalConfigStore):
    """Production implementation that reads/writes ~/.wtconfig/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        """Load settings from disk.

        Returns:
            GlobalConfig with stored values, defaults for anything missing

        Raises:
            ValueError: If the file is not valid TOML or holds invalid values
        """
        config_path = self.path()
        if not config_path.exists():
            return GlobalConfig()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

        scope_name = data.get("default_scope", Scope.SHARED.value)
        valid_scopes = [scope.value for scope in Scope]
        if scope_name not in valid_scopes:
            raise ValueError(
                f"Invalid default_scope '{scope_name}' in {config_path} "
                f"(expected one of: {', '.join(valid_scopes)})"
            )

        show_origin = data.get("show_origin", False)
        if not isinstance(show_origin, bool):
            raise ValueError(f"show_origin must be true or false in {config_path}")

        return GlobalConfig(default_scope=Scope(scope_name), show_origin=show_origin)

    def save(self, config: GlobalConfig) -> None:
        """Save settings to disk, keeping comments already in the file.

        Raises:
            PermissionError: If the directory or file cannot be written
        """
        config_path = self.path()
        parent = config_path.parent

        if parent.exists() and not os.access(parent, os.W_OK):
            raise PermissionError(
                f"Cannot write to directory: {parent}\n"
                f"The directory exists but is not writable."
            )
        parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            document = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            document = tomlkit.document()
            document.add(tomlkit.comment("wtconfig settings"))

        document["default_scope"] = config.default_scope.value
        document["show_origin"] = config.show_origin
        config_path.write_text(tomlkit.dumps(document), encoding="utf-8")

    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return Path.home() / ".wtconfig" / "config.toml"


class InMemoryGlobalConfigStore(GlobalConfigStore):
    """Test implementation that stores settings in memory."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory store.

        Args:
            config: Initial settings (None = nothing stored, defaults apply)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            return GlobalConfig()
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/wtconfig/config.toml")
