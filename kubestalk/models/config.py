"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubestalk.diff.themes import ThemeSet

MANAGED_FIELDS_PATH = "metadata.managedFields"


@dataclass(frozen=True)
class DiffConfig:
    """Projection and rendering options for the Differ.

    The query runs first, then include_paths, then exclude_paths.
    """

    context_lines: int = 3
    word_diff: bool = True
    query: str = ""
    include_paths: tuple[str, ...] = ()
    exclude_paths: tuple[str, ...] = ()
    hide_empty_diffs: bool = True
    hide_managed_fields: bool = True
    themes: ThemeSet | None = None

    def effective_exclude_paths(self) -> tuple[str, ...]:
        """Exclude paths including the implicit managedFields path."""
        if self.hide_managed_fields and MANAGED_FIELDS_PATH not in self.exclude_paths:
            return (*self.exclude_paths, MANAGED_FIELDS_PATH)
        return self.exclude_paths


@dataclass(frozen=True)
class WatchConfig:
    """What to watch and where."""

    kinds: tuple[str, ...] = ()
    names: tuple[str, ...] = ()
    namespaces: tuple[str, ...] = ()
    label_selector: str = ""
    kubeconfig: str = ""
    stdin: bool = False


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "console"


@dataclass(frozen=True)
class StalkConfig:
    """Top-level kubestalk configuration."""

    diff: DiffConfig = field(default_factory=DiffConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    log: LogConfig = field(default_factory=LogConfig)
