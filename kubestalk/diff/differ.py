"""Projection, encoding and rendering of the diff between two snapshots.

Pipeline for each side:
    query → include paths → exclude paths → canonical YAML
Both texts are then compared and rendered as a colorized unified diff.
"""

from __future__ import annotations

from datetime import UTC, datetime

from rich.console import Console
from rich.text import Text

from kubestalk.diff.projection import Projection
from kubestalk.diff.render import render_unified
from kubestalk.diff.themes import ColorTheme, ThemeSet, default_themes
from kubestalk.errors import ConfigurationError, EncodingError
from kubestalk.models.config import DiffConfig
from kubestalk.models.events import ResourceIdentity
from kubestalk.models.tree import TreeObject
from kubestalk.observability.logging import get_logger

_logger = get_logger("diff.differ")

NONE_TITLE = "(none)"

# Go-style zero time, shown when a snapshot has no recorded observation time
_ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


def validate_diff_config(config: DiffConfig) -> Projection:
    """Check *config* and compile its projection.

    Raises:
        ConfigurationError: negative context lines, bad paths or bad query.
    """
    if config.context_lines < 0:
        raise ConfigurationError("context lines cannot be negative")
    return Projection.compile(config)


def format_timestamp(ts: datetime | None) -> str:
    """RFC 3339 in UTC, e.g. ``2026-02-18T12:00:00Z``."""
    if ts is None:
        ts = _ZERO_TIME
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def diff_title(obj: TreeObject | None, last_seen: datetime | None) -> str:
    """One line summary of a snapshot for the diff header."""
    if obj is None:
        return NONE_TITLE

    identity = ResourceIdentity.of(obj)
    metadata = obj.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}

    resource_version = metadata.get("resourceVersion") or ""
    generation = metadata.get("generation") or 0

    return (
        f"{identity.kind} {identity.display_name} v{resource_version} "
        f"({format_timestamp(last_seen)}) (gen. {generation})"
    )


class Differ:
    """Renders diffs between successive snapshots of one object.

    Args:
        config:  Projection and rendering options; validated here.
        console: Where diffs are printed. Defaults to stdout.
    """

    def __init__(self, config: DiffConfig, console: Console | None = None) -> None:
        self._projection = validate_diff_config(config)
        self._config = config

        themes: ThemeSet = config.themes or default_themes()
        if not config.word_diff:
            themes = themes.without_word_diff()
        self._themes = themes

        self._console = console or Console(highlight=False, soft_wrap=True)

    @property
    def themes(self) -> ThemeSet:
        return self._themes

    @property
    def projection(self) -> Projection:
        return self._projection

    def select_theme(self, previous: TreeObject | None, current: TreeObject | None) -> ColorTheme:
        """Create theme for new objects, delete theme for removed ones, update otherwise."""
        if previous is None:
            return self._themes.create
        if current is None:
            return self._themes.delete
        return self._themes.update

    def preprocess(self, obj: TreeObject | None) -> str:
        """Project and encode one side of the diff.

        Raises:
            EncodingError: the snapshot cannot be serialised.
        """
        return self._projection.encode(obj)

    def render(
        self,
        previous: TreeObject | None,
        current: TreeObject | None,
        last_seen: datetime | None,
        now: datetime | None = None,
    ) -> Text | None:
        """Render the diff between *previous* and *current*.

        *last_seen* is when *previous* was observed; the current side is
        stamped with *now* (defaults to the current time).

        Returns None when the projected texts are identical and empty diffs
        are hidden.

        Raises:
            EncodingError: one of the snapshots cannot be serialised.
        """
        if previous is None and current is None:
            raise ValueError("at least one of previous and current must be given")

        try:
            old_text = self.preprocess(previous)
        except EncodingError as exc:
            raise EncodingError(f"failed to process previous object: {exc}") from exc

        try:
            new_text = self.preprocess(current)
        except EncodingError as exc:
            raise EncodingError(f"failed to process current object: {exc}") from exc

        # happens when only fields outside the projection changed
        if old_text == new_text and self._config.hide_empty_diffs:
            _logger.debug("diff_suppressed", reason="projected texts are identical")
            return None

        if now is None:
            now = datetime.now(tz=UTC)

        return render_unified(
            old_text,
            new_text,
            title_a=diff_title(previous, last_seen),
            title_b=diff_title(current, now),
            context_lines=self._config.context_lines,
            theme=self.select_theme(previous, current),
            word_diff=self._config.word_diff,
        )

    def print_diff(
        self,
        previous: TreeObject | None,
        current: TreeObject | None,
        last_seen: datetime | None,
    ) -> bool:
        """Render and print the diff followed by a blank line.

        Returns True if anything was printed.

        Raises:
            EncodingError: one of the snapshots cannot be serialised.
        """
        text = self.render(previous, current, last_seen)
        if text is None:
            return False

        self._console.print(text)
        self._console.print()
        return True
