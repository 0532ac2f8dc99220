"""Dotted field paths used by the include/exclude projections."""

from __future__ import annotations

from collections.abc import Iterator


class EmptyExpressionError(ValueError):
    """Raised when a path expression is the empty string."""

    def __init__(self) -> None:
        super().__init__("path cannot be empty")


class NoValidSegmentsError(ValueError):
    """Raised when a path expression consists only of dots."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"path {expression!r} does not contain a single path element")
        self.expression = expression


class Path:
    """An immutable sequence of field names, e.g. ``metadata.labels``.

    Paths built with :meth:`parse` always have at least one segment.
    ``Path(())`` (the empty path) only shows up as the tail of a
    single-segment path.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: tuple[str, ...] | list[str] = ()) -> None:
        self._segments = tuple(segments)

    @classmethod
    def parse(cls, expression: str) -> Path:
        """Split *expression* on dots, dropping empty segments.

        Raises:
            EmptyExpressionError: *expression* is empty.
            NoValidSegmentsError: every segment is empty (``"..."``).
        """
        if expression == "":
            raise EmptyExpressionError()

        segments = tuple(part for part in expression.split(".") if part)
        if not segments:
            raise NoValidSegmentsError(expression)

        return cls(segments)

    def head(self) -> str:
        """First segment, or ``""`` for the empty path."""
        if not self._segments:
            return ""
        return self._segments[0]

    def tail(self) -> Path:
        """All but the first segment; the empty path if there are none."""
        return Path(self._segments[1:])

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def __len__(self) -> int:
        return len(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        return ".".join(self._segments)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"
