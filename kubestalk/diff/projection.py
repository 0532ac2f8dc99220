"""Projection of snapshots: query, then include paths, then exclude paths."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from kubestalk.diff.encoding import to_canonical_yaml
from kubestalk.errors import ConfigurationError
from kubestalk.maputil import Path, prune_object, remove_path
from kubestalk.models.config import DiffConfig
from kubestalk.models.tree import TreeObject, TreeValue
from kubestalk.query import InvalidQueryError, QueryExtractor, QueryResult


def parse_paths(expressions: Sequence[str], what: str) -> tuple[Path, ...]:
    """Parse every expression, raising ConfigurationError on the first bad one."""
    parsed = []
    for expression in expressions:
        try:
            parsed.append(Path.parse(expression))
        except ValueError as exc:
            raise ConfigurationError(f"invalid {what} expression {expression!r}: {exc}") from exc
    return tuple(parsed)


@dataclass(frozen=True)
class Projection:
    """Compiled query and paths of a :class:`DiffConfig`."""

    query: QueryExtractor | None = None
    include: tuple[Path, ...] = ()
    exclude: tuple[Path, ...] = ()

    @classmethod
    def compile(cls, config: DiffConfig) -> Projection:
        """Compile *config*'s projection options.

        Raises:
            ConfigurationError: the query or one of the paths is invalid.
        """
        query = None
        if config.query:
            try:
                query = QueryExtractor.compile(config.query)
            except InvalidQueryError as exc:
                raise ConfigurationError(str(exc)) from exc

        return cls(
            query=query,
            include=parse_paths(config.include_paths, "include"),
            exclude=parse_paths(config.effective_exclude_paths(), "exclude"),
        )

    def apply(self, tree: TreeObject) -> QueryResult:
        """Project *tree*.

        The result is unmatched when the query found nothing. When the query
        yields a non-object value the include and exclude paths are skipped.
        """
        value: TreeValue = tree

        if self.query is not None:
            result = self.query.extract(tree)
            if not result.matched:
                return result
            value = result.value

        match value:
            case dict():
                if self.include:
                    value = prune_object(value, self.include)
                for path in self.exclude:
                    value = remove_path(value, path)
            case _:
                pass

        return QueryResult(matched=True, value=value)

    def encode(self, tree: TreeObject | None) -> str:
        """Project *tree* and encode it as canonical YAML.

        Absent snapshots and unmatched queries encode to ``""``.

        Raises:
            EncodingError: the projected value cannot be serialised.
        """
        if tree is None:
            return ""

        result = self.apply(tree)
        if not result.matched:
            return ""

        return to_canonical_yaml(result.value)
