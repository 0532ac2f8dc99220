"""Query extractor backed by jsonpath-ng."""

from __future__ import annotations

from dataclasses import dataclass

from jsonpath_ng import JSONPath
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath

from kubestalk.models.tree import TreeObject, TreeValue, is_object
from kubestalk.observability.logging import get_logger

_logger = get_logger("query.extractor")


class InvalidQueryError(ValueError):
    """Raised when a query expression cannot be parsed."""

    def __init__(self, expression: str, cause: Exception) -> None:
        super().__init__(f"invalid JSON path {expression!r}: {cause}")
        self.expression = expression
        self.cause = cause


@dataclass(frozen=True)
class QueryResult:
    """Outcome of applying a query to one snapshot.

    ``matched`` is False when the query found nothing; ``value`` is then
    None and callers render the snapshot as empty text.
    """

    matched: bool
    value: TreeValue = None

    @property
    def is_object(self) -> bool:
        return self.matched and is_object(self.value)


_NO_MATCH = QueryResult(matched=False)


def _normalize(expression: str) -> str:
    """Turn kubectl style ``{.a.b}`` into ``$.a.b``."""
    expr = expression.strip()
    if expr.startswith("{") and expr.endswith("}"):
        expr = expr[1:-1].strip()
    if expr.startswith("."):
        expr = "$" + expr
    elif expr.startswith("["):
        expr = "$" + expr
    return expr


class QueryExtractor:
    """A compiled query expression.

    Only the first match is used, mirroring ``kubectl -o jsonpath`` when the
    expression addresses a single field.
    """

    def __init__(self, expression: str, compiled: JSONPath) -> None:
        self.expression = expression
        self._compiled = compiled

    @classmethod
    def compile(cls, expression: str) -> QueryExtractor:
        """Parse *expression*.

        Raises:
            InvalidQueryError: the expression is empty or not valid JSONPath.
        """
        normalized = _normalize(expression)
        if not normalized:
            raise InvalidQueryError(expression, ValueError("expression is empty"))

        try:
            compiled = parse_jsonpath(normalized)
        except (JSONPathError, ValueError, TypeError) as exc:
            raise InvalidQueryError(expression, exc) from exc

        return cls(expression, compiled)

    def extract(self, tree: TreeObject) -> QueryResult:
        """Apply the query to *tree*; never raises for evaluation problems."""
        try:
            matches = self._compiled.find(tree)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("query_failed", query=self.expression, error=str(exc))
            return _NO_MATCH

        if not matches:
            _logger.debug("query_no_match", query=self.expression)
            return _NO_MATCH

        return QueryResult(matched=True, value=matches[0].value)

    def __repr__(self) -> str:
        return f"QueryExtractor({self.expression!r})"
