"""JSONPath query extraction, applied before the include/exclude paths.

Expressions may be given in plain JSONPath (``$.spec.template``) or in the
kubectl flavour (``{.spec.template}``); both compile to the same query.
"""

from kubestalk.query.extractor import InvalidQueryError, QueryExtractor, QueryResult

__all__ = ["InvalidQueryError", "QueryExtractor", "QueryResult"]
