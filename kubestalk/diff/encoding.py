"""Canonical text encoding of projected snapshots.

Values are round-tripped through JSON (which is what the API server speaks
and which rejects anything that is not plain data), keys are sorted, and
the result is emitted as block-style YAML.
"""

from __future__ import annotations

import io
import json

from ruamel.yaml import YAML

from kubestalk.errors import EncodingError
from kubestalk.models.tree import TreeValue

_DOCUMENT_END = "...\n"


def _yaml() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = 4096
    return yaml


def normalize(value: object) -> TreeValue:
    """Round-trip *value* through JSON.

    Raises:
        EncodingError: *value* contains something JSON cannot represent.
    """
    try:
        encoded = json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"failed to encode object as JSON: {exc}") from exc

    try:
        return json.loads(encoded)  # type: ignore[no-any-return]
    except ValueError as exc:
        raise EncodingError(f"failed to re-decode object from JSON: {exc}") from exc


def sort_keys(value: TreeValue) -> TreeValue:
    """Return *value* with every object's keys in sorted order."""
    match value:
        case dict():
            return {key: sort_keys(value[key]) for key in sorted(value)}
        case list():
            return [sort_keys(item) for item in value]
        case _:
            return value


def to_canonical_yaml(value: TreeValue) -> str:
    """Encode *value* as YAML with stable key ordering.

    Raises:
        EncodingError: *value* is not serialisable.
    """
    canonical = sort_keys(normalize(value))

    stream = io.StringIO()
    try:
        _yaml().dump(canonical, stream)
    except Exception as exc:  # noqa: BLE001
        raise EncodingError(f"failed to encode object as YAML: {exc}") from exc

    text = stream.getvalue()
    # bare scalars are terminated with an explicit document end marker
    if text.endswith(_DOCUMENT_END):
        text = text[: -len(_DOCUMENT_END)]
    return text
