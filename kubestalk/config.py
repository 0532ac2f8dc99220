"""Configuration loading from environment variables and CLI options.

Every option can be preset through a ``KUBESTALK_*`` environment variable;
explicitly given CLI values win. All validation happens here, before any
watch is started.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

from kubestalk.diff.differ import validate_diff_config
from kubestalk.diff.themes import default_themes
from kubestalk.errors import ConfigurationError
from kubestalk.models.config import DiffConfig, LogConfig, StalkConfig, WatchConfig
from kubestalk.observability.logging import LOG_FORMATS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBESTALK_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    raw = _env(key, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"KUBESTALK_{key} must be an integer, got {raw!r}") from exc


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigurationError(f"Invalid log level: {value}. Must be one of {sorted(valid)}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ConfigurationError(f"Invalid log format: {value}. Must be one of {list(LOG_FORMATS)}")
    return value.lower()


def _split_kinds(arg: str) -> tuple[str, ...]:
    return tuple(kind for kind in (part.strip().lower() for part in arg.split(",")) if kind)


def load_config(
    resources: Sequence[str] = (),
    *,
    namespaces: Sequence[str] = (),
    labels: str | None = None,
    kubeconfig: str | None = None,
    jsonpath: str | None = None,
    show: Sequence[str] = (),
    hide: Sequence[str] = (),
    show_empty: bool | None = None,
    diff_by_line: bool | None = None,
    context_lines: int | None = None,
    hide_managed: bool | None = None,
    verbose: bool = False,
    log_format: str | None = None,
) -> StalkConfig:
    """Build and validate the configuration.

    *resources* are the positional CLI arguments: a comma separated list of
    kinds (or ``-`` for stdin) followed by optional object names.

    Raises:
        ConfigurationError: any option is invalid.
    """
    if not resources:
        raise ConfigurationError("No resource kind and name given.")

    kind_arg, names = resources[0], tuple(resources[1:])
    stdin = kind_arg == "-"
    label_selector = labels if labels is not None else _env("LABELS")

    if names and label_selector:
        raise ConfigurationError("Cannot specify both resource names and a label selector at the same time.")

    watch = WatchConfig(
        kinds=() if stdin else _split_kinds(kind_arg),
        names=names,
        namespaces=tuple(namespaces),
        label_selector=label_selector,
        kubeconfig=kubeconfig or _env("KUBECONFIG") or os.environ.get("KUBECONFIG", ""),
        stdin=stdin,
    )
    if not watch.stdin and not watch.kinds:
        raise ConfigurationError("No resource kind given.")

    word_diff = not (diff_by_line if diff_by_line is not None else _env_bool("DIFF_BY_LINE", False))
    diff = DiffConfig(
        context_lines=context_lines if context_lines is not None else _env_int("CONTEXT_LINES", 3),
        word_diff=word_diff,
        query=jsonpath if jsonpath is not None else _env("JSONPATH"),
        include_paths=tuple(show),
        exclude_paths=tuple(hide),
        hide_empty_diffs=not (show_empty if show_empty is not None else _env_bool("SHOW_EMPTY", False)),
        hide_managed_fields=hide_managed if hide_managed is not None else _env_bool("HIDE_MANAGED", True),
        themes=default_themes(word_diff),
    )
    validate_diff_config(diff)

    log = LogConfig(
        level="debug" if verbose else _validate_log_level(_env("LOG_LEVEL", "info")),
        format=_validate_log_format(log_format or _env("LOG_FORMAT", "console")),
    )

    return StalkConfig(diff=diff, watch=watch, log=log)
