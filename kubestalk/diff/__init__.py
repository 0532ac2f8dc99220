"""Diff rendering for kubestalk.

Submodules:
    encoding    -- Canonical YAML encoding of projected snapshots.
    projection  -- Query/include/exclude projection compiled from a DiffConfig.
    render      -- Unified, context-windowed, word-aware diff rendering.
    themes      -- Create/update/delete color themes.
    differ      -- Orchestrates the above for a pair of snapshots.
"""

from kubestalk.diff.differ import Differ, diff_title, validate_diff_config
from kubestalk.diff.projection import Projection
from kubestalk.diff.themes import ColorTheme, ThemeSet, default_themes

__all__ = [
    "ColorTheme",
    "Differ",
    "Projection",
    "ThemeSet",
    "default_themes",
    "diff_title",
    "validate_diff_config",
]
