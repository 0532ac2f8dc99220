"""Unified diff rendering into styled rich text.

Hunks come from :meth:`difflib.SequenceMatcher.get_grouped_opcodes`. In
word mode, replaced lines are paired up and compared token by token so
that only the words that actually changed get the ``*_modified`` styles.
"""

from __future__ import annotations

import difflib
import re
from collections.abc import Sequence

from rich.style import Style
from rich.text import Text

from kubestalk.diff.themes import ColorTheme

_TOKEN_RE = re.compile(r"\w+|\s+|[^\w\s]")


def format_range(start: int, stop: int) -> str:
    """Unified diff range, e.g. ``3,4`` or ``5`` (same rules as difflib)."""
    beginning = start + 1
    length = stop - start
    if length == 1:
        return str(beginning)
    if not length:
        beginning -= 1
    return f"{beginning},{length}"


def tokenize(line: str) -> list[str]:
    """Split *line* into words, whitespace runs and single punctuation marks."""
    return _TOKEN_RE.findall(line)


def render_unified(
    old_text: str,
    new_text: str,
    title_a: str,
    title_b: str,
    context_lines: int,
    theme: ColorTheme,
    word_diff: bool = True,
) -> Text:
    """Render the diff of two texts as a unified diff."""
    old_lines = old_text.splitlines()
    new_lines = new_text.splitlines()

    out = Text()
    out.append(f"--- {title_a}", style=theme.header)
    out.append("\n")
    out.append(f"+++ {title_b}", style=theme.header)

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for group in matcher.get_grouped_opcodes(context_lines):
        first, last = group[0], group[-1]
        out.append("\n")
        # the hunk header always sits on a line of its own
        out.append(
            f"@@ -{format_range(first[1], last[2])} +{format_range(first[3], last[4])} @@",
            style=theme.section,
        )

        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                for line in old_lines[i1:i2]:
                    _append_line(out, " ", line, theme.context)
            elif tag == "delete":
                for line in old_lines[i1:i2]:
                    _append_line(out, "-", line, theme.deleted)
            elif tag == "insert":
                for line in new_lines[j1:j2]:
                    _append_line(out, "+", line, theme.inserted)
            else:
                _append_replace(out, old_lines[i1:i2], new_lines[j1:j2], theme, word_diff)

    return out


def _append_line(out: Text, marker: str, line: str, style: Style) -> None:
    out.append("\n")
    out.append(marker + line, style=style)


def _append_replace(
    out: Text,
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    theme: ColorTheme,
    word_diff: bool,
) -> None:
    if not word_diff:
        for line in old_lines:
            _append_line(out, "-", line, theme.deleted)
        for line in new_lines:
            _append_line(out, "+", line, theme.inserted)
        return

    pairs = min(len(old_lines), len(new_lines))
    old_marked: list[list[tuple[str, bool]]] = []
    new_marked: list[list[tuple[str, bool]]] = []

    for index in range(pairs):
        old_tokens, new_tokens = _mark_changed_tokens(old_lines[index], new_lines[index])
        old_marked.append(old_tokens)
        new_marked.append(new_tokens)

    # unpaired lines changed entirely
    old_marked.extend([(line, True)] for line in old_lines[pairs:])
    new_marked.extend([(line, True)] for line in new_lines[pairs:])

    for tokens in old_marked:
        _append_tokens(out, "-", tokens, theme.deleted, theme.deleted_word_style())
    for tokens in new_marked:
        _append_tokens(out, "+", tokens, theme.inserted, theme.inserted_word_style())


def _mark_changed_tokens(old_line: str, new_line: str) -> tuple[list[tuple[str, bool]], list[tuple[str, bool]]]:
    """Return both lines as (token, changed) lists."""
    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)

    old_marked: list[tuple[str, bool]] = []
    new_marked: list[tuple[str, bool]] = []

    matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        changed = tag != "equal"
        old_marked.extend((token, changed) for token in old_tokens[i1:i2])
        new_marked.extend((token, changed) for token in new_tokens[j1:j2])

    return old_marked, new_marked


def _append_tokens(
    out: Text,
    marker: str,
    tokens: Sequence[tuple[str, bool]],
    line_style: Style,
    word_style: Style,
) -> None:
    out.append("\n")
    out.append(marker, style=line_style)
    for token, changed in tokens:
        out.append(token, style=word_style if changed else line_style)
