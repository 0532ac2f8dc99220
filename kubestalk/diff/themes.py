"""Color themes for rendered diffs.

Themes are plain immutable values built once at startup (see
:func:`default_themes`) and handed to the Differ through its config.
A ``None`` style for a ``*_modified`` slot means "no word highlighting":
changed words are drawn like the rest of their line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.style import Style


@dataclass(frozen=True)
class ColorTheme:
    """Styles for every element of a unified diff."""

    name: str
    header: Style
    section: Style
    context: Style
    deleted: Style
    inserted: Style
    deleted_modified: Style | None
    inserted_modified: Style | None

    def deleted_word_style(self) -> Style:
        return self.deleted_modified or self.deleted

    def inserted_word_style(self) -> Style:
        return self.inserted_modified or self.inserted

    def without_word_diff(self) -> ColorTheme:
        """Variant that highlights whole lines only."""
        return replace(self, deleted_modified=self.deleted, inserted_modified=self.inserted)


@dataclass(frozen=True)
class ThemeSet:
    """The three themes used for create, update and delete diffs."""

    create: ColorTheme
    update: ColorTheme
    delete: ColorTheme

    def without_word_diff(self) -> ThemeSet:
        return ThemeSet(
            create=self.create.without_word_diff(),
            update=self.update.without_word_diff(),
            delete=self.delete.without_word_diff(),
        )


BASE_THEME = ColorTheme(
    name="base",
    header=Style(bold=True),
    section=Style(color="cyan"),
    context=Style(),
    deleted=Style(color="red"),
    inserted=Style(color="green"),
    deleted_modified=Style(color="red", reverse=True),
    inserted_modified=Style(color="green", reverse=True),
)


def default_themes(word_diff: bool = True) -> ThemeSet:
    """Build the create/update/delete themes.

    Updates get a yellow header; creates and deletes do not highlight words
    on the side that is entirely new or entirely gone.
    """
    update = replace(BASE_THEME, name="update", header=Style(color="yellow"))
    themes = ThemeSet(
        create=replace(update, name="create", inserted_modified=None),
        update=update,
        delete=replace(update, name="delete", deleted_modified=None),
    )
    if not word_diff:
        themes = themes.without_word_diff()
    return themes
