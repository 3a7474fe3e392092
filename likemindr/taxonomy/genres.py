"""
Genre taxonomy offered to readers when they pick favorite genres.

Readers may still store free-text genres; matching compares genres
case-insensitively and never requires a value to be a ``Genre`` member.
The enum exists for sign-up pickers and display.

This module has NO imports from any other ``likemindr`` package.
"""

from enum import StrEnum


class Genre(StrEnum):
    """Popular book genres, in the order the picker shows them."""

    FICTION = "Fiction"
    FANTASY = "Fantasy"
    SCIENCE_FICTION = "Science Fiction"
    MYSTERY = "Mystery"
    THRILLER = "Thriller"
    ROMANCE = "Romance"
    CONTEMPORARY = "Contemporary"
    HISTORICAL_FICTION = "Historical Fiction"
    HORROR = "Horror"
    YOUNG_ADULT = "Young Adult"
    NON_FICTION = "Non-Fiction"
    BIOGRAPHY = "Biography"
    SELF_HELP = "Self-Help"
    BUSINESS = "Business"
    HISTORY = "History"
    PHILOSOPHY = "Philosophy"
    POETRY = "Poetry"
    GRAPHIC_NOVELS = "Graphic Novels"
    MANGA = "Manga"
    CLASSICS = "Classics"


DEFAULT_GENRE_EMOJI = "📖"

GENRE_EMOJIS: dict[str, str] = {
    Genre.FICTION:            "📖",
    Genre.FANTASY:            "🐉",
    Genre.SCIENCE_FICTION:    "🚀",
    Genre.MYSTERY:            "🔍",
    Genre.THRILLER:           "😱",
    Genre.ROMANCE:            "💕",
    Genre.CONTEMPORARY:       "🌆",
    Genre.HISTORICAL_FICTION: "⏳",
    Genre.HORROR:             "👻",
    Genre.YOUNG_ADULT:        "🎒",
    Genre.NON_FICTION:        "📚",
    Genre.BIOGRAPHY:          "👤",
    Genre.SELF_HELP:          "🌟",
    Genre.BUSINESS:           "💼",
    Genre.HISTORY:            "🏛️",
    Genre.PHILOSOPHY:         "🤔",
    Genre.POETRY:             "✍️",
    Genre.GRAPHIC_NOVELS:     "🎨",
    Genre.MANGA:              "📱",
    Genre.CLASSICS:           "📜",
}


def get_genre_emoji(genre: str) -> str:
    """Return the display emoji for ``genre``; unknown genres get the book emoji.

    Lookup is exact, matching how genres are stored by the picker.
    """
    return GENRE_EMOJIS.get(genre, DEFAULT_GENRE_EMOJI)
