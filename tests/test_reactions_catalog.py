"""Tests for the reaction slug catalog."""

import pytest

from app.utils.reactions import (
    DEFAULT_EMOJI,
    REACTION_SLUG_TO_EMOJI,
    REACTIONS_FOR_DOCS,
    get_emoji_for_reaction,
    is_valid_reaction_slug,
)


@pytest.mark.parametrize(
    ("slug", "expected"),
    [
        ("rocket", "🚀"),
        ("ship", "🚀"),
        ("  FIRE ", "🔥"),
        ("100", "💯"),
        ("thanks", "🤝"),
        ("not-a-slug", DEFAULT_EMOJI),
        ("", DEFAULT_EMOJI),
        (None, DEFAULT_EMOJI),
    ],
)
def test_get_emoji_for_reaction(slug, expected) -> None:
    assert get_emoji_for_reaction(slug) == expected


def test_is_valid_reaction_slug() -> None:
    assert is_valid_reaction_slug("Rocket") is True
    assert is_valid_reaction_slug("nope") is False
    assert is_valid_reaction_slug("   ") is False
    assert is_valid_reaction_slug(None) is False


def test_docs_table_lists_each_emoji_once_with_known_slugs() -> None:
    emojis = [row["emoji"] for row in REACTIONS_FOR_DOCS]

    assert len(emojis) == len(set(emojis))
    assert set(emojis) == set(REACTION_SLUG_TO_EMOJI.values())
    for row in REACTIONS_FOR_DOCS:
        assert REACTION_SLUG_TO_EMOJI[row["slug"]] == row["emoji"]
