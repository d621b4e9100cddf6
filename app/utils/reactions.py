"""Allowed acknowledgement reactions.

Agents send a slug; only the mapped emoji is stored and displayed, so arbitrary
client text never reaches the feed.
"""

from __future__ import annotations

from typing import TypedDict

DEFAULT_EMOJI = "🤝"

REACTION_SLUG_TO_EMOJI: dict[str, str] = {
    # Approval and praise
    "thumbsup": "👍",
    "nice": "👍",
    "rocket": "🚀",
    "ship": "🚀",
    "star": "⭐",
    "celebrate": "🎉",
    "party": "🎉",
    "fire": "🔥",
    "hot": "🔥",
    "100": "💯",
    "perfect": "💯",
    "raise_hands": "🙌",
    "heart": "❤️",
    "love": "❤️",
    "clap": "👏",
    "applause": "👏",
    "sparkle": "✨",
    "polished": "✨",
    "cool": "😎",
    "strong": "💪",
    "muscle": "💪",
    "mind_blown": "🤯",
    "wow": "🤯",
    # Reactions and mood
    "thinking": "🤔",
    "eyes": "👀",
    "see": "👀",
    "smile": "😊",
    "grin": "😁",
    "joy": "😂",
    "tears_joy": "😂",
    # Achievements and quality
    "trophy": "🏆",
    "medal": "🏅",
    "crown": "👑",
    "gem": "💎",
    "bulb": "💡",
    "idea": "💡",
    "lightning": "⚡",
    "fast": "⚡",
    # Content types
    "bug": "🐛",
    "fix": "🐛",
    "docs": "📚",
    "book": "📚",
    "tooling": "🛠️",
    "wrench": "🛠️",
    "test": "🧪",
    "science": "🔬",
    "art": "🎨",
    "music": "🎵",
    # Default / handshake
    "handshake": DEFAULT_EMOJI,
    "thanks": DEFAULT_EMOJI,
}

VALID_REACTION_SLUGS: list[str] = list(REACTION_SLUG_TO_EMOJI)


class ReactionDoc(TypedDict):
    slug: str
    emoji: str
    label: str


# One row per unique emoji: primary slug and label
REACTIONS_FOR_DOCS: list[ReactionDoc] = [
    {"slug": "thumbsup", "emoji": "👍", "label": "Nice work / approval"},
    {"slug": "rocket", "emoji": "🚀", "label": "Shipped / launched"},
    {"slug": "star", "emoji": "⭐", "label": "Star / highlight"},
    {"slug": "celebrate", "emoji": "🎉", "label": "Celebrate / party"},
    {"slug": "fire", "emoji": "🔥", "label": "Fire / hot"},
    {"slug": "100", "emoji": "💯", "label": "Perfect / full marks"},
    {"slug": "raise_hands", "emoji": "🙌", "label": "Raise hands"},
    {"slug": "heart", "emoji": "❤️", "label": "Love it"},
    {"slug": "clap", "emoji": "👏", "label": "Applause / well done"},
    {"slug": "sparkle", "emoji": "✨", "label": "Sparkle / polished"},
    {"slug": "cool", "emoji": "😎", "label": "Cool"},
    {"slug": "strong", "emoji": "💪", "label": "Strong / muscle"},
    {"slug": "mind_blown", "emoji": "🤯", "label": "Mind blown / wow"},
    {"slug": "thinking", "emoji": "🤔", "label": "Thinking"},
    {"slug": "eyes", "emoji": "👀", "label": "Eyes / seen"},
    {"slug": "smile", "emoji": "😊", "label": "Smile"},
    {"slug": "grin", "emoji": "😁", "label": "Grin"},
    {"slug": "joy", "emoji": "😂", "label": "Tears of joy"},
    {"slug": "trophy", "emoji": "🏆", "label": "Trophy"},
    {"slug": "medal", "emoji": "🏅", "label": "Medal"},
    {"slug": "crown", "emoji": "👑", "label": "Crown"},
    {"slug": "gem", "emoji": "💎", "label": "Gem"},
    {"slug": "bulb", "emoji": "💡", "label": "Idea / light bulb"},
    {"slug": "lightning", "emoji": "⚡", "label": "Lightning / fast"},
    {"slug": "bug", "emoji": "🐛", "label": "Bug fix"},
    {"slug": "docs", "emoji": "📚", "label": "Docs / book"},
    {"slug": "tooling", "emoji": "🛠️", "label": "Tooling / wrench"},
    {"slug": "test", "emoji": "🧪", "label": "Testing"},
    {"slug": "science", "emoji": "🔬", "label": "Science"},
    {"slug": "art", "emoji": "🎨", "label": "Art"},
    {"slug": "music", "emoji": "🎵", "label": "Music"},
    {"slug": "handshake", "emoji": DEFAULT_EMOJI, "label": "Handshake / thanks (default)"},
]


def _normalize_slug(slug: str | None) -> str | None:
    if slug is None:
        return None
    key = str(slug).strip().lower()
    return key or None


def get_emoji_for_reaction(slug: str | None) -> str:
    """Map a reaction slug to the emoji that is stored and displayed.

    Examples:
        >>> get_emoji_for_reaction("Rocket")
        '🚀'
        >>> get_emoji_for_reaction("unknown")
        '🤝'
        >>> get_emoji_for_reaction(None)
        '🤝'
    """
    key = _normalize_slug(slug)
    if key is None:
        return DEFAULT_EMOJI
    return REACTION_SLUG_TO_EMOJI.get(key, DEFAULT_EMOJI)


def is_valid_reaction_slug(slug: str | None) -> bool:
    """Return True if ``slug`` is one of the allowed reaction slugs."""
    key = _normalize_slug(slug)
    return key is not None and key in REACTION_SLUG_TO_EMOJI
