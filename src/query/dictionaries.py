"""Fixed vocabularies for the rules engine.

These tables are static configuration: rules read them, nothing mutates them at runtime. Order is
significant wherever a rule picks "the first match".
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.query.schema import EntityType, FilterField

SPORTS: tuple[str, ...] = (
    "cricket",
    "football",
    "badminton",
    "chess",
    "swimming",
    "athletics",
)

# Keyword -> canonical entity type, in match priority order.
TYPE_KEYWORDS: dict[str, EntityType] = {
    "player": EntityType.player,
    "coach": EntityType.coach,
    "venue": EntityType.venue,
    "residence": EntityType.residence,
    "event": EntityType.event,
    "tournament": EntityType.event,
    "squad": EntityType.squad,
    "company": EntityType.company,
    "post": EntityType.post,
    "hostel": EntityType.residence,
    "academy": EntityType.company,
}

CITIES: tuple[str, ...] = ("mumbai", "delhi", "bangalore", "pune", "hyderabad")


@dataclass(frozen=True)
class BooleanPhrase:
    """A lowercase phrase mapped to a boolean attribute condition."""

    phrase: str
    field: FilterField
    value: bool


BOOLEAN_PHRASES: tuple[BooleanPhrase, ...] = (
    BooleanPhrase("public", FilterField.is_public, True),
    BooleanPhrase("private", FilterField.is_public, False),
    BooleanPhrase("open to join", FilterField.open_to_join, True),
    BooleanPhrase("open_to_join", FilterField.open_to_join, True),
    BooleanPhrase("verified", FilterField.verified, True),
    BooleanPhrase("active", FilterField.is_active, True),
)

# Keyword hints used to pick a field for an unqualified "under 500" / "above 1k" comparison.
# Tested as substrings of the lowercased query, first hit wins.
NUMERIC_FIELD_HINTS: tuple[tuple[re.Pattern[str], FilterField], ...] = (
    (re.compile(r"entry|fee|tournament"), FilterField.entry_fee),
    (re.compile(r"prize"), FilterField.prize_pool),
    (re.compile(r"hostel|monthly|per month"), FilterField.monthly_price),
    (re.compile(r"hour|venue"), FilterField.hourly_price),
)


def word_pattern(word: str, *, plural: bool = False) -> re.Pattern[str]:
    """Case-insensitive whole-word pattern, optionally allowing a trailing `s`."""

    suffix = "s?" if plural else ""
    return re.compile(rf"\b{re.escape(word)}{suffix}\b", flags=re.IGNORECASE)


def detect_sport(text: str) -> str | None:
    """Return the first vocabulary sport mentioned as a whole word."""

    for sport in SPORTS:
        if word_pattern(sport).search(text):
            return sport
    return None


def detect_entity_type(text: str) -> EntityType | None:
    """Return the normalized type of the first vocabulary keyword (singular or plural) found."""

    for keyword, entity_type in TYPE_KEYWORDS.items():
        if word_pattern(keyword, plural=True).search(text):
            return entity_type
    return None


def find_boolean_phrases(text: str) -> list[BooleanPhrase]:
    """Return every boolean phrase contained in the text, in table order."""

    lowered = (text or "").lower()
    return [entry for entry in BOOLEAN_PHRASES if entry.phrase in lowered]


def infer_numeric_field(text: str) -> FilterField | None:
    """Guess which price-like field an unqualified comparison refers to."""

    lowered = (text or "").lower()
    for pattern, field in NUMERIC_FIELD_HINTS:
        if pattern.search(lowered):
            return field
    return None


def find_cities(text: str) -> list[str]:
    """Return vocabulary cities introduced by `near` or `in`, in vocabulary order."""

    return [
        city
        for city in CITIES
        if re.search(rf"\b(?:near|in)\s+{city}\b", text, flags=re.IGNORECASE)
    ]
