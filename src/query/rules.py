"""Extraction rules.

Each rule recognizes one lexical pattern in the raw query and, when it matches, appends
predicates to the shared `RuleContext`. Rules never raise: a pattern that is absent, or whose
nested number/hour cannot be parsed, simply does not fire.

`RULES` fixes the execution order, which determines both the trace order and the order of the
rendered filter expression.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from src.query.dictionaries import (
    detect_entity_type,
    detect_sport,
    find_boolean_phrases,
    find_cities,
    infer_numeric_field,
)
from src.query.filters import FilterBuilder
from src.query.schema import (
    Comparator,
    Comparison,
    Disjunction,
    EntityType,
    Equality,
    FilterField,
    GeoAnchor,
    GeoPoint,
    Predicate,
)
from src.query.tokens import parse_hour, parse_magnitude

logger = logging.getLogger(__name__)

DEFAULT_NEAR_ME_RADIUS_METERS = 10_000

_HASHTAG_RE = re.compile(r"#([A-Za-z0-9_]+)")

_AGE_CAP_RES = (
    re.compile(r"\bu[-\s]?(\d{1,2})\b", flags=re.IGNORECASE),
    re.compile(r"\bunder\s+(\d{1,2})\b", flags=re.IGNORECASE),
)

_EXPERIENCE_RES = (
    re.compile(r"experience\s*(?:of)?\s*(?:>=|<=|>|<)?\s*(\d{1,3})", flags=re.IGNORECASE),
    re.compile(r"(\d{1,2})\+?\s*years? (?:experience|exp)", flags=re.IGNORECASE),
)

_AMOUNT = r"(?P<amount>\d[\d,]*(?:\.\d+)?(?:\s*(?:lakhs?|lacs?|l|k)\b)?)"
_UNDER = r"(?:\b(?:under|below|less than)\s+|<=?\s*)"
_ABOVE = r"(?:\b(?:above|over|greater than)\s+|>=?\s*)"

_GENERIC_UNDER_RE = re.compile(rf"{_UNDER}{_AMOUNT}", flags=re.IGNORECASE)
_GENERIC_ABOVE_RE = re.compile(rf"{_ABOVE}{_AMOUNT}", flags=re.IGNORECASE)
_COACH_PRICE_RE = re.compile(
    rf"\bcoach\s+(?:under|below|<=|<)\s*{_AMOUNT}", flags=re.IGNORECASE
)
_ENTRY_FEE_RE = re.compile(
    rf"\b(?:entry fee|entry|fee)\s*(?P<direction>under|below|<=|<|over|above|>=|>)?\s*{_AMOUNT}",
    flags=re.IGNORECASE,
)
_TOURNAMENT_RE = re.compile(
    rf"\btournaments?\s+(?:under|below)\s+{_AMOUNT}", flags=re.IGNORECASE
)
_HOSTEL_RE = re.compile(
    rf"\b(?:hostels?|residence)\s+(?:under|below)\s*{_AMOUNT}", flags=re.IGNORECASE
)
_PRIZE_RE = re.compile(
    rf"\b(?:prize pool|prize)\s*(?:above|over|greater than|>)\s*{_AMOUNT}", flags=re.IGNORECASE
)
_UPWARD_DIRECTIONS = {"over", "above", ">=", ">"}
# Text ending like this means the comparison that follows belongs to the experience rule.
_EXPERIENCE_LEAD_RE = re.compile(r"experience\s*(?:of)?\s*$", flags=re.IGNORECASE)

_TIME = r"(?P<time>\d{1,2}(?::\d{2})?\s*(?:am|pm)?)"
_OPEN_AFTER_RE = re.compile(rf"open after\s+{_TIME}", flags=re.IGNORECASE)
_OPEN_TILL_RE = re.compile(rf"open (?:till|until)\s+{_TIME}", flags=re.IGNORECASE)

_NEAR_ME_RE = re.compile(r"\bnear me\b", flags=re.IGNORECASE)


@dataclass(frozen=True)
class RuleOptions:
    """Tunables that change how individual rules behave."""

    near_me_radius_meters: int = DEFAULT_NEAR_ME_RADIUS_METERS
    # When False, "entry fee over 500" still yields `entry_fee <= 500`.
    entry_fee_respects_direction: bool = False

    def __post_init__(self) -> None:
        if self.near_me_radius_meters <= 0:
            raise ValueError("near_me_radius_meters must be > 0")


@dataclass
class RuleContext:
    """State threaded through every rule for one translation."""

    text: str
    user_location: GeoPoint | None = None
    options: RuleOptions = field(default_factory=RuleOptions)
    filters: FilterBuilder = field(default_factory=FilterBuilder)
    trace: list[str] = field(default_factory=list)
    geo_anchor: GeoAnchor | None = None
    free_text: str | None = None

    def __post_init__(self) -> None:
        if self.free_text is None:
            self.free_text = self.text

    def fire(self, rule_id: str, *predicates: Predicate) -> None:
        """Append predicates and record the rule in the trace."""

        self.filters.extend(predicates)
        self.trace.append(rule_id)


@dataclass(frozen=True)
class _NumericMatch:
    field: FilterField | None
    op: Comparator
    value: int | float


Rule = Callable[[RuleContext], None]


def extract_hashtags(text: str) -> list[str]:
    return _HASHTAG_RE.findall(text or "")


def extract_age_cap(text: str) -> int | None:
    """Return the cap from `u16`, `u-16` or `under 16`."""

    for pattern in _AGE_CAP_RES:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def extract_experience(text: str) -> int | None:
    """Return years from `experience 5`, `experience of > 5` or `10+ years experience`."""

    for pattern in _EXPERIENCE_RES:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def _parse_amount(match: re.Match[str]) -> int | float | None:
    value = parse_magnitude(match.group("amount"))
    if value is None:
        logger.debug("amount not parsed token=%r", match.group("amount"))
    return value


def extract_numeric_comparisons(
        text: str,
        *,
        entry_fee_respects_direction: bool = False,
) -> list[_NumericMatch]:
    """Collect numeric comparisons, each sub-pattern contributing at most once.

    Generic `under/above <amount>` matches carry no field; the caller infers one. They also skip
    comparisons written right after `experience` (`experience >= 5`), which are not amounts.
    """

    matches: list[_NumericMatch] = []

    def _search(pattern: re.Pattern[str], *, skip_experience: bool) -> re.Match[str] | None:
        if not skip_experience:
            return pattern.search(text)
        for match in pattern.finditer(text):
            if not _EXPERIENCE_LEAD_RE.search(text, 0, match.start()):
                return match
        return None

    def _add(
            pattern: re.Pattern[str],
            field_hint: FilterField | None,
            op: Comparator,
            *,
            directional: bool = False,
    ) -> None:
        match = _search(pattern, skip_experience=field_hint is None)
        if not match:
            return
        value = _parse_amount(match)
        if value is None:
            return
        if directional and (match.group("direction") or "").lower() in _UPWARD_DIRECTIONS:
            op = ">="
        matches.append(_NumericMatch(field=field_hint, op=op, value=value))

    _add(_GENERIC_UNDER_RE, None, "<=")
    _add(_GENERIC_ABOVE_RE, None, ">=")
    _add(_COACH_PRICE_RE, FilterField.price_per_session, "<=")
    # Entry fee is always `<=` unless the direction flag is on.
    _add(_ENTRY_FEE_RE, FilterField.entry_fee, "<=", directional=entry_fee_respects_direction)
    _add(_TOURNAMENT_RE, FilterField.entry_fee, "<=")
    _add(_HOSTEL_RE, FilterField.monthly_price, "<=")
    _add(_PRIZE_RE, FilterField.prize_pool, ">=")
    return matches


def extract_closing_hour(text: str) -> int | None:
    """Return the hour from `open after 10pm` or, failing that, `open till 23:00`."""

    for pattern in (_OPEN_AFTER_RE, _OPEN_TILL_RE):
        match = pattern.search(text)
        if match:
            return parse_hour(match.group("time"))
    return None


def hashtag_rule(ctx: RuleContext) -> None:
    tags = extract_hashtags(ctx.text)
    if not tags:
        return
    ctx.fire(
        "hashtags",
        Disjunction(predicates=tuple(Equality(field=FilterField.hashtags, value=t) for t in tags)),
    )


def age_cap_rule(ctx: RuleContext) -> None:
    age = extract_age_cap(ctx.text)
    # `age <= 0` matches no player, so a zero cap does not fire. Experience has no such empty
    # bound: "experience 0" is clamped to `>= 1` by `experience_rule`.
    if not age:
        return
    ctx.fire(
        "age_cap",
        Comparison(field=FilterField.age, op="<=", value=age),
        Equality(field=FilterField.entity_type, value=EntityType.player.value),
    )


def sport_rule(ctx: RuleContext) -> None:
    sport = detect_sport(ctx.text)
    if sport is not None:
        ctx.fire("sport", Equality(field=FilterField.sport, value=sport))


def entity_type_rule(ctx: RuleContext) -> None:
    entity_type = detect_entity_type(ctx.text)
    if entity_type is not None:
        ctx.fire("type", Equality(field=FilterField.entity_type, value=entity_type.value))


def boolean_rule(ctx: RuleContext) -> None:
    for entry in find_boolean_phrases(ctx.text):
        ctx.fire(f"bool:{entry.phrase}", Equality(field=entry.field, value=entry.value))


def experience_rule(ctx: RuleContext) -> None:
    years = extract_experience(ctx.text)
    if years is None:
        return
    ctx.fire(
        "experience",
        Comparison(field=FilterField.experience_years, op=">=", value=max(1, years)),
        Equality(field=FilterField.entity_type, value=EntityType.coach.value),
    )


def numeric_rule(ctx: RuleContext) -> None:
    comparisons = extract_numeric_comparisons(
        ctx.text,
        entry_fee_respects_direction=ctx.options.entry_fee_respects_direction,
    )
    for cmp in comparisons:
        target = cmp.field or infer_numeric_field(ctx.text)
        if target is None:
            logger.debug("numeric dropped: no field hint op=%s value=%s", cmp.op, cmp.value)
            continue
        ctx.fire(f"numeric:{target}", Comparison(field=target, op=cmp.op, value=cmp.value))


def operating_hours_rule(ctx: RuleContext) -> None:
    hour = extract_closing_hour(ctx.text)
    if hour is not None:
        ctx.fire("open_hours", Comparison(field=FilterField.venue_close_hour, op=">=", value=hour))


def proximity_rule(ctx: RuleContext) -> None:
    location = ctx.user_location
    if location is not None and _NEAR_ME_RE.search(ctx.text):
        ctx.geo_anchor = GeoAnchor(
            lat=location.lat,
            lng=location.lng,
            radius_meters=ctx.options.near_me_radius_meters,
        )
        ctx.fire("near_me")
        return

    for city in find_cities(ctx.text):
        ctx.fire("near_city", Equality(field=FilterField.location_city, value=city.capitalize()))


def hashtag_only_rule(ctx: RuleContext) -> None:
    if ctx.text.strip().startswith("#") and _HASHTAG_RE.search(ctx.text):
        ctx.free_text = ""
        ctx.fire("hashtag_only")


RULES: tuple[Rule, ...] = (
    hashtag_rule,
    age_cap_rule,
    sport_rule,
    entity_type_rule,
    boolean_rule,
    experience_rule,
    numeric_rule,
    operating_hours_rule,
    proximity_rule,
    hashtag_only_rule,
)
