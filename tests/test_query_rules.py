"""Tests for the individual extraction rules, exercised through `translate_text`."""

from __future__ import annotations

import pytest

from src.query.rules import (
    RuleOptions,
    extract_age_cap,
    extract_closing_hour,
    extract_experience,
    extract_hashtags,
    extract_numeric_comparisons,
)
from src.query.schema import Comparison, Disjunction, Equality, FilterField
from src.query.translator import TranslatorOptions, translate_text


def test_hashtags_become_one_disjunction() -> None:
    result = translate_text("best of #CricketTrials and #JuniorCamp")
    assert result.filters == "(hashtags:CricketTrials OR hashtags:JuniorCamp)"
    assert result.trace == ("hashtags",)
    assert isinstance(result.filter_expression[0], Disjunction)
    assert extract_hashtags("no tags here") == []


@pytest.mark.parametrize(
    ("text", "expected"),
    [("u16 players", 16), ("U-18 squad", 18), ("under 14 cricket", 14), ("u 12", 12)],
)
def test_extract_age_cap(text: str, expected: int) -> None:
    assert extract_age_cap(text) == expected


def test_age_cap_ignores_three_digit_amounts() -> None:
    assert extract_age_cap("coach under 100 per session") is None


def test_age_cap_adds_age_and_player_type() -> None:
    result = translate_text("u14 chess")
    assert result.filter_expression[:2] == (
        Comparison(field=FilterField.age, op="<=", value=14),
        Equality(field=FilterField.entity_type, value="player"),
    )


def test_sport_takes_first_vocabulary_entry() -> None:
    result = translate_text("chess or cricket coaching")
    sports = [p for p in result.filter_expression if getattr(p, "field", None) == FilterField.sport]
    assert sports == [Equality(field=FilterField.sport, value="cricket")]


def test_sport_requires_whole_word() -> None:
    assert "sport" not in translate_text("chessboard shop").trace


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("tournaments this weekend", "type:event"),
        ("girls hostel", "type:residence"),
        ("football academy", "sport:football AND type:company"),
        ("venues", "type:venue"),
    ],
)
def test_entity_type_synonyms(text: str, expected: str) -> None:
    assert translate_text(text).filters == expected


def test_entity_type_uses_vocabulary_order() -> None:
    # "coach" precedes "venue" in the keyword table.
    assert translate_text("venue with coach").filters == "type:coach"


def test_boolean_phrases_all_match() -> None:
    result = translate_text("verified public squads open to join")
    assert result.filters == (
        "type:squad AND is_public:true AND open_to_join:true AND verified:true"
    )
    assert result.trace == ("type", "bool:public", "bool:open to join", "bool:verified")


def test_boolean_phrases_are_substring_matches() -> None:
    # "inactive" contains "active".
    assert "bool:active" in translate_text("inactive players").trace


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("coach with experience 5", 5),
        ("experience of > 7 years", 7),
        ("10+ years experience", 10),
        ("3 years exp", 3),
    ],
)
def test_extract_experience(text: str, expected: int) -> None:
    assert extract_experience(text) == expected


def test_experience_adds_years_and_coach_type() -> None:
    result = translate_text("badminton experience 6")
    assert result.filters == "sport:badminton AND experience_years >= 6 AND type:coach"


def test_experience_zero_is_raised_to_one() -> None:
    assert "experience_years >= 1" in translate_text("experience 0").filters


def test_age_cap_zero_does_not_fire() -> None:
    result = translate_text("u0 chess")
    assert result.filters == "sport:chess"
    assert "age_cap" not in result.trace


def test_experience_operator_is_not_a_price() -> None:
    result = translate_text("venue coach experience >= 5")
    assert result.filters == "type:coach AND experience_years >= 5 AND type:coach"
    assert result.trace == ("type", "experience")

    result = translate_text("hostel experience < 3")
    assert "experience_years >= 3" in result.filters
    assert "monthly_price" not in result.filters
    assert not any(step.startswith("numeric:") for step in result.trace)


def test_generic_comparison_after_experience_still_matches() -> None:
    comparisons = extract_numeric_comparisons("venue experience > 5 under 2k")
    assert [(c.field, c.op, c.value) for c in comparisons] == [(None, "<=", 2000)]


def test_coach_price_per_session() -> None:
    result = translate_text("coach under 100 per session")
    assert "price_per_session <= 100" in result.filters
    assert result.trace == ("type", "numeric:price_per_session")


def test_generic_comparison_without_hint_is_dropped() -> None:
    result = translate_text("players under 500")
    assert "<=" not in result.filters


def test_generic_comparison_infers_field_from_keywords() -> None:
    assert translate_text("venue above 1k").filters == "type:venue AND hourly_price >= 1000"
    assert translate_text("monthly rent below 8,000").filters == "monthly_price <= 8000"


def test_tournament_under_duplicates_entry_fee() -> None:
    result = translate_text("tournament under 1000")
    assert result.filters == "type:event AND entry_fee <= 1000 AND entry_fee <= 1000"


def test_entry_fee_ignores_direction_by_default() -> None:
    assert "entry_fee <= 500" in translate_text("entry fee over 500").filters


def test_entry_fee_direction_flag() -> None:
    comparisons = extract_numeric_comparisons(
        "entry fee over 500", entry_fee_respects_direction=True
    )
    entry = [c for c in comparisons if c.field == FilterField.entry_fee]
    assert [(c.op, c.value) for c in entry] == [(">=", 500)]

    options = TranslatorOptions(rules=RuleOptions(entry_fee_respects_direction=True))
    filters = translate_text("entry fee over 500", options=options).filters
    assert "entry_fee >= 500" in filters
    assert "entry_fee <= 500" not in filters


def test_hostel_and_prize_pool() -> None:
    assert "monthly_price <= 5000" in translate_text("hostel under 5k").filters
    assert "prize_pool >= 100000" in translate_text("events with prize pool above 1 lakh").filters


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("venues open after 10pm", 22),
        ("open till 11 pm", 23),
        ("open until 23:00", 23),
        ("open after 22", 22),
    ],
)
def test_extract_closing_hour(text: str, expected: int) -> None:
    assert extract_closing_hour(text) == expected


def test_operating_hours_predicate() -> None:
    result = translate_text("open after 10pm")
    assert result.filters == "venue_timings.close_hour >= 22"
    assert result.trace == ("open_hours",)


def test_operating_hours_out_of_range_does_not_fire() -> None:
    assert "open_hours" not in translate_text("open after 99").trace


def test_near_me_sets_geo_anchor() -> None:
    result = translate_text("gyms near me", lat=19.07, lng=72.87)
    assert result.geo_anchor is not None
    assert result.geo_anchor.radius_meters == 10_000
    assert result.geo_anchor.around_lat_lng == "19.07,72.87"
    assert result.filter_expression == ()
    assert result.trace == ("near_me",)


def test_near_me_radius_is_configurable() -> None:
    options = TranslatorOptions(rules=RuleOptions(near_me_radius_meters=2500))
    result = translate_text("near me", lat=0.0, lng=0.0, options=options)
    assert result.geo_anchor is not None
    assert result.geo_anchor.radius_meters == 2500


@pytest.mark.parametrize("radius", [0, -1])
def test_rule_options_reject_non_positive_radius(radius: int) -> None:
    with pytest.raises(ValueError, match="near_me_radius_meters"):
        RuleOptions(near_me_radius_meters=radius)


def test_near_city_filters_by_capitalized_city() -> None:
    result = translate_text("football turf in pune")
    assert result.filters == "sport:football AND location_city:Pune"
    assert result.geo_anchor is None


def test_near_city_applies_when_near_me_lacks_location() -> None:
    result = translate_text("near me or near delhi")
    assert result.geo_anchor is None
    assert result.filters == "location_city:Delhi"


def test_near_me_takes_precedence_over_city() -> None:
    result = translate_text("near me in mumbai", lat=19.0, lng=72.8)
    assert result.geo_anchor is not None
    assert "location_city" not in result.filters
