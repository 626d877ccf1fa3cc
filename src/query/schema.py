"""Translation schema (Pydantic models).

These models are the contract between the rules engine and the search request builder. Every
model is frozen: a `TranslationResult` is never mutated after `translate` returns it.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterField(StrEnum):
    """Backend attributes a predicate may target."""

    hashtags = "hashtags"
    age = "age"
    entity_type = "type"
    sport = "sport"
    experience_years = "experience_years"
    price_per_session = "price_per_session"
    entry_fee = "entry_fee"
    monthly_price = "monthly_price"
    hourly_price = "hourly_price"
    prize_pool = "prize_pool"
    venue_close_hour = "venue_timings.close_hour"
    location_city = "location_city"
    is_public = "is_public"
    open_to_join = "open_to_join"
    verified = "verified"
    is_active = "is_active"


class EntityType(StrEnum):
    """Record types stored in the search index."""

    player = "player"
    coach = "coach"
    venue = "venue"
    residence = "residence"
    event = "event"
    squad = "squad"
    company = "company"
    post = "post"


Comparator = Literal["<=", ">="]


class Equality(BaseModel):
    """`field:value` condition."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["equality"] = "equality"
    field: FilterField
    value: bool | str


class Comparison(BaseModel):
    """`field op value` numeric condition."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["comparison"] = "comparison"
    field: FilterField
    op: Comparator
    value: int | float


class Disjunction(BaseModel):
    """OR-group of simple predicates, rendered parenthesized."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["disjunction"] = "disjunction"
    predicates: tuple[Equality | Comparison, ...] = Field(min_length=1)


Predicate = Annotated[Equality | Comparison | Disjunction, Field(discriminator="kind")]


class GeoPoint(BaseModel):
    """A WGS84 coordinate pair."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class GeoAnchor(BaseModel):
    """Point + radius for a proximity search."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    radius_meters: int = Field(gt=0)

    @property
    def around_lat_lng(self) -> str:
        return f"{self.lat},{self.lng}"


def _coerce_non_negative_int(value: Any) -> int | None:
    """Best-effort conversion of a paging value; unusable input becomes `None`."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    elif not isinstance(value, int):
        return None
    return value if value >= 0 else None


def _coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class QueryInput(BaseModel):
    """A single search request as received from the caller."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = ""
    user_location: GeoPoint | None = None
    page: int | None = None
    hits_per_page: int | None = None

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("page", "hits_per_page", mode="before")
    @classmethod
    def coerce_paging(cls, value: Any) -> int | None:
        """Normalize paging values; anything that is not a non-negative integer is dropped."""

        return _coerce_non_negative_int(value)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> QueryInput:
        """Build an input from an HTTP JSON body `{q, lat?, lng?, page?, hitsPerPage?}`.

        Never raises: a missing or out-of-range coordinate pair simply yields no user location.
        """

        lat = _coerce_float(body.get("lat"))
        lng = _coerce_float(body.get("lng"))
        location = None
        if lat is not None and lng is not None and -90 <= lat <= 90 and -180 <= lng <= 180:
            location = GeoPoint(lat=lat, lng=lng)

        return cls(
            text=body.get("q"),
            user_location=location,
            page=body.get("page"),
            hits_per_page=body.get("hitsPerPage"),
        )


class TranslationResult(BaseModel):
    """Structured query produced by the rules engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    free_text: str
    filter_expression: tuple[Predicate, ...] = ()
    geo_anchor: GeoAnchor | None = None
    page: int = Field(default=0, ge=0)
    hits_per_page: int = Field(default=20, ge=0)
    trace: tuple[str, ...] = ()

    @property
    def filters(self) -> str:
        """The rendered filter expression (empty string when no rule fired)."""

        from src.query.filters import render_filters

        return render_filters(self.filter_expression)
