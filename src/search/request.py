"""Search backend request builder.

Converts a `TranslationResult` into the request body the hosted search index expects. Only the
payload is built here; sending it is the caller's job.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.query.schema import GeoPoint, TranslationResult

DEFAULT_AROUND_RADIUS_METERS = 10_000
DEFAULT_HIGHLIGHT_ATTRIBUTES: tuple[str, ...] = ("name", "full_name", "title")


class SearchRequest(BaseModel):
    """One index query in the backend's wire format (camelCase on dump)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index_name: str = Field(serialization_alias="indexName")
    query: str
    filters: str | None = None
    page: int = Field(ge=0)
    hits_per_page: int = Field(ge=0, serialization_alias="hitsPerPage")
    around_lat_lng: str | None = Field(default=None, serialization_alias="aroundLatLng")
    around_radius: int | None = Field(default=None, gt=0, serialization_alias="aroundRadius")
    get_ranking_info: bool = Field(default=True, serialization_alias="getRankingInfo")
    attributes_to_highlight: tuple[str, ...] = Field(
        default=DEFAULT_HIGHLIGHT_ATTRIBUTES,
        serialization_alias="attributesToHighlight",
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready payload, omitting unset optional fields."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_multi_search_body(self) -> dict[str, Any]:
        """Wrap the payload in the multi-index `{"requests": [...]}` envelope."""

        return {"requests": [self.to_payload()]}


def build_search_request(
        result: TranslationResult,
        *,
        index_name: str,
        fallback_location: GeoPoint | None = None,
        fallback_radius_meters: int = DEFAULT_AROUND_RADIUS_METERS,
) -> SearchRequest:
    """Build the backend request for a translated query.

    The geo anchor, when present, drives `aroundLatLng`/`aroundRadius`. Otherwise an optional
    `fallback_location` (typically the user's position) centres the search instead.
    """

    around_lat_lng = None
    around_radius = None
    if result.geo_anchor is not None:
        around_lat_lng = result.geo_anchor.around_lat_lng
        around_radius = result.geo_anchor.radius_meters
    elif fallback_location is not None:
        around_lat_lng = f"{fallback_location.lat},{fallback_location.lng}"
        around_radius = fallback_radius_meters

    return SearchRequest(
        index_name=index_name,
        query=result.free_text,
        filters=result.filters or None,
        page=result.page,
        hits_per_page=result.hits_per_page,
        around_lat_lng=around_lat_lng,
        around_radius=around_radius,
    )
