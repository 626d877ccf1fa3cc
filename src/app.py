"""Application composition root.

This module wires settings into the translator options and request defaults used by callers.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.settings import Settings
from src.query.rules import RuleOptions
from src.query.schema import QueryInput, TranslationResult
from src.query.translator import TranslatorOptions, translate
from src.search.request import SearchRequest, build_search_request


@dataclass(frozen=True)
class App:
    """Shared, immutable dependencies for one process."""

    settings: Settings
    options: TranslatorOptions

    def translate(self, query: QueryInput) -> TranslationResult:
        return translate(query, options=self.options)

    def search_request(
            self,
            query: QueryInput,
            result: TranslationResult | None = None,
    ) -> SearchRequest:
        """Shape the backend request for a query, translating it unless `result` is given."""

        if result is None:
            result = self.translate(query)
        fallback = query.user_location if self.settings.around_user_by_default else None
        return build_search_request(
            result,
            index_name=self.settings.search_index_name,
            fallback_location=fallback,
            fallback_radius_meters=self.settings.near_me_radius_meters,
        )


def create_app(settings: Settings) -> App:
    """Create the application container from validated settings."""

    options = TranslatorOptions(
        default_hits_per_page=settings.default_hits_per_page,
        rules=RuleOptions(
            near_me_radius_meters=settings.near_me_radius_meters,
            entry_fee_respects_direction=settings.entry_fee_respects_direction,
        ),
    )
    return App(settings=settings, options=options)
