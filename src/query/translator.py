"""Query translation orchestration.

`translate` runs every extraction rule, in the fixed `RULES` order, against the raw query text and
freezes the accumulated state into a `TranslationResult`. It is pure and synchronous: no I/O, no
shared state, and no exception path for malformed or empty input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.query.rules import RULES, RuleContext, RuleOptions
from src.query.schema import QueryInput, TranslationResult

logger = logging.getLogger(__name__)

DEFAULT_HITS_PER_PAGE = 20
DEFAULT_PAGE = 0


@dataclass(frozen=True)
class TranslatorOptions:
    """Defaults and rule tunables for a translator instance."""

    default_hits_per_page: int = DEFAULT_HITS_PER_PAGE
    rules: RuleOptions = field(default_factory=RuleOptions)


DEFAULT_OPTIONS = TranslatorOptions()


def translate(
        query: QueryInput,
        *,
        options: TranslatorOptions = DEFAULT_OPTIONS,
) -> TranslationResult:
    """Translate a query into free text, filter predicates and an optional geo anchor."""

    ctx = RuleContext(text=query.text, user_location=query.user_location, options=options.rules)
    for rule in RULES:
        rule(ctx)

    # `hitsPerPage: 0` is treated like a missing value.
    hits_per_page = query.hits_per_page or options.default_hits_per_page
    page = query.page if query.page is not None else DEFAULT_PAGE

    result = TranslationResult(
        free_text=ctx.free_text,
        filter_expression=ctx.filters.predicates(),
        geo_anchor=ctx.geo_anchor,
        page=page,
        hits_per_page=hits_per_page,
        trace=tuple(ctx.trace),
    )
    logger.debug(
        "translated rules=%s predicates=%d geo=%s",
        ",".join(result.trace) or "-",
        len(result.filter_expression),
        result.geo_anchor is not None,
    )
    return result


def translate_text(
        text: str | None,
        *,
        lat: float | None = None,
        lng: float | None = None,
        page: int | None = None,
        hits_per_page: int | None = None,
        options: TranslatorOptions = DEFAULT_OPTIONS,
) -> TranslationResult:
    """Convenience wrapper; unusable coordinates or paging values fall back to defaults."""

    query = QueryInput.from_body(
        {"q": text, "lat": lat, "lng": lng, "page": page, "hitsPerPage": hits_per_page}
    )
    return translate(query, options=options)
