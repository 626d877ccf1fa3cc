"""Predicate accumulator and filter-expression rendering.

Rendered filters use the backend's boolean filter language: `field:value` for equality,
`field op value` for numeric comparisons, parenthesized `OR` groups, and `AND` between
top-level predicates.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from decimal import Decimal

from src.query.schema import Comparison, Disjunction, Equality, Predicate

_NEEDS_QUOTES_RE = re.compile(r"[\s:()\"]")


def _format_value(value: bool | str | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        if _NEEDS_QUOTES_RE.search(value):
            return '"' + value.replace('"', '\\"') + '"'
        return value
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


def render_predicate(predicate: Predicate) -> str:
    """Render a single predicate."""

    if isinstance(predicate, Equality):
        return f"{predicate.field}:{_format_value(predicate.value)}"
    if isinstance(predicate, Comparison):
        return f"{predicate.field} {predicate.op} {_format_value(predicate.value)}"
    if isinstance(predicate, Disjunction):
        return "(" + " OR ".join(render_predicate(p) for p in predicate.predicates) + ")"
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def render_filters(predicates: Iterable[Predicate]) -> str:
    """Join top-level predicates with `AND`; no predicates renders as an empty string."""

    return " AND ".join(render_predicate(p) for p in predicates)


class FilterBuilder:
    """Ordered, append-only list of top-level predicates.

    Duplicates are kept on purpose: two rules adding `type:coach` produce it twice.
    """

    def __init__(self) -> None:
        self._predicates: list[Predicate] = []

    def append(self, predicate: Predicate) -> None:
        self._predicates.append(predicate)

    def extend(self, predicates: Iterable[Predicate]) -> None:
        for predicate in predicates:
            self.append(predicate)

    def render(self) -> str:
        return render_filters(self._predicates)

    def predicates(self) -> tuple[Predicate, ...]:
        return tuple(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def __bool__(self) -> bool:
        return bool(self._predicates)
