"""Route descriptors: the four gateway routes expressed as data.

Each route shares the same pipeline (origin policy, method guard,
sanitation, credential, single upstream call, response mapping); only
what is described here differs between them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from listing_gateway.services.params import (
    DEFAULT_PAGE_SIZE,
    AllowlistSpec,
    clamp_page_size,
    normalize_autocomplete_query,
)


@dataclass(frozen=True, slots=True)
class CachePolicy:
    max_age: int
    stale_while_revalidate: int

    def header_value(self) -> str:
        return f"s-maxage={self.max_age}, stale-while-revalidate={self.stale_while_revalidate}"


class NotFoundMode(str, enum.Enum):
    """How an upstream 404 is reported to the client."""

    UPSTREAM_ERROR = "upstream_error"  # 502 like any other non-2xx
    LISTING_NOT_FOUND = "listing_not_found"  # 404 "Listing not found"
    EMPTY_SUGGESTIONS = "empty_suggestions"  # 200 with no suggestions


@dataclass(frozen=True, slots=True)
class RouteSpec:
    name: str
    upstream_path: str
    allowlist: AllowlistSpec | None = None
    cache_policy: CachePolicy | None = None
    not_found: NotFoundMode = NotFoundMode.UPSTREAM_ERROR

    @property
    def log_name(self) -> str:
        return f"repliers-{self.name}"

    def cache_control(self) -> str:
        return self.cache_policy.header_value() if self.cache_policy else "no-store"


SEARCH_PARAMS = AllowlistSpec(
    names=frozenset(
        {
            "city",
            "neighborhood",
            "area",
            "minPrice",
            "maxPrice",
            "minBeds",
            "maxBeds",
            "minBaths",
            "maxBaths",
            "propertyType",
            "status",
            "pageNum",
            "resultsPerPage",
            "sortBy",
            "sortOrder",
            "class",
            "type",
            "lastStatus",
        }
    ),
    transforms={"resultsPerPage": clamp_page_size},
    defaults={"resultsPerPage": str(DEFAULT_PAGE_SIZE)},
)

AUTOCOMPLETE_PARAMS = AllowlistSpec(
    names=frozenset({"q"}),
    transforms={"q": normalize_autocomplete_query},
    # Missing q goes through the transform so it fails the length check.
    defaults={"q": ""},
)

SEARCH = RouteSpec(
    name="listings",
    upstream_path="/listings",
    allowlist=SEARCH_PARAMS,
    cache_policy=CachePolicy(max_age=60, stale_while_revalidate=120),
)

DETAIL = RouteSpec(
    name="listing-detail",
    upstream_path="/listings/{listing_id}",
    cache_policy=CachePolicy(max_age=120, stale_while_revalidate=300),
    not_found=NotFoundMode.LISTING_NOT_FOUND,
)

AUTOCOMPLETE = RouteSpec(
    name="autocomplete",
    upstream_path="/autocomplete",
    allowlist=AUTOCOMPLETE_PARAMS,
    cache_policy=CachePolicy(max_age=300, stale_while_revalidate=600),
    not_found=NotFoundMode.EMPTY_SUGGESTIONS,
)

HEALTH = RouteSpec(name="health", upstream_path="/listings")

HEALTH_CHECK_PARAMS = {"resultsPerPage": "1"}
