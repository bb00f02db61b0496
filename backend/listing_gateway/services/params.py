"""Query-parameter sanitation.

Only allowlisted names ever reach the upstream URL. Values stay opaque
strings; they are URL-encoded into the query string, never interpreted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from listing_gateway.errors import InvalidRequestError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 100

# Listing ids are alphanumeric with dashes/underscores. ASCII only.
_LISTING_ID_RE = re.compile(r"[\w-]+", re.ASCII)
# Path segments that a naive routing setup could mistake for an id.
_RESERVED_LISTING_IDS = frozenset({"listing"})
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

Transform = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class AllowlistSpec:
    """Permitted query names for one route.

    ``defaults`` are fed through the matching transform when the client
    omits the key (or sends it empty), so transformed keys are always set.
    """

    names: frozenset[str]
    transforms: Mapping[str, Transform] = field(default_factory=dict)
    defaults: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = (set(self.transforms) | set(self.defaults)) - self.names
        if unknown:
            raise ValueError(f"Transforms/defaults for non-allowlisted names: {sorted(unknown)}")
        object.__setattr__(self, "transforms", MappingProxyType(dict(self.transforms)))
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))


def sanitize_query(raw: Mapping[str, str], allowlist: AllowlistSpec) -> dict[str, str]:
    """Filter ``raw`` down to the allowlist, applying transforms and defaults.

    Unknown keys are dropped silently so newer clients can send parameters
    this gateway does not know about yet.
    """
    sanitized: dict[str, str] = {}
    dropped: list[str] = []

    for key, value in raw.items():
        if key not in allowlist.names:
            dropped.append(key)
            continue
        if not value:
            continue
        transform = allowlist.transforms.get(key)
        sanitized[key] = transform(value) if transform else value

    for key, default in allowlist.defaults.items():
        if key not in sanitized:
            transform = allowlist.transforms.get(key)
            sanitized[key] = transform(default) if transform else default

    if dropped:
        logger.debug("Dropped non-allowlisted query params: %s", sorted(dropped))
    return sanitized


def clamp_page_size(value: str) -> str:
    """Parse a page size leniently and clamp it to ``1..MAX_PAGE_SIZE``.

    Leading digits are honoured (``"12abc"`` → 12); anything non-numeric
    or non-positive falls back to ``DEFAULT_PAGE_SIZE``.
    """
    match = _LEADING_INT_RE.match(value)
    size = int(match.group(1)) if match else DEFAULT_PAGE_SIZE
    if size <= 0:
        size = DEFAULT_PAGE_SIZE
    return str(min(size, MAX_PAGE_SIZE))


def normalize_autocomplete_query(value: str) -> str:
    if len(value) < MIN_QUERY_LENGTH:
        raise InvalidRequestError(f"Query must be at least {MIN_QUERY_LENGTH} characters")
    return value[:MAX_QUERY_LENGTH].strip()


def is_valid_listing_id(value: str | None) -> bool:
    return bool(value) and _LISTING_ID_RE.fullmatch(value) is not None


def validate_listing_id(value: str | None) -> str:
    if not value or value in _RESERVED_LISTING_IDS:
        raise InvalidRequestError("Listing ID required")
    if not is_valid_listing_id(value):
        raise InvalidRequestError("Invalid listing ID format")
    return value
