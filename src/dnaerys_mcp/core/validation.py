"""Normalization of raw tool arguments into bounded query specs.

Every function here is pure. Inputs that cannot form a valid query produce
``None`` (the query is void and must not reach the store); everything else is
clamped into a form the store can always accept.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import (
    DEFAULT_ASSEMBLY,
    DEFAULT_SKIP,
    MAX_PAGE_SIZE,
    MIN_VARIANT_LENGTH,
    UNBOUNDED_LENGTH,
)
from .vocabulary import Chromosome, parse_chromosome


@dataclass(frozen=True)
class LengthBounds:
    """Inclusive variant length range."""

    min_length: int = MIN_VARIANT_LENGTH
    max_length: int = UNBOUNDED_LENGTH

    @property
    def is_unrestricted(self) -> bool:
        return self.min_length == MIN_VARIANT_LENGTH and self.max_length == UNBOUNDED_LENGTH


@dataclass(frozen=True)
class RegionSpec:
    """A validated region query. Coordinates are passed to the store unchanged."""

    chromosome: Chromosome
    start: int
    end: int
    ref: str = ""
    alt: str = ""
    lengths: LengthBounds = LengthBounds()
    assembly: str = DEFAULT_ASSEMBLY


@dataclass(frozen=True)
class PaginationSpec:
    skip: int = DEFAULT_SKIP
    limit: int = MAX_PAGE_SIZE


@dataclass(frozen=True)
class TrioRoles:
    """Sample identifiers of a trio.

    Which parent is affected depends on the inheritance pattern being queried.
    """

    first_parent: str
    second_parent: str
    proband: str


def region_error(chromosome: str | None, start: int | None, end: int | None) -> str | None:
    """Check region coordinates and contig.

    Returns:
        Error message if the region is void, None if valid.
    """
    if start is None or end is None:
        return "Region start and end are required"
    if start < 0:
        return f"Region start must be non-negative, got {start}"
    if end < start:
        return f"Region end ({end}) is before start ({start})"
    if parse_chromosome(chromosome) is None:
        return f"Unrecognized chromosome: {chromosome!r}"
    return None


def normalize_lengths(
    min_length: int | None,
    max_length: int | None,
    *,
    reset_contradictory: bool = True,
) -> LengthBounds | None:
    """Default and reconcile a variant length range.

    A missing or non-positive minimum means 0 and a missing or non-positive
    maximum means unbounded. When the maximum ends up below the minimum the
    pair resets to the unrestricted range, or the query is void if
    ``reset_contradictory`` is off.
    """
    lo = min_length if min_length is not None and min_length > 0 else MIN_VARIANT_LENGTH
    hi = max_length if max_length is not None and max_length > 0 else UNBOUNDED_LENGTH
    if hi < lo:
        if not reset_contradictory:
            return None
        return LengthBounds()
    return LengthBounds(lo, hi)


def normalize_region(
    chromosome: str | None,
    start: int | None,
    end: int | None,
    ref: str | None = None,
    alt: str | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    *,
    assembly: str = DEFAULT_ASSEMBLY,
    reset_contradictory_lengths: bool = True,
) -> RegionSpec | None:
    """Build a RegionSpec, or None when the region cannot be queried."""
    if region_error(chromosome, start, end) is not None:
        return None
    lengths = normalize_lengths(
        min_length, max_length, reset_contradictory=reset_contradictory_lengths
    )
    if lengths is None:
        return None
    return RegionSpec(
        chromosome=parse_chromosome(chromosome),  # type: ignore[arg-type]
        start=start,  # type: ignore[arg-type]
        end=end,  # type: ignore[arg-type]
        ref=ref or "",
        alt=alt or "",
        lengths=lengths,
        assembly=assembly,
    )


def normalize_pagination(skip: int | None = None, limit: int | None = None) -> PaginationSpec:
    """Clamp paging arguments; the limit never exceeds MAX_PAGE_SIZE."""
    if skip is None or skip < 0:
        skip = DEFAULT_SKIP
    if limit is None or limit <= 0 or limit > MAX_PAGE_SIZE:
        limit = MAX_PAGE_SIZE
    return PaginationSpec(skip=skip, limit=limit)


def normalize_sample(sample_id: str | None) -> str | None:
    """Trimmed sample identifier, or None if missing or blank."""
    if sample_id is None:
        return None
    sample_id = sample_id.strip()
    return sample_id or None


def normalize_trio(
    first_parent: str | None, second_parent: str | None, proband: str | None
) -> TrioRoles | None:
    """Build TrioRoles, or None if any role is missing."""
    samples = [normalize_sample(s) for s in (first_parent, second_parent, proband)]
    if any(s is None for s in samples):
        return None
    return TrioRoles(*samples)  # type: ignore[arg-type]
