"""Assembly of store responses into bounded result lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from ..constants import EMPTY_RESULT
from .vocabulary import Sex

T = TypeVar("T")

# Cohort message field holding sample names of each sex
_SEX_FIELDS = {
    Sex.FEMALE: "femaleSamplesNames",
    Sex.MALE: "maleSamplesNames",
}


def drain(batches: Iterable[Sequence[T]]) -> list[T]:
    """Flatten batches in arrival order, keeping order within each batch."""
    items: list[T] = []
    for batch in batches:
        items.extend(batch)
    return items


def with_empty_sentinel(items: list[str]) -> list[str]:
    """Replace an empty result with the one element "no data" marker."""
    return items if items else [EMPTY_RESULT]


def aggregate(batches: Iterable[Sequence[str]]) -> list[str]:
    """Drain batches into one list; never returns an empty list."""
    return with_empty_sentinel(drain(batches))


def samples_by_sex(cohorts: Iterable[Mapping[str, Any]], sex: Sex | None = None) -> list[str]:
    """Sample names across cohorts, all females first and then all males.

    Within one sex the store's cohort and sample order is preserved.
    """
    cohorts = list(cohorts)
    partitions = [sex] if sex is not None else [Sex.FEMALE, Sex.MALE]
    return drain(
        cohort.get(_SEX_FIELDS[part], []) for part in partitions for cohort in cohorts
    )
