"""Request construction for variant store queries.

All region shaped requests (variant counts and selects, optionally scoped to
one sample, and sample counts and selects) come out of
:func:`build_region_request`; the caller only picks a :class:`QueryMode`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .filters import AnnotationFilter
from .validation import PaginationSpec, RegionSpec, TrioRoles


class Zygosity(Enum):
    """Genotype selection. Value is the (hom, het) flag pair sent to the store."""

    ANY = (True, True)
    HOM = (True, False)
    HET = (False, True)

    @property
    def hom(self) -> bool:
        return self.value[0]

    @property
    def het(self) -> bool:
        return self.value[1]


class InheritancePattern(Enum):
    """Trio inheritance queries: store method and wire names of the three roles."""

    DE_NOVO = ("selectDeNovo", ("parent1", "parent2", "proband"))
    HET_DOMINANT = (
        "selectHetDominant",
        ("affectedParent", "unaffectedParent", "affectedChild"),
    )
    HOM_RECESSIVE = (
        "selectHomRecessive",
        ("unaffectedParent1", "unaffectedParent2", "affectedChild"),
    )

    @property
    def method(self) -> str:
        return self.value[0]

    @property
    def role_fields(self) -> tuple[str, str, str]:
        return self.value[1]


@dataclass(frozen=True)
class QueryMode:
    """What varies between region queries: zygosity, sample scope, paging."""

    zygosity: Zygosity = Zygosity.ANY
    sample_id: str | None = None
    page: PaginationSpec | None = None


def _region_fields(region: RegionSpec, annotations: AnnotationFilter) -> dict[str, Any]:
    return {
        "assembly": region.assembly,
        "chr": region.chromosome.value,
        "start": region.start,
        "end": region.end,
        "ref": region.ref,
        "alt": region.alt,
        "variantMinLength": region.lengths.min_length,
        "variantMaxLength": region.lengths.max_length,
        "ann": annotations.to_wire(),
    }


def _page_fields(page: PaginationSpec) -> dict[str, int]:
    return {"skip": page.skip, "limit": page.limit}


def build_region_request(
    region: RegionSpec, annotations: AnnotationFilter, mode: QueryMode
) -> dict[str, Any]:
    """Build the request body for any region count/select query."""
    request = _region_fields(region, annotations)
    request["hom"] = mode.zygosity.hom
    request["het"] = mode.zygosity.het
    if mode.sample_id is not None:
        request["samples"] = [mode.sample_id]
    if mode.page is not None:
        request.update(_page_fields(mode.page))
    return request


def build_trio_request(
    pattern: InheritancePattern,
    trio: TrioRoles,
    region: RegionSpec,
    annotations: AnnotationFilter,
    page: PaginationSpec,
) -> dict[str, Any]:
    """Build an inheritance query. Zygosity is implied by the pattern."""
    roles = (trio.first_parent, trio.second_parent, trio.proband)
    request: dict[str, Any] = dict(zip(pattern.role_fields, roles))
    request.update(_region_fields(region, annotations))
    request.update(_page_fields(page))
    return request


def build_kinship_request(first_sample: str, second_sample: str) -> dict[str, Any]:
    return {"sample1": first_sample, "sample2": second_sample, "seq": True}


def build_dataset_info_request(include_sample_names: bool = False) -> dict[str, Any]:
    return {"returnSamplesNames": include_sample_names}
