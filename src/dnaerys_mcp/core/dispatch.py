"""Query dispatch against the variant store.

Each operation normalizes its inputs, issues at most one store call and
interprets the reply. Operations never raise: they return an :class:`Outcome`
holding either the result or the operation's neutral default together with
the reason it was used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any, Generic, TypeVar

from ..clients.store import StoreError, VariantStoreClient
from ..config import DnaerysConfig
from ..constants import DEFAULT_ASSEMBLY, EMPTY_RESULT
from .aggregation import aggregate, samples_by_sex, with_empty_sentinel
from .filters import AnnotationFilter, build_annotation_filter
from .queries import (
    InheritancePattern,
    QueryMode,
    Zygosity,
    build_dataset_info_request,
    build_kinship_request,
    build_region_request,
    build_trio_request,
)
from .serialization import serialize_records
from .validation import (
    RegionSpec,
    normalize_pagination,
    normalize_region,
    normalize_sample,
    normalize_trio,
    region_error,
)
from .vocabulary import Sex

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one operation: a value, plus a diagnostic when it is a default."""

    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value)

    @classmethod
    def fallback(cls, default: T, reason: str) -> "Outcome[T]":
        return cls(default, reason)


@dataclass(frozen=True)
class VariantCriteria:
    """Optional variant selection arguments shared by all region queries."""

    ref_allele: str | None = None
    alt_allele: str | None = None
    variant_min_length: int | None = None
    variant_max_length: int | None = None
    biallelic_only: bool | None = None
    gnomad_af_less_than: float | None = None
    gnomad_af_greater_than: float | None = None
    impact: str | None = None
    biotype: str | None = None
    feature: str | None = None
    variant_type: str | None = None
    consequences: str | None = None
    alpha_missense: str | None = None
    clin_significance: str | None = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "VariantCriteria":
        """Pick the criteria keys out of a tool argument dict."""
        return cls(**{f.name: args.get(f.name) for f in fields(cls)})


@dataclass(frozen=True)
class DatasetInfo:
    variants_total: int = 0
    samples_total: int = 0
    females_total: int = 0
    males_total: int = 0
    nodes_total: int = 0
    sample_names_by_sex: dict[str, list[str]] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.sample_names_by_sex is None:
            del data["sample_names_by_sex"]
        return data


# Neutral defaults
NO_COUNT = 0
NO_KINSHIP = ""


class QueryDispatcher:
    """Runs store queries for the tool handlers.

    The store client is injected so tests can substitute a fake.
    """

    def __init__(
        self,
        client: VariantStoreClient,
        *,
        assembly: str = DEFAULT_ASSEMBLY,
        reset_contradictory_lengths: bool = True,
        zero_af_is_constraint: bool = False,
    ):
        self.client = client
        self.assembly = assembly
        self.reset_contradictory_lengths = reset_contradictory_lengths
        self.zero_af_is_constraint = zero_af_is_constraint

    @classmethod
    def from_config(cls, client: VariantStoreClient, config: DnaerysConfig) -> "QueryDispatcher":
        return cls(
            client,
            assembly=config.assembly,
            reset_contradictory_lengths=config.reset_contradictory_lengths,
            zero_af_is_constraint=config.zero_af_is_constraint,
        )

    # -- Preparation ---------------------------------------------------------

    def _prepare(
        self, chromosome: str | None, start: int | None, end: int | None, criteria: VariantCriteria
    ) -> tuple[RegionSpec | None, AnnotationFilter, str | None]:
        """Normalize region and filter; the third item explains a void region."""
        region = normalize_region(
            chromosome,
            start,
            end,
            criteria.ref_allele,
            criteria.alt_allele,
            criteria.variant_min_length,
            criteria.variant_max_length,
            assembly=self.assembly,
            reset_contradictory_lengths=self.reset_contradictory_lengths,
        )
        reason = None
        if region is None:
            reason = region_error(chromosome, start, end) or (
                f"Contradictory variant length bounds: min={criteria.variant_min_length}, "
                f"max={criteria.variant_max_length}"
            )
            logger.debug("Void region query: %s", reason)
        annotations = build_annotation_filter(
            criteria.gnomad_af_less_than,
            criteria.gnomad_af_greater_than,
            criteria.impact,
            criteria.biotype,
            criteria.feature,
            criteria.variant_type,
            criteria.consequences,
            criteria.alpha_missense,
            criteria.clin_significance,
            criteria.biallelic_only,
            zero_af_is_constraint=self.zero_af_is_constraint,
        )
        return region, annotations, reason

    def _remote(self, method: str, default: T, run: Callable[[], T]) -> Outcome[T]:
        """Run one store interaction, turning any failure into the default."""
        try:
            return Outcome.success(run())
        except StoreError as e:
            logger.error("Variant store call failed: %s", e)
            return Outcome.fallback(default, str(e))
        except Exception as e:  # noqa: BLE001
            logger.exception("Unexpected failure during %s", method)
            return Outcome.fallback(default, f"{method}: {e}")

    def _count(self, method: str, request: dict[str, Any]) -> Outcome[int]:
        return self._remote(
            method, NO_COUNT, lambda: int(self.client.call(method, request).get("count", 0))
        )

    def _select_records(self, method: str, request: dict[str, Any]) -> Outcome[list[str]]:
        def run() -> list[str]:
            batches = self.client.stream(method, request)
            return aggregate(serialize_records(b.get("alleles", [])) for b in batches)

        return self._remote(method, [EMPTY_RESULT], run)

    # -- Region counts and selects -------------------------------------------

    def count_variants(
        self,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
    ) -> Outcome[int]:
        """Number of variants in a region across all samples."""
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback(NO_COUNT, reason)  # type: ignore[arg-type]
        request = build_region_request(region, annotations, QueryMode(zygosity))
        return self._count("countVariantsInRegion", request)

    def count_variants_in_sample(
        self,
        sample_id: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
    ) -> Outcome[int]:
        """Number of variants in a region carried by one sample."""
        sample = normalize_sample(sample_id)
        if sample is None:
            return Outcome.fallback(NO_COUNT, "Sample id is required")
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback(NO_COUNT, reason)  # type: ignore[arg-type]
        request = build_region_request(region, annotations, QueryMode(zygosity, sample))
        return self._count("countVariantsInRegionInSamples", request)

    def select_variants(
        self,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        """One page of variant records in a region."""
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback([EMPTY_RESULT], reason)  # type: ignore[arg-type]
        mode = QueryMode(zygosity, page=normalize_pagination(skip, limit))
        return self._select_records(
            "selectVariantsInRegion", build_region_request(region, annotations, mode)
        )

    def select_variants_in_sample(
        self,
        sample_id: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        """One page of variant records in a region carried by one sample."""
        sample = normalize_sample(sample_id)
        if sample is None:
            return Outcome.fallback([EMPTY_RESULT], "Sample id is required")
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback([EMPTY_RESULT], reason)  # type: ignore[arg-type]
        mode = QueryMode(zygosity, sample, normalize_pagination(skip, limit))
        return self._select_records(
            "selectVariantsInRegionInSamples", build_region_request(region, annotations, mode)
        )

    def count_samples(
        self,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
    ) -> Outcome[int]:
        """Number of samples carrying a matching variant in a region."""
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback(NO_COUNT, reason)  # type: ignore[arg-type]
        request = build_region_request(region, annotations, QueryMode(zygosity))
        return self._count("countSamplesInRegion", request)

    def select_samples(
        self,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        zygosity: Zygosity = Zygosity.ANY,
    ) -> Outcome[list[str]]:
        """Unique ids of samples carrying a matching variant in a region. Not paged."""
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback([EMPTY_RESULT], reason)  # type: ignore[arg-type]
        request = build_region_request(region, annotations, QueryMode(zygosity))
        method = "selectSamplesInRegion"
        return self._remote(
            method,
            [EMPTY_RESULT],
            lambda: with_empty_sentinel(list(self.client.call(method, request).get("samples", []))),
        )

    # -- Trio inheritance ----------------------------------------------------

    def select_inheritance(
        self,
        pattern: InheritancePattern,
        first_parent: str | None,
        second_parent: str | None,
        proband: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        """Variants in the proband matching an inheritance pattern."""
        trio = normalize_trio(first_parent, second_parent, proband)
        if trio is None:
            return Outcome.fallback(
                [EMPTY_RESULT], f"{pattern.name}: all trio sample ids are required"
            )
        region, annotations, reason = self._prepare(chromosome, start, end, criteria)
        if region is None:
            return Outcome.fallback([EMPTY_RESULT], reason)  # type: ignore[arg-type]
        request = build_trio_request(
            pattern, trio, region, annotations, normalize_pagination(skip, limit)
        )
        return self._select_records(pattern.method, request)

    def select_de_novo(
        self,
        parent1: str | None,
        parent2: str | None,
        proband: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        return self.select_inheritance(
            InheritancePattern.DE_NOVO,
            parent1,
            parent2,
            proband,
            chromosome,
            start,
            end,
            criteria,
            skip,
            limit,
        )

    def select_het_dominant(
        self,
        affected_parent: str | None,
        unaffected_parent: str | None,
        proband: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        return self.select_inheritance(
            InheritancePattern.HET_DOMINANT,
            affected_parent,
            unaffected_parent,
            proband,
            chromosome,
            start,
            end,
            criteria,
            skip,
            limit,
        )

    def select_hom_recessive(
        self,
        unaffected_parent1: str | None,
        unaffected_parent2: str | None,
        proband: str | None,
        chromosome: str | None,
        start: int | None,
        end: int | None,
        criteria: VariantCriteria = VariantCriteria(),
        skip: int | None = None,
        limit: int | None = None,
    ) -> Outcome[list[str]]:
        return self.select_inheritance(
            InheritancePattern.HOM_RECESSIVE,
            unaffected_parent1,
            unaffected_parent2,
            proband,
            chromosome,
            start,
            end,
            criteria,
            skip,
            limit,
        )

    # -- Kinship -------------------------------------------------------------

    def kinship(self, sample1: str | None, sample2: str | None) -> Outcome[str]:
        """Relatedness degree between two samples, or "" when none is recorded."""
        first, second = normalize_sample(sample1), normalize_sample(sample2)
        if first is None or second is None:
            return Outcome.fallback(NO_KINSHIP, "Both sample ids are required")
        method = "kinshipDuo"
        request = build_kinship_request(first, second)

        def run() -> str:
            relations = self.client.call(method, request).get("rel", [])
            if not relations:
                return NO_KINSHIP
            return str(relations[0].get("degree", NO_KINSHIP))

        return self._remote(method, NO_KINSHIP, run)

    # -- Dataset metadata ----------------------------------------------------

    def dataset_info(self, include_sample_names: bool = False) -> Outcome[DatasetInfo]:
        method = "datasetInfo"
        request = build_dataset_info_request(include_sample_names)

        def run() -> DatasetInfo:
            response = self.client.call(method, request)
            names = None
            if include_sample_names:
                cohorts = response.get("cohorts", [])
                names = {sex.value: samples_by_sex(cohorts, sex) for sex in Sex}
            return DatasetInfo(
                variants_total=int(response.get("variantsTotal", 0)),
                samples_total=int(response.get("samplesTotal", 0)),
                females_total=int(response.get("femalesTotal", 0)),
                males_total=int(response.get("malesTotal", 0)),
                nodes_total=int(response.get("ringsTotal", 0)),
                sample_names_by_sex=names,
            )

        return self._remote(method, DatasetInfo(), run)

    def sample_ids(self, sex: Sex | None = None) -> Outcome[list[str]]:
        """Sample ids of the dataset, females before males, or of one sex."""
        method = "datasetInfo"
        request = build_dataset_info_request(include_sample_names=True)
        return self._remote(
            method,
            [EMPTY_RESULT],
            lambda: with_empty_sentinel(
                samples_by_sex(self.client.call(method, request).get("cohorts", []), sex)
            ),
        )
