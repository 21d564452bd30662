"""MCP server setup for dnaerys-mcp using FastMCP."""

import asyncio
import inspect
from collections.abc import Callable
from enum import Enum
from functools import lru_cache, partial
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .config import DnaerysConfig
from .constants import DATASET_NAME, MAX_PAGE_SIZE
from .core.queries import InheritancePattern, Zygosity
from .core.tools import (
    handle_count_samples,
    handle_count_variants,
    handle_dataset_info,
    handle_kinship,
    handle_sample_ids,
    handle_select_inheritance,
    handle_select_samples,
    handle_select_variants,
)
from .core.vocabulary import (
    AlphaMissense,
    BioType,
    ClinSignificance,
    Consequence,
    FeatureType,
    Impact,
    VariantType,
    describe,
)


def _terms(what: str, category: type[Enum]) -> str:
    return (
        f"A comma separated list of {what}. "
        "If more than one value provided, relation between them is logical disjunction, "
        "i.e. selects variants which have ANY of annotations provided. "
        f"Possible values: {describe(category)}"
    )


# -- Tool arguments ----------------------------------------------------------

Chromosome = Annotated[str, Field(description="chromosome ID, in a form of 1, 2, ..., 22, X, Y, MT")]
Start = Annotated[int, Field(description="start of region")]
End = Annotated[int, Field(description="end of region")]
SampleId = Annotated[str, Field(description="sample id")]
RefAllele = Annotated[str | None, Field(description="reference allele bases (REF)")]
AltAllele = Annotated[str | None, Field(description="alternative allele bases (ALT)")]
MinLength = Annotated[int | None, Field(description="minimal variant length")]
MaxLength = Annotated[int | None, Field(description="maximal variant length")]
BiallelicOnly = Annotated[bool | None, Field(description="select biallelic variants only")]
AfLessThan = Annotated[
    float | None, Field(description="select variants with gnomAD AF < gnomad_af_less_than")
]
AfGreaterThan = Annotated[
    float | None, Field(description="select variants with gnomAD AF > gnomad_af_greater_than")
]
ImpactTerms = Annotated[str | None, Field(description=_terms("VEP impact terms", Impact))]
BiotypeTerms = Annotated[str | None, Field(description=_terms("VEP biotypes terms", BioType))]
FeatureTerms = Annotated[
    str | None, Field(description=_terms("VEP feature types terms", FeatureType))
]
VariantTypeTerms = Annotated[
    str | None,
    Field(description=_terms("Sequence Ontology Variant Classes terms", VariantType)),
]
ConsequenceTerms = Annotated[
    str | None,
    Field(description=_terms("Sequence Ontology variant consequences", Consequence)),
]
AlphaMissenseTerms = Annotated[
    str | None, Field(description=_terms("AlphaMissense classes", AlphaMissense))
]
ClinSigTerms = Annotated[
    str | None,
    Field(description=_terms("ClinVar Clinical Significance annotations", ClinSignificance)),
]
Skip = Annotated[int | None, Field(description="number of items to be skipped in returned result")]
Limit = Annotated[
    int | None, Field(description=f"limit items in returned result, at most {MAX_PAGE_SIZE}")
]


# -- Tool descriptions -------------------------------------------------------

_REGION_NOTE = (
    "A region is defined by chromosome ID, start and end coordinates in GRCh38 assembly. "
    "Chromosome ID is in a form of 1, 2, ..., 22, X, Y, MT. "
)
_FILTER_NOTE = (
    "Optional ALT and REF alleles and variant length bounds can be provided as selection "
    "parameters. Optional filtering by gnomAD AF, VEP impact, VEP biotype, VEP feature type, "
    "Sequence Ontology variant class, Sequence Ontology consequence, AlphaMissense class, "
    "ClinVar clinical significance, and biallelic variants. If more than one filtering "
    "criteria of different types is provided, relation between them is logical conjunction."
)
_EMPTY_NOTE = "Returns an empty json if nothing is found (empty json is NOT an error). "
_PAGING_NOTE = (
    f" Use 'skip' and 'limit' parameters for pagination if needed. "
    f"The Max value for limit = {MAX_PAGE_SIZE}."
)

# Tool name infix and description adjective per zygosity
_ZYGOSITY_NAMES: dict[Zygosity, tuple[str, str]] = {
    Zygosity.ANY: ("", ""),
    Zygosity.HOM: ("homozygous_", "Homozygous "),
    Zygosity.HET: ("heterozygous_", "Heterozygous "),
}


def _describe(summary: str, *, listing: bool = False, paged: bool = False) -> str:
    text = f"{summary} in {DATASET_NAME}. "
    if listing:
        text += _EMPTY_NOTE
    text += _REGION_NOTE + _FILTER_NOTE
    if paged:
        text += _PAGING_NOTE
    return text


# -- Tool factories ----------------------------------------------------------
# One signature per query shape; the zygosity variants of a shape share it.
# Each tool hands its arguments to a blocking handler on a worker thread.


@lru_cache(maxsize=None)
def _parameter_names(fn: Callable[..., Any]) -> tuple[str, ...]:
    return tuple(inspect.signature(fn).parameters)


def _arguments(fn: Callable[..., Any], scope: dict[str, Any]) -> dict[str, Any]:
    """Values of fn's own parameters, taken from its locals()."""
    return {name: scope[name] for name in _parameter_names(fn)}


def _region_count_tool(run: Callable[[dict[str, Any]], int]) -> Callable[..., Any]:
    async def tool(
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
    ) -> int:
        return await asyncio.to_thread(run, _arguments(tool, locals()))

    return tool


def _sample_count_tool(run: Callable[[dict[str, Any]], int]) -> Callable[..., Any]:
    async def tool(
        chromosome: Chromosome,
        start: Start,
        end: End,
        sample_id: SampleId,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
    ) -> int:
        return await asyncio.to_thread(run, _arguments(tool, locals()))

    return tool


def _region_list_tool(run: Callable[[dict[str, Any]], list[str]]) -> Callable[..., Any]:
    async def tool(
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
    ) -> list[str]:
        return await asyncio.to_thread(run, _arguments(tool, locals()))

    return tool


def _region_page_tool(run: Callable[[dict[str, Any]], list[str]]) -> Callable[..., Any]:
    async def tool(
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
        skip: Skip = None,
        limit: Limit = None,
    ) -> list[str]:
        return await asyncio.to_thread(run, _arguments(tool, locals()))

    return tool


def _sample_page_tool(run: Callable[[dict[str, Any]], list[str]]) -> Callable[..., Any]:
    async def tool(
        chromosome: Chromosome,
        start: Start,
        end: End,
        sample_id: SampleId,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
        skip: Skip = None,
        limit: Limit = None,
    ) -> list[str]:
        return await asyncio.to_thread(run, _arguments(tool, locals()))

    return tool


def create_server(config: DnaerysConfig | None = None) -> FastMCP:
    """Create and configure the dnaerys-mcp server."""
    if config is None:
        config = DnaerysConfig.from_env()

    mcp = FastMCP(name="dnaerys", host=config.host, port=config.port)

    # -- Region tools --------------------------------------------------------

    for zygosity, (infix, adjective) in _ZYGOSITY_NAMES.items():
        region_tools = [
            (
                f"count_{infix}variants_in_region",
                _region_count_tool(partial(handle_count_variants, config=config, zygosity=zygosity)),
                _describe(f"Returns number of {adjective}variants in a region"),
            ),
            (
                f"count_{infix}variants_in_region_in_sample",
                _sample_count_tool(partial(handle_count_variants, config=config, zygosity=zygosity)),
                _describe(f"Returns number of {adjective}variants in sample in a region"),
            ),
            (
                f"select_{infix}variants_in_region",
                _region_page_tool(partial(handle_select_variants, config=config, zygosity=zygosity)),
                _describe(f"Returns {adjective}variants in a region", listing=True, paged=True),
            ),
            (
                f"select_{infix}variants_in_region_in_sample",
                _sample_page_tool(partial(handle_select_variants, config=config, zygosity=zygosity)),
                _describe(
                    f"Returns {adjective}variants in sample in a region", listing=True, paged=True
                ),
            ),
            (
                f"count_samples_with_{infix}variants_in_region",
                _region_count_tool(partial(handle_count_samples, config=config, zygosity=zygosity)),
                _describe(f"Returns number of samples which have {adjective}variants in a region"),
            ),
            (
                f"select_samples_with_{infix}variants_in_region",
                _region_list_tool(partial(handle_select_samples, config=config, zygosity=zygosity)),
                _describe(
                    f"Returns unique samples which have {adjective}variants in a region",
                    listing=True,
                ),
            ),
        ]
        for name, fn, description in region_tools:
            mcp.tool(name=name, description=description)(fn)

    # -- Trio tools ----------------------------------------------------------

    @mcp.tool(
        description=_describe(
            "Returns De Novo variants in a proband in trio in a region", listing=True, paged=True
        )
    )
    async def de_novo_in_trio(
        parent1: Annotated[str, Field(description="sample id for parent 1")],
        parent2: Annotated[str, Field(description="sample id for parent 2")],
        proband: Annotated[str, Field(description="sample id for proband")],
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
        skip: Skip = None,
        limit: Limit = None,
    ) -> list[str]:
        args = _arguments(de_novo_in_trio, locals())
        return await asyncio.to_thread(
            handle_select_inheritance, args, config, InheritancePattern.DE_NOVO
        )

    @mcp.tool(
        description=_describe(
            "Returns heterozygous dominant variants in affected child in a trio in a region",
            listing=True,
            paged=True,
        )
    )
    async def het_dominant_in_trio(
        affected_parent: Annotated[str, Field(description="sample id for affected parent")],
        unaffected_parent: Annotated[str, Field(description="sample id for unaffected parent")],
        proband: Annotated[str, Field(description="sample id for affected child")],
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
        skip: Skip = None,
        limit: Limit = None,
    ) -> list[str]:
        args = _arguments(het_dominant_in_trio, locals())
        return await asyncio.to_thread(
            handle_select_inheritance, args, config, InheritancePattern.HET_DOMINANT
        )

    @mcp.tool(
        description=_describe(
            "Returns homozygous recessive variants in affected child in a trio in a region",
            listing=True,
            paged=True,
        )
    )
    async def hom_recessive_in_trio(
        unaffected_parent1: Annotated[str, Field(description="sample id for unaffected parent 1")],
        unaffected_parent2: Annotated[str, Field(description="sample id for unaffected parent 2")],
        proband: Annotated[str, Field(description="sample id for affected child")],
        chromosome: Chromosome,
        start: Start,
        end: End,
        ref_allele: RefAllele = None,
        alt_allele: AltAllele = None,
        variant_min_length: MinLength = None,
        variant_max_length: MaxLength = None,
        biallelic_only: BiallelicOnly = None,
        gnomad_af_less_than: AfLessThan = None,
        gnomad_af_greater_than: AfGreaterThan = None,
        impact: ImpactTerms = None,
        biotype: BiotypeTerms = None,
        feature: FeatureTerms = None,
        variant_type: VariantTypeTerms = None,
        consequences: ConsequenceTerms = None,
        alpha_missense: AlphaMissenseTerms = None,
        clin_significance: ClinSigTerms = None,
        skip: Skip = None,
        limit: Limit = None,
    ) -> list[str]:
        args = _arguments(hom_recessive_in_trio, locals())
        return await asyncio.to_thread(
            handle_select_inheritance, args, config, InheritancePattern.HOM_RECESSIVE
        )

    @mcp.tool(
        description=(
            f"Returns degree of relatedness (kinship) between samples in {DATASET_NAME}. "
            "Samples are defined by sample ID. Returns an empty string if the samples "
            "are not related."
        )
    )
    async def kinship(
        sample1: Annotated[str, Field(description="sample id 1")],
        sample2: Annotated[str, Field(description="sample id 2")],
    ) -> str:
        return await asyncio.to_thread(
            handle_kinship, {"sample1": sample1, "sample2": sample2}, config
        )

    # -- Dataset tools -------------------------------------------------------

    def _total(key: str) -> Callable[..., Any]:
        async def tool() -> int:
            info = await asyncio.to_thread(handle_dataset_info, {}, config)
            return int(info[key])

        return tool

    totals = {
        "count_samples_total": ("samples_total", "Returns number of samples"),
        "count_female_samples_total": ("females_total", "Returns number of female samples"),
        "count_male_samples_total": ("males_total", "Returns number of male samples"),
        "variants_total": ("variants_total", "Returns number of variants"),
    }
    for name, (key, summary) in totals.items():
        mcp.tool(name=name, description=f"{summary} in {DATASET_NAME}")(_total(key))

    mcp.tool(name="nodes_total", description="Returns number of nodes in database cluster")(
        _total("nodes_total")
    )

    def _sample_ids(sex: str | None) -> Callable[..., Any]:
        async def tool() -> list[str]:
            return await asyncio.to_thread(handle_sample_ids, {"sex": sex}, config)

        return tool

    sample_listings = {
        "sample_ids": (None, "Returns all sample IDs"),
        "female_sample_ids": ("female", "Returns all female sample IDs"),
        "male_sample_ids": ("male", "Returns all male sample IDs"),
    }
    for name, (sex, summary) in sample_listings.items():
        mcp.tool(name=name, description=f"{summary} in {DATASET_NAME}")(_sample_ids(sex))

    @mcp.tool(
        description=(
            f"Returns totals of variants, samples, female and male samples in {DATASET_NAME}, "
            "and the number of database cluster nodes. Optionally lists sample IDs by sex."
        )
    )
    async def dataset_info(
        include_sample_names: Annotated[
            bool, Field(description="also return sample IDs grouped by sex")
        ] = False,
    ) -> dict[str, Any]:
        return await asyncio.to_thread(
            handle_dataset_info, {"include_sample_names": include_sample_names}, config
        )

    return mcp
