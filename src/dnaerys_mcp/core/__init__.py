"""Query composition, dispatch, and result assembly."""

from .aggregation import aggregate, drain, samples_by_sex, with_empty_sentinel
from .dispatch import DatasetInfo, Outcome, QueryDispatcher, VariantCriteria
from .filters import AnnotationFilter, build_annotation_filter
from .queries import InheritancePattern, QueryMode, Zygosity, build_region_request
from .tools import (
    close_store_client,
    get_dispatcher,
    get_store_client,
    handle_count_samples,
    handle_count_variants,
    handle_dataset_info,
    handle_kinship,
    handle_sample_ids,
    handle_select_inheritance,
    handle_select_samples,
    handle_select_variants,
)
from .validation import (
    LengthBounds,
    PaginationSpec,
    RegionSpec,
    TrioRoles,
    normalize_lengths,
    normalize_pagination,
    normalize_region,
    normalize_trio,
)

__all__ = [
    "AnnotationFilter",
    "DatasetInfo",
    "InheritancePattern",
    "LengthBounds",
    "Outcome",
    "PaginationSpec",
    "QueryDispatcher",
    "QueryMode",
    "RegionSpec",
    "TrioRoles",
    "VariantCriteria",
    "Zygosity",
    "aggregate",
    "build_annotation_filter",
    "build_region_request",
    "close_store_client",
    "drain",
    "get_dispatcher",
    "get_store_client",
    "handle_count_samples",
    "handle_count_variants",
    "handle_dataset_info",
    "handle_kinship",
    "handle_sample_ids",
    "handle_select_inheritance",
    "handle_select_samples",
    "handle_select_variants",
    "normalize_lengths",
    "normalize_pagination",
    "normalize_region",
    "normalize_trio",
    "samples_by_sex",
    "with_empty_sentinel",
]
