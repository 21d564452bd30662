"""MCP tool handlers for dnaerys-mcp.

Handlers are the outermost boundary of every operation: they take the raw tool
arguments, run the dispatcher, and collapse its Outcome to a bare value. They
never raise. A default result caused by bad input or a failed store call is
logged here and otherwise looks exactly like "no data" to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from ..clients.store import VariantStoreClient
from ..config import DnaerysConfig
from ..constants import EMPTY_RESULT
from .dispatch import Outcome, QueryDispatcher, VariantCriteria
from .queries import InheritancePattern, Zygosity
from .vocabulary import Sex, lookup

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Module-level singletons: one store connection per server process
_store_client: VariantStoreClient | None = None
_dispatcher: QueryDispatcher | None = None

# Tool argument names of the three trio roles, per pattern
TRIO_ARGS: dict[InheritancePattern, tuple[str, str, str]] = {
    InheritancePattern.DE_NOVO: ("parent1", "parent2", "proband"),
    InheritancePattern.HET_DOMINANT: ("affected_parent", "unaffected_parent", "proband"),
    InheritancePattern.HOM_RECESSIVE: ("unaffected_parent1", "unaffected_parent2", "proband"),
}


def get_store_client(config: DnaerysConfig) -> VariantStoreClient:
    """Get or create the singleton variant store client."""
    global _store_client
    if _store_client is None:
        _store_client = VariantStoreClient(
            base_url=config.store_url,
            api_key=config.store_api_key,
            timeout=config.store_timeout,
        )
    return _store_client


def get_dispatcher(config: DnaerysConfig) -> QueryDispatcher:
    """Get or create the singleton dispatcher bound to the shared store client."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = QueryDispatcher.from_config(get_store_client(config), config)
    return _dispatcher


def close_store_client() -> None:
    """Close the shared store connection, if one was opened."""
    global _store_client, _dispatcher
    if _store_client is not None:
        _store_client.close()
    _store_client = None
    _dispatcher = None


def _collapse(tool: str, outcome: Outcome[T]) -> T:
    if not outcome.ok:
        logger.warning("%s returned its default: %s", tool, outcome.error)
    return outcome.value


def _region(args: dict[str, Any]) -> tuple[Any, Any, Any]:
    return args.get("chromosome"), args.get("start"), args.get("end")


# -- Tool Handlers -----------------------------------------------------------


def handle_count_variants(
    args: dict[str, Any], config: DnaerysConfig, zygosity: Zygosity = Zygosity.ANY
) -> int:
    """Count variants in a region; scoped to one sample when ``sample_id`` is passed."""
    dispatcher = get_dispatcher(config)
    criteria = VariantCriteria.from_args(args)
    if "sample_id" in args:
        outcome = dispatcher.count_variants_in_sample(
            args["sample_id"], *_region(args), criteria, zygosity
        )
        return _collapse("count_variants_in_sample", outcome)
    return _collapse(
        "count_variants", dispatcher.count_variants(*_region(args), criteria, zygosity)
    )


def handle_select_variants(
    args: dict[str, Any], config: DnaerysConfig, zygosity: Zygosity = Zygosity.ANY
) -> list[str]:
    """Return one page of variants; scoped to one sample when ``sample_id`` is passed."""
    dispatcher = get_dispatcher(config)
    criteria = VariantCriteria.from_args(args)
    skip, limit = args.get("skip"), args.get("limit")
    if "sample_id" in args:
        outcome = dispatcher.select_variants_in_sample(
            args["sample_id"], *_region(args), criteria, zygosity, skip, limit
        )
        return _collapse("select_variants_in_sample", outcome)
    outcome = dispatcher.select_variants(*_region(args), criteria, zygosity, skip, limit)
    return _collapse("select_variants", outcome)


def handle_count_samples(
    args: dict[str, Any], config: DnaerysConfig, zygosity: Zygosity = Zygosity.ANY
) -> int:
    outcome = get_dispatcher(config).count_samples(
        *_region(args), VariantCriteria.from_args(args), zygosity
    )
    return _collapse("count_samples", outcome)


def handle_select_samples(
    args: dict[str, Any], config: DnaerysConfig, zygosity: Zygosity = Zygosity.ANY
) -> list[str]:
    outcome = get_dispatcher(config).select_samples(
        *_region(args), VariantCriteria.from_args(args), zygosity
    )
    return _collapse("select_samples", outcome)


def handle_select_inheritance(
    args: dict[str, Any], config: DnaerysConfig, pattern: InheritancePattern
) -> list[str]:
    """Return variants in a trio's proband matching an inheritance pattern."""
    roles = [args.get(name) for name in TRIO_ARGS[pattern]]
    outcome = get_dispatcher(config).select_inheritance(
        pattern,
        *roles,
        *_region(args),
        VariantCriteria.from_args(args),
        args.get("skip"),
        args.get("limit"),
    )
    return _collapse(f"select_{pattern.name.lower()}", outcome)


def handle_kinship(args: dict[str, Any], config: DnaerysConfig) -> str:
    outcome = get_dispatcher(config).kinship(args.get("sample1"), args.get("sample2"))
    return _collapse("kinship", outcome)


def handle_dataset_info(args: dict[str, Any], config: DnaerysConfig) -> dict[str, Any]:
    """Dataset totals, with sample names by sex when ``include_sample_names`` is set."""
    outcome = get_dispatcher(config).dataset_info(bool(args.get("include_sample_names")))
    return _collapse("dataset_info", outcome).to_dict()


def handle_sample_ids(args: dict[str, Any], config: DnaerysConfig) -> list[str]:
    """All sample ids (females first), or those of the sex named by ``sex``."""
    sex = None
    if args.get("sex") is not None:
        sex = lookup(Sex, str(args["sex"]))
        if sex is None:
            logger.warning("sample_ids returned its default: unknown sex %r", args["sex"])
            return [EMPTY_RESULT]
    return _collapse("sample_ids", get_dispatcher(config).sample_ids(sex))
