"""Annotation filter composition from comma separated category terms."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from .vocabulary import (
    AlphaMissense,
    BioType,
    ClinSignificance,
    Consequence,
    FeatureType,
    Impact,
    VariantType,
    lookup,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# AnnotationFilter field -> (vocabulary, wire field name)
CATEGORIES: dict[str, tuple[type[Enum], str]] = {
    "impact": (Impact, "impact"),
    "biotype": (BioType, "biotype"),
    "feature_type": (FeatureType, "ftypes"),
    "variant_type": (VariantType, "vtypes"),
    "consequence": (Consequence, "consequences"),
    "alpha_missense": (AlphaMissense, "amClass"),
    "clin_significance": (ClinSignificance, "clnsgn"),
}


@dataclass(frozen=True)
class AnnotationFilter:
    """Annotation constraints applied by the store.

    Categories combine with AND; values inside one category combine with OR.
    An empty category does not restrict the query.
    """

    gnomad_af_lt: float | None = None
    gnomad_af_gt: float | None = None
    biallelic_only: bool = False
    impact: tuple[Impact, ...] = ()
    biotype: tuple[BioType, ...] = ()
    feature_type: tuple[FeatureType, ...] = ()
    variant_type: tuple[VariantType, ...] = ()
    consequence: tuple[Consequence, ...] = ()
    alpha_missense: tuple[AlphaMissense, ...] = ()
    clin_significance: tuple[ClinSignificance, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_wire()

    def to_wire(self) -> dict[str, Any]:
        """Store annotation message; unset constraints are omitted."""
        message: dict[str, Any] = {}
        if self.gnomad_af_lt is not None:
            message["gnomadAfLt"] = self.gnomad_af_lt
        if self.gnomad_af_gt is not None:
            message["gnomadAfGt"] = self.gnomad_af_gt
        for name, (_, wire_name) in CATEGORIES.items():
            members = getattr(self, name)
            if members:
                message[wire_name] = [m.value for m in members]
        if self.biallelic_only:
            message["biallelicOnly"] = True
        return message


def parse_terms(category: type[E], terms: str | None) -> tuple[E, ...]:
    """Resolve comma separated terms, silently dropping unknown ones.

    Duplicates collapse onto their first occurrence.
    """
    if not terms:
        return ()
    resolved: list[E] = []
    for token in terms.split(","):
        if not token.strip():
            continue
        member = lookup(category, token)
        if member is None:
            logger.debug("Ignoring unrecognized %s term: %r", category.__name__, token)
            continue
        if member not in resolved:
            resolved.append(member)
    return tuple(resolved)


def _af_bound(value: float | None, zero_is_constraint: bool) -> float | None:
    if value is None:
        return None
    if value > 0 or (zero_is_constraint and value == 0):
        return float(value)
    return None


def build_annotation_filter(
    gnomad_af_less_than: float | None = None,
    gnomad_af_greater_than: float | None = None,
    impact: str | None = None,
    biotype: str | None = None,
    feature: str | None = None,
    variant_type: str | None = None,
    consequences: str | None = None,
    alpha_missense: str | None = None,
    clin_significance: str | None = None,
    biallelic_only: bool | None = None,
    *,
    zero_af_is_constraint: bool = False,
) -> AnnotationFilter:
    """Build an AnnotationFilter from loosely typed tool arguments.

    AF bounds count only when strictly positive (a bound of exactly 0 is kept
    when ``zero_af_is_constraint`` is set). ``biallelic_only`` counts only when
    true.
    """
    return AnnotationFilter(
        gnomad_af_lt=_af_bound(gnomad_af_less_than, zero_af_is_constraint),
        gnomad_af_gt=_af_bound(gnomad_af_greater_than, zero_af_is_constraint),
        biallelic_only=biallelic_only is True,
        impact=parse_terms(Impact, impact),
        biotype=parse_terms(BioType, biotype),
        feature_type=parse_terms(FeatureType, feature),
        variant_type=parse_terms(VariantType, variant_type),
        consequence=parse_terms(Consequence, consequences),
        alpha_missense=parse_terms(AlphaMissense, alpha_missense),
        clin_significance=parse_terms(ClinSignificance, clin_significance),
    )
