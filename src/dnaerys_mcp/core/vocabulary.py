"""Controlled vocabularies understood by the variant store.

Each annotation category is an enum whose member names are the store's terms.
Free-text tokens are resolved through :func:`lookup`, which is driven by the
enum members plus a small per-category alias table, so extending a vocabulary
never needs new control flow.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)

# Optional "chr" prefix, then the contig name
_CONTIG_PATTERN = re.compile(r"^(?:chr)?(\d{1,2}|X|Y|M|MT)$", re.IGNORECASE)


class Chromosome(Enum):
    """Contigs of the primary assembly, valued by their wire names."""

    CHR_1 = "CHR_1"
    CHR_2 = "CHR_2"
    CHR_3 = "CHR_3"
    CHR_4 = "CHR_4"
    CHR_5 = "CHR_5"
    CHR_6 = "CHR_6"
    CHR_7 = "CHR_7"
    CHR_8 = "CHR_8"
    CHR_9 = "CHR_9"
    CHR_10 = "CHR_10"
    CHR_11 = "CHR_11"
    CHR_12 = "CHR_12"
    CHR_13 = "CHR_13"
    CHR_14 = "CHR_14"
    CHR_15 = "CHR_15"
    CHR_16 = "CHR_16"
    CHR_17 = "CHR_17"
    CHR_18 = "CHR_18"
    CHR_19 = "CHR_19"
    CHR_20 = "CHR_20"
    CHR_21 = "CHR_21"
    CHR_22 = "CHR_22"
    CHR_X = "CHR_X"
    CHR_Y = "CHR_Y"
    CHR_MT = "CHR_MT"

    @property
    def label(self) -> str:
        """Short contig name, e.g. ``17`` or ``X``."""
        return self.name.removeprefix("CHR_")


class Impact(Enum):
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"
    MODIFIER = "MODIFIER"


class BioType(Enum):
    PROCESSED_TRANSCRIPT = "PROCESSED_TRANSCRIPT"
    LNCRNA = "LNCRNA"
    ANTISENSE = "ANTISENSE"
    MACRO_LNCRNA = "MACRO_LNCRNA"
    NON_CODING = "NON_CODING"
    RETAINED_INTRON = "RETAINED_INTRON"
    SENSE_INTRONIC = "SENSE_INTRONIC"
    SENSE_OVERLAPPING = "SENSE_OVERLAPPING"
    LINCRNA = "LINCRNA"
    NCRNA = "NCRNA"
    MIRNA = "MIRNA"
    MISCRNA = "MISCRNA"
    PIRNA = "PIRNA"
    RRNA = "RRNA"
    SIRNA = "SIRNA"
    SNRNA = "SNRNA"
    SNORNA = "SNORNA"
    TRNA = "TRNA"
    VAULTRNA = "VAULTRNA"
    PROTEIN_CODING = "PROTEIN_CODING"
    PSEUDOGENE = "PSEUDOGENE"
    IG_PSEUDOGENE = "IG_PSEUDOGENE"
    READTHROUGH = "READTHROUGH"
    STOP_CODON_READTHROUGH = "STOP_CODON_READTHROUGH"
    TEC = "TEC"
    TR_GENE = "TR_GENE"
    IG_GENE = "IG_GENE"
    NONSENSE_MEDIATED_DECAY = "NONSENSE_MEDIATED_DECAY"


class FeatureType(Enum):
    TRANSCRIPT = "TRANSCRIPT"
    REGULATORYFEATURE = "REGULATORYFEATURE"
    MOTIFFEATURE = "MOTIFFEATURE"


class VariantType(Enum):
    """Sequence Ontology variant classes."""

    SNV = "SNV"
    INSERTION = "INSERTION"
    DELETION = "DELETION"
    INDEL = "INDEL"
    SUBSTITUTION = "SUBSTITUTION"
    INVERSION = "INVERSION"
    TRANSLOCATION = "TRANSLOCATION"
    DUPLICATION = "DUPLICATION"
    SEQUENCE_ALTERATION = "SEQUENCE_ALTERATION"


class Consequence(Enum):
    """Sequence Ontology consequence terms, most severe first."""

    TRANSCRIPT_ABLATION = "TRANSCRIPT_ABLATION"
    SPLICE_ACCEPTOR_VARIANT = "SPLICE_ACCEPTOR_VARIANT"
    SPLICE_DONOR_VARIANT = "SPLICE_DONOR_VARIANT"
    STOP_GAINED = "STOP_GAINED"
    FRAMESHIFT_VARIANT = "FRAMESHIFT_VARIANT"
    STOP_LOST = "STOP_LOST"
    START_LOST = "START_LOST"
    TRANSCRIPT_AMPLIFICATION = "TRANSCRIPT_AMPLIFICATION"
    INFRAME_INSERTION = "INFRAME_INSERTION"
    INFRAME_DELETION = "INFRAME_DELETION"
    MISSENSE_VARIANT = "MISSENSE_VARIANT"
    PROTEIN_ALTERING_VARIANT = "PROTEIN_ALTERING_VARIANT"
    SPLICE_REGION_VARIANT = "SPLICE_REGION_VARIANT"
    INCOMPLETE_TERMINAL_CODON_VARIANT = "INCOMPLETE_TERMINAL_CODON_VARIANT"
    START_RETAINED_VARIANT = "START_RETAINED_VARIANT"
    STOP_RETAINED_VARIANT = "STOP_RETAINED_VARIANT"
    SYNONYMOUS_VARIANT = "SYNONYMOUS_VARIANT"
    CODING_SEQUENCE_VARIANT = "CODING_SEQUENCE_VARIANT"
    MATURE_MIRNA_VARIANT = "MATURE_MIRNA_VARIANT"
    FIVE_PRIME_UTR_VARIANT = "FIVE_PRIME_UTR_VARIANT"
    THREE_PRIME_UTR_VARIANT = "THREE_PRIME_UTR_VARIANT"
    NON_CODING_TRANSCRIPT_EXON_VARIANT = "NON_CODING_TRANSCRIPT_EXON_VARIANT"
    INTRON_VARIANT = "INTRON_VARIANT"
    NMD_TRANSCRIPT_VARIANT = "NMD_TRANSCRIPT_VARIANT"
    NON_CODING_TRANSCRIPT_VARIANT = "NON_CODING_TRANSCRIPT_VARIANT"
    UPSTREAM_GENE_VARIANT = "UPSTREAM_GENE_VARIANT"
    DOWNSTREAM_GENE_VARIANT = "DOWNSTREAM_GENE_VARIANT"
    TFBS_ABLATION = "TFBS_ABLATION"
    TFBS_AMPLIFICATION = "TFBS_AMPLIFICATION"
    TF_BINDING_SITE_VARIANT = "TF_BINDING_SITE_VARIANT"
    REGULATORY_REGION_ABLATION = "REGULATORY_REGION_ABLATION"
    REGULATORY_REGION_AMPLIFICATION = "REGULATORY_REGION_AMPLIFICATION"
    FEATURE_ELONGATION = "FEATURE_ELONGATION"
    REGULATORY_REGION_VARIANT = "REGULATORY_REGION_VARIANT"
    FEATURE_TRUNCATION = "FEATURE_TRUNCATION"
    INTERGENIC_VARIANT = "INTERGENIC_VARIANT"
    SPLICE_POLYPYRIMIDINE_TRACT_VARIANT = "SPLICE_POLYPYRIMIDINE_TRACT_VARIANT"
    SPLICE_DONOR_5TH_BASE_VARIANT = "SPLICE_DONOR_5TH_BASE_VARIANT"
    SPLICE_DONOR_REGION_VARIANT = "SPLICE_DONOR_REGION_VARIANT"
    CODING_TRANSCRIPT_VARIANT = "CODING_TRANSCRIPT_VARIANT"
    SEQUENCE_VARIANT = "SEQUENCE_VARIANT"


class AlphaMissense(Enum):
    LIKELY_BENIGN = "LIKELY_BENIGN"
    LIKELY_PATHOGENIC = "LIKELY_PATHOGENIC"
    AMBIGUOUS = "AMBIGUOUS"


class ClinSignificance(Enum):
    """ClinVar clinical significance (CLNSIG) classes."""

    CLNSIG_BENIGN = "CLNSIG_BENIGN"
    LIKELY_BENIGN = "LIKELY_BENIGN"
    UNCERTAIN_SIGNIFICANCE = "UNCERTAIN_SIGNIFICANCE"
    LIKELY_PATHOGENIC = "LIKELY_PATHOGENIC"
    PATHOGENIC = "PATHOGENIC"
    DRUG_RESPONSE = "DRUG_RESPONSE"
    ASSOCIATION = "ASSOCIATION"
    RISK_FACTOR = "RISK_FACTOR"
    PROTECTIVE = "PROTECTIVE"
    AFFECTS = "AFFECTS"
    CONFERS_SENSITIVITY = "CONFERS_SENSITIVITY"
    CONFLICTING_INTERPRETATIONS = "CONFLICTING_INTERPRETATIONS"
    LIKELY_PATHOGENIC_LOW_PENETRANCE = "LIKELY_PATHOGENIC_LOW_PENETRANCE"
    PATHOGENIC_LOW_PENETRANCE = "PATHOGENIC_LOW_PENETRANCE"
    UNCERTAIN_RISK_ALLELE = "UNCERTAIN_RISK_ALLELE"
    LIKELY_RISK_ALLELE = "LIKELY_RISK_ALLELE"
    ESTABLISHED_RISK_ALLELE = "ESTABLISHED_RISK_ALLELE"


class Sex(Enum):
    FEMALE = "female"
    MALE = "male"


# Extra spellings accepted per category, keyed by normalized token
ALIASES: dict[type[Enum], dict[str, Enum]] = {
    BioType: {
        "NONSENSE_MEDIATED": BioType.NONSENSE_MEDIATED_DECAY,
        "NMD": BioType.NONSENSE_MEDIATED_DECAY,
        "MISC_RNA": BioType.MISCRNA,
    },
    FeatureType: {
        "REGULATORY_FEATURE": FeatureType.REGULATORYFEATURE,
        "MOTIF_FEATURE": FeatureType.MOTIFFEATURE,
    },
    Consequence: {
        "5_PRIME_UTR_VARIANT": Consequence.FIVE_PRIME_UTR_VARIANT,
        "3_PRIME_UTR_VARIANT": Consequence.THREE_PRIME_UTR_VARIANT,
    },
    ClinSignificance: {
        "BENIGN": ClinSignificance.CLNSIG_BENIGN,
        "CONFLICTING_INTERPRETATIONS_OF_PATHOGENICITY": (
            ClinSignificance.CONFLICTING_INTERPRETATIONS
        ),
    },
}


def _normalize_token(token: str) -> str:
    """Upper-case a token and fold spaces, dashes and slashes into underscores."""
    return re.sub(r"[\s\-/]+", "_", token.strip()).upper()


def lookup(category: type[E], token: str) -> E | None:
    """Resolve a free-text token against a category vocabulary.

    Returns:
        The matching member, or None when the token is not recognized.
    """
    key = _normalize_token(token)
    if not key:
        return None
    member = category.__members__.get(key)
    if member is not None:
        return member
    return ALIASES.get(category, {}).get(key)  # type: ignore[return-value]


def parse_chromosome(token: str | None) -> Chromosome | None:
    """Map a contig token (``1``..``22``, ``X``, ``Y``, ``MT``; ``chr`` prefix optional) to a Chromosome."""
    if token is None:
        return None
    match = _CONTIG_PATTERN.match(token.strip())
    if not match:
        return None
    name = match.group(1).upper()
    if name == "M":
        name = "MT"
    if name.isdigit():
        name = str(int(name))
    return Chromosome.__members__.get(f"CHR_{name}")


def describe(category: type[Enum]) -> str:
    """Comma separated member names, for tool argument descriptions."""
    return ", ".join(category.__members__)
