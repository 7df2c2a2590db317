"""
Legal Norm Data Models

Pydantic models for the statutory norm knowledge base: norms, their
structured statutory elements (Tatbestandsmerkmale) and sentencing ranges.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==============================================================================
# Enums
# ==============================================================================


class Jurisdiction(str, Enum):
    """Jurisdictions covered by the knowledge base"""

    AT = "AT"
    DE = "DE"
    CH = "CH"
    FR = "FR"
    IT = "IT"
    PT = "PT"
    PL = "PL"
    EU = "EU"
    ECHR = "ECHR"


class LegalDomain(str, Enum):
    """Rechtsgebiet (area of law)"""

    CIVIL = "civil"
    CRIMINAL = "criminal"
    ADMINISTRATIVE = "administrative"
    LABOR = "labor"
    TAX = "tax"
    CONSTITUTIONAL = "constitutional"
    COMMERCIAL = "commercial"
    FAMILY = "family"
    SOCIAL = "social"
    INSOLVENCY = "insolvency"


class NormType(str, Enum):
    """Normtyp (functional role of a norm)"""

    ANSPRUCHSGRUNDLAGE = "anspruchsgrundlage"  # claim basis
    EINWENDUNG = "einwendung"  # objection negating the claim
    EINREDE = "einrede"  # defense, right to refuse performance
    VERFAHRENSVORSCHRIFT = "verfahrensvorschrift"  # procedural rule
    BEWEISLAST = "beweislast"  # burden-of-proof rule
    FRIST = "frist"  # limitation / deadline rule
    DEFINITION = "definition"
    STRAFNORM = "strafnorm"
    STRAFTATBESTAND = "straftatbestand"
    SCHUTZGESETZ = "schutzgesetz"  # protective statute (§ 823 II BGB)
    ORDNUNGSWIDRIGKEITEN = "ordnungswidrigkeiten"


class BurdenOfProof(str, Enum):
    """Beweislastverteilung"""

    CLAIMANT = "claimant"
    DEFENDANT = "defendant"
    SHARED = "shared"


class StrafrahmenUnit(str, Enum):
    """Sentencing unit"""

    FREIHEITSSTRAFE = "freiheitsstrafe"
    GELDSTRAFE = "geldstrafe"
    FREIHEITSSTRAFE_ODER_GELDSTRAFE = "freiheitsstrafe_oder_geldstrafe"


# Reserved qualification level for privileging variants (e.g. § 213 StGB)
PRIVILEGING_QUALIFICATION_LEVEL = 3


# ==============================================================================
# Knowledge Base Records
# ==============================================================================


class TatbestandsMerkmal(BaseModel):
    """
    Tatbestandsmerkmal (statutory element)

    One element of an offense or claim that must be factually established
    for the norm to apply. Indicators are lowercase phrases searched for
    in the case text.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Element ID (e.g. tb-242-1)")
    label: str = Field(..., description="Short element label")
    description: str = Field(default="", description="Element description")
    indicators: List[str] = Field(default_factory=list, description="Indicator phrases")
    weight: float = Field(..., ge=0.0, le=1.0, description="Element weight (0.0 ~ 1.0)")
    required: bool = Field(default=True, description="Element is mandatory")


class Strafrahmen(BaseModel):
    """Statutory sentencing range"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    min: Optional[str] = Field(default=None, description="Lower bound (e.g. '6 Monate')")
    max: Optional[str] = Field(default=None, description="Upper bound (e.g. '10 Jahre')")
    unit: StrafrahmenUnit = Field(..., description="Sentencing unit")

    def describe(self) -> str:
        """Render as '<min> bis <max>'."""
        return f"{self.min or ''} bis {self.max or ''}".strip()


class LegalNorm(BaseModel):
    """
    Rechtsnorm (statutory norm)

    Immutable knowledge-base record. Cross-references (related norms,
    qualification edges) are stored as string ids and resolved by the
    knowledge base.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Stable norm ID (e.g. stgb-242)")
    jurisdiction: Optional[Jurisdiction] = Field(
        default=None, description="Jurisdiction (inferred from law when absent)"
    )
    law: str = Field(..., min_length=1, description="Statute abbreviation (e.g. StGB)")
    paragraph: str = Field(..., description="Section label (e.g. § 242)")
    title: str = Field(..., description="Norm title")
    short_description: str = Field(default="", description="One-line summary")
    domain: LegalDomain = Field(..., description="Area of law")
    type: NormType = Field(..., description="Functional norm type")
    prerequisites: List[str] = Field(default_factory=list)
    legal_consequence: str = Field(default="")
    related_norms: List[str] = Field(default_factory=list, description="Related norm IDs")
    limitation_period_years: Optional[int] = Field(default=None, ge=0)
    limitation_start: Optional[str] = Field(default=None)
    burden_of_proof: Optional[BurdenOfProof] = Field(default=None)
    keywords: List[str] = Field(default_factory=list)
    qualification_of: Optional[str] = Field(default=None, description="Base norm ID")
    qualified_by: List[str] = Field(default_factory=list, description="Qualifying norm IDs")
    qualification_level: Optional[int] = Field(
        default=None,
        ge=0,
        le=PRIVILEGING_QUALIFICATION_LEVEL,
        description="0 = base, 1-2 = aggravated, 3 = privileging",
    )
    strafrahmen: Optional[Strafrahmen] = Field(default=None)
    tatbestands_merkmale: List[TatbestandsMerkmal] = Field(default_factory=list)
    exclusion_indicators: List[str] = Field(default_factory=list)

    @property
    def citation(self) -> str:
        """'<law> <paragraph>', e.g. 'StGB § 242'"""
        return f"{self.law} {self.paragraph}"

    @property
    def display_title(self) -> str:
        return f"{self.law} {self.paragraph} — {self.title}"

    @property
    def is_base(self) -> bool:
        """Base norms have qualification level 0 or none."""
        return self.qualification_level in (0, None)

    @property
    def has_elements(self) -> bool:
        return len(self.tatbestands_merkmale) > 0
