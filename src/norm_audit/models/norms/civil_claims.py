"""
Civil Claim and Search Result Models

Norm search matches, relevance groups, claim-basis chains
(Anspruchsgrundlagen) and limitation-period (Verjährung) results.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from norm_audit.models.norms.legal_norm import LegalNorm


class SuccessProbabilityHint(str, Enum):
    """Coarse hint on how well the facts support a claim basis"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNCERTAIN = "uncertain"


# Keyed by value so it works with use_enum_values models
SUCCESS_HINT_RANK = {
    SuccessProbabilityHint.HIGH.value: 4,
    SuccessProbabilityHint.MEDIUM.value: 3,
    SuccessProbabilityHint.LOW.value: 2,
    SuccessProbabilityHint.UNCERTAIN.value: 1,
}


class NormMatchResult(BaseModel):
    """Free-text search match"""

    norm: LegalNorm
    match_score: float = Field(..., ge=0.0, le=1.0)
    matched_keywords: List[str] = Field(default_factory=list)
    match_context: str = Field(default="", description="'<law> <paragraph>: <title>'")


class RelevantNormGroups(BaseModel):
    """Case-relevant norms grouped by norm type (top 5 each)"""

    anspruchsgrundlagen: List[NormMatchResult] = Field(default_factory=list)
    verfahrens_normen: List[NormMatchResult] = Field(default_factory=list)
    fristen_normen: List[NormMatchResult] = Field(default_factory=list)
    strafrecht_normen: List[NormMatchResult] = Field(default_factory=list)


class AnspruchsgrundlageChain(BaseModel):
    """Claim basis with its related objections and defenses"""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    title: str
    anspruchsgrundlage: LegalNorm
    einwendungen: List[LegalNorm] = Field(default_factory=list)
    einreden: List[LegalNorm] = Field(default_factory=list)
    beweislast: str
    keyword_score: float = Field(default=0.0, ge=0.0)
    matched_keywords: List[str] = Field(default_factory=list)
    success_probability_hint: SuccessProbabilityHint


class VerjaehrungsResult(BaseModel):
    """
    Verjährungsberechnung (limitation period calculation)

    Attributes:
        calculated_expiry: ISO-8601 UTC expiry, None without a usable date
        days_remaining: Whole days until expiry, 0 if expired, None without a date
    """

    norm_id: str
    paragraph: str
    period_years: int
    start_event: str
    calculated_expiry: Optional[str] = None
    is_expired: bool = False
    days_remaining: Optional[int] = None
    hemmung_hints: List[str] = Field(default_factory=list)
    neubeginn_hints: List[str] = Field(default_factory=list)
