"""
Classification Result Models

Qualification chains, reclassification suggestions and
burden-of-proof (Beweislast) analysis results.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from norm_audit.models.norms.legal_norm import BurdenOfProof


class ReclassificationDirection(str, Enum):
    """Direction of a reclassification suggestion"""

    UPGRADE = "upgrade"  # toward an aggravated qualification
    DOWNGRADE = "downgrade"
    ALTERNATIVE = "alternative"  # additional or alternative charge


class DetectedQualification(BaseModel):
    """Qualifying norm detected for a base norm"""

    norm_id: str
    norm_title: str
    level: int = Field(..., ge=0, description="Qualification level")
    score: float = Field(..., ge=0.0, le=1.0, description="Normalized qualification score")
    trigger_indicators: List[str] = Field(default_factory=list, description="Triggering phrases (max 10)")


class QualificationChainResult(BaseModel):
    """
    Qualifikationskette

    Base norm with its detected qualifications, sorted by level
    descending then score descending.
    """

    base_norm_id: str
    base_norm_title: str
    detected_qualifications: List[DetectedQualification] = Field(..., min_length=1)
    recommended_norm_id: str
    recommended_norm_title: str
    chain_description: str


class ReclassificationSuggestion(BaseModel):
    """Reklassifizierungsvorschlag"""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    current_norm_id: str
    current_norm_title: str
    suggested_norm_id: str
    suggested_norm_title: str
    direction: ReclassificationDirection
    reason: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    triggered_by_indicators: List[str] = Field(default_factory=list)
    legal_basis: str
    strafrahmen_current: Optional[str] = None
    strafrahmen_suggested: Optional[str] = None


class BeweislastCheckResult(BaseModel):
    """Beweislast-Analyse for one detected norm"""

    model_config = ConfigDict(use_enum_values=True)

    norm_id: str
    norm_title: str
    burden: BurdenOfProof
    burden_description: str
    identified_gaps: List[str] = Field(default_factory=list)
    missing_evidence: List[str] = Field(default_factory=list)
