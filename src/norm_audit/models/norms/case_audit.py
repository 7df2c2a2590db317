"""
Case Audit Models

Input documents, aggregate audit result and review findings.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from norm_audit.models.norms.classification import (
    BeweislastCheckResult,
    QualificationChainResult,
    ReclassificationSuggestion,
)
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult


class AuditRiskLevel(str, Enum):
    """
    Aggregate case risk level.

    Score Ranges (defaults):
        LOW: 0-19
        MEDIUM: 20-44
        HIGH: 45-69
        CRITICAL: 70-100
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CaseDocument(BaseModel):
    """Case document text supplied by the caller"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Document ID")
    text: str = Field(default="", description="Normalized document text")
    title: Optional[str] = Field(default=None, description="Optional display title")


class AuditStats(BaseModel):
    """Summary statistics of a case audit"""

    total_documents_audited: int = Field(default=0, ge=0)
    total_norms_detected: int = Field(default=0, ge=0)
    total_reclassifications: int = Field(default=0, ge=0)
    total_qualification_upgrades: int = Field(default=0, ge=0)
    total_beweislast_gaps: int = Field(default=0, ge=0)
    high_confidence_norms: int = Field(default=0, ge=0)


class CaseAuditResult(BaseModel):
    """
    Aktenaudit result

    Plain serializable value; all cross-references to the knowledge base
    are string norm IDs.
    """

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(..., description="Audit ID (audit:<uuid>)")
    case_id: str
    workspace_id: str
    audited_document_ids: List[str] = Field(default_factory=list)
    detected_norms: List[TatbestandsCheckResult] = Field(default_factory=list)
    qualification_chains: List[QualificationChainResult] = Field(default_factory=list)
    reclassifications: List[ReclassificationSuggestion] = Field(default_factory=list)
    beweislast_analysis: List[BeweislastCheckResult] = Field(default_factory=list)
    overall_risk_score: int = Field(..., ge=0, le=100, description="Aggregate risk (0 ~ 100)")
    risk_level: AuditRiskLevel
    summary: str
    stats: AuditStats = Field(default_factory=AuditStats)
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    audit_duration_ms: int = Field(default=0, ge=0)


# ==============================================================================
# Review Findings
# ==============================================================================


class FindingType(str, Enum):
    """Review finding category"""

    NORM_ERROR = "norm_error"
    NORM_SUGGESTION = "norm_suggestion"
    EVIDENCE_GAP = "evidence_gap"


class FindingSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FindingCitation(BaseModel):
    """Supporting quote for a finding"""

    document_id: str
    quote: str


class AuditFinding(BaseModel):
    """Review finding derived from a case audit"""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    case_id: str
    workspace_id: str
    type: FindingType
    title: str
    description: str
    severity: FindingSeverity
    confidence: float = Field(..., ge=0.0, le=1.0)
    source_document_ids: List[str] = Field(default_factory=list)
    citations: List[FindingCitation] = Field(default_factory=list)
    related_norm_ids: List[str] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO-8601 UTC timestamp")
