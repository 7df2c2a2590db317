"""
Legal Norm Models
Knowledge-base records and engine result models
"""

from norm_audit.models.norms.legal_norm import (
    # Enums
    Jurisdiction,
    LegalDomain,
    NormType,
    BurdenOfProof,
    StrafrahmenUnit,
    PRIVILEGING_QUALIFICATION_LEVEL,
    # Records
    TatbestandsMerkmal,
    Strafrahmen,
    LegalNorm,
)

from norm_audit.models.norms.tatbestand import (
    TatbestandsMerkmalCheck,
    TatbestandsCheckResult,
)

from norm_audit.models.norms.classification import (
    ReclassificationDirection,
    DetectedQualification,
    QualificationChainResult,
    ReclassificationSuggestion,
    BeweislastCheckResult,
)

from norm_audit.models.norms.case_audit import (
    AuditRiskLevel,
    CaseDocument,
    AuditStats,
    CaseAuditResult,
    FindingType,
    FindingSeverity,
    FindingCitation,
    AuditFinding,
)

from norm_audit.models.norms.civil_claims import (
    SuccessProbabilityHint,
    SUCCESS_HINT_RANK,
    NormMatchResult,
    RelevantNormGroups,
    AnspruchsgrundlageChain,
    VerjaehrungsResult,
)

__all__ = [
    # Enums
    "Jurisdiction",
    "LegalDomain",
    "NormType",
    "BurdenOfProof",
    "StrafrahmenUnit",
    "ReclassificationDirection",
    "AuditRiskLevel",
    "FindingType",
    "FindingSeverity",
    "SuccessProbabilityHint",
    "PRIVILEGING_QUALIFICATION_LEVEL",
    "SUCCESS_HINT_RANK",
    # Knowledge base
    "TatbestandsMerkmal",
    "Strafrahmen",
    "LegalNorm",
    # Results
    "TatbestandsMerkmalCheck",
    "TatbestandsCheckResult",
    "DetectedQualification",
    "QualificationChainResult",
    "ReclassificationSuggestion",
    "BeweislastCheckResult",
    "CaseDocument",
    "AuditStats",
    "CaseAuditResult",
    "FindingCitation",
    "AuditFinding",
    "NormMatchResult",
    "RelevantNormGroups",
    "AnspruchsgrundlageChain",
    "VerjaehrungsResult",
]
