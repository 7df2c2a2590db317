"""
Legal Norm Services
Knowledge base, element checks, qualification chains, reclassification,
burden-of-proof analysis and the case audit pipeline
"""

from norm_audit.services.norms.norm_knowledge_base import (
    NormKnowledgeBase,
    LAW_JURISDICTION_FALLBACK,
    infer_jurisdiction,
    get_knowledge_base,
)
from norm_audit.services.norms.text_scoring import (
    KeywordScore,
    tokenize,
    compute_score,
    relevance_total,
    normalize_relevance,
    extract_excerpt,
)
from norm_audit.services.norms.tatbestand_checker import TatbestandChecker
from norm_audit.services.norms.norm_detector import NormDetector
from norm_audit.services.norms.qualification_chain_analyzer import QualificationChainAnalyzer
from norm_audit.services.norms.reclassification_advisor import ReclassificationAdvisor
from norm_audit.services.norms.beweislast_analyzer import BeweislastAnalyzer
from norm_audit.services.norms.anspruchsgrundlage_finder import (
    AnspruchsgrundlageChainFinder,
    classify_success_hint,
)
from norm_audit.services.norms.verjaehrung_calculator import VerjaehrungsCalculator
from norm_audit.services.norms.norm_search_service import NormSearchService
from norm_audit.services.norms.case_audit_orchestrator import CaseAuditOrchestrator
from norm_audit.services.norms.audit_findings import AuditFindingsBuilder

__all__ = [
    # Knowledge base
    "NormKnowledgeBase",
    "LAW_JURISDICTION_FALLBACK",
    "infer_jurisdiction",
    "get_knowledge_base",
    # Text scoring
    "KeywordScore",
    "tokenize",
    "compute_score",
    "relevance_total",
    "normalize_relevance",
    "extract_excerpt",
    # Engine
    "TatbestandChecker",
    "NormDetector",
    "QualificationChainAnalyzer",
    "ReclassificationAdvisor",
    "BeweislastAnalyzer",
    "CaseAuditOrchestrator",
    "AuditFindingsBuilder",
    # Civil helpers
    "AnspruchsgrundlageChainFinder",
    "classify_success_hint",
    "VerjaehrungsCalculator",
    "NormSearchService",
]
