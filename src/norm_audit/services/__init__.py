"""
Service package

Exports the norm classification engine services.
"""

from norm_audit.services.norms import (
    CaseAuditOrchestrator,
    NormKnowledgeBase,
    NormSearchService,
    get_knowledge_base,
)

__all__ = [
    "CaseAuditOrchestrator",
    "NormKnowledgeBase",
    "NormSearchService",
    "get_knowledge_base",
]
