"""
Norm Detector Service

Runs the Tatbestand check over every knowledge-base norm with structured
elements and keeps the ones clearing a minimum score.
"""

import logging
from typing import List, Optional, Sequence

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase
from norm_audit.services.norms.tatbestand_checker import TatbestandChecker

logger = logging.getLogger(__name__)


class NormDetector:
    """Detect applicable norms for a case text"""

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        checker: Optional[TatbestandChecker] = None,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()
        self._checker = checker or TatbestandChecker(self._params)

    def detect_applicable_norms(
        self,
        case_text: str,
        source_document_ids: Sequence[str] = (),
        min_score: Optional[float] = None,
    ) -> List[TatbestandsCheckResult]:
        """
        Check all norms with statutory elements against the case text

        Args:
            case_text: Full case text
            source_document_ids: IDs of the source documents
            min_score: Minimum overall score (default 0.15)

        Returns:
            Check results with overall_score >= min_score, best first
        """
        threshold = self._params.min_detection_score if min_score is None else min_score

        results: List[TatbestandsCheckResult] = []
        for norm in self._kb.get_norms_with_elements():
            check = self._checker.check(norm, case_text, source_document_ids)
            if check is not None and check.overall_score >= threshold:
                results.append(check)

        results.sort(key=lambda r: r.overall_score, reverse=True)
        logger.debug("Detected %d norms (min_score=%.2f)", len(results), threshold)
        return results
