"""
Qualification Chain Analyzer Service

Follows qualification edges from detected base norms and scores the
aggravated or privileged variants, e.g.
§ 263 Betrug -> § 263 Abs. 3 besonders schwerer Fall -> § 263 Abs. 5 Bandenbetrug.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.classification import DetectedQualification, QualificationChainResult
from norm_audit.models.norms.legal_norm import LegalNorm
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase

logger = logging.getLogger(__name__)


class QualificationChainAnalyzer:
    """
    Qualifikationsketten-Analyse

    Scoring per qualifying norm:
        - element weight for each element with at least one indicator present
        - keyword bonus (0.3) for each present keyword
        - kept when the raw score exceeds 0.3, normalized by 3.0
    """

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def score_qualification(self, qual_norm: LegalNorm, lower_text: str) -> Tuple[float, List[str]]:
        """
        Raw qualification score and trigger phrases for one qualifying norm

        Args:
            qual_norm: Qualifying norm
            lower_text: Lowercased case text

        Returns:
            Tuple of (raw score, deduplicated triggers in discovery order)
        """
        score = 0.0
        triggers: List[str] = []

        for merkmal in qual_norm.tatbestands_merkmale:
            present = [i for i in merkmal.indicators if i and i.lower() in lower_text]
            if present:
                score += merkmal.weight
                for indicator in present:
                    if indicator not in triggers:
                        triggers.append(indicator)

        for keyword in qual_norm.keywords:
            if keyword and keyword.lower() in lower_text:
                score += self._params.qualification_keyword_bonus
                if keyword not in triggers:
                    triggers.append(keyword)

        return score, triggers

    def analyze(
        self,
        case_text: str,
        detected_norms: Sequence[TatbestandsCheckResult],
    ) -> List[QualificationChainResult]:
        """
        Build qualification chains for detected base norms

        Args:
            case_text: Full case text
            detected_norms: Output of the norm detector

        Returns:
            One chain per base norm with at least one surviving qualification
        """
        lower_text = case_text.lower()
        chains: List[QualificationChainResult] = []
        seen_bases = set()

        for detected in detected_norms:
            if detected.norm_id in seen_bases:
                continue
            seen_bases.add(detected.norm_id)

            base = self._kb.get_norm_by_id(detected.norm_id)
            if base is None or not base.is_base or not base.qualified_by:
                continue

            qualifications: List[DetectedQualification] = []
            for qual_norm in self._kb.get_qualifying_norms(base.id):
                raw_score, triggers = self.score_qualification(qual_norm, lower_text)
                if raw_score <= self._params.qualification_threshold or not triggers:
                    continue

                level = 1 if qual_norm.qualification_level is None else qual_norm.qualification_level
                qualifications.append(
                    DetectedQualification(
                        norm_id=qual_norm.id,
                        norm_title=qual_norm.title,
                        level=level,
                        score=min(1.0, raw_score / self._params.qualification_normalizer),
                        trigger_indicators=triggers[: self._params.max_trigger_indicators],
                    )
                )

            if not qualifications:
                continue

            qualifications.sort(key=lambda q: (-q.level, -q.score))
            recommended = qualifications[0]
            steps = " → ".join(
                f"{q.norm_title} (Level {q.level}, Score {round(q.score * 100)}%)"
                for q in qualifications
            )

            chains.append(
                QualificationChainResult(
                    base_norm_id=base.id,
                    base_norm_title=base.title,
                    detected_qualifications=qualifications,
                    recommended_norm_id=recommended.norm_id,
                    recommended_norm_title=recommended.norm_title,
                    chain_description=f"{base.law} {base.paragraph} {base.title} → {steps}",
                )
            )

        logger.debug("Built %d qualification chains", len(chains))
        return chains
