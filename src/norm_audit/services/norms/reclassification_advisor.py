"""
Reclassification Advisor Service

Turns qualification chains into upgrade suggestions and applies the
organized-association heuristic for alternative charges.
"""

import logging
import uuid
from typing import List, Optional, Sequence

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.classification import (
    QualificationChainResult,
    ReclassificationDirection,
    ReclassificationSuggestion,
)
from norm_audit.models.norms.legal_norm import LegalDomain, LegalNorm
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase

logger = logging.getLogger(__name__)


def _new_suggestion_id() -> str:
    return f"reclass:{uuid.uuid4().hex}"


def _strafrahmen_text(norm: LegalNorm) -> Optional[str]:
    return norm.strafrahmen.describe() if norm.strafrahmen else None


class ReclassificationAdvisor:
    """
    Reklassifizierungsvorschläge

    - upgrade: one per qualification chain recommending a qualifying norm
    - alternative: association norm as additional charge for every other
      detected criminal norm, when the association norm itself scores >= 0.25
    """

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def _upgrade_suggestions(
        self, chains: Sequence[QualificationChainResult]
    ) -> List[ReclassificationSuggestion]:
        suggestions: List[ReclassificationSuggestion] = []

        for chain in chains:
            if chain.recommended_norm_id == chain.base_norm_id:
                continue
            base = self._kb.get_norm_by_id(chain.base_norm_id)
            recommended = self._kb.get_norm_by_id(chain.recommended_norm_id)
            if base is None or recommended is None:
                continue

            best = chain.detected_qualifications[0]
            reason = (
                f"Qualifikationsmerkmale für {recommended.title} erkannt: "
                f"{', '.join(best.trigger_indicators[:5])}. "
                f"Score: {round(best.score * 100)}%. "
                f"Prüfung empfohlen, ob statt {base.paragraph} {base.law} "
                f"die Qualifikation {recommended.paragraph} {recommended.law} einschlägig ist."
            )

            suggestions.append(
                ReclassificationSuggestion(
                    id=_new_suggestion_id(),
                    current_norm_id=base.id,
                    current_norm_title=base.display_title,
                    suggested_norm_id=recommended.id,
                    suggested_norm_title=recommended.display_title,
                    direction=ReclassificationDirection.UPGRADE,
                    reason=reason,
                    confidence=best.score,
                    triggered_by_indicators=list(best.trigger_indicators),
                    legal_basis=recommended.citation,
                    strafrahmen_current=_strafrahmen_text(base),
                    strafrahmen_suggested=_strafrahmen_text(recommended),
                )
            )

        return suggestions

    def _association_alternatives(
        self,
        detected_norms: Sequence[TatbestandsCheckResult],
        existing: Sequence[ReclassificationSuggestion],
    ) -> List[ReclassificationSuggestion]:
        association_id = self._params.association_norm_id
        association_check = next((d for d in detected_norms if d.norm_id == association_id), None)
        if (
            association_check is None
            or association_check.overall_score < self._params.association_alternative_min_score
        ):
            return []

        association = self._kb.get_norm_by_id(association_id)
        if association is None:
            return []

        excluded = {association_id, *association.qualified_by}
        pairs = {(s.current_norm_id, s.suggested_norm_id) for s in existing}
        suggestions: List[ReclassificationSuggestion] = []

        for detected in detected_norms:
            if detected.domain != LegalDomain.CRIMINAL or detected.norm_id in excluded:
                continue
            if (detected.norm_id, association_id) in pairs:
                continue
            current = self._kb.get_norm_by_id(detected.norm_id)
            if current is None:
                continue
            pairs.add((detected.norm_id, association_id))

            reason = (
                f"Neben {current.paragraph} {current.law} könnten Indikatoren für eine "
                f"kriminelle Vereinigung ({association.paragraph} {association.law}) vorliegen. "
                "Geprüft werden sollte: organisierter Zusammenschluss, mind. 3 Personen, "
                "gemeinsamer Straftatenzweck. "
                f"Matched: {', '.join(association_check.matched_keywords[:5])}."
            )

            suggestions.append(
                ReclassificationSuggestion(
                    id=_new_suggestion_id(),
                    current_norm_id=current.id,
                    current_norm_title=current.display_title,
                    suggested_norm_id=association.id,
                    suggested_norm_title=association.display_title,
                    direction=ReclassificationDirection.ALTERNATIVE,
                    reason=reason,
                    confidence=association_check.overall_score,
                    triggered_by_indicators=list(association_check.matched_keywords),
                    legal_basis=f"{association.paragraph} {association.law} — {association.title}",
                    strafrahmen_current=_strafrahmen_text(current),
                    strafrahmen_suggested=_strafrahmen_text(association),
                )
            )

        return suggestions

    def generate(
        self,
        detected_norms: Sequence[TatbestandsCheckResult],
        chains: Sequence[QualificationChainResult],
    ) -> List[ReclassificationSuggestion]:
        """
        Generate reclassification suggestions

        Args:
            detected_norms: Output of the norm detector
            chains: Output of the qualification chain analyzer

        Returns:
            Suggestions sorted by confidence descending
        """
        suggestions = self._upgrade_suggestions(chains)
        suggestions.extend(self._association_alternatives(detected_norms, suggestions))
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions
