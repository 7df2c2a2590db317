"""
Anspruchsgrundlage Chain Finder Service

Finds civil claim bases supported by a fact text together with their
related objections (Einwendungen) and defenses (Einreden).
"""

import logging
from typing import List, Optional

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.civil_claims import (
    SUCCESS_HINT_RANK,
    AnspruchsgrundlageChain,
    SuccessProbabilityHint,
)
from norm_audit.models.norms.legal_norm import BurdenOfProof, NormType
from norm_audit.services.norms.norm_knowledge_base import JurisdictionFilter, NormKnowledgeBase
from norm_audit.services.norms.text_scoring import compute_score, tokenize

logger = logging.getLogger(__name__)

CLAIM_BURDEN_TEXT = {
    BurdenOfProof.CLAIMANT.value: "Kläger trägt Beweislast",
    BurdenOfProof.DEFENDANT.value: "Beklagter trägt Beweislast (Exkulpation)",
    BurdenOfProof.SHARED.value: "Geteilte Beweislast",
}
UNKNOWN_BURDEN_TEXT = "Beweislast nicht hinterlegt"


def classify_success_hint(score: float, matched_count: int) -> SuccessProbabilityHint:
    """
    Map a keyword score to a success probability hint

    high: score > 1.5 with at least 3 matched keywords
    medium: score > 0.8
    low: score > 0.3
    """
    if score > 1.5 and matched_count >= 3:
        return SuccessProbabilityHint.HIGH
    if score > 0.8:
        return SuccessProbabilityHint.MEDIUM
    if score > 0.3:
        return SuccessProbabilityHint.LOW
    return SuccessProbabilityHint.UNCERTAIN


class AnspruchsgrundlageChainFinder:
    """Anspruchsgrundlagen-Suche"""

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def find_anspruchsgrundlagen(
        self,
        fact_text: str,
        jurisdictions: JurisdictionFilter = None,
    ) -> List[AnspruchsgrundlageChain]:
        """
        Find claim bases supported by the fact text

        Args:
            fact_text: Free-form description of the facts
            jurisdictions: Optional jurisdiction filter

        Returns:
            Claim chains sorted by success hint (high first)
        """
        tokens = tokenize(fact_text)
        allowed = {n.id for n in self._kb.get_all_norms(jurisdictions)}
        chains: List[AnspruchsgrundlageChain] = []

        for norm in self._kb.get_norms_by_type(NormType.ANSPRUCHSGRUNDLAGE, jurisdictions):
            keyword_score = compute_score(tokens, norm.keywords)
            if keyword_score.score <= self._params.claim_min_score:
                continue

            related = [n for n in self._kb.get_related_norms(norm.id) if n.id in allowed]

            chains.append(
                AnspruchsgrundlageChain(
                    id=f"chain:{norm.id}",
                    title=norm.display_title,
                    anspruchsgrundlage=norm,
                    einwendungen=[n for n in related if n.type == NormType.EINWENDUNG],
                    einreden=[n for n in related if n.type == NormType.EINREDE],
                    beweislast=CLAIM_BURDEN_TEXT.get(norm.burden_of_proof, UNKNOWN_BURDEN_TEXT),
                    keyword_score=keyword_score.score,
                    matched_keywords=keyword_score.matched_keywords,
                    success_probability_hint=classify_success_hint(
                        keyword_score.score, len(keyword_score.matched_keywords)
                    ),
                )
            )

        chains.sort(key=lambda c: SUCCESS_HINT_RANK[c.success_probability_hint], reverse=True)
        logger.debug("Found %d claim bases", len(chains))
        return chains
