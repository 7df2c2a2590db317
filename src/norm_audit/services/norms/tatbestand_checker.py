"""
Tatbestand Checker Service

Checks a norm's structured statutory elements (Tatbestandsmerkmale)
against case text by case-insensitive indicator phrase matching.
"""

import logging
from typing import List, Optional, Sequence

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.legal_norm import LegalNorm, TatbestandsMerkmal
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult, TatbestandsMerkmalCheck
from norm_audit.services.norms.text_scoring import extract_excerpt

logger = logging.getLogger(__name__)


class TatbestandChecker:
    """
    Tatbestandsprüfung

    Evaluates each statutory element of a norm against the case text and
    aggregates fulfillment ratio, weighted score and overall score.
    Exclusion indicators dampen, but do not zero, a positive match.
    """

    def __init__(self, parameters: Optional[ScoringParameters] = None) -> None:
        self._params = parameters or ScoringParameters()

    def _check_merkmal(
        self, merkmal: TatbestandsMerkmal, case_text: str, lower_text: str
    ) -> TatbestandsMerkmalCheck:
        matched: List[str] = []
        excerpts: List[str] = []

        for indicator in merkmal.indicators:
            if indicator and indicator.lower() in lower_text:
                matched.append(indicator)
                if len(excerpts) < self._params.max_excerpts_per_element:
                    excerpt = extract_excerpt(case_text, indicator, self._params.excerpt_radius)
                    if excerpt:
                        excerpts.append(excerpt)

        fulfilled = len(matched) > 0
        if fulfilled:
            saturation = max(len(merkmal.indicators) * self._params.indicator_saturation, 1)
            confidence = min(1.0, len(matched) / saturation)
        else:
            confidence = 0.0

        return TatbestandsMerkmalCheck(
            merkmal_id=merkmal.id,
            label=merkmal.label,
            description=merkmal.description,
            fulfilled=fulfilled,
            confidence=confidence,
            matched_indicators=matched,
            source_excerpts=excerpts,
            required=merkmal.required,
            weight=merkmal.weight,
        )

    def check(
        self,
        norm: LegalNorm,
        case_text: str,
        source_document_ids: Sequence[str] = (),
    ) -> Optional[TatbestandsCheckResult]:
        """
        Check one norm's statutory elements against the case text

        Args:
            norm: Norm to check
            case_text: Full case text
            source_document_ids: IDs of the documents the text came from

        Returns:
            TatbestandsCheckResult, or None if the norm has no elements
        """
        if not norm.has_elements:
            return None

        lower_text = case_text.lower()
        merkmale = [self._check_merkmal(m, case_text, lower_text) for m in norm.tatbestands_merkmale]

        required = [m for m in merkmale if m.required]
        fulfilled_required = [m for m in required if m.fulfilled]
        all_required_fulfilled = len(fulfilled_required) == len(required)

        if required:
            fulfillment_ratio = len(fulfilled_required) / len(required)
        else:
            fulfillment_ratio = sum(1 for m in merkmale if m.fulfilled) / max(len(merkmale), 1)

        total_weight = sum(m.weight for m in merkmale)
        fulfilled_weight = sum(m.weight * m.confidence for m in merkmale if m.fulfilled)
        weighted_score = min(1.0, fulfilled_weight / total_weight) if total_weight > 0 else 0.0

        overall_score = min(
            1.0,
            fulfillment_ratio * self._params.fulfillment_weight
            + weighted_score * self._params.weighted_score_weight,
        )

        matched_keywords = [kw for kw in norm.keywords if kw.lower() in lower_text]

        exclusion_hits = [
            phrase for phrase in norm.exclusion_indicators if phrase and phrase.lower() in lower_text
        ]
        if exclusion_hits:
            logger.debug("Exclusion indicators for %s: %s", norm.id, exclusion_hits)
            overall_score *= self._params.exclusion_factor
            weighted_score *= self._params.exclusion_factor
            all_required_fulfilled = False

        return TatbestandsCheckResult(
            norm_id=norm.id,
            norm_title=norm.title,
            law=norm.law,
            paragraph=norm.paragraph,
            domain=norm.domain,
            merkmale=merkmale,
            overall_score=overall_score,
            fulfillment_ratio=fulfillment_ratio,
            weighted_score=weighted_score,
            all_required_fulfilled=all_required_fulfilled,
            matched_keywords=matched_keywords,
            source_document_ids=list(source_document_ids),
        )
