"""
Norm Search Service

Free-text norm search, case relevance grouping by norm type, prompt
context blocks and a jurisdiction-grouped registry export.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.civil_claims import NormMatchResult, RelevantNormGroups
from norm_audit.models.norms.legal_norm import LegalNorm, NormType
from norm_audit.services.norms.norm_knowledge_base import JurisdictionFilter, NormKnowledgeBase
from norm_audit.services.norms.text_scoring import normalize_relevance, relevance_total, tokenize

logger = logging.getLogger(__name__)

CONTEXT_BLOCK_HEADER = "## Einschlaegige Rechtsnormen"


def _match_context(norm: LegalNorm) -> str:
    return f"{norm.law} {norm.paragraph}: {norm.title}"


class NormSearchService:
    """Normensuche"""

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def search_norms(
        self,
        query: str,
        limit: int = 10,
        jurisdictions: JurisdictionFilter = None,
    ) -> List[NormMatchResult]:
        """
        Search norms by keyword and description overlap

        Args:
            query: Free-text query
            limit: Maximum results
            jurisdictions: Optional jurisdiction filter

        Returns:
            Matches sorted by match score descending
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        results: List[NormMatchResult] = []
        for norm in self._kb.get_all_norms(jurisdictions):
            total, matched = relevance_total(tokens, norm)
            if total > self._params.search_min_total:
                results.append(
                    NormMatchResult(
                        norm=norm,
                        match_score=normalize_relevance(total),
                        matched_keywords=matched,
                        match_context=_match_context(norm),
                    )
                )

        results.sort(key=lambda r: r.match_score, reverse=True)
        return results[: max(limit, 0)]

    def _rank_group(self, tokens, norms: Iterable[LegalNorm]) -> List[NormMatchResult]:
        scored = []
        for norm in norms:
            total, matched = relevance_total(tokens, norm)
            score = normalize_relevance(total)
            if score > self._params.relevance_group_min_score:
                scored.append(
                    NormMatchResult(
                        norm=norm,
                        match_score=score,
                        matched_keywords=matched,
                        match_context=_match_context(norm),
                    )
                )
        scored.sort(key=lambda r: r.match_score, reverse=True)
        return scored[: self._params.relevance_group_limit]

    def get_relevant_norms_for_case(self, case_text: str) -> RelevantNormGroups:
        """Top norms per group: claim bases, procedure, deadlines, criminal"""
        tokens = tokenize(case_text)
        return RelevantNormGroups(
            anspruchsgrundlagen=self._rank_group(
                tokens, self._kb.get_norms_by_type(NormType.ANSPRUCHSGRUNDLAGE)
            ),
            verfahrens_normen=self._rank_group(
                tokens, self._kb.get_norms_by_type(NormType.VERFAHRENSVORSCHRIFT)
            ),
            fristen_normen=self._rank_group(tokens, self._kb.get_norms_by_type(NormType.FRIST)),
            strafrecht_normen=self._rank_group(
                tokens, self._kb.get_norms_by_type(NormType.STRAFNORM)
            ),
        )

    def build_norm_context_block(
        self,
        norm_ids: Sequence[str],
        jurisdictions: JurisdictionFilter = None,
    ) -> str:
        """
        Render norms as a markdown context block

        Unknown ids and norms outside the jurisdiction filter are skipped;
        an empty string is returned when nothing remains.
        """
        allowed = {n.id for n in self._kb.get_all_norms(jurisdictions)}
        norms = [
            norm
            for norm in (self._kb.get_norm_by_id(i) for i in norm_ids)
            if norm is not None and norm.id in allowed
        ]
        if not norms:
            return ""

        lines = [CONTEXT_BLOCK_HEADER]
        for n in norms:
            lines.append(
                f"- **{n.law} {n.paragraph}** [{n.jurisdiction}] ({n.title}): {n.short_description}"
            )
        return "\n".join(lines)

    def export_registry(self) -> Dict[str, Any]:
        """
        Export the knowledge base grouped by jurisdiction

        Returns:
            Dict with version info, counts and serialized norms per jurisdiction
        """
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for norm in self._kb:
            grouped.setdefault(norm.jurisdiction, []).append(norm.model_dump(mode="json"))

        return {
            "version_info": self._kb.version_info,
            "total_norms": len(self._kb),
            "counts_by_jurisdiction": {j: len(norms) for j, norms in sorted(grouped.items())},
            "counts_by_domain": dict(sorted(Counter(n.domain for n in self._kb).items())),
            "jurisdictions": {j: grouped[j] for j in sorted(grouped)},
        }
