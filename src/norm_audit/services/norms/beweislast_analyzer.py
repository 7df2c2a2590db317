"""
Beweislast Analyzer Service

Lists unevidenced required elements and missing evidence for detected
norms that declare a burden of proof.
"""

from typing import Dict, List, Optional, Sequence

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.classification import BeweislastCheckResult
from norm_audit.models.norms.legal_norm import BurdenOfProof, LegalDomain
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase

BURDEN_DESCRIPTIONS: Dict[str, str] = {
    BurdenOfProof.CLAIMANT.value: "Kläger/Ankläger trägt die Beweislast",
    BurdenOfProof.DEFENDANT.value: "Beklagter/Beschuldigter trägt die Beweislast (Exkulpation)",
    BurdenOfProof.SHARED.value: "Geteilte Beweislast",
}

# Terms signalling that the facts reference evidence at all
EVIDENCE_TERMS = ("beweis", "zeuge", "urkunde", "gutachten", "sachverständig", "anlage")

NO_EVIDENCE_GAP = "Keine Beweismittel-Referenzen im Sachverhalt erkannt"


class BeweislastAnalyzer:
    """Beweislast-Analyse"""

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def analyze(
        self,
        detected_norms: Sequence[TatbestandsCheckResult],
        case_text: str,
    ) -> List[BeweislastCheckResult]:
        """
        Analyze burden-of-proof gaps

        Args:
            detected_norms: Output of the norm detector
            case_text: Full case text

        Returns:
            One result per sufficiently scored norm with a declared burden
        """
        lower_text = case_text.lower()
        has_evidence_reference = any(term in lower_text for term in EVIDENCE_TERMS)
        results: List[BeweislastCheckResult] = []

        for check in detected_norms:
            if check.overall_score < self._params.beweislast_min_score:
                continue
            norm = self._kb.get_norm_by_id(check.norm_id)
            if norm is None or norm.burden_of_proof is None:
                continue

            gaps: List[str] = []
            missing_evidence: List[str] = []
            for merkmal in check.merkmale:
                if merkmal.required and not merkmal.fulfilled:
                    gaps.append(f"{merkmal.label}: {merkmal.description} — nicht nachgewiesen")
                    missing_evidence.append(f'Beweis für "{merkmal.label}" fehlt')

            if not has_evidence_reference and norm.domain == LegalDomain.CRIMINAL:
                gaps.append(NO_EVIDENCE_GAP)

            results.append(
                BeweislastCheckResult(
                    norm_id=norm.id,
                    norm_title=norm.display_title,
                    burden=norm.burden_of_proof,
                    burden_description=BURDEN_DESCRIPTIONS[norm.burden_of_proof],
                    identified_gaps=gaps,
                    missing_evidence=missing_evidence,
                )
            )

        return results
