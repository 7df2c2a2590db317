"""
Case Audit Orchestrator

Top-level Aktenaudit pipeline: concatenates case documents, detects
norms, analyzes qualification chains, reclassifications and burden-of-proof
gaps, and aggregates a case risk score.
"""

import logging
import math
import time
import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from norm_audit.config import get_engine_config
from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.case_audit import (
    AuditRiskLevel,
    AuditStats,
    CaseAuditResult,
    CaseDocument,
)
from norm_audit.models.norms.classification import (
    BeweislastCheckResult,
    QualificationChainResult,
    ReclassificationDirection,
    ReclassificationSuggestion,
)
from norm_audit.models.norms.legal_norm import LegalDomain
from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.beweislast_analyzer import BeweislastAnalyzer
from norm_audit.services.norms.norm_detector import NormDetector
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase, get_knowledge_base
from norm_audit.services.norms.qualification_chain_analyzer import QualificationChainAnalyzer
from norm_audit.services.norms.reclassification_advisor import ReclassificationAdvisor

logger = logging.getLogger(__name__)

DocumentInput = Union[CaseDocument, Mapping[str, Any]]

INSUFFICIENT_TEXT_SUMMARY = "Kein ausreichender Text für Aktenaudit vorhanden."

RISK_LABELS = {
    AuditRiskLevel.LOW.value: "Niedriges Risiko",
    AuditRiskLevel.MEDIUM.value: "Mittleres Risiko",
    AuditRiskLevel.HIGH.value: "Hohes Risiko",
    AuditRiskLevel.CRITICAL.value: "Kritisches Risiko",
}


class CaseAuditOrchestrator:
    """
    Aktenaudit pipeline.

    Risk Formula:
        sum(criminal norm score * 20) + upgrades * 15 + beweislast gaps * 5
        + 25 if the organized-association norm scores >= 0.3,
        clamped to 0-100 and rounded

    Risk Level Mapping:
        - 0-19: LOW
        - 20-44: MEDIUM
        - 45-69: HIGH
        - 70-100: CRITICAL
    """

    def __init__(
        self,
        knowledge_base: Optional[NormKnowledgeBase] = None,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        """
        Initialize the CaseAuditOrchestrator.

        Args:
            knowledge_base: Norm knowledge base (default: shared bundled instance)
            parameters: Scoring parameters (default: engine configuration)
        """
        self._kb = knowledge_base if knowledge_base is not None else get_knowledge_base()
        self._params = (
            parameters if parameters is not None else get_engine_config().get_scoring_parameters()
        )

        self._detector = NormDetector(self._kb, parameters=self._params)
        self._chain_analyzer = QualificationChainAnalyzer(self._kb, self._params)
        self._advisor = ReclassificationAdvisor(self._kb, self._params)
        self._beweislast_analyzer = BeweislastAnalyzer(self._kb, self._params)

    @property
    def knowledge_base(self) -> NormKnowledgeBase:
        return self._kb

    @property
    def parameters(self) -> ScoringParameters:
        return self._params

    # ==========================================================================
    # Scoring helpers
    # ==========================================================================

    def map_score_to_risk_level(self, score: float) -> AuditRiskLevel:
        """
        Map a numeric score (0-100) to an AuditRiskLevel.

        Args:
            score: Aggregate risk score.

        Returns:
            Corresponding AuditRiskLevel.
        """
        if score >= self._params.risk_critical_threshold:
            return AuditRiskLevel.CRITICAL
        elif score >= self._params.risk_high_threshold:
            return AuditRiskLevel.HIGH
        elif score >= self._params.risk_medium_threshold:
            return AuditRiskLevel.MEDIUM
        else:
            return AuditRiskLevel.LOW

    def calculate_risk_score(
        self,
        detected_norms: Sequence[TatbestandsCheckResult],
        reclassifications: Sequence[ReclassificationSuggestion],
        beweislast: Sequence[BeweislastCheckResult],
    ) -> int:
        """Aggregate case risk score clamped to 0-100"""
        params = self._params
        score = 0.0

        for check in detected_norms:
            if check.domain == LegalDomain.CRIMINAL:
                score += check.overall_score * params.risk_criminal_weight

        upgrades = sum(1 for r in reclassifications if r.direction == ReclassificationDirection.UPGRADE)
        score += upgrades * params.risk_upgrade_weight

        score += sum(len(b.identified_gaps) for b in beweislast) * params.risk_gap_weight

        association = next(
            (c for c in detected_norms if c.norm_id == params.association_norm_id), None
        )
        if association is not None and association.overall_score >= params.association_risk_min_score:
            score += params.risk_association_bonus

        # Half-up rounding
        return int(min(100, max(0, math.floor(score + 0.5))))

    def build_summary(
        self,
        detected_norms: Sequence[TatbestandsCheckResult],
        reclassifications: Sequence[ReclassificationSuggestion],
        chains: Sequence[QualificationChainResult],
        beweislast: Sequence[BeweislastCheckResult],
        risk_level: AuditRiskLevel,
    ) -> str:
        """Short German digest of the audit"""
        parts = [f"Aktenaudit: {RISK_LABELS[AuditRiskLevel(risk_level).value]}."]

        high_confidence = [
            n for n in detected_norms if n.overall_score >= self._params.high_confidence_threshold
        ]
        if high_confidence:
            top = ", ".join(n.citation for n in high_confidence[:3])
            parts.append(f"{len(high_confidence)} Norm(en) mit hoher Konfidenz erkannt: {top}.")

        upgrades = sum(1 for r in reclassifications if r.direction == ReclassificationDirection.UPGRADE)
        alternatives = sum(
            1 for r in reclassifications if r.direction == ReclassificationDirection.ALTERNATIVE
        )
        if upgrades:
            parts.append(f"{upgrades} Qualifikations-Upgrade(s) vorgeschlagen.")
        if alternatives:
            parts.append(f"{alternatives} alternative Einordnung(en) geprüft.")

        if chains:
            parts.append(f"{len(chains)} Qualifikationskette(n) analysiert.")

        total_gaps = sum(len(b.identified_gaps) for b in beweislast)
        if total_gaps:
            parts.append(f"{total_gaps} Beweislast-Lücke(n) identifiziert.")

        return " ".join(parts)

    def _collect_text(self, documents: Sequence[CaseDocument]) -> str:
        texts = [
            d.text for d in documents if len(d.text.strip()) > self._params.min_document_chars
        ]
        text = "\n\n".join(texts)
        if len(text) > self._params.max_input_chars:
            logger.warning(
                "Case text truncated from %d to %d characters",
                len(text),
                self._params.max_input_chars,
            )
            text = text[: self._params.max_input_chars]
        return text

    # ==========================================================================
    # Public API
    # ==========================================================================

    def run_case_audit(
        self,
        case_id: str,
        workspace_id: str,
        documents: Sequence[DocumentInput],
    ) -> CaseAuditResult:
        """
        Run a complete audit over all case documents

        Args:
            case_id: Case identifier
            workspace_id: Workspace identifier
            documents: Case documents ({id, text} records)

        Returns:
            CaseAuditResult; an empty low-risk result when the text is too short
        """
        started = time.perf_counter()
        generated_at = datetime.now(timezone.utc).isoformat()

        docs: List[CaseDocument] = [
            d if isinstance(d, CaseDocument) else CaseDocument.model_validate(d) for d in documents
        ]
        document_ids = [d.id for d in docs]
        case_text = self._collect_text(docs)

        if len(case_text) < self._params.min_case_text_chars:
            logger.info("Case audit %s skipped: insufficient text (%d chars)", case_id, len(case_text))
            return CaseAuditResult(
                id=f"audit:{uuid.uuid4().hex}",
                case_id=case_id,
                workspace_id=workspace_id,
                audited_document_ids=document_ids,
                overall_risk_score=0,
                risk_level=AuditRiskLevel.LOW,
                summary=INSUFFICIENT_TEXT_SUMMARY,
                stats=AuditStats(total_documents_audited=len(docs)),
                generated_at=generated_at,
                audit_duration_ms=self._elapsed_ms(started),
            )

        detected, chains, reclassifications, beweislast = self._run_pipeline(case_text, document_ids)

        risk_score = self.calculate_risk_score(detected, reclassifications, beweislast)
        risk_level = self.map_score_to_risk_level(risk_score)
        summary = self.build_summary(detected, reclassifications, chains, beweislast, risk_level)

        stats = AuditStats(
            total_documents_audited=len(docs),
            total_norms_detected=len(detected),
            total_reclassifications=len(reclassifications),
            total_qualification_upgrades=sum(len(c.detected_qualifications) for c in chains),
            total_beweislast_gaps=sum(len(b.identified_gaps) for b in beweislast),
            high_confidence_norms=sum(
                1 for n in detected if n.overall_score >= self._params.high_confidence_threshold
            ),
        )

        result = CaseAuditResult(
            id=f"audit:{uuid.uuid4().hex}",
            case_id=case_id,
            workspace_id=workspace_id,
            audited_document_ids=document_ids,
            detected_norms=detected[: self._params.max_reported_norms],
            qualification_chains=chains,
            reclassifications=reclassifications,
            beweislast_analysis=beweislast,
            overall_risk_score=risk_score,
            risk_level=risk_level,
            summary=summary,
            stats=stats,
            generated_at=generated_at,
            audit_duration_ms=self._elapsed_ms(started),
        )

        logger.info(
            "Case audit %s: %d norms, %d reclassifications, risk %d (%s) in %dms",
            case_id,
            stats.total_norms_detected,
            stats.total_reclassifications,
            risk_score,
            result.risk_level,
            result.audit_duration_ms,
        )
        return result

    def _run_pipeline(
        self, case_text: str, document_ids: Sequence[str]
    ) -> Tuple[
        List[TatbestandsCheckResult],
        List[QualificationChainResult],
        List[ReclassificationSuggestion],
        List[BeweislastCheckResult],
    ]:
        detected = self._detector.detect_applicable_norms(
            case_text, document_ids, self._params.min_detection_score
        )
        chains = self._chain_analyzer.analyze(case_text, detected)
        reclassifications = self._advisor.generate(detected, chains)
        beweislast = self._beweislast_analyzer.analyze(detected, case_text)
        return detected, chains, reclassifications, beweislast

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
