"""
Tests for AuditFindingsBuilder
"""

import pytest

from norm_audit.services.norms.audit_findings import AuditFindingsBuilder
from norm_audit.services.norms.case_audit_orchestrator import CaseAuditOrchestrator

ASSOCIATION_TEXT = "Die Bande hat den Laptop gestohlen. Eine Organisation steckt dahinter."
AGGRAVATED_TEXT = (
    "Der Täter hat den Laptop gestohlen, mit einem Messer gedroht und handelte gewerbsmäßig."
)


@pytest.fixture
def association_audit(synthetic_kb):
    orchestrator = CaseAuditOrchestrator(synthetic_kb)
    return orchestrator.run_case_audit(
        "AZ-1", "ws-1", [{"id": "d1", "text": ASSOCIATION_TEXT}, {"id": "d2", "text": "kurz"}]
    )


class TestToFindings:
    """Tests for audit-to-finding conversion."""

    def test_alternative_becomes_suggestion(self, association_audit):
        findings = AuditFindingsBuilder().to_findings(association_audit)

        reclass = findings[0]
        assert reclass.type == "norm_suggestion"
        assert reclass.severity == "high"
        assert reclass.case_id == "AZ-1"
        assert reclass.workspace_id == "ws-1"
        assert reclass.title == (
            "Reklassifizierung: StGB § 900 — Testdiebstahl → StGB § 129 — Bildung krimineller Vereinigungen"
        )
        assert reclass.confidence == pytest.approx(1.0)
        assert reclass.related_norm_ids == ["t-base", "stgb-129"]
        assert reclass.source_document_ids == ["d1", "d2"]
        assert reclass.citations[0].document_id == "d1"
        assert reclass.citations[0].quote == "Indikatoren: bande, organisation"
        assert reclass.id.startswith("audit-reclass:reclass:")

    def test_evidence_gap_finding(self, association_audit):
        findings = AuditFindingsBuilder().to_findings(association_audit)

        gap = findings[-1]
        assert gap.type == "evidence_gap"
        assert gap.severity == "medium"
        assert gap.confidence == pytest.approx(0.7)
        assert gap.id.startswith("audit-beweislast:t-base:")
        assert gap.title == "Beweislast-Lücken: StGB § 900 — Testdiebstahl"
        assert gap.description == (
            "Kläger/Ankläger trägt die Beweislast. "
            "Lücken: Keine Beweismittel-Referenzen im Sachverhalt erkannt"
        )
        assert gap.related_norm_ids == ["t-base"]

    def test_upgrade_becomes_error(self, synthetic_kb):
        audit = CaseAuditOrchestrator(synthetic_kb).run_case_audit(
            "AZ-2", "ws-1", [{"id": "d1", "text": AGGRAVATED_TEXT}]
        )

        findings = AuditFindingsBuilder().to_findings(audit)

        upgrade = findings[0]
        assert upgrade.type == "norm_error"
        assert upgrade.severity == "critical"
        assert upgrade.citations[0].quote == "Indikatoren: gewerbsmäßig"

    def test_no_findings_without_suggestions_or_gaps(self, synthetic_kb):
        audit = CaseAuditOrchestrator(synthetic_kb).run_case_audit(
            "AZ-3", "ws-1", [{"id": "d1", "text": "Zu kurz."}]
        )

        assert AuditFindingsBuilder().to_findings(audit) == []

    def test_analysis_without_gaps_skipped(self, synthetic_kb):
        text = "Der Beschuldigte hat den Laptop gestohlen, wie der Zeuge bestätigt."
        audit = CaseAuditOrchestrator(synthetic_kb).run_case_audit(
            "AZ-4", "ws-1", [{"id": "d1", "text": text}]
        )

        assert len(audit.beweislast_analysis) == 1
        assert AuditFindingsBuilder().to_findings(audit) == []
