"""
Audit Findings Builder

Converts a case audit into review findings that callers can persist
alongside other case findings.
"""

import time
from datetime import datetime, timezone
from typing import List

from norm_audit.models.norms.case_audit import (
    AuditFinding,
    CaseAuditResult,
    FindingCitation,
    FindingSeverity,
    FindingType,
)
from norm_audit.models.norms.classification import ReclassificationDirection

BEWEISLAST_FINDING_CONFIDENCE = 0.7


class AuditFindingsBuilder:
    """Build review findings from reclassifications and beweislast gaps"""

    def to_findings(self, audit: CaseAuditResult) -> List[AuditFinding]:
        """
        Convert an audit into findings

        Args:
            audit: Result of CaseAuditOrchestrator.run_case_audit

        Returns:
            Reclassification findings followed by evidence-gap findings
        """
        created_at = datetime.now(timezone.utc).isoformat()
        first_document = audit.audited_document_ids[0] if audit.audited_document_ids else ""
        findings: List[AuditFinding] = []

        for suggestion in audit.reclassifications:
            is_upgrade = suggestion.direction == ReclassificationDirection.UPGRADE
            findings.append(
                AuditFinding(
                    id=f"audit-reclass:{suggestion.id}",
                    case_id=audit.case_id,
                    workspace_id=audit.workspace_id,
                    type=FindingType.NORM_ERROR if is_upgrade else FindingType.NORM_SUGGESTION,
                    title=(
                        f"Reklassifizierung: {suggestion.current_norm_title} "
                        f"→ {suggestion.suggested_norm_title}"
                    ),
                    description=suggestion.reason,
                    severity=FindingSeverity.CRITICAL if is_upgrade else FindingSeverity.HIGH,
                    confidence=suggestion.confidence,
                    source_document_ids=list(audit.audited_document_ids),
                    citations=[
                        FindingCitation(
                            document_id=first_document,
                            quote=f"Indikatoren: {', '.join(suggestion.triggered_by_indicators[:5])}",
                        )
                    ],
                    related_norm_ids=[suggestion.current_norm_id, suggestion.suggested_norm_id],
                    created_at=created_at,
                )
            )

        stamp = format(time.time_ns() // 1_000_000, "x")
        for analysis in audit.beweislast_analysis:
            if not analysis.identified_gaps:
                continue
            findings.append(
                AuditFinding(
                    id=f"audit-beweislast:{analysis.norm_id}:{stamp}",
                    case_id=audit.case_id,
                    workspace_id=audit.workspace_id,
                    type=FindingType.EVIDENCE_GAP,
                    title=f"Beweislast-Lücken: {analysis.norm_title}",
                    description=(
                        f"{analysis.burden_description}. Lücken: {'; '.join(analysis.identified_gaps)}"
                    ),
                    severity=FindingSeverity.MEDIUM,
                    confidence=BEWEISLAST_FINDING_CONFIDENCE,
                    source_document_ids=list(audit.audited_document_ids),
                    related_norm_ids=[analysis.norm_id],
                    created_at=created_at,
                )
            )

        return findings
