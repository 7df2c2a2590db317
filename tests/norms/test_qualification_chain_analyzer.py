"""
Tests for QualificationChainAnalyzer

GIVEN a detected base norm with qualifying variants
WHEN the case text carries qualification indicators
THEN the analyzer ranks the variants by level, then score
"""

import pytest

from norm_audit.models.norms.tatbestand import TatbestandsCheckResult
from norm_audit.services.norms.norm_detector import NormDetector
from norm_audit.services.norms.qualification_chain_analyzer import QualificationChainAnalyzer

AGGRAVATED_TEXT = (
    "Der Täter hat den Laptop gestohlen, mit einem Messer gedroht und handelte gewerbsmäßig."
)


def _chains(kb, text):
    detected = NormDetector(kb).detect_applicable_norms(text)
    return QualificationChainAnalyzer(kb).analyze(text, detected)


class TestScoreQualification:
    """Tests for per-variant scoring."""

    def test_element_weight_counted_once(self, synthetic_kb):
        analyzer = QualificationChainAnalyzer(synthetic_kb)
        norm = synthetic_kb.get_norm_by_id("t-qual-1")

        score, triggers = analyzer.score_qualification(norm, "mit waffe und messer")

        assert score == pytest.approx(0.9)
        assert triggers == ["waffe", "messer"]

    def test_keyword_matching_an_indicator_still_adds_bonus(self, synthetic_kb):
        analyzer = QualificationChainAnalyzer(synthetic_kb)
        norm = synthetic_kb.get_norm_by_id("t-qual-2")

        score, triggers = analyzer.score_qualification(norm, "er handelte gewerbsmäßig")

        assert score == pytest.approx(1.1)
        assert triggers == ["gewerbsmäßig"]

    def test_keyword_bonus(self, synthetic_kb):
        analyzer = QualificationChainAnalyzer(synthetic_kb)
        norm = synthetic_kb.get_norm_by_id("t-qual-2")

        score, triggers = analyzer.score_qualification(norm, "gewerbsmäßig, eine ganze serie")

        assert score == pytest.approx(1.4)
        assert triggers == ["gewerbsmäßig", "serie"]

    def test_bundled_keyword_bonus_for_every_present_keyword(self, bundled_kb):
        analyzer = QualificationChainAnalyzer(bundled_kb)
        norm = bundled_kb.get_norm_by_id("stgb-244")

        score, triggers = analyzer.score_qualification(
            norm, "eingebrochen gewerbsmäßig bande waffe wohnungseinbruch einbruch"
        )

        assert score == pytest.approx(3.0)
        assert triggers == ["waffe", "bande", "wohnungseinbruch"]


class TestAnalyze:
    """Tests for chain building."""

    def test_chain_ranked_by_level_then_score(self, synthetic_kb):
        chains = _chains(synthetic_kb, AGGRAVATED_TEXT)

        assert len(chains) == 1
        chain = chains[0]
        assert chain.base_norm_id == "t-base"
        assert [q.norm_id for q in chain.detected_qualifications] == ["t-qual-2", "t-qual-1"]
        assert chain.recommended_norm_id == "t-qual-2"
        assert chain.detected_qualifications[0].level == 2
        assert chain.detected_qualifications[0].score == pytest.approx(1.1 / 3)
        assert chain.detected_qualifications[1].score == pytest.approx(0.3)

    def test_chain_description(self, synthetic_kb):
        chain = _chains(synthetic_kb, AGGRAVATED_TEXT)[0]

        assert chain.chain_description == (
            "StGB § 900 Testdiebstahl → Gewerbsmäßiger Testdiebstahl (Level 2, Score 37%)"
            " → Testdiebstahl mit Waffen (Level 1, Score 30%)"
        )

    def test_no_chain_without_qualification_indicators(self, synthetic_kb):
        assert _chains(synthetic_kb, "Der Beschuldigte hat den Laptop gestohlen.") == []

    def test_score_at_threshold_not_kept(self, synthetic_kb):
        """A single keyword bonus (0.3) does not exceed the threshold."""
        text = "Es war eine Serie: der Beschuldigte hat den Laptop gestohlen."

        assert _chains(synthetic_kb, text) == []

    def test_qualifying_norms_are_not_chain_bases(self, synthetic_kb):
        chains = _chains(synthetic_kb, AGGRAVATED_TEXT)

        assert all(c.base_norm_id == "t-base" for c in chains)

    def test_base_without_qualified_by_skipped(self, synthetic_kb):
        detected = NormDetector(synthetic_kb).detect_applicable_norms("Nur alpha und beta.")

        assert QualificationChainAnalyzer(synthetic_kb).analyze("Nur alpha und beta.", detected) == []

    def test_trigger_list_capped(self, synthetic_kb, params):
        analyzer = QualificationChainAnalyzer(synthetic_kb, params.replace(max_trigger_indicators=1))
        text = "Laptop gestohlen, mit Waffe und Messer."
        detected = NormDetector(synthetic_kb).detect_applicable_norms(text)

        chain = analyzer.analyze(text, detected)[0]

        assert chain.detected_qualifications[0].trigger_indicators == ["waffe"]

    def test_bundled_theft_upgrades_to_aggravated_theft(self, bundled_kb):
        text = (
            "In der Nacht ist der Täter in die Wohnung eingebrochen und hat Schmuck und "
            "Bargeld gestohlen. Er handelte gewerbsmäßig und hat die Beute für sich behalten."
        )

        chains = _chains(bundled_kb, text)

        theft = next(c for c in chains if c.base_norm_id == "stgb-242")
        assert theft.recommended_norm_id == "stgb-243"
        assert theft.detected_qualifications[0].score == pytest.approx(2.0 / 3)
        assert theft.detected_qualifications[0].trigger_indicators == ["eingebrochen", "gewerbsmäßig"]
        assert [q.norm_id for q in theft.detected_qualifications] == ["stgb-243", "stgb-244"]

    def test_explicit_level_zero_kept(self):
        from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase

        records = [
            {
                "id": "base",
                "law": "StGB",
                "paragraph": "§ 1",
                "title": "Grunddelikt",
                "domain": "criminal",
                "type": "strafnorm",
                "keywords": ["grunddelikt"],
                "qualification_level": 0,
                "qualified_by": ["variant"],
            },
            {
                "id": "variant",
                "law": "StGB",
                "paragraph": "§ 2",
                "title": "Variante",
                "domain": "criminal",
                "type": "strafnorm",
                "keywords": ["variante", "sonderfall"],
                "qualification_level": 0,
            },
        ]
        kb = NormKnowledgeBase.from_records(records)
        base = TatbestandsCheckResult(
            norm_id="base",
            norm_title="Grunddelikt",
            law="StGB",
            paragraph="§ 1",
            domain="criminal",
            overall_score=0.5,
            fulfillment_ratio=0.0,
            weighted_score=0.0,
            all_required_fulfilled=False,
        )

        chains = QualificationChainAnalyzer(kb).analyze("grunddelikt: variante im sonderfall", [base])

        assert chains[0].detected_qualifications[0].level == 0
