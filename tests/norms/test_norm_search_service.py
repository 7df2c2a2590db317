"""
Tests for NormSearchService
"""

import json

import pytest

from norm_audit.services.norms.norm_search_service import CONTEXT_BLOCK_HEADER, NormSearchService


class TestSearchNorms:
    """Tests for free-text search."""

    def test_best_match_first(self, synthetic_kb):
        service = NormSearchService(synthetic_kb)

        results = service.search_norms("Diebstahl Laptop")

        top = results[0]
        assert top.norm.id == "t-base"
        assert top.match_score == pytest.approx(1.0)
        assert top.matched_keywords == ["diebstahl"]
        assert top.match_context == "StGB § 900: Testdiebstahl"
        assert [r.norm.id for r in results[1:]] == ["t-qual-2", "t-qual-1"]

    def test_limit(self, synthetic_kb):
        service = NormSearchService(synthetic_kb)

        assert len(service.search_norms("Diebstahl Laptop", limit=1)) == 1
        assert service.search_norms("Diebstahl Laptop", limit=0) == []

    def test_jurisdiction_filter(self, synthetic_kb):
        service = NormSearchService(synthetic_kb)

        assert service.search_norms("Diebstahl Laptop", jurisdictions=["AT"]) == []

    def test_query_without_usable_tokens(self, synthetic_kb):
        assert NormSearchService(synthetic_kb).search_norms("a b §") == []

    def test_bundled_fraud_search(self, bundled_kb):
        results = NormSearchService(bundled_kb).search_norms("Betrug Täuschung Vermögensschaden", 5)

        assert len(results) == 5
        assert results[0].norm.id == "stgb-263"
        assert results[0].matched_keywords == ["betrug", "täuschung", "vermögensschaden"]


class TestRelevantNormsForCase:
    def test_groups_by_type(self, synthetic_kb):
        groups = NormSearchService(synthetic_kb).get_relevant_norms_for_case(
            "Diebstahl und Schadensersatz"
        )

        assert groups.strafrecht_normen[0].norm.id == "t-base"
        assert [m.norm.id for m in groups.anspruchsgrundlagen] == ["t-civil"]
        assert groups.fristen_normen == []
        assert groups.verfahrens_normen == []

    def test_group_limit(self, synthetic_kb, params):
        service = NormSearchService(synthetic_kb, params.replace(relevance_group_limit=1))

        groups = service.get_relevant_norms_for_case("Diebstahl und Schadensersatz")

        assert len(groups.strafrecht_normen) == 1


class TestNormContextBlock:
    """Tests for markdown context rendering."""

    def test_renders_known_norms(self, synthetic_kb):
        block = NormSearchService(synthetic_kb).build_norm_context_block(["t-base", "ghost", "t-civil"])

        assert block == "\n".join(
            [
                CONTEXT_BLOCK_HEADER,
                "- **StGB § 900** [DE] (Testdiebstahl): Wegnahme einer fremden Sache.",
                "- **ABGB § 1295** [AT] (Schadenersatz aus Verschulden): "
                "Ersatz des schuldhaft verursachten Schadens.",
            ]
        )

    def test_jurisdiction_filter(self, synthetic_kb):
        service = NormSearchService(synthetic_kb)

        block = service.build_norm_context_block(["t-base", "t-civil"], ["DE"])

        assert "t-civil" not in block
        assert "ABGB" not in block
        assert "StGB § 900" in block

    def test_empty_when_nothing_matches(self, synthetic_kb):
        service = NormSearchService(synthetic_kb)

        assert service.build_norm_context_block(["ghost"]) == ""
        assert service.build_norm_context_block(["t-base"], ["PL"]) == ""


class TestExportRegistry:
    def test_counts(self, bundled_kb):
        registry = NormSearchService(bundled_kb).export_registry()

        assert registry["total_norms"] == 138
        assert registry["version_info"]["version"] == "1.0.0"
        assert registry["counts_by_jurisdiction"]["DE"] == 84
        assert registry["counts_by_jurisdiction"]["AT"] == 31
        assert sum(registry["counts_by_jurisdiction"].values()) == 138
        assert sum(registry["counts_by_domain"].values()) == 138

    def test_serializable(self, synthetic_kb):
        registry = NormSearchService(synthetic_kb).export_registry()

        payload = json.loads(json.dumps(registry, ensure_ascii=False))
        assert set(payload["jurisdictions"]) == {"AT", "DE"}
        assert payload["jurisdictions"]["AT"][0]["id"] == "t-civil"
