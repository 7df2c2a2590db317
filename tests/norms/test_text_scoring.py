"""
Tests for tokenization, keyword scoring and excerpt extraction
"""

import pytest

from norm_audit.services.norms.text_scoring import (
    ELLIPSIS,
    compute_score,
    extract_excerpt,
    normalize_relevance,
    tokenize,
)


class TestTokenize:
    """Tests for tokenize()."""

    def test_strips_punctuation_and_short_tokens(self):
        tokens = tokenize("§ 823 Abs. 1 BGB: Schaden-Ersatz!")

        assert tokens == {"823", "abs", "bgb", "schaden", "ersatz"}

    def test_empty_text(self):
        assert tokenize("") == set()
        assert tokenize(None) == set()

    def test_lowercases(self):
        assert tokenize("Diebstahl DIEBSTAHL") == {"diebstahl"}


class TestComputeScore:
    """Tests for lenient keyword overlap scoring."""

    def test_substring_match_both_directions(self):
        tokens = {"vertrag", "schadensersatz"}

        result = compute_score(tokens, ["schaden ersatz", "miete", "vertragsbruch"])

        assert result.score == pytest.approx(2.0)
        assert result.matched_keywords == ["schaden ersatz", "vertragsbruch"]

    def test_partial_phrase_scores_fraction(self):
        result = compute_score({"schaden"}, ["schaden haftung"])

        assert result.score == pytest.approx(0.5)
        assert result.matched_keywords == ["schaden haftung"]

    def test_no_match(self):
        result = compute_score({"miete"}, ["betrug"])

        assert result.score == 0.0
        assert result.matched_keywords == []

    def test_empty_keyword_ignored(self):
        assert compute_score({"miete"}, ["", "   "]).score == 0.0


class TestNormalizeRelevance:
    @pytest.mark.parametrize("total, expected", [(0.0, 0.0), (1.5, 0.5), (3.0, 1.0), (7.0, 1.0)])
    def test_normalize(self, total, expected):
        assert normalize_relevance(total) == pytest.approx(expected)


class TestExtractExcerpt:
    """Tests for extract_excerpt()."""

    def test_clipped_on_both_sides(self):
        text = "x" * 100 + "gestohlen" + "y" * 100

        excerpt = extract_excerpt(text, "GESTOHLEN", radius=80)

        assert excerpt == ELLIPSIS + "x" * 80 + "gestohlen" + "y" * 80 + ELLIPSIS

    def test_short_text_not_clipped(self):
        excerpt = extract_excerpt("Er hat das Handy gestohlen.", "handy")

        assert excerpt == "Er hat das Handy gestohlen."

    def test_phrase_not_found(self):
        assert extract_excerpt("Er hat nichts getan.", "gestohlen") is None

    def test_whitespace_at_cut_edges_trimmed_inside_ellipses(self):
        text = "a" * 20 + " \ngestohlen\n " + "b" * 20

        excerpt = extract_excerpt(text, "gestohlen", radius=2)

        assert excerpt == ELLIPSIS + "gestohlen" + ELLIPSIS
