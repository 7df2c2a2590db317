"""
Text Scoring Utilities

Tokenization and lenient keyword-overlap scoring shared by norm search,
claim-basis finding and relevance grouping, plus excerpt extraction for
statutory element checks.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from norm_audit.models.norms.legal_norm import LegalNorm

# § ( ) . , ; : ! ? ' " « » - – — / \ [ ] { }
_PUNCTUATION_RE = re.compile(r"[§().,;:!?'\"«»\-–—/\\\[\]{}]")

MIN_TOKEN_LENGTH = 3
ELLIPSIS = "…"


@dataclass(frozen=True)
class KeywordScore:
    """Keyword overlap score and the keywords that contributed"""

    score: float = 0.0
    matched_keywords: List[str] = field(default_factory=list)


def tokenize(text: str) -> Set[str]:
    """
    Lowercase, strip punctuation and split into a token set

    Tokens shorter than 3 characters are dropped.
    """
    cleaned = _PUNCTUATION_RE.sub(" ", (text or "").lower())
    return {token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH}


def _subword_matches(subword: str, tokens: Set[str]) -> bool:
    if subword in tokens:
        return True
    # Substring match in both directions tolerates inflected forms
    return any(subword in token or token in subword for token in tokens)


def compute_score(tokens: Set[str], keywords: Iterable[str]) -> KeywordScore:
    """
    Score keyword overlap against a token set

    Each keyword is split into sub-words; a keyword with m of n matching
    sub-words contributes m/n and is recorded as matched.

    Args:
        tokens: Token set from tokenize()
        keywords: Keywords or phrases to score

    Returns:
        KeywordScore with the summed score and matched keywords
    """
    score = 0.0
    matched: List[str] = []
    for keyword in keywords:
        subwords = keyword.lower().split()
        if not subwords:
            continue
        hits = sum(1 for subword in subwords if _subword_matches(subword, tokens))
        if hits > 0:
            score += hits / len(subwords)
            matched.append(keyword)
    return KeywordScore(score=score, matched_keywords=matched)


def relevance_total(tokens: Set[str], norm: LegalNorm) -> Tuple[float, List[str]]:
    """
    Raw relevance of a norm for a token set

    total = keyword_score * 2 + description_score, where the description
    score runs over the short description and title.
    """
    keyword_score = compute_score(tokens, norm.keywords)
    description_score = compute_score(tokens, [norm.short_description, norm.title])
    return keyword_score.score * 2 + description_score.score, keyword_score.matched_keywords


def normalize_relevance(total: float) -> float:
    """Map a raw relevance total to [0, 1]."""
    return min(1.0, total / 3)


def extract_excerpt(text: str, phrase: str, radius: int = 80) -> Optional[str]:
    """
    Extract context around the first case-insensitive occurrence of phrase

    Args:
        text: Source text
        phrase: Phrase to locate
        radius: Characters kept on each side

    Returns:
        Stripped excerpt with ellipses where clipped, or None if not found
    """
    if not phrase:
        return None
    idx = text.lower().find(phrase.lower())
    if idx < 0:
        return None

    start = max(0, idx - radius)
    end = min(len(text), idx + len(phrase) + radius)
    prefix = ELLIPSIS if start > 0 else ""
    suffix = ELLIPSIS if end < len(text) else ""
    return f"{prefix}{text[start:end].strip()}{suffix}"
