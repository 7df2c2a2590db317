"""
Norm Knowledge Base

Immutable in-memory collection of statutory norms, loaded once from the
versioned JSON database. Qualification edges are resolved into an index
adjacency list at load time and checked for cycles and level inversions.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from norm_audit.config import get_engine_config
from norm_audit.data.norms import DATA_DIR, LEGAL_NORMS_FILE, load_json_db
from norm_audit.exceptions import KnowledgeBaseError, KnowledgeBaseIntegrityError
from norm_audit.models.norms.legal_norm import (
    PRIVILEGING_QUALIFICATION_LEVEL,
    Jurisdiction,
    LegalDomain,
    LegalNorm,
    NormType,
)

logger = logging.getLogger(__name__)

JurisdictionFilter = Optional[Sequence[Union[Jurisdiction, str]]]


# Statute abbreviation -> jurisdiction, used when a record has none
LAW_JURISDICTION_FALLBACK: Dict[str, Jurisdiction] = {
    # Germany
    "BGB": Jurisdiction.DE,
    "GG": Jurisdiction.DE,
    "ZPO": Jurisdiction.DE,
    "VwGO": Jurisdiction.DE,
    "StGB": Jurisdiction.DE,
    "StPO": Jurisdiction.DE,
    "InsO": Jurisdiction.DE,
    "HGB": Jurisdiction.DE,
    "AGG": Jurisdiction.DE,
    "WEG": Jurisdiction.DE,
    "BDSG": Jurisdiction.DE,
    "UrhG": Jurisdiction.DE,
    "MarkenG": Jurisdiction.DE,
    "PatG": Jurisdiction.DE,
    # Austria
    "ABGB": Jurisdiction.AT,
    "MRG": Jurisdiction.AT,
    "StGB-AT": Jurisdiction.AT,
    "ZPO-AT": Jurisdiction.AT,
    "StPO-AT": Jurisdiction.AT,
    "AVG": Jurisdiction.AT,
    "KSchG": Jurisdiction.AT,
    "UGB": Jurisdiction.AT,
    # Switzerland
    "ZGB": Jurisdiction.CH,
    "OR": Jurisdiction.CH,
    "SchKG": Jurisdiction.CH,
    "StGB-CH": Jurisdiction.CH,
    "ZPO-CH": Jurisdiction.CH,
    "StPO-CH": Jurisdiction.CH,
    "BGG": Jurisdiction.CH,
    "IPRG": Jurisdiction.CH,
    # France
    "Code civil": Jurisdiction.FR,
    "Code pénal": Jurisdiction.FR,
    "CPC-FR": Jurisdiction.FR,
    "Code de commerce": Jurisdiction.FR,
    # Italy
    "Codice civile": Jurisdiction.IT,
    "Codice penale": Jurisdiction.IT,
    "CPC-IT": Jurisdiction.IT,
    "CPP-IT": Jurisdiction.IT,
    # Portugal
    "Código Civil": Jurisdiction.PT,
    "Código Penal": Jurisdiction.PT,
    "CPC-PT": Jurisdiction.PT,
    "CPP-PT": Jurisdiction.PT,
    # Poland
    "KC": Jurisdiction.PL,
    "KK": Jurisdiction.PL,
    "KPC": Jurisdiction.PL,
    "KPK": Jurisdiction.PL,
    "KSH": Jurisdiction.PL,
    "KPA": Jurisdiction.PL,
    "PPSA": Jurisdiction.PL,
    # ECHR
    "EMRK": Jurisdiction.ECHR,
    "EMRK-ZP1": Jurisdiction.ECHR,
    "EMRK-ZP4": Jurisdiction.ECHR,
    "EMRK-ZP6": Jurisdiction.ECHR,
    "EMRK-ZP7": Jurisdiction.ECHR,
}


def infer_jurisdiction(law: str) -> Jurisdiction:
    """Infer a jurisdiction from a statute abbreviation (default DE)."""
    return LAW_JURISDICTION_FALLBACK.get(law, Jurisdiction.DE)


def _normalize_filter(jurisdictions: JurisdictionFilter) -> Optional[frozenset]:
    if not jurisdictions:
        return None
    return frozenset(Jurisdiction(j).value for j in jurisdictions)


class NormKnowledgeBase:
    """
    Normen-Wissensbasis

    Read-only collection of LegalNorm records with lookups by id, law,
    domain, type and jurisdiction. Safe to share between threads.
    """

    def __init__(
        self,
        norms: Iterable[LegalNorm],
        version_info: Optional[Mapping[str, Any]] = None,
    ) -> None:
        resolved: List[LegalNorm] = []
        index: Dict[str, int] = {}

        for norm in norms:
            if norm.id in index:
                raise KnowledgeBaseError(f"Duplicate norm id in knowledge base: {norm.id}")
            if norm.jurisdiction is None:
                norm = norm.model_copy(
                    update={"jurisdiction": infer_jurisdiction(norm.law).value}
                )
            index[norm.id] = len(resolved)
            resolved.append(norm)

        self._norms: Tuple[LegalNorm, ...] = tuple(resolved)
        self._index: Dict[str, int] = index
        self._version_info: Dict[str, Any] = dict(version_info or {})

        # Qualification adjacency: norm index -> indices of qualifying norms
        self._qualified_by: Tuple[Tuple[int, ...], ...] = tuple(
            tuple(index[q] for q in norm.qualified_by if q in index) for norm in self._norms
        )

        self._log_dangling_references()
        self._validate_qualification_graph()

    # ==========================================================================
    # Loading
    # ==========================================================================

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        version_info: Optional[Mapping[str, Any]] = None,
    ) -> "NormKnowledgeBase":
        """
        Build a knowledge base from raw norm dictionaries

        Raises:
            KnowledgeBaseError: If a record fails validation
        """
        norms = []
        for position, record in enumerate(records):
            try:
                norms.append(LegalNorm.model_validate(record))
            except ValidationError as e:
                norm_id = record.get("id", f"#{position}") if isinstance(record, Mapping) else f"#{position}"
                raise KnowledgeBaseError(f"Invalid norm record {norm_id}: {e}") from e
        return cls(norms, version_info)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "NormKnowledgeBase":
        """
        Load a knowledge base from a versioned JSON database file

        The file carries a header (version, description, source,
        last_updated) and a 'norms' list.
        """
        path = Path(path)
        try:
            data = load_json_db(path.name, path.parent)
        except FileNotFoundError as e:
            raise KnowledgeBaseError(str(e)) from e
        except (OSError, json.JSONDecodeError) as e:
            raise KnowledgeBaseError(f"Cannot read knowledge base {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("norms"), list):
            raise KnowledgeBaseError(f"Knowledge base {path} has no 'norms' list")

        version_info = {
            "version": data.get("version", "unknown"),
            "description": data.get("description", ""),
            "source": data.get("source", ""),
            "last_updated": data.get("last_updated", ""),
        }
        kb = cls.from_records(data["norms"], version_info)
        logger.info(
            "Loaded norm knowledge base %s (version %s, %d norms)",
            path.name,
            version_info["version"],
            len(kb),
        )
        return kb

    @classmethod
    def load_default(cls) -> "NormKnowledgeBase":
        """Load the bundled knowledge base."""
        return cls.from_json_file(DATA_DIR / LEGAL_NORMS_FILE)

    # ==========================================================================
    # Integrity
    # ==========================================================================

    def _log_dangling_references(self) -> None:
        for norm in self._norms:
            refs = list(norm.related_norms) + list(norm.qualified_by)
            if norm.qualification_of:
                refs.append(norm.qualification_of)
            for ref in refs:
                if ref not in self._index:
                    logger.debug("Norm %s references unknown norm %s", norm.id, ref)

    def _validate_qualification_graph(self) -> None:
        """
        Check the qualification graph is acyclic and levels never decrease
        along qualified_by edges. Privileging variants are exempt from the
        level ordering.

        Raises:
            KnowledgeBaseIntegrityError: On any violation
        """
        violations: List[str] = []

        for source_idx, targets in enumerate(self._qualified_by):
            source = self._norms[source_idx]
            source_level = source.qualification_level or 0
            if source_level == PRIVILEGING_QUALIFICATION_LEVEL:
                continue
            for target_idx in targets:
                target = self._norms[target_idx]
                target_level = (
                    target.qualification_level if target.qualification_level is not None else 1
                )
                if target_level == PRIVILEGING_QUALIFICATION_LEVEL:
                    continue
                if target_level < source_level:
                    violations.append(
                        f"level inversion {source.id} (L{source_level}) -> {target.id} (L{target_level})"
                    )

        # Iterative three-colour DFS
        white, grey, black = 0, 1, 2
        colour = [white] * len(self._norms)
        for start in range(len(self._norms)):
            if colour[start] != white:
                continue
            stack = [(start, iter(self._qualified_by[start]))]
            colour[start] = grey
            while stack:
                node, children = stack[-1]
                advanced = False
                for child in children:
                    if colour[child] == grey:
                        violations.append(
                            f"cycle through {self._norms[node].id} -> {self._norms[child].id}"
                        )
                    elif colour[child] == white:
                        colour[child] = grey
                        stack.append((child, iter(self._qualified_by[child])))
                        advanced = True
                        break
                if not advanced:
                    colour[node] = black
                    stack.pop()

        if violations:
            raise KnowledgeBaseIntegrityError(
                f"Qualification graph invalid: {'; '.join(violations)}", violations
            )

    # ==========================================================================
    # Public API
    # ==========================================================================

    def __len__(self) -> int:
        return len(self._norms)

    def __iter__(self) -> Iterator[LegalNorm]:
        return iter(self._norms)

    def __contains__(self, norm_id: object) -> bool:
        return norm_id in self._index

    @property
    def norms(self) -> Tuple[LegalNorm, ...]:
        return self._norms

    @property
    def version_info(self) -> Dict[str, Any]:
        """Get version information of the loaded database"""
        return dict(self._version_info)

    def get_norm_by_id(self, norm_id: str) -> Optional[LegalNorm]:
        idx = self._index.get(norm_id)
        return self._norms[idx] if idx is not None else None

    def index_of(self, norm_id: str) -> Optional[int]:
        return self._index.get(norm_id)

    def get_all_norms(self, jurisdictions: JurisdictionFilter = None) -> List[LegalNorm]:
        allowed = _normalize_filter(jurisdictions)
        return [n for n in self._norms if allowed is None or n.jurisdiction in allowed]

    def get_norms_by_law(self, law: str, jurisdictions: JurisdictionFilter = None) -> List[LegalNorm]:
        """Norms of one statute (case-insensitive abbreviation match)"""
        law_lower = law.lower()
        return [n for n in self.get_all_norms(jurisdictions) if n.law.lower() == law_lower]

    def get_norms_by_domain(
        self, domain: Union[LegalDomain, str], jurisdictions: JurisdictionFilter = None
    ) -> List[LegalNorm]:
        value = LegalDomain(domain).value
        return [n for n in self.get_all_norms(jurisdictions) if n.domain == value]

    def get_norms_by_type(
        self, norm_type: Union[NormType, str], jurisdictions: JurisdictionFilter = None
    ) -> List[LegalNorm]:
        value = NormType(norm_type).value
        return [n for n in self.get_all_norms(jurisdictions) if n.type == value]

    def get_norms_by_jurisdiction(self, jurisdiction: Union[Jurisdiction, str]) -> List[LegalNorm]:
        return self.get_all_norms([jurisdiction])

    def get_norms_with_elements(self) -> List[LegalNorm]:
        """Norms declaring structured statutory elements"""
        return [n for n in self._norms if n.has_elements]

    def get_qualifying_norms(self, norm_id: str) -> List[LegalNorm]:
        """Resolved qualified_by norms in declaration order (unknown ids skipped)"""
        idx = self._index.get(norm_id)
        if idx is None:
            return []
        return [self._norms[q] for q in self._qualified_by[idx]]

    def get_related_norms(self, norm_id: str) -> List[LegalNorm]:
        """Resolved related_norms in declaration order (unknown ids skipped)"""
        norm = self.get_norm_by_id(norm_id)
        if norm is None:
            return []
        return [self._norms[self._index[r]] for r in norm.related_norms if r in self._index]


# Process-wide default instance, read-only after load
_default_knowledge_base: Optional[NormKnowledgeBase] = None


def get_knowledge_base(path: Optional[Path] = None) -> NormKnowledgeBase:
    """
    Get the default knowledge base instance

    Args:
        path: Optional explicit JSON path (bypasses the shared instance)

    Returns:
        NormKnowledgeBase instance
    """
    global _default_knowledge_base

    if path is not None:
        return NormKnowledgeBase.from_json_file(path)

    if _default_knowledge_base is None:
        configured = get_engine_config().get_knowledge_base_path()
        if configured is not None:
            _default_knowledge_base = NormKnowledgeBase.from_json_file(configured)
        else:
            _default_knowledge_base = NormKnowledgeBase.load_default()

    return _default_knowledge_base
