"""
Scoring Parameters

Tunable heuristics of the norm classification engine.

The defaults are empirically chosen values carried over unchanged for
behavioural compatibility. They are weighting heuristics, not legally
authoritative constants, and can be overridden through engine_config.yaml.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

from norm_audit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringParameters:
    """
    Heuristic parameters used across the engine.

    Attributes:
        min_detection_score: Minimum overall score for a norm to count as detected
        fulfillment_weight: Share of fulfillment ratio in the overall score
        weighted_score_weight: Share of the weighted element score in the overall score
        exclusion_factor: Multiplier applied when an exclusion indicator is present
        indicator_saturation: Fraction of indicators needed for full element confidence
        excerpt_radius: Characters of context kept on each side of an excerpt
        max_excerpts_per_element: Excerpts kept per statutory element
        qualification_threshold: Minimum raw score for a qualifying norm
        qualification_keyword_bonus: Raw score added per matched qualifying keyword
        qualification_normalizer: Divisor mapping raw qualification score to [0, 1]
        max_trigger_indicators: Trigger phrases kept per qualifying norm
        association_alternative_min_score: Association norm score enabling alternatives
        association_risk_min_score: Association norm score adding the risk bonus
        beweislast_min_score: Minimum score for burden-of-proof analysis
        risk_*: Aggregate risk formula coefficients and level thresholds
        high_confidence_threshold: Score counted as high confidence in stats/summary
        min_case_text_chars: Shorter concatenated text short-circuits the audit
        min_document_chars: Documents at or below this length are skipped
        max_input_chars: Upper bound on concatenated audit text
        max_reported_norms: Detected norms kept in the audit result
        search_min_total: Minimum raw relevance total for free-text search
        relevance_group_min_score: Minimum match score for relevance groups
        relevance_group_limit: Norms kept per relevance group
        claim_min_score: Minimum keyword score for claim bases
        association_norm_id: Designated organized-association norm
        general_limitation_norm_id: Designated general limitation-period norm
    """

    min_detection_score: float = 0.15
    fulfillment_weight: float = 0.6
    weighted_score_weight: float = 0.4
    exclusion_factor: float = 0.3
    indicator_saturation: float = 0.3
    excerpt_radius: int = 80
    max_excerpts_per_element: int = 3

    qualification_threshold: float = 0.3
    qualification_keyword_bonus: float = 0.3
    qualification_normalizer: float = 3.0
    max_trigger_indicators: int = 10

    association_alternative_min_score: float = 0.25
    association_risk_min_score: float = 0.3
    beweislast_min_score: float = 0.3

    risk_criminal_weight: float = 20.0
    risk_upgrade_weight: float = 15.0
    risk_gap_weight: float = 5.0
    risk_association_bonus: float = 25.0
    risk_medium_threshold: int = 20
    risk_high_threshold: int = 45
    risk_critical_threshold: int = 70

    high_confidence_threshold: float = 0.5
    min_case_text_chars: int = 50
    min_document_chars: int = 20
    max_input_chars: int = 500_000
    max_reported_norms: int = 20

    search_min_total: float = 0.3
    relevance_group_min_score: float = 0.15
    relevance_group_limit: int = 5
    claim_min_score: float = 0.3

    association_norm_id: str = "stgb-129"
    general_limitation_norm_id: str = "bgb-195"

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        unit_fields = (
            "min_detection_score",
            "fulfillment_weight",
            "weighted_score_weight",
            "exclusion_factor",
            "association_alternative_min_score",
            "association_risk_min_score",
            "beweislast_min_score",
            "high_confidence_threshold",
            "relevance_group_min_score",
        )
        for name in unit_fields:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")

        if abs(self.fulfillment_weight + self.weighted_score_weight - 1.0) > 1e-9:
            raise ConfigurationError(
                "fulfillment_weight and weighted_score_weight must sum to 1.0"
            )

        if not (
            0 < self.risk_medium_threshold < self.risk_high_threshold < self.risk_critical_threshold <= 100
        ):
            raise ConfigurationError(
                "risk thresholds must satisfy 0 < medium < high < critical <= 100"
            )

        if self.qualification_normalizer <= 0 or self.indicator_saturation <= 0:
            raise ConfigurationError("qualification_normalizer and indicator_saturation must be positive")

        for name in (
            "excerpt_radius",
            "max_excerpts_per_element",
            "max_trigger_indicators",
            "max_input_chars",
            "max_reported_norms",
            "relevance_group_limit",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "ScoringParameters":
        """
        Build parameters from a config mapping, ignoring unknown keys

        Args:
            values: Mapping of parameter names to values (may be None)

        Returns:
            ScoringParameters instance

        Raises:
            ConfigurationError: If a value has the wrong type or range
        """
        if not values:
            return cls()

        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.warning("Ignoring unknown scoring parameter: %s", key)
                continue
            default = getattr(cls, key)
            try:
                if isinstance(default, str):
                    kwargs[key] = str(value)
                elif isinstance(default, int) and not isinstance(default, bool):
                    kwargs[key] = int(value)
                else:
                    kwargs[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid value for {key}: {value!r}") from e

        return cls(**kwargs)

    def replace(self, **changes: Any) -> "ScoringParameters":
        """Return a copy with the given parameters changed."""
        values = asdict(self)
        values.update(changes)
        return ScoringParameters(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
