"""
Tatbestand Check Result Models

Per-element and per-norm results of checking statutory elements
against case text.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from norm_audit.models.norms.legal_norm import LegalDomain


class TatbestandsMerkmalCheck(BaseModel):
    """Result of checking one statutory element"""

    model_config = ConfigDict(use_enum_values=True)

    merkmal_id: str = Field(..., description="Element ID")
    label: str = Field(..., description="Element label")
    description: str = Field(default="", description="Element description")
    fulfilled: bool = Field(..., description="At least one indicator present")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Element confidence (0.0 ~ 1.0)")
    matched_indicators: List[str] = Field(default_factory=list)
    source_excerpts: List[str] = Field(default_factory=list, description="Context excerpts (max 3)")
    required: bool = Field(..., description="Element is mandatory")
    weight: float = Field(..., ge=0.0, le=1.0)


class TatbestandsCheckResult(BaseModel):
    """
    Tatbestandsprüfung result for one norm

    Attributes:
        overall_score: 0.6 * fulfillment_ratio + 0.4 * weighted_score
        fulfillment_ratio: Share of fulfilled required (or all) elements
        weighted_score: Confidence-weighted share of element weights
        all_required_fulfilled: Every required element fulfilled and no exclusion hit
        matched_keywords: Norm keywords literally contained in the text
    """

    model_config = ConfigDict(use_enum_values=True)

    norm_id: str
    norm_title: str
    law: str
    paragraph: str
    domain: LegalDomain
    merkmale: List[TatbestandsMerkmalCheck] = Field(default_factory=list)
    overall_score: float = Field(..., ge=0.0, le=1.0)
    fulfillment_ratio: float = Field(..., ge=0.0, le=1.0)
    weighted_score: float = Field(..., ge=0.0, le=1.0)
    all_required_fulfilled: bool
    matched_keywords: List[str] = Field(default_factory=list)
    source_document_ids: List[str] = Field(default_factory=list)

    @property
    def citation(self) -> str:
        return f"{self.law} {self.paragraph}"
