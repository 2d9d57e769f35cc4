"""Screening verdict models.

``EvaluatorResponse`` is the strict schema applied to the untrusted upstream
document; ``Evaluation`` is what callers receive. Aggregate scores are always
derived from the per-criterion fields, never copied from upstream.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

QUALITY_CRITERIA = (
    "complete",
    "legible",
    "consistent",
    "compliant",
    "justified",
    "measurable",
)
ATTENTION_CRITERIA = ("relevant", "material")

AttentionLevel = Literal["high", "medium", "low"]

ATTENTION_WEIGHTS = {"high": 1.0, "medium": 0.5, "low": 0.0}


class QualityCriterion(BaseModel):
    """Boolean rubric verdict."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    passed: StrictBool = Field(alias="pass")
    reason: StrictStr


class AttentionCriterion(BaseModel):
    """Ordinal rubric verdict."""

    model_config = ConfigDict(extra="ignore")

    score: AttentionLevel
    reason: StrictStr


class EvaluatorResponse(BaseModel):
    """Schema for the evaluation service's JSON document."""

    model_config = ConfigDict(extra="ignore")

    complete: QualityCriterion
    legible: QualityCriterion
    consistent: QualityCriterion
    compliant: QualityCriterion
    justified: QualityCriterion
    measurable: QualityCriterion
    relevant: AttentionCriterion
    material: AttentionCriterion
    summary: StrictStr
    # Self-reported aggregates are accepted but never used
    qualityScore: Optional[Any] = None
    attentionScore: Optional[Any] = None
    overallPass: Optional[Any] = None


class Evaluation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    complete: QualityCriterion
    legible: QualityCriterion
    consistent: QualityCriterion
    compliant: QualityCriterion
    justified: QualityCriterion
    measurable: QualityCriterion
    relevant: AttentionCriterion
    material: AttentionCriterion
    quality_score: float = Field(alias="qualityScore", ge=0.0, le=1.0)
    attention_score: float = Field(alias="attentionScore", ge=0.0, le=1.0)
    overall_pass: bool = Field(alias="overallPass")
    summary: str

    @classmethod
    def from_response(cls, response: EvaluatorResponse) -> "Evaluation":
        """Build an Evaluation, recomputing every aggregate from the criteria."""
        quality = [getattr(response, key) for key in QUALITY_CRITERIA]
        attention = [getattr(response, key) for key in ATTENTION_CRITERIA]

        return cls(
            **{key: getattr(response, key) for key in QUALITY_CRITERIA},
            **{key: getattr(response, key) for key in ATTENTION_CRITERIA},
            quality_score=sum(1.0 if c.passed else 0.0 for c in quality)
            / len(quality),
            attention_score=sum(ATTENTION_WEIGHTS[c.score] for c in attention)
            / len(attention),
            overall_pass=all(c.passed for c in quality),
            summary=response.summary,
        )

    def to_response(self) -> dict:
        """JSON-ready dict using the public camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
