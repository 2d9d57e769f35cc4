"""Human-facing catalogue of the screening rubric."""

from typing import Dict, List, Literal

from pydantic import BaseModel

from app.services.screening.models import ATTENTION_CRITERIA, QUALITY_CRITERIA


class CriterionInfo(BaseModel):
    key: str
    label: str
    kind: Literal["quality", "attention"]
    description: str


CRITERIA: List[CriterionInfo] = [
    CriterionInfo(
        key="complete",
        label="Complete",
        kind="quality",
        description=(
            "Proposal includes all the required template elements for a "
            "proposal of its type. For example, a funding proposal includes "
            "budget and milestones."
        ),
    ),
    CriterionInfo(
        key="legible",
        label="Legible",
        kind="quality",
        description=(
            "Proposal content is clear enough that the decision being made "
            "can be unambiguously understood."
        ),
    ),
    CriterionInfo(
        key="consistent",
        label="Consistent",
        kind="quality",
        description=(
            "Proposal does not contradict itself. Details such as budget, "
            "dates and scope are consistent everywhere they are referenced."
        ),
    ),
    CriterionInfo(
        key="compliant",
        label="Compliant",
        kind="quality",
        description=(
            "Proposal complies with all relevant rules and guidelines, such "
            "as the Constitution, HSP-001 and the Code of Conduct."
        ),
    ),
    CriterionInfo(
        key="justified",
        label="Justified",
        kind="quality",
        description=(
            "Proposal provides rationale that logically supports the stated "
            "objectives and actions."
        ),
    ),
    CriterionInfo(
        key="measurable",
        label="Measurable",
        kind="quality",
        description=(
            "Proposal includes measurable outcomes and success criteria that "
            "can be evaluated."
        ),
    ),
    CriterionInfo(
        key="relevant",
        label="Relevant",
        kind="attention",
        description="Proposal directly relates to the NEAR ecosystem.",
    ),
    CriterionInfo(
        key="material",
        label="Material",
        kind="attention",
        description="Proposal has high potential impact and/or risks.",
    ),
]

_CRITERIA_BY_KEY = {c.key: c for c in CRITERIA}


def get_criteria_catalogue() -> Dict[str, List[dict]]:
    """Rubric criteria grouped by kind, in scoring order."""
    return {
        "quality": [_CRITERIA_BY_KEY[key].model_dump() for key in QUALITY_CRITERIA],
        "attention": [
            _CRITERIA_BY_KEY[key].model_dump() for key in ATTENTION_CRITERIA
        ],
    }
