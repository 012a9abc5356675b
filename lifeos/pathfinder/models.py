"""Pydantic models for resource search results."""

from typing import Literal

from pydantic import BaseModel, Field


EffortLevel = Literal["Low", "Med", "High"]


class Opportunity(BaseModel):
    """A single program, grant or service worth applying to."""

    title: str
    url: str
    match_reason: str = Field(
        ..., description="Why this is a good fit for someone in recovery. Max 20 words."
    )
    effort_level: EffortLevel = Field(..., description="Estimated effort to apply/enroll.")
    deadline: str | None = Field(
        None, description="Application deadline if mentioned, e.g. 'Dec 31' or 'Rolling'."
    )


class RankedOpportunities(BaseModel):
    """Schema the ranking model must return."""

    opportunities: list[Opportunity] = Field(default_factory=list)
    summary: str = Field(default="", description="A brief 1-sentence summary of the search findings.")


class SearchResult(BaseModel):
    """What the resource feed receives."""

    results: list[Opportunity] = Field(default_factory=list)
    answer: str | None = None
    ranked: bool = Field(default=False, description="True when the model ranked the results")
