"""
Pydantic models for recovery roadmaps.

The same models describe the request body, the schema the model is told
to follow, and the validated result handed back to callers.
"""

from typing import Literal

from pydantic import BaseModel, Field


TaskCategory = Literal["admin", "health", "financial"]


class RoadmapTask(BaseModel):
    """A single concrete step inside a phase."""

    title: str = Field(..., min_length=1, description="Short, action-oriented task name")
    description: str = Field(
        ..., description="One sentence explaining why this task is important"
    )
    category: TaskCategory = Field(..., description="Category of the task")
    is_urgent: bool = Field(
        ..., description="Whether this task is critical for immediate stability"
    )


class RoadmapPhase(BaseModel):
    """One phase of the plan, e.g. 'Phase 1: Stabilization (Days 1-30)'."""

    phase_name: str = Field(
        ..., description="Name of the phase, e.g., 'Phase 1: Stabilization (Days 1-30)'"
    )
    goal: str = Field(..., description="The primary goal of this phase")
    tasks: list[RoadmapTask] = Field(default_factory=list)


class SuggestedResource(BaseModel):
    """A search the user should run to find local help."""

    query: str = Field(..., description="Search query to find local resources")
    reason: str = Field(..., description="Why this user needs this specific resource")


class Roadmap(BaseModel):
    """Complete multi-phase plan."""

    phases: list[RoadmapPhase] = Field(..., min_length=1)
    suggested_resources: list[SuggestedResource] = Field(default_factory=list)


class RoadmapRequest(BaseModel):
    """What the user tells us about their situation."""

    one_year_goal: str = Field(..., min_length=1, description="Where the user wants to be in a year")
    current_worry: str = Field(..., min_length=1, description="Most pressing worry, e.g. 'Housing'")
    constraints: list[str] = Field(default_factory=list, description="Constraint tags, e.g. 'No ID'")
    zip_code: str = Field(default="", description="Location code for local resources")


class RoadmapResult(BaseModel):
    """Outcome of a generation attempt."""

    success: bool
    data: Roadmap | None = None
    error: str | None = None
    fallback: bool = Field(default=False, description="True when the canned plan was returned")
