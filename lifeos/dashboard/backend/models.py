"""
Pydantic models for Dashboard API request/response types.

Domain payloads that already have pydantic models (roadmaps, search
results) are reused directly; the models here cover everything else.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from lifeos.roadmap.models import Roadmap


# =============================================================================
# Health & Errors
# =============================================================================


class HealthCheck(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Overall system status")
    version: str = Field(default="0.1.0", description="API version")
    timestamp: datetime = Field(default_factory=datetime.now, description="Check timestamp")
    services: dict[str, str] = Field(
        default_factory=dict, description="Individual service statuses"
    )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    code: str = Field(default="INTERNAL_ERROR", description="Error code")
    details: dict[str, Any] | None = Field(None, description="Additional details")


# =============================================================================
# Auth Models
# =============================================================================


class LoginRequest(BaseModel):
    """Login with a user ID and the household master key."""

    user_id: str = Field(..., min_length=1, description="Who is signing in")
    password: str = Field(..., min_length=1)


class AuthStatus(BaseModel):
    """Authentication status response."""

    authenticated: bool
    user_id: str | None = None


# =============================================================================
# Momentum Models
# =============================================================================


class TaskItem(BaseModel):
    """A task in the momentum list."""

    id: str
    title: str
    category: Literal["admin", "health", "financial"]
    is_urgent: bool = False
    is_completed: bool = False


class MomentumResponse(BaseModel):
    """Ordered task list plus streak and progress."""

    tasks: list[TaskItem] = Field(default_factory=list, description="Incomplete first")
    streak: int = Field(default=0, description="Consecutive active days")
    completed_count: int = Field(default=0)
    total: int = Field(default=0)
    progress_percent: float = Field(default=0.0, description="Completed share of tasks, 0-100")
    all_completed: bool = Field(default=False)


class NewTask(BaseModel):
    """Request to append a task."""

    title: str = Field(..., min_length=1, max_length=200)
    category: Literal["admin", "health", "financial"] = Field(default="admin")
    is_urgent: bool = Field(default=False)


class ToggleRequest(BaseModel):
    """Request to set a task's completion flag."""

    completed: bool = Field(..., description="New completion state")


class AdoptRoadmapRequest(BaseModel):
    """Append the tasks of one roadmap phase to the user's list."""

    roadmap: Roadmap
    phase_index: int = Field(default=0, ge=0, description="Which phase to adopt")


# =============================================================================
# Vault Models
# =============================================================================


class VaultItemResponse(BaseModel):
    """Stored document metadata."""

    id: str
    title: str
    file_url: str
    file_type: str | None = None
    category: str = "General"
    created_at: str


# =============================================================================
# Finance Models
# =============================================================================


class ProfileUpdate(BaseModel):
    """Profile settings from the intake form."""

    name: str | None = Field(None, description="Display name")
    currency: Literal["USD", "EUR", "GBP", "CAD", "AUD", "JPY"] | None = Field(None)
    time_zone: str | None = Field(None, description="IANA time zone, e.g. America/New_York")


class ProfileResponse(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    currency: str = "USD"
    time_zone: str = "UTC"
    current_streak: int = 0
    last_active_date: str | None = None


class AccountCreate(BaseModel):
    """New financial account."""

    label: str = Field(..., min_length=1)
    type: Literal["checking", "savings", "credit", "investment", "other"] = Field(default="checking")
    starting_balance: float | str = Field(default=0, description="Opening balance")


class AccountResponse(BaseModel):
    id: str
    label: str
    type: str
    starting_balance: float


class TransactionImport(BaseModel):
    """Rows parsed from a CSV export, keyed by header."""

    transactions: list[dict[str, Any]] = Field(default_factory=list)
    account_id: str | None = Field(None, description="Account the rows belong to")


class TransactionImportResult(BaseModel):
    success: bool = True
    count: int = 0
