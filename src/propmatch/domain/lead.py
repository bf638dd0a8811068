from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # sqlite hands timestamps back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


LeadType = Literal["hot", "warm", "cold"]

LeadPriority = Literal["high", "medium", "low"]

# Pipeline order; follow-up is a side channel that can sit next to any stage.
LeadStatus = Literal[
    "new",
    "contacted",
    "qualified",
    "demo-scheduled",
    "proposal-sent",
    "negotiation",
    "closed-won",
    "closed-lost",
    "follow-up",
]

LEAD_STATUSES: tuple[str, ...] = (
    "new",
    "contacted",
    "qualified",
    "demo-scheduled",
    "proposal-sent",
    "negotiation",
    "closed-won",
    "closed-lost",
    "follow-up",
)

BuyerPersona = Literal[
    "end-user-family",
    "first-time-buyer",
    "nri-investor",
    "upgrader",
    "investor",
]

Urgency = Literal["immediate", "3-6-months", "6-12-months", "exploring"]


class LeadIntake(BaseModel):
    """
    What the capture form submits. Everything beyond the contact name is
    optional; the qualifier scores whatever is present.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    customer_name: str = Field(..., alias="customerName")
    phone: str | None = None
    email: str | None = None

    source: str = "manual-entry"
    priority: LeadPriority = "medium"
    assigned_to: str | None = Field(default=None, alias="assignedTo")

    buyer_persona: BuyerPersona | None = Field(default=None, alias="buyerPersona")
    urgency: Urgency | None = None

    # lakhs
    budget_min: float | None = Field(default=None, alias="budgetMin")
    budget_max: float | None = Field(default=None, alias="budgetMax")

    has_pre_approval: bool = Field(default=False, alias="hasPreApproval")
    wants_legal_support: bool = Field(default=False, alias="wantsLegalSupport")
    preferred_areas: list[str] = Field(default_factory=list, alias="preferredAreas")

    property_name: str | None = Field(default=None, alias="propertyName")
    interested_configuration: str | None = Field(default=None, alias="interestedConfiguration")


class Lead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    lead_id: str = Field(..., alias="leadId")
    source: str
    lead_type: LeadType = Field(..., alias="leadType")
    priority: LeadPriority = "medium"

    customer_name: str = Field(..., alias="customerName")
    phone: str | None = None
    email: str | None = None
    assigned_to: str | None = Field(default=None, alias="assignedTo")

    buyer_persona: str | None = Field(default=None, alias="buyerPersona")
    urgency: str | None = None

    budget_range: str = Field(default="TBD", alias="budgetRange")
    budget_min: float | None = Field(default=None, alias="budgetMin")
    budget_max: float | None = Field(default=None, alias="budgetMax")

    property_name: str = Field(default="General Inquiry", alias="propertyName")
    interested_configuration: str = Field(default="any", alias="interestedConfiguration")

    lead_score: int = Field(default=0, ge=0, le=100, alias="leadScore")
    smart_tags: list[str] = Field(default_factory=list, alias="smartTags")
    qualification_notes: str | None = Field(default=None, alias="qualificationNotes")

    status: LeadStatus = "new"

    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)
