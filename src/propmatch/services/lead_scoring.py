from __future__ import annotations

import random
import time
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from propmatch.domain.lead import Lead, LeadIntake, as_utc

PERSONA_POINTS: dict[str, int] = {
    "end-user-family": 25,
    "upgrader": 22,
    "first-time-buyer": 20,
    "investor": 18,
    "nri-investor": 15,
}

URGENCY_POINTS: dict[str, int] = {
    "immediate": 30,
    "3-6-months": 20,
    "6-12-months": 10,
}

BUDGET_READY_POINTS = 15
PRE_APPROVAL_POINTS = 20
PREFERRED_AREAS_POINTS = 10

PREMIUM_BUDGET_LAKHS = 200.0

HOT_THRESHOLD = 70
WARM_THRESHOLD = 40


@dataclass
class LeadQualification:
    lead_score: int
    lead_type: str
    smart_tags: list[str] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)


def _get(data: LeadIntake | dict[str, Any], attr: str, alias: str) -> Any:
    if isinstance(data, LeadIntake):
        return getattr(data, attr)
    if attr in data:
        return data.get(attr)
    return data.get(alias)


def calculate_lead_score(data: LeadIntake | dict[str, Any]) -> int:
    """
    Readiness score (0..100) from what the capture form collected:
    persona, urgency, budget, pre-approval and area preference.
    """
    score = 0
    score += PERSONA_POINTS.get(str(_get(data, "buyer_persona", "buyerPersona") or ""), 0)
    score += URGENCY_POINTS.get(str(_get(data, "urgency", "urgency") or ""), 0)

    if _get(data, "budget_min", "budgetMin") and _get(data, "budget_max", "budgetMax"):
        score += BUDGET_READY_POINTS
    if _get(data, "has_pre_approval", "hasPreApproval"):
        score += PRE_APPROVAL_POINTS
    if _get(data, "preferred_areas", "preferredAreas"):
        score += PREFERRED_AREAS_POINTS

    return min(score, 100)


def generate_smart_tags(data: LeadIntake | dict[str, Any]) -> list[str]:
    tags: list[str] = []

    if _get(data, "urgency", "urgency") == "immediate":
        tags.append("hot-lead")
    if _get(data, "buyer_persona", "buyerPersona") == "first-time-buyer":
        tags.append("first-time-buyer")
    if _get(data, "has_pre_approval", "hasPreApproval"):
        tags.append("pre-approved")
    if _get(data, "wants_legal_support", "wantsLegalSupport"):
        tags.append("needs-legal-support")

    budget_max = _get(data, "budget_max", "budgetMax")
    try:
        if budget_max is not None and float(budget_max) > PREMIUM_BUDGET_LAKHS:
            tags.append("premium-budget")
    except (TypeError, ValueError):
        pass

    return tags


def classify_lead_type(score: int) -> str:
    if score >= HOT_THRESHOLD:
        return "hot"
    if score >= WARM_THRESHOLD:
        return "warm"
    return "cold"


def qualify(data: LeadIntake | dict[str, Any]) -> LeadQualification:
    score = calculate_lead_score(data)
    reasons = []
    persona = _get(data, "buyer_persona", "buyerPersona")
    if persona:
        reasons.append(f"persona={persona}")
    urgency = _get(data, "urgency", "urgency")
    if urgency:
        reasons.append(f"urgency={urgency}")
    return LeadQualification(
        lead_score=score,
        lead_type=classify_lead_type(score),
        smart_tags=generate_smart_tags(data),
        reasons=reasons,
    )


def new_lead_id(now: float | None = None) -> str:
    ts = int((now if now is not None else time.time()) * 1000)
    return f"LD{ts}{random.randint(0, 999)}"


def format_budget_range(budget_min: float | None, budget_max: float | None) -> str:
    if budget_min and budget_max:
        return f"{budget_min:g}L-{budget_max:g}L"
    return "TBD"


def build_lead(intake: LeadIntake) -> Lead:
    """
    Turn a capture-form submission into a scored Lead ready to persist.
    """
    q = qualify(intake)
    return Lead(
        lead_id=new_lead_id(),
        source=intake.source or "manual-entry",
        lead_type=q.lead_type,
        priority=intake.priority,
        customer_name=intake.customer_name,
        phone=intake.phone,
        email=intake.email,
        assigned_to=intake.assigned_to,
        buyer_persona=intake.buyer_persona,
        urgency=intake.urgency,
        budget_range=format_budget_range(intake.budget_min, intake.budget_max),
        budget_min=intake.budget_min,
        budget_max=intake.budget_max,
        property_name=intake.property_name or "General Inquiry",
        interested_configuration=intake.interested_configuration or "any",
        lead_score=q.lead_score,
        smart_tags=q.smart_tags,
        qualification_notes="; ".join(q.reasons) or None,
        status="new",
    )


# ---------------------------------------------------------------------
# Reporting over a lead list
# ---------------------------------------------------------------------


def filter_leads(
    leads: Iterable[Lead],
    *,
    status: str | None = None,
    lead_type: str | None = None,
    priority: str | None = None,
    assigned_to: str | None = None,
    source: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[Lead]:
    out: list[Lead] = []
    for lead in leads:
        if status and lead.status != status:
            continue
        if lead_type and lead.lead_type != lead_type:
            continue
        if priority and lead.priority != priority:
            continue
        if assigned_to and lead.assigned_to != assigned_to:
            continue
        if source and lead.source != source:
            continue
        if date_from and lead.created_at < as_utc(date_from):
            continue
        if date_to and lead.created_at > as_utc(date_to):
            continue
        out.append(lead)
    return out


def lead_stats(leads: Sequence[Lead]) -> dict[str, Any]:
    total = len(leads)
    closed_won = sum(1 for l in leads if l.status == "closed-won")

    return {
        "total_leads": total,
        "new_leads": sum(1 for l in leads if l.status == "new"),
        "qualified_leads": sum(1 for l in leads if l.status == "qualified"),
        "hot_leads": sum(1 for l in leads if l.lead_type == "hot"),
        "conversion_rate": round(closed_won / total * 100) if total else 0,
        "avg_lead_score": round(sum(l.lead_score for l in leads) / total) if total else 0,
        "leads_by_source": dict(Counter(l.source for l in leads)),
        "leads_by_status": dict(Counter(l.status for l in leads)),
    }
