"""WorkloadPolicy — age-weighted accounting of an agent's open tickets.

Fresh tickets weigh more than old ones, so an agent cannot look "light"
simply by letting tickets age unresolved. All functions are pure: the
caller supplies ``now`` and the age weights.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from app.domain.entities.ticket import OpenTicket
from app.domain.value_objects.engine_settings import TicketAgeWeights
from app.domain.value_objects.enums import WorkloadBucket

# Weighted ticket count treated as a "full" workload.
FULL_WORKLOAD_WEIGHT = 10.0
# Weighted counts closer than this are considered equal by compare_workloads.
WEIGHT_TIE_MARGIN = 0.1


@dataclass(frozen=True)
class TicketWorkload:
    ticket_id: str
    created_at: datetime
    age_in_days: int
    age_in_business_days: int
    bucket: WorkloadBucket
    weight: float


@dataclass(frozen=True)
class AgentWorkload:
    agent_id: int
    raw_ticket_count: int
    weighted_ticket_count: float
    breakdown: dict[str, int]
    workload_score: float
    tickets: list[TicketWorkload] = field(default_factory=list)

    @property
    def fresh_count(self) -> int:
        return self.breakdown.get(WorkloadBucket.FRESH.value, 0)


def business_days_between(start: date, end: date) -> int:
    """Weekdays after *start* up to and including *end*.

    The start day itself is never counted, so a ticket opened this morning
    is 0 business days old.
    """
    if end <= start:
        return 0
    full_weeks, remainder = divmod((end - start).days, 7)
    count = full_weeks * 5
    for offset in range(1, remainder + 1):
        if (start + timedelta(days=offset)).weekday() < 5:
            count += 1
    return count


def bucket_for(age_in_business_days: int) -> WorkloadBucket:
    if age_in_business_days <= 1:
        return WorkloadBucket.FRESH
    if age_in_business_days <= 5:
        return WorkloadBucket.RECENT
    if age_in_business_days <= 14:
        return WorkloadBucket.STALE
    return WorkloadBucket.ABANDONED


def calculate_ticket_workload(
    ticket: OpenTicket,
    weights: TicketAgeWeights,
    now: datetime,
) -> TicketWorkload:
    created = _as_utc(ticket.created_at)
    current = _as_utc(now)

    age_in_days = max(0, int((current - created).total_seconds() // 86400))
    age_in_business_days = business_days_between(created.date(), current.date())
    bucket = bucket_for(age_in_business_days)

    return TicketWorkload(
        ticket_id=ticket.id,
        created_at=created,
        age_in_days=age_in_days,
        age_in_business_days=age_in_business_days,
        bucket=bucket,
        weight=weights.for_bucket(bucket),
    )


def calculate_agent_workload(
    agent_id: int,
    tickets: list[OpenTicket],
    weights: TicketAgeWeights,
    now: datetime,
) -> AgentWorkload:
    """Turn an agent's open tickets into raw, weighted and bucketed load figures."""
    breakdown = {bucket.value: 0 for bucket in WorkloadBucket}
    ticket_workloads: list[TicketWorkload] = []
    total_weight = 0.0

    for ticket in tickets:
        workload = calculate_ticket_workload(ticket, weights, now)
        ticket_workloads.append(workload)
        breakdown[workload.bucket.value] += 1
        total_weight += workload.weight

    return AgentWorkload(
        agent_id=agent_id,
        raw_ticket_count=len(tickets),
        weighted_ticket_count=round(total_weight, 2),
        breakdown=breakdown,
        workload_score=round(min(1.0, total_weight / FULL_WORKLOAD_WEIGHT), 3),
        tickets=ticket_workloads,
    )


def compare_workloads(a: AgentWorkload, b: AgentWorkload) -> float:
    """Negative when *a* is the lighter agent, positive when *b* is.

    Weighted count decides when the gap exceeds the tie margin; otherwise the
    agent holding more fresh tickets counts as busier, then the raw count.
    """
    weight_diff = round(a.weighted_ticket_count - b.weighted_ticket_count, 2)
    if abs(weight_diff) > WEIGHT_TIE_MARGIN:
        return weight_diff

    fresh_diff = a.fresh_count - b.fresh_count
    if fresh_diff != 0:
        return fresh_diff

    return a.raw_ticket_count - b.raw_ticket_count


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
