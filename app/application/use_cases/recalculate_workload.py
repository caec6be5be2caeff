"""RecalculateWorkloadUseCase — sync every agent's age-weighted load from the ticketing system."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from app.application.ports.agent_repo import AgentRepository
from app.application.ports.settings_repo import SettingsRepository
from app.application.ports.ticketing_port import TicketingError, TicketingPort
from app.domain.policies.workload import AgentWorkload, calculate_agent_workload

logger = logging.getLogger(__name__)


@dataclass
class WorkloadSyncSummary:
    processed: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    workloads: list[AgentWorkload] = field(default_factory=list)


class RecalculateWorkloadUseCase:
    def __init__(
        self,
        agent_repo: AgentRepository,
        settings_repo: SettingsRepository,
        ticketing: TicketingPort,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._agents = agent_repo
        self._settings = settings_repo
        self._ticketing = ticketing
        self._clock = clock

    async def execute(self) -> WorkloadSyncSummary:
        """Recompute raw and weighted counts for all agents with a ticketing id.

        One agent's ticketing failure is logged and skipped; it never aborts
        the sync for the others.
        """
        settings = await self._settings.load()
        agents = await self._agents.get_all()
        now = self._clock()
        summary = WorkloadSyncSummary()

        for agent in agents:
            if not agent.external_id:
                summary.skipped += 1
                continue
            summary.processed += 1

            try:
                tickets = await self._ticketing.list_open_tickets(agent.external_id)
            except TicketingError as e:
                logger.warning("Workload sync: could not list tickets for %s: %s", agent.name, e)
                summary.failed += 1
                continue

            try:
                workload = calculate_agent_workload(agent.id, tickets, settings.age_weights, now)
                await self._agents.update_workload(
                    agent.id,
                    workload.raw_ticket_count,
                    workload.weighted_ticket_count,
                    workload.breakdown,
                )
            except Exception:
                logger.exception("Workload sync: could not update %s", agent.name)
                summary.failed += 1
                continue
            summary.updated += 1
            summary.workloads.append(workload)
            logger.info(
                "Workload sync: %s raw=%d weighted=%.2f %s",
                agent.name, workload.raw_ticket_count,
                workload.weighted_ticket_count, workload.breakdown,
            )

        logger.info(
            "Workload sync complete: %d/%d updated, %d failed, %d skipped",
            summary.updated, summary.processed, summary.failed, summary.skipped,
        )
        return summary
