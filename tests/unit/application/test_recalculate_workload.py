"""Tests for RecalculateWorkloadUseCase."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from app.adapters.ticketing.freshservice_adapter import FreshserviceAdapter
from app.application.ports.agent_repo import AgentRepository
from app.application.ports.settings_repo import SettingsRepository
from app.application.ports.ticketing_port import TicketingPort, TicketingUnavailableError
from app.application.use_cases.recalculate_workload import RecalculateWorkloadUseCase
from app.domain.entities.agent import Agent
from app.domain.entities.ticket import OpenTicket
from app.domain.value_objects.engine_settings import EngineSettings

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeAgentRepo(AgentRepository):
    def __init__(self, agents: list[Agent]):
        self._agents = {a.id: a for a in agents}
        self.updates: dict[int, tuple[int, float, dict]] = {}
        self.failing_updates: set[int] = set()

    async def get_all(self):
        return list(self._agents.values())

    async def get_by_id(self, agent_id):
        return self._agents.get(agent_id)

    async def increment_load(self, agent_id):
        raise AssertionError("workload sync must not increment loads")

    async def update_workload(self, agent_id, raw_count, weighted_count, breakdown):
        if agent_id in self.failing_updates:
            raise RuntimeError("connection reset")
        self.updates[agent_id] = (raw_count, weighted_count, breakdown)


class FakeSettingsRepo(SettingsRepository):
    async def load(self):
        return EngineSettings()

    async def save_weights(self, weights):
        pass


class FakeTicketing(TicketingPort):
    def __init__(self, tickets: dict[str, list[OpenTicket]], failing: set[str] | None = None):
        self._tickets = tickets
        self._failing = failing or set()
        self.listed: list[str] = []

    async def get_ticket(self, ticket_id):
        raise NotImplementedError

    async def assign_ticket(self, ticket_id, agent_external_id):
        raise NotImplementedError

    async def add_note(self, ticket_id, body, private=True):
        raise NotImplementedError

    async def list_open_tickets(self, agent_external_id):
        self.listed.append(agent_external_id)
        if agent_external_id in self._failing:
            raise TicketingUnavailableError("timeout")
        return self._tickets.get(agent_external_id, [])


# ─── Fixtures ────────────────────────────────────────────────────────


def _open(tid: str, y: int, m: int, d: int) -> OpenTicket:
    return OpenTicket(id=tid, created_at=datetime(y, m, d, 9, 0, tzinfo=timezone.utc), status=2)


def _make_use_case(agents: list[Agent], ticketing: TicketingPort):
    repo = FakeAgentRepo(agents)
    uc = RecalculateWorkloadUseCase(
        agent_repo=repo,
        settings_repo=FakeSettingsRepo(),
        ticketing=ticketing,
        clock=lambda: NOW,
    )
    return uc, repo


# ─── Tests ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_sync_writes_weighted_counts():
    ticketing = FakeTicketing(
        {
            "501": [_open("1", 2026, 10, 19), _open("2", 2026, 10, 9)],
            "502": [],
        }
    )
    uc, repo = _make_use_case(
        [Agent(id=1, name="Alice", external_id="501"), Agent(id=2, name="Bob", external_id="502")],
        ticketing,
    )

    summary = await uc.execute()

    assert summary.processed == 2
    assert summary.updated == 2
    assert summary.failed == 0
    assert repo.updates[1] == (2, 2.5, {"fresh": 1, "recent": 0, "stale": 1, "abandoned": 0})
    assert repo.updates[2] == (0, 0.0, {"fresh": 0, "recent": 0, "stale": 0, "abandoned": 0})
    assert [w.agent_id for w in summary.workloads] == [1, 2]


@pytest.mark.asyncio
async def test_agents_without_ticketing_id_are_skipped():
    ticketing = FakeTicketing({})
    uc, repo = _make_use_case([Agent(id=1, name="Local only")], ticketing)

    summary = await uc.execute()

    assert summary.skipped == 1
    assert summary.processed == 0
    assert ticketing.listed == []
    assert repo.updates == {}


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_the_sync():
    ticketing = FakeTicketing({"502": [_open("9", 2026, 10, 16)]}, failing={"501"})
    uc, repo = _make_use_case(
        [Agent(id=1, name="Alice", external_id="501"), Agent(id=2, name="Bob", external_id="502")],
        ticketing,
    )

    summary = await uc.execute()

    assert summary.failed == 1
    assert summary.updated == 1
    assert 1 not in repo.updates
    assert repo.updates[2][0] == 1


@pytest.mark.asyncio
async def test_failed_update_does_not_stop_the_sync():
    ticketing = FakeTicketing({"501": [_open("1", 2026, 10, 19)], "502": [_open("2", 2026, 10, 19)]})
    uc, repo = _make_use_case(
        [Agent(id=1, name="Alice", external_id="501"), Agent(id=2, name="Bob", external_id="502")],
        ticketing,
    )
    repo.failing_updates.add(1)

    summary = await uc.execute()

    assert summary.failed == 1
    assert summary.updated == 1
    assert list(repo.updates) == [2]


@pytest.mark.asyncio
async def test_ticket_without_created_at_is_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        responder = request.url.params["responder_id"]
        if request.url.params["status"] != "2":
            return httpx.Response(200, json={"tickets": []})
        if responder == "501":
            return httpx.Response(200, json={"tickets": [{"id": 1, "responder_id": 501}]})
        return httpx.Response(
            200,
            json={"tickets": [{"id": 2, "responder_id": 502, "created_at": "2026-10-19T08:00:00Z"}]},
        )

    adapter = FreshserviceAdapter(
        domain="acme.freshservice.com",
        api_key="secret-key",
        transport=httpx.MockTransport(handler),
    )
    uc, repo = _make_use_case(
        [Agent(id=1, name="Alice", external_id="501"), Agent(id=2, name="Bob", external_id="502")],
        adapter,
    )

    summary = await uc.execute()

    assert summary.failed == 0
    assert summary.updated == 2
    assert repo.updates[1][0] == 0
    assert repo.updates[2][0] == 1
