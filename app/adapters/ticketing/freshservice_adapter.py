"""Freshservice ticketing adapter — implements TicketingPort over the v2 REST API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Awaitable, Callable

import httpx

from app.adapters.ticketing.mappers import parse_open_ticket, parse_ticket_payload
from app.application.ports.ticketing_port import (
    TicketingError,
    TicketingPort,
    TicketingRateLimitedError,
    TicketingUnavailableError,
)
from app.config import settings
from app.domain.entities.ticket import OpenTicket, Ticket

logger = logging.getLogger(__name__)

MAX_RETRIES = 5
INITIAL_BACKOFF_SECONDS = 1.0
MAX_BACKOFF_SECONDS = 30.0
PAGE_SIZE = 100

# Freshservice status codes counted as an agent's active workload.
STATUS_OPEN = 2
STATUS_PENDING = 3


class FreshserviceAdapter(TicketingPort):
    """Freshservice API client with 429 retry and exponential backoff."""

    def __init__(
        self,
        domain: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._domain = domain if domain is not None else settings.freshservice_domain
        self._api_key = api_key if api_key is not None else settings.freshservice_api_key
        self._timeout = timeout if timeout is not None else settings.freshservice_timeout
        self._max_retries = max_retries
        self._transport = transport
        self._sleep = sleep

    @property
    def base_url(self) -> str:
        return f"https://{self._domain}/api/v2"

    async def get_ticket(self, ticket_id: str) -> Ticket:
        response = await self._request("GET", f"/tickets/{ticket_id}", params={"include": "requester"})
        try:
            return parse_ticket_payload(response.json()["ticket"])
        except (KeyError, TypeError, ValueError) as e:
            raise TicketingError(f"Malformed ticket payload for {ticket_id}: {e!r}") from e

    async def assign_ticket(self, ticket_id: str, agent_external_id: str) -> None:
        await self._request(
            "PUT",
            f"/tickets/{ticket_id}",
            json={"responder_id": int(agent_external_id)},
        )
        logger.info("Freshservice: ticket %s assigned to responder %s", ticket_id, agent_external_id)

    async def add_note(self, ticket_id: str, body: str, private: bool = True) -> None:
        await self._request(
            "POST",
            f"/tickets/{ticket_id}/notes",
            json={"body": body, "private": private},
        )

    async def list_open_tickets(self, agent_external_id: str) -> list[OpenTicket]:
        tickets: list[OpenTicket] = []
        for status in (STATUS_OPEN, STATUS_PENDING):
            page = 1
            while True:
                response = await self._request(
                    "GET",
                    "/tickets",
                    params={
                        "responder_id": agent_external_id,
                        "status": status,
                        "page": page,
                        "per_page": PAGE_SIZE,
                    },
                )
                try:
                    batch = response.json().get("tickets", [])
                except (AttributeError, ValueError) as e:
                    raise TicketingError(f"Malformed ticket list for responder {agent_external_id}: {e!r}") from e
                for payload in batch:
                    if str(payload.get("responder_id", agent_external_id)) != str(agent_external_id):
                        continue
                    try:
                        tickets.append(parse_open_ticket(payload))
                    except (TypeError, ValueError) as e:
                        logger.warning("Freshservice: skipping unparseable ticket %s: %s", payload.get("id"), e)
                if len(batch) < PAGE_SIZE:
                    break
                page += 1
        logger.debug("Freshservice: %d open tickets for responder %s", len(tickets), agent_external_id)
        return tickets

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one API call, retrying only on HTTP 429.

        Raises:
            TicketingUnavailableError: network failure or 5xx.
            TicketingRateLimitedError: still rate limited after max_retries.
            TicketingError: any other error status.
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self._api_key, "X"),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for attempt in range(self._max_retries + 1):
                try:
                    response = await client.request(method, path, **kwargs)
                except httpx.TransportError as e:
                    raise TicketingUnavailableError(f"Freshservice unreachable: {e}") from e

                if response.status_code == 429:
                    if attempt == self._max_retries:
                        logger.error("Freshservice: max retries (%d) exceeded for %s %s", self._max_retries, method, path)
                        raise TicketingRateLimitedError(
                            f"Rate limited on {method} {path}", status_code=429
                        )
                    delay = retry_delay(response, attempt)
                    logger.warning(
                        "Freshservice rate limited (%s %s), waiting %.1fs (attempt %d/%d)",
                        method, path, delay, attempt + 1, self._max_retries,
                    )
                    await self._sleep(delay)
                    continue

                if response.status_code >= 500:
                    raise TicketingUnavailableError(
                        f"Freshservice {method} {path} failed with {response.status_code}",
                        status_code=response.status_code,
                    )
                if response.is_error:
                    raise TicketingError(
                        f"Freshservice {method} {path} failed with {response.status_code}",
                        status_code=response.status_code,
                    )
                return response

        raise TicketingRateLimitedError(f"Rate limited on {method} {path}", status_code=429)


def retry_delay(response: httpx.Response, attempt: int) -> float:
    """Seconds to wait before the next attempt.

    Retry-After wins when present (seconds or an HTTP date); otherwise
    1s, 2s, 4s, ... capped at 30s.
    """
    retry_after = response.headers.get("retry-after")
    if retry_after:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(retry_after)
        except (TypeError, ValueError):
            when = None
        if when is not None:
            if when.tzinfo is None:
                when = when.replace(tzinfo=timezone.utc)
            return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())
    return min(INITIAL_BACKOFF_SECONDS * (2 ** attempt), MAX_BACKOFF_SECONDS)
