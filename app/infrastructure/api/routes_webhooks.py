"""Freshservice webhook intake."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from app.adapters.persistence.repositories import SqlCategoryRepository
from app.adapters.ticketing.mappers import WebhookEvent, parse_webhook_payload
from app.adapters.ticketing.signature import verify_signature
from app.application.use_cases.assign_ticket import AssignmentRequest, AssignTicketUseCase
from app.config import settings
from app.domain.entities.category import Category
from app.infrastructure.api.dependencies import get_assign_ticket_uc, get_category_repo
from app.infrastructure.api.serializers import assignment_result_to_dict, status_code_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/freshservice")
async def freshservice_webhook(
    request: Request,
    x_freshservice_signature: str | None = Header(default=None),
    assign_uc: AssignTicketUseCase = Depends(get_assign_ticket_uc),
    categories: SqlCategoryRepository = Depends(get_category_repo),
):
    """Assign new tickets and tickets that were just unassigned."""
    body = await request.body()

    secret = settings.freshservice_webhook_secret
    if secret and not verify_signature(secret, body, x_freshservice_signature):
        logger.warning("Rejected Freshservice webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    try:
        payload = json.loads(body)
        event = parse_webhook_payload(payload)
    except (ValueError, AttributeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid webhook payload: {e}")

    logger.info("Webhook event %s for ticket %s", event.event, event.ticket_id)

    needs_assignment = event.event == "ticket_created" or (
        event.event == "ticket_updated" and event.is_unassignment
    )
    if event.ticket is None or not needs_assignment:
        return {"status": "ignored", "event": event.event, "ticket_id": event.ticket_id}

    category = None
    if event.category_external_id:
        category = await categories.get_by_external_id(event.category_external_id)

    result = await assign_uc.execute(webhook_assignment_request(event, category))
    return JSONResponse(
        status_code=status_code_for(result),
        content={"status": "processed", "event": event.event, "result": assignment_result_to_dict(result)},
    )


def webhook_assignment_request(event: WebhookEvent, category: Category | None) -> AssignmentRequest:
    # The category's own flag decides whether specialization is required.
    return AssignmentRequest(
        ticket_id=event.ticket.id,
        category_id=category.id if category else None,
        ticket=event.ticket,
    )
