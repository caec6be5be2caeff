"""RecordFeedbackUseCase — apply human feedback or an override to a decision."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from app.application.ports.decision_repo import DecisionRepository
from app.domain.entities.decision import Decision, Feedback
from app.domain.errors import DecisionNotFoundError

logger = logging.getLogger(__name__)


class RecordFeedbackUseCase:
    def __init__(
        self,
        decision_repo: DecisionRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._decisions = decision_repo
        self._clock = clock

    async def execute(self, decision_id: int, feedback: Feedback) -> Decision:
        """Record feedback exactly once.

        Raises:
            DecisionNotFoundError: no decision with this id.
            FeedbackAlreadyRecordedError: the decision already has feedback.
        """
        decision = await self._decisions.get_by_id(decision_id)
        if decision is None:
            raise DecisionNotFoundError(decision_id)

        decision.record_feedback(feedback, self._clock())
        updated = await self._decisions.update(decision)

        if feedback.is_override:
            logger.info(
                "Decision %s overridden by %s (agent %s): %s",
                decision_id, feedback.overridden_by,
                feedback.selected_agent_id, feedback.override_reason,
            )
        else:
            logger.info(
                "Decision %s feedback recorded: score=%d, accepted=%s",
                decision_id, feedback.score, feedback.was_accepted,
            )
        return updated
