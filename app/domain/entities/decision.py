"""Decision entity — the durable record of one assignment attempt."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.errors import FeedbackAlreadyRecordedError
from app.domain.value_objects.enums import DecisionType


@dataclass(frozen=True)
class DecisionAlternative:
    agent_id: int
    agent_name: str
    score: float
    score_breakdown: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Feedback:
    """Human feedback on a decision, optionally overriding the chosen agent."""

    score: int
    comments: str | None = None
    was_accepted: bool = False
    overridden_by: str | None = None
    override_reason: str | None = None
    selected_agent_id: int | None = None

    @property
    def is_override(self) -> bool:
        return bool(self.overridden_by)


@dataclass
class Decision:
    id: int | None
    ticket_id: str
    ticket_subject: str
    agent_id: int | None
    type: DecisionType
    score: float
    score_breakdown: dict[str, float] = field(default_factory=dict)
    alternatives: list[DecisionAlternative] = field(default_factory=list)
    category_id: int | None = None
    was_accepted: bool = False
    overridden_by: str | None = None
    override_reason: str | None = None
    override_agent_id: int | None = None
    feedback_score: int | None = None
    feedback_comments: str | None = None
    context_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    feedback_at: datetime | None = None

    def has_feedback(self) -> bool:
        return self.feedback_at is not None

    def record_feedback(self, feedback: Feedback, at: datetime) -> None:
        """Apply the one permitted post-creation mutation.

        The score snapshot is left untouched; an override only adds who/why
        and flips the type to MANUAL_OVERRIDE.
        """
        if self.has_feedback():
            raise FeedbackAlreadyRecordedError(self.id)

        self.feedback_score = feedback.score
        self.feedback_comments = feedback.comments
        self.was_accepted = feedback.was_accepted
        self.feedback_at = at

        if feedback.is_override:
            self.overridden_by = feedback.overridden_by
            self.override_reason = feedback.override_reason
            self.override_agent_id = feedback.selected_agent_id
            self.was_accepted = False
            self.type = DecisionType.MANUAL_OVERRIDE
