"""Domain exceptions."""


class InvalidSettingsError(ValueError):
    """Raised when persisted engine settings fail validation."""


class DecisionNotFoundError(LookupError):
    def __init__(self, decision_id: int):
        super().__init__(f"Decision {decision_id} not found")
        self.decision_id = decision_id


class FeedbackAlreadyRecordedError(Exception):
    def __init__(self, decision_id: int | None):
        super().__init__(f"Feedback already recorded for decision {decision_id}")
        self.decision_id = decision_id
