"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AgentLevel(str, Enum):
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    MANAGER = "MANAGER"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self) + 1

    def is_at_least(self, other: "AgentLevel") -> bool:
        return self.rank >= other.rank


_LEVEL_ORDER = [AgentLevel.L1, AgentLevel.L2, AgentLevel.L3, AgentLevel.MANAGER]


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class DecisionType(str, Enum):
    AUTO_ASSIGNED = "AUTO_ASSIGNED"
    SUGGESTED = "SUGGESTED"
    MANUAL_OVERRIDE = "MANUAL_OVERRIDE"
    REASSIGNED = "REASSIGNED"


class AssignmentMode(str, Enum):
    AUTO_ASSIGNED = "AUTO_ASSIGNED"
    SUGGESTED = "SUGGESTED"
    FAILED = "FAILED"


class ErrorKind(str, Enum):
    # Business outcomes: the pipeline worked, nobody fits.
    NO_ELIGIBLE_AGENTS = "no_eligible_agents"
    BELOW_THRESHOLD = "below_threshold"
    # System failures.
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    EXTERNAL_ASSIGNMENT_FAILED = "external_assignment_failed"
    INTERNAL_ERROR = "internal_error"

    @property
    def is_no_match(self) -> bool:
        return self in (ErrorKind.NO_ELIGIBLE_AGENTS, ErrorKind.BELOW_THRESHOLD)


class WorkloadBucket(str, Enum):
    FRESH = "fresh"
    RECENT = "recent"
    STALE = "stale"
    ABANDONED = "abandoned"


class LocationMatching(str, Enum):
    DISABLED = "disabled"
    STRICT = "strict"
    FLEXIBLE = "flexible"


class SkillSource(str, Enum):
    MANUAL = "manual"
    CATEGORY = "category"
    AUTO_DETECTED = "auto_detected"
    METADATA = "metadata"


class ExclusionReason(str, Enum):
    INACTIVE = "inactive"
    AT_CAPACITY = "at_capacity"
    MISSING_SKILLS = "missing_skills"
    INSUFFICIENT_LEVEL = "insufficient_level"
    ON_PTO = "on_pto"
    LOCATION_MISMATCH = "location_mismatch"
    NO_SPECIALIZATION = "no_specialization"
