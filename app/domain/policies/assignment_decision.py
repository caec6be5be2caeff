"""AssignmentDecisionPolicy — confidence, reasoning and presentation of a ranking.

Operates on already-ranked ScoringResults; never re-scores.
"""

from __future__ import annotations

from app.domain.value_objects.scoring import ScoringResult

HIGH_SCORE = 0.8
MEDIUM_SCORE = 0.6
DEFAULT_REASON = "Best overall match based on scoring criteria"

SCORE_DISTRIBUTION_RANGES = [
    ("0-20", 20),
    ("21-40", 40),
    ("41-60", 60),
    ("61-80", 80),
    ("81-100", 100),
]


def calculate_confidence(results: list[ScoringResult]) -> float:
    """How sure the engine is about its top candidate.

    A high top score is trusted more when it stands clear of the runner-up.
    The gap is rounded to two decimals first, so 0.85 vs 0.65 counts as a
    0.20 gap rather than 0.1999...
    """
    if not results:
        return 0.0

    top = results[0].total_score
    if top >= HIGH_SCORE:
        if len(results) == 1:
            return 0.95
        gap = round(top - results[1].total_score, 2)
        if gap >= 0.2:
            return 0.9
        if gap >= 0.1:
            return 0.8
        return 0.7

    if top >= MEDIUM_SCORE:
        return 0.6
    return 0.4


def build_assignment_reason(result: ScoringResult) -> str:
    b = result.breakdown
    reasons = []
    if b.skill_score >= 0.8:
        reasons.append("excellent skill match")
    if b.load_score >= 0.8:
        reasons.append("optimal workload balance")
    if b.level_score >= 0.9:
        reasons.append("appropriate expertise level")
    if b.location_score == 1.0:
        reasons.append("location requirements met")

    if not reasons:
        return DEFAULT_REASON
    return f"Selected due to {', '.join(reasons)}"


def format_assignment_note(
    agent_name: str,
    alternatives: list[ScoringResult],
    reason: str,
) -> str:
    """Body of the note posted on an auto-assigned ticket."""
    lines = [
        "**Automated Assignment Recommendation**",
        "",
        f"**Recommended Agent:** {agent_name}",
        "",
        f"**Reason:** {reason}",
        "",
        "**Alternative Options:**",
    ]
    if alternatives:
        lines.extend(
            f"{i}. {alt.agent_name} (Score: {alt.total_score})"
            for i, alt in enumerate(alternatives, start=1)
        )
    else:
        lines.append("None")
    lines.extend(["", "_This recommendation was generated by the Ticket Assignment System_"])
    return "\n".join(lines)


def score_distribution(results: list[ScoringResult]) -> list[dict[str, object]]:
    """Histogram of total scores on a 0-100 scale in five inclusive buckets."""
    counts = [0] * len(SCORE_DISTRIBUTION_RANGES)
    for result in results:
        score = round(result.total_score * 100)
        for i, (_, upper) in enumerate(SCORE_DISTRIBUTION_RANGES):
            if score <= upper or i == len(SCORE_DISTRIBUTION_RANGES) - 1:
                counts[i] += 1
                break
    return [
        {"range": label, "count": count}
        for (label, _), count in zip(SCORE_DISTRIBUTION_RANGES, counts)
    ]
