"""SkillSet value object — an agent's skills from every source, normalized once."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from app.domain.value_objects.enums import SkillSource


def normalize_skill(skill: str) -> str:
    return skill.strip().lower()


@dataclass(frozen=True)
class SkillSet:
    """Lower-cased skill names mapped to the sources that contributed them."""

    provenance: Mapping[str, frozenset[SkillSource]] = field(default_factory=dict, hash=False)

    @classmethod
    def from_sources(
        cls,
        manual: Iterable[str] | None = None,
        category: Iterable[str] | None = None,
        auto_detected: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> "SkillSet":
        collected: dict[str, set[SkillSource]] = {}

        def add(skill: Any, source: SkillSource) -> None:
            if not isinstance(skill, str):
                return
            name = normalize_skill(skill)
            if name:
                collected.setdefault(name, set()).add(source)

        for skill in manual or ():
            add(skill, SkillSource.MANUAL)
        for skill in category or ():
            add(skill, SkillSource.CATEGORY)
        for skill in auto_detected or ():
            add(skill, SkillSource.AUTO_DETECTED)

        # Nested metadata lists hold either plain strings or {"skill": ...} records.
        for entries in (metadata or {}).values():
            if not isinstance(entries, list):
                continue
            for entry in entries:
                if isinstance(entry, Mapping):
                    add(entry.get("skill"), SkillSource.METADATA)
                else:
                    add(entry, SkillSource.METADATA)

        return cls(provenance={name: frozenset(sources) for name, sources in collected.items()})

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.provenance)

    def __len__(self) -> int:
        return len(self.provenance)

    def __contains__(self, skill: object) -> bool:
        return isinstance(skill, str) and normalize_skill(skill) in self.provenance

    def matches(self, requirement: str) -> bool:
        """Partial match: the requirement is a substring of any held skill."""
        needle = normalize_skill(requirement)
        if not needle:
            return False
        return any(needle in name for name in self.provenance)

    def matches_any(self, requirements: Iterable[str]) -> bool:
        return any(self.matches(r) for r in requirements)

    def count_matching(self, requirements: Iterable[str]) -> int:
        return sum(1 for r in requirements if self.matches(r))

    def sources_of(self, skill: str) -> frozenset[SkillSource]:
        return self.provenance.get(normalize_skill(skill), frozenset())
