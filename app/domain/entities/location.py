"""Location entity — a site agents work from and requesters belong to."""

from dataclasses import dataclass, field

ONSITE_SUPPORT = "onsite"


@dataclass
class Location:
    id: int | None
    name: str
    timezone: str | None = None
    support_types: list[str] = field(default_factory=list)
    external_id: str | None = None

    def supports_onsite(self) -> bool:
        return any(t.strip().lower() == ONSITE_SUPPORT for t in self.support_types)

    def same_timezone(self, other: "Location") -> bool:
        if not self.timezone or not other.timezone:
            return False
        return self.timezone.strip().lower() == other.timezone.strip().lower()
