"""Import enrichment result types."""

from dataclasses import dataclass, field
from enum import StrEnum


class ImportOutcome(StrEnum):
    REAL = "real"
    MOCK = "mock"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ImportedLink:
    title: str
    url: str


@dataclass(frozen=True)
class ImportResult:
    """Best-effort profile data pulled from another link-in-bio page.

    A ``MOCK`` result is placeholder content produced when the source could not
    be read; it must only ever reach the page owner, flagged as such.
    """

    outcome: ImportOutcome
    source_url: str
    title: str = ""
    description: str = ""
    image: str = ""
    links: tuple[ImportedLink, ...] = field(default_factory=tuple)
    reason: str | None = None

    @property
    def is_mock(self) -> bool:
        return self.outcome == ImportOutcome.MOCK

    @classmethod
    def failed(cls, source_url: str, reason: str) -> "ImportResult":
        return cls(outcome=ImportOutcome.FAILED, source_url=source_url, reason=reason)
