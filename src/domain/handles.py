"""Handle namespace rules shared by availability checks and claims."""

import re
from dataclasses import dataclass
from enum import StrEnum

from core.exceptions import InvalidHandleError

MIN_HANDLE_LENGTH = 3

RESERVED_HANDLES = frozenset(
    {"admin", "login", "register", "api", "dashboard", "settings", "onboarding"}
)

_DISALLOWED = re.compile(r"[^a-z0-9]")


class UnavailableReason(StrEnum):
    RESERVED = "reserved"
    TAKEN = "taken"


@dataclass(frozen=True, slots=True)
class HandleAvailability:
    handle: str
    available: bool
    reason: UnavailableReason | None = None


def normalize_handle(candidate: str) -> str:
    """Lowercase, trim and strip everything outside ``[a-z0-9]``.

    Raises:
        InvalidHandleError: if fewer than three characters survive.
    """
    cleaned = _DISALLOWED.sub("", (candidate or "").strip().lower())
    if len(cleaned) < MIN_HANDLE_LENGTH:
        raise InvalidHandleError(candidate)
    return cleaned


def is_reserved(handle: str) -> bool:
    return handle in RESERVED_HANDLES
