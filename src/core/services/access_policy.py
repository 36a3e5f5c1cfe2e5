"""Ownership-based access policy for trip records.

Pure decision logic with no I/O. The same rule gates reads, updates and
deletes: a requester may act on a record only when ownership matches exactly.

- Authenticated(u) may access Owned(u) and nothing else, never a Public record.
- Anonymous may access Public records only.
"""

from enum import Enum

from core.models.identity import Anonymous, Authenticated, Owned, Public
from core.models.trip import TripRecord


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def decide(record: TripRecord, requester: Authenticated | Anonymous) -> Decision:
    visibility = record.visibility
    if isinstance(requester, Authenticated):
        allowed = isinstance(visibility, Owned) and visibility.user_id == requester.user_id
    elif isinstance(requester, Anonymous):
        allowed = isinstance(visibility, Public)
    else:
        raise TypeError(f"Unsupported requester type: {type(requester).__name__}")
    return Decision.ALLOW if allowed else Decision.DENY


def denial_reason(record: TripRecord, requester: Authenticated | Anonymous, verb: str) -> str:
    """Human-readable explanation for a DENY, phrased for the given verb."""
    if isinstance(requester, Anonymous):
        return f"Trip {record.id} belongs to a registered user and requires authentication to {verb}"
    if isinstance(record.visibility, Public):
        return f"Trip {record.id} is an anonymous trip and cannot be accessed while signed in"
    return f"You do not have permission to {verb} trip {record.id}"
