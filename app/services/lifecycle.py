# app/services/lifecycle.py
"""
Status lifecycle and ownership rules shared by every owned resource.

Each resource type owns a closed status vocabulary with its own locked subset
and initial state. The checks below are written once and parameterized by a
``ResourcePolicy``:

- ``authorize`` decides whether the caller may read, update or delete a record
- ``apply_partial_update`` merges an explicit patch and stamps ``updatedAt``
- ``creation_fields`` fixes owner, status and timestamps for a new record
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from app.middleware.error_handler import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from app.utils.timestamps import utcnow


class Operation(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ResourcePolicy:
    label: str
    statuses: Tuple[str, ...]
    locked: FrozenSet[str]
    initial: str
    creatable: FrozenSet[str]

    def parse_status(self, value: Any) -> Optional[str]:
        if isinstance(value, str) and value in self.statuses:
            return value
        return None

    def is_locked(self, status: Any) -> bool:
        return self.parse_status(status) in self.locked

    def creation_status(self, requested: Any = None) -> str:
        parsed = self.parse_status(requested)
        return parsed if parsed in self.creatable else self.initial

    @property
    def locked_phrase(self) -> str:
        # Locked statuses in vocabulary order, e.g. "pending or verified".
        return " or ".join(s for s in self.statuses if s in self.locked)


CATALOGUE = ResourcePolicy(
    label="Catalogue",
    statuses=("draft", "pending", "rejected", "verified"),
    locked=frozenset({"pending", "verified"}),
    initial="draft",
    creatable=frozenset({"draft"}),
)

EVENT = ResourcePolicy(
    label="Event",
    statuses=("draft", "pending", "rejected", "verified"),
    locked=frozenset({"pending", "verified"}),
    initial="draft",
    creatable=frozenset({"draft", "pending"}),
)

BUSINESS = ResourcePolicy(
    label="Business",
    statuses=("draft", "submitted", "pending", "verified", "rejected"),
    locked=frozenset({"submitted", "pending"}),
    initial="draft",
    creatable=frozenset({"draft"}),
)

KYC = ResourcePolicy(
    label="KYC",
    statuses=("pending", "verified", "rejected"),
    locked=frozenset({"pending", "verified"}),
    initial="pending",
    creatable=frozenset({"pending"}),
)


def authorize(policy: ResourcePolicy, resource: Any, caller_id: str, operation: Operation):
    """
    Check that ``caller_id`` may perform ``operation`` on ``resource``.

    Ownership is enforced for reads too. Updates and deletes are refused while
    the record sits in one of the policy's locked statuses. Returns the
    resource unchanged so callers can chain the fetch and the check.
    """
    if resource is None:
        raise NotFoundError(f"{policy.label} not found.")

    owner_id = getattr(resource, "owner_id", None)
    if not owner_id or owner_id != caller_id:
        raise ForbiddenError()

    if operation in (Operation.UPDATE, Operation.DELETE) and policy.is_locked(resource.status):
        verb = "deleted" if operation == Operation.DELETE else "edited"
        raise ConflictError(
            f"{policy.label} cannot be {verb} while {policy.locked_phrase}."
        )
    return resource


def apply_partial_update(
    policy: ResourcePolicy,
    resource: Any,
    patch: Mapping[str, Any],
    now: Optional[datetime] = None,
):
    """Write only the keys present in ``patch``; ``updatedAt`` is always refreshed."""
    changes: Dict[str, Any] = dict(patch)
    if "status" in changes:
        parsed = policy.parse_status(changes["status"])
        if parsed is None:
            raise InvalidArgumentError("Invalid status.")
        changes["status"] = parsed

    # Nothing is written until the whole patch has been validated.
    for field, value in changes.items():
        setattr(resource, field, value)
    resource.updatedAt = now or utcnow()
    return resource


def check_version(policy: ResourcePolicy, resource: Any, expected: Optional[int]) -> None:
    """Reject a patch built from an older read of the record."""
    if expected is not None and expected != resource.version:
        raise ConflictError(
            f"{policy.label} was modified by another request. Reload and try again."
        )


def creation_fields(
    policy: ResourcePolicy,
    owner_id: str,
    requested_status: Any = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    stamp = now or utcnow()
    return {
        "owner_id": owner_id,
        "status": policy.creation_status(requested_status),
        "createdAt": stamp,
        "updatedAt": stamp,
    }
