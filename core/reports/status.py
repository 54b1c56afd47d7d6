"""
Report Status State Machine

Which status changes a role may make is fixed by TRANSITIONS, an
immutable table of role -> current status -> allowed next statuses.

Roles:
- admin: any status to any status, self-loops included
- appraiser: draft -> draft/pending_review, pending_review -> draft,
  approved -> finalized
- reviewer: pending_review -> in_review, in_review -> pending_review/approved
- client, field_agent: none

Entering pending_review, approved or finalized stamps the matching
timestamp on the report.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from types import MappingProxyType
from typing import Final, FrozenSet, Mapping, Optional, Union

from core.models import AppraisalReport, ReportStatus, UserRole


logger = logging.getLogger(__name__)


# =============================================================================
# Transition Table
# =============================================================================

_ALL_STATUSES: Final[FrozenSet[ReportStatus]] = frozenset(ReportStatus)


def _freeze(table: dict) -> Mapping[ReportStatus, FrozenSet[ReportStatus]]:
    return MappingProxyType({status: frozenset(targets) for status, targets in table.items()})


TRANSITIONS: Final[Mapping[UserRole, Mapping[ReportStatus, FrozenSet[ReportStatus]]]] = (
    MappingProxyType({
        UserRole.ADMIN: _freeze({status: _ALL_STATUSES for status in ReportStatus}),
        UserRole.APPRAISER: _freeze({
            ReportStatus.DRAFT: {ReportStatus.DRAFT, ReportStatus.PENDING_REVIEW},
            ReportStatus.PENDING_REVIEW: {ReportStatus.DRAFT},
            ReportStatus.APPROVED: {ReportStatus.FINALIZED},
        }),
        UserRole.REVIEWER: _freeze({
            ReportStatus.PENDING_REVIEW: {ReportStatus.IN_REVIEW},
            ReportStatus.IN_REVIEW: {ReportStatus.PENDING_REVIEW, ReportStatus.APPROVED},
        }),
        UserRole.CLIENT: _freeze({}),
        UserRole.FIELD_AGENT: _freeze({}),
    })
)

# Timestamp field stamped when a report enters the status
STATUS_TIMESTAMPS: Final[Mapping[ReportStatus, str]] = MappingProxyType({
    ReportStatus.PENDING_REVIEW: "submitted_at",
    ReportStatus.APPROVED: "approved_at",
    ReportStatus.FINALIZED: "finalized_at",
})


RoleLike = Union[UserRole, str]
StatusLike = Union[ReportStatus, str]


# =============================================================================
# Errors
# =============================================================================


class InvalidStatusTransition(ValueError):
    """A status change the requesting role is not permitted to make."""

    def __init__(self, role: str, from_status: str, to_status: str):
        self.role = role
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition from '{from_status}' to '{to_status}' "
            f"for role '{role}'"
        )

    def to_dict(self) -> dict:
        return {
            "error": "invalid_status_transition",
            "message": str(self),
            "role": self.role,
            "fromStatus": self.from_status,
            "toStatus": self.to_status,
        }


# =============================================================================
# Operations
# =============================================================================


def _as_role(role: RoleLike) -> Optional[UserRole]:
    if isinstance(role, UserRole):
        return role
    return UserRole.from_string(role)


def _as_status(status: StatusLike) -> Optional[ReportStatus]:
    if isinstance(status, ReportStatus):
        return status
    return ReportStatus.from_string(status)


def _label(value: Union[RoleLike, StatusLike]) -> str:
    return value.value if isinstance(value, (UserRole, ReportStatus)) else str(value)


def allowed_transitions(role: RoleLike, from_status: StatusLike) -> FrozenSet[ReportStatus]:
    """Statuses the role may move a report to from from_status."""
    resolved_role = _as_role(role)
    resolved_status = _as_status(from_status)
    if resolved_role is None or resolved_status is None:
        return frozenset()
    return TRANSITIONS[resolved_role].get(resolved_status, frozenset())


def is_allowed(role: RoleLike, from_status: StatusLike, to_status: StatusLike) -> bool:
    """
    Whether the role may move a report from from_status to to_status.

    Unknown roles and statuses are never allowed.
    """
    target = _as_status(to_status)
    if target is None:
        return False
    return target in allowed_transitions(role, from_status)


def validate_status_change(
    role: RoleLike,
    current: StatusLike,
    requested: StatusLike,
) -> None:
    """
    Reject a forbidden status change.

    Raises:
        InvalidStatusTransition: if the table does not permit the edge
    """
    if not is_allowed(role, current, requested):
        error = InvalidStatusTransition(_label(role), _label(current), _label(requested))
        logger.warning(str(error))
        raise error


def apply_status_change(
    report: AppraisalReport,
    requested: StatusLike,
    role: RoleLike,
    now: Optional[datetime] = None,
) -> AppraisalReport:
    """
    Return a copy of the report moved to the requested status.

    The transition is validated before anything is built, and the input
    report is never mutated.

    Args:
        report: Current report
        requested: Target status
        role: Role of the acting user
        now: Timestamp to stamp (default: utcnow)

    Returns:
        New AppraisalReport with status and timestamps updated

    Raises:
        InvalidStatusTransition: if the change is not permitted
    """
    validate_status_change(role, report.status, requested)

    target = _as_status(requested)
    now = now or datetime.utcnow()

    changes = {"status": target, "updated_at": now}
    stamp_field = STATUS_TIMESTAMPS.get(target)
    if stamp_field:
        changes[stamp_field] = now

    logger.info(
        "Report %s status %s -> %s by %s",
        report.id,
        report.status.value,
        target.value,
        _label(role),
    )
    return replace(report, **changes)
