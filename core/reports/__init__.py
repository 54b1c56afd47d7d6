"""
Appraisal report workflow.
"""

from .status import (
    TRANSITIONS,
    STATUS_TIMESTAMPS,
    InvalidStatusTransition,
    allowed_transitions,
    is_allowed,
    validate_status_change,
    apply_status_change,
)

__all__ = [
    "TRANSITIONS",
    "STATUS_TIMESTAMPS",
    "InvalidStatusTransition",
    "allowed_transitions",
    "is_allowed",
    "validate_status_change",
    "apply_status_change",
]
