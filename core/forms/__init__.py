"""
Form definitions and submissions.
"""

from .validation import (
    FormValidationResult,
    InvalidFormSchema,
    load_schema,
    validate_form_data,
    calculate_completion_status,
)

__all__ = [
    "FormValidationResult",
    "InvalidFormSchema",
    "load_schema",
    "validate_form_data",
    "calculate_completion_status",
]
