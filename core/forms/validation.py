"""
Form Validation - JSON Schema checks and completion scoring

A form is defined by a JSON Schema (draft 7). Submitted data is validated
against it, and a completion fraction is computed from which of the
schema's properties have been filled in:

- required fields are weighted 0.7, optional fields 0.3
- a schema with only required (or only optional) fields uses plain
  filled / total
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Final, Mapping, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError


logger = logging.getLogger(__name__)


REQUIRED_WEIGHT: Final[float] = 0.7
OPTIONAL_WEIGHT: Final[float] = 0.3

SchemaLike = Union[Mapping[str, Any], str]


@dataclass
class FormValidationResult:
    """Outcome of validating form data against its schema."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


class InvalidFormSchema(ValueError):
    """The form definition is not a usable JSON Schema."""


def load_schema(schema: SchemaLike) -> dict:
    """
    Parse and check a form schema.

    Raises:
        InvalidFormSchema: if the schema is not valid JSON or not a valid
            draft-7 schema
    """
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError as e:
            raise InvalidFormSchema(f"Schema is not valid JSON: {e.msg}") from e

    if not isinstance(schema, Mapping):
        raise InvalidFormSchema("Schema must be a JSON object")

    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        raise InvalidFormSchema(f"Schema is not a valid JSON Schema: {e.message}") from e

    return dict(schema)


def _format_error(error) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message


def validate_form_data(data: Mapping[str, Any], schema: SchemaLike) -> FormValidationResult:
    """
    Validate submitted form data against the form's schema.

    A broken schema is reported as a single validation error rather than
    raised, so a bad form definition cannot take down submission.

    Args:
        data: Submitted form data
        schema: Form JSON Schema (dict or JSON string)

    Returns:
        FormValidationResult
    """
    try:
        schema_obj = load_schema(schema)
    except InvalidFormSchema as e:
        logger.warning("Form schema rejected: %s", e)
        return FormValidationResult(valid=False, errors=[str(e)])

    validator = Draft7Validator(schema_obj)
    errors = sorted(
        validator.iter_errors(dict(data)),
        key=lambda e: (".".join(str(p) for p in e.absolute_path), e.message),
    )
    messages = [_format_error(e) for e in errors]
    return FormValidationResult(valid=not messages, errors=messages)


def _is_filled(value: Any) -> bool:
    return value is not None and value != ""


def calculate_completion_status(data: Mapping[str, Any], schema: SchemaLike) -> float:
    """
    Fraction (0.0 - 1.0) of the form that has been filled in.

    Args:
        data: Submitted form data
        schema: Form JSON Schema

    Returns:
        Completion fraction; 0.0 when the schema has no properties or
        cannot be loaded
    """
    try:
        schema_obj = load_schema(schema)
    except InvalidFormSchema:
        return 0.0

    properties = schema_obj.get("properties") or {}
    if not properties:
        return 0.0

    required = [name for name in schema_obj.get("required") or [] if name in properties]
    optional = [name for name in properties if name not in required]

    filled_required = sum(1 for name in required if _is_filled(data.get(name)))
    filled_optional = sum(1 for name in optional if _is_filled(data.get(name)))

    if not required or not optional:
        ratio = (filled_required + filled_optional) / len(properties)
    else:
        ratio = (
            filled_required / len(required) * REQUIRED_WEIGHT
            + filled_optional / len(optional) * OPTIONAL_WEIGHT
        )

    return round(min(1.0, max(0.0, ratio)), 4)
