"""
Form Routes - JSON-schema forms and their per-report submissions
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.forms import InvalidFormSchema, calculate_completion_status, load_schema, validate_form_data
from core.models import Form, FormSubmission, FormType, UserRole
from core.storage import APPRAISAL_REPORTS, FORM_SUBMISSIONS, FORMS, get_storage
from web.identity import Identity, get_identity, role_guard
from web.schemas import FormCreate, FormDataRequest, FormSubmissionRequest, FormUpdate


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["forms"])

can_manage = role_guard(UserRole.ADMIN)
can_submit = role_guard(UserRole.ADMIN, UserRole.APPRAISER, UserRole.FIELD_AGENT)


def _checked_schema(schema) -> dict:
    try:
        return load_schema(schema)
    except InvalidFormSchema as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _load_form(form_id: int) -> Form:
    return Form.from_dict(get_storage().get(FORMS, form_id))


def _evaluate(form: Form, data: dict) -> dict:
    result = validate_form_data(data, form.schema)
    return {
        "valid": result.valid,
        "errors": result.errors,
        "completionStatus": calculate_completion_status(data, form.schema),
    }


# =============================================================================
# Forms
# =============================================================================


@router.get("")
async def list_forms(
    form_type: Optional[FormType] = Query(None, alias="type"),
    active: Optional[bool] = Query(None),
    identity: Identity = Depends(get_identity),
):
    filters = {"type": form_type.value if form_type else None, "isActive": active}
    return [Form.from_dict(r).to_dict() for r in get_storage().find(FORMS, filters)]


@router.get("/{form_id}")
async def get_form(form_id: int, identity: Identity = Depends(get_identity)):
    return _load_form(form_id).to_dict()


@router.post("", status_code=201)
async def create_form(body: FormCreate, identity: Identity = Depends(can_manage)):
    record = body.to_record()
    record["schema"] = _checked_schema(body.schema_)
    record["createdById"] = identity.user_id
    return Form.from_dict(get_storage().create(FORMS, record)).to_dict()


@router.patch("/{form_id}")
async def update_form(form_id: int, body: FormUpdate, identity: Identity = Depends(can_manage)):
    changes = body.to_record(partial=True)
    if "schema" in changes:
        changes["schema"] = _checked_schema(body.schema_)
    return Form.from_dict(get_storage().update(FORMS, form_id, changes)).to_dict()


@router.delete("/{form_id}", status_code=204)
async def delete_form(form_id: int, identity: Identity = Depends(can_manage)):
    storage = get_storage()
    if not storage.remove(FORMS, form_id):
        raise HTTPException(status_code=404, detail="Form not found")
    storage.remove_where(FORM_SUBMISSIONS, {"formId": form_id})


# =============================================================================
# Validation & Submissions
# =============================================================================


@router.post("/{form_id}/validate")
async def validate_form(form_id: int, body: FormDataRequest, identity: Identity = Depends(get_identity)):
    return _evaluate(_load_form(form_id), body.data)


@router.get("/{form_id}/submissions")
async def list_submissions(
    form_id: int,
    report_id: Optional[int] = Query(None, alias="reportId"),
    identity: Identity = Depends(get_identity),
):
    _load_form(form_id)
    records = get_storage().find(FORM_SUBMISSIONS, {"formId": form_id, "reportId": report_id})
    return [FormSubmission.from_dict(r).to_dict() for r in records]


@router.post("/{form_id}/submissions")
async def submit_form(
    form_id: int,
    body: FormSubmissionRequest,
    identity: Identity = Depends(can_submit),
):
    """
    Save a report's data for this form.

    One submission exists per (form, report); resubmitting replaces its
    data and re-runs validation.
    """
    form = _load_form(form_id)
    if not form.is_active:
        raise HTTPException(status_code=409, detail="Form is not active")

    storage = get_storage()
    storage.get(APPRAISAL_REPORTS, body.report_id)

    evaluation = _evaluate(form, body.data)
    fields = {
        "formId": form_id,
        "reportId": body.report_id,
        "submittedById": identity.user_id,
        "data": body.data,
        "completionStatus": evaluation["completionStatus"],
        "isValid": evaluation["valid"],
        "validationErrors": evaluation["errors"],
    }

    existing = storage.find_one(FORM_SUBMISSIONS, {"formId": form_id, "reportId": body.report_id})
    if existing:
        saved = storage.update(FORM_SUBMISSIONS, existing["id"], fields)
    else:
        saved = storage.create(FORM_SUBMISSIONS, fields)

    logger.info(
        "Form %s submission for report %s: valid=%s completion=%.2f",
        form_id,
        body.report_id,
        evaluation["valid"],
        evaluation["completionStatus"],
    )
    return FormSubmission.from_dict(saved).to_dict()
