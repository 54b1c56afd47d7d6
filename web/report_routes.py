"""
Report Routes - appraisal reports, their status workflow and comparables

Status never changes through PATCH; POST /reports/{id}/status runs the
report status machine. Comparables are adjusted against the report's
subject property when they are added.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from core.comp_engine import AdjustmentCalculator
from core.models import AppraisalReport, Comparable, Property, ReportStatus, UserRole
from core.reports import apply_status_change
from core.storage import APPRAISAL_REPORTS, COMPARABLES, FORM_SUBMISSIONS, PROPERTIES, get_storage
from reporting import AppraisalReportPDF
from web.identity import Identity, get_identity, require_roles, role_guard
from web.schemas import ComparableCreate, ReportCreate, ReportUpdate, StatusChangeRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

can_author = role_guard(UserRole.ADMIN, UserRole.APPRAISER)

# Reports still open for edits by their appraiser
EDITABLE_STATUSES = frozenset({ReportStatus.DRAFT, ReportStatus.PENDING_REVIEW})


# =============================================================================
# Helpers
# =============================================================================


def _load_report(report_id: int) -> AppraisalReport:
    return AppraisalReport.from_dict(get_storage().get(APPRAISAL_REPORTS, report_id))


def _require_visible(identity: Identity, report: AppraisalReport) -> None:
    """Clients only see reports commissioned for them."""
    if identity.role == UserRole.CLIENT and report.client_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Report not found")


def _require_editable(identity: Identity, report: AppraisalReport) -> None:
    if identity.is_admin:
        return
    if report.status not in EDITABLE_STATUSES:
        raise HTTPException(
            status_code=409,
            detail=f"Report is {report.status.value} and can no longer be edited",
        )


def _report_comparables(report_id: int) -> list[Comparable]:
    return [Comparable.from_dict(r) for r in get_storage().find(COMPARABLES, {"reportId": report_id})]


# =============================================================================
# Reports
# =============================================================================


@router.get("")
async def list_reports(
    status: Optional[ReportStatus] = Query(None),
    property_id: Optional[int] = Query(None, alias="propertyId"),
    appraiser_id: Optional[int] = Query(None, alias="appraiserId"),
    identity: Identity = Depends(get_identity),
):
    filters = {
        "status": status.value if status else None,
        "propertyId": property_id,
        "appraiserId": appraiser_id,
    }
    if identity.role == UserRole.CLIENT:
        filters["clientId"] = identity.user_id
    return [AppraisalReport.from_dict(r).to_dict() for r in get_storage().find(APPRAISAL_REPORTS, filters)]


@router.get("/{report_id}")
async def get_report(report_id: int, identity: Identity = Depends(get_identity)):
    report = _load_report(report_id)
    _require_visible(identity, report)
    return report.to_dict()


@router.post("", status_code=201)
async def create_report(body: ReportCreate, identity: Identity = Depends(can_author)):
    storage = get_storage()
    storage.get(PROPERTIES, body.property_id)

    appraiser_id = body.appraiser_id if body.appraiser_id is not None else identity.user_id
    if appraiser_id is None:
        raise HTTPException(status_code=400, detail="appraiserId is required")

    record = body.to_record()
    record.update({"appraiserId": appraiser_id, "status": ReportStatus.DRAFT.value})
    created = storage.create(APPRAISAL_REPORTS, record)
    logger.info("Report %s created for property %s", created["id"], body.property_id)
    return AppraisalReport.from_dict(created).to_dict()


@router.patch("/{report_id}")
async def update_report(
    report_id: int,
    body: ReportUpdate,
    identity: Identity = Depends(can_author),
):
    changes = body.to_record(partial=True)
    if "status" in changes:
        raise HTTPException(
            status_code=400,
            detail=f"Status cannot be changed here; use POST /reports/{report_id}/status",
        )

    report = _load_report(report_id)
    _require_editable(identity, report)
    updated = get_storage().update(APPRAISAL_REPORTS, report_id, changes)
    return AppraisalReport.from_dict(updated).to_dict()


@router.delete("/{report_id}", status_code=204)
async def delete_report(report_id: int, identity: Identity = Depends(get_identity)):
    require_roles(identity, UserRole.ADMIN)
    storage = get_storage()
    if not storage.remove(APPRAISAL_REPORTS, report_id):
        raise HTTPException(status_code=404, detail="Report not found")
    storage.remove_where(COMPARABLES, {"reportId": report_id})
    storage.remove_where(FORM_SUBMISSIONS, {"reportId": report_id})


@router.post("/{report_id}/status")
async def change_report_status(
    report_id: int,
    body: StatusChangeRequest,
    identity: Identity = Depends(get_identity),
):
    """
    Move a report through its workflow.

    Rejected transitions surface as 409 via the InvalidStatusTransition
    handler. A reviewer picking up a report becomes its reviewer.
    """
    report = _load_report(report_id)
    _require_visible(identity, report)

    changed = apply_status_change(report, body.status, identity.role)
    if (
        changed.status == ReportStatus.IN_REVIEW
        and changed.reviewer_id is None
        and identity.role == UserRole.REVIEWER
    ):
        changed.reviewer_id = identity.user_id

    record = changed.to_dict()
    record.pop("id")
    record.pop("createdAt")
    updated = get_storage().update(APPRAISAL_REPORTS, report_id, record)
    return AppraisalReport.from_dict(updated).to_dict()


# =============================================================================
# Comparables
# =============================================================================


@router.get("/{report_id}/comparables")
async def list_comparables(report_id: int, identity: Identity = Depends(get_identity)):
    report = _load_report(report_id)
    _require_visible(identity, report)
    return [c.to_dict() for c in _report_comparables(report_id)]


@router.post("/{report_id}/comparables", status_code=201)
async def add_comparable(
    report_id: int,
    body: ComparableCreate,
    identity: Identity = Depends(can_author),
):
    report = _load_report(report_id)
    _require_editable(identity, report)

    storage = get_storage()
    subject = storage.get(PROPERTIES, report.property_id)

    record = body.to_record()
    result = AdjustmentCalculator().calculate(subject, record)
    record.update(result.to_dict())
    record["reportId"] = report_id

    created = storage.create(COMPARABLES, record)
    logger.info(
        "Comparable %s added to report %s (adjusted price %s)",
        created["id"],
        report_id,
        result.adjusted_price,
    )
    return Comparable.from_dict(created).to_dict()


@router.delete("/{report_id}/comparables/{comparable_id}", status_code=204)
async def remove_comparable(
    report_id: int,
    comparable_id: int,
    identity: Identity = Depends(can_author),
):
    report = _load_report(report_id)
    _require_editable(identity, report)
    if not get_storage().remove_where(COMPARABLES, {"id": comparable_id, "reportId": report_id}):
        raise HTTPException(status_code=404, detail="Comparable not found")


# =============================================================================
# PDF
# =============================================================================


@router.get("/{report_id}/pdf")
async def download_report_pdf(report_id: int, identity: Identity = Depends(get_identity)):
    report = _load_report(report_id)
    _require_visible(identity, report)
    subject = Property.from_dict(get_storage().get(PROPERTIES, report.property_id))

    pdf_bytes = AppraisalReportPDF().generate_to_buffer(report, subject, _report_comparables(report_id))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="appraisal-report-{report_id}.pdf"'},
    )
