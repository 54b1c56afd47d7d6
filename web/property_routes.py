"""
Property Routes - subject properties

Any authenticated role can read; clients cannot write.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.models import Property, PropertyType, UserRole
from core.storage import APPRAISAL_REPORTS, PROPERTIES, get_storage
from web.identity import Identity, get_identity, role_guard
from web.schemas import PropertyCreate, PropertyUpdate


router = APIRouter(prefix="/properties", tags=["properties"])

can_write = role_guard(UserRole.ADMIN, UserRole.APPRAISER, UserRole.REVIEWER, UserRole.FIELD_AGENT)


def _property_response(record: dict) -> dict:
    return Property.from_dict(record).to_dict()


@router.get("")
async def list_properties(
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    identity: Identity = Depends(get_identity),
):
    filters = {
        "city": city,
        "state": state,
        "propertyType": property_type.value if property_type else None,
    }
    return [_property_response(r) for r in get_storage().find(PROPERTIES, filters)]


@router.get("/{property_id}")
async def get_property(property_id: int, identity: Identity = Depends(get_identity)):
    return _property_response(get_storage().get(PROPERTIES, property_id))


@router.post("", status_code=201)
async def create_property(body: PropertyCreate, identity: Identity = Depends(can_write)):
    record = body.to_record()
    record["createdById"] = identity.user_id
    return _property_response(get_storage().create(PROPERTIES, record))


@router.patch("/{property_id}")
async def update_property(
    property_id: int,
    body: PropertyUpdate,
    identity: Identity = Depends(can_write),
):
    changes = body.to_record(partial=True)
    return _property_response(get_storage().update(PROPERTIES, property_id, changes))


@router.delete("/{property_id}", status_code=204)
async def delete_property(property_id: int, identity: Identity = Depends(can_write)):
    storage = get_storage()
    if storage.find_one(APPRAISAL_REPORTS, {"propertyId": property_id}):
        raise HTTPException(status_code=409, detail="Property has appraisal reports; delete them first")
    if not storage.remove(PROPERTIES, property_id):
        raise HTTPException(status_code=404, detail="Property not found")
