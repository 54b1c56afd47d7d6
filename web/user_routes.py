"""
User Routes - platform user directory
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.models import User, UserRole
from core.storage import USERS, get_storage
from web.identity import Identity, get_identity, require_roles
from web.schemas import UserCreate, UserUpdate


router = APIRouter(prefix="/users", tags=["users"])


def _user_response(record: dict) -> dict:
    return User.from_dict(record).to_dict()


def _require_self_or_admin(identity: Identity, user_id: int) -> None:
    if not identity.is_admin and identity.user_id != user_id:
        raise HTTPException(status_code=403, detail="Users can only edit their own profile")


@router.get("")
async def list_users(
    role: Optional[UserRole] = Query(None),
    identity: Identity = Depends(get_identity),
):
    filters = {"role": role.value if role else None}
    return [_user_response(r) for r in get_storage().find(USERS, filters)]


@router.get("/{user_id}")
async def get_user(user_id: int, identity: Identity = Depends(get_identity)):
    return _user_response(get_storage().get(USERS, user_id))


@router.post("", status_code=201)
async def create_user(body: UserCreate, identity: Identity = Depends(get_identity)):
    if body.role == UserRole.ADMIN and not identity.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can create admin users")
    storage = get_storage()
    if storage.find_one(USERS, {"email": body.email}):
        raise HTTPException(status_code=409, detail=f"Email already registered: {body.email}")
    return _user_response(storage.create(USERS, body.to_record()))


@router.patch("/{user_id}")
async def update_user(user_id: int, body: UserUpdate, identity: Identity = Depends(get_identity)):
    _require_self_or_admin(identity, user_id)
    changes = body.to_record(partial=True)
    if "role" in changes and not identity.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can change roles")
    return _user_response(get_storage().update(USERS, user_id, changes))


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int, identity: Identity = Depends(get_identity)):
    require_roles(identity, UserRole.ADMIN)
    if not get_storage().remove(USERS, user_id):
        raise HTTPException(status_code=404, detail="User not found")
