from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from shop_api.core.authz import require_capability
from shop_api.domain.roles import CAP_GET_USERS, CAP_MANAGE_USERS, UnknownRoleError
from shop_api.schemas import OBJECT_ID_PATTERN, UserCreate, UserUpdate
from shop_api.services.user_service import UserService, user_to_dict

router = APIRouter(prefix="/users", tags=["users"])
get_users = Depends(require_capability(CAP_GET_USERS))
manage_users = Depends(require_capability(CAP_MANAGE_USERS))
UserId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService nao configurado")
    return svc


@router.post("", status_code=201, dependencies=[manage_users])
def create_user(payload: UserCreate, request: Request):
    svc = _get_user_service(request)
    try:
        user = svc.create(payload.model_dump())
    except UnknownRoleError as exc:
        raise HTTPException(400, f"Invalid role: {exc.role}")
    return user_to_dict(user)


@router.get("", dependencies=[get_users])
def list_users(
    request: Request,
    username: Optional[str] = None,
    fullname: Optional[str] = None,
    role: Optional[str] = None,
    sortBy: Optional[str] = None,
    limit: Optional[int] = None,
    page: Optional[int] = None,
):
    filters = {
        key: value
        for key, value in (("username", username), ("fullname", fullname), ("role", role))
        if value is not None
    }
    result = _get_user_service(request).query(filters, {"sortBy": sortBy, "limit": limit, "page": page})
    return result.to_dict(user_to_dict)


@router.get("/{user_id}", dependencies=[get_users])
def get_user(request: Request, user_id: UserId):
    user = _get_user_service(request).get_by_id(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user_to_dict(user)


@router.patch("/{user_id}", dependencies=[manage_users])
def update_user(payload: UserUpdate, request: Request, user_id: UserId):
    svc = _get_user_service(request)
    return user_to_dict(svc.update_by_id(user_id, payload.model_dump(exclude_unset=True)))


@router.delete("/{user_id}", status_code=204, dependencies=[manage_users])
def delete_user(request: Request, user_id: UserId):
    _get_user_service(request).delete_by_id(user_id)
    return Response(status_code=204)
