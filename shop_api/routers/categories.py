from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from shop_api.core.authz import require_capability
from shop_api.domain.roles import CAP_MANAGE_CATEGORIES
from shop_api.schemas import CategoryCreate, CategoryUpdate
from shop_api.services.category_service import CategoryService, category_to_dict

router = APIRouter(prefix="/categories", tags=["categories"])
manage_categories = Depends(require_capability(CAP_MANAGE_CATEGORIES))


def _get_category_service(request: Request) -> CategoryService:
    svc = getattr(getattr(request.app, "state", None), "category_service", None)
    if not svc:
        raise RuntimeError("CategoryService nao configurado")
    return svc


@router.post("", status_code=201, dependencies=[manage_categories])
def create_category(payload: CategoryCreate, request: Request):
    svc = _get_category_service(request)
    return category_to_dict(svc.create(payload.model_dump(exclude_unset=True)))


@router.get("")
def list_categories(
    request: Request,
    title: Optional[str] = None,
    sortBy: Optional[str] = None,
    limit: Optional[int] = None,
    page: Optional[int] = None,
):
    svc = _get_category_service(request)
    filters = {"title": title} if title is not None else {}
    result = svc.query(filters, {"sortBy": sortBy, "limit": limit, "page": page})
    return result.to_dict(category_to_dict)


@router.get("/{slug}")
def get_category(slug: str, request: Request):
    category = _get_category_service(request).get_by_slug(slug)
    if not category:
        raise HTTPException(404, "Category not found")
    return category_to_dict(category)


@router.patch("/{slug}", dependencies=[manage_categories])
def update_category(slug: str, payload: CategoryUpdate, request: Request):
    svc = _get_category_service(request)
    return category_to_dict(svc.update_by_slug(slug, payload.model_dump(exclude_unset=True)))


@router.delete("/{slug}", status_code=204, dependencies=[manage_categories])
def delete_category(slug: str, request: Request):
    _get_category_service(request).delete_by_slug(slug)
    return Response(status_code=204)
