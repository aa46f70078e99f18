"""Category endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from moneytrack.api.dependencies import get_category_service
from moneytrack.api.schemas import CategoryCreate, CategoryOut
from moneytrack.domain.category import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(
    kind: Optional[str] = None, service: CategoryService = Depends(get_category_service)
):
    return [CategoryOut.from_entity(cat) for cat in service.list_categories(kind=kind)]


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate, service: CategoryService = Depends(get_category_service)
):
    service.create_category(name=payload.name, kind=payload.kind)
    return CategoryOut.from_entity(service.get_category(payload.name.strip()))


def register_routes(app):
    """Register category routes with the API app."""
    app.include_router(router)
