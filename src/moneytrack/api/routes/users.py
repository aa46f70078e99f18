"""User endpoints."""

from fastapi import APIRouter, Depends, Response

from moneytrack.api.dependencies import get_user_service
from moneytrack.api.schemas import UserCreate, UserOut, UserUpdate
from moneytrack.domain.user import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users(service: UserService = Depends(get_user_service)):
    return [UserOut.from_entity(user) for user in service.list_users()]


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)):
    user_id = service.create_user(name=payload.name, email=payload.email, password=payload.password)
    return UserOut.from_entity(service.require_user(user_id))


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return UserOut.from_entity(service.require_user(user_id))


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int, payload: UserUpdate, service: UserService = Depends(get_user_service)
):
    user = service.update_user(
        user_id, name=payload.name, email=payload.email, password=payload.password
    )
    return UserOut.from_entity(user)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    service.delete_user(user_id)
    return Response(status_code=204)


def register_routes(app):
    """Register user routes with the API app."""
    app.include_router(router)
