from uuid import UUID

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from models.user import User
from schemas.user import UserOut
from services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)


@router.get("/stats")
async def my_stats(
        service: UserService = Depends(),
        current_user: User = Depends(get_current_user)
):
    """Gardens, assigned tasks and attended events of the current user."""
    return await service.user_stats(current_user)


@router.get("/garden/{garden_id}/members")
async def garden_members(
        garden_id: UUID,
        service: UserService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.garden_members(garden_id, current_user.id)
