from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user
from models.user import User
from schemas.common import MessageOut
from schemas.garden import GardenCreate
from services.garden_service import GardenService
from services.membership_service import MembershipService

router = APIRouter(prefix="/api/v1/gardens", tags=["Gardens"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_garden(
        data: GardenCreate,
        service: GardenService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.create_garden(current_user.id, data)


@router.get("")
async def list_gardens(service: GardenService = Depends()):
    """Every garden with its member count, for discovery."""
    return await service.list_gardens()


@router.get("/user/my-gardens")
async def my_gardens(
        service: GardenService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.list_user_gardens(current_user.id)


@router.get("/user/created")
async def created_gardens(
        service: GardenService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.list_created_gardens(current_user.id)


@router.get("/{garden_id}")
async def get_garden(garden_id: UUID, service: GardenService = Depends()):
    return await service.get_garden_with_stats(garden_id)


# ----------------------------------------
# Membership
# ----------------------------------------
@router.post("/{garden_id}/members")
async def join_garden(
        garden_id: UUID,
        service: MembershipService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.join(garden_id, current_user.id)


@router.post("/{garden_id}/leave", response_model=MessageOut)
async def leave_garden(
        garden_id: UUID,
        service: MembershipService = Depends(),
        current_user: User = Depends(get_current_user)
):
    await service.leave(garden_id, current_user.id)
    return {"message": "Left the garden successfully"}


@router.delete("/{garden_id}", response_model=MessageOut)
async def delete_garden(
        garden_id: UUID,
        service: MembershipService = Depends(),
        current_user: User = Depends(get_current_user)
):
    await service.delete_garden(garden_id, current_user.id)
    return {"message": "Garden deleted successfully"}


# ----------------------------------------
# Reference integrity
# ----------------------------------------
@router.get("/{garden_id}/integrity")
async def verify_garden(
        garden_id: UUID,
        service: GardenService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.verify_references(garden_id)


@router.post("/{garden_id}/repair")
async def repair_garden(
        garden_id: UUID,
        service: GardenService = Depends(),
        current_user: User = Depends(get_current_user)
):
    """Owner only: rebuild the plant/task/event lists from the child rows."""
    return await service.repair_references(garden_id, requester_id=current_user.id)
