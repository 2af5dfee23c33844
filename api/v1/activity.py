from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from api.deps import get_current_user
from models.user import User
from services.activity_service import ActivityService

router = APIRouter(prefix="/api/v1/activity", tags=["Activity"])


@router.get("")
async def recent_activity(
        garden_id: Optional[UUID] = Query(None, alias="gardenId"),
        limit: int = Query(10, ge=1, le=50),
        service: ActivityService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.recent_activity(garden_id, limit)
