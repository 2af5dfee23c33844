from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user
from models.user import User
from schemas.common import MessageOut
from schemas.event import EventCreate, EventUpdate
from services.event_service import EventService

router = APIRouter(prefix="/api/v1/events", tags=["Events"])


@router.get("/garden/{garden_id}")
async def list_events(
        garden_id: UUID,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.list_events(garden_id)


@router.post("/garden/{garden_id}", status_code=status.HTTP_201_CREATED)
async def create_event(
        garden_id: UUID,
        data: EventCreate,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    """The creator is added as the first attendee."""
    return await service.create_event(garden_id, data, current_user)


@router.get("/{event_id}")
async def get_event(
        event_id: UUID,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.get_event(event_id)


@router.patch("/{event_id}/attend")
async def toggle_attendance(
        event_id: UUID,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.toggle_attendance(event_id, current_user.id)


@router.patch("/{event_id}")
async def update_event(
        event_id: UUID,
        data: EventUpdate,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.update_event(event_id, data)


@router.delete("/{event_id}", response_model=MessageOut)
async def delete_event(
        event_id: UUID,
        service: EventService = Depends(),
        current_user: User = Depends(get_current_user)
):
    await service.delete_event(event_id)
    return {"message": "Event deleted"}
