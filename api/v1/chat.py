from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user
from models.user import User
from schemas.chat import MessageCreate
from services.chat_service import ChatService

router = APIRouter(prefix="/api/v1/chat", tags=["Chat"])


# ----------------------------------------
# 1. Messages of a garden (polled by clients)
# ----------------------------------------
@router.get("/garden/{garden_id}")
async def garden_messages(
        garden_id: UUID,
        service: ChatService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.get_messages(garden_id)


# ----------------------------------------
# 2. Post a message
# ----------------------------------------
@router.post("/garden/{garden_id}", status_code=status.HTTP_201_CREATED)
async def post_message(
        garden_id: UUID,
        data: MessageCreate,
        service: ChatService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.send_message(garden_id, current_user, data)
