from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user
from models.user import User
from schemas.common import MessageOut
from schemas.task import TaskCreate, TaskUpdate, TaskStatusUpdate
from services.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("/garden/{garden_id}")
async def list_tasks(
        garden_id: UUID,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.list_tasks(garden_id)


@router.post("/garden/{garden_id}", status_code=status.HTTP_201_CREATED)
async def create_task(
        garden_id: UUID,
        data: TaskCreate,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.create_task(garden_id, data, current_user)


@router.get("/{task_id}")
async def get_task(
        task_id: UUID,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return service.serialize(await service.get_task(task_id))


@router.patch("/{task_id}/status")
async def update_task_status(
        task_id: UUID,
        data: TaskStatusUpdate,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.set_status(task_id, data.status)


@router.patch("/{task_id}")
async def update_task(
        task_id: UUID,
        data: TaskUpdate,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.update_task(task_id, data)


@router.delete("/{task_id}", response_model=MessageOut)
async def delete_task(
        task_id: UUID,
        service: TaskService = Depends(),
        current_user: User = Depends(get_current_user)
):
    await service.delete_task(task_id)
    return {"message": "Task deleted"}
