from tortoise import timezone

from core.exceptions import NotFoundError
from core.formatters import enum_value, id_str, iso
from core.logger import db_logger
from core.validators import reject_blank
from models.garden import ReferenceKind
from models.task import Task, TaskStatus
from models.user import User
from schemas.task import TaskCreate, TaskUpdate
from services.garden_service import GardenService, ensure_users_exist
from services.store import db_guard

TASK_NOT_NULL = {
    "title": "Task title cannot be empty",
    "type": "Task type cannot be empty",
    "priority": "Task priority cannot be empty",
    "status": "Task status cannot be empty",
}


def apply_status(task: Task, status: TaskStatus) -> None:
    """
    Any status may follow any other. Entering "completed" stamps
    completed_date (again, if already completed); leaving it keeps the stamp.
    """
    task.status = status
    if status == TaskStatus.COMPLETED:
        task.completed_date = timezone.now()


class TaskService:

    def __init__(self):
        self.gardens = GardenService()

    async def list_tasks(self, garden_id) -> list:
        async with db_guard("list_tasks"):
            tasks = await Task.filter(garden_id=garden_id).order_by("-created_at")
        return [self.serialize(t) for t in tasks]

    async def get_task(self, task_id) -> Task:
        task = await Task.get_or_none(id=task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def create_task(self, garden_id, data: TaskCreate, user: User) -> dict:
        extra = {}
        if data.status == TaskStatus.COMPLETED:
            extra["completed_date"] = timezone.now()
        task = await self.gardens.add_child(garden_id, ReferenceKind.TASK, data, user.id, **extra)
        return self.serialize(task)

    async def update_task(self, task_id, data: TaskUpdate) -> dict:
        changes = data.model_dump(exclude_unset=True)
        reject_blank(data, changes, TASK_NOT_NULL)
        await ensure_users_exist(changes, ("assigned_to_id",))

        async with db_guard("update_task"):
            task = await self.get_task(task_id)
            status = changes.pop("status", None)
            for name, value in changes.items():
                setattr(task, name, value)
            if status is not None:
                apply_status(task, status)
            await task.save()

        if status is not None:
            changes["status"] = status
        db_logger.log_update("Task", task_id, changes)
        return self.serialize(task)

    async def set_status(self, task_id, status: TaskStatus) -> dict:
        async with db_guard("set_task_status"):
            task = await self.get_task(task_id)
            apply_status(task, status)
            await task.save()

        db_logger.log_update("Task", task_id, {
            "status": status,
            "completed_date": task.completed_date
        })
        return self.serialize(task)

    async def delete_task(self, task_id) -> None:
        await self.gardens.remove_child(None, ReferenceKind.TASK, task_id)

    def serialize(self, task: Task) -> dict:
        return {
            "id": str(task.id),
            "title": task.title,
            "description": task.description,
            "type": enum_value(task.type),
            "priority": enum_value(task.priority),
            "status": enum_value(task.status),
            "assignedTo": id_str(task.assigned_to_id),
            "assignedBy": id_str(task.assigned_by_id),
            "dueDate": iso(task.due_date),
            "completedDate": iso(task.completed_date),
            "garden": id_str(task.garden_id),
            "estimatedDuration": task.estimated_duration,
            "actualDuration": task.actual_duration,
            "notes": task.notes,
            "createdAt": iso(task.created_at),
            "updatedAt": iso(task.updated_at),
        }
