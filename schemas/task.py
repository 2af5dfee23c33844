from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from models.task import TaskType, TaskPriority, TaskStatus
from schemas.common import CamelModel


class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[TaskType] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    assigned_to_id: Optional[UUID] = Field(None, alias="assignedTo")
    due_date: Optional[datetime] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[TaskType] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_to_id: Optional[UUID] = Field(None, alias="assignedTo")
    due_date: Optional[datetime] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class TaskStatusUpdate(CamelModel):
    status: TaskStatus
