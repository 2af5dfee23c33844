from enum import Enum

from tortoise import fields, models


class TaskType(str, Enum):
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    PRUNING = "pruning"
    HARVESTING = "harvesting"
    PLANTING = "planting"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Task(models.Model):
    id = fields.UUIDField(pk=True)
    title = fields.CharField(max_length=255)
    description = fields.TextField(null=True)

    type = fields.CharEnumField(TaskType, default=TaskType.MAINTENANCE)
    priority = fields.CharEnumField(TaskPriority, default=TaskPriority.MEDIUM)
    status = fields.CharEnumField(TaskStatus, default=TaskStatus.PENDING)

    assigned_to = fields.ForeignKeyField(
        "models.User",
        related_name="assigned_tasks",
        null=True,
        on_delete=fields.SET_NULL
    )
    assigned_by = fields.ForeignKeyField(
        "models.User",
        related_name="created_tasks",
        on_delete=fields.CASCADE
    )

    due_date = fields.DatetimeField(null=True)
    # set on every transition into "completed", never cleared
    completed_date = fields.DatetimeField(null=True)

    garden = fields.ForeignKeyField(
        "models.Garden",
        related_name="garden_tasks",
        on_delete=fields.CASCADE
    )

    # minutes
    estimated_duration = fields.IntField(null=True)
    actual_duration = fields.IntField(null=True)
    notes = fields.TextField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "tasks"
