from enum import Enum

from tortoise import fields, models


class EventType(str, Enum):
    WORKDAY = "workday"
    WORKSHOP = "workshop"
    HARVEST = "harvest"
    CELEBRATION = "celebration"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(models.Model):
    id = fields.UUIDField(pk=True)
    title = fields.CharField(max_length=255)
    description = fields.TextField(null=True)

    date = fields.DatetimeField()
    time = fields.CharField(max_length=20, null=True)
    # minutes
    duration = fields.IntField(null=True)

    type = fields.CharEnumField(EventType, default=EventType.WORKDAY)
    location = fields.CharField(max_length=255, null=True)
    # informational only, attendance is not capped
    max_attendees = fields.IntField(null=True)

    garden = fields.ForeignKeyField(
        "models.Garden",
        related_name="garden_events",
        on_delete=fields.CASCADE
    )
    created_by = fields.ForeignKeyField(
        "models.User",
        related_name="created_events",
        on_delete=fields.CASCADE
    )
    status = fields.CharEnumField(EventStatus, default=EventStatus.UPCOMING)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    attendances: fields.ReverseRelation["EventAttendee"]

    class Meta:
        table = "events"


class EventAttendee(models.Model):
    id = fields.IntField(pk=True)
    event = fields.ForeignKeyField(
        "models.Event",
        related_name="attendances",
        on_delete=fields.CASCADE
    )
    user = fields.ForeignKeyField(
        "models.User",
        related_name="attendances",
        on_delete=fields.CASCADE
    )
    joined_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "event_attendees"
        unique_together = (("event", "user"),)
        ordering = ["id"]
