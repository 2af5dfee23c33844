import asyncio

from tortoise import timezone

from models.event import Event, EventStatus
from models.plant import Plant
from models.task import Task, TaskStatus


class StatsService:
    """Read-time garden statistics. Counts live child rows; nothing is cached."""

    async def compute(self, garden_id, member_count: int) -> dict:
        now = timezone.now()

        total_plants, upcoming_events, completed_tasks, pending_tasks = await asyncio.gather(
            Plant.filter(garden_id=garden_id).count(),
            Event.filter(garden_id=garden_id, status=EventStatus.UPCOMING, date__gt=now).count(),
            Task.filter(garden_id=garden_id, status=TaskStatus.COMPLETED).count(),
            Task.filter(garden_id=garden_id, status=TaskStatus.PENDING).count(),
        )

        return {
            "totalMembers": member_count,
            # no separate activity tracking exists
            "activeMembers": member_count,
            "totalPlants": total_plants,
            "upcomingEvents": upcoming_events,
            "completedTasks": completed_tasks,
            "pendingTasks": pending_tasks,
        }
