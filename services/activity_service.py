from models.event import Event
from models.plant import Plant
from models.task import Task
from services.event_service import EventService
from services.plant_service import PlantService
from services.store import db_guard
from services.task_service import TaskService


class ActivityService:
    """Recent plants, tasks and events, newest first, at most limit items in total."""

    def __init__(self):
        self.plants = PlantService()
        self.tasks = TaskService()
        self.events = EventService()

    async def recent_activity(self, garden_id=None, limit: int = 10) -> list:
        filters = {"garden_id": garden_id} if garden_id else {}

        async with db_guard("recent_activity"):
            events = await Event.filter(**filters).order_by("-created_at").limit(limit)
            plants = await Plant.filter(**filters).order_by("-created_at").limit(limit)
            tasks = await Task.filter(**filters).order_by("-created_at").limit(limit)
            attendees = await self.events.attendees_of([e.id for e in events])

        items = (
            [(e.created_at, {"kind": "event", **self.events.serialize(e, attendees.get(str(e.id), []))}) for e in events]
            + [(p.created_at, {"kind": "plant", **self.plants.serialize(p)}) for p in plants]
            + [(t.created_at, {"kind": "task", **self.tasks.serialize(t)}) for t in tasks]
        )
        items.sort(key=lambda item: item[0], reverse=True)
        return [data for _, data in items[:limit]]
