from typing import Dict, List

from tortoise.transactions import in_transaction

from core.exceptions import NotFoundError
from core.formatters import enum_value, id_str, iso
from core.logger import db_logger
from core.validators import reject_blank
from models.event import Event, EventAttendee
from models.garden import ReferenceKind
from models.user import User
from schemas.event import EventCreate, EventUpdate
from services.garden_service import GardenService
from services.store import db_guard

EVENT_NOT_NULL = {
    "title": "Event title cannot be empty",
    "date": "Event date cannot be empty",
    "type": "Event type cannot be empty",
    "status": "Event status cannot be empty",
}


class EventService:

    def __init__(self):
        self.gardens = GardenService()

    async def list_events(self, garden_id) -> list:
        """Soonest first."""
        async with db_guard("list_events"):
            events = await Event.filter(garden_id=garden_id).order_by("date")
            attendees = await self.attendees_of([e.id for e in events])
        return [self.serialize(e, attendees.get(str(e.id), [])) for e in events]

    async def get_event(self, event_id) -> dict:
        async with db_guard("get_event"):
            event = await self._get(event_id)
            return await self._serialize_one(event)

    async def create_event(self, garden_id, data: EventCreate, user: User) -> dict:
        event = await self.gardens.add_child(garden_id, ReferenceKind.EVENT, data, user.id)
        return await self._serialize_one(event)

    async def update_event(self, event_id, data: EventUpdate) -> dict:
        changes = data.model_dump(exclude_unset=True)
        reject_blank(data, changes, EVENT_NOT_NULL)

        async with db_guard("update_event"):
            event = await self._get(event_id)
            for name, value in changes.items():
                setattr(event, name, value)
            await event.save()
            result = await self._serialize_one(event)

        db_logger.log_update("Event", event_id, changes)
        return result

    async def toggle_attendance(self, event_id, user_id) -> dict:
        """
        Join the event if absent, leave it if present. The creator gets no
        special treatment and max_attendees is not enforced.
        """
        async with db_guard("toggle_attendance"):
            async with in_transaction() as conn:
                event = await Event.filter(id=event_id).select_for_update().using_db(conn).first()
                if event is None:
                    raise NotFoundError("Event not found")

                left = await EventAttendee.filter(event_id=event.id, user_id=user_id).using_db(conn).delete()
                if not left:
                    await EventAttendee.create(event_id=event.id, user_id=user_id, using_db=conn)

            db_logger.logger.info(
                f"User {user_id} {'left' if left else 'joined'} event {event_id}"
            )
            return await self._serialize_one(event)

    async def delete_event(self, event_id) -> None:
        await self.gardens.remove_child(None, ReferenceKind.EVENT, event_id)

    # --------------------------------------
    # helpers
    # --------------------------------------
    async def _get(self, event_id) -> Event:
        event = await Event.get_or_none(id=event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    async def attendees_of(self, event_ids) -> Dict[str, List[str]]:
        result = {}
        if not event_ids:
            return result
        rows = await EventAttendee.filter(
            event_id__in=event_ids
        ).order_by("id").values_list("event_id", "user_id")
        for event_id, user_id in rows:
            result.setdefault(str(event_id), []).append(str(user_id))
        return result

    async def _serialize_one(self, event: Event) -> dict:
        attendees = await self.attendees_of([event.id])
        return self.serialize(event, attendees.get(str(event.id), []))

    def serialize(self, event: Event, attendees: List[str]) -> dict:
        return {
            "id": str(event.id),
            "title": event.title,
            "description": event.description,
            "date": iso(event.date),
            "time": event.time,
            "duration": event.duration,
            "type": enum_value(event.type),
            "location": event.location,
            "maxAttendees": event.max_attendees,
            "attendees": attendees,
            "garden": id_str(event.garden_id),
            "createdBy": id_str(event.created_by_id),
            "status": enum_value(event.status),
            "createdAt": iso(event.created_at),
            "updatedAt": iso(event.updated_at),
        }
