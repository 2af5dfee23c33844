from core.exceptions import AuthorizationError
from core.logger import db_logger
from models.event import Event, EventAttendee
from models.garden import GardenReference, ReferenceKind
from models.message import Message
from models.plant import Plant
from models.task import Task
from services.garden_service import GardenService
from services.store import ReferenceStore, locked_garden


class MembershipService:

    def __init__(self):
        self.refs = ReferenceStore()
        self.gardens = GardenService()

    async def join(self, garden_id, user_id) -> dict:
        """Add the user to the members list. Joining twice is a no-op."""
        async with locked_garden(garden_id, "join_garden") as (garden, conn):
            added = await self.refs.add(garden.id, ReferenceKind.MEMBER, user_id, conn)

        if added:
            db_logger.logger.info(f"✅ User {user_id} joined garden {garden_id}")
        else:
            db_logger.logger.debug(f"User {user_id} already a member of garden {garden_id}")

        return await self.gardens.serialize_garden(garden)

    async def leave(self, garden_id, user_id) -> None:
        """
        Remove the user from the members list; no-op for non-members.
        The owner may leave too: ownership stays and the garden is kept.
        """
        async with locked_garden(garden_id, "leave_garden") as (garden, conn):
            removed = await self.refs.remove(garden.id, ReferenceKind.MEMBER, user_id, conn)

        if removed:
            db_logger.logger.info(f"User {user_id} left garden {garden_id}")

    async def delete_garden(self, garden_id, requester_id) -> dict:
        """Owner-only. Cascades to every plant, task, event and message of the garden."""
        async with locked_garden(garden_id, "delete_garden") as (garden, conn):
            if str(garden.owner_id) != str(requester_id):
                db_logger.log_denied("delete_garden", requester_id, garden_id)
                raise AuthorizationError("Not authorized")

            event_ids = await Event.filter(garden_id=garden.id).using_db(conn).values_list("id", flat=True)
            if event_ids:
                await EventAttendee.filter(event_id__in=list(event_ids)).using_db(conn).delete()

            removed = {
                "plants": await Plant.filter(garden_id=garden.id).using_db(conn).delete(),
                "tasks": await Task.filter(garden_id=garden.id).using_db(conn).delete(),
                "events": await Event.filter(garden_id=garden.id).using_db(conn).delete(),
                "messages": await Message.filter(garden_id=garden.id).using_db(conn).delete(),
            }
            await GardenReference.filter(garden_id=garden.id).using_db(conn).delete()
            await garden.delete(using_db=conn)

        db_logger.log_delete("Garden", garden_id)
        db_logger.logger.info(f"Cascade for garden {garden_id}: {removed}")
        return removed
