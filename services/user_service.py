import asyncio

from tortoise import timezone
from tortoise.expressions import Q

from core.exceptions import AuthorizationError, NotFoundError
from core.logger import db_logger
from models.event import Event, EventAttendee, EventStatus
from models.garden import Garden, ReferenceKind
from models.task import Task, TaskStatus
from models.user import User
from services.store import ReferenceStore, db_guard


class UserService:

    def __init__(self):
        self.refs = ReferenceStore()

    # --------------------------------------
    # Members of a garden, in join order
    # --------------------------------------
    async def garden_members(self, garden_id, requester_id) -> list:
        """Visible to members only."""
        async with db_guard("garden_members"):
            garden = await Garden.get_or_none(id=garden_id)
            if garden is None:
                raise NotFoundError("Garden not found")

            members = (await self.refs.load(garden.id))[ReferenceKind.MEMBER]
            if str(requester_id) not in members:
                db_logger.log_denied("garden_members", requester_id, garden_id)
                raise AuthorizationError("Not authorized to view garden members")

            users = {str(u.id): u for u in await User.filter(id__in=members)}

        return [users[m].to_summary() for m in members if m in users]

    # --------------------------------------
    # Per-user counters
    # --------------------------------------
    async def user_stats(self, user: User) -> dict:
        now = timezone.now()

        async with db_guard("user_stats"):
            member_of = await self.refs.gardens_of_member(user.id)
            event_ids = list(
                await EventAttendee.filter(user_id=user.id).values_list("event_id", flat=True)
            )

            total_gardens, total_tasks, completed_tasks = await asyncio.gather(
                Garden.filter(Q(owner_id=user.id) | Q(id__in=member_of)).count(),
                Task.filter(assigned_to_id=user.id).count(),
                Task.filter(assigned_to_id=user.id, status=TaskStatus.COMPLETED).count(),
            )
            upcoming_events = 0
            if event_ids:
                upcoming_events = await Event.filter(
                    id__in=event_ids, status=EventStatus.UPCOMING, date__gt=now
                ).count()

        return {
            "totalGardens": total_gardens,
            "totalTasks": total_tasks,
            "totalEvents": len(event_ids),
            "completedTasks": completed_tasks,
            "upcomingEvents": upcoming_events,
        }
