"""
Tests for join / leave / delete of gardens.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from core.exceptions import AuthorizationError, NotFoundError
from models.event import Event, EventAttendee
from models.garden import Garden, GardenReference, ReferenceKind
from models.message import Message
from models.plant import Plant
from models.task import Task, TaskType
from schemas.chat import MessageCreate
from schemas.event import EventCreate
from schemas.garden import GardenCreate
from schemas.plant import PlantCreate
from schemas.task import TaskCreate
from services.chat_service import ChatService
from services.garden_service import GardenService
from services.membership_service import MembershipService
from services.store import ReferenceStore


@pytest.fixture
def service(db):
    return MembershipService()


@pytest.fixture
async def garden(alice):
    return await GardenService().create_garden(
        alice.id,
        GardenCreate(name="Elm St", description="desc", location="123 Elm")
    )


async def members_of(garden_id):
    return (await ReferenceStore().load(garden_id))[ReferenceKind.MEMBER]


class TestJoinLeave:

    async def test_join_adds_member(self, service, garden, alice, bob):
        result = await service.join(garden["id"], bob.id)

        assert result["members"] == [str(alice.id), str(bob.id)]

    async def test_join_twice_is_idempotent(self, service, garden, alice, bob):
        await service.join(garden["id"], bob.id)
        await service.join(garden["id"], bob.id)

        assert await members_of(garden["id"]) == [str(alice.id), str(bob.id)]

    async def test_leave_removes_member(self, service, garden, alice, bob):
        await service.join(garden["id"], bob.id)

        await service.leave(garden["id"], bob.id)
        await service.leave(garden["id"], bob.id)

        assert await members_of(garden["id"]) == [str(alice.id)]

    async def test_leave_when_not_member(self, service, garden, alice, carol):
        await service.leave(garden["id"], carol.id)

        assert await members_of(garden["id"]) == [str(alice.id)]

    async def test_owner_may_leave(self, service, garden, alice):
        await service.leave(garden["id"], alice.id)

        stored = await Garden.get(id=garden["id"])
        assert str(stored.owner_id) == str(alice.id)
        assert await members_of(garden["id"]) == []

    async def test_join_missing_garden(self, service, bob):
        with pytest.raises(NotFoundError):
            await service.join(uuid4(), bob.id)


class TestDeleteGarden:

    async def test_non_owner_is_rejected(self, service, garden, bob):
        with pytest.raises(AuthorizationError):
            await service.delete_garden(garden["id"], bob.id)

        assert await Garden.filter(id=garden["id"]).exists()

    async def test_missing_garden(self, service, alice):
        with pytest.raises(NotFoundError):
            await service.delete_garden(uuid4(), alice.id)

    async def test_owner_delete_cascades(self, service, garden, alice, bob):
        gid = garden["id"]
        gardens = GardenService()
        await service.join(gid, bob.id)
        await gardens.add_child(gid, ReferenceKind.PLANT, PlantCreate(name="Kale", species="Brassica"), alice.id)
        await gardens.add_child(gid, ReferenceKind.TASK, TaskCreate(title="Water", type=TaskType.WATERING), bob.id)
        await gardens.add_child(
            gid, ReferenceKind.EVENT,
            EventCreate(title="Workday", date=datetime.now(timezone.utc) + timedelta(days=1)),
            alice.id
        )
        await ChatService().send_message(gid, bob, MessageCreate(text="hello"))

        removed = await service.delete_garden(gid, alice.id)

        assert removed == {"plants": 1, "tasks": 1, "events": 1, "messages": 1}
        assert not await Garden.filter(id=gid).exists()
        assert await GardenReference.filter(garden_id=gid).count() == 0
        assert await Plant.all().count() == 0
        assert await Task.all().count() == 0
        assert await Event.all().count() == 0
        assert await EventAttendee.all().count() == 0
        assert await Message.all().count() == 0

        with pytest.raises(NotFoundError):
            await gardens.get_garden_with_stats(gid)
