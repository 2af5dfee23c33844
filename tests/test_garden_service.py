"""
Tests for the garden aggregate: reference lists, child create/delete, stats.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from tortoise.exceptions import OperationalError

from core.exceptions import NotFoundError, StoreError, ValidationError
from models.event import EventAttendee, EventStatus
from models.garden import GardenReference, ReferenceKind
from models.plant import Plant
from models.task import TaskType, TaskStatus
from schemas.event import EventCreate
from schemas.garden import GardenCreate
from schemas.plant import PlantCreate
from schemas.task import TaskCreate
from services.garden_service import GardenService
from services.membership_service import MembershipService
from services.store import ReferenceStore


@pytest.fixture
def service(db):
    return GardenService()


@pytest.fixture
async def garden(service, alice):
    return await service.create_garden(
        alice.id,
        GardenCreate(name="Elm St", description="desc", location="123 Elm")
    )


def plant_data(name="Tomato"):
    return PlantCreate(name=name, species="Solanum")


class TestCreateGarden:

    async def test_creator_becomes_owner_and_only_member(self, garden, alice):
        assert garden["owner"]["id"] == str(alice.id)
        assert [m["id"] for m in garden["members"]] == [str(alice.id)]
        assert garden["plants"] == []
        assert garden["tasks"] == []
        assert garden["events"] == []
        assert garden["category"] == "community"

    async def test_missing_required_fields(self, service, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_garden(alice.id, GardenCreate(name="", location="  "))

        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"name", "description", "location"}


class TestChildLifecycle:

    async def test_add_plant_updates_list_and_stats(self, service, garden, alice):
        plant = await service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(), alice.id)

        assert str(plant.garden_id) == garden["id"]
        assert str(plant.planted_by_id) == str(alice.id)
        assert plant.planted_date is not None

        result = await service.get_garden_with_stats(garden["id"])
        assert result["plants"] == [str(plant.id)]
        assert result["stats"]["totalPlants"] == 1

    async def test_remove_plant_updates_list_and_stats(self, service, garden, alice):
        plant = await service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(), alice.id)

        await service.remove_child(garden["id"], ReferenceKind.PLANT, plant.id)

        result = await service.get_garden_with_stats(garden["id"])
        assert str(plant.id) not in result["plants"]
        assert result["stats"]["totalPlants"] == 0
        assert await Plant.filter(id=plant.id).count() == 0

    async def test_add_child_to_missing_garden(self, service, alice):
        with pytest.raises(NotFoundError):
            await service.add_child(uuid4(), ReferenceKind.PLANT, plant_data(), alice.id)
        assert await Plant.all().count() == 0

    async def test_add_child_requires_fields(self, service, garden, alice):
        with pytest.raises(ValidationError) as exc_info:
            await service.add_child(garden["id"], ReferenceKind.TASK, TaskCreate(title="Weed"), alice.id)

        assert exc_info.value.errors == [{"field": "type", "message": "Task type is required"}]

    async def test_task_assigned_to_unknown_user(self, service, garden, alice):
        data = TaskCreate(title="Weed", type=TaskType.MAINTENANCE, assigned_to_id=uuid4())
        with pytest.raises(NotFoundError):
            await service.add_child(garden["id"], ReferenceKind.TASK, data, alice.id)

    async def test_remove_missing_child(self, service, garden):
        with pytest.raises(NotFoundError):
            await service.remove_child(garden["id"], ReferenceKind.PLANT, uuid4())

    async def test_remove_child_of_other_garden(self, service, garden, alice):
        other = await service.create_garden(
            alice.id, GardenCreate(name="Oak", description="d", location="1 Oak")
        )
        plant = await service.add_child(other["id"], ReferenceKind.PLANT, plant_data(), alice.id)

        with pytest.raises(NotFoundError):
            await service.remove_child(garden["id"], ReferenceKind.PLANT, plant.id)
        assert await Plant.filter(id=plant.id).exists()

    async def test_remove_child_when_list_entry_already_gone(self, service, garden, alice):
        plant = await service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(), alice.id)
        await GardenReference.filter(ref_id=plant.id).delete()

        await service.remove_child(None, ReferenceKind.PLANT, plant.id)

        assert await Plant.filter(id=plant.id).count() == 0

    async def test_failed_list_append_rolls_back_child(self, service, garden, alice, monkeypatch):
        async def broken_add(self, garden_id, kind, ref_id, conn):
            raise OperationalError("disk I/O error")

        monkeypatch.setattr(ReferenceStore, "add", broken_add)

        with pytest.raises(StoreError) as exc_info:
            await service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(), alice.id)

        assert exc_info.value.message == "Server error"
        assert await Plant.all().count() == 0

    async def test_concurrent_adds_keep_every_id(self, service, garden, alice):
        plants = await asyncio.gather(*[
            service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(f"Plant {i}"), alice.id)
            for i in range(10)
        ])

        refs = await ReferenceStore().load(garden["id"])
        assert sorted(refs[ReferenceKind.PLANT]) == sorted(str(p.id) for p in plants)

    async def test_event_creator_attends(self, service, garden, alice):
        event = await service.add_child(
            garden["id"],
            ReferenceKind.EVENT,
            EventCreate(title="Workday", date=datetime.now(timezone.utc) + timedelta(days=3)),
            alice.id
        )

        attendees = await EventAttendee.filter(event_id=event.id).values_list("user_id", flat=True)
        assert [str(a) for a in attendees] == [str(alice.id)]


class TestStats:

    async def test_empty_garden_has_zero_stats(self, service, garden):
        result = await service.get_garden_with_stats(garden["id"])

        assert result["stats"] == {
            "totalMembers": 1,
            "activeMembers": 1,
            "totalPlants": 0,
            "upcomingEvents": 0,
            "completedTasks": 0,
            "pendingTasks": 0,
        }

    async def test_counts(self, service, garden, alice):
        gid = garden["id"]
        now = datetime.now(timezone.utc)

        await service.add_child(gid, ReferenceKind.EVENT, EventCreate(title="Soon", date=now + timedelta(days=2)), alice.id)
        await service.add_child(gid, ReferenceKind.EVENT, EventCreate(title="Past", date=now - timedelta(days=2)), alice.id)
        await service.add_child(
            gid, ReferenceKind.EVENT,
            EventCreate(title="Off", date=now + timedelta(days=2), status=EventStatus.CANCELLED),
            alice.id
        )
        await service.add_child(gid, ReferenceKind.TASK, TaskCreate(title="Water", type=TaskType.WATERING), alice.id)
        await service.add_child(
            gid, ReferenceKind.TASK,
            TaskCreate(title="Prune", type=TaskType.PRUNING, status=TaskStatus.COMPLETED),
            alice.id
        )
        await service.add_child(
            gid, ReferenceKind.TASK,
            TaskCreate(title="Dig", type=TaskType.PLANTING, status=TaskStatus.IN_PROGRESS),
            alice.id
        )

        stats = (await service.get_garden_with_stats(gid))["stats"]

        assert stats["upcomingEvents"] == 1
        assert stats["pendingTasks"] == 1
        assert stats["completedTasks"] == 1

    async def test_missing_garden(self, service):
        with pytest.raises(NotFoundError):
            await service.get_garden_with_stats(uuid4())

    async def test_child_rows_are_authoritative(self, service, garden, alice):
        await service.add_child(garden["id"], ReferenceKind.PLANT, plant_data(), alice.id)
        await GardenReference.filter(kind=ReferenceKind.PLANT).delete()

        result = await service.get_garden_with_stats(garden["id"])

        assert result["plants"] == []
        assert result["stats"]["totalPlants"] == 1


class TestReferenceIntegrity:

    async def test_consistent_after_adds_and_removes(self, service, garden, alice):
        gid = garden["id"]
        kept = await service.add_child(gid, ReferenceKind.PLANT, plant_data("Kale"), alice.id)
        gone = await service.add_child(gid, ReferenceKind.PLANT, plant_data("Leek"), alice.id)
        await service.add_child(gid, ReferenceKind.TASK, TaskCreate(title="Water", type=TaskType.WATERING), alice.id)
        await service.remove_child(gid, ReferenceKind.PLANT, gone.id)

        report = await service.verify_references(gid)

        assert report["consistent"] is True
        refs = await ReferenceStore().load(gid)
        assert refs[ReferenceKind.PLANT] == [str(kept.id)]

    async def test_repair_restores_missing_and_drops_dangling(self, service, garden, alice):
        gid = garden["id"]
        plant = await service.add_child(gid, ReferenceKind.PLANT, plant_data(), alice.id)
        await GardenReference.filter(ref_id=plant.id).delete()
        await GardenReference.create(garden_id=gid, kind=ReferenceKind.TASK, ref_id=uuid4())

        report = await service.verify_references(gid)
        assert report["consistent"] is False
        assert report["plants"]["missing"] == [str(plant.id)]
        assert len(report["tasks"]["dangling"]) == 1

        repaired = await service.repair_references(gid)

        assert repaired["plants"] == {"added": 1, "removed": 0}
        assert repaired["tasks"] == {"added": 0, "removed": 1}
        assert (await service.verify_references(gid))["consistent"] is True

    async def test_repair_leaves_members_alone(self, service, garden, alice):
        await service.repair_references(garden["id"])

        refs = await ReferenceStore().load(garden["id"])
        assert refs[ReferenceKind.MEMBER] == [str(alice.id)]


class TestListing:

    async def test_list_gardens_with_member_count(self, service, garden, bob):
        await MembershipService().join(garden["id"], bob.id)

        gardens = await service.list_gardens()

        assert len(gardens) == 1
        assert gardens[0]["memberCount"] == 2
        assert gardens[0]["name"] == "Elm St"

    async def test_user_gardens(self, service, garden, alice, bob):
        bobs = await service.create_garden(bob.id, GardenCreate(name="Bob's", description="d", location="x"))
        await MembershipService().join(bobs["id"], alice.id)

        mine = await service.list_user_gardens(alice.id)
        created = await service.list_created_gardens(alice.id)

        assert {g["id"] for g in mine} == {garden["id"], bobs["id"]}
        assert [g["id"] for g in created] == [garden["id"]]
