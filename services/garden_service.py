from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple, Type
from uuid import UUID

from pydantic import BaseModel
from tortoise import timezone
from tortoise.expressions import Q
from tortoise.functions import Count
from tortoise.models import Model
from tortoise.transactions import in_transaction

from core.exceptions import AuthorizationError, NotFoundError
from core.formatters import enum_value, id_str, iso
from core.logger import db_logger
from core.validators import require_fields
from models.event import Event, EventAttendee
from models.garden import Garden, GardenReference, ReferenceKind
from models.plant import Plant
from models.task import Task
from models.user import User
from schemas.garden import GardenCreate
from services.stats_service import StatsService
from services.store import ReferenceStore, db_guard, locked_garden

GARDEN_REQUIRED = {
    "name": "Name is required",
    "description": "Description is required",
    "location": "Location is required",
}


@dataclass(frozen=True)
class ChildSpec:
    model: Type[Model]
    label: str
    creator_field: str
    required: Dict[str, str]
    user_fields: Tuple[str, ...] = ()
    defaults: Dict[str, Callable] = field(default_factory=dict)


CHILD_SPECS: Dict[ReferenceKind, ChildSpec] = {
    ReferenceKind.PLANT: ChildSpec(
        model=Plant,
        label="Plant",
        creator_field="planted_by",
        required={"name": "Plant name is required", "species": "Species is required"},
        defaults={"planted_date": timezone.now},
    ),
    ReferenceKind.TASK: ChildSpec(
        model=Task,
        label="Task",
        creator_field="assigned_by",
        required={"title": "Task title is required", "type": "Task type is required"},
        user_fields=("assigned_to_id",),
    ),
    ReferenceKind.EVENT: ChildSpec(
        model=Event,
        label="Event",
        creator_field="created_by",
        required={"title": "Event title is required", "date": "Event date is required"},
    ),
}


def child_spec(kind: ReferenceKind) -> ChildSpec:
    if kind not in CHILD_SPECS:
        raise ValueError(f"{kind} is not a child kind")
    return CHILD_SPECS[kind]


async def ensure_users_exist(data: dict, user_fields: Tuple[str, ...]):
    for name in user_fields:
        user_id = data.get(name)
        if user_id is not None and not await User.filter(id=user_id).exists():
            raise NotFoundError("Assigned user not found")


class GardenService:
    """
    Keeps each garden's reference lists (members, plants, tasks, events)
    in step with the child rows that point at the garden.

    Child rows are authoritative: statistics count rows, the lists only carry
    membership and display order. verify_references / repair_references
    compare the two and resynchronise the lists from a live scan.
    """

    def __init__(self):
        self.refs = ReferenceStore()
        self.stats = StatsService()

    # --------------------------------------
    # Garden lifecycle
    # --------------------------------------
    async def create_garden(self, owner_id, data: GardenCreate) -> dict:
        require_fields(data, GARDEN_REQUIRED)
        db_logger.logger.info(f"Creating garden: name='{data.name}', owner_id={owner_id}")

        async with db_guard("create_garden"):
            async with in_transaction() as conn:
                garden = await Garden.create(using_db=conn, owner_id=owner_id, **data.model_dump())
                await self.refs.add(garden.id, ReferenceKind.MEMBER, owner_id, conn)

        db_logger.log_create("Garden", {
            "id": str(garden.id),
            "name": garden.name,
            "owner_id": str(owner_id)
        })
        return await self.serialize_garden(garden, populate=True)

    async def get_garden(self, garden_id) -> Garden:
        garden = await Garden.get_or_none(id=garden_id)
        if garden is None:
            raise NotFoundError("Garden not found")
        return garden

    async def get_garden_with_stats(self, garden_id) -> dict:
        async with db_guard("get_garden_with_stats"):
            garden = await self.get_garden(garden_id)
            refs = await self.refs.load(garden.id)
            data = await self.serialize_garden(garden, refs=refs, populate=True)
            data["stats"] = await self.stats.compute(garden.id, len(refs[ReferenceKind.MEMBER]))

        db_logger.logger.debug(f"Garden {garden_id} stats: {data['stats']}")
        return data

    async def list_gardens(self) -> list:
        async with db_guard("list_gardens"):
            gardens = await Garden.all().order_by("created_at")
            counts = await GardenReference.filter(
                kind=ReferenceKind.MEMBER
            ).annotate(count=Count("id")).group_by("garden_id").values("garden_id", "count")

        member_counts = {str(row["garden_id"]): row["count"] for row in counts}
        return [
            {
                "id": str(g.id),
                "name": g.name,
                "description": g.description,
                "location": g.location,
                "category": enum_value(g.category),
                "createdAt": iso(g.created_at),
                "owner": str(g.owner_id),
                "memberCount": member_counts.get(str(g.id), 0),
            }
            for g in gardens
        ]

    async def list_user_gardens(self, user_id) -> list:
        """Gardens the user owns or is a member of."""
        async with db_guard("list_user_gardens"):
            member_of = await self.refs.gardens_of_member(user_id)
            gardens = await Garden.filter(
                Q(owner_id=user_id) | Q(id__in=member_of)
            ).order_by("created_at")
            return await self._serialize_many(gardens)

    async def list_created_gardens(self, user_id) -> list:
        async with db_guard("list_created_gardens"):
            gardens = await Garden.filter(owner_id=user_id).order_by("created_at")
            return await self._serialize_many(gardens)

    # --------------------------------------
    # Child entities
    # --------------------------------------
    async def add_child(self, garden_id, kind: ReferenceKind, data: BaseModel, creator_id, **extra) -> Model:
        """
        Create a plant, task or event in the garden and append it to the
        garden's list. Both writes commit together or not at all.
        """
        spec = child_spec(kind)
        require_fields(data, spec.required)

        attrs = data.model_dump(exclude_none=True)
        for name, default in spec.defaults.items():
            attrs.setdefault(name, default())
        attrs.update(extra)
        await ensure_users_exist(attrs, spec.user_fields)

        async with locked_garden(garden_id, f"add_{kind.value}") as (garden, conn):
            child = await spec.model.create(
                using_db=conn,
                garden_id=garden.id,
                **{f"{spec.creator_field}_id": creator_id},
                **attrs
            )
            await self.refs.add(garden.id, kind, child.id, conn)

            if kind is ReferenceKind.EVENT:
                # creator attends by default
                await EventAttendee.create(event_id=child.id, user_id=creator_id, using_db=conn)

        db_logger.log_create(spec.label, {
            "id": str(child.id),
            "garden_id": str(garden.id),
            f"{spec.creator_field}_id": str(creator_id),
            **attrs
        })
        return child

    async def remove_child(self, garden_id: Optional[UUID], kind: ReferenceKind, child_id) -> None:
        """
        Delete the child and drop its id from the garden's list.
        With garden_id None the child's own parent is used.
        """
        spec = child_spec(kind)

        async with db_guard(f"remove_{kind.value}"):
            async with in_transaction() as conn:
                child = await spec.model.filter(id=child_id).using_db(conn).first()
                if child is None or (garden_id is not None and str(child.garden_id) != str(garden_id)):
                    raise NotFoundError(f"{spec.label} not found")

                # lock the parent so the list update serialises with concurrent appends;
                # the parent may already be gone, the child is deleted regardless
                await Garden.filter(id=child.garden_id).select_for_update().using_db(conn).first()

                if kind is ReferenceKind.EVENT:
                    await EventAttendee.filter(event_id=child.id).using_db(conn).delete()
                await child.delete(using_db=conn)
                await self.refs.remove(child.garden_id, kind, child.id, conn)

        db_logger.log_delete(spec.label, child_id)

    # --------------------------------------
    # Reference integrity
    # --------------------------------------
    async def _live_children(self, garden_id, kind: ReferenceKind, conn=None) -> list:
        qs = child_spec(kind).model.filter(garden_id=garden_id)
        if conn is not None:
            qs = qs.using_db(conn)
        rows = await qs.order_by("created_at").values_list("id", flat=True)
        return [str(r) for r in rows]

    async def verify_references(self, garden_id) -> dict:
        async with db_guard("verify_references"):
            garden = await self.get_garden(garden_id)
            refs = await self.refs.load(garden.id)

            report = {}
            consistent = True
            for kind in CHILD_SPECS:
                live = await self._live_children(garden.id, kind)
                listed = refs[kind]
                missing = [c for c in live if c not in set(listed)]
                dangling = [r for r in listed if r not in set(live)]
                consistent = consistent and not missing and not dangling
                report[f"{kind.value}s"] = {"missing": missing, "dangling": dangling}

        report["consistent"] = consistent
        return report

    async def repair_references(self, garden_id, requester_id=None) -> dict:
        """Resynchronise the child lists from a live scan of the child rows."""
        report = {}
        async with locked_garden(garden_id, "repair_references") as (garden, conn):
            if requester_id is not None and str(garden.owner_id) != str(requester_id):
                db_logger.log_denied("repair_references", requester_id, garden_id)
                raise AuthorizationError("Not authorized")

            refs = await self.refs.load(garden.id, conn)
            for kind in CHILD_SPECS:
                live = await self._live_children(garden.id, kind, conn)
                listed = refs[kind]

                removed = 0
                for ref_id in listed:
                    if ref_id not in live:
                        removed += await self.refs.remove(garden.id, kind, ref_id, conn)

                added = 0
                for child_id in live:
                    if child_id not in listed:
                        added += await self.refs.add(garden.id, kind, child_id, conn)

                report[f"{kind.value}s"] = {"added": added, "removed": removed}

        if any(r["added"] or r["removed"] for r in report.values()):
            db_logger.log_update("GardenReference", garden_id, report)
        else:
            db_logger.logger.info(f"✅ Garden {garden_id} references already consistent")
        return report

    # --------------------------------------
    # Serialization
    # --------------------------------------
    async def _serialize_many(self, gardens) -> list:
        refs = await self.refs.load_many(g.id for g in gardens)
        return [await self.serialize_garden(g, refs=refs[str(g.id)]) for g in gardens]

    async def serialize_garden(self, garden: Garden, refs: dict = None, populate: bool = False) -> dict:
        """Garden as JSON. populate=True expands owner and members into user summaries."""
        if refs is None:
            refs = await self.refs.load(garden.id)

        owner = id_str(garden.owner_id)
        members = list(refs[ReferenceKind.MEMBER])

        if populate:
            users = {
                str(u.id): u
                for u in await User.filter(id__in=[owner, *members])
            }
            if owner in users:
                owner = users[owner].to_summary()
            members = [users[m].to_summary() for m in members if m in users]

        return {
            "id": str(garden.id),
            "name": garden.name,
            "description": garden.description,
            "location": garden.location,
            "size": garden.size,
            "soilType": garden.soil_type,
            "climate": garden.climate,
            "category": enum_value(garden.category),
            "owner": owner,
            "members": members,
            "plants": list(refs[ReferenceKind.PLANT]),
            "tasks": list(refs[ReferenceKind.TASK]),
            "events": list(refs[ReferenceKind.EVENT]),
            "createdAt": iso(garden.created_at),
            "updatedAt": iso(garden.updated_at),
        }
