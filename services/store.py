from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional

from tortoise.backends.base.client import BaseDBAsyncClient
from tortoise.exceptions import (
    DBConnectionError,
    OperationalError,
    TransactionManagementError,
    ValidationError as OrmValidationError,
)
from tortoise.transactions import in_transaction

from core.exceptions import NotFoundError, StoreError, ValidationError
from core.logger import db_logger
from models.garden import Garden, GardenReference, ReferenceKind

STORE_ERRORS = (OperationalError, DBConnectionError, TransactionManagementError)


@asynccontextmanager
async def db_guard(operation: str):
    """Turn ORM failures into StoreError; domain errors pass through."""
    try:
        yield
    except OrmValidationError as e:
        db_logger.logger.warning(f"Rejected by model validation in {operation}: {e}")
        raise ValidationError.single("body", str(e)) from e
    except STORE_ERRORS as e:
        db_logger.log_error(operation, e)
        raise StoreError(operation) from e


@asynccontextmanager
async def locked_garden(garden_id, operation: str):
    """
    Open a transaction holding a row lock on the garden.

    Every change to a garden's reference lists happens inside this block.
    """
    async with db_guard(operation):
        async with in_transaction() as conn:
            garden = await Garden.filter(id=garden_id).select_for_update().using_db(conn).first()
            if garden is None:
                raise NotFoundError("Garden not found")
            yield garden, conn


def empty_references() -> Dict[ReferenceKind, List[str]]:
    return {kind: [] for kind in ReferenceKind}


class ReferenceStore:
    """The ordered reference lists of gardens, one row per entry."""

    @staticmethod
    def _query(conn: Optional[BaseDBAsyncClient], **filters):
        qs = GardenReference.filter(**filters)
        return qs.using_db(conn) if conn is not None else qs

    async def add(self, garden_id, kind: ReferenceKind, ref_id, conn: BaseDBAsyncClient) -> bool:
        """Add-to-set. Must run under locked_garden. Returns False if already present."""
        exists = await self._query(conn, garden_id=garden_id, kind=kind, ref_id=ref_id).exists()
        if exists:
            return False
        await GardenReference.create(garden_id=garden_id, kind=kind, ref_id=ref_id, using_db=conn)
        db_logger.log_reference("add", garden_id, kind, ref_id)
        return True

    async def remove(self, garden_id, kind: ReferenceKind, ref_id, conn: BaseDBAsyncClient) -> bool:
        """Remove-from-set. Absence is not an error."""
        deleted = await self._query(conn, garden_id=garden_id, kind=kind, ref_id=ref_id).delete()
        if deleted:
            db_logger.log_reference("remove", garden_id, kind, ref_id)
        return bool(deleted)

    async def load(self, garden_id, conn: Optional[BaseDBAsyncClient] = None) -> Dict[ReferenceKind, List[str]]:
        rows = await self._query(conn, garden_id=garden_id).order_by("id").values_list("kind", "ref_id")
        refs = empty_references()
        for kind, ref_id in rows:
            refs[ReferenceKind(kind)].append(str(ref_id))
        return refs

    async def load_many(self, garden_ids: Iterable) -> Dict[str, Dict[ReferenceKind, List[str]]]:
        garden_ids = list(garden_ids)
        result = {str(gid): empty_references() for gid in garden_ids}
        if not garden_ids:
            return result

        rows = await GardenReference.filter(
            garden_id__in=garden_ids
        ).order_by("id").values_list("garden_id", "kind", "ref_id")
        for garden_id, kind, ref_id in rows:
            result[str(garden_id)][ReferenceKind(kind)].append(str(ref_id))
        return result

    async def gardens_of_member(self, user_id) -> List[str]:
        rows = await GardenReference.filter(
            kind=ReferenceKind.MEMBER, ref_id=user_id
        ).values_list("garden_id", flat=True)
        return [str(gid) for gid in rows]
