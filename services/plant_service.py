from core.exceptions import NotFoundError
from core.formatters import enum_value, id_str, iso
from core.logger import db_logger
from core.validators import reject_blank
from models.garden import ReferenceKind
from models.plant import Plant
from models.user import User
from schemas.plant import PlantCreate, PlantUpdate
from services.garden_service import GardenService
from services.store import db_guard

PLANT_NOT_NULL = {
    "name": "Plant name cannot be empty",
    "status": "Plant status cannot be empty",
    "health": "Plant health cannot be empty",
}


class PlantService:

    def __init__(self):
        self.gardens = GardenService()

    async def list_plants(self, garden_id) -> list:
        """Newest first."""
        async with db_guard("list_plants"):
            plants = await Plant.filter(garden_id=garden_id).order_by("-created_at")
        return [self.serialize(p) for p in plants]

    async def get_plant(self, plant_id) -> Plant:
        plant = await Plant.get_or_none(id=plant_id)
        if plant is None:
            raise NotFoundError("Plant not found")
        return plant

    async def create_plant(self, garden_id, data: PlantCreate, user: User) -> dict:
        plant = await self.gardens.add_child(garden_id, ReferenceKind.PLANT, data, user.id)
        return self.serialize(plant)

    async def update_plant(self, plant_id, data: PlantUpdate) -> dict:
        changes = data.model_dump(exclude_unset=True)
        reject_blank(data, changes, PLANT_NOT_NULL)

        async with db_guard("update_plant"):
            plant = await self.get_plant(plant_id)
            for name, value in changes.items():
                setattr(plant, name, value)
            await plant.save()

        db_logger.log_update("Plant", plant_id, changes)
        return self.serialize(plant)

    async def delete_plant(self, plant_id) -> None:
        await self.gardens.remove_child(None, ReferenceKind.PLANT, plant_id)

    def serialize(self, plant: Plant) -> dict:
        return {
            "id": str(plant.id),
            "name": plant.name,
            "species": plant.species,
            "variety": plant.variety,
            "plantedDate": iso(plant.planted_date),
            "expectedHarvestDate": iso(plant.expected_harvest_date),
            "status": enum_value(plant.status),
            "health": enum_value(plant.health),
            "location": plant.location,
            "notes": plant.notes,
            "garden": id_str(plant.garden_id),
            "plantedBy": id_str(plant.planted_by_id),
            "lastWatered": iso(plant.last_watered),
            "lastFertilized": iso(plant.last_fertilized),
            "createdAt": iso(plant.created_at),
            "updatedAt": iso(plant.updated_at),
        }
