from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user
from models.user import User
from schemas.common import MessageOut
from schemas.plant import PlantCreate, PlantUpdate
from services.plant_service import PlantService

router = APIRouter(prefix="/api/v1/plants", tags=["Plants"])


@router.get("/garden/{garden_id}")
async def list_plants(
        garden_id: UUID,
        service: PlantService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.list_plants(garden_id)


@router.post("/garden/{garden_id}", status_code=status.HTTP_201_CREATED)
async def create_plant(
        garden_id: UUID,
        data: PlantCreate,
        service: PlantService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.create_plant(garden_id, data, current_user)


@router.get("/{plant_id}")
async def get_plant(
        plant_id: UUID,
        service: PlantService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return service.serialize(await service.get_plant(plant_id))


@router.patch("/{plant_id}")
async def update_plant(
        plant_id: UUID,
        data: PlantUpdate,
        service: PlantService = Depends(),
        current_user: User = Depends(get_current_user)
):
    return await service.update_plant(plant_id, data)


@router.delete("/{plant_id}", response_model=MessageOut)
async def delete_plant(
        plant_id: UUID,
        service: PlantService = Depends(),
        current_user: User = Depends(get_current_user)
):
    await service.delete_plant(plant_id)
    return {"message": "Plant deleted"}
