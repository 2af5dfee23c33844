from datetime import datetime
from typing import Optional

from models.plant import PlantStatus, PlantHealth
from schemas.common import CamelModel


class PlantCreate(CamelModel):
    name: Optional[str] = None
    species: Optional[str] = None
    variety: Optional[str] = None
    planted_date: Optional[datetime] = None
    expected_harvest_date: Optional[datetime] = None
    status: PlantStatus = PlantStatus.SEED
    health: PlantHealth = PlantHealth.GOOD
    location: Optional[str] = None
    notes: Optional[str] = None
    last_watered: Optional[datetime] = None
    last_fertilized: Optional[datetime] = None


class PlantUpdate(CamelModel):
    name: Optional[str] = None
    species: Optional[str] = None
    variety: Optional[str] = None
    planted_date: Optional[datetime] = None
    expected_harvest_date: Optional[datetime] = None
    status: Optional[PlantStatus] = None
    health: Optional[PlantHealth] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    last_watered: Optional[datetime] = None
    last_fertilized: Optional[datetime] = None
