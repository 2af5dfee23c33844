from typing import Optional

from models.garden import GardenCategory
from schemas.common import CamelModel


class GardenCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    soil_type: Optional[str] = None
    climate: Optional[str] = None
    category: GardenCategory = GardenCategory.COMMUNITY
