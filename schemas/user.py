from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict

from schemas.common import CamelModel


class UserOut(CamelModel):
    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
