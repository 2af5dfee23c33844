from typing import Optional

from schemas.common import CamelModel


class MessageCreate(CamelModel):
    text: Optional[str] = None
