from core.exceptions import NotFoundError
from core.formatters import iso
from core.logger import db_logger
from core.validators import require_fields
from models.garden import Garden
from models.message import Message
from models.user import User
from schemas.chat import MessageCreate
from services.store import db_guard


class ChatService:
    """Append-only message log per garden, read by polling."""

    # --------------------------------------
    # Messages of a garden, oldest first
    # --------------------------------------
    async def get_messages(self, garden_id):
        db_logger.logger.debug(f"Fetching messages for garden {garden_id}")

        async with db_guard("get_messages"):
            if not await Garden.filter(id=garden_id).exists():
                raise NotFoundError("Garden not found")

            msgs = await Message.filter(
                garden_id=garden_id
            ).order_by("created_at").prefetch_related("author")

        db_logger.logger.info(f"✅ Retrieved {len(msgs)} messages from garden {garden_id}")
        return [self.serialize_message(msg) for msg in msgs]

    # --------------------------------------
    # Post a new message
    # --------------------------------------
    async def send_message(self, garden_id, author: User, data: MessageCreate):
        require_fields(data, {"text": "Message text is required"})

        db_logger.logger.info(
            f"💬 Creating message: garden={garden_id}, author={author.id}, text_len={len(data.text)}"
        )

        async with db_guard("send_message"):
            if not await Garden.filter(id=garden_id).exists():
                raise NotFoundError("Garden not found")

            msg = await Message.create(
                garden_id=garden_id,
                author=author,
                text=data.text
            )

        db_logger.log_create("Message", {
            "id": str(msg.id),
            "garden_id": str(garden_id),
            "author_id": str(author.id),
            "created_at": iso(msg.created_at)
        })
        return self.serialize_message(msg)

    def serialize_message(self, msg: Message):
        return {
            "id": str(msg.id),
            "text": msg.text,
            "garden": str(msg.garden_id),
            "user": msg.author.to_summary(),
            "createdAt": iso(msg.created_at)
        }
