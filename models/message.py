from tortoise import fields, models


class Message(models.Model):
    id = fields.UUIDField(pk=True)
    text = fields.TextField()

    author = fields.ForeignKeyField(
        "models.User",
        related_name="messages",
        on_delete=fields.CASCADE
    )
    garden = fields.ForeignKeyField(
        "models.Garden",
        related_name="messages",
        on_delete=fields.CASCADE
    )

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "messages"
        ordering = ["created_at"]
