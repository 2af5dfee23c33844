from enum import Enum

from tortoise import fields, models


class GardenCategory(str, Enum):
    COMMUNITY = "community"
    URBAN = "urban"
    SCHOOL = "school"
    THERAPEUTIC = "therapeutic"
    ROOFTOP = "rooftop"
    VERTICAL = "vertical"


class ReferenceKind(str, Enum):
    MEMBER = "member"
    PLANT = "plant"
    TASK = "task"
    EVENT = "event"


class Garden(models.Model):
    id = fields.UUIDField(pk=True)
    name = fields.CharField(max_length=255)
    description = fields.TextField()
    location = fields.CharField(max_length=255)
    size = fields.CharField(max_length=100, null=True)
    soil_type = fields.CharField(max_length=100, null=True)
    climate = fields.CharField(max_length=100, null=True)
    category = fields.CharEnumField(GardenCategory, default=GardenCategory.COMMUNITY)

    owner = fields.ForeignKeyField(
        "models.User",
        related_name="owned_gardens",
        on_delete=fields.CASCADE
    )

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    references: fields.ReverseRelation["GardenReference"]

    class Meta:
        table = "gardens"
        ordering = ["created_at"]

    def __str__(self):
        return self.name


class GardenReference(models.Model):
    """
    One entry of a garden's ordered reference lists (members, plants,
    tasks, events). The integer pk keeps insertion order.
    """
    id = fields.IntField(pk=True)
    garden = fields.ForeignKeyField(
        "models.Garden",
        related_name="references",
        on_delete=fields.CASCADE
    )
    kind = fields.CharEnumField(ReferenceKind, max_length=10)
    ref_id = fields.UUIDField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "garden_references"
        unique_together = (("garden", "kind", "ref_id"),)
        ordering = ["id"]
