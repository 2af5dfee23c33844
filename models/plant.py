from enum import Enum

from tortoise import fields, models


class PlantStatus(str, Enum):
    SEED = "seed"
    SEEDLING = "seedling"
    VEGETATIVE = "vegetative"
    FLOWERING = "flowering"
    FRUITING = "fruiting"
    HARVESTED = "harvested"
    COMPLETED = "completed"


class PlantHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class Plant(models.Model):
    id = fields.UUIDField(pk=True)
    name = fields.CharField(max_length=255)
    species = fields.CharField(max_length=255, null=True)
    variety = fields.CharField(max_length=255, null=True)

    planted_date = fields.DatetimeField(null=True)
    expected_harvest_date = fields.DatetimeField(null=True)

    status = fields.CharEnumField(PlantStatus, default=PlantStatus.SEED)
    health = fields.CharEnumField(PlantHealth, default=PlantHealth.GOOD)

    # e.g. "Bed A", "Container 1"
    location = fields.CharField(max_length=255, null=True)
    notes = fields.TextField(null=True)

    garden = fields.ForeignKeyField(
        "models.Garden",
        related_name="garden_plants",
        on_delete=fields.CASCADE
    )
    planted_by = fields.ForeignKeyField(
        "models.User",
        related_name="planted",
        on_delete=fields.CASCADE
    )

    last_watered = fields.DatetimeField(null=True)
    last_fertilized = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "plants"
