from tortoise import Tortoise, connections

from core.config import settings

MODEL_MODULES = [
    "models.user",
    "models.garden",
    "models.plant",
    "models.task",
    "models.event",
    "models.message",
]


def get_tortoise_config(db_url: str = None, with_migrations: bool = True) -> dict:
    models_list = list(MODEL_MODULES)
    if with_migrations:
        models_list.append("aerich.models")

    return {
        "connections": {
            "default": db_url or settings.DB_URL
        },
        "apps": {
            "models": {
                "models": models_list,
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }


# read by aerich (see [tool.aerich] in pyproject.toml)
TORTOISE_ORM = get_tortoise_config()


async def init_db(config: dict = None):
    await Tortoise.init(config=config or TORTOISE_ORM)
    await Tortoise.generate_schemas(safe=True)


async def close_db():
    await connections.close_all()
