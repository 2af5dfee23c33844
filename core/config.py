import os


class Settings:
    APP_NAME = os.getenv("APP_NAME", "Community Garden API")
    DB_URL = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")
    JWT_SECRET = os.getenv("JWT_SECRET", "SUPER_SECRET_64BIT_KEY")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "60"))
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


settings = Settings()
