from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "gtraf"
    POSTGRES_USER: str = "gtraf"
    POSTGRES_PASSWORD: str = "gtraf"
    # Takes precedence over the POSTGRES_* settings when set
    DATABASE_URL: Optional[str] = None

    SERVICE_NAME: str = "freight-booking-service"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    RUN_MIGRATIONS: bool = True

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "https://g-traf.vercel.app",
        "https://admingtraf.vercel.app",
    ]

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

@lru_cache
def get_settings() -> Settings:
    return Settings()
