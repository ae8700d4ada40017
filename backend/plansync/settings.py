from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"

    # Server database (exercise-plans service)
    DB_HOST: str = "db"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "plansync"
    DB_URL: str | None = None  # full URL, wins over the DB_* parts (e.g. sqlite in tests)

    # Local record store
    STORE_URL: str = "sqlite:///plansync-local.db"

    # Remote API
    API_BASE_URL: str = "http://localhost:8000"
    API_TOKEN: str | None = None      # issued by the session layer, sent as a bearer token
    API_TIMEOUT_SECONDS: float = 10.0
    EXERCISE_PLANS_PATH: str = "/exercise-plans"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
