from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = Field(default="development")
    APP_SECRET: str = Field(default="please-change-me")
    LOG_LEVEL: str = Field(default="INFO")

    DATABASE_URL: str | None = Field(default=None)
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=5432)
    DB_USER: str = Field(default="carconnect")
    DB_PASSWORD: str = Field(default="carconnect")
    DB_NAME: str = Field(default="carconnect")
    DB_SYNC_ECHO: bool = Field(default=False)

    IDENTITY_PROVIDER_URL: str = Field(default="https://api.clerk.com/v1")
    IDENTITY_PROVIDER_SECRET: str | None = Field(default=None)
    IDENTITY_PROVIDER_TIMEOUT_SECONDS: int = Field(default=10)

    RECENT_LEADS_LIMIT: int = Field(default=5)
    UPCOMING_EVENTS_LIMIT: int = Field(default=5)

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def project_root(self) -> Path:
        # backend/carconnect/config.py -> parents[2] == repo root
        return Path(__file__).resolve().parents[2]


settings = Settings()
