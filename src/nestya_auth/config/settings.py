"""Runtime settings loaded from environment variables."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        validation_alias="JWT_ALGORITHM",
    )
    access_token_ttl_seconds: PositiveInt = Field(
        default=900,
        validation_alias="JWT_ACCESS_TOKEN_TTL_SECONDS",
    )
    refresh_token_ttl_ms: PositiveInt = Field(
        default=604_800_000,
        validation_alias="REFRESH_TOKEN_TTL_MS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def access_token_ttl(self) -> timedelta:
        """Return access-token lifetime as a timedelta."""

        return timedelta(seconds=self.access_token_ttl_seconds)

    @property
    def refresh_token_ttl(self) -> timedelta:
        """Return refresh-token lifetime as a timedelta."""

        return timedelta(milliseconds=self.refresh_token_ttl_ms)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
