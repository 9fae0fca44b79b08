"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from arrest_calculator.core.types import Limits, StackingPolicy


class Settings(BaseSettings):
    """Environment-driven settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    max_sentence_days: float = 365
    max_impound_days: float = 30
    max_suspension_days: float = 60
    parole_violation_definition: str = "Parole Violation"
    parole_stacking_policy: StackingPolicy = StackingPolicy.MULTIPLY

    content_delivery_network: str | None = None
    legal_code_file: str = "gtaw_penal_code.json"
    legal_code_path: str | None = None
    additions_path: str | None = None

    request_timeout: float = 30.0
    max_retries: int = 3
    retry_backoff: float = 2.0

    def limits(self) -> Limits:
        return Limits(
            max_sentence_days=self.max_sentence_days,
            max_impound_days=self.max_impound_days,
            max_suspension_days=self.max_suspension_days,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
