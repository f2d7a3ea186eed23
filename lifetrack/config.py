from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    data_path: str = str(Path(__file__).resolve().parents[1] / "data" / "seed.json")
    # currency the net worth total is expressed in: RON | EUR
    net_worth_currency: str = "RON"
    trend_months: int = 4
    top_movers_limit: int = 5
    top_categories_limit: int = 5
    weight_window: int = 4
    projection_periods: int = 4
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LIFETRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("net_worth_currency")
    @classmethod
    def _known_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in ("RON", "EUR"):
            raise ValueError("net_worth_currency must be RON or EUR")
        return value


@lru_cache
def get_settings() -> EngineSettings:
    return EngineSettings()
