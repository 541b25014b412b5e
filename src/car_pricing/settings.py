from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DepreciationMode(str, Enum):
    LINEAR = "linear"
    COMPOUND = "compound"


class PricingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    depreciation_mode: DepreciationMode = Field(
        default=DepreciationMode.LINEAR,
        alias="CAR_PRICING_DEPRECIATION_MODE",
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "text"] = Field(default="text", alias="LOG_FORMAT")


@lru_cache(maxsize=1)
def get_settings() -> PricingSettings:
    return PricingSettings()
