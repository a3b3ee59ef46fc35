from __future__ import annotations

from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from order_report.app.db.models.core_types import ErrorPolicy
from order_report.services.errors import ConfigLoadError

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Réglages du run, lus dans l'environnement (nom exact de la variable).
    Une variable vide vaut "non définie".
    """

    database_url: str = Field(default="sqlite:///orders.db", alias="DATABASE_URL")
    data_dir: Path = Field(default=Path("."), alias="DATA_DIR")
    tax_rules_path: Path = Field(default=Path("tax_rules.json"), alias="TAX_RULES_PATH")
    report_path: Path = Field(default=Path("order_totals.csv"), alias="REPORT_PATH")
    error_policy: ErrorPolicy = Field(default=ErrorPolicy.abort, alias="ORDER_ERROR_POLICY")
    workers: int = Field(default=4, ge=1, alias="REPORT_WORKERS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        populate_by_name = True
        env_ignore_empty = True

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {sorted(LOG_LEVELS)}")
        return v


def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid settings: {e}") from e
