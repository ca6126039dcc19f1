"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from loan_status_engine.domain.engine_config import EngineConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "loan-status-engine"
    log_level: str = "INFO"

    # Upload limits
    max_upload_bytes: int = 20 * 1024 * 1024

    # Payment matching
    match_window_days: int = 7
    match_amount_tolerance: float = 0.10
    catch_up_multiplier: float = 1.5

    # Defaults for blank sheet cells
    default_installment_amount: float = 1000.0
    default_fico: int = 650

    # Continuation rows before the first loan header: "skip" logs and drops, "raise" fails the run
    orphan_row_policy: Literal["skip", "raise"] = "skip"


def build_engine_config(config: Settings) -> EngineConfig:
    """Engine configuration for the current settings (default column layout and vocabulary)"""
    return EngineConfig(
        match_window_days=config.match_window_days,
        match_amount_tolerance=config.match_amount_tolerance,
        catch_up_multiplier=config.catch_up_multiplier,
        default_installment_amount=config.default_installment_amount,
        default_fico=config.default_fico,
        orphan_row_policy=config.orphan_row_policy,
    )


settings = Settings()
