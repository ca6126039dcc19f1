"""Dependency injection for FastAPI endpoints"""

from datetime import date

from fastapi import Request

from loan_status_engine.config import build_engine_config, settings
from loan_status_engine.domain.engine_config import EngineConfig
from loan_status_engine.utils.date_utils import local_today


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_engine_config() -> EngineConfig:
    """Provide engine configuration built from settings"""
    return build_engine_config(settings)


def get_today() -> date:
    """Provide the calculation date used when the caller does not pin one"""
    return local_today()
