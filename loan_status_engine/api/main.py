"""FastAPI application factory for the loan status engine"""

from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from loan_status_engine.api.dependencies import get_engine_config
from loan_status_engine.api.middleware import MetricsMiddleware, RequestIDMiddleware
from loan_status_engine.api.v1 import portfolio
from loan_status_engine.config import settings
from loan_status_engine.domain.engine_config import EngineConfig
from loan_status_engine.infrastructure.observability.logging import setup_logging

setup_logging(settings.log_level)


def engine_status(config: EngineConfig) -> dict:
    """Settings a run depends on, reported so results can be traced to them"""
    return {
        "vocabulary_version": config.vocabulary.version,
        "match_window_days": config.match_window_days,
        "match_amount_tolerance": config.match_amount_tolerance,
        "orphan_row_policy": config.orphan_row_policy,
        "max_upload_bytes": settings.max_upload_bytes,
    }


def create_app() -> FastAPI:
    """Build the app: upload router, health and Prometheus endpoints"""
    app = FastAPI(
        title="Loan Status Engine",
        description="Loan portfolio ETL: status, payment matching and risk scoring",
        version="0.1.0",
    )

    # Last added runs first, so every request is tagged before it is timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check(config: EngineConfig = Depends(get_engine_config)):
        return {"status": "ok", "service": settings.service_name, "engine": engine_status(config)}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(portfolio.router, prefix="/v1", tags=["portfolio"])

    return app


app = create_app()
