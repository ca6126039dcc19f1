"""POST /v1/portfolio/upload - run the loan ETL over an uploaded workbook"""

import logging
import time
from dataclasses import asdict
from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from loan_status_engine.api.dependencies import get_engine_config, get_request_id, get_today
from loan_status_engine.api.v1.schemas import (
    CatchUpPaymentSchema,
    LoanSchema,
    PaymentMatchSchema,
    PortfolioResponse,
    PortfolioSummarySchema,
    StatusCalculationSchema,
)
from loan_status_engine.config import settings
from loan_status_engine.domain.engine import PortfolioResult, process_rows
from loan_status_engine.domain.engine_config import EngineConfig
from loan_status_engine.domain.exceptions import ParseError, StructuralError
from loan_status_engine.domain.models import Loan
from loan_status_engine.domain.status import calculate_days_delinquent
from loan_status_engine.infrastructure.observability.logging import log_portfolio_run
from loan_status_engine.infrastructure.observability.metrics import (
    record_portfolio,
    workbook_parse_failures_counter,
)
from loan_status_engine.infrastructure.workbook.reader import LayoutReport, read_workbook, validate_layout

router = APIRouter()


def run_etl(body: bytes, as_of: date, config: EngineConfig) -> Tuple[LayoutReport, PortfolioResult]:
    """Read, validate and derive one workbook (blocking, CPU-bound)"""
    rows = read_workbook(body)
    layout = validate_layout(rows, config.columns)
    return layout, process_rows(rows, as_of, config)


def to_loan_schema(loan: Loan) -> LoanSchema:
    """Map a derived Loan onto its response schema"""
    return LoanSchema(
        row_number=loan.row_number,
        external_id=loan.external_id,
        loan_number=loan.loan_number,
        client_name=loan.client.name,
        industry_sector=loan.client.industry_sector,
        state=loan.state,
        loan_amount=loan.loan_amount,
        contract_balance=loan.contract_balance,
        installment_amount=loan.installment_amount,
        fico=loan.lead.fico,
        is_restructured=loan.is_restructured,
        status=loan.status,
        missed_payments=loan.missed_payments,
        days_delinquent=calculate_days_delinquent(loan.status_calculation),
        risk_score=loan.risk_score,
        status_calculation=StatusCalculationSchema.model_validate(asdict(loan.status_calculation)),
        catch_up_payments=[CatchUpPaymentSchema.model_validate(asdict(c)) for c in loan.catch_up_payments],
        payment_matching=[PaymentMatchSchema.model_validate(asdict(m)) for m in loan.payment_matching],
    )


@router.post("/portfolio/upload", response_model=PortfolioResponse)
async def upload_portfolio(
    request: Request,
    as_of: Optional[date] = Query(None, description="Calculation date (defaults to today)"),
    config: EngineConfig = Depends(get_engine_config),
    today: date = Depends(get_today),
):
    """
    Derive loan statuses from a loan export workbook sent as the raw request body.

    Flow:
    1. Read the first worksheet
    2. Validate the column layout (warnings only)
    3. Assemble loans and derive status, matching and risk score
    4. Record metrics and logs

    Steps 1-3 run in the threadpool so the event loop keeps serving other requests.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)
    as_of = as_of or today

    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Empty upload")
    if len(body) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Workbook too large")

    try:
        layout, result = await run_in_threadpool(run_etl, body, as_of, config)

    except ParseError as e:
        workbook_parse_failures_counter.inc()
        logging.warning(f"Unreadable workbook: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except StructuralError as e:
        logging.warning(
            f"Structural error: {e}",
            extra={"request_id": request_id, "row_number": e.row_number},
        )
        raise HTTPException(status_code=422, detail=str(e))

    duration = time.perf_counter() - start_time
    record_portfolio(result.summary, duration)
    log_portfolio_run(
        request_id,
        result.summary.total_loans,
        result.summary.status_counts,
        len(result.summary.orphan_rows),
        duration * 1000,
    )

    return PortfolioResponse(
        as_of=as_of,
        summary=PortfolioSummarySchema.model_validate(asdict(result.summary)),
        warnings=layout.warnings,
        loans=[to_loan_schema(loan) for loan in result.loans],
    )
