"""Pytest fixtures for testing"""

from datetime import date, timedelta
from io import BytesIO
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from loan_status_engine.api.dependencies import get_today
from loan_status_engine.api.main import create_app
from loan_status_engine.domain.columns import DEFAULT_COLUMNS, LAYOUT_WIDTH
from loan_status_engine.domain.models import Lead, Loan, ScheduledPayment, Transaction

TODAY = date(2024, 6, 15)


def make_row(**cells: Any) -> List[Any]:
    """76-cell sheet row with the named ColumnMap fields filled in"""
    row: List[Any] = [None] * LAYOUT_WIDTH
    for name, value in cells.items():
        row[getattr(DEFAULT_COLUMNS, name)] = value
    return row


def make_header() -> List[Any]:
    """Header row labelled with the ColumnMap field names"""
    row: List[Any] = [None] * LAYOUT_WIDTH
    for name in DEFAULT_COLUMNS.__dataclass_fields__:
        row[getattr(DEFAULT_COLUMNS, name)] = name
    return row


def make_transaction(
    day: date,
    credit: float = 0.0,
    type_name: str = "ACH",
    debit: float = 0.0,
    reference: str = "",
    source_row: int = 2,
) -> Transaction:
    return Transaction(
        date=day,
        reference=reference,
        type_id=None,
        type_name=type_name,
        debit=debit,
        credit=credit,
        balance=0.0,
        source_row=source_row,
    )


def make_loan(
    paydates: Optional[List[ScheduledPayment]] = None,
    transactions: Optional[List[Transaction]] = None,
    installment_amount: float = 1000.0,
    is_restructured: bool = False,
    lead: Optional[Lead] = None,
) -> Loan:
    return Loan(
        row_number=2,
        external_id="EXT-1",
        loan_number="L-1",
        installment_amount=installment_amount,
        is_restructured=is_restructured,
        lead=lead or Lead(),
        paydates=paydates or [],
        transactions=transactions or [],
    )


def workbook_bytes(rows: List[List[Any]]) -> bytes:
    """Serialize rows into an in-memory .xlsx"""
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def today() -> date:
    """Fixed calculation date"""
    return TODAY


@pytest.fixture
def past_paydates() -> List[ScheduledPayment]:
    """Three weekly 1000 installments, all before today"""
    return [
        ScheduledPayment(date=TODAY - timedelta(days=21 - 7 * i), amount=1000.0, source_row=2 + i)
        for i in range(3)
    ]


@pytest.fixture
def sample_sheet() -> List[List[Any]]:
    """Header plus two loans: one paying on time, one behind"""
    base = TODAY - timedelta(days=28)
    return [
        make_header(),
        make_row(
            external_id="EXT-100",
            loan_number="L-100",
            client_display_name="Acme Bakery",
            client_industry_sector="Food",
            installment_amount=500,
            lead_fico=720,
            lead_avg_monthly_revenue=20000,
            lead_avg_mca_debts=2000,
            paydate_date=base,
            paydate_amount=500,
            trans_date=base,
            trans_type_name="ACH",
            trans_credit=500,
        ),
        make_row(
            paydate_date=base + timedelta(days=7),
            paydate_amount=500,
            trans_date=base + timedelta(days=7),
            trans_type_name="ACH",
            trans_credit=500,
        ),
        make_row(external_id="EXT-200", loan_number="L-200", installment_amount=800, lead_fico=590),
        make_row(paydate_date=base, paydate_amount=800),
        make_row(paydate_date=base + timedelta(days=7), paydate_amount=800),
    ]


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client pinned to the fixed calculation date"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)
