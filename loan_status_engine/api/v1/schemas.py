"""Pydantic schemas for API responses"""

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ScheduledPaymentSchema(BaseModel):
    """Single scheduled installment"""

    date: dt.date
    amount: float
    source_row: int


class TransactionSchema(BaseModel):
    """Single ledger entry"""

    date: dt.date
    reference: str
    type_id: Optional[Any] = None
    type_name: str
    debit: float
    credit: float
    balance: float
    source_row: int


class ActualPaymentSchema(BaseModel):
    """Credit counted toward installments"""

    date: dt.date
    amount: float
    type_name: str


class LedgerEntrySchema(BaseModel):
    """Categorized ledger line"""

    date: dt.date
    amount: float
    type_name: str
    category: str


class StatusCalculationSchema(BaseModel):
    """Audit trail behind a loan's status"""

    as_of: dt.date
    expected_payments: List[ScheduledPaymentSchema]
    actual_payments: List[ActualPaymentSchema]
    ledger: List[LedgerEntrySchema]
    total_expected: int
    total_received: float
    payments_made: int
    missed_payments: int
    is_restructured: bool
    restructured_source: Optional[str] = None
    status: str
    explanation: str


class CatchUpPaymentSchema(BaseModel):
    """Credit that cleared several installments"""

    date: dt.date
    amount: float
    payments_cleared: int
    source_row: int
    type_name: str


class PaymentMatchSchema(BaseModel):
    """Schedule-to-ledger pairing"""

    scheduled_payment: Optional[ScheduledPaymentSchema] = None
    transaction: Optional[TransactionSchema] = None
    status: str
    variance: float


class LoanSchema(BaseModel):
    """Derived loan record"""

    row_number: int
    external_id: str
    loan_number: str
    client_name: str
    industry_sector: str
    state: str
    loan_amount: float
    contract_balance: float
    installment_amount: float
    fico: int
    is_restructured: bool
    status: str
    missed_payments: int
    days_delinquent: int
    risk_score: int
    status_calculation: StatusCalculationSchema
    catch_up_payments: List[CatchUpPaymentSchema]
    payment_matching: List[PaymentMatchSchema]


class PortfolioSummarySchema(BaseModel):
    """Run statistics"""

    total_loans: int
    loans_with_transactions: int
    loans_with_paydates: int
    restructured_loans: int
    active_loans: int
    average_transactions_per_loan: float
    average_paydates_per_loan: float
    status_counts: Dict[str, int]
    orphan_rows: List[int]


class PortfolioResponse(BaseModel):
    """Response for POST /v1/portfolio/upload"""

    as_of: dt.date
    summary: PortfolioSummarySchema
    warnings: List[str]
    loans: List[LoanSchema]
