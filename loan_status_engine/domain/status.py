"""Status engine - expected vs actual payment accounting and the status state machine"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from loan_status_engine.domain.classification import classify_transaction, references_restructure
from loan_status_engine.domain.models import (
    ActualPayment,
    Loan,
    LoanStatus,
    StatusCalculation,
    TransactionCategory,
)
from loan_status_engine.domain.vocabulary import DEFAULT_VOCABULARY, TransactionVocabulary
from loan_status_engine.utils.date_utils import days_between

RESTRUCTURED_BY_FLAG = "flag"
RESTRUCTURED_BY_TRANSACTION = "transaction"

# Missed-payment count at which a loan is in default
DEFAULT_THRESHOLD = 4


def _round_half_up(value: float, places: str = "0.01") -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def count_payments_made(total_received: float, installment_amount: float) -> int:
    """
    Convert cumulative credits into an installment count.

    Both amounts are rounded to cents first and the quotient is rounded to the
    nearest integer, so float noise from summing many credits cannot drop a
    payment. Returns 0 when the installment amount is not positive.
    """
    if installment_amount <= 0:
        return 0
    installment = _round_half_up(installment_amount)
    if installment == 0:
        return 0
    received = _round_half_up(total_received)
    return int((received / installment).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def determine_status(missed_payments: int, is_restructured: bool) -> str:
    """Map missed payments and restructuring onto a status code"""
    if is_restructured:
        return LoanStatus.RESTRUCTURED
    if missed_payments <= 0:
        return LoanStatus.CURRENT
    if missed_payments == 1:
        return LoanStatus.DELINQUENT_1
    if missed_payments == 2:
        return LoanStatus.DELINQUENT_2
    if missed_payments == 3:
        return LoanStatus.DELINQUENT_3
    return LoanStatus.DEFAULT


def explain_status(status: str, missed_payments: int, restructured_source: Optional[str]) -> str:
    """Human-readable reason recorded alongside the status"""
    if status == LoanStatus.RESTRUCTURED:
        if restructured_source == RESTRUCTURED_BY_FLAG:
            return "Loan has been restructured (column BU flag)"
        return "Loan has been restructured"
    if status == LoanStatus.CURRENT:
        return "All payments up to date"
    if status == LoanStatus.DEFAULT:
        return f"{missed_payments} payments missed ({DEFAULT_THRESHOLD}+ = default)"
    if missed_payments == 1:
        return "1 payment missed"
    return f"{missed_payments} payments missed"


def calculate_status(
    loan: Loan,
    today: date,
    vocabulary: TransactionVocabulary = DEFAULT_VOCABULARY,
) -> StatusCalculation:
    """
    Derive a loan's status as of ``today``.

    Steps:
    1. Expected payments: paydates strictly before today (today never counts)
    2. Actual payments: credits the classifier calls 'payment'
    3. Payments made: round(total received / installment amount)
    4. Missed payments: max(0, expected - made)
    5. Restructured: explicit flag, restructure-type credit, or reference mention
    6. Status from the table in determine_status

    Pure function of the loan's schedule, ledger, installment amount,
    restructured flag and ``today``.
    """
    calculation = StatusCalculation(as_of=today)

    paydates = sorted(loan.paydates, key=lambda p: p.date)
    transactions = sorted(loan.transactions, key=lambda t: t.date)

    calculation.expected_payments = [p for p in paydates if p.date < today]
    calculation.total_expected = len(calculation.expected_payments)

    restructured_by_transaction = False
    total_received = 0.0
    for transaction in transactions:
        entry = classify_transaction(transaction, vocabulary)
        calculation.ledger.append(entry)

        if entry.category == TransactionCategory.RESTRUCTURE:
            restructured_by_transaction = True
        elif entry.category == TransactionCategory.PAYMENT:
            total_received += transaction.credit
            calculation.actual_payments.append(
                ActualPayment(
                    date=transaction.date,
                    amount=transaction.credit,
                    type_name=transaction.type_name,
                )
            )

        if references_restructure(transaction, vocabulary):
            restructured_by_transaction = True

    calculation.total_received = total_received
    calculation.payments_made = count_payments_made(total_received, loan.installment_amount)
    calculation.missed_payments = max(0, calculation.total_expected - calculation.payments_made)

    # The sheet's flag wins over anything inferred from the ledger
    if loan.is_restructured:
        calculation.restructured_source = RESTRUCTURED_BY_FLAG
    elif restructured_by_transaction:
        calculation.restructured_source = RESTRUCTURED_BY_TRANSACTION
    calculation.is_restructured = calculation.restructured_source is not None

    calculation.status = determine_status(calculation.missed_payments, calculation.is_restructured)
    calculation.explanation = explain_status(
        calculation.status, calculation.missed_payments, calculation.restructured_source
    )
    return calculation


def calculate_days_delinquent(calculation: StatusCalculation) -> int:
    """Days since the oldest missed expected payment, 0 when nothing is missed"""
    if calculation.missed_payments <= 0 or not calculation.expected_payments:
        return 0
    oldest_missed = calculation.expected_payments[-calculation.missed_payments]
    return max(0, days_between(oldest_missed.date, calculation.as_of))
