"""ETL engine - assemble loans from sheet rows and attach derived performance fields"""

from collections import Counter
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Sequence

from loan_status_engine.domain.assembly import assemble_loans
from loan_status_engine.domain.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from loan_status_engine.domain.matching import detect_catch_up_payments, match_payments_to_schedule
from loan_status_engine.domain.models import Loan, LoanStatus, PortfolioSummary, RawRow
from loan_status_engine.domain.scoring import calculate_risk_score
from loan_status_engine.domain.status import calculate_status


@dataclass
class PortfolioResult:
    """Derived loans for one sheet plus run statistics"""

    loans: List[Loan]
    summary: PortfolioSummary


def derive_loan(loan: Loan, today: date, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> Loan:
    """
    Attach status, catch-ups, payment matching and risk score.

    Returns a new Loan; the input is left untouched. Running it twice with the
    same loan and ``today`` gives equal results.
    """
    loan = replace(
        loan,
        paydates=sorted(loan.paydates, key=lambda p: p.date),
        transactions=sorted(loan.transactions, key=lambda t: t.date),
    )
    calculation = calculate_status(loan, today, config.vocabulary)
    derived = replace(
        loan,
        status=calculation.status,
        status_calculation=calculation,
        missed_payments=calculation.missed_payments,
        catch_up_payments=detect_catch_up_payments(
            loan, config.vocabulary, config.catch_up_multiplier
        ),
        payment_matching=match_payments_to_schedule(
            loan, today, config.match_window_days, config.match_amount_tolerance
        ),
    )
    return replace(derived, risk_score=calculate_risk_score(derived))


def summarize_portfolio(loans: Sequence[Loan], orphan_rows: Sequence[int] = ()) -> PortfolioSummary:
    """Run statistics; averages are 0 for an empty portfolio"""
    total = len(loans)
    transaction_count = sum(len(loan.transactions) for loan in loans)
    paydate_count = sum(len(loan.paydates) for loan in loans)
    status_counts = Counter(loan.status for loan in loans if loan.status is not None)

    return PortfolioSummary(
        total_loans=total,
        loans_with_transactions=sum(1 for loan in loans if loan.transactions),
        loans_with_paydates=sum(1 for loan in loans if loan.paydates),
        restructured_loans=status_counts.get(LoanStatus.RESTRUCTURED, 0),
        active_loans=sum(1 for loan in loans if loan.active),
        average_transactions_per_loan=transaction_count / total if total else 0.0,
        average_paydates_per_loan=paydate_count / total if total else 0.0,
        status_counts={status: status_counts.get(status, 0) for status in LoanStatus.ALL},
        orphan_rows=list(orphan_rows),
    )


def process_rows(
    rows: Sequence[RawRow],
    today: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> PortfolioResult:
    """
    Main entry point: cell matrix (header first) -> derived loans.

    Raises:
        StructuralError: orphan continuation row under the strict policy
    """
    assembly = assemble_loans(rows, config)
    loans = [derive_loan(loan, today, config) for loan in assembly.loans]
    return PortfolioResult(loans=loans, summary=summarize_portfolio(loans, assembly.orphan_rows))
