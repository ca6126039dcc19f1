"""Loan record assembly - group spreadsheet rows into Loan aggregates.

A row whose External ID and Loan # cells are both filled opens a new loan.
Every following row without them is a continuation row that may add one
paydate and one transaction to the loan opened last. Assembly is a fold over
the rows with state (closed loans, open loan); the open loan is closed once
more after the last row, so the final loan in the sheet is never dropped.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import partial, reduce
from typing import Iterable, List, Optional, Sequence, Tuple

from loan_status_engine.domain.columns import ColumnMap
from loan_status_engine.domain.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    ORPHAN_ROWS_RAISE,
    EngineConfig,
)
from loan_status_engine.domain.exceptions import StructuralError
from loan_status_engine.domain.models import Client, Lead, Loan, RawRow, ScheduledPayment, Transaction
from loan_status_engine.domain.parsing import (
    parse_bool,
    parse_date,
    parse_int,
    parse_number,
    parse_text,
)
from loan_status_engine.utils.date_utils import approximate_months_between

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyResult:
    """Loans in sheet order plus the row numbers of dropped orphan rows"""

    loans: List[Loan]
    orphan_rows: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class _AssemblyState:
    closed: Tuple[Loan, ...] = ()
    current: Optional[Loan] = None
    orphan_rows: Tuple[int, ...] = ()


def _is_blank(cell) -> bool:
    return cell is None or (isinstance(cell, str) and cell.strip() == "")


def is_empty_row(row: RawRow) -> bool:
    return not row or all(_is_blank(cell) for cell in row)


def starts_new_loan(row: RawRow, columns: ColumnMap) -> bool:
    """Both identity cells (External ID and Loan #) present"""
    return not _is_blank(columns.cell(row, "external_id")) and not _is_blank(
        columns.cell(row, "loan_number")
    )


def _build_client(row: RawRow, columns: ColumnMap) -> Client:
    c = partial(columns.cell, row)
    loan_state = parse_text(c("state"), "Unknown")
    client_id = parse_text(c("client_id"), None)
    return Client(
        id=client_id,
        name=parse_text(c("client_display_name"), None) or client_id or "Unknown",
        industry_sector=parse_text(c("client_industry_sector"), "Unknown"),
        industry_subsector=parse_text(c("client_industry_subsector"), "General"),
        date_founded=parse_date(c("client_date_founded")),
        address_line1=parse_text(c("client_address_line1")),
        address_line2=parse_text(c("client_address_line2")),
        address_line3=parse_text(c("client_address_line3")),
        city=parse_text(c("client_city"), "Unknown"),
        state=parse_text(c("client_state"), loan_state),
        country=parse_text(c("client_country"), "United States"),
        zip_code=parse_text(c("client_zip_code")),
        email=parse_text(c("client_email")),
        primary_no=parse_text(c("client_primary_no")),
    )


def _build_lead(row: RawRow, columns: ColumnMap, config: EngineConfig) -> Lead:
    c = partial(columns.cell, row)
    return Lead(
        id=parse_text(c("lead_id"), None),
        fico=parse_int(c("lead_fico")) or config.default_fico,
        avg_monthly_revenue=parse_number(c("lead_avg_monthly_revenue")),
        avg_revenue=parse_number(c("lead_avg_revenue")),
        avg_mca_debts=parse_number(c("lead_avg_mca_debts")),
        avg_daily_balance=parse_number(c("lead_avg_daily_balance")),
        avg_nsfs=parse_number(c("lead_avg_nsfs")),
        avg_negative_days=parse_number(c("lead_avg_negative_days")),
        avg_num_deposits=parse_number(c("lead_avg_num_deposits")),
        avg_num_credits=parse_number(c("lead_avg_num_credits")),
        avg_deposits=parse_number(c("lead_avg_deposits")),
        avg_credits=parse_number(c("lead_avg_credits")),
        created_on=parse_date(c("lead_created_on")),
        closed_date=parse_date(c("lead_closed_date")),
        sell_rate=parse_number(c("lead_sell_rate")),
        underwriter=parse_text(c("lead_underwriter"), None),
        salesperson=parse_text(c("lead_salesperson"), None),
        pod_leader=parse_text(c("lead_pod_leader"), None),
    )


def build_loan_header(row: RawRow, row_number: int, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> Loan:
    """Loan aggregate from a header row, with empty schedule and ledger"""
    columns = config.columns
    c = partial(columns.cell, row)
    return Loan(
        row_number=row_number,
        external_id=parse_text(c("external_id")),
        loan_number=parse_text(c("loan_number")),
        active=parse_bool(c("active_debit_order")),
        amount_sold=parse_number(c("amount_sold")),
        contract_balance=parse_number(c("contract_balance")),
        days_overdue=parse_int(c("days_overdue")),
        days_overdue_mpf=parse_int(c("days_overdue_mpf")),
        loan_amount=parse_number(c("loan_amount")),
        loan_term=parse_int(c("loan_term")),
        payout_date=parse_date(c("payout_date")),
        progress=parse_number(c("progress")),
        remaining_amount=parse_number(c("remaining_amount")),
        state=parse_text(c("state"), "Unknown"),
        payment_frequency=parse_text(c("payment_frequency"), "Weekly"),
        installment_amount=parse_number(c("installment_amount")) or config.default_installment_amount,
        last_installment_amount=parse_number(c("last_installment_amount")),
        contract_interest=parse_number(c("contract_interest")),
        origination_fee=parse_number(c("origination_fee")),
        first_payment_date=parse_date(c("first_payment_date")),
        end_date=parse_date(c("end_date")),
        compound_date=parse_date(c("compound_date")),
        days_overdue_on_write_off=parse_int(c("days_overdue_on_write_off")),
        amount_overdue_on_write_off=parse_number(c("amount_overdue_on_write_off")),
        amount_overdue=parse_number(c("amount_overdue")),
        client=_build_client(row, columns),
        lead=_build_lead(row, columns, config),
        is_restructured=parse_bool(c("loan_restructured")),
    )


def _parse_paydate(row: RawRow, row_number: int, loan: Loan, columns: ColumnMap) -> Optional[ScheduledPayment]:
    cell = columns.cell(row, "paydate_date")
    if not cell:
        return None
    paydate = parse_date(cell)
    if paydate is None:
        logger.warning(
            "Skipping paydate with unreadable date",
            extra={"row_number": row_number, "loan_number": loan.loan_number, "cell": str(cell)},
        )
        return None
    return ScheduledPayment(
        date=paydate,
        amount=parse_number(columns.cell(row, "paydate_amount")) or loan.installment_amount,
        source_row=row_number,
    )


def _parse_transaction(row: RawRow, row_number: int, loan: Loan, columns: ColumnMap) -> Optional[Transaction]:
    cell = columns.cell(row, "trans_date")
    if not cell:
        return None
    transaction_date = parse_date(cell)
    if transaction_date is None:
        logger.warning(
            "Skipping transaction with unreadable date",
            extra={"row_number": row_number, "loan_number": loan.loan_number, "cell": str(cell)},
        )
        return None
    return Transaction(
        date=transaction_date,
        reference=parse_text(columns.cell(row, "trans_reference")),
        type_id=columns.cell(row, "trans_type_id"),
        type_name=parse_text(columns.cell(row, "trans_type_name")),
        debit=parse_number(columns.cell(row, "trans_debit")),
        credit=parse_number(columns.cell(row, "trans_credit")),
        balance=parse_number(columns.cell(row, "trans_balance")),
        source_row=row_number,
    )


def _append_entries(loan: Loan, row: RawRow, row_number: int, columns: ColumnMap) -> Loan:
    """Loan with this row's paydate and transaction (if any) appended"""
    paydate = _parse_paydate(row, row_number, loan, columns)
    transaction = _parse_transaction(row, row_number, loan, columns)
    if paydate is None and transaction is None:
        return loan
    return replace(
        loan,
        paydates=loan.paydates + [paydate] if paydate is not None else loan.paydates,
        transactions=(
            loan.transactions + [transaction] if transaction is not None else loan.transactions
        ),
    )


def finalize_loan(loan: Loan) -> Loan:
    """Sort schedule and ledger by date and fill assembly-time derived fields"""
    loan_term = loan.loan_term
    if not loan_term and loan.first_payment_date and loan.end_date:
        loan_term = approximate_months_between(loan.first_payment_date, loan.end_date)
    return replace(
        loan,
        paydates=sorted(loan.paydates, key=lambda p: p.date),
        transactions=sorted(loan.transactions, key=lambda t: t.date),
        contract_date=loan.payout_date or loan.first_payment_date,
        loan_term=loan_term,
    )


def _close(state: _AssemblyState) -> _AssemblyState:
    if state.current is None:
        return state
    return replace(state, closed=state.closed + (finalize_loan(state.current),), current=None)


def _make_step(config: EngineConfig):
    columns = config.columns

    def step(state: _AssemblyState, numbered_row: Tuple[int, RawRow]) -> _AssemblyState:
        row_number, row = numbered_row
        if is_empty_row(row):
            return state

        if starts_new_loan(row, columns):
            state = _close(state)
            loan = build_loan_header(row, row_number, config)
            return replace(state, current=_append_entries(loan, row, row_number, columns))

        if state.current is None:
            if config.orphan_row_policy == ORPHAN_ROWS_RAISE:
                raise StructuralError(
                    f"Row {row_number} continues a loan but no loan header precedes it",
                    row_number=row_number,
                )
            logger.warning(
                "Dropping continuation row with no open loan",
                extra={"row_number": row_number},
            )
            return replace(state, orphan_rows=state.orphan_rows + (row_number,))

        return replace(state, current=_append_entries(state.current, row, row_number, columns))

    return step


def assemble_loans(rows: Sequence[RawRow], config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> AssemblyResult:
    """
    Group rows into loans. Row 0 is the header and is skipped.

    Row numbers recorded on loans, paydates and transactions are 1-based sheet
    rows (the header is row 1).
    """
    numbered: Iterable[Tuple[int, RawRow]] = (
        (index + 1, row) for index, row in enumerate(rows) if index > 0
    )
    state = _close(reduce(_make_step(config), numbered, _AssemblyState()))
    return AssemblyResult(loans=list(state.closed), orphan_rows=list(state.orphan_rows))
