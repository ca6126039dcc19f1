"""Schedule-to-ledger payment matching and catch-up payment detection"""

import math
from datetime import date
from typing import List, Optional

from loan_status_engine.domain.classification import categorize_type_name
from loan_status_engine.domain.models import (
    CatchUpPayment,
    Loan,
    MatchStatus,
    PaymentMatch,
    ScheduledPayment,
    Transaction,
    TransactionCategory,
)
from loan_status_engine.domain.vocabulary import DEFAULT_VOCABULARY, TransactionVocabulary


def _within_amount_tolerance(credit: float, expected: float, tolerance: float) -> bool:
    if expected <= 0:
        return False
    return abs(credit - expected) / expected < tolerance


def _closest_transaction(
    paydate: ScheduledPayment,
    candidates: List[Transaction],
    window_days: int,
    amount_tolerance: float,
) -> Optional[Transaction]:
    closest = None
    closest_diff = math.inf
    for transaction in candidates:
        days_diff = abs((transaction.date - paydate.date).days)
        if days_diff <= window_days and days_diff < closest_diff:
            if _within_amount_tolerance(transaction.credit, paydate.amount, amount_tolerance):
                closest = transaction
                closest_diff = days_diff
    return closest


def match_payments_to_schedule(
    loan: Loan,
    today: date,
    window_days: int = 7,
    amount_tolerance: float = 0.10,
) -> List[PaymentMatch]:
    """
    Pair each scheduled payment with the nearest unclaimed credit.

    A credit qualifies when it lands within ``window_days`` of the paydate and
    within ``amount_tolerance`` (relative) of the scheduled amount. Paydates are
    processed in schedule order and each credit is claimed at most once.
    Unmatched paydates before ``today`` are missed, the rest are future.
    Credits nobody claimed come back as extra entries.
    """
    matches: List[PaymentMatch] = []
    unclaimed = [t for t in sorted(loan.transactions, key=lambda t: t.date) if t.credit > 0]

    for paydate in sorted(loan.paydates, key=lambda p: p.date):
        transaction = _closest_transaction(paydate, unclaimed, window_days, amount_tolerance)
        if transaction is not None:
            unclaimed.remove(transaction)
            matches.append(
                PaymentMatch(
                    scheduled_payment=paydate,
                    transaction=transaction,
                    status=MatchStatus.MATCHED,
                    variance=transaction.credit - paydate.amount,
                )
            )
        else:
            matches.append(
                PaymentMatch(
                    scheduled_payment=paydate,
                    transaction=None,
                    status=MatchStatus.MISSED if paydate.date < today else MatchStatus.FUTURE,
                    variance=-paydate.amount,
                )
            )

    for transaction in unclaimed:
        matches.append(
            PaymentMatch(
                scheduled_payment=None,
                transaction=transaction,
                status=MatchStatus.EXTRA,
                variance=transaction.credit,
            )
        )

    return matches


def detect_catch_up_payments(
    loan: Loan,
    vocabulary: TransactionVocabulary = DEFAULT_VOCABULARY,
    multiplier: float = 1.5,
) -> List[CatchUpPayment]:
    """Payment credits larger than ``multiplier`` installments, with how many installments each clears"""
    installment = loan.installment_amount
    if installment <= 0:
        return []

    catch_ups = []
    for transaction in sorted(loan.transactions, key=lambda t: t.date):
        if transaction.credit <= installment * multiplier:
            continue
        if categorize_type_name(transaction.type_name, vocabulary) != TransactionCategory.PAYMENT:
            continue
        catch_ups.append(
            CatchUpPayment(
                date=transaction.date,
                amount=transaction.credit,
                payments_cleared=math.floor(transaction.credit / installment),
                source_row=transaction.source_row,
                type_name=transaction.type_name,
            )
        )
    return catch_ups
