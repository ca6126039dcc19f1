"""Unit tests for the status engine"""

from datetime import timedelta

import pytest

from conftest import make_loan, make_transaction
from loan_status_engine.domain.models import ScheduledPayment
from loan_status_engine.domain.status import (
    calculate_days_delinquent,
    calculate_status,
    count_payments_made,
    determine_status,
)


def test_all_installments_paid_is_current(today, past_paydates):
    """3 past paydates, 3 payment credits of 1000 -> current"""
    transactions = [make_transaction(p.date, credit=1000, type_name="ACH") for p in past_paydates]
    loan = make_loan(paydates=past_paydates, transactions=transactions)

    calc = calculate_status(loan, today)

    assert calc.total_expected == 3
    assert calc.total_received == 3000
    assert calc.payments_made == 3
    assert calc.missed_payments == 0
    assert calc.status == "current"
    assert calc.explanation == "All payments up to date"
    assert len(calc.actual_payments) == 3


def test_one_payment_of_three_is_delinquent_2(today, past_paydates):
    transactions = [make_transaction(past_paydates[0].date, credit=1000, type_name="ACH")]
    loan = make_loan(paydates=past_paydates, transactions=transactions)

    calc = calculate_status(loan, today)

    assert calc.payments_made == 1
    assert calc.missed_payments == 2
    assert calc.status == "delinquent_2"
    assert calc.explanation == "2 payments missed"


def test_write_off_credit_marks_loan_restructured(today, past_paydates):
    """A restructure-type credit overrides delinquency"""
    transactions = [make_transaction(today - timedelta(days=3), credit=500, type_name="Write-Off")]
    loan = make_loan(paydates=past_paydates, transactions=transactions)

    calc = calculate_status(loan, today)

    assert calc.ledger[0].category == "restructure"
    assert calc.missed_payments == 3
    assert calc.is_restructured is True
    assert calc.restructured_source == "transaction"
    assert calc.status == "restructured"
    assert calc.explanation == "Loan has been restructured"
    # Restructure credits never count as received payments
    assert calc.total_received == 0


def test_restructured_flag_takes_precedence(today, past_paydates):
    """Explicit sheet flag wins even with nothing missed, and the explanation says so"""
    transactions = [make_transaction(p.date, credit=1000) for p in past_paydates]
    loan = make_loan(paydates=past_paydates, transactions=transactions, is_restructured=True)

    calc = calculate_status(loan, today)

    assert calc.missed_payments == 0
    assert calc.status == "restructured"
    assert calc.restructured_source == "flag"
    assert "column BU flag" in calc.explanation


def test_reference_mention_marks_restructured(today):
    """A restructure mention in the reference counts even on a debit"""
    transactions = [make_transaction(today - timedelta(days=1), debit=20, reference="Restructure agreement")]

    calc = calculate_status(make_loan(transactions=transactions), today)

    assert calc.status == "restructured"


def test_today_is_never_expected(today):
    """A paydate on the calculation date is excluded from the expected count"""
    paydates = [
        ScheduledPayment(date=today - timedelta(days=1), amount=1000, source_row=2),
        ScheduledPayment(date=today, amount=1000, source_row=3),
        ScheduledPayment(date=today + timedelta(days=7), amount=1000, source_row=4),
    ]

    calc = calculate_status(make_loan(paydates=paydates), today)

    assert calc.total_expected == 1
    assert [p.date for p in calc.expected_payments] == [today - timedelta(days=1)]
    assert calc.status == "delinquent_1"
    assert calc.explanation == "1 payment missed"


def test_no_schedule_is_current(today):
    calc = calculate_status(make_loan(), today)

    assert calc.total_expected == 0
    assert calc.missed_payments == 0
    assert calc.status == "current"


def test_overpayment_never_goes_negative(today, past_paydates):
    """missed = max(0, expected - made)"""
    transactions = [make_transaction(today - timedelta(days=1), credit=5000)]

    calc = calculate_status(make_loan(paydates=past_paydates, transactions=transactions), today)

    assert calc.payments_made == 5
    assert calc.missed_payments == 0


def test_fees_and_debits_do_not_count_as_payments(today, past_paydates):
    transactions = [
        make_transaction(past_paydates[0].date, credit=1000, type_name="Origination Fee"),
        make_transaction(past_paydates[1].date, debit=1000, type_name="ACH"),
        make_transaction(past_paydates[2].date, credit=1000, type_name="Refund"),
    ]

    calc = calculate_status(make_loan(paydates=past_paydates, transactions=transactions), today)

    assert [e.category for e in calc.ledger] == ["fee", "other", "other"]
    assert calc.ledger[1].amount == -1000
    assert calc.payments_made == 0
    assert calc.status == "delinquent_3"


def test_four_or_more_missed_is_default(today):
    paydates = [
        ScheduledPayment(date=today - timedelta(days=7 * i), amount=1000, source_row=i) for i in range(1, 6)
    ]

    calc = calculate_status(make_loan(paydates=paydates), today)

    assert calc.missed_payments == 5
    assert calc.status == "default"
    assert calc.explanation == "5 payments missed (4+ = default)"


def test_calculation_is_idempotent(today, past_paydates):
    """Same loan and same date give equal audit records"""
    transactions = [
        make_transaction(past_paydates[0].date, credit=999.99),
        make_transaction(past_paydates[1].date, credit=40, type_name="NSF Fees"),
    ]
    loan = make_loan(paydates=past_paydates, transactions=transactions)

    assert calculate_status(loan, today) == calculate_status(loan, today)


def test_unsorted_input_is_sorted_before_calculation(today, past_paydates):
    loan = make_loan(paydates=list(reversed(past_paydates)))

    calc = calculate_status(loan, today)

    assert [p.date for p in calc.expected_payments] == sorted(p.date for p in past_paydates)


@pytest.mark.parametrize(
    "received, installment, expected",
    [
        (3000, 1000, 3),
        (2999.999999, 1000, 3),  # float noise from summing credits
        (1499.99, 1000, 1),
        (1500, 1000, 2),  # halves round up
        (0.1 + 0.2, 0.3, 1),
        (500, 0, 0),  # zero installment guard
    ],
)
def test_count_payments_made(received, installment, expected):
    assert count_payments_made(received, installment) == expected


@pytest.mark.parametrize(
    "missed, restructured, expected",
    [
        (0, False, "current"),
        (1, False, "delinquent_1"),
        (2, False, "delinquent_2"),
        (3, False, "delinquent_3"),
        (4, False, "default"),
        (9, False, "default"),
        (0, True, "restructured"),
        (6, True, "restructured"),
    ],
)
def test_determine_status_table(missed, restructured, expected):
    assert determine_status(missed, restructured) == expected


def test_days_delinquent_counts_from_oldest_missed(today, past_paydates):
    """With 1 of 3 paid, the oldest missed is the second paydate"""
    transactions = [make_transaction(past_paydates[0].date, credit=1000)]
    calc = calculate_status(make_loan(paydates=past_paydates, transactions=transactions), today)

    assert calculate_days_delinquent(calc) == (today - past_paydates[1].date).days


def test_days_delinquent_zero_when_current(today):
    assert calculate_days_delinquent(calculate_status(make_loan(), today)) == 0
