"""Unit tests for payment matching and catch-up detection"""

from datetime import date, timedelta

from conftest import make_loan, make_transaction
from loan_status_engine.domain.matching import detect_catch_up_payments, match_payments_to_schedule
from loan_status_engine.domain.models import ScheduledPayment

DAY_10 = date(2024, 5, 10)
TODAY = date(2024, 6, 15)


def _paydate(day: date, amount: float = 1000.0) -> ScheduledPayment:
    return ScheduledPayment(date=day, amount=amount, source_row=2)


def test_match_within_window_and_tolerance():
    """1000 due on day 10, 950 received on day 12 -> matched with -50 variance"""
    transaction = make_transaction(DAY_10 + timedelta(days=2), credit=950)
    loan = make_loan(paydates=[_paydate(DAY_10)], transactions=[transaction])

    matches = match_payments_to_schedule(loan, TODAY)

    assert len(matches) == 1
    assert matches[0].status == "matched"
    assert matches[0].transaction == transaction
    assert matches[0].variance == -50


def test_no_match_outside_window():
    """8 days away is outside the 7-day window: missed paydate plus extra credit"""
    transaction = make_transaction(DAY_10 + timedelta(days=8), credit=1000)
    loan = make_loan(paydates=[_paydate(DAY_10)], transactions=[transaction])

    matches = match_payments_to_schedule(loan, TODAY)

    assert [m.status for m in matches] == ["missed", "extra"]
    assert matches[0].variance == -1000
    assert matches[1].scheduled_payment is None
    assert matches[1].variance == 1000


def test_no_match_outside_amount_tolerance():
    """Exactly 10% off does not qualify"""
    loan = make_loan(
        paydates=[_paydate(DAY_10)],
        transactions=[make_transaction(DAY_10, credit=900)],
    )

    matches = match_payments_to_schedule(loan, TODAY)

    assert [m.status for m in matches] == ["missed", "extra"]


def test_closest_transaction_wins_and_is_claimed_once():
    near = make_transaction(DAY_10 + timedelta(days=1), credit=1000, source_row=4)
    far = make_transaction(DAY_10 - timedelta(days=5), credit=1000, source_row=3)
    loan = make_loan(
        paydates=[_paydate(DAY_10), _paydate(DAY_10 + timedelta(days=3))],
        transactions=[far, near],
    )

    matches = match_payments_to_schedule(loan, TODAY)

    assert matches[0].transaction == near
    # The second paydate cannot reuse `near`; `far` is 8 days away
    assert matches[1].status == "missed"
    assert matches[2].status == "extra"
    assert matches[2].transaction == far


def test_future_paydates_and_today_are_future():
    loan = make_loan(paydates=[_paydate(TODAY), _paydate(TODAY + timedelta(days=7))])

    matches = match_payments_to_schedule(loan, TODAY)

    assert [m.status for m in matches] == ["future", "future"]


def test_debits_are_not_matched():
    loan = make_loan(
        paydates=[_paydate(DAY_10)],
        transactions=[make_transaction(DAY_10, debit=1000)],
    )

    matches = match_payments_to_schedule(loan, TODAY)

    assert [m.status for m in matches] == ["missed"]


def test_zero_scheduled_amount_never_matches():
    loan = make_loan(
        paydates=[_paydate(DAY_10, amount=0)],
        transactions=[make_transaction(DAY_10, credit=100)],
    )

    matches = match_payments_to_schedule(loan, TODAY)

    assert [m.status for m in matches] == ["missed", "extra"]


def test_configurable_window_and_tolerance():
    loan = make_loan(
        paydates=[_paydate(DAY_10)],
        transactions=[make_transaction(DAY_10 + timedelta(days=10), credit=850)],
    )

    matches = match_payments_to_schedule(loan, TODAY, window_days=14, amount_tolerance=0.2)

    assert matches[0].status == "matched"
    assert matches[0].variance == -150


def test_detect_catch_up_payments():
    """A 3000 payment against a 1000 installment clears three installments"""
    loan = make_loan(
        transactions=[
            make_transaction(DAY_10, credit=1000),
            make_transaction(DAY_10 + timedelta(days=7), credit=3000, source_row=5),
            make_transaction(DAY_10 + timedelta(days=8), credit=5000, type_name="Settlement"),
        ]
    )

    catch_ups = detect_catch_up_payments(loan)

    assert len(catch_ups) == 1
    assert catch_ups[0].amount == 3000
    assert catch_ups[0].payments_cleared == 3
    assert catch_ups[0].source_row == 5


def test_catch_up_threshold_is_strict():
    loan = make_loan(transactions=[make_transaction(DAY_10, credit=1500)])

    assert detect_catch_up_payments(loan) == []


def test_catch_up_without_installment_amount():
    loan = make_loan(transactions=[make_transaction(DAY_10, credit=1500)], installment_amount=0)

    assert detect_catch_up_payments(loan) == []
