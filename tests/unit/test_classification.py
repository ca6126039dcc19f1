"""Unit tests for transaction classification"""

from datetime import date

import pytest

from conftest import make_transaction
from loan_status_engine.domain.classification import (
    categorize_type_name,
    classify_transaction,
    references_restructure,
)
from loan_status_engine.domain.vocabulary import DEFAULT_VOCABULARY, TransactionVocabulary

DAY = date(2024, 1, 10)


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("ACH", "payment"),
        ("ach", "payment"),
        ("Credit Card Payment Received", "payment"),
        ("Dedicated - Recovered Collections", "payment"),
        ("Internal Transfer", "payment"),  # any "transfer" name matches the transfer entries
        ("Write-Off", "restructure"),
        ("Settlement Discount", "restructure"),
        ("Partial settlement", "restructure"),
        ("Restructure Penalty", "restructure"),  # restructure vocabulary is checked before fees
        ("Origination Fee Collection", "fee"),
        ("NSF Fees", "fee"),
        ("Accrued Interest", "fee"),
        ("Legal Fee - Filing", "fee"),
        ("Late Payment", "payment"),  # keyword fallback
        ("Manual Collection", "payment"),
        ("Fee Collection", "other"),  # collection excluded by "fee"
        ("Refund", "other"),
        ("", "other"),
    ],
)
def test_categorize_type_name(type_name, expected):
    assert categorize_type_name(type_name) == expected


def test_classify_credit_uses_credited_amount():
    entry = classify_transaction(make_transaction(DAY, credit=1000, type_name="Successful Payment"))

    assert entry.category == "payment"
    assert entry.amount == 1000
    assert entry.date == DAY


def test_classify_debit_only_is_other_with_negative_amount():
    """Debits are never classified, even with a payment type name"""
    entry = classify_transaction(make_transaction(DAY, debit=250, type_name="ACH"))

    assert entry.category == "other"
    assert entry.amount == -250


def test_classify_missing_type_name_reported_as_unknown():
    entry = classify_transaction(make_transaction(DAY, credit=10, type_name=""))

    assert entry.type_name == "Unknown"
    assert entry.category == "other"


def test_references_restructure_is_case_insensitive_substring():
    assert references_restructure(make_transaction(DAY, reference="Loan RESTRUCTURED per agreement"))
    assert references_restructure(make_transaction(DAY, reference="restructuring plan #4"))
    assert not references_restructure(make_transaction(DAY, reference="Weekly debit"))


def test_custom_vocabulary_extends_matching():
    """Vocabulary tables are data: a new payment name needs no engine change"""
    vocabulary = TransactionVocabulary(
        version="test",
        restructure_types=DEFAULT_VOCABULARY.restructure_types,
        payment_types=DEFAULT_VOCABULARY.payment_types + ("Lockbox Receipt",),
        fee_types=DEFAULT_VOCABULARY.fee_types,
    )

    assert categorize_type_name("Lockbox Receipt") == "other"
    assert categorize_type_name("lockbox receipt", vocabulary) == "payment"
