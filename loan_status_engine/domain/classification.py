"""Transaction classification by free-text type name"""

from loan_status_engine.domain.models import CategorizedTransaction, Transaction, TransactionCategory
from loan_status_engine.domain.vocabulary import DEFAULT_VOCABULARY, TransactionVocabulary


def _contains_any(name: str, entries) -> bool:
    return any(entry.lower() in name for entry in entries)


def _is_listed_payment(name: str, vocabulary: TransactionVocabulary) -> bool:
    transfer = vocabulary.transfer_keyword
    return any(
        name == entry.lower() or (transfer in entry.lower() and transfer in name)
        for entry in vocabulary.payment_types
    )


def _is_keyword_payment(name: str, vocabulary: TransactionVocabulary) -> bool:
    if _contains_any(name, vocabulary.payment_keywords):
        return True
    return vocabulary.collection_keyword in name and not _contains_any(
        name, vocabulary.collection_exclusions
    )


def categorize_type_name(type_name: str, vocabulary: TransactionVocabulary = DEFAULT_VOCABULARY) -> str:
    """
    Category for a credited transaction's type name.

    Order (first match wins):
    1. restructure vocabulary, substring
    2. payment vocabulary, exact (or both mention "transfer")
    3. fee vocabulary, substring
    4. keyword fallback: "payment", or "collection" without fee words -> payment
    5. other
    """
    name = (type_name or "").lower()

    if _contains_any(name, vocabulary.restructure_types):
        return TransactionCategory.RESTRUCTURE
    if _is_listed_payment(name, vocabulary):
        return TransactionCategory.PAYMENT
    if _contains_any(name, vocabulary.fee_types):
        return TransactionCategory.FEE
    if _is_keyword_payment(name, vocabulary):
        return TransactionCategory.PAYMENT
    return TransactionCategory.OTHER


def classify_transaction(
    transaction: Transaction,
    vocabulary: TransactionVocabulary = DEFAULT_VOCABULARY,
) -> CategorizedTransaction:
    """Categorize one ledger entry; only credits are classified, debits are 'other'"""
    if transaction.credit > 0:
        category = categorize_type_name(transaction.type_name, vocabulary)
        amount = transaction.credit
    else:
        category = TransactionCategory.OTHER
        amount = -transaction.debit if transaction.debit else 0.0

    return CategorizedTransaction(
        date=transaction.date,
        amount=amount,
        type_name=transaction.type_name or "Unknown",
        category=category,
    )


def references_restructure(
    transaction: Transaction,
    vocabulary: TransactionVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """True when the free-text reference mentions a restructure"""
    return vocabulary.restructure_reference_marker in (transaction.reference or "").lower()
