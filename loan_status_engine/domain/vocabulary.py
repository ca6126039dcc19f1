"""Transaction type-name vocabularies used to classify ledger entries.

The loan servicing system records transaction types as free text. These tables
are the only place the engine learns which names mean a payment, a fee or a
restructure event. Bump ``version`` whenever an entry is added or removed so
that stored status calculations can be traced to the table that produced them.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TransactionVocabulary:
    """Lookup tables for the transaction classifier (all matching is case-insensitive)"""

    version: str
    # Substring match, checked first
    restructure_types: Tuple[str, ...]
    # Exact match, or both sides mention "transfer"
    payment_types: Tuple[str, ...]
    # Substring match
    fee_types: Tuple[str, ...]
    # Fallback: names containing any of these count as payments...
    payment_keywords: Tuple[str, ...] = ("payment",)
    # ...as do names containing this keyword, unless an exclusion also appears
    collection_keyword: str = "collection"
    collection_exclusions: Tuple[str, ...] = ("fee", "origination", "initiation")
    transfer_keyword: str = "transfer"
    # Substring of the free-text reference that marks the loan restructured
    restructure_reference_marker: str = "restructur"


DEFAULT_VOCABULARY = TransactionVocabulary(
    version="2024.1",
    restructure_types=(
        "Settlement",
        "Settlement - Renewal",
        "Settlement Discount",
        "Write-Off",
        "Restructure Penalty",
        "Discount Adjustment",
    ),
    payment_types=(
        "ACH",
        "Credit Card Payment Received",
        "Credit Card",
        "Debit Card",
        "Successful Payment",
        "Down Payment",
        "Wire Transfer",
        "Transfer to/from Advance",
        "Dedicated - Recovered Collections",
        "Check Deposit",
        "Account Credit",
        "Kalamata Credit",
        "Repay Manual Debit",
    ),
    fee_types=(
        "Origination Fee Collection",
        "Initiation Collection",
        "Merchant Fee Collection",
        "Stamp Tax Fee",
        "Accrued Interest",
        "NSF Fees",
        "Legal Fees",
        "Legal Fee",
        "Merchant Fee",
        "Origination Fee",
        "Initiation",
        "Restructure Penalty",
    ),
)
