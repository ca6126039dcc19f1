"""Domain models - pure Python dataclasses representing loan portfolio entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

# One spreadsheet row, positional in the fixed column layout
RawRow = Sequence[Any]


class LoanStatus:
    """Performance status codes"""

    CURRENT = "current"
    DELINQUENT_1 = "delinquent_1"
    DELINQUENT_2 = "delinquent_2"
    DELINQUENT_3 = "delinquent_3"
    DEFAULT = "default"
    RESTRUCTURED = "restructured"

    ALL = (CURRENT, DELINQUENT_1, DELINQUENT_2, DELINQUENT_3, DEFAULT, RESTRUCTURED)


class TransactionCategory:
    """Transaction categories assigned by the classifier"""

    PAYMENT = "payment"
    FEE = "fee"
    RESTRUCTURE = "restructure"
    OTHER = "other"


class MatchStatus:
    """Outcome of pairing a scheduled payment with a transaction"""

    MATCHED = "matched"
    MISSED = "missed"
    FUTURE = "future"
    EXTRA = "extra"


@dataclass
class ScheduledPayment:
    """Expected installment (paydate) from the schedule sub-table"""

    date: date
    amount: float
    source_row: int


@dataclass
class Transaction:
    """Ledger entry from the transaction sub-table"""

    date: date
    reference: str
    type_id: Any
    type_name: str
    debit: float
    credit: float
    balance: float
    source_row: int


@dataclass
class Client:
    """Borrowing business"""

    id: Optional[str] = None
    name: str = "Unknown"
    industry_sector: str = "Unknown"
    industry_subsector: str = "General"
    date_founded: Optional[date] = None
    address_line1: str = ""
    address_line2: str = ""
    address_line3: str = ""
    city: str = "Unknown"
    state: str = "Unknown"
    country: str = "United States"
    zip_code: str = ""
    email: str = ""
    primary_no: str = ""


@dataclass
class Lead:
    """Underwriting snapshot: credit score and banking-behavior aggregates"""

    id: Optional[str] = None
    fico: int = 650
    avg_monthly_revenue: float = 0.0
    avg_revenue: float = 0.0
    avg_mca_debts: float = 0.0
    avg_daily_balance: float = 0.0
    avg_nsfs: float = 0.0
    avg_negative_days: float = 0.0
    avg_num_deposits: float = 0.0
    avg_num_credits: float = 0.0
    avg_deposits: float = 0.0
    avg_credits: float = 0.0
    created_on: Optional[date] = None
    closed_date: Optional[date] = None
    sell_rate: float = 0.0
    underwriter: Optional[str] = None
    salesperson: Optional[str] = None
    pod_leader: Optional[str] = None


@dataclass
class ActualPayment:
    """Credit counted toward installments"""

    date: date
    amount: float
    type_name: str


@dataclass
class CategorizedTransaction:
    """Ledger line with its assigned category and signed amount"""

    date: date
    amount: float  # credit, or -debit for debit-only rows
    type_name: str
    category: str


@dataclass
class StatusCalculation:
    """Audit trail of a status derivation"""

    as_of: date
    expected_payments: List[ScheduledPayment] = field(default_factory=list)
    actual_payments: List[ActualPayment] = field(default_factory=list)
    ledger: List[CategorizedTransaction] = field(default_factory=list)
    total_expected: int = 0
    total_received: float = 0.0
    payments_made: int = 0
    missed_payments: int = 0
    is_restructured: bool = False
    restructured_source: Optional[str] = None  # "flag" | "transaction"
    status: str = LoanStatus.CURRENT
    explanation: str = ""


@dataclass
class CatchUpPayment:
    """Single credit covering more than one installment"""

    date: date
    amount: float
    payments_cleared: int
    source_row: int
    type_name: str


@dataclass
class PaymentMatch:
    """Pairing of a scheduled payment with a transaction"""

    scheduled_payment: Optional[ScheduledPayment]
    transaction: Optional[Transaction]
    status: str
    variance: float


@dataclass
class Loan:
    """Aggregate root: one loan reconstructed from its header and continuation rows"""

    row_number: int
    external_id: str
    loan_number: str
    active: bool = False
    amount_sold: float = 0.0
    contract_balance: float = 0.0
    days_overdue: int = 0
    days_overdue_mpf: int = 0
    loan_amount: float = 0.0
    loan_term: int = 0
    payout_date: Optional[date] = None
    progress: float = 0.0
    remaining_amount: float = 0.0
    state: str = "Unknown"
    payment_frequency: str = "Weekly"
    installment_amount: float = 1000.0
    last_installment_amount: float = 0.0
    contract_interest: float = 0.0
    origination_fee: float = 0.0
    first_payment_date: Optional[date] = None
    end_date: Optional[date] = None
    compound_date: Optional[date] = None
    contract_date: Optional[date] = None
    days_overdue_on_write_off: int = 0
    amount_overdue_on_write_off: float = 0.0
    amount_overdue: float = 0.0
    client: Client = field(default_factory=Client)
    lead: Lead = field(default_factory=Lead)
    is_restructured: bool = False
    paydates: List[ScheduledPayment] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)

    # Derived by the engine
    status: Optional[str] = None
    status_calculation: Optional[StatusCalculation] = None
    missed_payments: Optional[int] = None
    catch_up_payments: Optional[List[CatchUpPayment]] = None
    payment_matching: Optional[List[PaymentMatch]] = None
    risk_score: Optional[int] = None


@dataclass
class PortfolioSummary:
    """Counts describing one ETL run"""

    total_loans: int
    loans_with_transactions: int
    loans_with_paydates: int
    restructured_loans: int
    active_loans: int
    average_transactions_per_loan: float
    average_paydates_per_loan: float
    status_counts: Dict[str, int]
    orphan_rows: List[int]
