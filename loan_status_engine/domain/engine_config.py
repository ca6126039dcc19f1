"""Immutable configuration passed explicitly into the ETL functions"""

from dataclasses import dataclass, field

from loan_status_engine.domain.columns import DEFAULT_COLUMNS, ColumnMap
from loan_status_engine.domain.vocabulary import DEFAULT_VOCABULARY, TransactionVocabulary

ORPHAN_ROWS_SKIP = "skip"
ORPHAN_ROWS_RAISE = "raise"


@dataclass(frozen=True)
class EngineConfig:
    """Column layout, vocabulary tables and tunable thresholds for one ETL run"""

    columns: ColumnMap = field(default_factory=lambda: DEFAULT_COLUMNS)
    vocabulary: TransactionVocabulary = field(default_factory=lambda: DEFAULT_VOCABULARY)

    # Payment matching window; pending confirmation from collections
    match_window_days: int = 7
    match_amount_tolerance: float = 0.10

    catch_up_multiplier: float = 1.5

    # Substituted when the sheet leaves the cell blank or zero
    default_installment_amount: float = 1000.0
    default_fico: int = 650

    # What to do with a continuation row that appears before any loan header
    orphan_row_policy: str = ORPHAN_ROWS_SKIP

    def __post_init__(self):
        if self.orphan_row_policy not in (ORPHAN_ROWS_SKIP, ORPHAN_ROWS_RAISE):
            raise ValueError(f"Unknown orphan_row_policy: {self.orphan_row_policy!r}")
        if self.match_window_days < 0:
            raise ValueError("match_window_days must be >= 0")
        if self.match_amount_tolerance <= 0:
            raise ValueError("match_amount_tolerance must be > 0")


DEFAULT_ENGINE_CONFIG = EngineConfig()
