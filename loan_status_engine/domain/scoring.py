"""Risk scoring - bounded heuristic from status, credit score and debt load"""

from loan_status_engine.domain.models import Loan, LoanStatus

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

STATUS_ADJUSTMENTS = {
    LoanStatus.CURRENT: -20,
    LoanStatus.DELINQUENT_1: 10,
    LoanStatus.DELINQUENT_2: 20,
    LoanStatus.DELINQUENT_3: 30,
    LoanStatus.DEFAULT: 40,
    LoanStatus.RESTRUCTURED: 35,
}

# Denominator used when the lead carries no MCA debt
NO_DEBT_DIVISOR = 1.0


def fico_adjustment(fico: int) -> int:
    """
    FICO bands:
    - below 600: +15
    - 600-649:   +5
    - 650-700:   0
    - above 700: -10
    """
    if fico < 600:
        return 15
    elif fico < 650:
        return 5
    elif fico > 700:
        return -10
    return 0


def revenue_to_debt_ratio(avg_monthly_revenue: float, avg_mca_debts: float) -> float:
    """
    Monthly revenue over MCA debts.

    No recorded debt divides by 1, so the ratio is the revenue itself and a lead
    with no banking data at all (0 / 0) reads as thin coverage.
    """
    debts = avg_mca_debts if avg_mca_debts > 0 else NO_DEBT_DIVISOR
    return avg_monthly_revenue / debts


def debt_ratio_adjustment(ratio: float) -> int:
    """Thin coverage (< 2x) adds risk, strong coverage (> 5x) removes it"""
    if ratio < 2:
        return 15
    elif ratio > 5:
        return -10
    return 0


def calculate_risk_score(loan: Loan) -> int:
    """
    Score a loan from 0 (lowest risk) to 100 (highest risk).

    Base 50, then:
    - status: current -20, delinquent_1/2/3 +10/+20/+30, default +40, restructured +35
    - FICO band (see fico_adjustment)
    - revenue-to-debt ratio (see debt_ratio_adjustment)

    Clamped to [0, 100]. Expects a derived loan; an underived one gets no status adjustment.
    """
    score = BASE_SCORE
    score += STATUS_ADJUSTMENTS.get(loan.status, 0)
    score += fico_adjustment(loan.lead.fico)
    score += debt_ratio_adjustment(
        revenue_to_debt_ratio(loan.lead.avg_monthly_revenue, loan.lead.avg_mca_debts)
    )
    return max(MIN_SCORE, min(MAX_SCORE, score))
