import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy_financial as npf
import pandas as pd

from .config import Assumptions

logger = logging.getLogger(__name__)

_DEFAULTS = Assumptions()

SCHEDULE_COLUMNS = [
    "Month", "Payment", "Principal", "Interest", "Extra Principal Payments",
    "Cumulative Interest", "Cumulative Principal", "Balance", "Loan Type", "Rate",
]
ANNUAL_COLUMNS = ["Year", "Interest", "Principal", "Total Payment", "Ending Balance", "Paid Off"]


@dataclass(frozen=True)
class PointsEffect:
    points_cost: float
    adjusted_rate: float
    rate_reduction: float


def monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """
    Standard fixed-rate amortization payment:
      M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    where r = annual_rate/12, n = years*12.
    """
    n = years * 12
    r = annual_rate / 12
    if r == 0:
        return principal / n
    return float(npf.pmt(r, n, -principal))


def monthly_pmi(loan_amount: float, home_value: float, included: bool, pmi_rate: float = _DEFAULTS.pmi_rate,
                ltv_limit: float = _DEFAULTS.pmi_ltv_limit) -> float:
    if not included or home_value <= 0:
        return 0.0
    if loan_amount / home_value <= ltv_limit:
        return 0.0
    return loan_amount * pmi_rate / 12


def points_effect(loan_amount: float, base_rate: float, num_points: float,
                  point_cost_rate: float = _DEFAULTS.point_cost_rate,
                  point_rate_reduction: float = _DEFAULTS.point_rate_reduction) -> PointsEffect:
    reduction = point_rate_reduction * num_points
    return PointsEffect(
        points_cost=loan_amount * point_cost_rate * num_points,
        adjusted_rate=max(0.0, base_rate - reduction),
        rate_reduction=reduction,
    )


def amortization_schedule(
    principal: float,
    annual_rate: float,
    years: int,
    extra_monthly_payment: float = 0.0,
    payoff_epsilon: float = _DEFAULTS.payoff_epsilon,
    loan_type: str = "Original",
) -> pd.DataFrame:
    """
    Month-by-month schedule with an optional fixed extra principal payment.

    The principal portion never exceeds the remaining balance. Generation
    stops once the balance is within ``payoff_epsilon`` of zero, or after
    twice the loan term in months when the inputs do not converge.
    """
    r = annual_rate / 12
    base_payment = monthly_payment(principal, annual_rate, years)
    max_months = years * 12 * 2

    rows = []
    bal = principal
    total_interest = 0.0
    total_principal = 0.0
    month = 0

    while bal > payoff_epsilon:
        month += 1
        interest = bal * r
        scheduled_principal = base_payment - interest
        principal_paid = min(scheduled_principal + extra_monthly_payment, bal)
        extra = max(0.0, principal_paid - scheduled_principal) if extra_monthly_payment > 0 else 0.0

        total_interest += interest
        total_principal += principal_paid
        bal -= principal_paid

        rows.append({
            "Month": month,
            "Payment": interest + principal_paid,
            "Principal": principal_paid,
            "Interest": interest,
            "Extra Principal Payments": extra,
            "Cumulative Interest": total_interest,
            "Cumulative Principal": total_principal,
            "Balance": max(0.0, bal),
            "Loan Type": loan_type,
            "Rate": annual_rate,
        })

        if month >= max_months:
            if bal > payoff_epsilon:
                logger.warning(
                    "Amortization truncated at %d months with %.2f outstanding (rate=%.4f, term=%d)",
                    month, bal, annual_rate, years,
                )
            break

    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def splice_schedules(before: pd.DataFrame, after: pd.DataFrame) -> pd.DataFrame:
    """Append ``after`` to ``before`` as one continuous schedule."""
    after = after.copy()
    if not before.empty:
        last = before.iloc[-1]
        after["Month"] += int(last["Month"])
        after["Cumulative Interest"] += last["Cumulative Interest"]
        after["Cumulative Principal"] += last["Cumulative Principal"]
    return pd.concat([before, after], ignore_index=True)


def annual_summary(schedule: pd.DataFrame, max_years: int = 30,
                   payoff_epsilon: float = _DEFAULTS.payoff_epsilon) -> tuple[pd.DataFrame, int, int]:
    total_months = len(schedule)
    payoff_month = total_months
    payoff_year = math.ceil(payoff_month / 12)

    rows = []
    for year in range(1, max_years + 1):
        start = (year - 1) * 12
        end = min(year * 12, total_months)

        if start >= total_months:
            rows.append({"Year": year, "Interest": 0.0, "Principal": 0.0, "Total Payment": 0.0,
                         "Ending Balance": 0.0, "Paid Off": True})
            continue

        year_payments = schedule.iloc[start:end]
        interest = float(year_payments["Interest"].sum())
        principal = float(year_payments["Principal"].sum())
        end_balance = float(year_payments["Balance"].iloc[-1])

        rows.append({
            "Year": year,
            "Interest": interest,
            "Principal": principal,
            "Total Payment": interest + principal,
            "Ending Balance": end_balance,
            "Paid Off": end_balance <= payoff_epsilon,
        })

    return pd.DataFrame(rows, columns=ANNUAL_COLUMNS), payoff_month, payoff_year


def pmi_dropoff_month(schedule: pd.DataFrame, home_value: float, ltv_limit: float = _DEFAULTS.pmi_ltv_limit,
                      appreciation_rate: float = 0.0) -> Optional[int]:
    """
    First month whose ending balance is at or below ``ltv_limit`` of the
    home value. With an appreciation rate the value compounds monthly
    from ``home_value`` at month 0.
    """
    if schedule.empty:
        return None
    months = schedule["Month"]
    target = ltv_limit * home_value * (1 + appreciation_rate) ** (months / 12)
    reached = schedule.loc[schedule["Balance"] <= target, "Month"]
    if reached.empty:
        return None
    return int(reached.iloc[0])
