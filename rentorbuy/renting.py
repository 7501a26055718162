import logging
from typing import Optional

import pandas as pd

from .models import RentProjection, Scenario

logger = logging.getLogger(__name__)

YEARLY_COLUMNS = [
    "Year", "Rent", "Renters Insurance", "Utilities", "Total Cost", "Cumulative Rent",
    "Savings Vs Buying", "Investment Start Balance", "Investment End Balance", "Investment Growth",
]


def project_renting(scenario: Scenario, buy_yearly: pd.DataFrame,
                   initial_investment: Optional[float] = None) -> RentProjection:
    """
    Renting track: rent paid each year and the portfolio built from the
    capital a buyer would have tied up in the house.

    ``buy_yearly`` is the yearly breakdown of the buying projection for
    the same scenario. Every year in which owning costs more than renting,
    the difference is invested after a year of growth.
    """
    years = scenario.years_to_analyze
    if len(buy_yearly) < years:
        raise ValueError(f"Buying breakdown covers {len(buy_yearly)} years, renting needs {years}")
    if initial_investment is None:
        initial_investment = scenario.down_payment

    renters_insurance = scenario.assumptions.renters_insurance
    utilities = scenario.monthly_utilities * 12
    investment_return = scenario.investment_return
    buy_costs = buy_yearly["Total Cost"].to_numpy()

    rows = []
    total_rent = 0.0
    balance = initial_investment

    for year in range(1, years + 1):
        rent = scenario.monthly_rent * 12 * (1 + scenario.annual_rent_increase) ** (year - 1)
        cost = rent + renters_insurance + utilities
        total_rent += cost

        start_balance = balance
        balance *= 1 + investment_return
        savings = max(0.0, float(buy_costs[year - 1]) - cost)
        balance += savings

        rows.append({
            "Year": year,
            "Rent": rent,
            "Renters Insurance": renters_insurance,
            "Utilities": utilities,
            "Total Cost": cost,
            "Cumulative Rent": total_rent,
            "Savings Vs Buying": savings,
            "Investment Start Balance": start_balance,
            "Investment End Balance": balance,
            "Investment Growth": balance - start_balance - savings,
        })

    logger.debug("Renting: %.2f paid, portfolio %.2f -> %.2f", total_rent, initial_investment, balance)
    return RentProjection(
        yearly=pd.DataFrame(rows, columns=YEARLY_COLUMNS),
        total_rent_paid=total_rent,
        initial_investment=initial_investment,
        final_investment_balance=balance,
    )
