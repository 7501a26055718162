import dataclasses
import math

import numpy as np
import pandas as pd

from rentorbuy import Assumptions, RefinancePlan, project_buying
from rentorbuy.buying import monthly_pmi_costs
from rentorbuy.mortgage import amortization_schedule, monthly_payment
from rentorbuy.tax import DeductionBenefit


class FlatTax:
    """Stand-in tax provider: no property or state tax, fixed itemized savings."""

    def marginal_rate(self, income, filing_status):
        return 0.3

    def state_tax(self, income, state):
        return 0.0

    def property_tax(self, home_value, state):
        return 0.0

    def deduction_benefit(self, mortgage_interest, property_tax, state_income_tax, filing_status, marginal_rate,
                          income):
        return DeductionBenefit(
            mortgage_interest=mortgage_interest,
            salt_deduction=0.0,
            salt_cap=0.0,
            total_itemized=mortgage_interest,
            standard_deduction=0.0,
            excess_deduction=mortgage_interest,
            tax_savings=1_000.0,
            should_itemize=True,
        )


def refinanced(scenario, **plan):
    return dataclasses.replace(scenario, refinance=RefinancePlan(enabled=True, **plan))


def test_equity_tracks_value_minus_balance_after_payoff(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, loan_term_years=15, years_to_analyze=20)
    yearly = project_buying(scenario).yearly

    assert len(yearly) == 20
    assert np.allclose(yearly["Equity"], yearly["Home Value"] - yearly["Remaining Mortgage"])
    paid = yearly.iloc[15:]
    assert paid["Paid Off"].all()
    assert (paid["Remaining Mortgage"] == 0).all()
    assert np.allclose(paid["Equity"], paid["Home Value"])
    assert (paid["Interest"] == 0).all()
    assert (paid["Tax Benefit"] == 0).all()
    assert not paid["Itemized"].any()


def test_cost_breakdown_adds_up(arizona_scenario):
    yearly = project_buying(arizona_scenario).yearly
    parts = yearly[["Interest", "Principal", "Property Tax", "PMI", "Insurance", "HOA", "Maintenance",
                    "Utilities", "Refinance Costs"]].sum(axis=1)
    assert np.allclose(parts, yearly["Total Cost Before Tax"])
    assert np.allclose(yearly["Total Cost Before Tax"] - yearly["Tax Benefit"], yearly["Total Cost"])


def test_totals(arizona_scenario):
    projection = project_buying(arizona_scenario)
    yearly = projection.yearly

    assert math.isclose(projection.total_cost, 100_000 + yearly["Total Cost"].sum())
    assert math.isclose(projection.total_tax_savings, yearly["Tax Benefit"].sum())
    assert math.isclose(projection.final_home_value, 500_000 * 1.03 ** 10)
    assert math.isclose(projection.selling_costs, projection.final_home_value * 0.06)
    assert math.isclose(
        projection.net_from_sale,
        projection.total_equity - projection.selling_costs + projection.savings_investment_balance,
    )
    assert projection.refinance is None


def test_savings_balance_never_decreases(arizona_scenario):
    balances = project_buying(arizona_scenario).yearly["Savings Investment Balance"].to_numpy()
    assert (balances >= 0).all()
    assert (np.diff(balances) >= 0).all()


def test_savings_invested_only_when_owning_is_cheaper(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, monthly_rent=8_000)
    yearly = project_buying(scenario).yearly
    expected = (yearly["Rent Comparison"] - yearly["Total Cost"]).clip(lower=0)
    assert np.allclose(yearly["Savings Vs Rent"], expected)
    assert (yearly["Savings Vs Rent"] > 0).all()


def test_selling_costs_excluded(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, include_selling_costs=False)
    assert project_buying(scenario).selling_costs == 0


def test_insurance_defaults_to_share_of_value(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, home_insurance=None)
    yearly = project_buying(scenario).yearly
    assert np.allclose(yearly["Insurance"], yearly["Home Value"] * 0.0035)


def test_zero_insurance_is_respected(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, home_insurance=0)
    assert (project_buying(scenario).yearly["Insurance"] == 0).all()


def test_points_applied_once(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, buying_points=True, num_points=2)
    projection = project_buying(scenario)

    assert math.isclose(projection.points_cost, 8_000)
    assert math.isclose(projection.effective_rate, 0.06)
    assert math.isclose(projection.monthly_payment, monthly_payment(400_000, 0.06, 30))
    assert math.isclose(projection.total_cost, 108_000 + projection.yearly["Total Cost"].sum())


def test_points_ignored_when_not_buying(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, buying_points=False, num_points=2)
    projection = project_buying(scenario)
    assert projection.points_cost == 0
    assert projection.effective_rate == 0.065


def test_extra_payment_reports_months_saved(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, extra_monthly_payment=500)
    projection = project_buying(scenario)

    assert projection.payoff_month < 360
    assert projection.months_saved == 360 - projection.payoff_month
    assert math.isclose(projection.total_monthly_with_extra, projection.monthly_payment + 500)


def test_injected_tax_provider(arizona_scenario):
    yearly = project_buying(arizona_scenario, tax=FlatTax()).yearly
    assert (yearly["Property Tax"] == 0).all()
    assert (yearly["Tax Benefit"] == 1_000).all()
    assert yearly["Itemized"].all()


def test_pmi_charged_with_low_down_payment(low_down_scenario):
    projection = project_buying(low_down_scenario)
    pmi = projection.yearly["PMI"]

    assert pmi.iloc[0] > 0
    assert projection.pmi_dropoff_month is not None
    dropoff_year = math.ceil(projection.pmi_dropoff_month / 12)
    if dropoff_year < len(pmi):
        assert (pmi.iloc[dropoff_year:] == 0).all()


def test_pmi_excluded(low_down_scenario):
    projection = project_buying(dataclasses.replace(low_down_scenario, include_pmi=False))
    assert (projection.yearly["PMI"] == 0).all()
    assert projection.pmi_dropoff_month is None


def test_no_pmi_at_twenty_percent_down(arizona_scenario):
    assert (project_buying(arizona_scenario).yearly["PMI"] == 0).all()


def test_refinance_splices_schedule(arizona_scenario):
    scenario = refinanced(arizona_scenario, year=5, new_rate=0.05, new_term_years=15)
    projection = project_buying(scenario)
    info = projection.refinance

    original = amortization_schedule(400_000, 0.065, 30)
    pd.testing.assert_frame_equal(projection.schedule.iloc[:60], original.iloc[:60])
    assert math.isclose(info.remaining_balance, original["Balance"].iloc[59])
    tail = amortization_schedule(info.remaining_balance, 0.05, 15, loan_type="Refinance")
    assert len(projection.schedule) == 60 + len(tail)
    assert (projection.schedule["Loan Type"].iloc[60:] == "Refinance").all()

    assert info.month == 60
    assert math.isclose(info.new_monthly_payment, monthly_payment(info.remaining_balance, 0.05, 15))
    assert math.isclose(info.monthly_savings, info.old_monthly_payment - info.new_monthly_payment)
    assert projection.current_monthly_payment == info.new_monthly_payment


def test_refinance_costs_land_in_refinance_year(arizona_scenario):
    scenario = refinanced(arizona_scenario, year=5, new_rate=0.05, new_points=1)
    projection = project_buying(scenario)
    info = projection.refinance
    yearly = projection.yearly

    assert math.isclose(info.points_cost, info.remaining_balance * 0.01)
    assert math.isclose(info.closing_costs, info.remaining_balance * 0.02)
    assert math.isclose(info.new_rate, 0.0475)
    assert math.isclose(yearly.loc[4, "Refinance Costs"], info.total_cost)
    assert (yearly.drop(index=4)["Refinance Costs"] == 0).all()
    assert yearly["Refinanced"].tolist() == [year == 5 for year in range(1, 11)]


def test_refinance_custom_closing_cost_rate(arizona_scenario):
    scenario = refinanced(arizona_scenario, year=3, closing_cost_rate=0.0)
    assert project_buying(scenario).refinance.closing_costs == 0


def test_refinance_ignored_outside_term(arizona_scenario):
    for year in (0, 30, 35):
        scenario = refinanced(arizona_scenario, year=year)
        projection = project_buying(scenario)
        assert projection.refinance is None
        assert len(projection.schedule) == 360
        assert (projection.yearly["Refinance Costs"] == 0).all()


def test_refinance_ignored_when_loan_already_repaid(arizona_scenario):
    scenario = refinanced(dataclasses.replace(arizona_scenario, extra_monthly_payment=20_000), year=5)
    projection = project_buying(scenario)
    assert projection.refinance is None
    assert projection.payoff_month < 60


def test_refinance_disabled_by_default(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, refinance=RefinancePlan(year=5))
    assert project_buying(scenario).refinance is None


def test_pmi_resumes_after_refinance_above_limit(low_down_scenario):
    scenario = refinanced(dataclasses.replace(low_down_scenario, down_payment=25_000), year=2, new_rate=0.055)
    projection = project_buying(scenario)

    assert projection.refinance.pmi_resumes
    assert projection.refinance.loan_to_value > 0.8
    assert projection.yearly.loc[2, "PMI"] > 0


def test_pmi_ends_at_refinance_below_limit(low_down_scenario):
    scenario = dataclasses.replace(
        low_down_scenario,
        home_appreciation_rate=0.10,
        assumptions=Assumptions(pmi_ltv_basis="purchase"),
    )
    projection = project_buying(refinanced(scenario, year=5, new_rate=0.055))
    pmi = projection.yearly["PMI"]

    assert not projection.refinance.pmi_resumes
    assert projection.pmi_dropoff_month == 61
    assert pmi.iloc[4] > 0
    assert (pmi.iloc[5:] == 0).all()


def test_pmi_dropoff_earlier_with_appreciation(low_down_scenario):
    scenario = dataclasses.replace(low_down_scenario, down_payment=25_000, years_to_analyze=15)
    flat = project_buying(scenario)
    appreciating_scenario = dataclasses.replace(scenario, home_appreciation_rate=0.04)
    appreciating = project_buying(appreciating_scenario)

    assert appreciating.pmi_dropoff_month < flat.pmi_dropoff_month

    costs, dropoff = monthly_pmi_costs(appreciating_scenario, appreciating.schedule)
    months = appreciating.schedule["Month"]
    assert dropoff == appreciating.pmi_dropoff_month
    assert (costs[months < dropoff] > 0).all()
    assert (costs[months >= dropoff] == 0).all()


def test_pmi_dropoff_after_refinance_uses_appreciated_value(low_down_scenario):
    scenario = refinanced(dataclasses.replace(low_down_scenario, down_payment=25_000, years_to_analyze=15),
                          year=2, new_rate=0.055)
    flat = project_buying(scenario)
    appreciating_scenario = dataclasses.replace(scenario, home_appreciation_rate=0.04)
    appreciating = project_buying(appreciating_scenario)
    refinance = appreciating.refinance

    assert flat.refinance.pmi_resumes
    assert refinance.pmi_resumes
    assert refinance.month < appreciating.pmi_dropoff_month < flat.pmi_dropoff_month

    costs, dropoff = monthly_pmi_costs(appreciating_scenario, appreciating.schedule, refinance)
    months = appreciating.schedule["Month"]
    assert (costs[(months > refinance.month) & (months < dropoff)] > 0).all()
    assert (costs[months >= dropoff] == 0).all()


def test_first_year_tax_details(arizona_scenario):
    projection = project_buying(arizona_scenario)
    deduction = projection.first_year_deduction
    first = projection.yearly.iloc[0]

    assert projection.marginal_rate == 0.22
    assert math.isclose(projection.state_income_tax, 5_000)
    assert math.isclose(deduction.mortgage_interest, first["Interest"])
    assert math.isclose(deduction.salt_deduction, first["Property Tax"] + 5_000)
    assert deduction.salt_cap == 40_000
    assert deduction.standard_deduction == 29_200
    assert deduction.should_itemize
    assert math.isclose(deduction.tax_savings, first["Tax Benefit"])


def test_first_year_monthly_costs(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, extra_monthly_payment=100, monthly_utilities=150)
    projection = project_buying(scenario)
    monthly = projection.first_year_monthly
    first = projection.yearly.iloc[0]

    assert math.isclose(monthly.principal_interest, projection.monthly_payment)
    assert math.isclose(monthly.property_tax * 12, first["Property Tax"])
    assert math.isclose(monthly.insurance, 1_750 / 12)
    assert monthly.hoa == 250
    assert monthly.pmi == 0
    assert math.isclose(monthly.total, projection.monthly_payment + (first["Property Tax"] + 1_750) / 12 + 250 + 150)
    assert math.isclose(monthly.total_with_extra, monthly.total + 100)
    assert math.isclose(monthly.net, monthly.total_with_extra + first["Maintenance"] / 12 - first["Tax Benefit"] / 12)


def test_no_deduction_without_a_loan(arizona_scenario):
    projection = project_buying(dataclasses.replace(arizona_scenario, down_payment=500_000))
    assert projection.first_year_deduction is None
    assert projection.first_year_monthly.principal_interest == 0
    assert (projection.yearly["Tax Benefit"] == 0).all()
