import logging
import math
from typing import Optional

import pandas as pd

from .models import BuyProjection, MonthlyCosts, RefinanceInfo, Scenario
from .mortgage import (
    amortization_schedule,
    annual_summary,
    monthly_payment,
    pmi_dropoff_month,
    points_effect,
    splice_schedules,
)
from .tax import TaxCalculator, TaxProvider

logger = logging.getLogger(__name__)

YEARLY_COLUMNS = [
    "Year", "Mortgage Payment", "Interest", "Principal", "Property Tax", "PMI", "Insurance", "HOA",
    "Maintenance", "Utilities", "Refinance Costs", "Refinanced", "Tax Benefit", "Itemized",
    "Total Cost Before Tax", "Total Cost", "Cumulative Cost", "Home Value", "Remaining Mortgage",
    "Equity", "Paid Off", "Rent Comparison", "Savings Vs Rent", "Savings Investment Balance",
]


def apply_refinance(scenario: Scenario, schedule: pd.DataFrame, old_rate: float, old_payment: float):
    """
    Replace the tail of ``schedule`` with a new loan taken out at the end
    of the refinance year.

    Returns the (possibly spliced) schedule and a RefinanceInfo, or the
    original schedule and None when the plan does not apply: refinancing
    disabled, a refinance year outside the original term, or a loan
    already repaid by then.
    """
    plan = scenario.refinance
    assumptions = scenario.assumptions
    if not plan.enabled:
        return schedule, None
    if not 0 < plan.year < scenario.loan_term_years:
        logger.debug("Refinance year %s outside the %s-year term, ignoring", plan.year, scenario.loan_term_years)
        return schedule, None

    refi_month = plan.year * 12
    if len(schedule) <= refi_month:
        logger.debug("Loan repaid in month %d, before refinance month %d", len(schedule), refi_month)
        return schedule, None

    before = schedule.iloc[:refi_month]
    balance = float(before["Balance"].iloc[-1])

    new_rate = plan.new_rate
    points_cost = 0.0
    if plan.new_points > 0:
        effect = points_effect(balance, plan.new_rate, plan.new_points,
                               assumptions.point_cost_rate, assumptions.point_rate_reduction)
        new_rate = effect.adjusted_rate
        points_cost = effect.points_cost

    closing_cost_rate = plan.closing_cost_rate
    if closing_cost_rate is None:
        closing_cost_rate = assumptions.refinance_closing_cost_rate

    after = amortization_schedule(balance, new_rate, plan.new_term_years, scenario.extra_monthly_payment,
                                  assumptions.payoff_epsilon, loan_type="Refinance")
    new_payment = monthly_payment(balance, new_rate, plan.new_term_years)

    home_value = scenario.home_value(plan.year)
    ltv = balance / home_value if home_value > 0 else math.inf

    info = RefinanceInfo(
        year=plan.year,
        month=refi_month,
        remaining_balance=balance,
        home_value=home_value,
        loan_to_value=ltv,
        pmi_resumes=scenario.include_pmi and ltv > assumptions.pmi_ltv_limit,
        old_rate=old_rate,
        new_rate=new_rate,
        old_monthly_payment=old_payment,
        new_monthly_payment=new_payment,
        monthly_savings=old_payment - new_payment,
        points_cost=points_cost,
        closing_costs=balance * closing_cost_rate,
    )
    logger.debug("Refinanced %.2f at %.4f in month %d (LTV %.3f)", balance, new_rate, refi_month, ltv)
    return splice_schedules(before, after), info


def monthly_pmi_costs(scenario: Scenario, schedule: pd.DataFrame, refinance=None):
    """
    PMI charged in each month of ``schedule`` and the month it drops off.

    PMI accrues on the month's ending balance while loan-to-value stays
    above the limit. After a refinance it only applies when the new loan
    starts above the limit, tested against the appreciated home value.
    """
    assumptions = scenario.assumptions
    limit = assumptions.pmi_ltv_limit
    months = schedule["Month"]
    balances = schedule["Balance"]

    if not scenario.include_pmi or schedule.empty:
        return pd.Series(0.0, index=schedule.index), None

    growth = scenario.home_appreciation_rate
    pre_growth = growth if assumptions.pmi_ltv_basis == "appreciated" else 0.0
    refi_month = refinance.month if refinance else int(months.iloc[-1])

    is_pre = months <= refi_month
    dropoff = pmi_dropoff_month(schedule[is_pre], scenario.home_price, limit, pre_growth)
    pre_value = scenario.home_price * (1 + pre_growth) ** (months / 12)
    charged = is_pre & (balances > limit * pre_value)
    if dropoff is not None:
        charged &= months < dropoff

    if refinance is not None:
        if refinance.pmi_resumes:
            is_post = ~is_pre
            dropoff = pmi_dropoff_month(schedule[is_post], scenario.home_price, limit, growth)
            post_value = scenario.home_price * (1 + growth) ** (months / 12)
            post_charged = is_post & (balances > limit * post_value)
            if dropoff is not None:
                post_charged &= months < dropoff
            charged |= post_charged
        elif dropoff is None:
            dropoff = refi_month + 1

    logger.debug("PMI drops off in month %s", dropoff)
    costs = balances.where(charged, 0.0) * assumptions.pmi_rate / 12
    return costs, dropoff


def project_buying(scenario: Scenario, tax: Optional[TaxProvider] = None) -> BuyProjection:
    tax = tax or TaxCalculator()
    assumptions = scenario.assumptions
    loan_amount = scenario.loan_amount

    effective_rate = scenario.mortgage_rate
    points_cost = 0.0
    if scenario.buying_points and scenario.num_points > 0:
        effect = points_effect(loan_amount, scenario.mortgage_rate, scenario.num_points,
                               assumptions.point_cost_rate, assumptions.point_rate_reduction)
        effective_rate = effect.adjusted_rate
        points_cost = effect.points_cost

    base_payment = monthly_payment(loan_amount, effective_rate, scenario.loan_term_years)
    schedule = amortization_schedule(loan_amount, effective_rate, scenario.loan_term_years,
                                     scenario.extra_monthly_payment, assumptions.payoff_epsilon)
    schedule, refinance = apply_refinance(scenario, schedule, effective_rate, base_payment)

    summary, payoff_month, payoff_year = annual_summary(schedule, scenario.years_to_analyze,
                                                        assumptions.payoff_epsilon)
    pmi_costs, dropoff = monthly_pmi_costs(scenario, schedule, refinance)
    pmi_by_year = pmi_costs.groupby((schedule["Month"] - 1) // 12 + 1).sum()

    # Income is flat over the horizon, so these hold for every year
    marginal = tax.marginal_rate(scenario.taxable_income, scenario.filing_status)
    state_income_tax = tax.state_tax(scenario.taxable_income, scenario.state)
    investment_return = scenario.investment_return

    rows = []
    total_cost = scenario.down_payment + points_cost
    total_equity = scenario.down_payment
    total_tax_savings = 0.0
    savings_balance = 0.0
    first_deduction = None

    for year in range(1, scenario.years_to_analyze + 1):
        year_data = summary.iloc[year - 1]
        interest = float(year_data["Interest"])
        principal = float(year_data["Principal"])

        home_value = scenario.home_value(year)
        property_tax = tax.property_tax(home_value, scenario.state)
        pmi = float(pmi_by_year.get(year, 0.0))
        if scenario.home_insurance is not None:
            insurance = scenario.home_insurance
        else:
            insurance = home_value * assumptions.home_insurance_rate
        hoa = scenario.hoa_monthly * 12
        maintenance = home_value * scenario.maintenance_rate
        utilities = scenario.monthly_utilities * 12
        refinanced = refinance is not None and refinance.year == year
        refinance_costs = refinance.total_cost if refinanced else 0.0

        tax_benefit = 0.0
        itemized = False
        if interest > 0:
            deduction = tax.deduction_benefit(interest, property_tax, state_income_tax,
                                              scenario.filing_status, marginal, scenario.taxable_income)
            if year == 1:
                first_deduction = deduction
            itemized = deduction.should_itemize
            if itemized:
                tax_benefit = deduction.tax_savings
        total_tax_savings += tax_benefit

        cost_before_tax = (interest + principal + property_tax + pmi + insurance + hoa
                           + maintenance + utilities + refinance_costs)
        cost = cost_before_tax - tax_benefit
        total_cost += cost

        # Grow last year's savings, then invest whatever owning saved versus renting
        rent_comparison = scenario.rent_cost(year)
        savings_balance *= 1 + investment_return
        savings_vs_rent = max(0.0, rent_comparison - cost)
        savings_balance += savings_vs_rent

        remaining = float(year_data["Ending Balance"])
        total_equity = home_value - remaining

        rows.append({
            "Year": year,
            "Mortgage Payment": interest + principal,
            "Interest": interest,
            "Principal": principal,
            "Property Tax": property_tax,
            "PMI": pmi,
            "Insurance": insurance,
            "HOA": hoa,
            "Maintenance": maintenance,
            "Utilities": utilities,
            "Refinance Costs": refinance_costs,
            "Refinanced": refinanced,
            "Tax Benefit": tax_benefit,
            "Itemized": itemized,
            "Total Cost Before Tax": cost_before_tax,
            "Total Cost": cost,
            "Cumulative Cost": total_cost,
            "Home Value": home_value,
            "Remaining Mortgage": remaining,
            "Equity": total_equity,
            "Paid Off": bool(year_data["Paid Off"]),
            "Rent Comparison": rent_comparison,
            "Savings Vs Rent": savings_vs_rent,
            "Savings Investment Balance": savings_balance,
        })

    final_home_value = scenario.home_value(scenario.years_to_analyze)
    selling_costs = final_home_value * scenario.selling_cost_rate
    current_payment = refinance.new_monthly_payment if refinance else base_payment

    first_monthly = None
    if rows:
        first = rows[0]
        first_monthly = MonthlyCosts(
            principal_interest=base_payment,
            pmi=first["PMI"] / 12,
            property_tax=first["Property Tax"] / 12,
            insurance=first["Insurance"] / 12,
            hoa=scenario.hoa_monthly,
            maintenance=first["Maintenance"] / 12,
            utilities=scenario.monthly_utilities,
            extra_payment=scenario.extra_monthly_payment,
            tax_benefit=first["Tax Benefit"] / 12,
        )

    return BuyProjection(
        schedule=schedule,
        annual_summary=summary,
        yearly=pd.DataFrame(rows, columns=YEARLY_COLUMNS),
        total_cost=total_cost,
        total_equity=total_equity,
        total_tax_savings=total_tax_savings,
        final_home_value=final_home_value,
        selling_costs=selling_costs,
        net_from_sale=total_equity - selling_costs + savings_balance,
        savings_investment_balance=savings_balance,
        points_cost=points_cost,
        effective_rate=effective_rate,
        monthly_payment=base_payment,
        current_monthly_payment=current_payment,
        total_monthly_with_extra=current_payment + scenario.extra_monthly_payment,
        pmi_dropoff_month=dropoff,
        payoff_month=payoff_month,
        payoff_year=payoff_year,
        original_payoff_months=scenario.loan_term_years * 12,
        months_saved=scenario.loan_term_years * 12 - payoff_month,
        marginal_rate=marginal,
        state_income_tax=state_income_tax,
        first_year_deduction=first_deduction,
        first_year_monthly=first_monthly,
        refinance=refinance,
    )
