import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .tax_tables import (
    DEFAULT_PROPERTY_TAX_RATE,
    FEDERAL_TAX_BRACKETS,
    PROPERTY_TAX_RATES,
    SALT_CAP_INCOME_THRESHOLD,
    SALT_CAP_OVER_THRESHOLD,
    SALT_CAP_UNDER_THRESHOLD,
    STANDARD_DEDUCTION,
    STATE_TAX_DATA,
)

logger = logging.getLogger(__name__)


class FilingStatus(Enum):
    SINGLE = "single"
    MARRIED = "married"


def _status_key(filing_status) -> str:
    # Accepts the enum or its string value; raises ValueError on anything else
    return FilingStatus(filing_status).value


@dataclass(frozen=True)
class DeductionBenefit:
    mortgage_interest: float
    salt_deduction: float
    salt_cap: float
    total_itemized: float
    standard_deduction: float
    excess_deduction: float
    tax_savings: float
    should_itemize: bool


def federal_tax(income: float, filing_status, brackets=None) -> float:
    brackets = brackets or FEDERAL_TAX_BRACKETS[_status_key(filing_status)]
    tax = 0.0
    remaining = income

    for lower, upper, rate in brackets:
        if remaining <= 0:
            break
        taxable_in_bracket = min(remaining, upper - lower)
        tax += taxable_in_bracket * rate
        remaining -= taxable_in_bracket

    return tax


def marginal_rate(income: float, filing_status, brackets=None) -> float:
    brackets = brackets or FEDERAL_TAX_BRACKETS[_status_key(filing_status)]
    for _, upper, rate in brackets:
        if income <= upper:
            return rate
    return brackets[-1][2]


def state_tax(income: float, state: str, table=None) -> float:
    table = STATE_TAX_DATA if table is None else table
    state_data = table.get(state)
    if state_data is None:
        logger.debug("No state income tax data for '%s', assuming none", state)
        return 0.0
    if not state_data["has_income_tax"]:
        return 0.0
    return income * state_data["rate"]


def property_tax(home_value: float, state: str, rates=None, default_rate=DEFAULT_PROPERTY_TAX_RATE) -> float:
    rates = PROPERTY_TAX_RATES if rates is None else rates
    return home_value * rates.get(state, default_rate)


def salt_cap(income: float) -> float:
    if income < SALT_CAP_INCOME_THRESHOLD:
        return SALT_CAP_UNDER_THRESHOLD
    return SALT_CAP_OVER_THRESHOLD


def deduction_benefit(
    mortgage_interest: float,
    property_tax: float,
    state_income_tax: float,
    filing_status,
    marginal_rate: float,
    income: float,
) -> DeductionBenefit:
    """
    Compare itemized deductions (mortgage interest plus capped SALT)
    against the standard deduction for the filing status.

    Only the amount by which itemizing exceeds the standard deduction
    produces a tax saving, at the marginal rate. The result has to be
    recomputed every year: interest falls as the loan amortizes and the
    choice can flip back to the standard deduction.
    """
    standard = STANDARD_DEDUCTION[_status_key(filing_status)]
    cap = salt_cap(income)
    salt = min(property_tax + state_income_tax, cap)
    itemized = mortgage_interest + salt
    excess = max(0.0, itemized - standard)
    should_itemize = itemized > standard

    return DeductionBenefit(
        mortgage_interest=mortgage_interest,
        salt_deduction=salt,
        salt_cap=cap,
        total_itemized=itemized,
        standard_deduction=standard,
        excess_deduction=excess,
        tax_savings=excess * marginal_rate,
        should_itemize=should_itemize,
    )


class TaxProvider(Protocol):
    """Tax capabilities the buying projection depends on."""

    def marginal_rate(self, income: float, filing_status) -> float: ...

    def state_tax(self, income: float, state: str) -> float: ...

    def property_tax(self, home_value: float, state: str) -> float: ...

    def deduction_benefit(
        self,
        mortgage_interest: float,
        property_tax: float,
        state_income_tax: float,
        filing_status,
        marginal_rate: float,
        income: float,
    ) -> DeductionBenefit: ...


class TaxCalculator:
    """Default TaxProvider backed by the bundled tables."""

    def __init__(self, state_table=None, property_rates=None, default_property_rate=DEFAULT_PROPERTY_TAX_RATE):
        self.state_table = STATE_TAX_DATA if state_table is None else state_table
        self.property_rates = PROPERTY_TAX_RATES if property_rates is None else property_rates
        self.default_property_rate = default_property_rate

    def federal_tax(self, income, filing_status):
        return federal_tax(income, filing_status)

    def marginal_rate(self, income, filing_status):
        return marginal_rate(income, filing_status)

    def state_tax(self, income, state):
        return state_tax(income, state, self.state_table)

    def property_tax(self, home_value, state):
        return property_tax(home_value, state, self.property_rates, self.default_property_rate)

    def deduction_benefit(self, mortgage_interest, property_tax, state_income_tax, filing_status, marginal_rate, income):
        return deduction_benefit(mortgage_interest, property_tax, state_income_tax, filing_status, marginal_rate, income)
