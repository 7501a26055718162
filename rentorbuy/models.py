from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from .config import Assumptions
from .tax import DeductionBenefit, FilingStatus


@dataclass(frozen=True)
class RefinancePlan:
    enabled: bool = False
    year: int = 5
    new_rate: float = 0.055
    new_term_years: int = 30
    new_points: float = 0
    closing_cost_rate: Optional[float] = None  # None uses Assumptions.refinance_closing_cost_rate


@dataclass(frozen=True)
class Scenario:
    home_price: float
    down_payment: float
    mortgage_rate: float  # Annual, decimal
    loan_term_years: int
    monthly_rent: float
    years_to_analyze: int
    extra_monthly_payment: float = 0.0
    include_pmi: bool = True
    buying_points: bool = False
    num_points: float = 0
    state: str = "AZ"
    filing_status: FilingStatus = FilingStatus.MARRIED
    taxable_income: float = 0.0
    home_insurance: Optional[float] = None  # Annual; None falls back to a percentage of value
    hoa_monthly: float = 0.0
    maintenance_rate: float = 0.01  # Annual, of home value
    annual_rent_increase: float = 0.04
    home_appreciation_rate: float = 0.03
    investment_return_rate: Optional[float] = None
    include_selling_costs: bool = True
    monthly_utilities: float = 0.0
    refinance: RefinancePlan = field(default_factory=RefinancePlan)
    assumptions: Assumptions = field(default_factory=Assumptions)

    @classmethod
    def from_dict(cls, values: dict, **overrides) -> "Scenario":
        values = {**values, **overrides}
        values["filing_status"] = FilingStatus(values.get("filing_status", FilingStatus.MARRIED))
        return cls(**values)

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def investment_return(self) -> float:
        if self.investment_return_rate is None:
            return self.assumptions.investment_return_rate
        return self.investment_return_rate

    @property
    def selling_cost_rate(self) -> float:
        return self.assumptions.selling_cost_rate if self.include_selling_costs else 0.0

    def home_value(self, years: float) -> float:
        return self.home_price * (1 + self.home_appreciation_rate) ** years

    def rent_cost(self, year: int) -> float:
        """Annual cost of renting in a 1-based year: rent, renter's insurance and utilities."""
        rent = self.monthly_rent * 12 * (1 + self.annual_rent_increase) ** (year - 1)
        return rent + self.assumptions.renters_insurance + self.monthly_utilities * 12


@dataclass(frozen=True)
class RefinanceInfo:
    year: int
    month: int
    remaining_balance: float
    home_value: float
    loan_to_value: float
    pmi_resumes: bool
    old_rate: float
    new_rate: float
    old_monthly_payment: float
    new_monthly_payment: float
    monthly_savings: float
    points_cost: float
    closing_costs: float

    @property
    def total_cost(self) -> float:
        return self.points_cost + self.closing_costs


@dataclass(frozen=True)
class MonthlyCosts:
    """First-year housing cost spread over twelve months."""

    principal_interest: float
    pmi: float
    property_tax: float
    insurance: float
    hoa: float
    maintenance: float
    utilities: float
    extra_payment: float
    tax_benefit: float

    @property
    def total(self) -> float:
        return (self.principal_interest + self.pmi + self.property_tax + self.insurance + self.hoa
                + self.utilities)

    @property
    def total_with_extra(self) -> float:
        return self.total + self.extra_payment

    @property
    def net(self) -> float:
        """Monthly outlay with extra principal and maintenance, less the tax benefit."""
        return self.total_with_extra + self.maintenance - self.tax_benefit


@dataclass(frozen=True)
class BuyProjection:
    schedule: pd.DataFrame
    annual_summary: pd.DataFrame
    yearly: pd.DataFrame
    total_cost: float
    total_equity: float
    total_tax_savings: float
    final_home_value: float
    selling_costs: float
    net_from_sale: float
    savings_investment_balance: float
    points_cost: float
    effective_rate: float
    monthly_payment: float
    current_monthly_payment: float
    total_monthly_with_extra: float
    pmi_dropoff_month: Optional[int]
    payoff_month: int
    payoff_year: int
    original_payoff_months: int
    months_saved: int
    marginal_rate: float
    state_income_tax: float
    first_year_deduction: Optional[DeductionBenefit]  # None when no interest is paid in year 1
    first_year_monthly: Optional[MonthlyCosts]
    refinance: Optional[RefinanceInfo] = None


@dataclass(frozen=True)
class RentProjection:
    yearly: pd.DataFrame
    total_rent_paid: float
    initial_investment: float
    final_investment_balance: float


@dataclass(frozen=True)
class Comparison:
    buy: BuyProjection
    rent: RentProjection
    buy_net: float
    rent_net: float
    difference: float  # buy_net - rent_net; positive means buying wins

    @property
    def advantage(self) -> float:
        return abs(self.difference)

    @property
    def buying_is_better(self) -> bool:
        return self.difference > 0

    @property
    def winner(self) -> str:
        return "Buy" if self.buying_is_better else "Rent"


@dataclass(frozen=True)
class Breakeven:
    value: float
    lower: float
    upper: float
