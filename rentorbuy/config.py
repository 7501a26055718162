from dataclasses import dataclass

PMI_LTV_BASES = ("appreciated", "purchase")


@dataclass(frozen=True)
class Assumptions:
    """
    Market defaults shared by every projection.

    Override per scenario with ``dataclasses.replace(Assumptions(), ...)``.

    pmi_rate: annual PMI as a fraction of the outstanding balance.
    point_cost_rate: cost of one point as a fraction of the loan amount.
    point_rate_reduction: annual rate reduction bought by one point.
    home_insurance_rate: insurance as a fraction of home value, used when
        the scenario gives no explicit annual premium.
    investment_return_rate: annual return on invested savings.
    renters_insurance: annual renter's insurance premium.
    selling_cost_rate: agent and closing costs on sale, fraction of value.
    refinance_closing_cost_rate: refinance closing costs as a fraction of
        the refinanced balance.
    pmi_ltv_limit: loan-to-value at or below which PMI is not charged.
    pmi_ltv_basis: "appreciated" tests LTV against the appreciated home
        value in every month; "purchase" uses the purchase price until a
        refinance (the refinanced loan is always tested against the
        appreciated value).
    payoff_epsilon: balance at or below which a loan counts as repaid.
    """

    pmi_rate: float = 0.005
    point_cost_rate: float = 0.01
    point_rate_reduction: float = 0.0025
    home_insurance_rate: float = 0.0035
    investment_return_rate: float = 0.10
    renters_insurance: float = 200.0
    selling_cost_rate: float = 0.06
    refinance_closing_cost_rate: float = 0.02
    pmi_ltv_limit: float = 0.80
    pmi_ltv_basis: str = "appreciated"
    payoff_epsilon: float = 0.01

    def __post_init__(self):
        if self.pmi_ltv_basis not in PMI_LTV_BASES:
            raise ValueError(f"pmi_ltv_basis must be one of {PMI_LTV_BASES}, got {self.pmi_ltv_basis!r}")


# Starting values for the dashboard; rates are decimals
DEFAULT_SCENARIO = {
    "home_price": 500_000, "down_payment": 100_000, "mortgage_rate": 0.065, "loan_term_years": 30,
    "extra_monthly_payment": 0, "include_pmi": True, "buying_points": False, "num_points": 1,
    "state": "AZ", "filing_status": "married", "taxable_income": 200_000, "home_insurance": 1750,
    "hoa_monthly": 250, "maintenance_rate": 0.01, "monthly_rent": 2300, "annual_rent_increase": 0.04,
    "years_to_analyze": 10, "home_appreciation_rate": 0.03, "investment_return_rate": 0.10,
    "include_selling_costs": True, "monthly_utilities": 0,
}

PRESETS = {
    "Default": DEFAULT_SCENARIO,
    "High-Cost Urban": {
        **DEFAULT_SCENARIO,
        "home_price": 800_000, "down_payment": 160_000, "mortgage_rate": 0.0675, "state": "CA",
        "taxable_income": 300_000, "home_insurance": 2800, "hoa_monthly": 450, "monthly_rent": 4000,
        "annual_rent_increase": 0.045, "home_appreciation_rate": 0.035,
    },
    "Low-Cost Suburban": {
        **DEFAULT_SCENARIO,
        "home_price": 300_000, "down_payment": 30_000, "mortgage_rate": 0.07, "loan_term_years": 15,
        "state": "OH", "filing_status": "single", "taxable_income": 90_000, "home_insurance": 1100,
        "hoa_monthly": 0, "monthly_rent": 1800, "annual_rent_increase": 0.03,
        "home_appreciation_rate": 0.025,
    },
}

# Sweep ranges per Scenario field: (label, min, max, step)
SENSITIVITY_VARIABLES = {
    "mortgage_rate": ("Mortgage Rate", 0.03, 0.09, 0.005),
    "home_price": ("Home Price", 300_000, 1_000_000, 50_000),
    "down_payment": ("Down Payment", 50_000, 300_000, 25_000),
    "monthly_rent": ("Monthly Rent", 1_500, 6_000, 250),
    "home_appreciation_rate": ("Home Appreciation", 0.0, 0.06, 0.005),
    "investment_return_rate": ("Investment Return", 0.04, 0.14, 0.01),
    "annual_rent_increase": ("Annual Rent Increase", 0.01, 0.07, 0.005),
    "years_to_analyze": ("Years to Analyze", 5, 50, 5),
}
