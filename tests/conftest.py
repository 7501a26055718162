import dataclasses

import pytest

from rentorbuy import FilingStatus, Scenario


@pytest.fixture
def arizona_scenario():
    return Scenario(
        home_price=500_000,
        down_payment=100_000,
        mortgage_rate=0.065,
        loan_term_years=30,
        extra_monthly_payment=0,
        include_pmi=True,
        buying_points=False,
        state="AZ",
        filing_status=FilingStatus.MARRIED,
        taxable_income=200_000,
        home_insurance=1_750,
        hoa_monthly=250,
        maintenance_rate=0.01,
        monthly_rent=2_300,
        annual_rent_increase=0.04,
        years_to_analyze=10,
        home_appreciation_rate=0.03,
        investment_return_rate=0.10,
        include_selling_costs=True,
    )


@pytest.fixture
def low_down_scenario(arizona_scenario):
    # 10% down so PMI applies from the first month
    return dataclasses.replace(arizona_scenario, down_payment=50_000, home_appreciation_rate=0.0)
