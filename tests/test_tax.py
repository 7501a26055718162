import itertools
import math

import pytest

from rentorbuy.tax import (
    FilingStatus,
    TaxCalculator,
    deduction_benefit,
    federal_tax,
    marginal_rate,
    property_tax,
    salt_cap,
    state_tax,
)


def test_federal_tax_walks_brackets():
    # 10% of 11,600 + 12% of 35,550 + 22% of 2,850
    assert math.isclose(federal_tax(50_000, FilingStatus.SINGLE), 6_053.0)


def test_federal_tax_non_positive_income():
    assert federal_tax(0, "married") == 0
    assert federal_tax(-5_000, "married") == 0


def test_federal_tax_custom_brackets():
    brackets = [(0, 10_000, 0.0), (10_000, math.inf, 0.5)]
    assert federal_tax(30_000, "single", brackets) == 10_000


def test_marginal_rate():
    assert marginal_rate(200_000, FilingStatus.MARRIED) == 0.22
    assert marginal_rate(23_200, "married") == 0.10
    assert marginal_rate(10_000_000, "single") == 0.37


def test_unknown_filing_status_raises():
    with pytest.raises(ValueError):
        marginal_rate(100_000, "head_of_household")


def test_state_tax():
    assert math.isclose(state_tax(200_000, "AZ"), 5_000.0)
    assert state_tax(200_000, "TX") == 0
    assert state_tax(200_000, "ZZ") == 0


def test_property_tax_falls_back_to_one_percent():
    assert math.isclose(property_tax(500_000, "AZ"), 3_100.0)
    assert math.isclose(property_tax(500_000, "ZZ"), 5_000.0)


def test_salt_cap_is_two_tier():
    assert salt_cap(499_999) == 40_000
    assert salt_cap(500_000) == 10_000
    assert salt_cap(2_000_000) == 10_000


def test_deduction_benefit_itemizing_wins():
    result = deduction_benefit(25_000, 3_193, 5_000, FilingStatus.MARRIED, 0.22, 200_000)
    assert result.should_itemize
    assert math.isclose(result.salt_deduction, 8_193)
    assert math.isclose(result.excess_deduction, 3_993)
    assert math.isclose(result.tax_savings, 3_993 * 0.22)


def test_deduction_benefit_standard_wins():
    result = deduction_benefit(10_000, 3_193, 5_000, "married", 0.22, 200_000)
    assert not result.should_itemize
    assert result.excess_deduction == 0
    assert result.tax_savings == 0


def test_deduction_benefit_salt_capped_for_high_income():
    result = deduction_benefit(30_000, 30_000, 20_000, "single", 0.35, 600_000)
    assert result.salt_cap == 10_000
    assert result.salt_deduction == 10_000
    assert math.isclose(result.total_itemized, 40_000)


@pytest.mark.parametrize("status", ["single", "married"])
def test_should_itemize_matches_definition(status):
    standard = {"single": 14_600, "married": 29_200}[status]
    for interest, prop, state, income in itertools.product(
        [0, 5_000, 15_000, 29_000], [1_000, 12_000], [0, 9_000, 45_000], [80_000, 750_000]
    ):
        result = deduction_benefit(interest, prop, state, status, 0.24, income)
        expected = interest + min(prop + state, salt_cap(income)) > standard
        assert result.should_itemize == expected
        if not result.should_itemize:
            assert result.tax_savings == 0


def test_tax_calculator_uses_injected_tables():
    calculator = TaxCalculator(
        state_table={"XX": {"name": "Test", "rate": 0.1, "has_income_tax": True}},
        property_rates={"XX": 0.02},
        default_property_rate=0.03,
    )
    assert math.isclose(calculator.state_tax(100_000, "XX"), 10_000)
    assert calculator.state_tax(100_000, "AZ") == 0
    assert math.isclose(calculator.property_tax(100_000, "XX"), 2_000)
    assert math.isclose(calculator.property_tax(100_000, "AZ"), 3_000)
