import dataclasses
import math

import numpy as np
import pytest

from rentorbuy import project_buying, project_renting


@pytest.fixture
def buy_yearly(arizona_scenario):
    return project_buying(arizona_scenario).yearly


def test_rent_grows_each_year(arizona_scenario, buy_yearly):
    yearly = project_renting(arizona_scenario, buy_yearly).yearly

    assert math.isclose(yearly.loc[0, "Rent"], 2_300 * 12)
    assert np.allclose(yearly["Rent"].iloc[1:].to_numpy() / yearly["Rent"].iloc[:-1].to_numpy(), 1.04)
    assert (yearly["Renters Insurance"] == 200).all()
    assert np.allclose(yearly["Total Cost"], yearly["Rent"] + yearly["Renters Insurance"] + yearly["Utilities"])


def test_utilities_count_toward_rent_cost(arizona_scenario):
    scenario = dataclasses.replace(arizona_scenario, monthly_utilities=150)
    yearly = project_renting(scenario, project_buying(scenario).yearly).yearly
    assert (yearly["Utilities"] == 1_800).all()
    assert math.isclose(yearly.loc[0, "Total Cost"], 2_300 * 12 + 200 + 1_800)


def test_default_initial_investment_is_down_payment(arizona_scenario, buy_yearly):
    projection = project_renting(arizona_scenario, buy_yearly)
    assert projection.initial_investment == 100_000
    assert projection.yearly.loc[0, "Investment Start Balance"] == 100_000


def test_savings_mirror_buying_costs(arizona_scenario, buy_yearly):
    yearly = project_renting(arizona_scenario, buy_yearly).yearly
    expected = (buy_yearly["Total Cost"] - yearly["Total Cost"]).clip(lower=0)
    assert np.allclose(yearly["Savings Vs Buying"], expected)


def test_only_one_track_saves_each_year(arizona_scenario, buy_yearly):
    yearly = project_renting(arizona_scenario, buy_yearly).yearly
    assert ((yearly["Savings Vs Buying"] == 0) | (buy_yearly["Savings Vs Rent"] == 0)).all()


def test_investment_balance_compounds(arizona_scenario, buy_yearly):
    projection = project_renting(arizona_scenario, buy_yearly)
    yearly = projection.yearly

    assert np.allclose(yearly["Investment Growth"], yearly["Investment Start Balance"] * 0.10)
    assert np.allclose(yearly["Investment Start Balance"].iloc[1:].to_numpy(),
                       yearly["Investment End Balance"].iloc[:-1].to_numpy())
    assert (np.diff(yearly["Investment End Balance"].to_numpy()) > 0).all()
    assert projection.final_investment_balance == yearly["Investment End Balance"].iloc[-1]
    assert math.isclose(projection.total_rent_paid, yearly["Total Cost"].sum())


def test_short_buying_breakdown_raises(arizona_scenario, buy_yearly):
    with pytest.raises(ValueError):
        project_renting(arizona_scenario, buy_yearly.iloc[:5])
