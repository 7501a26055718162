import dataclasses
import logging
import math
from typing import Optional

import pandas as pd

from .buying import project_buying
from .config import SENSITIVITY_VARIABLES
from .models import Breakeven, Comparison, Scenario
from .renting import project_renting
from .tax import TaxProvider

logger = logging.getLogger(__name__)

SWEEP_COLUMNS = ["Value", "Buy Net", "Rent Net", "Difference", "Buying Is Better", "Is Current"]

_NOT_NUMERIC = {"state", "filing_status", "include_pmi", "buying_points", "include_selling_costs",
                "refinance", "assumptions"}
_SWEEPABLE = {f.name for f in dataclasses.fields(Scenario)} - _NOT_NUMERIC
_INTEGER_FIELDS = {f.name for f in dataclasses.fields(Scenario) if f.type in (int, "int")}


def compare(scenario: Scenario, tax: Optional[TaxProvider] = None) -> Comparison:
    """Run buying, then renting against buying's yearly costs, and compare net positions."""
    buy = project_buying(scenario, tax)
    rent = project_renting(scenario, buy.yearly, initial_investment=scenario.down_payment + buy.points_cost)
    return Comparison(
        buy=buy,
        rent=rent,
        buy_net=buy.net_from_sale,
        rent_net=rent.final_investment_balance,
        difference=buy.net_from_sale - rent.final_investment_balance,
    )


project = compare


def _with_value(scenario: Scenario, variable: str, value):
    if variable in _INTEGER_FIELDS:
        value = int(round(value))
    return dataclasses.replace(scenario, **{variable: value})


def sensitivity_sweep(scenario: Scenario, variable: str, minimum: float, maximum: float, step: float,
                      tax: Optional[TaxProvider] = None) -> pd.DataFrame:
    """
    Re-run the comparison with one Scenario field swept over
    [minimum, maximum] in increments of ``step``, everything else fixed.
    """
    if variable not in _SWEEPABLE:
        raise ValueError(f"Cannot sweep '{variable}'")
    if step <= 0:
        raise ValueError("Sweep step must be positive")

    # An unset return rate falls back to the assumptions default
    current = scenario.investment_return if variable == "investment_return_rate" else getattr(scenario, variable)
    count = int(math.floor((maximum - minimum) / step + 1e-9)) + 1
    results = []

    for i in range(count):
        value = minimum + i * step
        sample = _with_value(scenario, variable, value)
        comparison = compare(sample, tax)
        results.append({
            "Value": getattr(sample, variable),
            "Buy Net": comparison.buy_net,
            "Rent Net": comparison.rent_net,
            "Difference": comparison.difference,
            "Buying Is Better": comparison.buying_is_better,
            "Is Current": current is not None and math.isclose(getattr(sample, variable), current),
        })

    logger.debug("Swept %s over %d values", variable, count)
    return pd.DataFrame(results, columns=SWEEP_COLUMNS)


def sweep_variable(scenario: Scenario, variable: str, tax: Optional[TaxProvider] = None) -> pd.DataFrame:
    if variable not in SENSITIVITY_VARIABLES:
        raise ValueError(f"No sweep range configured for '{variable}'")
    _, minimum, maximum, step = SENSITIVITY_VARIABLES[variable]
    return sensitivity_sweep(scenario, variable, minimum, maximum, step, tax)


def find_breakeven(sweep: pd.DataFrame) -> Optional[Breakeven]:
    """
    Locate the first sign change in ``Difference`` between adjacent
    samples and interpolate linearly between them.
    """
    values = sweep["Value"].to_numpy(dtype=float)
    diffs = sweep["Difference"].to_numpy(dtype=float)

    for i in range(len(diffs) - 1):
        curr, nxt = diffs[i], diffs[i + 1]
        if (curr > 0 and nxt < 0) or (curr < 0 and nxt > 0):
            ratio = abs(curr) / (abs(curr) + abs(nxt))
            value = values[i] + ratio * (values[i + 1] - values[i])
            return Breakeven(value=float(value), lower=float(values[i]), upper=float(values[i + 1]))

    return None
