from .buying import project_buying
from .compare import compare, find_breakeven, project, sensitivity_sweep, sweep_variable
from .config import Assumptions
from .models import (
    Breakeven,
    BuyProjection,
    Comparison,
    MonthlyCosts,
    RefinanceInfo,
    RefinancePlan,
    RentProjection,
    Scenario,
)
from .renting import project_renting
from .tax import DeductionBenefit, FilingStatus, TaxCalculator, TaxProvider

__all__ = [
    "Assumptions",
    "Breakeven",
    "BuyProjection",
    "Comparison",
    "DeductionBenefit",
    "FilingStatus",
    "MonthlyCosts",
    "RefinanceInfo",
    "RefinancePlan",
    "RentProjection",
    "Scenario",
    "TaxCalculator",
    "TaxProvider",
    "compare",
    "find_breakeven",
    "project",
    "project_buying",
    "project_renting",
    "sensitivity_sweep",
    "sweep_variable",
]
