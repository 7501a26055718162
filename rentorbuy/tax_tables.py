"""Static tax lookup tables (2024 federal figures, average state rates)."""

import math

# (lower bound, upper bound, rate); the last bracket is unbounded
FEDERAL_TAX_BRACKETS = {
    "single": [
        (0, 11_600, 0.10),
        (11_600, 47_150, 0.12),
        (47_150, 100_525, 0.22),
        (100_525, 191_950, 0.24),
        (191_950, 243_725, 0.32),
        (243_725, 609_350, 0.35),
        (609_350, math.inf, 0.37),
    ],
    "married": [
        (0, 23_200, 0.10),
        (23_200, 94_300, 0.12),
        (94_300, 201_050, 0.22),
        (201_050, 383_900, 0.24),
        (383_900, 487_450, 0.32),
        (487_450, 731_200, 0.35),
        (731_200, math.inf, 0.37),
    ],
}

STANDARD_DEDUCTION = {
    "single": 14_600,
    "married": 29_200,
}

# SALT cap is two-tier: the lower cap applies at or above the threshold
SALT_CAP_INCOME_THRESHOLD = 500_000
SALT_CAP_UNDER_THRESHOLD = 40_000
SALT_CAP_OVER_THRESHOLD = 10_000

# Top marginal rates used as a flat estimate
STATE_TAX_DATA = {
    "AL": {"name": "Alabama", "rate": 0.05, "has_income_tax": True},
    "AK": {"name": "Alaska", "rate": 0.0, "has_income_tax": False},
    "AZ": {"name": "Arizona", "rate": 0.025, "has_income_tax": True},
    "AR": {"name": "Arkansas", "rate": 0.047, "has_income_tax": True},
    "CA": {"name": "California", "rate": 0.123, "has_income_tax": True},
    "CO": {"name": "Colorado", "rate": 0.044, "has_income_tax": True},
    "CT": {"name": "Connecticut", "rate": 0.0699, "has_income_tax": True},
    "DE": {"name": "Delaware", "rate": 0.066, "has_income_tax": True},
    "FL": {"name": "Florida", "rate": 0.0, "has_income_tax": False},
    "GA": {"name": "Georgia", "rate": 0.0549, "has_income_tax": True},
    "HI": {"name": "Hawaii", "rate": 0.11, "has_income_tax": True},
    "ID": {"name": "Idaho", "rate": 0.058, "has_income_tax": True},
    "IL": {"name": "Illinois", "rate": 0.0495, "has_income_tax": True},
    "IN": {"name": "Indiana", "rate": 0.0315, "has_income_tax": True},
    "IA": {"name": "Iowa", "rate": 0.057, "has_income_tax": True},
    "KS": {"name": "Kansas", "rate": 0.057, "has_income_tax": True},
    "KY": {"name": "Kentucky", "rate": 0.04, "has_income_tax": True},
    "LA": {"name": "Louisiana", "rate": 0.0425, "has_income_tax": True},
    "ME": {"name": "Maine", "rate": 0.0715, "has_income_tax": True},
    "MD": {"name": "Maryland", "rate": 0.0575, "has_income_tax": True},
    "MA": {"name": "Massachusetts", "rate": 0.09, "has_income_tax": True},
    "MI": {"name": "Michigan", "rate": 0.0425, "has_income_tax": True},
    "MN": {"name": "Minnesota", "rate": 0.0985, "has_income_tax": True},
    "MS": {"name": "Mississippi", "rate": 0.05, "has_income_tax": True},
    "MO": {"name": "Missouri", "rate": 0.0495, "has_income_tax": True},
    "MT": {"name": "Montana", "rate": 0.059, "has_income_tax": True},
    "NE": {"name": "Nebraska", "rate": 0.0584, "has_income_tax": True},
    "NV": {"name": "Nevada", "rate": 0.0, "has_income_tax": False},
    "NH": {"name": "New Hampshire", "rate": 0.0, "has_income_tax": False},
    "NJ": {"name": "New Jersey", "rate": 0.1075, "has_income_tax": True},
    "NM": {"name": "New Mexico", "rate": 0.059, "has_income_tax": True},
    "NY": {"name": "New York", "rate": 0.109, "has_income_tax": True},
    "NC": {"name": "North Carolina", "rate": 0.0475, "has_income_tax": True},
    "ND": {"name": "North Dakota", "rate": 0.029, "has_income_tax": True},
    "OH": {"name": "Ohio", "rate": 0.0399, "has_income_tax": True},
    "OK": {"name": "Oklahoma", "rate": 0.0475, "has_income_tax": True},
    "OR": {"name": "Oregon", "rate": 0.099, "has_income_tax": True},
    "PA": {"name": "Pennsylvania", "rate": 0.0307, "has_income_tax": True},
    "RI": {"name": "Rhode Island", "rate": 0.0599, "has_income_tax": True},
    "SC": {"name": "South Carolina", "rate": 0.064, "has_income_tax": True},
    "SD": {"name": "South Dakota", "rate": 0.0, "has_income_tax": False},
    "TN": {"name": "Tennessee", "rate": 0.0, "has_income_tax": False},
    "TX": {"name": "Texas", "rate": 0.0, "has_income_tax": False},
    "UT": {"name": "Utah", "rate": 0.0465, "has_income_tax": True},
    "VT": {"name": "Vermont", "rate": 0.0875, "has_income_tax": True},
    "VA": {"name": "Virginia", "rate": 0.0575, "has_income_tax": True},
    "WA": {"name": "Washington", "rate": 0.0, "has_income_tax": False},
    "WV": {"name": "West Virginia", "rate": 0.055, "has_income_tax": True},
    "WI": {"name": "Wisconsin", "rate": 0.0765, "has_income_tax": True},
    "WY": {"name": "Wyoming", "rate": 0.0, "has_income_tax": False},
    "DC": {"name": "District of Columbia", "rate": 0.1075, "has_income_tax": True},
}

# Average effective property tax rates
PROPERTY_TAX_RATES = {
    "AL": 0.0040, "AK": 0.0119, "AZ": 0.0062, "AR": 0.0062, "CA": 0.0071,
    "CO": 0.0051, "CT": 0.0214, "DE": 0.0057, "FL": 0.0089, "GA": 0.0092,
    "HI": 0.0028, "ID": 0.0063, "IL": 0.0227, "IN": 0.0085, "IA": 0.0157,
    "KS": 0.0141, "KY": 0.0086, "LA": 0.0055, "ME": 0.0136, "MD": 0.0109,
    "MA": 0.0123, "MI": 0.0154, "MN": 0.0111, "MS": 0.0081, "MO": 0.0097,
    "MT": 0.0074, "NE": 0.0173, "NV": 0.0055, "NH": 0.0218, "NJ": 0.0247,
    "NM": 0.0080, "NY": 0.0172, "NC": 0.0084, "ND": 0.0098, "OH": 0.0157,
    "OK": 0.0090, "OR": 0.0097, "PA": 0.0153, "RI": 0.0163, "SC": 0.0057,
    "SD": 0.0128, "TN": 0.0067, "TX": 0.0180, "UT": 0.0058, "VT": 0.0190,
    "VA": 0.0082, "WA": 0.0093, "WV": 0.0058, "WI": 0.0185, "WY": 0.0057,
    "DC": 0.0056,
}

DEFAULT_PROPERTY_TAX_RATE = 0.01
