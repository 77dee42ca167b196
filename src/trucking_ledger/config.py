from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

AVERAGE_REGION = "AVG"

# Regional diesel prices ($/gal)
DEFAULT_FUEL_PRICES: dict[str, float] = {
    "UT": 3.80,
    "TX": 3.40,
    "OH": 3.60,
    "NV": 4.10,
    "CA": 5.20,
    "PA": 4.05,
    "NM": 3.65,
    "AZ": 3.75,
    "CO": 3.70,
    "OK": 3.35,
    "AR": 3.40,
    "TN": 3.45,
    "IN": 3.55,
    "WV": 3.70,
    AVERAGE_REGION: 3.85,
}

DEFAULT_REGION_LABELS: dict[str, str] = {
    "UT": "Utah",
    "TX": "Texas",
    "OH": "Midwest/OH",
    "NV": "Nevada",
    "CA": "California",
    "PA": "Pennsylvania",
    "NM": "New Mexico",
    "AZ": "Arizona",
    "CO": "Colorado",
    "OK": "Oklahoma",
    "AR": "Arkansas",
    "TN": "Tennessee",
    "IN": "Indiana",
    "WV": "West Virginia",
    AVERAGE_REGION: "National Avg",
}

DEFAULT_ROUTE_MIDPOINTS: dict[tuple[str, str], str] = {
    ("UT", "TX"): "NM",
    ("TX", "OH"): "TN",
    ("OH", "NV"): "CO",
    ("NV", "CA"): "NV",
    ("CA", "TX"): "AZ",
    ("TX", "TX"): "TX",
    ("TX", "PA"): "TN",
    ("TX", "NV"): "NM",
    ("OH", "TX"): "TN",
    ("PA", "TX"): "TN",
    ("NV", "TX"): "NM",
}

# Historical national dry van spot rates ($/mi) by calendar month
DEFAULT_SEASONAL_RATES: dict[int, float] = {
    1: 2.35,
    2: 2.10,
    3: 2.15,
    4: 2.20,
    5: 2.25,
    6: 2.40,
    7: 2.45,
    8: 2.50,
    9: 2.55,
    10: 2.65,
    11: 2.70,
    12: 2.80,
}

DEFAULT_FIXED_CATEGORIES: frozenset[str] = frozenset(
    {"Insurance", "Registration", "Tolls", "Dispatch", "Lock Box", "Trailer", "Food"}
)


@dataclass(frozen=True)
class EngineConfig:
    # All per-mile figures are $/mi.
    fixed_wage_rate: float = 0.65  # company driver pay
    vehicle_value: float = 85_000.0
    lifetime_miles: float = 360_000.0
    maintenance_rate: float = 0.15  # tires/repairs reserve
    mpg: float = 7.0
    self_employment_tax_rate: float = 0.153  # SS 12.4% + Medicare 2.9%
    income_tax_rate: float = 0.12  # estimated federal bracket
    default_rate_per_mile: float = 2.0  # used when no miles are realized yet
    dispatch_fee_rate: float = 0.10
    tire_set_cost: float = 4_500.0
    days_per_month: int = 30
    average_region: str = AVERAGE_REGION
    fuel_prices: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_FUEL_PRICES))
    region_labels: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_REGION_LABELS))
    route_midpoints: Mapping[tuple[str, str], str] = field(default_factory=lambda: dict(DEFAULT_ROUTE_MIDPOINTS))
    seasonal_rates: Mapping[int, float] = field(default_factory=lambda: dict(DEFAULT_SEASONAL_RATES))
    fixed_categories: frozenset[str] = DEFAULT_FIXED_CATEGORIES

    def __post_init__(self) -> None:
        if self.mpg <= 0:
            raise ValueError("mpg must be > 0")
        if self.lifetime_miles <= 0:
            raise ValueError("lifetime_miles must be > 0")
        if self.vehicle_value < 0:
            raise ValueError("vehicle_value must be >= 0")
        if self.days_per_month <= 0:
            raise ValueError("days_per_month must be > 0")
        for name in (
            "fixed_wage_rate",
            "maintenance_rate",
            "self_employment_tax_rate",
            "income_tax_rate",
            "default_rate_per_mile",
            "dispatch_fee_rate",
            "tire_set_cost",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.average_region not in self.fuel_prices:
            raise ValueError(f"fuel_prices must contain the average region '{self.average_region}'")

    @property
    def depreciation_rate(self) -> float:
        return self.vehicle_value / self.lifetime_miles

    @property
    def flat_tax_rate(self) -> float:
        return self.self_employment_tax_rate + self.income_tax_rate


def _parse_midpoints(raw: Mapping[str, str]) -> dict[tuple[str, str], str]:
    out: dict[tuple[str, str], str] = {}
    for key, mid in raw.items():
        parts = key.split("-")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"route midpoint key must look like 'TX-OH': {key!r}")
        out[(parts[0], parts[1])] = mid
    return out


def config_from_dict(d: Mapping[str, Any]) -> EngineConfig:
    """
    Build an EngineConfig from JSON-style overrides; missing keys keep their defaults.
    route_midpoints uses "ORIGIN-DEST" string keys, seasonal_rates uses month-number keys.
    """
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = dict(d)
    if "route_midpoints" in kwargs:
        kwargs["route_midpoints"] = _parse_midpoints(kwargs["route_midpoints"])
    if "seasonal_rates" in kwargs:
        kwargs["seasonal_rates"] = {int(k): float(v) for k, v in kwargs["seasonal_rates"].items()}
    if "fuel_prices" in kwargs:
        kwargs["fuel_prices"] = {str(k): float(v) for k, v in kwargs["fuel_prices"].items()}
    if "fixed_categories" in kwargs:
        if not isinstance(kwargs["fixed_categories"], list):
            raise ValueError("fixed_categories must be a list of category names")
        kwargs["fixed_categories"] = frozenset(kwargs["fixed_categories"])
    return EngineConfig(**kwargs)


def load_config(path: str) -> EngineConfig:
    with open(path, encoding="utf-8") as f:
        d = json.load(f)
    if not isinstance(d, dict):
        raise ValueError("config file must contain a JSON object")
    return config_from_dict(d)
