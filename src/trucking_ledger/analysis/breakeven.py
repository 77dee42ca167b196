from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from trucking_ledger.config import EngineConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakEven:
    rate_per_mile: float
    fuel_per_mile: float
    variable_cost_per_mile: float
    marginal_profit_per_mile: float
    gross_margin: float
    fixed_costs: float
    fixed_costs_covered: bool
    fixed_cost_gap: float
    after_fixed: float
    take_home_need: float
    debt_service: float
    shortfall: float
    miles_needed: int | None  # None: no number of extra miles closes the shortfall
    trips_needed: int | None
    percent_covered: float
    goal_met: bool
    surplus: float

    @property
    def unbounded(self) -> bool:
        return self.miles_needed is None


def solve_break_even(
    *,
    revenue: float,
    miles: float,
    fuel_expense: float,
    fixed_costs: float,
    personal_obligation: float,
    debt_service: float = 0.0,
    trip_count: int = 0,
    config: EngineConfig,
) -> BreakEven:
    """
    Closed-form monthly break-even. Margin after variable costs funds fixed costs first,
    then the personal obligation (which already includes debt service). Extra miles are
    assumed to earn the current marginal profit per mile.

    Returns miles_needed=None when there is a shortfall but marginal profit per mile is
    not positive, i.e. more driving only deepens the hole.
    """
    if miles < 0:
        raise ValueError("miles must be >= 0")
    if personal_obligation < 0 or fixed_costs < 0 or debt_service < 0:
        raise ValueError("obligations must be >= 0")

    if miles > 0:
        rate = revenue / miles
        fuel_pm = fuel_expense / miles
    else:
        rate = config.default_rate_per_mile
        fuel_pm = config.fuel_prices[config.average_region] / config.mpg

    variable_pm = fuel_pm + config.depreciation_rate + config.maintenance_rate
    marginal = rate - variable_pm

    gross_margin = revenue - miles * variable_pm
    after_fixed = gross_margin - fixed_costs
    need = float(personal_obligation)
    covered_amount = max(0.0, after_fixed)
    shortfall = max(0.0, need - covered_amount)

    miles_needed: int | None
    if shortfall <= 0:
        miles_needed = 0
    elif marginal > 0:
        miles_needed = int(math.ceil(shortfall / marginal))
    else:
        miles_needed = None
        logger.warning(
            "break-even unbounded: marginal profit %.4f/mi with shortfall %.2f", marginal, shortfall
        )

    trips_needed: int | None = None
    if miles_needed is not None:
        avg_trip = miles / trip_count if trip_count > 0 else 0.0
        trips_needed = int(math.ceil(miles_needed / max(1.0, avg_trip)))

    pct = min(100.0, covered_amount / need * 100.0) if need > 0 else 100.0

    return BreakEven(
        rate_per_mile=float(rate),
        fuel_per_mile=float(fuel_pm),
        variable_cost_per_mile=float(variable_pm),
        marginal_profit_per_mile=float(marginal),
        gross_margin=float(gross_margin),
        fixed_costs=float(fixed_costs),
        fixed_costs_covered=gross_margin >= fixed_costs,
        fixed_cost_gap=float(max(0.0, fixed_costs - gross_margin)),
        after_fixed=float(after_fixed),
        take_home_need=need,
        debt_service=float(debt_service),
        shortfall=float(shortfall),
        miles_needed=miles_needed,
        trips_needed=trips_needed,
        percent_covered=float(pct),
        goal_met=after_fixed >= need,
        surplus=float(max(0.0, after_fixed - need)),
    )
