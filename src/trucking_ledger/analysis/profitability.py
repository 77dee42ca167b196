from __future__ import annotations

from dataclasses import dataclass

from trucking_ledger.config import EngineConfig
from trucking_ledger.costs.reserves import ReserveAccountant
from trucking_ledger.ledger.aggregate import LedgerTotals


@dataclass(frozen=True)
class Profitability:
    cash_profit: float
    depreciation: float
    maintenance_reserve: float
    hidden_costs: float
    true_profit: float
    fixed_wage_equivalent: float
    exceeds_fixed_wage: bool


def analyze_profitability(
    totals: LedgerTotals,
    *,
    config: EngineConfig,
    reserves: ReserveAccountant | None = None,
) -> Profitability:
    """
    Cash profit counts tracked expenses only; true profit also charges the depreciation
    and maintenance accruals on realized miles. The fixed-wage equivalent is what the same
    miles would have paid as a company driver.
    """
    reserves = reserves or ReserveAccountant(config)
    miles = totals.realized_miles

    cash = totals.realized_revenue - totals.realized_expenses
    depr = reserves.depreciation(miles)
    maint = reserves.maintenance_reserve(miles)
    hidden = depr + maint
    true_profit = cash - hidden
    wage_equiv = miles * config.fixed_wage_rate

    return Profitability(
        cash_profit=float(cash),
        depreciation=float(depr),
        maintenance_reserve=float(maint),
        hidden_costs=float(hidden),
        true_profit=float(true_profit),
        fixed_wage_equivalent=float(wage_equiv),
        exceeds_fixed_wage=true_profit > wage_equiv,
    )
