from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from trucking_ledger.analysis.breakeven import BreakEven, solve_break_even
from trucking_ledger.analysis.monthly import MonthlyRow, build_monthly_report
from trucking_ledger.analysis.profitability import Profitability, analyze_profitability
from trucking_ledger.analysis.tax import TaxEstimate, TaxEstimator
from trucking_ledger.analysis.waterfall import FundingBucket, funding_waterfall
from trucking_ledger.config import EngineConfig
from trucking_ledger.costs.fuel import RegionalFuelModel
from trucking_ledger.costs.reserves import ReserveAccountant, ReserveFund
from trucking_ledger.debts.schedule import PayoffPlan, schedule_payoff
from trucking_ledger.ledger.aggregate import LedgerTotals, aggregate, split_pending
from trucking_ledger.ledger.records import (
    Debt,
    Expense,
    PersonalExpense,
    Trip,
    debt_service_amount,
    personal_monthly_total,
)


@dataclass(frozen=True)
class AnalysisSnapshot:
    as_of: date
    totals: LedgerTotals
    profitability: Profitability
    tax: TaxEstimate
    break_even: BreakEven
    waterfall: tuple[FundingBucket, ...]
    reserve_funds: tuple[ReserveFund, ...]
    expected_fuel_cost: float
    tracked_fuel_cost: float
    seasonal_rate: float
    annual_miles_projection: float
    personal_monthly: float
    remaining_after_personal: float
    total_debt: float


@dataclass(frozen=True)
class EngineReport:
    snapshot: AnalysisSnapshot
    monthly: tuple[MonthlyRow, ...]
    payoff_plan: PayoffPlan | None


def build_snapshot(
    trips: Iterable[Trip],
    expenses: Iterable[Expense],
    personal: Iterable[PersonalExpense],
    debts: Iterable[Debt],
    *,
    as_of: date,
    config: EngineConfig,
) -> AnalysisSnapshot:
    trips = list(trips)
    expenses = list(expenses)
    personal = list(personal)
    debts = list(debts)

    reserves = ReserveAccountant(config)
    fuel = RegionalFuelModel(config)

    totals = aggregate(trips, expenses, as_of)
    profit = analyze_profitability(totals, config=config, reserves=reserves)
    tax = TaxEstimator.from_config(config).estimate(profit.true_profit)

    personal_total = personal_monthly_total(personal)
    be = solve_break_even(
        revenue=totals.realized_revenue,
        miles=totals.realized_miles,
        fuel_expense=totals.fuel_expense,
        fixed_costs=totals.category_total(*config.fixed_categories),
        personal_obligation=personal_total,
        debt_service=debt_service_amount(personal),
        trip_count=totals.realized_trip_count,
        config=config,
    )
    buckets = funding_waterfall(
        revenue=totals.realized_revenue,
        business_costs=totals.realized_expenses + profit.hidden_costs,
        personal_costs=personal_total,
        tax=tax.estimated_tax,
    )

    realized, _ = split_pending(trips, as_of)
    active_months = {(t.date.year, t.date.month) for t in realized}
    annual_miles = totals.realized_miles * 12.0 / max(1, len(active_months))

    return AnalysisSnapshot(
        as_of=as_of,
        totals=totals,
        profitability=profit,
        tax=tax,
        break_even=be,
        waterfall=buckets,
        reserve_funds=reserves.reserve_funds(totals.realized_miles),
        expected_fuel_cost=totals.realized_miles * fuel.average_price / config.mpg,
        tracked_fuel_cost=totals.fuel_expense,
        seasonal_rate=float(config.seasonal_rates.get(as_of.month, config.default_rate_per_mile)),
        annual_miles_projection=float(annual_miles),
        personal_monthly=personal_total,
        remaining_after_personal=tax.after_tax_profit - personal_total,
        total_debt=math.fsum(d.amount for d in debts),
    )


def run_engine(
    trips: Iterable[Trip],
    expenses: Iterable[Expense],
    personal: Iterable[PersonalExpense],
    debts: Iterable[Debt],
    *,
    as_of: date,
    config: EngineConfig,
    debt_budget: float | None = None,
) -> EngineReport:
    """
    Full read-only pass over one ledger snapshot. The debt budget defaults to the "Debt"
    personal line; with no positive budget there is no payoff plan.
    """
    trips = list(trips)
    expenses = list(expenses)
    personal = list(personal)
    debts = list(debts)

    snap = build_snapshot(trips, expenses, personal, debts, as_of=as_of, config=config)
    monthly = build_monthly_report(trips, expenses, as_of=as_of, config=config)

    budget = debt_service_amount(personal) if debt_budget is None else debt_budget
    plan = None
    if budget > 0:
        plan = schedule_payoff(debts, monthly_budget=budget, as_of=as_of, days_per_month=config.days_per_month)

    return EngineReport(snapshot=snap, monthly=tuple(monthly), payoff_plan=plan)
