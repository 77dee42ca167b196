from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass, fields
from datetime import date

import pandas as pd

from trucking_ledger.analysis.tax import TaxEstimator
from trucking_ledger.config import EngineConfig
from trucking_ledger.costs.reserves import ReserveAccountant
from trucking_ledger.ledger.aggregate import realized_expenses, split_pending
from trucking_ledger.ledger.records import Expense, ExpenseCategory, Trip

_FUEL_CATEGORIES = (ExpenseCategory.FUEL, ExpenseCategory.DEADHEAD)


@dataclass(frozen=True)
class MonthlyRow:
    month: str  # YYYY-MM
    trips: int
    miles: float
    revenue: float
    fuel: float
    other_expenses: float
    reserves: float
    true_profit: float
    estimated_tax: float
    net: float


def _month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def build_monthly_report(
    trips: Iterable[Trip],
    expenses: Iterable[Expense],
    *,
    as_of: date,
    config: EngineConfig,
) -> list[MonthlyRow]:
    """
    Monthly P&L over realized records, oldest month first. Only months that actually
    carry a trip or an expense produce a row.
    """
    trips = list(trips)
    realized, _ = split_pending(trips, as_of)
    exps = realized_expenses(expenses, trips, as_of)

    trips_by_month: dict[str, list[Trip]] = {}
    for t in realized:
        trips_by_month.setdefault(_month_key(t.date), []).append(t)
    exps_by_month: dict[str, list[Expense]] = {}
    for e in exps:
        exps_by_month.setdefault(_month_key(e.date), []).append(e)

    reserves = ReserveAccountant(config)
    tax = TaxEstimator.from_config(config)

    rows: list[MonthlyRow] = []
    for month in sorted(set(trips_by_month) | set(exps_by_month)):
        m_trips = trips_by_month.get(month, [])
        m_exps = exps_by_month.get(month, [])
        revenue = math.fsum(t.payout for t in m_trips)
        miles = math.fsum(t.distance for t in m_trips)
        fuel = math.fsum(e.amount for e in m_exps if e.category in _FUEL_CATEGORIES)
        other = math.fsum(e.amount for e in m_exps if e.category not in _FUEL_CATEGORIES)
        hidden = reserves.total(miles)
        profit = revenue - fuel - other - hidden
        est = tax.estimate(profit)
        rows.append(
            MonthlyRow(
                month=month,
                trips=len(m_trips),
                miles=miles,
                revenue=revenue,
                fuel=fuel,
                other_expenses=other,
                reserves=hidden,
                true_profit=profit,
                estimated_tax=est.estimated_tax,
                net=est.after_tax_profit,
            )
        )
    return rows


def monthly_report_frame(rows: Iterable[MonthlyRow]) -> pd.DataFrame:
    columns = [f.name for f in fields(MonthlyRow)]
    return pd.DataFrame([asdict(r) for r in rows], columns=columns)
