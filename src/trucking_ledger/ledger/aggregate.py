from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from trucking_ledger.ledger.records import Expense, ExpenseCategory, Trip


@dataclass(frozen=True)
class LedgerTotals:
    realized_revenue: float
    pending_revenue: float
    realized_miles: float
    deadhead_miles: float
    realized_expenses: float
    realized_trip_count: int
    pending_trip_count: int
    expenses_by_category: Mapping[str, float] = field(default_factory=dict)

    def category_total(self, *categories: str | ExpenseCategory) -> float:
        keys = {c.value if isinstance(c, ExpenseCategory) else c for c in categories}
        return math.fsum(self.expenses_by_category.get(k, 0.0) for k in keys)

    @property
    def fuel_expense(self) -> float:
        return self.category_total(ExpenseCategory.FUEL)

    @property
    def average_trip_miles(self) -> float:
        if self.realized_trip_count == 0:
            return 0.0
        return self.realized_miles / self.realized_trip_count


def split_pending(trips: Iterable[Trip], as_of: date) -> tuple[list[Trip], list[Trip]]:
    """(realized, pending) trips relative to as_of."""
    realized: list[Trip] = []
    pending: list[Trip] = []
    for t in trips:
        (pending if t.is_pending(as_of) else realized).append(t)
    return realized, pending


def realized_expenses(expenses: Iterable[Expense], trips: Iterable[Trip], as_of: date) -> list[Expense]:
    # Expenses generated from a pending trip stay out so forecast trips are revenue-neutral.
    pending_ids = {t.id for t in trips if t.is_pending(as_of)}
    return [e for e in expenses if e.trip_id is None or e.trip_id not in pending_ids]


def aggregate(trips: Iterable[Trip], expenses: Iterable[Expense], as_of: date) -> LedgerTotals:
    trips = list(trips)
    realized, pending = split_pending(trips, as_of)
    exps = realized_expenses(expenses, trips, as_of)

    # fsum keeps the totals independent of record order.
    amounts: dict[str, list[float]] = {}
    for e in exps:
        amounts.setdefault(e.category.value, []).append(e.amount)

    return LedgerTotals(
        realized_revenue=math.fsum(t.payout for t in realized),
        pending_revenue=math.fsum(t.payout for t in pending),
        realized_miles=math.fsum(t.distance for t in realized),
        deadhead_miles=math.fsum(t.deadhead_miles for t in realized),
        realized_expenses=math.fsum(e.amount for e in exps),
        realized_trip_count=len(realized),
        pending_trip_count=len(pending),
        expenses_by_category={cat: math.fsum(v) for cat, v in amounts.items()},
    )
