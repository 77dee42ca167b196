from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from trucking_ledger.analysis.tax import TaxEstimator
from trucking_ledger.config import EngineConfig
from trucking_ledger.costs.reserves import ReserveAccountant
from trucking_ledger.ledger.records import Expense, ExpenseCategory, Trip


@dataclass(frozen=True)
class TripBreakdown:
    trip_id: str
    payout: float
    rate_per_mile: float
    fuel: float
    deadhead: float
    depreciation: float
    maintenance_reserve: float
    dispatch_fee: float
    true_net: float
    estimated_tax: float
    after_tax: float
    duration_hours: float | None


def trip_breakdown(trip: Trip, expenses: Iterable[Expense], *, config: EngineConfig) -> TripBreakdown:
    linked = [e for e in expenses if e.trip_id == trip.id]
    fuel = math.fsum(e.amount for e in linked if e.category is ExpenseCategory.FUEL)
    deadhead = math.fsum(e.amount for e in linked if e.category is ExpenseCategory.DEADHEAD)

    reserves = ReserveAccountant(config)
    depr = reserves.depreciation(trip.distance)
    maint = reserves.maintenance_reserve(trip.distance)
    dispatch = trip.payout * config.dispatch_fee_rate
    true_net = trip.payout - fuel - deadhead - depr - maint - dispatch
    est = TaxEstimator.from_config(config).estimate(true_net)

    return TripBreakdown(
        trip_id=trip.id,
        payout=float(trip.payout),
        rate_per_mile=trip.rate_per_mile,
        fuel=fuel,
        deadhead=deadhead,
        depreciation=float(depr),
        maintenance_reserve=float(maint),
        dispatch_fee=float(dispatch),
        true_net=float(true_net),
        estimated_tax=est.estimated_tax,
        after_tax=est.after_tax_profit,
        duration_hours=trip.duration_hours,
    )
