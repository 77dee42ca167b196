from __future__ import annotations

import logging

from trucking_ledger.config import EngineConfig
from trucking_ledger.ledger.records import (
    Expense,
    ExpenseCategory,
    Trip,
    deadhead_expense_id,
    fuel_expense_id,
)

logger = logging.getLogger(__name__)


class RegionalFuelModel:
    """
    Diesel cost by pricing region. Routes that cross regions are priced at the mean of the
    origin, route-midpoint and destination prices. Unknown regions price at the national
    average; that is the defined behaviour, not an error.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    @property
    def average_price(self) -> float:
        return float(self.config.fuel_prices[self.config.average_region])

    def price_for(self, region: str | None) -> float:
        if region is None or region not in self.config.fuel_prices:
            if region is not None:
                logger.debug("unknown fuel region %r, using national average", region)
            return self.average_price
        return float(self.config.fuel_prices[region])

    def midpoint_for(self, origin: str | None, dest: str) -> str:
        key = (origin or self.config.average_region, dest)
        return self.config.route_midpoints.get(key, self.config.average_region)

    def route_price(self, origin: str | None, dest: str | None = None) -> float:
        o_price = self.price_for(origin)
        if not dest or dest == origin:
            return o_price
        m_price = self.price_for(self.midpoint_for(origin, dest))
        d_price = self.price_for(dest)
        return (o_price + m_price + d_price) / 3.0

    def fuel_cost(self, distance: float, origin: str | None, dest: str | None = None) -> float:
        if distance < 0:
            raise ValueError("distance must be >= 0")
        return (distance / self.config.mpg) * self.route_price(origin, dest)

    def region_label(self, region: str | None) -> str:
        r = region if region in self.config.fuel_prices else self.config.average_region
        label = self.config.region_labels.get(r, r)
        return f"{label} (${self.price_for(r):.2f}/gal)"

    def trip_expenses(self, trip: Trip) -> list[Expense]:
        """Fuel (and deadhead, if any) expenses generated from a trip, rounded to cents."""
        origin = trip.fuel_region or self.config.average_region
        cost = self.fuel_cost(trip.distance, origin, trip.dest_fuel_region)
        route = f"{trip.origin or '?'} -> {trip.destination or '?'}"
        prices = self.region_label(origin)
        if trip.dest_fuel_region:
            prices = f"{prices} -> {self.region_label(trip.dest_fuel_region)}"
        out = [
            Expense(
                id=fuel_expense_id(trip.id),
                date=trip.date,
                category=ExpenseCategory.FUEL,
                description=f"Fuel: {route} ({prices})",
                amount=round(cost, 2),
            )
        ]
        if trip.deadhead_miles > 0:
            # Empty miles are driven in the origin region.
            dh_cost = self.fuel_cost(trip.deadhead_miles, origin)
            out.append(
                Expense(
                    id=deadhead_expense_id(trip.id),
                    date=trip.date,
                    category=ExpenseCategory.DEADHEAD,
                    description=f"Deadhead (empty): {trip.deadhead_from or route} ({trip.deadhead_miles:g} mi)",
                    amount=round(dh_cost, 2),
                )
            )
        return out
