from __future__ import annotations

from dataclasses import dataclass

from trucking_ledger.config import EngineConfig


@dataclass(frozen=True)
class ReserveFund:
    name: str
    saved: float
    target: float
    percent: float


class ReserveAccountant:
    # Accruals: money that should be set aside, on top of tracked expenses.

    def __init__(self, config: EngineConfig) -> None:
        self.depreciation_rate = config.depreciation_rate
        self.maintenance_rate = config.maintenance_rate
        self._vehicle_value = config.vehicle_value
        self._tire_set_cost = config.tire_set_cost

    def depreciation(self, miles: float) -> float:
        return miles * self.depreciation_rate

    def maintenance_reserve(self, miles: float) -> float:
        return miles * self.maintenance_rate

    def total(self, miles: float) -> float:
        return self.depreciation(miles) + self.maintenance_reserve(miles)

    def reserve_funds(self, miles: float) -> tuple[ReserveFund, ReserveFund]:
        """Progress of the truck replacement and tire/maintenance funds toward their targets."""

        def fund(name: str, saved: float, target: float) -> ReserveFund:
            pct = min(100.0, saved / target * 100.0) if target > 0 else 100.0
            return ReserveFund(name=name, saved=float(saved), target=float(target), percent=float(pct))

        return (
            fund("Truck Replacement", self.depreciation(miles), self._vehicle_value),
            fund("Tires & Maintenance", self.maintenance_reserve(miles), self._tire_set_cost),
        )
