from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ExpenseCategory(str, Enum):
    FUEL = "Fuel"
    DEADHEAD = "Deadhead"
    MAINTENANCE = "Maintenance"
    INSURANCE = "Insurance"
    TOLLS = "Tolls"
    OTHER = "Other"
    PERMITS = "Permits"
    TRUCK_PAYMENT = "Truck Payment"
    PARKING = "Parking"
    ELD = "ELD"
    LUMPER = "Lumper"
    IFTA = "IFTA"
    DISPATCH = "Dispatch"
    LOCK_BOX = "Lock Box"
    TRAILER = "Trailer"
    REGISTRATION = "Registration"
    FOOD = "Food"


DEBT_CATEGORY = "Debt"

_TRIP_EXPENSE_ID = re.compile(r"^(?:fuel|dh)-(.+)$")


def fuel_expense_id(trip_id: str) -> str:
    return f"fuel-{trip_id}"


def deadhead_expense_id(trip_id: str) -> str:
    return f"dh-{trip_id}"


def trip_id_for_expense(expense_id: str) -> str | None:
    """Trip id an expense was generated from, or None for standalone expenses."""
    m = _TRIP_EXPENSE_ID.match(expense_id)
    return m.group(1) if m else None


def parse_date(value: str | date, *, end_of_period: bool = False) -> date:
    """
    Accepts YYYY, YYYY-MM or YYYY-MM-DD. Partial dates resolve to the first day of the
    period, or to the last day when end_of_period is set (used for due dates).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    parts = s.split("-")
    try:
        if len(parts) == 1:
            year = int(parts[0])
            return date(year, 12, 31) if end_of_period else date(year, 1, 1)
        if len(parts) == 2:
            year, month = int(parts[0]), int(parts[1])
            day = calendar.monthrange(year, month)[1] if end_of_period else 1
            return date(year, month, day)
        return date.fromisoformat(s[:10])
    except ValueError as e:
        raise ValueError(f"invalid date: {value!r}") from e


@dataclass(frozen=True)
class Trip:
    id: str
    date: date
    load_id: str
    broker: str
    distance: float
    payout: float
    origin: str | None = None
    destination: str | None = None
    origin_coords: tuple[float, float] | None = None
    dest_coords: tuple[float, float] | None = None
    fuel_region: str | None = None
    dest_fuel_region: str | None = None
    deadhead_miles: float = 0.0
    deadhead_from: str | None = None
    departure: datetime | None = None
    arrival: datetime | None = None

    def __post_init__(self) -> None:
        if self.distance < 0:
            raise ValueError("distance must be >= 0")
        if self.payout < 0:
            raise ValueError("payout must be >= 0")
        if self.deadhead_miles < 0:
            raise ValueError("deadhead_miles must be >= 0")

    @property
    def rate_per_mile(self) -> float:
        # Derived on every read so edits to distance/payout can never leave it stale.
        if self.distance <= 0:
            return 0.0
        return self.payout / self.distance

    @property
    def duration_hours(self) -> float | None:
        if self.departure is None or self.arrival is None:
            return None
        return (self.arrival - self.departure).total_seconds() / 3600.0

    def is_pending(self, as_of: date) -> bool:
        return self.date > as_of


@dataclass(frozen=True)
class Expense:
    id: str
    date: date
    category: ExpenseCategory
    description: str
    amount: float

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        # Accept plain category strings from loaders.
        object.__setattr__(self, "category", ExpenseCategory(self.category))

    @property
    def trip_id(self) -> str | None:
        return trip_id_for_expense(self.id)


@dataclass(frozen=True)
class PersonalExpense:
    id: str
    category: str
    description: str
    monthly_amount: float

    @property
    def is_debt_service(self) -> bool:
        return self.category == DEBT_CATEGORY


@dataclass(frozen=True)
class Debt:
    id: str
    creditor: str
    amount: float
    incurred: date
    due: date | None = None
    note: str = ""
    high_interest: bool = False  # revolving / credit card

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("debt amount must be >= 0")

    def is_overdue(self, as_of: date) -> bool:
        return self.due is not None and self.due < as_of


def personal_monthly_total(personal: list[PersonalExpense]) -> float:
    return float(sum(p.monthly_amount for p in personal))


def debt_service_amount(personal: list[PersonalExpense]) -> float:
    return float(sum(p.monthly_amount for p in personal if p.is_debt_service))
