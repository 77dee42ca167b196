from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from trucking_ledger.ledger.records import Debt, Expense, PersonalExpense, Trip, parse_date

logger = logging.getLogger(__name__)

STORE_VERSION = 1


@dataclass(frozen=True)
class LedgerSnapshot:
    trips: tuple[Trip, ...] = ()
    expenses: tuple[Expense, ...] = ()
    personal: tuple[PersonalExpense, ...] = ()
    debts: tuple[Debt, ...] = ()


def _coords(v: Any) -> tuple[float, float] | None:
    if v is None:
        return None
    lat, lng = v
    return (float(lat), float(lng))


def _dt(v: str | None) -> datetime | None:
    return datetime.fromisoformat(v) if v else None


def trip_from_dict(d: dict[str, Any]) -> Trip:
    return Trip(
        id=str(d["id"]),
        date=parse_date(d["date"]),
        load_id=str(d.get("load_id", "")),
        broker=str(d.get("broker", "")),
        distance=float(d["distance"]),
        payout=float(d["payout"]),
        origin=d.get("origin"),
        destination=d.get("destination"),
        origin_coords=_coords(d.get("origin_coords")),
        dest_coords=_coords(d.get("dest_coords")),
        fuel_region=d.get("fuel_region"),
        dest_fuel_region=d.get("dest_fuel_region"),
        deadhead_miles=float(d.get("deadhead_miles") or 0.0),
        deadhead_from=d.get("deadhead_from"),
        departure=_dt(d.get("departure")),
        arrival=_dt(d.get("arrival")),
    )


def expense_from_dict(d: dict[str, Any]) -> Expense:
    return Expense(
        id=str(d["id"]),
        date=parse_date(d["date"]),
        category=d["category"],
        description=str(d.get("description", "")),
        amount=float(d["amount"]),
    )


def personal_from_dict(d: dict[str, Any]) -> PersonalExpense:
    return PersonalExpense(
        id=str(d["id"]),
        category=str(d["category"]),
        description=str(d.get("description", "")),
        monthly_amount=float(d["monthly_amount"]),
    )


def debt_from_dict(d: dict[str, Any]) -> Debt:
    due = d.get("due")
    return Debt(
        id=str(d["id"]),
        creditor=str(d["creditor"]),
        amount=float(d["amount"]),
        incurred=parse_date(d["incurred"]),
        due=parse_date(due, end_of_period=True) if due else None,
        note=str(d.get("note") or ""),
        high_interest=bool(d.get("high_interest", False)),
    )


def snapshot_from_dict(d: dict[str, Any]) -> LedgerSnapshot:
    return LedgerSnapshot(
        trips=tuple(trip_from_dict(x) for x in d.get("trips", [])),
        expenses=tuple(expense_from_dict(x) for x in d.get("expenses", [])),
        personal=tuple(personal_from_dict(x) for x in d.get("personal", [])),
        debts=tuple(debt_from_dict(x) for x in d.get("debts", [])),
    )


def jsonable(v: Any) -> Any:
    """Recursively convert dates and enums into JSON-friendly values."""
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, dict):
        return {k: jsonable(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [jsonable(x) for x in v]
    return v


def snapshot_to_dict(snapshot: LedgerSnapshot) -> dict[str, Any]:
    out: dict[str, Any] = {"version": STORE_VERSION}
    out.update(jsonable(asdict(snapshot)))
    return out


@dataclass
class JsonLedgerStore:
    """
    File-backed repository for ledger snapshots. Callers load a snapshot, hand it to the
    engine, and save edited copies back; the engine itself never touches the store.
    """

    path: str
    indent: int = 2

    def load(self) -> LedgerSnapshot:
        if not os.path.exists(self.path):
            logger.info("no ledger at %s, starting empty", self.path)
            return LedgerSnapshot()
        with open(self.path, encoding="utf-8") as f:
            d = json.load(f)
        if not isinstance(d, dict):
            raise ValueError(f"ledger file {self.path} must contain a JSON object")
        snap = snapshot_from_dict(d)
        logger.info(
            "loaded ledger %s: %d trips, %d expenses, %d debts",
            self.path,
            len(snap.trips),
            len(snap.expenses),
            len(snap.debts),
        )
        return snap

    def save(self, snapshot: LedgerSnapshot) -> None:
        d = os.path.dirname(self.path)
        if d:
            os.makedirs(d, exist_ok=True)
        tmp = f"{self.path}.tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(snapshot_to_dict(snapshot), f, indent=self.indent)
            os.replace(tmp, self.path)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.info("saved ledger %s", self.path)
