from __future__ import annotations

import io
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import pandas as pd

from trucking_ledger.costs.fuel import RegionalFuelModel
from trucking_ledger.ledger.records import Expense, ExpenseCategory, Trip, fuel_expense_id

logger = logging.getLogger(__name__)

MANIFEST_COLUMNS = ["date", "origin", "destination", "miles", "pay", "broker"]
DEFAULT_BROKER = "Manifest Import"


@dataclass(frozen=True)
class ManifestImport:
    trips: tuple[Trip, ...]
    expenses: tuple[Expense, ...]
    skipped: int


def read_manifest(text: str) -> pd.DataFrame:
    """
    Parse `date,origin,destination,miles,pay,broker` rows into a string-typed frame.
    Header lines (starting with "date") are dropped; extra trailing fields are ignored.
    """
    if not text.strip():
        return pd.DataFrame(columns=MANIFEST_COLUMNS)
    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=MANIFEST_COLUMNS,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        skipinitialspace=True,
        engine="python",
        on_bad_lines=lambda fields: fields[: len(MANIFEST_COLUMNS)],
    )
    df = df.fillna("")
    for c in MANIFEST_COLUMNS:
        df[c] = df[c].astype(str).str.strip()
    header = df["date"].str.lower().str.startswith("date")
    return df.loc[~header].reset_index(drop=True)


def _row_date(value: str, default: date) -> date | None:
    if not value:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def import_manifest(
    text: str,
    *,
    fuel_model: RegionalFuelModel,
    today: date,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> ManifestImport:
    """
    Turn manifest rows into trips plus a national-average fuel expense per trip.
    Rows with fewer than five fields, missing or non-positive miles/pay, or a bad date
    are skipped whole and counted in `skipped`.
    """
    df = read_manifest(text)
    miles = pd.to_numeric(df["miles"], errors="coerce")
    pay = pd.to_numeric(df["pay"], errors="coerce")

    trips: list[Trip] = []
    expenses: list[Expense] = []
    skipped = 0
    for i, row in enumerate(df.itertuples(index=False)):
        m, p = miles.iloc[i], pay.iloc[i]
        d = _row_date(row.date, today)
        if pd.isna(m) or pd.isna(p) or m <= 0 or p <= 0 or d is None:
            skipped += 1
            continue

        trip_id = id_factory()
        trip = Trip(
            id=trip_id,
            date=d,
            load_id=f"MAN-{trip_id[:4].upper()}",
            broker=row.broker or DEFAULT_BROKER,
            distance=float(m),
            payout=float(p),
            origin=row.origin or None,
            destination=row.destination or None,
        )
        cost = fuel_model.fuel_cost(trip.distance, fuel_model.config.average_region)
        trips.append(trip)
        expenses.append(
            Expense(
                id=fuel_expense_id(trip_id),
                date=d,
                category=ExpenseCategory.FUEL,
                description=f"Fuel: {row.origin} -> {row.destination} (avg estimate)",
                amount=round(cost, 2),
            )
        )

    if skipped:
        logger.warning("manifest import skipped %d malformed row(s)", skipped)
    logger.info("manifest import: %d trip(s)", len(trips))
    return ManifestImport(trips=tuple(trips), expenses=tuple(expenses), skipped=skipped)
