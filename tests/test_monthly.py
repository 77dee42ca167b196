from __future__ import annotations

import math
from datetime import date

from trucking_ledger.analysis.monthly import build_monthly_report, monthly_report_frame
from trucking_ledger.config import EngineConfig
from trucking_ledger.ledger.aggregate import aggregate
from trucking_ledger.ledger.records import Expense, Trip

AS_OF = date(2026, 4, 15)


def _ledger():
    trips = [
        Trip(id="t1", date=date(2026, 1, 20), load_id="A", broker="Spot", distance=1_000, payout=2_500),
        Trip(id="t2", date=date(2026, 2, 9), load_id="B", broker="Spot", distance=1_330, payout=2_700),
        Trip(id="t3", date=date(2026, 2, 27), load_id="C", broker="Spot", distance=1_620, payout=3_400),
        Trip(id="t9", date=date(2026, 5, 2), load_id="D", broker="TQL", distance=900, payout=2_000),
    ]
    expenses = [
        Expense(id="fuel-t1", date=date(2026, 1, 20), category="Fuel", description="", amount=550.0),
        Expense(id="fuel-t2", date=date(2026, 2, 9), category="Fuel", description="", amount=700.0),
        Expense(id="dh-t3", date=date(2026, 2, 27), category="Deadhead", description="", amount=17.0),
        Expense(id="ins-feb", date=date(2026, 2, 1), category="Insurance", description="", amount=2_400.0),
        Expense(id="reg-apr", date=date(2026, 4, 1), category="Registration", description="", amount=133.33),
        Expense(id="fuel-t9", date=date(2026, 5, 2), category="Fuel", description="", amount=495.0),
    ]
    return trips, expenses


def test_rows_only_for_months_with_data():
    trips, expenses = _ledger()
    rows = build_monthly_report(trips, expenses, as_of=AS_OF, config=EngineConfig())
    # March has nothing; May only holds a pending trip.
    assert [r.month for r in rows] == ["2026-01", "2026-02", "2026-04"]


def test_monthly_row_values():
    cfg = EngineConfig()
    trips, expenses = _ledger()
    jan, feb, apr = build_monthly_report(trips, expenses, as_of=AS_OF, config=cfg)

    assert feb.trips == 2
    assert feb.miles == 2_950.0
    assert feb.revenue == 6_100.0
    assert feb.fuel == 717.0
    assert feb.other_expenses == 2_400.0
    hidden = 2_950 * (cfg.depreciation_rate + cfg.maintenance_rate)
    assert abs(feb.reserves - hidden) < 1e-9
    assert abs(feb.true_profit - (6_100 - 717 - 2_400 - hidden)) < 1e-9
    assert abs(feb.estimated_tax - max(0.0, feb.true_profit) * 0.273) < 1e-9
    assert abs(feb.net - (feb.true_profit - feb.estimated_tax)) < 1e-9

    # Expense-only month: a loss, so no tax.
    assert apr.trips == 0 and apr.revenue == 0.0
    assert apr.estimated_tax == 0.0
    assert abs(apr.net + 133.33) < 1e-9


def test_partition_matches_realized_revenue():
    cfg = EngineConfig()
    trips, expenses = _ledger()
    rows = build_monthly_report(trips, expenses, as_of=AS_OF, config=cfg)
    totals = aggregate(trips, expenses, AS_OF)
    assert math.fsum(r.revenue for r in rows) == totals.realized_revenue
    assert math.fsum(r.miles for r in rows) == totals.realized_miles
    assert sum(r.trips for r in rows) == totals.realized_trip_count
    assert abs(math.fsum(r.fuel + r.other_expenses for r in rows) - totals.realized_expenses) < 1e-9


def test_pending_month_appears_once_realized():
    trips, expenses = _ledger()
    rows = build_monthly_report(trips, expenses, as_of=date(2026, 5, 31), config=EngineConfig())
    may = rows[-1]
    assert may.month == "2026-05"
    assert may.revenue == 2_000.0
    assert may.fuel == 495.0


def test_report_frame():
    trips, expenses = _ledger()
    rows = build_monthly_report(trips, expenses, as_of=AS_OF, config=EngineConfig())
    df = monthly_report_frame(rows)
    assert list(df["month"]) == ["2026-01", "2026-02", "2026-04"]
    assert "estimated_tax" in df.columns
    assert monthly_report_frame([]).empty
