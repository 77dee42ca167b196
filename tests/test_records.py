from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from trucking_ledger.ledger.records import (
    Debt,
    Expense,
    ExpenseCategory,
    PersonalExpense,
    Trip,
    debt_service_amount,
    parse_date,
    personal_monthly_total,
    trip_id_for_expense,
)


def _trip(**kw):
    base = dict(id="t1", date=date(2026, 2, 9), load_id="SLC-AUS-001", broker="Spot", distance=1330, payout=2700)
    base.update(kw)
    return Trip(**base)


def test_rate_per_mile_derived_and_follows_edits():
    t = _trip()
    assert abs(t.rate_per_mile - 2700 / 1330) < 1e-12
    t2 = replace(t, payout=3000)
    assert abs(t2.rate_per_mile - 3000 / 1330) < 1e-12
    t3 = replace(t2, distance=1500)
    assert abs(t3.rate_per_mile - 2.0) < 1e-12


def test_zero_distance_rate_is_zero():
    assert _trip(distance=0).rate_per_mile == 0.0


def test_negative_values_rejected():
    with pytest.raises(ValueError):
        _trip(distance=-1)
    with pytest.raises(ValueError):
        _trip(payout=-5)
    with pytest.raises(ValueError):
        Expense(id="e", date=date(2026, 1, 1), category="Fuel", description="", amount=-1)
    with pytest.raises(ValueError):
        Debt(id="d", creditor="x", amount=-1, incurred=date(2024, 1, 1))


def test_pending_is_strictly_after_as_of():
    t = _trip(date=date(2026, 3, 1))
    assert t.is_pending(date(2026, 2, 28))
    assert not t.is_pending(date(2026, 3, 1))


def test_duration_hours():
    t = _trip(departure=datetime(2026, 2, 9, 6), arrival=datetime(2026, 2, 10, 18))
    assert t.duration_hours == 36.0
    assert _trip().duration_hours is None


def test_trip_expense_id_convention():
    assert trip_id_for_expense("fuel-t8") == "t8"
    assert trip_id_for_expense("dh-abc-123") == "abc-123"
    assert trip_id_for_expense("ins-feb") is None


def test_expense_category_from_string():
    e = Expense(id="e1", date=date(2026, 2, 1), category="Lock Box", description="", amount=100)
    assert e.category is ExpenseCategory.LOCK_BOX
    with pytest.raises(ValueError):
        Expense(id="e2", date=date(2026, 2, 1), category="Yacht", description="", amount=1)


def test_parse_partial_dates():
    assert parse_date("2024") == date(2024, 1, 1)
    assert parse_date("2024", end_of_period=True) == date(2024, 12, 31)
    assert parse_date("2024-02", end_of_period=True) == date(2024, 2, 29)
    assert parse_date("2026-02-09") == date(2026, 2, 9)
    with pytest.raises(ValueError):
        parse_date("soon")


def test_debt_overdue():
    d = Debt(id="d1", creditor="Cousin", amount=3500, incurred=date(2023, 1, 1), due=date(2024, 12, 31))
    assert d.is_overdue(date(2025, 1, 1))
    assert not d.is_overdue(date(2024, 12, 31))
    assert not replace(d, due=None).is_overdue(date(2030, 1, 1))


def test_personal_totals():
    personal = [
        PersonalExpense(id="p1", category="Housing", description="House", monthly_amount=2000),
        PersonalExpense(id="p7", category="Debt", description="Debt Payments", monthly_amount=1000),
    ]
    assert personal_monthly_total(personal) == 3000.0
    assert debt_service_amount(personal) == 1000.0
