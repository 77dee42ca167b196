from __future__ import annotations

from datetime import date, timedelta

import pytest

from trucking_ledger.debts.schedule import apply_payment, payoff_order, schedule_payoff
from trucking_ledger.ledger.records import Debt

AS_OF = date(2026, 2, 28)


def _debts():
    a = Debt(id="A", creditor="Fellow Driver", amount=1_000, incurred=date(2024, 1, 1))
    b = Debt(id="B", creditor="Cousin", amount=2_000, incurred=date(2023, 1, 1), due=date(2024, 12, 31))
    c = Debt(id="C", creditor="Credit Card", amount=500, incurred=date(2025, 1, 1), high_interest=True)
    return [a, b, c]


def test_high_interest_then_overdue_then_amount():
    assert [d.id for d in payoff_order(_debts(), AS_OF)] == ["C", "B", "A"]


def test_remaining_ties_sort_smallest_first():
    debts = [
        Debt(id="big", creditor="x", amount=4_000, incurred=date(2024, 1, 1)),
        Debt(id="small", creditor="y", amount=1_000, incurred=date(2024, 1, 1)),
        Debt(id="mid", creditor="z", amount=2_000, incurred=date(2024, 1, 1)),
    ]
    assert [d.id for d in payoff_order(debts, AS_OF)] == ["small", "mid", "big"]


def test_sequential_schedule():
    plan = schedule_payoff(_debts(), monthly_budget=1_000, as_of=AS_OF)
    assert [e.debt.id for e in plan.entries] == ["C", "B", "A"]
    assert [e.months for e in plan.entries] == [1, 2, 1]
    assert [e.cumulative_months for e in plan.entries] == [1, 3, 4]
    assert [e.completion_date for e in plan.entries] == [
        AS_OF + timedelta(days=30),
        AS_OF + timedelta(days=90),
        AS_OF + timedelta(days=120),
    ]
    assert [e.overdue for e in plan.entries] == [False, True, False]
    assert plan.total_debt == 3_500.0
    assert plan.total_months == 4
    assert plan.debt_free_date == AS_OF + timedelta(days=120)


def test_schedule_is_monotonic():
    plan = schedule_payoff(_debts(), monthly_budget=300, as_of=AS_OF)
    cum = [e.cumulative_months for e in plan.entries]
    dates = [e.completion_date for e in plan.entries]
    assert cum == sorted(cum)
    assert dates == sorted(dates)
    assert plan.entries[-1].completion_date == plan.debt_free_date


def test_empty_schedule():
    plan = schedule_payoff([], monthly_budget=1_000, as_of=AS_OF)
    assert plan.entries == ()
    assert plan.total_months == 0
    assert plan.debt_free_date == AS_OF


def test_budget_must_be_positive():
    with pytest.raises(ValueError):
        schedule_payoff(_debts(), monthly_budget=0, as_of=AS_OF)


def test_partial_payment_reduces_amount():
    debts = apply_payment(_debts(), "B", 750)
    b = next(d for d in debts if d.id == "B")
    assert b.amount == 1_250.0
    assert len(debts) == 3


def test_payment_clearing_debt_removes_it():
    debts = apply_payment(_debts(), "C", 500)
    assert [d.id for d in debts] == ["A", "B"]


def test_overpayment_never_goes_negative():
    debts = apply_payment(_debts(), "A", 5_000)
    assert "A" not in {d.id for d in debts}
    assert all(d.amount >= 0 for d in debts)


def test_payment_errors():
    with pytest.raises(KeyError):
        apply_payment(_debts(), "nope", 100)
    with pytest.raises(ValueError):
        apply_payment(_debts(), "A", 0)


def test_input_records_untouched():
    debts = _debts()
    apply_payment(debts, "B", 750)
    assert debts[1].amount == 2_000


def test_payments_in_cents_clear_the_debt():
    debts = [Debt(id="A", creditor="Fellow Driver", amount=1.10, incurred=date(2024, 1, 1))]
    debts = apply_payment(debts, "A", 1.00)
    assert debts[0].amount == 0.1
    debts = apply_payment(debts, "A", 0.10)
    assert debts == []
