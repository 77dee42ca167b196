from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta

import numpy as np

from trucking_ledger.ledger.records import Debt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayoffEntry:
    debt: Debt
    overdue: bool
    months: int
    cumulative_months: int
    completion_date: date


@dataclass(frozen=True)
class PayoffPlan:
    monthly_budget: float
    entries: tuple[PayoffEntry, ...]
    total_debt: float
    total_months: int
    debt_free_date: date


def payoff_order(debts: Iterable[Debt], as_of: date) -> list[Debt]:
    """
    Avalanche order: high-interest (revolving) debt first, then overdue debt, then the
    remainder smallest balance first.
    """
    return sorted(debts, key=lambda d: (not d.high_interest, not d.is_overdue(as_of), d.amount))


def schedule_payoff(
    debts: Iterable[Debt],
    *,
    monthly_budget: float,
    as_of: date,
    days_per_month: int = 30,
) -> PayoffPlan:
    """
    Sequential payoff: the whole budget goes to one debt until it is cleared, then to the
    next. Completion dates use a fixed days_per_month, not calendar months.
    """
    if monthly_budget <= 0:
        raise ValueError("monthly_budget must be > 0")
    if days_per_month <= 0:
        raise ValueError("days_per_month must be > 0")

    ordered = payoff_order(debts, as_of)
    amounts = np.array([d.amount for d in ordered], dtype=float)
    months = np.ceil(amounts / monthly_budget).astype(int)
    cumulative = np.cumsum(months)

    entries = tuple(
        PayoffEntry(
            debt=d,
            overdue=d.is_overdue(as_of),
            months=int(m),
            cumulative_months=int(c),
            completion_date=as_of + timedelta(days=int(c) * days_per_month),
        )
        for d, m, c in zip(ordered, months, cumulative)
    )
    total_months = int(cumulative[-1]) if len(entries) else 0
    return PayoffPlan(
        monthly_budget=float(monthly_budget),
        entries=entries,
        total_debt=float(amounts.sum()),
        total_months=total_months,
        debt_free_date=as_of + timedelta(days=total_months * days_per_month),
    )


def apply_payment(debts: Iterable[Debt], debt_id: str, amount: float) -> list[Debt]:
    """
    Returns a new debt list with `amount` paid against `debt_id`. The balance never goes
    negative and is rounded to cents, and a debt paid down to zero is dropped from the list.
    """
    if amount <= 0:
        raise ValueError("payment amount must be > 0")
    debts = list(debts)
    out: list[Debt] = []
    found = False
    for d in debts:
        if d.id != debt_id:
            out.append(d)
            continue
        found = True
        remaining = max(0.0, round(d.amount - amount, 2))
        if remaining > 0:
            out.append(replace(d, amount=remaining))
        else:
            logger.info("debt %s (%s) paid off", d.id, d.creditor)
    if not found:
        raise KeyError(f"no debt with id {debt_id!r}")
    return out
