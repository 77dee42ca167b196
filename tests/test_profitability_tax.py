from __future__ import annotations

import pytest

from trucking_ledger.analysis.profitability import analyze_profitability
from trucking_ledger.analysis.tax import TaxEstimator
from trucking_ledger.config import EngineConfig
from trucking_ledger.ledger.aggregate import LedgerTotals


def _totals(revenue: float, expenses: float, miles: float) -> LedgerTotals:
    return LedgerTotals(
        realized_revenue=revenue,
        pending_revenue=0.0,
        realized_miles=miles,
        deadhead_miles=0.0,
        realized_expenses=expenses,
        realized_trip_count=1,
        pending_trip_count=0,
    )


def test_cash_and_true_profit():
    cfg = EngineConfig()
    p = analyze_profitability(_totals(16_750, 9_000, 8_110), config=cfg)
    assert p.cash_profit == 7_750.0
    assert abs(p.depreciation - 8_110 * 85_000 / 360_000) < 1e-9
    assert abs(p.maintenance_reserve - 8_110 * 0.15) < 1e-9
    assert abs(p.true_profit - (7_750 - p.depreciation - p.maintenance_reserve)) < 1e-9
    assert abs(p.fixed_wage_equivalent - 8_110 * 0.65) < 1e-9
    assert p.exceeds_fixed_wage is False


def test_exceeds_fixed_wage_is_strict():
    # No miles: zero reserves and zero wage equivalent, so true profit == cash profit.
    cfg = EngineConfig()
    assert analyze_profitability(_totals(100, 100, 0), config=cfg).exceeds_fixed_wage is False
    assert analyze_profitability(_totals(101, 100, 0), config=cfg).exceeds_fixed_wage is True


def test_profitability_is_repeatable():
    cfg = EngineConfig()
    t = _totals(5_000, 1_000, 2_000)
    assert analyze_profitability(t, config=cfg) == analyze_profitability(t, config=cfg)


def test_tax_floor_on_loss():
    est = TaxEstimator.from_config(EngineConfig()).estimate(-500.0)
    assert est.estimated_tax == 0.0
    assert est.after_tax_profit == -500.0
    assert est.quarterly_payment == 0.0


def test_tax_rates_applied_jointly_and_exposed_separately():
    tax = TaxEstimator(self_employment_rate=0.153, income_rate=0.12)
    assert abs(tax.flat_rate - 0.273) < 1e-12
    est = tax.estimate(10_000)
    assert abs(est.self_employment_tax - 1_530) < 1e-9
    assert abs(est.income_tax - 1_200) < 1e-9
    assert abs(est.estimated_tax - 2_730) < 1e-9
    assert abs(est.after_tax_profit - 7_270) < 1e-9
    assert abs(est.quarterly_payment - 682.5) < 1e-9


def test_negative_tax_rate_rejected():
    with pytest.raises(ValueError):
        TaxEstimator(self_employment_rate=-0.1, income_rate=0.1)
