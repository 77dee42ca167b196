from __future__ import annotations

from dataclasses import dataclass

from trucking_ledger.config import EngineConfig


@dataclass(frozen=True)
class TaxEstimate:
    taxable_profit: float
    self_employment_tax: float
    income_tax: float
    estimated_tax: float
    after_tax_profit: float
    quarterly_payment: float


class TaxEstimator:
    """
    Flat 1099 approximation: self-employment rate + an income-tax bracket estimate, applied
    jointly to true profit floored at zero. No brackets, no quarterly carryover.
    """

    def __init__(self, *, self_employment_rate: float, income_rate: float) -> None:
        if self_employment_rate < 0 or income_rate < 0:
            raise ValueError("tax rates must be >= 0")
        self.self_employment_rate = float(self_employment_rate)
        self.income_rate = float(income_rate)

    @classmethod
    def from_config(cls, config: EngineConfig) -> TaxEstimator:
        return cls(self_employment_rate=config.self_employment_tax_rate, income_rate=config.income_tax_rate)

    @property
    def flat_rate(self) -> float:
        return self.self_employment_rate + self.income_rate

    def estimate(self, true_profit: float) -> TaxEstimate:
        # A loss produces no tax; it is never a rebate.
        taxable = max(0.0, float(true_profit))
        tax = taxable * self.flat_rate
        return TaxEstimate(
            taxable_profit=taxable,
            self_employment_tax=taxable * self.self_employment_rate,
            income_tax=taxable * self.income_rate,
            estimated_tax=tax,
            after_tax_profit=float(true_profit) - tax,
            quarterly_payment=tax / 4.0,
        )
