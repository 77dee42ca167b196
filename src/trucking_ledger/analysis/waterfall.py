from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FundingBucket:
    name: str
    amount: float
    filled: float

    @property
    def short(self) -> float:
        return max(0.0, self.amount - self.filled)

    @property
    def funded(self) -> bool:
        return self.filled >= self.amount


def funding_waterfall(
    *,
    revenue: float,
    business_costs: float,
    personal_costs: float,
    tax: float,
) -> tuple[FundingBucket, ...]:
    """
    Pours revenue through the obligation tiers in order: business (expenses + reserves),
    personal (debt service included), taxes, and whatever remains as surplus.
    """
    after_biz = revenue - business_costs
    after_personal = after_biz - personal_costs
    after_tax = after_personal - tax

    def fill(available: float, amount: float) -> float:
        return max(0.0, min(available, amount))

    surplus = max(0.0, after_tax)
    return (
        FundingBucket("Business", float(business_costs), float(fill(revenue, business_costs))),
        FundingBucket("Personal", float(personal_costs), float(fill(after_biz, personal_costs))),
        FundingBucket("Taxes", float(tax), float(fill(after_personal, tax))),
        FundingBucket("Surplus", float(surplus), float(surplus)),
    )
