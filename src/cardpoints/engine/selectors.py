from collections.abc import Iterable

from cardpoints.domain.models import BonusTier, CalculationInput, RewardRule
from cardpoints.engine.conditions import evaluate


def order_rules(rules: Iterable[RewardRule]) -> list[RewardRule]:
    """Enabled rules, highest priority first; equal priorities keep their stored order."""
    ordered = [rule for rule in rules if rule.enabled]
    ordered.sort(key=lambda rule: rule.priority, reverse=True)
    return ordered


def select_tier(
    tiers: Iterable[BonusTier],
    amount: float,
    period_spend: float,
    transaction: CalculationInput,
) -> BonusTier | None:
    for tier in sorted(tiers, key=lambda item: item.priority):
        if tier.min_amount is not None and amount < tier.min_amount:
            continue
        if tier.max_amount is not None and amount > tier.max_amount:
            continue
        if tier.min_spend is not None and period_spend < tier.min_spend:
            continue
        if tier.max_spend is not None and period_spend > tier.max_spend:
            continue
        if tier.condition is not None and not evaluate(tier.condition, transaction):
            continue
        return tier
    return None
