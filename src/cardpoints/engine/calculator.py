"""Points calculation for one transaction against a card product's rules.

Rules are walked highest priority first. In ``first_match`` mode the first
rule that matches and clears its minimum-spend gate decides the result; in
``accumulate`` mode every such rule contributes. Arithmetic runs on Decimal:
the amount is rounded before multiplier math, points are rounded after.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from cardpoints.domain.models import (
    BonusTier,
    CalculationInput,
    CalculationResult,
    EvaluationMode,
    RewardRule,
)
from cardpoints.engine.conditions import matches_all
from cardpoints.engine.rounding import block_points, round_amount, to_decimal
from cardpoints.engine.selectors import order_rules, select_tier
from cardpoints.tracking.spend_tracker import SpendTracker

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


@dataclass
class RuleOutcome:
    rule: RewardRule
    base_points: Decimal
    bonus_points: Decimal
    tier: BonusTier | None = None
    remaining_cap: Decimal | None = None
    messages: list[str] = field(default_factory=list)


def _fmt(value: Decimal | float) -> str:
    return f"{float(value):g}"


class RewardCalculator:
    def __init__(self, spend_tracker: SpendTracker | None = None):
        self.spend_tracker = spend_tracker

    async def calculate(
        self,
        transaction: CalculationInput,
        rules: Sequence[RewardRule],
        mode: EvaluationMode = "first_match",
    ) -> CalculationResult:
        ordered = order_rules(rules)
        if not ordered:
            logger.info("no enabled reward rules for product %s", transaction.product_id)
            return CalculationResult(
                points_currency=transaction.points_currency,
                messages=["No reward rules found for this card"],
            )

        messages: list[str] = []
        min_spend_met = True
        outcomes: list[RuleOutcome] = []
        granted: dict[str, Decimal] = {}
        spend_by_period: dict[str, Decimal] = {}

        for rule in ordered:
            if not matches_all(rule.conditions, transaction):
                logger.debug("rule %s (%s) does not match", rule.id, rule.name)
                continue

            reward = rule.reward
            period_spend = ZERO
            if reward.monthly_min_spend is not None or reward.bonus_tiers:
                period_spend = await self._period_spend(transaction, reward.spend_period_type, spend_by_period)

            if reward.monthly_min_spend is not None and period_spend < to_decimal(reward.monthly_min_spend):
                min_spend_met = False
                messages.append(
                    f"Monthly minimum spend of {_fmt(reward.monthly_min_spend)} not met for '{rule.name}'"
                )
                logger.debug("rule %s skipped: period spend %s below minimum", rule.id, period_spend)
                continue

            outcome = await self._apply_rule(rule, transaction, period_spend, granted)
            outcomes.append(outcome)
            messages.extend(outcome.messages)

            if mode == "first_match":
                break

        if not outcomes:
            return CalculationResult(
                points_currency=transaction.points_currency,
                min_spend_met=min_spend_met,
                messages=messages + ["No matching reward rule for this transaction"],
            )

        base_points = sum((outcome.base_points for outcome in outcomes), ZERO)
        bonus_points = sum((outcome.bonus_points for outcome in outcomes), ZERO)
        remaining = [outcome.remaining_cap for outcome in outcomes if outcome.remaining_cap is not None]
        primary = outcomes[0]

        logger.info(
            "product %s: rule %s applied, base=%s bonus=%s",
            transaction.product_id,
            primary.rule.id,
            base_points,
            bonus_points,
        )
        return CalculationResult(
            base_points=float(base_points),
            bonus_points=float(bonus_points),
            total_points=float(base_points + bonus_points),
            points_currency=primary.rule.reward.points_currency,
            min_spend_met=min_spend_met,
            remaining_monthly_bonus=float(min(remaining)) if remaining else None,
            applied_rule=primary.rule,
            applied_tier=primary.tier,
            applied_rules=[outcome.rule for outcome in outcomes],
            messages=messages,
        )

    async def _period_spend(
        self, transaction: CalculationInput, period_type: str, memo: dict[str, Decimal]
    ) -> Decimal:
        if transaction.monthly_spend is not None:
            return to_decimal(transaction.monthly_spend)
        if period_type not in memo:
            total = 0.0
            if self.spend_tracker is not None and transaction.payment_method_id:
                total = await self.spend_tracker.get_period_total(
                    transaction.payment_method_id,
                    period_type,
                    transaction.date,
                    transaction.statement_day,
                    exclude_transaction_id=transaction.transaction_id,
                )
            memo[period_type] = to_decimal(total)
        return memo[period_type]

    async def _cap_usage(self, rule: RewardRule, transaction: CalculationInput) -> Decimal:
        reward = rule.reward
        if reward.monthly_cap_type == "spend_amount":
            supplied = transaction.used_cap_spend
        else:
            supplied = transaction.used_bonus_points
        if supplied is not None:
            return to_decimal(supplied)
        if self.spend_tracker is None or not transaction.payment_method_id:
            return ZERO

        used = await self.spend_tracker.get_period_total(
            transaction.payment_method_id,
            reward.spend_period_type,
            transaction.date,
            transaction.statement_day,
            metric="spend" if reward.monthly_cap_type == "spend_amount" else "bonus_points",
            rule_id=rule.cap_key,
            exclude_transaction_id=transaction.transaction_id,
        )
        return to_decimal(used)

    def _bonus(self, rule: RewardRule, amount: Decimal, tier: BonusTier | None) -> Decimal:
        reward = rule.reward
        flat = ZERO
        if reward.bonus_multiplier > 0:
            flat = block_points(amount, reward.block_size, reward.bonus_multiplier, reward.points_rounding_strategy)
        if tier is None:
            return flat

        tier_points = block_points(amount, reward.block_size, tier.multiplier, reward.points_rounding_strategy)
        if reward.tier_mode == "replace":
            return tier_points
        return flat + tier_points

    async def _apply_rule(
        self,
        rule: RewardRule,
        transaction: CalculationInput,
        period_spend: Decimal,
        granted: dict[str, Decimal],
    ) -> RuleOutcome:
        reward = rule.reward
        amount = round_amount(
            transaction.calculation_amount, reward.amount_rounding_strategy, reward.amount_block_size
        )

        if reward.calculation_method == "standard":
            base = block_points(amount, reward.block_size, reward.base_multiplier, reward.points_rounding_strategy)
        elif reward.calculation_method == "direct":
            base = amount * to_decimal(reward.base_multiplier)
        elif reward.calculation_method == "flat_rate":
            base = to_decimal(reward.base_multiplier)
        else:
            base = ZERO

        tier = None
        if reward.bonus_tiers:
            tier = select_tier(reward.bonus_tiers, float(amount), float(period_spend), transaction)

        outcome = RuleOutcome(rule=rule, base_points=base, bonus_points=self._bonus(rule, amount, tier), tier=tier)
        if reward.monthly_cap is not None:
            await self._apply_cap(outcome, transaction, amount, granted)
        return outcome

    async def _apply_cap(
        self,
        outcome: RuleOutcome,
        transaction: CalculationInput,
        amount: Decimal,
        granted: dict[str, Decimal],
    ) -> None:
        rule = outcome.rule
        reward = rule.reward
        cap_key = f"{rule.cap_key}:{reward.monthly_cap_type}"

        used = await self._cap_usage(rule, transaction) + granted.get(cap_key, ZERO)
        available = max(ZERO, to_decimal(reward.monthly_cap) - used)
        uncapped = outcome.bonus_points

        if reward.monthly_cap_type == "spend_amount":
            eligible = min(amount, available) if amount > 0 else amount
            if eligible != amount:
                outcome.bonus_points = self._bonus(rule, eligible, outcome.tier)
            consumed = max(eligible, ZERO)
            outcome.remaining_cap = available - consumed
            limited = eligible < amount
        else:
            outcome.bonus_points = min(uncapped, available)
            consumed = max(outcome.bonus_points, ZERO)
            outcome.remaining_cap = available - consumed
            limited = outcome.bonus_points < uncapped

        granted[cap_key] = granted.get(cap_key, ZERO) + consumed

        if available <= 0:
            outcome.messages.append("Monthly bonus cap reached")
        elif limited:
            outcome.messages.append(
                f"Bonus points capped at {_fmt(outcome.bonus_points)}: monthly bonus cap reached"
            )
