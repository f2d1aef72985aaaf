import json
from datetime import datetime, timezone

from cardpoints.domain.models import RewardRule
from cardpoints.repository.mapper import RuleMapper


def test_row_round_trip() -> None:
    mapper = RuleMapper()
    rule = RewardRule.model_validate(
        {
            "product_id": "card-1",
            "name": "Online 10X",
            "priority": 10,
            "conditions": [{"type": "transaction_type", "operation": "include", "values": ["online"]}],
            "reward": {"bonus_multiplier": 9, "block_size": 5, "amount_rounding_strategy": "floor-to-block"},
        }
    )

    row = mapper.rule_to_row(rule)

    assert isinstance(row["conditions"], str)
    assert json.loads(row["reward"])["bonusMultiplier"] == 9
    assert mapper.row_to_rule(row) == rule


def test_legacy_row_with_flat_reward_columns() -> None:
    row = {
        "id": "r-1",
        "card_type_id": "amex-cobalt",
        "name": "Legacy",
        "enabled": 1,
        "priority": None,
        "conditions": json.dumps([{"type": "online", "operation": "equals", "values": ["true"]}]),
        "calculation_method": "standard",
        "base_multiplier": 1,
        "bonus_multiplier": 4,
        "amount_rounding_strategy": "floor5",
        "monthly_spend_period_type": "statement_month",
        "bonus_tiers": json.dumps([{"multiplier": 2, "minAmount": 10}]),
        "created_at": "2024-01-05T10:00:00Z",
    }

    rule = RuleMapper().row_to_rule(row)

    assert rule.product_id == "amex-cobalt"
    assert rule.priority == 0
    assert rule.conditions[0].type == "transaction_type"
    assert rule.conditions[0].values == ["online"]
    assert rule.reward.amount_rounding_strategy == "floor-to-block"
    assert rule.reward.spend_period_type == "statement"
    assert rule.reward.bonus_tiers[0].min_amount == 10
    assert rule.created_at == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)
    assert rule.updated_at == rule.created_at


def test_null_period_type_falls_back_to_calendar() -> None:
    row = {
        "id": "r-2",
        "product_id": "card-1",
        "name": "Nulls",
        "reward": json.dumps({"spendPeriodType": None, "monthlyCapType": None}),
    }

    rule = RuleMapper().row_to_rule(row)

    assert rule.reward.spend_period_type == "calendar"
    assert rule.reward.monthly_cap_type == "bonus_points"
    assert rule.enabled is True
