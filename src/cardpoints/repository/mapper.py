import json
from datetime import datetime, timezone
from typing import Any

from cardpoints.domain.models import RewardConfig, RewardRule

# Flat reward columns written by older versions of the rules table.
_LEGACY_REWARD_COLUMNS = {
    "calculation_method": "calculationMethod",
    "base_multiplier": "baseMultiplier",
    "bonus_multiplier": "bonusMultiplier",
    "points_rounding_strategy": "pointsRoundingStrategy",
    "amount_rounding_strategy": "amountRoundingStrategy",
    "block_size": "blockSize",
    "bonus_tiers": "bonusTiers",
    "monthly_cap": "monthlyCap",
    "monthly_cap_type": "monthlyCapType",
    "cap_group_id": "capGroupId",
    "monthly_min_spend": "monthlyMinSpend",
    "monthly_spend_period_type": "monthlySpendPeriodType",
    "points_currency": "pointsCurrency",
}


def _decode(value: Any, default: Any) -> Any:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return json.loads(value)
    return value


def _legacy_reward(row: dict[str, Any]) -> dict[str, Any]:
    reward: dict[str, Any] = {}
    for column, key in _LEGACY_REWARD_COLUMNS.items():
        if row.get(column) is not None:
            reward[key] = _decode(row[column], []) if column == "bonus_tiers" else row[column]
    return reward


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return datetime.now(timezone.utc)


class RuleMapper:
    """Converts between stored rule rows and RewardRule models.

    Rows keep the condition tree and reward block as JSON strings. Rows that
    predate the ``reward`` column carry flat reward columns instead; both are
    read, only the JSON shape is written. Legacy condition and rounding shapes
    are normalized by model validation.
    """

    def row_to_rule(self, row: dict[str, Any]) -> RewardRule:
        reward = _decode(row.get("reward"), None)
        if reward is None:
            reward = _legacy_reward(row)

        created_at = _parse_timestamp(row.get("created_at"))
        return RewardRule(
            id=row["id"],
            product_id=row.get("product_id") or row.get("card_type_id"),
            name=row["name"],
            description=row.get("description") or "",
            enabled=True if row.get("enabled") is None else bool(row["enabled"]),
            priority=row.get("priority") or 0,
            conditions=_decode(row.get("conditions"), []),
            reward=RewardConfig.model_validate(reward),
            created_at=created_at,
            updated_at=_parse_timestamp(row.get("updated_at") or created_at),
        )

    def rule_to_row(self, rule: RewardRule) -> dict[str, Any]:
        return {
            "id": rule.id,
            "product_id": rule.product_id,
            "name": rule.name,
            "description": rule.description,
            "enabled": rule.enabled,
            "priority": rule.priority,
            "conditions": json.dumps(
                [
                    condition.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for condition in rule.conditions
                ]
            ),
            "reward": json.dumps(rule.reward.model_dump(mode="json", by_alias=True, exclude_none=True)),
            "created_at": rule.created_at.isoformat(),
            "updated_at": rule.updated_at.isoformat(),
        }
