"""Pure mappings from legacy stored shapes to the current rule schema.

Older rule records carry an ``online`` condition type with boolean values,
``floor5`` amount rounding and ``*_month`` period names. These are rewritten
before validation so the evaluator and calculator only ever see current shapes.
"""

from typing import Any

_AMOUNT_ROUNDING = {"floor5": "floor-to-block"}
_PERIOD_TYPES = {"statement_month": "statement", "calendar_month": "calendar"}


def _is_true(value: Any) -> bool:
    return str(value).strip().lower() == "true"


def _is_false(value: Any) -> bool:
    return str(value).strip().lower() == "false"


def normalize_condition(raw: dict[str, Any]) -> dict[str, Any]:
    condition = dict(raw)

    if condition.get("type") == "online":
        values = list(condition.get("values") or [])
        if condition.get("operation") == "equals" and values:
            if _is_true(values[0]):
                return {**condition, "type": "transaction_type", "operation": "include", "values": ["online"]}
            if _is_false(values[0]):
                return {**condition, "type": "transaction_type", "operation": "exclude", "values": ["online"]}
        condition["type"] = "transaction_type"

    for key in ("subConditions", "sub_conditions"):
        if condition.get(key):
            condition[key] = [
                normalize_condition(sub) if isinstance(sub, dict) else sub for sub in condition[key]
            ]

    return condition


def normalize_period_type(value: Any) -> Any:
    return _PERIOD_TYPES.get(value, value)


def normalize_reward(raw: dict[str, Any]) -> dict[str, Any]:
    reward = dict(raw)

    for key in ("amountRoundingStrategy", "amount_rounding_strategy"):
        if key in reward:
            reward[key] = _AMOUNT_ROUNDING.get(reward[key], reward[key])

    if "monthlySpendPeriodType" in reward and "spendPeriodType" not in reward:
        reward["spendPeriodType"] = reward.pop("monthlySpendPeriodType")
    for key in ("spendPeriodType", "spend_period_type"):
        if reward.get(key) is not None:
            reward[key] = normalize_period_type(reward[key])

    return reward
