"""Condition-tree matching against a transaction snapshot.

Leaves compare one transaction field against the condition's values. When the
transaction does not carry the field (no MCC, no merchant name, no category),
positive operations fail and negative ones pass: a missing value can never
prove that an exclusion applies.
"""

from collections.abc import Iterable

from cardpoints.domain.models import CalculationInput, RuleCondition

_NEGATIVE_OPERATIONS = {"exclude", "not_equals"}


def matches_all(conditions: Iterable[RuleCondition], transaction: CalculationInput) -> bool:
    """Top-level rule conditions are AND-ed; an empty list matches everything."""
    return all(evaluate(condition, transaction) for condition in conditions)


def evaluate(condition: RuleCondition, transaction: CalculationInput) -> bool:
    if condition.type == "compound":
        return _evaluate_compound(condition, transaction)
    if condition.operation in ("all", "any"):
        return False

    if condition.type == "mcc":
        return _evaluate_mcc(condition, transaction.mcc)
    if condition.type == "transaction_type":
        return _evaluate_transaction_type(condition, transaction)
    if condition.type == "currency":
        return _evaluate_text(condition, transaction.currency)
    if condition.type == "category":
        return _evaluate_text(condition, transaction.category)
    if condition.type == "merchant":
        return _evaluate_merchant(condition, transaction.merchant_name)
    if condition.type == "amount":
        return _evaluate_amount(condition, transaction.amount)
    return False


def _evaluate_compound(condition: RuleCondition, transaction: CalculationInput) -> bool:
    if not condition.sub_conditions:
        return True
    results = (evaluate(sub, transaction) for sub in condition.sub_conditions)
    if condition.operation == "any":
        return any(results)
    return all(results)


def _missing(condition: RuleCondition) -> bool:
    return condition.operation in _NEGATIVE_OPERATIONS


def _membership(condition: RuleCondition, found: bool, first: bool) -> bool:
    op = condition.operation
    if op == "include":
        return found
    if op == "exclude":
        return not found
    if op == "equals":
        return first
    if op == "not_equals":
        return not first
    return False


def _evaluate_mcc(condition: RuleCondition, mcc: str | None) -> bool:
    if not mcc:
        return _missing(condition)

    values = [str(v).strip() for v in condition.values]
    if condition.operation == "range":
        return _in_range(condition.values, mcc)
    return _membership(condition, mcc in values, bool(values) and values[0] == mcc)


def _evaluate_text(condition: RuleCondition, actual: str | None) -> bool:
    if not actual:
        return _missing(condition)

    needle = actual.strip().upper()
    values = [str(v).strip().upper() for v in condition.values]
    return _membership(condition, needle in values, bool(values) and values[0] == needle)


def _evaluate_merchant(condition: RuleCondition, merchant_name: str | None) -> bool:
    if not merchant_name:
        return _missing(condition)

    merchant = merchant_name.lower()
    values = [str(v).lower() for v in condition.values if str(v)]
    found = any(v in merchant for v in values)
    return _membership(condition, found, bool(values) and values[0] == merchant.strip())


def _transaction_kinds(transaction: CalculationInput) -> set[str]:
    kinds = {transaction.transaction_type}
    if transaction.is_online:
        kinds.add("online")
    else:
        kinds.add("in_store")
    if transaction.is_contactless:
        kinds.add("contactless")
    return kinds


def _evaluate_transaction_type(condition: RuleCondition, transaction: CalculationInput) -> bool:
    kinds = _transaction_kinds(transaction)
    values = [str(v).strip().lower() for v in condition.values]
    found = any(v in kinds for v in values)
    return _membership(condition, found, bool(values) and values[0] in kinds)


def _as_number(value) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _in_range(bounds: list, actual) -> bool:
    number = _as_number(actual)
    if number is None or len(bounds) < 2:
        return False
    low, high = _as_number(bounds[0]), _as_number(bounds[1])
    if low is None or high is None:
        return False
    return low <= number <= high


def _evaluate_amount(condition: RuleCondition, amount: float) -> bool:
    op = condition.operation
    numbers = [n for n in (_as_number(v) for v in condition.values) if n is not None]

    if op == "range":
        return _in_range(condition.values, amount)
    if op == "greater_than":
        return bool(numbers) and amount > numbers[0]
    if op == "less_than":
        return bool(numbers) and amount < numbers[0]
    return _membership(condition, amount in numbers, bool(numbers) and amount == numbers[0])
