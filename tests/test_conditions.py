import pytest

from cardpoints.domain.models import CalculationInput, RuleCondition
from cardpoints.engine.conditions import evaluate, matches_all


def txn(**fields) -> CalculationInput:
    return CalculationInput(**{"amount": 50, "product_id": "card-1", **fields})


def cond(type_: str, operation: str, values=None, subs=None) -> RuleCondition:
    return RuleCondition(type=type_, operation=operation, values=values or [], sub_conditions=subs or [])


def test_empty_condition_list_matches() -> None:
    assert matches_all([], txn())


@pytest.mark.parametrize(
    ("operation", "values", "expected"),
    [
        ("include", ["5812", "5814"], True),
        ("exclude", ["5812"], False),
        ("equals", ["5812"], True),
        ("not_equals", ["5411"], True),
        ("range", [5800, 5899], True),
        ("range", [3000, 3299], False),
    ],
)
def test_mcc_operations(operation, values, expected) -> None:
    assert evaluate(cond("mcc", operation, values), txn(mcc="5812")) is expected


@pytest.mark.parametrize(
    ("operation", "expected"),
    [("include", False), ("equals", False), ("range", False), ("exclude", True), ("not_equals", True)],
)
def test_missing_mcc(operation, expected) -> None:
    values = [1000, 9999] if operation == "range" else ["5812"]
    assert evaluate(cond("mcc", operation, values), txn()) is expected


def test_integer_mcc_is_read_as_text() -> None:
    assert evaluate(cond("mcc", "include", ["5411"]), txn(mcc=5411))


def test_currency_is_case_insensitive() -> None:
    condition = cond("currency", "exclude", ["sgd"])

    assert not evaluate(condition, txn(currency="SGD"))
    assert evaluate(condition, txn(currency="USD"))


def test_merchant_include_is_substring() -> None:
    condition = cond("merchant", "include", ["uber"])

    assert evaluate(condition, txn(merchant_name="UBER *EATS"))
    assert not evaluate(condition, txn(merchant_name="Grab"))
    assert not evaluate(condition, txn())


def test_merchant_exclude_passes_without_merchant() -> None:
    assert evaluate(cond("merchant", "exclude", ["amazon"]), txn())


def test_transaction_type_kinds() -> None:
    online = cond("transaction_type", "include", ["online"])
    contactless = cond("transaction_type", "equals", ["contactless"])
    in_store = cond("transaction_type", "include", ["in_store"])

    assert evaluate(online, txn(is_online=True))
    assert not evaluate(online, txn(is_online=False))
    assert evaluate(contactless, txn(is_contactless=True))
    assert evaluate(in_store, txn())
    assert evaluate(cond("transaction_type", "include", ["refund"]), txn(transaction_type="refund"))


@pytest.mark.parametrize(
    ("operation", "values", "expected"),
    [
        ("greater_than", [40], True),
        ("less_than", [40], False),
        ("range", [10, 50], True),
        ("range", [51, 100], False),
        ("equals", [50], True),
    ],
)
def test_amount_operations(operation, values, expected) -> None:
    assert evaluate(cond("amount", operation, values), txn()) is expected


def test_compound_any_and_all() -> None:
    online = cond("transaction_type", "include", ["online"])
    dining = cond("mcc", "include", ["5812"])

    any_of = cond("compound", "any", subs=[online, dining])
    all_of = cond("compound", "all", subs=[online, dining])

    assert evaluate(any_of, txn(mcc="5812"))
    assert not evaluate(all_of, txn(mcc="5812"))
    assert evaluate(all_of, txn(mcc="5812", is_online=True))


def test_empty_compound_matches() -> None:
    assert evaluate(cond("compound", "all"), txn())
    assert evaluate(cond("compound", "any"), txn())


def test_nested_compound() -> None:
    condition = RuleCondition.model_validate(
        {
            "type": "compound",
            "operation": "any",
            "subConditions": [
                {
                    "type": "compound",
                    "operation": "all",
                    "subConditions": [
                        {"type": "transaction_type", "operation": "equals", "values": ["online"]},
                        {"type": "mcc", "operation": "exclude", "values": ["4511"]},
                    ],
                },
                {"type": "mcc", "operation": "include", "values": ["5311"]},
            ],
        }
    )

    assert evaluate(condition, txn(is_online=True, mcc="5999"))
    assert not evaluate(condition, txn(is_online=True, mcc="4511"))
    assert evaluate(condition, txn(mcc="5311"))


def test_compound_rejects_leaf_operation() -> None:
    with pytest.raises(ValueError):
        RuleCondition(type="compound", operation="include")


def test_leaf_with_compound_operation_never_matches() -> None:
    assert not evaluate(cond("mcc", "all", ["5812"]), txn(mcc="5812"))


def test_legacy_online_false_becomes_exclusion() -> None:
    condition = RuleCondition.model_validate({"type": "online", "operation": "equals", "values": ["false"]})

    assert condition.type == "transaction_type"
    assert condition.operation == "exclude"
    assert evaluate(condition, txn(is_online=False))
    assert not evaluate(condition, txn(is_online=True))
