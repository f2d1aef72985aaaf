import pytest

from cardpoints.config import Settings
from cardpoints.domain.models import CalculationInput
from cardpoints.errors import AuthenticationError
from cardpoints.presets.registry import CardPresetRegistry
from cardpoints.repository.auth import StaticAuthenticator
from cardpoints.repository.backends import InMemoryRuleBackend
from cardpoints.repository.rule_store import RuleStore
from cardpoints.services.orchestrator import RewardOrchestrator
from cardpoints.tracking.sources import InMemoryTransactionSource
from cardpoints.tracking.spend_tracker import SpendTracker


def build(**kwargs) -> RewardOrchestrator:
    return RewardOrchestrator(
        rule_store=RuleStore(InMemoryRuleBackend(), StaticAuthenticator()),
        spend_tracker=SpendTracker(InMemoryTransactionSource()),
        presets=CardPresetRegistry(),
        **kwargs,
    )


async def test_bootstrap_then_calculate() -> None:
    orchestrator = build()

    created = await orchestrator.bootstrap_from_preset("my-td", "td-aeroplan-visa-infinite")
    result = await orchestrator.calculate(CalculationInput(amount=100, product_id="my-td", mcc="5541"))

    assert created == 2
    assert len(await orchestrator.list_rules_for_product("my-td")) == 2
    assert result.total_points == 150
    assert result.points_currency == "Aeroplan Points"


async def test_evaluation_mode_per_product() -> None:
    orchestrator = build(product_modes={"summed": "accumulate"})
    for product_id in ("summed", "first"):
        await orchestrator.bootstrap_from_preset(product_id, "td-aeroplan-visa-infinite")

    summed = await orchestrator.calculate(CalculationInput(amount=100, product_id="summed", mcc="5411"))
    first = await orchestrator.calculate(CalculationInput(amount=100, product_id="first", mcc="5411"))

    assert orchestrator.evaluation_mode_for("summed") == "accumulate"
    assert orchestrator.evaluation_mode_for("first") == "first_match"
    assert summed.total_points == 250
    assert first.total_points == 150


async def test_rule_lifecycle() -> None:
    orchestrator = build()

    rule = await orchestrator.create_rule({"product_id": "card-1", "name": "Base", "reward": {"base_multiplier": 2}})
    await orchestrator.update_rule(rule.model_copy(update={"enabled": False}))
    disabled = await orchestrator.calculate(CalculationInput(amount=10, product_id="card-1"))
    await orchestrator.delete_rule(rule.id)

    assert disabled.messages == ["No reward rules found for this card"]
    assert await orchestrator.list_rules_for_product("card-1") == []


async def test_from_settings_uses_json_files_and_tokens(tmp_path) -> None:
    settings = Settings(
        rule_store_file=str(tmp_path / "rules.json"),
        transaction_file=str(tmp_path / "transactions.json"),
        api_tokens={"s3cret": "alice"},
        default_evaluation_mode="accumulate",
    )
    orchestrator = RewardOrchestrator.from_settings(settings)

    with pytest.raises(AuthenticationError):
        await orchestrator.bootstrap_from_preset("card-1", "amex-cobalt")
    await orchestrator.bootstrap_from_preset("card-1", "amex-cobalt", "s3cret")

    assert (tmp_path / "rules.json").exists()
    assert orchestrator.evaluation_mode_for("card-1") == "accumulate"
    reloaded = RewardOrchestrator.from_settings(settings)
    assert [rule.name for rule in await reloaded.list_rules_for_product("card-1")] == ["Amex Cobalt Tiered Earning"]


async def test_bootstrap_twice_replaces_rules() -> None:
    orchestrator = build(product_modes={"my-td": "accumulate"})
    txn = CalculationInput(amount=100, product_id="my-td", mcc="5411")

    await orchestrator.bootstrap_from_preset("my-td", "td-aeroplan-visa-infinite")
    once = await orchestrator.calculate(txn)
    created = await orchestrator.bootstrap_from_preset("my-td", "td-aeroplan-visa-infinite")
    twice = await orchestrator.calculate(txn)

    assert created == 2
    assert len(await orchestrator.list_rules_for_product("my-td")) == 2
    assert once.total_points == twice.total_points == 250


async def test_bootstrap_switches_preset() -> None:
    orchestrator = build()
    await orchestrator.bootstrap_from_preset("card-1", "td-aeroplan-visa-infinite")

    await orchestrator.bootstrap_from_preset("card-1", "amex-cobalt")

    assert [rule.name for rule in await orchestrator.list_rules_for_product("card-1")] == ["Amex Cobalt Tiered Earning"]


async def test_bootstrap_if_available() -> None:
    orchestrator = build()

    unknown = await orchestrator.bootstrap_if_available("card-1", "Chase", "Sapphire Preferred")
    known = await orchestrator.bootstrap_if_available("card-2", "HSBC", "Revolution Visa Platinum")

    assert unknown == 0
    assert await orchestrator.list_rules_for_product("card-1") == []
    assert known == 2
    rules = await orchestrator.list_rules_for_product("card-2")
    assert {rule.reward.points_currency for rule in rules} == {"HSBC Points"}
