import logging
from collections.abc import Mapping
from typing import Any

from cardpoints.config import Settings
from cardpoints.domain.models import (
    CalculationInput,
    CalculationResult,
    EvaluationMode,
    RewardRule,
    RewardRuleDraft,
)
from cardpoints.engine.calculator import RewardCalculator
from cardpoints.presets.registry import CardPresetRegistry
from cardpoints.repository.auth import Authenticator, TokenAuthenticator
from cardpoints.repository.backends import JsonFileRuleBackend
from cardpoints.repository.rule_store import RuleStore
from cardpoints.tracking.sources import JsonFileTransactionSource
from cardpoints.tracking.spend_tracker import SpendTracker

logger = logging.getLogger(__name__)


class RewardOrchestrator:
    """Entry point for expense flows, the rule editor and card onboarding."""

    def __init__(
        self,
        rule_store: RuleStore,
        spend_tracker: SpendTracker,
        presets: CardPresetRegistry,
        default_mode: EvaluationMode = "first_match",
        product_modes: Mapping[str, EvaluationMode] | None = None,
    ):
        self.rule_store = rule_store
        self.spend_tracker = spend_tracker
        self.presets = presets
        self.calculator = RewardCalculator(spend_tracker)
        self.default_mode = default_mode
        self.product_modes = dict(product_modes or {})

    @classmethod
    def from_settings(
        cls, settings: Settings, authenticator: Authenticator | None = None
    ) -> "RewardOrchestrator":
        rule_store = RuleStore(
            JsonFileRuleBackend(settings.rule_store_file),
            authenticator or TokenAuthenticator(settings.api_tokens),
            ttl_seconds=settings.rule_cache_ttl_seconds,
        )
        spend_tracker = SpendTracker(
            JsonFileTransactionSource(settings.transaction_file),
            ttl_seconds=settings.spend_cache_ttl_seconds,
        )
        return cls(
            rule_store=rule_store,
            spend_tracker=spend_tracker,
            presets=CardPresetRegistry(),
            default_mode=settings.default_evaluation_mode,
            product_modes=settings.product_evaluation_modes,
        )

    def evaluation_mode_for(self, product_id: str) -> EvaluationMode:
        return self.product_modes.get(product_id, self.default_mode)

    async def calculate(self, transaction: CalculationInput) -> CalculationResult:
        rules = await self.rule_store.get_rules_for_product(transaction.product_id)
        return await self.calculator.calculate(
            transaction, rules, mode=self.evaluation_mode_for(transaction.product_id)
        )

    async def list_rules_for_product(self, product_id: str) -> list[RewardRule]:
        return await self.rule_store.get_rules_for_product(product_id)

    async def create_rule(
        self, data: RewardRuleDraft | dict[str, Any], credentials: str | None = None
    ) -> RewardRule:
        return await self.rule_store.create_rule(data, credentials)

    async def update_rule(self, rule: RewardRule, credentials: str | None = None) -> None:
        await self.rule_store.update_rule(rule, credentials)

    async def delete_rule(self, rule_id: str, credentials: str | None = None) -> None:
        await self.rule_store.delete_rule(rule_id, credentials)

    async def bootstrap_from_preset(
        self, product_id: str, preset_key: str, credentials: str | None = None
    ) -> int:
        """Replace the product's rules with the preset's starter rules."""
        drafts = self.presets.starter_rules(preset_key, product_id)

        self.rule_store.invalidate(product_id)
        existing = await self.rule_store.get_rules_for_product(product_id)
        for rule in existing:
            await self.rule_store.delete_rule(rule.id, credentials)
        for draft in drafts:
            await self.rule_store.create_rule(draft, credentials)

        logger.info(
            "seeded %d rule(s) for product %s from preset %s, replacing %d",
            len(drafts),
            product_id,
            preset_key,
            len(existing),
        )
        return len(drafts)

    async def bootstrap_if_available(
        self, product_id: str, issuer: str, name: str, credentials: str | None = None
    ) -> int:
        """Seed from the preset matching the card's issuer and name; 0 when none matches."""
        preset = self.presets.detect(issuer, name)
        if preset is None:
            logger.info("no preset for %s %s; product %s left unchanged", issuer, name, product_id)
            return 0
        return await self.bootstrap_from_preset(product_id, preset.key, credentials)
