from cardpoints.domain.models import (
    BonusTier,
    CalculationInput,
    CalculationResult,
    RewardConfig,
    RewardRule,
    RewardRuleDraft,
    RuleCondition,
)
from cardpoints.engine.calculator import RewardCalculator
from cardpoints.presets.registry import CardPresetRegistry
from cardpoints.repository.backends import InMemoryRuleBackend, JsonFileRuleBackend
from cardpoints.repository.rule_store import RuleStore
from cardpoints.services.orchestrator import RewardOrchestrator
from cardpoints.tracking.spend_tracker import SpendTracker

__all__ = [
    "BonusTier",
    "CalculationInput",
    "CalculationResult",
    "CardPresetRegistry",
    "InMemoryRuleBackend",
    "JsonFileRuleBackend",
    "RewardCalculator",
    "RewardConfig",
    "RewardOrchestrator",
    "RewardRule",
    "RewardRuleDraft",
    "RuleCondition",
    "RuleStore",
    "SpendTracker",
]
