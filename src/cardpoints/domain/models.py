import datetime
import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from cardpoints.domain.legacy import normalize_condition, normalize_reward

ConditionType = Literal["mcc", "transaction_type", "currency", "merchant", "category", "amount", "compound"]
ConditionOperation = Literal[
    "include", "exclude", "equals", "not_equals", "range", "greater_than", "less_than", "all", "any"
]
CalculationMethod = Literal["standard", "tiered", "flat_rate", "direct"]
PointsRounding = Literal["floor", "ceiling", "nearest"]
AmountRounding = Literal["none", "floor", "ceiling", "nearest", "floor-to-block"]
SpendPeriodType = Literal["calendar", "statement"]
CapType = Literal["bonus_points", "spend_amount"]
TierMode = Literal["add", "replace"]
TransactionKind = Literal["purchase", "refund", "adjustment"]
EvaluationMode = Literal["first_match", "accumulate"]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuleCondition(CamelModel):
    type: ConditionType
    operation: ConditionOperation
    values: list[str | int | float] = Field(default_factory=list)
    sub_conditions: list["RuleCondition"] = Field(default_factory=list)
    display_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_condition(data)
        return data

    @model_validator(mode="after")
    def _check_compound(self) -> "RuleCondition":
        if self.type == "compound" and self.operation not in ("all", "any"):
            raise ValueError(f"compound condition needs 'all' or 'any', got '{self.operation}'")
        return self


class BonusTier(CamelModel):
    min_amount: float | None = None
    max_amount: float | None = None
    min_spend: float | None = None
    max_spend: float | None = None
    multiplier: float
    priority: int = 0
    name: str | None = None
    description: str | None = None
    condition: RuleCondition | None = None


class RewardConfig(CamelModel):
    calculation_method: CalculationMethod = "standard"
    base_multiplier: float = 1.0
    bonus_multiplier: float = 0.0
    points_rounding_strategy: PointsRounding = "floor"
    amount_rounding_strategy: AmountRounding = "none"
    block_size: float = Field(default=1.0, gt=0)
    amount_block_size: float = Field(default=5.0, gt=0)
    bonus_tiers: list[BonusTier] = Field(default_factory=list)
    tier_mode: TierMode = "add"
    monthly_cap: float | None = Field(default=None, ge=0)
    monthly_cap_type: CapType = "bonus_points"
    cap_group_id: str | None = None
    monthly_min_spend: float | None = Field(default=None, ge=0)
    spend_period_type: SpendPeriodType = "calendar"
    points_currency: str = "points"

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_reward(data)
        return data

    @field_validator("spend_period_type", "monthly_cap_type", "tier_mode", mode="before")
    @classmethod
    def _none_means_default(cls, value: Any, info) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class RewardRuleDraft(CamelModel):
    product_id: str
    name: str
    description: str = ""
    enabled: bool = True
    priority: int = 0
    conditions: list[RuleCondition] = Field(default_factory=list)
    reward: RewardConfig = Field(default_factory=RewardConfig)


class RewardRule(RewardRuleDraft):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime.datetime = Field(default_factory=_utcnow)
    updated_at: datetime.datetime = Field(default_factory=_utcnow)

    def draft(self) -> RewardRuleDraft:
        return RewardRuleDraft.model_validate(
            self.model_dump(exclude={"id", "created_at", "updated_at"})
        )

    @property
    def cap_key(self) -> str:
        return self.reward.cap_group_id or self.id


class CalculationInput(CamelModel):
    amount: float
    currency: str = "USD"
    settlement_amount: float | None = None
    settlement_currency: str | None = None

    product_id: str
    payment_method_id: str | None = None
    statement_day: int = Field(default=1, ge=1, le=31)
    transaction_id: str | None = None

    mcc: str | None = None
    merchant_name: str | None = None
    category: str | None = None
    transaction_type: TransactionKind = "purchase"
    is_online: bool = False
    is_contactless: bool = False
    date: datetime.date = Field(default_factory=datetime.date.today)

    monthly_spend: float | None = None
    used_bonus_points: float | None = None
    used_cap_spend: float | None = None
    points_currency: str = "points"

    @field_validator("mcc", mode="before")
    @classmethod
    def _mcc_as_text(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _datetime_to_date(cls, value: Any) -> Any:
        if isinstance(value, datetime.datetime):
            return value.date()
        return value

    @property
    def calculation_amount(self) -> float:
        """Settlement amount when supplied, else the presentment amount."""
        if self.settlement_amount is not None:
            return self.settlement_amount
        return self.amount


class CalculationResult(CamelModel):
    base_points: float = 0
    bonus_points: float = 0
    total_points: float = 0
    points_currency: str = "points"
    min_spend_met: bool = True
    remaining_monthly_bonus: float | None = None
    applied_rule: RewardRule | None = None
    applied_tier: BonusTier | None = None
    applied_rules: list[RewardRule] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
