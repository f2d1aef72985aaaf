from cardpoints.domain.models import CamelModel, RewardRule


class RuleListResponse(CamelModel):
    product_id: str
    rules: list[RewardRule]


class BootstrapResponse(CamelModel):
    product_id: str
    preset_key: str | None
    rules_created: int


class PresetSummary(CamelModel):
    key: str
    issuer: str
    name: str
    points_currency: str
    rule_count: int
