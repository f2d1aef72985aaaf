from cardpoints.domain.models import CalculationInput, CamelModel, RewardRuleDraft


class CalculateRequest(CalculationInput):
    pass


class RuleWriteRequest(RewardRuleDraft):
    pass


class BootstrapRequest(CamelModel):
    preset_key: str


class CardDetectRequest(CamelModel):
    issuer: str
    name: str
