import re
from collections.abc import Iterable
from typing import Any

import pydantic
from pydantic import BaseModel, Field

from cardpoints.domain.models import RewardConfig, RewardRuleDraft, RuleCondition
from cardpoints.errors import PresetNotFoundError, ValidationError
from cardpoints.presets.catalog import CARD_PRESETS, PRESET_MATCHERS


def card_type_id(issuer: str, name: str) -> str:
    """``"American Express", "Gold Card"`` -> ``"american-express-gold-card"``."""
    if not issuer or not name:
        raise ValueError("Both issuer and name are required to build a card type id")
    return "-".join(re.sub(r"\s+", "-", part.strip().lower()) for part in (issuer, name))


class PresetRule(BaseModel):
    name: str
    description: str = ""
    enabled: bool = True
    priority: int = 0
    conditions: list[RuleCondition] = Field(default_factory=list)
    reward: RewardConfig = Field(default_factory=RewardConfig)


class CardPreset(BaseModel):
    key: str
    issuer: str
    name: str
    points_currency: str = "points"
    rules: list[PresetRule] = Field(default_factory=list)
    available_categories: list[str] = Field(default_factory=list)
    max_categories_selectable: int | None = None


class CardPresetRegistry:
    """Known card products and their starter rules, held in memory for the process lifetime.

    ``matchers`` map loose issuer/name terms to preset keys, for cards whose
    exact product name is not in the catalog. Each entry is
    ``(issuer_terms, name_terms, key)``: one issuer term and every name term
    must appear in the card's issuer and name.
    """

    def __init__(
        self,
        presets: Iterable[dict[str, Any] | CardPreset] = CARD_PRESETS,
        matchers: Iterable[tuple[tuple[str, ...], tuple[str, ...], str]] = PRESET_MATCHERS,
    ):
        self._presets: dict[str, CardPreset] = {}
        for preset in presets:
            self.register(preset)
        self.matchers = list(matchers)

    def register(self, preset: dict[str, Any] | CardPreset) -> CardPreset:
        if isinstance(preset, CardPreset):
            card = preset
        else:
            try:
                card = CardPreset.model_validate(preset)
            except pydantic.ValidationError as exc:
                raise ValidationError(f"Invalid card preset {preset.get('key')!r}: {exc}") from exc
        self._presets[card.key] = card
        return card

    def get(self, key: str) -> CardPreset | None:
        return self._presets.get(key)

    def list_presets(self) -> list[CardPreset]:
        return list(self._presets.values())

    def list_by_issuer(self, issuer: str) -> list[CardPreset]:
        wanted = issuer.strip().lower()
        return [card for card in self._presets.values() if card.issuer.lower() == wanted]

    def find_by_issuer_and_name(self, issuer: str, name: str) -> CardPreset | None:
        wanted_issuer, wanted_name = issuer.strip().lower(), name.strip().lower()
        for card in self._presets.values():
            if card.issuer.lower() == wanted_issuer and card.name.lower() == wanted_name:
                return card
        return None

    def detect(self, issuer: str | None, name: str | None) -> CardPreset | None:
        """Exact issuer/name match first, then the first matcher whose terms all appear."""
        issuer_text, name_text = (issuer or "").strip().lower(), (name or "").strip().lower()
        if not issuer_text or not name_text:
            return None

        exact = self.find_by_issuer_and_name(issuer_text, name_text)
        if exact is not None:
            return exact

        for issuer_terms, name_terms, key in self.matchers:
            if not any(term in issuer_text for term in issuer_terms):
                continue
            if all(term in name_text for term in name_terms) and key in self._presets:
                return self._presets[key]
        return None

    def starter_rules(self, key: str, product_id: str) -> list[RewardRuleDraft]:
        card = self._presets.get(key)
        if card is None:
            raise PresetNotFoundError(f"Unknown card preset: '{key}'")

        drafts = []
        for rule in card.rules:
            fields = rule.model_dump()
            # rewards that name no currency earn the card's
            if "points_currency" not in rule.reward.model_fields_set:
                fields["reward"]["points_currency"] = card.points_currency
            drafts.append(RewardRuleDraft(product_id=product_id, **fields))
        return drafts
