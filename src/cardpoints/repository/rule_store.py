import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pydantic

from cardpoints.domain.models import RewardRule, RewardRuleDraft
from cardpoints.errors import AuthenticationError, PersistenceError, ValidationError
from cardpoints.repository.auth import Authenticator
from cardpoints.repository.backends import RuleBackend
from cardpoints.repository.mapper import RuleMapper

logger = logging.getLogger(__name__)


class RuleStore:
    """Reward rules by card product, with a TTL read cache.

    Reads fill two indices: rule id -> rule and product id -> ordered rule ids.
    Every successful mutation invalidates the affected product entries (delete
    clears everything, since an id alone does not name its product).
    Mutations fail closed: validation, authentication and storage errors all
    propagate to the caller.
    """

    def __init__(
        self,
        backend: RuleBackend,
        authenticator: Authenticator,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.backend = backend
        self.authenticator = authenticator
        self.ttl_seconds = ttl_seconds
        self.mapper = RuleMapper()
        self._clock = clock
        self._by_id: dict[str, RewardRule] = {}
        self._by_product: dict[str, tuple[float, list[str]]] = {}

    async def get_rules_for_product(self, product_id: str) -> list[RewardRule]:
        cached = self._by_product.get(product_id)
        if cached is not None and cached[0] > self._clock():
            return [self._by_id[rule_id] for rule_id in cached[1] if rule_id in self._by_id]

        try:
            rows = await self.backend.fetch_rules(product_id)
            rules = [self.mapper.row_to_rule(row) for row in rows]
        except Exception as exc:
            logger.error("failed to load rules for product %s: %s", product_id, exc)
            raise PersistenceError(f"Could not load reward rules for product '{product_id}'") from exc

        for rule in rules:
            self._by_id[rule.id] = rule
        self._by_product[product_id] = (self._clock() + self.ttl_seconds, [rule.id for rule in rules])
        logger.debug("loaded %d rule(s) for product %s", len(rules), product_id)
        return list(rules)

    def get_rule(self, rule_id: str) -> RewardRule | None:
        return self._by_id.get(rule_id)

    async def create_rule(
        self, data: RewardRuleDraft | dict[str, Any], credentials: str | None = None
    ) -> RewardRule:
        draft = self._validate(data)
        user_id = await self._require_user(credentials)

        now = datetime.now(timezone.utc)
        rule = RewardRule(
            **draft.model_dump(exclude={"id", "created_at", "updated_at"}),
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )

        try:
            await self.backend.insert_rule(self.mapper.rule_to_row(rule))
        except Exception as exc:
            logger.error("failed to create rule %r for product %s: %s", rule.name, rule.product_id, exc)
            raise PersistenceError(f"Could not create reward rule '{rule.name}'") from exc

        self.invalidate(rule.product_id)
        logger.info("rule %s created for product %s by %s", rule.id, rule.product_id, user_id)
        return rule

    async def update_rule(self, rule: RewardRule, credentials: str | None = None) -> None:
        self._validate(rule)
        user_id = await self._require_user(credentials)

        previous = self._by_id.get(rule.id)
        updated = rule.model_copy(update={"updated_at": datetime.now(timezone.utc)})

        try:
            affected = await self.backend.update_rule(self.mapper.rule_to_row(updated))
        except Exception as exc:
            logger.error("failed to update rule %s: %s", rule.id, exc)
            raise PersistenceError(f"Could not update reward rule '{rule.id}'") from exc

        if affected == 0:
            raise PersistenceError(f"Reward rule '{rule.id}' was not updated: no matching row")

        self.invalidate(rule.product_id)
        if previous is not None and previous.product_id != rule.product_id:
            self.invalidate(previous.product_id)
        self._by_id.pop(rule.id, None)
        logger.info("rule %s updated by %s", rule.id, user_id)

    async def delete_rule(self, rule_id: str, credentials: str | None = None) -> None:
        user_id = await self._require_user(credentials)

        try:
            affected = await self.backend.delete_rule(rule_id)
        except Exception as exc:
            logger.error("failed to delete rule %s: %s", rule_id, exc)
            raise PersistenceError(f"Could not delete reward rule '{rule_id}'") from exc

        if affected == 0:
            raise PersistenceError(f"Reward rule '{rule_id}' was not deleted: no matching row")

        self.invalidate()
        logger.info("rule %s deleted by %s", rule_id, user_id)

    def invalidate(self, product_id: str | None = None) -> None:
        if product_id is None:
            self._by_product.clear()
            self._by_id.clear()
            return

        entry = self._by_product.pop(product_id, None)
        if entry is not None:
            for rule_id in entry[1]:
                self._by_id.pop(rule_id, None)

    async def _require_user(self, credentials: str | None) -> str:
        user_id = await self.authenticator.authenticate(credentials)
        if not user_id:
            raise AuthenticationError("Rule changes require an authenticated user")
        return user_id

    def _validate(self, data: RewardRuleDraft | dict[str, Any]) -> RewardRuleDraft:
        if isinstance(data, dict):
            try:
                data = RewardRuleDraft.model_validate(data)
            except pydantic.ValidationError as exc:
                raise ValidationError(f"Invalid reward rule: {exc}") from exc

        if not data.name or not data.name.strip():
            raise ValidationError("Rule name is required")
        if not data.product_id or not data.product_id.strip():
            raise ValidationError("Rule must belong to a card product")
        if data.priority < 0:
            raise ValidationError(f"Rule priority must be non-negative, got {data.priority}")
        return data
