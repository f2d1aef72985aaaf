import logging
import time
from collections.abc import Callable
from datetime import date
from typing import Literal

from cardpoints.tracking.periods import PeriodWindow, period_window
from cardpoints.tracking.sources import SpendRecord, TransactionSource

logger = logging.getLogger(__name__)

Metric = Literal["spend", "bonus_points"]
CacheKey = tuple[str, str, int, int, int]


class SpendTracker:
    """Period spend and bonus-point usage per payment method.

    Lookups fail open: when the transaction source errors, the total is 0 so
    reward calculation stays available. Failures are logged, never cached.
    """

    def __init__(
        self,
        source: TransactionSource,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[CacheKey, tuple[float, list[SpendRecord]]] = {}

    def _cache_key(self, payment_method_id: str, period_type: str, window: PeriodWindow, anchor_day: int) -> CacheKey:
        return (payment_method_id, period_type, window.start.year, window.start.month, anchor_day)

    async def _records(
        self, payment_method_id: str, period_type: str, as_of: date, anchor_day: int
    ) -> list[SpendRecord]:
        window = period_window(period_type, as_of, anchor_day)
        key = self._cache_key(payment_method_id, period_type, window, anchor_day)

        cached = self._cache.get(key)
        if cached is not None and cached[0] > self._clock():
            return cached[1]

        records = await self.source.list_transactions(payment_method_id, window.start, window.end)
        self._cache[key] = (self._clock() + self.ttl_seconds, records)
        return records

    async def get_period_total(
        self,
        payment_method_id: str,
        period_type: str,
        as_of: date,
        anchor_day: int = 1,
        *,
        metric: Metric = "spend",
        rule_id: str | None = None,
        exclude_transaction_id: str | None = None,
    ) -> float:
        try:
            records = await self._records(payment_method_id, period_type, as_of, anchor_day)
        except Exception:
            logger.exception(
                "spend lookup failed for payment_method=%s period=%s as_of=%s; treating as zero",
                payment_method_id,
                period_type,
                as_of,
            )
            return 0.0

        total = 0.0
        for record in records:
            if record.is_deleted:
                continue
            if exclude_transaction_id is not None and record.id == exclude_transaction_id:
                continue
            if rule_id is not None and record.rule_id != rule_id:
                continue
            total += record.bonus_points if metric == "bonus_points" else record.amount
        return total

    async def record_transaction(self, record: SpendRecord) -> None:
        await self.source.add_transaction(record)
        self.clear_cache_for_payment_method(record.payment_method_id)

    def clear_cache_for_payment_method(self, payment_method_id: str) -> None:
        for key in [key for key in self._cache if key[0] == payment_method_id]:
            del self._cache[key]

    def clear_cache(self) -> None:
        self._cache.clear()
