import asyncio
import datetime
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel


class SpendRecord(BaseModel):
    id: str
    payment_method_id: str
    date: datetime.date
    amount: float
    bonus_points: float = 0
    rule_id: str | None = None
    is_deleted: bool = False


class TransactionSource(Protocol):
    async def list_transactions(
        self, payment_method_id: str, start: datetime.date, end: datetime.date
    ) -> list[SpendRecord]:
        ...

    async def add_transaction(self, record: SpendRecord) -> None:
        ...


class InMemoryTransactionSource:
    def __init__(self, records: list[SpendRecord] | None = None):
        self.records: list[SpendRecord] = list(records or [])
        self.queries = 0

    async def list_transactions(
        self, payment_method_id: str, start: datetime.date, end: datetime.date
    ) -> list[SpendRecord]:
        self.queries += 1
        return [
            record
            for record in self.records
            if record.payment_method_id == payment_method_id and start <= record.date < end
        ]

    async def add_transaction(self, record: SpendRecord) -> None:
        self.records.append(record)


class JsonFileTransactionSource:
    """Transaction history kept as a JSON array of spend records."""

    def __init__(self, transaction_file: str):
        self.transaction_file = Path(transaction_file)

    def _read(self) -> list[SpendRecord]:
        if not self.transaction_file.exists():
            return []

        with self.transaction_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        return [SpendRecord.model_validate(item) for item in data]

    def _write(self, records: list[SpendRecord]) -> None:
        self.transaction_file.parent.mkdir(parents=True, exist_ok=True)
        payload = [record.model_dump(mode="json") for record in records]

        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".json",
            dir=self.transaction_file.parent,
            delete=False,
            encoding="utf-8",
        ) as fp:
            json.dump(payload, fp, ensure_ascii=False, indent=2)
        os.replace(fp.name, self.transaction_file)

    async def list_transactions(
        self, payment_method_id: str, start: datetime.date, end: datetime.date
    ) -> list[SpendRecord]:
        records = await asyncio.to_thread(self._read)
        return [
            record
            for record in records
            if record.payment_method_id == payment_method_id and start <= record.date < end
        ]

    async def add_transaction(self, record: SpendRecord) -> None:
        records = await asyncio.to_thread(self._read)
        records.append(record)
        await asyncio.to_thread(self._write, records)
