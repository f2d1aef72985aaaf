import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

Row = dict[str, Any]


def _owner(row: Row) -> str | None:
    # rows written before the product rename carry card_type_id
    return row.get("product_id") or row.get("card_type_id")


class RuleBackend(Protocol):
    async def fetch_rules(self, product_id: str) -> list[Row]:
        ...

    async def insert_rule(self, row: Row) -> None:
        ...

    async def update_rule(self, row: Row) -> int:
        """Replace the row with the same id; return the affected-row count."""
        ...

    async def delete_rule(self, rule_id: str) -> int:
        ...


class InMemoryRuleBackend:
    def __init__(self, rows: list[Row] | None = None):
        self.rows: list[Row] = [dict(row) for row in rows or []]
        self.fetch_count = 0

    async def fetch_rules(self, product_id: str) -> list[Row]:
        self.fetch_count += 1
        return [dict(row) for row in self.rows if _owner(row) == product_id]

    async def insert_rule(self, row: Row) -> None:
        if any(existing["id"] == row["id"] for existing in self.rows):
            raise ValueError(f"duplicate rule id: {row['id']}")
        self.rows.append(dict(row))

    async def update_rule(self, row: Row) -> int:
        for index, existing in enumerate(self.rows):
            if existing["id"] == row["id"]:
                self.rows[index] = {**dict(row), "created_at": existing.get("created_at", row.get("created_at"))}
                return 1
        return 0

    async def delete_rule(self, rule_id: str) -> int:
        before = len(self.rows)
        self.rows = [row for row in self.rows if row["id"] != rule_id]
        return before - len(self.rows)


class JsonFileRuleBackend:
    """Rule rows persisted as one JSON array; every write replaces the file atomically."""

    def __init__(self, rule_file: str):
        self.rule_file = Path(rule_file)

    def _load(self) -> list[Row]:
        if not self.rule_file.exists():
            return []

        with self.rule_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        if not isinstance(data, list):
            raise ValueError(f"Rule file must hold a JSON array: {self.rule_file}")
        return data

    def _save(self, rows: list[Row]) -> None:
        self.rule_file.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".json",
            prefix="rules_",
            dir=self.rule_file.parent,
            delete=False,
            encoding="utf-8",
        ) as fp:
            json.dump(rows, fp, ensure_ascii=False, indent=2)
        os.replace(fp.name, self.rule_file)

    async def fetch_rules(self, product_id: str) -> list[Row]:
        rows = await asyncio.to_thread(self._load)
        return [row for row in rows if _owner(row) == product_id]

    async def insert_rule(self, row: Row) -> None:
        rows = await asyncio.to_thread(self._load)
        if any(existing.get("id") == row["id"] for existing in rows):
            raise ValueError(f"duplicate rule id: {row['id']}")
        rows.append(row)
        await asyncio.to_thread(self._save, rows)

    async def update_rule(self, row: Row) -> int:
        rows = await asyncio.to_thread(self._load)
        affected = 0
        for index, existing in enumerate(rows):
            if existing.get("id") == row["id"]:
                rows[index] = {**row, "created_at": existing.get("created_at", row.get("created_at"))}
                affected += 1
        if affected:
            await asyncio.to_thread(self._save, rows)
        return affected

    async def delete_rule(self, rule_id: str) -> int:
        rows = await asyncio.to_thread(self._load)
        kept = [row for row in rows if row.get("id") != rule_id]
        if len(kept) != len(rows):
            await asyncio.to_thread(self._save, kept)
        return len(rows) - len(kept)
