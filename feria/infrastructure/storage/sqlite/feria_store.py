"""SQLite implementation of the fair document store.

Documents are kept as JSON text; a few fields are lifted into columns for
lookups (sale ``client_ref`` and ``timestamp``, history ``name`` and
``archived_at``).
"""

import json
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import aiosqlite

from feria.config import get_logger
from feria.core.entities.feria import (
    ACTIVE_SLOT_FIELDS,
    FERIA_CONFIG_FIELDS,
    PENDING_HISTORY_FIELD,
    FeriaConfig,
    HistoricalFeria,
)
from feria.core.entities.sale import Sale
from feria.core.interfaces.feria_store import IFeriaStore
from feria.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

ACTIVE_FERIA_KEY = "activeFeria"


class SQLiteFeriaStore(IFeriaStore):
    """SQLite implementation of the active slot, live sales and history."""

    # Active slot

    async def get_active_document(self) -> dict[str, Any] | None:
        async with get_connection() as conn:
            return await self._read_setting(conn, ACTIVE_FERIA_KEY)

    async def set_active_config(self, config: FeriaConfig) -> None:
        async with get_transaction() as conn:
            doc = await self._read_setting(conn, ACTIVE_FERIA_KEY) or {}
            for field in FERIA_CONFIG_FIELDS:
                doc.pop(field, None)
            doc.update(config.to_document())
            await self._write_setting(conn, ACTIVE_FERIA_KEY, doc)

        logger.info("active_slot_written", feria=config.name)

    async def clear_active_config(self) -> None:
        async with get_transaction() as conn:
            doc = await self._read_setting(conn, ACTIVE_FERIA_KEY)
            if doc is None:
                return
            for field in ACTIVE_SLOT_FIELDS:
                doc.pop(field, None)
            await self._write_setting(conn, ACTIVE_FERIA_KEY, doc)

        logger.info("active_slot_cleared", kept_keys=sorted(doc))

    async def set_pending_history(self, historical_id: str | None) -> None:
        async with get_transaction() as conn:
            doc = await self._read_setting(conn, ACTIVE_FERIA_KEY) or {}
            if historical_id is None:
                doc.pop(PENDING_HISTORY_FIELD, None)
            else:
                doc[PENDING_HISTORY_FIELD] = historical_id
            await self._write_setting(conn, ACTIVE_FERIA_KEY, doc)

    # Live sales

    async def add_sale(self, sale: Sale) -> Sale:
        sale_id = uuid4().hex
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT OR IGNORE INTO active_sales (id, client_ref, timestamp, doc_json)
                VALUES (?, ?, ?, ?)
                """,
                self._sale_params(sale_id, sale),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT id, doc_json FROM active_sales WHERE client_ref = ?",
                    (sale.client_ref,),
                )
                row = await cursor.fetchone()
                logger.info(
                    "duplicate_sale_ignored",
                    client_ref=sale.client_ref,
                    existing_id=row["id"],
                )
                return self._row_to_sale(row)

        return sale.model_copy(update={"id": sale_id})

    async def list_sales(self) -> list[Sale]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id, doc_json FROM active_sales ORDER BY timestamp, created_at, id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_sale(row) for row in rows]

    async def insert_sales(self, sales: list[Sale]) -> int:
        if not sales:
            return 0
        async with get_transaction() as conn:
            cursor = await conn.executemany(
                """
                INSERT OR IGNORE INTO active_sales (id, client_ref, timestamp, doc_json)
                VALUES (?, ?, ?, ?)
                """,
                [self._sale_params(uuid4().hex, sale) for sale in sales],
            )
            inserted = max(cursor.rowcount, 0)

        logger.info("sales_batch_inserted", requested=len(sales), inserted=inserted)
        return inserted

    async def delete_sales(self, sale_ids: list[str]) -> int:
        if not sale_ids:
            return 0
        placeholders = ",".join("?" for _ in sale_ids)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"DELETE FROM active_sales WHERE id IN ({placeholders})",
                sale_ids,
            )
            deleted = max(cursor.rowcount, 0)

        logger.info("sales_batch_deleted", requested=len(sale_ids), deleted=deleted)
        return deleted

    # History

    async def find_history_by_name(self, name: str) -> HistoricalFeria | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id, doc_json FROM feria_history WHERE name = ?",
                (name,),
            )
            row = await cursor.fetchone()
            return self._row_to_history(row) if row else None

    async def save_history(self, feria: HistoricalFeria) -> HistoricalFeria:
        feria_id = feria.id or uuid4().hex
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO feria_history (id, name, archived_at, doc_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    archived_at = excluded.archived_at,
                    doc_json = excluded.doc_json
                """,
                (
                    feria_id,
                    feria.name,
                    feria.archived_at.astimezone(UTC).isoformat(),
                    json.dumps(feria.to_document(), ensure_ascii=False),
                ),
            )

        logger.info("history_saved", historical_id=feria_id, feria=feria.name)
        return feria.model_copy(update={"id": feria_id})

    async def get_history(self, feria_id: str) -> HistoricalFeria | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id, doc_json FROM feria_history WHERE id = ?",
                (feria_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_history(row) if row else None

    async def list_history(self) -> list[HistoricalFeria]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id, doc_json FROM feria_history ORDER BY archived_at DESC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_history(row) for row in rows]

    async def delete_history(self, feria_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM feria_history WHERE id = ?",
                (feria_id,),
            )
            return cursor.rowcount > 0

    # Helpers

    @staticmethod
    async def _read_setting(conn: aiosqlite.Connection, key: str) -> dict[str, Any] | None:
        cursor = await conn.execute("SELECT doc_json FROM settings WHERE key = ?", (key,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row["doc_json"] or "{}")

    @staticmethod
    async def _write_setting(conn: aiosqlite.Connection, key: str, doc: dict[str, Any]) -> None:
        await conn.execute(
            """
            INSERT INTO settings (key, doc_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                doc_json = excluded.doc_json,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(doc, ensure_ascii=False), datetime.now(UTC).isoformat()),
        )

    @staticmethod
    def _sale_params(sale_id: str, sale: Sale) -> tuple[str, str, str, str]:
        doc = sale.to_document()
        return (
            sale_id,
            sale.client_ref,
            sale.timestamp.astimezone(UTC).isoformat(),
            json.dumps(doc, ensure_ascii=False),
        )

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> Sale:
        return Sale.from_document(json.loads(row["doc_json"]), doc_id=row["id"])

    @staticmethod
    def _row_to_history(row: aiosqlite.Row) -> HistoricalFeria:
        return HistoricalFeria.from_document(json.loads(row["doc_json"]), doc_id=row["id"])
