"""Table operations: create, list, read"""

from typing import Any, Mapping, Sequence
from uuid import UUID

import structlog

from app.services.errors import NotFoundError
from app.services.pipeline import Pipeline
from app.services.rules import check_new_table
from app.services.store import Store
from app.services.validation import validate_table_fields

logger = structlog.get_logger()

create_table_pipeline = Pipeline("create_table", [validate_table_fields, check_new_table])


class TableService:
    def __init__(self, store: Store):
        self.store = store

    async def create(self, fields: Mapping[str, Any]):
        cleaned = create_table_pipeline.run(fields).unwrap()
        cleaned.pop("reservation_id", None)
        table = await self.store.insert_table(cleaned)
        logger.info(
            "Table created",
            table_id=str(table.id),
            table_name=table.table_name,
            capacity=table.capacity,
        )
        return table

    async def list(self) -> Sequence[Any]:
        return await self.store.list_tables()

    async def get(self, table_id: UUID):
        table = await self.store.get_table(table_id)
        if table is None:
            raise NotFoundError(f"Table {table_id} cannot be found.")
        return table
