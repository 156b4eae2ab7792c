"""
Shared repository plumbing.

Rows are converted to and from the pydantic records in
``decisionloop.schemas`` at this boundary; column names match field names.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.engine import Base

RecordT = TypeVar("RecordT", bound=Base)
SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseRepository(Generic[RecordT, SchemaT]):
    """Conversion helpers and lookup by primary key."""

    def __init__(self, record: Type[RecordT], schema: Type[SchemaT]):
        self.record_cls = record
        self.schema = schema

    def to_record(self, item: SchemaT) -> RecordT:
        return self.record_cls(**item.model_dump())

    def to_schema(self, row: RecordT) -> SchemaT:
        return self.schema.model_validate(row)

    async def _get_row(self, db: AsyncSession, id: str) -> Optional[RecordT]:
        result = await db.execute(select(self.record_cls).where(self.record_cls.id == id))
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, id: str) -> Optional[SchemaT]:
        row = await self._get_row(db, id)
        return self.to_schema(row) if row is not None else None

    async def _insert(self, db: AsyncSession, item: SchemaT) -> SchemaT:
        row = self.to_record(item)
        db.add(row)
        await db.flush()
        return self.to_schema(row)

    @staticmethod
    def _assign(row: Any, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(row, key, value)
