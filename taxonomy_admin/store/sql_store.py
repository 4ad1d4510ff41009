from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel, select

from taxonomy_admin.models.category import Category, Subcategory
from taxonomy_admin.store.base import RemoteStore, Row, StoreFailure, StoreOperation, Table

logger = logging.getLogger(__name__)

_MODELS: dict[Table, type[SQLModel]] = {
    Table.CATEGORIES: Category,
    Table.SUBCATEGORIES: Subcategory,
}
_WRITABLE_FIELDS: dict[Table, set[str]] = {
    Table.CATEGORIES: {"name"},
    Table.SUBCATEGORIES: {"name", "category_id"},
}


def _to_row(instance: SQLModel) -> Row:
    row: Row = {"id": str(instance.id), "name": instance.name}
    if isinstance(instance, Subcategory):
        row["category_id"] = str(instance.category_id)
    return row


def _parse_id(value: object, *, table: Table, operation: StoreOperation) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise StoreFailure(
            f"Invalid id '{value}'", table=table, operation=operation
        ) from exc


class SqlStore(RemoteStore):
    """Store backed by SQLModel tables on an async SQLAlchemy engine."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self.session_maker = session_maker
        self.engine = engine

    def _check_fields(self, table: Table, fields: Row, operation: StoreOperation) -> None:
        unknown = sorted(set(fields) - _WRITABLE_FIELDS[table])
        if unknown:
            raise StoreFailure(
                f"Unknown column(s) for {table.value}: {', '.join(unknown)}",
                table=table,
                operation=operation,
            )

    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        model = _MODELS[table]
        column = getattr(model, order_by, None)
        if column is None:
            raise StoreFailure(
                f"Cannot order {table.value} by '{order_by}'",
                table=table,
                operation=StoreOperation.LIST,
            )
        try:
            async with self.session_maker() as session:
                result = await session.execute(select(model).order_by(column.asc()))
                return [_to_row(instance) for instance in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise StoreFailure(str(exc), table=table, operation=StoreOperation.LIST) from exc

    async def insert(self, table: Table, fields: Row) -> Row:
        operation = StoreOperation.INSERT
        self._check_fields(table, fields, operation)
        values = dict(fields)
        try:
            async with self.session_maker() as session:
                if table == Table.SUBCATEGORIES:
                    parent_id = _parse_id(values.get("category_id"), table=table, operation=operation)
                    parent = await session.get(Category, parent_id)
                    if parent is None:
                        raise StoreFailure(
                            f"Category {parent_id} does not exist",
                            table=table,
                            operation=operation,
                        )
                    values["category_id"] = parent_id
                instance = _MODELS[table](**values)
                session.add(instance)
                await session.commit()
                await session.refresh(instance)
                return _to_row(instance)
        except SQLAlchemyError as exc:
            raise StoreFailure(str(exc), table=table, operation=operation) from exc

    async def update(self, table: Table, row_id: str, fields: Row) -> Row:
        operation = StoreOperation.UPDATE
        self._check_fields(table, fields, operation)
        key = _parse_id(row_id, table=table, operation=operation)
        try:
            async with self.session_maker() as session:
                instance = await session.get(_MODELS[table], key)
                if instance is None:
                    raise StoreFailure(
                        f"No {table.value} row matches id {row_id}",
                        table=table,
                        operation=operation,
                    )
                for name, value in fields.items():
                    if name == "category_id":
                        value = _parse_id(value, table=table, operation=operation)
                    setattr(instance, name, value)
                session.add(instance)
                await session.commit()
                await session.refresh(instance)
                return _to_row(instance)
        except SQLAlchemyError as exc:
            raise StoreFailure(str(exc), table=table, operation=operation) from exc

    async def delete(self, table: Table, row_id: str) -> None:
        operation = StoreOperation.DELETE
        key = _parse_id(row_id, table=table, operation=operation)
        model = _MODELS[table]
        try:
            async with self.session_maker() as session:
                if table == Table.CATEGORIES:
                    cascade = await session.execute(
                        delete(Subcategory).where(Subcategory.category_id == key)
                    )
                    logger.debug(
                        "Cascading delete of category %s removed %s subcategories",
                        row_id,
                        cascade.rowcount,
                    )
                result = await session.execute(delete(model).where(model.id == key))
                if result.rowcount == 0:
                    await session.rollback()
                    raise StoreFailure(
                        f"No {table.value} row matches id {row_id}",
                        table=table,
                        operation=operation,
                    )
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreFailure(str(exc), table=table, operation=operation) from exc

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
