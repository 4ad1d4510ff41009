from collections.abc import AsyncIterator
from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from taxonomy_admin.main import app
from taxonomy_admin.models import category as _category  # noqa: F401
from taxonomy_admin.services.workspace import TaxonomyWorkspace
from taxonomy_admin.store.base import RemoteStore, Row, StoreFailure, StoreOperation, Table
from taxonomy_admin.store.sql_store import SqlStore


class FakeStore(RemoteStore):
    """In-memory store that records calls and can be told to fail."""

    def __init__(self) -> None:
        self.rows: dict[Table, dict[str, Row]] = {
            Table.CATEGORIES: {},
            Table.SUBCATEGORIES: {},
        }
        self.calls: list[tuple[StoreOperation, Table]] = []
        self.failures: dict[tuple[StoreOperation, Table], str] = {}
        self._ids = count(1)

    def fail(self, operation: StoreOperation, table: Table, detail: str = "boom") -> None:
        self.failures[(operation, table)] = detail

    def clear_failures(self) -> None:
        self.failures.clear()

    def mutation_calls(self) -> list[tuple[StoreOperation, Table]]:
        return [call for call in self.calls if call[0] != StoreOperation.LIST]

    def _record(self, operation: StoreOperation, table: Table) -> None:
        self.calls.append((operation, table))
        detail = self.failures.get((operation, table))
        if detail is not None:
            raise StoreFailure(detail, table=table, operation=operation)

    def seed(self, table: Table, **fields: str) -> Row:
        row = {"id": fields.pop("id", f"{table.value[:3]}-{next(self._ids)}"), **fields}
        self.rows[table][row["id"]] = row
        return row

    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        self._record(StoreOperation.LIST, table)
        return sorted((dict(row) for row in self.rows[table].values()), key=lambda r: r[order_by])

    async def insert(self, table: Table, fields: Row) -> Row:
        self._record(StoreOperation.INSERT, table)
        if table == Table.SUBCATEGORIES and fields.get("category_id") not in self.rows[Table.CATEGORIES]:
            raise StoreFailure(
                "violates foreign key constraint", table=table, operation=StoreOperation.INSERT
            )
        return dict(self.seed(table, **fields))

    async def update(self, table: Table, row_id: str, fields: Row) -> Row:
        self._record(StoreOperation.UPDATE, table)
        row = self.rows[table].get(row_id)
        if row is None:
            raise StoreFailure("no matching row", table=table, operation=StoreOperation.UPDATE)
        row.update(fields)
        return dict(row)

    async def delete(self, table: Table, row_id: str) -> None:
        self._record(StoreOperation.DELETE, table)
        if self.rows[table].pop(row_id, None) is None:
            raise StoreFailure("no matching row", table=table, operation=StoreOperation.DELETE)
        if table == Table.CATEGORIES:
            subcategories = self.rows[Table.SUBCATEGORIES]
            for sub_id in [k for k, v in subcategories.items() if v["category_id"] == row_id]:
                del subcategories[sub_id]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def workspace(fake_store: FakeStore) -> TaxonomyWorkspace:
    return TaxonomyWorkspace(fake_store)


@pytest.fixture
async def sql_store() -> AsyncIterator[SqlStore]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    store = SqlStore(session_maker, engine=engine)
    yield store
    await store.close()


@pytest.fixture
async def client(workspace: TaxonomyWorkspace) -> AsyncIterator[AsyncClient]:
    previous = getattr(app.state, "workspace", None)
    app.state.workspace = workspace

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client

    app.state.workspace = previous
