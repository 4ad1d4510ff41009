from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

Row = dict[str, Any]


class Table(str, Enum):
    CATEGORIES = "categories"
    SUBCATEGORIES = "subcategories"


class StoreOperation(str, Enum):
    LIST = "list"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class StoreFailure(RuntimeError):
    """Raised when the remote store reports a failed read or mutation."""

    def __init__(self, detail: str, *, table: Table, operation: StoreOperation):
        super().__init__(detail)
        self.detail = detail
        self.table = table
        self.operation = operation


class StoreNotConfiguredError(RuntimeError):
    """Raised when the selected store backend cannot be built from settings."""


class RemoteStore(ABC):
    """Table-scoped row access to the persistent store.

    Deleting a ``categories`` row must also remove every ``subcategories`` row
    whose ``category_id`` points at it.
    """

    @abstractmethod
    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, table: Table, fields: Row) -> Row:
        raise NotImplementedError

    @abstractmethod
    async def update(self, table: Table, row_id: str, fields: Row) -> Row:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, table: Table, row_id: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None
