from __future__ import annotations

import logging

import httpx

from taxonomy_admin.store.base import RemoteStore, Row, StoreFailure, StoreOperation, Table

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("message", "details", "hint", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class RestStore(RemoteStore):
    """PostgREST (Supabase) dialect over HTTP.

    Cascade on category delete is enforced by the server-side foreign key.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        schema: str | None = None,
        table_names: dict[str, str] | None = None,
        timeout_seconds: float | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.schema = schema
        self.table_names = table_names or {}
        self.timeout_seconds = timeout_seconds

    def _url(self, table: Table) -> str:
        return f"{self.base_url}/rest/v1/{self.table_names.get(table.value, table.value)}"

    def _headers(self) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Prefer": "return=representation",
        }
        if self.schema:
            headers["Accept-Profile"] = self.schema
            headers["Content-Profile"] = self.schema
        return headers

    async def _send(
        self,
        method: str,
        table: Table,
        operation: StoreOperation,
        *,
        params: dict[str, str] | None = None,
        json: object | None = None,
    ) -> list[Row]:
        timeout = httpx.Timeout(self.timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.request(
                    method,
                    self._url(table),
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise StoreFailure(
                str(exc) or exc.__class__.__name__, table=table, operation=operation
            ) from exc

        if response.status_code >= 400:
            raise StoreFailure(_error_detail(response), table=table, operation=operation)
        if response.status_code == 204 or not response.content:
            return []
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreFailure(
                "Store returned a non-JSON response", table=table, operation=operation
            ) from exc
        if isinstance(payload, dict):
            return [payload]
        if not isinstance(payload, list):
            raise StoreFailure(
                "Store returned an unexpected payload", table=table, operation=operation
            )
        return payload

    async def list_all(self, table: Table, order_by: str = "name") -> list[Row]:
        return await self._send(
            "GET",
            table,
            StoreOperation.LIST,
            params={"select": "*", "order": f"{order_by}.asc"},
        )

    async def insert(self, table: Table, fields: Row) -> Row:
        rows = await self._send("POST", table, StoreOperation.INSERT, json=[fields])
        return rows[0] if rows else dict(fields)

    async def update(self, table: Table, row_id: str, fields: Row) -> Row:
        rows = await self._send(
            "PATCH",
            table,
            StoreOperation.UPDATE,
            params={"id": f"eq.{row_id}"},
            json=fields,
        )
        if not rows:
            raise StoreFailure(
                f"No {table.value} row matches id {row_id}",
                table=table,
                operation=StoreOperation.UPDATE,
            )
        return rows[0]

    async def delete(self, table: Table, row_id: str) -> None:
        rows = await self._send(
            "DELETE",
            table,
            StoreOperation.DELETE,
            params={"id": f"eq.{row_id}"},
        )
        if not rows:
            raise StoreFailure(
                f"No {table.value} row matches id {row_id}",
                table=table,
                operation=StoreOperation.DELETE,
            )
