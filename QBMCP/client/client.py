"""Async QuickBase REST client.

One method per remote operation. Each call is retried independently according
to the RetryPolicy; nothing here spans more than one logical operation.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from QBMCP.client.errors import (
    QuickBaseAPIError,
    QuickBaseConnectionError,
    QuickBaseNotFoundError,
)
from QBMCP.client.retry import RetryPolicy, get_retry_policy
from QBMCP.client.types import (
    RECORD_ID_FIELD,
    FieldDefinition,
    FieldUpdate,
    QueryOptions,
    QuickBaseConfig,
    TableDefinition,
    wrap_field_values,
)
from QBMCP.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SEARCH_FIELD = 6


def record_id_where(record_ids: List[int]) -> str:
    """Build ``{3.EX.a}OR{3.EX.b}`` for the given record ids."""
    return "OR".join(f"{{{RECORD_ID_FIELD}.EX.{rid}}}" for rid in record_ids)


def _escape_term(term: str) -> str:
    return term.replace("\\", "\\\\").replace("'", "\\'")


class QuickBaseClient:
    """Thin async wrapper over the QuickBase JSON API.

    Args:
        config: Connection settings (realm, token, app id, timeout, retries)
        retry_policy: Optional explicit retry policy; defaults to config.yaml
            with ``config.max_retries``
        http_client: Optional pre-built httpx.AsyncClient (tests inject one
            backed by httpx.MockTransport)
    """

    def __init__(
        self,
        config: QuickBaseConfig,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.app_id = config.app_id
        self.retry_policy = retry_policy or get_retry_policy(config.max_retries)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            headers=self._default_headers(),
            timeout=config.timeout / 1000.0,
        )
        if http_client is not None:
            self._http.headers.update(self._default_headers())

    def _default_headers(self) -> Dict[str, str]:
        return {
            "QB-Realm-Hostname": self.config.realm,
            "Authorization": f"QB-USER-TOKEN {self.config.user_token}",
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/json",
        }

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "QuickBaseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        idempotent: Optional[bool] = None,
    ) -> Any:
        """
        Send one request, retrying per the retry policy.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Query string parameters
            json: JSON body
            idempotent: Whether timeouts and 5xx may be retried. Defaults to
                True for everything except POST.

        Returns:
            Decoded JSON body ({} for empty bodies)

        Raises:
            QuickBaseNotFoundError: On HTTP 404
            QuickBaseAPIError: On any other error status
            QuickBaseConnectionError: When the transport fails and retries are exhausted
        """
        if idempotent is None:
            idempotent = method.upper() != "POST"
        policy = self.retry_policy
        attempt = 0

        while True:
            try:
                response = await self._http.request(method, path, params=params, json=json)
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                # Request never reached the service, safe to resend
                if attempt < policy.max_retries:
                    await self._backoff(method, path, attempt, f"connection error: {e}")
                    attempt += 1
                    continue
                raise QuickBaseConnectionError(f"Could not connect to QuickBase: {e}") from e
            except httpx.TimeoutException as e:
                if idempotent and attempt < policy.max_retries:
                    await self._backoff(method, path, attempt, f"timeout: {e}")
                    attempt += 1
                    continue
                raise QuickBaseConnectionError(f"Request to QuickBase timed out: {method} {path}") from e
            except httpx.TransportError as e:
                if idempotent and attempt < policy.max_retries:
                    await self._backoff(method, path, attempt, f"transport error: {e}")
                    attempt += 1
                    continue
                raise QuickBaseConnectionError(f"QuickBase request failed: {e}") from e

            if response.status_code >= 400:
                if policy.should_retry_status(response.status_code, idempotent) and attempt < policy.max_retries:
                    await self._backoff(method, path, attempt, f"HTTP {response.status_code}")
                    attempt += 1
                    continue
                self._raise_for_status(method, path, response)

            if not response.content:
                return {}
            return response.json()

    async def _backoff(self, method: str, path: str, attempt: int, reason: str) -> None:
        delay = self.retry_policy.delay_for(attempt)
        logger.warning(
            f"{method} {path} failed ({reason}); retry {attempt + 1}/{self.retry_policy.max_retries} in {delay:.2f}s"
        )
        if delay > 0:
            await asyncio.sleep(delay)

    @staticmethod
    def _raise_for_status(method: str, path: str, response: httpx.Response) -> None:
        details: Any = None
        message = response.reason_phrase or "Request failed"
        try:
            details = response.json()
        except ValueError:
            details = response.text or None
        if isinstance(details, dict):
            parts = [str(details[k]) for k in ("message", "description") if details.get(k)]
            if parts:
                message = ": ".join(parts)

        error_cls = QuickBaseNotFoundError if response.status_code == 404 else QuickBaseAPIError
        raise error_cls(
            message,
            status_code=response.status_code,
            method=method,
            path=path,
            details=details,
        )

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    async def get_app_info(self) -> Dict[str, Any]:
        return await self._request("GET", f"/apps/{self.app_id}")

    async def get_app_tables(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/tables", params={"appId": self.app_id})
        return data if isinstance(data, list) else []

    async def test_connection(self) -> bool:
        """Return True if the app can be read with the current credentials."""
        try:
            await self.get_app_info()
            return True
        except (QuickBaseAPIError, QuickBaseConnectionError) as e:
            logger.warning(f"QuickBase connection test failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    async def create_table(self, table: TableDefinition) -> str:
        data = await self._request(
            "POST", "/tables", params={"appId": self.app_id}, json=table.to_payload()
        )
        table_id = data.get("id")
        logger.info(f"Created table '{table.name}' -> {table_id}")
        return table_id

    async def get_table_info(self, table_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/tables/{table_id}", params={"appId": self.app_id})

    async def update_table(self, table_id: str, table: TableDefinition) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/tables/{table_id}", params={"appId": self.app_id}, json=table.to_payload()
        )

    async def delete_table(self, table_id: str) -> Dict[str, Any]:
        result = await self._request("DELETE", f"/tables/{table_id}", params={"appId": self.app_id})
        logger.info(f"Deleted table {table_id}")
        return result

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    async def get_table_fields(self, table_id: str) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/fields", params={"tableId": table_id})
        return data if isinstance(data, list) else []

    async def create_field(self, table_id: str, field: FieldDefinition) -> int:
        data = await self._request(
            "POST", "/fields", params={"tableId": table_id}, json=field.to_payload()
        )
        field_id = data.get("id")
        logger.info(f"Created {field.field_type} field '{field.label}' on {table_id} -> {field_id}")
        return field_id

    async def update_field(self, table_id: str, field_id: int, update: FieldUpdate) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/fields/{field_id}", params={"tableId": table_id}, json=update.to_payload()
        )

    async def delete_field(self, table_id: str, field_id: int) -> Dict[str, Any]:
        return await self._request(
            "DELETE", "/fields", params={"tableId": table_id}, json={"fieldIds": [field_id]}
        )

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def query_records(self, table_id: str, options: Optional[QueryOptions] = None) -> Dict[str, Any]:
        """Run a record query and return the full body (data, fields, metadata)."""
        payload = (options or QueryOptions()).to_payload(table_id)
        return await self._request("POST", "/records/query", json=payload, idempotent=True)

    async def get_records(self, table_id: str, options: Optional[QueryOptions] = None) -> List[Dict[str, Any]]:
        body = await self.query_records(table_id, options)
        return body.get("data", []) or []

    async def get_record(
        self, table_id: str, record_id: int, field_ids: Optional[List[int]] = None
    ) -> Optional[Dict[str, Any]]:
        records = await self.get_records(
            table_id,
            QueryOptions(where=record_id_where([record_id]), select=field_ids),
        )
        return records[0] if records else None

    async def create_record(self, table_id: str, fields: Dict[Any, Any]) -> Optional[int]:
        ids = await self.create_records(table_id, [fields])
        return ids[0] if ids else None

    async def create_records(self, table_id: str, records: List[Dict[Any, Any]]) -> List[int]:
        body = await self._request(
            "POST",
            "/records",
            json={"to": table_id, "data": [wrap_field_values(r) for r in records]},
        )
        created = (body.get("metadata") or {}).get("createdRecordIds")
        if created:
            return list(created)
        ids: List[int] = []
        for row in body.get("data") or []:
            cell = row.get(str(RECORD_ID_FIELD))
            if isinstance(cell, dict) and cell.get("value") is not None:
                ids.append(cell["value"])
        return ids

    async def update_record(self, table_id: str, record_id: int, fields: Dict[Any, Any]) -> Dict[str, Any]:
        return await self.update_records(table_id, [{**fields, RECORD_ID_FIELD: record_id}])

    async def update_records(self, table_id: str, records: List[Dict[Any, Any]]) -> Dict[str, Any]:
        """Upsert rows; each row must carry its record id under field 3."""
        data = []
        for row in records:
            wrapped = wrap_field_values(row)
            if str(RECORD_ID_FIELD) not in wrapped:
                raise ValueError(f"update_records rows need field {RECORD_ID_FIELD} (record id)")
            data.append(wrapped)
        return await self._request(
            "POST", "/records", json={"to": table_id, "data": data}, idempotent=True
        )

    async def delete_record(self, table_id: str, record_id: int) -> Dict[str, Any]:
        return await self.delete_records(table_id, [record_id])

    async def delete_records(self, table_id: str, record_ids: List[int]) -> Dict[str, Any]:
        if not record_ids:
            return {"numberDeleted": 0}
        return await self._request(
            "DELETE", "/records", json={"from": table_id, "where": record_id_where(record_ids)}
        )

    async def search_records(
        self, table_id: str, term: str, field_ids: Optional[List[int]] = None
    ) -> List[Dict[str, Any]]:
        fields = field_ids or [DEFAULT_SEARCH_FIELD]
        escaped = _escape_term(term)
        where = "OR".join(f"{{{fid}.CT.'{escaped}'}}" for fid in fields)
        return await self.get_records(table_id, QueryOptions(where=where))

    # ------------------------------------------------------------------
    # Relationships & reports
    # ------------------------------------------------------------------

    async def create_relationship(
        self, parent_table_id: str, child_table_id: str, foreign_key_field_id: int
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/tables/{child_table_id}/relationship",
            json={"parentTableId": parent_table_id, "foreignKeyFieldId": foreign_key_field_id},
        )

    async def get_relationships(self, table_id: str) -> List[Dict[str, Any]]:
        data = await self._request("GET", f"/tables/{table_id}/relationships")
        if isinstance(data, dict):
            return data.get("relationships", []) or []
        return data or []

    async def get_reports(self, table_id: str) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/reports", params={"tableId": table_id})
        return data if isinstance(data, list) else []

    async def run_report(self, report_id: str, table_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/reports/{report_id}/run", params={"tableId": table_id}, idempotent=True
        )
