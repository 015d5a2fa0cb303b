"""Read-only client for the hosted data store.

The store is a Supabase project; its tables are reached through the PostgREST
interface at `{url}/rest/v1/{table}`. Only the two queries the dashboard needs
are exposed.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .models.metric_row import MetricRow
from .models.node_record import NodeRecord

log = logging.getLogger(__name__)

METRICS_TABLE = "metrics"
NODE_RECORDS_TABLE = "node_records"


class DataSourceError(Exception):
    """A query against the data store failed."""


class SupabaseStore:
    def __init__(self, url: str, key: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        }
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch_metrics(self, limit: int) -> List[MetricRow]:
        """SELECT * FROM metrics ORDER BY date ASC LIMIT {limit}"""
        rows = await self._select(METRICS_TABLE, {"select": "*", "order": "date.asc", "limit": str(limit)})
        return self._validate(METRICS_TABLE, MetricRow, rows)

    async def fetch_node_records(self) -> List[NodeRecord]:
        """SELECT * FROM node_records ORDER BY timestamp DESC"""
        rows = await self._select(NODE_RECORDS_TABLE, {"select": "*", "order": "timestamp.desc"})
        return self._validate(NODE_RECORDS_TABLE, NodeRecord, rows)

    async def _select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{table}"
        log.debug(f"Querying {url} with {params}")
        try:
            response = await self.client.get(url, params=params, headers=self.headers)
            response.raise_for_status()
            data = response.json()
        except httpx.RequestError as e:
            raise DataSourceError(f"Could not connect to data store: {e}") from e
        except httpx.HTTPStatusError as e:
            raise DataSourceError(_error_message(e.response)) from e
        except ValueError as e:
            raise DataSourceError(f"Undecodable response from data store for '{table}': {e}") from e

        if not isinstance(data, list):
            raise DataSourceError(f"Unexpected response for '{table}': expected a list of rows")
        return data

    @staticmethod
    def _validate(table, model, rows):
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise DataSourceError(f"Malformed row in '{table}': {e}") from e


def _error_message(response: httpx.Response) -> str:
    # PostgREST reports failures as {"message": ..., "code": ..., "details": ...}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Data store error: {response.status_code} - {response.text}"
