from __future__ import annotations

import logging
from typing import Any

import httpx
from httpx_retries import Retry, RetryTransport
from pydantic import ValidationError

from resolver_status.core.ports.tracker import TrackerError
from resolver_status.core.reconcile import STATUS_PROPERTY
from resolver_status.db.config import NotionConfig
from resolver_status.models import TrackerPageBatch

logger = logging.getLogger(__name__)

_PAGE_SIZE = 100


def _default_transport() -> RetryTransport:
    # Database queries are POSTs.
    retry = Retry(total=4, backoff_factor=0.5, allowed_methods=frozenset({"GET", "POST", "PATCH"}))
    return RetryTransport(retry=retry)


class NotionTracker:
    """Tracker adapter for a Notion database.

    Implements the ``TrackerDatabase`` protocol. Transient HTTP failures are
    retried by the transport; anything left over surfaces as ``TrackerError``.
    """

    def __init__(self, config: NotionConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_seconds,
            transport=_default_transport(),
        )
        self._client.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Notion-Version": config.notion_version,
            }
        )

    async def _request(self, method: str, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise TrackerError(
                f"Notion {method} {url} failed with {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TrackerError(f"Notion {method} {url} failed: {exc}") from exc

    async def query_pages(self, start_cursor: str | None = None) -> TrackerPageBatch:
        payload: dict[str, Any] = {"page_size": _PAGE_SIZE}
        if start_cursor:
            payload["start_cursor"] = start_cursor
        data = await self._request("POST", f"databases/{self._config.database_id}/query", payload)
        try:
            batch = TrackerPageBatch.model_validate(data)
        except ValidationError as exc:
            raise TrackerError("Unexpected Notion query response") from exc
        logger.debug("Fetched %d page(s), next cursor %s", len(batch.results), batch.next_cursor)
        return batch

    async def update_status(self, page_id: str, status: str) -> None:
        kind = self._config.status_property_kind
        payload = {"properties": {STATUS_PROPERTY: {kind: {"name": str(status)}}}}
        await self._request("PATCH", f"pages/{page_id}", payload)

    async def aclose(self) -> None:
        await self._client.aclose()
