from dataclasses import dataclass
from typing import Any

from resolver_status.core.ports.tracker import TrackerError
from resolver_status.core.reconcile import NAME_PROPERTY, STATUS_PROPERTY, TYPE_PROPERTY
from resolver_status.models import PageProperty, TrackerPage, TrackerPageBatch


@dataclass(frozen=True)
class InMemoryUpdate:
    page_id: str
    status: str


def make_page(
    page_id: str,
    name: str | None,
    page_type: str | None,
    status: str | None = None,
    status_kind: str = "status",
) -> TrackerPage:
    """Build a tracker page shaped like a Notion database row."""
    properties: dict[str, dict[str, Any]] = {}
    if name is not None:
        properties[NAME_PROPERTY] = {"type": "title", "title": [{"type": "text", "plain_text": name}]}
    if page_type is not None:
        properties[TYPE_PROPERTY] = {"type": "select", "select": {"name": page_type}}
    properties[STATUS_PROPERTY] = {"type": status_kind, status_kind: {"name": status} if status else None}
    return TrackerPage(
        id=page_id,
        properties={key: PageProperty.model_validate(value) for key, value in properties.items()},
    )


class InMemoryTracker:
    """Tracker held in memory, paged like Notion. Used for dry runs and tests."""

    def __init__(self, pages: list[TrackerPage] | None = None, page_size: int = 100) -> None:
        self.pages: list[TrackerPage] = list(pages or [])
        self.page_size = page_size
        self.updates: list[InMemoryUpdate] = []
        self.queries = 0
        self.fail_updates_for: set[str] = set()
        self.fail_queries = False
        self.closed = False

    async def query_pages(self, start_cursor: str | None = None) -> TrackerPageBatch:
        if self.fail_queries:
            raise TrackerError("query failed")
        self.queries += 1
        start = int(start_cursor) if start_cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(self.pages) else None
        return TrackerPageBatch(results=self.pages[start:end], next_cursor=next_cursor)

    async def update_status(self, page_id: str, status: str) -> None:
        if page_id in self.fail_updates_for:
            raise TrackerError(f"update failed for {page_id}")
        for index, page in enumerate(self.pages):
            if page.id != page_id:
                continue
            current = page.payload(STATUS_PROPERTY) or {"type": "status"}
            kind = current.get("type", "status")
            properties = dict(page.properties)
            properties[STATUS_PROPERTY] = PageProperty.model_validate({"type": kind, kind: {"name": str(status)}})
            self.pages[index] = page.model_copy(update={"properties": properties})
            self.updates.append(InMemoryUpdate(page_id=page_id, status=str(status)))
            return
        raise TrackerError(f"Page not found: {page_id}")

    async def aclose(self) -> None:
        self.closed = True
