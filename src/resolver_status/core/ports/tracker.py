from typing import Protocol

from resolver_status.models import TrackerPageBatch


class TrackerError(RuntimeError):
    """Raised by tracker adapters when the external database call fails."""


class TrackerDatabase(Protocol):
    async def query_pages(self, start_cursor: str | None = None) -> TrackerPageBatch: ...

    async def update_status(self, page_id: str, status: str) -> None: ...

    async def aclose(self) -> None: ...
