"""Reconcile the status snapshot against pages of the external tracker.

Every page is fetched before the first write. Pages are then handled one at a
time; a page is only written when its current status differs from the status
computed from source, so repeated runs without source changes write nothing.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from resolver_status.core.ports.tracker import TrackerDatabase, TrackerError
from resolver_status.core.registry import SnapshotError, load_snapshot
from resolver_status.models import StatusRegistry, TrackerPage

logger = logging.getLogger(__name__)

NAME_PROPERTY = "Name"
TYPE_PROPERTY = "Type"
STATUS_PROPERTY = "Status"

_WHITESPACE = re.compile(r"\s+")


class Action(StrEnum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PageOutcome:
    page_id: str
    name: str | None
    action: Action
    status: str | None = None
    detail: str = ""


@dataclass
class ReconcileReport:
    outcomes: list[PageOutcome] = field(default_factory=list)

    def count(self, action: Action) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action == action)

    @property
    def updated(self) -> int:
        return self.count(Action.UPDATED)

    @property
    def unchanged(self) -> int:
        return self.count(Action.UNCHANGED)

    @property
    def skipped(self) -> int:
        return self.count(Action.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(Action.FAILED)


def get_page_property(page: TrackerPage, property_name: str) -> str | None:
    """Return the plain value of a title, rich text, select or status property."""
    prop = page.payload(property_name)
    if prop is None:
        return None

    kind = prop.get("type")
    if kind in ("title", "rich_text"):
        runs = prop.get(kind) or []
        return runs[0].get("plain_text") if runs else None
    if kind in ("select", "status"):
        option = prop.get(kind)
        return option.get("name") if option else None
    return None


def match_resolver_type(external_type: str, category: str, operation: str) -> bool:
    """Compare the tracker's free-text type with a resolver's category and operation.

    API resolvers are typed by operation alone ("Query"); every other category
    is prefixed ("Admin Mutation", "ScheduledTask"). Case and whitespace are
    ignored on the tracker side.
    """
    normalized = _WHITESPACE.sub("", external_type.lower())
    if category.lower() == "api":
        return normalized == operation.lower()
    return normalized == f"{category}{operation}".lower()


async def fetch_all_pages(tracker: TrackerDatabase) -> list[TrackerPage]:
    pages: list[TrackerPage] = []
    cursor: str | None = None
    while True:
        batch = await tracker.query_pages(cursor)
        pages.extend(batch.results)
        cursor = batch.next_cursor
        if not cursor:
            break
    logger.info("Fetched %d page(s) from tracker", len(pages))
    return pages


async def _reconcile_page(
    tracker: TrackerDatabase,
    page: TrackerPage,
    registry: StatusRegistry,
    dry_run: bool,
) -> PageOutcome:
    resolver_name = get_page_property(page, NAME_PROPERTY)
    external_type = get_page_property(page, TYPE_PROPERTY)
    current_status = get_page_property(page, STATUS_PROPERTY)

    if not resolver_name or not external_type:
        logger.info("Skipping page %s: missing %s or %s", page.id, NAME_PROPERTY, TYPE_PROPERTY)
        return PageOutcome(page.id, resolver_name, Action.SKIPPED, current_status, "missing name or type")

    resolver = registry.get(resolver_name)
    if resolver is None or not match_resolver_type(external_type, resolver.category, resolver.operation):
        logger.info("No matching resolver found for %s (%s)", resolver_name, external_type)
        return PageOutcome(page.id, resolver_name, Action.SKIPPED, current_status, "no matching resolver")

    if current_status == resolver.status:
        logger.info("%s status is already up to date", resolver_name)
        return PageOutcome(page.id, resolver_name, Action.UNCHANGED, current_status)

    if dry_run:
        logger.info("Would update %s status from %s to %s", resolver_name, current_status, resolver.status)
        return PageOutcome(page.id, resolver_name, Action.UPDATED, resolver.status, "dry run")

    try:
        await tracker.update_status(page.id, resolver.status)
    except Exception:
        logger.exception("Error updating page %s", page.id)
        return PageOutcome(page.id, resolver_name, Action.FAILED, current_status, "update failed")

    logger.info("Updated %s status to %s", resolver_name, resolver.status)
    return PageOutcome(page.id, resolver_name, Action.UPDATED, resolver.status)


async def reconcile(
    tracker: TrackerDatabase,
    registry: StatusRegistry,
    *,
    dry_run: bool = False,
) -> ReconcileReport:
    pages = await fetch_all_pages(tracker)
    report = ReconcileReport()
    for page in pages:
        report.outcomes.append(await _reconcile_page(tracker, page, registry, dry_run))
    return report


async def run_sync(
    tracker: TrackerDatabase,
    snapshot_path: str | Path,
    *,
    dry_run: bool = False,
) -> ReconcileReport | None:
    """Load the snapshot and reconcile it; a fatal error is logged and ends the run."""
    try:
        registry = load_snapshot(snapshot_path)
        return await reconcile(tracker, registry, dry_run=dry_run)
    except (OSError, SnapshotError, TrackerError):
        logger.exception("Reconciliation aborted")
        return None
