"""Unit tests for reconciliation against the tracker."""

from __future__ import annotations

from pathlib import Path

import pytest

from resolver_status.core.reconcile import (
    Action,
    fetch_all_pages,
    get_page_property,
    match_resolver_type,
    reconcile,
    run_sync,
)
from resolver_status.core.registry import write_snapshot
from resolver_status.db import InMemoryTracker, make_page
from resolver_status.models import DeploymentStatus, PageProperty, ResolverRecord, StatusRegistry, TrackerPage


def _registry() -> StatusRegistry:
    return {
        "GET_WIDGET_QUERY": ResolverRecord(
            name="GET_WIDGET_QUERY", category="admin", operation="query", status=DeploymentStatus.DEV
        ),
        "LIST_WIDGETS_QUERY": ResolverRecord(
            name="LIST_WIDGETS_QUERY", category="api", operation="query", status=DeploymentStatus.PROD
        ),
        "cleanupWidgets": ResolverRecord(
            name="cleanupWidgets", category="scheduled", operation="task", status=DeploymentStatus.STAGE
        ),
    }


class TestGetPageProperty:
    def test_reads_title_select_and_status(self) -> None:
        page = make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "Deployed to Dev")
        assert get_page_property(page, "Name") == "GET_WIDGET_QUERY"
        assert get_page_property(page, "Type") == "AdminQuery"
        assert get_page_property(page, "Status") == "Deployed to Dev"

    def test_reads_select_status(self) -> None:
        page = make_page("p1", "x", "Query", "In Progress", status_kind="select")
        assert get_page_property(page, "Status") == "In Progress"

    def test_empty_and_missing_values(self) -> None:
        page = TrackerPage(
            id="p1",
            properties={
                "Name": PageProperty.model_validate({"type": "title", "title": []}),
                "Type": PageProperty.model_validate({"type": "select", "select": None}),
                "Owner": PageProperty.model_validate({"type": "people", "people": []}),
            },
        )
        assert get_page_property(page, "Name") is None
        assert get_page_property(page, "Type") is None
        assert get_page_property(page, "Owner") is None
        assert get_page_property(page, "Status") is None


class TestMatchResolverType:
    def test_api_matches_operation_only(self) -> None:
        assert match_resolver_type("Query", "api", "query")
        assert match_resolver_type(" que ry ", "api", "query")
        assert not match_resolver_type("AdminQuery", "api", "query")

    def test_other_categories_need_prefix(self) -> None:
        assert match_resolver_type("AdminMutation", "admin", "mutation")
        assert match_resolver_type("Admin Mutation", "admin", "mutation")
        assert not match_resolver_type("Mutation", "admin", "mutation")
        assert match_resolver_type("Scheduled Task", "scheduled", "task")
        assert match_resolver_type("UnknownUnknown", "unknown", "unknown")


@pytest.mark.asyncio
async def test_status_already_matches_issues_no_update() -> None:
    tracker = InMemoryTracker([make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "Deployed to Dev")])

    report = await reconcile(tracker, _registry())

    assert tracker.updates == []
    assert report.unchanged == 1


@pytest.mark.asyncio
async def test_drifted_status_is_updated_once() -> None:
    tracker = InMemoryTracker([make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress")])

    report = await reconcile(tracker, _registry())

    assert [(u.page_id, u.status) for u in tracker.updates] == [("p1", "Deployed to Dev")]
    assert report.updated == 1
    assert get_page_property(tracker.pages[0], "Status") == "Deployed to Dev"


@pytest.mark.asyncio
async def test_second_run_is_idempotent() -> None:
    tracker = InMemoryTracker(
        [
            make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress"),
            make_page("p2", "LIST_WIDGETS_QUERY", "Query", None),
            make_page("p3", "cleanupWidgets", "Scheduled Task", "Deployed to Prod"),
        ]
    )

    first = await reconcile(tracker, _registry())
    second = await reconcile(tracker, _registry())

    assert first.updated == 3
    assert second.updated == 0
    assert second.unchanged == 3
    assert len(tracker.updates) == 3


@pytest.mark.asyncio
async def test_skips_missing_fields_unknown_names_and_type_mismatch() -> None:
    tracker = InMemoryTracker(
        [
            make_page("no-name", None, "Query", "In Progress"),
            make_page("no-type", "LIST_WIDGETS_QUERY", None, "In Progress"),
            make_page("unknown", "DOES_NOT_EXIST", "Query", "In Progress"),
            make_page("mismatch", "GET_WIDGET_QUERY", "Query", "In Progress"),
        ]
    )

    report = await reconcile(tracker, _registry())

    assert tracker.updates == []
    assert report.skipped == 4
    details = {o.page_id: o.detail for o in report.outcomes}
    assert details["no-name"] == "missing name or type"
    assert details["no-type"] == "missing name or type"
    assert details["unknown"] == "no matching resolver"
    assert details["mismatch"] == "no matching resolver"


@pytest.mark.asyncio
async def test_update_failure_is_not_fatal() -> None:
    tracker = InMemoryTracker(
        [
            make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress"),
            make_page("p2", "LIST_WIDGETS_QUERY", "Query", "In Progress"),
        ]
    )
    tracker.fail_updates_for.add("p1")

    report = await reconcile(tracker, _registry())

    assert [o.action for o in report.outcomes] == [Action.FAILED, Action.UPDATED]
    assert [u.page_id for u in tracker.updates] == ["p2"]


@pytest.mark.asyncio
async def test_dry_run_writes_nothing() -> None:
    tracker = InMemoryTracker([make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress")])

    report = await reconcile(tracker, _registry(), dry_run=True)

    assert report.updated == 1
    assert tracker.updates == []


@pytest.mark.asyncio
async def test_fetch_follows_cursor_until_exhausted() -> None:
    pages = [make_page(f"p{i}", f"R{i}", "Query", None) for i in range(7)]
    tracker = InMemoryTracker(pages, page_size=3)

    fetched = await fetch_all_pages(tracker)

    assert [p.id for p in fetched] == [p.id for p in pages]
    assert tracker.queries == 3


@pytest.mark.asyncio
async def test_run_sync_loads_snapshot(tmp_path: Path) -> None:
    snapshot = write_snapshot(_registry(), tmp_path / "status.json")
    tracker = InMemoryTracker([make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress")])

    report = await run_sync(tracker, snapshot)

    assert report is not None
    assert report.updated == 1


@pytest.mark.asyncio
async def test_run_sync_aborts_on_fetch_failure(tmp_path: Path) -> None:
    snapshot = write_snapshot(_registry(), tmp_path / "status.json")
    tracker = InMemoryTracker([make_page("p1", "GET_WIDGET_QUERY", "AdminQuery", "In Progress")])
    tracker.fail_queries = True

    assert await run_sync(tracker, snapshot) is None
    assert tracker.updates == []


@pytest.mark.asyncio
async def test_run_sync_aborts_on_missing_snapshot(tmp_path: Path, in_memory_tracker: InMemoryTracker) -> None:
    assert await run_sync(in_memory_tracker, tmp_path / "missing.json") is None
    assert in_memory_tracker.queries == 0
