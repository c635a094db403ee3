"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser, Tree
from tree_sitter_language_pack import get_parser

from resolver_status.db import InMemoryTracker

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

WIDGET_RESOLVERS = """\
import * as Admin from "@adminTypes/generated";
import { Api } from "@apiTypes/generated";

export const widgetService = {
  resolvers: [
    { name: Admin.GET_WIDGET_QUERY, environments: { dev: true } },
    { name: Api.UPDATE_WIDGET_MUTATION, environments: { local: true, dev: false } },
    { name: Api.WIDGET_SUBSCRIPTION },
  ],
};
"""

CLEANUP_RESOLVERS = """\
export const cleanupService = {
  resolvers: [
    { name: "cleanupWidgets", scheduleInfo: { cron: "0 3 * * *" }, environments: { stage: true } },
  ],
};
"""


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def parse_ts(typescript_parser: Parser) -> Callable[[str], Tree]:
    def _parse(source: str) -> Tree:
        return typescript_parser.parse(source.encode("utf-8"))

    return _parse


@pytest.fixture
def resolvers_dir(tmp_path: Path) -> Path:
    """A resolver directory with two service files and one file to ignore."""
    directory = tmp_path / "resolvers"
    directory.mkdir()
    (directory / "widgets.ts").write_text(WIDGET_RESOLVERS, encoding="utf-8")
    (directory / "cleanup.ts").write_text(CLEANUP_RESOLVERS, encoding="utf-8")
    (directory / "notes.md").write_text("resolvers: [{ name: 'ignored' }]\n", encoding="utf-8")
    return directory


@pytest.fixture
def in_memory_tracker() -> InMemoryTracker:
    return InMemoryTracker()
