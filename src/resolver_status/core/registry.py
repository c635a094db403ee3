import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from resolver_status.core.extract import extract_resolvers_from_file
from resolver_status.core.languages import source_extensions
from resolver_status.models import StatusRegistry

logger = logging.getLogger(__name__)

_REGISTRY_ADAPTER: TypeAdapter[StatusRegistry] = TypeAdapter(StatusRegistry)


class SnapshotError(ValueError):
    """Raised when a status snapshot cannot be decoded."""


def list_source_files(directory: str | Path, extensions: Iterable[str] | None = None) -> list[Path]:
    """Return the source files directly inside ``directory``, sorted by name."""
    suffixes = source_extensions(extensions)
    return sorted(
        (entry for entry in Path(directory).iterdir() if entry.is_file() and entry.suffix.lower() in suffixes),
        key=lambda entry: entry.name,
    )


def build_registry(directory: str | Path, extensions: Iterable[str] | None = None) -> StatusRegistry:
    """Extract resolvers from every source file in ``directory`` into one registry.

    Files are processed one at a time in lexicographic order. When two
    declarations share a name the later one replaces the earlier, so the result
    for such names depends on file naming.
    """
    registry: StatusRegistry = {}
    for file_path in list_source_files(directory, extensions):
        records = extract_resolvers_from_file(file_path)
        logger.debug("Extracted %d resolver(s) from %s", len(records), file_path)
        for record in records:
            previous = registry.get(record.name)
            if previous is not None and previous != record:
                logger.warning("Resolver %s redeclared in %s, replacing earlier entry", record.name, file_path)
            registry[record.name] = record
    return registry


def dump_snapshot(registry: StatusRegistry) -> str:
    payload = _REGISTRY_ADAPTER.dump_python(registry, mode="json")
    return json.dumps(payload, indent=2) + "\n"


def write_snapshot(registry: StatusRegistry, path: str | Path) -> Path:
    snapshot_path = Path(path)
    snapshot_path.write_text(dump_snapshot(registry), encoding="utf-8")
    return snapshot_path


def load_snapshot(path: str | Path) -> StatusRegistry:
    data = Path(path).read_text(encoding="utf-8")
    try:
        return _REGISTRY_ADAPTER.validate_json(data)
    except ValidationError as exc:
        raise SnapshotError(f"Malformed status snapshot: {path}") from exc
