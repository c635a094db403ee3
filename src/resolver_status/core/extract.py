from pathlib import Path

from tree_sitter import Node

from resolver_status.core.ast import node_text, parse_file, parse_source, walk
from resolver_status.core.classifier import classify_resolver
from resolver_status.core.imports import ImportTable, build_import_table
from resolver_status.models import ResolverRecord

RESOLVERS_PROPERTY = "resolvers"


def _resolver_arrays(obj: Node) -> list[Node]:
    arrays: list[Node] = []
    for prop in obj.named_children:
        if prop.type != "pair":
            continue
        key = prop.child_by_field_name("key")
        value = prop.child_by_field_name("value")
        if (
            key is not None
            and key.type == "property_identifier"
            and node_text(key) == RESOLVERS_PROPERTY
            and value is not None
            and value.type == "array"
        ):
            arrays.append(value)
    return arrays


def extract_resolvers(root: Node, imports: ImportTable | None = None) -> list[ResolverRecord]:
    """Classify every object element of every ``resolvers: [...]`` array under ``root``.

    The walk does not stop at a match, so resolver arrays nested inside other
    resolver declarations are picked up too. Records come back in source order.
    """
    import_table = build_import_table(root) if imports is None else imports
    records: list[ResolverRecord] = []

    def visit(node: Node) -> None:
        if node.type != "object":
            return
        for array in _resolver_arrays(node):
            for element in array.named_children:
                if element.type != "object":
                    continue
                record = classify_resolver(element, import_table)
                if record is not None:
                    records.append(record)

    walk(root, visit)
    return records


def extract_resolvers_from_source(source: str, language: str = "typescript") -> list[ResolverRecord]:
    tree = parse_source(source.encode("utf-8"), language)
    return extract_resolvers(tree.root_node)


def extract_resolvers_from_file(path: str | Path, language: str | None = None) -> list[ResolverRecord]:
    tree = parse_file(path, language)
    return extract_resolvers(tree.root_node)
