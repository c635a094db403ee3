"""Map locally bound import names to the module path they come from."""

from tree_sitter import Node

from resolver_status.core.ast import node_text

ImportTable = dict[str, str]


def _module_path(source: Node | None) -> str:
    return node_text(source).replace('"', "").replace("'", "")


def _bind_import_clause(clause: Node, path: str, table: ImportTable) -> None:
    for child in clause.named_children:
        if child.type == "identifier":
            table[node_text(child)] = path
        elif child.type == "namespace_import":
            for ident in child.named_children:
                if ident.type == "identifier":
                    table[node_text(ident)] = path
        elif child.type == "named_imports":
            for specifier in child.named_children:
                if specifier.type != "import_specifier":
                    continue
                local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                if local is not None:
                    table[node_text(local)] = path


def _bind_import(statement: Node, table: ImportTable) -> None:
    source = statement.child_by_field_name("source")
    for child in statement.named_children:
        if child.type == "import_clause":
            _bind_import_clause(child, _module_path(source), table)
        elif child.type == "import_require_clause":
            # import Foo = require("path")
            require_source = child.child_by_field_name("source") or source
            for ident in child.named_children:
                if ident.type == "identifier":
                    table[node_text(ident)] = _module_path(require_source)
                    break


def _bind_reexport(statement: Node, table: ImportTable) -> None:
    source = statement.child_by_field_name("source")
    if source is None:
        return
    path = _module_path(source)
    for child in statement.named_children:
        if child.type == "namespace_export":
            for name in child.named_children:
                table[node_text(name)] = path
        elif child.type == "export_clause":
            for specifier in child.named_children:
                if specifier.type != "export_specifier":
                    continue
                local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                if local is not None:
                    table[node_text(local)] = path


def build_import_table(root: Node) -> ImportTable:
    """Build the import table of one parsed file.

    Only the literal module path is kept; nothing is resolved transitively.
    Type-only imports and re-exports with a ``from`` clause bind names the same
    way value imports do.
    """
    table: ImportTable = {}
    for statement in root.named_children:
        if statement.type == "import_statement":
            _bind_import(statement, table)
        elif statement.type == "export_statement":
            _bind_reexport(statement, table)
    return table
