from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol, TypeVar, cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from resolver_status.core.languages import detect_language_from_path, normalize_language


class WalkableNode(Protocol):
    @property
    def type(self) -> str: ...


N = TypeVar("N", bound=WalkableNode)


def _default_children(node: Any) -> Iterable[Any]:
    return node.children


def walk(
    root: N,
    visit: Callable[[N], None],
    children: Callable[[N], Iterable[N]] = _default_children,
) -> None:
    """Visit ``root`` and every descendant in pre-order (document order).

    Only ``children`` knows how to descend, so the walk works on tree-sitter
    nodes as well as on any hand-built tree.
    """
    stack: list[N] = [root]
    while stack:
        node = stack.pop()
        visit(node)
        stack.extend(reversed(list(children(node))))


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def parse_source(source_bytes: bytes, language: str = "typescript") -> Tree:
    parser = get_parser(cast(SupportedLanguage, normalize_language(language)))
    return parser.parse(source_bytes)


def parse_file(path: str | Path, language: str | None = None) -> Tree:
    file_path = Path(path)
    resolved_language = normalize_language(language) if language else detect_language_from_path(file_path)
    source_bytes = file_path.read_text(encoding="utf-8").encode("utf-8")
    return parse_source(source_bytes, resolved_language)
