"""Outline of top-level declarations, built on tree-sitter.

Item extents come from the parse tree, so nested blocks, strings and comments
containing braces never truncate a body. Leading attributes and doc comments
are attached to the item they sit directly above.
"""

from collections.abc import Iterator
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from rusty_refactor.core.languages import declaration_types, leading_trivia_types, normalize_language
from rusty_refactor.models import SymbolMatch

_KIND_NAMES = {
    "class_definition": "class",
    "function_declaration": "function",
    "function_definition": "function",
    "function_item": "function",
    "macro_definition": "macro",
    "method_declaration": "method",
    "type_declaration": "type",
}


def _first_row(node: Node) -> int:
    return node.start_point[0]


def _last_row(node: Node) -> int:
    """Row of the last character, ignoring a trailing newline the node may own."""
    row, column = node.end_point[0], node.end_point[1]
    if column == 0 and row > node.start_point[0]:
        return row - 1
    return row


def _node_text(node: Node | None, source_bytes: bytes) -> str:
    if node is None:
        return ""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _kind(node_type: str) -> str:
    if node_type in _KIND_NAMES:
        return _KIND_NAMES[node_type]
    return node_type.removesuffix("_item")


def _declared_names(node: Node, source_bytes: bytes, language: str) -> list[tuple[str, str]]:
    """Return ``(name, kind)`` pairs declared by a top-level node."""
    if language == "rust" and node.type == "impl_item":
        type_text = _node_text(node.child_by_field_name("type"), source_bytes)
        trait_node = node.child_by_field_name("trait")
        if trait_node is not None:
            return [(f"impl {_node_text(trait_node, source_bytes)} for {type_text}", "impl")]
        return [(f"impl {type_text}", "impl")]

    if language == "go" and node.type == "type_declaration":
        names = []
        for spec in node.named_children:
            if spec.type in ("type_spec", "type_alias"):
                names.append((_node_text(spec.child_by_field_name("name"), source_bytes), "type"))
        return names

    if language == "python" and node.type == "decorated_definition":
        inner = node.child_by_field_name("definition")
        if inner is None:
            return []
        return [(_node_text(inner.child_by_field_name("name"), source_bytes), _kind(inner.type))]

    name_node = node.child_by_field_name("name")
    if name_node is None:
        return []
    return [(_node_text(name_node, source_bytes), _kind(node.type))]


def _is_attachable(node: Node, source_bytes: bytes, language: str) -> bool:
    if node.type not in leading_trivia_types(language):
        return False
    if language != "rust" or node.type == "attribute_item":
        return True
    text = _node_text(node, source_bytes)
    if node.type == "line_comment":
        return text.startswith("///") and not text.startswith("////")
    return text.startswith("/**") and not text.startswith("/**/")


def _leading_start(siblings: list[Node], index: int, source_bytes: bytes, language: str) -> Node:
    """Walk back over contiguous attributes and doc comments above ``siblings[index]``."""
    first = siblings[index]
    j = index - 1
    while j >= 0:
        candidate = siblings[j]
        if not _is_attachable(candidate, source_bytes, language):
            break
        if _last_row(candidate) < _first_row(first) - 1:
            break
        # A comment trailing the previous item on its own line belongs to that item.
        if j > 0 and _last_row(siblings[j - 1]) == _first_row(candidate):
            break
        first = candidate
        j -= 1
    return first


def _iter_declarations(source_text: str, language: str) -> Iterator[SymbolMatch]:
    resolved = normalize_language(language)
    source_bytes = source_text.encode("utf-8")
    parser = get_parser(cast(SupportedLanguage, resolved))
    tree = parser.parse(source_bytes)

    line_starts = [0]
    newline = source_text.find("\n")
    while newline != -1:
        line_starts.append(newline + 1)
        newline = source_text.find("\n", newline + 1)

    kinds = declaration_types(resolved)
    siblings = list(tree.root_node.children)
    for index, node in enumerate(siblings):
        if node.type not in kinds:
            continue
        first = _leading_start(siblings, index, source_bytes, resolved)
        start_row = _first_row(first)
        end_offset = len(source_bytes[: node.end_byte].decode("utf-8", errors="replace"))
        for name, kind in _declared_names(node, source_bytes, resolved):
            if not name:
                continue
            yield SymbolMatch(
                name=name,
                kind=kind,
                start_line=start_row + 1,
                end_line=_last_row(node) + 1,
                start_offset=line_starts[start_row],
                end_offset=end_offset,
            )


def list_declarations(source_text: str, language: str = "rust") -> list[SymbolMatch]:
    """Return every top-level declaration in source order."""
    return list(_iter_declarations(source_text, language))


def find_declaration(source_text: str, symbol_name: str, language: str = "rust") -> list[SymbolMatch]:
    """Return all top-level declarations named ``symbol_name``, in source order.

    An empty list means the symbol is not declared at the top level.
    """
    if not symbol_name.strip():
        return []
    wanted = symbol_name.strip()
    return [match for match in _iter_declarations(source_text, language) if match.name == wanted]


def symbol_text(source_text: str, match: SymbolMatch) -> str:
    return source_text[match.start_offset : match.end_offset]
