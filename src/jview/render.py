"""Rich renderables for tree nodes and document statistics."""

from __future__ import annotations

import json

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from jview.model import NodeKind, ValueKind
from jview.tree import DocumentStats, TreeNode

_NAME_STYLE = "dim"
_SIZE_STYLE = "dim italic"
_OBJECT_STYLE = "bold #14b8a6"
_ARRAY_STYLE = "bold #818cf8"
_PRIMITIVE_STYLE = {
    ValueKind.STRING: "#fbbf24",
    ValueKind.NUMBER: "#34d399",
    ValueKind.BOOL: "#c084fc",
    ValueKind.NULL: "#f472b6",
}

STAT_ROWS = (
    ("Nodes scanned", "node_count"),
    ("Objects", "object_count"),
    ("Arrays", "array_count"),
    ("Primitive values", "primitive_count"),
    ("Max depth", "max_depth"),
)


def format_number(value: int) -> str:
    return f"{value:,}"


def primitive_text(node: TreeNode) -> str:
    """Display text for a primitive node's value."""
    kind = node.primitive_kind
    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.BOOL:
        return "true" if node.value else "false"
    if kind is ValueKind.STRING:
        return json.dumps(node.value, ensure_ascii=False)
    return repr(node.value)


def format_primitive(node: TreeNode) -> Text:
    style = _PRIMITIVE_STYLE.get(node.primitive_kind, "")
    return Text(primitive_text(node), style=style)


def node_label(node: TreeNode) -> Text:
    """One-line label: name, kind or value, and a size hint for containers."""
    result = Text()
    if node.name:
        result.append(node.name, style=_NAME_STYLE)
        result.append(" ")
    if node.kind is NodeKind.OBJECT:
        result.append("Object", style=_OBJECT_STYLE)
    elif node.kind is NodeKind.ARRAY:
        result.append("Array", style=_ARRAY_STYLE)
    else:
        result.append_text(format_primitive(node))
        if not node.is_last_sibling:
            result.append(",", style=_NAME_STYLE)
        return result
    result.append(f"  {node.size_label}", style=_SIZE_STYLE)
    return result


def stats_table(stats: DocumentStats) -> Table:
    table = Table(show_header=False, box=None, expand=True, padding=(0, 1))
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")
    for title, attr in STAT_ROWS:
        table.add_row(title, format_number(getattr(stats, attr)))
    return table


def to_rich_tree(root: TreeNode, expand_all: bool = False) -> Tree:
    """Static tree for terminal output.

    Containers that start collapsed are printed without their children
    unless *expand_all* is set.
    """
    rich_root = Tree(node_label(root))
    stack: list[tuple[TreeNode, Tree]] = [(root, rich_root)]
    while stack:
        node, branch = stack.pop()
        if not (expand_all or node.default_open):
            continue
        pending = []
        for child in node.children:
            pending.append((child, branch.add(node_label(child))))
        stack.extend(reversed(pending))
    return rich_root
