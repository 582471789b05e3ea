"""Render tree and document statistics derived from a decoded JSON value.

Both outputs come from the same depth-first traversal. The traversal keeps an
explicit work stack instead of recursing, so documents nested deeper than the
interpreter recursion limit are handled like any other input. Comparison and
repr of ``TreeNode`` avoid recursion for the same reason.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from jview.model import (
    ChildKey,
    Classification,
    JsonValue,
    NodeKind,
    ValueKind,
    classify,
)

logger = logging.getLogger(__name__)

# Nodes shallower than this start expanded.
DEFAULT_OPEN_DEPTH = 2


@dataclass(eq=False)
class TreeNode:
    """One node of the render tree.

    ``name`` is the label shown next to the node: the key for object members,
    ``"[i]"`` for array elements and the root label for the root (``None``
    when the root is unlabeled). ``key`` is the raw key/index under the parent.

    Nodes are only filled in by ``build()``; everything else treats them as
    read-only. ``children`` stays a list because ``build()`` attaches children
    after the parent exists.
    """

    name: str | None
    kind: NodeKind
    depth: int
    key: ChildKey | None = None
    primitive_kind: ValueKind | None = None
    value: Any = None
    is_last_sibling: bool = True
    children: list[TreeNode] = field(default_factory=list, repr=False)
    parent: TreeNode | None = field(default=None, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.shape() == other.shape()

    __hash__ = None  # type: ignore[assignment]

    def shape(self) -> list[tuple[Any, ...]]:
        """Pre-order list of per-node fields; equal shapes mean equal trees."""
        return [
            (
                n.depth,
                n.key,
                n.name,
                n.kind,
                n.is_last_sibling,
                n.primitive_kind,
                n.value,
                len(n.children),
            )
            for n in iter_nodes(self)
        ]

    @property
    def default_open(self) -> bool:
        return self.depth < DEFAULT_OPEN_DEPTH

    @property
    def is_container(self) -> bool:
        return self.kind is not NodeKind.PRIMITIVE

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def size_label(self) -> str:
        """Child count with its noun, e.g. ``3 fields`` or ``1 item``."""
        n = len(self.children)
        if self.kind is NodeKind.OBJECT:
            return f"{n} {'field' if n == 1 else 'fields'}"
        if self.kind is NodeKind.ARRAY:
            return f"{n} {'item' if n == 1 else 'items'}"
        return ""

    @property
    def path(self) -> tuple[ChildKey, ...]:
        """Keys and indices leading from the root to this node."""
        keys: list[ChildKey] = []
        node: TreeNode | None = self
        while node is not None and node.parent is not None:
            keys.append(node.key)  # type: ignore[arg-type]
            node = node.parent
        keys.reverse()
        return tuple(keys)


@dataclass(frozen=True)
class DocumentStats:
    """Whole-document counts and the deepest node depth."""

    node_count: int = 0
    object_count: int = 0
    array_count: int = 0
    primitive_count: int = 0
    max_depth: int = 0

    @classmethod
    def for_node(cls, kind: NodeKind, depth: int) -> DocumentStats:
        """Contribution of a single node at *depth*."""
        return cls(
            node_count=1,
            object_count=1 if kind is NodeKind.OBJECT else 0,
            array_count=1 if kind is NodeKind.ARRAY else 0,
            primitive_count=1 if kind is NodeKind.PRIMITIVE else 0,
            max_depth=depth,
        )

    def __add__(self, other: DocumentStats) -> DocumentStats:
        if not isinstance(other, DocumentStats):
            return NotImplemented
        return DocumentStats(
            node_count=self.node_count + other.node_count,
            object_count=self.object_count + other.object_count,
            array_count=self.array_count + other.array_count,
            primitive_count=self.primitive_count + other.primitive_count,
            max_depth=max(self.max_depth, other.max_depth),
        )


def _child_label(parent_kind: NodeKind, key: ChildKey) -> str:
    if parent_kind is NodeKind.ARRAY:
        return f"[{key}]"
    return str(key)


def _make_node(
    value: JsonValue,
    name: str | None,
    key: ChildKey | None,
    depth: int,
    is_last: bool,
    parent: TreeNode | None,
) -> tuple[TreeNode, Classification]:
    info = classify(value)
    kind = info.node_kind
    primitive = kind is NodeKind.PRIMITIVE
    node = TreeNode(
        name=name,
        kind=kind,
        depth=depth,
        key=key,
        primitive_kind=info.kind if primitive else None,
        value=value if primitive else None,
        is_last_sibling=is_last,
        parent=parent,
    )
    return node, info


def build(
    value: JsonValue, root_label: str | None = "root"
) -> tuple[TreeNode, DocumentStats]:
    """Build the render tree for *value* and fold its statistics.

    Children keep document order (key insertion order for objects, index
    order for arrays) and are expanded depth-first. The stats are the sum of
    every node's contribution, so they equal ``collect_stats(value)``.
    """
    root, root_info = _make_node(value, root_label, None, 0, True, None)
    stats = DocumentStats.for_node(root.kind, 0)
    stack: list[tuple[TreeNode, Classification]] = [(root, root_info)]

    while stack:
        node, info = stack.pop()
        last = len(info.children) - 1
        created: list[tuple[TreeNode, Classification]] = []
        for idx, (child_key, child) in enumerate(info.children):
            child_node, child_info = _make_node(
                child,
                _child_label(node.kind, child_key),
                child_key,
                node.depth + 1,
                idx == last,
                node,
            )
            node.children.append(child_node)
            stats = stats + DocumentStats.for_node(child_node.kind, child_node.depth)
            created.append((child_node, child_info))
        # Reversed so the first child is expanded first.
        stack.extend(reversed(created))

    logger.debug(
        "built tree: %d nodes, max depth %d", stats.node_count, stats.max_depth
    )
    return root, stats


def collect_stats(value: JsonValue) -> DocumentStats:
    """Statistics only, without materializing the render tree."""
    stats = DocumentStats()
    stack: list[tuple[JsonValue, int]] = [(value, 0)]
    while stack:
        current, depth = stack.pop()
        info = classify(current)
        stats = stats + DocumentStats.for_node(info.node_kind, depth)
        stack.extend((child, depth + 1) for _, child in info.children)
    return stats


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Yield *root* and all descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
