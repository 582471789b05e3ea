"""Textual widgets for the document tree and the stats panel."""

from __future__ import annotations

import logging

from textual.widgets import Static, Tree
from textual.widgets.tree import TreeNode as UINode

from jview.model import ChildKey
from jview.render import node_label, stats_table
from jview.tree import DocumentStats, TreeNode

logger = logging.getLogger(__name__)


class JsonTreeView(Tree[TreeNode]):
    """Collapsible view of a built document tree.

    Nodes open according to ``TreeNode.default_open``. When the user expands
    or collapses a node, the choice is remembered by node path and reapplied
    on the next ``show_document`` so a reparse does not undo it.
    """

    DEFAULT_CSS = """
    JsonTreeView {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__("", name=name, id=id, classes=classes)
        self._toggled: dict[tuple[ChildKey, ...], bool] = {}
        self.json_root: TreeNode | None = None

    def is_open(self, node: TreeNode) -> bool:
        return self._toggled.get(node.path, node.default_open)

    def reset_view_state(self) -> None:
        """Forget user toggles; the next document opens by default policy."""
        self._toggled.clear()

    def show_document(self, root: TreeNode) -> None:
        """Replace the displayed tree with *root*."""
        self.json_root = root
        self.reset(node_label(root), data=root)
        stack: list[tuple[TreeNode, UINode[TreeNode]]] = [(root, self.root)]
        while stack:
            node, ui_node = stack.pop()
            if self.is_open(node):
                ui_node.expand()
            for child in node.children:
                if child.is_container:
                    ui_child = ui_node.add(
                        node_label(child),
                        data=child,
                        allow_expand=bool(child.children),
                    )
                    stack.append((child, ui_child))
                else:
                    ui_node.add_leaf(node_label(child), data=child)
        logger.debug("tree view populated from %r", root.name)

    def _remember(self, ui_node: UINode[TreeNode], expanded: bool) -> None:
        """Keep only states that differ from the default policy.

        Expansions made by ``show_document`` match the default or an earlier
        toggle, so replaying them leaves the map unchanged.
        """
        node = ui_node.data
        if node is None:
            return
        if expanded == node.default_open:
            self._toggled.pop(node.path, None)
        else:
            self._toggled[node.path] = expanded

    def on_tree_node_expanded(self, event: Tree.NodeExpanded[TreeNode]) -> None:
        self._remember(event.node, True)

    def on_tree_node_collapsed(self, event: Tree.NodeCollapsed[TreeNode]) -> None:
        self._remember(event.node, False)


class StatsPanel(Static):
    """Labeled document metrics."""

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__("", name=name, id=id, classes=classes)
        self.stats: DocumentStats | None = None

    def show_stats(self, stats: DocumentStats) -> None:
        self.stats = stats
        self.update(stats_table(stats))
