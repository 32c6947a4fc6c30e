from __future__ import annotations

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from TranslatorComponents.ProgressReport import ParsingReport, TranslationReport
from TranslatorComponents.AST import ASTNode


class ASTTree(Tree):
    """Tree widget specialized for incremental AST visualization.

    The parser streams `ParsingReport` events with stable node ids. This widget
    owns the id->TreeNode mapping and the styling rules for incomplete/complete
    nodes. Once the AST is complete it is rebuilt from the root so every node
    carries its tree id, which translation reports point back to.
    """

    def __init__(self, label: str = "Root", **kwargs):
        super().__init__(label, **kwargs)
        self._nodes_by_id: dict[int, TreeNode] = {0: self.root}

    def reset_tree(self, root_label: str = "program") -> None:
        self.clear()
        self.root.label = root_label
        self.root.expand()
        self._nodes_by_id = {0: self.root}

    def apply_progress_report(
        self,
        parsing_report: ParsingReport | None = None,
        translation_report: TranslationReport | None = None,
    ) -> None:
        if parsing_report:
            self.apply_parsing_report(parsing_report)
        elif translation_report:
            self.apply_translation_report(translation_report)

    def _existing_label(self, node: TreeNode) -> str:
        return node.label.plain if isinstance(node.label, Text) else str(node.label)

    def apply_parsing_report(self, report: ParsingReport) -> None:
        if report.ast_node_id is None:
            return
        existing = self._nodes_by_id.get(report.ast_node_id)

        if report.ast_event == "complete":
            if existing is not None:
                existing.set_label(Text(self._existing_label(existing), style="white"))
        elif report.ast_node_label is not None:
            parent_id = report.ast_parent_id if report.ast_parent_id is not None else 0
            parent_node = self._nodes_by_id.get(parent_id, self.root)
            style = "red" if report.ast_node_complete is False else "white"
            child_node = parent_node.add(Text(report.ast_node_label, style=style))
            parent_node.expand()
            self._nodes_by_id[report.ast_node_id] = child_node
        self.action_scroll_end()

    def apply_translation_report(self, report: TranslationReport) -> None:
        if report.looked_at_tree_node_id is None:
            return
        node = self.get_node_by_id(report.looked_at_tree_node_id)
        # Statements without a block equivalent stay marked in grey.
        if report.dropped:
            node.set_label(Text(self._existing_label(node), style="grey50 strike"))
        self.move_cursor(node)
        self.scroll_to_node(node)

    def build_from_ast_root(self, ast_root: ASTNode) -> None:
        """Rebuild the whole tree from `ast_root`, assigning every AST node
        the id of its tree node.
        """
        self.reset_tree(root_label="program")
        ast_root.unique_id = self.root.id
        self._build_subtree(ast_root, self.root)
        self.root.expand()
        self.action_scroll_home()

    def _build_subtree(self, ast_node: ASTNode, tree_node: TreeNode) -> None:
        for child in ast_node.edges:
            child_tree_node = tree_node.add(Text(child.unindented_representation(), style="white"))
            child.unique_id = child_tree_node.id
            child_tree_node.expand()
            self._build_subtree(child, child_tree_node)
