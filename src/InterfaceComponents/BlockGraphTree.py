from __future__ import annotations

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from TranslatorComponents.Graph import Block, Workspace
from TranslatorComponents.ProgressReport import CodeGenerationReport, TranslationReport
from TranslatorComponents.Types import BlockId


class BlockGraphTree(Tree):
    """Tree view of a block workspace.

    Top-level stacks hang under the root in document order. A block's next
    block is shown as its sibling, and every filled input as a child labelled
    with the input name. Blocks created by the latest translation step are
    shown in green.
    """

    def __init__(self, label: str = "Workspace", **kwargs):
        super().__init__(label, **kwargs)
        self._nodes_by_block: dict[BlockId, TreeNode] = {}

    def reset_tree(self) -> None:
        self.clear()
        self.root.label = "Workspace"
        self.root.expand()
        self._nodes_by_block = {}

    def build_from_workspace(self, workspace: Workspace, fresh: set[BlockId] | None = None) -> None:
        self.reset_tree()
        fresh = fresh or set()
        for root in workspace.top_blocks():
            position = Text(f"stack at ({root.x:g}, {root.y:g})", style="cyan")
            stack_node = self.root.add(position, expand=True)
            self._add_chain(root, stack_node, fresh)
        self.root.expand()

    def _add_chain(self, head: Block, parent: TreeNode, fresh: set[BlockId], slot: str = "") -> None:
        for member in head.chain():
            prefix = f"{slot}: " if slot and member is head else ""
            style = "green" if member.id in fresh else "white"
            if not member.enabled:
                style = "grey50"
            node = parent.add(Text(f"{prefix}{member.label()}", style=style), expand=True)
            self._nodes_by_block[member.id] = node
            for name, block_input in member.inputs.items():
                if block_input.target is not None:
                    self._add_chain(block_input.target, node, fresh, slot=name)

    def _focus_block(self, block_id: BlockId | None) -> None:
        node = self._nodes_by_block.get(block_id) if block_id is not None else None
        if node is not None:
            self.move_cursor(node)
            self.scroll_to_node(node)

    def apply_progress_report(
        self,
        workspace: Workspace,
        translation_report: TranslationReport | None = None,
        code_generation_report: CodeGenerationReport | None = None,
    ) -> None:
        if translation_report:
            self.build_from_workspace(workspace, fresh=set(translation_report.new_block_ids))
            self._focus_block(translation_report.root_block_id)
        elif code_generation_report:
            self._focus_block(code_generation_report.looked_at_block_id)
