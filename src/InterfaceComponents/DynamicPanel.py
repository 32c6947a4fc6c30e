from enum import StrEnum

from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import ContentSwitcher, Tree

from InterfaceComponents.ASTTree import ASTTree
from InterfaceComponents.BlockGraphTree import BlockGraphTree
from InterfaceComponents.ProductCodeDisplay import ProductCodeEditor
from InterfaceComponents.SourceCodeEditor import SourceCodeEditor
from InterfaceComponents.TokenTable import TokenTable
from InterfaceComponents.TrimmedDisplay import TrimmedDisplay


class DynamicPanelContentType(StrEnum):
    DIRECTORY_TREE = "directory_tree"
    SOURCE_CODE_EDITOR = "source_code_editor"
    TRIMMED_DISPLAY = "trimmed_display"
    TOKEN_TABLE = "token_table"
    AST_TREE = "ast_tree"
    BLOCK_TREE = "block_tree"
    PRODUCT_CODE_DISPLAY = "product_code_display"
    HIDDEN = "hidden"


class DynamicPanel(Container):
    """Bordered panel that shows one translator view at a time."""

    content_type = reactive(DynamicPanelContentType.HIDDEN)
    title = reactive("")
    source_editable = reactive(False)

    def __init__(self, title: str, **kwargs):
        super().__init__(**kwargs)
        self.title = title

        self.directory_tree = Tree("Scripts", id="directory-tree")
        self.source_editor = SourceCodeEditor(id="source-code-editor")
        self.trimmed_display = TrimmedDisplay(id="trimmed-display", read_only=True)
        self.token_table = TokenTable(id="token-table")
        self.ast_tree = ASTTree("program", id="ast-tree")
        self.block_tree = BlockGraphTree("Workspace", id="block-tree")
        self.product_code_display = ProductCodeEditor(id="product-code-display", read_only=True)

        self._views: dict[DynamicPanelContentType, Widget] = {
            DynamicPanelContentType.DIRECTORY_TREE: self.directory_tree,
            DynamicPanelContentType.SOURCE_CODE_EDITOR: self.source_editor,
            DynamicPanelContentType.TRIMMED_DISPLAY: self.trimmed_display,
            DynamicPanelContentType.TOKEN_TABLE: self.token_table,
            DynamicPanelContentType.AST_TREE: self.ast_tree,
            DynamicPanelContentType.BLOCK_TREE: self.block_tree,
            DynamicPanelContentType.PRODUCT_CODE_DISPLAY: self.product_code_display,
        }

    def compose(self) -> ComposeResult:
        with ContentSwitcher(initial=self.source_editor.id):
            yield from self._views.values()

    def watch_content_type(self, content_type: DynamicPanelContentType):
        hidden = content_type == DynamicPanelContentType.HIDDEN
        self.set_class(hidden, "hidden")
        if hidden:
            return
        view = self._views.get(content_type)
        if view is None:
            raise ValueError(f"No view for panel content {content_type!r}.")
        self.query_one(ContentSwitcher).current = view.id

    def watch_title(self, new_title: str):
        self.border_title = new_title

    def watch_source_editable(self, editable: bool):
        self.source_editor.read_only = not editable
