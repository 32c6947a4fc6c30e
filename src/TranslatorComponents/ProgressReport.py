from TranslatorComponents.Token import Token
from TranslatorComponents.CleanLine import CleanLine
from TranslatorComponents.Types import ASTNodeId, BlockId


class ProgressReport:
    """One step of a translator phase, as shown by the UI."""

    def __init__(self, phase_number: str = ""):
        self.current_phase_number = phase_number
        self.action_bar_message = ""


class TrimmingReport(ProgressReport):
    """One source line through the trimmer.

    `kept` is the half-open character range of the line that survives comment
    masking; `product` is the resulting CleanLine.
    """

    def __init__(self):
        super().__init__("1.1")
        self.current_line = 0
        self.kept: tuple[int, int] = (0, 0)
        self.product = CleanLine("", 0)


class TokenizationReport(ProgressReport):
    """One scanner step. `new_token` is None while whitespace is skipped."""

    def __init__(self):
        super().__init__("1.2")
        self.current_line = 0
        self.currently_looked_at: tuple[int, int] = (0, 0)
        self.new_token: Token | None = None


class ParsingReport(ProgressReport):
    """One parser step.

    Token fields move the token table cursor. The ast_* fields describe a
    syntax tree event: "add" a node under `ast_parent_id` or "complete" it.
    A report whose `ast_event` is None only moved the cursor.
    """

    def __init__(self):
        super().__init__("2")
        self.looked_up_token_number: int | None = None
        self.looked_at_token: Token | None = None

        self.ast_event: str | None = None
        self.ast_parent_id: int | None = None
        self.ast_node_id: int | None = None
        self.ast_node_label: str | None = None
        self.ast_node_complete: bool | None = None


class TranslationReport(ProgressReport):
    """
    Progress report for the block translation phase, one per top-level
    statement.

    Attributes:
        looked_at_tree_node_id (ASTNodeId | None): Tree id of the statement being translated.
        new_block_ids (list[BlockId]): Ids of every block created for the statement.
        root_block_id (BlockId | None): Head of the translated chain, if any.
        attached_to (BlockId | None): Block whose next link received the chain,
            None when the chain became a new root.
        dropped (bool): True when the statement had no block equivalent.
    """

    def __init__(self):
        super().__init__("3")
        self.looked_at_tree_node_id: ASTNodeId | None = None
        self.new_block_ids: list[BlockId] = []
        self.root_block_id: BlockId | None = None
        self.attached_to: BlockId | None = None
        self.dropped = False


class CodeGenerationReport(ProgressReport):
    """
    Progress report for code generation: one per top-level chain, then a last
    one carrying the finished program (prologue and shell included) in
    `final_code`.
    """

    def __init__(self):
        super().__init__("4")
        self.backend = ""
        self.looked_at_block_id: BlockId | None = None
        self.new_code: str | None = None
        self.final_code: str | None = None
