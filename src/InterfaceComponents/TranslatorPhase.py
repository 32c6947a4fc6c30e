from dataclasses import dataclass
from InterfaceComponents.DynamicPanel import DynamicPanelContentType as View


@dataclass(frozen=True)
class Phase:
    """One screen of the translator UI.

    `key` selects the app hooks `enter_<key>` and `tick_<key>`; phases without
    a tick hook complete as soon as they are entered.
    """

    key: str
    name: str
    step_number: str
    description: str
    left_panel_type: View
    left_panel_title: str
    right_panel_type: View
    right_panel_title: str
    action_bar_message: str = ""
    backend: str = ""


SCRIPT_TITLE = "Robot script (JavaScript)"
TOKENS_TITLE = "Tokens"
AST_TITLE = "Syntax tree"
BLOCKS_TITLE = "Block workspace"

PHASES = [
    Phase(
        key="input",
        name="Script Input",
        step_number="0",
        description="Write, paste or open a robot script.",
        left_panel_type=View.SOURCE_CODE_EDITOR,
        left_panel_title=SCRIPT_TITLE,
        right_panel_type=View.HIDDEN,
        right_panel_title="Scripts",
        action_bar_message="Write a script, open one with ctrl+o or load the example with ctrl+e. ctrl+t translates it.",
    ),
    Phase(
        key="trimming",
        name="Trimming",
        step_number="1.1",
        description="Strip comments and blank lines, keeping line numbers.",
        left_panel_type=View.SOURCE_CODE_EDITOR,
        left_panel_title=SCRIPT_TITLE,
        right_panel_type=View.TRIMMED_DISPLAY,
        right_panel_title="Kept lines",
    ),
    Phase(
        key="tokenization",
        name="Tokenization",
        step_number="1.2",
        description="Split the kept lines into tokens.",
        left_panel_type=View.TRIMMED_DISPLAY,
        left_panel_title="Kept lines",
        right_panel_type=View.TOKEN_TABLE,
        right_panel_title=TOKENS_TITLE,
    ),
    Phase(
        key="parsing",
        name="Parsing",
        step_number="2",
        description="Build the syntax tree from the tokens.",
        left_panel_type=View.TOKEN_TABLE,
        left_panel_title=TOKENS_TITLE,
        right_panel_type=View.AST_TREE,
        right_panel_title=AST_TITLE,
    ),
    Phase(
        key="translation",
        name="Block Translation",
        step_number="3",
        description="Turn each statement into connected blocks.",
        left_panel_type=View.AST_TREE,
        left_panel_title=AST_TITLE,
        right_panel_type=View.BLOCK_TREE,
        right_panel_title=BLOCKS_TITLE,
    ),
    Phase(
        key="generation",
        name="JavaScript Generation",
        step_number="4.1",
        description="Render the blocks as JavaScript.",
        left_panel_type=View.BLOCK_TREE,
        left_panel_title=BLOCKS_TITLE,
        right_panel_type=View.PRODUCT_CODE_DISPLAY,
        right_panel_title="Generated JavaScript",
        backend="javascript",
    ),
    Phase(
        key="generation",
        name="Python Generation",
        step_number="4.2",
        description="Render the blocks as a Reachy Mini SDK program.",
        left_panel_type=View.BLOCK_TREE,
        left_panel_title=BLOCKS_TITLE,
        right_panel_type=View.PRODUCT_CODE_DISPLAY,
        right_panel_title="Generated Python",
        backend="python",
    ),
    Phase(
        key="comparison",
        name="Comparison",
        step_number="5",
        description="Original script next to the configured backend's output.",
        left_panel_type=View.SOURCE_CODE_EDITOR,
        left_panel_title=SCRIPT_TITLE,
        right_panel_type=View.PRODUCT_CODE_DISPLAY,
        right_panel_title="Generated code",
    ),
]
