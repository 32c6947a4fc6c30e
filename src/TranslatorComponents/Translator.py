"""AST to block graph translation.

Expressions become value blocks and statements become statement chains.
Constructs with no block equivalent translate to None and are dropped
without aborting their siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from dataclasses import dataclass, field

from TranslatorComponents.AST import (
    ArrayExpression,
    AssignmentExpression,
    AwaitExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    Expression,
    ExpressionStatement,
    ForStatement,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    Program,
    Statement,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from TranslatorComponents.FunctionTable import ArgKind, FunctionEntry, Shape, entry_for_call
from TranslatorComponents.Graph import BLOCK_SPECS, COORDINATE_NAMES, Block, BlockType, Workspace, format_number
from TranslatorComponents.Lexer import LexingError
from TranslatorComponents.Parser import ParsingError, parse_source
from TranslatorComponents.ProgressReport import TranslationReport

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = {
    "==": "EQ",
    "===": "EQ",
    "!=": "NEQ",
    "!==": "NEQ",
    "<": "LT",
    "<=": "LTE",
    ">": "GT",
    ">=": "GTE",
}

ARITHMETIC_OPERATORS = {
    "+": "ADD",
    "-": "MINUS",
    "*": "MULTIPLY",
    "/": "DIVIDE",
    "%": "MODULO",
    "**": "POWER",
}

COMPOUND_OPERATORS = {
    "+=": "ADD",
    "-=": "MINUS",
    "*=": "MULTIPLY",
    "/=": "DIVIDE",
    "%=": "MODULO",
    "**=": "POWER",
}

FORWARD_TRIG = {"Math.sin": "SIN", "Math.cos": "COS", "Math.tan": "TAN"}
INVERSE_TRIG = {"Math.asin": "ASIN", "Math.acos": "ACOS", "Math.atan": "ATAN"}
ROUNDING = {"Math.round": "ROUND", "Math.ceil": "ROUNDUP", "Math.floor": "ROUNDDOWN"}
SINGLE = {"Math.abs": "ABS", "Math.sqrt": "ROOT"}

_NOT_LITERAL = object()


def literal_value(node: Expression | None):
    """Python value of a literal argument, `-literal` included; `_NOT_LITERAL` otherwise."""
    match node:
        case Literal(kind="null"):
            return _NOT_LITERAL
        case Literal():
            return node.value
        case UnaryExpression(operator="-", operand=Literal(kind="number")):
            return -node.operand.value
    return _NOT_LITERAL


def _is_math_pi(node: Expression) -> bool:
    return isinstance(node, MemberExpression) and node.dotted_name() == "Math.PI"


def _is_number(node: Expression, value: int | float) -> bool:
    return isinstance(node, Literal) and node.is_number and node.value == value


def _unwrap_await(node: Expression) -> Expression:
    while isinstance(node, AwaitExpression):
        node = node.argument
    return node


def match_degrees_to_radians(node: Expression) -> Expression | None:
    """Return `inner` for `(inner * Math.PI) / 180`, None for any other shape."""
    match node:
        case BinaryExpression(operator="/", left=BinaryExpression(operator="*") as product, right=right):
            if _is_number(right, 180) and _is_math_pi(product.right):
                return product.left
    return None


def match_radians_to_degrees(node: Expression) -> tuple[str, Expression] | None:
    """Return (op, x) for `Math.asin|acos|atan(x) * 180 / Math.PI`."""
    match node:
        case BinaryExpression(operator="/", left=BinaryExpression(operator="*") as product, right=right):
            call = _unwrap_await(product.left)
            if (
                _is_math_pi(right)
                and _is_number(product.right, 180)
                and isinstance(call, CallExpression)
                and call.callee_name() in INVERSE_TRIG
                and len(call.arguments) >= 1
            ):
                return INVERSE_TRIG[call.callee_name()], call.arguments[0]
    return None


def flatten_concatenation(node: Expression) -> list[Expression]:
    """Operands of a left-associative `+` chain, recursing only through `+`."""
    if isinstance(node, BinaryExpression) and node.operator == "+":
        return flatten_concatenation(node.left) + flatten_concatenation(node.right)
    return [node]


def _field_text(value) -> str | None:
    if isinstance(value, bool) or value is _NOT_LITERAL or value is None:
        return None
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


class BlockTranslator:
    """Translates AST nodes into blocks of one workspace.

    Attributes:
        workspace (Workspace): Target workspace. Blocks are created detached.
        created (list[Block]): Every block created so far, in creation order.
        dropped (int): Number of statements or expressions that had no block equivalent.
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace
        self.created: list[Block] = []
        self.dropped = 0

    def _new(self, block_type: BlockType, **shape) -> Block:
        block = self.workspace.new_block(block_type, **shape)
        self.created.append(block)
        return block

    def _drop(self, node, reason: str) -> None:
        self.dropped += 1
        logger.debug("Line %s: dropped %s (%s)", node.line, node.unindented_representation(), reason)

    def _connect(self, block: Block, input_name: str, node: Expression | None) -> Block | None:
        """Translate `node` and plug it into `input_name`; empty inputs are left empty.

        A child without an output plug is left detached, like a block dropped
        next to the input instead of into it.
        """
        if node is None:
            return None
        child = self.translate_expression(node)
        if child is None or not child.has_output:
            return None
        block.connect_value(input_name, child)
        return child

    def _number(self, value: int | float) -> Block:
        block = self._new(BlockType.MATH_NUMBER)
        block.set_field("NUM", format_number(value))
        return block

    def _variable_get(self, name: str) -> Block:
        block = self._new(BlockType.VARIABLES_GET)
        block.set_field("VAR", self.workspace.variable(name).id)
        return block

    def _variable_set(self, name: str, value: Expression | None) -> Block:
        block = self._new(BlockType.VARIABLES_SET)
        block.set_field("VAR", self.workspace.variable(name).id)
        self._connect(block, "VALUE", value)
        return block

    def _arithmetic(self, op: str, left: Block | None, right: Block | None) -> Block:
        block = self._new(BlockType.MATH_ARITHMETIC)
        block.set_field("OP", op)
        if left is not None:
            block.connect_value("A", left)
        if right is not None:
            block.connect_value("B", right)
        return block

    def _one_based_index(self, index: Expression) -> Block | None:
        """Visual lists count from 1: fold `k` into `k+1`, wrap anything else in `+ 1`."""
        value = literal_value(index)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return self._number(value + 1)
        translated = self.translate_expression(index)
        if translated is None:
            return None
        return self._arithmetic("ADD", translated, self._number(1))

    # ----- expressions -----

    def translate_expression(self, node: Expression) -> Block | None:
        """Translate one expression into a value block (or subtree), None if unsupported."""
        match node:
            case AwaitExpression():
                return self.translate_expression(node.argument)
            case Literal():
                return self._translate_literal(node)
            case Identifier():
                return self._variable_get(node.name)
            case UnaryExpression(operator="-"):
                block = self._new(BlockType.MATH_SINGLE)
                block.set_field("OP", "NEG")
                self._connect(block, "NUM", node.operand)
                return block
            case UnaryExpression(operator="!"):
                block = self._new(BlockType.LOGIC_NEGATE)
                self._connect(block, "BOOL", node.operand)
                return block
            case LogicalExpression():
                block = self._new(BlockType.LOGIC_OPERATION)
                block.set_field("OP", "AND" if node.operator == "&&" else "OR")
                self._connect(block, "A", node.left)
                self._connect(block, "B", node.right)
                return block
            case BinaryExpression():
                return self._translate_binary(node)
            case CallExpression():
                return self._translate_call(node, Shape.VALUE)
            case MemberExpression():
                return self._translate_member(node)
            case ArrayExpression():
                return self._translate_array(node)
            case AssignmentExpression():
                # Assignments only have a statement form.
                self._drop(node, "assignment used as a value")
                return None
        self._drop(node, "no value block")
        return None

    def _translate_literal(self, node: Literal) -> Block | None:
        if node.is_number:
            return self._number(node.value)
        if node.is_string:
            block = self._new(BlockType.TEXT)
            block.set_field("TEXT", node.value)
            return block
        if node.kind == "boolean":
            block = self._new(BlockType.LOGIC_BOOLEAN)
            block.set_field("BOOL", "TRUE" if node.value else "FALSE")
            return block
        self._drop(node, "null has no block")
        return None

    def _translate_binary(self, node: BinaryExpression) -> Block | None:
        inverse = match_radians_to_degrees(node)
        if inverse is not None:
            op, argument = inverse
            return self._trig(op, argument, degrees=True)

        if node.operator in COMPARISON_OPERATORS:
            block = self._new(BlockType.LOGIC_COMPARE)
            block.set_field("OP", COMPARISON_OPERATORS[node.operator])
            self._connect(block, "A", node.left)
            self._connect(block, "B", node.right)
            return block

        if node.operator == "+":
            parts = flatten_concatenation(node)
            if any(isinstance(part, Literal) and part.is_string for part in parts):
                block = self._new(BlockType.TEXT_JOIN, item_count=len(parts))
                for i, part in enumerate(parts):
                    self._connect(block, f"ADD{i}", part)
                return block

        if node.operator in ARITHMETIC_OPERATORS:
            return self._arithmetic(
                ARITHMETIC_OPERATORS[node.operator],
                self.translate_expression(node.left),
                self.translate_expression(node.right),
            )
        self._drop(node, f"operator {node.operator}")
        return None

    def _trig(self, op: str, argument: Expression, degrees: bool) -> Block:
        block = self._new(BlockType.MATH_TRIG)
        block.set_field("OP", op)
        block.set_field("UNIT", "DEGREES" if degrees else "RADIANS")
        self._connect(block, "NUM", argument)
        return block

    def _translate_member(self, node: MemberExpression) -> Block | None:
        if _is_math_pi(node):
            return self._new(BlockType.MATH_CONSTANT)
        if not node.computed and isinstance(node.property, Identifier) and node.property.name == "length":
            block = self._new(BlockType.LISTS_LENGTH)
            self._connect(block, "VALUE", node.object)
            return block
        if node.computed:
            block = self._new(BlockType.LISTS_GET_INDEX)
            self._connect(block, "VALUE", node.object)
            index = self._one_based_index(node.property)
            if index is not None:
                block.connect_value("AT", index)
            return block
        self._drop(node, "property access")
        return None

    def _translate_array(self, node: ArrayExpression) -> Block:
        if len(node.elements) == len(COORDINATE_NAMES):
            block = self._new(BlockType.CREATE_COORDINATES)
            for name, element in zip(COORDINATE_NAMES, node.elements):
                self._connect(block, name, element)
            return block
        block = self._new(BlockType.LISTS_CREATE_WITH, item_count=len(node.elements))
        for i, element in enumerate(node.elements):
            self._connect(block, f"ADD{i}", element)
        return block

    def _translate_assignment(self, node: AssignmentExpression) -> Block | None:
        target = node.target
        if isinstance(target, MemberExpression) and target.computed:
            if node.operator != "=":
                self._drop(node, "compound assignment to an element")
                return None
            block = self._new(BlockType.LISTS_SET_INDEX)
            self._connect(block, "LIST", target.object)
            index = self._one_based_index(target.property)
            if index is not None:
                block.connect_value("AT", index)
            self._connect(block, "TO", node.value)
            return block

        if not isinstance(target, Identifier):
            self._drop(node, "assignment to a property")
            return None

        if node.operator == "=":
            return self._variable_set(target.name, node.value)

        block = self._new(BlockType.VARIABLES_SET)
        block.set_field("VAR", self.workspace.variable(target.name).id)
        arithmetic = self._arithmetic(
            COMPOUND_OPERATORS[node.operator],
            self._variable_get(target.name),
            self.translate_expression(node.value),
        )
        block.connect_value("VALUE", arithmetic)
        return block

    def _translate_call(self, node: CallExpression, position: Shape) -> Block | None:
        callee = node.callee_name()
        arguments = node.arguments

        if position == Shape.VALUE:
            if callee in FORWARD_TRIG and arguments:
                inner = match_degrees_to_radians(arguments[0])
                if inner is not None:
                    return self._trig(FORWARD_TRIG[callee], inner, degrees=True)
                return self._trig(FORWARD_TRIG[callee], arguments[0], degrees=False)
            if callee in INVERSE_TRIG and arguments:
                return self._trig(INVERSE_TRIG[callee], arguments[0], degrees=False)
            if callee in ROUNDING and arguments:
                block = self._new(BlockType.MATH_ROUND)
                block.set_field("OP", ROUNDING[callee])
                self._connect(block, "NUM", arguments[0])
                return block
            if callee in SINGLE and arguments:
                block = self._new(BlockType.MATH_SINGLE)
                block.set_field("OP", SINGLE[callee])
                self._connect(block, "NUM", arguments[0])
                return block
            if callee == "Math.pow" and len(arguments) == 2:
                return self._arithmetic(
                    "POWER",
                    self.translate_expression(arguments[0]),
                    self.translate_expression(arguments[1]),
                )
            if callee == "Date.now" and not arguments:
                return self._new(BlockType.GET_TIME)
            if callee == "String" and len(arguments) == 1:
                # String(x) only marks a join operand; the join block converts by itself.
                return self.translate_expression(arguments[0])

        literals = {i: literal_value(argument) for i, argument in enumerate(arguments)}
        literals = {i: value for i, value in literals.items() if value is not _NOT_LITERAL}
        entry = entry_for_call(callee, len(arguments), literals)
        if entry is None:
            self._drop(node, f"no mapping for {callee or 'computed callee'}")
            return None
        if entry.shape != position:
            self._drop(node, f"{callee} has no {position.value} form")
            return None
        return self._translate_entry(node, entry)

    def _translate_entry(self, node: CallExpression, entry: FunctionEntry) -> Block | None:
        spec = BLOCK_SPECS[entry.block_type]
        field_values: dict[str, str] = {}
        for arg in entry.args:
            if arg.kind != ArgKind.FIELD:
                continue
            text = _field_text(literal_value(node.arguments[arg.index]))
            options = spec.fields[arg.name].options
            if text is None or (options is not None and text not in options):
                self._drop(node, f"argument {arg.index + 1} is not a valid {arg.name}")
                return None
            field_values[arg.name] = text

        block = self._new(entry.block_type)
        for name, text in field_values.items():
            block.set_field(name, text)
        for arg in entry.args:
            if arg.kind != ArgKind.VALUE:
                continue
            argument = node.arguments[arg.index]
            if arg.scale is None:
                self._connect(block, arg.name, argument)
                continue
            value = literal_value(argument)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                block.connect_value(arg.name, self._number(value / arg.scale))
                continue
            if (
                isinstance(argument, BinaryExpression)
                and argument.operator == "*"
                and _is_number(argument.right, arg.scale)
            ):
                self._connect(block, arg.name, argument.left)
                continue
            translated = self.translate_expression(argument)
            if translated is not None:
                block.connect_value(arg.name, self._arithmetic("DIVIDE", translated, self._number(arg.scale)))
        return block

    # ----- statements -----

    def translate_statement(self, node: Statement) -> Block | None:
        """Translate one statement into the head of a chain, None if unsupported."""
        match node:
            case ExpressionStatement():
                return self._translate_expression_statement(node)
            case VariableDeclaration():
                head = None
                for declarator in node.declarations:
                    block = self._variable_set(declarator.name.name, declarator.init)
                    head = self._link(head, block)
                return head
            case ForStatement():
                return self._translate_for(node)
            case WhileStatement():
                block = self._new(BlockType.CONTROLS_WHILE_UNTIL)
                self._connect(block, "BOOL", node.test)
                self._attach_body(block, "DO", node.body)
                return block
            case IfStatement():
                return self._translate_if(node)
            case BlockStatement():
                return self.translate_body(node)
        self._drop(node, "no statement block")
        return None

    def _translate_expression_statement(self, node: ExpressionStatement) -> Block | None:
        expression = _unwrap_await(node.expression)
        match expression:
            case CallExpression():
                return self._translate_call(expression, Shape.STATEMENT)
            case AssignmentExpression():
                return self._translate_assignment(expression)
        self._drop(node, "expression has no statement form")
        return None

    def _translate_for(self, node: ForStatement) -> Block:
        block = self._new(BlockType.CONTROLS_FOR)
        init = node.init
        if isinstance(init, VariableDeclaration) and init.declarations:
            declarator = init.declarations[0]
            block.set_field("VAR", self.workspace.variable(declarator.name.name).id)
            self._connect(block, "FROM", declarator.init)
        elif isinstance(init, AssignmentExpression) and isinstance(init.target, Identifier):
            block.set_field("VAR", self.workspace.variable(init.target.name).id)
            self._connect(block, "FROM", init.value)
        else:
            block.set_field("VAR", self.workspace.variable("i").id)
        if isinstance(node.test, BinaryExpression):
            self._connect(block, "TO", node.test.right)
        block.connect_value("BY", self._number(1))
        self._attach_body(block, "DO", node.body)
        return block

    def _translate_if(self, node: IfStatement) -> Block:
        branches = [(node.test, node.consequent)]
        alternate = node.alternate
        while isinstance(alternate, IfStatement):
            branches.append((alternate.test, alternate.consequent))
            alternate = alternate.alternate
        block = self._new(
            BlockType.CONTROLS_IF,
            else_if_count=len(branches) - 1,
            has_else=alternate is not None,
        )
        for n, (test, consequent) in enumerate(branches):
            self._connect(block, f"IF{n}", test)
            self._attach_body(block, f"DO{n}", consequent)
        if alternate is not None:
            self._attach_body(block, "ELSE", alternate)
        return block

    def _link(self, head: Block | None, chain: Block | None) -> Block | None:
        """Append `chain` after the tail of `head`; returns the head of the result."""
        if chain is None:
            return head
        if head is None:
            return chain
        head.last_in_chain().connect_next(chain)
        return head

    def translate_body(self, body: Statement) -> Block | None:
        """Translate a nested body into one chain; the first non-null chain is the head."""
        statements = body.body if isinstance(body, BlockStatement) else [body]
        head = None
        for statement in statements:
            head = self._link(head, self.translate_statement(statement))
        return head

    def _attach_body(self, block: Block, input_name: str, body: Statement | None) -> None:
        if body is None:
            return
        head = self.translate_body(body)
        if head is not None:
            block.connect_statement(input_name, head)


### Entry points ###


@dataclass
class TranslationResult:
    """Outcome of `code_to_blocks`.

    Attributes:
        success (bool): False when the source could not be parsed.
        error (str): Parser or lexer message, verbatim.
        blocks (list[Block]): Root blocks added to the workspace, in order.
        dropped (int): Number of constructs that had no block equivalent.
    """

    success: bool
    error: str = ""
    blocks: list[Block] = field(default_factory=list)
    dropped: int = 0


class _Layout:
    """Places translated chains below the existing ones."""

    def __init__(self, workspace: Workspace, config=None):
        self.x = getattr(config, "layout_x", 50)
        self.step = getattr(config, "layout_step", 80)
        start_y = getattr(config, "layout_start_y", 50)
        gap = getattr(config, "layout_gap", 30)
        bottom = workspace.lowest_root_bottom()
        self.y = start_y if bottom is None else max(start_y, bottom + gap)
        self.tail: Block | None = None
        self.roots: list[Block] = []

    def place(self, head: Block) -> Block | None:
        """Attach `head` after the previous chain or make it a new root.

        Returns:
            Block | None: The block whose next link received the chain.
        """
        attached_to = None
        if self.tail is not None and self.tail.has_next and head.has_previous:
            attached_to = self.tail
            self.tail.connect_next(head)
        else:
            head.x, head.y = self.x, self.y
            self.y += self.step
            self.roots.append(head)
        self.tail = head.last_in_chain()
        return attached_to


def get_translation_reporter(
    program: Program, workspace: Workspace, config=None
) -> Generator[TranslationReport, None, TranslationResult]:
    """Translate a parsed program into `workspace`, one report per top-level statement.

    Returns:
        TranslationResult: available as `StopIteration.value`.
    """
    translator = BlockTranslator(workspace)
    layout = _Layout(workspace, config)
    for statement in program.body:
        first_new = len(translator.created)
        dropped_before = translator.dropped
        head = translator.translate_statement(statement)

        report = TranslationReport()
        report.looked_at_tree_node_id = statement.unique_id
        report.new_block_ids = [block.id for block in translator.created[first_new:]]
        if head is None:
            report.dropped = True
            report.action_bar_message = (
                f"Line {statement.line}: {statement.unindented_representation()} has no block, dropped."
            )
        else:
            report.root_block_id = head.id
            attached_to = layout.place(head)
            if attached_to is not None:
                report.attached_to = attached_to.id
                report.action_bar_message = f"Added {head.type} after {attached_to.type} {attached_to.id}."
            else:
                report.action_bar_message = f"Added {head.type} as a new stack at y={head.y:g}."
            if translator.dropped > dropped_before:
                report.action_bar_message += f" ({translator.dropped - dropped_before} part(s) dropped)"
        yield report

    return TranslationResult(True, blocks=layout.roots, dropped=translator.dropped)


def translate_program(program: Program, workspace: Workspace, config=None) -> TranslationResult:
    """Drive `get_translation_reporter` to completion."""
    reporter = get_translation_reporter(program, workspace, config)
    while True:
        try:
            next(reporter)
        except StopIteration as done:
            return done.value


def code_to_blocks(workspace: Workspace, source: str, config=None) -> TranslationResult:
    """Parse `source` and append its blocks below the existing stacks of `workspace`.

    On a lexing or parsing error the workspace is left untouched and the
    error message is returned verbatim.
    """
    try:
        program = parse_source(source)
    except (LexingError, ParsingError) as e:
        logger.info("Translation aborted: %s", e)
        return TranslationResult(False, error=str(e))
    result = translate_program(program, workspace, config)
    logger.info(
        "Translated %d statement(s) into %d stack(s), %d construct(s) dropped",
        len(program.body),
        len(result.blocks),
        result.dropped,
    )
    return result
