"""Block graph model.

A `Workspace` owns `Block`s and name-keyed `Variable` handles. Value blocks
plug into named VALUE inputs of their parent; statement blocks form singly
linked chains through `next`, and nested chains hang off STATEMENT inputs.
Every connection goes through `Block.connect_value`, `Block.connect_next`
or `Block.connect_statement`, which enforce single occupancy and reject
cycles.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, StrEnum

from TranslatorComponents.Types import BlockId, VariableId


class GraphError(Exception):
    """Raised for invalid graph edits (unknown inputs, wrong shapes, cycles)."""

    pass


class BlockType(StrEnum):
    # Control
    CONTROLS_IF = "controls_if"
    CONTROLS_FOR = "controls_for"
    CONTROLS_WHILE_UNTIL = "controls_whileUntil"
    CONTROLS_REPEAT_EXT = "controls_repeat_ext"
    CONTROLS_FOR_EACH = "controls_forEach"
    CONTROLS_FLOW_STATEMENTS = "controls_flow_statements"
    # Logic
    LOGIC_COMPARE = "logic_compare"
    LOGIC_OPERATION = "logic_operation"
    LOGIC_NEGATE = "logic_negate"
    LOGIC_BOOLEAN = "logic_boolean"
    LOGIC_NULL = "logic_null"
    # Math
    MATH_NUMBER = "math_number"
    MATH_ARITHMETIC = "math_arithmetic"
    MATH_SINGLE = "math_single"
    MATH_TRIG = "math_trig"
    MATH_ROUND = "math_round"
    MATH_CONSTANT = "math_constant"
    MATH_MODULO = "math_modulo"
    MATH_CONSTRAIN = "math_constrain"
    MATH_RANDOM_INT = "math_random_int"
    MATH_RANDOM_FLOAT = "math_random_float"
    MATH_ATAN2 = "math_atan2"
    # Text
    TEXT = "text"
    TEXT_JOIN = "text_join"
    TEXT_PRINT = "text_print"
    # Variables
    VARIABLES_GET = "variables_get"
    VARIABLES_SET = "variables_set"
    # Lists
    LISTS_CREATE_WITH = "lists_create_with"
    LISTS_LENGTH = "lists_length"
    LISTS_GET_INDEX = "lists_getIndex"
    LISTS_SET_INDEX = "lists_setIndex"
    # Connection
    ENABLE_TORQUE = "enable_torque"
    DISABLE_TORQUE = "disable_torque"
    ENABLE_ALL = "enable_all"
    DISABLE_ALL = "disable_all"
    CHECK_JOINTS = "check_joints"
    PING_JOINT = "ping_joint"
    REBOOT_JOINT = "reboot_joint"
    REBOOT_ALL = "reboot_all"
    # Joints
    SET_JOINT = "set_joint"
    SET_DEGREES = "set_degrees"
    GET_JOINT = "get_joint"
    GET_DEGREES = "get_degrees"
    MOVE_BY = "move_by"
    MOVE_SMOOTH = "move_smooth"
    # Kinematics
    GET_HEAD_COORDINATES = "get_head_coordinates"
    SET_HEAD_COORDINATES = "set_head_coordinates"
    JOINTS_TO_COORDINATES = "joints_to_coordinates"
    COORDINATES_TO_JOINTS = "coordinates_to_joints"
    CREATE_COORDINATES = "create_coordinates"
    GET_COORDINATE = "get_coordinate"
    # Sensing
    IS_MOVING = "is_moving"
    WAIT_UNTIL_STOPPED = "wait_until_stopped"
    GET_LOAD = "get_load"
    GET_TEMPERATURE = "get_temperature"
    JOINT_IN_RANGE = "joint_in_range"
    # Timing
    WAIT = "wait"
    WAIT_MS = "wait_ms"
    GET_TIME = "get_time"
    RESET_TIMER = "reset_timer"
    TIMER_VALUE = "timer_value"
    # Output
    LOG = "log"
    LOG_JOINT = "log_joint"
    LOG_TYPE = "log_type"
    ALERT = "alert"


class InputKind(Enum):
    VALUE = "value"
    STATEMENT = "statement"


ALL_MOTORS = ("11", "12", "13", "14", "15", "16", "17", "18")
ANTENNAS = ("17", "18")
LOG_TYPES = ("info", "success", "warn", "error")
COORDINATE_COMPONENTS = ("0", "1", "2", "3", "4", "5")
COORDINATE_NAMES = ("X", "Y", "Z", "ROLL", "PITCH", "YAW")


def format_number(value: int | float) -> str:
    """Render a number the way a number field stores it ("2", "1.5", "-3")."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value) if isinstance(value, int) else repr(value)


@dataclass(frozen=True)
class FieldSpec:
    default: str
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class BlockSpec:
    """Static shape of one block type.

    Attributes:
        output (bool): Block produces a value (plugs into VALUE inputs).
        statement (bool): Block has previous/next links.
        inputs (tuple): Fixed (name, kind) inputs in display order.
        fields (dict): Field name to FieldSpec.
        dynamic (str): "" for fixed shapes, "if" for IFn/DOn/ELSE, "items" for ADDn.
    """

    output: bool = False
    statement: bool = False
    inputs: tuple[tuple[str, InputKind], ...] = ()
    fields: dict[str, FieldSpec] = field(default_factory=dict)
    dynamic: str = ""


def _value(*names: str) -> tuple[tuple[str, InputKind], ...]:
    return tuple((name, InputKind.VALUE) for name in names)


_MOTOR = {"MOTOR": FieldSpec("11", ALL_MOTORS)}
_ANTENNA = {"MOTOR": FieldSpec("17", ANTENNAS)}
_DO = (("DO", InputKind.STATEMENT),)

BLOCK_SPECS: dict[BlockType, BlockSpec] = {
    BlockType.CONTROLS_IF: BlockSpec(statement=True, dynamic="if"),
    BlockType.CONTROLS_FOR: BlockSpec(
        statement=True,
        inputs=_value("FROM", "TO", "BY") + _DO,
        fields={"VAR": FieldSpec("")},
    ),
    BlockType.CONTROLS_WHILE_UNTIL: BlockSpec(
        statement=True,
        inputs=_value("BOOL") + _DO,
        fields={"MODE": FieldSpec("WHILE", ("WHILE", "UNTIL"))},
    ),
    BlockType.CONTROLS_REPEAT_EXT: BlockSpec(statement=True, inputs=_value("TIMES") + _DO),
    BlockType.CONTROLS_FOR_EACH: BlockSpec(
        statement=True, inputs=_value("LIST") + _DO, fields={"VAR": FieldSpec("")}
    ),
    BlockType.CONTROLS_FLOW_STATEMENTS: BlockSpec(
        statement=True, fields={"FLOW": FieldSpec("BREAK", ("BREAK", "CONTINUE"))}
    ),
    BlockType.LOGIC_COMPARE: BlockSpec(
        output=True,
        inputs=_value("A", "B"),
        fields={"OP": FieldSpec("EQ", ("EQ", "NEQ", "LT", "LTE", "GT", "GTE"))},
    ),
    BlockType.LOGIC_OPERATION: BlockSpec(
        output=True, inputs=_value("A", "B"), fields={"OP": FieldSpec("AND", ("AND", "OR"))}
    ),
    BlockType.LOGIC_NEGATE: BlockSpec(output=True, inputs=_value("BOOL")),
    BlockType.LOGIC_BOOLEAN: BlockSpec(output=True, fields={"BOOL": FieldSpec("TRUE", ("TRUE", "FALSE"))}),
    BlockType.LOGIC_NULL: BlockSpec(output=True),
    BlockType.MATH_NUMBER: BlockSpec(output=True, fields={"NUM": FieldSpec("0")}),
    BlockType.MATH_ARITHMETIC: BlockSpec(
        output=True,
        inputs=_value("A", "B"),
        fields={"OP": FieldSpec("ADD", ("ADD", "MINUS", "MULTIPLY", "DIVIDE", "POWER", "MODULO"))},
    ),
    BlockType.MATH_SINGLE: BlockSpec(
        output=True, inputs=_value("NUM"), fields={"OP": FieldSpec("ROOT", ("ROOT", "ABS", "NEG"))}
    ),
    BlockType.MATH_TRIG: BlockSpec(
        output=True,
        inputs=_value("NUM"),
        fields={
            "OP": FieldSpec("SIN", ("SIN", "COS", "TAN", "ASIN", "ACOS", "ATAN")),
            "UNIT": FieldSpec("DEGREES", ("DEGREES", "RADIANS")),
        },
    ),
    BlockType.MATH_ROUND: BlockSpec(
        output=True,
        inputs=_value("NUM"),
        fields={"OP": FieldSpec("ROUND", ("ROUND", "ROUNDUP", "ROUNDDOWN"))},
    ),
    BlockType.MATH_CONSTANT: BlockSpec(output=True, fields={"CONSTANT": FieldSpec("PI", ("PI",))}),
    BlockType.MATH_MODULO: BlockSpec(output=True, inputs=_value("DIVIDEND", "DIVISOR")),
    BlockType.MATH_CONSTRAIN: BlockSpec(output=True, inputs=_value("VALUE", "LOW", "HIGH")),
    BlockType.MATH_RANDOM_INT: BlockSpec(output=True, inputs=_value("FROM", "TO")),
    BlockType.MATH_RANDOM_FLOAT: BlockSpec(output=True),
    BlockType.MATH_ATAN2: BlockSpec(output=True, inputs=_value("X", "Y")),
    BlockType.TEXT: BlockSpec(output=True, fields={"TEXT": FieldSpec("")}),
    BlockType.TEXT_JOIN: BlockSpec(output=True, dynamic="items"),
    BlockType.TEXT_PRINT: BlockSpec(statement=True, inputs=_value("TEXT")),
    BlockType.VARIABLES_GET: BlockSpec(output=True, fields={"VAR": FieldSpec("")}),
    BlockType.VARIABLES_SET: BlockSpec(statement=True, inputs=_value("VALUE"), fields={"VAR": FieldSpec("")}),
    BlockType.LISTS_CREATE_WITH: BlockSpec(output=True, dynamic="items"),
    BlockType.LISTS_LENGTH: BlockSpec(output=True, inputs=_value("VALUE")),
    BlockType.LISTS_GET_INDEX: BlockSpec(output=True, inputs=_value("VALUE", "AT")),
    BlockType.LISTS_SET_INDEX: BlockSpec(statement=True, inputs=_value("LIST", "AT", "TO")),
    BlockType.ENABLE_TORQUE: BlockSpec(statement=True, fields=_MOTOR),
    BlockType.DISABLE_TORQUE: BlockSpec(statement=True, fields=_MOTOR),
    BlockType.ENABLE_ALL: BlockSpec(statement=True),
    BlockType.DISABLE_ALL: BlockSpec(statement=True),
    BlockType.CHECK_JOINTS: BlockSpec(statement=True),
    BlockType.PING_JOINT: BlockSpec(output=True, fields=_MOTOR),
    BlockType.REBOOT_JOINT: BlockSpec(statement=True, fields=_MOTOR),
    BlockType.REBOOT_ALL: BlockSpec(statement=True),
    BlockType.SET_JOINT: BlockSpec(statement=True, inputs=_value("JOINT"), fields=_MOTOR),
    BlockType.SET_DEGREES: BlockSpec(statement=True, inputs=_value("DEGREES"), fields=_ANTENNA),
    BlockType.GET_JOINT: BlockSpec(output=True, fields=_MOTOR),
    BlockType.GET_DEGREES: BlockSpec(output=True, fields=_ANTENNA),
    BlockType.MOVE_BY: BlockSpec(statement=True, inputs=_value("AMOUNT"), fields=_ANTENNA),
    BlockType.MOVE_SMOOTH: BlockSpec(statement=True, inputs=_value("JOINT", "DURATION"), fields=_MOTOR),
    BlockType.GET_HEAD_COORDINATES: BlockSpec(output=True),
    BlockType.SET_HEAD_COORDINATES: BlockSpec(statement=True, inputs=_value("COORDS")),
    BlockType.JOINTS_TO_COORDINATES: BlockSpec(output=True, inputs=_value("JOINTS")),
    BlockType.COORDINATES_TO_JOINTS: BlockSpec(output=True, inputs=_value("COORDINATES")),
    BlockType.CREATE_COORDINATES: BlockSpec(output=True, inputs=_value(*COORDINATE_NAMES)),
    BlockType.GET_COORDINATE: BlockSpec(
        output=True,
        inputs=_value("COORDINATES"),
        fields={"COMPONENT": FieldSpec("0", COORDINATE_COMPONENTS)},
    ),
    BlockType.IS_MOVING: BlockSpec(output=True, fields=_MOTOR),
    BlockType.WAIT_UNTIL_STOPPED: BlockSpec(statement=True, inputs=_value("TIMEOUT"), fields=_MOTOR),
    BlockType.GET_LOAD: BlockSpec(output=True, fields=_MOTOR),
    BlockType.GET_TEMPERATURE: BlockSpec(output=True, fields=_MOTOR),
    BlockType.JOINT_IN_RANGE: BlockSpec(output=True, inputs=_value("MIN", "MAX"), fields=_MOTOR),
    BlockType.WAIT: BlockSpec(statement=True, inputs=_value("TIME")),
    BlockType.WAIT_MS: BlockSpec(statement=True, inputs=_value("TIME")),
    BlockType.GET_TIME: BlockSpec(output=True),
    BlockType.RESET_TIMER: BlockSpec(statement=True),
    BlockType.TIMER_VALUE: BlockSpec(output=True),
    BlockType.LOG: BlockSpec(statement=True, inputs=_value("MESSAGE")),
    BlockType.LOG_JOINT: BlockSpec(statement=True, fields=_MOTOR),
    BlockType.LOG_TYPE: BlockSpec(
        statement=True, inputs=_value("MESSAGE"), fields={"TYPE": FieldSpec("info", LOG_TYPES)}
    ),
    BlockType.ALERT: BlockSpec(statement=True, inputs=_value("MESSAGE")),
}


class Variable:
    """Name-keyed variable handle. One per name per workspace."""

    def __init__(self, variable_id: VariableId, name: str):
        self.id = variable_id
        self.name = name

    def __repr__(self):
        return f"Variable({self.id}, {self.name})"


class Input:
    """Named attachment point holding at most one block."""

    def __init__(self, name: str, kind: InputKind):
        self.name = name
        self.kind = kind
        self.target: Block | None = None

    def __repr__(self):
        target = self.target.id if self.target else None
        return f"Input({self.name}, {self.kind.value}, {target})"


class Block:
    """One node of the graph.

    Attributes:
        id (BlockId): Workspace-unique id.
        type (BlockType): Node kind.
        fields (dict[str, str]): Field values (dropdowns, literals, variable ids).
        inputs (dict[str, Input]): VALUE and STATEMENT inputs in display order.
        parent (Block | None): Block this one is attached to (previous block,
            statement-input owner or value-input owner). None for roots.
        next (Block | None): Following statement in the chain.
        x, y (float): Workspace position (only meaningful for roots).
        enabled (bool): Disabled blocks are skipped by the generators.
        extra_state (dict): Shape metadata (`else_if_count`, `has_else`, `item_count`).
    """

    def __init__(self, workspace: Workspace, block_id: BlockId, block_type: BlockType):
        self.workspace = workspace
        self.id = block_id
        self.type = block_type
        self.spec = BLOCK_SPECS[block_type]
        self.fields: dict[str, str] = {name: spec.default for name, spec in self.spec.fields.items()}
        self.inputs: dict[str, Input] = {}
        self.parent: Block | None = None
        self.next: Block | None = None
        self.x: float = 0
        self.y: float = 0
        self.enabled = True
        self.extra_state: dict[str, int | bool] = {}
        for name, kind in self.spec.inputs:
            self.inputs[name] = Input(name, kind)

    # ----- shape -----

    @property
    def has_output(self) -> bool:
        return self.spec.output

    @property
    def has_previous(self) -> bool:
        return self.spec.statement

    @property
    def has_next(self) -> bool:
        return self.spec.statement

    def append_input(self, name: str, kind: InputKind) -> Input:
        if name in self.inputs:
            raise GraphError(f"Block {self.id} ({self.type}) already has input {name}.")
        self.inputs[name] = Input(name, kind)
        return self.inputs[name]

    # ----- fields -----

    def get_field(self, name: str) -> str:
        if name not in self.fields:
            raise GraphError(f"Block {self.id} ({self.type}) has no field {name}.")
        return self.fields[name]

    def set_field(self, name: str, value: str) -> None:
        field_spec = self.spec.fields.get(name)
        if field_spec is None:
            raise GraphError(f"Block {self.id} ({self.type}) has no field {name}.")
        if field_spec.options is not None and value not in field_spec.options:
            raise GraphError(
                f"Block {self.id} ({self.type}): {value!r} is not an option of field {name}."
            )
        self.fields[name] = value

    @property
    def variable(self) -> Variable:
        """Variable handle referenced by the VAR field."""
        return self.workspace.get_variable_by_id(VariableId(self.get_field("VAR")))

    # ----- navigation -----

    @property
    def previous(self) -> Block | None:
        """Block whose next link points here, if any."""
        if self.parent is not None and self.parent.next is self:
            return self.parent
        return None

    def get_input(self, name: str) -> Input | None:
        return self.inputs.get(name)

    def get_input_target(self, name: str) -> Block | None:
        block_input = self.inputs.get(name)
        return block_input.target if block_input else None

    def children(self) -> list[Block]:
        """Blocks directly attached to inputs, then the next block."""
        attached = [block_input.target for block_input in self.inputs.values() if block_input.target]
        if self.next is not None:
            attached.append(self.next)
        return attached

    def descendants(self) -> Iterator[Block]:
        yield self
        for child in self.children():
            yield from child.descendants()

    def root(self) -> Block:
        block = self
        while block.parent is not None:
            block = block.parent
        return block

    def chain(self) -> Iterator[Block]:
        """This block followed by every block reachable through `next`."""
        block: Block | None = self
        while block is not None:
            yield block
            block = block.next

    def last_in_chain(self) -> Block:
        block = self
        while block.next is not None:
            block = block.next
        return block

    def _is_ancestor_or_self(self, other: Block) -> bool:
        block: Block | None = self
        while block is not None:
            if block is other:
                return True
            block = block.parent
        return False

    # ----- connections -----

    def unplug(self) -> None:
        """Detach this block (and everything below it) from its parent."""
        parent = self.parent
        if parent is None:
            return
        if parent.next is self:
            parent.next = None
        for block_input in parent.inputs.values():
            if block_input.target is self:
                block_input.target = None
        self.parent = None

    def _check_child(self, child: Block) -> None:
        if child.workspace is not self.workspace:
            raise GraphError(f"Block {child.id} belongs to another workspace.")
        if self._is_ancestor_or_self(child):
            raise GraphError(f"Connecting {child.id} under {self.id} would create a cycle.")

    def connect_value(self, name: str, child: Block) -> None:
        """Plug a value block into a VALUE input, replacing any occupant."""
        block_input = self.inputs.get(name)
        if block_input is None or block_input.kind != InputKind.VALUE:
            raise GraphError(f"Block {self.id} ({self.type}) has no value input {name}.")
        if not child.has_output:
            raise GraphError(f"Block {child.id} ({child.type}) has no output.")
        self._check_child(child)
        child.unplug()
        if block_input.target is not None:
            block_input.target.parent = None
        block_input.target = child
        child.parent = self

    def _attach_chain(self, current: Block | None, head: Block) -> None:
        """Re-attach a displaced chain after the tail of a newly inserted one."""
        if current is None:
            return
        tail = head.last_in_chain()
        tail.next = current
        current.parent = tail

    def connect_next(self, block: Block) -> None:
        """Link `block` (and its chain) after this statement.

        A chain already following this block is re-attached after the tail
        of the inserted chain.
        """
        if not self.has_next:
            raise GraphError(f"Block {self.id} ({self.type}) has no next connection.")
        if not block.has_previous:
            raise GraphError(f"Block {block.id} ({block.type}) has no previous connection.")
        self._check_child(block)
        block.unplug()
        displaced = self.next
        if displaced is not None:
            displaced.parent = None
        self.next = block
        block.parent = self
        self._attach_chain(displaced, block)

    def connect_statement(self, name: str, block: Block) -> None:
        """Attach a statement chain to a STATEMENT input."""
        block_input = self.inputs.get(name)
        if block_input is None or block_input.kind != InputKind.STATEMENT:
            raise GraphError(f"Block {self.id} ({self.type}) has no statement input {name}.")
        if not block.has_previous:
            raise GraphError(f"Block {block.id} ({block.type}) has no previous connection.")
        self._check_child(block)
        block.unplug()
        displaced = block_input.target
        if displaced is not None:
            displaced.parent = None
        block_input.target = block
        block.parent = self
        self._attach_chain(displaced, block)

    # ----- display -----

    def label(self) -> str:
        parts = []
        for name, value in self.fields.items():
            if name == "VAR" and value:
                value = self.workspace.get_variable_by_id(VariableId(value)).name
            parts.append(f"{name}={value}")
        suffix = f" [{', '.join(parts)}]" if parts else ""
        disabled = " (disabled)" if not self.enabled else ""
        return f"{self.type}{suffix}{disabled}"

    def __repr__(self):
        return f"Block({self.id}, {self.type})"


class Workspace:
    """Caller-owned container for blocks and variables.

    Attributes:
        block_height (float): Height used to estimate the vertical extent of a chain.
    """

    def __init__(self, block_height: float = 40):
        self.block_height = block_height
        self._blocks: dict[BlockId, Block] = {}
        self._variables: dict[str, Variable] = {}
        self._variables_by_id: dict[VariableId, Variable] = {}
        self._next_block_number = 1
        self._next_variable_number = 1

    # ----- blocks -----

    def new_block(
        self,
        block_type: BlockType | str,
        *,
        else_if_count: int = 0,
        has_else: bool = False,
        item_count: int = 0,
    ) -> Block:
        """Create a detached block.

        Shape metadata for dynamic blocks is applied before any input exists,
        so an if-block with an else branch gets its ELSE input at creation.

        Raises:
            GraphError: for an unknown block type.
        """
        try:
            block_type = BlockType(block_type)
        except ValueError:
            raise GraphError(f"Unknown block type: {block_type}") from None
        block_id = BlockId(f"b{self._next_block_number}")
        self._next_block_number += 1
        block = Block(self, block_id, block_type)
        if block.spec.dynamic == "if":
            block.extra_state = {"else_if_count": else_if_count, "has_else": has_else}
            for n in range(else_if_count + 1):
                block.append_input(f"IF{n}", InputKind.VALUE)
                block.append_input(f"DO{n}", InputKind.STATEMENT)
            if has_else:
                block.append_input("ELSE", InputKind.STATEMENT)
        elif block.spec.dynamic == "items":
            block.extra_state = {"item_count": item_count}
            for n in range(item_count):
                block.append_input(f"ADD{n}", InputKind.VALUE)
        self._blocks[block_id] = block
        return block

    def get_block(self, block_id: str) -> Block | None:
        return self._blocks.get(BlockId(block_id))

    def all_blocks(self) -> list[Block]:
        return list(self._blocks.values())

    def top_blocks(self, ordered: bool = True) -> list[Block]:
        """Root blocks; sorted top-to-bottom then left-to-right when `ordered`."""
        roots = [block for block in self._blocks.values() if block.parent is None]
        if ordered:
            roots.sort(key=lambda block: (block.y, block.x))
        return roots

    def delete_block(self, block: Block) -> None:
        """Remove a block with everything attached below it."""
        block.unplug()
        for descendant in list(block.descendants()):
            self._blocks.pop(descendant.id, None)

    def clear(self) -> None:
        self._blocks.clear()
        self._variables.clear()
        self._variables_by_id.clear()

    def __len__(self) -> int:
        return len(self._blocks)

    # ----- variables -----

    def variable(self, name: str) -> Variable:
        """Return the handle for `name`, creating it on first use."""
        handle = self._variables.get(name)
        if handle is None:
            handle = Variable(VariableId(f"v{self._next_variable_number}"), name)
            self._next_variable_number += 1
            self._variables[name] = handle
            self._variables_by_id[handle.id] = handle
        return handle

    def get_variable_by_id(self, variable_id: VariableId) -> Variable:
        try:
            return self._variables_by_id[variable_id]
        except KeyError:
            raise GraphError(f"Unknown variable id: {variable_id}") from None

    def variables(self) -> list[Variable]:
        """All variable handles in creation order."""
        return list(self._variables.values())

    # ----- layout -----

    def chain_rows(self, block: Block) -> int:
        """Estimated rendered height of a chain, in statement rows."""
        rows = 0
        for member in block.chain():
            rows += 1
            for block_input in member.inputs.values():
                if block_input.kind == InputKind.STATEMENT:
                    rows += self.chain_rows(block_input.target) if block_input.target else 1
            if any(block_input.kind == InputKind.STATEMENT for block_input in member.inputs.values()):
                rows += 1  # closing arm of a C-shaped block
        return rows

    def block_extent(self, block: Block) -> float:
        return self.chain_rows(block) * self.block_height

    def lowest_root_bottom(self) -> float | None:
        """Bottom edge of the lowest root chain, or None for an empty workspace."""
        bottoms = [block.y + self.block_extent(block) for block in self.top_blocks(ordered=False)]
        return max(bottoms) if bottoms else None

    def move_block(self, block: Block, dx: float, dy: float) -> None:
        if block.parent is not None:
            raise GraphError(f"Only root blocks can be moved; {block.id} is attached to {block.parent.id}.")
        block.x += dx
        block.y += dy

    # ----- display -----

    def describe(self) -> list[tuple[int, str, BlockId]]:
        """Flatten the workspace into (depth, label, block id) rows, roots in document order."""
        rows: list[tuple[int, str, BlockId]] = []

        def visit(block: Block, depth: int, slot: str):
            for member in block.chain():
                prefix = f"{slot}: " if slot and member is block else ""
                rows.append((depth, prefix + member.label(), member.id))
                for name, block_input in member.inputs.items():
                    if block_input.target is not None:
                        visit(block_input.target, depth + 1, name)

        for root in self.top_blocks():
            visit(root, 0, "")
        return rows
