"""Python backend for the Reachy Mini SDK.

The program body runs inside a `ReachyMini` context manager. Blocks with no
SDK counterpart render as a marked comment (statements) or a fixed
sentinel (values) so that generation always succeeds.
"""

import keyword

from TranslatorComponents.Generator import (
    CodeGenerator,
    GeneratorContext,
    prefix_lines,
    quote_string,
    statement_to_code,
    value_to_code,
)
from TranslatorComponents.Graph import COORDINATE_NAMES, Block, BlockType, format_number

ORDER_ATOMIC = 0
ORDER_COLLECTION = 1
ORDER_MEMBER = 2
ORDER_FUNCTION_CALL = 2
ORDER_EXPONENTIATION = 3
ORDER_UNARY_SIGN = 4
ORDER_MULTIPLICATIVE = 5
ORDER_ADDITIVE = 6
ORDER_RELATIONAL = 11
ORDER_LOGICAL_NOT = 12
ORDER_LOGICAL_AND = 13
ORDER_LOGICAL_OR = 14
ORDER_CONDITIONAL = 15
ORDER_NONE = 99

PASS = "    pass\n"

RESERVED_WORDS = set(keyword.kwlist) | {
    "mini", "program_timer", "time", "np", "math", "create_head_pose", "ReachyMini",
    "print", "range", "int", "str", "len", "abs", "round", "random", "min", "max",
}

IMPORT_REACHY_MINI = "from reachy_mini import ReachyMini"
IMPORT_TIME = "import time"
IMPORT_MATH = "import math"
IMPORT_RANDOM = "import random"
IMPORT_NUMPY = "import numpy as np"
IMPORT_HEAD_POSE = "from reachy_mini.utils import create_head_pose"

UNSUPPORTED_STATEMENTS = (
    BlockType.ENABLE_TORQUE,
    BlockType.DISABLE_TORQUE,
    BlockType.ENABLE_ALL,
    BlockType.DISABLE_ALL,
    BlockType.CHECK_JOINTS,
    BlockType.REBOOT_JOINT,
    BlockType.REBOOT_ALL,
    BlockType.MOVE_BY,
    BlockType.WAIT_UNTIL_STOPPED,
    BlockType.SET_JOINT,
    BlockType.MOVE_SMOOTH,
)

UNSUPPORTED_VALUES = {
    BlockType.PING_JOINT: "False",
    BlockType.IS_MOVING: "False",
    BlockType.JOINT_IN_RANGE: "False",
    BlockType.GET_JOINT: "0",
    BlockType.GET_DEGREES: "0",
    BlockType.GET_LOAD: "0",
    BlockType.GET_TEMPERATURE: "0",
    BlockType.JOINTS_TO_COORDINATES: "[]",
    BlockType.COORDINATES_TO_JOINTS: "[]",
}

ARITHMETIC = {
    "ADD": (" + ", ORDER_ADDITIVE),
    "MINUS": (" - ", ORDER_ADDITIVE),
    "MULTIPLY": (" * ", ORDER_MULTIPLICATIVE),
    "DIVIDE": (" / ", ORDER_MULTIPLICATIVE),
    "MODULO": (" % ", ORDER_MULTIPLICATIVE),
    "POWER": (" ** ", ORDER_EXPONENTIATION),
}

COMPARISON = {"EQ": "==", "NEQ": "!=", "LT": "<", "LTE": "<=", "GT": ">", "GTE": ">="}


def quote(text: str) -> str:
    return quote_string(text, '"')


def _unsupported_statement(ctx: GeneratorContext, block: Block) -> str:
    return f"# {block.type} not supported in Python API\n"


def _unsupported_value(sentinel: str):
    def rule(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
        return sentinel, ORDER_ATOMIC

    return rule


def _branch(ctx: GeneratorContext, block: Block, name: str) -> str:
    """Statement body for `name`, padded with `pass` when it holds only comments."""
    code = statement_to_code(ctx, block, name)
    if not any(line.strip() and not line.strip().startswith("#") for line in code.splitlines()):
        code += PASS
    return code


### Control ###


def controls_if(ctx: GeneratorContext, block: Block) -> str:
    code = ""
    n = 0
    while block.get_input(f"IF{n}") is not None:
        condition = value_to_code(ctx, block, f"IF{n}", ORDER_NONE) or "False"
        branch = _branch(ctx, block, f"DO{n}")
        code += ("elif " if n else "if ") + f"{condition}:\n{branch}"
        n += 1
    if block.get_input("ELSE") is not None:
        code += "else:\n" + _branch(ctx, block, "ELSE")
    return code


def controls_for(ctx: GeneratorContext, block: Block) -> str:
    variable = ctx.block_variable(block)
    start = value_to_code(ctx, block, "FROM", ORDER_NONE) or "0"
    end = value_to_code(ctx, block, "TO", ORDER_NONE) or "0"
    step = value_to_code(ctx, block, "BY", ORDER_NONE) or "1"
    branch = _branch(ctx, block, "DO")
    return f"for {variable} in range(int({start}), int({end}) + 1, int({step})):\n{branch}"


def controls_while_until(ctx: GeneratorContext, block: Block) -> str:
    until = block.get_field("MODE") == "UNTIL"
    condition = value_to_code(ctx, block, "BOOL", ORDER_LOGICAL_NOT if until else ORDER_NONE) or "False"
    if until:
        condition = "not " + condition
    branch = _branch(ctx, block, "DO")
    return f"while {condition}:\n{branch}"


def controls_repeat_ext(ctx: GeneratorContext, block: Block) -> str:
    repeats = value_to_code(ctx, block, "TIMES", ORDER_NONE) or "0"
    branch = _branch(ctx, block, "DO")
    count = ctx.names.distinct_name("count")
    return f"for {count} in range(int({repeats})):\n{branch}"


def controls_for_each(ctx: GeneratorContext, block: Block) -> str:
    sequence = value_to_code(ctx, block, "LIST", ORDER_RELATIONAL) or "[]"
    branch = _branch(ctx, block, "DO")
    return f"for {ctx.block_variable(block)} in {sequence}:\n{branch}"


def controls_flow_statements(ctx: GeneratorContext, block: Block) -> str:
    return "break\n" if block.get_field("FLOW") == "BREAK" else "continue\n"


### Logic ###


def logic_compare(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    a = value_to_code(ctx, block, "A", ORDER_RELATIONAL) or "0"
    b = value_to_code(ctx, block, "B", ORDER_RELATIONAL) or "0"
    return f"{a} {COMPARISON[block.get_field('OP')]} {b}", ORDER_RELATIONAL


def logic_operation(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op, order = ("and", ORDER_LOGICAL_AND) if block.get_field("OP") == "AND" else ("or", ORDER_LOGICAL_OR)
    a = value_to_code(ctx, block, "A", order) or "False"
    b = value_to_code(ctx, block, "B", order) or "False"
    return f"{a} {op} {b}", order


def logic_negate(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    argument = value_to_code(ctx, block, "BOOL", ORDER_LOGICAL_NOT) or "True"
    return "not " + argument, ORDER_LOGICAL_NOT


def logic_boolean(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return ("True" if block.get_field("BOOL") == "TRUE" else "False"), ORDER_ATOMIC


def logic_null(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "None", ORDER_ATOMIC


### Math ###


def math_number(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    code = block.get_field("NUM")
    return code, ORDER_UNARY_SIGN if code.startswith("-") else ORDER_ATOMIC


def math_arithmetic(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    operator, order = ARITHMETIC[block.get_field("OP")]
    a = value_to_code(ctx, block, "A", order) or "0"
    b = value_to_code(ctx, block, "B", order) or "0"
    return a + operator + b, order


def math_single(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op = block.get_field("OP")
    if op == "NEG":
        argument = value_to_code(ctx, block, "NUM", ORDER_UNARY_SIGN) or "0"
        return "-" + argument, ORDER_UNARY_SIGN
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    if op == "ABS":
        return f"abs({argument})", ORDER_FUNCTION_CALL
    ctx.provide("import_math", IMPORT_MATH)
    return f"math.sqrt({argument})", ORDER_FUNCTION_CALL


def math_trig(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_math", IMPORT_MATH)
    function = "math." + block.get_field("OP").lower()
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    if block.get_field("UNIT") != "DEGREES":
        return f"{function}({argument})", ORDER_FUNCTION_CALL
    if function in ("math.asin", "math.acos", "math.atan"):
        return f"math.degrees({function}({argument}))", ORDER_FUNCTION_CALL
    return f"{function}(math.radians({argument}))", ORDER_FUNCTION_CALL


def math_round(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    op = block.get_field("OP")
    if op == "ROUND":
        return f"round({argument})", ORDER_FUNCTION_CALL
    ctx.provide("import_math", IMPORT_MATH)
    function = "math.ceil" if op == "ROUNDUP" else "math.floor"
    return f"{function}({argument})", ORDER_FUNCTION_CALL


def math_constant(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_math", IMPORT_MATH)
    return "math.pi", ORDER_MEMBER


def math_modulo(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    dividend = value_to_code(ctx, block, "DIVIDEND", ORDER_MULTIPLICATIVE) or "0"
    divisor = value_to_code(ctx, block, "DIVISOR", ORDER_MULTIPLICATIVE) or "0"
    return f"{dividend} % {divisor}", ORDER_MULTIPLICATIVE


def math_constrain(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    value = value_to_code(ctx, block, "VALUE", ORDER_NONE) or "0"
    low = value_to_code(ctx, block, "LOW", ORDER_NONE) or "0"
    high = value_to_code(ctx, block, "HIGH", ORDER_NONE) or "0"
    return f"min(max({value}, {low}), {high})", ORDER_FUNCTION_CALL


def math_random_int(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_random", IMPORT_RANDOM)
    start = value_to_code(ctx, block, "FROM", ORDER_NONE) or "0"
    end = value_to_code(ctx, block, "TO", ORDER_NONE) or "0"
    return f"random.randint({start}, {end})", ORDER_FUNCTION_CALL


def math_random_float(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_random", IMPORT_RANDOM)
    return "random.random()", ORDER_FUNCTION_CALL


def math_atan2(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_math", IMPORT_MATH)
    x = value_to_code(ctx, block, "X", ORDER_NONE) or "0"
    y = value_to_code(ctx, block, "Y", ORDER_NONE) or "0"
    return f"math.atan2({y}, {x})", ORDER_FUNCTION_CALL


### Text ###


def text(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return quote(block.get_field("TEXT")), ORDER_ATOMIC


def text_join(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    count = block.extra_state.get("item_count", 0)
    if count == 0:
        return "''", ORDER_ATOMIC
    parts = [f"str({value_to_code(ctx, block, f'ADD{n}', ORDER_NONE) or quote('')})" for n in range(count)]
    if count == 1:
        return parts[0], ORDER_FUNCTION_CALL
    return " + ".join(parts), ORDER_ADDITIVE


def text_print(ctx: GeneratorContext, block: Block) -> str:
    message = value_to_code(ctx, block, "TEXT", ORDER_NONE) or '""'
    return f"print({message})\n"


### Variables ###


def variables_get(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return ctx.block_variable(block), ORDER_ATOMIC


def variables_set(ctx: GeneratorContext, block: Block) -> str:
    value = value_to_code(ctx, block, "VALUE", ORDER_NONE) or "0"
    return f"{ctx.block_variable(block)} = {value}\n"


### Lists ###


def lists_create_with(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    count = block.extra_state.get("item_count", 0)
    items = [value_to_code(ctx, block, f"ADD{n}", ORDER_NONE) or "None" for n in range(count)]
    return f"[{', '.join(items)}]", ORDER_ATOMIC


def lists_length(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    sequence = value_to_code(ctx, block, "VALUE", ORDER_NONE) or "[]"
    return f"len({sequence})", ORDER_FUNCTION_CALL


def zero_based_index(ctx: GeneratorContext, block: Block, name: str) -> str:
    target = block.get_input_target(name)
    if target is None or not target.enabled:
        return "0"
    if target.type == BlockType.MATH_NUMBER:
        return format_number(float(target.get_field("NUM")) - 1)
    if target.type == BlockType.MATH_ARITHMETIC and target.get_field("OP") == "ADD":
        one = target.get_input_target("B")
        if one is not None and one.type == BlockType.MATH_NUMBER and one.get_field("NUM") == "1":
            return value_to_code(ctx, target, "A", ORDER_NONE) or "0"
    return (value_to_code(ctx, block, name, ORDER_ADDITIVE) or "1") + " - 1"


def lists_get_index(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    sequence = value_to_code(ctx, block, "VALUE", ORDER_MEMBER) or "[]"
    return f"{sequence}[{zero_based_index(ctx, block, 'AT')}]", ORDER_MEMBER


def lists_set_index(ctx: GeneratorContext, block: Block) -> str:
    sequence = value_to_code(ctx, block, "LIST", ORDER_MEMBER) or "[]"
    value = value_to_code(ctx, block, "TO", ORDER_NONE) or "None"
    return f"{sequence}[{zero_based_index(ctx, block, 'AT')}] = {value}\n"


### Robot ###


def set_degrees(ctx: GeneratorContext, block: Block) -> str:
    degrees = value_to_code(ctx, block, "DEGREES", ORDER_NONE) or "0"
    match block.get_field("MOTOR"):
        case "17":
            antennas = f"[np.deg2rad({degrees}), 0]"
        case "18":
            antennas = f"[0, np.deg2rad({degrees})]"
        case _:
            return _unsupported_statement(ctx, block)
    ctx.provide("import_numpy", IMPORT_NUMPY)
    return f"mini.set_target(antennas={antennas})\n"


def get_head_coordinates(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "mini.head.pose", ORDER_MEMBER


def _default_pose(ctx: GeneratorContext) -> str:
    ctx.provide("import_head_pose", IMPORT_HEAD_POSE)
    return "create_head_pose(degrees=True, mm=True)"


def set_head_coordinates(ctx: GeneratorContext, block: Block) -> str:
    coordinates = value_to_code(ctx, block, "COORDS", ORDER_NONE) or _default_pose(ctx)
    return f"mini.goto_target({coordinates}, duration=1.0)\n"


def create_coordinates(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("import_head_pose", IMPORT_HEAD_POSE)
    parts = [
        f"{name.lower()}={value_to_code(ctx, block, name, ORDER_NONE) or '0'}" for name in COORDINATE_NAMES
    ]
    return f"create_head_pose({', '.join(parts)}, degrees=True, mm=True)", ORDER_FUNCTION_CALL


def get_coordinate(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    component = int(block.get_field("COMPONENT"))
    if component > 2:
        # Rotations are not read back from the pose matrix.
        return "0", ORDER_ATOMIC
    coordinates = value_to_code(ctx, block, "COORDINATES", ORDER_NONE) or _default_pose(ctx)
    return f"({coordinates})[{component}, 3]", ORDER_MEMBER


def wait(ctx: GeneratorContext, block: Block) -> str:
    seconds = value_to_code(ctx, block, "TIME", ORDER_NONE) or "1"
    return f"time.sleep({seconds})\n"


def wait_ms(ctx: GeneratorContext, block: Block) -> str:
    milliseconds = value_to_code(ctx, block, "TIME", ORDER_MULTIPLICATIVE) or "100"
    return f"time.sleep({milliseconds} / 1000)\n"


def get_time(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "int(time.time() * 1000)", ORDER_FUNCTION_CALL


def reset_timer(ctx: GeneratorContext, block: Block) -> str:
    return "program_timer = time.time()\n"


def timer_value(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "(time.time() - program_timer)", ORDER_ATOMIC


def log(ctx: GeneratorContext, block: Block) -> str:
    message = value_to_code(ctx, block, "MESSAGE", ORDER_NONE) or '""'
    return f"print({message})\n"


def log_type(ctx: GeneratorContext, block: Block) -> str:
    message = value_to_code(ctx, block, "MESSAGE", ORDER_NONE) or '""'
    return f"print({message})  # Log type: {block.get_field('TYPE')}\n"


def alert(ctx: GeneratorContext, block: Block) -> str:
    message = value_to_code(ctx, block, "MESSAGE", ORDER_NONE) or '""'
    return f"print({message})  # Alert\n"


def log_joint(ctx: GeneratorContext, block: Block) -> str:
    return f'print("Joint {block.get_field("MOTOR")}:")  # Joint values not readable in Python API\n'


class PythonGenerator(CodeGenerator):
    name = "Python"
    indent = "    "
    placeholder = "# Drag blocks here..."
    reserved_words = RESERVED_WORDS

    def build_rules(self):
        rules = {
            BlockType.CONTROLS_IF: controls_if,
            BlockType.CONTROLS_FOR: controls_for,
            BlockType.CONTROLS_WHILE_UNTIL: controls_while_until,
            BlockType.CONTROLS_REPEAT_EXT: controls_repeat_ext,
            BlockType.CONTROLS_FOR_EACH: controls_for_each,
            BlockType.CONTROLS_FLOW_STATEMENTS: controls_flow_statements,
            BlockType.LOGIC_COMPARE: logic_compare,
            BlockType.LOGIC_OPERATION: logic_operation,
            BlockType.LOGIC_NEGATE: logic_negate,
            BlockType.LOGIC_BOOLEAN: logic_boolean,
            BlockType.LOGIC_NULL: logic_null,
            BlockType.MATH_NUMBER: math_number,
            BlockType.MATH_ARITHMETIC: math_arithmetic,
            BlockType.MATH_SINGLE: math_single,
            BlockType.MATH_TRIG: math_trig,
            BlockType.MATH_ROUND: math_round,
            BlockType.MATH_CONSTANT: math_constant,
            BlockType.MATH_MODULO: math_modulo,
            BlockType.MATH_CONSTRAIN: math_constrain,
            BlockType.MATH_RANDOM_INT: math_random_int,
            BlockType.MATH_RANDOM_FLOAT: math_random_float,
            BlockType.MATH_ATAN2: math_atan2,
            BlockType.TEXT: text,
            BlockType.TEXT_JOIN: text_join,
            BlockType.TEXT_PRINT: text_print,
            BlockType.VARIABLES_GET: variables_get,
            BlockType.VARIABLES_SET: variables_set,
            BlockType.LISTS_CREATE_WITH: lists_create_with,
            BlockType.LISTS_LENGTH: lists_length,
            BlockType.LISTS_GET_INDEX: lists_get_index,
            BlockType.LISTS_SET_INDEX: lists_set_index,
            BlockType.SET_DEGREES: set_degrees,
            BlockType.GET_HEAD_COORDINATES: get_head_coordinates,
            BlockType.SET_HEAD_COORDINATES: set_head_coordinates,
            BlockType.CREATE_COORDINATES: create_coordinates,
            BlockType.GET_COORDINATE: get_coordinate,
            BlockType.WAIT: wait,
            BlockType.WAIT_MS: wait_ms,
            BlockType.GET_TIME: get_time,
            BlockType.RESET_TIMER: reset_timer,
            BlockType.TIMER_VALUE: timer_value,
            BlockType.LOG: log,
            BlockType.LOG_TYPE: log_type,
            BlockType.LOG_JOINT: log_joint,
            BlockType.ALERT: alert,
        }
        for block_type in UNSUPPORTED_STATEMENTS:
            rules[block_type] = _unsupported_statement
        for block_type, sentinel in UNSUPPORTED_VALUES.items():
            rules[block_type] = _unsupported_value(sentinel)
        return rules

    @property
    def media_backend(self) -> str:
        return getattr(self.config, "media_backend", "no_media")

    def init(self, ctx: GeneratorContext) -> None:
        ctx.provide("import_reachy_mini", IMPORT_REACHY_MINI)
        ctx.provide("import_time", IMPORT_TIME)

    def finish(self, ctx: GeneratorContext, code: str) -> str:
        """Wrap the body in the `ReachyMini` program shell."""
        imports = "\n".join(ctx.definitions.values())
        header = (
            '"""Generated by Blockly for Reachy Mini"""\n\n'
            f"{imports}\n\n"
            f'with ReachyMini(media_backend="{self.media_backend}") as mini:\n'
            f"{self.indent}program_timer = time.time()\n"
        )
        return header + prefix_lines(code, self.indent)
