"""JavaScript backend.

Domain blocks render their canonical call form straight from the function
table, so translating the output back yields the same blocks.
"""

from TranslatorComponents.FunctionTable import FUNCTION_TABLE, ArgKind, FunctionEntry, Shape
from TranslatorComponents.Generator import (
    CodeGenerator,
    GeneratorContext,
    quote_string,
    statement_to_code,
    value_to_code,
)
from TranslatorComponents.Graph import COORDINATE_NAMES, Block, BlockType, format_number

ORDER_ATOMIC = 0
ORDER_MEMBER = 1.2
ORDER_FUNCTION_CALL = 2
ORDER_INCREMENT = 3
ORDER_UNARY_NEGATION = 4.3
ORDER_LOGICAL_NOT = 4.4
ORDER_AWAIT = 4.8
ORDER_EXPONENTIATION = 5
ORDER_MULTIPLICATION = 5.1
ORDER_DIVISION = 5.2
ORDER_MODULUS = 5.3
ORDER_SUBTRACTION = 6.1
ORDER_ADDITION = 6.2
ORDER_RELATIONAL = 8
ORDER_EQUALITY = 9
ORDER_LOGICAL_AND = 13
ORDER_LOGICAL_OR = 14
ORDER_CONDITIONAL = 15
ORDER_ASSIGNMENT = 16
ORDER_NONE = 99

RESERVED_WORDS = {
    # Language keywords and literals
    "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete",
    "do", "else", "export", "extends", "finally", "for", "function", "if", "import", "in",
    "instanceof", "new", "return", "super", "switch", "this", "throw", "try", "typeof", "var",
    "void", "while", "with", "yield", "enum", "implements", "interface", "let", "package",
    "private", "protected", "public", "static", "await", "async", "null", "true", "false",
    "undefined", "NaN", "Infinity", "arguments", "eval",
    # Runtime globals
    "Robot", "Math", "Date", "String", "Number", "Array", "Object", "JSON", "console", "window",
    "logConsole", "logJoint", "sleep", "wait", "alert", "programTimer", "resetTimer",
    "timerValue", "getCoordinate", "motorPositionCache", "mathRandomInt",
}

ARITHMETIC = {
    "ADD": (" + ", ORDER_ADDITION),
    "MINUS": (" - ", ORDER_SUBTRACTION),
    "MULTIPLY": (" * ", ORDER_MULTIPLICATION),
    "DIVIDE": (" / ", ORDER_DIVISION),
    "MODULO": (" % ", ORDER_MODULUS),
}

COMPARISON = {"EQ": "==", "NEQ": "!=", "LT": "<", "LTE": "<=", "GT": ">", "GTE": ">="}

ROUNDING = {"ROUND": "Math.round", "ROUNDUP": "Math.ceil", "ROUNDDOWN": "Math.floor"}

# Fallback text for empty value inputs of domain blocks.
DEFAULTS = {
    "JOINT": "2048",
    "DEGREES": "0",
    "AMOUNT": "0",
    "DURATION": "1",
    "MESSAGE": '""',
    "COORDS": "[0, 0, 0, 0, 0, 0]",
    "COORDINATES": "[0, 0, 0, 0, 0, 0]",
    "JOINTS": "[]",
    "TIMEOUT": "5",
    "MIN": "-180",
    "MAX": "180",
}
TIME_DEFAULTS = {BlockType.WAIT: "1", BlockType.WAIT_MS: "100"}

RANDOM_INT_FUNCTION = (
    "function mathRandomInt(a, b) {\n"
    "  if (a > b) {\n"
    "    var c = a;\n"
    "    a = b;\n"
    "    b = c;\n"
    "  }\n"
    "  return Math.floor(Math.random() * (b - a + 1) + a);\n"
    "}"
)


def quote(text: str) -> str:
    return quote_string(text, "'")


def _number_code(block: Block) -> tuple[str, float]:
    code = block.get_field("NUM")
    return code, ORDER_UNARY_NEGATION if code.startswith("-") else ORDER_ATOMIC


### Control ###


def controls_if(ctx: GeneratorContext, block: Block) -> str:
    code = ""
    n = 0
    while block.get_input(f"IF{n}") is not None:
        condition = value_to_code(ctx, block, f"IF{n}", ORDER_NONE) or "false"
        branch = statement_to_code(ctx, block, f"DO{n}")
        code += (" else " if n else "") + f"if ({condition}) {{\n{branch}}}"
        n += 1
    if block.get_input("ELSE") is not None:
        code += f" else {{\n{statement_to_code(ctx, block, 'ELSE')}}}"
    return code + "\n"


def controls_for(ctx: GeneratorContext, block: Block) -> str:
    variable = ctx.block_variable(block)
    start = value_to_code(ctx, block, "FROM", ORDER_ASSIGNMENT) or "0"
    end = value_to_code(ctx, block, "TO", ORDER_RELATIONAL) or "0"
    step = value_to_code(ctx, block, "BY", ORDER_ASSIGNMENT) or "1"
    branch = statement_to_code(ctx, block, "DO")
    increment = f"{variable}++" if step == "1" else f"{variable} += {step}"
    return f"for ({variable} = {start}; {variable} <= {end}; {increment}) {{\n{branch}}}\n"


def controls_while_until(ctx: GeneratorContext, block: Block) -> str:
    until = block.get_field("MODE") == "UNTIL"
    condition = value_to_code(ctx, block, "BOOL", ORDER_LOGICAL_NOT if until else ORDER_NONE) or "false"
    if until:
        condition = "!" + condition
    branch = statement_to_code(ctx, block, "DO")
    return f"while ({condition}) {{\n{branch}}}\n"


def controls_repeat_ext(ctx: GeneratorContext, block: Block) -> str:
    repeats = value_to_code(ctx, block, "TIMES", ORDER_RELATIONAL) or "0"
    branch = statement_to_code(ctx, block, "DO")
    count = ctx.names.distinct_name("count")
    return f"for (var {count} = 0; {count} < {repeats}; {count}++) {{\n{branch}}}\n"


def controls_for_each(ctx: GeneratorContext, block: Block) -> str:
    variable = ctx.block_variable(block)
    sequence = value_to_code(ctx, block, "LIST", ORDER_ASSIGNMENT) or "[]"
    branch = statement_to_code(ctx, block, "DO")
    code = ""
    if not sequence.isidentifier():
        # Complex expressions are evaluated once before the loop.
        list_name = ctx.names.distinct_name(variable + "_list")
        code += f"var {list_name} = {sequence};\n"
        sequence = list_name
    index = ctx.names.distinct_name(variable + "_index")
    branch = f"{ctx.indent}{variable} = {sequence}[{index}];\n" + branch
    return code + f"for (var {index} in {sequence}) {{\n{branch}}}\n"


def controls_flow_statements(ctx: GeneratorContext, block: Block) -> str:
    return "break;\n" if block.get_field("FLOW") == "BREAK" else "continue;\n"


### Logic ###


def logic_compare(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op = block.get_field("OP")
    order = ORDER_EQUALITY if op in ("EQ", "NEQ") else ORDER_RELATIONAL
    a = value_to_code(ctx, block, "A", order) or "0"
    b = value_to_code(ctx, block, "B", order) or "0"
    return f"{a} {COMPARISON[op]} {b}", order


def logic_operation(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op, order = ("&&", ORDER_LOGICAL_AND) if block.get_field("OP") == "AND" else ("||", ORDER_LOGICAL_OR)
    a = value_to_code(ctx, block, "A", order) or "false"
    b = value_to_code(ctx, block, "B", order) or "false"
    return f"{a} {op} {b}", order


def logic_negate(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    argument = value_to_code(ctx, block, "BOOL", ORDER_LOGICAL_NOT) or "true"
    return "!" + argument, ORDER_LOGICAL_NOT


def logic_boolean(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return ("true" if block.get_field("BOOL") == "TRUE" else "false"), ORDER_ATOMIC


def logic_null(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "null", ORDER_ATOMIC


### Math ###


def math_number(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return _number_code(block)


def math_arithmetic(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op = block.get_field("OP")
    if op == "POWER":
        # `-a ** b` is a syntax error, so unary operands keep their parentheses.
        a = value_to_code(ctx, block, "A", ORDER_UNARY_NEGATION) or "0"
        b = value_to_code(ctx, block, "B", ORDER_EXPONENTIATION) or "0"
        return f"{a} ** {b}", ORDER_EXPONENTIATION
    operator, order = ARITHMETIC[op]
    a = value_to_code(ctx, block, "A", order) or "0"
    b = value_to_code(ctx, block, "B", order) or "0"
    return a + operator + b, order


def math_single(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    op = block.get_field("OP")
    if op == "NEG":
        argument = value_to_code(ctx, block, "NUM", ORDER_UNARY_NEGATION) or "0"
        if argument.startswith("-"):
            argument = " " + argument
        return "-" + argument, ORDER_UNARY_NEGATION
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    function = "Math.sqrt" if op == "ROOT" else "Math.abs"
    return f"{function}({argument})", ORDER_FUNCTION_CALL


def math_trig(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    function = "Math." + block.get_field("OP").lower()
    degrees = block.get_field("UNIT") == "DEGREES"
    inverse = function in ("Math.asin", "Math.acos", "Math.atan")
    if degrees and not inverse:
        argument = value_to_code(ctx, block, "NUM", ORDER_MULTIPLICATION) or "0"
        return f"{function}({argument} * Math.PI / 180)", ORDER_FUNCTION_CALL
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    if degrees:
        return f"{function}({argument}) * 180 / Math.PI", ORDER_DIVISION
    return f"{function}({argument})", ORDER_FUNCTION_CALL


def math_round(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    argument = value_to_code(ctx, block, "NUM", ORDER_NONE) or "0"
    return f"{ROUNDING[block.get_field('OP')]}({argument})", ORDER_FUNCTION_CALL


def math_constant(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "Math.PI", ORDER_MEMBER


def math_modulo(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    dividend = value_to_code(ctx, block, "DIVIDEND", ORDER_MODULUS) or "0"
    divisor = value_to_code(ctx, block, "DIVISOR", ORDER_MODULUS) or "0"
    return f"{dividend} % {divisor}", ORDER_MODULUS


def math_constrain(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    value = value_to_code(ctx, block, "VALUE", ORDER_NONE) or "0"
    low = value_to_code(ctx, block, "LOW", ORDER_NONE) or "0"
    high = value_to_code(ctx, block, "HIGH", ORDER_NONE) or "Infinity"
    return f"Math.min(Math.max({value}, {low}), {high})", ORDER_FUNCTION_CALL


def math_random_int(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    ctx.provide("math_random_int", RANDOM_INT_FUNCTION)
    start = value_to_code(ctx, block, "FROM", ORDER_NONE) or "0"
    end = value_to_code(ctx, block, "TO", ORDER_NONE) or "0"
    return f"mathRandomInt({start}, {end})", ORDER_FUNCTION_CALL


def math_random_float(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "Math.random()", ORDER_FUNCTION_CALL


def math_atan2(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    x = value_to_code(ctx, block, "X", ORDER_NONE) or "0"
    y = value_to_code(ctx, block, "Y", ORDER_NONE) or "0"
    return f"Math.atan2({y}, {x})", ORDER_FUNCTION_CALL


### Text ###


def text(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return quote(block.get_field("TEXT")), ORDER_ATOMIC


def _join_operand(ctx: GeneratorContext, block: Block, name: str) -> tuple[str, bool]:
    target = block.get_input_target(name)
    if target is not None and target.type == BlockType.TEXT and target.enabled:
        return quote(target.get_field("TEXT")), True
    return f"String({value_to_code(ctx, block, name, ORDER_NONE) or quote('')})", False


def text_join(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    count = block.extra_state.get("item_count", 0)
    if count == 0:
        return "''", ORDER_ATOMIC
    operands = [_join_operand(ctx, block, f"ADD{n}") for n in range(count)]
    if count == 1:
        return operands[0][0], ORDER_FUNCTION_CALL
    parts = [code for code, _ in operands]
    if not any(is_text for _, is_text in operands):
        # A leading string keeps `+` a concatenation when read back.
        parts.insert(0, "''")
    return " + ".join(parts), ORDER_ADDITION


def text_print(ctx: GeneratorContext, block: Block) -> str:
    message = value_to_code(ctx, block, "TEXT", ORDER_NONE) or "''"
    return f"window.alert({message});\n"


### Variables ###


def variables_get(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return ctx.block_variable(block), ORDER_ATOMIC


def variables_set(ctx: GeneratorContext, block: Block) -> str:
    value = value_to_code(ctx, block, "VALUE", ORDER_ASSIGNMENT) or "0"
    return f"{ctx.block_variable(block)} = {value};\n"


### Lists ###


def lists_create_with(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    count = block.extra_state.get("item_count", 0)
    items = [value_to_code(ctx, block, f"ADD{n}", ORDER_NONE) or "null" for n in range(count)]
    return f"[{', '.join(items)}]", ORDER_ATOMIC


def lists_length(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    sequence = value_to_code(ctx, block, "VALUE", ORDER_MEMBER) or "[]"
    return f"{sequence}.length", ORDER_MEMBER


def zero_based_index(ctx: GeneratorContext, block: Block, name: str, subtraction_order: float) -> str:
    """Inverse of the translator's index shift: `k` becomes `k - 1`, `e + 1` becomes `e`."""
    target = block.get_input_target(name)
    if target is None or not target.enabled:
        return "0"
    if target.type == BlockType.MATH_NUMBER:
        return format_number(float(target.get_field("NUM")) - 1)
    if target.type == BlockType.MATH_ARITHMETIC and target.get_field("OP") == "ADD":
        one = target.get_input_target("B")
        if one is not None and one.type == BlockType.MATH_NUMBER and one.get_field("NUM") == "1":
            return value_to_code(ctx, target, "A", ORDER_NONE) or "0"
    return (value_to_code(ctx, block, name, subtraction_order) or "1") + " - 1"


def lists_get_index(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    sequence = value_to_code(ctx, block, "VALUE", ORDER_MEMBER) or "[]"
    return f"{sequence}[{zero_based_index(ctx, block, 'AT', ORDER_SUBTRACTION)}]", ORDER_MEMBER


def lists_set_index(ctx: GeneratorContext, block: Block) -> str:
    sequence = value_to_code(ctx, block, "LIST", ORDER_MEMBER) or "[]"
    value = value_to_code(ctx, block, "TO", ORDER_ASSIGNMENT) or "null"
    return f"{sequence}[{zero_based_index(ctx, block, 'AT', ORDER_SUBTRACTION)}] = {value};\n"


### Robot ###


def get_time(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    return "Date.now()", ORDER_FUNCTION_CALL


def create_coordinates(ctx: GeneratorContext, block: Block) -> tuple[str, float]:
    parts = [value_to_code(ctx, block, name, ORDER_NONE) or "0" for name in COORDINATE_NAMES]
    return f"[{', '.join(parts)}]", ORDER_ATOMIC


def _scaled_argument(ctx: GeneratorContext, block: Block, name: str, scale: int) -> str:
    target = block.get_input_target(name)
    if target is not None and target.enabled and target.type == BlockType.MATH_NUMBER:
        return format_number(float(target.get_field("NUM")) * scale)
    value = value_to_code(ctx, block, name, ORDER_MULTIPLICATION) or DEFAULTS[name]
    return f"{value} * {scale}"


def call_rule(entry: FunctionEntry):
    """Rule rendering `entry`'s canonical call form."""

    def rule(ctx: GeneratorContext, block: Block):
        arguments: dict[int, str] = dict(entry.constants)
        if entry.selector is not None:
            arguments[entry.selector.index] = entry.selector.code
        for arg in entry.args:
            if arg.kind == ArgKind.FIELD:
                value = block.get_field(arg.name)
                arguments[arg.index] = value if value.lstrip("-").isdigit() else f'"{value}"'
            elif arg.scale is not None:
                arguments[arg.index] = _scaled_argument(ctx, block, arg.name, arg.scale)
            else:
                default = TIME_DEFAULTS.get(block.type) if arg.name == "TIME" else DEFAULTS[arg.name]
                arguments[arg.index] = value_to_code(ctx, block, arg.name, ORDER_NONE) or default
        call = f"{entry.callee}({', '.join(arguments[i] for i in sorted(arguments))})"
        if entry.awaited:
            call = "await " + call
        if entry.shape == Shape.STATEMENT:
            return call + ";\n"
        return call, ORDER_AWAIT if entry.awaited else ORDER_FUNCTION_CALL

    return rule


class JavaScriptGenerator(CodeGenerator):
    name = "JavaScript"
    indent = "  "
    placeholder = "// Drag blocks here..."
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
            BlockType.GET_TIME: get_time,
            BlockType.CREATE_COORDINATES: create_coordinates,
        }
        for entry in FUNCTION_TABLE:
            rules[entry.block_type] = call_rule(entry)
        return rules

    def init(self, ctx: GeneratorContext) -> None:
        names = [ctx.variable_name(variable.name) for variable in ctx.workspace.variables()]
        if names:
            ctx.provide("variables", f"var {', '.join(names)};")

    def scrub_naked_value(self, line: str) -> str:
        return line + ";\n"
