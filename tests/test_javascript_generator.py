import pytest

from TranslatorComponents.Generator import workspace_to_code
from TranslatorComponents.Graph import BlockType, Workspace
from TranslatorComponents.Translator import code_to_blocks


def to_javascript(source):
    workspace = Workspace()
    result = code_to_blocks(workspace, source)
    assert result.success, result.error
    return workspace_to_code(workspace, "javascript")


def test_variables_are_declared_up_front():
    assert to_javascript('var x = 5;\nlogConsole("x is " + x);') == (
        "var x;\n\n\nx = 5;\nlogConsole('x is ' + String(x));\n"
    )


def test_counted_loop():
    source = "for (var i = 0; i < 3; i++) {\n  await Robot.setDegrees(17, 30);\n  await sleep(500);\n}"
    assert to_javascript(source) == (
        "var i;\n\n\n"
        "for (i = 0; i <= 3; i++) {\n"
        "  await Robot.setDegrees(17, 30);\n"
        "  await sleep(500);\n"
        "}\n"
    )


def test_parentheses_follow_precedence():
    assert to_javascript("x = a + b * c;\ny = (a + b) * c;\nz = a - (b - c);") == (
        "var x, a, b, c, y, z;\n\n\n"
        "x = a + b * c;\n"
        "y = (a + b) * c;\n"
        "z = a - (b - c);\n"
    )


def test_list_indexes_are_zero_based_again():
    assert to_javascript("v = items[0];\nw = items[k];\nitems[k + 2] = 1;") == (
        "var v, items, w, k;\n\n\n"
        "v = items[0];\n"
        "w = items[k];\n"
        "items[k + 2] = 1;\n"
    )


def test_trig_in_degrees():
    assert to_javascript("x = Math.sin(30 * Math.PI / 180);\ny = Math.asin(0.5) * 180 / Math.PI;") == (
        "var x, y;\n\n\n"
        "x = Math.sin(30 * Math.PI / 180);\n"
        "y = Math.asin(0.5) * 180 / Math.PI;\n"
    )


def test_scaled_duration():
    assert to_javascript("await Robot.moveSmooth(14, 2048, 1.5 * 1000);") == (
        "await Robot.moveSmooth(14, 2048, 1500);\n"
    )
    assert to_javascript("await Robot.moveSmooth(14, 2048, t * 1000);") == (
        "var t;\n\n\nawait Robot.moveSmooth(14, 2048, t * 1000);\n"
    )


def test_aliases_render_canonically():
    assert to_javascript("x = await Robot.pingMotor(12);") == "var x;\n\n\nx = await Robot.ping(12);\n"
    assert to_javascript("await Robot.setAllPositions([0, 0, 10, 0, 15, 0]);") == (
        "await Robot.setHeadCoordinates([0, 0, 10, 0, 15, 0]);\n"
    )


def test_torque_constants():
    assert to_javascript("await Robot.setTorqueMultiple([11, 12], false);") == (
        "await Robot.setTorqueMultiple([11, 12, 13, 14, 15, 16, 17, 18], false);\n"
    )


def test_unawaited_helpers():
    assert to_javascript("h = getCoordinate(pose, 2);\nresetTimer();") == (
        "var h, pose;\n\n\nh = getCoordinate(pose, 2);\nresetTimer();\n"
    )


def test_negative_numbers_and_unary_minus():
    assert to_javascript("x = -5;\nawait Robot.setDegrees(18, -30);") == (
        "var x;\n\n\nx = -5;\nawait Robot.setDegrees(18, -30);\n"
    )


def test_reserved_variable_names_are_renamed():
    assert to_javascript("var Robot = 1;") == "var Robot2;\n\n\nRobot2 = 1;\n"


def test_declaration_without_initializer():
    assert to_javascript("var a;") == "var a;\n\n\na = 0;\n"


def test_join_without_text_keeps_string_conversion(workspace):
    block = workspace.new_block(BlockType.VARIABLES_SET)
    block.set_field("VAR", workspace.variable("x").id)
    join = workspace.new_block(BlockType.TEXT_JOIN, item_count=2)
    for n, name in enumerate(("a", "b")):
        getter = workspace.new_block(BlockType.VARIABLES_GET)
        getter.set_field("VAR", workspace.variable(name).id)
        join.connect_value(f"ADD{n}", getter)
    block.connect_value("VALUE", join)
    assert workspace_to_code(workspace) == "var x, a, b;\n\n\nx = '' + String(a) + String(b);\n"


def test_while_until_negates_condition(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_WHILE_UNTIL)
    loop.set_field("MODE", "UNTIL")
    compare = workspace.new_block(BlockType.LOGIC_COMPARE)
    compare.set_field("OP", "GT")
    getter = workspace.new_block(BlockType.VARIABLES_GET)
    getter.set_field("VAR", workspace.variable("a").id)
    compare.connect_value("A", getter)
    limit = workspace.new_block(BlockType.MATH_NUMBER)
    limit.set_field("NUM", "1")
    compare.connect_value("B", limit)
    loop.connect_value("BOOL", compare)
    assert workspace_to_code(workspace) == "var a;\n\n\nwhile (!(a > 1)) {\n}\n"


def test_repeat_uses_a_fresh_counter(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_REPEAT_EXT)
    times = workspace.new_block(BlockType.MATH_NUMBER)
    times.set_field("NUM", "3")
    loop.connect_value("TIMES", times)
    loop.connect_statement("DO", workspace.new_block(BlockType.RESET_TIMER))
    assert workspace_to_code(workspace) == (
        "for (var count = 0; count < 3; count++) {\n  resetTimer();\n}\n"
    )


def test_naked_value_block(workspace):
    number = workspace.new_block(BlockType.MATH_NUMBER)
    number.set_field("NUM", "5")
    assert workspace_to_code(workspace) == "5;\n"


ROBOT_PROGRAM = (
    "await Robot.setTorque(11, true);\n"
    "if (await Robot.isMoving(11)) {\n"
    "  await Robot.waitUntilStopped(11, 5);\n"
    "} else if (await Robot.getTemperature(11) > 50) {\n"
    "  logConsole('Too hot', \"warn\");\n"
    "} else {\n"
    "  await Robot.moveSmooth(11, 2048, 1500);\n"
    "}\n"
)


def test_canonical_program_is_a_fixed_point():
    assert to_javascript(ROBOT_PROGRAM) == ROBOT_PROGRAM


def program_body(code):
    """Generated program without its variable declaration header."""
    return code.split("\n\n\n", 1)[-1]


@pytest.mark.parametrize(
    "source",
    [
        "x = a + b * c;\ny = (a + b) * c;",
        "for (var i = 0; i < 3; i++) {\n  logConsole('i=' + i);\n}",
        "items[k] = Math.round(Math.sqrt(items.length));",
        "while (!(await Robot.isMoving(11)) && t < 3) {\n  t += 1;\n}",
    ],
)
def test_generated_code_translates_back_to_itself(source):
    once = to_javascript(source)
    assert to_javascript(program_body(once)) == once


def test_control_characters_are_escaped():
    code = to_javascript('logConsole("a\\rb\\tc\\0d");')
    assert code == "logConsole('a\\rb\\tc\\x00d');\n"
    assert to_javascript(code) == code


def _number(workspace, value):
    block = workspace.new_block(BlockType.MATH_NUMBER)
    block.set_field("NUM", value)
    return block


def _getter(workspace, name):
    block = workspace.new_block(BlockType.VARIABLES_GET)
    block.set_field("VAR", workspace.variable(name).id)
    return block


def _assign(workspace, name, value):
    setter = workspace.new_block(BlockType.VARIABLES_SET)
    setter.set_field("VAR", workspace.variable(name).id)
    setter.connect_value("VALUE", value)
    return setter


def test_for_each_walks_the_list_by_index(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_FOR_EACH)
    loop.set_field("VAR", workspace.variable("item").id)
    loop.connect_value("LIST", _getter(workspace, "items"))
    loop.connect_statement("DO", workspace.new_block(BlockType.CONTROLS_FLOW_STATEMENTS))
    assert workspace_to_code(workspace) == (
        "var item, items;\n\n\n"
        "for (var item_index in items) {\n"
        "  item = items[item_index];\n"
        "  break;\n"
        "}\n"
    )


def test_for_each_stores_a_literal_list_first(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_FOR_EACH)
    loop.set_field("VAR", workspace.variable("item").id)
    loop.connect_value("LIST", workspace.new_block(BlockType.LISTS_CREATE_WITH))
    skip = workspace.new_block(BlockType.CONTROLS_FLOW_STATEMENTS)
    skip.set_field("FLOW", "CONTINUE")
    loop.connect_statement("DO", skip)
    assert workspace_to_code(workspace) == (
        "var item;\n\n\n"
        "var item_list = [];\n"
        "for (var item_index in item_list) {\n"
        "  item = item_list[item_index];\n"
        "  continue;\n"
        "}\n"
    )


def test_extra_math_blocks(workspace):
    modulo = workspace.new_block(BlockType.MATH_MODULO)
    modulo.connect_value("DIVIDEND", _number(workspace, "7"))
    modulo.connect_value("DIVISOR", _number(workspace, "3"))
    first = _assign(workspace, "remainder", modulo)

    constrain = workspace.new_block(BlockType.MATH_CONSTRAIN)
    constrain.connect_value("VALUE", _getter(workspace, "remainder"))
    constrain.connect_value("LOW", _number(workspace, "0"))
    constrain.connect_value("HIGH", _number(workspace, "10"))

    random_int = workspace.new_block(BlockType.MATH_RANDOM_INT)
    random_int.connect_value("FROM", _number(workspace, "1"))
    random_int.connect_value("TO", _number(workspace, "6"))

    atan2 = workspace.new_block(BlockType.MATH_ATAN2)
    atan2.connect_value("X", _number(workspace, "2"))
    atan2.connect_value("Y", _number(workspace, "1"))

    first.connect_next(_assign(workspace, "clamped", constrain))
    first.last_in_chain().connect_next(_assign(workspace, "roll", random_int))
    first.last_in_chain().connect_next(
        _assign(workspace, "chance", workspace.new_block(BlockType.MATH_RANDOM_FLOAT))
    )
    first.last_in_chain().connect_next(_assign(workspace, "angle", atan2))
    first.last_in_chain().connect_next(
        _assign(workspace, "nothing", workspace.new_block(BlockType.LOGIC_NULL))
    )

    assert workspace_to_code(workspace) == (
        "var remainder, clamped, roll, chance, angle, nothing;\n\n"
        "function mathRandomInt(a, b) {\n"
        "  if (a > b) {\n"
        "    var c = a;\n"
        "    a = b;\n"
        "    b = c;\n"
        "  }\n"
        "  return Math.floor(Math.random() * (b - a + 1) + a);\n"
        "}\n\n\n"
        "remainder = 7 % 3;\n"
        "clamped = Math.min(Math.max(remainder, 0), 10);\n"
        "roll = mathRandomInt(1, 6);\n"
        "chance = Math.random();\n"
        "angle = Math.atan2(1, 2);\n"
        "nothing = null;\n"
    )


def test_text_print(workspace):
    block = workspace.new_block(BlockType.TEXT_PRINT)
    message = workspace.new_block(BlockType.TEXT)
    message.set_field("TEXT", "hi")
    block.connect_value("TEXT", message)
    assert workspace_to_code(workspace) == "window.alert('hi');\n"
