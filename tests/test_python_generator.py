from TranslatorComponents.Generator import Backend, workspace_to_code
from TranslatorComponents.Graph import BlockType, Workspace
from TranslatorComponents.Translator import code_to_blocks
from translator_config import TranslatorConfig

BASE_IMPORTS = ("from reachy_mini import ReachyMini", "import time")


def program(body, extra_imports=(), media_backend="no_media"):
    """Expected program text: shell header followed by the indented body lines."""
    imports = "\n".join(BASE_IMPORTS + tuple(extra_imports))
    header = (
        '"""Generated by Blockly for Reachy Mini"""\n\n'
        f"{imports}\n\n"
        f'with ReachyMini(media_backend="{media_backend}") as mini:\n'
        "    program_timer = time.time()\n"
    )
    return header + "".join(f"    {line}\n" for line in body)


def to_python(source, config=None):
    workspace = Workspace()
    result = code_to_blocks(workspace, source)
    assert result.success, result.error
    return workspace_to_code(workspace, Backend.PYTHON, config)


def test_antennas_sleep_and_print():
    source = "await Robot.setDegrees(17, 45);\nawait sleep(500);\nlogConsole('done');"
    assert to_python(source) == program(
        [
            "mini.set_target(antennas=[np.deg2rad(45), 0])",
            "time.sleep(500 / 1000)",
            'print("done")',
        ],
        ["import numpy as np"],
    )


def test_right_antenna_and_negative_angle():
    assert to_python("await Robot.setDegrees(18, -30);") == program(
        ["mini.set_target(antennas=[0, np.deg2rad(-30)])"], ["import numpy as np"]
    )


def test_variables_and_string_join():
    assert to_python("var x = 5;\nlogConsole('x is ' + x);") == program(
        ["x = 5", 'print(str("x is ") + str(x))']
    )


def test_if_elif_else_keeps_valid_bodies():
    source = (
        "if (await Robot.isMoving(11)) {\n"
        "  await Robot.checkAllMotors();\n"
        "} else if (a < 0) {\n"
        "  logConsole('neg');\n"
        "} else {\n"
        "}"
    )
    assert to_python(source) == program(
        [
            "if False:",
            "    # check_joints not supported in Python API",
            "    pass",
            "elif a < 0:",
            '    print("neg")',
            "else:",
            "    pass",
        ]
    )


def test_counted_loop_is_inclusive():
    assert to_python("for (var i = 0; i < 3; i++) {\n  logConsole(i);\n}") == program(
        ["for i in range(int(0), int(3) + 1, int(1)):", "    print(i)"]
    )


def test_math_imports_are_collected_once():
    source = "x = Math.sin(30 * Math.PI / 180);\ny = Math.asin(0.5) * 180 / Math.PI;\nz = Math.PI;"
    assert to_python(source) == program(
        [
            "x = math.sin(math.radians(30))",
            "y = math.degrees(math.asin(0.5))",
            "z = math.pi",
        ],
        ["import math"],
    )


def test_lists():
    assert to_python("v = items[0];\nw = items[k];\nn = items.length;") == program(
        ["v = items[0]", "w = items[k]", "n = len(items)"]
    )


def test_head_pose():
    source = (
        "await Robot.setHeadCoordinates([0, 0, 10, 0, 15, 0]);\n"
        "pose = await Robot.getHeadCoordinates();\n"
        "h = getCoordinate(pose, 2);\n"
        "r = getCoordinate(pose, 4);"
    )
    assert to_python(source) == program(
        [
            "mini.goto_target(create_head_pose(x=0, y=0, z=10, roll=0, pitch=15, yaw=0, "
            "degrees=True, mm=True), duration=1.0)",
            "pose = mini.head.pose",
            "h = (pose)[2, 3]",
            "r = 0",
        ],
        ["from reachy_mini.utils import create_head_pose"],
    )


def test_timing():
    source = "resetTimer();\nt = timerValue();\nnow = Date.now();\nawait wait(2);"
    assert to_python(source) == program(
        [
            "program_timer = time.time()",
            "t = (time.time() - program_timer)",
            "now = int(time.time() * 1000)",
            "time.sleep(2)",
        ]
    )


def test_unsupported_value_uses_sentinel():
    assert to_python("x = await Robot.getLoad(12);") == program(["x = 0"])


def test_unsupported_statement_becomes_comment():
    assert to_python("await Robot.rebootAll();") == program(["# reboot_all not supported in Python API"])


def test_output_blocks():
    source = "logConsole('hot', 'warn');\nalert('stop');\nlogJoint(12);"
    assert to_python(source) == program(
        [
            'print("hot")  # Log type: warn',
            'print("stop")  # Alert',
            'print("Joint 12:")  # Joint values not readable in Python API',
        ]
    )


def test_logic():
    assert to_python("x = a && !b;") == program(["x = a and not b"])


def test_reserved_names_are_renamed():
    assert to_python("var print = 1;") == program(["print2 = 1"])


def test_media_backend_comes_from_config():
    config = TranslatorConfig()
    config.media_backend = "default"
    assert to_python("resetTimer();", config) == program(["program_timer = time.time()"], media_backend="default")


def test_naked_value_block(workspace):
    number = workspace.new_block(BlockType.MATH_NUMBER)
    number.set_field("NUM", "5")
    assert workspace_to_code(workspace, Backend.PYTHON) == program(["5"])


def test_control_characters_are_escaped():
    code = to_python('logConsole("a\\rb\\tc\\0d");')
    assert code == program(['print("a\\rb\\tc\\x00d")'])
    compile(code, "generated.py", "exec")


def _number(workspace, value):
    block = workspace.new_block(BlockType.MATH_NUMBER)
    block.set_field("NUM", value)
    return block


def _assign(workspace, name, value):
    setter = workspace.new_block(BlockType.VARIABLES_SET)
    setter.set_field("VAR", workspace.variable(name).id)
    setter.connect_value("VALUE", value)
    return setter


def test_for_each_and_flow_statements(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_FOR_EACH)
    loop.set_field("VAR", workspace.variable("item").id)
    items = workspace.new_block(BlockType.VARIABLES_GET)
    items.set_field("VAR", workspace.variable("items").id)
    loop.connect_value("LIST", items)
    skip = workspace.new_block(BlockType.CONTROLS_FLOW_STATEMENTS)
    skip.set_field("FLOW", "CONTINUE")
    loop.connect_statement("DO", skip)
    skip.connect_next(workspace.new_block(BlockType.CONTROLS_FLOW_STATEMENTS))
    assert workspace_to_code(workspace, Backend.PYTHON) == program(
        ["for item in items:", "    continue", "    break"]
    )


def test_empty_for_each_body_gets_pass(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_FOR_EACH)
    loop.set_field("VAR", workspace.variable("item").id)
    assert workspace_to_code(workspace, Backend.PYTHON) == program(
        ["for item in []:", "    pass"]
    )


def test_extra_math_blocks(workspace):
    modulo = workspace.new_block(BlockType.MATH_MODULO)
    modulo.connect_value("DIVIDEND", _number(workspace, "7"))
    modulo.connect_value("DIVISOR", _number(workspace, "3"))
    first = _assign(workspace, "remainder", modulo)

    constrain = workspace.new_block(BlockType.MATH_CONSTRAIN)
    remainder = workspace.new_block(BlockType.VARIABLES_GET)
    remainder.set_field("VAR", workspace.variable("remainder").id)
    constrain.connect_value("VALUE", remainder)
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

    code = workspace_to_code(workspace, Backend.PYTHON)
    assert code == program(
        [
            "remainder = 7 % 3",
            "clamped = min(max(remainder, 0), 10)",
            "roll = random.randint(1, 6)",
            "chance = random.random()",
            "angle = math.atan2(1, 2)",
            "nothing = None",
        ],
        ["import random", "import math"],
    )
    compile(code, "generated.py", "exec")


def test_text_print(workspace):
    block = workspace.new_block(BlockType.TEXT_PRINT)
    message = workspace.new_block(BlockType.TEXT)
    message.set_field("TEXT", "hi")
    block.connect_value("TEXT", message)
    assert workspace_to_code(workspace, Backend.PYTHON) == program(['print("hi")'])
