import pytest

from TranslatorComponents.Generator import (
    Backend,
    CodeGenerator,
    GenerationError,
    GeneratorContext,
    NameTable,
    block_to_code,
    get_generation_reporter,
    get_generator,
    normalize,
    prefix_lines,
    quote_string,
    workspace_to_code,
)
from TranslatorComponents.Graph import BlockType
from TranslatorComponents.JavaScriptGenerator import JavaScriptGenerator
from TranslatorComponents.PythonGenerator import PythonGenerator


def test_prefix_lines_skips_empty_lines():
    assert prefix_lines("a\n\nb\n", "  ") == "  a\n\n  b\n"


@pytest.mark.parametrize(
    "text, quote_char, expected",
    [
        ("it's", "'", "'it\\'s'"),
        ("it's", '"', '"it\'s"'),
        ('say "hi"', '"', '"say \\"hi\\""'),
        ("a\\b\nc", "'", "'a\\\\b\\nc'"),
        ("\r\t\0\x01\x7f", "'", "'\\r\\t\\x00\\x01\\x7f'"),
    ],
)
def test_quote_string(text, quote_char, expected):
    assert quote_string(text, quote_char) == expected


def test_normalize():
    assert normalize("\n\nx;  \n\n") == "x;\n"
    assert normalize("a\n\n\nb") == "a\n\n\nb\n"


def test_name_table():
    names = NameTable({"var", "count"})
    assert names.get_name("var") == "var2"
    assert names.get_name("var") == "var2"
    assert names.get_name("my var") == "my_var"
    assert names.get_name("2x") == "my_2x"
    assert names.distinct_name("count") == "count2"
    assert names.distinct_name("count") == "count3"


def test_name_table_avoids_collisions_between_variables():
    names = NameTable(set())
    assert names.get_name("a b") == "a_b"
    assert names.get_name("a_b") == "a_b2"


def test_every_backend_covers_every_block_type():
    for generator in (JavaScriptGenerator(), PythonGenerator()):
        assert set(generator.rules) == set(BlockType)


def test_missing_rules_are_rejected_up_front():
    class Incomplete(CodeGenerator):
        name = "Incomplete"

        def build_rules(self):
            return {BlockType.LOG: lambda ctx, block: ""}

    with pytest.raises(GenerationError, match="no rule for"):
        Incomplete()


def test_block_without_rule(workspace):
    generator = JavaScriptGenerator()
    del generator.rules[BlockType.LOG]
    ctx = GeneratorContext(generator, workspace)
    with pytest.raises(GenerationError, match='block type "log"'):
        block_to_code(ctx, workspace.new_block(BlockType.LOG))


def test_rule_with_wrong_result(workspace):
    generator = JavaScriptGenerator()
    generator.rules[BlockType.ALERT] = lambda ctx, block: 42
    ctx = GeneratorContext(generator, workspace)
    with pytest.raises(GenerationError, match="Invalid code"):
        block_to_code(ctx, workspace.new_block(BlockType.ALERT))


def test_unknown_backend():
    with pytest.raises(GenerationError, match="Unknown backend"):
        get_generator("cobol")
    assert isinstance(get_generator("python"), PythonGenerator)
    assert isinstance(get_generator(Backend.JAVASCRIPT), JavaScriptGenerator)


def test_deferred_definitions_are_deduplicated(workspace):
    ctx = GeneratorContext(JavaScriptGenerator(), workspace)
    ctx.provide("a", "first")
    ctx.provide("a", "second")
    assert ctx.definitions == {"a": "first"}


def test_disabled_blocks_are_skipped(workspace):
    blocks = []
    for message in ("a", "b", "c"):
        block = workspace.new_block(BlockType.LOG)
        text = workspace.new_block(BlockType.TEXT)
        text.set_field("TEXT", message)
        block.connect_value("MESSAGE", text)
        blocks.append(block)
    blocks[0].connect_next(blocks[1])
    blocks[1].connect_next(blocks[2])
    blocks[1].enabled = False
    assert workspace_to_code(workspace) == "logConsole('a');\nlogConsole('c');\n"


def test_disabled_value_uses_the_default(workspace):
    block = workspace.new_block(BlockType.WAIT_MS)
    time = workspace.new_block(BlockType.MATH_NUMBER)
    time.set_field("NUM", "250")
    block.connect_value("TIME", time)
    time.enabled = False
    assert workspace_to_code(workspace) == "await sleep(100);\n"


def test_empty_workspace_placeholder(workspace):
    assert workspace_to_code(workspace, Backend.JAVASCRIPT) == "// Drag blocks here...\n"
    assert workspace_to_code(workspace, Backend.PYTHON) == "# Drag blocks here...\n"


def test_stacks_are_rendered_in_document_order(workspace, translate):
    translate("logConsole('a');")
    translate("logConsole('b');")
    second = workspace.top_blocks()[1]
    workspace.move_block(second, 0, -200)
    assert workspace_to_code(workspace) == "logConsole('b');\n\nlogConsole('a');\n"


def test_generation_reporter(workspace, translate):
    translate("logConsole('a');")
    translate("sleep(5);")
    reporter = get_generation_reporter(workspace, Backend.JAVASCRIPT)
    reports = []
    while True:
        try:
            reports.append(next(reporter))
        except StopIteration as done:
            program = done.value
            break
    assert len(reports) == 3
    assert reports[0].new_code == "logConsole('a');\n"
    assert reports[1].looked_at_block_id == "b3"
    assert reports[-1].final_code == program
    assert program == workspace_to_code(workspace)
    assert all(report.backend == "JavaScript" for report in reports)
