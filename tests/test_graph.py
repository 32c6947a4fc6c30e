import pytest

from TranslatorComponents.Graph import BlockType, GraphError, InputKind, Workspace, format_number


def log_block(workspace):
    return workspace.new_block(BlockType.LOG)


def test_block_ids_are_sequential(workspace):
    first = workspace.new_block(BlockType.LOG)
    second = workspace.new_block("math_number")
    assert (first.id, second.id) == ("b1", "b2")
    assert second.type == BlockType.MATH_NUMBER
    assert workspace.get_block("b2") is second


def test_unknown_block_type(workspace):
    with pytest.raises(GraphError, match="Unknown block type"):
        workspace.new_block("make_coffee")


def test_field_defaults_and_options(workspace):
    block = workspace.new_block(BlockType.SET_DEGREES)
    assert block.get_field("MOTOR") == "17"
    block.set_field("MOTOR", "18")
    with pytest.raises(GraphError, match="not an option"):
        block.set_field("MOTOR", "12")
    with pytest.raises(GraphError, match="no field"):
        block.set_field("SPEED", "1")


def test_if_block_shape_is_created_up_front(workspace):
    block = workspace.new_block(BlockType.CONTROLS_IF, else_if_count=2, has_else=True)
    assert list(block.inputs) == ["IF0", "DO0", "IF1", "DO1", "IF2", "DO2", "ELSE"]
    assert block.extra_state == {"else_if_count": 2, "has_else": True}
    assert block.get_input("DO1").kind == InputKind.STATEMENT


def test_item_count_creates_add_inputs(workspace):
    block = workspace.new_block(BlockType.TEXT_JOIN, item_count=3)
    assert list(block.inputs) == ["ADD0", "ADD1", "ADD2"]


def test_variables_are_created_once_per_name(workspace):
    a = workspace.variable("a")
    assert workspace.variable("a") is a
    b = workspace.variable("b")
    assert (a.id, b.id) == ("v1", "v2")
    assert [variable.name for variable in workspace.variables()] == ["a", "b"]
    with pytest.raises(GraphError):
        workspace.get_variable_by_id("v9")


def test_connect_value_replaces_and_orphans(workspace):
    owner = workspace.new_block(BlockType.LOG)
    old = workspace.new_block(BlockType.TEXT)
    new = workspace.new_block(BlockType.TEXT)
    owner.connect_value("MESSAGE", old)
    owner.connect_value("MESSAGE", new)
    assert owner.get_input_target("MESSAGE") is new
    assert new.parent is owner
    assert old.parent is None
    assert old in workspace.top_blocks()


def test_connect_value_checks_shapes(workspace):
    owner = workspace.new_block(BlockType.LOG)
    statement = workspace.new_block(BlockType.ALERT)
    with pytest.raises(GraphError, match="has no output"):
        owner.connect_value("MESSAGE", statement)
    with pytest.raises(GraphError, match="no value input"):
        owner.connect_value("NOPE", workspace.new_block(BlockType.TEXT))


def test_connect_next_reattaches_displaced_chain(workspace):
    a, b, c = (log_block(workspace) for _ in range(3))
    a.connect_next(c)
    a.connect_next(b)
    assert [block.id for block in a.chain()] == [a.id, b.id, c.id]
    assert c.previous is b
    assert b.previous is a


def test_connect_statement_reattaches_displaced_chain(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_WHILE_UNTIL)
    first, second = log_block(workspace), log_block(workspace)
    loop.connect_statement("DO", second)
    loop.connect_statement("DO", first)
    assert loop.get_input_target("DO") is first
    assert first.next is second
    assert first.previous is None
    assert first.parent is loop


def test_cycles_are_rejected(workspace):
    a, b = log_block(workspace), log_block(workspace)
    a.connect_next(b)
    with pytest.raises(GraphError, match="cycle"):
        b.connect_next(a)


def test_value_blocks_have_no_next(workspace):
    number = workspace.new_block(BlockType.MATH_NUMBER)
    with pytest.raises(GraphError, match="no next connection"):
        number.connect_next(log_block(workspace))


def test_blocks_from_another_workspace_are_rejected(workspace):
    other = Workspace()
    with pytest.raises(GraphError, match="another workspace"):
        log_block(workspace).connect_next(other.new_block(BlockType.LOG))


def test_top_blocks_are_in_document_order(workspace):
    low, high, right = (log_block(workspace) for _ in range(3))
    low.y = 200
    high.y = 10
    right.y, right.x = 10, 300
    assert workspace.top_blocks() == [high, right, low]


def test_delete_block_removes_everything_below(workspace):
    head = log_block(workspace)
    message = workspace.new_block(BlockType.TEXT)
    head.connect_value("MESSAGE", message)
    tail = log_block(workspace)
    head.connect_next(tail)
    workspace.delete_block(head)
    assert len(workspace) == 0


def test_delete_attached_block_unplugs_it(workspace):
    head, tail = log_block(workspace), log_block(workspace)
    head.connect_next(tail)
    workspace.delete_block(tail)
    assert head.next is None
    assert len(workspace) == 1


def test_chain_rows_and_extent(workspace):
    loop = workspace.new_block(BlockType.CONTROLS_FOR)
    first, second = log_block(workspace), log_block(workspace)
    first.connect_next(second)
    loop.connect_statement("DO", first)
    # header, two body rows, closing arm
    assert workspace.chain_rows(loop) == 4
    assert workspace.block_extent(loop) == 160
    loop.y = 50
    assert workspace.lowest_root_bottom() == 210


def test_empty_workspace_has_no_bottom(workspace):
    assert workspace.lowest_root_bottom() is None


def test_move_block_only_moves_roots(workspace):
    head, tail = log_block(workspace), log_block(workspace)
    head.connect_next(tail)
    workspace.move_block(head, 10, 20)
    assert (head.x, head.y) == (10, 20)
    with pytest.raises(GraphError, match="Only root blocks"):
        workspace.move_block(tail, 1, 1)


def test_label_shows_variable_names(workspace):
    block = workspace.new_block(BlockType.VARIABLES_SET)
    block.set_field("VAR", workspace.variable("speed").id)
    assert block.label() == "variables_set [VAR=speed]"
    block.enabled = False
    assert block.label().endswith("(disabled)")


def test_describe_flattens_the_workspace(workspace):
    head = workspace.new_block(BlockType.SET_DEGREES)
    degrees = workspace.new_block(BlockType.MATH_NUMBER)
    degrees.set_field("NUM", "30")
    head.connect_value("DEGREES", degrees)
    tail = workspace.new_block(BlockType.WAIT_MS)
    head.connect_next(tail)
    assert workspace.describe() == [
        (0, "set_degrees [MOTOR=17]", "b1"),
        (1, "DEGREES: math_number [NUM=30]", "b2"),
        (0, "wait_ms", "b3"),
    ]


def test_clear_keeps_id_counters(workspace):
    log_block(workspace)
    workspace.variable("x")
    workspace.clear()
    assert len(workspace) == 0
    assert workspace.variables() == []
    assert log_block(workspace).id == "b2"


@pytest.mark.parametrize(
    "value, text",
    [(2, "2"), (2.0, "2"), (1.5, "1.5"), (-3.0, "-3"), (0.001, "0.001")],
)
def test_format_number(value, text):
    assert format_number(value) == text
