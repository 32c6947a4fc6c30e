import pytest

from TranslatorComponents.FunctionTable import (
    FUNCTION_TABLE,
    ArgKind,
    Shape,
    entries_for_callee,
    entry_for_block,
    entry_for_call,
    table_block_types,
)
from TranslatorComponents.Graph import BLOCK_SPECS, BlockType


def test_every_entry_matches_its_block_shape():
    for entry in FUNCTION_TABLE:
        spec = BLOCK_SPECS[entry.block_type]
        assert (entry.shape == Shape.VALUE) == spec.output, entry.callee
        assert (entry.shape == Shape.STATEMENT) == spec.statement, entry.callee


def test_one_entry_per_block_type():
    assert len(table_block_types()) == len(FUNCTION_TABLE)
    assert entry_for_block(BlockType.CONTROLS_IF) is None


def test_longer_form_is_preferred():
    assert entry_for_call("logConsole", 2).block_type == BlockType.LOG_TYPE
    assert entry_for_call("logConsole", 1).block_type == BlockType.LOG


def test_too_few_arguments():
    assert entry_for_call("Robot.setDegrees", 1) is None


def test_extra_arguments_are_ignored():
    assert entry_for_call("Robot.getPosition", 2).block_type == BlockType.GET_JOINT


@pytest.mark.parametrize(
    "callee, literal, expected",
    [
        ("Robot.setTorque", True, BlockType.ENABLE_TORQUE),
        ("Robot.setTorque", False, BlockType.DISABLE_TORQUE),
        ("Robot.setTorqueMultiple", True, BlockType.ENABLE_ALL),
        ("Robot.setTorqueMultiple", False, BlockType.DISABLE_ALL),
    ],
)
def test_selectors(callee, literal, expected):
    assert entry_for_call(callee, 2, {1: literal}).block_type == expected


@pytest.mark.parametrize("literal", [1, 0, "true", None])
def test_selector_needs_a_boolean_literal(literal):
    assert entry_for_call("Robot.setTorque", 2, {1: literal}) is None


def test_selector_argument_missing():
    assert entry_for_call("Robot.setTorque", 2, {}) is None


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("Robot.pingMotor", BlockType.PING_JOINT),
        ("Robot.rebootMotor", BlockType.REBOOT_JOINT),
        ("Robot.rebootAllMotors", BlockType.REBOOT_ALL),
        ("Robot.setAllPositions", BlockType.SET_HEAD_COORDINATES),
    ],
)
def test_aliases(alias, expected):
    entry = entry_for_call(alias, 1)
    assert entry.block_type == expected
    assert alias in entry.callees
    assert entry.callee != alias


def test_unknown_callee():
    assert entry_for_call("Robot.fly", 0) is None
    assert entries_for_callee("Robot.fly") == []


def test_move_smooth_duration_is_scaled():
    entry = entry_for_block(BlockType.MOVE_SMOOTH)
    assert entry.arg("DURATION").scale == 1000
    assert entry.arg("MOTOR").kind == ArgKind.FIELD
    with pytest.raises(KeyError):
        entry.arg("SPEED")


def test_plain_helpers_are_not_awaited():
    assert not entry_for_block(BlockType.LOG).awaited
    assert not entry_for_block(BlockType.GET_COORDINATE).awaited
    assert entry_for_block(BlockType.WAIT_MS).awaited
