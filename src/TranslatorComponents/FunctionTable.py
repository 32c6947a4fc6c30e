"""Robot API call forms and the blocks they map to.

Each `FunctionEntry` ties one call form to one block type. The translator
reads entries to turn calls into blocks, and the JavaScript generator
renders each block back through the same entry, so adding a mapping is a
single new row in `FUNCTION_TABLE`.
"""

from dataclasses import dataclass
from enum import Enum

from TranslatorComponents.Graph import BLOCK_SPECS, BlockType

FUNCTION_TABLE_VERSION = 1


class ArgKind(Enum):
    FIELD = "field"  # literal-only argument stored in a block field
    VALUE = "value"  # any expression, plugged into a value input


class Shape(Enum):
    STATEMENT = "statement"
    VALUE = "value"


@dataclass(frozen=True)
class ArgSpec:
    """One positional argument of a call.

    Attributes:
        index (int): Position in the call's argument list.
        name (str): Field or input name on the block.
        kind (ArgKind): FIELD or VALUE.
        scale (int | None): The call takes `value * scale` (seconds to milliseconds).
    """

    index: int
    name: str
    kind: ArgKind = ArgKind.VALUE
    scale: int | None = None


@dataclass(frozen=True)
class Selector:
    """Literal argument that discriminates between block types of one callee."""

    index: int
    value: bool
    code: str  # canonical JavaScript text of the literal


@dataclass(frozen=True)
class FunctionEntry:
    callee: str
    block_type: BlockType
    shape: Shape
    arity: int = 0
    args: tuple[ArgSpec, ...] = ()
    aliases: tuple[str, ...] = ()
    selector: Selector | None = None
    constants: tuple[tuple[int, str], ...] = ()  # fixed argument text, by position
    awaited: bool = True

    @property
    def callees(self) -> tuple[str, ...]:
        return (self.callee,) + self.aliases

    def arg(self, name: str) -> ArgSpec:
        for spec in self.args:
            if spec.name == name:
                return spec
        raise KeyError(name)


def _motor(index: int = 0) -> ArgSpec:
    return ArgSpec(index, "MOTOR", ArgKind.FIELD)


_ALL_MOTOR_IDS = "[11, 12, 13, 14, 15, 16, 17, 18]"

FUNCTION_TABLE: tuple[FunctionEntry, ...] = (
    # Connection
    FunctionEntry(
        "Robot.setTorque", BlockType.ENABLE_TORQUE, Shape.STATEMENT, 2,
        (_motor(),), selector=Selector(1, True, "true"),
    ),
    FunctionEntry(
        "Robot.setTorque", BlockType.DISABLE_TORQUE, Shape.STATEMENT, 2,
        (_motor(),), selector=Selector(1, False, "false"),
    ),
    FunctionEntry(
        "Robot.setTorqueMultiple", BlockType.ENABLE_ALL, Shape.STATEMENT, 2,
        selector=Selector(1, True, "true"), constants=((0, _ALL_MOTOR_IDS),),
    ),
    FunctionEntry(
        "Robot.setTorqueMultiple", BlockType.DISABLE_ALL, Shape.STATEMENT, 2,
        selector=Selector(1, False, "false"), constants=((0, _ALL_MOTOR_IDS),),
    ),
    FunctionEntry("Robot.checkAllMotors", BlockType.CHECK_JOINTS, Shape.STATEMENT),
    FunctionEntry(
        "Robot.ping", BlockType.PING_JOINT, Shape.VALUE, 1, (_motor(),),
        aliases=("Robot.pingMotor",),
    ),
    FunctionEntry(
        "Robot.reboot", BlockType.REBOOT_JOINT, Shape.STATEMENT, 1, (_motor(),),
        aliases=("Robot.rebootMotor",),
    ),
    FunctionEntry(
        "Robot.rebootAll", BlockType.REBOOT_ALL, Shape.STATEMENT,
        aliases=("Robot.rebootAllMotors",),
    ),
    # Joints
    FunctionEntry(
        "Robot.setPositionLimited", BlockType.SET_JOINT, Shape.STATEMENT, 2,
        (_motor(), ArgSpec(1, "JOINT")),
    ),
    FunctionEntry("Robot.getPosition", BlockType.GET_JOINT, Shape.VALUE, 1, (_motor(),)),
    FunctionEntry(
        "Robot.setDegrees", BlockType.SET_DEGREES, Shape.STATEMENT, 2,
        (_motor(), ArgSpec(1, "DEGREES")),
    ),
    FunctionEntry("Robot.getDegrees", BlockType.GET_DEGREES, Shape.VALUE, 1, (_motor(),)),
    FunctionEntry(
        "Robot.moveBy", BlockType.MOVE_BY, Shape.STATEMENT, 2,
        (_motor(), ArgSpec(1, "AMOUNT")),
    ),
    FunctionEntry(
        "Robot.moveSmooth", BlockType.MOVE_SMOOTH, Shape.STATEMENT, 3,
        (_motor(), ArgSpec(1, "JOINT"), ArgSpec(2, "DURATION", scale=1000)),
    ),
    # Kinematics
    FunctionEntry("Robot.getHeadCoordinates", BlockType.GET_HEAD_COORDINATES, Shape.VALUE),
    FunctionEntry(
        "Robot.setHeadCoordinates", BlockType.SET_HEAD_COORDINATES, Shape.STATEMENT, 1,
        (ArgSpec(0, "COORDS"),), aliases=("Robot.setAllPositions",),
    ),
    FunctionEntry(
        "Robot.jointsToCoordinates", BlockType.JOINTS_TO_COORDINATES, Shape.VALUE, 1,
        (ArgSpec(0, "JOINTS"),), awaited=False,
    ),
    FunctionEntry(
        "Robot.coordinatesToJoints", BlockType.COORDINATES_TO_JOINTS, Shape.VALUE, 1,
        (ArgSpec(0, "COORDINATES"),), awaited=False,
    ),
    FunctionEntry(
        "getCoordinate", BlockType.GET_COORDINATE, Shape.VALUE, 2,
        (ArgSpec(0, "COORDINATES"), ArgSpec(1, "COMPONENT", ArgKind.FIELD)), awaited=False,
    ),
    # Sensing
    FunctionEntry("Robot.isMoving", BlockType.IS_MOVING, Shape.VALUE, 1, (_motor(),)),
    FunctionEntry(
        "Robot.waitUntilStopped", BlockType.WAIT_UNTIL_STOPPED, Shape.STATEMENT, 2,
        (_motor(), ArgSpec(1, "TIMEOUT")),
    ),
    FunctionEntry("Robot.getLoad", BlockType.GET_LOAD, Shape.VALUE, 1, (_motor(),)),
    FunctionEntry("Robot.getTemperature", BlockType.GET_TEMPERATURE, Shape.VALUE, 1, (_motor(),)),
    FunctionEntry(
        "Robot.jointInRange", BlockType.JOINT_IN_RANGE, Shape.VALUE, 3,
        (_motor(), ArgSpec(1, "MIN"), ArgSpec(2, "MAX")),
    ),
    # Timing
    FunctionEntry("sleep", BlockType.WAIT_MS, Shape.STATEMENT, 1, (ArgSpec(0, "TIME"),)),
    FunctionEntry("wait", BlockType.WAIT, Shape.STATEMENT, 1, (ArgSpec(0, "TIME"),)),
    FunctionEntry("resetTimer", BlockType.RESET_TIMER, Shape.STATEMENT, awaited=False),
    FunctionEntry("timerValue", BlockType.TIMER_VALUE, Shape.VALUE, awaited=False),
    # Output
    FunctionEntry(
        "logConsole", BlockType.LOG, Shape.STATEMENT, 1, (ArgSpec(0, "MESSAGE"),), awaited=False,
    ),
    FunctionEntry(
        "logConsole", BlockType.LOG_TYPE, Shape.STATEMENT, 2,
        (ArgSpec(0, "MESSAGE"), ArgSpec(1, "TYPE", ArgKind.FIELD)), awaited=False,
    ),
    FunctionEntry("logJoint", BlockType.LOG_JOINT, Shape.STATEMENT, 1, (_motor(),), awaited=False),
    FunctionEntry("alert", BlockType.ALERT, Shape.STATEMENT, 1, (ArgSpec(0, "MESSAGE"),), awaited=False),
)


def _build_indexes():
    by_callee: dict[str, list[FunctionEntry]] = {}
    by_block: dict[BlockType, FunctionEntry] = {}
    for entry in FUNCTION_TABLE:
        if entry.block_type in by_block:
            raise ValueError(f"Block type {entry.block_type} is mapped twice.")
        spec = BLOCK_SPECS[entry.block_type]
        if (entry.shape == Shape.VALUE) != spec.output:
            raise ValueError(f"{entry.callee}: shape does not match block {entry.block_type}.")
        for arg in entry.args:
            known = spec.fields if arg.kind == ArgKind.FIELD else dict(spec.inputs)
            if arg.name not in known:
                raise ValueError(f"{entry.callee}: block {entry.block_type} has no {arg.name}.")
        by_block[entry.block_type] = entry
        for callee in entry.callees:
            by_callee.setdefault(callee, []).append(entry)
    # Prefer the longest matching form (logConsole with a type before plain logConsole).
    for entries in by_callee.values():
        entries.sort(key=lambda e: e.arity, reverse=True)
    return by_callee, by_block


_ENTRIES_BY_CALLEE, _ENTRY_BY_BLOCK = _build_indexes()


def entries_for_callee(callee: str) -> list[FunctionEntry]:
    return list(_ENTRIES_BY_CALLEE.get(callee, ()))


def entry_for_call(
    callee: str, argument_count: int, literals: dict[int, object] | None = None
) -> FunctionEntry | None:
    """Pick the entry for a call.

    Args:
        callee (str): Dotted callee name as written (`Robot.getPosition`).
        argument_count (int): Number of arguments in the call.
        literals (dict[int, object]): Literal argument values by position;
            non-literal arguments are absent.

    Returns:
        FunctionEntry | None: The first entry whose arity and selector match.
    """
    literals = literals or {}
    for entry in _ENTRIES_BY_CALLEE.get(callee, ()):
        if argument_count < entry.arity:
            continue
        if entry.selector is not None:
            index = entry.selector.index
            if index not in literals or literals[index] is not entry.selector.value:
                continue
        return entry
    return None


def entry_for_block(block_type: BlockType) -> FunctionEntry | None:
    return _ENTRY_BY_BLOCK.get(block_type)


def table_block_types() -> set[BlockType]:
    return set(_ENTRY_BY_BLOCK)
