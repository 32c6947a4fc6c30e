"""Language-independent code generation over a block graph.

A backend is a `CodeGenerator` subclass with one rule per `BlockType`.
Statement rules return a code string; value rules return `(code, order)`,
where `order` is the precedence of the outermost operator in `code`. The
engine functions below thread an explicit `GeneratorContext` through every
rule, so generation keeps no module-level state between calls.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Generator
from enum import StrEnum

from TranslatorComponents.Graph import Block, BlockType, Workspace
from TranslatorComponents.ProgressReport import CodeGenerationReport

logger = logging.getLogger(__name__)

ORDER_ATOMIC = 0
ORDER_NONE = 99

Rule = Callable[["GeneratorContext", Block], "str | tuple[str, float]"]


class GenerationError(Exception):
    """Raised when a block has no rule or a rule returns the wrong shape."""

    pass


class Backend(StrEnum):
    JAVASCRIPT = "javascript"
    PYTHON = "python"


class NameTable:
    """Maps source variable names to safe target names.

    The mapping is 1:1 and stable for the lifetime of the table: reserved
    words and collisions get a numeric suffix the first time they are seen.
    """

    def __init__(self, reserved_words: set[str]):
        self.reserved_words = set(reserved_words)
        self._names: dict[str, str] = {}
        self._taken: set[str] = set()

    @staticmethod
    def _safe(name: str) -> str:
        safe = re.sub(r"[^A-Za-z0-9_]", "_", name) or "unnamed"
        if safe[0].isdigit():
            safe = "my_" + safe
        return safe

    def _claim(self, base: str) -> str:
        candidate = base
        n = 2
        while candidate in self.reserved_words or candidate in self._taken:
            candidate = f"{base}{n}"
            n += 1
        self._taken.add(candidate)
        return candidate

    def get_name(self, name: str) -> str:
        if name not in self._names:
            self._names[name] = self._claim(self._safe(name))
        return self._names[name]

    def distinct_name(self, base: str) -> str:
        """A fresh name that no variable uses (loop counters)."""
        return self._claim(self._safe(base))


class GeneratorContext:
    """State of one `workspace_to_code` call.

    Attributes:
        generator (CodeGenerator): Backend whose rules are applied.
        workspace (Workspace): Workspace being rendered.
        definitions (dict[str, str]): Deferred definitions (declarations,
            imports) keyed by a stable id, in insertion order.
        names (NameTable): Variable name aliases for this call.
    """

    def __init__(self, generator: CodeGenerator, workspace: Workspace):
        self.generator = generator
        self.workspace = workspace
        self.definitions: dict[str, str] = {}
        self.names = NameTable(generator.reserved_words)

    def provide(self, key: str, line: str) -> None:
        """Register a deferred definition; repeated keys are ignored."""
        self.definitions.setdefault(key, line)

    def variable_name(self, name: str) -> str:
        return self.names.get_name(name)

    def block_variable(self, block: Block) -> str:
        """Target name of the variable in a block's VAR field."""
        return self.variable_name(block.variable.name)

    @property
    def indent(self) -> str:
        return self.generator.indent


class CodeGenerator:
    """Base class of the backends.

    Attributes:
        name (str): Backend name.
        indent (str): One indentation unit.
        placeholder (str): Program text for an empty workspace.
        reserved_words (set[str]): Names variables may not take.
        rules (dict[BlockType, Rule]): One rule per block type.
    """

    name = ""
    indent = "  "
    placeholder = ""
    reserved_words: set[str] = set()

    def __init__(self, config=None):
        self.config = config
        self.rules: dict[BlockType, Rule] = self.build_rules()
        missing = [block_type.value for block_type in BlockType if block_type not in self.rules]
        if missing:
            raise GenerationError(f"{self.name} generator has no rule for: {', '.join(missing)}")

    def build_rules(self) -> dict[BlockType, Rule]:
        raise NotImplementedError("Subclasses must implement build_rules method")

    def init(self, ctx: GeneratorContext) -> None:
        """Hook run before any block is rendered."""
        pass

    def finish(self, ctx: GeneratorContext, code: str) -> str:
        """Prepend deferred definitions to the program body."""
        definitions = "\n\n".join(ctx.definitions.values())
        if not definitions:
            return code
        definitions = re.sub(r"\n\n+", "\n\n", definitions)
        return definitions.rstrip("\n") + "\n\n\n" + code

    def scrub_naked_value(self, line: str) -> str:
        """Render a value block that sits on its own as a top-level stack."""
        return line + "\n"


def prefix_lines(text: str, prefix: str) -> str:
    """Prefix every non-empty line of `text`."""
    return prefix + re.sub(r"\n(.)", lambda match: "\n" + prefix + match.group(1), text)


NAMED_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def quote_string(text: str, quote_char: str) -> str:
    """Literal for `text` delimited by `quote_char`, valid in both JavaScript and Python.

    Other control characters become \\xHH escapes.
    """
    parts = []
    for char in text:
        if char in NAMED_ESCAPES:
            parts.append(NAMED_ESCAPES[char])
        elif char == quote_char:
            parts.append("\\" + char)
        elif ord(char) < 0x20 or char == "\x7f":
            parts.append(f"\\x{ord(char):02x}")
        else:
            parts.append(char)
    return quote_char + "".join(parts) + quote_char


def block_to_code(ctx: GeneratorContext, block: Block | None, this_only: bool = False):
    """Render one block, followed by its `next` chain unless `this_only`.

    Returns:
        str | tuple[str, float]: Statement code, or (code, order) for value blocks.

    Raises:
        GenerationError: when the block type has no rule or the rule result is malformed.
    """
    if block is None:
        return ""
    if not block.enabled:
        return "" if this_only else block_to_code(ctx, block.next)

    rule = ctx.generator.rules.get(block.type)
    if rule is None:
        logger.error("%s generator: no rule for block %s (%s)", ctx.generator.name, block.id, block.type)
        raise GenerationError(
            f'Language "{ctx.generator.name}" does not know how to generate code for block type "{block.type}".'
        )
    code = rule(ctx, block)
    if isinstance(code, tuple):
        return code
    if isinstance(code, str):
        if this_only:
            return code
        return code + block_to_code(ctx, block.next)
    logger.error("%s generator: rule for %s returned %r", ctx.generator.name, block.type, code)
    raise GenerationError(f"Invalid code generated for block {block.id} ({block.type}): {code!r}")


def value_to_code(ctx: GeneratorContext, block: Block, name: str, outer_order: float) -> str:
    """Render the value plugged into input `name`, parenthesized as `outer_order` requires.

    Returns an empty string for an empty input; callers substitute their default.
    """
    target = block.get_input_target(name)
    if target is None:
        return ""
    result = block_to_code(ctx, target)
    if result == "":
        return ""
    if not isinstance(result, tuple):
        raise GenerationError(f"Expecting a value from block {target.id} ({target.type}).")
    code, inner_order = result
    if not code:
        return ""
    parentheses_needed = False
    if outer_order <= inner_order:
        boundary = outer_order == inner_order and outer_order in (ORDER_ATOMIC, ORDER_NONE)
        parentheses_needed = not boundary
    return f"({code})" if parentheses_needed else code


def statement_to_code(ctx: GeneratorContext, block: Block, name: str) -> str:
    """Render the chain attached to statement input `name`, indented one level."""
    target = block.get_input_target(name)
    code = block_to_code(ctx, target)
    if not isinstance(code, str):
        raise GenerationError(f"Expecting statements from block {target.id} ({target.type}).")
    return prefix_lines(code, ctx.indent) if code else ""


def normalize(code: str) -> str:
    """Drop leading blank lines and trailing spaces; end with exactly one newline."""
    code = re.sub(r"^\s+\n", "", code)
    code = re.sub(r"[ \t]+\n", "\n", code)
    return code.rstrip() + "\n"


def get_generator(backend: Backend | str, config=None) -> CodeGenerator:
    """Instantiate the generator for `backend`.

    Raises:
        GenerationError: for an unknown backend name.
    """
    # Imported here: the backends import the engine functions from this module.
    from TranslatorComponents.JavaScriptGenerator import JavaScriptGenerator
    from TranslatorComponents.PythonGenerator import PythonGenerator

    try:
        backend = Backend(backend)
    except ValueError:
        raise GenerationError(f"Unknown backend: {backend}") from None
    match backend:
        case Backend.JAVASCRIPT:
            return JavaScriptGenerator(config)
        case Backend.PYTHON:
            return PythonGenerator(config)


def _top_level_code(ctx: GeneratorContext, block: Block) -> str:
    code = block_to_code(ctx, block)
    if isinstance(code, tuple):
        code = ctx.generator.scrub_naked_value(code[0]) if code[0] else ""
    return code


def get_generation_reporter(
    workspace: Workspace, backend: Backend | str, config=None
) -> Generator[CodeGenerationReport, None, str]:
    """Render `workspace`, one report per top-level stack and a final one with the program.

    Returns:
        str: The finished program (available as `StopIteration.value`).
    """
    generator = get_generator(backend, config)
    ctx = GeneratorContext(generator, workspace)
    generator.init(ctx)

    parts = []
    for block in workspace.top_blocks(ordered=True):
        code = _top_level_code(ctx, block)
        if code:
            parts.append(code)
        report = CodeGenerationReport()
        report.backend = generator.name
        report.looked_at_block_id = block.id
        report.new_code = code
        report.action_bar_message = f"Generated {generator.name} for stack {block.id} ({block.type})."
        yield report

    body = "\n".join(parts)
    if not body.strip():
        program = generator.placeholder + "\n"
    else:
        program = normalize(generator.finish(ctx, body))

    report = CodeGenerationReport()
    report.backend = generator.name
    report.final_code = program
    report.action_bar_message = f"{generator.name} generation completed."
    yield report
    return program


def workspace_to_code(workspace: Workspace, backend: Backend | str = Backend.JAVASCRIPT, config=None) -> str:
    """Render every top-level stack of `workspace` in document order."""
    reporter = get_generation_reporter(workspace, backend, config)
    while True:
        try:
            next(reporter)
        except StopIteration as done:
            return done.value
