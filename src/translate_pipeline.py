from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import TranslatorComponents.Parser as parser
from TranslatorComponents.Generator import Backend, GenerationError, get_generation_reporter
from TranslatorComponents.Graph import Workspace
from TranslatorComponents.Lexer import LexingError, get_clean_lines_tokenizer, get_source_code_trimmer
from TranslatorComponents.ProgressReport import (
    CodeGenerationReport,
    ParsingReport,
    TokenizationReport,
    TranslationReport,
    TrimmingReport,
)
from TranslatorComponents.Translator import TranslationResult, get_translation_reporter
from translator_config import TranslatorConfig

logger = logging.getLogger(__name__)

BACKEND_EXTENSIONS = {Backend.JAVASCRIPT: ".js", Backend.PYTHON: ".py"}


class TranslationSession:
    """Shared translator pipeline state.

    A UI-agnostic orchestrator driven by both the Textual UI and the command
    line: source text goes through trimming, tokenization and parsing, the AST
    is translated into blocks of `workspace`, and the blocks are rendered by
    either backend. Each phase is a generator ticked one report at a time.
    """

    def __init__(self, config: TranslatorConfig | None = None) -> None:
        self.config = config or TranslatorConfig()
        self.reset_all()

    def reset_all(self) -> None:
        self.file_name: str = ""
        self.source_code: str = ""
        self.source_trimmed: str = ""

        self.cleaned_lines: list = []
        self.tokens: list = []

        self.ast_root = None
        self.workspace = Workspace(block_height=self.config.block_height)
        self.translation_result: TranslationResult | None = None
        self.output_code: dict[Backend, str] = {}

        self._trimming_generator = None
        self._tokenization_generator = None
        self._parsing_generator = None
        self._translation_generator = None
        self._generation_generator = None
        self._generation_backend: Backend | None = None

    # ----- Trimming -----

    def begin_trimming(self, source_code: str, file_name: str = "") -> None:
        logger.info("Trimming %s", file_name or "source")
        self.file_name = file_name
        self.source_code = source_code
        self.source_trimmed = ""
        self.cleaned_lines.clear()
        self._trimming_generator = get_source_code_trimmer(source_code)

    def tick_trimming(self) -> tuple[bool, TrimmingReport | None]:
        if self._trimming_generator is None:
            raise RuntimeError("Trimming generator not initialized.")
        try:
            report: TrimmingReport = next(self._trimming_generator)
            self.cleaned_lines.append(report.product)
            self.source_trimmed += str(report.product) + "\n"
            return False, report
        except StopIteration:
            return True, None

    # ----- Tokenization -----

    def begin_tokenization(self) -> None:
        logger.info("Tokenizing %d line(s)", len(self.cleaned_lines))
        self.tokens.clear()
        self._tokenization_generator = get_clean_lines_tokenizer(self.cleaned_lines)

    def tick_tokenization(self) -> tuple[bool, TokenizationReport | None]:
        if self._tokenization_generator is None:
            raise RuntimeError("Tokenization generator not initialized.")
        try:
            report: TokenizationReport = next(self._tokenization_generator)
            if report.new_token is not None:
                self.tokens.append(report.new_token)
            return False, report
        except StopIteration:
            return True, None

    # ----- Parsing -----

    def begin_parsing(self, filename: str = "ui") -> None:
        logger.info("Parsing %d token(s)", len(self.tokens))
        # The parser consumes its token list; the token table keeps the original.
        self._parsing_generator = parser.get_parsing_reporter(self.tokens.copy(), filename=filename)

    def tick_parsing(self) -> tuple[bool, ParsingReport | None]:
        if self._parsing_generator is None:
            raise RuntimeError("Parsing generator not initialized.")
        try:
            report: ParsingReport = next(self._parsing_generator)
            return False, report
        except StopIteration as done:
            self.ast_root = done.value
            return True, None

    # ----- Block translation -----

    def begin_translation(self) -> None:
        if self.ast_root is None:
            raise RuntimeError("No AST available for block translation.")
        logger.info("Translating %d statement(s) into blocks", len(self.ast_root.body))
        self.workspace.clear()
        self.translation_result = None
        self._translation_generator = get_translation_reporter(self.ast_root, self.workspace, self.config)

    def tick_translation(self) -> tuple[bool, TranslationReport | None]:
        if self._translation_generator is None:
            raise RuntimeError("Translation generator not initialized.")
        try:
            report: TranslationReport = next(self._translation_generator)
            return False, report
        except StopIteration as done:
            self.translation_result = done.value
            logger.info("Translation produced %d block(s)", len(self.workspace))
            return True, None

    # ----- Code generation -----

    def begin_code_generation(self, backend: Backend | str) -> None:
        backend = Backend(backend)
        logger.info("Generating %s from %d block(s)", backend, len(self.workspace))
        self.output_code[backend] = ""
        self._generation_backend = backend
        self._generation_generator = get_generation_reporter(self.workspace, backend, self.config)

    def tick_code_generation(self) -> tuple[bool, CodeGenerationReport | None]:
        if self._generation_generator is None:
            raise RuntimeError("Code generator not initialized.")
        try:
            report: CodeGenerationReport = next(self._generation_generator)
            if report.final_code is not None:
                self.output_code[self._generation_backend] = report.final_code
            return False, report
        except StopIteration:
            return True, None


def read_text_file(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def _run(tick) -> None:
    while True:
        done, _ = tick()
        if done:
            return


def run_to_blocks(session: TranslationSession, source: str, file_name: str = "") -> tuple[bool, str]:
    """Run trimming, tokenization, parsing and translation to completion.

    Returns: (ok, message)
    """
    session.begin_trimming(source, file_name=file_name)
    _run(session.tick_trimming)
    try:
        session.begin_tokenization()
        _run(session.tick_tokenization)
        session.begin_parsing(filename=file_name or "cli")
        _run(session.tick_parsing)
    except (LexingError, parser.ParsingError) as e:
        logger.info("Translation aborted: %s", e)
        return False, str(e)
    session.begin_translation()
    _run(session.tick_translation)
    result = session.translation_result
    return True, (
        f"Translated into {len(result.blocks)} stack(s) of {len(session.workspace)} block(s), "
        f"{result.dropped} construct(s) dropped."
    )


def write_output(
    session: TranslationSession,
    backend: Backend | str,
    program_name: str,
    output_root: str | Path | None = None,
) -> Path:
    """Write the code generated for `backend` to <root>/<program_name>/<program_name><ext>."""
    backend = Backend(backend)
    output_dir = Path(output_root or session.config.output_dir) / program_name
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{program_name}{BACKEND_EXTENSIONS[backend]}"
    output_path.write_text(session.output_code[backend], encoding="utf-8")
    logger.info("Wrote %s", output_path)
    return output_path


def translate_file_to_outputs(
    input_path: str | Path,
    backend: Backend | str = Backend.JAVASCRIPT,
    program_name: str | None = None,
    output_root: str | Path | None = None,
    config: TranslatorConfig | None = None,
) -> tuple[bool, Optional[Path], str]:
    """Translate a .js file into blocks and regenerate it with `backend`,
    using the same reporters as the UI.

    Returns: (ok, output_path, message)
    """

    input_path = Path(input_path)
    source = input_path.read_text(encoding="utf-8")
    backend = Backend(backend)
    if program_name is None:
        program_name = input_path.stem

    session = TranslationSession(config)
    ok, message = run_to_blocks(session, source, file_name=program_name)
    if not ok:
        return False, None, message

    try:
        session.begin_code_generation(backend)
        _run(session.tick_code_generation)
    except GenerationError as e:
        return False, None, str(e)

    output_path = write_output(session, backend, program_name, output_root)
    return True, output_path, f"{message} {backend} written to {output_path}."
