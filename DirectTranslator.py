from pathlib import Path
import argparse
import logging
import sys

_SRC_DIR = Path(__file__).resolve().parent / "src"
if _SRC_DIR.exists():
    src_str = str(_SRC_DIR)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from TranslatorComponents.AST import print_ast
from TranslatorComponents.Generator import Backend, GenerationError, workspace_to_code

from translate_pipeline import TranslationSession, run_to_blocks, translate_file_to_outputs
from translator_config import ConfigError, TranslatorConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate robot scripts into blocks and blocks back into code."
    )
    parser.add_argument("--config", help="JSON settings file (default: translator.json if present)")
    parser.add_argument("--verbose", action="store_true", help="log at DEBUG level")
    commands = parser.add_subparsers(dest="command", required=True)

    to_blocks = commands.add_parser("to-blocks", help="translate a script and print the block tree")
    to_blocks.add_argument("file", type=Path)
    to_blocks.add_argument("--dump", action="store_true", help="print the AST as well")

    to_code = commands.add_parser("to-code", help="translate a script and regenerate it")
    to_code.add_argument("file", type=Path)
    to_code.add_argument("--backend", choices=[backend.value for backend in Backend])
    to_code.add_argument("--out", type=Path, help="output root directory")

    round_trip = commands.add_parser("round-trip", help="print the script regenerated as JavaScript")
    round_trip.add_argument("file", type=Path)
    return parser


def _load_session(path: Path, config: TranslatorConfig) -> TranslationSession | None:
    session = TranslationSession(config)
    ok, message = run_to_blocks(session, path.read_text(encoding="utf-8"), file_name=path.stem)
    if not ok:
        print(f"Translation failed. {message}")
        return None
    logger.info(message)
    return session


def to_blocks(path: Path, config: TranslatorConfig, dump: bool = False) -> int:
    session = _load_session(path, config)
    if session is None:
        return 1
    if dump:
        print_ast(session.ast_root)
        print()
    for depth, label, block_id in session.workspace.describe():
        print(f"{'  ' * depth}{block_id}: {label}")
    return 0


def to_code(path: Path, config: TranslatorConfig, backend: str | None, output_root: Path | None) -> int:
    ok, out_path, message = translate_file_to_outputs(
        input_path=path,
        backend=backend or config.backend,
        program_name=path.stem,
        output_root=output_root,
        config=config,
    )
    if not ok:
        print(f"Translation failed. {message}")
        return 1
    print(message)
    return 0


def round_trip(path: Path, config: TranslatorConfig) -> int:
    session = _load_session(path, config)
    if session is None:
        return 1
    try:
        print(workspace_to_code(session.workspace, Backend.JAVASCRIPT, config), end="")
    except GenerationError as e:
        print(f"Generation failed. {e}")
        return 1
    return 0


def main(argv: list[str]) -> int:
    args = _build_parser().parse_args(argv[1:])
    try:
        config = TranslatorConfig.from_file(args.config)
    except ConfigError as e:
        print(f"Configuration error. {e}")
        return 2
    if args.config and not Path(args.config).exists():
        print(f"Configuration error. {args.config} does not exist.")
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file.exists():
        print(f"No such file: {args.file}")
        return 2

    match args.command:
        case "to-blocks":
            return to_blocks(args.file, config, dump=args.dump)
        case "to-code":
            return to_code(args.file, config, args.backend, args.out)
        case "round-trip":
            return round_trip(args.file, config)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
