from __future__ import annotations

import shutil
import sys
from pathlib import Path

# Make `src/` importable (matches DirectTranslator / UI entrypoints).
_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC_DIR = _REPO_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from TranslatorComponents.Generator import Backend  # noqa: E402
from translate_pipeline import translate_file_to_outputs  # noqa: E402


def _collect_examples() -> list[Path]:
    return sorted((_REPO_ROOT / "examples").glob("*.js"))


def _clean_program_outputs(*, output_root: Path, program_name: str) -> None:
    """Remove outputs for just this program before translating."""

    # Never delete outside the configured output_root.
    output_root = output_root.resolve()
    program_output_dir = (output_root / program_name).resolve()
    if output_root not in program_output_dir.parents:
        raise RuntimeError(
            f"Refusing to delete outside output_root: {program_output_dir}"
        )

    if program_output_dir.exists():
        shutil.rmtree(program_output_dir)


def main(argv: list[str]) -> int:
    output_root = _REPO_ROOT / "outputs"

    files = _collect_examples()
    if not files:
        print("No files found under examples/*.js")
        return 2

    failures: list[tuple[Path, Backend, str]] = []
    runs = 0

    for path in files:
        program_name = path.stem
        _clean_program_outputs(output_root=output_root, program_name=program_name)

        for backend in Backend:
            runs += 1
            ok, out_path, message = translate_file_to_outputs(
                input_path=path,
                backend=backend,
                program_name=program_name,
                output_root=output_root,
            )
            rel_in = path.relative_to(_REPO_ROOT)
            if ok:
                rel_out = out_path.relative_to(_REPO_ROOT) if out_path else None
                print(f"OK   {rel_in} [{backend}] -> {rel_out}")
            else:
                print(f"FAIL {rel_in} [{backend}]: {message}")
                failures.append((path, backend, message))

    print(f"\nTOTAL {runs}  FAILED {len(failures)}")

    if failures:
        print("\nFailures:")
        for path, backend, msg in failures:
            print(f"- {path.relative_to(_REPO_ROOT)} [{backend}]: {msg}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
