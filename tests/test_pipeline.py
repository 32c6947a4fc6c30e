from pathlib import Path

import pytest

from TranslatorComponents.Generator import Backend, workspace_to_code
from translate_pipeline import (
    BACKEND_EXTENSIONS,
    TranslationSession,
    read_text_file,
    run_to_blocks,
    translate_file_to_outputs,
)
from translator_config import TranslatorConfig

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"

SCRIPT = "// wave\nawait Robot.setDegrees(17, 45);\nawait sleep(500);\nlogConsole('done');\n"


def test_session_runs_every_phase():
    session = TranslationSession()
    ok, message = run_to_blocks(session, SCRIPT, file_name="wave")
    assert ok, message
    assert [line.line_number for line in session.cleaned_lines] == [2, 3, 4]
    assert session.tokens[0].value == "await"
    assert len(session.ast_root.body) == 3
    assert len(session.translation_result.blocks) == 1
    assert "1 stack(s)" in message


def test_session_ticks_code_generation():
    session = TranslationSession()
    run_to_blocks(session, SCRIPT)
    session.begin_code_generation("javascript")
    reports = []
    while True:
        done, report = session.tick_code_generation()
        if done:
            break
        reports.append(report)
    assert reports[-1].final_code == session.output_code[Backend.JAVASCRIPT]
    assert session.output_code[Backend.JAVASCRIPT] == workspace_to_code(session.workspace)


def test_translation_replaces_previous_blocks():
    session = TranslationSession()
    run_to_blocks(session, SCRIPT)
    run_to_blocks(session, "alert('x');")
    assert len(session.workspace.top_blocks()) == 1


def test_lexing_error_stops_before_translation():
    session = TranslationSession()
    ok, message = run_to_blocks(session, "x = `nope`;")
    assert not ok
    assert "Template literals" in message
    assert session.translation_result is None


def test_parsing_error_is_returned():
    ok, message = run_to_blocks(TranslationSession(), "if (x {")
    assert not ok
    assert message.startswith("Line 1")


def test_ticking_before_begin_raises():
    session = TranslationSession()
    with pytest.raises(RuntimeError):
        session.tick_parsing()
    with pytest.raises(RuntimeError):
        session.begin_translation()


def test_session_uses_configured_layout():
    config = TranslatorConfig()
    config.layout_x = 10
    config.layout_start_y = 5
    session = TranslationSession(config)
    run_to_blocks(session, SCRIPT)
    root = session.translation_result.blocks[0]
    assert (root.x, root.y) == (10, 5)


@pytest.mark.parametrize("backend", list(Backend))
def test_translate_file_to_outputs(tmp_path, backend):
    source = tmp_path / "wave.js"
    source.write_text(SCRIPT, encoding="utf-8")
    ok, output_path, message = translate_file_to_outputs(source, backend, output_root=tmp_path / "out")
    assert ok, message
    assert output_path == tmp_path / "out" / "wave" / f"wave{BACKEND_EXTENSIONS[backend]}"
    session = TranslationSession()
    run_to_blocks(session, SCRIPT)
    assert read_text_file(output_path) == workspace_to_code(session.workspace, backend, session.config)


def test_translate_file_with_syntax_error(tmp_path):
    source = tmp_path / "broken.js"
    source.write_text("var = ;", encoding="utf-8")
    ok, output_path, message = translate_file_to_outputs(source, output_root=tmp_path)
    assert not ok
    assert output_path is None
    assert not (tmp_path / "broken").exists()


@pytest.mark.parametrize("example", sorted(EXAMPLES_DIR.glob("*.js")), ids=lambda path: path.name)
def test_bundled_examples_translate(tmp_path, example):
    for backend in Backend:
        ok, _, message = translate_file_to_outputs(example, backend, output_root=tmp_path)
        assert ok, message
