import json

import pytest

import DirectTranslator


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "translator.json"
    path.write_text(json.dumps({"backend": "python", "log_level": "WARNING"}), encoding="utf-8")
    return path


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "antenna.js"
    path.write_text("await Robot.setDegrees(17, 45);\n", encoding="utf-8")
    return path


def run(*args):
    return DirectTranslator.main(["DirectTranslator.py", *map(str, args)])


def test_to_blocks_prints_the_block_tree(config_file, script, capsys):
    assert run("--config", config_file, "to-blocks", script) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["b1: set_degrees [MOTOR=17]", "  b2: DEGREES: math_number [NUM=45]"]


def test_to_code_uses_the_configured_backend(config_file, script, tmp_path, capsys):
    assert run("--config", config_file, "to-code", script, "--out", tmp_path / "out") == 0
    output = tmp_path / "out" / "antenna" / "antenna.py"
    assert output.exists()
    assert "np.deg2rad(45)" in output.read_text(encoding="utf-8")
    assert str(output) in capsys.readouterr().out


def test_to_code_backend_option_wins(config_file, script, tmp_path):
    assert run("--config", config_file, "to-code", script, "--backend", "javascript", "--out", tmp_path) == 0
    assert (tmp_path / "antenna" / "antenna.js").read_text(encoding="utf-8") == (
        "await Robot.setDegrees(17, 45);\n"
    )


def test_round_trip_prints_javascript(config_file, script, capsys):
    assert run("--config", config_file, "round-trip", script) == 0
    assert capsys.readouterr().out == "await Robot.setDegrees(17, 45);\n"


def test_translation_failure(config_file, tmp_path, capsys):
    broken = tmp_path / "broken.js"
    broken.write_text("var = ;", encoding="utf-8")
    assert run("--config", config_file, "to-blocks", broken) == 1
    assert capsys.readouterr().out.startswith("Translation failed.")


def test_missing_input_file(config_file, tmp_path):
    assert run("--config", config_file, "to-blocks", tmp_path / "absent.js") == 2


def test_missing_config_file(script, tmp_path):
    assert run("--config", tmp_path / "absent.json", "to-blocks", script) == 2


def test_invalid_config_file(script, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"backend": "cobol"}), encoding="utf-8")
    assert run("--config", bad, "to-blocks", script) == 2
