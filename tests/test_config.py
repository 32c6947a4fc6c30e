import json
import os
import tempfile

import pytest

from translator_config import ConfigError, TranslatorConfig


def write_config(data) -> str:
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)
        return f.name


def test_defaults():
    config = TranslatorConfig()
    assert config.backend == "javascript"
    assert config.media_backend == "no_media"
    assert (config.layout_x, config.layout_start_y, config.layout_gap) == (50, 50, 30)
    assert config.block_height == 40
    assert config.log_level == "INFO"


def test_missing_file_keeps_defaults():
    config = TranslatorConfig("/nonexistent/translator.json")
    assert config.backend == "javascript"


def test_partial_file_overrides_only_given_keys():
    path = write_config({"backend": "python", "layout_gap": 12.5})
    try:
        config = TranslatorConfig(path)
        assert config.backend == "python"
        assert config.layout_gap == 12.5
        assert config.layout_x == 50
    finally:
        os.unlink(path)


@pytest.mark.parametrize(
    "data, fragment",
    [
        ({"layout_x": "left"}, "layout_x must be a number"),
        ({"block_height": True}, "block_height must be a number"),
        ({"media_backend": 3}, "media_backend must be a string"),
        ({"backend": "cobol"}, "unknown backend"),
        ([1, 2], "must hold a JSON object"),
        ("{not json", "Cannot read config file"),
    ],
)
def test_invalid_files(data, fragment):
    path = write_config(data)
    try:
        with pytest.raises(ConfigError, match=fragment):
            TranslatorConfig(path)
    finally:
        os.unlink(path)


def test_save_and_reload():
    config = TranslatorConfig()
    config.backend = "python"
    config.media_backend = "default"
    config.layout_step = 100
    fd, path = tempfile.mkstemp(suffix=".json")
    os.close(fd)
    try:
        config.save(path)
        reloaded = TranslatorConfig.from_file(path)
        assert reloaded.backend == "python"
        assert reloaded.media_backend == "default"
        assert reloaded.layout_step == 100
    finally:
        os.unlink(path)
