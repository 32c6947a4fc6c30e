import json
import os
from typing import Optional

DEFAULT_CONFIG_FILE = "translator.json"


class ConfigError(Exception):
    """Raised for an unreadable config file or a setting of the wrong type."""
    pass


class TranslatorConfig:
    """Settings shared by the command line, the pipeline and the interface."""

    def __init__(self, config_file: Optional[str] = None):
        self.backend: str = "javascript"
        self.media_backend: str = "no_media"
        # Placement of translated stacks on the workspace
        self.layout_x: float = 50
        self.layout_start_y: float = 50
        self.layout_gap: float = 30
        self.layout_step: float = 80
        self.block_height: float = 40
        self.log_level: str = "INFO"
        self.output_dir: str = "outputs"

        if config_file and os.path.exists(config_file):
            self._load_from_file(config_file)

    @classmethod
    def from_file(cls, file_path: Optional[str] = None) -> "TranslatorConfig":
        """Load `file_path`, or the default file when it exists."""
        return cls(file_path or DEFAULT_CONFIG_FILE)

    def _settings(self) -> dict:
        return {
            "backend": self.backend,
            "media_backend": self.media_backend,
            "layout_x": self.layout_x,
            "layout_start_y": self.layout_start_y,
            "layout_gap": self.layout_gap,
            "layout_step": self.layout_step,
            "block_height": self.block_height,
            "log_level": self.log_level,
            "output_dir": self.output_dir,
        }

    def _load_from_file(self, file_path: str) -> None:
        try:
            with open(file_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config file {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {file_path} must hold a JSON object.")

        for key, default in self._settings().items():
            value = data.get(key, default)
            if isinstance(default, (int, float)):
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(f"{file_path}: {key} must be a number, got {value!r}.")
            elif not isinstance(value, str):
                raise ConfigError(f"{file_path}: {key} must be a string, got {value!r}.")
            setattr(self, key, value)

        if self.backend not in ("javascript", "python"):
            raise ConfigError(f"{file_path}: unknown backend {self.backend!r}.")

    def save(self, file_path: str) -> None:
        with open(file_path, "w") as f:
            json.dump(self._settings(), f, indent=2)
