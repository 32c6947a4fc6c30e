import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from TranslatorComponents.Graph import Workspace  # noqa: E402
from TranslatorComponents.Translator import code_to_blocks  # noqa: E402


@pytest.fixture
def workspace():
    return Workspace()


@pytest.fixture
def translate(workspace):
    """Translate source into the shared workspace and return the result."""

    def run(source: str):
        return code_to_blocks(workspace, source)

    return run
