from InterfaceComponents.TranslatorPhase import PHASES
from RobotBlocksTranslator import RobotBlocksTranslator
from TranslatorComponents.Generator import Backend


def test_every_phase_has_hooks():
    for phase in PHASES[1:]:
        assert hasattr(RobotBlocksTranslator, f"enter_{phase.key}"), phase.name
    ticking = [phase for phase in PHASES if hasattr(RobotBlocksTranslator, f"tick_{phase.key}")]
    assert [phase.key for phase in ticking] == [
        "trimming", "tokenization", "parsing", "translation", "generation", "generation",
    ]


def test_generation_phases_cover_every_backend():
    backends = {phase.backend for phase in PHASES if phase.key == "generation"}
    assert backends == {backend.value for backend in Backend}


def test_step_numbers_are_unique():
    numbers = [phase.step_number for phase in PHASES]
    assert len(numbers) == len(set(numbers))
