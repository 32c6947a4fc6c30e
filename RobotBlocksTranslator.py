from pathlib import Path
import logging
import re
import sys

_SRC_DIR = Path(__file__).resolve().parent / "src"
if _SRC_DIR.exists():
    src_str = str(_SRC_DIR)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Label, Static, TextArea, Tree

from TranslatorComponents.Generator import Backend, GenerationError
from TranslatorComponents.Lexer import LexingError
from TranslatorComponents.Parser import ParsingError
from TranslatorComponents.ProgressReport import ProgressReport

from InterfaceComponents.DynamicPanel import DynamicPanel, DynamicPanelContentType
from InterfaceComponents.FileBrowserController import FileBrowserController
from InterfaceComponents.TranslatorPhase import PHASES, Phase

from translate_pipeline import TranslationSession, write_output
from translator_config import TranslatorConfig

logger = logging.getLogger(__name__)

PHASE_ERRORS = (LexingError, ParsingError, GenerationError)
SCRIPT_NAME = re.compile(r"[\w.-]+")
EXAMPLE_SCRIPT = Path("examples") / "wave_antennas.js"


class RobotBlocksTranslator(App):
    """Walks a robot script through every translation phase, one report per tick."""

    CSS_PATH = "src/InterfaceComponents/styles.tcss"
    TITLE = "Reachy Mini Blocks Translator"

    BINDINGS = [
        Binding("ctrl+o", "browse_scripts", "Open Script"),
        Binding("ctrl+e", "load_example", "Example"),
        Binding("ctrl+t", "translate", "Translate"),
        Binding("ctrl+r", "toggle_autoplay", "Play/Pause"),
        Binding("t", "single_tick", "Tick"),
        Binding("ctrl+n", "advance", "Finish/Next Phase"),
        Binding("+", "faster", "Faster"),
        Binding("-", "slower", "Slower"),
    ]

    phase_index = reactive(0)
    phase_done = reactive(False)
    autoplay = reactive(False)
    tick_interval = reactive(0.5)

    def __init__(self, config: TranslatorConfig | None = None):
        super().__init__()
        self.config = config or TranslatorConfig.from_file()
        self.pipeline = TranslationSession(self.config)
        self.script_name = ""
        self.failure: Exception | None = None
        self.completion_note = ""

        self._project_root = Path(__file__).resolve().parent
        self._loading_script = False
        self.file_browser: FileBrowserController | None = None

    @property
    def phase(self) -> Phase:
        return PHASES[self.phase_index]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container():
            yield Label("", id="title-bar")
            with Horizontal():
                self.left_panel = DynamicPanel("Script", id="left-panel", classes="dynamic-panel")
                self.right_panel = DynamicPanel("", id="right-panel", classes="dynamic-panel")
                yield self.left_panel
                yield self.right_panel
            yield Static("", id="action-bar")
            yield Input(placeholder="Script name (letters, digits, _ - .)", id="file-input", classes="hidden")
        yield Footer()

    def on_mount(self) -> None:
        self.ticker = self.set_interval(self.tick_interval, self.progress_tick, pause=True)
        self.file_browser = FileBrowserController(self.right_panel.directory_tree, self._project_root)
        self.enter_phase(0)

    # ----- reactive state -----

    def watch_autoplay(self, playing: bool) -> None:
        if playing:
            self.ticker.resume()
        else:
            self.ticker.pause()

    def watch_tick_interval(self, interval: float) -> None:
        self.ticker.stop()
        self.ticker = self.set_interval(interval, self.progress_tick, pause=not self.autoplay)

    def watch_phase_done(self, done: bool) -> None:
        if not done:
            return
        self.autoplay = False
        if self.failure is not None:
            self.show_status(f"{self.phase.name} failed. {self.failure} (ctrl+n: back to the script)", "error")
        else:
            note = f" {self.completion_note}" if self.completion_note else ""
            self.show_status(f"{self.phase.name} done.{note} (ctrl+n: next phase)", "success")
        self.refresh_bindings()

    # ----- phase machinery -----

    def enter_phase(self, index: int) -> None:
        self.phase_index = index
        phase = self.phase
        self.autoplay = False
        self.failure = None
        self.completion_note = ""
        self.phase_done = False

        self.left_panel.title = phase.left_panel_title
        self.left_panel.content_type = phase.left_panel_type
        self.left_panel.source_editable = index == 0
        self.right_panel.title = phase.right_panel_title
        self.right_panel.content_type = phase.right_panel_type
        self._update_title()
        self.show_status(phase.action_bar_message or f"{phase.name}: t ticks once, ctrl+r plays, ctrl+n finishes.")

        enter = getattr(self, f"enter_{phase.key}", None)
        if enter is not None:
            self._run_hook(enter)
        self.refresh_bindings()

    def _run_hook(self, hook) -> None:
        """Run a phase hook; a truthy result or a translation error completes the phase."""
        try:
            finished = hook()
        except PHASE_ERRORS as e:
            logger.info("%s failed: %s", self.phase.name, e)
            self.failure = e
            finished = True
        if finished:
            self.phase_done = True

    def progress_tick(self) -> bool:
        """Advance the current phase by one report. Returns False when the phase cannot tick."""
        tick = getattr(self, f"tick_{self.phase.key}", None)
        if tick is None or self.phase_done:
            return False
        self._run_hook(tick)
        return True

    def _update_title(self) -> None:
        phase = self.phase
        script = self.script_name or "untitled"
        self.query_one("#title-bar", Label).update(
            f"Step {phase.step_number} | {phase.name} - {phase.description} | Script: {script}"
        )

    def show_status(self, message: str, level: str = "info") -> None:
        bar = self.query_one("#action-bar", Static)
        bar.update(message)
        bar.set_classes(level)

    def _relay(self, report: ProgressReport) -> None:
        if report.action_bar_message:
            self.show_status(report.action_bar_message)

    # ----- script input -----

    def _load_script(self, code: str, script_name: str) -> None:
        self._loading_script = True
        try:
            self.left_panel.source_editor.text = code
        finally:
            self._loading_script = False
        self.script_name = script_name
        self._update_title()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area is not self.left_panel.source_editor or self._loading_script:
            return
        if self.script_name:
            self.script_name = ""
            self._update_title()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if self.phase_index != 0 or self.file_browser is None:
            return
        if event.control is not self.right_panel.directory_tree:
            return
        selection = self.file_browser.open(event.node)
        if selection.error:
            self.show_status(selection.error, "error")
        elif selection.content is not None:
            self._load_script(selection.content, selection.script_name)
            self.right_panel.content_type = DynamicPanelContentType.HIDDEN
            self.show_status(f"Opened {selection.script_name}. ctrl+t translates it.", "success")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "file-input":
            return
        name = event.value.strip()
        if not SCRIPT_NAME.fullmatch(name):
            self.show_status("A script name uses letters, digits, '_', '-' and '.' only.", "error")
            return
        event.input.add_class("hidden")
        self.script_name = name
        self.enter_phase(1)

    def action_browse_scripts(self) -> None:
        if self.file_browser is None:
            return
        if self.right_panel.content_type == DynamicPanelContentType.DIRECTORY_TREE:
            self.right_panel.content_type = DynamicPanelContentType.HIDDEN
            return
        found = self.file_browser.refresh()
        self.right_panel.content_type = DynamicPanelContentType.DIRECTORY_TREE
        self.right_panel.directory_tree.focus()
        self.show_status(f"{found} script(s) found. Select one to open it.")

    def action_load_example(self) -> None:
        path = self._project_root / EXAMPLE_SCRIPT
        try:
            code = path.read_text(encoding="utf-8")
        except OSError as e:
            self.show_status(f"Cannot read the example script: {e}", "error")
            return
        self._load_script(code, path.stem)
        self.show_status(f"Loaded example {path.name}.", "success")

    def action_translate(self) -> None:
        if not self.left_panel.source_editor.text.strip():
            self.show_status("The script is empty.", "error")
            return
        if self.script_name:
            self.enter_phase(1)
            return
        name_input = self.query_one("#file-input", Input)
        name_input.remove_class("hidden")
        name_input.focus()
        self.show_status("Name the script before translating it.", "error")

    # ----- playback -----

    def action_toggle_autoplay(self) -> None:
        self.autoplay = not self.autoplay
        self.refresh_bindings()

    def action_single_tick(self) -> None:
        self.progress_tick()

    def action_faster(self) -> None:
        self.tick_interval = max(0.05, round(self.tick_interval / 2, 2))

    def action_slower(self) -> None:
        self.tick_interval = min(4.0, self.tick_interval * 2)

    def action_advance(self) -> None:
        """Finish the running phase, then move on. A failed or final phase returns to the script."""
        if self.failure is not None:
            self.enter_phase(0)
        elif self.phase_done:
            self.enter_phase((self.phase_index + 1) % len(PHASES))
        else:
            self.autoplay = False
            while not self.phase_done and self.progress_tick():
                pass

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        editing = self.phase_index == 0
        match action:
            case "browse_scripts" | "load_example" | "translate":
                return editing
            case "toggle_autoplay":
                return not editing and not self.phase_done
            case "single_tick":
                return not editing and not self.autoplay and not self.phase_done
            case "faster" | "slower":
                return not editing and self.autoplay
            case "advance":
                return not editing
        return True

    # ----- phase hooks -----

    def enter_input(self) -> None:
        self.left_panel.source_editor.clear_highlight()

    def enter_trimming(self) -> None:
        self.right_panel.trimmed_display.show_lines("")
        self.pipeline.begin_trimming(self.left_panel.source_editor.text, file_name=self.script_name)

    def tick_trimming(self) -> bool:
        done, report = self.pipeline.tick_trimming()
        if done:
            self.completion_note = f"{len(self.pipeline.cleaned_lines)} line(s) kept."
            return True
        self.left_panel.source_editor.apply_progress_report(report)
        self.right_panel.trimmed_display.apply_progress_report(trim_report=report)
        self._relay(report)
        return False

    def enter_tokenization(self) -> None:
        self.left_panel.trimmed_display.show_lines(self.pipeline.source_trimmed)
        self.right_panel.token_table.clear()
        self.pipeline.begin_tokenization()

    def tick_tokenization(self) -> bool:
        done, report = self.pipeline.tick_tokenization()
        if done:
            self.completion_note = f"{len(self.pipeline.tokens)} token(s)."
            return True
        self.left_panel.trimmed_display.apply_progress_report(token_report=report)
        self.right_panel.token_table.apply_progress_report(token_report=report)
        self._relay(report)
        return False

    def enter_parsing(self) -> None:
        self.left_panel.token_table.fill_table(self.pipeline.tokens)
        self.left_panel.token_table.move_cursor(row=0, scroll=True)
        self.right_panel.ast_tree.reset_tree("program")
        self.pipeline.begin_parsing(filename=self.script_name)

    def tick_parsing(self) -> bool:
        done, report = self.pipeline.tick_parsing()
        if done:
            return True
        self.left_panel.token_table.apply_progress_report(parsing_report=report)
        self.right_panel.ast_tree.apply_progress_report(parsing_report=report)
        self._relay(report)
        return False

    def enter_translation(self) -> None:
        self.left_panel.ast_tree.build_from_ast_root(self.pipeline.ast_root)
        self.pipeline.begin_translation()
        self.right_panel.block_tree.build_from_workspace(self.pipeline.workspace)

    def tick_translation(self) -> bool:
        done, report = self.pipeline.tick_translation()
        workspace = self.pipeline.workspace
        if done:
            result = self.pipeline.translation_result
            self.completion_note = (
                f"{len(workspace)} block(s) in {len(result.blocks)} stack(s),"
                f" {result.dropped} construct(s) dropped."
            )
            self.right_panel.block_tree.build_from_workspace(workspace)
            return True
        self.left_panel.ast_tree.apply_progress_report(translation_report=report)
        self.right_panel.block_tree.apply_progress_report(workspace, translation_report=report)
        self._relay(report)
        return False

    def enter_generation(self) -> None:
        self.left_panel.block_tree.build_from_workspace(self.pipeline.workspace)
        self.right_panel.product_code_display.show_backend(self.phase.backend)
        self.pipeline.begin_code_generation(self.phase.backend)

    def tick_generation(self) -> bool:
        done, report = self.pipeline.tick_code_generation()
        if done:
            path = write_output(self.pipeline, self.phase.backend, self.script_name)
            self.completion_note = f"Saved as {path}."
            return True
        self.left_panel.block_tree.apply_progress_report(self.pipeline.workspace, code_generation_report=report)
        self.right_panel.product_code_display.apply_progress_report(code_generation_report=report)
        self._relay(report)
        return False

    def enter_comparison(self) -> bool:
        backend = Backend(self.config.backend)
        display = self.right_panel.product_code_display
        display.show_backend(backend.value)
        display.text = self.pipeline.output_code.get(backend, "")
        self.right_panel.title = f"Generated {backend.value}"
        return True


if __name__ == "__main__":
    RobotBlocksTranslator().run()
