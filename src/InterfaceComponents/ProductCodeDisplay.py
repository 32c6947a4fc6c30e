from typing import Any

from textual.widgets import TextArea
from TranslatorComponents.ProgressReport import CodeGenerationReport
from textual.widgets.text_area import Selection

class ProductCodeEditor(TextArea):
    """Read-only display of the generated program.

    Chains are appended as they are generated; the final report replaces the
    text with the finished program, prologue and shell included.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.read_only = True
        self.show_line_numbers = True

    def show_backend(self, backend: str) -> None:
        self.text = ""
        self.language = backend

    def apply_progress_report(self, code_generation_report: CodeGenerationReport | None = None):
        """Applies a CodeGenerationReport to the display, highlighting the new code.

        Args:
            code_generation_report (CodeGenerationReport): The code generation report for one chain.
        """
        if code_generation_report is None:
            return
        if code_generation_report.final_code is not None:
            self.text = code_generation_report.final_code
            self.scroll_home(animate=False)
            return
        if code_generation_report.new_code:
            start_index = len(self.text)
            new_code = code_generation_report.new_code
            self.text += new_code

            end_index = start_index + len(new_code)
            document: Any = self.document
            start_location = document.get_location_from_index(start_index)
            end_location = document.get_location_from_index(end_index)
            self.selection = Selection(start=start_location, end=end_location)
            self.scroll_cursor_visible(center=True)
