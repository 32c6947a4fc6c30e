from textual.widgets import TextArea
from TranslatorComponents.ProgressReport import TrimmingReport
from textual.widgets.text_area import Selection

class SourceCodeEditor(TextArea):
    """Editor for the JavaScript source. Two-space indentation, line numbers,
    and the kept part of each line highlighted while trimming runs.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.language = "javascript"
        self.tab_behavior = "indent"
        self.indent_width = 2
        self.show_line_numbers = True
        self.read_only = False

    def clear_highlight(self) -> None:
        self.selection = Selection.cursor((0, 0))
        self.scroll_home(animate=False)

    def apply_progress_report(self, report: TrimmingReport):
        """Select the characters a trimming step kept on its source line."""
        start, end = report.kept
        if start == end:
            return
        row = report.current_line - 1
        self.selection = Selection(start=(row, start), end=(row, end))
        self.scroll_cursor_visible(center=True)
