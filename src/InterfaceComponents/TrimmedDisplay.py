from textual.widgets import TextArea
from TranslatorComponents.ProgressReport import TrimmingReport, TokenizationReport
from textual.widgets.text_area import Selection

class TrimmedDisplay(TextArea):
    """Read-only list of trimmed lines, each prefixed with its source line number.

    Grows one row per trimming report; during tokenization the scanned
    characters of the current row are selected.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.read_only = True
        self.show_line_numbers = False
        self._rows: list[str] = []

    def show_lines(self, trimmed_text: str) -> None:
        self._rows = trimmed_text.splitlines()
        self.text = trimmed_text

    def _select(self, row: int, start: int, end: int) -> None:
        self.selection = Selection(start=(row, start), end=(row, end))
        self.scroll_cursor_visible(center=True)

    def apply_progress_report(self, trim_report: TrimmingReport | None = None, token_report: TokenizationReport | None = None):
        if trim_report:
            line = str(trim_report.product)
            self._rows.append(line)
            self.text = "\n".join(self._rows) + "\n"
            self._select(len(self._rows) - 1, 0, len(line))
        elif token_report:
            start, end = token_report.currently_looked_at
            self._select(token_report.current_line - 1, start, end)
