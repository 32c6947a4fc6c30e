from textual.widgets import DataTable
from TranslatorComponents.ProgressReport import (
    TokenizationReport,
    ParsingReport,
)
from TranslatorComponents.Token import Token, TokenType


class TokenTable(DataTable):
    """Token list, one row per token. String literals are shown quoted so that
    `"if"` and the keyword `if` read differently.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns("line #", "Type", "Value")

    def add_token(self, token: Token):
        value = repr(token.value) if token.type == TokenType.STRING_LITERAL else token.value
        self.add_row(
            str(token.line_number),
            str(token.type).replace("TokenType.", ""),
            value,
        )

    def fill_table(self, tokens: list[Token]):
        self.clear()
        for token in tokens:
            self.add_token(token)

    def apply_progress_report(
        self,
        token_report: TokenizationReport | None = None,
        parsing_report: ParsingReport | None = None,
    ):
        """Append the token of a tokenization report, or follow the parser's
        current token.
        """
        if token_report and token_report.new_token:
            self.add_token(token_report.new_token)
            self.move_cursor(row=self.row_count - 1, scroll=True)

        if parsing_report and parsing_report.looked_up_token_number is not None:
            self.move_cursor(row=parsing_report.looked_up_token_number, scroll=True)
