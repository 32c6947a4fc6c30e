from collections.abc import Generator

from TranslatorComponents.CleanLine import CleanLine
from TranslatorComponents.ProgressReport import TokenizationReport, TrimmingReport
from TranslatorComponents.Token import Token, TokenType

### Step 1: Removing comments and irrelevant whitespace ###


def is_blank_line(line: str) -> bool:
    """Returns true if the line is blank or contains only whitespace."""
    return len(line.strip()) == 0


def mask_comments(line: str, in_block_comment: bool = False) -> tuple[str, bool]:
    """Blank out the comment characters of one line.

    Comment characters are replaced by spaces so that every kept character
    keeps its column. Comment markers inside string literals are kept.

    Args:
        line (str): one raw source line.
        in_block_comment (bool): True if the previous line ended inside a /* */ comment.

    Returns:
        tuple[str, bool]: the masked line, and whether the line ends inside a block comment.
    """
    masked = list(line)
    quote = None
    i = 0
    while i < len(line):
        if in_block_comment:
            end = line.find("*/", i)
            stop = len(line) if end == -1 else end + 2
            for j in range(i, stop):
                masked[j] = " "
            if end == -1:
                return "".join(masked), True
            in_block_comment = False
            i = stop
            continue

        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in ("'", '"', "`"):
            quote = ch
        elif line.startswith("//", i):
            for j in range(i, len(line)):
                masked[j] = " "
            break
        elif line.startswith("/*", i):
            masked[i] = masked[i + 1] = " "
            in_block_comment = True
            i += 2
            continue
        i += 1
    return "".join(masked), in_block_comment


def remove_comments(lines: list[str]) -> list[str]:
    """
    Args:
        lines (list[str]): source lines, possibly containing // and /* */ comments

    Returns:
        list[str]: the same lines with comments blanked out
    """
    cleaned_lines = []
    in_block_comment = False
    for line in lines:
        masked, in_block_comment = mask_comments(line, in_block_comment)
        cleaned_lines.append(masked)
    return cleaned_lines


def get_source_code_trimmer(source_code: str) -> Generator[TrimmingReport, None, None]:
    """
    Trims comments and irrelevant whitespace from source code.

    Args:
        source_code (str): The original source code as a string.

    Yields:
        TrimmingReport: A report of the trimming process for each kept line.
    """
    lines = source_code.splitlines()
    for i, masked in enumerate(remove_comments(lines)):
        if is_blank_line(masked):
            continue

        report = TrimmingReport()
        report.current_line = i + 1

        start_index = len(masked) - len(masked.lstrip())
        end_index = len(masked.rstrip())
        report.kept = (start_index, end_index)

        report.product = CleanLine(lines[i], i + 1, masked.strip())

        report.action_bar_message = (
            f"Trimmed line {report.current_line}: kept characters {start_index} to {end_index - 1}."
        )

        yield report


### Step 2: Tokens ###

keywords = {
    "var",
    "let",
    "const",
    "if",
    "else",
    "for",
    "while",
    "do",
    "function",
    "return",
    "async",
    "await",
    "break",
    "continue",
    "new",
}

literal_words = {
    "true": TokenType.BOOLEAN_LITERAL,
    "false": TokenType.BOOLEAN_LITERAL,
    "null": TokenType.NULL_LITERAL,
    "undefined": TokenType.NULL_LITERAL,
}

# Longest operators first so that greedy matching works.
operators = [
    "===", "!==", "**=",
    "==", "!=", "<=", ">=", "&&", "||", "++", "--", "+=", "-=", "*=", "/=", "%=", "=>", "**",
    "<", ">", "=", "+", "-", "*", "/", "%", "!", "?", ":", ".",
]

punctuation = {"(", ")", "{", "}", "[", "]", ",", ";"}

escapes = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


class LexingError(Exception):
    """Custom exception for lexical analysis errors."""
    pass


def _skip_whitespace(content: str, i: int) -> int:
    while i < len(content) and content[i].isspace():
        i += 1
    return i


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _scan_identifier_or_keyword(line: CleanLine, start: int) -> tuple[Token, int, str]:
    i = start
    while i < len(line.content) and _is_identifier_part(line.content[i]):
        i += 1
    word = line.content[start:i]
    if word in keywords:
        return Token(TokenType.KEYWORD, word, line.line_number), i, "keyword"
    if word in literal_words:
        return Token(literal_words[word], word, line.line_number), i, "literal"
    return Token(TokenType.IDENTIFIER, word, line.line_number), i, "identifier"


def _scan_number(line: CleanLine, start: int) -> tuple[Token, int, str]:
    content = line.content
    i = start
    if content.startswith(("0x", "0X"), i):
        i += 2
        while i < len(content) and content[i] in "0123456789abcdefABCDEF":
            i += 1
        if i == start + 2:
            raise LexingError(f"Line {line.line_number}: Invalid hexadecimal literal.")
    else:
        has_decimal_point = False
        while i < len(content) and (content[i].isdigit() or content[i] == "."):
            if content[i] == ".":
                if has_decimal_point:
                    raise LexingError(
                        f"Line {line.line_number}: Invalid number format (multiple decimal points)."
                    )
                has_decimal_point = True
            i += 1
        if i < len(content) and content[i] in "eE":
            j = i + 1
            if j < len(content) and content[j] in "+-":
                j += 1
            if j < len(content) and content[j].isdigit():
                while j < len(content) and content[j].isdigit():
                    j += 1
                i = j
            else:
                raise LexingError(f"Line {line.line_number}: Invalid number exponent.")

    if i < len(content) and _is_identifier_part(content[i]):
        raise LexingError(
            f"Line {line.line_number}: Identifier starts immediately after numeric literal."
        )
    return Token(TokenType.NUMBER_LITERAL, content[start:i], line.line_number), i, "number"


def _scan_string_literal(line: CleanLine, start: int) -> tuple[Token, int, str]:
    content = line.content
    quote = content[start]
    i = start + 1
    chars = []
    while i < len(content) and content[i] != quote:
        if content[i] == "\\":
            if i + 1 >= len(content):
                break
            escaped = content[i + 1]
            digits = content[i + 2:i + 4]
            if escaped == "x" and len(digits) == 2 and all(c in "0123456789abcdefABCDEF" for c in digits):
                chars.append(chr(int(digits, 16)))
                i += 4
                continue
            chars.append(escapes.get(escaped, escaped))
            i += 2
            continue
        chars.append(content[i])
        i += 1
    if i < len(content) and content[i] == quote:
        return Token(TokenType.STRING_LITERAL, "".join(chars), line.line_number), i + 1, "string"
    raise LexingError(f"Line {line.line_number}: Unterminated string literal")


def _scan_symbol(line: CleanLine, start: int) -> tuple[Token, int, str]:
    content = line.content
    if content[start] in punctuation:
        return Token(TokenType.PUNCTUATION, content[start], line.line_number), start + 1, "symbol"
    for operator in operators:
        if content.startswith(operator, start):
            return (
                Token(TokenType.OPERATOR, operator, line.line_number),
                start + len(operator),
                "symbol",
            )
    raise LexingError(f"Line {line.line_number}: Unknown operator '{content[start]}'")


def _scan_next_token(line: CleanLine, i: int) -> tuple[Token, int, int, int, str, str]:
    """Scan a single token starting at i (which must be non-whitespace).

    Returns:
        (token, start, end, next_i, kind, lexeme)
    """
    start = i
    ch = line.content[i]

    if _is_identifier_start(ch):
        token, next_i, kind = _scan_identifier_or_keyword(line, start)
    elif ch.isdigit() or (ch == "." and line.content[i + 1 : i + 2].isdigit()):
        token, next_i, kind = _scan_number(line, start)
    elif ch in ("'", '"'):
        token, next_i, kind = _scan_string_literal(line, start)
    elif ch == "`":
        raise LexingError(f"Line {line.line_number}: Template literals are not supported")
    elif ch in punctuation or any(op[0] == ch for op in operators):
        token, next_i, kind = _scan_symbol(line, start)
    else:
        raise LexingError(
            f"Line {line.line_number}: Unexpected character '{line.content[i]}'"
        )
    return token, start, next_i, next_i, kind, line.content[start:next_i]


def _pre_scan_message(ch: str) -> str:
    if _is_identifier_start(ch):
        return "Pattern matching keyword or identifier."
    if ch.isdigit():
        return "Pattern matching number."
    if ch in ("'", '"'):
        return "Pattern matching string literal."
    return "Pattern matching symbol."


def _post_scan_message(kind: str, token: Token, lexeme: str) -> str:
    match kind:
        case "keyword":
            return f"Found keyword: {lexeme}."
        case "identifier":
            return f"Found identifier: {lexeme}."
        case "literal":
            return f"Found literal: {lexeme}."
        case "number":
            return f"Found number literal: {lexeme}."
        case "string":
            return "Found string literal."
        case _:
            return f"Found {str(token.type).replace('TokenType.', '').lower()}: {lexeme}."


def get_clean_lines_tokenizer(
    cleaned_lines: list[CleanLine],
) -> Generator[TokenizationReport, None, None]:
    """
    Tokenizes a list of cleaned lines of code.

    Args:
        cleaned_lines (list[CleanLine]): List of cleaned lines of code.

    Yields:
        TokenizationReport: Two reports per token, one before scanning it
        and one carrying the new token.
    """
    for ln, line in enumerate(cleaned_lines):
        i = 0
        look_at_offset = len(str(line.line_number)) + 2  # account for "X: " at start of line

        while i < len(line.content):
            i = _skip_whitespace(line.content, i)
            if i >= len(line.content):
                break

            pre_report = TokenizationReport()
            pre_report.current_line = ln + 1
            pre_report.currently_looked_at = (look_at_offset + i, look_at_offset + i + 1)
            pre_report.action_bar_message = _pre_scan_message(line.content[i])
            yield pre_report

            token, token_start, token_end, next_i, kind, lexeme = _scan_next_token(line, i)

            post_report = TokenizationReport()
            post_report.current_line = ln + 1
            post_report.currently_looked_at = (
                look_at_offset + token_start,
                look_at_offset + token_end,
            )
            post_report.new_token = token
            post_report.action_bar_message = _post_scan_message(kind, token, lexeme)
            yield post_report

            i = next_i


def tokenize(source_code: str) -> list[Token]:
    """Run trimming and tokenization to completion and return the tokens."""
    cleaned_lines = [report.product for report in get_source_code_trimmer(source_code)]
    return [
        report.new_token
        for report in get_clean_lines_tokenizer(cleaned_lines)
        if report.new_token is not None
    ]
