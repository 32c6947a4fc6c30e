import pytest

from TranslatorComponents.Lexer import (
    LexingError,
    get_clean_lines_tokenizer,
    get_source_code_trimmer,
    mask_comments,
    remove_comments,
    tokenize,
)
from TranslatorComponents.Token import TokenType


def kinds_and_values(source):
    return [(token.type, token.value) for token in tokenize(source)]


def test_simple_declaration():
    assert kinds_and_values("var x = 5;") == [
        (TokenType.KEYWORD, "var"),
        (TokenType.IDENTIFIER, "x"),
        (TokenType.OPERATOR, "="),
        (TokenType.NUMBER_LITERAL, "5"),
        (TokenType.PUNCTUATION, ";"),
    ]


def test_no_end_of_file_token():
    assert tokenize("") == []
    assert tokenize("x")[-1].type == TokenType.IDENTIFIER


def test_longest_operator_wins():
    values = [token.value for token in tokenize("a === b !== c ** 2 => d")]
    assert values == ["a", "===", "b", "!==", "c", "**", "2", "=>", "d"]


def test_literal_words():
    assert kinds_and_values("true false null undefined") == [
        (TokenType.BOOLEAN_LITERAL, "true"),
        (TokenType.BOOLEAN_LITERAL, "false"),
        (TokenType.NULL_LITERAL, "null"),
        (TokenType.NULL_LITERAL, "undefined"),
    ]


def test_string_escapes_are_decoded():
    tokens = tokenize("logConsole('it\\'s', \"a\\nb\");")
    strings = [token.value for token in tokens if token.type == TokenType.STRING_LITERAL]
    assert strings == ["it's", "a\nb"]


def test_numbers():
    values = [token.value for token in tokenize("1 2.5 .5 1e3 0x1F")]
    assert values == ["1", "2.5", ".5", "1e3", "0x1F"]


def test_line_comments_and_block_comments_are_removed():
    source = "a = 1; // note\n/* block\n comment */ b = 2;"
    tokens = tokenize(source)
    assert [token.value for token in tokens] == ["a", "=", "1", ";", "b", "=", "2", ";"]
    assert tokens[4].line_number == 3


def test_comment_markers_inside_strings_are_kept():
    masked, in_block = mask_comments("s = 'http://x'; // c")
    assert masked.startswith("s = 'http://x';")
    assert masked.strip() == "s = 'http://x';"
    assert not in_block


def test_masking_keeps_columns():
    lines = ["x /* a */ = 1;", "/* open", "still */ y;"]
    masked = remove_comments(lines)
    assert [len(line) for line in masked] == [len(line) for line in lines]
    assert masked[1].strip() == ""
    assert masked[2].strip() == "y;"


@pytest.mark.parametrize(
    "source, fragment",
    [
        ("x = `hi`;", "Template literals"),
        ("x = 'open;", "Unterminated string"),
        ("x = 1.2.3;", "multiple decimal points"),
        ("x = 1e;", "exponent"),
        ("x = 3abc;", "Identifier starts immediately"),
        ("x = #;", "Unexpected character"),
    ],
)
def test_lexing_errors(source, fragment):
    with pytest.raises(LexingError) as error:
        tokenize(source)
    assert fragment in str(error.value)
    assert str(error.value).startswith("Line 1")


def test_trimmer_reports_only_kept_lines():
    reports = list(get_source_code_trimmer("  x = 1;  \n\n// comment\ny;"))
    assert [report.current_line for report in reports] == [1, 4]
    assert reports[0].kept == (2, 8)
    assert str(reports[0].product) == "1: x = 1;"
    assert reports[1].product.content == "y;"


def test_tokenizer_yields_two_reports_per_token():
    cleaned = [report.product for report in get_source_code_trimmer("a = 1;")]
    reports = list(get_clean_lines_tokenizer(cleaned))
    assert len(reports) == 8
    assert all(report.new_token is None for report in reports[0::2])
    assert [report.new_token.value for report in reports[1::2]] == ["a", "=", "1", ";"]
    # "1: " prefix of the trimmed display
    assert reports[1].currently_looked_at == (3, 4)


def test_hex_escapes_are_decoded():
    tokens = tokenize("x = '\\x41\\x7e' + '\\xZZ';")
    strings = [token.value for token in tokens if token.type == TokenType.STRING_LITERAL]
    assert strings == ["A~", "xZZ"]
