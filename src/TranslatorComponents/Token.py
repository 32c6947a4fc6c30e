from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    KEYWORD = "KEYWORD"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    IDENTIFIER = "IDENTIFIER"
    NUMBER_LITERAL = "NUMBER_LITERAL"
    STRING_LITERAL = "STRING_LITERAL"
    BOOLEAN_LITERAL = "BOOLEAN_LITERAL"
    NULL_LITERAL = "NULL_LITERAL"
    END_OF_FILE = "END_OF_FILE"


LITERAL_TYPES = {
    TokenType.NUMBER_LITERAL: "number",
    TokenType.STRING_LITERAL: "string",
    TokenType.BOOLEAN_LITERAL: "boolean",
    TokenType.NULL_LITERAL: "null",
}


@dataclass
class Token:
    """One lexeme of a robot script.

    String literal tokens hold the decoded text: no quotes, escapes resolved.
    """

    type: TokenType
    value: str
    line_number: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value}, line {self.line_number})"
