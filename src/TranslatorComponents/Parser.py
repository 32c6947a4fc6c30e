from __future__ import annotations

from collections.abc import Generator

from TranslatorComponents.AST import *
from TranslatorComponents.Lexer import tokenize
from TranslatorComponents.ProgressReport import ParsingReport
from TranslatorComponents.Token import Token, TokenType


class ParsingError(Exception):
    """Custom exception for parsing errors."""

    pass


# Tokens whose value is syntax. Literal and identifier values never match
# punctuation or keywords, even when their text does.
_SYNTAX_TOKEN_TYPES = (TokenType.KEYWORD, TokenType.OPERATOR, TokenType.PUNCTUATION)

_ASSIGNMENT_OPERATORS = ["=", "+=", "-=", "*=", "/=", "%=", "**="]


class _ParserState:
    def __init__(self, tokens: list[Token]):
        # NOTE: tokens is expected to be a mutable working list.
        self.tokens = tokens
        # Cursor is the index into the *original* token list (monotone increasing).
        # This is what the UI token table uses.
        self.cursor = 0

        # AST tree event ids (UI-side). 0 is reserved for the Tree root.
        self.next_ast_node_id = 1

        # Visual AST emission stack (UI-side). This models parse-time structure so
        # the UI can show progress before the real AST node object exists.
        self.visual_parent_stack: list[int] = [0]

        # Peeks are very noisy during recursive descent; only emit them when asked.
        self.emit_peek_reports: bool = False


def _new_report(
    state: _ParserState,
    message: str = "",
    *,
    looked_up_token_number: int | None = None,
    looked_at_token: Token | None = None,
    ast_parent_id: int | None = None,
    ast_node_id: int | None = None,
    ast_node_label: str | None = None,
    ast_event: str | None = None,
    ast_node_complete: bool | None = None,
) -> ParsingReport:
    report = ParsingReport()
    report.looked_up_token_number = looked_up_token_number
    report.looked_at_token = looked_at_token
    report.ast_parent_id = ast_parent_id
    report.ast_node_id = ast_node_id
    report.ast_node_label = ast_node_label
    report.ast_event = ast_event
    report.ast_node_complete = ast_node_complete
    report.action_bar_message = message
    return report


def _describe(token: Token | None) -> str:
    if token is None:
        return "end of input"
    return f"({token.type.name}, {token.value!r})"


def _line_of(token: Token | None) -> str:
    return f"Line {token.line_number}" if token else "EOF"


def _peek_token(
    state: _ParserState, message: str = "", offset: int = 0
) -> Generator[ParsingReport, None, Token | None]:
    token = state.tokens[offset] if len(state.tokens) > offset else None
    if state.emit_peek_reports:
        yield _new_report(
            state,
            message or "Looking at next token",
            looked_up_token_number=state.cursor + offset,
            looked_at_token=token,
        )
    return token


def _advance_token(
    state: _ParserState, message: str = ""
) -> Generator[ParsingReport, None, Token | None]:
    token = state.tokens[0] if state.tokens else None
    yield _new_report(
        state,
        message or "Consuming token",
        looked_up_token_number=state.cursor,
        looked_at_token=token,
    )
    if state.tokens:
        state.tokens.pop(0)
        state.cursor += 1
    return token


def _token_matches(token: Token, expected: list[str] | list[TokenType]) -> bool:
    if expected and isinstance(expected[0], TokenType):
        return token.type in expected
    return token.type in _SYNTAX_TOKEN_TYPES and token.value in expected


def _check_token(
    state: _ParserState, expected: list[str] | list[TokenType], offset: int = 0
) -> Generator[ParsingReport, None, bool]:
    token = yield from _peek_token(state, offset=offset)
    return token is not None and _token_matches(token, expected)


def _match_token(
    state: _ParserState, expected: list[str] | list[TokenType]
) -> Generator[ParsingReport, None, Token | None]:
    token = yield from _peek_token(state)
    if token is None:
        return None
    if _token_matches(token, expected):
        return (yield from _advance_token(state, f"Matched {token.value}"))
    return None


def _expect_token(
    state: _ParserState, expected: list[str] | list[TokenType]
) -> Generator[ParsingReport, None, Token]:
    token = yield from _peek_token(state)
    wanted = ", ".join(str(e).replace("TokenType.", "") for e in expected)
    if token is None:
        raise ParsingError(f"EOF: Unexpected end of input: Expected token {wanted}")

    if not _token_matches(token, expected):
        yield _new_report(
            state,
            f"Line {token.line_number}: Expected {wanted}, got {_describe(token)}",
            looked_up_token_number=state.cursor,
            looked_at_token=token,
        )
        raise ParsingError(
            f"Line {token.line_number}: Expected token {wanted}, but got {_describe(token)}"
        )

    consumed = yield from _advance_token(state, f"Consumed {token.value}")
    assert consumed is not None
    return consumed


def _emit_ast_node(
    state: _ParserState,
    parent_id: int,
    label: str,
    message: str = "",
    complete: bool = False,
) -> Generator[ParsingReport, None, int]:
    node_id = state.next_ast_node_id
    state.next_ast_node_id += 1
    yield _new_report(
        state,
        message or f"AST: added {label}",
        looked_up_token_number=state.cursor,
        looked_at_token=state.tokens[0] if state.tokens else None,
        ast_parent_id=parent_id,
        ast_node_id=node_id,
        ast_node_label=label,
        ast_event="add",
        ast_node_complete=complete,
    )
    return node_id


def _emit_ast_complete(
    state: _ParserState,
    node_id: int,
    message: str = "",
) -> Generator[ParsingReport, None, None]:
    yield _new_report(
        state,
        message or "AST: completed node",
        looked_up_token_number=state.cursor,
        looked_at_token=state.tokens[0] if state.tokens else None,
        ast_node_id=node_id,
        ast_event="complete",
        ast_node_complete=True,
    )


def _visual_begin(
    state: _ParserState,
    label: str,
    message: str = "",
) -> Generator[ParsingReport, None, int]:
    parent_id = state.visual_parent_stack[-1] if state.visual_parent_stack else 0
    node_id = yield from _emit_ast_node(state, parent_id, label, message=message)
    state.visual_parent_stack.append(node_id)
    return node_id


def _visual_end(
    state: _ParserState,
    node_id: int,
    message: str = "",
) -> Generator[ParsingReport, None, None]:
    if state.visual_parent_stack and state.visual_parent_stack[-1] == node_id:
        state.visual_parent_stack.pop()
    elif node_id in state.visual_parent_stack:
        state.visual_parent_stack.remove(node_id)
    yield from _emit_ast_complete(state, node_id, message=message)


def _emit_ast_subtree(
    state: _ParserState, node: ASTNode, parent_id: int | None = None
) -> Generator[ParsingReport, None, None]:
    """Emit incremental AST tree events for a finished AST node.

    Canonical projection:
    - label: node.unindented_representation()
    - children: node.edges (in order)
    """
    if parent_id is None:
        parent_id = state.visual_parent_stack[-1] if state.visual_parent_stack else 0
    label = node.unindented_representation()
    children = node.edges or []
    if not children:
        yield from _emit_ast_node(state, parent_id, label, complete=True)
        return

    node_id = yield from _emit_ast_node(state, parent_id, label)
    for child in children:
        yield from _emit_ast_subtree(state, child, node_id)
    yield from _emit_ast_complete(state, node_id)


def _number_value(raw: str) -> int | float:
    if raw[:2] in ("0x", "0X"):
        return int(raw, 16)
    if any(ch in raw for ch in ".eE"):
        return float(raw)
    return int(raw)


### Parsing expressions ###


def parse_primary(state: _ParserState):
    """
    Primary are highest precedence expressions.
    They include:
    - Identifiers,
    - literals (number, string, boolean, null),
    - Parenthesized expressions,
    - Array literals,
    - Function expressions and arrow functions (parsed, never translated).
    """
    next_token = yield from _peek_token(state)

    if not next_token:
        raise ParsingError("EOF: Unexpected end of input while parsing primary expression.")

    if next_token.type == TokenType.IDENTIFIER:
        if (yield from _check_token(state, ["=>"], offset=1)):
            return (yield from parse_arrow_function(state))
        token = yield from _expect_token(state, [TokenType.IDENTIFIER])
        return Identifier(token.value, token.line_number)

    if next_token.type == TokenType.NUMBER_LITERAL:
        token = (yield from _advance_token(state, "Consuming number literal")) or next_token
        return Literal("number", _number_value(token.value), token.value, token.line_number)

    if next_token.type == TokenType.STRING_LITERAL:
        token = (yield from _advance_token(state, "Consuming string literal")) or next_token
        return Literal("string", token.value, token.value, token.line_number)

    if next_token.type == TokenType.BOOLEAN_LITERAL:
        token = (yield from _advance_token(state, "Consuming boolean literal")) or next_token
        return Literal("boolean", token.value == "true", token.value, token.line_number)

    if next_token.type == TokenType.NULL_LITERAL:
        token = (yield from _advance_token(state, "Consuming null literal")) or next_token
        return Literal("null", None, token.value, token.line_number)

    if (yield from _check_token(state, ["("])):
        if _arrow_ahead(state):
            return (yield from parse_arrow_function(state))
        yield from _expect_token(state, ["("])
        expr = yield from parse_expression_inner(state)
        yield from _expect_token(state, [")"])
        return expr

    if (yield from _check_token(state, ["["])):
        return (yield from parse_array_literal(state))

    if (yield from _check_token(state, ["function", "async"])):
        return (yield from parse_function_expression(state))

    if (yield from _check_token(state, ["new"])):
        token = yield from _expect_token(state, ["new"])
        target = yield from parse_postfix(state)
        return UnaryExpression("new", target, token.line_number)

    raise ParsingError(
        f"{_line_of(next_token)}: Unexpected token in primary expression: {_describe(next_token)}"
    )


def _arrow_ahead(state: _ParserState) -> bool:
    """True if the '(' at the front of the token list opens an arrow parameter list."""
    depth = 0
    for index, token in enumerate(state.tokens):
        if token.type != TokenType.PUNCTUATION:
            continue
        if token.value == "(":
            depth += 1
        elif token.value == ")":
            depth -= 1
            if depth == 0:
                following = state.tokens[index + 1] if index + 1 < len(state.tokens) else None
                return following is not None and following.type == TokenType.OPERATOR and following.value == "=>"
    return False


def parse_array_literal(state: _ParserState):
    """Parse an array literal.
    <array> ::= '[' (<assignment> (',' <assignment>)* ','?)? ']'
    """
    start = yield from _expect_token(state, ["["])
    elements = []
    while not (yield from _match_token(state, ["]"])):
        elements.append((yield from parse_expression_inner(state)))
        if (yield from _match_token(state, [","])):
            continue
        yield from _expect_token(state, ["]"])
        break
    return ArrayExpression(elements, start.line_number)


def parse_parameters(state: _ParserState):
    """<params> ::= '(' (IDENTIFIER (',' IDENTIFIER)*)? ')'"""
    yield from _expect_token(state, ["("])
    params = []
    while not (yield from _match_token(state, [")"])):
        token = yield from _expect_token(state, [TokenType.IDENTIFIER])
        params.append(Identifier(token.value, token.line_number))
        if (yield from _match_token(state, [","])):
            continue
        yield from _expect_token(state, [")"])
        break
    return params


def parse_arrow_function(state: _ParserState):
    """<arrow> ::= (IDENTIFIER | <params>) '=>' (<block> | <assignment>)"""
    first = yield from _peek_token(state)
    line = first.line_number if first else 0
    if (yield from _check_token(state, [TokenType.IDENTIFIER])):
        token = yield from _expect_token(state, [TokenType.IDENTIFIER])
        params = [Identifier(token.value, token.line_number)]
    else:
        params = yield from parse_parameters(state)
    yield from _expect_token(state, ["=>"])
    if (yield from _check_token(state, ["{"])):
        body = yield from parse_block(state, title="Body", visual=False)
    else:
        body = yield from parse_expression_inner(state)
    return FunctionExpression(params, body, line, is_arrow=True)


def parse_function_expression(state: _ParserState):
    """<function_expr> ::= 'async'? ('function' IDENTIFIER? <params> <block> | <arrow>)"""
    first = yield from _peek_token(state)
    line = first.line_number if first else 0
    yield from _match_token(state, ["async"])
    if not (yield from _match_token(state, ["function"])):
        return (yield from parse_arrow_function(state))
    yield from _match_token(state, [TokenType.IDENTIFIER])
    params = yield from parse_parameters(state)
    body = yield from parse_block(state, title="Body", visual=False)
    return FunctionExpression(params, body, line)


def parse_arguments(state: _ParserState):
    """<args> ::= '(' (<assignment> (',' <assignment>)*)? ')'"""
    yield from _expect_token(state, ["("])
    args = []
    while not (yield from _match_token(state, [")"])):
        args.append((yield from parse_expression_inner(state)))
        if (yield from _match_token(state, [","])):
            continue
        yield from _expect_token(state, [")"])
        break
    return args


def parse_postfix(state: _ParserState):
    """Parse member access, index access and calls.
    <postfix> ::= <primary> ('.' IDENTIFIER | '[' <expression> ']' | <args>)*
    """
    expr = yield from parse_primary(state)
    while True:
        if (yield from _match_token(state, ["."])):
            name = yield from _expect_token(state, [TokenType.IDENTIFIER, TokenType.KEYWORD])
            expr = MemberExpression(expr, Identifier(name.value, name.line_number), False, name.line_number)
        elif (yield from _check_token(state, ["["])):
            bracket = yield from _expect_token(state, ["["])
            index = yield from parse_expression_inner(state)
            yield from _expect_token(state, ["]"])
            expr = MemberExpression(expr, index, True, bracket.line_number)
        elif (yield from _check_token(state, ["("])):
            line = expr.line
            args = yield from parse_arguments(state)
            expr = CallExpression(expr, args, line)
        else:
            return expr


def parse_update(state: _ParserState):
    """Parse increment/decrement.
    <update> ::= ('++' | '--') <unary> | <postfix> ('++' | '--')?
    """
    operator = yield from _match_token(state, ["++", "--"])
    if operator:
        argument = yield from parse_unary(state)
        return UpdateExpression(operator.value, argument, True, operator.line_number)
    expr = yield from parse_postfix(state)
    operator = yield from _match_token(state, ["++", "--"])
    if operator:
        return UpdateExpression(operator.value, expr, False, operator.line_number)
    return expr


def parse_unary(state: _ParserState):
    """Parse a unary expression.
    <unary> ::= ('-' | '+' | '!') <unary> | 'await' <unary> | <update>
    """
    operator = yield from _match_token(state, ["-", "+", "!"])
    if operator:
        operand = yield from parse_unary(state)
        return UnaryExpression(operator.value, operand, operator.line_number)
    keyword = yield from _match_token(state, ["await"])
    if keyword:
        argument = yield from parse_unary(state)
        return AwaitExpression(argument, keyword.line_number)
    return (yield from parse_update(state))


def parse_exponent(state: _ParserState):
    """Parse an exponentiation expression (right associative).
    <exponent> ::= <unary> ('**' <exponent>)?
    """
    left = yield from parse_unary(state)
    operator = yield from _match_token(state, ["**"])
    if operator:
        right = yield from parse_exponent(state)
        return BinaryExpression(left, operator.value, right, operator.line_number)
    return left


def _parse_left_associative(state: _ParserState, operators: list[str], operand, node_class=BinaryExpression):
    left = yield from operand(state)
    operator = yield from _match_token(state, operators)
    while operator:
        right = yield from operand(state)
        left = node_class(left, operator.value, right, operator.line_number)
        operator = yield from _match_token(state, operators)
    return left


def parse_multiplicative(state: _ParserState):
    """<multiplicative> ::= <exponent> (('*' | '/' | '%') <exponent>)*"""
    return (yield from _parse_left_associative(state, ["*", "/", "%"], parse_exponent))


def parse_additive(state: _ParserState):
    """<additive> ::= <multiplicative> (('+' | '-') <multiplicative>)*"""
    return (yield from _parse_left_associative(state, ["+", "-"], parse_multiplicative))


def parse_relational(state: _ParserState):
    """<relational> ::= <additive> (('<' | '<=' | '>' | '>=') <additive>)*"""
    return (yield from _parse_left_associative(state, ["<", "<=", ">", ">="], parse_additive))


def parse_equality(state: _ParserState):
    """<equality> ::= <relational> (('==' | '!=' | '===' | '!==') <relational>)*"""
    return (yield from _parse_left_associative(state, ["==", "!=", "===", "!=="], parse_relational))


def parse_logical_and(state: _ParserState):
    """<logical_and> ::= <equality> ('&&' <equality>)*"""
    return (yield from _parse_left_associative(state, ["&&"], parse_equality, LogicalExpression))


def parse_logical_or(state: _ParserState):
    """<logical_or> ::= <logical_and> ('||' <logical_and>)*"""
    return (yield from _parse_left_associative(state, ["||"], parse_logical_and, LogicalExpression))


def parse_conditional(state: _ParserState):
    """<conditional> ::= <logical_or> ('?' <assignment> ':' <assignment>)?"""
    test = yield from parse_logical_or(state)
    question = yield from _match_token(state, ["?"])
    if not question:
        return test
    consequent = yield from parse_expression_inner(state)
    yield from _expect_token(state, [":"])
    alternate = yield from parse_expression_inner(state)
    return ConditionalExpression(test, consequent, alternate, question.line_number)


def parse_expression_inner(state: _ParserState):
    """Parse an assignment expression (right associative).
    <assignment> ::= <conditional> (<assign_op> <assignment>)?
    """
    target = yield from parse_conditional(state)
    operator = yield from _match_token(state, _ASSIGNMENT_OPERATORS)
    if not operator:
        return target
    if not isinstance(target, (Identifier, MemberExpression)):
        raise ParsingError(f"Line {operator.line_number}: Invalid assignment target.")
    value = yield from parse_expression_inner(state)
    return AssignmentExpression(target, operator.value, value, operator.line_number)


def parse_expression(state: _ParserState):
    """Parse a full expression.
    <expression> ::= <assignment>
    """
    return (yield from parse_expression_inner(state))


### Parsing statements ###


def _consume_semicolon(state: _ParserState):
    yield from _match_token(state, [";"])


def parse_block(state: _ParserState, title: str = "Block", visual: bool = True):
    """Parse a braced statement list.
    <block> ::= '{' <statement>* '}'
    """
    start = yield from _expect_token(state, ["{"])
    node_id = None
    if visual:
        node_id = yield from _visual_begin(state, title)
    body = []
    while not (yield from _check_token(state, ["}"])):
        if not state.tokens:
            raise ParsingError(f"EOF: Unexpected end of input: block opened on line {start.line_number} is not closed.")
        statement = yield from parse_statement(state, visual=visual)
        body.append(statement)
    yield from _expect_token(state, ["}"])
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return BlockStatement(body, start.line_number, title=title)


def parse_variable_declaration(state: _ParserState, consume_semicolon: bool = True):
    """Parse a variable declaration.
    <var_decl> ::= ('var' | 'let' | 'const') <declarator> (',' <declarator>)* ';'?
    <declarator> ::= IDENTIFIER ('=' <assignment>)?
    """
    kind = yield from _expect_token(state, ["var", "let", "const"])
    declarations = []
    while True:
        name = yield from _expect_token(state, [TokenType.IDENTIFIER])
        init = None
        if (yield from _match_token(state, ["="])):
            init = yield from parse_expression_inner(state)
        declarations.append(
            VariableDeclarator(Identifier(name.value, name.line_number), init, name.line_number)
        )
        if not (yield from _match_token(state, [","])):
            break
    if consume_semicolon:
        yield from _consume_semicolon(state)
    return VariableDeclaration(kind.value, declarations, kind.line_number)


def parse_if_statement(state: _ParserState, visual: bool = True):
    """Parse an IF statement.
    <if_stmt> ::= 'if' '(' <expression> ')' <statement> ('else' <statement>)?
    """
    keyword = yield from _expect_token(state, ["if"])
    node_id = (yield from _visual_begin(state, "If Statement:")) if visual else None
    yield from _expect_token(state, ["("])
    test = yield from parse_expression(state)
    yield from _expect_token(state, [")"])
    if visual:
        yield from _emit_ast_subtree(state, Labelled("Condition", [test], keyword.line_number))
    consequent = yield from parse_branch(state, "Then Branch", visual)
    alternate = None
    if (yield from _match_token(state, ["else"])):
        alternate = yield from parse_branch(state, "Else Branch", visual)
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return IfStatement(test, consequent, keyword.line_number, alternate)


def parse_branch(state: _ParserState, title: str, visual: bool):
    """Parse the statement governed by a control keyword, titled for the UI."""
    if (yield from _check_token(state, ["{"])):
        return (yield from parse_block(state, title=title, visual=visual))
    node_id = (yield from _visual_begin(state, title)) if visual else None
    statement = yield from parse_statement(state, visual=visual)
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return statement


def parse_for_statement(state: _ParserState, visual: bool = True):
    """Parse a counted loop.
    <for_stmt> ::= 'for' '(' (<var_decl_no_semi> | <expression>)? ';' <expression>? ';' <expression>? ')' <statement>
    """
    keyword = yield from _expect_token(state, ["for"])
    node_id = (yield from _visual_begin(state, "For Statement")) if visual else None
    yield from _expect_token(state, ["("])
    init = None
    if (yield from _check_token(state, ["var", "let", "const"])):
        init = yield from parse_variable_declaration(state, consume_semicolon=False)
    elif not (yield from _check_token(state, [";"])):
        init = yield from parse_expression(state)
    yield from _expect_token(state, [";"])
    test = None
    if not (yield from _check_token(state, [";"])):
        test = yield from parse_expression(state)
    yield from _expect_token(state, [";"])
    update = None
    if not (yield from _check_token(state, [")"])):
        update = yield from parse_expression(state)
    yield from _expect_token(state, [")"])
    if visual:
        for title, part in (("Init", init), ("Test", test), ("Update", update)):
            if part is not None:
                yield from _emit_ast_subtree(state, Labelled(title, [part], keyword.line_number))
    body = yield from parse_branch(state, "Body", visual)
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return ForStatement(init, test, update, body, keyword.line_number)


def parse_while_statement(state: _ParserState, visual: bool = True):
    """Parse a pre-tested loop.
    <while_stmt> ::= 'while' '(' <expression> ')' <statement>
    """
    keyword = yield from _expect_token(state, ["while"])
    node_id = (yield from _visual_begin(state, "While Statement")) if visual else None
    yield from _expect_token(state, ["("])
    test = yield from parse_expression(state)
    yield from _expect_token(state, [")"])
    if visual:
        yield from _emit_ast_subtree(state, Labelled("Condition", [test], keyword.line_number))
    body = yield from parse_branch(state, "Body", visual)
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return WhileStatement(test, body, keyword.line_number)


def parse_do_while_statement(state: _ParserState, visual: bool = True):
    """<do_while> ::= 'do' <statement> 'while' '(' <expression> ')' ';'?"""
    keyword = yield from _expect_token(state, ["do"])
    node_id = (yield from _visual_begin(state, "Do-While Statement")) if visual else None
    body = yield from parse_branch(state, "Body", visual)
    yield from _expect_token(state, ["while"])
    yield from _expect_token(state, ["("])
    test = yield from parse_expression(state)
    yield from _expect_token(state, [")"])
    yield from _consume_semicolon(state)
    if visual:
        yield from _emit_ast_subtree(state, Labelled("Condition", [test], keyword.line_number))
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return DoWhileStatement(body, test, keyword.line_number)


def parse_function_declaration(state: _ParserState, visual: bool = True):
    """<function_decl> ::= 'async'? 'function' IDENTIFIER <params> <block>"""
    is_async = (yield from _match_token(state, ["async"])) is not None
    keyword = yield from _expect_token(state, ["function"])
    name = yield from _expect_token(state, [TokenType.IDENTIFIER])
    label = f"{'Async ' if is_async else ''}Function Declaration: {name.value}"
    node_id = (yield from _visual_begin(state, label)) if visual else None
    params = yield from parse_parameters(state)
    body = yield from parse_block(state, title="Body", visual=visual)
    if node_id is not None:
        yield from _visual_end(state, node_id)
    return FunctionDeclaration(
        Identifier(name.value, name.line_number), params, body, keyword.line_number, is_async=is_async
    )


def parse_statement(state: _ParserState, visual: bool = True):
    """Parse one statement.
    <statement> ::= <block> | <var_decl> | <if_stmt> | <for_stmt> | <while_stmt>
                  | <do_while> | <function_decl> | 'return' <expression>? ';'?
                  | 'break' ';'? | 'continue' ';'? | ';' | <expr_stmt>
    """
    token = yield from _peek_token(state)
    if token is None:
        raise ParsingError("EOF: Unexpected end of input while parsing statement.")

    if (yield from _check_token(state, ["{"])):
        return (yield from parse_block(state, visual=visual))
    if (yield from _check_token(state, ["var", "let", "const"])):
        statement = yield from parse_variable_declaration(state)
    elif (yield from _check_token(state, ["if"])):
        return (yield from parse_if_statement(state, visual))
    elif (yield from _check_token(state, ["for"])):
        return (yield from parse_for_statement(state, visual))
    elif (yield from _check_token(state, ["while"])):
        return (yield from parse_while_statement(state, visual))
    elif (yield from _check_token(state, ["do"])):
        return (yield from parse_do_while_statement(state, visual))
    elif (yield from _check_token(state, ["function"])) or (
        (yield from _check_token(state, ["async"])) and (yield from _check_token(state, ["function"], offset=1))
    ):
        return (yield from parse_function_declaration(state, visual))
    elif (yield from _match_token(state, ["return"])):
        argument = None
        if not (yield from _check_token(state, [";", "}"])) and state.tokens and state.tokens[0].line_number == token.line_number:
            argument = yield from parse_expression(state)
        yield from _consume_semicolon(state)
        statement = ReturnStatement(argument, token.line_number)
    elif (yield from _match_token(state, ["break"])):
        yield from _consume_semicolon(state)
        statement = BreakStatement(token.line_number)
    elif (yield from _match_token(state, ["continue"])):
        yield from _consume_semicolon(state)
        statement = ContinueStatement(token.line_number)
    elif (yield from _match_token(state, [";"])):
        statement = EmptyStatement(token.line_number)
    else:
        expression = yield from parse_expression(state)
        yield from _consume_semicolon(state)
        statement = ExpressionStatement(expression, token.line_number)

    if visual:
        yield from _emit_ast_subtree(state, statement)
    return statement


def get_parsing_reporter(
    tokens: list[Token], filename: str = ""
) -> Generator[ParsingReport, None, Program]:
    """Parse a token list into a `Program`, reporting every step.

    Args:
        tokens (list[Token]): Working token list. It is consumed.
        filename (str): Label used in the final report.

    Yields:
        ParsingReport: token consumption and visual AST events.

    Returns:
        Program: the root node (available as `StopIteration.value`).

    Raises:
        ParsingError: on the first syntax error.
    """
    state = _ParserState(tokens)
    body = []
    while state.tokens:
        statement = yield from parse_statement(state)
        body.append(statement)
    report = _new_report(state, f"Parsing of {filename or 'source'} completed.")
    yield report
    return Program(body)


def parse_tokens(tokens: list[Token]) -> Program:
    """Drive `get_parsing_reporter` to completion."""
    reporter = get_parsing_reporter(list(tokens))
    while True:
        try:
            next(reporter)
        except StopIteration as done:
            return done.value


def parse_source(source_code: str) -> Program:
    """Trim, tokenize and parse source text.

    Raises:
        LexingError: on malformed tokens.
        ParsingError: on syntax errors.
    """
    return parse_tokens(tokenize(source_code))
