import pytest

from TranslatorComponents.AST import (
    ArrayExpression,
    AssignmentExpression,
    AwaitExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ConditionalExpression,
    DoWhileStatement,
    ExpressionStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    WhileStatement,
)
from TranslatorComponents.Lexer import tokenize
from TranslatorComponents.Parser import ParsingError, get_parsing_reporter, parse_source, parse_tokens


def expression_of(source):
    program = parse_source(source)
    statement = program.body[0]
    assert isinstance(statement, ExpressionStatement)
    return statement.expression


def test_multiplication_binds_tighter_than_addition():
    expr = expression_of("a + b * c;")
    assert isinstance(expr, BinaryExpression) and expr.operator == "+"
    assert isinstance(expr.right, BinaryExpression) and expr.right.operator == "*"


def test_subtraction_is_left_associative():
    expr = expression_of("a - b - c;")
    assert expr.operator == "-"
    assert isinstance(expr.left, BinaryExpression)
    assert isinstance(expr.right, Identifier) and expr.right.name == "c"


def test_exponent_is_right_associative():
    expr = expression_of("a ** b ** c;")
    assert isinstance(expr.left, Identifier)
    assert isinstance(expr.right, BinaryExpression) and expr.right.operator == "**"


def test_parentheses_override_precedence():
    expr = expression_of("(a + b) * c;")
    assert expr.operator == "*"
    assert expr.left.operator == "+"


def test_logical_and_comparison():
    expr = expression_of("a < 1 && b === 2 || !c;")
    assert isinstance(expr, LogicalExpression) and expr.operator == "||"
    assert expr.left.operator == "&&"
    assert expr.left.right.operator == "==="
    assert isinstance(expr.right, UnaryExpression) and expr.right.operator == "!"


def test_assignment_is_right_associative():
    expr = expression_of("a = b = 3;")
    assert isinstance(expr, AssignmentExpression)
    assert isinstance(expr.value, AssignmentExpression)


def test_compound_assignment():
    expr = expression_of("a += 2;")
    assert expr.operator == "+="


def test_invalid_assignment_target():
    with pytest.raises(ParsingError, match="Invalid assignment target"):
        parse_source("1 = a;")


def test_await_call_on_member():
    expr = expression_of("await Robot.setDegrees(17, 30);")
    assert isinstance(expr, AwaitExpression)
    call = expr.argument
    assert isinstance(call, CallExpression)
    assert call.callee_name() == "Robot.setDegrees"
    assert [argument.value for argument in call.arguments] == [17, 30]


def test_computed_member_and_length():
    expr = expression_of("items[i + 1].length;")
    assert isinstance(expr, MemberExpression) and not expr.computed
    assert expr.property.name == "length"
    assert expr.object.computed
    assert expr.object.property.operator == "+"


def test_literals():
    program = parse_source("x = [1, 2.5, 'a', true, null];")
    elements = program.body[0].expression.value.elements
    assert [element.kind for element in elements] == ["number", "number", "string", "boolean", "null"]
    assert elements[0].is_number and isinstance(elements[0].value, int)
    assert elements[1].value == 2.5
    assert elements[2].is_string
    assert elements[3].value is True
    assert elements[4].value is None


def test_hex_number_value():
    assert expression_of("0x10;").value == 16


def test_conditional_expression():
    expr = expression_of("a ? 1 : 2;")
    assert isinstance(expr, ConditionalExpression)


def test_update_expressions():
    assert expression_of("i++;").prefix is False
    expr = expression_of("--i;")
    assert isinstance(expr, UpdateExpression) and expr.prefix and expr.operator == "--"


def test_var_declaration_with_several_declarators():
    statement = parse_source("var a = 1, b;").body[0]
    assert isinstance(statement, VariableDeclaration)
    assert [declarator.name.name for declarator in statement.declarations] == ["a", "b"]
    assert statement.declarations[1].init is None


def test_if_else_if_chain():
    statement = parse_source("if (a) { x(); } else if (b) y(); else { z(); }").body[0]
    assert isinstance(statement, IfStatement)
    assert isinstance(statement.consequent, BlockStatement)
    assert isinstance(statement.alternate, IfStatement)
    assert isinstance(statement.alternate.alternate, BlockStatement)


def test_for_statement_parts():
    statement = parse_source("for (let i = 0; i < 10; i++) { sleep(1); }").body[0]
    assert isinstance(statement, ForStatement)
    assert isinstance(statement.init, VariableDeclaration)
    assert statement.test.operator == "<"
    assert isinstance(statement.update, UpdateExpression)
    assert len(statement.body.body) == 1


def test_while_and_do_while():
    program = parse_source("while (x) { x = x - 1; }\ndo { y(); } while (y < 3);")
    assert isinstance(program.body[0], WhileStatement)
    assert isinstance(program.body[1], DoWhileStatement)


def test_functions_and_arrows():
    program = parse_source("async function go(a, b) { return a; }\nf = (x) => x * 2;\ng = y => y;")
    declaration = program.body[0]
    assert isinstance(declaration, FunctionDeclaration)
    assert declaration.is_async
    assert [param.name for param in declaration.params] == ["a", "b"]
    assert isinstance(program.body[1].expression.value, FunctionExpression)
    assert program.body[2].expression.value.is_arrow


def test_semicolons_are_optional():
    program = parse_source("a = 1\nb = 2")
    assert len(program.body) == 2


def test_array_expression():
    expr = expression_of("[0, 0, 10, 0, 15, 0];")
    assert isinstance(expr, ArrayExpression) and len(expr.elements) == 6


def test_line_numbers():
    program = parse_source("\n\nlogConsole('x');")
    assert program.body[0].line == 3


@pytest.mark.parametrize(
    "source, fragment",
    [
        ("var = ;", "Line 1: Expected token IDENTIFIER"),
        ("if (a { }", "Expected token )"),
        ("x = (1 + 2", "EOF: Unexpected end of input"),
        ("while (x) {", "not closed"),
        ("x = ;", "Unexpected token in primary expression"),
    ],
)
def test_syntax_errors(source, fragment):
    with pytest.raises(ParsingError) as error:
        parse_source(source)
    assert fragment in str(error.value)


def test_parsing_reporter_returns_program_and_reports_tokens():
    tokens = tokenize("x = 1;")
    reporter = get_parsing_reporter(list(tokens), filename="demo")
    reports = []
    while True:
        try:
            reports.append(next(reporter))
        except StopIteration as done:
            program = done.value
            break
    assert len(program.body) == 1
    assert reports[-1].action_bar_message == "Parsing of demo completed."
    assert any(report.ast_event is not None for report in reports)
    consumed = [report.looked_at_token.value for report in reports if report.looked_at_token is not None]
    assert "x" in consumed and ";" in consumed


def test_parsing_reporter_only_adds_and_completes_nodes():
    tokens = tokenize("if (a > 1) {\n  x = [1, 2];\n}")
    reports = list(get_parsing_reporter(list(tokens), filename="demo"))
    events = [report.ast_event for report in reports]
    assert set(events) == {None, "add", "complete"}
    added = {report.ast_node_id for report in reports if report.ast_event == "add"}
    completed = {report.ast_node_id for report in reports if report.ast_event == "complete"}
    assert completed <= added


def test_parse_tokens_keeps_the_callers_list():
    tokens = tokenize("x = 1;")
    parse_tokens(tokens)
    assert len(tokens) == 4


def test_literal_expression_statement():
    assert isinstance(expression_of("'hello';"), Literal)
