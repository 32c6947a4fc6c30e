### Define AST nodes for the robot scripting language (a JavaScript subset). ###

from __future__ import annotations

from typing import Any

from TranslatorComponents.Types import ASTNodeId


class ASTNode:
    """Base class for all AST nodes.

    ```BNF:
        <ast_node> ::= <expression> | <statement> | <program>
```
    Attributes:
        line (int): 1-based source line number where this node originates.
        edges (list[ASTNode]): Canonical child nodes used for AST display and UI tree projection.
        override_last (bool | None): UI hint used by `tree_representation()` to override whether
            this node is rendered as the last child.
        unique_id (ASTNodeId | None): UI tree node id assigned when the tree is displayed.

    Methods:
        tree_representation(prefix: str = "", is_last: bool = True) -> str:
            Produces a human-readable tree (debug/UI).
        unindented_representation() -> str:
            One-line label used in the AST tree.

    Notes:
        Nodes carry no translation logic. The block translator dispatches on
        the node class with structural pattern matching.
    """

    def __init__(self, line: int):
        self.line: int = line
        self.edges: list[ASTNode] = []
        self.override_last = None
        self.unique_id: ASTNodeId | None = None

    def tree_representation(self, prefix="", is_last=True) -> str:
        """Return a string representation of the node with indentation.

        Args:
            prefix (str): Prefix string to render before this node (used recursively).
            is_last (bool): Whether this node is rendered as the last child.

        Returns:
            str: The indented string representation of the node.
        """
        if self.override_last is not None:
            is_last = self.override_last
        connector = "└── " if is_last else "├── "
        extension = "    " if is_last else "│   "
        unindented_rep = self.unindented_representation()
        result = f"{prefix}{connector}{unindented_rep}" if unindented_rep else ""
        if self.edges and unindented_rep:
            result += "\n"
        for i, edge in enumerate(self.edges):
            is_last_edge = i == len(self.edges) - 1
            result += edge.tree_representation(f"{prefix}{extension}", is_last_edge)
            if i < len(self.edges) - 1:
                result += "\n"
        return result

    def unindented_representation(self) -> str:
        """Return the one-line label for this node.

        Returns:
            str: Label used by `tree_representation()` and the UI tree.
        """
        raise NotImplementedError(
            "Subclasses must implement unindented_representation method"
        )


class Expression(ASTNode):
    """Base class for expressions."""


class Statement(ASTNode):
    """Base class for statements."""


class Labelled(ASTNode):
    """Display-only grouping node (e.g. "Arguments", "Then Branch").

    It wraps a list of children under a title so the UI tree reads like the
    source. The translator never sees it: each node keeps its real children
    as attributes.
    """

    def __init__(self, title: str, children: list[ASTNode], line: int):
        super().__init__(line)
        self.title = title
        self.edges = list(children)

    def unindented_representation(self) -> str:
        return self.title

    def __repr__(self):
        return f"LabelledNode({self.title}, {self.edges})"


### Expressions ###


class Literal(Expression):
    """Literal value.

    ```BNF:
        <literal> ::= NUMBER_LITERAL | STRING_LITERAL | BOOLEAN_LITERAL | NULL_LITERAL
```
    Attributes:
        kind (str): One of "number", "string", "boolean", "null".
        value (int | float | str | bool | None): Decoded Python value.
        raw (str): The literal as it appeared in the token stream.
    """

    def __init__(self, kind: str, value: Any, raw: str, line: int):
        super().__init__(line)
        self.kind = kind
        self.value = value
        self.raw = raw

    @property
    def is_number(self) -> bool:
        return self.kind == "number"

    @property
    def is_string(self) -> bool:
        return self.kind == "string"

    def unindented_representation(self) -> str:
        if self.kind == "string":
            return f'Literal: "{self.value}" (string)'
        return f"Literal: {self.raw} ({self.kind})"

    def __repr__(self):
        return f"LiteralNode({self.kind}, {self.value!r}, line {self.line})"


class Identifier(Expression):
    """Identifier reference.

    ```BNF:
        <identifier> ::= IDENTIFIER
```
    Attributes:
        name (str): Identifier name.
    """

    def __init__(self, name: str, line: int):
        super().__init__(line)
        self.name = name

    def unindented_representation(self) -> str:
        return f"Identifier: {self.name}"

    def __repr__(self):
        return f"IdentifierNode({self.name}, line {self.line})"


class UnaryExpression(Expression):
    """Prefix unary expression.

    ```BNF:
        <unary> ::= ('-' | '+' | '!') <unary> | <update>
```
    Attributes:
        operator (str): "-", "+" or "!".
        operand (Expression): Operand expression.
    """

    def __init__(self, operator: str, operand: Expression, line: int):
        super().__init__(line)
        self.operator = operator
        self.operand = operand
        self.edges = [operand]

    def unindented_representation(self) -> str:
        return "Unary Expression: " + self.operator

    def __repr__(self):
        return f"UnaryExprNode({self.operator}, {self.operand}, line {self.line})"


class UpdateExpression(Expression):
    """Increment or decrement (`i++`, `--i`).

    Parsed so that loop headers read naturally. It has no block equivalent.
    """

    def __init__(self, operator: str, argument: Expression, prefix: bool, line: int):
        super().__init__(line)
        self.operator = operator
        self.argument = argument
        self.prefix = prefix
        self.edges = [argument]

    def unindented_representation(self) -> str:
        position = "prefix" if self.prefix else "postfix"
        return f"Update Expression: {self.operator} ({position})"

    def __repr__(self):
        return f"UpdateExprNode({self.operator}, {self.argument}, prefix={self.prefix}, line {self.line})"


class AwaitExpression(Expression):
    """`await` wrapper. The translator looks straight through it.

    ```BNF:
        <unary> ::= 'await' <unary>
```
    """

    def __init__(self, argument: Expression, line: int):
        super().__init__(line)
        self.argument = argument
        self.edges = [argument]

    def unindented_representation(self) -> str:
        return "Await"

    def __repr__(self):
        return f"AwaitNode({self.argument}, line {self.line})"


class BinaryExpression(Expression):
    """Binary arithmetic or comparison expression.

    ```BNF:
        <exponent> ::= <unary> ('**' <exponent>)?
        <multiplicative> ::= <exponent> (('*' | '/' | '%') <exponent>)*
        <additive> ::= <multiplicative> (('+' | '-') <multiplicative>)*
        <relational> ::= <additive> (('<' | '<=' | '>' | '>=') <additive>)*
        <equality> ::= <relational> (('==' | '!=' | '===' | '!==') <relational>)*
```
    Attributes:
        left (Expression): Left operand.
        operator (str): Operator lexeme.
        right (Expression): Right operand.
    """

    def __init__(self, left: Expression, operator: str, right: Expression, line: int):
        super().__init__(line)
        self.left = left
        self.operator = operator
        self.right = right
        self.edges = [left, right]

    def unindented_representation(self) -> str:
        return "Binary Expression: " + self.operator

    def __repr__(self):
        return f"BinaryExprNode({self.left}, {self.operator}, {self.right}, line {self.line})"


class LogicalExpression(Expression):
    """Short-circuit logical expression.

    ```BNF:
        <logical_and> ::= <equality> ('&&' <equality>)*
        <logical_or> ::= <logical_and> ('||' <logical_and>)*
```
    """

    def __init__(self, left: Expression, operator: str, right: Expression, line: int):
        super().__init__(line)
        self.left = left
        self.operator = operator
        self.right = right
        self.edges = [left, right]

    def unindented_representation(self) -> str:
        return "Logical Expression: " + self.operator

    def __repr__(self):
        return f"LogicalExprNode({self.left}, {self.operator}, {self.right}, line {self.line})"


class ConditionalExpression(Expression):
    """Ternary `test ? consequent : alternate`. No block equivalent."""

    def __init__(self, test: Expression, consequent: Expression, alternate: Expression, line: int):
        super().__init__(line)
        self.test = test
        self.consequent = consequent
        self.alternate = alternate
        self.edges = [test, consequent, alternate]

    def unindented_representation(self) -> str:
        return "Conditional Expression"

    def __repr__(self):
        return f"ConditionalExprNode({self.test}, {self.consequent}, {self.alternate}, line {self.line})"


class AssignmentExpression(Expression):
    """Assignment, simple or compound.

    ```BNF:
        <assignment> ::= <conditional> (('=' | '+=' | '-=' | '*=' | '/=' | '%=') <assignment>)?
```
    Attributes:
        target (Identifier | MemberExpression): Assignment target.
        operator (str): "=" or a compound operator.
        value (Expression): Right-hand side.
    """

    def __init__(self, target: Expression, operator: str, value: Expression, line: int):
        super().__init__(line)
        self.target = target
        self.operator = operator
        self.value = value
        self.edges = [target, value]

    def unindented_representation(self) -> str:
        return "Assignment: " + self.operator

    def __repr__(self):
        return f"AssignmentNode({self.target}, {self.operator}, {self.value}, line {self.line})"


class MemberExpression(Expression):
    """Property or index access.

    ```BNF:
        <postfix> ::= <primary> ('.' IDENTIFIER | '[' <expression> ']')*
```
    Attributes:
        object (Expression): Accessed object.
        property (Expression): `Identifier` for dotted access, any expression for indexed access.
        computed (bool): True for `obj[expr]`, False for `obj.name`.
    """

    def __init__(self, object: Expression, property: Expression, computed: bool, line: int):
        super().__init__(line)
        self.object = object
        self.property = property
        self.computed = computed
        self.edges = [object, property]

    def dotted_name(self) -> str:
        """Return "a.b.c" for plain dotted chains, "" otherwise."""
        if self.computed or not isinstance(self.property, Identifier):
            return ""
        if isinstance(self.object, Identifier):
            return f"{self.object.name}.{self.property.name}"
        if isinstance(self.object, MemberExpression):
            head = self.object.dotted_name()
            return f"{head}.{self.property.name}" if head else ""
        return ""

    def unindented_representation(self) -> str:
        return "Index Access" if self.computed else "Property Access"

    def __repr__(self):
        return f"MemberNode({self.object}, {self.property}, computed={self.computed}, line {self.line})"


class CallExpression(Expression):
    """Function or method call.

    ```BNF:
        <postfix> ::= <primary> '(' (<assignment> (',' <assignment>)*)? ')'
```
    Attributes:
        callee (Expression): Called expression (identifier or member chain).
        arguments (list[Expression]): Call arguments in order.
    """

    def __init__(self, callee: Expression, arguments: list[Expression], line: int):
        super().__init__(line)
        self.callee = callee
        self.arguments = arguments
        self.edges = [callee, Labelled("Arguments", arguments, line)]

    def callee_name(self) -> str:
        """Return the dotted callee name, or "" for computed callees."""
        if isinstance(self.callee, Identifier):
            return self.callee.name
        if isinstance(self.callee, MemberExpression):
            return self.callee.dotted_name()
        return ""

    def unindented_representation(self) -> str:
        name = self.callee_name()
        return f"Call: {name}" if name else "Call"

    def __repr__(self):
        return f"CallNode({self.callee}, {self.arguments}, line {self.line})"


class ArrayExpression(Expression):
    """Array literal.

    ```BNF:
        <array> ::= '[' (<assignment> (',' <assignment>)*)? ']'
```
    """

    def __init__(self, elements: list[Expression], line: int):
        super().__init__(line)
        self.elements = elements
        self.edges = list(elements)

    def unindented_representation(self) -> str:
        return f"Array Literal ({len(self.elements)} elements)"

    def __repr__(self):
        return f"ArrayNode({self.elements}, line {self.line})"


class FunctionExpression(Expression):
    """Anonymous or arrow function. Kept in the AST so that callbacks parse;
    they have no block equivalent."""

    def __init__(self, params: list[Identifier], body: ASTNode, line: int, is_arrow: bool = False):
        super().__init__(line)
        self.params = params
        self.body = body
        self.is_arrow = is_arrow
        self.edges = [Labelled("Parameters", params, line), body]

    def unindented_representation(self) -> str:
        return "Arrow Function" if self.is_arrow else "Function Expression"

    def __repr__(self):
        return f"FunctionExprNode({self.params}, {self.body}, line {self.line})"


### Statements ###


class ExpressionStatement(Statement):
    """Expression used as a statement.

    ```BNF:
        <expr_stmt> ::= <expression> ';'?
```
    """

    def __init__(self, expression: Expression, line: int):
        super().__init__(line)
        self.expression = expression
        self.edges = [expression]

    def unindented_representation(self) -> str:
        return "Expression Statement"

    def __repr__(self):
        return f"ExprStmtNode({self.expression}, line {self.line})"


class VariableDeclarator(ASTNode):
    """One `name = init` pair of a declaration."""

    def __init__(self, name: Identifier, init: Expression | None, line: int):
        super().__init__(line)
        self.name = name
        self.init = init
        self.edges = [init] if init is not None else []

    def unindented_representation(self) -> str:
        return f"Declarator: {self.name.name}"

    def __repr__(self):
        return f"DeclaratorNode({self.name}, {self.init}, line {self.line})"


class VariableDeclaration(Statement):
    """Variable declaration with one or more declarators.

    ```BNF:
        <var_decl> ::= ('var' | 'let' | 'const') <declarator> (',' <declarator>)* ';'?
        <declarator> ::= IDENTIFIER ('=' <assignment>)?
```
    Attributes:
        kind (str): "var", "let" or "const".
        declarations (list[VariableDeclarator]): Declarators in source order.
    """

    def __init__(self, kind: str, declarations: list[VariableDeclarator], line: int):
        super().__init__(line)
        self.kind = kind
        self.declarations = declarations
        self.edges = list(declarations)

    def unindented_representation(self) -> str:
        return f"Variable Declaration: {self.kind}"

    def __repr__(self):
        return f"VarDeclNode({self.kind}, {self.declarations}, line {self.line})"


class BlockStatement(Statement):
    """Braced statement list.

    ```BNF:
        <block> ::= '{' <statement>* '}'
```
    Attributes:
        body (list[Statement]): Statements in source order.
        title (str): UI label (e.g. "Body", "Then Branch").
    """

    def __init__(self, body: list[Statement], line: int, title: str = "Block"):
        super().__init__(line)
        self.body = body
        self.title = title
        self.edges = list(body)

    def unindented_representation(self) -> str:
        return self.title

    def __repr__(self):
        return f"BlockNode({self.body}, line {self.line})"


class IfStatement(Statement):
    """IF/ELSE control-flow statement. `else if` chains nest an IfStatement
    as the alternate.

    ```BNF:
        <if_stmt> ::= 'if' '(' <expression> ')' <statement> ('else' <statement>)?
```
    Attributes:
        test (Expression): Condition to evaluate.
        consequent (Statement): Branch executed when the condition is true.
        alternate (Statement | None): Optional branch executed otherwise.
    """

    def __init__(
        self,
        test: Expression,
        consequent: Statement,
        line: int,
        alternate: Statement | None = None,
    ):
        super().__init__(line)
        self.test = test
        self.consequent = consequent
        self.alternate = alternate
        self.edges = [
            Labelled("Condition", [test], line),
            Labelled("Then Branch", [consequent], consequent.line),
        ]
        if alternate is not None:
            self.edges.append(Labelled("Else Branch", [alternate], alternate.line))

    def unindented_representation(self) -> str:
        return "If Statement:"

    def __repr__(self):
        return f"IfStmtNode({self.test}, {self.consequent}, else={self.alternate}, line {self.line})"


class ForStatement(Statement):
    """C-style counted loop.

    ```BNF:
        <for_stmt> ::= 'for' '(' (<var_decl_no_semi> | <expression>)? ';' <expression>? ';' <expression>? ')' <statement>
```
    Attributes:
        init (VariableDeclaration | Expression | None): Loop initializer.
        test (Expression | None): Loop condition.
        update (Expression | None): Step expression (not translated).
        body (Statement): Loop body.
    """

    def __init__(
        self,
        init: ASTNode | None,
        test: Expression | None,
        update: Expression | None,
        body: Statement,
        line: int,
    ):
        super().__init__(line)
        self.init = init
        self.test = test
        self.update = update
        self.body = body
        self.edges = [
            Labelled(title, [part], line)
            for title, part in (("Init", init), ("Test", test), ("Update", update))
            if part is not None
        ]
        self.edges.append(Labelled("Body", [body], body.line))

    def unindented_representation(self) -> str:
        return "For Statement"

    def __repr__(self):
        return f"ForStmtNode({self.init}, {self.test}, {self.update}, {self.body}, line {self.line})"


class WhileStatement(Statement):
    """Pre-tested loop.

    ```BNF:
        <while_stmt> ::= 'while' '(' <expression> ')' <statement>
```
    """

    def __init__(self, test: Expression, body: Statement, line: int):
        super().__init__(line)
        self.test = test
        self.body = body
        self.edges = [Labelled("Condition", [test], line), Labelled("Body", [body], body.line)]

    def unindented_representation(self) -> str:
        return "While Statement"

    def __repr__(self):
        return f"WhileStmtNode({self.test}, {self.body}, line {self.line})"


class DoWhileStatement(Statement):
    """Post-tested loop (`do ... while (test);`). No block equivalent."""

    def __init__(self, body: Statement, test: Expression, line: int):
        super().__init__(line)
        self.body = body
        self.test = test
        self.edges = [Labelled("Body", [body], body.line), Labelled("Condition", [test], line)]

    def unindented_representation(self) -> str:
        return "Do-While Statement"

    def __repr__(self):
        return f"DoWhileStmtNode({self.body}, {self.test}, line {self.line})"


class FunctionDeclaration(Statement):
    """Named function declaration. No block equivalent.

    ```BNF:
        <function_decl> ::= 'async'? 'function' IDENTIFIER '(' <params>? ')' <block>
```
    """

    def __init__(self, name: Identifier, params: list[Identifier], body: BlockStatement, line: int, is_async: bool = False):
        super().__init__(line)
        self.name = name
        self.params = params
        self.body = body
        self.is_async = is_async
        self.edges = [Labelled("Parameters", params, line), body]

    def unindented_representation(self) -> str:
        prefix = "Async " if self.is_async else ""
        return f"{prefix}Function Declaration: {self.name.name}"

    def __repr__(self):
        return f"FunctionDeclNode({self.name}, {self.params}, line {self.line})"


class ReturnStatement(Statement):
    def __init__(self, argument: Expression | None, line: int):
        super().__init__(line)
        self.argument = argument
        self.edges = [argument] if argument is not None else []

    def unindented_representation(self) -> str:
        return "Return Statement"

    def __repr__(self):
        return f"ReturnNode({self.argument}, line {self.line})"


class BreakStatement(Statement):
    def unindented_representation(self) -> str:
        return "Break Statement"

    def __repr__(self):
        return f"BreakNode(line {self.line})"


class ContinueStatement(Statement):
    def unindented_representation(self) -> str:
        return "Continue Statement"

    def __repr__(self):
        return f"ContinueNode(line {self.line})"


class EmptyStatement(Statement):
    def unindented_representation(self) -> str:
        return "Empty Statement"

    def __repr__(self):
        return f"EmptyNode(line {self.line})"


class Program(ASTNode):
    """Whole program: the top-level statement list.

    ```BNF:
        <program> ::= <statement>*
```
    """

    def __init__(self, body: list[Statement], line: int = 0):
        super().__init__(line)
        self.body = body
        self.edges = list(body)

    def unindented_representation(self) -> str:
        return "Program"

    def __repr__(self):
        return f"ProgramNode({self.body})"


def print_ast(ast_node):
    """Print the AST in a human-readable format."""
    print(ast_node.tree_representation(""))
