"""
Abstract Syntax Tree (AST) node definitions for Jerboa.

The tree is produced once per program by the parser and is never mutated
afterwards. Every node carries the source span it was parsed from; spans are
excluded from equality so that two parses of the same text compare equal.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
from abc import ABC
from .tokens import SourceSpan, TokenKind, SYMBOLS


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: Optional[SourceSpan] = field(compare=False, repr=False)

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str


@dataclass(frozen=True)
class Identifier(Expression):
    """A variable or function name reference."""
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """A binary operation (e.g., a + b, x == y)."""
    left: Expression
    operator: TokenKind
    right: Expression


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """A prefix operation (e.g., !x, -n)."""
    operator: TokenKind
    operand: Expression


@dataclass(frozen=True)
class GroupedExpression(Expression):
    """A parenthesised sub-expression. Transparent at runtime."""
    expression: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """A call of a named function (e.g., add(1, 2))."""
    callee: str
    arguments: List[Expression]


@dataclass(frozen=True)
class IfExpression(Expression):
    """An if-else expression (returns a value).

    Syntax:
        if condition { ... }
        if condition { ... } else { ... }
        if condition { ... } else if other { ... }
    """
    condition: Expression
    consequence: "Statement"
    alternative: Optional["Statement"] = None


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """An anonymous function (e.g., fn(x, y) { x + y })."""
    parameters: List[str]
    body: "Statement"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass(frozen=True)
class VarStatement(Statement):
    """A binding in the innermost scope: let name = value;"""
    name: str
    value: Expression


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Early exit from the enclosing function: return value;"""
    value: Expression


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """An expression used as a statement; its value is the statement's result."""
    expression: Expression


@dataclass(frozen=True)
class BlockStatement(Statement):
    """A braced sequence of statements forming a new lexical scope."""
    statements: List[Statement]


@dataclass(frozen=True)
class Program(AstNode):
    """The top-level statements of a source text, in order."""
    statements: List[Statement]


# =============================================================================
# Visitor Helpers
# =============================================================================

class SourceFormatter(AstVisitor):
    """Render nodes back to source-like text."""

    def __init__(self, indent: str = "    "):
        self.indent = indent
        self.depth = 0

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> str:
        return str(node.value)

    def visit_BooleanLiteral(self, node: BooleanLiteral) -> str:
        return "true" if node.value else "false"

    def visit_StringLiteral(self, node: StringLiteral) -> str:
        escaped = node.value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'

    def visit_Identifier(self, node: Identifier) -> str:
        return node.name

    def visit_BinaryExpression(self, node: BinaryExpression) -> str:
        return f"{node.left.accept(self)} {SYMBOLS[node.operator]} {node.right.accept(self)}"

    def visit_UnaryExpression(self, node: UnaryExpression) -> str:
        return f"{SYMBOLS[node.operator]}{node.operand.accept(self)}"

    def visit_GroupedExpression(self, node: GroupedExpression) -> str:
        return f"({node.expression.accept(self)})"

    def visit_CallExpression(self, node: CallExpression) -> str:
        args = ", ".join(arg.accept(self) for arg in node.arguments)
        return f"{node.callee}({args})"

    def visit_IfExpression(self, node: IfExpression) -> str:
        text = f"if {node.condition.accept(self)} {node.consequence.accept(self)}"
        if node.alternative is not None:
            if isinstance(node.alternative, ExpressionStatement):
                # else-if chain
                text += f" else {node.alternative.expression.accept(self)}"
            else:
                text += f" else {node.alternative.accept(self)}"
        return text

    def visit_FunctionLiteral(self, node: FunctionLiteral) -> str:
        return f"fn({', '.join(node.parameters)}) {node.body.accept(self)}"

    def visit_VarStatement(self, node: VarStatement) -> str:
        return f"let {node.name} = {node.value.accept(self)};"

    def visit_ReturnStatement(self, node: ReturnStatement) -> str:
        return f"return {node.value.accept(self)};"

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> str:
        return f"{node.expression.accept(self)};"

    def visit_BlockStatement(self, node: BlockStatement) -> str:
        if not node.statements:
            return "{ }"
        self.depth += 1
        pad = self.indent * self.depth
        lines = [f"{pad}{stmt.accept(self)}" for stmt in node.statements]
        self.depth -= 1
        return "{\n" + "\n".join(lines) + "\n" + self.indent * self.depth + "}"

    def visit_Program(self, node: Program) -> str:
        return "\n".join(stmt.accept(self) for stmt in node.statements)


def format_node(node: AstNode) -> str:
    """Render a node as source text."""
    return node.accept(SourceFormatter())


class PrintVisitor(AstVisitor):
    """Debug visitor that prints the AST structure."""

    def __init__(self, indent: int = 0):
        self.indent = indent

    def _print(self, text: str) -> None:
        print("  " * self.indent + text)

    def generic_visit(self, node: AstNode) -> None:
        self._print(f"{node.__class__.__name__}")
        for name, value in node.__dict__.items():
            if name == "span":
                continue
            if isinstance(value, AstNode):
                self._print(f"  {name}:")
                PrintVisitor(self.indent + 2).generic_visit(value)
            elif isinstance(value, list):
                self._print(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        PrintVisitor(self.indent + 2).generic_visit(item)
                    else:
                        self._print(f"    {item!r}")
                self._print("  ]")
            elif isinstance(value, TokenKind):
                self._print(f"  {name}: {SYMBOLS.get(value, value.name)}")
            else:
                self._print(f"  {name}: {value!r}")


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    PrintVisitor().generic_visit(node)
