from dataclasses import dataclass, field
from typing import List, Any


# Operator tags accepted by ArithmeticOp; each maps 1:1 onto a MIPS opcode
ARITHMETIC_OPS = ("add", "sub", "mul", "div")

# Source-level spelling, only used for debug output
OP_SYMBOLS = {
    'add': '+',
    'sub': '-',
    'mul': '*',
    'div': '/',
}


@dataclass
class Program:
    """The entire program; a container for top-level statements."""
    nodes: List[Any] = field(default_factory=list)

    def to_source(self) -> str:
        return "; ".join(_source(n) for n in self.nodes)


@dataclass(frozen=True)
class Assignment:
    """name = value"""
    name: str
    value: Any

    def to_source(self) -> str:
        return f"{self.name} = {_source(self.value)}"


@dataclass(frozen=True)
class ArithmeticOp:
    """left <op> right, where op is one of ARITHMETIC_OPS."""
    left: Any
    op: str
    right: Any

    def to_source(self) -> str:
        left = _source(self.left)
        right = _source(self.right)
        # parenthesize nested operations so the tree shape survives
        if isinstance(self.left, ArithmeticOp):
            left = f"({left})"
        if isinstance(self.right, ArithmeticOp):
            right = f"({right})"
        return f"{left} {OP_SYMBOLS.get(self.op, self.op)} {right}"


@dataclass(frozen=True)
class Ident:
    name: str

    def to_source(self) -> str:
        return self.name


@dataclass(frozen=True)
class Integer:
    value: str  # literal text, emitted as-is

    def to_source(self) -> str:
        return self.value


@dataclass(frozen=True)
class String:
    value: str

    def to_source(self) -> str:
        return f'"{self.value}"'


EXPRESSION_TYPES = (ArithmeticOp, Ident, Integer, String)
NODE_TYPES = (Program, Assignment) + EXPRESSION_TYPES


def _source(node) -> str:
    if hasattr(node, "to_source"):
        return node.to_source()
    return repr(node)
