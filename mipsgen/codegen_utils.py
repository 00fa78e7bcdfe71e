"""Utility functions for code generation."""

from dataclasses import dataclass
from typing import Tuple


# An instruction carries at most three operands: op a, b, c
MAX_OPERANDS = 3


class EmitError(Exception):
    """Raised when the generator tries to emit a malformed instruction."""
    pass


@dataclass(frozen=True)
class Instruction:
    """An instruction of the form: opcode a, b, c

    Blank operands are kept in `args` and skipped when rendering.
    """
    opcode: str
    args: Tuple[str, str, str]

    def __str__(self):
        return f"{self.opcode} {','.join(filter_out_blank(self.args))}"


def filter_out_blank(items):
    """Return the items that are not empty strings."""
    return [s for s in items if s != ""]


def make_instruction(*params) -> Instruction:
    """Build an Instruction from (opcode, operand...).
    Missing operands are padded with blanks so every record has three."""
    if not params:
        raise EmitError("no opcode supplied to emit")
    if len(params) > MAX_OPERANDS + 1:
        raise EmitError(f"too many arguments supplied to emit: {params!r}")
    opcode, operands = params[0], list(params[1:])
    operands += [""] * (MAX_OPERANDS - len(operands))
    return Instruction(opcode, tuple(operands))


def format_data_entry(label, text):
    """string1: .asciiz "abc" """
    return f'{label}: .asciiz "{text}"'


def frame_location(offset, base="$sp"):
    """Location of a word stored `offset` bytes below the frame base."""
    return f"-{offset}({base})"


def expr_to_comment(expr):
    """Best-effort string for an expression to emit in log messages."""
    if hasattr(expr, "to_source"):
        return expr.to_source()
    text = str(expr)
    return " ".join(text.split())  # collapse whitespace/newlines
