"""Semantic validation for programs handed to the code generator."""
from . import ast


# Physical temporaries on the target ($t0-$t9)
SCRATCH_REGISTERS = 10


class ValidationError(Exception):
    """Exception raised for validation errors."""
    pass


class Validator:
    """Validates a Program before code generation.

    The generator itself never checks the tree; unbound identifiers there
    just produce an instruction without a location. Running the validator
    first turns those cases into reported errors.
    """

    def __init__(self, program):
        self.program = program
        self.errors = []
        self.warnings = []
        self.bound = set()  # names assigned so far, in program order
        self.leaves = 0  # expression leaves, one scratch register each

    def validate(self):
        """Run all validation checks on the program.
        Returns the list of warnings; raises ValidationError on errors."""
        if not isinstance(self.program, ast.Program):
            raise ValidationError(f"expected a Program, got {type(self.program).__name__}")

        for index, stmt in enumerate(self.program.nodes):
            if isinstance(stmt, ast.Assignment):
                self._validate_assignment(stmt)
            elif isinstance(stmt, ast.NODE_TYPES):
                self.errors.append(
                    f"statement {index + 1}: only assignments are allowed at the top level, "
                    f"got {type(stmt).__name__}")
            else:
                self.errors.append(f"statement {index + 1}: unknown node {stmt!r}")

        if self.leaves > SCRATCH_REGISTERS:
            self.warnings.append(
                f"program needs {self.leaves} scratch registers but the target only has "
                f"{SCRATCH_REGISTERS} ($t0-$t{SCRATCH_REGISTERS - 1})")

        if self.errors:
            raise ValidationError("\n".join(self.errors))
        return self.warnings

    def _validate_assignment(self, stmt):
        # The value is evaluated before the name is bound, so `a = a` is
        # a use before assignment when `a` is new.
        self._validate_expr(stmt.value)
        if stmt.name in self.bound:
            self.warnings.append(
                f"'{stmt.name}' is re-assigned; the new value gets a fresh stack slot")
        self.bound.add(stmt.name)

    def _validate_expr(self, expr):
        if isinstance(expr, ast.ArithmeticOp):
            if expr.op not in ast.ARITHMETIC_OPS:
                self.errors.append(
                    f"unknown operator '{expr.op}' in '{expr.to_source()}' "
                    f"(expected one of {', '.join(ast.ARITHMETIC_OPS)})")
            self._validate_expr(expr.left)
            self._validate_expr(expr.right)
        elif isinstance(expr, ast.Ident):
            self.leaves += 1
            if expr.name not in self.bound:
                self.errors.append(f"identifier '{expr.name}' used before assignment")
        elif isinstance(expr, ast.Integer):
            self.leaves += 1
            text = str(expr.value).lstrip("-")
            if not text.isdigit():
                self.warnings.append(f"integer literal '{expr.value}' is not a decimal number")
        elif isinstance(expr, ast.String):
            self.leaves += 1
        elif isinstance(expr, (ast.Program, ast.Assignment)):
            self.errors.append(f"{type(expr).__name__} cannot be used as an expression")
        else:
            self.errors.append(f"unknown node {expr!r}")
