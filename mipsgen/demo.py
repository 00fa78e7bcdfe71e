"""
Demonstration program for mipsgen

The tree is equivalent to:
    foo = 123 + (321 - 123)
    bar = "foobar"
    baz = bar
"""

from .ast import Program, Assignment, ArithmeticOp, Ident, Integer, String


def build_demo_program():
    return Program([
        Assignment(
            "foo",
            ArithmeticOp(
                Integer("123"),
                "add",
                ArithmeticOp(
                    Integer("321"),
                    "sub",
                    Integer("123"),
                ),
            ),
        ),
        Assignment("bar", String("foobar")),
        Assignment("baz", Ident("bar")),
    ])


DEMO_PROGRAM = build_demo_program()
