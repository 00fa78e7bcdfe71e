import argparse
import importlib
import logging
import sys

from . import ast, codegen, validator
from .demo import build_demo_program
from .register_allocator import RegisterAllocator, AllocationError
from .codegen_utils import EmitError

logger = logging.getLogger(__name__)


def load_program(ref):
    """Resolve a 'module:attribute' reference to a Program.
    The attribute may be a Program or a zero-argument callable returning one."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected 'module:attribute', got '{ref}'")
    module = importlib.import_module(module_name)
    obj = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if callable(obj):
        obj = obj()
    if not isinstance(obj, ast.Program):
        raise ValueError(f"'{ref}' is a {type(obj).__name__}, not a Program")
    return obj


def main(argv=None):
    ap = argparse.ArgumentParser(prog="mipsgen", description="MIPS code generator for expression/assignment trees")
    ap.add_argument("program", nargs="?",
                    help="Program to compile as module:attribute (default: built-in demo)")
    ap.add_argument("-o", "--output", help="Output assembly file (default: stdout)")
    ap.add_argument("--no-validate", action="store_true", help="Skip validation checks")
    ap.add_argument("--reuse-registers", action="store_true",
                    help="Recycle consumed temporaries instead of issuing fresh names")
    ap.add_argument("--lifo-operands", action="store_true",
                    help="Take the left arithmetic operand from the live-value stack in LIFO order")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.program:
        try:
            program = load_program(args.program)
        except (ImportError, AttributeError, ValueError) as e:
            print(f"Error: cannot load program {args.program}: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        program = build_demo_program()
    logger.debug("program: %s", program.to_source())

    # Run validation unless disabled
    if not args.no_validate:
        try:
            val = validator.Validator(program)
            warnings = val.validate()
            for warning in warnings:
                print(f"Warning: {warning}", file=sys.stderr)
        except validator.ValidationError as e:
            print(f"Validation error in {args.program or 'demo program'}:", file=sys.stderr)
            for line in str(e).splitlines():
                print(f"  {line}", file=sys.stderr)
            sys.exit(1)

    reg_alloc = RegisterAllocator(reuse=args.reuse_registers)
    cg = codegen.CodeGen(program, reg_alloc=reg_alloc, lifo_operands=args.lifo_operands)
    try:
        asm = cg.gen().assemble()
    except (AllocationError, EmitError) as e:
        print(f"Code generation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(asm)
        print(f"Wrote assembly to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(asm)


if __name__ == "__main__":
    main()
