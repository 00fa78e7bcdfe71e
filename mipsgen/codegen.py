import logging
import os

from jinja2 import Environment, FileSystemLoader

from . import ast
from . import codegen_utils
from .register_allocator import RegisterAllocator

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
PROGRAM_TEMPLATE = "mips.s.j2"

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    trim_blocks=True,
    keep_trailing_newline=True,
)


class CodeGen:
    """Lowers a Program tree into MIPS assembly.

    One instance handles one run: construct it, call gen(), then assemble().
    State (buffers, bindings, counters, live-value stack) is never shared
    between instances.
    """

    def __init__(self, program, reg_alloc=None, word_size=4, frame_register="$sp",
                 label_prefix="string", lifo_operands=False):
        self.program = program
        self.reg_alloc = reg_alloc if reg_alloc is not None else RegisterAllocator()
        self.word_size = word_size
        self.frame_register = frame_register
        self.label_prefix = label_prefix
        # False keeps the reference operand choice for arithmetic: the left
        # operand is always the first register issued in the run.
        self.lifo_operands = lifo_operands

        self.data_section = []  # data lines, without indentation
        self.main_section = []  # Instruction records in program order
        self.access_loc = {}  # variable name -> frame location
        self.name_offset = word_size  # offset for the next variable
        self.data_label_id = 1  # suffix for the next string label

    def emit_main(self, *params):
        """Emit an instruction: opcode followed by up to three operands."""
        instruction = codegen_utils.make_instruction(*params)
        logger.debug("emit %s", instruction)
        self.main_section.append(instruction)

    def emit_data(self, data):
        logger.debug("data %s", data)
        self.data_section.append(data)

    def _next_data_label(self):
        label = f"{self.label_prefix}{self.data_label_id}"
        self.data_label_id += 1
        return label

    def _bind(self, name):
        """Give `name` a fresh stack slot. Re-assignment never reuses the old slot."""
        location = codegen_utils.frame_location(self.name_offset, self.frame_register)
        if name in self.access_loc:
            logger.debug("rebinding %s from %s to %s", name, self.access_loc[name], location)
        self.access_loc[name] = location
        self.name_offset += self.word_size
        return location

    def gen(self):
        """Generate code for the whole program. Returns self for chaining."""
        self.generate(self.program)
        return self

    def generate(self, node):
        if isinstance(node, ast.Program):
            self._gen_program(node)
        elif isinstance(node, ast.ArithmeticOp):
            self._gen_arithmetic_op(node)
        elif isinstance(node, ast.Assignment):
            self._gen_assignment(node)
        elif isinstance(node, ast.Ident):
            self._gen_ident(node)
        elif isinstance(node, ast.Integer):
            self._gen_integer(node)
        elif isinstance(node, ast.String):
            self._gen_string(node)
        else:
            raise TypeError(f"cannot generate code for {type(node).__name__}: {node!r}")

    def _gen_program(self, node):
        for item in node.nodes:
            depth = self.reg_alloc.depth
            self.generate(item)
            # a bare expression statement leaves its value behind; drop it
            while self.reg_alloc.depth > depth:
                reg = self.reg_alloc.pop()
                self.reg_alloc.release(reg)
                logger.debug("discarding unused value in %s from '%s'",
                             reg, codegen_utils.expr_to_comment(item))

    def _gen_arithmetic_op(self, node):
        """a + b
        =>
        <code for a>
        <code for b>
        op $t1, $t0, $t1
        such that $t0 is a's register and $t1 is b's; the result lives in $t1.
        """
        self.generate(node.left)
        self.generate(node.right)
        # the right-hand side was generated last, so it comes off first
        right_register = self.reg_alloc.pop()
        left_register = self.reg_alloc.pop()
        operand = left_register if self.lifo_operands else self.reg_alloc.first_issued
        self.emit_main(node.op, right_register, operand, right_register)
        self.reg_alloc.release(left_register)
        self.reg_alloc.push(right_register)

    def _gen_assignment(self, node):
        """a = b
        =>
        <code for b>
        sw $t0, -4($sp)
        """
        self.generate(node.value)
        location = self._bind(node.name)
        value_register = self.reg_alloc.pop()
        self.emit_main("sw", value_register, location)
        self.reg_alloc.release(value_register)

    def _gen_ident(self, node):
        """lw $t0, -4($sp)"""
        temp_register = self.reg_alloc.acquire()
        location = self.access_loc.get(node.name, "")
        if not location:
            logger.warning("identifier '%s' used before assignment; emitting lw without a location",
                           node.name)
        self.emit_main("lw", temp_register, location)
        self.reg_alloc.push(temp_register)

    def _gen_integer(self, node):
        """li $t0, 123"""
        temp_register = self.reg_alloc.acquire()
        self.emit_main("li", temp_register, node.value)
        self.reg_alloc.push(temp_register)

    def _gen_string(self, node):
        """string1: .asciiz "abc" in the data section, then la $t0, string1"""
        temp_register = self.reg_alloc.acquire()
        label = self._next_data_label()
        self.emit_data(codegen_utils.format_data_entry(label, node.value))
        self.emit_main("la", temp_register, label)
        self.reg_alloc.push(temp_register)

    def assemble(self) -> str:
        """Render the data section and instructions into the final program."""
        template = _env.get_template(PROGRAM_TEMPLATE)
        return template.render(
            data_section=self.data_section,
            main_section=[str(i) for i in self.main_section],
        )


def compile_program(program, **options) -> str:
    """Generate and assemble `program` in one go."""
    return CodeGen(program, **options).gen().assemble()
