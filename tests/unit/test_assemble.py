from mipsgen.ast import Program, Assignment, Integer
from mipsgen.codegen import CodeGen, compile_program
from mipsgen.demo import build_demo_program

EXPECTED_DEMO = """\
.data
    string1: .asciiz "foobar"

.text
    main:
        li $t0,123
        li $t1,321
        li $t2,123
        sub $t2,$t0,$t2
        add $t2,$t0,$t2
        sw $t2,-4($sp)
        la $t3,string1
        sw $t3,-8($sp)
        lw $t4,-8($sp)
        sw $t4,-12($sp)

        move $2, $0
        j $31
"""

def _normalize(text):
    return [" ".join(line.split()) for line in text.splitlines() if line.strip()]

def test_demo_program_exact():
    assert compile_program(build_demo_program()) == EXPECTED_DEMO

def test_demo_program_modulo_whitespace():
    reference = """
    .data
        string1: .asciiz "foobar"
    .text
        main:
        li $t0,123
        li $t1,321
        li $t2,123
        sub $t2,$t0,$t2
        add $t2,$t0,$t2
        sw $t2,-4($sp)
        la $t3,string1
        sw $t3,-8($sp)
        lw $t4,-8($sp)
        sw $t4,-12($sp)
        move $2, $0
        j $31
    """
    assert _normalize(compile_program(build_demo_program())) == _normalize(reference)

def test_empty_program():
    asm = compile_program(Program())
    assert asm == ".data\n\n.text\n    main:\n\n        move $2, $0\n        j $31\n"

def test_assemble_is_repeatable():
    cg = CodeGen(Program([Assignment("a", Integer("1"))])).gen()
    first = cg.assemble()
    assert cg.assemble() == first
    assert "        li $t0,1\n        sw $t0,-4($sp)\n" in first

def test_lifo_operands_demo():
    asm = compile_program(build_demo_program(), lifo_operands=True)
    assert "sub $t2,$t1,$t2" in _normalize(asm)
    assert "add $t2,$t0,$t2" in _normalize(asm)
