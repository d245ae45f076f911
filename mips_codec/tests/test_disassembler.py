# mips_codec/tests/test_disassembler.py
import threading
import pytest
from mips_codec.mips_assembler import MipsAssembler
from mips_codec.mips_disassembler import MipsDisassembler
from mips_codec.mips_errors import UnknownMnemonic, UnsupportedDecode, InvalidNumericLiteral
from mips_codec.mips_instructions import JType, ITypeMemory

@pytest.fixture
def disassembler():
    """Provides a new MipsDisassembler instance for each test."""
    return MipsDisassembler()

@pytest.fixture
def assembler():
    return MipsAssembler()

# --- Single words ---

def test_disassemble_add(disassembler):
    assert disassembler.disassemble_instruction(0x01494020) == "add $t0, $t1, $t2"

def test_disassemble_sll(disassembler):
    assert disassembler.disassemble_instruction(0x00094080) == "sll $t0, $t1, 2"

def test_disassemble_zero_word(disassembler):
    # all-zero word is sll $zero, $zero, 0
    assert disassembler.disassemble_instruction(0) == "sll $zero, $zero, 0"

def test_disassemble_lw(disassembler):
    assert disassembler.disassemble_instruction(0x8fa80004) == "lw $t0, 4($sp)"
    assert disassembler.decode_instruction(0x8fa80004) == ITypeMemory("lw", 0b100011, rt=8, rs=29, offset=4)

def test_disassemble_immediate_not_sign_extended(disassembler):
    assert disassembler.disassemble_instruction(0x8fa8fffc) == "lw $t0, 65532($sp)"
    assert disassembler.disassemble_instruction(0x2128ffff) == "addi $t0, $t1, 65535"

def test_disassemble_arithmetic_immediate(disassembler):
    assert disassembler.disassemble_instruction(0x20080064) == "addi $t0, $zero, 100"

def test_decode_jump_returns_variant(disassembler):
    assert disassembler.decode_instruction(0x08000000) == JType("j", 0b000010, address=0)
    assert disassembler.decode_instruction(0x0c000010) == JType("jal", 0b000011, address=0x10)

def test_disassemble_jump_is_unsupported(disassembler):
    with pytest.raises(UnsupportedDecode) as excinfo:
        disassembler.disassemble_instruction(0x08000000)
    assert "requires label resolution" in excinfo.value.message
    assert excinfo.value.placeholder == "j unimplemented"

def test_unknown_opcode(disassembler):
    with pytest.raises(UnknownMnemonic) as excinfo:
        disassembler.disassemble_instruction(0xfc000000)
    assert "opcode=0x3f" in excinfo.value.message

def test_unknown_function_code(disassembler):
    with pytest.raises(UnknownMnemonic) as excinfo:
        disassembler.disassemble_instruction(0x00000001)
    assert "funct=0x01" in excinfo.value.message

@pytest.mark.parametrize("word", [-1, 1 << 32, "0x0", True, False])
def test_rejects_non_words(disassembler, word):
    with pytest.raises(InvalidNumericLiteral):
        disassembler.decode_instruction(word)

# --- Properties ---

@pytest.mark.parametrize("line", [
    "add $t0, $t1, $t2",
    "sub $s0, $s1, $s2",
    "nor $a0, $a1, $a2",
    "sllv $v0, $v1, $ra",
    "sll $t0, $t1, 2",
    "srl $t2, $t3, 31",
    "lw $t0, 4($sp)",
    "sw $a0, 16($gp)",
    "addi $t0, $zero, 100",
    "andi $t0, $t1, 255",
    "beq $t0, $t1, 3",
])
def test_round_trip(assembler, disassembler, line):
    assert disassembler.disassemble_instruction(assembler.assemble_line(line)) == line

def test_round_trip_uses_canonical_register_names(assembler, disassembler):
    word = assembler.assemble_line("add $8, $9, $10")
    assert disassembler.disassemble_instruction(word) == "add $t0, $t1, $t2"
    word = assembler.assemble_line("lw $26, 0($0)")
    assert disassembler.disassemble_instruction(word) == "lw $k0, 0($zero)"

def test_rs_field_isolation(assembler, disassembler):
    base = assembler.assemble_line("add $t0, $t1, $t2")
    for rs in range(32):
        word = (base & ~(0x1f << 21)) | (rs << 21)
        mnemonic, operands = disassembler.disassemble_instruction(word).split(" ", 1)
        rd, rt, rs_name = operands.split(", ")
        assert mnemonic == "add"
        assert (rd, rt) == ("$t0", "$t1")
        assert assembler._parse_register(rs_name) == rs

# --- Batch ---

def test_disassemble_batch(disassembler):
    result = disassembler.disassemble([0x01494020, 0x08000000, 0xfc000000, 0x8fa80004])
    assert result["lines"] == [
        "add $t0, $t1, $t2",
        "j unimplemented",
        "Error line 3: Unknown Instruction (opcode=0x3f)",
        "lw $t0, 4($sp)",
    ]
    assert result["assembly_code"] == "\n".join(result["lines"])
    assert [(e["line"], e["kind"]) for e in result["errors"]] == [(2, "UnsupportedDecode"), (3, "UnknownMnemonic")]
    assert result["errors"][1]["text"] == "0xfc000000"

def test_disassemble_batch_stop_on_error(disassembler):
    result = disassembler.disassemble([0x00000001, 0x01494020], stop_on_error=True)
    assert len(result["lines"]) == 1
    assert result["errors"][0]["kind"] == "UnknownMnemonic"

def test_disassemble_hex(disassembler):
    result = disassembler.disassemble_hex(["0x01494020", "", "zz", "8FA80004", "123456789"])
    assert result["lines"] == [
        "add $t0, $t1, $t2",
        "Error line 3: Invalid hex word: 'zz' (max 8 hex digits)",
        "lw $t0, 4($sp)",
        "Error line 5: Invalid hex word: '123456789' (max 8 hex digits)",
    ]
    assert [e["line"] for e in result["errors"]] == [3, 5]
    assert all(e["kind"] == "InvalidNumericLiteral" for e in result["errors"])

def test_disassemble_hex_short_word(disassembler):
    # 'c' is padded to 0x0000000c, an unknown function code here
    result = disassembler.disassemble_hex(["c"])
    assert result["errors"][0]["kind"] == "UnknownMnemonic"

def test_shared_disassembler_across_threads(disassembler):
    results = {}
    start = threading.Barrier(2)

    def run(name, words):
        start.wait()
        results[name] = disassembler.disassemble(words)

    threads = [threading.Thread(target=run, args=("clean", [0x01494020] * 2000)),
               threading.Thread(target=run, args=("broken", [0xfc000000] * 2000))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not results["clean"]["errors"]
    assert results["clean"]["lines"] == ["add $t0, $t1, $t2"] * 2000
    assert len(results["broken"]["errors"]) == 2000
