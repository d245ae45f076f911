# mips_codec/mips_instructions.py
from dataclasses import dataclass

from mips_codec.mips_consts import (
    REGISTERS, SHIFT_FUNCTS, R_TYPE_OPCODE,
    OPCODE_SHIFT, RS_SHIFT, RT_SHIFT, RD_SHIFT, SHAMT_SHIFT,
    OPCODE_MASK, REG_MASK, SHAMT_MASK, FUNCT_MASK, IMM_MASK, ADDR_MASK,
)
from mips_codec.mips_errors import UnsupportedDecode


def reg_name(reg_num):
    """Canonical register name ($zero, $t0, ...) for a 5-bit register number."""
    return REGISTERS.lookup_by_code(reg_num)


def split_fields(word):
    """Cuts a 32-bit word into every field any of the three formats uses."""
    return {
        "opcode": (word >> OPCODE_SHIFT) & OPCODE_MASK,
        "rs": (word >> RS_SHIFT) & REG_MASK,
        "rt": (word >> RT_SHIFT) & REG_MASK,
        "rd": (word >> RD_SHIFT) & REG_MASK,
        "shamt": (word >> SHAMT_SHIFT) & SHAMT_MASK,
        "funct": word & FUNCT_MASK,
        "imm": word & IMM_MASK,
        "addr": word & ADDR_MASK,
    }


@dataclass(frozen=True)
class RType:
    mnemonic: str
    funct: int
    rd: int
    rt: int
    rs: int = 0
    shamt: int = 0

    @property
    def is_shift(self):
        return self.funct in SHIFT_FUNCTS

    def encode(self):
        # Format: opcode(6)=0 rs(5) rt(5) rd(5) shamt(5) funct(6)
        return ((R_TYPE_OPCODE << OPCODE_SHIFT) | (self.rs << RS_SHIFT) | (self.rt << RT_SHIFT)
                | (self.rd << RD_SHIFT) | (self.shamt << SHAMT_SHIFT) | self.funct)

    def render(self):
        if self.is_shift:
            return f"{self.mnemonic} {reg_name(self.rd)}, {reg_name(self.rt)}, {self.shamt}"
        # Same operand order the assembler reads: rd, rt, rs
        return f"{self.mnemonic} {reg_name(self.rd)}, {reg_name(self.rt)}, {reg_name(self.rs)}"


@dataclass(frozen=True)
class ITypeArithmetic:
    mnemonic: str
    opcode: int
    rt: int
    rs: int
    immediate: int

    def encode(self):
        # Format: opcode(6) rs(5) rt(5) immediate(16)
        return (self.opcode << OPCODE_SHIFT) | (self.rs << RS_SHIFT) | (self.rt << RT_SHIFT) | (self.immediate & IMM_MASK)

    def render(self):
        return f"{self.mnemonic} {reg_name(self.rt)}, {reg_name(self.rs)}, {self.immediate}"


@dataclass(frozen=True)
class ITypeMemory:
    mnemonic: str
    opcode: int
    rt: int
    rs: int
    offset: int

    def encode(self):
        return (self.opcode << OPCODE_SHIFT) | (self.rs << RS_SHIFT) | (self.rt << RT_SHIFT) | (self.offset & IMM_MASK)

    def render(self):
        return f"{self.mnemonic} {reg_name(self.rt)}, {self.offset}({reg_name(self.rs)})"


@dataclass(frozen=True)
class JType:
    """Jump with an unresolved target: only the opcode is ever encoded."""
    mnemonic: str
    opcode: int
    address: int = 0

    def encode(self):
        return (self.opcode << OPCODE_SHIFT) | (self.address & ADDR_MASK)

    def render(self):
        raise UnsupportedDecode(
            f"Cannot disassemble '{self.mnemonic}': jump target decoding requires label resolution, not implemented",
            mnemonic=self.mnemonic, token=self.mnemonic,
        )
