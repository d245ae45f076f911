# mips_codec/mips_consts.py


class MnemonicTable:
    """
    Two-way lookup between instruction/register names and their numeric codes.
    Every code has exactly one canonical name. Extra input-only spellings can be
    registered as aliases; they resolve to a code but are never reported back.
    """
    def __init__(self, title, entries, aliases=None):
        self.title = title
        self._codes = {}
        self._names = {}
        for name, code in entries.items():
            if code in self._names:
                raise ValueError(f"{title}: code {code} already named '{self._names[code]}', cannot add '{name}'")
            self._codes[name] = code
            self._names[code] = name
        for alias, code in (aliases or {}).items():
            if code not in self._names:
                raise ValueError(f"{title}: alias '{alias}' refers to unknown code {code}")
            self._codes[alias] = code

    def lookup_by_mnemonic(self, name):
        """Returns the code for name (canonical or alias), or None."""
        return self._codes.get(name)

    def lookup_by_code(self, code):
        """Returns the canonical name for code, or None."""
        return self._names.get(code)

    def names(self):
        return list(self._names.values())

    def __contains__(self, name):
        return name in self._codes

    def __len__(self):
        return len(self._names)

    def __repr__(self):
        return f"MnemonicTable({self.title!r}, {len(self._names)} codes, {len(self._codes) - len(self._names)} aliases)"


# MIPS Register Map (Canonical Name to Number)
REGISTER_MAP = {
    "$zero": 0, "$at": 1, "$v0": 2, "$v1": 3,
    "$a0": 4, "$a1": 5, "$a2": 6, "$a3": 7,
    "$t0": 8, "$t1": 9, "$t2": 10, "$t3": 11,
    "$t4": 12, "$t5": 13, "$t6": 14, "$t7": 15,
    "$s0": 16, "$s1": 17, "$s2": 18, "$s3": 19,
    "$s4": 20, "$s5": 21, "$s6": 22, "$s7": 23,
    "$t8": 24, "$t9": 25, "$k0": 26, "$k1": 27,
    "$gp": 28, "$sp": 29, "$fp": 30, "$ra": 31,
}

# Numeric spellings ($0 .. $31), accepted on input only
REGISTER_ALIASES = {f"${num}": num for num in range(32)}

# --- Opcode/Funct Maps ---
J_TYPE_OPCODE = {
    "j": 0b000010, "jal": 0b000011,
}

LW_OPCODE = 0b100011
SW_OPCODE = 0b101011

I_TYPE_OPCODE = {
    "addi": 0b001000, "addiu": 0b001001, "andi": 0b001100,
    "beq": 0b000100, "bne": 0b000101, "ori": 0b001101,
    "lw": LW_OPCODE, "sw": SW_OPCODE,
}

# Opcode of R-type is always zero, the function code selects the operation
R_TYPE_FUNCT = {
    "add": 0b100000, "addu": 0b100001, "sub": 0b100010, "subu": 0b100011,
    "and": 0b100100, "or": 0b100101, "xor": 0b100110, "nor": 0b100111,
    "slt": 0b101010, "sltu": 0b101011,
    "sll": 0b000000, "srl": 0b000010, "sra": 0b000011,
    "sllv": 0b000100, "srlv": 0b000110, "srav": 0b000111,
    "jr": 0b001000, "div": 0b011010,
}

R_TYPE_OPCODE = 0

# Fixed-shift family: shamt operand instead of rs
SHIFT_FUNCTS = frozenset({R_TYPE_FUNCT["sll"], R_TYPE_FUNCT["srl"], R_TYPE_FUNCT["sra"]})

# I-type mnemonics written as 'rt, offset(rs)'
MEMORY_MNEMONICS = frozenset({"lw", "sw"})

# --- Field widths/masks ---
OPCODE_SHIFT = 26
RS_SHIFT = 21
RT_SHIFT = 16
RD_SHIFT = 11
SHAMT_SHIFT = 6

OPCODE_MASK = 0x3F
REG_MASK = 0x1F
SHAMT_MASK = 0x1F
FUNCT_MASK = 0x3F
IMM_MASK = 0xFFFF
ADDR_MASK = 0x03FFFFFF
WORD_MASK = 0xFFFFFFFF

# --- Tables ---
REGISTERS = MnemonicTable("registers", REGISTER_MAP, aliases=REGISTER_ALIASES)
J_CODES = MnemonicTable("j-type opcodes", J_TYPE_OPCODE)
I_CODES = MnemonicTable("i-type opcodes", I_TYPE_OPCODE)
R_CODES = MnemonicTable("r-type function codes", R_TYPE_FUNCT)
