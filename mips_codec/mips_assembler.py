# mips_codec/mips_assembler.py
import re
import logging

from mips_codec.mips_consts import (
    REGISTERS, I_CODES, R_CODES, J_CODES, SHIFT_FUNCTS, MEMORY_MNEMONICS,
    IMM_MASK, SHAMT_MASK, WORD_MASK,
)
from mips_codec.mips_errors import (
    CodecError, UnknownMnemonic, UnknownRegister, MalformedOperandSyntax, InvalidNumericLiteral,
)
from mips_codec.mips_instructions import RType, ITypeArithmetic, ITypeMemory, JType
from mips_codec.mips_tokenizer import tokenize_with_columns

logger = logging.getLogger(__name__)

# Lowest accepted immediate, stored as 16-bit two's complement
IMM_MIN = -(1 << 15)

_INT_LITERAL_RE = re.compile(r'^(-?)(0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+|[0-9]+)$')
_MEMORY_OPERAND_RE = re.compile(r'^([^()]*)\(([^()]+)\)$')


def parse_int_literal(text):
    """Parses a decimal, 0x, 0b or 0o integer literal. Returns None if text is not one."""
    match = _INT_LITERAL_RE.match(text)
    if not match:
        return None
    sign, digits = match.groups()
    # int(..., 0) rejects leading zeros in decimal, so only use it for prefixed literals
    base = 0 if digits[:2].lower() in ('0x', '0b', '0o') else 10
    value = int(digits, base)
    return -value if sign else value


class MipsAssembler:
    def __init__(self):
        self.machine_code = [] # (line_num, word) pairs from the last assemble() run
        self.errors = []

    def _add_error(self, errors, error):
        logger.debug(f"Adding error: Line {error.line_num}, Kind: {error.kind}, Msg: {error.message}, Text: '{error.text}'")
        errors.append(error.to_dict())

    def _parse_register(self, reg_str):
        """Converts register name ($t0, $3, etc.) to its number."""
        reg_num = REGISTERS.lookup_by_mnemonic(reg_str)
        if reg_num is None:
            raise UnknownRegister(f"Invalid register name: '{reg_str}'", token=reg_str)
        return reg_num

    def _parse_immediate(self, imm_str, field="immediate"):
        """Converts immediate string to its 16-bit field value. Wider positive values are masked."""
        val = parse_int_literal(imm_str)
        if val is None:
            raise InvalidNumericLiteral(f"Invalid {field} value: '{imm_str}'", token=imm_str)
        if not (IMM_MIN <= val <= WORD_MASK):
            raise InvalidNumericLiteral(f"The {field} '{imm_str}' is out of range ({IMM_MIN} to {WORD_MASK})", token=imm_str)
        return val & IMM_MASK

    def _parse_shamt(self, shamt_str):
        val = parse_int_literal(shamt_str)
        if val is None:
            raise InvalidNumericLiteral(f"Invalid shift amount: '{shamt_str}'", token=shamt_str)
        if not (0 <= val <= SHAMT_MASK):
            raise InvalidNumericLiteral(f"Shift amount '{shamt_str}' out of range (0 to {SHAMT_MASK})", token=shamt_str)
        return val

    def _parse_memory_operand(self, operand_str):
        """Parses 'offset($register)' or '($register)'. Returns (offset_field, reg_num)."""
        match = _MEMORY_OPERAND_RE.match(operand_str)
        if not match:
            raise MalformedOperandSyntax(
                f"Invalid memory operand format: '{operand_str}'. Expected 'offset($reg)' or '($reg)'.",
                token=operand_str,
            )
        offset_str, base_reg = match.groups()
        offset = self._parse_immediate(offset_str, field="offset") if offset_str else 0
        return offset, self._parse_register(base_reg)

    def _check_operand_count(self, tokens, expected):
        actual = len(tokens) - 1
        if actual != expected:
            raise MalformedOperandSyntax(
                f"Incorrect operand count for '{tokens[0]}'. Expected {expected}, got {actual}.", token=tokens[0],
            )

    def _encode_r_type(self, funct, tokens):
        """tokens: [mnemonic, rd, rt, rs] or [mnemonic, rd, rt, shamt] for sll/srl/sra."""
        self._check_operand_count(tokens, 3)
        mnemonic, rd_op, rt_op, last_op = tokens
        rd_val = self._parse_register(rd_op)
        rt_val = self._parse_register(rt_op)
        if funct in SHIFT_FUNCTS:
            # rs field unused for fixed shifts
            return RType(mnemonic, funct, rd=rd_val, rt=rt_val, rs=0, shamt=self._parse_shamt(last_op))
        return RType(mnemonic, funct, rd=rd_val, rt=rt_val, rs=self._parse_register(last_op), shamt=0)

    def _encode_i_type(self, opcode, tokens):
        mnemonic = tokens[0]
        if mnemonic in MEMORY_MNEMONICS:
            # rt, offset(rs)
            self._check_operand_count(tokens, 2)
            rt_val = self._parse_register(tokens[1])
            offset, rs_val = self._parse_memory_operand(tokens[2])
            return ITypeMemory(mnemonic, opcode, rt=rt_val, rs=rs_val, offset=offset)

        # rt, rs, imm
        self._check_operand_count(tokens, 3)
        rt_val = self._parse_register(tokens[1])
        rs_val = self._parse_register(tokens[2])
        imm_val = self._parse_immediate(tokens[3])
        return ITypeArithmetic(mnemonic, opcode, rt=rt_val, rs=rs_val, immediate=imm_val)

    def _encode_j_type(self, opcode, tokens):
        # Labels are not resolved: the target operand is ignored and the address field stays 0
        if len(tokens) > 1:
            logger.debug(f"Ignoring jump target '{' '.join(tokens[1:])}' for '{tokens[0]}'")
        return JType(tokens[0], opcode)

    def parse_instruction(self, tokens):
        """Looks the mnemonic up in the I, R and J tables (in that order) and builds the instruction."""
        if not tokens:
            raise MalformedOperandSyntax("Empty instruction.")
        mnemonic = tokens[0]

        opcode = I_CODES.lookup_by_mnemonic(mnemonic)
        if opcode is not None:
            return self._encode_i_type(opcode, tokens)
        funct = R_CODES.lookup_by_mnemonic(mnemonic)
        if funct is not None:
            return self._encode_r_type(funct, tokens)
        opcode = J_CODES.lookup_by_mnemonic(mnemonic)
        if opcode is not None:
            return self._encode_j_type(opcode, tokens)
        raise UnknownMnemonic(f"Unknown instruction: '{mnemonic}'", token=mnemonic)

    def encode_tokens(self, tokens):
        """Encodes an already tokenized line into its 32-bit word."""
        return self.parse_instruction(tokens).encode()

    @staticmethod
    def _locate(token, columns):
        """Finds the 1-based column of token (or the operand containing it) in the tokenized line."""
        if token is None:
            return None
        for column, text in columns:
            if text == token:
                return column
        for column, text in columns:
            if token and token in text:
                return column + text.index(token)
        return None

    def assemble_line(self, line, line_num=None):
        """
        Assembles one source line. Returns the 32-bit word, or None when the line
        holds no instruction (blank/comment only). Raises CodecError on bad input,
        with the line number, text and column attached.
        """
        columns = tokenize_with_columns(line)
        if not columns:
            return None
        tokens = [token for _, token in columns]
        try:
            word = self.encode_tokens(tokens)
        except CodecError as e:
            e.with_location(line_num, line, self._locate(e.token, columns))
            raise
        logger.debug(f"Assembled 0x{word:08x} for '{' '.join(tokens)}' (line {line_num})")
        return word

    def assemble(self, assembly_code, stop_on_error=False):
        """
        Assembles a whole program (string or iterable of lines). Failing lines are
        recorded in 'errors' and skipped; the remaining lines are still assembled
        unless stop_on_error is set. Each call works on its own lists, so one
        instance can serve concurrent callers.
        """
        logger.info("Starting assembly process...")
        machine_code = []
        errors = []
        lines = assembly_code.splitlines() if isinstance(assembly_code, str) else list(assembly_code)

        for line_num, line in enumerate(lines, start=1):
            try:
                word = self.assemble_line(line, line_num)
            except CodecError as e:
                self._add_error(errors, e)
                if stop_on_error:
                    logger.warning(f"Stopping assembly at line {line_num}: {e.message}")
                    break
                continue
            if word is not None:
                machine_code.append((line_num, word))

        formatted_output = []
        for line_num, code in machine_code:
            formatted_output.append({
                "hex": f"0x{code:08x}",
                "bin": f"{code:032b}",
                "dec": str(code), # Unsigned decimal representation
                "line": line_num,
            })

        if errors:
            logger.warning(f"Assembly completed with {len(errors)} errors.")
        else:
            logger.info(f"Assembly successful. {len(machine_code)} instructions.")

        # Last run, kept for inspection only
        self.machine_code = machine_code
        self.errors = errors
        return {
            "machine_code": formatted_output,
            "words": [code for _, code in machine_code],
            "errors": errors,
        }
