# mips_codec/mips_disassembler.py
import re
import logging

from mips_codec.mips_consts import (
    R_CODES, J_CODES, I_CODES, R_TYPE_OPCODE, MEMORY_MNEMONICS, WORD_MASK,
)
from mips_codec.mips_errors import CodecError, UnknownMnemonic, InvalidNumericLiteral, UnsupportedDecode
from mips_codec.mips_instructions import RType, ITypeArithmetic, ITypeMemory, JType, split_fields

logger = logging.getLogger(__name__)

_HEX_WORD_RE = re.compile(r'^(0x)?([0-9a-f]{1,8})$')


class MipsDisassembler:
    def __init__(self):
        self.errors = [] # Errors from the last batch run

    def _add_error(self, errors, error):
        logger.debug(f"Adding error: Line {error.line_num}, Kind: {error.kind}, Msg: {error.message}")
        errors.append(error.to_dict())

    def decode_instruction(self, machine_code_int):
        """
        Classifies a 32-bit word by its opcode field and returns the matching
        instruction variant. Raises UnknownMnemonic for codes found in no table.
        """
        if (not isinstance(machine_code_int, int) or isinstance(machine_code_int, bool)
                or not (0 <= machine_code_int <= WORD_MASK)):
            raise InvalidNumericLiteral(f"Invalid machine code: {machine_code_int!r} is not a 32-bit unsigned word",
                                        token=str(machine_code_int))
        fields = split_fields(machine_code_int)
        opcode = fields["opcode"]

        # --- R-type (opcode 0), operation picked by function code ---
        if opcode == R_TYPE_OPCODE:
            mnemonic = R_CODES.lookup_by_code(fields["funct"])
            if mnemonic is None:
                raise UnknownMnemonic(f"Unknown R-type (funct=0x{fields['funct']:02x})", token=f"0x{machine_code_int:08x}")
            return RType(mnemonic, fields["funct"], rd=fields["rd"], rt=fields["rt"], rs=fields["rs"], shamt=fields["shamt"])

        # --- J-type ---
        mnemonic = J_CODES.lookup_by_code(opcode)
        if mnemonic is not None:
            return JType(mnemonic, opcode, address=fields["addr"])

        # --- I-type ---
        mnemonic = I_CODES.lookup_by_code(opcode)
        if mnemonic is None:
            raise UnknownMnemonic(f"Unknown Instruction (opcode=0x{opcode:02x})", token=f"0x{machine_code_int:08x}")
        if mnemonic in MEMORY_MNEMONICS:
            return ITypeMemory(mnemonic, opcode, rt=fields["rt"], rs=fields["rs"], offset=fields["imm"])
        return ITypeArithmetic(mnemonic, opcode, rt=fields["rt"], rs=fields["rs"], immediate=fields["imm"])

    def disassemble_instruction(self, machine_code_int):
        """Disassembles a single 32-bit word into one line of assembly. Raises CodecError."""
        return self.decode_instruction(machine_code_int).render()

    def disassemble(self, words, stop_on_error=False):
        """
        Disassembles a sequence of words. Returns dict with 'assembly_code',
        'lines' and 'errors'. Words that cannot be decoded are recorded in
        'errors'; jumps are rendered as a placeholder line.
        """
        return self.disassemble_entries(enumerate(words, start=1), stop_on_error=stop_on_error)

    def disassemble_hex(self, machine_code_hex_lines, stop_on_error=False):
        """Disassembles hex strings ('0x0000000c', 'c', ...). Blank entries are skipped."""
        entries = []
        for line_num, hex_line in enumerate(machine_code_hex_lines, start=1):
            hex_text = str(hex_line).strip().lower()
            if not hex_text:
                continue
            match = _HEX_WORD_RE.match(hex_text)
            if match:
                entries.append((line_num, int(match.group(2), 16)))
            else:
                error = InvalidNumericLiteral(f"Invalid hex word: '{hex_line}' (max 8 hex digits)", token=str(hex_line))
                entries.append((line_num, error.with_location(line_num, str(hex_line))))
        return self.disassemble_entries(entries, stop_on_error=stop_on_error)

    def disassemble_entries(self, entries, stop_on_error=False):
        """
        Disassembles (line_num, word) pairs. A CodecError in place of a word
        marks an input line that could not be read as a word at all.
        """
        errors = []
        assembly_lines = []
        for line_num, word in entries:
            if isinstance(word, CodecError):
                self._add_error(errors, word)
                assembly_lines.append(f"Error line {line_num}: {word.message}")
                if stop_on_error:
                    break
                continue
            word_text = f"0x{word:08x}" if isinstance(word, int) and not isinstance(word, bool) and word >= 0 else str(word)
            try:
                asm_line = self.disassemble_instruction(word)
            except UnsupportedDecode as e:
                logger.warning(f"Line {line_num}: {e.message}")
                self._add_error(errors, e.with_location(line_num, word_text))
                assembly_lines.append(e.placeholder)
            except CodecError as e:
                self._add_error(errors, e.with_location(line_num, word_text))
                assembly_lines.append(f"Error line {line_num}: {e.message}")
                if stop_on_error:
                    break
            else:
                logger.debug(f"Disassembled {word_text} -> '{asm_line}' (line {line_num})")
                assembly_lines.append(asm_line)

        failures = [err for err in errors if err["kind"] != UnsupportedDecode.kind]
        if failures:
            logger.warning(f"Disassembly completed with {len(failures)} errors.")
        # Last run, kept for inspection only
        self.errors = errors
        return {"assembly_code": "\n".join(assembly_lines), "lines": assembly_lines, "errors": errors}
