# mips_codec/mips_files.py
import logging
import struct # For packing/unpacking words to/from little-endian bytes

from mips_codec.mips_assembler import MipsAssembler
from mips_codec.mips_errors import InvalidNumericLiteral

logger = logging.getLogger(__name__)

WORD_FORMAT = "<I" # 32-bit unsigned, little-endian
WORD_SIZE = struct.calcsize(WORD_FORMAT)

MACHINE_CODE_SUFFIX = ".mhc" # raw little-endian words
BIT_STRING_SUFFIX = ".bin"   # one 32-character 0/1 string per line


def format_bit_string(word):
    """MSB-first 32-character bit pattern of a word."""
    return f"{word:032b}"


def write_machine_code(path, words):
    with open(path, "wb") as f:
        for word in words:
            f.write(struct.pack(WORD_FORMAT, word))
    logger.debug(f"Wrote {len(words)} words to {path}")


def write_bit_strings(path, words):
    with open(path, "w", encoding="utf-8") as f:
        for word in words:
            f.write(format_bit_string(word) + "\n")
    logger.debug(f"Wrote {len(words)} bit strings to {path}")


def read_machine_code(path):
    """
    Reads a little-endian word file. Returns (line_num, word) entries, numbered
    by word position. A trailing partial word becomes an InvalidNumericLiteral
    entry instead of a word.
    """
    with open(path, "rb") as f:
        data = f.read()

    whole = len(data) - len(data) % WORD_SIZE
    entries = [(i + 1, word) for i, (word,) in enumerate(struct.iter_unpack(WORD_FORMAT, data[:whole]))]
    if whole != len(data):
        line_num = len(entries) + 1
        leftover = data[whole:].hex()
        error = InvalidNumericLiteral(
            f"Truncated word: {len(data) - whole} trailing bytes, expected {WORD_SIZE}", token=leftover,
        )
        entries.append((line_num, error.with_location(line_num, leftover)))
    logger.debug(f"Read {len(entries)} words from {path}")
    return entries


def read_bit_strings(path):
    """
    Reads a bit-string text file. Returns (line_num, word) entries; blank lines
    are skipped, malformed lines become InvalidNumericLiteral entries.
    """
    entries = []
    with open(path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            bits = line.strip()
            if not bits:
                continue
            if len(bits) == 32 and set(bits) <= {"0", "1"}:
                entries.append((line_num, int(bits, 2)))
            else:
                error = InvalidNumericLiteral(f"Invalid bit string: '{bits}' (expected 32 '0'/'1' characters)", token=bits)
                entries.append((line_num, error.with_location(line_num, line.rstrip("\n"))))
    logger.debug(f"Read {len(entries)} bit strings from {path}")
    return entries


def assemble_file(asm_path, keep_going=False, assembler=None):
    """
    Assembles asm_path and writes '<asm_path>.mhc' and '<asm_path>.bin'.
    If any line fails and keep_going is not set, nothing is written.
    Returns the assembler's result dict with the output paths added.
    """
    assembler = assembler or MipsAssembler()
    with open(asm_path, "r", encoding="utf-8") as f:
        source = f.read()

    result = assembler.assemble(source, stop_on_error=not keep_going)
    result["outputs"] = []
    if result["errors"] and not keep_going:
        logger.warning(f"Not writing output for {asm_path}: {len(result['errors'])} errors")
        return result

    machine_code_path = asm_path + MACHINE_CODE_SUFFIX
    bit_string_path = asm_path + BIT_STRING_SUFFIX
    write_machine_code(machine_code_path, result["words"])
    write_bit_strings(bit_string_path, result["words"])
    result["outputs"] = [machine_code_path, bit_string_path]
    logger.info(f"Assembled {asm_path} -> {machine_code_path}, {bit_string_path}")
    return result
