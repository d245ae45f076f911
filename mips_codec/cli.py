# mips_codec/cli.py
import sys
import argparse
import logging

from mips_codec.mips_disassembler import MipsDisassembler
from mips_codec.mips_errors import UnsupportedDecode
from mips_codec.mips_files import assemble_file, read_bit_strings, read_machine_code

logger = logging.getLogger(__name__)

MODE_ASSEMBLE = "assemble"
MODE_BIN = "bin" # disassemble a bit-string text file
MODE_MHC = "mhc" # disassemble a little-endian word file


def _report(errors):
    """Logs each error, returns how many of them are fatal."""
    fatal = 0
    for err in errors:
        where = f"line {err['line']}"
        if err.get("column"):
            where += f", column {err['column']}"
        if err["kind"] == UnsupportedDecode.kind:
            logger.warning(f"{where}: {err['message']}")
            continue
        fatal += 1
        logger.error(f"{where}: {err['kind']}: {err['message']} (text: '{err['text']}')")
    return fatal


def build_parser():
    p = argparse.ArgumentParser(prog="mips-codec", description="Assemble/disassemble a fixed subset of MIPS instructions")
    p.add_argument("-i", "--input-file", required=True, help="Assembly source (assemble) or machine code file (bin/mhc)")
    p.add_argument("-m", "--mode", choices=[MODE_ASSEMBLE, MODE_BIN, MODE_MHC], default=MODE_ASSEMBLE,
                   help="assemble: write <file>.mhc and <file>.bin; bin/mhc: print disassembly of that file format")
    p.add_argument("-k", "--keep-going", action="store_true",
                   help="Skip lines that fail instead of aborting the run")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv=None):
    """Entry point for the mips-codec command. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.mode == MODE_ASSEMBLE:
            result = assemble_file(args.input_file, keep_going=args.keep_going)
            # Aborted runs write no files, so print nothing either
            if result["outputs"]:
                for item in result["machine_code"]:
                    print(item["bin"])
            fatal = _report(result["errors"])
        else:
            if args.mode == MODE_BIN:
                entries = read_bit_strings(args.input_file)
            else:
                entries = read_machine_code(args.input_file)
            result = MipsDisassembler().disassemble_entries(entries, stop_on_error=not args.keep_going)
            for asm_line in result["lines"]:
                print(asm_line)
            fatal = _report(result["errors"])
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read input file '{args.input_file}': {e}")
        return 2

    return 1 if fatal else 0


if __name__ == "__main__":
    sys.exit(main())
