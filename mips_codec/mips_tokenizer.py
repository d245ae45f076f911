# mips_codec/mips_tokenizer.py
import re

COMMENT_MARKER = '#'

# Runs of blanks and/or commas separate tokens
_TOKEN_RE = re.compile(r'[^\s,]+')


def strip_comment(line):
    """Drops everything from the first '#' on."""
    return line.split(COMMENT_MARKER, 1)[0]


def tokenize_with_columns(line):
    """
    Splits one source line into (column, token) pairs, column being 1-based in
    the original line. Only the mnemonic (first token) is lower-cased.
    Returns an empty list for blank or comment-only lines.
    """
    code = strip_comment(line)
    tokens = [(m.start() + 1, m.group(0)) for m in _TOKEN_RE.finditer(code)]
    if tokens:
        column, mnemonic = tokens[0]
        tokens[0] = (column, mnemonic.lower())
    return tokens


def tokenize(line):
    """Splits one source line into its token sequence ([mnemonic, operand, ...])."""
    return [token for _, token in tokenize_with_columns(line)]
