# mips_codec/mips_errors.py


class CodecError(Exception):
    """
    Base class for per-line encode/decode failures.
    The batch layer attaches line_num/text/column after catching the error,
    single-line callers only see message and token.
    """
    kind = "CodecError"

    def __init__(self, message, token=None, line_num=None, text=None, column=None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line_num = line_num
        self.text = text
        self.column = column

    def with_location(self, line_num, text, column=None):
        self.line_num = line_num
        self.text = text
        if column is not None:
            self.column = column
        return self

    def to_dict(self):
        return {
            "line": self.line_num,
            "message": self.message,
            "text": self.text if self.text is not None else "",
            "kind": self.kind,
            "token": self.token,
            "column": self.column,
        }

    def __str__(self):
        if self.line_num is None:
            return self.message
        where = f"line {self.line_num}"
        if self.column is not None:
            where += f", column {self.column}"
        return f"{where}: {self.message}"


class UnknownMnemonic(CodecError):
    kind = "UnknownMnemonic"


class UnknownRegister(CodecError):
    kind = "UnknownRegister"


class MalformedOperandSyntax(CodecError):
    kind = "MalformedOperandSyntax"


class InvalidNumericLiteral(CodecError):
    kind = "InvalidNumericLiteral"


class UnsupportedDecode(CodecError):
    """Raised when a word decodes structurally but cannot be rendered as source text."""
    kind = "UnsupportedDecode"

    def __init__(self, message, mnemonic=None, **kwargs):
        super().__init__(message, **kwargs)
        self.mnemonic = mnemonic

    @property
    def placeholder(self):
        return f"{self.mnemonic} unimplemented"
