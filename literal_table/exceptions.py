"""
异常与错误模型
"""
from typing import Any, Optional, Sequence
from .models import ErrorCode


class LiteralTableError(Exception):
    """异常基类"""
    def __init__(self, code: ErrorCode, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.hint = hint


class InvalidArgumentError(LiteralTableError):
    def __init__(self, message: str = "Invalid argument", hint: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_ARGUMENT, message, hint)


class TokenizeError(LiteralTableError):
    def __init__(self, message: str = "Failed to tokenize table source", hint: Optional[str] = None,
                 line: Optional[int] = None):
        super().__init__(ErrorCode.TOKENIZE, message, hint)
        self.line = line


class StructuralMismatchError(LiteralTableError):
    """分隔符数量无法按 width+1 切分"""
    def __init__(self, message: str = "Separator count does not partition the token stream",
                 hint: Optional[str] = None, tokens: Optional[Sequence[Any]] = None):
        super().__init__(ErrorCode.STRUCTURAL_MISMATCH, message, hint)
        self.tokens = list(tokens) if tokens is not None else []


class TemplateParseError(LiteralTableError):
    def __init__(self, message: str = "Not a template row", hint: Optional[str] = None,
                 row: Optional[Sequence[Any]] = None):
        super().__init__(ErrorCode.TEMPLATE_PARSE, message, hint)
        self.row = row


class TemplateMatchError(LiteralTableError):
    def __init__(self, message: str = "Row does not match any template shape", hint: Optional[str] = None,
                 row: Optional[Sequence[Any]] = None, fingerprint: Optional[tuple] = None):
        super().__init__(ErrorCode.TEMPLATE_MATCH, message, hint)
        self.row = row
        self.fingerprint = fingerprint


class OutputWriteError(LiteralTableError):
    def __init__(self, message: str = "Failed to write outputs", hint: Optional[str] = None):
        super().__init__(ErrorCode.OUTPUT_WRITE, message, hint)
