"""
词法适配器 - 将竖线分隔的表格文本转换为词法单元序列

支持的写法：
    | :date        | :value |     关键字（表头）
    | ---          | ---    |     分割线
    | "2021-07-01" | 10     |     字符串 / 数字
    | nil          | true   |     空值 / 布尔值
    | Artist       | int    |     符号（可由 resolver 解析为宿主环境中的值）
    # 注释到行尾
"""
import json
import re
from typing import Any, Callable, List, Mapping, Optional

from .constants import (
    COMMENT_PREFIX,
    FALSE_LITERAL,
    KEYWORD_PREFIX,
    NIL_LITERAL,
    SEPARATOR_NAME,
    TRUE_LITERAL,
)
from .exceptions import TokenizeError
from .models import Keyword, Symbol, Token

Resolver = Callable[[str], Optional[Any]]

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<comment>\#.*$)
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<sep>\|)
    |(?P<word>[^\s|"\#]+)
    """,
    re.VERBOSE,
)
_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")

SEPARATOR = Symbol(SEPARATOR_NAME)


def namespace_resolver(namespace: Mapping[str, Any]) -> Resolver:
    """基于映射构造 resolver，例如 {"int": int, "str": str}"""
    return namespace.get


def _classify_word(word: str, resolver: Optional[Resolver]) -> Token:
    if word.startswith(KEYWORD_PREFIX) and len(word) > len(KEYWORD_PREFIX):
        return Keyword(word[len(KEYWORD_PREFIX):])
    if word == NIL_LITERAL:
        return None
    if word == TRUE_LITERAL:
        return True
    if word == FALSE_LITERAL:
        return False
    if _INT_RE.match(word):
        return int(word)
    if _FLOAT_RE.match(word):
        return float(word)
    if resolver is not None:
        resolved = resolver(word)
        if resolved is not None:
            return resolved
    return Symbol(word)


def _tokenize_line(line: str, lineno: int, resolver: Optional[Resolver]) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(line):
        match = _TOKEN_RE.match(line, pos)
        if match is None:
            raise TokenizeError(
                f"Unexpected character {line[pos]!r} at line {lineno}, column {pos + 1}",
                hint="Strings must be double-quoted and closed on the same line",
                line=lineno,
            )
        kind = match.lastgroup
        text = match.group()
        if kind == "string":
            try:
                tokens.append(json.loads(text))
            except json.JSONDecodeError as e:
                raise TokenizeError(f"Invalid string literal at line {lineno}: {e}", line=lineno) from e
        elif kind == "sep":
            tokens.append(SEPARATOR)
        elif kind == "word":
            tokens.append(_classify_word(text, resolver))
        pos = match.end()
    return tokens


def tokenize(source: str, resolver: Optional[Resolver] = None) -> List[Token]:
    """
    将表格源码转换为扁平的词法单元序列（换行不产生词法单元）
    """
    tokens: List[Token] = []
    for lineno, line in enumerate(source.splitlines(), start=1):
        tokens.extend(_tokenize_line(line, lineno, resolver))
    return tokens


def infer_width(source: str) -> Optional[int]:
    """
    按首个非空行的分隔符数量推断列数（分隔符数 - 1）。
    用于没有分割线的表格；首行没有分隔符时返回 None。
    """
    for lineno, line in enumerate(source.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        separators = sum(1 for t in _tokenize_line(line, lineno, None) if t == SEPARATOR)
        return separators - 1 if separators > 1 else None
    return None
