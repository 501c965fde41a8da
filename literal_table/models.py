"""
数据类与枚举定义
"""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union
from enum import Enum

from .constants import KEYWORD_PREFIX, NAMESPACE_DELIMITER


# ========== 枚举 ==========
class OutputFormat(str, Enum):
    map = "map"
    maps = "maps"
    table = "table"
    relation = "relation"
    cells = "cells"
    dataframe = "dataframe"


class LogLevel(str, Enum):
    INFO = "INFO"
    DEBUG = "DEBUG"
    WARN = "WARN"
    ERROR = "ERROR"


class ErrorCode(str, Enum):
    INVALID_ARGUMENT = "InvalidArgumentError"
    TOKENIZE = "TokenizeError"
    STRUCTURAL_MISMATCH = "StructuralMismatchError"
    TEMPLATE_PARSE = "TemplateParseError"
    TEMPLATE_MATCH = "TemplateMatchError"
    OUTPUT_WRITE = "OutputWriteError"


class WarningCode(str, Enum):
    UNMATCHED_ROW = "UnmatchedRow"
    TEMPLATE_EXHAUSTED = "TemplateExhausted"


# ========== 词法单元 ==========
@dataclass(frozen=True)
class Symbol:
    """符号引用：不透明的名字，核心流程从不求值"""
    name: str

    def __repr__(self) -> str:
        return self.name


class Keyword(str):
    """
    关键字（`:name`），用作表头与输出键。
    继承 str，因此 Keyword("date") == "date"，可直接作为 dict 键使用。
    """
    __slots__ = ()

    @property
    def namespace(self) -> Optional[str]:
        ns, sep, _ = str(self).rpartition(NAMESPACE_DELIMITER)
        return ns if sep else None

    @property
    def name(self) -> str:
        return str(self).rpartition(NAMESPACE_DELIMITER)[2]

    def qualify(self, ns: str) -> "Keyword":
        return Keyword(f"{ns}{NAMESPACE_DELIMITER}{self.name}")

    def __repr__(self) -> str:
        return f"{KEYWORD_PREFIX}{str(self)}"


class _DividerLine:
    """分割线哨兵，整行均为分割符时替换该行"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DividerLine"

    def __reduce__(self):
        return (_DividerLine, ())


DividerLine = _DividerLine()

Token = Any
Cell = Any
Row = Union[List[Cell], _DividerLine]
Table = List[Row]
Fingerprint = Tuple[Optional[Symbol], ...]


# ========== 解释结果 ==========
@dataclass
class Interpretation:
    """
    表格解释结果。
    col_headers / row_headers: 单行（列）表头为平铺列表，多行（列）表头为元组列表。
    coercions: 列表头 → 转换函数。
    data: 去掉分割线与表头后的数据块。
    """
    data: List[List[Cell]] = field(default_factory=list)
    col_headers: Optional[List[Any]] = None
    row_headers: Optional[List[Any]] = None
    coercions: Optional[Dict[Any, Callable[[Any], Any]]] = None

    def as_dict(self, include_coercions: bool = True) -> Dict[str, Any]:
        """只保留非空部分，data 始终保留"""
        result: Dict[str, Any] = {}
        if self.col_headers:
            result["col_headers"] = self.col_headers
        if self.row_headers:
            result["row_headers"] = self.row_headers
        if include_coercions and self.coercions:
            result["coercions"] = self.coercions
        result["data"] = self.data
        return result


# ========== 模板描述符 ==========
@dataclass(frozen=True)
class FlatDescriptor:
    """单行模板：字段写入当前路径"""
    fields: Tuple[Tuple[Any, int], ...]

    @property
    def row_template(self) -> Dict[Any, int]:
        return dict(self.fields)

    @property
    def repeating(self) -> bool:
        return False


@dataclass(frozen=True)
class RepeatingDescriptor:
    """重复块模板：引入名为 attr_name 的数组，后续数据行各成为一个元素"""
    attr_name: Any
    fields: Tuple[Tuple[Any, int], ...]

    @property
    def row_template(self) -> Dict[Any, int]:
        return dict(self.fields)

    @property
    def repeating(self) -> bool:
        return True


Descriptor = Union[FlatDescriptor, RepeatingDescriptor]


# ========== relation 元素 ==========
def _hashable(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        return frozenset((k, _hashable(v)) for k, v in value.items())
    return value


class FrozenRecord(Mapping):
    """只读、可哈希的记录，与同内容的 dict 相等"""
    __slots__ = ("_data", "_hash")

    def __init__(self, items: Union[Mapping, List[Tuple[Any, Any]]] = ()):
        self._data = dict(items)
        self._hash = None

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset((k, _hashable(v)) for k, v in self._data.items()))
        return self._hash

    def __repr__(self) -> str:
        return f"FrozenRecord({self._data!r})"


# ========== 日志事件 ==========
@dataclass
class LogEvent:
    ts: str                 # "2025-11-09T14:30:12Z"
    lvl: LogLevel
    event: str              # 例如: "run.start","tabularize.done","tree.built"
    stage: Optional[str] = None
    message: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None
    error_code: Optional[ErrorCode] = None
    warning_code: Optional[WarningCode] = None
