"""
配置类定义
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Iterable, Optional, Union
from .models import LogLevel, OutputFormat, Symbol
from .constants import (
    AUTO,
    CSV_ENCODING,
    DEFAULT_DIVIDER_PATTERN,
    SEPARATOR_NAME,
)
from .exceptions import InvalidArgumentError

IndexSpec = Union[str, Iterable[int]]


@dataclass
class TableConfig:
    # 切分（tabularize）
    separator: Any = Symbol(SEPARATOR_NAME)
    divider: str = DEFAULT_DIVIDER_PATTERN
    width: Optional[int] = None                   # None 表示按分割线自动检测

    # 解释（interpret）：AUTO、显式下标集合，或空集合表示“无”
    col_header_idxs: IndexSpec = AUTO
    row_header_idxs: IndexSpec = AUTO
    coercion_idx: IndexSpec = AUTO

    # 变换（transform）
    remove_blank_lines: bool = False
    coercions: Dict[Any, Callable[[Any], Any]] = field(default_factory=dict)
    renames: Dict[Any, Any] = field(default_factory=dict)
    ns: Optional[str] = None
    format: Optional[Union[OutputFormat, str]] = None

    # 导出
    csv_encoding: str = CSV_ENCODING
    csv_index: bool = False
    csv_na_rep: str = ""
    sanitize_file_name: bool = True

    # 日志
    log_level: LogLevel = LogLevel.INFO

    def with_overrides(self, **overrides: Any) -> "TableConfig":
        """返回覆盖部分字段后的新配置"""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown option(s): {', '.join(unknown)}",
                hint=f"Valid options: {', '.join(sorted(known))}",
            )
        return replace(self, **overrides)
