"""
序列化器 - 将记录序列还原为可被重新解析的表格源码
"""
import json
import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence
from .constants import (
    FALSE_LITERAL,
    KEYWORD_PREFIX,
    NIL_LITERAL,
    SEPARATOR_NAME,
    SOURCE_CELL_PADDING,
    SOURCE_DIVIDER,
    TRUE_LITERAL,
)
from .exceptions import InvalidArgumentError
from .models import Keyword, Symbol

# 可作为关键字单词写出的键（与 tokenizer 的 word 规则一致）
_KEY_RE = re.compile(r'[^\s|"\#]+')


def render_value(value: Any) -> str:
    """单个值的源码写法"""
    if value is None:
        return NIL_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    if isinstance(value, Keyword):
        return f"{KEYWORD_PREFIX}{value}"
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple)):
        # 多值单元格；少于两个值的列表重新解析后会变成标量或 nil
        if len(value) < 2:
            raise InvalidArgumentError(
                f"Cannot render a {len(value)}-element list as a cell: {value!r}",
                hint="Multi-value cells need at least two values",
            )
        return " ".join(render_value(v) for v in value)
    if callable(value) and hasattr(value, "__name__"):
        return value.__name__
    return json.dumps(str(value), ensure_ascii=False)


def render_key(key: Any) -> str:
    if isinstance(key, str):
        if not _KEY_RE.fullmatch(key):
            raise InvalidArgumentError(
                f"Key {key!r} cannot be written as a keyword",
                hint="Keys must be non-empty and contain no whitespace, '|', '\"' or '#'",
            )
        return f"{KEYWORD_PREFIX}{key}"
    return render_value(key)


def _ordered_keys(records: Sequence[Mapping[Any, Any]], keys: Optional[Sequence[Any]],
                  sort_key: Optional[Callable[[Any], Any]]) -> List[Any]:
    if keys is not None:
        return list(keys)
    seen: List[Any] = []
    for record in records:
        for key in record:
            if key not in seen:
                seen.append(key)
    return sorted(seen, key=sort_key)


def _format_line(cells: Sequence[str], widths: Sequence[int]) -> str:
    pad = " " * SOURCE_CELL_PADDING
    inner = f"{pad}{SEPARATOR_NAME}{pad}".join(c.ljust(w) for c, w in zip(cells, widths))
    return f"{SEPARATOR_NAME}{pad}{inner}{pad}{SEPARATOR_NAME}"


def to_source(records: Iterable[Mapping[Any, Any]], keys: Optional[Sequence[Any]] = None,
              sort_key: Optional[Callable[[Any], Any]] = None) -> str:
    """
    生成表头行、分割线与数据行，列宽对齐。
    keys 指定列顺序；否则对全部键排序（可用 sort_key 自定义排序）。
    缺失的键写为 nil。
    无法写成关键字的键、少于两个值的列表会抛出 InvalidArgumentError。
    """
    records = list(records)
    columns = _ordered_keys(records, keys, sort_key)
    if not columns:
        return ""

    header = [render_key(k) for k in columns]
    body = [[render_value(record.get(k)) for k in columns] for record in records]
    widths = [
        max([len(header[j]), len(SOURCE_DIVIDER)] + [len(row[j]) for row in body])
        for j in range(len(columns))
    ]
    divider = ["-" * w for w in widths]

    lines = [_format_line(header, widths), _format_line(divider, widths)]
    lines.extend(_format_line(row, widths) for row in body)
    return "\n".join(lines) + "\n"
