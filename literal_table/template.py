"""
模板解析 - 将模板表解析为 形状指纹 → 描述符 的查找表，以及单遍的平铺模板应用
"""
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union
from .constants import REPEAT_MARKER_NAME
from .exceptions import TemplateParseError
from .models import (
    Descriptor,
    DividerLine,
    Fingerprint,
    FlatDescriptor,
    Keyword,
    RepeatingDescriptor,
    Row,
    Symbol,
    Table,
)

REPEAT_MARKER = Symbol(REPEAT_MARKER_NAME)

ParsedTemplate = Mapping[Fingerprint, Descriptor]


def fingerprint(row: Sequence[Any]) -> Fingerprint:
    """非符号单元格一律置空，只保留符号的位置与名字"""
    return tuple(cell if isinstance(cell, Symbol) else None for cell in row)


def is_blank(row: Sequence[Any]) -> bool:
    return all(cell is None for cell in row)


def has_symbol(row: Sequence[Any]) -> bool:
    return any(isinstance(cell, Symbol) for cell in row)


def has_keyword(row: Sequence[Any]) -> bool:
    return any(isinstance(cell, Keyword) for cell in row)


def row_fields(row: Sequence[Any]) -> Tuple[Tuple[str, int], ...]:
    """关键字单元格 → (输出键, 列下标)"""
    return tuple((str(cell), j) for j, cell in enumerate(row) if isinstance(cell, Keyword))


def _strip_dividers(table: Table) -> List[Row]:
    return [row for row in table if row is not DividerLine]


def parse_template(template_table: Table) -> ParsedTemplate:
    """
    逐行解析模板：
    - 空行跳过
    - 含符号且含关键字：单行模板（FlatDescriptor）
    - 含符号不含关键字：重复块头，紧随的两行分别为集合名行与字段名行（RepeatingDescriptor）
    - 其他：解析错误
    指纹重复时报错，不允许后者覆盖前者。
    """
    rows = _strip_dividers(template_table)
    templates: Dict[Fingerprint, Descriptor] = {}
    i = 0
    while i < len(rows):
        row = rows[i]
        if is_blank(row):
            i += 1
            continue

        if has_symbol(row) and has_keyword(row):
            descriptor: Descriptor = FlatDescriptor(row_fields(row))
            consumed = 1
        elif has_symbol(row):
            if i + 2 >= len(rows):
                raise TemplateParseError(
                    "Repeating block header must be followed by a name row and a field row",
                    row=row,
                )
            name_row, field_row = rows[i + 1], rows[i + 2]
            attr_name = next((cell for cell in name_row if isinstance(cell, Keyword)), None)
            if attr_name is None:
                raise TemplateParseError("Collection name row has no keyword", row=name_row)
            descriptor = RepeatingDescriptor(str(attr_name), row_fields(field_row))
            consumed = 3
        else:
            raise TemplateParseError(f"Not a template row: {row!r}", row=row)

        key = fingerprint(row)
        if key in templates:
            raise TemplateParseError(
                f"Duplicate template shape: {row!r}",
                hint="Each template row must differ in the position or name of its symbols",
                row=row,
            )
        templates[key] = descriptor
        i += consumed

    return MappingProxyType(templates)


def _zip_row(template_row: Sequence[Any], data_row: Sequence[Any]) -> Dict[str, Any]:
    return {
        str(t): d
        for t, d in zip(template_row, data_row)
        if isinstance(t, Keyword)
    }


def apply_template(template_table: Table, data_table: Table) -> List[Union[Dict[str, Any], List[Dict[str, Any]]]]:
    """
    模板与数据各自游标前进的单遍应用。
    遇到首格为 `*` 的模板行后进入集合模式：剩余数据行都按其下一行模板解析，
    每行产出单元素数组，供后续合并。
    普通模式下模板行用尽即停止。
    """
    template_rows = _strip_dividers(template_table)
    data_rows = _strip_dividers(data_table)

    result: List[Union[Dict[str, Any], List[Dict[str, Any]]]] = []
    cursor = 0
    collection_row = None
    for data_row in data_rows:
        if collection_row is None:
            if cursor >= len(template_rows):
                break
            template_row = template_rows[cursor]
            if template_row and template_row[0] == REPEAT_MARKER:
                if cursor + 1 >= len(template_rows):
                    raise TemplateParseError(
                        "Repeat marker must be followed by a row template",
                        row=template_row,
                    )
                collection_row = template_rows[cursor + 1]

        if collection_row is not None:
            result.append([_zip_row(collection_row, data_row)])
        else:
            result.append(_zip_row(template_row, data_row))
            cursor += 1

    return result
