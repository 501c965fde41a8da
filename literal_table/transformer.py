"""
变换器 - 后处理（去空行、类型转换、重命名、命名空间）与输出格式投影
"""
import pandas as pd
from typing import Any, Callable, Dict, List, Optional, Union
from .config import TableConfig
from .exceptions import InvalidArgumentError
from .models import FrozenRecord, Interpretation, Keyword, OutputFormat
from .constants import NAMESPACE_DELIMITER


def resolve_format(fmt: Optional[Union[OutputFormat, str]]) -> Optional[OutputFormat]:
    if fmt is None or isinstance(fmt, OutputFormat):
        return fmt
    try:
        return OutputFormat(str(fmt).lstrip(":"))
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown format: {fmt!r}",
            hint=f"Valid formats: {', '.join(f.value for f in OutputFormat)}",
        ) from None


def _qualify(header: Any, ns: str) -> Any:
    if isinstance(header, Keyword):
        return header.qualify(ns)
    if isinstance(header, tuple):
        return tuple(_qualify(h, ns) for h in header)
    if isinstance(header, str):
        return f"{ns}{NAMESPACE_DELIMITER}{header}"
    return header


def _is_blank(row: List[Any]) -> bool:
    return all(cell is None for cell in row)


class Transformer:
    """按固定顺序后处理解释结果，再投影为指定输出格式"""

    def __init__(self, config: Optional[TableConfig] = None):
        self.config = config or TableConfig()
        self.format = resolve_format(self.config.format)

    def transform(self, interpretation: Interpretation) -> Any:
        prepared = self.prepare(interpretation)
        projector = _PROJECTORS.get(self.format, project_default)
        return projector(prepared)

    def prepare(self, interpretation: Interpretation) -> Interpretation:
        """
        1. 去除全空数据行（行表头同步去除）
        2. 应用列转换函数
        3. 重命名列表头
        4. 为列表头加命名空间（在重命名之后）
        """
        data = [list(row) for row in interpretation.data]
        row_headers = list(interpretation.row_headers) if interpretation.row_headers else None
        col_headers = list(interpretation.col_headers) if interpretation.col_headers else None

        if self.config.remove_blank_lines:
            keep = [i for i, row in enumerate(data) if not _is_blank(row)]
            data = [data[i] for i in keep]
            if row_headers is not None:
                row_headers = [row_headers[i] for i in keep if i < len(row_headers)] or None

        coercions = dict(interpretation.coercions or {})
        coercions.update(self.config.coercions)
        data = self._apply_coercions(data, col_headers, coercions)

        if col_headers is not None and self.config.renames:
            col_headers = [self.config.renames.get(h, h) for h in col_headers]
        if col_headers is not None and self.config.ns:
            col_headers = [_qualify(h, self.config.ns) for h in col_headers]

        return Interpretation(
            data=data,
            col_headers=col_headers,
            row_headers=row_headers,
            coercions=coercions or None,
        )

    @staticmethod
    def _apply_coercions(data: List[List[Any]], col_headers: Optional[List[Any]],
                         coercions: Dict[Any, Callable[[Any], Any]]) -> List[List[Any]]:
        """空值不做转换；没有列表头时按列下标匹配"""
        positions = {}
        for key, fn in coercions.items():
            if col_headers:
                if key in col_headers:
                    positions[col_headers.index(key)] = fn
            elif isinstance(key, int):
                positions[key] = fn
        if not positions:
            return data

        return [
            [
                positions[j](cell) if j in positions and cell is not None else cell
                for j, cell in enumerate(row)
            ]
            for row in data
        ]


# ========== 输出格式投影 ==========

def _headers_or_positions(interpretation: Interpretation) -> List[Any]:
    if interpretation.col_headers:
        return interpretation.col_headers
    width = max((len(row) for row in interpretation.data), default=0)
    return list(range(width))


def project_map(interpretation: Interpretation) -> Dict[str, Any]:
    return {"col_headers": interpretation.col_headers, "data": interpretation.data}


def project_maps(interpretation: Interpretation) -> List[Dict[Any, Any]]:
    headers = _headers_or_positions(interpretation)
    return [dict(zip(headers, row)) for row in interpretation.data]


def project_table(interpretation: Interpretation) -> List[List[Any]]:
    if not interpretation.col_headers:
        return [list(row) for row in interpretation.data]
    return [list(interpretation.col_headers)] + [list(row) for row in interpretation.data]


def project_relation(interpretation: Interpretation) -> set:
    return {FrozenRecord(record) for record in project_maps(interpretation)}


def project_cells(interpretation: Interpretation) -> List[Dict[str, Any]]:
    headers = _headers_or_positions(interpretation)
    row_headers = interpretation.row_headers or []
    cells = []
    for i, row in enumerate(interpretation.data):
        row_header = row_headers[i] if i < len(row_headers) else None
        for j, value in enumerate(row):
            cells.append({
                "col_header": headers[j] if j < len(headers) else j,
                "row_header": row_header,
                "value": value,
            })
    return cells


def _pandas_index(labels: List[Any]) -> pd.Index:
    if labels and all(isinstance(label, tuple) for label in labels):
        return pd.MultiIndex.from_tuples(labels)
    return pd.Index(labels)


def project_dataframe(interpretation: Interpretation) -> pd.DataFrame:
    columns = _pandas_index(_headers_or_positions(interpretation))
    index = _pandas_index(interpretation.row_headers) if interpretation.row_headers else None
    return pd.DataFrame(interpretation.data, columns=columns, index=index)


def project_default(interpretation: Interpretation) -> Dict[str, Any]:
    return interpretation.as_dict(include_coercions=False)


_PROJECTORS = {
    OutputFormat.map: project_map,
    OutputFormat.maps: project_maps,
    OutputFormat.table: project_table,
    OutputFormat.relation: project_relation,
    OutputFormat.cells: project_cells,
    OutputFormat.dataframe: project_dataframe,
}


def transform(interpretation: Interpretation, config: Optional[TableConfig] = None) -> Any:
    """变换入口"""
    return Transformer(config).transform(interpretation)
