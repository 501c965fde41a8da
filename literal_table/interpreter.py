"""
表格解释器 - 切出列表头、行表头、转换行与数据块
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from .config import TableConfig
from .constants import AUTO
from .models import Cell, DividerLine, Interpretation, Table


def _as_index_list(spec: Union[int, Iterable[int]]) -> List[int]:
    if isinstance(spec, int):
        return [spec]
    return sorted(set(spec))


def _flatten(headers: List[tuple], depth: int) -> List[Any]:
    """单行（列）表头展开为平铺列表，多行保留元组"""
    if depth == 1:
        return [h[0] for h in headers]
    return headers


class Interpreter:
    """表格解释器"""

    def __init__(self, config: Optional[TableConfig] = None):
        self.config = config or TableConfig()

    def interpret(self, table: Table) -> Interpretation:
        """
        1. 在移除分割线之前定位转换行（依赖与分割线的相邻关系）
        2. 移除分割线
        3. 按行下标划分为列表头、转换行、数据
        4. 按列下标从数据中切出行表头
        5. 转置列表头并展开单行表头
        6. 构建 列表头 → 转换函数 映射
        7. 去掉行表头上方的“角”单元格
        """
        coercion_idxs = self.detect_coercion_rows(table)
        col_header_idxs = self.detect_col_header_rows(table, coercion_idxs)
        row_header_idxs = self.detect_row_header_cols(table)

        rows = [row for row in table if row is not DividerLine]
        excluded = set(col_header_idxs) | set(coercion_idxs)
        header_rows = [rows[i] for i in col_header_idxs if 0 <= i < len(rows)]
        coercion_rows = [rows[i] for i in coercion_idxs if 0 <= i < len(rows)]
        body = [row for i, row in enumerate(rows) if i not in excluded]

        row_headers = self._split_row_headers(body, row_header_idxs)
        data = [
            [cell for j, cell in enumerate(row) if j not in row_header_idxs]
            for row in body
        ]

        full_col_headers = self._col_headers(header_rows)
        coercions = self._coercions(full_col_headers, coercion_rows, row_header_idxs)
        col_headers = [h for j, h in enumerate(full_col_headers) if j not in row_header_idxs]

        return Interpretation(
            data=data,
            col_headers=col_headers or None,
            row_headers=row_headers or None,
            coercions=coercions or None,
        )

    # ---------- 自动检测 ----------

    def detect_coercion_rows(self, table: Table) -> List[int]:
        """
        分割线前一行若至少含一个可调用单元格，则为转换行。
        返回的是移除分割线之后的行下标。
        """
        spec = self.config.coercion_idx
        if spec != AUTO:
            return _as_index_list(spec)

        dividers_seen = 0
        for i in range(len(table) - 1):
            row = table[i]
            if row is DividerLine:
                dividers_seen += 1
                continue
            if table[i + 1] is DividerLine and any(callable(cell) for cell in row):
                return [i - dividers_seen]
        return []

    def detect_col_header_rows(self, table: Table, coercion_idxs: Sequence[int] = ()) -> List[int]:
        """首个分割线之前的行为列表头；没有分割线时取第一行"""
        spec = self.config.col_header_idxs
        if spec != AUTO:
            return _as_index_list(spec)

        if not table:
            return []
        first_divider = next((i for i, row in enumerate(table) if row is DividerLine), None)
        if first_divider is None:
            candidates = [0]
        else:
            candidates = list(range(first_divider))
        return [i for i in candidates if i not in coercion_idxs]

    def detect_row_header_cols(self, table: Table) -> List[int]:
        """首行为分割线时没有行表头，否则为首行开头连续空单元格的数量"""
        spec = self.config.row_header_idxs
        if spec != AUTO:
            return _as_index_list(spec)

        if not table or table[0] is DividerLine:
            return []
        count = 0
        for cell in table[0]:
            if cell is not None:
                break
            count += 1
        return list(range(count))

    # ---------- 切分 ----------

    @staticmethod
    def _split_row_headers(body: List[List[Cell]], row_header_idxs: List[int]) -> List[Any]:
        if not row_header_idxs:
            return []
        columns = list(zip(*body))
        picked = [columns[j] for j in row_header_idxs if 0 <= j < len(columns)]
        if not picked:
            return []
        return _flatten(list(zip(*picked)), len(picked))

    @staticmethod
    def _col_headers(header_rows: List[List[Cell]]) -> List[Any]:
        if not header_rows:
            return []
        return _flatten(list(zip(*header_rows)), len(header_rows))

    @staticmethod
    def _coercions(col_headers: List[Any], coercion_rows: List[List[Cell]],
                   row_header_idxs: List[int]) -> Dict[Any, Any]:
        """没有列表头时以数据列下标为键"""
        if not coercion_rows:
            return {}
        coercions = {}
        data_col = 0
        for j, fn in enumerate(coercion_rows[0]):
            if j in row_header_idxs:
                continue
            if col_headers:
                key = col_headers[j] if j < len(col_headers) else None
            else:
                key = data_col
            data_col += 1
            if key is not None and fn is not None and callable(fn):
                coercions[key] = fn
        return coercions


def interpret(table: Table, config: Optional[TableConfig] = None) -> Interpretation:
    """解释入口"""
    return Interpreter(config).interpret(table)
