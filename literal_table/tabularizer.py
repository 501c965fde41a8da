"""
表格切分器 - 将扁平词法单元序列切分为等宽的行
"""
import re
from typing import List, Optional, Sequence
from .config import TableConfig
from .exceptions import StructuralMismatchError
from .models import Cell, DividerLine, Row, Symbol, Table, Token


class Tabularizer:
    """按分隔符切分行与单元格"""

    def __init__(self, config: Optional[TableConfig] = None):
        self.config = config or TableConfig()
        self.separator = self.config.separator
        self._divider_re = re.compile(self.config.divider)

    def is_divider(self, token: Token) -> bool:
        """符号名匹配分割线模式即视为分割符"""
        return (
            isinstance(token, Symbol)
            and token != self.separator
            and self._divider_re.fullmatch(token.name) is not None
        )

    def is_separator(self, token: Token) -> bool:
        return isinstance(token, type(self.separator)) and token == self.separator

    def detect_width(self, tokens: Sequence[Token]) -> int:
        """
        统计首个分割线行中的分割符数量（每列一个）
        """
        width = 0
        in_divider_row = False
        for token in tokens:
            if self.is_divider(token):
                in_divider_row = True
                width += 1
            elif in_divider_row and not self.is_separator(token):
                break
        return width

    def tabularize(self, tokens: Sequence[Token]) -> Table:
        width = self.config.width if self.config.width is not None else self.detect_width(tokens)
        if width <= 0:
            raise StructuralMismatchError(
                "Cannot determine table width",
                hint="Add a divider row (| --- | --- |) or pass an explicit width",
                tokens=tokens,
            )

        table: Table = []
        pending: List[Token] = []
        separators = 0
        for token in tokens:
            if not pending and not self.is_separator(token):
                raise StructuralMismatchError(
                    f"Row must start with a separator, got {token!r}",
                    tokens=tokens,
                )
            pending.append(token)
            if self.is_separator(token):
                separators += 1
                # 行首一个、单元格之间各一个、行尾一个
                if separators == width + 1:
                    table.append(self._to_row(pending))
                    pending = []
                    separators = 0

        if pending:
            raise StructuralMismatchError(
                f"Trailing row has {separators} separator(s), expected {width + 1}",
                hint="Every row needs one separator per cell boundary",
                tokens=pending,
            )
        return table

    def _to_row(self, tokens: List[Token]) -> Row:
        """按分隔符拆分单元格；整行为分割符时折叠为 DividerLine"""
        cells: List[Cell] = []
        span: List[Token] = []
        for token in tokens[1:]:
            if self.is_separator(token):
                cells.append(self._to_cell(span))
                span = []
            else:
                span.append(token)

        if cells and all(self.is_divider(c) for c in cells):
            return DividerLine
        return cells

    @staticmethod
    def _to_cell(span: List[Token]) -> Cell:
        if not span:
            return None
        if len(span) == 1:
            return span[0]
        return list(span)


def tabularize(tokens: Sequence[Token], config: Optional[TableConfig] = None) -> Table:
    """切分入口"""
    return Tabularizer(config).tabularize(tokens)
