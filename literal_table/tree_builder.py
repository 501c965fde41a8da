"""
树构建器 - 按模板逐行匹配数据表，重建任意嵌套的对象树

遍历是对数据行的一次 reduce，状态 (tree, frames) 每步都生成新值：
- tree: 已构建的结果树
- frames: (描述符, 路径段) 栈；重复块的路径段为 (集合名, 当前元素下标)，
  下标 -1 表示集合尚无元素；单行模板的路径段为 None
"""
from functools import reduce
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union
from .exceptions import TemplateMatchError
from .logger import DualLogger
from .models import Descriptor, DividerLine, LogLevel, Table, WarningCode
from .template import ParsedTemplate, fingerprint, has_symbol, is_blank, parse_template

PathKey = Union[str, int]


class Frame(NamedTuple):
    descriptor: Descriptor
    segment: Optional[Tuple[str, int]]


class WalkState(NamedTuple):
    tree: Dict[str, Any]
    frames: Tuple[Frame, ...]


# ========== 不可变的嵌套更新 ==========

def _get_in(tree: Any, path: Sequence[PathKey]) -> Any:
    node = tree
    for key in path:
        node = node[key]
    return node


def _assoc_in(tree: Any, path: Sequence[PathKey], value: Any) -> Any:
    """沿路径复制容器并替换末端值，原树不变"""
    if not path:
        return value
    head, rest = path[0], path[1:]
    if isinstance(tree, list):
        copied = list(tree)
        copied[head] = _assoc_in(tree[head], rest, value)
        return copied
    copied = dict(tree)
    copied[head] = _assoc_in(tree.get(head, {}), rest, value)
    return copied


def _focus_path(frames: Sequence[Frame]) -> List[PathKey]:
    path: List[PathKey] = []
    for frame in frames:
        if frame.segment is None:
            continue
        key, index = frame.segment
        path.append(key)
        if index >= 0:
            path.append(index)
    return path


def _extract(descriptor: Descriptor, row: Sequence[Any]) -> Dict[str, Any]:
    return {
        key: (row[idx] if idx < len(row) else None)
        for key, idx in descriptor.row_template.items()
    }


class TreeBuilder:
    """树构建器；解析后的模板只读，可在多次构建之间复用"""

    def __init__(self, template: Union[Table, ParsedTemplate], logger: Optional[DualLogger] = None):
        if isinstance(template, list):
            template = parse_template(template)
        self.templates: ParsedTemplate = template
        self.logger = logger

    def build(self, data_table: Table) -> Dict[str, Any]:
        rows = [row for row in data_table if row is not DividerLine]
        final = reduce(self._step, enumerate(rows), WalkState(tree={}, frames=()))
        return final.tree

    def _step(self, state: WalkState, numbered_row: Tuple[int, List[Any]]) -> WalkState:
        row_idx, row = numbered_row

        # 空行关闭最内层
        if is_blank(row):
            return state._replace(frames=state.frames[:-1])

        key = fingerprint(row)
        descriptor = self.templates.get(key)
        if descriptor is not None:
            return self._open(state, descriptor)

        if has_symbol(row):
            raise TemplateMatchError(
                f"Row {row_idx} does not match any template shape: {row!r}",
                hint="Add a template row with the same symbol layout",
                row=row,
                fingerprint=key,
            )

        if not state.frames:
            if self.logger:
                self.logger.log("tree.unmatched_row", level=LogLevel.WARN, stage="tree",
                                message=f"row {row_idx} has no active template, skipped",
                                warning_code=WarningCode.UNMATCHED_ROW)
            return state

        return self._write(state, row)

    def _open(self, state: WalkState, descriptor: Descriptor) -> WalkState:
        """压入新描述符；重复块在当前路径下建立（或沿用）数组"""
        state = self._materialize(state)
        if not descriptor.repeating:
            return state._replace(frames=state.frames + (Frame(descriptor, None),))

        list_path = _focus_path(state.frames) + [descriptor.attr_name]
        tree = state.tree
        try:
            _get_in(tree, list_path)
        except (KeyError, IndexError):
            tree = _assoc_in(tree, list_path, [])
        frame = Frame(descriptor, (descriptor.attr_name, -1))
        return WalkState(tree=tree, frames=state.frames + (frame,))

    def _write(self, state: WalkState, row: Sequence[Any]) -> WalkState:
        """数据行：重复块追加新元素，单行模板合并到当前路径"""
        frame = state.frames[-1]
        values = _extract(frame.descriptor, row)

        if frame.descriptor.repeating:
            attr_name, _ = frame.segment
            outer = state.frames[:-1]
            list_path = _focus_path(outer) + [attr_name]
            current = _get_in(state.tree, list_path)
            tree = _assoc_in(state.tree, list_path, current + [values])
            frames = outer + (Frame(frame.descriptor, (attr_name, len(current))),)
            return WalkState(tree=tree, frames=frames)

        state = self._materialize(state)
        path = _focus_path(state.frames)
        merged = {**_get_in(state.tree, path), **values}
        return state._replace(tree=_assoc_in(state.tree, path, merged))

    @staticmethod
    def _materialize(state: WalkState) -> WalkState:
        """最内层重复块尚无元素时先追加一个空元素，保证当前焦点是映射"""
        for pos in range(len(state.frames) - 1, -1, -1):
            frame = state.frames[pos]
            if frame.segment is None:
                continue
            attr_name, index = frame.segment
            if index >= 0:
                return state
            list_path = _focus_path(state.frames[:pos]) + [attr_name]
            current = _get_in(state.tree, list_path)
            tree = _assoc_in(state.tree, list_path, current + [{}])
            frames = list(state.frames)
            frames[pos] = Frame(frame.descriptor, (attr_name, len(current)))
            return WalkState(tree=tree, frames=tuple(frames))
        return state


def table_to_tree(template_table: Union[Table, ParsedTemplate], data_table: Table,
                  logger: Optional[DualLogger] = None) -> Dict[str, Any]:
    """树构建入口"""
    return TreeBuilder(template_table, logger).build(data_table)
