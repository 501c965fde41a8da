"""
Literal Table - 竖线分隔表格字面量的解析、投影与对象树重建
"""

__version__ = "1.0.0"

from .parser import read_table, read_tree, read_template_rows
from .config import TableConfig
from .constants import AUTO
from .tokenizer import tokenize, infer_width, namespace_resolver, SEPARATOR
from .tabularizer import Tabularizer, tabularize
from .interpreter import Interpreter, interpret
from .transformer import Transformer, transform
from .template import parse_template, apply_template, fingerprint
from .tree_builder import TreeBuilder, table_to_tree
from .serializer import to_source
from .exporter import Exporter
from .logger import DualLogger
from .exceptions import (
    LiteralTableError,
    InvalidArgumentError,
    TokenizeError,
    StructuralMismatchError,
    TemplateParseError,
    TemplateMatchError,
    OutputWriteError,
)
from .models import (
    OutputFormat,
    LogLevel,
    ErrorCode,
    WarningCode,
    Symbol,
    Keyword,
    DividerLine,
    Interpretation,
    FlatDescriptor,
    RepeatingDescriptor,
    FrozenRecord,
)

__all__ = [
    "read_table",
    "read_tree",
    "read_template_rows",
    "TableConfig",
    "AUTO",
    "tokenize",
    "infer_width",
    "namespace_resolver",
    "SEPARATOR",
    "Tabularizer",
    "tabularize",
    "Interpreter",
    "interpret",
    "Transformer",
    "transform",
    "parse_template",
    "apply_template",
    "fingerprint",
    "TreeBuilder",
    "table_to_tree",
    "to_source",
    "Exporter",
    "DualLogger",
    "LiteralTableError",
    "InvalidArgumentError",
    "TokenizeError",
    "StructuralMismatchError",
    "TemplateParseError",
    "TemplateMatchError",
    "OutputWriteError",
    "OutputFormat",
    "LogLevel",
    "ErrorCode",
    "WarningCode",
    "Symbol",
    "Keyword",
    "DividerLine",
    "Interpretation",
    "FlatDescriptor",
    "RepeatingDescriptor",
    "FrozenRecord",
]
