"""
常量定义
"""

# 分隔符与分割线
SEPARATOR_NAME = "|"
DEFAULT_DIVIDER_PATTERN = r"-{3,}"
REPEAT_MARKER_NAME = "*"

# 自动检测哨兵值
AUTO = "auto"

# 词法
KEYWORD_PREFIX = ":"
NAMESPACE_DELIMITER = "/"
COMMENT_PREFIX = "#"
NIL_LITERAL = "nil"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

# 序列化
SOURCE_CELL_PADDING = 1
SOURCE_DIVIDER = "---"

# 导出
CSV_ENCODING = "utf-8-sig"
CSV_DELIMITER = ","
CSV_LINE_TERMINATOR = "\n"
INVALID_FILENAME_CHARS = '<>:"/\\|?*'
MAX_FILENAME_LENGTH = 120

# 日志
LOGGER_NAME = "literal_table"
LOG_TEXT_FILE = "run.log.txt"
LOG_JSONL_FILE = "run.log.jsonl"
LOG_TS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
