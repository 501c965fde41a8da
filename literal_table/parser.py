"""
主解析器 - 统一入口函数
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from .config import TableConfig
from .interpreter import Interpreter
from .logger import DualLogger
from .models import DividerLine, LogLevel, Table, WarningCode
from .tabularizer import Tabularizer
from .template import apply_template
from .tokenizer import Resolver, infer_width, tokenize
from .transformer import Transformer
from .tree_builder import TreeBuilder


def _build_config(config: Optional[TableConfig], overrides: Dict[str, Any]) -> TableConfig:
    if config is None:
        config = TableConfig()
    return config.with_overrides(**overrides) if overrides else config


def _load_table(source: str, config: TableConfig, resolver: Optional[Resolver],
                logger: DualLogger, stage: str) -> Table:
    """词法 + 切分；没有分割线且未指定宽度时按首行推断列数"""
    tokens = tokenize(source, resolver)
    logger.log("tokenize.done", stage=stage, metrics={"tokens": len(tokens)})

    tabularizer = Tabularizer(config)
    if config.width is None and tabularizer.detect_width(tokens) == 0:
        width = infer_width(source)
        if width is not None:
            tabularizer = Tabularizer(config.with_overrides(width=width))

    table = tabularizer.tabularize(tokens)
    logger.log("tabularize.done", stage=stage,
               metrics={"rows": len(table),
                        "dividers": sum(1 for row in table if row is DividerLine)})
    return table


def read_table(
    source: str,
    config: Optional[TableConfig] = None,
    resolver: Optional[Resolver] = None,
    log_dir: Optional[Union[str, Path]] = None,
    **overrides: Any
) -> Any:
    """
    统一入口函数：解析表格源码并投影为指定格式

    Args:
        source: 竖线分隔的表格源码
        config: 配置对象
        resolver: 符号解析函数（名字 → 值），用于类型转换行等
        log_dir: 日志目录，为空时不写日志文件
        overrides: 覆盖 config 中的同名字段，例如 format="maps"

    Returns:
        按 config.format 投影后的结果
    """
    config = _build_config(config, overrides)
    logger = DualLogger(log_dir, config.log_level)

    try:
        logger.log("run.start", stage="table")
        table = _load_table(source, config, resolver, logger, "table")

        interpretation = Interpreter(config).interpret(table)
        logger.log("interpret.done", stage="table", metrics={
            "data_rows": len(interpretation.data),
            "col_headers": len(interpretation.col_headers or []),
            "row_headers": len(interpretation.row_headers or []),
            "coercions": len(interpretation.coercions or {}),
        })

        transformer = Transformer(config)
        result = transformer.transform(interpretation)
        logger.log("transform.done", stage="table",
                   metrics={"format": transformer.format.value if transformer.format else "default"})

        logger.log("run.end", message="Run completed successfully")
        return result

    except Exception as e:
        logger.log("error", level=LogLevel.ERROR, message=str(e), error_code=getattr(e, "code", None))
        raise
    finally:
        logger.close()


def read_tree(
    template_source: str,
    data_source: str,
    config: Optional[TableConfig] = None,
    resolver: Optional[Resolver] = None,
    log_dir: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    按模板源码解析数据源码，返回嵌套对象树
    """
    config = config or TableConfig()
    logger = DualLogger(log_dir, config.log_level)

    try:
        logger.log("run.start", stage="tree")
        template_table = _load_table(template_source, config, resolver, logger, "template")
        data_table = _load_table(data_source, config, resolver, logger, "data")

        builder = TreeBuilder(template_table, logger)
        logger.log("template.parsed", stage="tree", metrics={"shapes": len(builder.templates)})

        tree = builder.build(data_table)
        logger.log("tree.built", stage="tree", metrics={"keys": list(tree.keys())})
        logger.log("run.end", message="Run completed successfully")
        return tree

    except Exception as e:
        logger.log("error", level=LogLevel.ERROR, message=str(e), error_code=getattr(e, "code", None))
        raise
    finally:
        logger.close()


def read_template_rows(
    template_source: str,
    data_source: str,
    config: Optional[TableConfig] = None,
    resolver: Optional[Resolver] = None,
    log_dir: Optional[Union[str, Path]] = None,
) -> List[Any]:
    """
    单遍平铺模板应用，每个数据行产出一个映射（集合模式下为单元素数组）
    """
    config = config or TableConfig()
    logger = DualLogger(log_dir, config.log_level)

    try:
        logger.log("run.start", stage="apply_template")
        template_table = _load_table(template_source, config, resolver, logger, "template")
        data_table = _load_table(data_source, config, resolver, logger, "data")

        result = apply_template(template_table, data_table)
        data_rows = sum(1 for row in data_table if row is not DividerLine)
        if len(result) < data_rows:
            logger.log("template.exhausted", level=LogLevel.WARN, stage="apply_template",
                       metrics={"data_rows": data_rows, "applied": len(result)},
                       warning_code=WarningCode.TEMPLATE_EXHAUSTED)

        logger.log("run.end", message="Run completed successfully")
        return result

    except Exception as e:
        logger.log("error", level=LogLevel.ERROR, message=str(e), error_code=getattr(e, "code", None))
        raise
    finally:
        logger.close()
