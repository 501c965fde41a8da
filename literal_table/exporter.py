"""
导出系统 - 将投影结果与对象树写出为 CSV / YAML / JSON
"""
import json
import pandas as pd
import yaml
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional, Union
from .config import TableConfig
from .constants import (
    CSV_DELIMITER,
    CSV_LINE_TERMINATOR,
    INVALID_FILENAME_CHARS,
    MAX_FILENAME_LENGTH,
)
from .exceptions import OutputWriteError
from .models import Symbol


def _plain_key(key: Any) -> Any:
    if isinstance(key, str):
        return str(key)
    if key is None or isinstance(key, (bool, int, float)):
        return key
    if isinstance(key, tuple):
        return "/".join(str(_plain_key(k)) for k in key)
    return str(key)


def to_plain(obj: Any) -> Any:
    """
    转换为普通 Python 结构：Keyword → str、FrozenRecord → dict、集合/元组 → list
    """
    if isinstance(obj, Mapping):
        return {_plain_key(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_plain(v) for v in obj]
    if isinstance(obj, str):
        return str(obj)
    if isinstance(obj, Symbol):
        return obj.name
    return obj


class Exporter:
    """导出器"""

    def __init__(self, out_dir: Union[str, Path], config: Optional[TableConfig] = None):
        self.out_dir = Path(out_dir)
        self.config = config or TableConfig()
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def export_csv(self, records: Union[pd.DataFrame, Iterable[Mapping]], name: str) -> Path:
        """
        导出 CSV 文件，接受 DataFrame 或记录序列
        """
        if isinstance(records, pd.DataFrame):
            df = records
        else:
            df = pd.DataFrame([to_plain(r) for r in records])
        csv_path = self.out_dir / f"{self._sanitize_filename(name)}.csv"
        try:
            df.to_csv(
                csv_path,
                encoding=self.config.csv_encoding,
                index=self.config.csv_index,
                na_rep=self.config.csv_na_rep,
                sep=CSV_DELIMITER,
                lineterminator=CSV_LINE_TERMINATOR
            )
        except Exception as e:
            raise OutputWriteError(f"Failed to export CSV: {str(e)}")
        return csv_path

    def export_yaml(self, obj: Any, name: str) -> Path:
        """
        导出 YAML（对象树）
        """
        yaml_path = self.out_dir / f"{self._sanitize_filename(name)}.yml"
        try:
            with open(yaml_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(to_plain(obj), f, allow_unicode=True, default_flow_style=False,
                               sort_keys=False)
        except Exception as e:
            raise OutputWriteError(f"Failed to export YAML: {str(e)}")
        return yaml_path

    def export_json(self, obj: Any, name: str) -> Path:
        """
        导出 JSON
        """
        json_path = self.out_dir / f"{self._sanitize_filename(name)}.json"
        try:
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(to_plain(obj), f, ensure_ascii=False, indent=2, default=str)
        except Exception as e:
            raise OutputWriteError(f"Failed to export JSON: {str(e)}")
        return json_path

    def _sanitize_filename(self, name: str) -> str:
        """
        清洗文件名：去除非法字符
        """
        if not self.config.sanitize_file_name:
            return name

        for char in INVALID_FILENAME_CHARS:
            name = name.replace(char, "_")
        name = name.strip()[:MAX_FILENAME_LENGTH]

        if not name:
            name = "table"
        return name
