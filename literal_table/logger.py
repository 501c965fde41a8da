"""
日志系统 - 文本和JSONL格式
"""
import json
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from .models import LogEvent, LogLevel, ErrorCode, WarningCode
from .constants import LOGGER_NAME, LOG_TEXT_FILE, LOG_JSONL_FILE, LOG_TS_FORMAT

_LEVEL_ORDER = {LogLevel.DEBUG: 0, LogLevel.INFO: 1, LogLevel.WARN: 2, LogLevel.ERROR: 3}
_STD_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class DualLogger:
    """
    双格式日志记录器（文本 + JSONL）。
    未指定 log_dir 时只写入标准 logging（由调用方配置 handler），不落盘。
    每个实例使用独立的子 logger，文件 handler 只挂在自己的子 logger 上，
    并发运行互不串写；记录仍向上传播到 "literal_table"。
    """

    def __init__(self, log_dir: Optional[Path] = None, log_level: LogLevel = LogLevel.INFO):
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.log_level = LogLevel(log_level)
        self.txt_logger = logging.getLogger(f"{LOGGER_NAME}.run{id(self):x}")
        self.txt_logger.setLevel(_STD_LEVELS[self.log_level])
        self._txt_handler = None
        self.jsonl_file = None

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            # 文本日志
            self._txt_handler = logging.FileHandler(self.log_dir / LOG_TEXT_FILE, encoding="utf-8")
            self._txt_handler.setFormatter(logging.Formatter(
                "[%(asctime)s %(levelname)s] %(message)s",
                datefmt=LOG_TS_FORMAT
            ))
            self.txt_logger.addHandler(self._txt_handler)

            # JSONL 日志
            self.jsonl_path = self.log_dir / LOG_JSONL_FILE
            self.jsonl_file = open(self.jsonl_path, "w", encoding="utf-8")

    def __enter__(self) -> "DualLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, event: str, level: LogLevel = LogLevel.INFO, stage: Optional[str] = None,
            message: Optional[str] = None, metrics: Optional[Dict[str, Any]] = None,
            error_code: Optional[ErrorCode] = None,
            warning_code: Optional[WarningCode] = None):
        """
        记录日志事件
        """
        level = LogLevel(level)
        if _LEVEL_ORDER[level] < _LEVEL_ORDER[self.log_level]:
            return

        ts = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        log_event = LogEvent(
            ts=ts,
            lvl=level,
            event=event,
            stage=stage,
            message=message,
            metrics=metrics,
            error_code=error_code,
            warning_code=warning_code,
        )

        metrics_converted = (
            self._convert_to_json_serializable(log_event.metrics) if log_event.metrics else None
        )

        # 写入 JSONL
        if self.jsonl_file is not None:
            json_obj = {
                "ts": log_event.ts,
                "lvl": log_event.lvl.value,
                "event": log_event.event,
            }
            if log_event.stage:
                json_obj["stage"] = log_event.stage
            if log_event.message:
                json_obj["message"] = log_event.message
            if metrics_converted:
                json_obj["metrics"] = metrics_converted
            if log_event.error_code:
                json_obj["error_code"] = log_event.error_code.value
            if log_event.warning_code:
                json_obj["warning_code"] = log_event.warning_code.value

            self.jsonl_file.write(json.dumps(json_obj, ensure_ascii=False, default=str) + "\n")
            self.jsonl_file.flush()

        # 写入文本日志
        parts = [log_event.event]
        if log_event.stage:
            parts.append(f"stage={log_event.stage}")
        if log_event.message:
            parts.append(log_event.message)
        if metrics_converted:
            metrics_str = " ".join(f"{k}={v}" for k, v in metrics_converted.items())
            if metrics_str:
                parts.append(metrics_str)
        if log_event.warning_code:
            parts.append(f"warning={log_event.warning_code.value}")
        if log_event.error_code:
            parts.append(f"error={log_event.error_code.value}")

        msg = " ".join(parts)

        if level == LogLevel.ERROR:
            self.txt_logger.error(msg)
        elif level == LogLevel.WARN:
            self.txt_logger.warning(msg)
        elif level == LogLevel.DEBUG:
            self.txt_logger.debug(msg)
        else:
            self.txt_logger.info(msg)

    def _convert_to_json_serializable(self, obj):
        """
        将 numpy/pandas 类型转换为 JSON 可序列化的 Python 原生类型
        """
        import numpy as np
        import pandas as pd

        if isinstance(obj, dict):
            return {str(k): self._convert_to_json_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._convert_to_json_serializable(item) for item in obj]
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif obj is None or (isinstance(obj, float) and pd.isna(obj)):
            return None
        else:
            return obj

    def close(self):
        """关闭日志文件"""
        if self._txt_handler is not None:
            self.txt_logger.removeHandler(self._txt_handler)
            self._txt_handler.close()
            self._txt_handler = None
        if self.jsonl_file:
            self.jsonl_file.close()
            self.jsonl_file = None
