"""Unit tests for file export and the dual-format logger."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import numpy as np
import pandas as pd
import yaml

from literal_table import (
    DualLogger,
    Exporter,
    FrozenRecord,
    Keyword,
    LogLevel,
    TableConfig,
    read_table,
    read_tree,
)
from literal_table.exporter import to_plain

from conftest import ALBUM_DATA, ALBUM_TEMPLATE, ALBUM_TREE, DATES_SOURCE


class TestToPlain:

    def test_keywords_become_plain_strings(self):
        plain = to_plain({Keyword("a"): [Keyword("b")]})
        assert plain == {"a": ["b"]}
        assert type(next(iter(plain))) is str
        assert type(plain["a"][0]) is str

    def test_records_and_sets(self):
        assert to_plain({FrozenRecord({"a": 1})}) == [{"a": 1}]

    def test_tuple_keys_joined(self):
        assert to_plain({("group", "a"): 1}) == {"group/a": 1}


class TestExporter:

    def test_export_csv_from_records(self, tmp_path):
        records = read_table(DATES_SOURCE, format="maps")
        path = Exporter(tmp_path).export_csv(records, "dates")
        df = pd.read_csv(path, encoding="utf-8-sig")
        assert df.columns.tolist() == ["date", "value"]
        assert df["value"].tolist() == [10, 20]

    def test_export_csv_from_dataframe(self, tmp_path):
        df = read_table(DATES_SOURCE, format="dataframe")
        path = Exporter(tmp_path).export_csv(df, "frame")
        assert path.name == "frame.csv"
        assert len(pd.read_csv(path, encoding="utf-8-sig")) == 2

    def test_export_yaml_tree(self, tmp_path):
        path = Exporter(tmp_path).export_yaml(read_tree(ALBUM_TEMPLATE, ALBUM_DATA), "albums")
        with open(path, encoding="utf-8") as f:
            assert yaml.safe_load(f) == ALBUM_TREE

    def test_export_json_relation(self, tmp_path):
        path = Exporter(tmp_path).export_json(read_table(DATES_SOURCE, format="relation"), "rel")
        loaded = json.loads(path.read_text(encoding="utf-8"))
        assert sorted(r["value"] for r in loaded) == [10, 20]

    def test_file_name_sanitized(self, tmp_path):
        path = Exporter(tmp_path).export_json({"a": 1}, "a/b:c")
        assert path.name == "a_b_c.json"

    def test_sanitizing_can_be_disabled(self, tmp_path):
        exporter = Exporter(tmp_path, TableConfig(sanitize_file_name=False))
        assert exporter.export_json({}, "plain name").name == "plain name.json"


class TestDualLogger:

    def test_numpy_metrics_serialized(self, tmp_path):
        with DualLogger(tmp_path) as logger:
            logger.log("x", metrics={"n": np.int64(3), "f": np.float32(0.5), "arr": np.array([1, 2])})
        event = json.loads((tmp_path / "run.log.jsonl").read_text(encoding="utf-8"))
        assert event["metrics"] == {"n": 3, "f": 0.5, "arr": [1, 2]}

    def test_below_level_dropped(self, tmp_path):
        with DualLogger(tmp_path, LogLevel.WARN) as logger:
            logger.log("quiet")
            logger.log("loud", level=LogLevel.ERROR)
        lines = (tmp_path / "run.log.jsonl").read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["loud"]

    def test_close_detaches_handler(self, tmp_path):
        logger = DualLogger(tmp_path)
        handlers_before = len(logger.txt_logger.handlers)
        logger.close()
        assert len(logger.txt_logger.handlers) == handlers_before - 1

    def test_text_log_keeps_info(self, tmp_path):
        with DualLogger(tmp_path) as logger:
            logger.log("step.done", stage="tabularize", metrics={"rows": 2})
        text = (tmp_path / "run.log.txt").read_text(encoding="utf-8")
        assert "INFO] step.done stage=tabularize rows=2" in text

    def test_overlapping_loggers_keep_separate_text_logs(self, tmp_path):
        dir_a, dir_b = tmp_path / "a", tmp_path / "b"
        with DualLogger(dir_a) as logger_a, DualLogger(dir_b) as logger_b:
            logger_a.log("only_a", level=LogLevel.ERROR)
            logger_b.log("only_b", level=LogLevel.ERROR)
        text_a = (dir_a / "run.log.txt").read_text(encoding="utf-8")
        text_b = (dir_b / "run.log.txt").read_text(encoding="utf-8")
        assert "only_a" in text_a and "only_b" not in text_a
        assert "only_b" in text_b and "only_a" not in text_b

    def test_string_level_accepted(self, tmp_path):
        with DualLogger(tmp_path, "INFO") as logger:
            logger.log("boom", level="ERROR")
        event = json.loads((tmp_path / "run.log.jsonl").read_text(encoding="utf-8"))
        assert event["lvl"] == "ERROR"
        assert "ERROR] boom" in (tmp_path / "run.log.txt").read_text(encoding="utf-8")
