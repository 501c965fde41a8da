"""Unit tests for the template-driven tree walker."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import logging

import pytest

from literal_table import (
    DualLogger,
    Symbol,
    TemplateMatchError,
    TreeBuilder,
    parse_template,
    table_to_tree,
)

from conftest import ALBUM_DATA, ALBUM_TEMPLATE, ALBUM_TREE, load_table


class TestTableToTree:

    def test_nested_repeating_blocks(self):
        tree = table_to_tree(load_table(ALBUM_TEMPLATE), load_table(ALBUM_DATA))
        assert tree == ALBUM_TREE

    def test_flat_descriptor_writes_at_root(self):
        tree = table_to_tree(
            load_table("| Point | :x | :y |"),
            load_table("| Point | | |\n| | 1 | 2 |"),
        )
        assert tree == {"x": 1, "y": 2}

    def test_first_element_is_index_zero(self):
        template = "| Items | |\n| :items | |\n| :id | :qty |"
        tree = table_to_tree(load_table(template), load_table("| Items | |\n| 1 | 5 |"))
        assert tree == {"items": [{"id": 1, "qty": 5}]}

    def test_empty_collection(self):
        template = "| Items | |\n| :items | |\n| :id | :qty |"
        tree = table_to_tree(load_table(template), load_table("| Items | |"))
        assert tree == {"items": []}

    def test_flat_block_inside_collection_element(self):
        template = """
        | Albums  |         |
        | :albums |         |
        | :title  | :year   |
        | Label   | :label  |
        """
        data = """
        | Albums         |            |
        | "Kind of Blue" | 1959       |
        | Label          |            |
        |                | "Columbia" |
        """
        tree = table_to_tree(load_table(template), load_table(data))
        assert tree == {"albums": [{"title": "Kind of Blue", "year": 1959, "label": "Columbia"}]}

    def test_reopened_collection_continues(self):
        template = "| Items | |\n| :items | |\n| :id | :qty |"
        data = "| Items | |\n| 1 | 5 |\n| | |\n| Items | |\n| 2 | 6 |"
        tree = table_to_tree(load_table(template), load_table(data))
        assert tree == {"items": [{"id": 1, "qty": 5}, {"id": 2, "qty": 6}]}

    def test_unknown_shape_raises(self):
        with pytest.raises(TemplateMatchError) as exc_info:
            table_to_tree(load_table(ALBUM_TEMPLATE), load_table("| Singer | | |"))
        assert exc_info.value.fingerprint == (Symbol("Singer"), None, None)

    def test_row_without_active_template_is_skipped(self, caplog):
        caplog.set_level(logging.WARNING, logger="literal_table")
        builder = TreeBuilder(load_table("| Point | :x | :y |"), DualLogger())
        tree = builder.build(load_table("| | 1 | 2 |\n| Point | | |\n| | 3 | 4 |"))
        assert tree == {"x": 3, "y": 4}
        assert "tree.unmatched_row" in caplog.text

    def test_extra_blank_rows_are_harmless(self):
        tree = table_to_tree(
            load_table("| Point | :x | :y |"),
            load_table("| | | |\n| Point | | |\n| | 1 | 2 |\n| | | |\n| | | |"),
        )
        assert tree == {"x": 1, "y": 2}


class TestTemplateReuse:

    def test_parsed_template_shared_across_builds(self):
        templates = parse_template(load_table(ALBUM_TEMPLATE))
        before = dict(templates)
        first = TreeBuilder(templates).build(load_table(ALBUM_DATA))
        second = TreeBuilder(templates).build(load_table(ALBUM_DATA))
        assert first == second == ALBUM_TREE
        assert dict(templates) == before

    def test_builder_reusable(self):
        builder = TreeBuilder(load_table(ALBUM_TEMPLATE))
        assert builder.build(load_table(ALBUM_DATA)) == builder.build(load_table(ALBUM_DATA))
