"""Shared test configuration and fixtures."""

import pytest

from literal_table import TableConfig, Tabularizer, infer_width, tokenize


def load_table(source, resolver=None):
    """Tokenize and tabularize, inferring the width when the source has no divider row."""
    tokens = tokenize(source, resolver)
    width = None if Tabularizer().detect_width(tokens) else infer_width(source)
    return Tabularizer(TableConfig(width=width)).tabularize(tokens)


DATES_SOURCE = """
| :date        | :value |
| ---          | ---    |
| "2021-07-01" | 10     |
| "2021-07-02" | 20     |
"""

ALBUM_TEMPLATE = """
| Artist  | :name   | :country |
|         |         |          |
| Albums  |         |          |
| :albums |         |          |
| :title  | :year   |          |
|         |         |          |
| Tracks  |         |          |
| :tracks |         |          |
| :title  | :length |          |
"""

ALBUM_DATA = """
| Artist         |         |      |
|                | "Miles" | "US" |
|                |         |      |
| Albums         |         |      |
| "Kind of Blue" | 1959    |      |
| Tracks         |         |      |
| "So What"      | 9.22    |      |
| "Freddie"      | 9.46    |      |
|                |         |      |
| "Bitches Brew" | 1970    |      |
| Tracks         |         |      |
| "Spanish Key"  | 17.5    |      |
"""

ALBUM_TREE = {
    "name": "Miles",
    "country": "US",
    "albums": [
        {
            "title": "Kind of Blue",
            "year": 1959,
            "tracks": [
                {"title": "So What", "length": 9.22},
                {"title": "Freddie", "length": 9.46},
            ],
        },
        {
            "title": "Bitches Brew",
            "year": 1970,
            "tracks": [{"title": "Spanish Key", "length": 17.5}],
        },
    ],
}


@pytest.fixture
def dates_table():
    return load_table(DATES_SOURCE)
