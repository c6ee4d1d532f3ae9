"""Unit tests for pagination primitives."""

from __future__ import annotations

import pytest

from modules.core.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    create_paginated_result,
    create_pagination_meta,
    normalize_pagination,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, DEFAULT_LIMIT)),
        (3, 20, (3, 20)),
        (0, 20, (1, 20)),
        (-7, 20, (1, 20)),
        (1, 0, (1, 1)),
        (1, -5, (1, 1)),
        (1, MAX_LIMIT + 1, (1, MAX_LIMIT)),
    ],
)
def test_normalize_pagination(page, limit, expected):
    params = normalize_pagination(page, limit)

    assert (params.page, params.limit) == expected


def test_custom_default_and_max():
    assert normalize_pagination(default_limit=25).limit == 25
    assert normalize_pagination(limit=60, max_limit=50).limit == 50


def test_offset():
    assert normalize_pagination(3, 10).offset == 20


class TestPaginationMeta:
    def test_middle_page(self):
        meta = create_pagination_meta(45, normalize_pagination(2, 10))

        assert meta.total_pages == 5
        assert meta.has_next is True
        assert meta.has_previous is True

    def test_last_page(self):
        meta = create_pagination_meta(45, normalize_pagination(5, 10))

        assert meta.has_next is False

    def test_empty_result_has_one_page(self):
        meta = create_pagination_meta(0, normalize_pagination())

        assert meta.total_pages == 1
        assert meta.has_next is False
        assert meta.has_previous is False


def test_create_paginated_result():
    result = create_paginated_result(["a", "b"], 7, normalize_pagination(1, 2))

    assert result.items == ["a", "b"]
    assert result.pagination.total == 7
    assert result.pagination.total_pages == 4
