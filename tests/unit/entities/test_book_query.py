"""Unit tests for the immutable book query values."""

import dataclasses

import pytest

from src.bookshelf.core.errors import BadRequestError
from src.bookshelf.entities.book import BookFilter, PageWindow, SortOption


class TestBookFilter:
    def test_requires_at_least_one_criterion(self):
        with pytest.raises(BadRequestError):
            BookFilter.from_params()

    def test_blank_values_count_as_missing(self):
        with pytest.raises(BadRequestError):
            BookFilter.from_params(author="  ", genre="")

    def test_strips_text_criteria(self):
        criteria = BookFilter.from_params(author=" Herbert ", genre="SciFi ")

        assert criteria.author == "Herbert"
        assert criteria.genre == "SciFi"
        assert criteria.year is None

    def test_year_alone_is_enough(self):
        criteria = BookFilter.from_params(year=1990)

        assert criteria == BookFilter(year=1990)
        assert not criteria.is_empty

    def test_is_frozen(self):
        criteria = BookFilter(year=1990)

        with pytest.raises(dataclasses.FrozenInstanceError):
            criteria.year = 1991


class TestSortOption:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_absent_sort(self, raw):
        assert SortOption.parse(raw) is None

    def test_ascending(self):
        assert SortOption.parse("title") == SortOption(field="title", descending=False)

    def test_descending_maps_wire_name(self):
        assert SortOption.parse("-publishedYear") == SortOption(
            field="published_year", descending=True
        )

    def test_accepts_attribute_name(self):
        assert SortOption.parse("-created_at") == SortOption(
            field="created_at", descending=True
        )

    def test_unknown_field(self):
        with pytest.raises(BadRequestError, match="Cannot sort by 'rating'"):
            SortOption.parse("-rating")


class TestPageWindow:
    def test_defaults(self):
        window = PageWindow()

        assert window.page == 1
        assert window.limit == 10
        assert window.offset == 0

    def test_offset(self):
        assert PageWindow(page=3, limit=5).offset == 10

    @pytest.mark.parametrize(
        ("total", "limit", "expected"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 4, 7)],
    )
    def test_total_pages(self, total, limit, expected):
        assert PageWindow(limit=limit).total_pages(total) == expected

    @pytest.mark.parametrize(("page", "limit"), [(0, 10), (-1, 10), (1, 0)])
    def test_rejects_non_positive(self, page, limit):
        with pytest.raises(BadRequestError):
            PageWindow(page=page, limit=limit)
