"""Tests for category parsing, ordering and shifting."""

import pytest

from regional_redlist.categories import (
    SCALE,
    Category,
    at_least_as_severe,
    category_code,
    parse_category,
    scale_index,
    shift,
)


def test_parse_known_code():
    assert parse_category("VU") is Category.VU


def test_parse_unknown_code_passes_through():
    assert parse_category("RE") == "RE"


def test_parse_none():
    assert parse_category(None) is None


def test_category_code():
    assert category_code(Category.NT) == "NT"
    assert category_code(None) == ""
    assert category_code("RE") == "RE"


def test_dd_is_not_on_scale():
    assert Category.DD not in SCALE
    assert scale_index(Category.DD) is None
    assert scale_index("XX") is None


@pytest.mark.parametrize(
    ("category", "steps", "expected"),
    [
        (Category.CR, 1, Category.EN),
        (Category.VU, -1, Category.EN),
        (Category.LC, 1, Category.LC),
        (Category.CR, -1, Category.CR),
        (Category.NT, 0, Category.NT),
    ],
)
def test_shift_clamps(category, steps, expected):
    assert shift(category, steps) is expected


def test_shift_off_scale_raises():
    with pytest.raises(ValueError, match="not on the adjustment scale"):
        shift(Category.DD, 1)


def test_at_least_as_severe():
    assert at_least_as_severe(Category.LC, None)
    assert at_least_as_severe(Category.EN, Category.EN)
    assert at_least_as_severe(Category.CR, Category.VU)
    assert not at_least_as_severe(Category.VU, Category.EN)
