"""
Tests for the path_assert.mutators file.
"""

from path_assert.mutators import apply_mutators, make_order_insensitive
from dataclasses import dataclass


@dataclass
class _Item:
    id: int
    name: str


_BY_VALUE = make_order_insensitive(lambda a, b: a < b)


def test_make_order_insensitive():
    """Tests both sequences are sorted"""
    tests = [
        ([1, 2, 3], [3, 2, 1], [1, 2, 3], [1, 2, 3]),
        ([1, 2, 3], [1, 2, 3], [1, 2, 3], [1, 2, 3]),
        ([3, 1, 2], [1, 2, 3], [1, 2, 3], [1, 2, 3]),
        (['a', 'b', 'c'], ['c', 'b', 'a'], ['a', 'b', 'c'], ['a', 'b', 'c']),
        ((2, 1), (1, 2), (1, 2), (1, 2)),
    ]

    for actual, expected, expected_actual, expected_expected in tests:
        new_actual, new_expected = _BY_VALUE(actual, expected)
        assert new_actual == expected_actual
        assert new_expected == expected_expected
        assert type(new_actual) is type(actual) and type(new_expected) is type(expected)


def test_originals_untouched():
    """Tests sorted copies are returned"""
    actual, expected = [3, 1, 2], [2, 3, 1]
    new_actual, new_expected = _BY_VALUE(actual, expected)
    assert actual == [3, 1, 2] and expected == [2, 3, 1]
    assert new_actual is not actual and new_expected is not expected


def test_unchanged_inputs():
    """Tests inputs that cannot be sorted are returned as-is"""
    tests = [
        ([3, 1, 2], None),
        ('cba', 'abc'),
        ({3, 1}, [1, 3]),
        (3, [1, 2]),
    ]

    for actual, expected in tests:
        new_actual, new_expected = _BY_VALUE(actual, expected)
        assert new_actual is actual and new_expected is expected

    by_item = make_order_insensitive(lambda a, b: a < b, element_type=int)
    actual, expected = [2, 'b'], [1, 2]
    new_actual, new_expected = by_item(actual, expected)
    assert new_actual is actual and new_expected is expected


def test_custom_ordering():
    """Tests records sorted by a key of the caller's choosing"""
    by_id = make_order_insensitive(lambda a, b: a.id < b.id, element_type=_Item)
    actual, expected = by_id([_Item(2, 'b'), _Item(1, 'a')], [_Item(1, 'a'), _Item(2, 'b')])
    assert actual == expected == [_Item(1, 'a'), _Item(2, 'b')]


def test_apply_mutators():
    """Tests mutators are chained in order"""
    reverse = make_order_insensitive(lambda a, b: a > b)
    assert apply_mutators([3, 1, 2], [1, 2, 3]) == ([3, 1, 2], [1, 2, 3])
    assert apply_mutators([3, 1, 2], [1, 2, 3], _BY_VALUE) == ([1, 2, 3], [1, 2, 3])
    assert apply_mutators([3, 1, 2], [1, 2, 3], _BY_VALUE, reverse) == ([3, 2, 1], [3, 2, 1])
