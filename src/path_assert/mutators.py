"""
Mutators: transforms applied to an (actual, expected) pair before it is compared.

Unlike overrides, mutators do not decide whether values match; they normalize the representation of both sides so
that the regular comparison gives the desired answer (eg: sorting two lists makes the comparison order-insensitive).
"""

from functools import cmp_to_key
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Callable, Optional, Tuple

    Mutator = Callable[[Any, Any], Tuple[Any, Any]]


def make_order_insensitive(compare_less: 'Callable[[Any, Any], bool]', element_type: 'Optional[type]' = None) -> 'Mutator':
    """
    Returns a mutator sorting both sequences with `compare_less`, so lists holding the same elements in a different
    order compare equal.

    Sorted copies are returned, the passed sequences are never modified. The inputs are returned unchanged when
    expected is None, when either is not a list/tuple, or when `element_type` is given and some element is not an
    instance of it.

    Args:
        compare_less (Callable[[Any, Any], bool]): strict "less than" between two elements
        element_type (Optional[type]): if not None, only sequences whose elements are all of this type are sorted

    Returns:
        Mutator: ``(actual, expected) -> (actual, expected)``
    """
    def _cmp(a, b):
        if compare_less(a, b):
            return -1
        return 1 if compare_less(b, a) else 0

    key = cmp_to_key(_cmp)

    def mutator(actual, expected):
        if expected is None or not _is_sortable(actual, element_type) or not _is_sortable(expected, element_type):
            return actual, expected
        return type(actual)(sorted(actual, key=key)), type(expected)(sorted(expected, key=key))
    return mutator


def apply_mutators(actual: 'Any', expected: 'Any', *mutators: 'Mutator') -> 'Tuple[Any, Any]':
    """Runs `mutators` in order, each one on the output of the previous"""
    for mutator in mutators:
        actual, expected = mutator(actual, expected)
    return actual, expected


def _is_sortable(seq: 'Any', element_type: 'Optional[type]') -> 'bool':
    # namedtuples are records, and cannot be rebuilt from a single iterable anyways
    if type(seq) not in (list, tuple):
        return False
    return element_type is None or all(isinstance(x, element_type) for x in seq)
