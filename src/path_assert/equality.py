"""
The default comparator: single-value equality with a human-readable mismatch description

Handled types:
    - singleton objects (None, Ellipsis, NotImplemented) and enums, compared with 'is'
    - bool (never equal to an int)
    - int, float, np.number, complex, bytes, bytearray, memoryview, str, range, type, set, frozenset
    - float and np.floating NaNs, which are equal to each other (also inside float arrays)
    - list, tuple (elementwise)
    - numpy ndarray
    - dict, dict_values
    - falls back on built-in __eq__

The walker in :mod:`path_assert.assertion` only hands leaves and "whole-node" fallbacks to this comparator, but it
is also usable on its own as any ``(actual, expected) -> (bool, str)`` comparator.
"""

import math
import numpy as np
from enum import Enum
from .pytypes import DictKeysType, DictValuesType, FLOAT_TYPES, SingletonObjects
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Tuple
    from .assertion import ComparisonResult


_MAX_STR_LEN = 1000

# Types that are all able to be checked against one another using default '==' equality check
_DUNDER_EQ_TYPES = (int, float, np.number, complex, bytes, bytearray, memoryview, str, range, type, set, frozenset, DictKeysType)


def should_equal(actual: 'Any', expected: 'Any', strict_types: 'bool' = True,
    max_str_len: 'int' = _MAX_STR_LEN) -> 'Tuple[bool, str]':
    """
    Default comparator. Determines whether `actual` equals `expected`, and renders both when they do not.

    The rendering is stable so reports can be checked against golden output::

        Expected: 4
        Actual:   3
        (Should equal)!

    A ``Types:`` line is added before the last line when the two values are of different types.

    Args:
        actual (Any): the value produced by the code under test
        expected (Any): the value it is checked against
        strict_types (bool): if True, then the types of both objects must exactly match, so ``1`` and ``1.0`` differ.
            Otherwise numerically equal values of different numeric types are equal. Defaults to True.
        max_str_len (int): reprs longer than this are truncated in the message. Defaults to 1000.

    Returns:
        Tuple[bool, str]: (matched, message), where message is '' iff matched
    """
    if values_equal(actual, expected, strict_types=strict_types):
        return True, ''
    return False, _mismatch_message(actual, expected, max_str_len)


def values_equal(a: 'Any', b: 'Any', strict_types: 'bool' = True) -> 'bool':
    """Recursive equality check backing :func:`should_equal`"""
    try:
        # Do a quick first check for 'is' as they should always be equal, no matter what
        if a is b:
            return True

        if strict_types and type(a) is not type(b):
            return False

        # We already checked 'is', so this must be unequal
        if any(a is x for x in SingletonObjects) or isinstance(a, Enum):
            return False

        # Check for bool first that way int's and bool's cannot be equal
        elif isinstance(a, bool) or isinstance(b, bool):
            return isinstance(a, bool) and isinstance(b, bool) and a == b

        # Two NaNs are equal, unlike with ==
        elif isinstance(a, FLOAT_TYPES) and isinstance(b, FLOAT_TYPES) and math.isnan(a) and math.isnan(b):
            return True

        elif isinstance(a, _DUNDER_EQ_TYPES):
            return isinstance(b, _DUNDER_EQ_TYPES) and bool(a == b)

        elif isinstance(a, (list, tuple)):
            if isinstance(b, np.ndarray):
                return values_equal(list(a), b.tolist(), strict_types=False)
            if not isinstance(b, (list, tuple)) or len(a) != len(b):
                return False
            return all(values_equal(x, y, strict_types=strict_types) for x, y in zip(a, b))

        elif isinstance(a, np.ndarray):
            if not isinstance(b, np.ndarray):
                if isinstance(b, (list, tuple)):
                    return values_equal(a.tolist(), list(b), strict_types=False)
                return False

            # Object arrays can hold anything, so check them as lists
            if a.dtype == object or b.dtype == object:
                return a.shape == b.shape and values_equal(a.tolist(), b.tolist(), strict_types=strict_types)
            equal_nan = a.dtype.kind in 'fc' and b.dtype.kind in 'fc'
            return a.shape == b.shape and bool(np.array_equal(a, b, equal_nan=equal_nan))

        elif isinstance(a, dict):
            if not isinstance(b, dict) or a.keys() != b.keys():
                return False
            return all(values_equal(a[k], b[k], strict_types=strict_types) for k in a)

        # dict_values have no meaningful order to compare, so compare their sorted-by-repr contents
        elif isinstance(a, DictValuesType):
            if not isinstance(b, DictValuesType) or len(a) != len(b):
                return False
            return values_equal(sorted(a, key=repr), sorted(b, key=repr), strict_types=strict_types)

        else:
            return bool(a == b)

    except EqualityCheckingError:
        raise
    except Exception as e:
        raise EqualityCheckingError("Could not determine equality between objects\na: %s\nb: %s" % (limit_str(a), limit_str(b))) from e


def _mismatch_message(actual: 'Any', expected: 'Any', max_str_len: 'int') -> 'str':
    lines = ["Expected: %s" % limit_str(expected, max_str_len), "Actual:   %s" % limit_str(actual, max_str_len)]
    if type(actual) is not type(expected):
        lines.append("Types: %s != %s" % (repr(type(expected).__name__), repr(type(actual).__name__)))
    lines.append("(Should equal)!")
    return '\n'.join(lines)


def limit_str(a: 'Any', limit: 'int' = _MAX_STR_LEN) -> 'str':
    a_str = repr(a)
    return a_str if len(a_str) < limit else (a_str[:limit] + '...')


class EqualityError(AssertionError):
    """Error raised whenever a comparison does not match and the caller asked for it to raise (``raise_err=True``)"""

    def __init__(self, result: 'ComparisonResult', message: 'str' = None):
        self.result = result
        message = "Values are not equal" if message is None else message
        super().__init__("%s\n%s" % (message, result.report))


class EqualityCheckingError(Exception):
    """Error raised whenever there is an unexpected problem attempting to check equality between two objects"""
