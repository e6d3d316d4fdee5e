"""
Ready-made override comparators.

Every factory here returns a function ``(actual, *expected) -> str`` that can be used as a value in the `overrides`
mapping of :func:`~path_assert.assertion.compare`. An empty string means the values match, anything else is the
reason they do not. A missing expected value is always reported as "expected value is missing".

Values that are not of the kind a comparator knows about (eg: a str given to a float comparator) are handed
untouched to the default comparator.
"""

import datetime
import math
import numpy as np
from decimal import Decimal, ROUND_HALF_UP, localcontext
from .equality import should_equal
from .pytypes import FLOAT_TYPES, type_name
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Callable, Optional, Tuple, Union

    OverrideComparator = Callable[..., str]
    DefaultComparator = Callable[[Any, Any], Tuple[bool, str]]


TIME_TYPE = type_name(datetime.datetime)
FLOAT_TYPE = type_name(float)

MISSING_EXPECTED_MESSAGE = "expected value is missing"

_DATETIME_TYPES = (datetime.datetime, np.datetime64)


def skip_assertion(actual: 'Any', *expected: 'Any') -> 'str':
    """Always matches"""
    return ''


def assert_time_to_duration(granularity: 'datetime.timedelta',
    default_comparator: 'DefaultComparator' = should_equal) -> 'OverrideComparator':
    """
    Compares datetimes (``datetime.datetime`` or ``np.datetime64``) after truncating both down to a multiple of
    `granularity`.

    Truncation discards finer precision rather than rounding, so with a 1 minute granularity 12:00:59 and 12:00:01
    are equal but 12:00:59 and 12:01:01 are not. A granularity of zero or less compares the values unchanged.

    Args:
        granularity (datetime.timedelta): the precision to truncate to
        default_comparator (DefaultComparator): comparator used on the truncated values

    Returns:
        OverrideComparator: the comparator
    """
    def comparator(actual, *expected):
        if not expected or expected[0] is None:
            return MISSING_EXPECTED_MESSAGE
        if not isinstance(actual, _DATETIME_TYPES) or not isinstance(expected[0], _DATETIME_TYPES):
            return _delegate(default_comparator, actual, expected[0])
        return _delegate(default_comparator, truncate_time(actual, granularity), truncate_time(expected[0], granularity))
    return comparator


def truncate_time(value: 'Union[datetime.datetime, np.datetime64]',
    granularity: 'datetime.timedelta') -> 'Union[datetime.datetime, np.datetime64]':
    """
    Rounds `value` down to a multiple of `granularity` since datetime.min (in the value's own timezone)

    ``np.datetime64`` values are truncated at microsecond precision and come back as ``np.datetime64[us]``. NaT and
    values outside the range of ``datetime.datetime`` are returned unchanged.
    """
    if granularity <= datetime.timedelta(0):
        return value

    if isinstance(value, np.datetime64):
        as_datetime = value.astype('datetime64[us]').item() if not np.isnat(value) else None
        if not isinstance(as_datetime, datetime.datetime):
            return value
        return np.datetime64(truncate_time(as_datetime, granularity), 'us')

    since_min = value - datetime.datetime.min.replace(tzinfo=value.tzinfo)
    return value - since_min % granularity


def assert_float_to_decimal_places(decimal_places: 'int',
    default_comparator: 'DefaultComparator' = should_equal) -> 'OverrideComparator':
    """Compares floats after rounding both to `decimal_places` (half away from zero)"""
    def comparator(actual, *expected):
        if not expected or expected[0] is None:
            return MISSING_EXPECTED_MESSAGE
        if not _both_floats(actual, expected[0]):
            return _delegate(default_comparator, actual, expected[0])
        return _delegate(default_comparator, round_float_to_decimal_places(actual, decimal_places),
            round_float_to_decimal_places(expected[0], decimal_places))
    return comparator


def round_float_to_decimal_places(num: 'float', decimal_places: 'int') -> 'float':
    """
    Rounds `num` to `decimal_places`, with halves rounded away from zero (unlike the builtin round())

    The float's shortest repr is used as the decimal value, so 1.2345 rounds to 1.235 even though its binary value is
    slightly below 1.2345.
    """
    if not math.isfinite(num):
        return float(num)
    value = Decimal(repr(float(num)))
    with localcontext() as ctx:
        # Enough digits for every place kept, plus one for a carry (9.99 -> 10.0)
        ctx.prec = max(value.adjusted() + 1 + decimal_places, 0) + 1
        return float(value.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP))


def assert_float_with_tolerance(tolerance: 'float',
    default_comparator: 'DefaultComparator' = should_equal) -> 'OverrideComparator':
    """
    Accepts floats that differ by at most `tolerance`.

    A tolerance of zero or less falls back to an exact comparison with `default_comparator`.
    """
    def comparator(actual, *expected):
        if not expected or expected[0] is None:
            return MISSING_EXPECTED_MESSAGE
        if tolerance <= 0 or not _both_floats(actual, expected[0]):
            return _delegate(default_comparator, actual, expected[0])

        difference = abs(actual - expected[0])
        if difference <= tolerance:
            return ''
        return "Expected: %r\nActual:   %r\n(Should be within %r, difference is %r)!" % \
            (float(expected[0]), float(actual), tolerance, float(difference))
    return comparator


def assert_string_with_cleanup(cleanup: 'Optional[Callable[[str], str]]',
    default_comparator: 'DefaultComparator' = should_equal) -> 'OverrideComparator':
    """Compares strings after passing both through `cleanup` (eg: str.strip). A None `cleanup` compares them as-is"""
    def comparator(actual, *expected):
        if not expected or expected[0] is None:
            return MISSING_EXPECTED_MESSAGE
        if cleanup is not None and isinstance(actual, str) and isinstance(expected[0], str):
            return _delegate(default_comparator, cleanup(actual), cleanup(expected[0]))
        return _delegate(default_comparator, actual, expected[0])
    return comparator


def skip_assertion_if(condition: 'Callable[[Any, Any], bool]', assertion: 'Optional[OverrideComparator]' = None,
    default_comparator: 'DefaultComparator' = should_equal) -> 'OverrideComparator':
    """
    Matches whenever ``condition(actual, expected)`` is True, otherwise compares with `assertion` (or the default
    comparator when `assertion` is None).

    `condition` receives the raw values, with expected as None when it was not supplied, so predicates like
    :func:`is_none_expected` work as-is.
    """
    def comparator(actual, *expected):
        expected_value = expected[0] if expected else None
        if condition(actual, expected_value):
            return ''
        if assertion is not None:
            return assertion(actual, *expected)
        return _delegate(default_comparator, actual, expected_value)
    return comparator


def is_none_expected(actual: 'Any', expected: 'Any') -> 'bool':
    return expected is None


def is_none_actual(actual: 'Any', expected: 'Any') -> 'bool':
    return actual is None


def _both_floats(a: 'Any', b: 'Any') -> 'bool':
    return isinstance(a, FLOAT_TYPES) and isinstance(b, FLOAT_TYPES)


def _delegate(default_comparator: 'DefaultComparator', actual: 'Any', expected: 'Any') -> 'str':
    """Runs a (matched, message) comparator and returns the message in override form"""
    matched, message = default_comparator(actual, expected)
    return '' if matched else message
