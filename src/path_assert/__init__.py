import logging
from .assertion import ComparisonResult, Comparer, assert_match, compare, normalize_path, resolve_override
from .custom_assertion import (TIME_TYPE, FLOAT_TYPE, skip_assertion, skip_assertion_if, assert_time_to_duration,
    assert_float_to_decimal_places, assert_float_with_tolerance, assert_string_with_cleanup, is_none_actual,
    is_none_expected, round_float_to_decimal_places)
from .equality import EqualityError, EqualityCheckingError, should_equal
from .mutators import apply_mutators, make_order_insensitive

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ['ComparisonResult', 'Comparer', 'assert_match', 'compare', 'normalize_path', 'resolve_override',
    'TIME_TYPE', 'FLOAT_TYPE', 'skip_assertion', 'skip_assertion_if', 'assert_time_to_duration',
    'assert_float_to_decimal_places', 'assert_float_with_tolerance', 'assert_string_with_cleanup', 'is_none_actual',
    'is_none_expected', 'round_float_to_decimal_places', 'EqualityError', 'EqualityCheckingError', 'should_equal',
    'apply_mutators', 'make_order_insensitive']
__doc__ = """Path-annotated deep equality for test assertions, with per-path and per-type overrides."""
