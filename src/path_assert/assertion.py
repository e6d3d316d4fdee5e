"""
Recursive, path-annotated comparison of two values with per-path and per-type overrides.

The walker descends through records, sequences and mappings, keeping track of the path of the current node
(``$``, ``$.Items[2].Name``, ``$.Prices.EUR``, ...). At every node it first asks whether an override applies, either
by the index-normalized path (``$.Items[].Name``) or by the name of the node's type (``datetime.datetime``, ``float``).
An override decides the outcome of its node on its own; otherwise the node is dispatched on its structural kind and
leaves are handed to the default comparator. Failures from every branch are collected into one report::

    Path: $.Field1
    Expected: 'test5'
    Actual:   'test'
    (Should equal)!
    Path: $.Field5.Field3.b
    ...

Example usage::

    overrides = {
        '$.CreatedAt': assert_time_to_duration(timedelta(seconds=1)),
        '$.Items[].Price': assert_float_with_tolerance(0.01),
        'float': assert_float_to_decimal_places(4),
    }
    matched, report = compare(actual, expected, overrides)
"""

import logging
import re
import weakref
from .equality import EqualityCheckingError, EqualityError, limit_str, should_equal
from .pytypes import Kind, kind_of, record_fields, type_name
from typing import NamedTuple, TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Callable, List, Mapping, Optional, Set, Tuple

    OverrideComparator = Callable[..., str]
    DefaultComparator = Callable[[Any, Any], Tuple[bool, str]]


_LOGGER = logging.getLogger(__name__)

ROOT_PATH = '$'
_INDEX_REGEX = re.compile(r'\[\d+\]')


class ComparisonResult(NamedTuple):
    """Outcome of a comparison. `report` is empty iff `matched` is True"""
    matched: bool
    report: str


_MATCH = ComparisonResult(True, '')


def normalize_path(path: 'str') -> 'str':
    """Replaces every sequence index in `path` with '[]', so '$.Items[3].Name' becomes '$.Items[].Name'"""
    return _INDEX_REGEX.sub('[]', path)


def resolve_override(path: 'str', node_type: 'Optional[type]',
    overrides: 'Optional[Mapping[str, OverrideComparator]]') -> 'Tuple[Optional[OverrideComparator], bool]':
    """
    Finds the override that applies to the node at `path`.

    The index-normalized path is looked up first, then the name of `node_type` (see
    :func:`~path_assert.pytypes.type_name`). A path match always wins over a type match.

    Returns:
        Tuple[Optional[OverrideComparator], bool]: (override, found)
    """
    if not overrides:
        return None, False

    pattern = normalize_path(path)
    if pattern in overrides:
        _LOGGER.debug("Override for %s matched by path %r", path, pattern)
        return overrides[pattern], True

    if node_type is not None:
        name = type_name(node_type)
        if name in overrides:
            _LOGGER.debug("Override for %s matched by type %r", path, name)
            return overrides[name], True

    return None, False


class Comparer:
    """
    Compares two values node by node, reporting every failing node with its path.

    Args:
        default_comparator (DefaultComparator): ``(actual, expected) -> (matched, message)`` used for leaves and for
            composite nodes that cannot be compared element by element. Defaults to
            :func:`~path_assert.equality.should_equal`.
        root_path (str): the path of the top-level node. Defaults to '$'.
    """

    def __init__(self, default_comparator: 'DefaultComparator' = should_equal, root_path: 'str' = ROOT_PATH):
        if not callable(default_comparator):
            raise TypeError("`default_comparator` must be callable, not %s" % repr(type(default_comparator).__name__))
        self._default_comparator = default_comparator
        self._root_path = root_path

    def compare(self, actual: 'Any', expected: 'Any', overrides: 'Optional[Mapping[str, OverrideComparator]]' = None,
        raise_err: 'bool' = False) -> 'ComparisonResult':
        """
        Compares `actual` against `expected`.

        Args:
            actual (Any): the value produced by the code under test
            expected (Any): the value it should be equal to
            overrides (Optional[Mapping[str, OverrideComparator]]): maps index-normalized paths ('$.Items[].Name') or
                type names ('datetime.datetime') to comparators ``(actual, *expected) -> str`` returning '' on a match
                and the reason otherwise. None means the default comparator is used everywhere.
            raise_err (bool): if True, then an ``EqualityError`` carrying the report is raised when the values do not
                match. Defaults to False.

        Returns:
            ComparisonResult: (matched, report)
        """
        overrides = {} if overrides is None else overrides
        _check_overrides(overrides)

        result = self._compare_node(actual, expected, overrides, self._root_path, set())
        if raise_err and not result.matched:
            raise EqualityError(result)
        return result

    def _compare_node(self, actual: 'Any', expected: 'Any', overrides: 'Mapping[str, OverrideComparator]', path: 'str',
        in_progress: 'Set[Tuple[int, int]]') -> 'ComparisonResult':
        # Dereference weak references while both sides are references
        while isinstance(actual, weakref.ref) and isinstance(expected, weakref.ref):
            actual, expected = actual(), expected()

        if actual is None and expected is None:
            return _MATCH

        node_type = type(actual) if actual is not None else type(expected)
        override, found = resolve_override(path, node_type, overrides)
        if found:
            return _apply_override(override, actual, expected, path)

        if actual is None or expected is None:
            return _failure(path, "Expected: %s\nActual: %s" % (limit_str(expected), limit_str(actual)))

        actual_kind, expected_kind = kind_of(actual), kind_of(expected)
        if actual_kind is not expected_kind or actual_kind in (Kind.SCALAR, Kind.TIMESTAMP):
            return self._compare_default(actual, expected, path)

        # Self-referential values: a pair already being compared further up is not compared again
        key = (id(actual), id(expected))
        if key in in_progress:
            _LOGGER.debug("Cycle detected at %s, not descending again", path)
            return _MATCH

        in_progress.add(key)
        try:
            if actual_kind is Kind.RECORD:
                return self._compare_record(actual, expected, overrides, path, in_progress)
            elif actual_kind is Kind.SEQUENCE:
                return self._compare_sequence(actual, expected, overrides, path, in_progress)
            return self._compare_mapping(actual, expected, overrides, path, in_progress)
        finally:
            in_progress.discard(key)

    def _compare_record(self, actual, expected, overrides, path, in_progress):
        actual_fields, expected_fields = record_fields(actual), record_fields(expected)
        if len(actual_fields) != len(expected_fields):
            _LOGGER.debug("Records at %s have %d and %d fields, comparing as a whole", path, len(actual_fields),
                len(expected_fields))
            return self._compare_default(actual, expected, path)

        results = []
        for name, value in actual_fields.items():
            field_path = '%s.%s' % (path, name)
            if name not in expected_fields:
                results.append(_failure(field_path, "Field %s not found in expected" % name))
                continue
            results.append(self._compare_node(value, expected_fields[name], overrides, field_path, in_progress))
        return _merge(results)

    def _compare_sequence(self, actual, expected, overrides, path, in_progress):
        if len(actual) != len(expected):
            _LOGGER.debug("Sequences at %s have lengths %d and %d, comparing as a whole", path, len(actual),
                len(expected))
            return self._compare_default(actual, expected, path)

        return _merge([self._compare_node(actual[i], expected[i], overrides, '%s[%d]' % (path, i), in_progress)
            for i in range(len(actual))])

    def _compare_mapping(self, actual, expected, overrides, path, in_progress):
        if len(actual) != len(expected):
            _LOGGER.debug("Mappings at %s have sizes %d and %d, comparing as a whole", path, len(actual),
                len(expected))
            return self._compare_default(actual, expected, path)

        results = []
        for key in actual:
            key_path = '%s.%s' % (path, key)
            if key not in expected:
                results.append(_failure(key_path, "Key %s not found in expected" % key))
                continue
            results.append(self._compare_node(actual[key], expected[key], overrides, key_path, in_progress))
        return _merge(results)

    def _compare_default(self, actual: 'Any', expected: 'Any', path: 'str') -> 'ComparisonResult':
        try:
            matched, message = self._default_comparator(actual, expected)
        except Exception as e:
            raise EqualityCheckingError("Could not determine equality at path %s" % path) from e
        return _MATCH if matched else _failure(path, message)


def _apply_override(override: 'OverrideComparator', actual: 'Any', expected: 'Any', path: 'str') -> 'ComparisonResult':
    try:
        message = override(actual, expected)
    except Exception as e:
        raise EqualityCheckingError("Override %r failed at path %s" % (override, path)) from e
    return _failure(path, '%s' % message) if message else _MATCH


def _failure(path: 'str', message: 'str') -> 'ComparisonResult':
    return ComparisonResult(False, "Path: %s\n%s" % (path, message))


def _merge(results: 'List[ComparisonResult]') -> 'ComparisonResult':
    """ANDs the children's flags and joins their non-empty reports in visitation order"""
    if all(r.matched for r in results):
        return _MATCH
    return ComparisonResult(False, '\n'.join(r.report for r in results if r.report))


def _check_overrides(overrides: 'Mapping[str, OverrideComparator]') -> 'None':
    for key, override in overrides.items():
        if not isinstance(key, str):
            raise EqualityCheckingError("Override keys must be str paths or type names, not %s" % repr(type(key).__name__))
        if not callable(override):
            raise EqualityCheckingError("Override for %s is not callable: %s" % (repr(key), limit_str(override)))


# Comparers hold no per-call state
_DEFAULT_COMPARER = Comparer()


def compare(actual: 'Any', expected: 'Any', overrides: 'Optional[Mapping[str, OverrideComparator]]' = None,
    raise_err: 'bool' = False) -> 'ComparisonResult':
    """Compares `actual` against `expected` with the default comparator. See :meth:`Comparer.compare`"""
    return _DEFAULT_COMPARER.compare(actual, expected, overrides, raise_err=raise_err)


def assert_match(actual: 'Any', expected: 'Any', overrides: 'Optional[Mapping[str, OverrideComparator]]' = None) -> 'None':
    """Raises an ``EqualityError`` (an ``AssertionError``) with the full report if `actual` does not match `expected`"""
    compare(actual, expected, overrides, raise_err=True)
