"""
Type groups and structural classification of values.

Every node of a compared value is classified into exactly one ``Kind``:
    - TIMESTAMP: datetime.datetime, datetime.date, datetime.time, np.datetime64 (always atomic)
    - RECORD: dataclass instances, namedtuple instances, plain objects keeping their state in __dict__ or __slots__
    - SEQUENCE: list, tuple, deque, range, numpy ndarray (indexed along the first axis)
    - MAPPING: any collections.abc.Mapping
    - SCALAR: everything else
"""

import dataclasses
import datetime
import types
import numpy as np
from collections import deque
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Dict, List


DictKeysType = type({}.keys())
DictValuesType = type({}.values())
SingletonObjects = (None, Ellipsis, NotImplemented)

TIMESTAMP_TYPES = (datetime.datetime, datetime.date, datetime.time, np.datetime64)
FLOAT_TYPES = (float, np.floating)
SEQUENCE_TYPES = (list, tuple, deque, range, np.ndarray)

# Objects with a __dict__ that should never be walked field by field
_NON_RECORD_TYPES = (type, types.ModuleType, types.FunctionType, types.BuiltinFunctionType, types.MethodType,
    Enum, BaseException)


class Kind(Enum):
    TIMESTAMP = 'timestamp'
    RECORD = 'record'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'
    SCALAR = 'scalar'


def type_name(t: 'type') -> 'str':
    """Returns the name used to key overrides by type

    Builtin types use their bare name ('float', 'str', 'list'), everything else is qualified with its module
    ('datetime.datetime', 'numpy.float64', 'mypkg.models.Order').
    """
    if t.__module__ == 'builtins':
        return t.__qualname__
    return '%s.%s' % (t.__module__, t.__qualname__)


def is_namedtuple(obj: 'Any') -> 'bool':
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), '_fields', None), tuple)


def kind_of(obj: 'Any') -> 'Kind':
    """Classifies `obj` into its structural kind. Timestamps are checked first so they are never walked."""
    if isinstance(obj, TIMESTAMP_TYPES):
        return Kind.TIMESTAMP
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return Kind.RECORD
    if is_namedtuple(obj):
        return Kind.RECORD
    if isinstance(obj, Mapping):
        return Kind.MAPPING
    if isinstance(obj, SEQUENCE_TYPES):
        # 0-d arrays have no length and are compared as a whole
        if isinstance(obj, np.ndarray) and obj.ndim == 0:
            return Kind.SCALAR
        return Kind.SEQUENCE
    if _is_plain_object(obj):
        return Kind.RECORD
    return Kind.SCALAR


def record_fields(obj: 'Any') -> 'Dict[str, Any]':
    """Returns the {name: value} fields of a record in declaration order"""
    if dataclasses.is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if is_namedtuple(obj):
        return dict(zip(obj._fields, obj))

    # Slots first (base classes before subclasses), then anything in __dict__. Unset slots are left out
    fields = {name: getattr(obj, name) for name in _slot_names(type(obj)) if hasattr(obj, name)}
    fields.update(getattr(obj, '__dict__', {}))
    return fields


def _is_plain_object(obj: 'Any') -> 'bool':
    """True for instances of user classes that keep state in __dict__ or __slots__ and rely on identity equality"""
    if isinstance(obj, _NON_RECORD_TYPES):
        return False
    if not hasattr(obj, '__dict__') and not _slot_names(type(obj)):
        return False
    return type(obj).__eq__ is object.__eq__


def _slot_names(cls: 'type') -> 'List[str]':
    names = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get('__slots__', ())
        for name in ((slots,) if isinstance(slots, str) else slots):
            if name in ('__dict__', '__weakref__'):
                continue
            # Private slots are stored under their mangled name
            if name.startswith('__') and not name.endswith('__'):
                name = '_%s%s' % (klass.__name__.lstrip('_'), name)
            if name not in names:
                names.append(name)
    return names
