"""
Introspection adapter: arbitrary Python objects -> Record.

Supports, in priority order:
    - Serializable instances (returned unchanged)
    - dataclass instances (dataclasses.fields order)
    - NamedTuple instances (_fields order)
    - Mappings (insertion order, keys via str())
    - Plain objects with __dict__ (vars() order, private names skipped)

Values of those kinds found inside a field become nested records.
Everything else is a leaf and is classified with to_scalar.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterable, List, Set, Tuple

from tabexport.model import Record, Serializable, TabularExportError
from tabexport.values import ScalarValue, to_scalar


_LEAF_TYPES = (str, bytes, int, float, bool, Enum, ScalarValue)


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_structured(value: Any) -> bool:
    """Whether as_record would adapt this value into a nested record."""
    if value is None or isinstance(value, _LEAF_TYPES):
        return False
    if isinstance(value, Serializable):
        return True
    if _is_dataclass_instance(value) or _is_namedtuple(value):
        return True
    if isinstance(value, Mapping):
        return True
    # Plain objects only; builtins such as datetime have no __dict__
    return hasattr(value, "__dict__") and not isinstance(value, type)


def _named_items(obj: Any) -> Iterable[Tuple[str, Any]]:
    if _is_dataclass_instance(obj):
        return [(f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)]
    if _is_namedtuple(obj):
        return list(zip(obj._fields, obj))
    if isinstance(obj, Mapping):
        return [(str(k), v) for k, v in obj.items()]
    return [(k, v) for k, v in vars(obj).items() if not k.startswith("_")]


def _adapt(obj: Any, seen: Set[int], warn_on_unknown: bool) -> Serializable:
    if isinstance(obj, Serializable):
        return obj

    if id(obj) in seen:
        raise TabularExportError(
            f"Cyclic reference to {type(obj).__name__} while flattening"
        )
    seen.add(id(obj))

    record = Record()
    for name, value in _named_items(obj):
        if is_structured(value):
            record.add(name, _adapt(value, seen, warn_on_unknown))
        else:
            record.add(name, to_scalar(value, warn_on_unknown))

    seen.discard(id(obj))
    return record


def as_record(obj: Any, warn_on_unknown: bool = False) -> Serializable:
    """
    Adapt an object to the Serializable capability.

    Args:
        obj: Serializable, dataclass instance, NamedTuple, mapping or plain object
        warn_on_unknown: Emit UnknownValueWarning for leaves rendered via str()

    Returns:
        The object itself if already Serializable, else a new Record

    Raises:
        TypeError: If obj is a leaf value (str, number, None, ...)
        TabularExportError: If the object graph contains a cycle
    """
    if not is_structured(obj):
        raise TypeError(f"Cannot build a record from {type(obj).__name__}")
    return _adapt(obj, set(), warn_on_unknown)


def as_records(objs: Iterable[Any], warn_on_unknown: bool = False) -> List[Serializable]:
    return [as_record(obj, warn_on_unknown) for obj in objs]


__all__ = ["as_record", "as_records", "is_structured"]
