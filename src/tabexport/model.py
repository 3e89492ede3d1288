"""
Core Record Model Objects

Defines the data structures an export is built from:
    - Field (a named slot)
    - Record (an ordered sequence of fields)
    - RecordSet (an ordered sequence of records sharing one schema)
    - Serializable (the capability every exportable type provides)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about delimiters, quoting or placeholders
        - Preserve declaration order exactly
        - Flatten nested records positionally, never by name
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Set

from .values import ScalarValue, to_scalar


UNKNOWN_FIELD_NAME = "unknown"


class TabularExportError(Exception):
    """Base class for all tabexport errors."""
    pass


class Serializable(ABC):
    """
    Capability contract for anything that can become a table row.

    Implementations report their flattened field names and flattened
    field values, in the same order and of the same length.
    """

    @abstractmethod
    def field_names(self) -> List[str]:
        """Flattened, ordered field names."""

    @abstractmethod
    def field_values(self) -> List[ScalarValue]:
        """Flattened, ordered field values."""


@dataclass
class Field:
    """
    A named slot within a record.

    Properties:
        name:
            Field name. An empty name is reported as "unknown".

        value:
            A leaf value (str, int, float, bool, datetime, ScalarValue),
            a nested Serializable, or None for an absent value.
    """

    name: str
    value: Any = None

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_FIELD_NAME

    @property
    def is_nested(self) -> bool:
        return isinstance(self.value, Serializable)


@dataclass
class Record(Serializable):
    """
    An ordered sequence of fields describing one structured entity.

    Nested records are flattened in place:

        Record([
            Field("outer", Record([Field("x", 1), Field("y", 2)])),
            Field("z", 3),
        ])

    has field names ["x", "y", "z"] and values [1, 2, 3].

    INVARIANTS:
        - Field order is declaration order
        - A nested record with k fields contributes exactly k entries
        - Names may collide across nesting levels; they are never merged
    """

    fields: List[Field] = field(default_factory=list)

    @classmethod
    def of(cls, **values: Any) -> "Record":
        """Build a record from keyword arguments, keeping their order."""
        return cls([Field(name, value) for name, value in values.items()])

    def add(self, name: str, value: Any = None) -> "Record":
        self.fields.append(Field(name, value))
        return self

    def field_names(self) -> List[str]:
        names: List[str] = []
        self._collect_names(names, set())
        return names

    def field_values(self, warn_on_unknown: bool = False) -> List[ScalarValue]:
        values: List[ScalarValue] = []
        self._collect_values(values, set(), warn_on_unknown)
        return values

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def _enter(self, seen: Set[int]) -> None:
        if id(self) in seen:
            raise TabularExportError("Record contains itself; cannot flatten a cyclic record")
        seen.add(id(self))

    def _collect_names(self, names: List[str], seen: Set[int]) -> None:
        self._enter(seen)
        for f in self.fields:
            if isinstance(f.value, Record):
                f.value._collect_names(names, seen)
            elif isinstance(f.value, Serializable):
                names.extend(f.value.field_names())
            else:
                names.append(f.display_name)
        seen.discard(id(self))

    def _collect_values(self, values: List[ScalarValue], seen: Set[int], warn_on_unknown: bool) -> None:
        self._enter(seen)
        for f in self.fields:
            if isinstance(f.value, Record):
                f.value._collect_values(values, seen, warn_on_unknown)
            elif isinstance(f.value, Serializable):
                values.extend(to_scalar(v, warn_on_unknown) for v in f.value.field_values())
            else:
                values.append(to_scalar(f.value, warn_on_unknown))
        seen.discard(id(self))


@dataclass
class RecordSet:
    """
    An ordered sequence of records sharing the same flattened schema.

    The header comes from the first record only. Whether later records
    match it is checked by the serializer, not here.
    """

    records: List[Serializable] = field(default_factory=list)

    @classmethod
    def from_iterable(cls, records: Iterable[Serializable]) -> "RecordSet":
        return cls(list(records))

    def field_names(self) -> List[str]:
        if not self.records:
            return []
        return self.records[0].field_names()

    def field_values(self) -> List[List[ScalarValue]]:
        """One flattened value list per record (rows, not a flat list)."""
        return [record.field_values() for record in self.records]

    def first(self) -> Optional[Serializable]:
        return self.records[0] if self.records else None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Serializable]:
        return iter(self.records)


__all__ = [
    "UNKNOWN_FIELD_NAME",
    "TabularExportError",
    "Serializable",
    "Field",
    "Record",
    "RecordSet",
]
