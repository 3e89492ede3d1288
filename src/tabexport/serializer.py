"""
Delimited-text serializer for records and record sequences.

Converts a record (or a sequence of records) into tabular text:

    id,name,note
    1,a,

Supports two forms:
    - SINGLE: one header line and exactly one data line
    - MULTI: one header line (from the first record) and one line per record

Both forms flatten nested records in place and render instants and
intervals as epoch integers.
"""
from __future__ import annotations

import dataclasses
import warnings
from collections.abc import Iterable
from typing import Any, Iterator, List, Optional, TextIO, Tuple, Union

from tabexport.config import DEFAULT_CONFIG, ExportConfig
from tabexport.introspection import as_record, is_structured
from tabexport.model import Record, RecordSet, Serializable, TabularExportError
from tabexport.values import (
    EpochUnit,
    ScalarValue,
    is_missing,
    render_scalar as _render_scalar,
    to_scalar,
)


class SchemaMismatch(TabularExportError):
    """Raised when a record's flattened fields differ from the header."""

    def __init__(self, index: int, expected: List[str], actual: List[str]):
        self.index = index
        self.expected = list(expected)
        self.actual = list(actual)
        super().__init__(
            f"Record {index} does not match header: expected {self.expected_count} "
            f"fields {self.expected}, got {self.actual_count} fields {self.actual}"
        )

    @property
    def expected_count(self) -> int:
        return len(self.expected)

    @property
    def actual_count(self) -> int:
        return len(self.actual)


class SchemaMismatchWarning(UserWarning):
    """Emitted instead of SchemaMismatch when strict checking is off."""
    pass


def _overlaps_delimiter(text: str, delimiter: str) -> bool:
    """Whether text could fuse with an adjacent multi-character delimiter."""
    for size in range(1, len(delimiter)):
        if text.endswith(delimiter[:size]) or text.startswith(delimiter[-size:]):
            return True
    return False


def _quote_cell(text: str, delimiter: str) -> str:
    """Quote a cell RFC 4180 style if it contains special characters."""
    if (delimiter in text or '"' in text or "\n" in text or "\r" in text
            or _overlaps_delimiter(text, delimiter)):
        return '"' + text.replace('"', '""') + '"'
    return text


class TabularSerializer:
    """
    Stateless exporter bound to one ExportConfig.

    Every call is a pure function of its input; one instance can be
    shared freely.

    Example:
        serializer = TabularSerializer(delimiter=";")
        text = serializer.to_delimited_text(records)
    """

    def __init__(self, config: Optional[ExportConfig] = None, **overrides: Any):
        config = config or DEFAULT_CONFIG
        if overrides:
            config = dataclasses.replace(config, **overrides)
        self.config = config

    # =========================================================================
    # INPUT CLASSIFICATION
    # =========================================================================

    def _adapt(self, value: Any) -> Serializable:
        if isinstance(value, Serializable):
            return value
        return as_record(value, warn_on_unknown=self.config.warn_on_unknown)

    def _classify(self, value: Any) -> Tuple[bool, List[Serializable]]:
        """Return (is_multi, records) for any accepted input."""
        if isinstance(value, RecordSet):
            return True, [self._adapt(r) for r in value.records]
        if is_structured(value):
            return False, [self._adapt(value)]
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return True, [self._adapt(item) for item in value]
        raise TypeError(f"Cannot export {type(value).__name__}; expected a record or a sequence of records")

    def _values_of(self, record: Serializable) -> List[ScalarValue]:
        if isinstance(record, Record):
            return record.field_values(warn_on_unknown=self.config.warn_on_unknown)
        return [to_scalar(v, self.config.warn_on_unknown) for v in record.field_values()]

    # =========================================================================
    # CORE OPERATIONS
    # =========================================================================

    def field_names(self, value: Any) -> List[str]:
        """
        Flattened field names.

        For a sequence, the names of its first element ([] if empty).
        """
        _, records = self._classify(value)
        if not records:
            return []
        return records[0].field_names()

    def field_values(self, value: Any) -> Union[List[ScalarValue], List[List[ScalarValue]]]:
        """
        Flattened field values.

        Returns a flat list for a single record, and a list of rows
        (one per element) for a sequence.
        """
        multi, records = self._classify(value)
        if multi:
            return [self._values_of(r) for r in records]
        return self._values_of(records[0])

    def render_scalar(self, value: Any) -> str:
        return _render_scalar(to_scalar(value, self.config.warn_on_unknown), self.config.epoch_unit)

    def check_schema(self, records: List[Serializable]) -> List[str]:
        """
        Verify every record flattens to the first record's field names.

        Returns:
            The header field names

        Raises:
            SchemaMismatch: On the first mismatch, when config.strict is set
        """
        if not records:
            return []
        expected = records[0].field_names()
        for index, record in enumerate(records[1:], start=1):
            actual = record.field_names()
            if actual == expected:
                continue
            if self.config.strict:
                raise SchemaMismatch(index, expected, actual)
            warnings.warn(str(SchemaMismatch(index, expected, actual)), SchemaMismatchWarning)
        return expected

    # =========================================================================
    # RENDERING
    # =========================================================================

    def _join(self, cells: List[str]) -> str:
        delimiter = self.config.delimiter
        if self.config.quoting:
            cells = [_quote_cell(c, delimiter) for c in cells]
        return delimiter.join(cells) + "\n"

    def _render_row(self, values: List[ScalarValue], placeholder: str) -> str:
        cells = []
        for v in values:
            if is_missing(v):
                cells.append(placeholder)
            else:
                cells.append(_render_scalar(v, self.config.epoch_unit))
        return self._join(cells)

    def header_line(self, value: Any) -> str:
        return self._join(self.field_names(value))

    def iter_lines(self, value: Any) -> Iterator[str]:
        """
        Yield the header line, then one line per record.

        Each line ends with "\\n". An empty sequence yields a single
        empty header line.
        """
        multi, records = self._classify(value)
        placeholder = self.config.placeholder_for(multi)

        if multi:
            header = self.check_schema(records)
        else:
            header = records[0].field_names()

        yield self._join(header)
        for record in records:
            yield self._render_row(self._values_of(record), placeholder)

    def to_delimited_text(self, value: Any) -> str:
        """
        Serialize a record or a sequence of records to delimited text.

        Args:
            value: Record, RecordSet, Serializable, dataclass, mapping,
                   plain object, or a sequence of any of these

        Returns:
            Header line followed by data lines, each "\\n"-terminated

        Raises:
            SchemaMismatch: If a later record's shape differs (strict mode)
            TypeError: If value is not record-like
        """
        return "".join(self.iter_lines(value))

    def write(self, value: Any, target: Union[str, TextIO]) -> None:
        """
        Serialize and write to a file path or an open text stream.

        Args:
            value: Anything to_delimited_text accepts
            target: Output file path, or any object with a write() method
        """
        # render fully before touching the target so a failed export leaves it intact
        text = self.to_delimited_text(value)
        if hasattr(target, "write"):
            target.write(text)
            return
        with open(target, 'w', encoding='utf-8', newline='') as f:
            f.write(text)


# =============================================================================
# MODULE-LEVEL CONVENIENCE API
# =============================================================================

def _serializer_for(config: Optional[ExportConfig], delimiter: Optional[str]) -> TabularSerializer:
    if delimiter is None:
        return TabularSerializer(config)
    return TabularSerializer(config, delimiter=delimiter)


def field_names(value: Any) -> List[str]:
    return TabularSerializer().field_names(value)


def field_values(value: Any) -> Union[List[ScalarValue], List[List[ScalarValue]]]:
    return TabularSerializer().field_values(value)


def render_scalar(value: Any, epoch_unit: EpochUnit = EpochUnit.MILLISECONDS) -> str:
    return TabularSerializer(epoch_unit=epoch_unit).render_scalar(value)


def to_delimited_text(value: Any, delimiter: Optional[str] = None,
                      config: Optional[ExportConfig] = None) -> str:
    """
    Serialize with the default config (or the given one).

    delimiter, when given, overrides the config's delimiter (",").

    Examples:
        >>> to_delimited_text({"id": 1, "name": "a", "note": None})
        'id,name,note\\n1,a, \\n'
        >>> to_delimited_text([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
        'id,name\\n1,a\\n2,b\\n'
    """
    return _serializer_for(config, delimiter).to_delimited_text(value)


def save_delimited_file(value: Any, filename: str, delimiter: Optional[str] = None,
                        config: Optional[ExportConfig] = None) -> None:
    _serializer_for(config, delimiter).write(value, filename)


__all__ = [
    "SchemaMismatch",
    "SchemaMismatchWarning",
    "TabularSerializer",
    "field_names",
    "field_values",
    "render_scalar",
    "to_delimited_text",
    "save_delimited_file",
]
