"""
Tests for tabexport core model objects.

These tests verify:
    - Field naming and the "unknown" placeholder
    - Record flattening (names and values stay aligned)
    - RecordSet header and row semantics
    - Custom Serializable implementations
"""

import pytest
from tabexport.model import (
    Field,
    Record,
    RecordSet,
    Serializable,
    TabularExportError,
    UNKNOWN_FIELD_NAME,
)
from tabexport.values import MISSING, Number, Text


def build_nested_record() -> Record:
    # {outer: {x: 1, y: 2}, z: 3}
    return Record([
        Field("outer", Record.of(x=1, y=2)),
        Field("z", 3),
    ])


class Point(Serializable):
    """Hand-written Serializable, not a Record."""

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def field_names(self):
        return ["px", "py"]

    def field_values(self):
        return [self.x, self.y]


class TestField:
    """Test Field objects."""

    def test_display_name(self):
        assert Field("id", 1).display_name == "id"

    def test_empty_name_is_unknown(self):
        assert Field("", 1).display_name == UNKNOWN_FIELD_NAME

    def test_is_nested(self):
        assert Field("r", Record()).is_nested
        assert not Field("v", 1).is_nested


class TestRecord:
    """Test Record flattening."""

    def test_of_keeps_keyword_order(self):
        record = Record.of(b=1, a=2, c=3)
        assert record.field_names() == ["b", "a", "c"]

    def test_values_are_classified(self):
        record = Record.of(id=1, name="a", note=None)
        assert record.field_values() == [Number(1), Text("a"), MISSING]

    def test_nested_flattening(self):
        record = build_nested_record()
        assert record.field_names() == ["x", "y", "z"]
        assert record.field_values() == [Number(1), Number(2), Number(3)]

    def test_nested_record_contributes_k_entries(self):
        inner = Record.of(a=1, b=2, c=3, d=4)
        record = Record([Field("inner", inner), Field("tail", 0)])
        assert len(record.field_names()) == len(inner) + 1
        assert len(record.field_values()) == len(inner) + 1

    def test_colliding_names_not_merged(self):
        record = Record([Field("id", 1), Field("child", Record.of(id=2))])
        assert record.field_names() == ["id", "id"]
        assert record.field_values() == [Number(1), Number(2)]

    def test_empty_nested_record_contributes_nothing(self):
        record = Record([Field("empty", Record()), Field("z", 3)])
        assert record.field_names() == ["z"]

    def test_unknown_name_placeholder(self):
        record = Record([Field("", 1)])
        assert record.field_names() == ["unknown"]

    def test_add_is_chainable(self):
        record = Record().add("a", 1).add("b")
        assert record.field_names() == ["a", "b"]
        assert record.field_values()[1] is MISSING

    def test_custom_serializable_is_spliced(self):
        record = Record([Field("p", Point(1, 2)), Field("z", 3)])
        assert record.field_names() == ["px", "py", "z"]
        assert record.field_values() == [Number(1), Number(2), Number(3)]

    def test_cyclic_record_raises(self):
        record = Record.of(a=1)
        record.add("self", record)
        with pytest.raises(TabularExportError):
            record.field_names()

    def test_same_record_twice_is_not_a_cycle(self):
        shared = Record.of(a=1)
        record = Record([Field("l", shared), Field("r", shared)])
        assert record.field_names() == ["a", "a"]


class TestRecordSet:
    """Test RecordSet objects."""

    def test_header_from_first_record(self):
        records = RecordSet([Record.of(id=1, name="a"), Record.of(id=2, name="b")])
        assert records.field_names() == ["id", "name"]

    def test_empty_set_has_no_names(self):
        assert RecordSet().field_names() == []
        assert RecordSet().first() is None

    def test_values_are_rows(self):
        records = RecordSet.from_iterable(Record.of(id=i) for i in range(3))
        assert records.field_values() == [[Number(0)], [Number(1)], [Number(2)]]
        assert len(records) == 3
