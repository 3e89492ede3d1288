"""
Scalar Value System for tabexport

Every leaf cell of an export is represented as a member of a closed
union of scalar types, never as an arbitrary Python object.

This ensures:
    - Rendering is an exhaustive match
    - Instants and intervals get one canonical text form
    - Missing values are explicit, not inferred from a runtime shape

ARCHITECTURAL RULE:
    Classification (to_scalar) happens once, at flattening time.
    Rendering (render_scalar) never sees anything outside the union.
"""

from __future__ import annotations

import warnings
from abc import ABC
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Union


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MISSING_TEXT = "nil"


class UnknownValueWarning(UserWarning):
    """Emitted when a leaf value is folded into Text through str()."""
    pass


class EpochUnit(Enum):
    """
    Resolution used when an instant is written as an integer.

    MILLISECONDS matches the "epochLong" representation the exporter
    was first written against, and is the default everywhere.
    """

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    @property
    def step(self) -> timedelta:
        if self is EpochUnit.SECONDS:
            return timedelta(seconds=1)
        return timedelta(milliseconds=1)


class ScalarValue(ABC):
    """
    Base class for all leaf cell values.

    Structure only. Rendering lives in render_scalar so that every
    variant is handled in one place.
    """
    pass


@dataclass(frozen=True)
class Text(ScalarValue):
    """A string cell, written verbatim (subject to quoting)."""

    value: str


@dataclass(frozen=True)
class Number(ScalarValue):
    """
    A numeric cell.

    Properties:
        value: int or float, rendered with str()
    """

    value: Union[int, float]


@dataclass(frozen=True)
class Boolean(ScalarValue):
    """A boolean cell, rendered as "true" / "false"."""

    value: bool


@dataclass(frozen=True)
class Instant(ScalarValue):
    """
    A point in time.

    Naive datetimes are interpreted as UTC, so the same wall-clock value
    always produces the same epoch integer regardless of host timezone.

    Example:
        Instant(datetime(2024, 1, 1, tzinfo=timezone.utc))
        renders as "1704067200000" (milliseconds)
    """

    value: datetime

    def epoch(self, unit: EpochUnit = EpochUnit.MILLISECONDS) -> int:
        moment = self.value
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        # floor division of timedeltas is exact and floors toward -inf
        return (moment - EPOCH) // unit.step


@dataclass(frozen=True)
class Interval(ScalarValue):
    """
    A time interval between two instants.

    Rendered as two epoch integers separated by a single space:
        "<start> <end>"

    Properties:
        start: Interval start (datetime)
        end: Interval end (datetime)
    """

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class _Missing(ScalarValue):
    """Sentinel for an absent value. Use the MISSING singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    return value is MISSING


def to_scalar(value: Any, warn_on_unknown: bool = False) -> ScalarValue:
    """
    Classify a raw leaf value into the scalar union.

    One level of optionality is unwrapped: None becomes MISSING, any
    present value is classified by its type.

    Args:
        value: Raw leaf value
        warn_on_unknown: Emit UnknownValueWarning when falling back to str()

    Returns:
        ScalarValue
    """
    if value is None or value is MISSING:
        return MISSING
    if isinstance(value, ScalarValue):
        return value
    # bool must be checked before int
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, (int, float)):
        return Number(value)
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, datetime):
        return Instant(value)

    if warn_on_unknown:
        warnings.warn(
            f"No scalar type for {type(value).__name__}; rendering with str()",
            UnknownValueWarning,
        )
    return Text(str(value))


def render_scalar(value: ScalarValue, epoch_unit: EpochUnit = EpochUnit.MILLISECONDS) -> str:
    """
    Render a scalar to its canonical text form.

    Missing values render as "nil"; placeholder substitution is the
    serializer's job because the policy depends on the export form.

    Args:
        value: ScalarValue to render
        epoch_unit: Resolution for Instant and Interval

    Returns:
        Cell text (unquoted)

    Raises:
        TypeError: If value is not a ScalarValue
    """
    if value is MISSING:
        return MISSING_TEXT
    if isinstance(value, Instant):
        return str(value.epoch(epoch_unit))
    if isinstance(value, Interval):
        start = Instant(value.start).epoch(epoch_unit)
        end = Instant(value.end).epoch(epoch_unit)
        return f"{start} {end}"
    if isinstance(value, Boolean):
        return "true" if value.value else "false"
    if isinstance(value, (Number, Text)):
        return str(value.value)
    raise TypeError(f"Unsupported scalar type: {type(value)}")


__all__ = [
    "EpochUnit",
    "ScalarValue",
    "Text",
    "Number",
    "Boolean",
    "Instant",
    "Interval",
    "MISSING",
    "UnknownValueWarning",
    "is_missing",
    "to_scalar",
    "render_scalar",
]
