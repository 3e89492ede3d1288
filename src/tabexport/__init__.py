"""
Tabular Export (tabexport) Package

Turns records, and sequences of records, into delimiter-separated text.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Reading or parsing tabular files
    - Spreadsheet dialects or encodings beyond UTF-8 text
    - Where the records came from

It flattens structure and renders scalars. Nothing else.

Every export is a pure function of its input.
"""

from tabexport.config import ConfigError, ExportConfig
from tabexport.model import Field, Record, RecordSet, Serializable, TabularExportError
from tabexport.serializer import (
    SchemaMismatch,
    SchemaMismatchWarning,
    TabularSerializer,
    field_names,
    field_values,
    render_scalar,
    to_delimited_text,
)
from tabexport.values import MISSING, EpochUnit, Instant, Interval

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EpochUnit",
    "ExportConfig",
    "Field",
    "Instant",
    "Interval",
    "MISSING",
    "Record",
    "RecordSet",
    "SchemaMismatch",
    "SchemaMismatchWarning",
    "Serializable",
    "TabularExportError",
    "TabularSerializer",
    "field_names",
    "field_values",
    "render_scalar",
    "to_delimited_text",
]
