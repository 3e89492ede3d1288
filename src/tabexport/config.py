"""
Export configuration and its serialization helpers.

Provides lossless JSON/YAML round-trip of ExportConfig via an
intermediate dict representation, mirroring the explicit to/from-dict
style used for every persisted object in this package.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from tabexport.model import TabularExportError
from tabexport.values import EpochUnit


class ConfigError(TabularExportError):
    """Raised when an export configuration is invalid."""
    pass


_FORBIDDEN_DELIMITER_CHARS = ('"', "\n", "\r")


@dataclass(frozen=True)
class ExportConfig:
    """
    Settings for one tabular export.

    Properties:
        delimiter:
            Cell separator. Must be non-empty and must not contain a
            double quote or a line break.

        epoch_unit:
            Resolution for instants and intervals.

        single_missing_placeholder:
            Text for a missing cell in single-record output (" ").

        multi_missing_placeholder:
            Text for a missing cell in multi-record output ("").

        missing_placeholder:
            If set, overrides both placeholders above.

        quoting:
            Quote cells containing the delimiter, a quote or a line break.

        strict:
            Raise SchemaMismatch on a record whose shape differs from the
            header; otherwise warn and write the row anyway.

        warn_on_unknown:
            Warn when a leaf of unknown type is rendered through str().

    NOTE:
        The single/multi placeholder asymmetry is inherited behaviour and
        kept as the default. Set missing_placeholder to unify it.
    """

    delimiter: str = ","
    epoch_unit: EpochUnit = EpochUnit.MILLISECONDS
    single_missing_placeholder: str = " "
    multi_missing_placeholder: str = ""
    missing_placeholder: Optional[str] = None
    quoting: bool = True
    strict: bool = True
    warn_on_unknown: bool = False

    def __post_init__(self):
        if not isinstance(self.delimiter, str) or not self.delimiter:
            raise ConfigError("delimiter must be a non-empty string")
        if any(ch in self.delimiter for ch in _FORBIDDEN_DELIMITER_CHARS):
            raise ConfigError(f"delimiter may not contain quotes or line breaks: {self.delimiter!r}")
        if not isinstance(self.epoch_unit, EpochUnit):
            raise ConfigError(f"epoch_unit must be an EpochUnit, got {self.epoch_unit!r}")
        for name in ("single_missing_placeholder", "multi_missing_placeholder"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a string, got {getattr(self, name)!r}")
        if self.missing_placeholder is not None and not isinstance(self.missing_placeholder, str):
            raise ConfigError(f"missing_placeholder must be a string or null, got {self.missing_placeholder!r}")
        for name in ("quoting", "strict", "warn_on_unknown"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")

    def placeholder_for(self, multi: bool) -> str:
        if self.missing_placeholder is not None:
            return self.missing_placeholder
        return self.multi_missing_placeholder if multi else self.single_missing_placeholder


DEFAULT_CONFIG = ExportConfig()


def config_to_dict(c: ExportConfig) -> Dict[str, Any]:
    return {
        "delimiter": c.delimiter,
        "epoch_unit": c.epoch_unit.value,
        "single_missing_placeholder": c.single_missing_placeholder,
        "multi_missing_placeholder": c.multi_missing_placeholder,
        "missing_placeholder": c.missing_placeholder,
        "quoting": c.quoting,
        "strict": c.strict,
        "warn_on_unknown": c.warn_on_unknown,
    }


def config_from_dict(d: Dict[str, Any] | None) -> ExportConfig:
    if d is None:
        return ExportConfig()
    if not isinstance(d, dict):
        raise ConfigError(f"Config must be a mapping, got {type(d).__name__}")

    known = {f.name for f in fields(ExportConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    kwargs = dict(d)
    if "epoch_unit" in kwargs:
        try:
            kwargs["epoch_unit"] = EpochUnit(kwargs["epoch_unit"])
        except ValueError:
            raise ConfigError(f"Unknown epoch_unit: {kwargs['epoch_unit']!r}")
    return ExportConfig(**kwargs)


def config_to_json(c: ExportConfig) -> str:
    return json.dumps(config_to_dict(c), sort_keys=True)


def config_from_json(s: str) -> ExportConfig:
    d = json.loads(s)
    return config_from_dict(d)


def config_to_yaml(c: ExportConfig) -> str:
    return yaml.safe_dump(config_to_dict(c))


def config_from_yaml(s: str) -> ExportConfig:
    d = yaml.safe_load(s)
    return config_from_dict(d)


def load_config(filepath: str) -> ExportConfig:
    """
    Load an ExportConfig from a YAML (or JSON) file.

    JSON is a subset of YAML, so both are read through yaml.safe_load.

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the content is not a valid config
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {filepath}")

    try:
        return config_from_yaml(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config '{filepath}': {str(e)}")


__all__ = [
    "ConfigError",
    "ExportConfig",
    "DEFAULT_CONFIG",
    "config_to_dict",
    "config_from_dict",
    "config_to_json",
    "config_from_json",
    "config_to_yaml",
    "config_from_yaml",
    "load_config",
]
