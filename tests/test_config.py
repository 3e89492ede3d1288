"""
Tests for ExportConfig validation and its serialization.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `tabexport.config`.
"""

import pytest
from tabexport.config import (
    ConfigError,
    ExportConfig,
    config_from_dict,
    config_from_json,
    config_from_yaml,
    config_to_dict,
    config_to_json,
    config_to_yaml,
    load_config,
)
from tabexport.values import EpochUnit


def build_sample_config() -> ExportConfig:
    return ExportConfig(
        delimiter="\t",
        epoch_unit=EpochUnit.SECONDS,
        missing_placeholder="NA",
        quoting=False,
        strict=False,
    )


class TestExportConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = ExportConfig()
        assert config.delimiter == ","
        assert config.epoch_unit == EpochUnit.MILLISECONDS
        assert config.strict is True
        assert config.quoting is True

    def test_default_placeholders_are_asymmetric(self):
        config = ExportConfig()
        assert config.placeholder_for(multi=False) == " "
        assert config.placeholder_for(multi=True) == ""

    def test_missing_placeholder_overrides_both(self):
        config = ExportConfig(missing_placeholder="")
        assert config.placeholder_for(multi=False) == ""
        assert config.placeholder_for(multi=True) == ""

    @pytest.mark.parametrize("delimiter", ["", '"', "\n", ",\r"])
    def test_invalid_delimiters(self, delimiter):
        with pytest.raises(ConfigError):
            ExportConfig(delimiter=delimiter)

    def test_epoch_unit_must_be_enum(self):
        with pytest.raises(ConfigError):
            ExportConfig(epoch_unit="seconds")

    @pytest.mark.parametrize("name", ["single_missing_placeholder", "multi_missing_placeholder"])
    def test_placeholders_must_be_strings(self, name):
        with pytest.raises(ConfigError, match=name):
            ExportConfig(**{name: 0})

    def test_missing_placeholder_may_be_none(self):
        assert ExportConfig(missing_placeholder=None).missing_placeholder is None

    @pytest.mark.parametrize("name", ["quoting", "strict", "warn_on_unknown"])
    def test_flags_must_be_booleans(self, name):
        with pytest.raises(ConfigError, match=name):
            ExportConfig(**{name: "no"})


class TestConfigSerialization:
    """Round-trips and dict parsing."""

    def test_json_roundtrip(self):
        config = build_sample_config()
        before = config_to_dict(config)
        restored = config_from_json(config_to_json(config))
        assert config_to_dict(restored) == before
        assert restored == config

    def test_yaml_roundtrip(self):
        config = build_sample_config()
        before = config_to_dict(config)
        restored = config_from_yaml(config_to_yaml(config))
        assert config_to_dict(restored) == before

    def test_partial_dict_uses_defaults(self):
        config = config_from_dict({"delimiter": ";"})
        assert config.delimiter == ";"
        assert config.epoch_unit == EpochUnit.MILLISECONDS

    def test_none_is_default(self):
        assert config_from_dict(None) == ExportConfig()

    def test_empty_yaml_is_default(self):
        assert config_from_yaml("") == ExportConfig()

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigError, match="Unknown config keys"):
            config_from_dict({"delimeter": ";"})

    def test_unknown_epoch_unit_rejected(self):
        with pytest.raises(ConfigError):
            config_from_dict({"epoch_unit": "fortnights"})

    def test_yaml_numeric_placeholder_rejected(self):
        with pytest.raises(ConfigError, match="missing_placeholder"):
            config_from_yaml("missing_placeholder: 0\n")

    def test_yaml_quoted_flag_rejected(self):
        """A quoted 'no' is a string, not false, and must not pass as truthy."""
        with pytest.raises(ConfigError, match="strict"):
            config_from_yaml("strict: 'no'\n")

    def test_yaml_plain_boolean_accepted(self):
        assert config_from_yaml("strict: false\n").strict is False

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigError):
            config_from_yaml("- a\n- b\n")


class TestLoadConfig:
    """Loading from files."""

    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / "export.yaml"
        path.write_text('delimiter: ";"\nepoch_unit: seconds\n', encoding="utf-8")
        config = load_config(str(path))
        assert config.delimiter == ";"
        assert config.epoch_unit == EpochUnit.SECONDS

    def test_load_json_file(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(config_to_json(build_sample_config()), encoding="utf-8")
        assert load_config(str(path)) == build_sample_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("delimiter: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))
