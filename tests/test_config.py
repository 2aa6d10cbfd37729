"""Tests for generator configuration loading and validation."""

import json

import pytest

from swagger_scaffold.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)


class TestDefaults:
    def test_default_values(self):
        config = load_config()
        assert config.go_module == "example.com/api"
        assert config.model_package == "models"
        assert config.operations_package == "operations"
        assert config.server_package is None
        assert config.add_comments is True

    def test_import_path(self):
        assert GeneratorConfig(go_module="github.com/acme/pets/").import_path("models") == "github.com/acme/pets/models"

    def test_default_lists_are_not_shared(self):
        first = load_config()
        first.include_tags.append("pets")
        assert load_config().include_tags == []


class TestMerging:
    def test_overrides(self):
        config = load_config({"model_package": "types", "include_tags": ["store"]})
        assert config.model_package == "types"
        assert config.include_tags == ["store"]

    def test_file_then_overrides(self, tmp_path):
        path = tmp_path / "scaffold.json"
        path.write_text(
            json.dumps(
                {
                    "go_module": "github.com/acme/petstore",
                    "server_package": "petstore",
                    "include_tags": ["pets", "store"],
                }
            ),
            encoding="utf-8",
        )
        config = load_config({"server_package": "api"}, path)
        assert config.go_module == "github.com/acme/petstore"
        assert config.include_tags == ["pets", "store"]
        assert config.server_package == "api"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_file=tmp_path / "missing.json")

    def test_non_json_suffix(self, tmp_path):
        path = tmp_path / "scaffold.yaml"
        path.write_text("go_module: x", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be JSON"):
            load_config(config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scaffold.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(config_file=path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "scaffold.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(config_file=path)

    def test_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            load_config({"colour": "blue"})

    def test_file_values_do_not_leak_between_loads(self, tmp_path):
        manager = ConfigManager()
        path = tmp_path / "scaffold.json"
        path.write_text(json.dumps({"model_package": "types", "add_comments": False}), encoding="utf-8")
        config = manager.get_config(config_file=path)
        assert config.model_package == "types"
        assert config.add_comments is False
        assert manager.get_config().model_package == "models"


class TestValidation:
    def test_defaults_are_valid(self):
        assert ConfigManager().validate_config(GeneratorConfig()) == []

    def test_bad_package_names(self):
        warnings = ConfigManager().validate_config(
            GeneratorConfig(model_package="Models", server_package="func")
        )
        assert any(w.startswith("model_package:") for w in warnings)
        assert any(w.startswith("server_package:") for w in warnings)

    def test_empty_module(self):
        warnings = ConfigManager().validate_config(GeneratorConfig(go_module=""))
        assert warnings == ["go_module is empty; generated imports will be relative"]

    def test_incomplete_format_validator(self):
        config = GeneratorConfig(format_validators={"zipcode": {"func": "IsZipCode"}})
        assert ConfigManager().validate_config(config) == ["format_validators['zipcode'] needs 'func' and 'import'"]
