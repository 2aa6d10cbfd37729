"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from dataclasses import dataclass, field, fields, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Settings shared by the model, operations and server emitters."""

    # Output settings
    target: str = "./"
    go_module: str = "example.com/api"
    model_package: str = "models"
    operations_package: str = "operations"
    server_package: Optional[str] = None  # defaults to the spec title

    # Selection
    include_operations: List[str] = field(default_factory=list)
    include_tags: List[str] = field(default_factory=list)
    include_models: List[str] = field(default_factory=list)
    skip_models: bool = False
    skip_operations: bool = False

    # Runtime packages the generated code links against
    validate_import: str = "github.com/aiyi/swagger-gin/validate"
    errors_import: str = "github.com/aiyi/swagger-gin/errors"
    govalidator_import: str = "github.com/asaskevich/govalidator"
    gin_import: str = "github.com/gin-gonic/gin"

    # Additional metadata
    add_comments: bool = True

    # Extra extended-format validators: {format: {"func": ..., "import": ...}}
    format_validators: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def import_path(self, package: str) -> str:
        """Full Go import path of one of the generated packages."""
        return f"{self.go_module.rstrip('/')}/{package}"


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = asdict(GeneratorConfig())

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Build a configuration from defaults, a config file and overrides.

        Args:
            custom_config: Custom configuration overrides (highest priority)
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = copy.deepcopy(self._defaults)

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}
        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        return GeneratorConfig(**config_dict)

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        from ..languages.go.naming import validate_go_package_name

        warnings = []
        packages = {
            "model_package": config.model_package,
            "operations_package": config.operations_package,
        }
        if config.server_package:
            packages["server_package"] = config.server_package

        for setting, name in packages.items():
            for problem in validate_go_package_name(name):
                warnings.append(f"{setting}: {problem}")

        if not config.go_module:
            warnings.append("go_module is empty; generated imports will be relative")

        for fmt, entry in config.format_validators.items():
            if not isinstance(entry, dict) or not entry.get("func") or not entry.get("import"):
                warnings.append(f"format_validators[{fmt!r}] needs 'func' and 'import'")

        return warnings


# Global configuration manager instance
_config_manager = None

def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)

