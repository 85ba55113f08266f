"""
Configuration Loader - YAML Loading with Validation.

Loads configuration from YAML files and validates using Pydantic models.
Endpoint settings can also be read from the properties file format used
by the mobile client (``configs/cql_configs.properties``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from cql_pipeline.config.models import PipelineConfig

# properties key -> EndpointConfig field
PROPERTIES_KEYS = {
    "smart_register_base_url": "base_url",
    "cql_library_url": "library_path",
    "cql_helper_library_url": "helper_library_path",
    "cql_value_set_url": "value_set_path",
    "cql_patient_url": "patient_path",
}


class ConfigLoader:
    """Loads and validates configuration from YAML or properties files."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
        """
        self._base_path = base_path or Path(".")

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> PipelineConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge

        Returns:
            Validated PipelineConfig object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        path = self._resolve_path(config_path)
        config_dict = self._load_yaml(path)

        if profile:
            profile_dict = self._load_profile(profile)
            config_dict = self._merge_configs(config_dict, profile_dict)

        return PipelineConfig.model_validate(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> PipelineConfig:
        """Load configuration from dictionary."""
        return PipelineConfig.model_validate(config_dict)

    def load_properties(
        self,
        properties_path: Union[str, Path],
        base: Optional[PipelineConfig] = None,
    ) -> PipelineConfig:
        """
        Load endpoint settings from a Java-style properties file.

        Unknown keys are ignored. Endpoint values found in the file replace
        those of ``base`` (or of the defaults).

        Args:
            properties_path: Path to the .properties file
            base: Configuration to apply the endpoints to

        Returns:
            Validated PipelineConfig object
        """
        path = self._resolve_path(properties_path)
        properties = self._read_properties(path)

        endpoint_values = {
            field: properties[key]
            for key, field in PROPERTIES_KEYS.items()
            if key in properties
        }

        config_dict = (base or PipelineConfig()).model_dump()
        config_dict["endpoints"] = self._merge_configs(
            config_dict["endpoints"], endpoint_values
        )
        return PipelineConfig.model_validate(config_dict)

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve config path relative to base path."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        profile_path = self._base_path / "config" / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)

    def _read_properties(self, path: Path) -> Dict[str, str]:
        """Parse ``key=value`` lines; ``#`` and ``!`` start comments."""
        properties: Dict[str, str] = {}
        with open(path, encoding="utf-8") as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line[0] in "#!":
                    continue
                key, sep, value = line.partition("=")
                if not sep:
                    key, sep, value = line.partition(":")
                if sep:
                    properties[key.strip()] = value.strip()
        return properties

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> PipelineConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated PipelineConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)
