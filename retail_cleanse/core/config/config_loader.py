"""
Cleaning rules configuration loading.

Loads cleaning tables from YAML files into a validated CleaningConfig.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from retail_cleanse.core.errors import ConfigError

from .cleaning_config import CleaningConfig

DEFAULT_RULES_PATH = "config/cleaning_rules.yaml"

# YAML section -> {YAML key: CleaningConfig field}
SECTION_FIELDS = {
    "identity": {
        "invalid_order_ids": "invalid_order_ids",
        "order_id_pattern": "order_id_pattern",
    },
    "dates": {"formats": "date_formats"},
    "names": {"artifact_characters": "name_artifact_characters"},
    "countries": {"aliases": "country_aliases"},
    "products": {"placeholders": "product_placeholders"},
    "ingestion": {"required_columns": "required_columns"},
}


class CleaningConfigLoader:
    """
    Loads cleaning rules from YAML configuration files.

    Expected YAML format (every section is optional; omitted keys keep
    their built-in defaults):
    ```yaml
    cleaning:
      identity:
        invalid_order_ids: ["", "0", "???", "99999", "ORDX", "OrderID"]
        order_id_pattern: "^\\d+$"
      dates:
        formats: ["%Y-%m-%d", "%d/%m/%Y", "%d-%b-%Y", "%d-%b-%y"]
      countries:
        aliases:
          United States: [usa, us, u.s.]
      products:
        placeholders: [unknown item, "()"]
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Cleaning rules file not found: {config_path}")

    def load(self) -> CleaningConfig:
        """
        Load and validate the cleaning rules.

        Returns:
            CleaningConfig built from the file

        Raises:
            ConfigError: If YAML is invalid or contains unknown keys
        """
        try:
            with open(self.config_path) as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {self.config_path}: {e}") from e

        if not document or "cleaning" not in document:
            raise ConfigError("Configuration file must contain 'cleaning' section")

        sections = document["cleaning"] or {}
        if not isinstance(sections, dict):
            raise ConfigError("'cleaning' section must be a mapping")

        values: dict[str, Any] = {}
        for section_name, section in sections.items():
            values.update(self._parse_section(section_name, section))

        try:
            return CleaningConfig(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid cleaning rules in {self.config_path}: {e}") from e

    def _parse_section(self, section_name: str, section: Any) -> dict[str, Any]:
        """
        Map one YAML section onto CleaningConfig field names.

        Raises:
            ConfigError: If the section or one of its keys is unknown
        """
        field_map = SECTION_FIELDS.get(section_name)
        if field_map is None:
            raise ConfigError(f"Unknown configuration section '{section_name}'")
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{section_name}' must be a mapping")

        parsed = {}
        for key, value in section.items():
            if key not in field_map:
                raise ConfigError(f"Unknown key '{key}' in section '{section_name}'")
            parsed[field_map[key]] = value
        return parsed


def load_cleaning_config(config_path: str | Path | None = None) -> CleaningConfig:
    """
    Resolve and load the cleaning rules.

    Resolution order: explicit path, CLEANING_RULES_PATH env var, the
    default path if it exists, otherwise built-in defaults.
    """
    path = config_path or os.getenv("CLEANING_RULES_PATH")
    if path:
        return CleaningConfigLoader(path).load()
    if Path(DEFAULT_RULES_PATH).exists():
        return CleaningConfigLoader(DEFAULT_RULES_PATH).load()
    return CleaningConfig()
