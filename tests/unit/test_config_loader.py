"""
Unit tests for cleaning rules configuration loading.
"""

from pathlib import Path

import pytest

from retail_cleanse.core.config import CleaningConfig, CleaningConfigLoader, load_cleaning_config
from retail_cleanse.core.errors import ConfigError

REPO_RULES = Path(__file__).resolve().parents[2] / "config" / "cleaning_rules.yaml"


def _write(tmp_path, text):
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    return path


class TestCleaningConfig:
    """Tests for CleaningConfig model"""

    def test_defaults(self):
        """Test built-in tables are populated"""
        config = CleaningConfig()
        assert "???" in config.invalid_order_ids
        assert config.date_formats[0] == "%Y-%m-%d"
        assert "unknown item" in config.product_placeholders

    def test_country_lookup_is_case_insensitive_and_maps_canonical(self):
        """Test variants and canonical names map to the canonical name"""
        lookup = CleaningConfig(country_aliases={"United States": ["USA", " us "]}).country_lookup()
        assert lookup == {
            "united states": "United States",
            "usa": "United States",
            "us": "United States",
        }

    def test_invalid_pattern_rejected(self):
        """Test a pattern that does not compile is refused"""
        with pytest.raises(ValueError):
            CleaningConfig(order_id_pattern="([")

    def test_unknown_required_column_rejected(self):
        """Test required columns must be raw fields"""
        with pytest.raises(ValueError):
            CleaningConfig(required_columns=["order_id", "loyalty_tier"])

    def test_empty_date_formats_rejected(self):
        """Test at least one date format is needed"""
        with pytest.raises(ValueError):
            CleaningConfig(date_formats=[])


class TestCleaningConfigLoader:
    """Tests for CleaningConfigLoader"""

    def test_repository_rules_file_loads(self):
        """Test the shipped rules file is valid"""
        config = CleaningConfigLoader(REPO_RULES).load()
        assert config.country_lookup()["usa"] == "United States"
        assert "%d/%m/%Y" in config.date_formats

    def test_partial_file_keeps_defaults(self, tmp_path):
        """Test omitted sections fall back to built-in defaults"""
        path = _write(tmp_path, """
cleaning:
  products:
    placeholders: ["tbd"]
""")
        config = CleaningConfigLoader(path).load()
        assert config.product_placeholders == ["tbd"]
        assert config.date_formats == CleaningConfig().date_formats

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            CleaningConfigLoader(tmp_path / "absent.yaml")

    def test_missing_cleaning_section_raises(self, tmp_path):
        """Test the top-level key is required"""
        path = _write(tmp_path, "rules: {}\n")
        with pytest.raises(ConfigError, match="'cleaning' section"):
            CleaningConfigLoader(path).load()

    def test_unknown_section_raises(self, tmp_path):
        """Test typos in section names are reported"""
        path = _write(tmp_path, "cleaning:\n  countrys:\n    aliases: {}\n")
        with pytest.raises(ConfigError, match="countrys"):
            CleaningConfigLoader(path).load()

    def test_unknown_key_raises(self, tmp_path):
        """Test typos in keys are reported"""
        path = _write(tmp_path, "cleaning:\n  dates:\n    format: ['%Y']\n")
        with pytest.raises(ConfigError, match="format"):
            CleaningConfigLoader(path).load()

    def test_invalid_yaml_raises(self, tmp_path):
        """Test unparseable YAML is a ConfigError"""
        path = _write(tmp_path, "cleaning: [unclosed\n")
        with pytest.raises(ConfigError):
            CleaningConfigLoader(path).load()

    def test_invalid_values_raise(self, tmp_path):
        """Test model validation failures surface as ConfigError"""
        path = _write(tmp_path, "cleaning:\n  identity:\n    order_id_pattern: '(['\n")
        with pytest.raises(ConfigError):
            CleaningConfigLoader(path).load()


class TestLoadCleaningConfig:
    """Tests for config path resolution"""

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        """Test an explicit path beats the env var"""
        explicit = _write(tmp_path, "cleaning:\n  products:\n    placeholders: ['a']\n")
        monkeypatch.setenv("CLEANING_RULES_PATH", str(tmp_path / "absent.yaml"))
        assert load_cleaning_config(explicit).product_placeholders == ["a"]

    def test_env_var_used(self, tmp_path, monkeypatch):
        """Test CLEANING_RULES_PATH is honoured"""
        path = _write(tmp_path, "cleaning:\n  products:\n    placeholders: ['b']\n")
        monkeypatch.setenv("CLEANING_RULES_PATH", str(path))
        assert load_cleaning_config().product_placeholders == ["b"]

    def test_defaults_when_nothing_configured(self, tmp_path, monkeypatch):
        """Test built-in defaults when no file is found"""
        monkeypatch.delenv("CLEANING_RULES_PATH", raising=False)
        monkeypatch.chdir(tmp_path)
        assert load_cleaning_config() == CleaningConfig()
