"""Tests for the category table and configuration dataclasses."""

import pytest

from zh_text_correction.categories import (
    CATEGORY_TABLE,
    INFO_CATEGORY,
    KNOWN_CATEGORY_KEYS,
    display_name,
    empty_correction_categories,
    fallback_category,
    get_category,
    is_known_category,
    severity_for_priority,
)
from zh_text_correction.config import CorrectionConfig, ServiceConfig
from zh_text_correction.models import Severity


class TestCategoryTable:
    """Tests for category lookups."""

    def test_known_categories_present(self):
        """Test the vendor categories are all described."""
        for key in ("char", "word", "redund", "miss", "order", "punc", "idm", "pol", "date-d"):
            assert key in CATEGORY_TABLE
        assert KNOWN_CATEGORY_KEYS == frozenset(CATEGORY_TABLE)

    def test_info_is_not_a_vendor_category(self):
        """Test the informational sentinel category is not in the table."""
        assert INFO_CATEGORY not in CATEGORY_TABLE

    def test_table_is_read_only(self):
        """Test the shared table cannot be mutated."""
        with pytest.raises(TypeError):
            CATEGORY_TABLE["new"] = fallback_category("new")

    def test_get_category_known(self):
        """Test a known key returns its entry."""
        entry = get_category("char")
        assert entry.key == "char"
        assert entry.display_name == "别字纠错"
        assert entry.severity == Severity.HIGH

    def test_get_category_unknown_falls_back(self):
        """Test unknown keys get a medium-priority fallback."""
        entry = get_category("mystery")
        assert entry.key == "mystery"
        assert entry.priority == 3
        assert entry.severity == Severity.MEDIUM
        assert entry.description == "mystery"
        assert not is_known_category("mystery")

    def test_custom_table(self):
        """Test lookups against a caller-supplied table."""
        table = {"custom": fallback_category("custom")}
        assert is_known_category("custom", table)
        assert not is_known_category("char", table)
        assert display_name("custom", table) == "custom"

    def test_empty_correction_categories(self):
        """Test which categories allow an empty correction."""
        allowed = empty_correction_categories()
        assert "miss" in allowed
        assert "order" in allowed
        assert "char" not in allowed

    @pytest.mark.parametrize("priority,severity", [
        (1, Severity.HIGH),
        (2, Severity.HIGH),
        (3, Severity.MEDIUM),
        (5, Severity.MEDIUM),
        (6, Severity.LOW),
        (9, Severity.LOW),
    ])
    def test_severity_for_priority(self, priority, severity):
        """Test priority tiers map to severities."""
        assert severity_for_priority(priority) == severity


class TestCorrectionConfig:
    """Tests for CorrectionConfig."""

    def test_defaults(self):
        """Test default values."""
        config = CorrectionConfig()
        assert config.max_text_length == 2000
        assert config.min_record_fields == 3
        assert config.max_record_fields == 5
        assert config.similarity_threshold == 0.6
        assert config.lookahead_window == 3
        assert config.line_alignment == "lookahead"
        assert "miss" in config.empty_correction_categories

    def test_strict_preset(self):
        """Test strict preset and overrides."""
        config = CorrectionConfig.strict()
        assert config.line_alignment == "lcs"
        assert config.max_field_length == 200
        assert CorrectionConfig.strict(max_field_length=50).max_field_length == 50

    def test_lenient_preset(self):
        """Test lenient preset."""
        config = CorrectionConfig.lenient()
        assert config.similarity_threshold == 0.4
        assert config.lookahead_window == 5

    @pytest.mark.parametrize("kwargs", [
        {"max_text_length": 0},
        {"max_field_length": 0},
        {"min_record_fields": 2},
        {"max_record_fields": 2},
        {"position_min": -1},
        {"similarity_threshold": 1.5},
        {"lookahead_window": 0},
        {"line_alignment": "myers"},
    ])
    def test_invalid_values(self, kwargs):
        """Test invalid values are rejected."""
        with pytest.raises(ValueError):
            CorrectionConfig(**kwargs)


class TestServiceConfig:
    """Tests for ServiceConfig."""

    def test_from_env(self, monkeypatch):
        """Test credentials are read from the environment."""
        monkeypatch.setenv("IFLYTEK_APPID", "app")
        monkeypatch.setenv("IFLYTEK_API_SECRET", "secret")
        monkeypatch.setenv("IFLYTEK_API_KEY", "key")
        config = ServiceConfig.from_env()
        assert config.app_id == "app"
        assert config.has_credentials
        assert config.missing_credentials == []

    def test_missing_credentials(self, monkeypatch):
        """Test missing credentials are listed by variable name."""
        monkeypatch.delenv("IFLYTEK_APPID", raising=False)
        monkeypatch.delenv("IFLYTEK_API_SECRET", raising=False)
        monkeypatch.setenv("IFLYTEK_API_KEY", "key")
        config = ServiceConfig.from_env()
        assert not config.has_credentials
        assert config.missing_credentials == ["IFLYTEK_APPID", "IFLYTEK_API_SECRET"]

    def test_overrides_win(self, monkeypatch):
        """Test explicit overrides replace environment values."""
        monkeypatch.setenv("IFLYTEK_APPID", "env-app")
        config = ServiceConfig.from_env(app_id="explicit", timeout=5.0)
        assert config.app_id == "explicit"
        assert config.timeout == 5.0

    def test_url(self):
        """Test the endpoint URL."""
        assert ServiceConfig().url == "https://api.xf-yun.com/v1/private/s9a87e3ec"

    def test_invalid_timeout(self):
        """Test non-positive timeouts are rejected."""
        with pytest.raises(ValueError):
            ServiceConfig(timeout=0)
