"""Tests for HelperConfig."""

import logging

import pytest

from escroll.helper.HelperConfig import HelperConfig


@pytest.fixture
def config() -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("escroll.tests"))


class TestHelperConfig:

    def test_string_default(self, config, monkeypatch) -> None:
        monkeypatch.delenv("SCROLL_KEEP_ALIVE", raising=False)
        assert config.get_string_val("scroll_keep_alive", default="10m") == "10m"

    def test_missing_required_string(self, config, monkeypatch) -> None:
        monkeypatch.delenv("APP_API_KEY", raising=False)
        with pytest.raises(ValueError, match="APP_API_KEY"):
            config.get_string_val("APP_API_KEY")

    def test_number(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SCROLL_PAGE_SIZE", "250")
        monkeypatch.setenv("SEARCH_TIMEOUT", "2.5")
        assert config.get_number_val("SCROLL_PAGE_SIZE") == 250
        assert config.get_number_val("SEARCH_TIMEOUT") == 2.5

    def test_invalid_number(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SCROLL_PAGE_SIZE", "many")
        with pytest.raises(ValueError, match="not a valid number"):
            config.get_number_val("SCROLL_PAGE_SIZE")

    def test_bool(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SOME_FLAG", "yes")
        assert config.get_bool_val("SOME_FLAG") is True

    def test_list(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SCROLL_OPTIONAL_FIELDS", "[_id, _score,]")
        assert config.get_list_val("SCROLL_OPTIONAL_FIELDS") == ["_id", "_score"]

    def test_empty_list(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SCROLL_OPTIONAL_FIELDS", "[]")
        assert config.get_list_val("SCROLL_OPTIONAL_FIELDS") == []

    def test_list_default(self, config, monkeypatch) -> None:
        monkeypatch.delenv("SCROLL_OPTIONAL_FIELDS", raising=False)
        assert config.get_list_val("SCROLL_OPTIONAL_FIELDS", default=[]) == []

    def test_list_without_brackets(self, config, monkeypatch) -> None:
        monkeypatch.setenv("SEARCH_ENGINES", "elasticsearch")
        with pytest.raises(ValueError, match="format"):
            config.get_list_val("SEARCH_ENGINES")
