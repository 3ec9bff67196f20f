"""Unit tests for configuration module."""

from pathlib import Path

import pytest

from inbox_threads.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.archive_dir == Path(".")
        assert settings.ignored_dirs == [".git"]
        assert settings.list_page_size == 20
        assert settings.source_timeout is None
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("INBOX_THREADS_ARCHIVE_DIR", str(tmp_path))
        monkeypatch.setenv("INBOX_THREADS_LIST_PAGE_SIZE", "5")
        monkeypatch.setenv("INBOX_THREADS_SOURCE_TIMEOUT", "2.5")
        monkeypatch.setenv("INBOX_THREADS_LOG_LEVEL", "DEBUG")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.archive_dir == tmp_path
        assert settings.list_page_size == 5
        assert settings.source_timeout == 2.5
        assert settings.log_level == "DEBUG"

        # Clean up
        get_settings.cache_clear()

    def test_invalid_page_size_rejected(self) -> None:
        """Test that a page size below one is rejected."""
        with pytest.raises(Exception):  # Pydantic ValidationError
            Settings(list_page_size=0)

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()
