"""Settings loading and validation"""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from wellness_journal.config import JournalSettings, get_settings, reset_settings


class TestDefaults:

    def test_values_from_environment(self, tmp_path):
        settings = get_settings()
        assert settings.TIMEZONE == "UTC"
        assert settings.STREAK_CUTOFF_DATE == date(2024, 1, 1)
        assert settings.FIRST_WEEKDAY == 0
        assert settings.entries_path == tmp_path / "data" / "journal_entries.json"
        assert not settings.ai_enabled

    def test_cached_until_reset(self, monkeypatch):
        first = get_settings()
        assert get_settings() is first
        monkeypatch.setenv("TIMEZONE", "Asia/Tokyo")
        assert get_settings().TIMEZONE == "UTC"
        reset_settings()
        assert get_settings().TIMEZONE == "Asia/Tokyo"

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TIMEZONE")
        Path(tmp_path / ".env").write_text("TIMEZONE=Europe/Berlin\n", encoding="utf-8")
        assert JournalSettings().TIMEZONE == "Europe/Berlin"


class TestValidation:

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            JournalSettings(TIMEZONE="Mars/Olympus")

    @pytest.mark.parametrize("weekday", [-1, 7])
    def test_first_weekday_range(self, weekday):
        with pytest.raises(ValidationError):
            JournalSettings(FIRST_WEEKDAY=weekday)

    def test_log_level_normalized(self):
        assert JournalSettings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
        with pytest.raises(ValidationError):
            JournalSettings(LOG_LEVEL="chatty")

    def test_environment(self):
        assert JournalSettings(ENVIRONMENT="Production").is_production
        with pytest.raises(ValidationError):
            JournalSettings(ENVIRONMENT="moon")

    def test_blank_api_key_disables_assistant(self):
        assert not JournalSettings(OPENAI_API_KEY="  ").ai_enabled
        assert JournalSettings(OPENAI_API_KEY="sk-live").ai_enabled


class TestHelpers:

    def test_logging_config(self, tmp_path):
        console_only = JournalSettings().get_logging_config()
        assert list(console_only["handlers"]) == ["console"]

        with_file = JournalSettings(LOG_TO_FILE=True, LOG_DIR=tmp_path / "logs").get_logging_config()
        assert with_file["handlers"]["file"]["class"] == "logging.handlers.RotatingFileHandler"
        assert with_file["loggers"][""]["handlers"] == ["console", "file"]

    def test_to_dict_hides_key(self):
        data = JournalSettings(OPENAI_API_KEY="sk-secret", FIRST_WEEKDAY=1).to_dict()
        assert "sk-secret" not in str(data)
        assert data["first_weekday"] == "Monday"
        assert data["ai_enabled"] is True
