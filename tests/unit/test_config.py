"""Unit tests for Settings validators and env-var loading in config.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from newsdesk.config import Settings


# ─────────────────────────────────────────────────────────────
# Defaults and validators
# ─────────────────────────────────────────────────────────────


class TestDefaults:
    """Settings without any environment."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.env == "development"
        assert settings.urgency_threshold == 7.0
        assert settings.max_retries == 3
        assert settings.retry_delay_ms == 5000
        assert settings.max_retry_delay_ms == 60_000
        assert settings.state_file_path == Path("./pipeline_state.json")
        assert settings.override_topic is None
        assert settings.override_content_type == "breaking_news"
        assert settings.schedule_timezone == "Asia/Dubai"
        assert settings.scheduler_enabled is False
        assert settings.collaborators is None
        assert settings.is_production is False

    def test_tz(self) -> None:
        settings = Settings(_env_file=None, schedule_timezone="UTC")  # type: ignore[call-arg]
        assert str(settings.tz) == "UTC"


class TestValidators:
    """Tests for field validators."""

    def test_blank_override_is_none(self) -> None:
        settings = Settings(_env_file=None, override_topic="   ")  # type: ignore[call-arg]
        assert settings.override_topic is None

    def test_override_is_stripped(self) -> None:
        settings = Settings(_env_file=None, override_topic="  Fed emergency ")  # type: ignore[call-arg]
        assert settings.override_topic == "Fed emergency"

    def test_unknown_timezone(self) -> None:
        with pytest.raises(ValidationError, match="Unknown timezone"):
            Settings(_env_file=None, schedule_timezone="Mars/Olympus")  # type: ignore[call-arg]

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("urgency_threshold", 11),
            ("urgency_threshold", -1),
            ("max_retries", -1),
            ("retry_delay_ms", -5),
            ("override_content_type", "podcast"),
        ],
    )
    def test_out_of_range(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})  # type: ignore[call-arg]


# ─────────────────────────────────────────────────────────────
# Env-var loading
# ─────────────────────────────────────────────────────────────


class TestSettingsEnvLoading:
    """Settings read from environment variables."""

    def test_all_fields_loadable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        env = {
            "NEWSDESK_ENV": "production",
            "NEWSDESK_LOG_LEVEL": "DEBUG",
            "URGENCY_THRESHOLD": "6.5",
            "MAX_RETRIES": "5",
            "RETRY_DELAY_MS": "250",
            "MAX_RETRY_DELAY_MS": "2000",
            "STATE_FILE_PATH": "/var/lib/newsdesk/state.json",
            "OVERRIDE_TOPIC": "Fed emergency",
            "OVERRIDE_CONTENT_TYPE": "educational",
            "SCHEDULE_TIMEZONE": "Europe/London",
            "SCHEDULER_ENABLED": "true",
            "NEWSDESK_COLLABORATORS": "mychannel.vendors:build_collaborators",
        }
        for env_var, env_val in env.items():
            monkeypatch.setenv(env_var, env_val)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.env == "production"
        assert settings.is_production is True
        assert settings.log_level == "DEBUG"
        assert settings.urgency_threshold == 6.5
        assert settings.max_retries == 5
        assert settings.retry_delay_ms == 250
        assert settings.max_retry_delay_ms == 2000
        assert settings.state_file_path == Path("/var/lib/newsdesk/state.json")
        assert settings.override_topic == "Fed emergency"
        assert settings.override_content_type == "educational"
        assert settings.schedule_timezone == "Europe/London"
        assert settings.scheduler_enabled is True
        assert settings.collaborators == "mychannel.vendors:build_collaborators"

    def test_invalid_env_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("URGENCY_THRESHOLD", "high")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("MAX_RETRIES=1\nOVERRIDE_TOPIC=\n")

        settings = Settings(_env_file=env_file)  # type: ignore[call-arg]

        assert settings.max_retries == 1
        assert settings.override_topic is None
