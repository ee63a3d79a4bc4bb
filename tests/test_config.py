"""Tests for configuration loading and validation."""

import pytest

from scheduler.config import AppConfig, BusinessConfig, SchedulingConfig, _safe_int, _validate_config


def make_config(business=None, scheduling=None) -> AppConfig:
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "business", business or BusinessConfig())
    object.__setattr__(config, "scheduling", scheduling or SchedulingConfig())
    object.__setattr__(config, "log_level", "INFO")
    return config


def make_scheduling(
    granularity: int = 15,
    lunch_start: str = "13:00",
    lunch_end: str = "14:00",
    upcoming: int = 5,
) -> SchedulingConfig:
    scheduling = SchedulingConfig.__new__(SchedulingConfig)
    object.__setattr__(scheduling, "slot_granularity_minutes", granularity)
    object.__setattr__(scheduling, "lunch_break_start", lunch_start)
    object.__setattr__(scheduling, "lunch_break_end", lunch_end)
    object.__setattr__(scheduling, "dashboard_upcoming_limit", upcoming)
    return scheduling


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_default_business(self):
        config = AppConfig()
        assert config.business.timezone == "America/Chicago"
        assert config.scheduling.slot_granularity_minutes == 15

    def test_unknown_timezone(self):
        business = BusinessConfig.__new__(BusinessConfig)
        for name, value in vars(BusinessConfig()).items():
            object.__setattr__(business, name, value)
        object.__setattr__(business, "timezone", "Mars/Olympus_Mons")

        with pytest.raises(ValueError, match="BUSINESS_TIMEZONE"):
            _validate_config(make_config(business=business))

    def test_granularity_zero(self):
        with pytest.raises(ValueError, match="SLOT_GRANULARITY_MINUTES"):
            _validate_config(make_config(scheduling=make_scheduling(granularity=0)))

    def test_granularity_too_large(self):
        with pytest.raises(ValueError, match="SLOT_GRANULARITY_MINUTES"):
            _validate_config(make_config(scheduling=make_scheduling(granularity=90)))

    def test_malformed_lunch_time(self):
        with pytest.raises(ValueError, match="LUNCH_BREAK_START"):
            _validate_config(make_config(scheduling=make_scheduling(lunch_start="1pm")))

    def test_lunch_end_before_start(self):
        with pytest.raises(ValueError, match="LUNCH_BREAK_START must be before"):
            _validate_config(
                make_config(scheduling=make_scheduling(lunch_start="14:00", lunch_end="13:00"))
            )

    def test_upcoming_limit(self):
        with pytest.raises(ValueError, match="DASHBOARD_UPCOMING_LIMIT"):
            _validate_config(make_config(scheduling=make_scheduling(upcoming=0)))

    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_bad_value(self, monkeypatch):
        monkeypatch.setenv("SCHEDULER_TEST_INT", "fifteen")
        with pytest.raises(ValueError, match="SCHEDULER_TEST_INT"):
            _safe_int("SCHEDULER_TEST_INT", "15")
