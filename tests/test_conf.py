"""
Tests for recurpipe settings.
"""

import pytest

from recurpipe.conf import Settings, SettingValidationError, apply_settings, check_settings, settings


@apply_settings
def settings_of(settings=None):
    return settings


class TestSettings:
    """Tests for default and replaced settings."""

    def test_defaults(self):
        """Test the default settings."""
        assert settings.as_dict() == {"WEEK_START": "MO", "CALENDAR": "gregorian", "INCLUDE_START": False}
        assert settings._default

    def test_replace(self):
        """Test replacing a setting without touching the defaults."""
        replaced = settings.replace(WEEK_START="SU")
        assert replaced.WEEK_START == "SU"
        assert replaced.CALENDAR == "gregorian"
        assert not replaced._default
        assert settings.WEEK_START == "MO"

    def test_replace_with_dict(self):
        """Test replacing settings from a dict."""
        replaced = settings.replace(mod_settings={"INCLUDE_START": True})
        assert replaced.INCLUDE_START is True

    def test_replace_with_none(self):
        """Test rejecting None as a setting value."""
        with pytest.raises(TypeError):
            settings.replace(WEEK_START=None)

    def test_repr(self):
        """Test the settings representation."""
        assert repr(Settings({"WEEK_START": "TU"})) == "Settings({'WEEK_START': 'TU'})"


class TestCheckSettings:
    """Tests for setting validation."""

    @pytest.mark.parametrize("mod_settings", [
        {"UNKNOWN": 1},
        {"WEEK_START": 1},
        {"WEEK_START": "XX"},
        {"CALENDAR": "julian"},
        {"INCLUDE_START": "yes"},
    ])
    def test_invalid(self, mod_settings):
        """Test rejecting unknown keys, wrong types and wrong values."""
        with pytest.raises(SettingValidationError):
            settings.replace(mod_settings=mod_settings)

    def test_is_a_value_error(self):
        """Test that setting errors are value errors."""
        with pytest.raises(ValueError):
            check_settings(Settings({"WEEK_START": "XX"}))

    def test_valid(self):
        """Test accepting a complete set of valid settings."""
        check_settings(Settings({"WEEK_START": "SA", "CALENDAR": "gregorian", "INCLUDE_START": True}))


class TestApplySettings:
    """Tests for the apply_settings decorator."""

    def test_default(self):
        """Test that no settings mean the default settings."""
        assert settings_of() is settings

    def test_dict(self):
        """Test that a dict is turned into settings."""
        result = settings_of(settings={"WEEK_START": "FR"})
        assert isinstance(result, Settings)
        assert result.WEEK_START == "FR"

    def test_instance(self):
        """Test that a settings instance is passed through."""
        custom = settings.replace(WEEK_START="WE")
        assert settings_of(settings=custom) is custom

    def test_invalid_type(self):
        """Test rejecting settings of another type."""
        with pytest.raises(TypeError):
            settings_of(settings=5)
