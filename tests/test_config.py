"""Unit tests for FormConfig."""

import logging

import pytest
from pydantic import ValidationError

from signupform.config import FormConfig, configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SIGNUPFORM_ACCEPTANCE_DELAY_SECONDS",
        "SIGNUPFORM_ACCEPTANCE_TIMEOUT_SECONDS",
        "SIGNUPFORM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestFormConfig:
    """Test defaults, parsing and rejection of bad values."""

    def test_defaults(self):
        config = FormConfig()
        assert config.acceptance_delay_seconds == 1.0
        assert config.acceptance_timeout_seconds == 10.0
        assert config.log_level == "INFO"

    def test_from_dict(self):
        config = FormConfig.from_dict({
            "acceptanceDelaySeconds": "0.25",
            "acceptanceTimeoutSeconds": 3,
            "logLevel": "debug",
        })
        assert config.acceptance_delay_seconds == 0.25
        assert config.acceptance_timeout_seconds == 3.0
        assert config.log_level == "DEBUG"

    def test_from_dict_missing_keys_keep_defaults(self):
        assert FormConfig.from_dict({}) == FormConfig()

    @pytest.mark.parametrize("value", [None, "none", "None", ""])
    def test_none_timeout_disables_deadline(self, value):
        assert FormConfig(acceptance_timeout_seconds=value).acceptance_timeout_seconds is None

    def test_to_dict_round_trip(self):
        config = FormConfig(acceptance_delay_seconds=0.5, acceptance_timeout_seconds=None)
        assert config.to_dict() == {
            "acceptanceDelaySeconds": 0.5,
            "acceptanceTimeoutSeconds": None,
            "logLevel": "INFO",
        }
        assert FormConfig.from_dict(config.to_dict()) == config

    def test_is_frozen(self):
        config = FormConfig()
        with pytest.raises(ValidationError):
            config.log_level = "DEBUG"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("SIGNUPFORM_ACCEPTANCE_DELAY_SECONDS", "0")
        monkeypatch.setenv("SIGNUPFORM_ACCEPTANCE_TIMEOUT_SECONDS", "none")
        monkeypatch.setenv("SIGNUPFORM_LOG_LEVEL", "warning")
        config = FormConfig()
        assert config.acceptance_delay_seconds == 0.0
        assert config.acceptance_timeout_seconds is None
        assert config.log_level == "WARNING"

    def test_constructor_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("SIGNUPFORM_ACCEPTANCE_TIMEOUT_SECONDS", "5")
        assert FormConfig(acceptance_timeout_seconds=2).acceptance_timeout_seconds == 2.0

    def test_zero_timeout_from_environment_rejected(self, monkeypatch):
        """A zero deadline would cancel every acceptance call."""
        monkeypatch.setenv("SIGNUPFORM_ACCEPTANCE_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            FormConfig()

    @pytest.mark.parametrize(
        "data",
        [
            {"acceptanceDelaySeconds": -1},
            {"acceptanceDelaySeconds": "soon"},
            {"acceptanceDelaySeconds": None},
            {"acceptanceTimeoutSeconds": 0},
            {"acceptanceTimeoutSeconds": -0.5},
            {"logLevel": "LOUD"},
        ],
    )
    def test_invalid_values_rejected(self, data):
        with pytest.raises(ValueError):
            FormConfig.from_dict(data)


def test_configure_logging_applies_config_level():
    configure_logging(FormConfig(log_level="DEBUG"))
    assert logging.getLogger("signupform").level == logging.DEBUG
    configure_logging(FormConfig())
    assert logging.getLogger("signupform").level == logging.INFO
