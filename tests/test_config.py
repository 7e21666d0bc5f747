"""Test configuration loading and validation."""

import pytest

from iamsafe.core.config import Settings, _validate_required, settings
from iamsafe.core.infrastructure_config import Environment, _get_environment
from iamsafe.i18n.messages import DEFAULT_LANG, MESSAGES, STATUS_LABELS, resolve_language


class TestEnvironment:
    def test_environment_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert _get_environment() == Environment.PRODUCTION

    def test_environment_required(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        with pytest.raises(RuntimeError, match="ENVIRONMENT is required"):
            _get_environment()

    def test_environment_invalid(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")
        with pytest.raises(RuntimeError, match="Invalid ENVIRONMENT"):
            _get_environment()


class TestSettings:
    def test_defaults(self):
        assert settings.ENVIRONMENT == Environment.TEST
        assert settings.PAGE_SIZE == 20
        assert settings.DEFAULT_LANG == DEFAULT_LANG
        assert settings.EVENT_NAME

    def test_validation_skipped_in_tests(self):
        s = Settings()
        s.ADMIN_TOKEN = None
        _validate_required(s)

    def test_missing_secrets_rejected_outside_tests(self):
        s = Settings()
        s.ENVIRONMENT = Environment.DEVELOPMENT
        s.ADMIN_TOKEN = None
        s.SECRET_KEY = None
        with pytest.raises(RuntimeError) as exc_info:
            _validate_required(s)
        assert "ADMIN_TOKEN" in str(exc_info.value)
        assert "SECRET_KEY" in str(exc_info.value)

    def test_complete_settings_accepted(self):
        s = Settings()
        s.ENVIRONMENT = Environment.PRODUCTION
        s.ADMIN_TOKEN = "token"
        s.SECRET_KEY = "secret"
        _validate_required(s)


class TestMessages:
    def test_languages_share_keys(self):
        keys = {code: set(table) for code, table in MESSAGES.items()}
        reference = keys[DEFAULT_LANG]
        for code, table_keys in keys.items():
            assert table_keys == reference, code

    def test_status_labels_exist(self):
        for table in MESSAGES.values():
            for key in STATUS_LABELS.values():
                assert table[key]

    def test_resolve_language(self):
        assert resolve_language("en") == "en"
        assert resolve_language("cht") == "cht"
        assert resolve_language(None) == DEFAULT_LANG
        assert resolve_language("xx") == DEFAULT_LANG
        assert resolve_language("xx", "en") == "en"
        assert resolve_language("xx", "zz") == DEFAULT_LANG
