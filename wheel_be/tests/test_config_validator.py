"""
Tests for configuration validation and fail-fast startup.
"""

import pytest

from wheel_be.config_validator import (
    ConfigValidator,
    ConfigValidationError,
    validate_production_config,
    DEFAULT_CHIP_VALUES,
)


class TestConfigValidator:

    def test_defaults(self):
        config = ConfigValidator(is_production=False, environ={}).validate_all()
        assert config['WHEEL_STARTING_BALANCE'] == 2000
        assert config['WHEEL_SPIN_DELAY'] == 4.5
        assert config['WHEEL_CASCADE_DELAY'] == 1.2
        assert config['WHEEL_SETTLE_DELAY'] == 3.0
        assert config['WHEEL_CHIP_VALUES'] == DEFAULT_CHIP_VALUES == (5, 10, 25)
        assert config['WHEEL_MAX_SESSIONS'] == 1000
        assert config['CORS_ORIGINS'] == []
        assert config['DEBUG'] is False

    def test_overrides(self):
        environ = {
            'WHEEL_STARTING_BALANCE': '500',
            'WHEEL_SPIN_DELAY': '0',
            'WHEEL_CASCADE_DELAY': '0.5',
            'WHEEL_SETTLE_DELAY': '1',
            'WHEEL_CHIP_VALUES': '25, 5,5,100',
            'WHEEL_MAX_SESSIONS': '3',
            'CORS_ORIGINS': 'https://wheel.example.com, http://localhost:5173',
            'FLASK_DEBUG': 'true',
        }
        config = ConfigValidator(is_production=False, environ=environ).validate_all()
        assert config['WHEEL_STARTING_BALANCE'] == 500
        assert config['WHEEL_SPIN_DELAY'] == 0
        assert config['WHEEL_CASCADE_DELAY'] == 0.5
        assert config['WHEEL_CHIP_VALUES'] == (5, 25, 100)
        assert config['WHEEL_MAX_SESSIONS'] == 3
        assert config['CORS_ORIGINS'] == ['https://wheel.example.com', 'http://localhost:5173']
        assert config['DEBUG'] is True

    @pytest.mark.parametrize("environ,fragment", [
        ({'WHEEL_STARTING_BALANCE': 'lots'}, 'WHEEL_STARTING_BALANCE must be an integer'),
        ({'WHEEL_STARTING_BALANCE': '-1'}, 'WHEEL_STARTING_BALANCE must be at least 0'),
        ({'WHEEL_MAX_SESSIONS': '0'}, 'WHEEL_MAX_SESSIONS must be at least 1'),
        ({'WHEEL_SPIN_DELAY': 'slow'}, 'WHEEL_SPIN_DELAY must be a number of seconds'),
        ({'WHEEL_SETTLE_DELAY': '-3'}, 'WHEEL_SETTLE_DELAY cannot be negative'),
        ({'WHEEL_CHIP_VALUES': '5,ten'}, 'WHEEL_CHIP_VALUES entries must be integers'),
        ({'WHEEL_CHIP_VALUES': '5,0'}, 'WHEEL_CHIP_VALUES entries must be positive'),
        ({'WHEEL_CHIP_VALUES': ' , '}, 'WHEEL_CHIP_VALUES must list at least one chip value'),
    ])
    def test_invalid_values_fail(self, environ, fragment):
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigValidator(is_production=False, environ=environ).validate_all()
        assert fragment in str(exc_info.value)

    def test_production_requires_cors_origins(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigValidator(is_production=True, environ={}).validate_all()
        assert 'CORS_ORIGINS must be set in production' in str(exc_info.value)

    def test_production_forbids_debug(self):
        environ = {'CORS_ORIGINS': 'https://wheel.example.com', 'FLASK_DEBUG': '1'}
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigValidator(is_production=True, environ=environ).validate_all()
        assert 'DEBUG mode must be disabled in production' in str(exc_info.value)

    def test_production_detected_from_flask_env(self):
        assert ConfigValidator(environ={'FLASK_ENV': 'production'}).is_production is True
        assert ConfigValidator(environ={'FLASK_ENV': 'development'}).is_production is False
        assert ConfigValidator(environ={}).is_production is False

    def test_warnings_are_emitted(self):
        environ = {'CORS_ORIGINS': 'wheel.example.com', 'WHEEL_SPIN_DELAY': '0'}
        with pytest.warns(UserWarning) as record:
            ConfigValidator(is_production=True, environ=environ).validate_all()
        messages = [str(w.message) for w in record]
        assert any('should include protocol' in m for m in messages)
        assert any('WHEEL_SPIN_DELAY is 0' in m for m in messages)


def test_validate_production_config_exits_on_failure(monkeypatch, capsys):
    monkeypatch.setenv('FLASK_ENV', 'production')
    monkeypatch.delenv('CORS_ORIGINS', raising=False)
    monkeypatch.setenv('FLASK_DEBUG', 'False')

    with pytest.raises(SystemExit) as exc_info:
        validate_production_config()
    assert exc_info.value.code == 1
    assert 'CONFIGURATION VALIDATION FAILED' in capsys.readouterr().err


def test_validate_production_config_returns_values(monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'development')
    monkeypatch.setenv('WHEEL_STARTING_BALANCE', '750')
    config = validate_production_config()
    assert config['WHEEL_STARTING_BALANCE'] == 750
