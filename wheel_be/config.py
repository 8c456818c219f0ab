"""
Configuration module with fail-fast validation.

Values come from the environment (a .env file is loaded by the app factory)
and are validated once at import time.
"""
from wheel_be.config_validator import validate_production_config


class Config:
    """Server configuration with fail-fast validation."""

    # Validate configuration and get checked values
    _validated_config = validate_production_config()

    # Flask Debug Mode
    DEBUG = _validated_config['DEBUG']
    TESTING = False

    # CORS Configuration
    CORS_ORIGINS_LIST = _validated_config['CORS_ORIGINS']

    # Table settings
    WHEEL_STARTING_BALANCE = _validated_config['WHEEL_STARTING_BALANCE']
    WHEEL_CHIP_VALUES = _validated_config['WHEEL_CHIP_VALUES']
    WHEEL_MAX_SESSIONS = _validated_config['WHEEL_MAX_SESSIONS']

    # Presentation delays (seconds)
    WHEEL_SPIN_DELAY = _validated_config['WHEEL_SPIN_DELAY']
    WHEEL_CASCADE_DELAY = _validated_config['WHEEL_CASCADE_DELAY']
    WHEEL_SETTLE_DELAY = _validated_config['WHEEL_SETTLE_DELAY']

    # 'socketio' runs delays as SocketIO background tasks, 'manual' only when driven by hand
    WHEEL_SCHEDULER = 'socketio'


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    WHEEL_SCHEDULER = 'manual'
    WHEEL_STARTING_BALANCE = 2000
    WHEEL_MAX_SESSIONS = 50
    WHEEL_SPIN_DELAY = 0
    WHEEL_CASCADE_DELAY = 0
    WHEEL_SETTLE_DELAY = 0
