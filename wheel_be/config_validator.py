"""
Configuration validation and startup checks.

This module implements fail-fast validation of the environment so a
misconfigured wheel server refuses to start instead of running with
surprising table limits or timings.
"""

import os
import sys
import warnings
from typing import List, Tuple, Optional

DEFAULT_STARTING_BALANCE = 2000
DEFAULT_SPIN_DELAY = 4.5
DEFAULT_CASCADE_DELAY = 1.2
DEFAULT_SETTLE_DELAY = 3.0
DEFAULT_CHIP_VALUES = (5, 10, 25)
DEFAULT_MAX_SESSIONS = 1000


class ConfigValidationError(Exception):
    """Raised when critical configuration is missing or invalid."""
    pass


class ConfigValidator:
    """Validates application configuration and enforces production settings."""

    def __init__(self, is_production: bool = None, environ=None):
        """
        Initialize the configuration validator.

        Args:
            is_production: If None, production is assumed only when FLASK_ENV=production
            environ: Mapping to read settings from (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        if is_production is None:
            is_production = self.environ.get('FLASK_ENV', '').lower() == 'production'

        self.is_production = is_production
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _get_int(self, var_name: str, default: int, minimum: int) -> int:
        raw = self.environ.get(var_name)
        if raw is None or raw == '':
            return default
        try:
            value = int(raw)
        except ValueError:
            self.errors.append(f"{var_name} must be an integer (got '{raw}')")
            return default
        if value < minimum:
            self.errors.append(f"{var_name} must be at least {minimum} (got {value})")
            return default
        return value

    def _get_delay(self, var_name: str, default: float) -> float:
        raw = self.environ.get(var_name)
        if raw is None or raw == '':
            return default
        try:
            value = float(raw)
        except ValueError:
            self.errors.append(f"{var_name} must be a number of seconds (got '{raw}')")
            return default
        if value < 0:
            self.errors.append(f"{var_name} cannot be negative (got {value})")
            return default
        return value

    def validate_wheel_config(self) -> dict:
        """Validate table and timing settings."""
        config = {
            'WHEEL_STARTING_BALANCE': self._get_int('WHEEL_STARTING_BALANCE', DEFAULT_STARTING_BALANCE, 0),
            'WHEEL_SPIN_DELAY': self._get_delay('WHEEL_SPIN_DELAY', DEFAULT_SPIN_DELAY),
            'WHEEL_CASCADE_DELAY': self._get_delay('WHEEL_CASCADE_DELAY', DEFAULT_CASCADE_DELAY),
            'WHEEL_SETTLE_DELAY': self._get_delay('WHEEL_SETTLE_DELAY', DEFAULT_SETTLE_DELAY),
            'WHEEL_MAX_SESSIONS': self._get_int('WHEEL_MAX_SESSIONS', DEFAULT_MAX_SESSIONS, 1),
            'WHEEL_CHIP_VALUES': self.validate_chip_values(),
        }

        if config['WHEEL_SPIN_DELAY'] == 0 and self.is_production:
            self.warnings.append("WHEEL_SPIN_DELAY is 0 - rounds will resolve before the wheel animation starts")

        return config

    def validate_chip_values(self) -> Tuple[int, ...]:
        raw = self.environ.get('WHEEL_CHIP_VALUES', '')
        if not raw:
            return DEFAULT_CHIP_VALUES

        chips = []
        for part in raw.split(','):
            part = part.strip()
            if not part:
                continue
            try:
                chip = int(part)
            except ValueError:
                self.errors.append(f"WHEEL_CHIP_VALUES entries must be integers (got '{part}')")
                continue
            if chip <= 0:
                self.errors.append(f"WHEEL_CHIP_VALUES entries must be positive (got {chip})")
                continue
            chips.append(chip)

        if not chips:
            self.errors.append("WHEEL_CHIP_VALUES must list at least one chip value")
            return DEFAULT_CHIP_VALUES
        return tuple(sorted(set(chips)))

    def validate_cors_config(self) -> List[str]:
        """Validate CORS configuration."""
        cors_origins = self.environ.get('CORS_ORIGINS', '')

        if not cors_origins and self.is_production:
            self.errors.append(
                "CRITICAL: CORS_ORIGINS must be set in production to specify allowed frontend domains"
            )
            return []

        if cors_origins:
            origins = [origin.strip() for origin in cors_origins.split(',') if origin.strip()]
            for origin in origins:
                if not origin.startswith(('http://', 'https://')):
                    self.warnings.append(f"CORS origin '{origin}' should include protocol (http:// or https://)")
            return origins

        return []

    def validate_all(self) -> dict:
        """
        Validate all configuration settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If any setting is invalid, or production requirements are missing
        """
        config = {}

        try:
            config.update(self.validate_wheel_config())
            config['CORS_ORIGINS'] = self.validate_cors_config()
            config['DEBUG'] = self.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 't')

            if self.is_production and config['DEBUG']:
                self.errors.append("CRITICAL: DEBUG mode must be disabled in production (set FLASK_DEBUG=False)")

            if self.errors:
                error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
                if self.warnings:
                    error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
                raise ConfigValidationError(error_msg)

            for warning in self.warnings:
                warnings.warn(warning, UserWarning)

            return config

        except Exception as e:
            if isinstance(e, ConfigValidationError):
                raise
            else:
                raise ConfigValidationError(f"Configuration validation error: {str(e)}") from e


def validate_production_config() -> dict:
    """
    Validate configuration with fail-fast behavior.

    Returns:
        Dictionary of validated configuration values

    Raises:
        SystemExit: If validation fails during startup
    """
    try:
        validator = ConfigValidator()
        return validator.validate_all()
    except ConfigValidationError as e:
        print("\nCONFIGURATION VALIDATION FAILED\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nHow to fix:", file=sys.stderr)
        print("1. Check the WHEEL_* environment variables (or your .env file)", file=sys.stderr)
        print("2. Set CORS_ORIGINS and FLASK_DEBUG=False for production", file=sys.stderr)
        print("\nApplication startup ABORTED\n", file=sys.stderr)

        sys.exit(1)
