"""Exceptions for simpleconfigs."""


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFormatError(ConfigError):
    """Malformed configuration text or a value that cannot be coerced."""

    pass


class ConfigUsageError(ConfigError, ValueError):
    """Invalid argument passed to the configuration API."""

    pass


class ConfigFileError(ConfigError):
    """Error reading or writing configuration file."""

    pass
