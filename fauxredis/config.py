"""
FauxRedis Configuration Module

Provides configuration management for the FauxRedis store.
"""

from fauxredis.utils import compile_pattern, LOG_LEVELS


# Default configuration values
DEFAULT_CONFIG = {
    # Limits
    'maxkeys': 0,  # Maximum number of keys (0 = no limit)

    # Key enumeration
    'sort_keys': True,  # Return KEYS results sorted for reproducible output

    # Logging
    'loglevel': 'notice',  # debug, verbose, notice, warning
}


class Config:
    """
    Configuration manager for FauxRedis.

    Provides get/set access to configuration values with validation.
    Unknown keys are ignored on construction and rejected by set().
    """

    __slots__ = ('_config',)

    def __init__(self, initial_config=None):
        """
        Initialize configuration with defaults.

        Args:
            initial_config: dict - Optional initial configuration to merge with defaults
        """
        self._config = dict(DEFAULT_CONFIG)
        if initial_config:
            for key, value in initial_config.items():
                if key in DEFAULT_CONFIG:
                    self._validate(key, value)
                    self._config[key] = value

    @staticmethod
    def _validate(key, value):
        if key == 'maxkeys':
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f'maxkeys must be a non-negative integer, got {value!r}')
        elif key == 'loglevel':
            if value not in LOG_LEVELS:
                raise ValueError(f'unknown loglevel {value!r}')

    def get(self, key, default=None):
        """
        Get configuration value.

        Args:
            key: str - Configuration key
            default: Any - Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def set(self, key, value):
        """
        Set configuration value.

        Args:
            key: str - Configuration key
            value: Any - Value to set

        Returns:
            bool: True if key exists and was set, False if unknown key

        Raises:
            ValueError: If the value is invalid for the key
        """
        if key in DEFAULT_CONFIG:
            self._validate(key, value)
            self._config[key] = value
            return True
        return False

    def get_all(self):
        """
        Get all configuration values.

        Returns:
            dict: Copy of all configuration values
        """
        return dict(self._config)

    def get_matching(self, pattern):
        """
        Get configuration values matching glob pattern.

        Args:
            pattern: str - Glob pattern

        Returns:
            dict: Matching configuration key-value pairs
        """
        matches = compile_pattern(pattern)
        return {key: value for key, value in self._config.items() if matches(key)}


# Global configuration instance
_global_config = None


def get_config():
    """
    Get global configuration instance.

    Returns:
        Config: Global configuration instance
    """
    global _global_config
    if _global_config is None:
        _global_config = Config()
    return _global_config


def init_config(config_dict=None):
    """
    Initialize global configuration.

    Args:
        config_dict: dict - Optional initial configuration

    Returns:
        Config: Initialized configuration instance
    """
    global _global_config
    _global_config = Config(config_dict)
    return _global_config
