"""
pysh Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Default value handling
- Runtime configuration updates
- Type-safe access to configuration values

Author: YSNRFD
Version: 1.0.0
"""

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pysh.exceptions import ConfigError, ConfigValidationError


# Environment variable naming an alternate configuration file
CONFIG_ENV_VAR = "PYSH_CONFIG"

DEFAULT_CONFIG_PATH = "~/.pysh.json"


@dataclass
class ShellConfig:
    """Shell configuration settings."""
    prompt: str = "$ "
    history_file: Optional[str] = None
    history_size: int = 1000
    enable_autocomplete: bool = True


@dataclass
class CompletionConfig:
    """Tab-completion configuration settings."""
    double_press_window_ms: int = 500
    refresh_on_start: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the shell.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    completion: CompletionConfig = field(default_factory=CompletionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files and providing
    runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('pysh.json')
        >>> print(config.shell.prompt)
        $
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
                cls._instance._path = None
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be loaded or parsed
        """
        path = Path(config_path).expanduser()

        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=str(path)
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=str(path)
            )
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=str(path)
            )

        if not isinstance(data, dict):
            raise ConfigError(
                "Configuration root must be a JSON object",
                path=str(path)
            )

        self._config = self._parse_config(data)
        self._loaded = True
        self._path = str(path)
        return self._config

    def load_default(self) -> Config:
        """
        Load the configuration named by $PYSH_CONFIG, or ~/.pysh.json.

        A missing default file is not an error; the built-in defaults
        are used instead. A file named by $PYSH_CONFIG must exist.
        """
        explicit = os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            return self.load(explicit)

        default_path = Path(DEFAULT_CONFIG_PATH).expanduser()
        if default_path.exists():
            return self.load(str(default_path))

        return self.config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        # Parse shell config
        if 'shell' in data:
            shell_data = self._section(data, 'shell')
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                history_file=shell_data.get('history_file', config.shell.history_file),
                history_size=shell_data.get('history_size', config.shell.history_size),
                enable_autocomplete=shell_data.get('enable_autocomplete', config.shell.enable_autocomplete),
            )

        # Parse completion config
        if 'completion' in data:
            comp_data = self._section(data, 'completion')
            config.completion = CompletionConfig(
                double_press_window_ms=comp_data.get(
                    'double_press_window_ms', config.completion.double_press_window_ms
                ),
                refresh_on_start=comp_data.get('refresh_on_start', config.completion.refresh_on_start),
            )

        # Parse logging config
        if 'logging' in data:
            log_data = self._section(data, 'logging')
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
            )

        self._validate(config)
        return config

    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        section = data[name]
        if not isinstance(section, dict):
            raise ConfigValidationError(
                f"Section '{name}' must be a JSON object, got {type(section).__name__}",
                key=name
            )
        return section

    @staticmethod
    def _validate(config: Config) -> None:
        """Reject values the shell cannot work with."""
        counts = {
            'shell.history_size': config.shell.history_size,
            'completion.double_press_window_ms': config.completion.double_press_window_ms,
        }
        for key, value in counts.items():
            # bool is an int subclass; true/false are not counts
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigValidationError(
                    f"{key} must be a non-negative integer, got {value!r}",
                    key=key
                )

        strings = {
            'shell.prompt': config.shell.prompt,
            'logging.level': config.logging.level,
        }
        for key, value in strings.items():
            if not isinstance(value, str):
                raise ConfigValidationError(f"{key} must be a string, got {value!r}", key=key)

        paths = {
            'shell.history_file': config.shell.history_file,
            'logging.log_file': config.logging.log_file,
        }
        for key, value in paths.items():
            if value is not None and not isinstance(value, str):
                raise ConfigValidationError(f"{key} must be a path or null, got {value!r}", key=key)

        flags = {
            'shell.enable_autocomplete': config.shell.enable_autocomplete,
            'completion.refresh_on_start': config.completion.refresh_on_start,
            'logging.console_output': config.logging.console_output,
        }
        for key, value in flags.items():
            if not isinstance(value, bool):
                raise ConfigValidationError(f"{key} must be true or false, got {value!r}", key=key)

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    @property
    def path(self) -> Optional[str]:
        """Path of the loaded configuration file, if any."""
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'shell.prompt')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'shell.prompt')
            value: Value to set

        Note:
            This modifies configuration at runtime but does not
            persist changes to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if hasattr(obj, final_key):
            setattr(obj, final_key, value)
            self._loaded = True
        else:
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

    def reset(self) -> None:
        """Discard loaded settings and return to the defaults."""
        self._config = Config()
        self._loaded = False
        self._path = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
