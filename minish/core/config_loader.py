"""
minish Configuration Loader

Configuration management for the interpreter:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Restoring the defaults

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from minish.exceptions import ConfigError
from minish.logger import LogLevel


@dataclass
class ShellConfig:
    """Session settings."""
    program_name: str = "minish"


@dataclass
class PromptConfig:
    """Prompt rendering settings."""
    max_path_length: int = 256
    cwd_failed_placeholder: str = "!Failed to get CWD!"
    path_too_long_placeholder: str = "!Path too long to be shown!"


@dataclass
class ExpansionConfig:
    """Word expansion settings."""
    undefined_is_error: bool = True
    enable_glob: bool = True
    enable_tilde: bool = True


@dataclass
class LauncherConfig:
    """Process launcher settings."""
    exec_failure_status: int = 127


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = False


@dataclass
class Config:
    """
    Main configuration container.

    Holds every section of the interpreter's settings.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    expansion: ExpansionConfig = field(default_factory=ExpansionConfig)
    launcher: LauncherConfig = field(default_factory=LauncherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('minish.json')
        >>> print(config.shell.program_name)
        minish
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
            return cls._instance

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be read, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            )
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=config_path
            )

        if not isinstance(data, dict):
            raise ConfigError(
                "Configuration root must be an object",
                path=config_path
            )

        config = self._parse_config(data)
        self._validate(config)

        self._config = config
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        for section, value in data.items():
            if not isinstance(value, dict):
                raise ConfigError(f"Configuration section '{section}' must be an object")

        if 'shell' in data:
            shell_data = data['shell']
            config.shell = ShellConfig(
                program_name=shell_data.get('program_name', config.shell.program_name),
            )

        if 'prompt' in data:
            prompt_data = data['prompt']
            config.prompt = PromptConfig(
                max_path_length=prompt_data.get('max_path_length', config.prompt.max_path_length),
                cwd_failed_placeholder=prompt_data.get(
                    'cwd_failed_placeholder', config.prompt.cwd_failed_placeholder),
                path_too_long_placeholder=prompt_data.get(
                    'path_too_long_placeholder', config.prompt.path_too_long_placeholder),
            )

        if 'expansion' in data:
            exp_data = data['expansion']
            config.expansion = ExpansionConfig(
                undefined_is_error=exp_data.get('undefined_is_error', config.expansion.undefined_is_error),
                enable_glob=exp_data.get('enable_glob', config.expansion.enable_glob),
                enable_tilde=exp_data.get('enable_tilde', config.expansion.enable_tilde),
            )

        if 'launcher' in data:
            launcher_data = data['launcher']
            config.launcher = LauncherConfig(
                exec_failure_status=launcher_data.get(
                    'exec_failure_status', config.launcher.exec_failure_status),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
            )

        return config

    def _validate(self, config: Config) -> None:
        """Reject values the interpreter cannot run with."""
        if not config.shell.program_name:
            raise ConfigError("shell.program_name must not be empty")

        length = config.prompt.max_path_length
        if not isinstance(length, int) or length <= 0:
            raise ConfigError(f"prompt.max_path_length must be a positive integer: {length!r}")

        status = config.launcher.exec_failure_status
        if not isinstance(status, int) or not 1 <= status <= 255:
            raise ConfigError(f"launcher.exec_failure_status must be in 1..255: {status!r}")

        flags = {
            'expansion.undefined_is_error': config.expansion.undefined_is_error,
            'expansion.enable_glob': config.expansion.enable_glob,
            'expansion.enable_tilde': config.expansion.enable_tilde,
            'logging.console_output': config.logging.console_output,
        }
        for key, value in flags.items():
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false: {value!r}")

        try:
            LogLevel.from_name(config.logging.level)
        except ValueError as e:
            raise ConfigError(str(e))

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    def reset(self) -> None:
        """Restore the built-in defaults."""
        self._config = Config()
        self._loaded = False


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
