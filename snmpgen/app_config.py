"""Application configuration management using Dynaconf."""

import os
from pathlib import Path
from threading import Lock
from typing import Any

from dynaconf import Dynaconf

from snmpgen.errors import ConfigError

DEFAULT_CONFIG_PATH = "generator.yml"


class AppConfig:
    """Singleton configuration for the generator (logger and module settings)."""

    _instance = None
    _lock = Lock()
    _initialized = False

    def __new__(cls, config_path: str = DEFAULT_CONFIG_PATH) -> "AppConfig":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._initialized = False
            return cls._instance

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH) -> None:
        if self.__class__._initialized and hasattr(self, "settings"):
            return
        self._init_config(config_path)

    def _init_config(self, config_path: str) -> None:
        if self.__class__._initialized:
            return

        # Prefer data/generator.yml when the default name is not in the cwd.
        if config_path == DEFAULT_CONFIG_PATH and not os.path.exists(config_path):
            data_path = Path("data") / DEFAULT_CONFIG_PATH
            if data_path.exists():
                config_path = str(data_path)

        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file {config_path} not found")

        self.config_path = config_path
        settings = Dynaconf(settings_files=[config_path], environments=False)
        try:
            # Dynaconf reads lazily; load now so a broken file fails here.
            settings.as_dict()
        except Exception as e:
            raise ConfigError(f"Failed to load config file {config_path}: {e}") from e
        self.settings = settings
        self.__class__._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton so the next instantiation reads a new file."""
        with cls._lock:
            cls._instance = None
            cls._initialized = False

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key."""
        return self.settings.get(key, default)
