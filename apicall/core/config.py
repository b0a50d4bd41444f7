import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

ENV_PREFIX = "APICALL_"

class Config:
    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_environment_variables()
        if config_path:
            self.load(config_path)
        self.validate(self._config)

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self._config = {
            "app": {
                "name": "apicall",
                "version": "1.0.0"
            },
            "transport": {
                "timeout": 30.0,
                "verify_ssl": True,
                "user_agent": "apicall/1.0",
                "ca_file": None
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "console_output": False,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def load(self, path: Path) -> None:
        """Load configuration from a JSON or YAML file"""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix in (".yaml", ".yml"):
                    file_config = yaml.safe_load(f) or {}
                else:
                    file_config = json.load(f)
                self.update(file_config)
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {str(e)}")

    def save(self, path: Path) -> None:
        """Save configuration to JSON or YAML file"""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            if path.suffix in (".yaml", ".yml"):
                yaml.safe_dump(self._config, f)
            else:
                json.dump(self._config, f, indent=2)

    def _load_environment_variables(self) -> None:
        """Load configuration from environment variables"""
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                # APICALL_TRANSPORT_VERIFY_SSL -> transport.verify_ssl
                parts = key[len(ENV_PREFIX):].lower().split('_')
                if len(parts) < 2:
                    continue

                config_key = f"{parts[0]}.{'_'.join(parts[1:])}"
                self.set(config_key, self._convert_value(value))

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key"""
        try:
            value = self._config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot notation key"""
        keys = key.split('.')
        d = self._config
        for k in keys[:-1]:
            if k not in d:
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration with dictionary"""
        def update_recursive(d1, d2):
            for k, v in d2.items():
                if isinstance(v, dict):
                    if not isinstance(d1.get(k), dict):
                        d1[k] = {}
                    update_recursive(d1[k], v)
                else:
                    d1[k] = v
            return d1

        update_recursive(self._config, config_dict)

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if "transport" in config:
            transport_config = config["transport"]
            timeout = transport_config.get("timeout")
            if timeout is not None:
                if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                    raise ConfigError("transport.timeout must be a number")
                if timeout <= 0:
                    raise ConfigError("transport.timeout must be positive")
            if "verify_ssl" in transport_config and not isinstance(transport_config["verify_ssl"], bool):
                raise ConfigError("transport.verify_ssl must be a boolean")
        if "logging" in config:
            level = config["logging"].get("level")
            if level is not None and not isinstance(level, str):
                raise ConfigError("logging.level must be a string")

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Convert string value to appropriate type"""
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False
        if value.lower() in ("none", "null"):
            return None

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
