import pytest
import json
import os
from pathlib import Path

import yaml

from apicall.core.config import Config, ConfigError

@pytest.fixture
def sample_config():
    """Fixture providing a sample configuration"""
    return {
        "app": {
            "name": "apicall",
            "version": "1.0.0"
        },
        "transport": {
            "timeout": 10.0,
            "verify_ssl": True,
            "user_agent": "sample/1.0",
            "ca_file": None
        },
        "logging": {
            "level": "DEBUG",
            "file": None,
            "console_output": False
        }
    }

@pytest.fixture
def config_file(tmp_path, sample_config):
    """Fixture creating a temporary config file"""
    config_path = tmp_path / "test_config.json"
    with open(config_path, "w") as f:
        json.dump(sample_config, f)
    return config_path

def test_config_loading(config_file):
    """Test basic configuration loading from file"""
    config = Config(config_file)
    assert config.get("app.name") == "apicall"
    assert config.get("transport.timeout") == 10.0
    assert config.get("transport.user_agent") == "sample/1.0"
    assert config.get("logging.level") == "DEBUG"

def test_yaml_config_loading(tmp_path, sample_config):
    """Test configuration loading from a YAML file"""
    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.safe_dump(sample_config, f)

    config = Config(config_path)
    assert config.get("transport.user_agent") == "sample/1.0"

def test_environment_variables():
    """Test environment variable overrides"""
    os.environ["APICALL_TRANSPORT_TIMEOUT"] = "12.5"
    os.environ["APICALL_TRANSPORT_VERIFY_SSL"] = "false"
    os.environ["APICALL_LOGGING_LEVEL"] = "DEBUG"

    config = Config()

    assert config.get("transport.timeout") == 12.5
    assert config.get("transport.verify_ssl") is False
    assert config.get("logging.level") == "DEBUG"

def test_config_validation():
    """Test configuration validation rules"""
    with pytest.raises(ConfigError):
        Config().validate({"transport": {"timeout": 0}})

    with pytest.raises(ConfigError):
        Config().validate({"transport": {"timeout": "fast"}})

    with pytest.raises(ConfigError):
        Config().validate({"transport": {"verify_ssl": "yes"}})

    with pytest.raises(ConfigError):
        Config().validate({"logging": {"level": 10}})

def test_invalid_environment_value():
    os.environ["APICALL_TRANSPORT_TIMEOUT"] = "-1"
    with pytest.raises(ConfigError):
        Config()

def test_config_defaults():
    """Test default configuration values"""
    config = Config()
    assert config.get("transport.timeout") == 30.0
    assert config.get("transport.verify_ssl") is True
    assert config.get("transport.ca_file") is None
    assert config.get("logging.level") == "INFO"
    assert config.get("nonexistent.key", default="default") == "default"

def test_config_update():
    """Test configuration updates"""
    config = Config()
    config.update({"transport": {"timeout": 60}})
    assert config.get("transport.timeout") == 60
    assert config.get("transport.verify_ssl") is True

def test_nested_config_access():
    """Test accessing nested configuration values"""
    config = Config()
    config.set("deep.nested.value", 42)
    assert config.get("deep.nested.value") == 42
    assert config.get("deep.nested.value.missing") is None

def test_config_type_conversion():
    """Test configuration value type conversion"""
    os.environ["APICALL_TRANSPORT_VERIFY_SSL"] = "true"
    os.environ["APICALL_TRANSPORT_TIMEOUT"] = "15"
    os.environ["APICALL_TRANSPORT_CA_FILE"] = "none"

    config = Config()
    assert isinstance(config.get("transport.verify_ssl"), bool)
    assert isinstance(config.get("transport.timeout"), int)
    assert config.get("transport.ca_file") is None

def test_invalid_config_file():
    """Test handling of invalid configuration file"""
    with pytest.raises(ConfigError):
        Config(Path("nonexistent_config.json"))

def test_config_serialization(sample_config, tmp_path):
    """Test configuration serialization and deserialization"""
    config = Config()
    config.update(sample_config)

    save_path = tmp_path / "saved_config.json"
    config.save(save_path)

    loaded_config = Config(save_path)
    assert loaded_config.get("app.name") == config.get("app.name")
    assert loaded_config.get("transport.timeout") == config.get("transport.timeout")
