"""Configuration module for zabbixbridge."""

from zabbixbridge.config.loader import get_config_path, load_config, save_config
from zabbixbridge.config.schema import ClientConfig

__all__ = ["ClientConfig", "load_config", "save_config", "get_config_path"]
