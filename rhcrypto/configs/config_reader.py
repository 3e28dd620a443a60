# -*- coding: utf-8 -*-
# rhcrypto/configs/config_reader.py
"""
Runtime settings reader.

settings.yaml (optional, next to account.yaml):

    robinhood:
      base_url: https://trading.robinhood.com
      timeout: 10
    logging:
      dir: ~/.rhcrypto/logs
      level: INFO
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from rhcrypto.configs.account_reader import DEFAULT_CONFIG_DIR
from rhcrypto.drivers.robinhood.Config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

DEFAULT_SETTINGS = {
    "robinhood": {
        "base_url": DEFAULT_BASE_URL,
        "timeout": DEFAULT_TIMEOUT,
    },
    "logging": {
        "dir": None,
        "level": "INFO",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigReader:
    """Loads YAML files from config_dir and caches them by file name."""

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._configs = {}
        self._logger = logging.getLogger(__name__)

    def load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: file does not exist
            ValueError: file is not valid YAML
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            raise FileNotFoundError(f"config file not found: {file_path}")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self._logger.error("YAML parse error %s: %s", filename, e)
            raise ValueError(f"YAML parse error in {file_path}: {e}") from e
        self._configs[filename] = config
        self._logger.debug("loaded config file %s", file_path)
        return config

    def get_settings(self, filename: str = "settings.yaml") -> Dict[str, Any]:
        """Defaults overlaid with settings.yaml when present."""
        if filename not in self._configs:
            try:
                self.load_yaml(filename)
            except FileNotFoundError:
                self._configs[filename] = {}
        return _merge(DEFAULT_SETTINGS, self._configs[filename])
