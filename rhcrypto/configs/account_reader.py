# -*- coding: utf-8 -*-
# rhcrypto/configs/account_reader.py
"""
Account file reader and credential provider.

account.yaml layout:

    accounts:
      robinhood:
        main:
          api_key: "rh-api-..."
          private_key: "<Base64 32-byte Ed25519 seed>"

The file is optional: CredentialProvider falls back to RH_API_KEY /
RH_PRIVATE_KEY (prefix configurable) when the account entry is missing.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from rhcrypto.drivers.robinhood.exceptions import MissingCredentialsError

logger = logging.getLogger(__name__)

EXCHANGE = "robinhood"
DEFAULT_CONFIG_DIR = Path.home() / ".rhcrypto"


class AccountReader:
    """Reads and caches account.yaml from config_dir."""

    def __init__(self, config_dir=None, filename: str = "account.yaml"):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.account_file = self.config_dir / filename
        self._config = None

    def _load_config(self) -> Dict[str, Any]:
        if self._config is not None:
            return self._config
        if not self.account_file.exists():
            logger.debug("account file not found: %s", self.account_file)
            self._config = {}
            return self._config
        try:
            with open(self.account_file, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML parse error in {self.account_file}: {e}") from e
        return self._config

    def get_exchange_accounts(self, exchange: str = EXCHANGE) -> Dict[str, Dict[str, Any]]:
        accounts = self._load_config().get("accounts") or {}
        return accounts.get(exchange) or {}

    def get_account(self, account: str = "main", exchange: str = EXCHANGE) -> Dict[str, Any]:
        return self.get_exchange_accounts(exchange).get(account) or {}

    def list_accounts(self, exchange: str = EXCHANGE) -> List[str]:
        return list(self.get_exchange_accounts(exchange).keys())

    def get_robinhood_credentials(self, account: str = "main") -> Dict[str, str]:
        account_config = self.get_account(account)
        return {
            "api_key": str(account_config.get("api_key") or ""),
            "private_key": str(account_config.get("private_key") or ""),
        }


class CredentialProvider:
    """
    Supplies (api_key, private_key_seed) on demand.

    Lookup order per item: the account entry in account.yaml, then the
    environment variable <env_prefix>API_KEY / <env_prefix>PRIVATE_KEY.
    """

    def __init__(self, account: str = "main", reader: Optional[AccountReader] = None,
                 env_prefix: str = "RH_", environ=None):
        self.account = account
        self.reader = reader if reader is not None else AccountReader()
        self.env_prefix = env_prefix
        self.environ = environ if environ is not None else os.environ

    def get(self) -> Tuple[str, str]:
        credentials = self.reader.get_robinhood_credentials(self.account)
        api_key = credentials["api_key"] or self.environ.get(f"{self.env_prefix}API_KEY", "")
        private_key = credentials["private_key"] or self.environ.get(f"{self.env_prefix}PRIVATE_KEY", "")

        missing = []
        if not api_key:
            missing.append(f"api_key ({self.env_prefix}API_KEY)")
        if not private_key:
            missing.append(f"private_key ({self.env_prefix}PRIVATE_KEY)")
        if missing:
            raise MissingCredentialsError(missing, account=self.account)
        return api_key, private_key
