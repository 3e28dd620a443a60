# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/driver.py
# Robinhood crypto driver: signed REST calls for account, market data, holdings and orders.

import logging
from enum import Enum
from typing import Any, List, Optional, Sequence
from urllib.parse import quote

from rhcrypto.core.kernel.syscalls import TradingSyscalls

from .Config import (
    ACCOUNTS_PATH,
    BEST_BID_ASK_PATH,
    CANCEL_ORDER_PATH,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ESTIMATED_PRICE_PATH,
    HOLDINGS_PATH,
    ORDER_PATH,
    ORDERS_PATH,
    QUOTE_CURRENCY,
    TRADING_PAIRS_PATH,
)
from .exceptions import MissingCredentialsError, RequestError
from .message import UnsignedRequest
from .orders import OrderState, build_order_body
from .rest import RestClient
from .signer import Signer, sign
from .util import build_query_string, path_from_url, to_decimal

logger = logging.getLogger(__name__)

ESTIMATE_SIDES = ("bid", "ask", "both")


def sign_and_send(api_key, private_key_seed, path, method="GET", body="",
                  base_url=DEFAULT_BASE_URL, rest_client=None) -> Any:
    """Create, sign and dispatch one request; returns the decoded JSON answer."""
    request = UnsignedRequest.create(api_key, path, method, body)
    signed = sign(request, private_key_seed)
    return (rest_client or RestClient()).send(signed, base_url)


def init_RobinhoodDriver(account="main", config_dir=None, base_url=None, timeout=None, rest_client=None):
    """
    Build a driver from the config directory (account.yaml + settings.yaml,
    environment variables as fallback for the keys).

    Args:
        account: account name under accounts.robinhood in account.yaml
        config_dir: directory holding the YAML files (default ~/.rhcrypto)
        base_url / timeout: override settings.yaml
    """
    from rhcrypto.configs.account_reader import AccountReader, CredentialProvider
    from rhcrypto.configs.config_reader import ConfigReader

    settings = ConfigReader(config_dir).get_settings()["robinhood"]
    credentials = CredentialProvider(account=account, reader=AccountReader(config_dir))
    return RobinhoodDriver(
        credentials=credentials,
        base_url=base_url or settings["base_url"],
        timeout=timeout if timeout is not None else settings["timeout"],
        rest_client=rest_client,
    )


def _param(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_param(v) for v in value]
    return value


class RobinhoodDriver(TradingSyscalls):
    """
    Robinhood crypto trading driver.
    Symbols are '<ASSET>-USD'; inputs like 'btc', 'BTC/USD', 'btc_usd' are normalized.

    :param api_key / private_key_seed: explicit credentials
    :param credentials: provider with get() -> (api_key, private_key_seed), used when keys are not given
    :param rest_client: injectable RestClient (tests pass one with a fake session)
    """

    def __init__(self, api_key=None, private_key_seed=None, credentials=None,
                 base_url=DEFAULT_BASE_URL, timeout=DEFAULT_TIMEOUT, rest_client=None):
        self.cex = "Robinhood"
        self.quote_ccy = QUOTE_CURRENCY
        if api_key is None or private_key_seed is None:
            if credentials is None:
                missing = [name for name, value in (("api_key", api_key), ("private_key", private_key_seed))
                           if value is None]
                raise MissingCredentialsError(missing)
            api_key, private_key_seed = credentials.get()
        self.api_key = api_key
        self._signer = Signer(private_key_seed)
        self.base_url = base_url
        self.rest = rest_client or RestClient(timeout=timeout)
        logger.info("Robinhood driver ready (%s)", self.base_url)

    # -------------- helpers --------------
    def _norm_symbol(self, symbol):
        """
          _norm_symbol('btc')     -> 'BTC-USD'
          _norm_symbol('eth/usd') -> 'ETH-USD'
          _norm_symbol('SOL_USD') -> 'SOL-USD'
        """
        s = str(symbol or "").strip().upper().replace("/", "-").replace("_", "-")
        if not s:
            raise ValueError("symbol is required")
        if "-" not in s:
            s = f"{s}-{self.quote_ccy}"
        return s

    def _norm_symbols(self, symbols):
        return [self._norm_symbol(s) for s in symbols] or None

    def sign_and_send(self, path, method="GET", body="") -> Any:
        request = UnsignedRequest.create(self.api_key, path, method, body)
        return self.rest.send(self._signer.sign(request), self.base_url)

    def _get(self, path, params=None):
        return self.sign_and_send(path + build_query_string(params or {}))

    def _get_all(self, path, params=None) -> List[Any]:
        """Follow 'next' links and return every page's results."""
        results = []
        next_path = path + build_query_string(params or {})
        pages = 0
        while next_path:
            page = self.sign_and_send(next_path) or {}
            pages += 1
            results.extend(page.get("results") or [])
            next_url = page.get("next")
            next_path = path_from_url(next_url) if next_url else None
        logger.debug("GET %s: %d results in %d page(s)", path, len(results), pages)
        return results

    # -------------- account --------------
    def get_account(self):
        return self._get(ACCOUNTS_PATH)

    def fetch_balance(self):
        return to_decimal(self.get_account()["buying_power"])

    # -------------- market data --------------
    def get_trading_pairs(self, *symbols):
        return self._get_all(TRADING_PAIRS_PATH, {"symbol": self._norm_symbols(symbols)})

    def symbols(self):
        return [pair["symbol"] for pair in self.get_trading_pairs()]

    def get_best_bid_ask(self, *symbols):
        return self._get_all(BEST_BID_ASK_PATH, {"symbol": self._norm_symbols(symbols)})

    def get_price_now(self, symbol):
        symbol = self._norm_symbol(symbol)
        quotes = self.get_best_bid_ask(symbol)
        if not quotes:
            raise RequestError(f"no quote returned for {symbol}")
        return to_decimal(quotes[0]["price"])

    def get_estimated_price(self, symbol, side, quantities):
        side = str(_param(side)).lower()
        if side not in ESTIMATE_SIDES:
            raise ValueError(f"side must be one of {ESTIMATE_SIDES}, got {side!r}")
        if not isinstance(quantities, (list, tuple)):
            quantities = [quantities]
        params = {
            "symbol": self._norm_symbol(symbol),
            "side": side,
            "quantity": ",".join(str(q) for q in quantities),
        }
        return self._get_all(ESTIMATED_PRICE_PATH, params)

    # -------------- holdings --------------
    def get_holdings(self, *asset_codes):
        codes = [str(code).strip().upper() for code in asset_codes] or None
        return self._get_all(HOLDINGS_PATH, {"asset_code": codes})

    def get_position(self, asset_code=None):
        if asset_code is None:
            return self.get_holdings()
        holdings = self.get_holdings(asset_code)
        return holdings[0] if holdings else None

    # -------------- orders --------------
    def get_orders(self, **filters):
        """
        All orders matching the filters, across pages. Supported filters:
        created_at_start, created_at_end, symbol, id, side, state, type,
        updated_at_start, updated_at_end, limit.
        """
        params = {key: _param(value) for key, value in filters.items() if value is not None}
        return self._get_all(ORDERS_PATH, params)

    def get_order(self, order_id):
        return self._get(ORDER_PATH.format(id=quote(str(order_id), safe="")))

    def get_order_status(self, order_id):
        return self.get_order(order_id)

    def get_open_orders(self, symbol=None):
        return self.get_orders(symbol=self._norm_symbol(symbol) if symbol else None, state=OrderState.OPEN)

    def place_order(self, symbol, side, order, client_order_id=None):
        symbol = self._norm_symbol(symbol)
        body = build_order_body(symbol, side, order, client_order_id=client_order_id)
        result = self.sign_and_send(ORDERS_PATH, "POST", body)
        logger.info("placed %s %s order on %s: %s", _param(side), order.order_type.value, symbol,
                    result.get("id") if isinstance(result, dict) else result)
        return result

    def cancel_order(self, order_id):
        path = CANCEL_ORDER_PATH.format(id=quote(str(order_id), safe=""))
        result = self.sign_and_send(path, "POST", "{}")
        logger.info("cancel requested for order %s", order_id)
        return result

    def revoke_order(self, order_id):
        return self.cancel_order(order_id)

    # -------------- derived --------------
    def compute_cost_basis(self, asset_codes: Optional[Sequence[str]] = None):
        from rhcrypto.core.runtime.CostBasisEngine import CostBasisEngine

        return CostBasisEngine(self, quote_currency=self.quote_ccy).run(asset_codes)
