# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/Config.py
# Wire constants for the Robinhood crypto trading API.

DEFAULT_BASE_URL = "https://trading.robinhood.com"
DEFAULT_TIMEOUT = 10

API_PREFIX = "/api/v1/crypto/"

# ---- trading ----
ACCOUNTS_PATH = API_PREFIX + "trading/accounts/"
TRADING_PAIRS_PATH = API_PREFIX + "trading/trading_pairs/"
HOLDINGS_PATH = API_PREFIX + "trading/holdings/"
ORDERS_PATH = API_PREFIX + "trading/orders/"
ORDER_PATH = API_PREFIX + "trading/orders/{id}/"
CANCEL_ORDER_PATH = API_PREFIX + "trading/orders/{id}/cancel/"

# ---- market data ----
BEST_BID_ASK_PATH = API_PREFIX + "marketdata/best_bid_ask/"
ESTIMATED_PRICE_PATH = API_PREFIX + "marketdata/estimated_price/"

# ---- headers ----
API_KEY_HEADER = "x-api-key"
TIMESTAMP_HEADER = "x-timestamp"
SIGNATURE_HEADER = "x-signature"
CONTENT_TYPE = "application/json; charset=utf-8"

QUOTE_CURRENCY = "USD"
