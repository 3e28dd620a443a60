# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/orders.py
# Order variants: market / limit / stop_loss / stop_limit, each with its own fields.

import json
import uuid
from enum import Enum
from typing import NamedTuple, Optional, Union

from .exceptions import InvalidOrderError
from .util import decimal_str


class OrderSide(Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP_LOSS = "stop_loss"
    STOP_LIMIT = "stop_limit"


class OrderState(Enum):
    OPEN = "open"
    PARTIALLY_FILLED = "partially_filled"
    FILLED = "filled"
    CANCELED = "canceled"
    FAILED = "failed"


class TimeInForce(Enum):
    GTC = "gtc"


def _enum_value(enum_cls, value, what):
    if isinstance(value, enum_cls):
        return value.value
    try:
        return enum_cls(str(value).lower()).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidOrderError(f"unknown {what} {value!r} (expected one of: {allowed})") from None


def _num(value, name):
    try:
        return decimal_str(value)
    except ValueError:
        raise InvalidOrderError(f"{name} must be a number, got {value!r}") from None


def _sized(config, asset_quantity, quote_amount, order_type):
    """Non-market orders are sized by exactly one of asset_quantity / quote_amount."""
    if (asset_quantity is None) == (quote_amount is None):
        raise InvalidOrderError(f"{order_type} order needs exactly one of asset_quantity or quote_amount")
    if asset_quantity is not None:
        config["asset_quantity"] = _num(asset_quantity, "asset_quantity")
    else:
        config["quote_amount"] = _num(quote_amount, "quote_amount")
    return config


class MarketOrder(NamedTuple):
    asset_quantity: Union[str, float, int]

    order_type = OrderType.MARKET

    def to_config(self):
        if self.asset_quantity is None:
            raise InvalidOrderError("market order needs asset_quantity")
        return {"asset_quantity": _num(self.asset_quantity, "asset_quantity")}


class LimitOrder(NamedTuple):
    limit_price: Union[str, float, int]
    asset_quantity: Optional[Union[str, float, int]] = None
    quote_amount: Optional[Union[str, float, int]] = None
    time_in_force: Union[TimeInForce, str] = TimeInForce.GTC

    order_type = OrderType.LIMIT

    def to_config(self):
        config = {
            "limit_price": _num(self.limit_price, "limit_price"),
            "time_in_force": _enum_value(TimeInForce, self.time_in_force, "time_in_force"),
        }
        return _sized(config, self.asset_quantity, self.quote_amount, "limit")


class StopLossOrder(NamedTuple):
    stop_price: Union[str, float, int]
    asset_quantity: Optional[Union[str, float, int]] = None
    quote_amount: Optional[Union[str, float, int]] = None
    time_in_force: Union[TimeInForce, str] = TimeInForce.GTC

    order_type = OrderType.STOP_LOSS

    def to_config(self):
        config = {
            "stop_price": _num(self.stop_price, "stop_price"),
            "time_in_force": _enum_value(TimeInForce, self.time_in_force, "time_in_force"),
        }
        return _sized(config, self.asset_quantity, self.quote_amount, "stop_loss")


class StopLimitOrder(NamedTuple):
    limit_price: Union[str, float, int]
    stop_price: Union[str, float, int]
    asset_quantity: Optional[Union[str, float, int]] = None
    quote_amount: Optional[Union[str, float, int]] = None
    time_in_force: Union[TimeInForce, str] = TimeInForce.GTC

    order_type = OrderType.STOP_LIMIT

    def to_config(self):
        config = {
            "limit_price": _num(self.limit_price, "limit_price"),
            "stop_price": _num(self.stop_price, "stop_price"),
            "time_in_force": _enum_value(TimeInForce, self.time_in_force, "time_in_force"),
        }
        return _sized(config, self.asset_quantity, self.quote_amount, "stop_limit")


ORDER_VARIANTS = (MarketOrder, LimitOrder, StopLossOrder, StopLimitOrder)


def build_order_body(symbol, side, order, client_order_id=None) -> str:
    """
    JSON body for POST /orders/.

        build_order_body("BTC-USD", "buy", MarketOrder("0.001"))
        # {"client_order_id": "...", "side": "buy", "symbol": "BTC-USD",
        #  "type": "market", "market_order_config": {"asset_quantity": "0.001"}}
    """
    if not isinstance(order, ORDER_VARIANTS):
        raise InvalidOrderError(f"unsupported order variant: {type(order).__name__}")
    if not symbol:
        raise InvalidOrderError("symbol is required")
    order_type = order.order_type.value
    body = {
        "client_order_id": str(client_order_id or uuid.uuid4()),
        "side": _enum_value(OrderSide, side, "side"),
        "symbol": symbol.upper(),
        "type": order_type,
        f"{order_type}_order_config": order.to_config(),
    }
    return json.dumps(body)
