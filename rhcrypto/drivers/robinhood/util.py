# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/util.py

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Mapping
from urllib.parse import quote, urlsplit


def _encode(value) -> str:
    if isinstance(value, bool):
        value = str(value).lower()
    return quote(str(value), safe="")


def build_query_string(params: Mapping[str, Any]) -> str:
    """
    Build '?k=v&k=v' from a mapping, keeping insertion order.

    Lists and tuples expand into one pair per item (order kept); strings never
    expand. None values are dropped. Empty result -> "".

        build_query_string({"symbol": ["BTC-USD", "ETH-USD"]})
        # '?symbol=BTC-USD&symbol=ETH-USD'
    """
    if not params:
        return ""
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                pairs.append(f"{_encode(key)}={_encode(item)}")
        else:
            pairs.append(f"{_encode(key)}={_encode(value)}")
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def path_from_url(url: str) -> str:
    """'https://host/api/v1/x/?cursor=abc' -> '/api/v1/x/?cursor=abc'"""
    parts = urlsplit(url)
    if parts.query:
        return f"{parts.path}?{parts.query}"
    return parts.path


def to_decimal(value, default=None) -> Decimal:
    if value is None or value == "":
        if default is None:
            raise ValueError("empty decimal value")
        return Decimal(default)
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"not a decimal: {value!r}") from e


def round_decimal(value: Decimal, places: int) -> Decimal:
    """round_decimal(Decimal('1.005'), 2) -> Decimal('1.01')"""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def decimal_str(value) -> str:
    """Plain (non-exponent) string for numeric order fields."""
    return format(to_decimal(value), "f")
