# -*- coding: utf-8 -*-
# tests/test_driver.py

import base64
import json
from decimal import Decimal

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from rhcrypto.drivers.robinhood.driver import RobinhoodDriver, sign_and_send
from rhcrypto.drivers.robinhood.exceptions import InvalidKeyFormat, MissingCredentialsError, RequestError
from rhcrypto.drivers.robinhood.orders import LimitOrder, MarketOrder
from rhcrypto.drivers.robinhood.rest import RestClient

from conftest import API_KEY, BASE_URL, RFC8032_PUBLIC_HEX

HOST = BASE_URL


def _page(results, next_url=None):
    return {"next": next_url, "previous": None, "results": results}


def _filled(side, created_at, *executions):
    return {
        "id": f"{side}-{created_at}",
        "side": side,
        "state": "filled",
        "symbol": "BTC-USD",
        "created_at": created_at,
        "executions": [{"effective_price": p, "quantity": q, "timestamp": created_at} for q, p in executions],
    }


def test_requests_are_signed_over_the_sent_path(make_driver, make_response):
    driver, session = make_driver(make_response(200, {"account_number": "RH1", "buying_power": "12.50"}))
    assert driver.get_account()["account_number"] == "RH1"

    call = session.calls[0]
    assert call["url"] == HOST + "/api/v1/crypto/trading/accounts/"
    headers = call["headers"]
    assert headers["x-api-key"] == API_KEY
    payload = f"{API_KEY}{headers['x-timestamp']}/api/v1/crypto/trading/accounts/GET".encode()
    public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(RFC8032_PUBLIC_HEX))
    public_key.verify(base64.b64decode(headers["x-signature"]), payload)


def test_fetch_balance(make_driver, make_response):
    driver, _ = make_driver(make_response(200, {"account_number": "RH1", "buying_power": "12.50"}))
    assert driver.fetch_balance() == Decimal("12.50")


def test_best_bid_ask_normalizes_symbols(make_driver, make_response):
    driver, session = make_driver(make_response(200, _page([{"symbol": "BTC-USD", "price": "64000.5"}])))
    quotes = driver.get_best_bid_ask("btc", "eth/usd")
    assert quotes[0]["symbol"] == "BTC-USD"
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/marketdata/best_bid_ask/?symbol=BTC-USD&symbol=ETH-USD"


def test_get_price_now(make_driver, make_response):
    driver, _ = make_driver(make_response(200, _page([{"symbol": "BTC-USD", "price": "64000.5"}])))
    assert driver.get_price_now("BTC") == Decimal("64000.5")

    driver, _ = make_driver(make_response(200, _page([])))
    with pytest.raises(RequestError):
        driver.get_price_now("BTC")


def test_estimated_price(make_driver, make_response):
    driver, session = make_driver(make_response(200, _page([{"price": "1"}])))
    driver.get_estimated_price("btc-usd", "ask", ["0.1", "1"])
    assert session.calls[0]["url"] == (
        HOST + "/api/v1/crypto/marketdata/estimated_price/?symbol=BTC-USD&side=ask&quantity=0.1%2C1"
    )
    with pytest.raises(ValueError):
        driver.get_estimated_price("BTC-USD", "sideways", 1)


def test_holdings_follow_pagination(make_driver, make_response):
    driver, session = make_driver(
        make_response(200, _page([{"asset_code": "BTC"}], HOST + "/api/v1/crypto/trading/holdings/?cursor=p2")),
        make_response(200, _page([{"asset_code": "ETH"}])),
    )
    holdings = driver.get_holdings("btc", "eth")
    assert [h["asset_code"] for h in holdings] == ["BTC", "ETH"]
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/trading/holdings/?asset_code=BTC&asset_code=ETH"
    assert session.calls[1]["url"] == HOST + "/api/v1/crypto/trading/holdings/?cursor=p2"
    # every page is signed on its own
    assert session.calls[0]["headers"]["x-signature"] != session.calls[1]["headers"]["x-signature"]


def test_get_position(make_driver, make_response):
    driver, _ = make_driver(make_response(200, _page([{"asset_code": "BTC", "total_quantity": "1"}])))
    assert driver.get_position("BTC")["total_quantity"] == "1"
    driver, _ = make_driver(make_response(200, _page([])))
    assert driver.get_position("DOGE") is None


def test_get_orders_filters(make_driver, make_response):
    driver, session = make_driver(make_response(200, _page([])))
    driver.get_orders(symbol="BTC-USD", side="buy", state="filled", type=None)
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/trading/orders/?symbol=BTC-USD&side=buy&state=filled"


def test_open_orders_and_status(make_driver, make_response):
    driver, session = make_driver(make_response(200, _page([])), make_response(200, {"id": "a/b"}))
    driver.get_open_orders("eth")
    driver.get_order_status("a/b")
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/trading/orders/?symbol=ETH-USD&state=open"
    assert session.calls[1]["url"] == HOST + "/api/v1/crypto/trading/orders/a%2Fb/"


def test_place_order(make_driver, make_response):
    driver, session = make_driver(make_response(201, {"id": "o-1", "state": "open"}))
    result = driver.buy("btc", LimitOrder(limit_price="60000", asset_quantity="0.001"), client_order_id="cid-1")
    assert result["id"] == "o-1"

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == HOST + "/api/v1/crypto/trading/orders/"
    body = json.loads(call["data"])
    assert body == {
        "client_order_id": "cid-1",
        "side": "buy",
        "symbol": "BTC-USD",
        "type": "limit",
        "limit_order_config": {"limit_price": "60000", "time_in_force": "gtc", "asset_quantity": "0.001"},
    }


def test_cancel_order(make_driver, make_response):
    driver, session = make_driver(make_response(200, text="Cancel request has been submitted"))
    assert driver.revoke_order("o-1") == "Cancel request has been submitted"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == HOST + "/api/v1/crypto/trading/orders/o-1/cancel/"
    assert call["data"] == "{}"


def test_symbols(make_driver, make_response):
    driver, _ = make_driver(make_response(200, _page([{"symbol": "BTC-USD"}, {"symbol": "ETH-USD"}])))
    assert driver.symbols() == ["BTC-USD", "ETH-USD"]


def test_compute_cost_basis(make_driver, make_response):
    driver, session = make_driver(
        make_response(200, _page([{"asset_code": "BTC", "total_quantity": "1.5"},
                                  {"asset_code": "DOGE", "total_quantity": "1000"}])),
        # BTC buys, newest first as the API returns them
        make_response(200, _page([_filled("buy", "2024-02-01T00:00:00Z", ("1", "200"))],
                                 HOST + "/api/v1/crypto/trading/orders/?cursor=n")),
        make_response(200, _page([_filled("buy", "2024-01-01T00:00:00Z", ("0.5", "100"), ("0.5", "100"))])),
        # BTC sells
        make_response(200, _page([_filled("sell", "2024-03-01T00:00:00Z", ("0.5", "300"))])),
        # DOGE: transferred in, no orders
        make_response(200, _page([])),
        make_response(200, _page([])),
    )
    btc, doge = driver.compute_cost_basis()

    assert btc.asset_code == "BTC"
    assert btc.current_quantity == Decimal("1.5")
    assert btc.total_cost == Decimal("250.00")
    assert btc.average_cost_per_unit == Decimal("166.66666667")
    assert doge.total_cost == 0 and doge.average_cost_per_unit == 0

    urls = [c["url"] for c in session.calls]
    assert urls[1] == HOST + "/api/v1/crypto/trading/orders/?symbol=BTC-USD&side=buy&state=filled"
    assert urls[3] == HOST + "/api/v1/crypto/trading/orders/?symbol=BTC-USD&side=sell&state=filled"
    assert urls[4] == HOST + "/api/v1/crypto/trading/orders/?symbol=DOGE-USD&side=buy&state=filled"


def test_compute_cost_basis_for_selected_assets(make_driver, make_response):
    driver, session = make_driver(make_response(200, _page([])))
    assert driver.compute_cost_basis(["eth"]) == []
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/trading/holdings/?asset_code=ETH"


def test_credentials_provider_is_used(seed_b64, make_session):
    class Provider:
        calls = 0

        def get(self):
            Provider.calls += 1
            return API_KEY, seed_b64

    driver = RobinhoodDriver(credentials=Provider(), rest_client=RestClient(session=make_session()))
    assert driver.api_key == API_KEY
    assert Provider.calls == 1


def test_missing_credentials():
    with pytest.raises(MissingCredentialsError):
        RobinhoodDriver(api_key=API_KEY)


def test_bad_key_fails_at_construction():
    with pytest.raises(InvalidKeyFormat):
        RobinhoodDriver(api_key=API_KEY, private_key_seed="short")


def test_module_sign_and_send(seed_b64, make_session, make_response):
    session = make_session([make_response(200, {"ok": True})])
    result = sign_and_send(API_KEY, seed_b64, "/api/v1/crypto/trading/accounts/", "GET", "",
                           base_url=HOST + "/", rest_client=RestClient(session=session))
    assert result == {"ok": True}
    assert session.calls[0]["url"] == HOST + "/api/v1/crypto/trading/accounts/"


def test_lowercase_method_is_signed_as_sent(seed_b64, make_session, make_response):
    session = make_session([make_response(201, {"id": "o-1"})])
    sign_and_send(API_KEY, seed_b64, "/api/v1/crypto/trading/orders/", "post", '{"a":1}',
                  base_url=HOST, rest_client=RestClient(session=session))

    call = session.calls[0]
    assert call["method"] == "POST"
    headers = call["headers"]
    payload = f"{API_KEY}{headers['x-timestamp']}/api/v1/crypto/trading/orders/{call['method']}{call['data']}".encode()
    public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(RFC8032_PUBLIC_HEX))
    public_key.verify(base64.b64decode(headers["x-signature"]), payload)


def test_cost_basis_ignores_wrong_side_orders(make_driver, make_response):
    driver, _ = make_driver(
        make_response(200, _page([{"asset_code": "BTC", "total_quantity": "1"}])),
        # a sell slipping into the buy listing must not open a lot
        make_response(200, _page([_filled("buy", "2024-01-01T00:00:00Z", ("1", "100")),
                                  _filled("sell", "2024-02-01T00:00:00Z", ("1", "900"))])),
        make_response(200, _page([])),
    )
    [btc] = driver.compute_cost_basis()
    assert btc.total_cost == Decimal("100.00")
    assert btc.average_cost_per_unit == Decimal("100")
