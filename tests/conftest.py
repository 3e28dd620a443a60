# -*- coding: utf-8 -*-
# tests/conftest.py

import base64
import json
import sys
from pathlib import Path

import pytest

# Ensure project root (which contains the `rhcrypto/` package directory) is on sys.path
_THIS_FILE = Path(__file__).resolve()
_PROJECT_ROOT = _THIS_FILE.parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from rhcrypto.drivers.robinhood.driver import RobinhoodDriver
from rhcrypto.drivers.robinhood.rest import RestClient

# RFC 8032, section 7.1, TEST 1
RFC8032_SECRET_HEX = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RFC8032_PUBLIC_HEX = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
RFC8032_EMPTY_MESSAGE_SIGNATURE_HEX = (
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e06522490155"
    "5fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)

API_KEY = "rh-api-6148effc-c0b1-486c-8940-a1d099456be6"
BASE_URL = "https://trading.example.test"


def hex_to_b64(value):
    return base64.b64encode(bytes.fromhex(value)).decode("ascii")


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for requests.Session: records calls, replays queued responses."""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def request(self, method, url, headers=None, data=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "data": data, "timeout": timeout})
        if self.error is not None:
            raise self.error
        if not self.responses:
            return FakeResponse(200, {})
        return self.responses.pop(0)


@pytest.fixture
def seed_b64():
    return hex_to_b64(RFC8032_SECRET_HEX)


@pytest.fixture
def public_b64():
    return hex_to_b64(RFC8032_PUBLIC_HEX)


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_driver(seed_b64):
    """make_driver(*responses) -> (driver, session)"""
    def _make(*responses, error=None):
        session = FakeSession(responses, error=error)
        driver = RobinhoodDriver(api_key=API_KEY, private_key_seed=seed_b64, base_url=BASE_URL,
                                 rest_client=RestClient(session=session, timeout=5))
        return driver, session
    return _make
