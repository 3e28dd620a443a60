# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/message.py
# Request values: an unsigned request and the signed request built from it.

import time
from typing import Dict, NamedTuple, Optional

from .Config import API_KEY_HEADER, TIMESTAMP_HEADER, SIGNATURE_HEADER, CONTENT_TYPE


def _is_valid(api_key, path, method, body):
    if not api_key or not path or not method:
        return False
    return method.upper() == "GET" or bool(body)


class UnsignedRequest(NamedTuple):
    """
    One outbound API call before signing.

    The timestamp is fixed when the request is created, so sign it right away:
    the server rejects requests whose timestamp drifts too far from receipt.
    """
    api_key: str
    path: str
    method: str
    body: str
    timestamp: int

    @classmethod
    def create(cls, api_key: str, path: str, method: str, body: str = "",
               timestamp: Optional[int] = None) -> "UnsignedRequest":
        if timestamp is None:
            timestamp = int(time.time())
        return cls(api_key, path, (method or "").upper(), body or "", int(timestamp))

    def is_valid(self) -> bool:
        return _is_valid(self.api_key, self.path, self.method, self.body)

    def payload(self) -> bytes:
        """
        Canonical signing payload: api key, timestamp, path, method and body
        concatenated with no separators, UTF-8 encoded. The server rebuilds
        exactly this string to verify the signature.
        """
        message = f"{self.api_key}{self.timestamp}{self.path}{self.method}{self.body}"
        return message.encode("utf-8")


class SignedRequest(NamedTuple):
    """An UnsignedRequest paired with its Base64 Ed25519 signature."""
    request: UnsignedRequest
    signature: str

    @property
    def api_key(self):
        return self.request.api_key

    @property
    def path(self):
        return self.request.path

    @property
    def method(self):
        return self.request.method

    @property
    def body(self):
        return self.request.body

    @property
    def timestamp(self):
        return self.request.timestamp

    def is_valid(self) -> bool:
        return self.request.is_valid()

    def headers(self) -> Dict[str, str]:
        return {
            API_KEY_HEADER: self.api_key,
            TIMESTAMP_HEADER: str(self.timestamp),
            SIGNATURE_HEADER: self.signature,
            "Content-Type": CONTENT_TYPE,
        }
