# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/rest.py
"""
REST adapter for the Robinhood crypto API.
Responsibilities:
- refuse invalid or unsigned requests before any network I/O
- send signed requests and decode the JSON answer
- surface transport failures and non-2xx answers as RequestError (no retries)
"""

import logging
from typing import Any, Optional

import requests

from .Config import DEFAULT_TIMEOUT
from .exceptions import InvalidMessageError, RequestError, UnsignedMessageError

logger = logging.getLogger(__name__)


def _decode_body(response):
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RestClient(object):
    """
    :param session: anything with requests.Session.request's signature;
                    a new requests.Session by default
    :param timeout: seconds, passed through to the transport
    """

    def __init__(self, session=None, timeout: Optional[float] = DEFAULT_TIMEOUT):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def send(self, message, base_url: str) -> Any:
        if not message.is_valid():
            raise InvalidMessageError(
                f"refusing to send invalid request: method={message.method!r} path={message.path!r}"
            )
        if not getattr(message, "signature", ""):
            raise UnsignedMessageError(f"request {message.method} {message.path} has not been signed")

        url = base_url.rstrip("/") + message.path
        method = message.method.upper()
        data = message.body if method != "GET" else None

        logger.debug("%s %s", method, message.path)
        try:
            response = self.session.request(
                method, url, headers=message.headers(), data=data, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, message.path, e)
            raise RequestError(f"{method} {message.path} failed: {e}", cause=e) from e

        if not 200 <= response.status_code < 300:
            body = _decode_body(response)
            logger.warning("%s %s answered %s", method, message.path, response.status_code)
            raise RequestError(f"{method} {message.path} rejected",
                               status_code=response.status_code, body=body)

        return _decode_body(response)
