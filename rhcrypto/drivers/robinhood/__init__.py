# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/__init__.py
"""
Robinhood crypto driver package.
message.py + signer.py + rest.py + driver.py according to rhcrypto syscalls.
"""

from .driver import RobinhoodDriver, init_RobinhoodDriver, sign_and_send  # noqa: F401
from .exceptions import (  # noqa: F401
    InvalidKeyFormat,
    InvalidMessageError,
    InvalidOrderError,
    KeyGenerationError,
    MissingCredentialsError,
    RequestError,
    RobinhoodCryptoError,
    SigningError,
    UnsignedMessageError,
)
from .message import SignedRequest, UnsignedRequest  # noqa: F401
from .orders import LimitOrder, MarketOrder, OrderSide, StopLimitOrder, StopLossOrder, TimeInForce  # noqa: F401
from .signer import KeyPair, Signer, generate_keypair  # noqa: F401
