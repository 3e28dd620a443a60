# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/signer.py
"""
Request signer for the Robinhood crypto API.
- Ed25519 over the canonical request payload (see UnsignedRequest.payload)
- keys travel as Base64 of the raw 32-byte seed / public key
"""

import base64
import binascii
import logging
from typing import NamedTuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .exceptions import InvalidKeyFormat, InvalidMessageError, KeyGenerationError, SigningError
from .message import SignedRequest, UnsignedRequest

logger = logging.getLogger(__name__)

SEED_SIZE = 32


class KeyPair(NamedTuple):
    private_key: str
    public_key: str


def _public_key_b64(private_key: Ed25519PrivateKey) -> str:
    raw = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return base64.b64encode(raw).decode("ascii")


def generate_keypair() -> KeyPair:
    """Fresh Ed25519 key pair; register the public key with the broker."""
    try:
        private_key = Ed25519PrivateKey.generate()
        seed = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (UnsupportedAlgorithm, OSError, ValueError) as e:
        raise KeyGenerationError(f"Ed25519 key generation failed: {e}") from e
    return KeyPair(
        private_key=base64.b64encode(seed).decode("ascii"),
        public_key=_public_key_b64(private_key),
    )


def decode_seed(private_key_seed: str) -> bytes:
    if not isinstance(private_key_seed, (str, bytes)):
        raise InvalidKeyFormat("private key seed must be a Base64 string")
    try:
        seed = base64.b64decode(private_key_seed, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidKeyFormat("private key seed is not valid Base64") from e
    if len(seed) != SEED_SIZE:
        raise InvalidKeyFormat(f"private key seed must decode to {SEED_SIZE} bytes, got {len(seed)}")
    return seed


def decode_private_key(private_key_seed: str) -> Ed25519PrivateKey:
    seed = decode_seed(private_key_seed)
    try:
        return Ed25519PrivateKey.from_private_bytes(seed)
    except (UnsupportedAlgorithm, ValueError) as e:
        raise SigningError(f"cannot load Ed25519 key: {e}") from e


def derive_public_key(private_key_seed: str) -> str:
    return _public_key_b64(decode_private_key(private_key_seed))


def _sign_with(private_key: Ed25519PrivateKey, payload: bytes) -> str:
    try:
        signature = private_key.sign(payload)
    except (UnsupportedAlgorithm, ValueError) as e:
        raise SigningError(f"Ed25519 signing failed: {e}") from e
    return base64.b64encode(signature).decode("ascii")


def sign_payload(payload: bytes, private_key_seed: str) -> str:
    return _sign_with(decode_private_key(private_key_seed), payload)


def compute_signature(request: UnsignedRequest, private_key_seed: str) -> str:
    return sign_payload(request.payload(), private_key_seed)


def _check(request):
    if not request.is_valid():
        raise InvalidMessageError(
            f"invalid request: method={request.method!r} path={request.path!r} "
            f"(api key, path and method are required; non-GET requests need a body)"
        )


def sign(request: UnsignedRequest, private_key_seed: str) -> SignedRequest:
    _check(request)
    return SignedRequest(request, compute_signature(request, private_key_seed))


class Signer(object):
    """
    Holds one decoded private key and signs requests with it.
    Nothing is remembered between calls.
    """

    def __init__(self, private_key_seed: str):
        self._private_key = decode_private_key(private_key_seed)

    @property
    def public_key(self) -> str:
        return _public_key_b64(self._private_key)

    def sign(self, request: UnsignedRequest) -> SignedRequest:
        _check(request)
        signed = SignedRequest(request, _sign_with(self._private_key, request.payload()))
        logger.debug("signed %s %s at %s", request.method, request.path, request.timestamp)
        return signed
