# -*- coding: utf-8 -*-
# rhcrypto/drivers/robinhood/exceptions.py


class RobinhoodCryptoError(Exception):
    """Base class for every error raised by this package."""


class InvalidMessageError(RobinhoodCryptoError, ValueError):
    """api key, path or method is empty, or a non-GET request has no body."""


class InvalidKeyFormat(RobinhoodCryptoError, ValueError):
    """Private key seed is not Base64 or does not decode to 32 bytes."""


class InvalidOrderError(RobinhoodCryptoError, ValueError):
    pass


class SigningError(RobinhoodCryptoError):
    pass


class KeyGenerationError(RobinhoodCryptoError):
    pass


class UnsignedMessageError(RobinhoodCryptoError):
    """Dispatch was attempted before the request was signed."""


class MissingCredentialsError(RobinhoodCryptoError):
    def __init__(self, missing, account=None):
        self.missing = list(missing)
        self.account = account
        where = f" for account '{account}'" if account else ""
        super().__init__(f"missing credentials{where}: {', '.join(self.missing)}")


class RequestError(RobinhoodCryptoError):
    """
    Transport failure or non-2xx response.

    :param status_code: HTTP status, None for transport failures
    :param body: decoded error document (or raw text) when the server sent one
    :param cause: the underlying transport exception, if any
    """

    def __init__(self, message, status_code=None, body=None, cause=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.cause = cause

    def __str__(self):
        text = super().__str__()
        if self.status_code is not None:
            text = f"{text} (status {self.status_code})"
        if self.body:
            text = f"{text}: {self.body}"
        return text
