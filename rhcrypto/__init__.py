# -*- coding: utf-8 -*-
# rhcrypto/__init__.py
"""
rhcrypto: client for the Robinhood crypto trading API.

    from rhcrypto.drivers.robinhood import RobinhoodDriver
"""

__version__ = "0.3.0"
