# -*- coding: utf-8 -*-
# rhcrypto/core/kernel/syscalls.py
# Venue-neutral operation set; drivers subclass and fill these in.
# Plain base class with NotImplementedError. Errors are raised, never returned.

class TradingSyscalls(object):
    # ---- Ref-data / meta ----
    def symbols(self):
        """Return a list of tradable symbols, e.g. ['BTC-USD', 'ETH-USD']"""
        raise NotImplementedError

    # ---- Market data ----
    def get_price_now(self, symbol):
        """Return the current price (Decimal)"""
        raise NotImplementedError

    def get_best_bid_ask(self, *symbols):
        """Return a list of quote documents, one per symbol (all symbols if none given)"""
        raise NotImplementedError

    def get_estimated_price(self, symbol, side, quantities):
        """Return estimated execution prices
           :param symbol: Trading pair symbol
           :param side: 'bid', 'ask' or 'both'
           :param quantities: one quantity or a list of quantities
        """
        raise NotImplementedError

    # ---- Trading ----
    def place_order(self, symbol, side, order, client_order_id=None):
        """Place an order, return the order document
           :param symbol: Trading pair symbol
           :param side: 'buy'/'sell'
           :param order: one of the driver's order variants (market, limit, ...)
           :param client_order_id: idempotency key, generated when omitted
        """
        raise NotImplementedError

    def revoke_order(self, order_id):
        """Cancel a single order"""
        raise NotImplementedError

    def get_open_orders(self, symbol=None):
        """Return open order documents (optionally for one symbol)"""
        raise NotImplementedError

    def get_order_status(self, order_id):
        """Return the order document for order_id"""
        raise NotImplementedError

    # ---- Account ----
    def fetch_balance(self):
        """Return buying power (Decimal)"""
        raise NotImplementedError

    def get_position(self, asset_code=None):
        """Return holdings; a single holding document when asset_code is given (None if not held)"""
        raise NotImplementedError

    # ---- Convenience methods ----
    def buy(self, symbol, order, **kwargs):
        """Convenience method for placing buy orders"""
        return self.place_order(symbol, "buy", order, **kwargs)

    def sell(self, symbol, order, **kwargs):
        """Convenience method for placing sell orders"""
        return self.place_order(symbol, "sell", order, **kwargs)
