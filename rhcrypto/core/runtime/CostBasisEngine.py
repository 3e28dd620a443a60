# -*- coding: utf-8 -*-
# rhcrypto/core/runtime/CostBasisEngine.py
"""
CostBasisEngine - FIFO cost basis per held asset

Core idea:
- every filled buy execution opens a lot (quantity, total cost)
- sells consume lots oldest-first; a partly consumed lot keeps its unit cost
- whatever is left is the cost basis of the current holding

Known approximation: assets that arrived by transfer or airdrop have no buy
history and report a cost of 0. The lot quantity is never reconciled against
the quantity the holdings endpoint reports.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from rhcrypto.drivers.robinhood.Config import QUOTE_CURRENCY
from rhcrypto.drivers.robinhood.orders import OrderSide, OrderState
from rhcrypto.drivers.robinhood.util import round_decimal, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


class OrderExecution(NamedTuple):
    quantity: Decimal
    effective_price: Decimal
    side: str
    order_created_at: datetime


class CostBasisLot(NamedTuple):
    quantity: Decimal
    cost: Decimal  # total cost of the lot, not per unit


class CostBasisSummary(NamedTuple):
    asset_code: str
    current_quantity: Decimal
    total_cost: Decimal
    average_cost_per_unit: Decimal

    def to_dict(self):
        return {
            "asset_code": self.asset_code,
            "current_quantity": str(self.current_quantity),
            "total_cost": str(self.total_cost),
            "average_cost_per_unit": str(self.average_cost_per_unit),
        }


def parse_timestamp(value) -> datetime:
    """ISO-8601 string (trailing 'Z' allowed) or datetime -> aware datetime (naive = UTC)."""
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def executions_from_orders(orders: Iterable[Mapping], side: Optional[str] = None) -> List[OrderExecution]:
    """
    Flatten the executions of filled orders.
    Each execution is stamped with its order's created_at, which is what the
    FIFO ordering uses. With `side`, orders of the other side are skipped.
    """
    executions = []
    for order in orders:
        if order.get("state") != OrderState.FILLED.value:
            continue
        if side is not None and order.get("side") != side:
            logger.debug("skipping %s order %s in %s history", order.get("side"), order.get("id"), side)
            continue
        created_at = parse_timestamp(order["created_at"])
        for ex in order.get("executions") or []:
            quantity = to_decimal(ex.get("quantity"), default=0)
            if quantity <= 0:
                continue
            executions.append(OrderExecution(
                quantity=quantity,
                effective_price=to_decimal(ex.get("effective_price"), default=0),
                side=order.get("side", ""),
                order_created_at=created_at,
            ))
    return executions


def _chronological(executions):
    # sorted() is stable, so executions of the same order keep their input order
    return sorted(executions, key=lambda ex: parse_timestamp(ex.order_created_at))


def fifo_lots(buys: Sequence[OrderExecution], sells: Sequence[OrderExecution]) -> List[CostBasisLot]:
    lots = deque(
        CostBasisLot(ex.quantity, ex.effective_price * ex.quantity)
        for ex in _chronological(buys)
    )
    for sell in _chronological(sells):
        remaining = sell.quantity
        while remaining > 0 and lots:
            lot = lots[0]
            if lot.quantity <= remaining:
                lots.popleft()
                remaining -= lot.quantity
            else:
                new_quantity = lot.quantity - remaining
                lots[0] = CostBasisLot(new_quantity, lot.cost * new_quantity / lot.quantity)
                remaining = ZERO
        if remaining > 0:
            logger.debug("sell of %s exceeds known lots by %s", sell.quantity, remaining)
    return list(lots)


def summarize(asset_code: str, current_quantity, lots: Sequence[CostBasisLot]) -> CostBasisSummary:
    total_quantity = sum((lot.quantity for lot in lots), ZERO)
    total_cost = sum((lot.cost for lot in lots), ZERO)
    average = total_cost / total_quantity if total_quantity > 0 else ZERO
    return CostBasisSummary(
        asset_code=asset_code,
        current_quantity=to_decimal(current_quantity, default=0),
        total_cost=round_decimal(total_cost, 2),
        average_cost_per_unit=round_decimal(average, 8),
    )


def compute_cost_basis(holdings: Iterable[Mapping],
                       buy_executions_by_asset: Mapping[str, Sequence[OrderExecution]],
                       sell_executions_by_asset: Mapping[str, Sequence[OrderExecution]]) -> List[CostBasisSummary]:
    """
    One summary per holding, in holdings order.

    :param holdings: holding documents with 'asset_code' and 'total_quantity'
    :param buy_executions_by_asset: asset code -> filled buy executions (any order)
    :param sell_executions_by_asset: asset code -> filled sell executions (any order)
    """
    summaries = []
    for holding in holdings:
        asset_code = holding["asset_code"]
        lots = fifo_lots(buy_executions_by_asset.get(asset_code, ()),
                         sell_executions_by_asset.get(asset_code, ()))
        summaries.append(summarize(asset_code, holding.get("total_quantity"), lots))
    return summaries


def summaries_to_frame(summaries: Sequence[CostBasisSummary]):
    import pandas as pd

    columns = list(CostBasisSummary._fields)
    return pd.DataFrame([s.to_dict() for s in summaries], columns=columns)


class CostBasisEngine:
    """
    Pulls holdings and filled order history through a driver and folds them.

    :param driver: a RobinhoodDriver (anything with get_holdings/get_orders)
    :param quote_currency: orders for asset X are looked up as X-<quote>
    """

    def __init__(self, driver, quote_currency: str = QUOTE_CURRENCY):
        self.driver = driver
        self.quote_currency = quote_currency

    def _filled_executions(self, asset_code: str, side: OrderSide) -> List[OrderExecution]:
        orders = self.driver.get_orders(
            symbol=f"{asset_code}-{self.quote_currency}", side=side, state=OrderState.FILLED
        )
        return executions_from_orders(orders, side=side.value)

    def run(self, asset_codes: Optional[Sequence[str]] = None) -> List[CostBasisSummary]:
        holdings = self.driver.get_holdings(*(asset_codes or ()))
        buys: Dict[str, List[OrderExecution]] = {}
        sells: Dict[str, List[OrderExecution]] = {}
        for holding in holdings:
            asset_code = holding["asset_code"]
            buys[asset_code] = self._filled_executions(asset_code, OrderSide.BUY)
            sells[asset_code] = self._filled_executions(asset_code, OrderSide.SELL)
            logger.info("%s: %d buy / %d sell executions", asset_code,
                        len(buys[asset_code]), len(sells[asset_code]))
        return compute_cost_basis(holdings, buys, sells)
