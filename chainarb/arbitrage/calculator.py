"""Arbitrage profit calculator."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

WITHDRAW_COST_PRECISION = Decimal("0.001")


class DegenerateQuoteError(ValueError):
    """A price is zero or negative and no ratio can be computed."""


class ProfitBreakdown(BaseModel):
    """Profit ratios of a buy/sell pair."""

    model_config = ConfigDict(frozen=True)

    gross_ratio: Decimal
    net_ratio: Decimal


class ProfitCalculator:
    """Calculate cross-venue profit ratios with trading fees."""

    @staticmethod
    def is_eligible(buy_price: Decimal, sell_price: Decimal) -> bool:
        """A pair qualifies only with a positive spread before fees."""
        return buy_price > 0 and sell_price > buy_price

    @staticmethod
    def compute(
        buy_price: Decimal,
        sell_price: Decimal,
        buy_fee_rate: Decimal,
        sell_fee_rate: Decimal,
    ) -> ProfitBreakdown:
        """
        Calculate profit ratios for buying on one venue and selling on another.

        Args:
            buy_price: Ask on the buy venue
            sell_price: Bid on the sell venue
            buy_fee_rate: Taker fee on the buy venue (decimal)
            sell_fee_rate: Taker fee on the sell venue (decimal)

        Returns:
            Gross (before fees) and net (after fees) ratios of the buy price

        Raises:
            DegenerateQuoteError: If either price is not positive
        """
        if buy_price <= 0 or sell_price <= 0:
            raise DegenerateQuoteError(f"Degenerate prices buy={buy_price} sell={sell_price}")

        gross_ratio = (sell_price - buy_price) / buy_price

        buy_cost = buy_price * (1 + buy_fee_rate)
        sell_revenue = sell_price * (1 - sell_fee_rate)
        net_ratio = (sell_revenue - buy_cost) / buy_price

        return ProfitBreakdown(gross_ratio=gross_ratio, net_ratio=net_ratio)

    @staticmethod
    def withdraw_cost(withdraw_fee: Decimal, buy_price: Decimal) -> Decimal:
        """
        Withdrawal fee converted to settlement currency.

        Args:
            withdraw_fee: Fee in units of the transferred currency
            buy_price: Price of the currency in settlement currency

        Returns:
            Cost rounded to 3 decimal places
        """
        return (withdraw_fee * buy_price).quantize(WITHDRAW_COST_PRECISION, rounding=ROUND_HALF_UP)
