"""Constant-product AMM math.

The pool prices trades with x * y = k. The swap fee is withheld from the
input before pricing and never enters the tradable reserves:

    fee = floor(amount_in * fee_num / fee_den)
    amount_out = floor((amount_in - fee) * reserve_out / (reserve_in + amount_in - fee))

Every division truncates, so rounding always favors the pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from exchange.safe_int import S, mul_div


@dataclass(frozen=True)
class SwapQuote:
    """Outcome of pricing a swap against a pair of reserves."""

    amount_in: int
    fee: int
    amount_out: int

    @property
    def amount_in_after_fee(self) -> int:
        """Portion of the input added to the input reserve."""
        return self.amount_in - self.fee


@dataclass(frozen=True)
class RedemptionQuote:
    """Reserves released for burning a number of shares."""

    shares: int
    base_out: int
    token_out: int


class ConstantProduct:
    """Integer math for a two-asset constant-product pool.

    All methods are pure; inputs are assumed validated (non-negative) by the
    caller. Division by a zero reserve or share supply raises DivisionByZero.
    """

    def get_swap_fee(self, amount_in: int, fee_numerator: int, fee_denominator: int) -> int:
        """Fee withheld from an input amount, rounded down."""
        return mul_div(amount_in, fee_numerator, fee_denominator)

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int = 3,
        fee_denominator: int = 1000,
    ) -> SwapQuote:
        """Price an exact-input swap.

        Args:
            amount_in: Input amount, fee included
            reserve_in: Tradable reserve of the input asset
            reserve_out: Tradable reserve of the output asset
            fee_numerator: Fee fraction numerator (default 3 for 0.3%)
            fee_denominator: Fee fraction denominator (default 1000)

        Returns:
            SwapQuote with the fee and output amount

        Raises:
            DivisionByZero: If reserve_in and the fee-adjusted input are both zero
        """
        fee = self.get_swap_fee(amount_in, fee_numerator, fee_denominator)
        amount_in_after_fee = S(amount_in) - S(fee)

        numerator = amount_in_after_fee * S(reserve_out)
        denominator = S(reserve_in) + amount_in_after_fee

        return SwapQuote(
            amount_in=amount_in,
            fee=fee,
            amount_out=(numerator // denominator).value,
        )

    def get_paired_amount(self, base_amount: int, base_reserve: int, token_reserve: int) -> int:
        """Token amount to deposit alongside base_amount at the current price.

        With no base reserve yet there is no price to preserve, and the
        deposit is paired 1:1.
        """
        if base_reserve == 0:
            return base_amount
        return mul_div(base_amount, token_reserve, base_reserve)

    def get_redemption(
        self,
        shares: int,
        base_reserve: int,
        token_reserve: int,
        total_shares: int,
    ) -> RedemptionQuote:
        """Proportional share of both reserves for burning shares.

        Raises:
            DivisionByZero: If total_shares is zero
        """
        base_out = mul_div(shares, base_reserve, total_shares)
        token_out = mul_div(shares, token_reserve, total_shares)
        return RedemptionQuote(shares=shares, base_out=base_out, token_out=token_out)


# Singleton instance
constant_product = ConstantProduct()


__all__ = [
    "ConstantProduct",
    "RedemptionQuote",
    "SwapQuote",
    "constant_product",
]
