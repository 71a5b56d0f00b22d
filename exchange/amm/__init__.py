"""AMM pricing math."""

from exchange.amm.constant_product import (
    ConstantProduct,
    RedemptionQuote,
    SwapQuote,
    constant_product,
)

__all__ = [
    "ConstantProduct",
    "RedemptionQuote",
    "SwapQuote",
    "constant_product",
]
