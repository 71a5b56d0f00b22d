"""Configuration for the exchange."""

import os
from dataclasses import dataclass

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ExchangeConfig:
    """Centralized configuration for the pool state machine.

    Attributes:
        pool_key: Fixed ledger key of the singleton pool record (default: "pool")
        swap_fee_numerator: Fee numerator for a freshly initialized pool (default: 3)
        swap_fee_denominator: Fee denominator for a freshly initialized pool (default: 1000)
        log_level: Log level used by the CLI when configuring structlog
    """

    pool_key: str = "pool"

    # 3/1000 = 0.3%
    swap_fee_numerator: int = 3
    swap_fee_denominator: int = 1000

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.pool_key:
            raise ValueError("pool_key must not be empty")
        if self.swap_fee_denominator <= 0:
            raise ValueError(f"swap_fee_denominator must be positive: {self.swap_fee_denominator}")
        if not 0 <= self.swap_fee_numerator <= self.swap_fee_denominator:
            raise ValueError(
                f"swap_fee_numerator must be in [0, {self.swap_fee_denominator}]: "
                f"{self.swap_fee_numerator}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "ExchangeConfig":
        """Build a config from EXCHANGE_* environment variables.

        - EXCHANGE_POOL_KEY: Ledger key of the pool record (default: pool)
        - EXCHANGE_SWAP_FEE_NUMERATOR: Fee numerator (default: 3)
        - EXCHANGE_SWAP_FEE_DENOMINATOR: Fee denominator (default: 1000)
        - EXCHANGE_LOG_LEVEL: Log level (default: INFO)

        Raises:
            ValueError: If a variable holds an invalid value
        """
        return cls(
            pool_key=os.environ.get("EXCHANGE_POOL_KEY", cls.pool_key),
            swap_fee_numerator=int(
                os.environ.get("EXCHANGE_SWAP_FEE_NUMERATOR", str(cls.swap_fee_numerator))
            ),
            swap_fee_denominator=int(
                os.environ.get("EXCHANGE_SWAP_FEE_DENOMINATOR", str(cls.swap_fee_denominator))
            ),
            log_level=os.environ.get("EXCHANGE_LOG_LEVEL", cls.log_level).upper(),
        )


# Default configuration instance
DEFAULT_CONFIG = ExchangeConfig()
