"""Tests for ExchangeConfig."""

import pytest

from exchange.config import DEFAULT_CONFIG, ExchangeConfig

ENV_VARS = (
    "EXCHANGE_POOL_KEY",
    "EXCHANGE_SWAP_FEE_NUMERATOR",
    "EXCHANGE_SWAP_FEE_DENOMINATOR",
    "EXCHANGE_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestExchangeConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.pool_key == "pool"
        assert DEFAULT_CONFIG.swap_fee_numerator == 3
        assert DEFAULT_CONFIG.swap_fee_denominator == 1000
        assert DEFAULT_CONFIG.log_level == "INFO"

    def test_zero_fee_allowed(self):
        assert ExchangeConfig(swap_fee_numerator=0).swap_fee_numerator == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"pool_key": ""},
            {"swap_fee_denominator": 0},
            {"swap_fee_numerator": -1},
            {"swap_fee_numerator": 1001},
            {"log_level": "verbose"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ExchangeConfig(**kwargs)


class TestFromEnv:
    """Tests for loading configuration from the environment."""

    def test_unset_uses_defaults(self, clean_env):
        assert ExchangeConfig.from_env() == ExchangeConfig()

    def test_overrides(self, clean_env):
        clean_env.setenv("EXCHANGE_POOL_KEY", "pool-2")
        clean_env.setenv("EXCHANGE_SWAP_FEE_NUMERATOR", "5")
        clean_env.setenv("EXCHANGE_SWAP_FEE_DENOMINATOR", "10000")
        clean_env.setenv("EXCHANGE_LOG_LEVEL", "debug")

        config = ExchangeConfig.from_env()

        assert config == ExchangeConfig(
            pool_key="pool-2",
            swap_fee_numerator=5,
            swap_fee_denominator=10_000,
            log_level="DEBUG",
        )

    @pytest.mark.parametrize(
        "name,value",
        [
            ("EXCHANGE_SWAP_FEE_NUMERATOR", "three"),
            ("EXCHANGE_SWAP_FEE_DENOMINATOR", "0"),
            ("EXCHANGE_SWAP_FEE_NUMERATOR", "2000"),
            ("EXCHANGE_LOG_LEVEL", "LOUD"),
        ],
    )
    def test_invalid_values(self, clean_env, name, value):
        clean_env.setenv(name, value)
        with pytest.raises(ValueError):
            ExchangeConfig.from_env()
