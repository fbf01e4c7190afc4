from unittest import mock

import pytest

import permit2_swap.__main__ as entry
from permit2_swap.config import REQUIRED, ConfigError, load_settings
from permit2_swap.util import banner, fmt_amount, parse_int, to_base_units

ENV = {"PRIVATE_KEY": "11" * 32, "ZERO_EX_API_KEY": "key", "RPC_URL": "https://mainnet.base.org"}
OPTIONAL = (
    "CHAIN_ID", "SELL_TOKEN", "BUY_TOKEN", "SELL_AMOUNT", "ITERATIONS",
    "SWAP_FEE_RECIPIENT", "SWAP_FEE_BPS", "SWAP_FEE_TOKEN", "SELL_TOKEN_DECIMALS", "BUY_TOKEN_DECIMALS",
)


@pytest.fixture
def env(monkeypatch):
    for name in OPTIONAL:
        monkeypatch.delenv(name, raising=False)
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)
    return monkeypatch


@pytest.mark.parametrize("missing", REQUIRED)
def test_missing_required_value(env, missing):
    env.delenv(missing)
    with pytest.raises(ConfigError, match=f"missing {missing}"):
        load_settings()


def test_blank_value_counts_as_missing(env):
    env.setenv("ZERO_EX_API_KEY", "  ")
    with pytest.raises(ConfigError):
        load_settings()


def test_defaults(env):
    s = load_settings()
    assert s.private_key == "0x" + "11" * 32
    assert s.chain_id == 8453
    assert s.iterations == 50
    assert s.sell_amount == "1"
    assert (s.sell_decimals, s.buy_decimals) == (6, 18)
    assert s.swap_fee is None


def test_overrides_and_fee(env):
    env.setenv("PRIVATE_KEY", "0x" + "22" * 32)
    env.setenv("ITERATIONS", "3")
    env.setenv("SWAP_FEE_RECIPIENT", "0xabc")
    env.setenv("SWAP_FEE_BPS", "100")
    env.setenv("SWAP_FEE_TOKEN", "0xdef")
    s = load_settings()
    assert s.private_key == "0x" + "22" * 32
    assert s.iterations == 3
    assert s.swap_fee == {"swapFeeRecipient": "0xabc", "swapFeeBps": "100", "swapFeeToken": "0xdef"}


def test_main_stops_before_network_without_rpc(env):
    env.delenv("RPC_URL")
    with mock.patch.object(entry, "build_context") as build, \
            mock.patch.object(entry, "bulk_test") as bulk:
        assert entry.main() == 1
    build.assert_not_called()
    bulk.assert_not_called()


def test_main_runs_bulk_test(env):
    env.setenv("ITERATIONS", "2")
    with mock.patch.object(entry, "build_context") as build, \
            mock.patch.object(entry, "bulk_test") as bulk:
        assert entry.main() == 0
    bulk.assert_called_once_with(build.return_value, 2, 6, 18)


def test_main_reports_iteration_error(env):
    with mock.patch.object(entry, "build_context"), \
            mock.patch.object(entry, "bulk_test", side_effect=RuntimeError("boom")):
        assert entry.main() == 1


def test_amount_helpers():
    assert to_base_units("1", 6) == 1_000_000
    assert to_base_units("0.1", 6) == 100_000
    assert to_base_units("2", 0) == 2
    with pytest.raises(ValueError):
        to_base_units("0.0000001", 6)
    assert fmt_amount(1_500_000, 6) == "1.5"
    assert fmt_amount(10 ** 18, 18) == "1"


def test_banner_width():
    assert len(banner("getting price")) == 85
    assert "   GETTING PRICE   " in banner("getting price")
    assert banner() == "#" * 85


def test_parse_int():
    assert parse_int("0100") == 100
    assert parse_int("0x10") == 16
    assert parse_int(" 42 ") == 42
    assert parse_int(7) == 7
