# permit2_swap/__main__.py
import sys

from .config import ConfigError, Settings, load_settings
from .chain import ChainClient
from .runner import bulk_test
from .swap import SwapContext
from .tokens import Token, erc20_min_abi, weth_abi
from .util import init_logging, on_error, short, to_base_units
from .zeroex import ZeroExClient

def build_context(settings: Settings) -> SwapContext:
    client = ChainClient.from_key(settings.rpc_url, settings.private_key, settings.chain_id, settings.http_timeout)
    sell = Token(client, settings.sell_token, erc20_min_abi(), settings.sell_symbol)
    buy = Token(client, settings.buy_token, weth_abi(), settings.buy_symbol)
    api = ZeroExClient(settings.api_key, settings.api_base_url, settings.api_version, settings.http_timeout)
    return SwapContext(
        client=client, api=api, sell_token=sell, buy_token=buy,
        sell_amount=to_base_units(settings.sell_amount, sell.decimals()),
        swap_fee=settings.swap_fee,
    )

def main() -> int:
    log = init_logging()
    try:
        settings = load_settings()
    except ConfigError as e:
        log.error(f"config: {e}")
        return 1

    try:
        ctx = build_context(settings)
        log.info(f"account {short(ctx.client.address)} chain={settings.chain_id} iterations={settings.iterations}")
        bulk_test(ctx, settings.iterations, settings.sell_decimals, settings.buy_decimals)
    except KeyboardInterrupt:
        raise
    except Exception as e:
        on_error(log, "Error during bulk test", e)
        return 1
    log.info("Bulk test completed successfully.")
    return 0

if __name__ == "__main__":
    sys.exit(main())
