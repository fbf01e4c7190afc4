# permit2_swap/swap.py
from dataclasses import dataclass
from enum import IntEnum
from pprint import pformat
from typing import Any, Dict, Optional

from web3 import Web3

from .chain import ChainClient, to_checksum
from .permit import (
    NoPermitRequired, PermitSigned, append_signature, sign_permit
)
from .tokens import MAX_UINT256, Token
from .util import banner, fmt_amount, get_logger, on_error, parse_int, short
from .zeroex import PRICE_PATH, QUOTE_PATH, ZeroExClient, price_params

log = get_logger()

class SwapOutcome(IntEnum):
    FAILED = 0
    SUCCESS = 1
    NOT_SENT = 2

class SwapError(RuntimeError):
    pass

@dataclass
class SwapContext:
    client: ChainClient
    api: ZeroExClient
    sell_token: Token
    buy_token: Token
    sell_amount: int
    swap_fee: Optional[Dict[str, str]] = None

    def params(self) -> Dict[str, str]:
        return price_params(
            self.client.chain_id, self.sell_token.address, self.buy_token.address,
            self.sell_amount, self.client.address, self.swap_fee,
        )

def ensure_permit2_allowance(ctx: SwapContext, price: Dict[str, Any]) -> bool:
    """Approve the spender reported in price.issues.allowance, if any.

    Returns True only when an approval was mined. Failures are logged and swallowed;
    the caller carries on regardless.
    """
    issue = (price.get("issues") or {}).get("allowance")
    if issue is None:
        log.info(f"{ctx.sell_token.symbol} already approved for Permit2")
        return False
    try:
        spender = issue["spender"]
        ctx.sell_token.simulate_approve(spender, MAX_UINT256)
        log.info(f"Approving Permit2 ({short(spender)}) to spend {ctx.sell_token.symbol}...")
        txh = ctx.sell_token.approve(spender, MAX_UINT256)
        receipt = ctx.client.wait_for_receipt(txh)
        log.info(f"Approved Permit2 to spend {ctx.sell_token.symbol}. status={receipt['status']}")
        return True
    except Exception as e:
        on_error(log, "Error approving Permit2", e)
        return False

def broadcast(ctx: SwapContext, tx: Dict[str, Any]) -> SwapOutcome:
    fields: Dict[str, Any] = {
        "to": to_checksum(tx["to"]),
        "data": tx["data"],
        "nonce": ctx.client.get_transaction_count(),
    }
    # value is only set for native-token sells
    for key in ("value", "gas", "gasPrice"):
        if tx.get(key):
            fields[key] = parse_int(tx[key])
    raw = ctx.client.sign_transaction(fields)
    txh = ctx.client.send_raw_transaction(raw)
    log.info(f"Transaction hash: {Web3.to_hex(txh)}")

    receipt = ctx.client.wait_for_receipt(txh)
    ok = receipt["status"] == 1
    log.info(f"Transaction status: {'Success' if ok else 'Failed'}")
    return SwapOutcome.SUCCESS if ok else SwapOutcome.FAILED

def run_swap(ctx: SwapContext) -> SwapOutcome:
    sell, buy = ctx.sell_token, ctx.buy_token
    amount = fmt_amount(ctx.sell_amount, sell.decimals())

    # 1. price
    log.info(banner("getting price"))
    params = ctx.params()
    log.info(f"Fetching price to swap {amount} {sell.symbol} for {buy.symbol}")
    log.info(ctx.api.url(PRICE_PATH, params))
    price = ctx.api.get_price(params)
    log.info(f"priceResponse: {pformat(price)}")
    log.info(banner())

    # 2. permit2 allowance
    log.info(banner("approving permit 2"))
    if not ensure_permit2_allowance(ctx, price):
        log.info("no approval mined this iteration")
    log.info(banner())

    # 3. firm quote, same params
    log.info(banner("fetching quote"))
    log.info(f"quote URL: {ctx.api.url(QUOTE_PATH, params)}")
    quote = ctx.api.get_quote(params)
    log.info(f"Fetching quote to swap {amount} {sell.symbol} for {buy.symbol}")
    log.debug(f"quoteResponse: {quote}")
    log.info(banner())

    # 4. sign permit2.eip712, 5. append it to the calldata
    log.info(banner("signing permit 2 object"))
    permit = sign_permit(ctx.client, quote)
    tx = dict(quote.get("transaction") or {})
    if not isinstance(permit, NoPermitRequired):
        if not isinstance(permit, PermitSigned) or not tx.get("data"):
            raise SwapError("Failed to obtain signature or transaction data")
        tx["data"] = append_signature(tx["data"], permit.signature)
    log.info(banner())

    # 6. sign + broadcast
    log.info(banner("trying to send the tx"))
    if not isinstance(permit, PermitSigned):
        log.error("Failed to obtain a signature, transaction not sent.")
        log.info(banner())
        return SwapOutcome.NOT_SENT
    outcome = broadcast(ctx, tx)
    log.info(banner())
    return outcome
