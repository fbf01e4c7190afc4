# permit2_swap/runner.py
from dataclasses import dataclass

from .swap import SwapContext, SwapOutcome, run_swap
from .util import fmt_amount, get_logger, iteration_header

log = get_logger()

@dataclass
class RunStats:
    success: int = 0
    failed: int = 0
    not_sent: int = 0
    total: int = 0

    @property
    def attempts(self) -> int:
        return self.success + self.failed + self.not_sent

def bulk_test(ctx: SwapContext, iterations: int = 50, sell_decimals: int = 6, buy_decimals: int = 18) -> RunStats:
    """Run the swap up to `iterations` times, stopping at the first on-chain failure.

    Exceptions raised by an iteration are not caught here.
    """
    stats = RunStats()
    for i in range(iterations):
        log.info(iteration_header(i))
        res = run_swap(ctx)
        if res == SwapOutcome.SUCCESS:
            stats.success += 1
        elif res == SwapOutcome.FAILED:
            stats.failed += 1
            log.warning("TRANSACTION FAILED, BREAKING LOOP")
            break
        else:
            stats.not_sent += 1
        stats.total += 1

    log.info(f"Total successes: {stats.success}")
    log.info(f"Total failures: {stats.failed}")
    log.info(f"Total not sent: {stats.not_sent}")
    report_balances(ctx, sell_decimals, buy_decimals)
    return stats

def report_balances(ctx: SwapContext, sell_decimals: int, buy_decimals: int):
    owner = ctx.client.address
    sell_bal = ctx.sell_token.balance_of(owner)
    buy_bal = ctx.buy_token.balance_of(owner)
    log.info(f"{ctx.sell_token.symbol} Balance: {fmt_amount(sell_bal, sell_decimals)}")
    log.info(f"{ctx.buy_token.symbol} Balance: {fmt_amount(buy_bal, buy_decimals)}")
    return sell_bal, buy_bal
