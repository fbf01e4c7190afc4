# permit2_swap/tokens.py
from typing import Optional

from hexbytes import HexBytes
from web3 import Web3

from .chain import ChainClient, to_checksum
from .util import get_logger, short

log = get_logger()

MAX_UINT256 = (1 << 256) - 1

def erc20_min_abi():
    # balanceOf, decimals, symbol, approve, allowance
    return [
        {"constant":True,"inputs":[{"name":"owner","type":"address"}],"name":"balanceOf","outputs":[{"name":"","type":"uint256"}],"type":"function"},
        {"constant":True,"inputs":[],"name":"decimals","outputs":[{"name":"","type":"uint8"}],"type":"function"},
        {"constant":True,"inputs":[],"name":"symbol","outputs":[{"name":"","type":"string"}],"type":"function"},
        {"constant":False,"inputs":[{"name":"spender","type":"address"},{"name":"value","type":"uint256"}],"name":"approve","outputs":[{"name":"","type":"bool"}],"type":"function"},
        {"constant":True,"inputs":[{"name":"owner","type":"address"},{"name":"spender","type":"address"}],"name":"allowance","outputs":[{"name":"","type":"uint256"}],"type":"function"},
    ]

def weth_abi():
    # erc20 surface + deposit/withdraw
    return erc20_min_abi() + [
        {"constant":False,"inputs":[],"name":"deposit","outputs":[],"payable":True,"stateMutability":"payable","type":"function"},
        {"constant":False,"inputs":[{"name":"wad","type":"uint256"}],"name":"withdraw","outputs":[],"type":"function"},
    ]

class Token:
    def __init__(self, client: ChainClient, address: str, abi: Optional[list] = None, symbol: str = ""):
        self.client = client
        self.address = to_checksum(address)
        self.symbol = symbol or short(self.address)
        self.contract = client.contract(self.address, abi or erc20_min_abi())
        self._decimals: Optional[int] = None

    def __repr__(self) -> str:
        return f"Token({self.symbol} {short(self.address)})"

    def decimals(self) -> int:
        if self._decimals is None:
            self._decimals = int(self.client.call(self.contract.functions.decimals()))
        return self._decimals

    def balance_of(self, owner: str) -> int:
        return int(self.client.call(self.contract.functions.balanceOf(to_checksum(owner))))

    def allowance(self, owner: str, spender: str) -> int:
        fn = self.contract.functions.allowance(to_checksum(owner), to_checksum(spender))
        return int(self.client.call(fn))

    def simulate_approve(self, spender: str, amount: int = MAX_UINT256) -> bool:
        return self.client.simulate(self.contract.functions.approve(to_checksum(spender), int(amount)))

    def approve(self, spender: str, amount: int = MAX_UINT256) -> HexBytes:
        txh = self.client.send(self.contract.functions.approve(to_checksum(spender), int(amount)))
        log.info(f"approve {self.symbol} -> {short(spender)} | {Web3.to_hex(txh)}")
        return txh
