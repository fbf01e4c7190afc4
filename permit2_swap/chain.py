# permit2_swap/chain.py
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams, TxReceipt

from .util import get_logger, short

log = get_logger()

def get_w3(rpc_url: str, timeout: float = 30) -> Web3:
    assert rpc_url, "RPC_URL required (.env)"
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

def to_checksum(addr: str) -> str:
    return Web3.to_checksum_address(addr)

class ChainClient:
    """Signing client bound to one account, one chain and one RPC endpoint.

    Everything that talks to the node goes through here so the swap workflow
    can be exercised against a mock.
    """

    def __init__(self, w3: Web3, account: LocalAccount, chain_id: int):
        self.w3 = w3
        self.account = account
        self.chain_id = int(chain_id)

    @classmethod
    def from_key(cls, rpc_url: str, private_key: str, chain_id: int, timeout: float = 30) -> "ChainClient":
        return cls(get_w3(rpc_url, timeout), Account.from_key(private_key), chain_id)

    @property
    def address(self) -> str:
        return self.account.address

    # --- reads ---
    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=to_checksum(address), abi=abi)

    def call(self, fn) -> Any:
        return fn.call({"from": self.address})

    def simulate(self, fn) -> Any:
        # reverts raise ContractLogicError
        return self.call(fn)

    def get_transaction_count(self) -> int:
        return self.w3.eth.get_transaction_count(self.address)

    # --- writes ---
    def build_tx_base(self) -> TxParams:
        return {
            "from": self.address,
            "nonce": self.get_transaction_count(),
            "gasPrice": self.w3.eth.gas_price,
            "chainId": self.chain_id,
        }

    def send(self, fn) -> HexBytes:
        tx_data = fn.build_transaction(self.build_tx_base())
        raw = self.sign_transaction(tx_data)
        txh = self.send_raw_transaction(raw)
        log.debug(f"sent {short(Web3.to_hex(txh))}")
        return txh

    def sign_typed_data(self, payload: Dict[str, Any]) -> HexBytes:
        signed = self.account.sign_typed_data(full_message=payload)
        return HexBytes(signed.signature)

    def sign_transaction(self, tx: Dict[str, Any]) -> HexBytes:
        tx = dict(tx)
        tx.pop("from", None)
        tx.setdefault("chainId", self.chain_id)
        if "nonce" not in tx:
            tx["nonce"] = self.get_transaction_count()
        if not tx.get("gasPrice") and "maxFeePerGas" not in tx:
            tx["gasPrice"] = self.w3.eth.gas_price
        if not tx.get("gas"):
            tx["gas"] = self.w3.eth.estimate_gas({**tx, "from": self.address})
        signed = self.account.sign_transaction(tx)
        return HexBytes(signed.raw_transaction)

    def send_raw_transaction(self, raw: bytes) -> HexBytes:
        return HexBytes(self.w3.eth.send_raw_transaction(raw))

    def wait_for_receipt(self, tx_hash) -> TxReceipt:
        return self.w3.eth.wait_for_transaction_receipt(tx_hash)
