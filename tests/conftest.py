from unittest import mock

import pytest
from eth_account import Account
from hexbytes import HexBytes

from permit2_swap.chain import ChainClient
from permit2_swap.swap import SwapContext
from permit2_swap.tokens import Token
from permit2_swap.zeroex import ZeroExClient

TEST_KEY = "0x" + "11" * 32
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
BUY = "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb"
PERMIT2 = "0x000000000022D473030F116dDEE9F6B43aC78BA3"
SETTLER = "0x" + "22" * 20
SIGNATURE = bytes(range(1, 66))

def permit_eip712(amount="1000000"):
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "PermitTransferFrom": [
                {"name": "permitted", "type": "TokenPermissions"},
                {"name": "spender", "type": "address"},
                {"name": "nonce", "type": "uint256"},
                {"name": "deadline", "type": "uint256"},
            ],
            "TokenPermissions": [
                {"name": "token", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
        },
        "domain": {"name": "Permit2", "chainId": 8453, "verifyingContract": PERMIT2},
        "message": {
            "permitted": {"token": USDC, "amount": amount},
            "spender": SETTLER,
            "nonce": "2241959297937691820908574931991575",
            "deadline": "1733788149",
        },
        "primaryType": "PermitTransferFrom",
    }

def price_response(allowance=None):
    return {
        "buyAmount": "278000000000000",
        "sellAmount": "1000000",
        "issues": {"allowance": allowance, "balance": None, "simulationIncomplete": False},
    }

def quote_response(data="0xaa", permit=True, **tx):
    transaction = {"to": SETTLER, "data": data, "gas": "210000", "gasPrice": "5000000", "value": "0"}
    transaction.update(tx)
    return {
        "permit2": {"type": "Permit2", "hash": "0x" + "33" * 32, "eip712": permit_eip712()} if permit else None,
        "transaction": transaction,
    }

@pytest.fixture
def account():
    return Account.from_key(TEST_KEY)

@pytest.fixture
def client(account):
    c = mock.Mock(spec=ChainClient)
    c.chain_id = 8453
    c.address = account.address
    c.sign_typed_data.return_value = HexBytes(SIGNATURE)
    c.get_transaction_count.return_value = 7
    c.sign_transaction.return_value = HexBytes(b"\xf8\x6b")
    c.send_raw_transaction.return_value = HexBytes("0x" + "ab" * 32)
    c.wait_for_receipt.return_value = {"status": 1}
    return c

@pytest.fixture
def api():
    a = mock.Mock(spec=ZeroExClient)
    a.url.return_value = "https://api.0x.org/swap/permit2/price?chainId=8453"
    a.get_price.return_value = price_response()
    a.get_quote.return_value = quote_response()
    return a

@pytest.fixture
def ctx(client, api):
    sell = mock.Mock(spec=Token)
    sell.symbol, sell.address = "USDC", USDC
    sell.decimals.return_value = 6
    sell.approve.return_value = HexBytes("0x" + "cd" * 32)
    sell.balance_of.return_value = 5_500_000
    buy = mock.Mock(spec=Token)
    buy.symbol, buy.address = "DAI", BUY
    buy.decimals.return_value = 18
    buy.balance_of.return_value = 2 * 10 ** 18
    return SwapContext(client=client, api=api, sell_token=sell, buy_token=buy, sell_amount=1_000_000)
