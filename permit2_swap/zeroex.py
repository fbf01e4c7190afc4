# permit2_swap/zeroex.py
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from .util import get_logger

log = get_logger()

PRICE_PATH = "/swap/permit2/price"
QUOTE_PATH = "/swap/permit2/quote"

class ZeroExError(RuntimeError):
    def __init__(self, msg: str, status: Optional[int] = None, body: Any = None):
        super().__init__(msg)
        self.status = status
        self.body = body

def price_params(chain_id: int, sell_token: str, buy_token: str, sell_amount: int, taker: str,
                 swap_fee: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    params = {
        "chainId": str(chain_id),
        "sellToken": sell_token,
        "buyToken": buy_token,
        "sellAmount": str(sell_amount),
        "taker": taker,
    }
    if swap_fee:
        params.update(swap_fee)
    return params

class ZeroExClient:
    def __init__(self, api_key: str, base_url: str = "https://api.0x.org", version: str = "v2",
                 timeout: float = 30, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "0x-api-key": api_key,
            "0x-version": version,
        }

    def url(self, path: str, params: Dict[str, str]) -> str:
        return f"{self.base_url}{path}?{urlencode(params)}"

    def get_price(self, params: Dict[str, str]) -> Dict[str, Any]:
        return self._get(PRICE_PATH, params)

    def get_quote(self, params: Dict[str, str]) -> Dict[str, Any]:
        return self._get(QUOTE_PATH, dict(params))

    def _get(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            r = self.session.get(f"{self.base_url}{path}", params=params, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ZeroExError(f"0x request failed: {e}") from e
        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = {"text": r.text[:1000]}
            log.debug(f"[0x] HTTP {r.status_code} {path} body={body}")
            raise ZeroExError(f"0x {path} returned HTTP {r.status_code}", status=r.status_code, body=body)
        return r.json()
