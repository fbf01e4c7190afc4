# permit2_swap/config.py
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

class ConfigError(RuntimeError):
    pass

def _env(name: str, default: str = "") -> str:
    v = (os.getenv(name) or default).strip()
    return v

def _env_int(name: str, default: int) -> int:
    v = _env(name)
    return int(v) if v else int(default)

def _env_float(name: str, default: float) -> float:
    v = _env(name)
    return float(v) if v else float(default)

def _env_bool(name: str, default: bool) -> bool:
    v = _env(name)
    if not v:
        return default
    return v.lower() in ("1","true","yes","y","on")

REQUIRED = ("PRIVATE_KEY", "ZERO_EX_API_KEY", "RPC_URL")

# Base mainnet
DEFAULT_CHAIN_ID = 8453
DEFAULT_SELL_TOKEN = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"  # USDC
DEFAULT_BUY_TOKEN = "0x50c5725949a6f0c72e6c4a641f24049a917db0cb"

@dataclass(frozen=True)
class Settings:
    private_key: str
    api_key: str
    rpc_url: str
    chain_id: int = DEFAULT_CHAIN_ID
    sell_token: str = DEFAULT_SELL_TOKEN
    buy_token: str = DEFAULT_BUY_TOKEN
    sell_symbol: str = "USDC"
    buy_symbol: str = "DAI"
    sell_decimals: int = 6
    buy_decimals: int = 18
    sell_amount: str = "1"
    iterations: int = 50
    api_base_url: str = "https://api.0x.org"
    api_version: str = "v2"
    http_timeout: float = 30.0
    fee_recipient: Optional[str] = None
    fee_bps: Optional[int] = None
    fee_token: Optional[str] = None

    @property
    def swap_fee(self) -> Optional[dict]:
        if not (self.fee_recipient and self.fee_bps is not None and self.fee_token):
            return None
        return {
            "swapFeeRecipient": self.fee_recipient,
            "swapFeeBps": str(self.fee_bps),
            "swapFeeToken": self.fee_token,
        }

def load_settings() -> Settings:
    """Read settings from the environment (and .env).

    Raises ConfigError before anything touches the network if a required value is absent.
    """
    for name in REQUIRED:
        if not _env(name):
            raise ConfigError(f"missing {name}.")

    pk = _env("PRIVATE_KEY")
    if not pk.startswith("0x"):
        pk = "0x" + pk

    fee_bps = _env("SWAP_FEE_BPS")
    return Settings(
        private_key=pk,
        api_key=_env("ZERO_EX_API_KEY"),
        rpc_url=_env("RPC_URL"),
        chain_id=_env_int("CHAIN_ID", DEFAULT_CHAIN_ID),
        sell_token=_env("SELL_TOKEN", DEFAULT_SELL_TOKEN),
        buy_token=_env("BUY_TOKEN", DEFAULT_BUY_TOKEN),
        sell_symbol=_env("SELL_TOKEN_SYMBOL", "USDC"),
        buy_symbol=_env("BUY_TOKEN_SYMBOL", "DAI"),
        sell_decimals=_env_int("SELL_TOKEN_DECIMALS", 6),
        buy_decimals=_env_int("BUY_TOKEN_DECIMALS", 18),
        sell_amount=_env("SELL_AMOUNT", "1"),
        iterations=_env_int("ITERATIONS", 50),
        api_base_url=_env("ZERO_EX_BASE_URL", "https://api.0x.org").rstrip("/"),
        api_version=_env("ZERO_EX_VERSION", "v2"),
        http_timeout=_env_float("HTTP_TIMEOUT", 30.0),
        fee_recipient=_env("SWAP_FEE_RECIPIENT") or None,
        fee_bps=int(fee_bps) if fee_bps else None,
        fee_token=_env("SWAP_FEE_TOKEN") or None,
    )

# ---- Logging flags ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()  # DEBUG/INFO/WARN/ERROR
LOG_COLOR = _env_bool("LOG_COLOR", True)
LOG_JSON  = _env_bool("LOG_JSON", False)
DEBUG     = _env_bool("DEBUG", False)
