# permit2_swap/permit.py
"""Permit2 signing and calldata augmentation.

The 0x permit2 flow hands back an EIP-712 payload next to the transaction.
The taker signs it and the settler contract expects the signature appended
to the calldata as ``uint256(len(sig)) ++ sig``.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from hexbytes import HexBytes
from web3 import Web3

from .util import get_logger, on_error, parse_int

log = get_logger()

SIG_LENGTH_BYTES = 32

@dataclass(frozen=True)
class NoPermitRequired:
    pass

@dataclass(frozen=True)
class PermitSigned:
    signature: bytes

@dataclass(frozen=True)
class PermitSigningFailed:
    error: Exception

PermitOutcome = Union[NoPermitRequired, PermitSigned, PermitSigningFailed]

def permit_payload(quote: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return (quote.get("permit2") or {}).get("eip712") or None

def _coerce(type_name: str, value: Any, types: Dict[str, list]) -> Any:
    if type_name.endswith("]"):
        inner = type_name[:type_name.rindex("[")]
        return [_coerce(inner, v, types) for v in value]
    if type_name in types:
        return _coerce_struct(type_name, value, types)
    if type_name.startswith(("uint", "int")) and isinstance(value, str):
        return parse_int(value)
    return value

def _coerce_struct(type_name: str, data: Dict[str, Any], types: Dict[str, list]) -> Dict[str, Any]:
    out = dict(data)
    for field in types.get(type_name, []):
        name = field["name"]
        if name in out:
            out[name] = _coerce(field["type"], out[name], types)
    return out

def normalize_typed_data(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Turn decimal-string integers (as the API sends them) into ints."""
    types = payload.get("types", {})
    out = dict(payload)
    out["message"] = _coerce_struct(payload["primaryType"], payload.get("message", {}), types)
    out["domain"] = _coerce_struct("EIP712Domain", payload.get("domain", {}), types)
    return out

def sign_permit(client, quote: Dict[str, Any]) -> PermitOutcome:
    payload = permit_payload(quote)
    if payload is None:
        return NoPermitRequired()
    try:
        sig = client.sign_typed_data(normalize_typed_data(payload))
    except Exception as e:
        on_error(log, "Error signing permit2 coupon", e)
        return PermitSigningFailed(e)
    log.info("Signed permit2 message from quote response")
    return PermitSigned(bytes(sig))

def append_signature(data: Union[str, bytes], signature: bytes) -> str:
    raw = Web3.to_bytes(hexstr=data) if isinstance(data, str) else bytes(data)
    sig = bytes(signature)
    length = len(sig).to_bytes(SIG_LENGTH_BYTES, "big")
    return "0x" + (raw + length + sig).hex()

def split_signature(data: Union[str, bytes], sig_len: int = 65) -> Tuple[str, bytes]:
    """Inverse of append_signature: recover (original calldata, signature)."""
    raw = bytes(HexBytes(data))
    start = len(raw) - sig_len - SIG_LENGTH_BYTES
    if start < 0:
        raise ValueError("calldata too short for a length-prefixed signature")
    declared = int.from_bytes(raw[start:start + SIG_LENGTH_BYTES], "big")
    if declared != sig_len:
        raise ValueError(f"signature length word is {declared}, expected {sig_len}")
    return "0x" + raw[:start].hex(), raw[start + SIG_LENGTH_BYTES:]
