# permit2_swap/util.py
import json
import logging
import sys
import time
from typing import Optional

from .config import LOG_LEVEL, LOG_COLOR, LOG_JSON, DEBUG

# --- pretty logging utils ---
RESET = "\x1b[0m"
YELLOW = "\x1b[33m"
COLORS = {
    "DEBUG": "\x1b[38;5;245m",
    "INFO":  "\x1b[38;5;39m",
    "WARNING": "\x1b[38;5;214m",
    "ERROR": "\x1b[38;5;203m",
    "CRITICAL": "\x1b[38;5;203m",
}

class _HumanFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        if LOG_COLOR:
            color = COLORS.get(level, "")
            return f"{color}{level.lower()[:5]:>5}{RESET} {msg}"
        return f"{level.lower()[:5]:>5} {msg}"

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": round(time.time(), 3),
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if DEBUG and record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR

_log = None

def get_logger(name="permit2_swap"):
    global _log
    return _log if _log else init_logging(name)

def init_logging(name="permit2_swap"):
    global _log
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    log = logging.getLogger(name)
    log.setLevel(level)
    fmt = _JsonFormatter() if LOG_JSON else _HumanFormatter()

    out = logging.StreamHandler(sys.stdout)
    out.setLevel(level)
    out.addFilter(_BelowError())
    out.setFormatter(fmt)

    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.ERROR)
    err.setFormatter(fmt)

    # avoid duplicate handlers
    log.handlers[:] = [out, err]
    log.propagate = False
    _log = log
    return log

def on_error(log, msg: str, exc: Optional[Exception] = None):
    if DEBUG and exc:
        log.error(msg, exc_info=exc)
    else:
        log.error(f"{msg}: {exc}" if exc else msg)

# --- pretty helpers ---
def banner(title: str = "", width: int = 85) -> str:
    if not title:
        return "#" * width
    inner = f"   {title.upper()}   "
    left = (width - len(inner)) // 2
    return "#" * left + inner + "#" * (width - left - len(inner))

def iteration_header(i: int) -> str:
    rule = "=" * 54
    title = f" Transaction {i} ".center(54, "=")
    if LOG_COLOR:
        return f"\n{YELLOW}{rule}\n{title}\n{rule}{RESET}"
    return f"\n{rule}\n{title}\n{rule}"

def short(x: object, keep: int = 6) -> str:
    if x is None:
        return "-"
    s = str(x)
    if s.startswith("0x") and len(s) > 2*keep+2:
        return f"{s[:2+keep]}…{s[-keep:]}"
    if len(s) > keep*2:
        return f"{s[:keep]}…{s[-keep:]}"
    return s

def fmt_amount(raw_amount: int, decimals: int) -> str:
    if decimals <= 0:
        return str(raw_amount)
    q = 10 ** decimals
    whole = raw_amount // q
    frac = raw_amount % q
    if frac == 0:
        return f"{whole}"
    # trim trailing zeros, limit length
    s = f"{frac:0{decimals}d}".rstrip("0")
    s = s[:8]  # keep short
    return f"{whole}.{s}"

def to_base_units(amount: str, decimals: int) -> int:
    """'1.5' with 6 decimals -> 1500000. Extra fractional digits are rejected."""
    amount = str(amount).strip()
    whole, _, frac = amount.partition(".")
    if len(frac) > decimals:
        raise ValueError(f"amount {amount!r} has more than {decimals} decimals")
    return int(whole or "0") * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")

def parse_int(v: object) -> int:
    """Decimal or 0x-hex string (as the 0x API sends them) to int."""
    if isinstance(v, str):
        s = v.strip()
        return int(s, 16) if s.lower().startswith("0x") else int(s)
    return int(v)
