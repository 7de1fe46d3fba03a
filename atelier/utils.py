from __future__ import annotations

import base64
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "$", "EUR": "€", "KES": "KSh"}


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def to_number(value: Any, default: float = 0.0) -> float:
    """Lenient numeric coercion: None, junk and NaN become `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(f) else f


def parse_ts(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def bytes_to_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def data_url_to_bytes(data_url: str) -> Optional[bytes]:
    if not data_url or not str(data_url).startswith("data:") or "," not in data_url:
        return None
    header, payload = str(data_url).split(",", 1)
    if not header.endswith(";base64"):
        return None
    try:
        return base64.b64decode(payload)
    except ValueError:
        return None


def format_currency(amount: Any, currency: str = "BRL") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    text = f"{to_number(amount):,.2f}"
    if currency == "BRL":
        # 1,234.56 -> 1.234,56
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol} {text}"
