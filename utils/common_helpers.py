import json
import math
from decimal import Decimal
from typing import Any, Optional


def to_number(x: Any) -> float:
    """Coerce anything to a finite float; missing, blank, bad or NaN/Inf -> 0.0."""
    if x is None:
        return 0.0
    if isinstance(x, str):
        x = x.strip()
        if not x:
            return 0.0
    if isinstance(x, Decimal):
        x = float(x)
    try:
        value = float(x)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def clean_text(x: Any) -> str:
    if x is None:
        return ""
    return str(x).strip()


def decode_error_body(body: Any) -> Optional[Any]:
    """Best-effort decode of a provider error body (bytes/str JSON) for callers."""
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        s = body.strip()
        if not s:
            return None
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            return s
    return body
