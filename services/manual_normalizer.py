"""
Validation and coercion of manually entered positions.

Raw input is an untyped key/value mapping (a JSON body or a parsed CSV row).
It leaves this module either as a ManualRecord or as a rejection (None);
nothing untyped gets past here.
"""
from __future__ import annotations

import csv
import io
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.portfolio import ManualRecord
from services.errors import ValidationError
from utils.common_helpers import clean_text, to_number

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]

# Header spellings seen in broker exports -> record field names
_FIELD_ALIASES = {
    "account": "account",
    "accountname": "account",
    "symbol": "symbol",
    "ticker": "symbol",
    "name": "name",
    "description": "name",
    "quantity": "quantity",
    "qty": "quantity",
    "shares": "quantity",
    "price": "price",
    "costbasis": "costBasis",
}


def normalize_manual_entry(raw: Optional[RawRecord]) -> Optional[ManualRecord]:
    """Return a ManualRecord, or None when account/symbol/name is missing."""
    if not isinstance(raw, Mapping):
        return None

    account = clean_text(raw.get("account"))
    symbol = clean_text(raw.get("symbol")).upper()
    name = clean_text(raw.get("name"))
    if not account or not symbol or not name:
        return None

    cost_basis = raw.get("costBasis")
    if cost_basis is None:
        cost_basis = raw.get("cost_basis")

    return ManualRecord(
        account=account,
        symbol=symbol,
        name=name,
        quantity=to_number(raw.get("quantity")),
        price=to_number(raw.get("price")),
        cost_basis=to_number(cost_basis),
    )


def normalize_batch(rows: Iterable[Any]) -> List[ManualRecord]:
    entries: List[ManualRecord] = []
    rejected = 0
    for row in rows:
        entry = normalize_manual_entry(row)
        if entry is None:
            rejected += 1
            continue
        entries.append(entry)
    if rejected:
        logger.info("Manual import: accepted=%d rejected=%d", len(entries), rejected)
    return entries


def canonical_field(header: str) -> str:
    key = re.sub(r"[\s_\-]+", "", header).lower()
    return _FIELD_ALIASES.get(key, header.strip())


def parse_delimited_rows(text: str, delimiter: str = ",") -> List[Dict[str, str]]:
    """
    Parse CSV text into raw rows.

    The first non-blank line names the fields; every later non-blank line is
    mapped onto them by position. Short lines leave the missing fields empty,
    extra trailing cells are dropped.
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if len(lines) < 2:
        raise ValidationError("CSV must include a header row and at least one data row.")

    reader = csv.reader(io.StringIO("\n".join(lines)), delimiter=delimiter)
    try:
        header, *records = list(reader)
    except csv.Error as exc:
        raise ValidationError(f"Could not parse CSV: {exc}")

    fields = [canonical_field(h) for h in header]
    rows: List[Dict[str, str]] = []
    for cells in records:
        if not any(cell.strip() for cell in cells):
            continue
        rows.append({
            field: (cells[i] if i < len(cells) else "")
            for i, field in enumerate(fields)
        })
    return rows
