# services/manual_service.py
import logging
from typing import Any, List, Optional, Sequence

from models.portfolio import ManualRecord
from services.errors import ValidationError
from services.manual_normalizer import normalize_batch, normalize_manual_entry, parse_delimited_rows
from services.portfolio_store import PortfolioStore

logger = logging.getLogger(__name__)


def list_manual(store: PortfolioStore) -> List[ManualRecord]:
    return store.read().manual_records


def add_manual(store: PortfolioStore, raw: Any) -> ManualRecord:
    entry = normalize_manual_entry(raw)
    if entry is None:
        raise ValidationError("account, symbol, and name are required.")

    with store.transaction() as document:
        document.manual_records.append(entry)
    logger.info("Added manual record id=%s symbol=%s", entry.id, entry.symbol)
    return entry


def import_manual(
    store: PortfolioStore,
    rows: Optional[Sequence[Any]] = None,
    csv_text: Optional[str] = None,
) -> List[ManualRecord]:
    """
    Normalise and insert a batch. Bad rows are dropped; the batch only fails
    when nothing at all survives normalisation.
    """
    if csv_text is not None and csv_text.strip():
        rows = parse_delimited_rows(csv_text)
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ValidationError("rows array is required.")

    entries = normalize_batch(rows)
    if not entries:
        raise ValidationError("No valid rows found. Each row needs account, symbol, and name.")

    with store.transaction() as document:
        document.manual_records.extend(entries)
    logger.info("Imported manual records: accepted=%d submitted=%d", len(entries), len(rows))
    return entries


def delete_manual(store: PortfolioStore, record_id: str) -> bool:
    """Remove a manual record by id. Missing ids are not an error."""
    with store.transaction() as document:
        before = len(document.manual_records)
        document.manual_records = [m for m in document.manual_records if m.id != record_id]
        removed = len(document.manual_records) != before
    logger.info("Delete manual record id=%s removed=%s", record_id, removed)
    return removed
