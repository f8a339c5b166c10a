# services/merge_service.py
from __future__ import annotations

from math import fsum
from typing import Dict, Iterable, List

from models.portfolio import (
    MergedPosition,
    PortfolioDocument,
    PortfolioView,
    PositionSource,
)
from services.portfolio_store import PortfolioStore
from utils.common_helpers import to_number

UNKNOWN_BUCKET = "Unknown"


def merged_positions(document: PortfolioDocument) -> List[MergedPosition]:
    """Plaid holdings first, then manual records, each in stored order."""
    plaid_rows = [
        MergedPosition(
            id=h.id,
            source=PositionSource.PLAID,
            account=h.account_name,
            symbol=h.symbol,
            name=h.name,
            quantity=h.quantity,
            price=h.price,
            value=h.value,
            cost_basis=h.cost_basis,
            last_updated=h.last_updated,
        )
        for h in document.holdings
    ]
    manual_rows = [
        MergedPosition(
            id=m.id,
            source=PositionSource.MANUAL,
            account=m.account,
            symbol=m.symbol,
            name=m.name,
            quantity=m.quantity,
            price=m.price,
            value=m.value,
            cost_basis=m.cost_basis,
            last_updated=m.updated_at,
        )
        for m in document.manual_records
    ]
    return plaid_rows + manual_rows


def _bucket(position: MergedPosition, key: str) -> str:
    label = getattr(position, key)
    if isinstance(label, PositionSource):
        label = label.value
    return label or UNKNOWN_BUCKET


def group_value_by(positions: Iterable[MergedPosition], key: str) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for p in positions:
        bucket = _bucket(p, key)
        totals[bucket] = totals.get(bucket, 0.0) + to_number(p.value)
    return totals


def build_portfolio_view(document: PortfolioDocument) -> PortfolioView:
    positions = merged_positions(document)
    return PortfolioView(
        total_value=fsum(to_number(p.value) for p in positions),
        positions=positions,
        breakdown_by_source=group_value_by(positions, "source"),
        breakdown_by_account=group_value_by(positions, "account"),
        last_plaid_sync_at=document.last_sync_at,
    )


def list_portfolio(store: PortfolioStore) -> PortfolioView:
    return build_portfolio_view(store.read())
