"""
Full-refresh sync of Plaid investment holdings.

Every sync fetches holdings for every linked account and replaces the stored
holdings collection as a whole. A failure for any one linked account aborts
the sync and leaves the stored document untouched (all-or-nothing); there is
no per-account partial commit and no retry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from models.portfolio import (
    CanonicalHolding,
    LinkedAccount,
    UNKNOWN_SECURITY,
    UNKNOWN_SYMBOL,
    utc_now,
)
from services.portfolio_store import PortfolioStore
from utils.common_helpers import to_number

logger = logging.getLogger(__name__)


class HoldingsProvider(Protocol):
    def get_holdings(self, access_token: str) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class SyncResult:
    synced_holdings: int
    synced_at: datetime


def _get(d: Optional[dict], *keys: str):
    """Get first present key from dict (supports both snake_case and camelCase from Plaid)."""
    if not d:
        return None
    for k in keys:
        v = d.get(k)
        if v is not None:
            return v
    return None


def build_holding_id(item_id: str, account_id: Any, security_id: Any) -> str:
    return f"{item_id}:{account_id}:{security_id}"


def normalize_holdings(
    linked_account: LinkedAccount,
    response: Dict[str, Any],
    synced_at: datetime,
) -> List[CanonicalHolding]:
    account_lookup = {}
    for a in response.get("accounts") or []:
        aid = _get(a, "account_id", "accountId")
        if aid:
            account_lookup[aid] = a
    security_lookup = {}
    for s in response.get("securities") or []:
        sid = _get(s, "security_id", "securityId")
        if sid:
            security_lookup[sid] = s

    normalized = []
    for h in response.get("holdings") or []:
        acc_id = _get(h, "account_id", "accountId")
        sec_id = _get(h, "security_id", "securityId")
        acc = account_lookup.get(acc_id)
        sec = security_lookup.get(sec_id)

        normalized.append(CanonicalHolding(
            id=build_holding_id(linked_account.id, acc_id, sec_id),
            item_id=linked_account.id,
            account_name=_get(acc, "name") or linked_account.institution_name,
            symbol=_get(sec, "ticker_symbol", "tickerSymbol") or UNKNOWN_SYMBOL,
            name=_get(sec, "name") or UNKNOWN_SECURITY,
            quantity=to_number(_get(h, "quantity")),
            price=to_number(_get(h, "institution_price", "institutionPrice")),
            value=to_number(_get(h, "institution_value", "institutionValue")),
            cost_basis=to_number(_get(h, "cost_basis", "costBasis")),
            last_updated=synced_at,
        ))
    return normalized


def sync_holdings(store: PortfolioStore, provider: HoldingsProvider) -> SyncResult:
    """
    Refresh holdings for every linked account and replace the stored set.
    Provider errors propagate unchanged; in that case nothing is written.
    """
    with store.transaction() as document:
        synced_at = utc_now()
        holdings: List[CanonicalHolding] = []
        for linked_account in document.linked_accounts:
            response = provider.get_holdings(linked_account.access_token)
            batch = normalize_holdings(linked_account, response, synced_at)
            logger.info(
                "Plaid sync: linked_account=%s institution=%s holdings=%d",
                linked_account.id, linked_account.institution_name, len(batch),
            )
            holdings.extend(batch)

        document.holdings = holdings
        document.last_sync_at = synced_at

    logger.info(
        "Plaid sync complete: linked_accounts=%d holdings=%d",
        len(document.linked_accounts), len(holdings),
    )
    return SyncResult(synced_holdings=len(holdings), synced_at=synced_at)
