"""Linking brokerage accounts through Plaid Link."""

import logging
from typing import List, Optional

from models.portfolio import DEFAULT_INSTITUTION, LinkedAccount, LinkedAccountOut
from services.errors import ValidationError
from services.plaid.plaid_provider import PlaidHoldingsProvider
from services.portfolio_store import PortfolioStore
from utils.common_helpers import clean_text

logger = logging.getLogger(__name__)


def create_link_session(provider: PlaidHoldingsProvider) -> str:
    return provider.create_link_token()


def link_account(
    store: PortfolioStore,
    provider: PlaidHoldingsProvider,
    public_token: Optional[str],
    institution_name: Optional[str] = None,
) -> LinkedAccount:
    public_token = clean_text(public_token)
    if not public_token:
        raise ValidationError("publicToken is required.")

    # Exchange before touching the store so a provider failure commits nothing
    exchange = provider.exchange_public_token(public_token)
    linked = LinkedAccount(
        institution_name=clean_text(institution_name) or DEFAULT_INSTITUTION,
        access_token=exchange.access_token,
        item_id=exchange.item_id,
    )
    with store.transaction() as document:
        document.linked_accounts.append(linked)

    logger.info("Linked account id=%s institution=%s", linked.id, linked.institution_name)
    return linked


def list_linked_accounts(store: PortfolioStore) -> List[LinkedAccountOut]:
    return [
        LinkedAccountOut(
            id=a.id,
            institution_name=a.institution_name,
            item_id=a.item_id,
            created_at=a.created_at,
        )
        for a in store.read().linked_accounts
    ]
