from typing import List

from fastapi import APIRouter, Depends

from models.portfolio import LinkedAccountOut
from routers.deps import get_plaid_provider, get_store
from schemas.portfolio import ExchangeTokenIn, SyncOut
from services.plaid.plaid_link import create_link_session, link_account, list_linked_accounts
from services.plaid.plaid_provider import PlaidHoldingsProvider
from services.plaid.plaid_sync import sync_holdings
from services.portfolio_store import PortfolioStore

router = APIRouter()

# ----------- LINK TOKEN ----------------

@router.post("/plaid/create_link_token")
def create_link_token(provider: PlaidHoldingsProvider = Depends(get_plaid_provider)):
    return {"link_token": create_link_session(provider)}


# ----------- EXCHANGE TOKEN ----------------

@router.post("/plaid/exchange_public_token")
def exchange_public_token(
    body: ExchangeTokenIn,
    store: PortfolioStore = Depends(get_store),
    provider: PlaidHoldingsProvider = Depends(get_plaid_provider),
):
    link_account(store, provider, body.public_token, body.institution_name)
    return {"ok": True}


@router.get("/plaid/accounts", response_model=List[LinkedAccountOut])
def get_linked_accounts(store: PortfolioStore = Depends(get_store)):
    return list_linked_accounts(store)


# ----------- SYNC HOLDINGS ----------------

@router.post("/sync/plaid", response_model=SyncOut)
def sync_plaid(
    store: PortfolioStore = Depends(get_store),
    provider: PlaidHoldingsProvider = Depends(get_plaid_provider),
):
    result = sync_holdings(store, provider)
    return SyncOut(synced_holdings=result.synced_holdings, synced_at=result.synced_at)
