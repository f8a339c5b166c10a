# routers/portfolio_routes.py
from fastapi import APIRouter, Depends

from models.portfolio import PortfolioView
from routers.deps import get_sheets_publisher, get_store
from schemas.portfolio import SheetsSyncOut
from services.merge_service import list_portfolio
from services.portfolio_store import PortfolioStore
from services.sheets.sheets_publisher import SheetsPublisher, publish_portfolio

router = APIRouter()


@router.get("/portfolio", response_model=PortfolioView)
def portfolio(store: PortfolioStore = Depends(get_store)):
    return list_portfolio(store)


@router.post("/google-sheets/sync", response_model=SheetsSyncOut)
def google_sheets_sync(
    store: PortfolioStore = Depends(get_store),
    publisher: SheetsPublisher = Depends(get_sheets_publisher),
):
    return SheetsSyncOut(rows_written=publish_portfolio(store, publisher))
