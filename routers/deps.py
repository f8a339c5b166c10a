# routers/deps.py
from functools import lru_cache

from fastapi import Depends

from config.settings import Settings, get_settings
from services.plaid.plaid_provider import PlaidHoldingsProvider
from services.portfolio_store import PortfolioStore
from services.sheets.sheets_publisher import SheetsPublisher


@lru_cache
def get_app_settings() -> Settings:
    return get_settings()


@lru_cache
def get_store() -> PortfolioStore:
    from database import SessionLocal

    return PortfolioStore(SessionLocal)


def get_plaid_provider(settings: Settings = Depends(get_app_settings)) -> PlaidHoldingsProvider:
    return PlaidHoldingsProvider(settings)


def get_sheets_publisher(settings: Settings = Depends(get_app_settings)) -> SheetsPublisher:
    return SheetsPublisher.from_settings(settings)
