from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN_SYMBOL = "N/A"
UNKNOWN_SECURITY = "Unknown security"
DEFAULT_INSTITUTION = "Connected account"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PositionSource(str, Enum):
    PLAID = "Plaid"
    MANUAL = "Manual"


class LinkedAccount(CamelModel):
    id: str = Field(default_factory=new_id)
    institution_name: str = DEFAULT_INSTITUTION
    access_token: str
    item_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class LinkedAccountOut(CamelModel):
    """Public view of a LinkedAccount; the access token never leaves the store."""

    id: str
    institution_name: str
    item_id: Optional[str] = None
    created_at: datetime


class CanonicalHolding(CamelModel):
    id: str
    item_id: str
    account_name: str
    symbol: str = UNKNOWN_SYMBOL
    name: str = UNKNOWN_SECURITY
    quantity: float = 0.0
    price: float = 0.0
    value: float = 0.0
    cost_basis: float = 0.0
    last_updated: datetime


class ManualRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    account: str
    symbol: str
    name: str
    quantity: float = 0.0
    price: float = 0.0
    cost_basis: float = 0.0
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def value(self) -> float:
        return self.quantity * self.price


class PortfolioDocument(CamelModel):
    linked_accounts: List[LinkedAccount] = Field(default_factory=list)
    holdings: List[CanonicalHolding] = Field(default_factory=list)
    manual_records: List[ManualRecord] = Field(default_factory=list)
    last_sync_at: Optional[datetime] = None


class MergedPosition(CamelModel):
    id: str
    source: PositionSource
    account: str
    symbol: str
    name: str
    quantity: float
    price: float
    value: float
    cost_basis: float
    last_updated: datetime


class PortfolioView(CamelModel):
    total_value: float
    positions: List[MergedPosition]
    breakdown_by_source: Dict[str, float]
    breakdown_by_account: Dict[str, float]
    last_plaid_sync_at: Optional[datetime] = None
