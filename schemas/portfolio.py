from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models.portfolio import ManualRecord


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExchangeTokenIn(_CamelSchema):
    public_token: Optional[str] = None
    institution_name: Optional[str] = None


class ManualImportIn(BaseModel):
    # Either parsed rows (untyped, normalised server-side) or raw CSV text
    rows: Optional[Any] = None
    csv: Optional[str] = None


class ManualImportOut(_CamelSchema):
    imported: int
    entries: List[ManualRecord]


class SyncOut(_CamelSchema):
    ok: bool = True
    synced_holdings: int
    synced_at: datetime


class SheetsSyncOut(_CamelSchema):
    ok: bool = True
    rows_written: int


class DeleteOut(BaseModel):
    removed: bool
