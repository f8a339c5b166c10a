# routers/manual_routes.py
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from models.portfolio import ManualRecord
from routers.deps import get_store
from schemas.portfolio import DeleteOut, ManualImportIn, ManualImportOut
from services.manual_service import add_manual, delete_manual, import_manual, list_manual
from services.portfolio_store import PortfolioStore

router = APIRouter(prefix="/manual-investments")


@router.get("", response_model=List[ManualRecord])
def get_manual_investments(store: PortfolioStore = Depends(get_store)):
    return list_manual(store)


@router.post("", response_model=ManualRecord, status_code=201)
def create_manual_investment(
    raw: Dict[str, Any] = Body(...),
    store: PortfolioStore = Depends(get_store),
):
    return add_manual(store, raw)


@router.post("/import", response_model=ManualImportOut, status_code=201)
def import_manual_investments(
    body: ManualImportIn,
    store: PortfolioStore = Depends(get_store),
):
    entries = import_manual(store, rows=body.rows, csv_text=body.csv)
    return ManualImportOut(imported=len(entries), entries=entries)


@router.delete("/{record_id}", response_model=DeleteOut)
def remove_manual_investment(record_id: str, store: PortfolioStore = Depends(get_store)):
    return DeleteOut(removed=delete_manual(store, record_id))
