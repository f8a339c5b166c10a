from fastapi import APIRouter, Depends

from config.settings import Settings
from routers.deps import get_app_settings

router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/config")
def config(settings: Settings = Depends(get_app_settings)):
    return {
        "plaidEnv": settings.plaid_env,
        "hasPlaidCredentials": settings.has_plaid_credentials,
        "hasGoogleSheetsConfig": settings.has_google_sheets_config,
    }
