"""
Environment-driven settings.

Values come from the process environment (a local .env file is loaded
first). Secrets are only ever read here; never log a Settings instance.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


def _split(value: Optional[str], default: str) -> List[str]:
    return [part.strip() for part in (value or default).split(",") if part.strip()]


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    database_url: str = "sqlite:///portfolio.db"

    plaid_env: str = "sandbox"
    plaid_client_id: Optional[str] = None
    plaid_secret: Optional[str] = None
    plaid_products: List[str] = field(default_factory=lambda: ["investments"])
    plaid_country_codes: List[str] = field(default_factory=lambda: ["US"])
    plaid_redirect_uri: Optional[str] = None
    plaid_client_name: str = "Stonk App"
    plaid_client_user_id: str = "stonk-app-user"

    google_service_account_json: Optional[str] = None
    google_sheet_id: Optional[str] = None
    google_sheet_range: str = "Portfolio!A1"

    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @property
    def has_plaid_credentials(self) -> bool:
        return bool(self.plaid_client_id and self.plaid_secret)

    @property
    def has_google_sheets_config(self) -> bool:
        return bool(self.google_service_account_json and self.google_sheet_id)

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        return cls(
            port=int(env.get("PORT") or 3000),
            database_url=_clean(env.get("DATABASE_URL")) or "sqlite:///portfolio.db",
            plaid_env=(env.get("PLAID_ENV") or "sandbox").strip().lower(),
            plaid_client_id=_clean(env.get("PLAID_CLIENT_ID")),
            plaid_secret=_clean(env.get("PLAID_SECRET")),
            plaid_products=_split(env.get("PLAID_PRODUCTS"), "investments"),
            plaid_country_codes=_split(env.get("PLAID_COUNTRY_CODES"), "US"),
            plaid_redirect_uri=_clean(env.get("PLAID_REDIRECT_URI")),
            plaid_client_name=_clean(env.get("PLAID_CLIENT_NAME")) or "Stonk App",
            plaid_client_user_id=_clean(env.get("PLAID_CLIENT_USER_ID")) or "stonk-app-user",
            google_service_account_json=_clean(env.get("GOOGLE_SERVICE_ACCOUNT_JSON")),
            google_sheet_id=_clean(env.get("GOOGLE_SHEET_ID")),
            google_sheet_range=_clean(env.get("GOOGLE_SHEET_RANGE")) or "Portfolio!A1",
            cors_origins=_split(env.get("CORS_ORIGINS"), "http://localhost:3000"),
        )


def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
