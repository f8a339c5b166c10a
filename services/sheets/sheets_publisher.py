"""
Google Sheets export of the merged portfolio.

Each publish overwrites one fixed range with the header row plus one row per
merged position, in a single values.update request. No diffing.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import gspread
import requests
from google.auth.exceptions import GoogleAuthError

from config.settings import Settings
from models.portfolio import MergedPosition
from services.errors import ExternalServiceError, PreconditionError
from services.merge_service import merged_positions
from services.portfolio_store import PortfolioStore

logger = logging.getLogger(__name__)

SHEET_HEADER = [
    "Source",
    "Account",
    "Symbol",
    "Name",
    "Quantity",
    "Price",
    "Value",
    "Cost Basis",
    "Last Updated",
]

ClientFactory = Callable[[Dict[str, Any]], gspread.Client]


def build_sheet_rows(positions: Sequence[MergedPosition]) -> List[List[Any]]:
    rows: List[List[Any]] = [list(SHEET_HEADER)]
    for p in positions:
        rows.append([
            p.source.value,
            p.account,
            p.symbol,
            p.name,
            p.quantity,
            p.price,
            p.value,
            p.cost_basis,
            p.last_updated.isoformat(),
        ])
    return rows


def _api_error_payload(exc: Exception) -> Any:
    error = getattr(exc, "error", None)
    if error:
        return error
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json()
        except ValueError:
            pass
    return str(exc)


class SheetsPublisher:
    def __init__(
        self,
        sheet_id: Optional[str],
        credentials_json: Optional[str],
        target_range: str = "Portfolio!A1",
        client_factory: ClientFactory = gspread.service_account_from_dict,
    ):
        self.sheet_id = sheet_id
        self.credentials_json = credentials_json
        self.target_range = target_range
        self._client_factory = client_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsPublisher":
        return cls(
            sheet_id=settings.google_sheet_id,
            credentials_json=settings.google_service_account_json,
            target_range=settings.google_sheet_range,
        )

    def _credentials(self) -> Dict[str, Any]:
        if not self.credentials_json or not self.sheet_id:
            raise PreconditionError("Missing GOOGLE_SERVICE_ACCOUNT_JSON or GOOGLE_SHEET_ID.")
        try:
            credentials = json.loads(self.credentials_json)
        except json.JSONDecodeError:
            raise PreconditionError("GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON.")
        if not isinstance(credentials, dict):
            raise PreconditionError("GOOGLE_SERVICE_ACCOUNT_JSON must be a JSON object.")
        return credentials

    def publish(self, positions: Sequence[MergedPosition]) -> int:
        """Overwrite the target range; returns data rows written (header excluded)."""
        credentials = self._credentials()
        rows = build_sheet_rows(positions)

        try:
            client = self._client_factory(credentials)
        except (ValueError, KeyError) as exc:
            raise PreconditionError(f"Invalid Google service account credentials: {exc}")

        try:
            spreadsheet = client.open_by_key(self.sheet_id)
            spreadsheet.values_update(
                self.target_range,
                params={"valueInputOption": "USER_ENTERED"},
                body={"values": rows},
            )
        except gspread.exceptions.APIError as exc:
            logger.warning("Google Sheets update failed: %s", type(exc).__name__)
            raise ExternalServiceError("Google Sheets update failed", payload=_api_error_payload(exc)) from exc
        except (gspread.exceptions.GSpreadException, GoogleAuthError, requests.RequestException) as exc:
            logger.warning("Google Sheets update failed: %s", type(exc).__name__)
            raise ExternalServiceError(f"Google Sheets update failed: {exc}") from exc

        written = len(rows) - 1
        logger.info("Google Sheets sync: range=%s rows_written=%d", self.target_range, written)
        return written


def publish_portfolio(store: PortfolioStore, publisher: SheetsPublisher) -> int:
    return publisher.publish(merged_positions(store.read()))
