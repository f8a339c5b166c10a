"""
Thin wrapper over the Plaid SDK for the three calls this backend makes.

SDK and transport failures are converted to ExternalServiceError here so the
rest of the code only ever sees the shared error taxonomy.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from plaid.api import plaid_api
from plaid.exceptions import ApiException
from plaid.model.country_code import CountryCode
from plaid.model.investments_holdings_get_request import InvestmentsHoldingsGetRequest
from plaid.model.item_public_token_exchange_request import ItemPublicTokenExchangeRequest
from plaid.model.link_token_create_request import LinkTokenCreateRequest
from plaid.model.link_token_create_request_user import LinkTokenCreateRequestUser
from plaid.model.products import Products
from urllib3.exceptions import HTTPError

from config.settings import Settings
from services.errors import ExternalServiceError, PreconditionError
from services.plaid.plaid_config import build_client
from utils.common_helpers import decode_error_body

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenExchange:
    access_token: str
    item_id: Optional[str] = None


def _provider_error(exc: Exception, action: str) -> ExternalServiceError:
    if isinstance(exc, ApiException):
        payload = decode_error_body(exc.body)
        logger.warning("Plaid %s failed: status=%s", action, exc.status)
        return ExternalServiceError(f"Plaid {action} failed", payload=payload or str(exc))
    logger.warning("Plaid %s failed: %s", action, type(exc).__name__)
    return ExternalServiceError(f"Plaid {action} failed: provider unreachable")


class PlaidHoldingsProvider:
    def __init__(self, settings: Settings, client: Optional[plaid_api.PlaidApi] = None):
        self._settings = settings
        self._client = client

    @property
    def client(self) -> plaid_api.PlaidApi:
        if not self._settings.has_plaid_credentials:
            raise PreconditionError("Missing PLAID_CLIENT_ID or PLAID_SECRET.")
        if self._client is None:
            self._client = build_client(self._settings)
        return self._client

    def create_link_token(self) -> str:
        client = self.client
        request = LinkTokenCreateRequest(
            products=[Products(p.lower()) for p in self._settings.plaid_products],
            client_name=self._settings.plaid_client_name,
            country_codes=[CountryCode(c.upper()) for c in self._settings.plaid_country_codes],
            language="en",
            user=LinkTokenCreateRequestUser(client_user_id=self._settings.plaid_client_user_id),
        )
        if self._settings.plaid_redirect_uri:
            request.redirect_uri = self._settings.plaid_redirect_uri
        try:
            response = client.link_token_create(request)
        except (ApiException, HTTPError) as exc:
            raise _provider_error(exc, "link token creation") from exc
        return response.link_token

    def exchange_public_token(self, public_token: str) -> TokenExchange:
        client = self.client
        try:
            response = client.item_public_token_exchange(
                ItemPublicTokenExchangeRequest(public_token=public_token)
            )
        except (ApiException, HTTPError) as exc:
            raise _provider_error(exc, "token exchange") from exc
        return TokenExchange(access_token=response.access_token, item_id=response.item_id)

    def get_holdings(self, access_token: str) -> Dict[str, Any]:
        """Return the investments/holdings/get payload as a plain dict."""
        client = self.client
        try:
            response = client.investments_holdings_get(
                InvestmentsHoldingsGetRequest(access_token=access_token)
            )
        except (ApiException, HTTPError) as exc:
            raise _provider_error(exc, "holdings fetch") from exc
        return response.to_dict()
