from plaid import Configuration, ApiClient, Environment
from plaid.api import plaid_api

from config.settings import Settings

_ENV_MAP = {
    "sandbox": Environment.Sandbox,
    "production": Environment.Production,
}


def build_client(settings: Settings) -> plaid_api.PlaidApi:
    configuration = Configuration(
        host=_ENV_MAP.get(settings.plaid_env, Environment.Sandbox),
        api_key={
            "clientId": settings.plaid_client_id,
            "secret": settings.plaid_secret,
        },
    )
    return plaid_api.PlaidApi(ApiClient(configuration))
