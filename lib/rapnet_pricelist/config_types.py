from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable

from . import __version__

BASE_PATH_DEFAULT = "https://technet.rapnetapis.com"
AUTHORIZATION_URL_DEFAULT = "https://rapaport-prod.auth0.com"
MACHINE_AUTH_URL_DEFAULT = "https://authztoken.api.rapaport.com"
PRICELIST_URL_DEFAULT = "https://technet.rapnetapis.com/pricelist/api"
SCOPE_DEFAULT = "manageListings priceListWeekly instantInventory"
AUDIENCE_DEFAULT = "https://pricelist.rapnetapis.com"


@dataclass(frozen=True)
class ClientConfig:
    base_path: str = BASE_PATH_DEFAULT
    authorization_url: str = AUTHORIZATION_URL_DEFAULT
    machine_auth_url: str = MACHINE_AUTH_URL_DEFAULT
    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None
    token_callback: Callable[..., Any] | None = None
    pricelist_url: str = PRICELIST_URL_DEFAULT
    jwt: str | None = None
    scope: str = SCOPE_DEFAULT
    audience: str = AUDIENCE_DEFAULT
    verify_tls: bool = True
    timeout_s: float = 30.0
    max_retry_attempts: int = 2
    retry_on_status: tuple[int, ...] = (429, 503, 500)
    retry_backoff_s: float = 1.5
    form_encoded_token_exchange: bool = False
    user_agent: str = f"rapnet-pricelist/{__version__}"
