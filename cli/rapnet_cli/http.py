from __future__ import annotations

from rapnet_pricelist import RapnetClient
from rapnet_pricelist.config_types import ClientConfig

from .config import AppConfig, normalize_base_url


def make_client(
    cfg: AppConfig,
    *,
    pricelist_url_override: str | None = None,
    insecure: bool = False,
) -> RapnetClient:
    pricelist_url = normalize_base_url(pricelist_url_override or cfg.pricelist_url, warn=True)
    return RapnetClient(
        ClientConfig(
            client_id=cfg.credentials.client_id or None,
            client_secret=cfg.credentials.client_secret or None,
            redirect_uri=cfg.redirect_uri or None,
            pricelist_url=pricelist_url,
            authorization_url=cfg.authorization_url,
            machine_auth_url=cfg.machine_auth_url,
            verify_tls=cfg.verify_tls and not insecure,
            timeout_s=cfg.timeout_s,
        )
    )
