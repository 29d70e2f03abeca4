from __future__ import annotations

import logging
import warnings
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from .config_types import ClientConfig
from .errors import ApiError, AuthorizationRedirect, MissingArgumentError, NetworkError
from .result import Err, Ok, Result
from .transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_SHAPE = "Round"
JSON = "application/json"


def _join(base: str, path: str) -> str:
    return f"{base.rstrip('/')}{path}"


def _flag(value: bool | str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RapnetClient:
    """
    Client for the RapNet price list API.

    Request methods return ``Ok(payload)`` or ``Err(kind, message, ...)``;
    transport and HTTP failures never escape as exceptions.
    """

    def __init__(self, cfg: ClientConfig | None = None, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg or ClientConfig()
        self._t = Transport(self._cfg, transport=transport)

    @classmethod
    def from_credentials(
            cls,
            client_id: str | None = None,
            client_secret: str | None = None,
            **overrides: Any,
    ) -> "RapnetClient":
        transport = overrides.pop("transport", None)
        cfg = ClientConfig(client_id=client_id, client_secret=client_secret, **overrides)
        return cls(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "RapnetClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(self, method: str, url: str, **kwargs: Any) -> Result:
        try:
            data = self._t.request(method, url, **kwargs)
        except (ApiError, NetworkError) as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            return Err.from_exception(exc)
        return Ok(data)

    def _pricelist_get(self, path: str, token: str, params: dict[str, Any], accept: str) -> Result:
        headers = {
            "Accept": accept,
            "Content-Type": JSON,
            "Authorization": f"Bearer {token}",
        }
        return self._call("GET", _join(self._cfg.pricelist_url, path), params=params, headers=headers)

    # --- authorization-code flow ---
    def authorization_url(self, redirect_url: str) -> str:
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self._cfg.client_id or "",
                "redirect_uri": redirect_url,
                "audience": self._cfg.audience,
                "scope": self._cfg.scope,
            },
            quote_via=quote,
        )
        return f"{_join(self._cfg.authorization_url, '/authorize')}?{query}"

    def authorize(self, redirect_url: str) -> None:
        """Send the user to the identity provider. Never returns."""
        raise AuthorizationRedirect(self.authorization_url(redirect_url))

    def get_auth_token(self, code: str, redirect_url: str) -> Result:
        body = {
            "client_id": self._cfg.client_id,
            "client_secret": self._cfg.client_secret,
            "code": code,
            "redirect_uri": redirect_url,
        }
        url = _join(self._cfg.machine_auth_url, "/api/get")
        if self._cfg.form_encoded_token_exchange:
            return self._call("POST", url, form_body={k: v or "" for k, v in body.items()})
        # The token service has always been sent JSON under a form content type.
        return self._call(
            "POST",
            url,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            json_body=body,
        )

    # --- machine-to-machine flow ---
    def get_auth_token_machine_to_machine_method(self) -> Result:
        return self._call(
            "GET",
            _join(self._cfg.machine_auth_url, "/api/get"),
            headers={"Content-Type": JSON},
            json_body={
                "client_id": self._cfg.client_id,
                "client_secret": self._cfg.client_secret,
            },
        )

    def get_auth_token_machine_to_machin_method(self) -> Result:
        warnings.warn(
            "get_auth_token_machine_to_machin_method is deprecated, "
            "use get_auth_token_machine_to_machine_method",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get_auth_token_machine_to_machine_method()

    # --- price list ---
    def get_prices_list(self, token: str, shape: str = DEFAULT_SHAPE, accept_type: str = JSON) -> Result:
        return self._pricelist_get("/Prices/list", token, {"shape": shape}, accept_type)

    def get_normalized_prices_list(
            self,
            token: str,
            shape: str = DEFAULT_SHAPE,
            csvnormalized: bool = True,
    ) -> Result:
        params = {"shape": shape, "csvnormalized": _flag(csvnormalized)}
        return self._pricelist_get("/Prices/list", token, params, "text/csv")

    def get_price_items(
            self,
            token: str,
            shape: str = DEFAULT_SHAPE,
            *,
            size: str | float,
            color: str,
            clarity: str,
            accept_type: str = JSON,
    ) -> Result:
        params = {"shape": shape, "size": size, "color": color, "clarity": clarity}
        for name in ("size", "color", "clarity"):
            if params[name] is None or str(params[name]).strip() == "":
                raise MissingArgumentError(name)
        return self._pricelist_get("/Prices", token, params, accept_type)

    def get_prices_changes(self, token: str, shape: str = DEFAULT_SHAPE) -> Result:
        return self._pricelist_get("/Prices/changes", token, {"shape": shape}, JSON)
