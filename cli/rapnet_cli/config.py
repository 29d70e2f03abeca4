from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import tomli_w
from platformdirs import user_config_dir

from rapnet_pricelist.config_types import (
    AUTHORIZATION_URL_DEFAULT,
    MACHINE_AUTH_URL_DEFAULT,
    PRICELIST_URL_DEFAULT,
)

from . import console

APP_NAME = "rapnet"
CONFIG_FILENAME = "config.toml"
ENV_CLIENT_ID = "RAPNET_CLIENT_ID"
ENV_CLIENT_SECRET = "RAPNET_CLIENT_SECRET"
ENV_PRICELIST_URL = "RAPNET_PRICELIST_URL"

SETTING_KEYS = (
    "client_id",
    "redirect_uri",
    "pricelist_url",
    "authorization_url",
    "machine_auth_url",
    "verify_tls",
    "timeout_s",
)

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}
_warned_urls: set[str] = set()


@dataclass
class CredentialsConfig:
    client_id: str = ""
    client_secret: str = ""


@dataclass
class AppConfig:
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    redirect_uri: str = ""
    pricelist_url: str = PRICELIST_URL_DEFAULT
    authorization_url: str = AUTHORIZATION_URL_DEFAULT
    machine_auth_url: str = MACHINE_AUTH_URL_DEFAULT
    verify_tls: bool = True
    timeout_s: float = 30.0


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip().rstrip("/")
    if not value or "://" in value:
        return value
    host = (urlsplit(f"//{value}").hostname or "").lower()
    scheme = "http" if host in _LOCAL_HOSTS else "https"
    normalized = f"{scheme}://{value}"
    if warn and normalized not in _warned_urls and sys.stderr.isatty():
        console.warn(f"URL missing scheme, assuming {normalized}")
        _warned_urls.add(normalized)
    return normalized



def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "pricelist_url": cfg.pricelist_url,
        "authorization_url": cfg.authorization_url,
        "machine_auth_url": cfg.machine_auth_url,
        "redirect_uri": cfg.redirect_uri,
        "verify_tls": cfg.verify_tls,
        "timeout_s": cfg.timeout_s,
        "credentials": {
            "client_id": cfg.credentials.client_id,
            "client_secret": cfg.credentials.client_secret,
        },
    }


def _url_or_default(data: dict[str, Any], key: str, default: str) -> str:
    return normalize_base_url(str(data.get(key) or ""), warn=True) or default


def from_toml(data: dict[str, Any]) -> AppConfig:
    creds_raw = data.get("credentials") or {}
    client_id = ""
    client_secret = ""
    if isinstance(creds_raw, dict):
        client_id = str(creds_raw.get("client_id") or "").strip()
        client_secret = str(creds_raw.get("client_secret") or "").strip()

    verify_tls = data.get("verify_tls")
    timeout_s = data.get("timeout_s")
    try:
        timeout = float(timeout_s) if timeout_s is not None else 30.0
    except (TypeError, ValueError):
        timeout = 30.0

    return AppConfig(
        credentials=CredentialsConfig(client_id=client_id, client_secret=client_secret),
        redirect_uri=str(data.get("redirect_uri") or "").strip(),
        pricelist_url=_url_or_default(data, "pricelist_url", PRICELIST_URL_DEFAULT),
        authorization_url=_url_or_default(data, "authorization_url", AUTHORIZATION_URL_DEFAULT),
        machine_auth_url=_url_or_default(data, "machine_auth_url", MACHINE_AUTH_URL_DEFAULT),
        verify_tls=verify_tls if isinstance(verify_tls, bool) else True,
        timeout_s=timeout,
    )


def apply_env(cfg: AppConfig) -> AppConfig:
    client_id = os.getenv(ENV_CLIENT_ID, "").strip()
    if client_id:
        cfg.credentials.client_id = client_id
    client_secret = os.getenv(ENV_CLIENT_SECRET, "").strip()
    if client_secret:
        cfg.credentials.client_secret = client_secret
    pricelist_url = os.getenv(ENV_PRICELIST_URL, "").strip()
    if pricelist_url:
        cfg.pricelist_url = normalize_base_url(pricelist_url)
    return cfg


def load_config(*, with_env: bool = True) -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except FileNotFoundError:
        cfg = default_config()
    return apply_env(cfg) if with_env else cfg


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path


def get_setting(cfg: AppConfig, key: str) -> Any:
    k = key.strip().lower()
    if k == "client_id":
        return cfg.credentials.client_id
    if k not in SETTING_KEYS:
        raise KeyError(key)
    return getattr(cfg, k)
