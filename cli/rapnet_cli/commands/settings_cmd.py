from __future__ import annotations

import os

import typer

from .. import console
from ..config import (
    SETTING_KEYS,
    config_path,
    default_config,
    get_setting,
    load_config,
    normalize_base_url,
    save_config,
)

app = typer.Typer(help="Manage local CLI settings (~/.config/rapnet/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        client_id: str = typer.Option(..., "--client-id", prompt="Client ID", help="RapNet API client ID."),
        client_secret: str = typer.Option(
            ...,
            "--client-secret",
            prompt="Client secret",
            hide_input=True,
            help="RapNet API client secret.",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.credentials.client_id = client_id.strip()
    cfg.credentials.client_secret = client_secret.strip()
    if not cfg.credentials.client_id:
        console.err("Client ID cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    secret_state = "(set)" if cfg.credentials.client_secret else "(empty)"
    console.console.print(
        f"client_id={cfg.credentials.client_id or '-'} client_secret={secret_state} "
        f"pricelist_url={cfg.pricelist_url} verify_tls={str(cfg.verify_tls).lower()}"
    )


@app.command("get")
def get_setting_cmd(
        key: str = typer.Argument(..., help=f"Setting key ({', '.join(SETTING_KEYS)})."),
):
    cfg = load_config()
    try:
        value = get_setting(cfg, key)
    except KeyError:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    if isinstance(value, bool):
        value = str(value).lower()
    console.console.print(str(value))


@app.command("set")
def set_setting(
        client_id: str | None = typer.Option(None, "--client-id", help="Set client ID."),
        client_secret: str | None = typer.Option(None, "--client-secret", help="Set client secret."),
        redirect_uri: str | None = typer.Option(None, "--redirect-uri", help="Default redirect URI."),
        pricelist_url: str | None = typer.Option(None, "--pricelist-url", help="Set price list API URL."),
        authorization_url: str | None = typer.Option(
            None, "--authorization-url", help="Set authorization server URL."
        ),
        machine_auth_url: str | None = typer.Option(
            None, "--machine-auth-url", help="Set token endpoint host URL."
        ),
        verify_tls: bool | None = typer.Option(
            None,
            "--verify-tls/--no-verify-tls",
            help="Enable or disable TLS certificate verification.",
        ),
        timeout_s: float | None = typer.Option(None, "--timeout", min=0.1, help="Request timeout in seconds."),
):
    cfg = load_config(with_env=False)
    if client_id is not None:
        cfg.credentials.client_id = client_id.strip()
    if client_secret is not None:
        cfg.credentials.client_secret = client_secret.strip()
    if redirect_uri is not None:
        cfg.redirect_uri = redirect_uri.strip()
    if pricelist_url is not None:
        cfg.pricelist_url = normalize_base_url(pricelist_url, warn=True)
    if authorization_url is not None:
        cfg.authorization_url = normalize_base_url(authorization_url, warn=True)
    if machine_auth_url is not None:
        cfg.machine_auth_url = normalize_base_url(machine_auth_url, warn=True)
    if verify_tls is not None:
        cfg.verify_tls = verify_tls
        if not verify_tls:
            console.warn("TLS certificate verification disabled.")
    if timeout_s is not None:
        cfg.timeout_s = timeout_s
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
