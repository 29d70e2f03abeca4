from __future__ import annotations

import typer

from .. import console
from ..config import load_config
from ..http import make_client
from ..results import emit

app = typer.Typer(help="Obtain RapNet API tokens.")


def _redirect_or_exit(redirect_url: str | None, fallback: str) -> str:
    value = (redirect_url or fallback or "").strip()
    if not value:
        console.err("No redirect URL. Pass --redirect-url or run `rapnet settings set --redirect-uri ...`.")
        raise typer.Exit(code=2)
    return value


@app.command("url", help="Print the authorization-code flow URL.")
def authorize_url(
        redirect_url: str | None = typer.Option(None, "--redirect-url", help="Where the provider sends the code."),
        open_browser: bool = typer.Option(False, "--open", help="Open the URL in a browser."),
):
    cfg = load_config()
    redirect = _redirect_or_exit(redirect_url, cfg.redirect_uri)
    with make_client(cfg) as client:
        url = client.authorization_url(redirect)
    console.console.print(url, markup=False, highlight=False, soft_wrap=True)
    if open_browser:
        typer.launch(url)


@app.command("token", help="Exchange an authorization code for a token.")
def exchange_code(
        code: str = typer.Option(..., "--code", prompt=True, help="Authorization code from the redirect."),
        redirect_url: str | None = typer.Option(None, "--redirect-url", help="Redirect URL used in `auth url`."),
        insecure: bool = typer.Option(False, "--insecure", help="Skip TLS certificate verification."),
):
    cfg = load_config()
    redirect = _redirect_or_exit(redirect_url, cfg.redirect_uri)
    with make_client(cfg, insecure=insecure) as client:
        emit(client.get_auth_token(code, redirect), "Token exchange")


@app.command("m2m", help="Request a machine-to-machine token.")
def machine_token(
        insecure: bool = typer.Option(False, "--insecure", help="Skip TLS certificate verification."),
):
    cfg = load_config()
    if not cfg.credentials.client_id or not cfg.credentials.client_secret:
        console.err("Client credentials are not configured.")
        console.info("Run: rapnet settings init")
        raise typer.Exit(code=2)
    with make_client(cfg, insecure=insecure) as client:
        emit(client.get_auth_token_machine_to_machine_method(), "Token request")
