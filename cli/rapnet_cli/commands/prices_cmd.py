from __future__ import annotations

import typer

from ..config import load_config
from ..http import make_client
from ..results import emit, resolve_token

app = typer.Typer(help="Query the RapNet price list.")

TOKEN_OPTION = typer.Option(None, "--token", envvar="RAPNET_TOKEN", help="Bearer token.")
M2M_OPTION = typer.Option(False, "--m2m", help="Fetch a machine-to-machine token for this call.")
SHAPE_OPTION = typer.Option("Round", "--shape", help="Diamond shape, e.g. Round or Princess.")
URL_OPTION = typer.Option(None, "--pricelist-url", help="Override price list API URL.")
INSECURE_OPTION = typer.Option(False, "--insecure", help="Skip TLS certificate verification.")


@app.command("list", help="Full price list for a shape.")
def prices_list(
        shape: str = SHAPE_OPTION,
        accept: str = typer.Option(
            "application/json",
            "--accept",
            help="Response format: application/json, application/xml or application/dbf.",
        ),
        token: str | None = TOKEN_OPTION,
        m2m: bool = M2M_OPTION,
        pricelist_url: str | None = URL_OPTION,
        insecure: bool = INSECURE_OPTION,
):
    with make_client(load_config(), pricelist_url_override=pricelist_url, insecure=insecure) as client:
        bearer = resolve_token(client, token, m2m)
        emit(client.get_prices_list(bearer, shape=shape, accept_type=accept), "Price list")


@app.command("normalized", help="CSV-normalized price list for a shape.")
def prices_normalized(
        shape: str = SHAPE_OPTION,
        csvnormalized: bool = typer.Option(True, "--csvnormalized/--no-csvnormalized"),
        token: str | None = TOKEN_OPTION,
        m2m: bool = M2M_OPTION,
        pricelist_url: str | None = URL_OPTION,
        insecure: bool = INSECURE_OPTION,
):
    with make_client(load_config(), pricelist_url_override=pricelist_url, insecure=insecure) as client:
        bearer = resolve_token(client, token, m2m)
        emit(client.get_normalized_prices_list(bearer, shape=shape, csvnormalized=csvnormalized), "Price list")


@app.command("items", help="Price for one shape/size/color/clarity cell.")
def prices_items(
        size: str = typer.Option(..., "--size", help="Carat size, e.g. 1.01."),
        color: str = typer.Option(..., "--color", help="Color grade, e.g. G."),
        clarity: str = typer.Option(..., "--clarity", help="Clarity grade, e.g. VS1."),
        shape: str = SHAPE_OPTION,
        accept: str = typer.Option("application/json", "--accept", help="Response format."),
        token: str | None = TOKEN_OPTION,
        m2m: bool = M2M_OPTION,
        pricelist_url: str | None = URL_OPTION,
        insecure: bool = INSECURE_OPTION,
):
    with make_client(load_config(), pricelist_url_override=pricelist_url, insecure=insecure) as client:
        bearer = resolve_token(client, token, m2m)
        result = client.get_price_items(
            bearer,
            shape=shape,
            size=size,
            color=color,
            clarity=clarity,
            accept_type=accept,
        )
        emit(result, "Price items")


@app.command("changes", help="Recent price changes for a shape.")
def prices_changes(
        shape: str = SHAPE_OPTION,
        token: str | None = TOKEN_OPTION,
        m2m: bool = M2M_OPTION,
        pricelist_url: str | None = URL_OPTION,
        insecure: bool = INSECURE_OPTION,
):
    with make_client(load_config(), pricelist_url_override=pricelist_url, insecure=insecure) as client:
        bearer = resolve_token(client, token, m2m)
        emit(client.get_prices_changes(bearer, shape=shape), "Price changes")
