from __future__ import annotations

from typing import Any

import typer

from rapnet_pricelist import Err, RapnetClient

from . import console


def emit(result, what: str) -> Any:
    if isinstance(result, Err):
        status = f" (HTTP {result.status_code})" if result.status_code else ""
        console.err(f"{what} failed{status}: {result.message}")
        if result.kind == "auth":
            console.info("Check the bearer token or run with --m2m.")
        raise typer.Exit(code=2)
    console.print_payload(result.value)
    return result.value


def extract_token(payload: Any) -> str | None:
    if isinstance(payload, dict):
        token = payload.get("access_token") or payload.get("token")
        if isinstance(token, str) and token:
            return token
    if isinstance(payload, str) and payload.strip() and " " not in payload.strip():
        return payload.strip()
    return None


def resolve_token(client: RapnetClient, token: str | None, m2m: bool) -> str:
    if token and token.strip():
        return token.strip()
    if not m2m:
        console.err("No bearer token. Pass --token, set RAPNET_TOKEN or use --m2m.")
        raise typer.Exit(code=2)
    if not client.config.client_id or not client.config.client_secret:
        console.err("Client credentials are not configured.")
        console.info("Run: rapnet settings init")
        raise typer.Exit(code=2)
    result = client.get_auth_token_machine_to_machine_method()
    if isinstance(result, Err):
        console.err(f"Token request failed: {result.message}")
        raise typer.Exit(code=2)
    found = extract_token(result.value)
    if not found:
        console.err("Token endpoint returned no token.")
        raise typer.Exit(code=2)
    return found
