from __future__ import annotations

import json

import httpx
from typer.testing import CliRunner

from rapnet_pricelist import RapnetClient
from rapnet_pricelist.config_types import ClientConfig

from rapnet_cli import config, main
from rapnet_cli.commands import auth_cmd, prices_cmd

runner = CliRunner()


def _isolate(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    for name in (config.ENV_CLIENT_ID, config.ENV_CLIENT_SECRET, config.ENV_PRICELIST_URL, "RAPNET_TOKEN"):
        monkeypatch.delenv(name, raising=False)


def _fake_make_client(handler, seen: dict):
    def _make(cfg, **kwargs):
        seen["kwargs"] = kwargs
        return RapnetClient(
            ClientConfig(
                client_id=cfg.credentials.client_id or None,
                client_secret=cfg.credentials.client_secret or None,
                retry_backoff_s=0,
            ),
            transport=httpx.MockTransport(handler),
        )

    return _make


def test_help_lists_command_groups() -> None:
    result = runner.invoke(main.app, ["--help"])
    assert result.exit_code == 0
    for group in ("settings", "auth", "prices"):
        assert group in result.output


def test_prices_list_prints_payload(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["shape"] = request.url.params["shape"]
        return httpx.Response(200, json={"prices": [{"low_size": 0.01}]})

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, seen))

    result = runner.invoke(main.app, ["prices", "list", "--shape", "Princess", "--token", "t"])

    assert result.exit_code == 0, result.output
    assert seen["auth"] == "Bearer t"
    assert seen["shape"] == "Princess"
    assert '"low_size"' in result.output


def test_prices_changes_reads_token_from_env(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    monkeypatch.setenv("RAPNET_TOKEN", "env-token")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"changes": []})

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, seen))

    result = runner.invoke(main.app, ["prices", "changes"])

    assert result.exit_code == 0, result.output
    assert seen["auth"] == "Bearer env-token"


def test_prices_items_requires_size(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    result = runner.invoke(main.app, ["prices", "items", "--color", "G", "--clarity", "VS1", "--token", "t"])
    assert result.exit_code != 0


def test_prices_items_with_m2m_token(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    monkeypatch.setenv(config.ENV_CLIENT_ID, "cid")
    monkeypatch.setenv(config.ENV_CLIENT_SECRET, "csecret")
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/api/get":
            return httpx.Response(200, json={"access_token": "fresh"})
        return httpx.Response(200, json={"price": 5400})

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, {}))

    result = runner.invoke(
        main.app,
        ["prices", "items", "--size", "1.01", "--color", "G", "--clarity", "VS1", "--m2m"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(requests[0].content) == {"client_id": "cid", "client_secret": "csecret"}
    assert requests[1].headers["Authorization"] == "Bearer fresh"
    assert list(requests[1].url.params.keys()) == ["shape", "size", "color", "clarity"]


def test_prices_without_token_fails(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, {}))

    result = runner.invoke(main.app, ["prices", "list"])

    assert result.exit_code == 2
    assert "No bearer token" in result.output


def test_prices_list_reports_api_error(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "expired"})

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, {}))

    result = runner.invoke(main.app, ["prices", "list", "--token", "old"])

    assert result.exit_code == 2
    assert "HTTP 401" in result.output


def test_auth_url_prints_authorization_url(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    monkeypatch.setenv(config.ENV_CLIENT_ID, "cid")

    result = runner.invoke(main.app, ["auth", "url", "--redirect-url", "https://app.example/cb"])

    assert result.exit_code == 0, result.output
    assert "https://rapaport-prod.auth0.com/authorize?response_type=code" in result.output
    assert "client_id=cid" in result.output


def test_auth_url_requires_redirect(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    result = runner.invoke(main.app, ["auth", "url"])
    assert result.exit_code == 2


def test_auth_token_exchanges_code(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"token": "abc"})

    monkeypatch.setattr(auth_cmd, "make_client", _fake_make_client(handler, seen))

    result = runner.invoke(
        main.app,
        ["auth", "token", "--code", "xyz", "--redirect-url", "https://app.example/cb"],
    )

    assert result.exit_code == 0, result.output
    assert seen["body"]["code"] == "xyz"
    assert '"abc"' in result.output


def test_auth_m2m_requires_credentials(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    result = runner.invoke(main.app, ["auth", "m2m"])
    assert result.exit_code == 2


def test_settings_set_and_get(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)

    result = runner.invoke(main.app, ["settings", "set", "--client-id", "cid", "--no-verify-tls"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(main.app, ["settings", "get", "verify_tls"])
    assert result.exit_code == 0
    assert result.output.strip() == "false"

    result = runner.invoke(main.app, ["settings", "get", "client_id"])
    assert result.output.strip() == "cid"


def test_settings_get_unknown_key(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    result = runner.invoke(main.app, ["settings", "get", "nope"])
    assert result.exit_code == 2


def test_settings_init_writes_credentials(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)

    result = runner.invoke(
        main.app,
        ["settings", "init", "--client-id", "cid", "--client-secret", "shh"],
    )

    assert result.exit_code == 0, result.output
    cfg = config.load_config()
    assert cfg.credentials.client_id == "cid"
    assert cfg.credentials.client_secret == "shh"


def test_prices_list_writes_binary_payload_raw(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)
    blob = b"\x03|\n\x11\xff\xfe\x80\x00A"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=blob, headers={"Content-Type": "application/dbf"})

    monkeypatch.setattr(prices_cmd, "make_client", _fake_make_client(handler, {}))

    result = runner.invoke(main.app, ["prices", "list", "--accept", "application/dbf", "--token", "t"])

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == blob


def test_settings_set_auth_urls(tmp_path, monkeypatch) -> None:
    _isolate(tmp_path, monkeypatch)

    result = runner.invoke(
        main.app,
        ["settings", "set", "--authorization-url", "auth.example/", "--machine-auth-url", "https://tok.example"],
    )
    assert result.exit_code == 0, result.output

    cfg = config.load_config()
    assert cfg.authorization_url == "https://auth.example"
    assert cfg.machine_auth_url == "https://tok.example"
