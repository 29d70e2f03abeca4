from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from tenacity import Retrying, before_sleep_log, retry_if_result, stop_after_attempt

from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError

logger = logging.getLogger(__name__)

_ERROR_MESSAGE_KEYS = ("detail", "message", "error_description", "error")
_DETAIL_LIMIT = 1000


def _last_outcome(retry_state):
    # Hand back the final retryable response so status handling stays in one place.
    return retry_state.outcome.result()


def _is_textual(content_type: str) -> bool:
    media = content_type.split(";", 1)[0].strip().lower()
    return media.startswith("text/") or media.endswith(("xml", "json")) or "csv" in media


def decode_body(response: httpx.Response) -> Any:
    """
    JSON when the body parses, text for textual media types (CSV, XML),
    raw bytes for everything else (DBF), None when empty.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        pass
    if _is_textual(response.headers.get("Content-Type", "")):
        try:
            return response.content.decode(response.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError):
            return response.content
    return response.content


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        if not cfg.verify_tls:
            logger.warning("TLS certificate verification is disabled for this client")

        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers={"User-Agent": cfg.user_agent},
            verify=cfg.verify_tls,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _should_retry(self, response: httpx.Response) -> bool:
        return response.status_code in self._cfg.retry_on_status

    def _retry_wait(self, retry_state) -> float:
        outcome = retry_state.outcome
        if outcome is not None and not outcome.failed:
            retry_after = (outcome.result().headers.get("Retry-After") or "").strip()
            if retry_after.isdigit():
                return float(retry_after)
        return retry_state.attempt_number * self._cfg.retry_backoff_s

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(max(0, int(self._cfg.max_retry_attempts)) + 1),
            wait=self._retry_wait,
            retry=retry_if_result(self._should_retry),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=_last_outcome,
        )
        return retrying(self._client.request, method, url, **kwargs)

    def request(
            self,
            method: str,
            url: str,
            *,
            params: dict[str, Any] | None = None,
            headers: dict[str, str] | None = None,
            json_body: Any | None = None,
            form_body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            r = self._send(method, url, params=params, headers=headers, json=json_body, data=form_body)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        data = decode_body(r)

        if r.status_code >= 400:
            msg = f"{method} {url} failed with {r.status_code}"
            details = None

            if isinstance(data, dict):
                details = json.dumps(data, ensure_ascii=False)[:_DETAIL_LIMIT]
                for key in _ERROR_MESSAGE_KEYS:
                    if data.get(key):
                        msg = str(data[key])
                        break
            elif isinstance(data, str) and data:
                details = data[:_DETAIL_LIMIT]
            elif isinstance(data, bytes):
                details = data[:_DETAIL_LIMIT].decode("utf-8", errors="replace")

            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, details)
            raise ApiError(r.status_code, msg, details)

        return data
