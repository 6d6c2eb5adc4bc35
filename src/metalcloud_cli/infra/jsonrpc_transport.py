"""httpx backed implementation of :class:`~metalcloud_cli.core.protocols.RpcTransport`.

This module is the **only** place in the codebase that imports ``httpx``.
All httpx exceptions are caught here and re-raised as
:class:`~metalcloud_cli.exceptions.RemoteCallError` — nothing raw
escapes the infrastructure boundary.

Wire format
-----------
Each call is a JSON-RPC 2.0 request POSTed to the endpoint.  The body is
signed with HMAC-MD5 keyed by the API key and the signature is sent as
``?verify=<user_id>:<hex digest>``.
"""

from __future__ import annotations

import hashlib
import hmac
import itertools
import json
import logging
import time
from types import TracebackType
from typing import Any

import httpx

from metalcloud_cli.exceptions import ConfigurationError, RemoteCallError

logger = logging.getLogger(__name__)

DEFAULT_API_PATH = "/api/developer/developer"


def sign_request(body: bytes, api_key: str) -> str:
    """Return the ``verify`` query value for *body*.

    Raises
    ------
    ConfigurationError
        If *api_key* is not in ``<user_id>:<secret>`` form.
    """
    user_id, sep, secret = api_key.partition(":")
    if not sep or not user_id or not secret:
        raise ConfigurationError(
            "The API key is not in the correct format.",
            hint="Expected '<user_id>:<secret>' as shown in the account settings.",
        )
    digest = hmac.new(api_key.encode("utf-8"), body, hashlib.md5).hexdigest()
    return f"{user_id}:{digest}"


class JsonRpcTransport:
    """Concrete :class:`RpcTransport` speaking JSON-RPC 2.0 over httpx.

    Usage::

        with JsonRpcTransport(endpoint, api_key) as transport:
            instance = transport.call("instance_get", 42)

    *client* may be supplied to inject a preconfigured ``httpx.Client``
    (tests pass one built on ``httpx.MockTransport``).
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        sign_request(b"", api_key)  # validates the key format up front
        self._url: str = self._build_url(endpoint)
        self._api_key: str = api_key
        self._ids = itertools.count(1)
        self._client: httpx.Client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
        )

    @staticmethod
    def _build_url(endpoint: str) -> str:
        """Append the default API path when *endpoint* is a bare host URL."""
        stripped = endpoint.rstrip("/")
        if httpx.URL(stripped).path in ("", "/"):
            return stripped + DEFAULT_API_PATH
        return stripped

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def call(self, method: str, *params: Any) -> Any:
        """POST a JSON-RPC request and return its ``result`` member.

        Raises
        ------
        RemoteCallError
            On transport failure, a non-JSON reply, or a JSON-RPC error
            object (whose message is passed through verbatim).
        """
        request_id = next(self._ids)
        body = json.dumps(
            {
                "jsonrpc": "2.0",
                "method": method,
                "params": list(params),
                "id": request_id,
            },
        ).encode("utf-8")

        started = time.monotonic()
        try:
            response = self._client.post(
                self._url,
                content=body,
                params={"verify": sign_request(body, self._api_key)},
            )
        except httpx.HTTPError as exc:
            raise RemoteCallError(
                f"Could not reach the API: {exc}",
                hint="Check METALCLOUD_ENDPOINT and your network connection.",
            ) from exc
        finally:
            logger.debug(
                "%s #%d took %.3fs", method, request_id, time.monotonic() - started,
            )

        return self._parse_response(method, response)

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_response(method: str, response: httpx.Response) -> Any:
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteCallError(
                f"{method}: HTTP {response.status_code} with a non-JSON body",
            ) from exc

        if not isinstance(payload, dict):
            raise RemoteCallError(f"{method}: malformed JSON-RPC response")

        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                code = error.get("code")
                raise RemoteCallError(
                    str(error.get("message", "")),
                    code=code if isinstance(code, int) else None,
                )
            raise RemoteCallError(str(error))

        if response.is_error:
            raise RemoteCallError(f"{method}: HTTP {response.status_code}")

        return payload.get("result")

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> JsonRpcTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
