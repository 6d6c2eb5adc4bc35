"""Infrastructure layer — external system integration.

This layer wraps all interaction with the remote API over HTTP.  Every
raw httpx exception must be caught here and re-raised as a
:class:`~metalcloud_cli.exceptions.MetalCloudError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from metalcloud_cli.infra.jsonrpc_transport import JsonRpcTransport, sign_request

__all__: list[str] = [
    "JsonRpcTransport",
    "sign_request",
]
