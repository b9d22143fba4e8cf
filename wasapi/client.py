"""JSON-RPC client for the Wasabi wallet daemon."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .config import WasabiConfig
from .errors import RemoteError, UnauthorizedError
from .transport import Response, Transport

Params = Sequence[Any] | Mapping[str, Any] | None


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_envelope(config: WasabiConfig, method: str, params: Params = None) -> dict[str, Any]:
    """Build the JSON-RPC request body for ``method``.

    Empty params (``None``, ``[]``, ``{}``) drop the ``params`` key instead
    of sending it empty; some daemon methods reject an explicit empty field.
    """

    envelope: dict[str, Any] = {
        "jsonrpc": config.jsonrpc,
        "id": config.request_id,
        "method": method,
    }
    if params:
        envelope["params"] = params
    return envelope


class WasabiAPI:
    """Thin HTTP client for the Wasabi wallet JSON-RPC interface."""

    def __init__(self, transport: Transport, config: WasabiConfig):
        self.transport = transport
        self.config = config
        self.log = logging.getLogger("wasapi.client")

    def build_envelope(self, method: str, params: Params = None) -> dict[str, Any]:
        return build_envelope(self.config, method, params)

    def headers(self) -> dict[str, str]:
        headers = {"content-type": "application/json"}
        if self.config.password:
            headers["Authorization"] = basic_auth_header(self.config.username, self.config.password)
        return headers

    def post(self, method: str, params: Params = None) -> Any:
        url = self.config.url
        body = self.build_envelope(method, params)
        headers = self.headers()
        if self.config.verbose:
            sink = self.config.logger
            sink(f"Url: {url}")
            sink("Data:")
            sink(body)
            sink("Headers:")
            sink({key: ("<redacted>" if key == "Authorization" else value) for key, value in headers.items()})
        self.log.debug("Calling %s at %s", method, url)
        response = self.transport(url, method="POST", headers=headers, body=json.dumps(body))
        return self.handle_response(response)

    def handle_response(self, response: Response) -> Any:
        if response.ok:
            return response.json()
        if response.status == 401:
            raise UnauthorizedError()
        self.config.logger(response)
        raise RemoteError(response.status, response.reason)

    def call(self, name: str, *args: Any) -> Any:
        """Invoke a public operation by its Python or camelCase name."""

        attr = resolve_operation(name)
        if attr is None:
            raise AttributeError(f"Unknown Wasabi RPC operation {name!r}")
        return getattr(self, attr)(*args)

    def get_status(self) -> Any:
        return self.post("getstatus")

    def create_wallet(self, wallet_name: str, password: str = "") -> Any:
        return self.post("createwallet", [wallet_name, password])

    def list_unspent_coins(self) -> Any:
        return self.post("listunspentcoins")

    def get_wallet_info(self, kwargs: Mapping[str, Any] | None = None) -> Any:
        return self.post("getwalletinfo", kwargs)

    def get_new_address(self, label: str) -> Any:
        return self.post("getnewaddress", [label])

    @staticmethod
    def create_send_payment(send_to: str, amount: int, label: str, subtract_fee: bool = False) -> dict[str, Any]:
        return {
            "sendto": send_to,
            "amount": amount,
            "label": label,
            "subtractFee": subtract_fee,
        }

    @staticmethod
    def create_coin(transaction_id: str, index: int) -> dict[str, Any]:
        return {"transactionid": transaction_id, "index": index}

    def send(
        self,
        payments: Sequence[Mapping[str, Any]],
        coins: Sequence[Mapping[str, Any]],
        fee_target: int = 2,
        password: str = "",
    ) -> Any:
        return self.post(
            "send",
            {
                "payments": list(payments),
                "coins": list(coins),
                "feeTarget": fee_target,
                "password": password,
            },
        )

    def get_history(self) -> Any:
        return self.post("gethistory")

    def list_keys(self) -> Any:
        return self.post("listkeys")

    def enqueue(self, coins: Sequence[Mapping[str, Any]]) -> Any:
        return self.post("enqueue", {"coins": list(coins)})

    def dequeue(self, coins: Sequence[Mapping[str, Any]]) -> Any:
        return self.post("dequeue", {"coins": list(coins)})

    # The daemon may drop the connection before answering these two, so a
    # failure is returned as the result instead of raised.

    def stop(self) -> Any:
        try:
            return self.post("stop")
        except Exception as exc:
            self.log.debug("stop returned without a response: %s", exc)
            return exc

    def load_wallet(self, name: str = "Wallet0", password: str = "") -> Any:
        try:
            return self.post("selectwallet", [name, password])
        except Exception as exc:
            self.log.debug("selectwallet returned without a response: %s", exc)
            return exc


OPERATIONS = (
    "get_status",
    "create_wallet",
    "list_unspent_coins",
    "get_wallet_info",
    "get_new_address",
    "create_send_payment",
    "create_coin",
    "send",
    "get_history",
    "list_keys",
    "enqueue",
    "dequeue",
    "stop",
    "load_wallet",
)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_CAMEL_NAMES = {_camel(name): name for name in OPERATIONS}
_CAMEL_NAMES["listUnSpentCoins"] = "list_unspent_coins"


def resolve_operation(name: str) -> str | None:
    attr = _CAMEL_NAMES.get(name, name)
    return attr if attr in OPERATIONS else None


def make_api(transport: Transport, config: WasabiConfig) -> WasabiAPI:
    return WasabiAPI(transport, config)
