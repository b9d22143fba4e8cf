import base64
import json
import unittest

from wasapi.client import WasabiAPI, basic_auth_header, build_envelope, make_api
from wasapi.config import make_config
from wasapi.errors import ErrorKind, RemoteError, TransportError, UnauthorizedError
from wasapi.transport import HTTPResponse


class DummyTransport:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, *, method, headers, body):
        self.calls.append({"url": url, "method": method, "headers": headers, "body": json.loads(body)})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ok(payload) -> HTTPResponse:
    return HTTPResponse(status=200, reason="OK", body=json.dumps(payload).encode("utf-8"))


class EnvelopeTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.config = make_config(jsonrpc="2.0", request_id="7")

    def test_empty_params_are_omitted(self) -> None:
        for params in (None, [], {}, ()):
            envelope = build_envelope(self.config, "getstatus", params)
            self.assertEqual(envelope, {"jsonrpc": "2.0", "id": "7", "method": "getstatus"})
            self.assertNotIn("params", envelope)

    def test_params_are_included(self) -> None:
        envelope = build_envelope(self.config, "createwallet", [1, 2])
        self.assertEqual(envelope["params"], [1, 2])
        envelope = build_envelope(self.config, "enqueue", {"coins": []})
        self.assertEqual(envelope["params"], {"coins": []})

    def test_envelope_copies_config_verbatim(self) -> None:
        api = WasabiAPI(DummyTransport(), make_config(jsonrpc="1.0", request_id="abc"))
        envelope = api.build_envelope("listkeys")
        self.assertEqual(envelope["jsonrpc"], "1.0")
        self.assertEqual(envelope["id"], "abc")


class DispatchTestCase(unittest.TestCase):
    def test_get_status_request_shape(self) -> None:
        transport = DummyTransport(ok({"jsonrpc": "2.0", "result": {"torStatus": "Running"}, "id": "1"}))
        api = make_api(transport, make_config(host="http://127.0.0.1", port=37128))
        result = api.get_status()
        self.assertEqual(result, {"jsonrpc": "2.0", "result": {"torStatus": "Running"}, "id": "1"})
        self.assertEqual(len(transport.calls), 1)
        call = transport.calls[0]
        self.assertEqual(call["url"], "http://127.0.0.1:37128")
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["headers"], {"content-type": "application/json"})
        self.assertEqual(call["body"], {"jsonrpc": "2.0", "id": "1", "method": "getstatus"})

    def test_no_authorization_without_password(self) -> None:
        transport = DummyTransport(ok({}))
        WasabiAPI(transport, make_config(username="bob")).get_history()
        self.assertNotIn("Authorization", transport.calls[0]["headers"])

    def test_basic_authorization_with_password(self) -> None:
        transport = DummyTransport(ok({}))
        WasabiAPI(transport, make_config(username="bob", password="secret")).list_keys()
        expected = "Basic " + base64.b64encode(b"bob:secret").decode("ascii")
        self.assertEqual(transport.calls[0]["headers"]["Authorization"], expected)
        self.assertEqual(basic_auth_header("bob", "secret"), expected)

    def test_verbose_reports_request_to_sink(self) -> None:
        seen = []
        transport = DummyTransport(ok({}))
        config = make_config(verbose=True, username="bob", password="secret", logger=seen.append)
        WasabiAPI(transport, config).get_status()
        self.assertIn("Url: http://127.0.0.1:37128", seen)
        self.assertIn({"jsonrpc": "2.0", "id": "1", "method": "getstatus"}, seen)
        headers = [entry for entry in seen if isinstance(entry, dict) and "content-type" in entry]
        self.assertEqual(headers, [{"content-type": "application/json", "Authorization": "<redacted>"}])
        self.assertNotIn("secret", json.dumps(seen))

    def test_quiet_mode_does_not_touch_sink(self) -> None:
        seen = []
        WasabiAPI(DummyTransport(ok({})), make_config(logger=seen.append)).get_status()
        self.assertEqual(seen, [])


class ResponseTestCase(unittest.TestCase):
    def test_unauthorized(self) -> None:
        seen = []
        transport = DummyTransport(HTTPResponse(status=401, reason="Unauthorized"))
        api = WasabiAPI(transport, make_config(logger=seen.append))
        with self.assertRaises(UnauthorizedError) as ctx:
            api.get_status()
        self.assertEqual(str(ctx.exception), "Unauthorized. Credentials needed.")
        self.assertIs(ctx.exception.kind, ErrorKind.UNAUTHORIZED)
        self.assertEqual(seen, [])

    def test_remote_error_reports_raw_response(self) -> None:
        seen = []
        response = HTTPResponse(status=500, reason="Internal Server Error")
        api = WasabiAPI(DummyTransport(response), make_config(logger=seen.append))
        with self.assertRaises(RemoteError) as ctx:
            api.list_unspent_coins()
        self.assertIn("500", str(ctx.exception))
        self.assertIn("Internal Server Error", str(ctx.exception))
        self.assertEqual(ctx.exception.status, 500)
        self.assertIs(ctx.exception.kind, ErrorKind.REMOTE)
        self.assertEqual(seen, [response])

    def test_transport_failure_propagates_unchanged(self) -> None:
        failure = ConnectionRefusedError("connection refused")
        api = WasabiAPI(DummyTransport(failure), make_config())
        with self.assertRaises(ConnectionRefusedError) as ctx:
            api.get_status()
        self.assertIs(ctx.exception, failure)

    def test_stop_returns_failure(self) -> None:
        failure = TransportError("connection reset")
        api = WasabiAPI(DummyTransport(failure), make_config())
        self.assertIs(api.stop(), failure)

    def test_stop_returns_remote_error(self) -> None:
        api = WasabiAPI(DummyTransport(HTTPResponse(status=503, reason="Unavailable")), make_config())
        self.assertIsInstance(api.stop(), RemoteError)

    def test_load_wallet_returns_failure(self) -> None:
        failure = ConnectionResetError("gone")
        transport = DummyTransport(failure)
        api = WasabiAPI(transport, make_config())
        self.assertIs(api.load_wallet(), failure)
        self.assertEqual(transport.calls[0]["body"]["method"], "selectwallet")
        self.assertEqual(transport.calls[0]["body"]["params"], ["Wallet0", ""])

    def test_other_methods_do_not_swallow(self) -> None:
        api = WasabiAPI(DummyTransport(TransportError("down")), make_config())
        with self.assertRaises(TransportError):
            api.get_history()


class MethodTestCase(unittest.TestCase):
    def _sent(self, invoke):
        transport = DummyTransport(ok({"result": None}))
        invoke(WasabiAPI(transport, make_config()))
        return transport.calls[0]["body"]

    def test_enqueue(self) -> None:
        body = self._sent(lambda api: api.enqueue([{"transactionid": "abc", "index": 0}]))
        self.assertEqual(body["method"], "enqueue")
        self.assertEqual(body["params"], {"coins": [{"transactionid": "abc", "index": 0}]})

    def test_dequeue(self) -> None:
        body = self._sent(lambda api: api.dequeue([WasabiAPI.create_coin("abc", 1)]))
        self.assertEqual(body["method"], "dequeue")
        self.assertEqual(body["params"], {"coins": [{"transactionid": "abc", "index": 1}]})

    def test_send(self) -> None:
        payment = WasabiAPI.create_send_payment("tb1qaddress", 15000, "rent")
        coin = WasabiAPI.create_coin("ab" * 32, 0)
        body = self._sent(lambda api: api.send([payment], [coin], password="pw"))
        self.assertEqual(body["method"], "send")
        self.assertEqual(
            body["params"],
            {
                "payments": [{"sendto": "tb1qaddress", "amount": 15000, "label": "rent", "subtractFee": False}],
                "coins": [{"transactionid": "ab" * 32, "index": 0}],
                "feeTarget": 2,
                "password": "pw",
            },
        )

    def test_create_wallet(self) -> None:
        body = self._sent(lambda api: api.create_wallet("Savings"))
        self.assertEqual(body["method"], "createwallet")
        self.assertEqual(body["params"], ["Savings", ""])

    def test_get_new_address(self) -> None:
        body = self._sent(lambda api: api.get_new_address("coffee"))
        self.assertEqual(body["method"], "getnewaddress")
        self.assertEqual(body["params"], ["coffee"])

    def test_get_wallet_info(self) -> None:
        body = self._sent(lambda api: api.get_wallet_info())
        self.assertEqual(body, {"jsonrpc": "2.0", "id": "1", "method": "getwalletinfo"})
        body = self._sent(lambda api: api.get_wallet_info({}))
        self.assertNotIn("params", body)

    def test_parameterless_methods(self) -> None:
        expected = {
            "get_status": "getstatus",
            "list_unspent_coins": "listunspentcoins",
            "get_history": "gethistory",
            "list_keys": "listkeys",
            "stop": "stop",
        }
        for name, method in expected.items():
            body = self._sent(lambda api: getattr(api, name)())
            self.assertEqual(body, {"jsonrpc": "2.0", "id": "1", "method": method})

    def test_helpers_do_not_touch_network(self) -> None:
        transport = DummyTransport()
        api = WasabiAPI(transport, make_config())
        payment = api.create_send_payment("addr", 1, "", subtract_fee=True)
        self.assertTrue(payment["subtractFee"])
        self.assertEqual(transport.calls, [])

    def test_call_by_name(self) -> None:
        body = self._sent(lambda api: api.call("getNewAddress", "label"))
        self.assertEqual(body["method"], "getnewaddress")
        body = self._sent(lambda api: api.call("listUnSpentCoins"))
        self.assertEqual(body["method"], "listunspentcoins")
        body = self._sent(lambda api: api.call("list_keys"))
        self.assertEqual(body["method"], "listkeys")

    def test_call_unknown_name(self) -> None:
        api = WasabiAPI(DummyTransport(), make_config())
        for name in ("nosuchmethod", "post", "_post", "handle_response"):
            with self.assertRaises(AttributeError):
                api.call(name)


if __name__ == "__main__":
    unittest.main()
