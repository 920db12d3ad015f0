"""Twilio transport over a mocked HTTP layer."""
import base64
from urllib.parse import parse_qs

import httpx
import pytest

from barbershop.errors import ConfigError, TransportError
from barbershop.sms import TwilioSMS


def make_sms(handler, **overrides):
    settings = {
        "account_sid": "AC123",
        "auth_token": "secret",
        "from_number": "+35725000000",
        "timeout": 2.0,
    }
    settings.update(overrides)
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return TwilioSMS(client=client, **settings)


def test_send_posts_message_to_twilio():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(201, json={"sid": "SM42"})

    sid = make_sms(handler).send("+35799123456", "Your code is 123456")

    assert sid == "SM42"
    assert seen["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert seen["auth"] == "Basic " + base64.b64encode(b"AC123:secret").decode()
    assert seen["form"] == {
        "From": ["+35725000000"],
        "To": ["+35799123456"],
        "Body": ["Your code is 123456"],
    }


def test_rejected_send_is_transport_error():
    def handler(request):
        return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

    with pytest.raises(TransportError):
        make_sms(handler).send("+3570", "hi")


def test_non_json_error_is_transport_error():
    def handler(request):
        return httpx.Response(503, text="Service Unavailable")

    with pytest.raises(TransportError):
        make_sms(handler).send("+35799123456", "hi")


def test_timeout_is_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        make_sms(handler).send("+35799123456", "hi")


def test_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        make_sms(handler).send("+35799123456", "hi")


@pytest.mark.parametrize("missing", ["account_sid", "auth_token", "from_number"])
def test_missing_credentials_is_config_error(missing):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(201, json={"sid": "SM1"})

    sms = make_sms(handler, **{missing: None})

    assert sms.configured is False
    with pytest.raises(ConfigError):
        sms.send("+35799123456", "hi")
    assert calls == []
