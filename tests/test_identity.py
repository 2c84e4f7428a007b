# tests/test_identity.py
import types

import pytest
import requests

from serverlist.adapters.identity import HttpIdentity


def _fake_get(status=200, text="", exc=None, calls=None):
    def get(url, timeout=None):
        if calls is not None:
            calls.append((url, timeout))
        if exc is not None:
            raise exc
        return types.SimpleNamespace(status_code=status, text=text)

    return get


def test_resolves_dotted_quad(monkeypatch):
    calls = []
    monkeypatch.setattr(requests, "get", _fake_get(text="203.0.113.7", calls=calls))
    ident = HttpIdentity("dev1.siasky.dev", url="https://ip.example")

    lookup = ident.own_address()

    assert lookup.available
    assert lookup.address == "203.0.113.7"
    assert calls == [("https://ip.example", 10.0)]
    assert ident.own_name() == "dev1.siasky.dev"


@pytest.mark.parametrize(
    "fake",
    [
        _fake_get(status=503, text="busy"),
        _fake_get(text="2001:db8::1"),
        _fake_get(text="<html>hello</html>"),
        _fake_get(text=""),
        _fake_get(text="\u0661.\u0662.\u0663.\u0664"),
        _fake_get(exc=requests.ConnectionError("no route to host")),
        _fake_get(exc=requests.Timeout("timed out")),
    ],
)
def test_anything_else_is_unavailable(monkeypatch, fake):
    monkeypatch.setattr(requests, "get", fake)

    lookup = HttpIdentity("dev1").own_address()

    assert not lookup.available
    assert lookup.address is None
    assert lookup.reason
