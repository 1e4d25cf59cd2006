"""Tests for the device discovery client."""

import pytest
import requests

from lanmap.config import Config
from lanmap.discovery_client import DiscoveryClient, DiscoveryError
from lanmap.models import NetworkDevice


class FakeResponse:
    def __init__(self, body=None, status_code=200, invalid_json=False):
        self._body = body
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


@pytest.fixture
def client():
    return DiscoveryClient(Config())


def _serve(monkeypatch, client, response=None, exc=None):
    calls = []

    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(client._session, "get", fake_get)
    return calls


def test_get_devices_parses_records(monkeypatch, client):
    body = [
        {
            "uid": "landevice1",
            "ip": "192.168.178.20",
            "active": True,
            "friendly_name": "laptop",
            "firstused": "2024-01-01T10:00:00",
            "lastused": "2024-05-01T10:00:00",
            "online": True,
            "static_dhcp": False,
            "flags": "",
        },
        {"uid": "landevice2", "ip": "", "friendly_name": None},
    ]
    calls = _serve(monkeypatch, client, FakeResponse(body))

    devices = client.get_devices()

    assert calls == [(client.endpoint, 15.0)]
    assert devices[0] == NetworkDevice(
        uid="landevice1",
        ip="192.168.178.20",
        active=True,
        friendly_name="laptop",
        firstused="2024-01-01T10:00:00",
        lastused="2024-05-01T10:00:00",
        online=True,
        static_dhcp=False,
        flags="",
    )
    assert devices[1].friendly_name == ""
    assert not devices[1].has_ip


def test_non_object_entries_are_skipped(monkeypatch, client):
    _serve(monkeypatch, client, FakeResponse([{"uid": "a", "ip": "10.0.0.1"}, "junk", 3]))

    devices = client.get_devices()

    assert [d.uid for d in devices] == ["a"]


def test_network_error_raises_discovery_error(monkeypatch, client):
    _serve(monkeypatch, client, exc=requests.ConnectionError("connection refused"))

    with pytest.raises(DiscoveryError, match="connection refused"):
        client.get_devices()


def test_http_error_raises_discovery_error(monkeypatch, client):
    _serve(monkeypatch, client, FakeResponse([], status_code=502))

    with pytest.raises(DiscoveryError, match="502"):
        client.get_devices()


def test_invalid_json_raises_discovery_error(monkeypatch, client):
    _serve(monkeypatch, client, FakeResponse(invalid_json=True))

    with pytest.raises(DiscoveryError, match="invalid JSON"):
        client.get_devices()


def test_non_array_body_raises_discovery_error(monkeypatch, client):
    _serve(monkeypatch, client, FakeResponse({"devices": []}))

    with pytest.raises(DiscoveryError, match="JSON array"):
        client.get_devices()


def test_display_name_falls_back_to_ip():
    device = NetworkDevice.from_dict({"uid": "x", "ip": "10.0.0.9"})

    assert device.display_name == "10.0.0.9"
