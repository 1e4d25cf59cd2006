from __future__ import annotations

import pytest

from lanmap.models import NetworkDevice


def make_device(ip: str, friendly_name: str = "", uid: str = "") -> NetworkDevice:
    return NetworkDevice(
        uid=uid or f"landevice-{ip or 'none'}-{friendly_name}",
        ip=ip,
        active=True,
        friendly_name=friendly_name,
        online=True,
    )


@pytest.fixture
def home_devices() -> list[NetworkDevice]:
    """A small LAN with two first-octet groups and one shared address."""
    return [
        make_device("192.168.178.1", "fritz.box"),
        make_device("192.168.178.20", "laptop"),
        make_device("192.168.178.20", "laptop-wifi"),
        make_device("192.168.178.31", ""),
        make_device("10.0.0.5", "vpn-gateway"),
        make_device("", "offline-printer"),
    ]
