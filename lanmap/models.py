"""Data models for LanMap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator


@dataclass
class NetworkDevice:
    """One endpoint as reported by the discovery endpoint."""

    uid: str
    ip: str = ""
    active: bool = False
    friendly_name: str = ""
    firstused: str = ""
    lastused: str = ""
    online: bool = False
    static_dhcp: bool = False
    flags: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkDevice":
        return cls(
            uid=str(data.get("uid", "")),
            ip=str(data.get("ip") or ""),
            active=bool(data.get("active", False)),
            friendly_name=str(data.get("friendly_name") or ""),
            firstused=str(data.get("firstused") or ""),
            lastused=str(data.get("lastused") or ""),
            online=bool(data.get("online", False)),
            static_dhcp=bool(data.get("static_dhcp", False)),
            flags=str(data.get("flags") or ""),
        )

    @property
    def has_ip(self) -> bool:
        return self.ip != ""

    @property
    def display_name(self) -> str:
        """Friendly name, falling back to the IP address."""
        return self.friendly_name or self.ip


@dataclass(frozen=True)
class RenderableNode:
    """A named node of the octet hierarchy."""

    name: str
    children: tuple[RenderableNode, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator[RenderableNode]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> Iterator[RenderableNode]:
        for node in self.walk():
            if node.is_leaf:
                yield node

    def child_names(self) -> list[str]:
        return [c.name for c in self.children]
