"""Build the octet hierarchy shown by the partition chart.

A flat set of dotted-quad addresses is grouped octet by octet
(``10`` -> ``0`` -> ``0`` -> ``10.0.0.1``).  While still inside the
first three octets, a subtree that has only one child is collapsed so a
range without branching does not turn into a chain of wrapper nodes.
Devices are then hung below their address leaf and every level is
sorted by name.

A collapsed node is named by joining its own segment with the skipped
child's (``10`` over ``0`` becomes ``10.0``), so no octet disappears
from the chart; the browser version kept only the outer segment.

Everything here is pure: each step returns a new ``RenderableNode``.
"""

from __future__ import annotations

import locale
import logging
from typing import Iterable

from lanmap.models import NetworkDevice, RenderableNode

logger = logging.getLogger(__name__)

ROOT_NAME = "Network"
# Collapsing stops here so the last octet keeps its own level.
COLLAPSE_BELOW_LEVEL = 2


def assemble_tree(ips: list[str], level: int = 0, prefix: str = "") -> RenderableNode:
    """Group ``ips`` by their octet at ``level`` below ``prefix``."""
    parts = [ip.split(".")[level] for ip in ips if ip.startswith(prefix)]
    unique_parts = list(dict.fromkeys(parts))

    logger.debug("For level %d and prefix %r found parts: %s", level, prefix, unique_parts)

    children: list[RenderableNode] = []
    for part in unique_parts:
        next_level = assemble_tree(ips, level + 1, prefix + part + ".")

        skipped = next_level.children[0] if len(next_level.children) == 1 else None
        # A lone address leaf (short, malformed IP) is never swallowed.
        if skipped is not None and not skipped.is_leaf and level < COLLAPSE_BELOW_LEVEL:
            children.append(RenderableNode(
                name=f"{next_level.name}.{skipped.name}",
                children=skipped.children,
            ))
        else:
            children.append(next_level)

    full = prefix[:-1] if prefix.endswith(".") else prefix
    if not children:
        # Nothing extends the prefix: this is an address leaf.
        return RenderableNode(name=full)
    return RenderableNode(name=full.rsplit(".", 1)[-1], children=tuple(children))


def normalize_root(root: RenderableNode) -> RenderableNode:
    """Pick the displayed root.

    Several first-octet groups go below a synthetic ``Network`` root, a
    single group is promoted to be the root itself.
    """
    if len(root.children) > 1:
        return RenderableNode(name=ROOT_NAME, children=root.children)
    if len(root.children) == 1:
        only = root.children[0]
        return RenderableNode(name=only.name, children=only.children)
    return RenderableNode(name=ROOT_NAME)


def group_by_ip(devices: Iterable[NetworkDevice]) -> dict[str, list[NetworkDevice]]:
    ip_to_devices: dict[str, list[NetworkDevice]] = {}
    for device in devices:
        ip_to_devices.setdefault(device.ip, []).append(device)
    return ip_to_devices


def attach_devices(
    node: RenderableNode,
    ip_to_devices: dict[str, list[NetworkDevice]],
) -> RenderableNode:
    """Return a copy of ``node`` with device entries below each address leaf."""
    if node.is_leaf:
        devices = ip_to_devices.get(node.name)
        if not devices:
            return node
        return RenderableNode(
            name=node.name,
            children=tuple(RenderableNode(name=d.display_name) for d in devices),
        )
    return RenderableNode(
        name=node.name,
        children=tuple(attach_devices(c, ip_to_devices) for c in node.children),
    )


def _collation_key(node: RenderableNode) -> str:
    return locale.strxfrm(node.name)


def sort_tree(node: RenderableNode) -> RenderableNode:
    """Sort the children of every level by name, depth first."""
    if node.is_leaf:
        return node
    children = sorted((sort_tree(c) for c in node.children), key=_collation_key)
    return RenderableNode(name=node.name, children=tuple(children))


def build_tree(devices: Iterable[NetworkDevice]) -> RenderableNode:
    """Turn the flat device list into the sorted, device-labelled hierarchy."""
    with_ip = [d for d in devices if d.has_ip]
    if not with_ip:
        logger.info("No devices with an IP address; rendering empty network")
        return RenderableNode(name=ROOT_NAME)

    root = normalize_root(assemble_tree([d.ip for d in with_ip]))
    root = attach_devices(root, group_by_ip(with_ip))
    return sort_tree(root)
