"""Tests for the octet tree builder."""

from lanmap.models import RenderableNode
from lanmap.tree_builder import (
    ROOT_NAME,
    assemble_tree,
    attach_devices,
    build_tree,
    group_by_ip,
    normalize_root,
    sort_tree,
)

from conftest import make_device


def _shape(node: RenderableNode):
    """Nested (name, [children]) tuples for readable assertions."""
    return (node.name, [_shape(c) for c in node.children])


def test_two_devices_in_one_subnet_collapse_to_single_root():
    """10.0.0.1/A and 10.0.0.2/B end up directly below a 10.0.0 root."""
    root = build_tree([
        make_device("10.0.0.1", "A"),
        make_device("10.0.0.2", "B"),
    ])

    assert _shape(root) == (
        "10.0.0",
        [
            ("10.0.0.1", [("A", [])]),
            ("10.0.0.2", [("B", [])]),
        ],
    )


def test_single_device_without_name_falls_back_to_ip():
    root = build_tree([make_device("192.168.1.5", "")])

    assert root.name == "192.168.1"
    assert _shape(root) == ("192.168.1", [("192.168.1.5", [("192.168.1.5", [])])])


def test_multiple_first_octets_get_network_root(home_devices):
    root = build_tree(home_devices)

    assert root.name == ROOT_NAME
    assert root.child_names() == ["10.0.0", "192.168.178"]


def test_devices_sharing_an_ip_become_sibling_leaves(home_devices):
    root = build_tree(home_devices)

    subnet = next(c for c in root.children if c.name == "192.168.178")
    shared = next(c for c in subnet.children if c.name == "192.168.178.20")
    assert shared.child_names() == ["laptop", "laptop-wifi"]


def test_devices_without_ip_are_dropped(home_devices):
    root = build_tree(home_devices)

    names = {n.name for n in root.walk()}
    assert "offline-printer" not in names


def test_empty_device_list_renders_placeholder():
    root = build_tree([])

    assert root == RenderableNode(name=ROOT_NAME)


def test_only_devices_without_ip_renders_placeholder():
    root = build_tree([make_device("", "ghost")])

    assert root.name == ROOT_NAME
    assert root.is_leaf


def test_leaf_set_equals_distinct_ips():
    ips = [
        "10.0.0.1", "10.0.0.2", "10.0.1.7", "10.1.0.1",
        "192.168.1.5", "192.168.2.9", "10.0.0.1",
    ]

    root = normalize_root(assemble_tree(ips))

    assert {leaf.name for leaf in root.leaves()} == set(ips)


def test_internal_nodes_are_named_by_their_own_octet():
    ips = ["10.0.0.1", "10.0.1.7", "10.1.0.1"]

    root = normalize_root(assemble_tree(ips))

    assert _shape(root) == (
        "10",
        [
            ("0", [
                ("0", [("10.0.0.1", [])]),
                ("1", [("10.0.1.7", [])]),
            ]),
            ("1.0", [("10.1.0.1", [])]),
        ],
    )


def test_no_single_child_chains_above_address_level():
    ips = [
        "10.0.0.1", "10.0.0.2", "10.0.1.7", "10.1.0.1", "10.2.3.4",
        "172.16.5.1", "192.168.1.5", "192.168.2.9",
    ]

    root = normalize_root(assemble_tree(ips))

    for node in root.walk():
        if len(node.children) == 1:
            assert node.children[0].is_leaf, node.name


def test_short_address_is_kept_as_leaf():
    root = normalize_root(assemble_tree(["10.0.5", "10.1.2.3", "10.1.2.4"]))

    assert "10.0.5" in {leaf.name for leaf in root.leaves()}


def test_attach_devices_does_not_mutate_input():
    base = RenderableNode("10.0.0", (RenderableNode("10.0.0.1"),))
    device = make_device("10.0.0.1", "A")

    attached = attach_devices(base, group_by_ip([device]))

    assert base.children[0].is_leaf
    assert attached.children[0].child_names() == ["A"]


def test_attach_devices_leaves_unknown_ips_alone():
    base = RenderableNode("10.0.0", (RenderableNode("10.0.0.9"),))

    attached = attach_devices(base, group_by_ip([make_device("10.0.0.1", "A")]))

    assert attached == base


def test_sort_tree_orders_every_level():
    tree = RenderableNode("root", (
        RenderableNode("b", (RenderableNode("z"), RenderableNode("y"))),
        RenderableNode("a"),
    ))

    sorted_tree = sort_tree(tree)

    assert sorted_tree.child_names() == ["a", "b"]
    assert sorted_tree.children[1].child_names() == ["y", "z"]


def test_sort_tree_is_idempotent(home_devices):
    root = build_tree(home_devices)

    assert sort_tree(root) == root
    assert sort_tree(sort_tree(root)) == sort_tree(root)


def test_group_by_ip_keeps_all_devices():
    devices = [make_device("10.0.0.1", "a"), make_device("10.0.0.1", "b")]

    grouped = group_by_ip(devices)

    assert [d.friendly_name for d in grouped["10.0.0.1"]] == ["a", "b"]
