"""Rectangular partition (icicle) layout and colour assignment.

Coordinates are layout pixels.  ``x`` runs along the sibling axis
(vertical on screen), ``y`` along the depth axis (horizontal on screen).
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Optional

from lanmap.models import RenderableNode
from lanmap.palette import quantize, rainbow

ROOT_COLOR = "#cccccc"
FILL_OPACITY = 0.6
# Number of depth columns visible at once.
VISIBLE_COLUMNS = 3


@dataclass(frozen=True)
class Region:
    x0: float
    x1: float
    y0: float
    y1: float

    @property
    def thickness(self) -> float:
        """Extent along the sibling axis."""
        return self.x1 - self.x0

    def lerp(self, other: Region, t: float) -> Region:
        return Region(
            x0=self.x0 + (other.x0 - self.x0) * t,
            x1=self.x1 + (other.x1 - self.x1) * t,
            y0=self.y0 + (other.y0 - self.y0) * t,
            y1=self.y1 + (other.y1 - self.y1) * t,
        )


@dataclass(eq=False)
class LayoutNode:
    """A ``RenderableNode`` placed by the partition layout."""

    data: RenderableNode
    depth: int = 0
    parent: Optional[LayoutNode] = field(default=None, repr=False)
    children: list[LayoutNode] = field(default_factory=list, repr=False)
    height: int = 0
    value: int = 0
    region: Region = Region(0.0, 0.0, 0.0, 0.0)

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def branch(self) -> Optional[LayoutNode]:
        """The depth-1 ancestor (or self at depth 1); ``None`` for the root."""
        if self.depth == 0:
            return None
        node = self
        while node.depth > 1 and node.parent is not None:
            node = node.parent
        return node

    def ancestors(self) -> Iterator[LayoutNode]:
        """Yield this node, then each parent up to the root."""
        node: Optional[LayoutNode] = self
        while node is not None:
            yield node
            node = node.parent

    def descendants(self) -> Iterator[LayoutNode]:
        """Breadth-first walk starting with this node."""
        queue: deque[LayoutNode] = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children)

    @property
    def path(self) -> list[str]:
        return [n.name for n in reversed(list(self.ancestors()))]


def hierarchy(data: RenderableNode) -> LayoutNode:
    """Wrap ``data`` in layout nodes and compute depth, height and value."""
    root = LayoutNode(data=data)
    stack = [root]
    while stack:
        node = stack.pop()
        for child_data in node.data.children:
            child = LayoutNode(data=child_data, depth=node.depth + 1, parent=node)
            node.children.append(child)
            stack.append(child)

    # Post-order: leaves count 1, parents sum their children.
    for node in reversed(list(root.descendants())):
        if node.children:
            node.value = sum(c.value for c in node.children)
            node.height = 1 + max(c.height for c in node.children)
        else:
            node.value = 1
            node.height = 0
    return root


def tree_height(data: RenderableNode) -> int:
    if data.is_leaf:
        return 0
    return 1 + max(tree_height(c) for c in data.children)


def chart_depth_extent(tree_height: int, viewport_width: float) -> float:
    """Depth-axis size giving each column a third of the viewport."""
    return (tree_height + 1) * viewport_width / VISIBLE_COLUMNS


def _dice(parent: LayoutNode, x0: float, y0: float, x1: float, y1: float) -> None:
    k = (x1 - x0) / parent.value if parent.value else 0.0
    for child in parent.children:
        child_x1 = x0 + child.value * k
        child.region = Region(x0=x0, x1=child_x1, y0=y0, y1=y1)
        x0 = child_x1


def partition(
    data: RenderableNode,
    height: float,
    width: float,
    padding: float = 1.0,
) -> LayoutNode:
    """Lay out ``data`` in a ``height`` x ``width`` area.

    Every node gets a sibling-axis extent proportional to its leaf count
    nested inside its parent's extent, and one depth column of
    ``width / (tree height + 1)``.  ``padding`` is taken off the far edge
    of both axes.
    """
    root = hierarchy(data)
    n = root.height + 1
    root.region = Region(x0=padding, x1=height, y0=padding, y1=width / n)

    for node in root.descendants():
        r = node.region
        if node.children:
            _dice(
                node,
                r.x0,
                width * (node.depth + 1) / n,
                r.x1,
                width * (node.depth + 2) / n,
            )
        x0, y0 = r.x0, r.y0
        x1, y1 = r.x1 - padding, r.y1 - padding
        if x1 < x0:
            x0 = x1 = (x0 + x1) / 2
        if y1 < y0:
            y0 = y1 = (y0 + y1) / 2
        node.region = Region(x0=x0, x1=x1, y0=y0, y1=y1)
    return root


def rect_height(region: Region) -> float:
    t = region.thickness
    return t - min(1.0, t / 2)


def rect_width(region: Region) -> float:
    return region.y1 - region.y0 - 1


def assign_colors(root: LayoutNode) -> dict[str, str]:
    """Map each top-level branch name to its rainbow colour."""
    palette = quantize(rainbow, len(root.children) + 1)
    return {
        child.name: palette[i % len(palette)]
        for i, child in enumerate(root.children)
    }


def node_color(node: LayoutNode, colors: dict[str, str]) -> str:
    branch = node.branch
    if branch is None:
        return ROOT_COLOR
    return colors.get(branch.name, ROOT_COLOR)
