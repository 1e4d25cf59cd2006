"""Click-to-zoom state transitions for the partition chart.

Focus is an explicit value: ``next_focus`` maps (current focus, clicked
node) to the new focus, and ``target_regions`` is a pure function of the
laid-out tree and that focus.  The widget only animates between region
sets.
"""

from __future__ import annotations

from dataclasses import dataclass

from lanmap.partition import LayoutNode, Region

DEFAULT_LABEL_MIN_THICKNESS = 16.0

RegionMap = dict[int, Region]


def next_focus(focus: LayoutNode, clicked: LayoutNode) -> LayoutNode:
    """Zoom into ``clicked``, or out to its parent if it is already focused.

    The root has no parent, so clicking it leaves the focus unchanged.
    """
    if clicked.parent is None:
        return focus
    if clicked is focus:
        return clicked.parent
    return clicked


def target_regions(root: LayoutNode, focus: LayoutNode, height: float) -> RegionMap:
    """Regions of every node once ``focus`` fills the sibling axis."""
    f = focus.region
    span = f.x1 - f.x0
    scale = height / span if span else 0.0
    targets: RegionMap = {}
    for node in root.descendants():
        r = node.region
        targets[id(node)] = Region(
            x0=(r.x0 - f.x0) * scale,
            x1=(r.x1 - f.x0) * scale,
            y0=r.y0 - f.y0,
            y1=r.y1 - f.y0,
        )
    return targets


def base_regions(root: LayoutNode) -> RegionMap:
    return {id(node): node.region for node in root.descendants()}


def label_visible(
    region: Region,
    width: float,
    min_thickness: float = DEFAULT_LABEL_MIN_THICKNESS,
) -> bool:
    """Whether a label fits: thick enough and inside the depth viewport."""
    return region.y1 <= width and region.y0 >= 0 and region.thickness > min_thickness


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate_regions(start: RegionMap, end: RegionMap, t: float) -> RegionMap:
    """Blend two region sets; nodes missing from ``start`` jump to ``end``."""
    return {
        key: start[key].lerp(target, t) if key in start else target
        for key, target in end.items()
    }


@dataclass
class Transition:
    """An in-flight move from one region set to another."""

    start: RegionMap
    end: RegionMap

    def at(self, progress: float) -> RegionMap:
        if progress >= 1.0:
            return dict(self.end)
        return interpolate_regions(self.start, self.end, ease_cubic_in_out(progress))
