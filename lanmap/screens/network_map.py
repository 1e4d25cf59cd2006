"""Network map screen: the zoomable icicle chart of the device tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.color import Color
from textual.containers import Container
from textual.message import Message
from textual.reactive import reactive
from textual.screen import Screen
from textual.strip import Strip
from textual.widget import Widget
from textual.widgets import Footer, Header, Static

from lanmap.config import ViewConfig
from lanmap.models import RenderableNode
from lanmap.partition import (
    FILL_OPACITY,
    LayoutNode,
    Region,
    assign_colors,
    chart_depth_extent,
    node_color,
    partition,
    rect_height,
    rect_width,
    tree_height,
)
from lanmap.zoom import (
    RegionMap,
    Transition,
    base_regions,
    label_visible,
    next_focus,
    target_regions,
)

CHART_BACKGROUND = "#1e1e1e"
# Odd siblings are drawn a little fainter so stacked blocks stay apart.
ALT_FILL_OPACITY = 0.45


@dataclass
class _CellBox:
    """Cells covered by one drawn node (end-exclusive)."""
    c0: int
    c1: int
    r0: int
    r1: int
    node: LayoutNode

    def contains(self, x: int, y: int) -> bool:
        return self.c0 <= x < self.c1 and self.r0 <= y < self.r1


def _index_path(node: LayoutNode) -> list[int]:
    path: list[int] = []
    while node.parent is not None:
        path.append(node.parent.children.index(node))
        node = node.parent
    return list(reversed(path))


def _resolve(root: LayoutNode, path: list[int]) -> LayoutNode:
    node = root
    for index in path:
        if index >= len(node.children):
            break
        node = node.children[index]
    return node


class PartitionView(Widget):
    """Icicle chart of a ``RenderableNode`` tree with click-to-zoom.

    The layout runs in pixels; each terminal cell covers
    ``cell_width_px`` x ``cell_height_px`` of it.  Depth grows to the
    right, siblings are stacked top to bottom.
    """

    DEFAULT_CSS = """
    PartitionView {
        width: 80%;
        height: 80%;
        background: #1e1e1e;
    }
    """

    progress: reactive[float] = reactive(1.0)

    class FocusChanged(Message):
        """Posted after the zoom focus moved."""

        def __init__(self, node: LayoutNode) -> None:
            super().__init__()
            self.node = node

    def __init__(
        self,
        tree: RenderableNode,
        view: Optional[ViewConfig] = None,
        *,
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id)
        self._data_tree = tree
        self._view_config = view or ViewConfig()
        self._data_height = tree_height(tree)
        self._layout_root: Optional[LayoutNode] = None
        self._branch_colors: dict[str, str] = {}
        self._node_regions: RegionMap = {}
        self._zoom_transition: Optional[Transition] = None
        self._cell_boxes: list[_CellBox] = []
        self._strips: list[Strip] = []
        self._painted_size: Optional[tuple[int, int]] = None
        self._needs_paint = True
        self.zoom_focus: Optional[LayoutNode] = None

    # ── Geometry ───────────────────────────────────────────────

    @property
    def layout_root(self) -> Optional[LayoutNode]:
        return self._layout_root

    @property
    def viewport_width(self) -> float:
        return self.size.width * self._view_config.cell_width_px

    @property
    def viewport_height(self) -> float:
        return self.size.height * self._view_config.cell_height_px

    def current_region(self, node: LayoutNode) -> Region:
        return self._node_regions.get(id(node), node.region)

    def on_resize(self, event: events.Resize) -> None:
        self.relayout()

    def relayout(self) -> None:
        """Recompute the layout for the current size, keeping the focus."""
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            return
        focus_path = _index_path(self.zoom_focus) if self.zoom_focus else []

        self._layout_root = partition(
            self._data_tree,
            self.viewport_height,
            chart_depth_extent(self._data_height, self.viewport_width),
            self._view_config.padding,
        )
        self._branch_colors = assign_colors(self._layout_root)
        self.zoom_focus = _resolve(self._layout_root, focus_path)
        self._zoom_transition = None
        if self.zoom_focus is self._layout_root:
            self._node_regions = base_regions(self._layout_root)
        else:
            self._node_regions = target_regions(self._layout_root, self.zoom_focus, self.viewport_height)
        self._needs_paint = True
        self.refresh()

    # ── Zoom ───────────────────────────────────────────────────

    def on_click(self, event: events.Click) -> None:
        node = self.node_at(event.x, event.y)
        if node is not None:
            self.click_node(node)

    def click_node(self, node: LayoutNode) -> None:
        if self.zoom_focus is None:
            return
        new_focus = next_focus(self.zoom_focus, node)
        if new_focus is not self.zoom_focus:
            self.zoom_to(new_focus)

    def zoom_out(self) -> None:
        """Same as clicking the focused node."""
        if self.zoom_focus is not None:
            self.click_node(self.zoom_focus)

    def zoom_to(self, focus: LayoutNode) -> None:
        if self._layout_root is None:
            return
        self.zoom_focus = focus
        targets = target_regions(self._layout_root, focus, self.viewport_height)
        duration = self._view_config.transition_duration

        if duration <= 0:
            self._zoom_transition = None
            self._node_regions = targets
            self._needs_paint = True
            self.refresh()
        else:
            # Restart from whatever is on screen, even mid-flight.
            self._zoom_transition = Transition(start=dict(self._node_regions), end=targets)
            self._needs_paint = True
            self.progress = 0.0
            self.animate("progress", 1.0, duration=duration, easing="linear")

        self.post_message(self.FocusChanged(focus))

    def watch_progress(self, progress: float) -> None:
        if self._zoom_transition is None:
            return
        self._node_regions = self._zoom_transition.at(progress)
        self._needs_paint = True
        if progress >= 1.0:
            self._zoom_transition = None

    # ── Drawing ────────────────────────────────────────────────

    def label_shown(self, node: LayoutNode) -> bool:
        """Label rule, judged on where the node is heading while zooming."""
        region = self.current_region(node)
        if self._zoom_transition is not None:
            region = self._zoom_transition.end.get(id(node), region)
        return label_visible(
            region, self.viewport_width, self._view_config.label_min_thickness,
        )

    def _cell_box(self, node: LayoutNode, region: Region) -> _CellBox:
        cw = self._view_config.cell_width_px
        ch = self._view_config.cell_height_px
        c0 = round(region.y0 / cw)
        c1 = round((region.y0 + rect_width(region)) / cw)
        r0 = round(region.x0 / ch)
        r1 = round((region.x0 + rect_height(region)) / ch)
        return _CellBox(c0=c0, c1=c1, r0=r0, r1=r1, node=node)

    def _fill_for(self, node: LayoutNode, background: Color) -> Color:
        opacity = FILL_OPACITY
        if node.parent is not None and node.parent.children.index(node) % 2:
            opacity = ALT_FILL_OPACITY
        return background.blend(Color.parse(node_color(node, self._branch_colors)), opacity)

    def _paint(self) -> None:
        """Rasterise all nodes into cached strips."""
        cols, rows = self.size.width, self.size.height
        background = Color.parse(CHART_BACKGROUND)
        bg_style = Style(bgcolor=background.rich_color)
        cells: list[list[tuple[str, Style]]] = [
            [(" ", bg_style)] * cols for _ in range(rows)
        ]
        self._cell_boxes = []

        if self._layout_root is not None:
            for node in self._layout_root.descendants():
                region = self.current_region(node)
                box = self._cell_box(node, region)
                c0, c1 = max(box.c0, 0), min(box.c1, cols)
                r0, r1 = max(box.r0, 0), min(box.r1, rows)
                if c0 >= c1 or r0 >= r1:
                    continue
                self._cell_boxes.append(box)

                fill = self._fill_for(node, background)
                text_color = Color(0, 0, 0) if fill.brightness > 0.5 else Color(255, 255, 255)
                style = Style(bgcolor=fill.rich_color, color=text_color.rich_color)
                # Keep one background column as the gap between depths.
                fill_end = c1 - 1 if c1 - c0 > 1 else c1
                for row in range(r0, r1):
                    line = cells[row]
                    for col in range(c0, fill_end):
                        line[col] = (" ", style)

                if self.label_shown(node):
                    label_style = style + Style(bold=node is self.zoom_focus)
                    label = node.name[: max(fill_end - c0 - 1, 0)]
                    line = cells[r0]
                    for offset, char in enumerate(label, start=c0 + 1):
                        line[offset] = (char, label_style)

        self._strips = []
        for line in cells:
            segments = [Segment(char, style) for char, style in line]
            self._strips.append(Strip(Segment.simplify(segments), cols))
        self._painted_size = (cols, rows)
        self._needs_paint = False

    def _ensure_painted(self) -> None:
        if self._needs_paint or self._painted_size != (self.size.width, self.size.height):
            self._paint()

    def render_line(self, y: int) -> Strip:
        self._ensure_painted()
        if y < len(self._strips):
            return self._strips[y]
        return Strip.blank(self.size.width)

    def node_at(self, x: int, y: int) -> Optional[LayoutNode]:
        """Deepest node drawn at cell ``(x, y)``."""
        self._ensure_painted()
        for box in reversed(self._cell_boxes):
            if box.contains(x, y):
                return box.node
        return None


class NetworkMapScreen(Screen):
    """Screen hosting the device partition chart."""

    BINDINGS = [
        Binding("escape", "zoom_out", "Zoom out", show=True),
        Binding("question_mark", "help_screen", "Help", show=True),
    ]

    DEFAULT_CSS = """
    #map-status {
        height: 1;
        padding: 0 2;
        color: $text-muted;
    }

    #map-container {
        height: 1fr;
        align: center middle;
    }
    """

    def __init__(self, tree: RenderableNode, device_count: int, view: Optional[ViewConfig] = None) -> None:
        super().__init__()
        self._device_tree = tree
        self._device_count = device_count
        self._view_config = view

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="map-status", markup=True)
        with Container(id="map-container"):
            yield PartitionView(self._device_tree, self._view_config, id="partition")
        yield Footer()

    def on_mount(self) -> None:
        self._update_status(self._device_tree.name)

    def on_partition_view_focus_changed(self, event: PartitionView.FocusChanged) -> None:
        self._update_status(" › ".join(event.node.path))

    def _update_status(self, path: str) -> None:
        if self._device_count:
            count = f"{self._device_count} devices"
        else:
            count = "[italic]No devices[/italic]"
        self.query_one("#map-status", Static).update(
            f"[bold]{self._esc(path)}[/bold]  [dim]|[/dim]  {count}"
        )

    @staticmethod
    def _esc(text: str) -> str:
        """Escape Rich markup brackets in dynamic text."""
        return text.replace("[", "\\[")

    def action_zoom_out(self) -> None:
        self.query_one(PartitionView).zoom_out()

    def action_help_screen(self) -> None:
        from lanmap.screens.help_screen import HelpScreen
        self.app.push_screen(HelpScreen())
