"""Main LanMap Textual Application."""

from __future__ import annotations

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Header, Footer, Static, LoadingIndicator
from textual.containers import Container, Center, Middle
from textual import work

from lanmap.config import Config
from lanmap.discovery_client import DiscoveryClient, DiscoveryError
from lanmap.models import RenderableNode
from lanmap.tree_builder import build_tree


class LoadingScreen(Screen):
    """Screen shown while the device list is being fetched."""

    def compose(self) -> ComposeResult:
        yield Header()
        with Center():
            with Middle():
                with Container(id="loading-box"):
                    yield Static("Loading...", id="loading-msg")
                    yield LoadingIndicator()
        yield Footer()

    def on_mount(self):
        # Fetch once the header and indicator are on screen, so a fast
        # answer never pops a half-mounted screen.
        self.call_after_refresh(self.app.load_devices)


class ConnectionErrorScreen(Screen):
    """Screen shown when fetching the device list fails."""

    BINDINGS = [
        Binding("r", "retry", "Retry"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, error_message: str):
        super().__init__()
        self.error_message = error_message

    def compose(self) -> ComposeResult:
        yield Header()
        with Center():
            with Middle():
                with Container(id="error-box"):
                    yield Static("✗ Device discovery failed", id="error-title")
                    yield Static(self.error_message, id="error-detail", markup=False)
                    yield Static(
                        "\n[R] Retry  [Q] Quit\n"
                        "Check the endpoint in ~/.config/lanmap/config.yaml",
                        id="error-help",
                        markup=False,
                    )
        yield Footer()

    def action_retry(self):
        self.app.switch_screen(LoadingScreen())

    def action_quit_app(self):
        self.app.exit()


class LanMapApp(App):
    """LanMap - LAN device icicle chart."""

    TITLE = "LanMap"
    SUB_TITLE = "LAN devices by IP octet"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(self, config: Config, client: Optional[DiscoveryClient] = None):
        super().__init__()
        self.config = config
        self.discovery = client or DiscoveryClient(config)

    def on_mount(self):
        self.push_screen(LoadingScreen())

    @work(thread=True, exclusive=True, group="discovery")
    def load_devices(self):
        """Fetch devices and build the tree in a background thread."""
        try:
            devices = self.discovery.get_devices()
            tree = build_tree(devices)
            count = sum(1 for d in devices if d.has_ip)
            self.call_from_thread(self._on_loaded, tree, count)
        except DiscoveryError as e:
            self.call_from_thread(self._on_load_error, str(e))

    def _on_loaded(self, tree: RenderableNode, device_count: int):
        """Called when the device tree is ready."""
        self.pop_screen()  # Remove loading screen
        from lanmap.screens.network_map import NetworkMapScreen
        self.push_screen(NetworkMapScreen(tree, device_count, self.config.view))

    def _on_load_error(self, error: str):
        """Called when the fetch fails."""
        self.pop_screen()  # Remove loading screen
        self.push_screen(ConnectionErrorScreen(error))
