"""LanMap TUI screens."""

from lanmap.screens.network_map import NetworkMapScreen, PartitionView
from lanmap.screens.help_screen import HelpScreen

__all__ = [
    "NetworkMapScreen",
    "PartitionView",
    "HelpScreen",
]
