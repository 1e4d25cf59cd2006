"""Help screen for LanMap."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Header, Footer, Static
from textual.containers import VerticalScroll


HELP_TEXT = """\
[bold cyan]LanMap - LAN devices by IP octet[/bold cyan]

[bold]Global Keys[/bold]
  [bold cyan]q[/bold cyan]           Quit the application
  [bold cyan]?[/bold cyan]           Show this help screen
  [bold cyan]Escape[/bold cyan]      Zoom out / Close current screen

[bold]Network Map[/bold]
  [bold cyan]Click[/bold cyan]       Zoom into the clicked block
  [bold cyan]Click[/bold cyan]       On the zoomed block: zoom back out to its parent
  [bold cyan]Escape[/bold cyan]      Zoom out one level

  Columns from left to right: network, octet groups, addresses,
  devices.  Blocks keep the colour of their top-level group.
  Labels are hidden on blocks too thin to hold one.

[bold]About[/bold]
  LanMap fetches the device list once at startup and shows it
  as an icicle chart.

  Configuration: ~/.config/lanmap/config.yaml
  Print the tree: lanmap tree
"""


class HelpScreen(Screen):
    """Help screen showing keybindings and mouse actions."""

    BINDINGS = [
        Binding("escape", "go_back", "Close", show=True),
        Binding("backspace", "go_back", "Close", show=False),
        Binding("question_mark", "go_back", "Close", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="help-container"):
            yield Static(HELP_TEXT, markup=True)
        yield Footer()

    def action_go_back(self):
        self.app.pop_screen()
