"""Entry point for LanMap CLI."""

import locale
import logging
import sys
from pathlib import Path
from typing import Optional


def _config_path(argv: list) -> Optional[Path]:
    """Value of ``--config PATH`` / ``--config=PATH`` if given."""
    for i, arg in enumerate(argv):
        if arg == "--config" and i + 1 < len(argv):
            return Path(argv[i + 1])
        if arg.startswith("--config="):
            return Path(arg.split("=", 1)[1])
    return None


def setup_logging(config) -> None:
    """Route log records to the Textual devtools console (and a file)."""
    from textual.logging import TextualHandler

    handlers: list = [TextualHandler()]
    if config.logging.file:
        handlers.append(logging.FileHandler(config.logging.file))
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def print_tree(config) -> bool:
    """Fetch devices and print the octet hierarchy to the terminal."""
    from rich.console import Console
    from rich.markup import escape
    from rich.tree import Tree
    from lanmap.discovery_client import DiscoveryClient, DiscoveryError
    from lanmap.tree_builder import build_tree

    console = Console()
    try:
        with console.status("Loading..."):
            devices = DiscoveryClient(config).get_devices()
    except DiscoveryError as e:
        console.print(f"\n[bold red]Device discovery failed:[/bold red] {escape(str(e))}")
        return False

    root = build_tree(devices)

    def add(branch, node):
        for child in node.children:
            name = escape(child.name)
            label = name if child.children else f"[dim]{name}[/dim]"
            add(branch.add(label), child)

    tree = Tree(f"[bold]{escape(root.name)}[/bold]")
    add(tree, root)
    console.print(tree)
    return True


def main():
    """Main entry point."""
    from lanmap.config import Config, ConfigError

    argv = sys.argv[1:]

    # Name ordering follows the user's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        pass

    # Load config
    try:
        config = Config.load(_config_path(argv))
    except ConfigError as e:
        from rich.console import Console
        console = Console()
        console.print(f"\n[bold red]Configuration Error:[/bold red] {e}")
        console.print(
            "\n[yellow]Fix or remove your LanMap config:[/yellow]"
            "\n  [bold]~/.config/lanmap/config.yaml[/bold]"
            "\n\nAn example lives in:"
            "\n  [bold]config/config.example.yaml[/bold]"
        )
        sys.exit(1)

    setup_logging(config)

    # Check for tree printing mode
    if argv and argv[0] == "tree":
        sys.exit(0 if print_tree(config) else 1)

    # Launch the TUI app
    from lanmap.app import LanMapApp
    app = LanMapApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
