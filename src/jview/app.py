"""JSON explorer application."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.logging import TextualHandler
from textual.widgets import Button, Footer, Header, Input, Static, TextArea

from .document import READ_ERROR, Workspace
from .render import stats_table, to_rich_tree
from .widget import JsonTreeView, StatsPanel

logger = logging.getLogger(__name__)

_HINT = "Paste or edit JSON above, then parse to refresh the explorer."


class JsonExplorerApp(App):
    """TUI app: source editor, structure tree and document metrics."""

    CSS_PATH = "app.tcss"
    TITLE = "JSON Explorer"
    BINDINGS = [
        ("ctrl+r", "parse", "Parse JSON"),
        ("ctrl+o", "open_path", "Open file"),
        ("ctrl+l", "load_sample", "Load sample"),
        ("ctrl+q", "quit", "Quit"),
    ]
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, workspace: Workspace | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        if workspace is None:
            workspace = Workspace()
            workspace.load_sample()
        self.workspace = workspace

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="workspace"):
            with Vertical(id="main-column"):
                with Vertical(id="source-panel"):
                    yield Static("[b]Data Source[/b]", id="source-title")
                    yield Static("", id="source-info")
                    with Horizontal(id="source-actions"):
                        yield Input(placeholder="path/to/file.json", id="path-input")
                        yield Button("Open", id="open")
                        yield Button("Load sample", id="sample", variant="success")
                    yield TextArea(self.workspace.text, id="source")
                    with Horizontal(id="parse-row"):
                        yield Static(_HINT, id="message")
                        yield Button("Parse JSON", id="parse", variant="primary")
                with Vertical(id="structure-panel"):
                    yield Static("[b]Structure[/b]", id="structure-title")
                    yield JsonTreeView(id="tree")
            with Vertical(id="stats-column"):
                yield Static("[b]Quick Snapshot[/b]", id="stats-title")
                yield StatsPanel(id="stats")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_document()
        self.query_one("#tree").focus()

    # -- Document --------------------------------------------------------

    def _refresh_document(self) -> None:
        """Push the workspace snapshot and message into the widgets."""
        ws = self.workspace
        message = self.query_one("#message", Static)
        if ws.error:
            message.update(Text(ws.error, style="red"))
        else:
            message.update(_HINT)

        snapshot = ws.snapshot
        if snapshot is None:
            self.query_one("#source-info", Static).update("[dim]No document loaded[/dim]")
            return
        self.sub_title = snapshot.label
        self.query_one("#source-info", Static).update(
            f"Active: [b]{escape(snapshot.label)}[/b]\n"
            f"[dim]Updated {snapshot.updated_at:%Y-%m-%d %H:%M:%S}[/dim]"
        )
        self.query_one("#tree", JsonTreeView).show_document(snapshot.tree)
        self.query_one("#stats", StatsPanel).show_stats(snapshot.stats)

    def _report(self, ok: bool) -> None:
        if ok:
            self.notify(f"Loaded: {self.workspace.label}", severity="information")
        else:
            self.notify(self.workspace.error or "", severity="error", timeout=6)
        self._refresh_document()

    def action_parse(self) -> None:
        text = self.query_one("#source", TextArea).text
        self.workspace.text = text
        self._report(self.workspace.parse_and_load(text))

    def action_load_sample(self) -> None:
        ok = self.workspace.load_sample()
        self.query_one("#source", TextArea).load_text(self.workspace.text)
        self.query_one("#tree", JsonTreeView).reset_view_state()
        self._report(ok)

    def action_open_path(self) -> None:
        target = self.query_one("#path-input", Input).value.strip()
        if not target:
            self.notify("No file name given", severity="warning")
            return
        logger.debug("open requested: %s", target)
        ok = self.workspace.load_file(target)
        # A file that was read but did not parse still goes into the editor.
        if ok or self.workspace.error != READ_ERROR:
            self.query_one("#source", TextArea).load_text(self.workspace.text)
        if ok:
            self.query_one("#tree", JsonTreeView).reset_view_state()
        self._report(ok)

    # -- Event handlers --------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "parse":
            self.action_parse()
        elif event.button.id == "sample":
            self.action_load_sample()
        elif event.button.id == "open":
            self.action_open_path()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "path-input":
            self.action_open_path()


def print_summary(
    workspace: Workspace, console: Console, expand_all: bool = False
) -> bool:
    """Print the metrics and tree of the loaded document to *console*."""
    if workspace.snapshot is None:
        console.print(workspace.error or "No document loaded", style="red")
        return False
    snapshot = workspace.snapshot
    console.print(Text(snapshot.label, style="bold"))
    console.print(stats_table(snapshot.stats))
    console.print(to_rich_tree(snapshot.tree, expand_all=expand_all))
    return True


def _configure_logging(verbose: bool, summary: bool) -> None:
    handler: logging.Handler
    if summary:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    else:
        handler = TextualHandler()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jview",
        description="Explore the structure of a JSON document",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to open (the sample dataset when omitted)",
    )
    parser.add_argument(
        "--root-label",
        default="root",
        help="label shown on the root node",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="print metrics and tree to the terminal and exit",
    )
    parser.add_argument(
        "--expand-all",
        action="store_true",
        help="with --summary, print collapsed branches too",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    args = parser.parse_args()
    _configure_logging(args.verbose, args.summary)

    workspace = Workspace(root_label=args.root_label)
    file_path: str = args.file
    if file_path:
        if not Path(file_path).exists():
            print(f"jview: {file_path}: No such file", file=sys.stderr)
            sys.exit(1)
        loaded = workspace.load_file(file_path)
    else:
        loaded = workspace.load_sample()

    if args.summary:
        if not loaded:
            print(f"jview: {workspace.error}", file=sys.stderr)
            sys.exit(1)
        print_summary(workspace, Console(), expand_all=args.expand_all)
        return

    app = JsonExplorerApp(workspace=workspace)
    app.run()


if __name__ == "__main__":
    main()
