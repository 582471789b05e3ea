"""Tests for the explorer app, driven headlessly."""

import asyncio

from textual.widgets import TextArea

from jview.app import JsonExplorerApp
from jview.document import SAMPLE_LABEL, Workspace
from jview.widget import JsonTreeView, StatsPanel


def _run(scenario, workspace=None):
    """Run *scenario(app, pilot)* inside a headless app session."""

    async def runner():
        app = JsonExplorerApp(workspace=workspace)
        async with app.run_test(size=(140, 50)) as pilot:
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(runner())


def _manual(text):
    ws = Workspace()
    ws.text = text
    ws.parse_and_load(text)
    return ws


class TestStartup:
    """Initial document display."""

    def test_sample_loaded_by_default(self):
        async def scenario(app, pilot):
            assert app.workspace.label == SAMPLE_LABEL
            tree = app.query_one("#tree", JsonTreeView)
            assert tree.json_root is app.workspace.snapshot.tree
            stats = app.query_one("#stats", StatsPanel)
            assert stats.stats == app.workspace.snapshot.stats
            assert app.query_one("#source", TextArea).text == app.workspace.text

        _run(scenario)

    def test_default_open_policy(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            assert tree.root.is_expanded
            outer = tree.root.children[0]
            assert outer.data.name == "outer"
            assert outer.is_expanded
            inner = outer.children[0]
            assert inner.data.name == "inner"
            assert inner.data.depth == 2
            assert not inner.is_expanded
            assert inner.allow_expand

        _run(scenario, _manual('{"outer": {"inner": {"leaf": 1}}}'))

    def test_children_in_document_order(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            names = [child.data.name for child in tree.root.children]
            assert names == ["b", "a", "c"]

        _run(scenario, _manual('{"b": 1, "a": 2, "c": 3}'))


class TestReparse:
    """Parsing edited text."""

    def test_parse_replaces_document(self):
        async def scenario(app, pilot):
            app.query_one("#source", TextArea).load_text('{"a": [1, 2, {"b": 3}]}')
            app.action_parse()
            await pilot.pause()
            stats = app.query_one("#stats", StatsPanel).stats
            assert stats.node_count == 6
            assert stats.max_depth == 2
            assert app.workspace.label == "Manual input"

        _run(scenario, _manual("[]"))

    def test_failed_parse_keeps_tree_and_stats(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            before_tree = tree.json_root
            before_stats = app.query_one("#stats", StatsPanel).stats
            app.query_one("#source", TextArea).load_text('{"a": ')
            app.action_parse()
            await pilot.pause()
            assert tree.json_root is before_tree
            assert app.query_one("#stats", StatsPanel).stats == before_stats
            assert app.workspace.error.startswith("Unable to parse JSON")

        _run(scenario, _manual('{"x": 1}'))

    def test_user_toggle_survives_reparse(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            tree.root.children[0].collapse()
            await pilot.pause()
            app.action_parse()
            await pilot.pause()
            assert tree.root.children[0].data.name == "outer"
            assert not tree.root.children[0].is_expanded

        _run(scenario, _manual('{"outer": {"inner": 1}}'))

    def test_load_sample_resets_toggles(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            tree.root.children[0].collapse()
            await pilot.pause()
            app.action_load_sample()
            await pilot.pause()
            assert app.workspace.label == SAMPLE_LABEL
            customer = tree.root.children[2]
            assert customer.data.name == "customer"
            assert customer.is_expanded

        _run(scenario, _manual('{"customer": {"x": 1}}'))

    def test_only_user_changes_are_remembered(self):
        async def scenario(app, pilot):
            tree = app.query_one("#tree", JsonTreeView)
            assert tree._toggled == {}
            app.action_parse()
            await pilot.pause()
            assert tree._toggled == {}
            tree.root.children[0].collapse()
            await pilot.pause()
            assert tree._toggled == {("outer",): False}
            tree.root.children[0].expand()
            await pilot.pause()
            assert tree._toggled == {}

        _run(scenario, _manual('{"outer": {"inner": {"leaf": 1}}}'))


class TestOpenFile:
    """Opening a file typed into the path input."""

    def test_open_path(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text('{"id": [1, 2]}', encoding="utf-8")

        async def scenario(app, pilot):
            app.query_one("#path-input").value = str(path)
            app.action_open_path()
            await pilot.pause()
            assert app.workspace.label == "orders.json"
            assert app.query_one("#source", TextArea).text == '{"id": [1, 2]}'
            assert app.query_one("#stats", StatsPanel).stats.array_count == 1

        _run(scenario, _manual("{}"))

    def test_open_missing_path(self, tmp_path):
        async def scenario(app, pilot):
            before = app.workspace.snapshot
            app.query_one("#path-input").value = str(tmp_path / "nope.json")
            app.action_open_path()
            await pilot.pause()
            assert app.workspace.snapshot is before
            assert app.workspace.error == "Unable to read the selected file."

        _run(scenario, _manual("{}"))

    def test_open_invalid_json_shows_text(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2", encoding="utf-8")

        async def scenario(app, pilot):
            before = app.workspace.snapshot
            app.query_one("#path-input").value = str(path)
            app.action_open_path()
            await pilot.pause()
            assert app.query_one("#source", TextArea).text == "[1, 2"
            assert app.workspace.snapshot is before
            assert app.workspace.error.startswith("Unable to parse JSON")

        _run(scenario, _manual("{}"))
