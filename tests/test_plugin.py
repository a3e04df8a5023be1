import json

import pytest

from synapomorphia.plugin import SynapomorphiaPlugin
from synapomorphia.views import TREE_QUIZ_VIEW
from synapomorphia.workspace import Editor, Menu, Workspace


def _saved(store):
    return json.loads(store.path.read_text(encoding="utf-8"))


# ── Settings ──────────────────────────────────────────────────────────

def test_onload_uses_saved_partial_record(workspace, vault, store):
    store.save_data({"phylo_header": 5})
    plugin = SynapomorphiaPlugin(workspace, vault_path=vault, store=store)
    plugin.onload()
    assert plugin.settings.to_dict() == {
        "phylo_prop": "Arbre Phylogénétique",
        "phylo_header": 5,
        "syna_prop": "Synapomorphies",
        "syna_header": 3,
        "child_folder": "fils",
    }
    plugin.onunload()


@pytest.mark.parametrize(
    "field, value, expected",
    [
        ("phylo_prop", "Tree", "Tree"),
        ("phylo_header", "2", 2),
        ("syna_prop", "Traits", "Traits"),
        ("syna_header", "6", 6),
        ("child_folder", "children", "children"),
    ],
)
def test_every_edit_persists_full_record(plugin, store, field, value, expected):
    tab = plugin.events.setting_tabs[0]
    tab.on_change(field, value)
    saved = _saved(store)
    assert set(saved) == {"phylo_prop", "phylo_header", "syna_prop", "syna_header", "child_folder"}
    assert saved[field] == expected


def test_setting_tab_rejects_header_outside_dropdown(plugin, store):
    tab = plugin.events.setting_tabs[0]
    with pytest.raises(ValueError):
        tab.on_change("syna_header", "7")
    assert not store.path.exists()


def test_setting_tab_display(plugin):
    container = plugin.events.setting_tabs[0].display()
    assert container.children[0].text == "Synapomorphia Settings"
    assert len(container.find_all("select")) == 2
    assert len(container.find_all("input")) == 3
    options = container.find_all("option")
    assert [o.text for o in options[:6]] == [
        "H1 (#)", "H2 (##)", "H3 (###)", "H4 (####)", "H5 (#####)", "H6 (######)",
    ]
    selected = [o.text for o in options if "selected" in o.classes]
    assert selected == ["H3 (###)", "H3 (###)"]


# ── Tree Quiz panel ───────────────────────────────────────────────────

def test_activate_creates_panel_by_splitting_active_leaf(plugin, workspace):
    original = workspace.active_leaf
    leaf = plugin.activate_tree_quiz_view()
    assert leaf is not None
    assert workspace.leaves == [original, leaf]
    assert leaf.view.get_display_text() == "Tree Quiz View"
    assert leaf.view.content_el.render() == '<div class="view-content"><h4>Tree Quiz View!</h4></div>'
    assert workspace.active_leaf is leaf


def test_activate_twice_reveals_existing_panel(plugin, workspace):
    first = plugin.activate_tree_quiz_view()
    second = plugin.activate_tree_quiz_view()
    assert first is second
    assert len(workspace.get_leaves_of_type(TREE_QUIZ_VIEW)) == 1
    assert workspace.revealed[-1] is first


def test_activate_without_active_leaf_creates_nothing(vault, store):
    workspace = Workspace()
    plugin = SynapomorphiaPlugin(workspace, vault_path=vault, store=store)
    plugin.onload()
    assert plugin.activate_tree_quiz_view() is None
    assert workspace.leaves == []
    assert workspace.notices == ["Test"]


def test_ribbon_icon_opens_panel(plugin, workspace):
    assert plugin.events.click_ribbon("Synapomorphia")
    assert len(workspace.get_leaves_of_type(TREE_QUIZ_VIEW)) == 1


# ── Commands ──────────────────────────────────────────────────────────

def test_simple_command_opens_modal(plugin, workspace):
    assert plugin.events.execute_command("open-sample-modal-simple")
    assert workspace.modals[-1].content_el.text == "Woah!"
    workspace.modals[-1].close()
    assert workspace.modals == []


def test_editor_command_replaces_selection(plugin, workspace):
    assert not plugin.events.execute_command("sample-editor-command")
    workspace.active_editor = Editor("hello world", selection=(6, 11))
    assert plugin.events.execute_command("sample-editor-command")
    assert workspace.active_editor.text == "hello Sample Editor Command"


def test_complex_command_only_with_editor(plugin, workspace):
    assert not plugin.events.is_command_available("open-sample-modal-complex")
    assert not plugin.events.execute_command("open-sample-modal-complex")
    assert workspace.modals == []
    workspace.active_editor = Editor("")
    assert plugin.events.is_command_available("open-sample-modal-complex")
    assert plugin.events.execute_command("open-sample-modal-complex")
    assert len(workspace.modals) == 1


# ── File menu ─────────────────────────────────────────────────────────

def test_file_menu_item_only_for_folders(plugin, vault):
    menu = Menu()
    plugin.events.trigger("file-menu", menu, vault / "Vertebrata" / "Vertebrata.md")
    assert menu.items == []

    menu = Menu()
    plugin.events.trigger("file-menu", menu, vault / "Vertebrata")
    item = menu.item("Generate Phylogenetic Tree")
    assert item is not None and item.icon == "bug"


def test_file_menu_click_notices_folder_and_writes_report(plugin, workspace, vault):
    menu = Menu()
    plugin.events.trigger("file-menu", menu, "Vertebrata")
    report = menu.item("Generate Phylogenetic Tree").click()
    assert "Vertebrata" in workspace.notices
    assert report.exists()
    assert "[[Tetrapoda]]" in report.read_text(encoding="utf-8")
    assert plugin.last_tree.name == "Vertebrata"


def test_file_menu_click_with_bad_header_shows_notice(plugin, workspace, store):
    plugin.settings.phylo_header = 0
    menu = Menu()
    plugin.events.trigger("file-menu", menu, "Vertebrata")
    assert menu.item("Generate Phylogenetic Tree").click() is None
    assert workspace.notices[-1].startswith("Synapomorphia: header level")


# ── Unload ────────────────────────────────────────────────────────────

def test_unload_releases_everything(plugin, workspace):
    plugin.activate_tree_quiz_view()
    plugin.onunload()
    assert plugin.events.commands == {}
    assert not plugin.events.click_ribbon("Synapomorphia")
    assert plugin.events.run_due(now=float("inf")) == 0
    assert workspace.get_leaves_of_type(TREE_QUIZ_VIEW) == []
    assert workspace.view_factory(TREE_QUIZ_VIEW) is None


def test_reload_after_unload(plugin, workspace, vault, store):
    plugin.onunload()
    again = SynapomorphiaPlugin(workspace, vault_path=vault, store=store)
    again.onload()
    assert "open-sample-modal-simple" in again.events.commands
    again.onunload()


def test_setting_tab_apply_checks_every_field_before_saving(plugin, store):
    tab = plugin.events.setting_tabs[0]
    with pytest.raises(ValueError):
        tab.apply({"phylo_prop": "Changed", "syna_header": "0"})
    assert not store.path.exists()
    assert plugin.settings.phylo_prop == "Arbre Phylogénétique"

    assert tab.apply({"phylo_prop": "Changed", "syna_header": "4", "child_folder": "fils"}) == [
        "phylo_prop", "syna_header",
    ]
    saved = _saved(store)
    assert saved["phylo_prop"] == "Changed" and saved["syna_header"] == 4
    assert len(saved) == 5
