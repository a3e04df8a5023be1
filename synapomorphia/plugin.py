"""
Plugin — ties settings, the workspace, and the vault services together.

On load it registers, through its event-subscription table:
  1. the Tree Quiz panel type and a ribbon icon that opens it
  2. three commands (simple, editor, check-then-run)
  3. the settings tab
  4. a click logger and a periodic interval
  5. a folder context-menu entry that generates a phylogenetic tree
All of it is released together on unload.

Click events are fired by whoever hosts the workspace; the Flask app
runs due intervals before each request.
"""

import logging
from pathlib import Path

from synapomorphia import config
from synapomorphia.events import EventRegistry
from synapomorphia.services.section_extractor import InvalidHeaderLevel
from synapomorphia.services.tree_builder import PhyloNode, build_tree, generate_report
from synapomorphia.services.vault_manager import VaultManager
from synapomorphia.settings import (
    DEFAULT_SETTINGS,
    HEADER_FIELDS,
    HEADER_OPTIONS,
    SETTING_FIELDS,
    SettingsStore,
    SynaSettings,
    coerce_value,
    merge_settings,
)
from synapomorphia.views import TREE_QUIZ_VIEW, TreeQuizView
from synapomorphia.workspace import Element, Leaf, Menu, Modal, Notice, Workspace

logger = logging.getLogger(__name__)


class SynapomorphiaPlugin:
    """Plugin entry object: owns the settings record and every registration."""

    def __init__(
        self,
        workspace: Workspace,
        vault_path: Path | None = None,
        store: SettingsStore | None = None,
    ):
        self.workspace = workspace
        self.vm = VaultManager(vault_path)
        self.store = store or SettingsStore(config.settings_path(self.vm.vault_path))
        self.settings: SynaSettings = SynaSettings(**DEFAULT_SETTINGS.to_dict())
        self.events = EventRegistry(workspace)
        self.last_tree: PhyloNode | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────

    def onload(self) -> None:
        self.load_settings()

        self.workspace.register_view(TREE_QUIZ_VIEW, lambda leaf: TreeQuizView(leaf))

        ribbon = self.events.add_ribbon_icon(
            "bug", "Synapomorphia", self.activate_tree_quiz_view
        )
        ribbon.add_class("synapomorphia-ribbon-class")

        self.events.add_command(
            id="open-sample-modal-simple",
            name="Open sample modal (simple)",
            callback=lambda: SampleModal(self.workspace).open(),
        )
        self.events.add_command(
            id="sample-editor-command",
            name="Sample editor command",
            editor_callback=self._replace_selection,
        )
        self.events.add_command(
            id="open-sample-modal-complex",
            name="Open sample modal (complex)",
            check_callback=self._check_open_modal,
        )

        self.events.add_setting_tab(SynaSettingTab(self))

        self.events.on("click", lambda evt: logger.debug("click %s", evt))
        self.events.register_interval(
            lambda: logger.debug("interval tick"),
            config.SYNAPOMORPHIA_INTERVAL_SECONDS,
        )
        self.events.on("file-menu", self._on_file_menu)
        logger.info("Synapomorphia loaded (vault: %s)", self.vm.vault_path)

    def onunload(self) -> None:
        self.events.release()
        self.workspace.detach_leaves_of_type(TREE_QUIZ_VIEW)
        self.workspace.unregister_view(TREE_QUIZ_VIEW)
        logger.info("Synapomorphia unloaded")

    # ── Settings ──────────────────────────────────────────────────────

    def load_settings(self) -> SynaSettings:
        self.settings = merge_settings(self.store.load_data())
        return self.settings

    def save_settings(self) -> None:
        self.store.save_data(self.settings.to_dict())

    def update_setting(self, field: str, value) -> None:
        """Write one field and persist the whole record."""
        setattr(self.settings, field, coerce_value(field, value))
        self.save_settings()
        logger.info("Setting %s = %r", field, getattr(self.settings, field))

    # ── Commands ──────────────────────────────────────────────────────

    def _replace_selection(self, editor) -> None:
        logger.info("Selection: %s", editor.get_selection())
        editor.replace_selection("Sample Editor Command")

    def _check_open_modal(self, checking: bool) -> bool:
        if self.workspace.active_editor is None:
            return False
        if not checking:
            SampleModal(self.workspace).open()
        return True

    # ── Tree Quiz panel ───────────────────────────────────────────────

    def activate_tree_quiz_view(self) -> Leaf | None:
        """Reveal the existing panel, or split the active leaf to host a new one."""
        Notice(self.workspace, "Test")
        leaves = self.workspace.get_leaves_of_type(TREE_QUIZ_VIEW)

        if leaves:
            leaf = leaves[0]
            self.workspace.reveal_leaf(leaf)
            return leaf

        active = self.workspace.active_leaf
        if active is None:
            logger.debug("No active leaf to split — panel not opened")
            return None

        leaf = self.workspace.create_leaf_by_split(active, "vertical")
        leaf.set_view_state(TREE_QUIZ_VIEW, active=True)
        self.workspace.reveal_leaf(leaf)
        return leaf

    # ── Phylogenetic tree ─────────────────────────────────────────────

    def _on_file_menu(self, menu: Menu, file: Path) -> None:
        if not self.vm.resolve(file).is_dir():
            return
        item = menu.add_item()
        item.set_icon("bug")
        item.set_title("Generate Phylogenetic Tree")
        item.on_click = lambda: self._generate_from_menu(file)

    def _generate_from_menu(self, folder: Path) -> Path | None:
        Notice(self.workspace, Path(folder).name)
        try:
            node = self.generate_tree(folder)
        except (InvalidHeaderLevel, FileNotFoundError) as exc:
            logger.exception("Tree generation failed for %s", folder)
            Notice(self.workspace, f"Synapomorphia: {exc}")
            return None
        return self.vm.write_report(f"Phylogenetic Tree — {node.name}", generate_report(node))

    def generate_tree(self, folder: Path) -> PhyloNode:
        self.last_tree = build_tree(self.vm, Path(folder), self.settings)
        return self.last_tree


class SampleModal(Modal):
    def on_open(self) -> None:
        self.content_el.set_text("Woah!")

    def on_close(self) -> None:
        self.content_el.empty()


class SynaSettingTab:
    """Five editable fields, each writing back and saving on change."""

    def __init__(self, plugin: SynapomorphiaPlugin):
        self.plugin = plugin
        self.container_el = Element(tag="div")

    def display(self) -> Element:
        container = self.container_el
        container.empty()
        container.create_el("h2", text="Synapomorphia Settings")

        for setting in SETTING_FIELDS:
            row = container.create_el("div")
            row.add_class("setting-item")
            row.create_el("div", text=setting["name"]).add_class("setting-item-name")
            row.create_el("div", text=setting["desc"]).add_class("setting-item-description")
            value = str(getattr(self.plugin.settings, setting["field"]))
            if setting["kind"] == "header":
                select = row.create_el("select")
                for option_value, label in HEADER_OPTIONS:
                    option = select.create_el("option", text=label)
                    if option_value == value:
                        option.add_class("selected")
            else:
                row.create_el("input", text=value)
        return container

    def validate(self, field: str, value):
        """Return the coerced value, or raise as the dropdown would refuse it."""
        if field in HEADER_FIELDS and str(value) not in dict(HEADER_OPTIONS):
            raise ValueError(f"{field} must be one of 1-6, got {value!r}")
        return coerce_value(field, value)

    def on_change(self, field: str, value) -> None:
        self.validate(field, value)
        self.plugin.update_setting(field, value)

    def apply(self, changes: dict) -> list[str]:
        """
        Validate every field first, then write them and save once.

        Nothing is saved when any field is refused.  Returns the fields
        whose value actually changed.
        """
        coerced = {field: self.validate(field, value) for field, value in changes.items()}
        changed = [
            field for field, value in coerced.items()
            if getattr(self.plugin.settings, field) != value
        ]
        if not changed:
            return []
        for field in changed:
            setattr(self.plugin.settings, field, coerced[field])
        self.plugin.save_settings()
        logger.info("Settings updated: %s", ", ".join(changed))
        return changed
