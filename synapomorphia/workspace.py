"""
Workspace model — the slice of the host application's plugin API that the
plugin talks to, kept in-process so the wiring can run and be tested
without the host.

  - Elements: a tiny DOM (tag, text, children) that views and modals render into
  - Leaves: layout slots holding at most one view
  - Views: named panel types created through registered factories
  - Notices, modals, and the active editor's selection
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class Element:
    tag: str = "div"
    text: str = ""
    children: list["Element"] = field(default_factory=list)
    classes: set[str] = field(default_factory=set)

    def empty(self) -> None:
        self.text = ""
        self.children.clear()

    def set_text(self, text: str) -> None:
        self.empty()
        self.text = text

    def create_el(self, tag: str, text: str = "") -> "Element":
        child = Element(tag=tag, text=text)
        self.children.append(child)
        return child

    def add_class(self, name: str) -> None:
        self.classes.add(name)

    def find_all(self, tag: str) -> list["Element"]:
        found = []
        for child in self.children:
            if child.tag == tag:
                found.append(child)
            found.extend(child.find_all(tag))
        return found

    def render(self) -> str:
        """Serialise to HTML-ish markup (no escaping beyond what callers pass)."""
        inner = self.text + "".join(child.render() for child in self.children)
        cls = f' class="{" ".join(sorted(self.classes))}"' if self.classes else ""
        return f"<{self.tag}{cls}>{inner}</{self.tag}>"


class ItemView:
    """Base for a dockable panel.  Subclasses name their type and render on open."""

    def __init__(self, leaf: "Leaf"):
        self.leaf = leaf
        # Same shape as the host: children[0] is the header, children[1] the content
        self.container_el = Element(tag="div")
        self.container_el.create_el("div").add_class("view-header")
        self.container_el.create_el("div").add_class("view-content")

    @property
    def content_el(self) -> Element:
        return self.container_el.children[1]

    def get_view_type(self) -> str:
        raise NotImplementedError

    def get_display_text(self) -> str:
        return self.get_view_type()

    def on_open(self) -> None:
        pass

    def on_close(self) -> None:
        pass


class Leaf:
    _ids = itertools.count(1)

    def __init__(self, workspace: "Workspace"):
        self.id = next(self._ids)
        self.workspace = workspace
        self.view: ItemView | None = None

    @property
    def view_type(self) -> str | None:
        return self.view.get_view_type() if self.view else None

    def set_view_state(self, view_type: str, active: bool = False) -> None:
        factory = self.workspace.view_factory(view_type)
        if factory is None:
            logger.warning("No view registered for type %r", view_type)
            return
        self.detach_view()
        self.view = factory(self)
        self.view.on_open()
        if active:
            self.workspace.active_leaf = self

    def detach_view(self) -> None:
        if self.view is not None:
            self.view.on_close()
            self.view = None

    def __repr__(self) -> str:
        return f"<Leaf {self.id} view={self.view_type!r}>"


class Editor:
    """Plain-text editor buffer with a single selection range."""

    def __init__(self, text: str = "", selection: tuple[int, int] | None = None):
        self.text = text
        self.selection = selection or (len(text), len(text))

    def get_selection(self) -> str:
        start, end = self.selection
        return self.text[start:end]

    def replace_selection(self, replacement: str) -> None:
        start, end = self.selection
        self.text = self.text[:start] + replacement + self.text[end:]
        cursor = start + len(replacement)
        self.selection = (cursor, cursor)


class Workspace:
    """Leaves, registered view types, notices, open modals, active editor."""

    def __init__(self):
        self.leaves: list[Leaf] = []
        self.active_leaf: Leaf | None = None
        self.active_editor: Editor | None = None
        self.notices: list[str] = []
        self.modals: list["Modal"] = []
        self.revealed: list[Leaf] = []
        self._view_factories: dict[str, Callable[[Leaf], ItemView]] = {}

    # ── View registry ─────────────────────────────────────────────────

    def register_view(self, view_type: str, factory: Callable[[Leaf], ItemView]) -> None:
        if view_type in self._view_factories:
            raise ValueError(f"View type {view_type!r} is already registered")
        self._view_factories[view_type] = factory

    def unregister_view(self, view_type: str) -> None:
        self._view_factories.pop(view_type, None)

    def view_factory(self, view_type: str) -> Callable[[Leaf], ItemView] | None:
        return self._view_factories.get(view_type)

    # ── Leaves ────────────────────────────────────────────────────────

    def add_leaf(self, active: bool = True) -> Leaf:
        leaf = Leaf(self)
        self.leaves.append(leaf)
        if active:
            self.active_leaf = leaf
        return leaf

    def get_leaves_of_type(self, view_type: str) -> list[Leaf]:
        return [leaf for leaf in self.leaves if leaf.view_type == view_type]

    def create_leaf_by_split(self, leaf: Leaf, direction: str = "vertical") -> Leaf:
        if direction not in ("vertical", "horizontal"):
            raise ValueError(f"Unknown split direction {direction!r}")
        new_leaf = Leaf(self)
        self.leaves.insert(self.leaves.index(leaf) + 1, new_leaf)
        logger.debug("Split %r %s → %r", leaf, direction, new_leaf)
        return new_leaf

    def reveal_leaf(self, leaf: Leaf) -> None:
        self.active_leaf = leaf
        self.revealed.append(leaf)

    def detach_leaves_of_type(self, view_type: str) -> None:
        for leaf in self.get_leaves_of_type(view_type):
            leaf.detach_view()
            self.leaves.remove(leaf)
            if self.active_leaf is leaf:
                self.active_leaf = None


class Notice:
    """Transient message shown to the user."""

    def __init__(self, workspace: Workspace, message: str):
        self.message = message
        workspace.notices.append(message)
        logger.info("Notice: %s", message)


@dataclass
class MenuItem:
    title: str = ""
    icon: str = ""
    on_click: Callable[[], object] | None = None

    def set_title(self, title: str) -> "MenuItem":
        self.title = title
        return self

    def set_icon(self, icon: str) -> "MenuItem":
        self.icon = icon
        return self

    def click(self):
        if self.on_click is not None:
            return self.on_click()
        return None


@dataclass
class Menu:
    """Context menu being assembled for a right-clicked file or folder."""
    items: list[MenuItem] = field(default_factory=list)

    def add_item(self, title: str = "", icon: str = "", on_click=None) -> MenuItem:
        item = MenuItem(title=title, icon=icon, on_click=on_click)
        self.items.append(item)
        return item

    def item(self, title: str) -> MenuItem | None:
        return next((i for i in self.items if i.title == title), None)


class Modal:
    def __init__(self, workspace: Workspace):
        self.workspace = workspace
        self.content_el = Element(tag="div")

    def open(self) -> None:
        self.workspace.modals.append(self)
        self.on_open()

    def close(self) -> None:
        if self in self.workspace.modals:
            self.workspace.modals.remove(self)
        self.on_close()

    def on_open(self) -> None:
        pass

    def on_close(self) -> None:
        pass
