"""
Tree Builder — assembles a phylogenetic tree from the vault's folders.

A group is a folder holding a group note of the same name.  Its child
groups are the sub-folders of its children folder (``fils`` by default):

    Vertebrata/
      Vertebrata.md
      fils/
        Actinopterygii/
          Actinopterygii.md
        Sarcopterygii/
          Sarcopterygii.md
          fils/
            ...

Each node carries the section found under the phylogenetic-tree prop and
the list items found under the synapomorphy prop of its group note.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from synapomorphia.services.section_extractor import (
    extract_section,
    list_items,
    validate_level,
)
from synapomorphia.services.vault_manager import VaultManager
from synapomorphia.settings import SynaSettings

logger = logging.getLogger(__name__)


@dataclass
class PhyloNode:
    name: str
    path: Path
    note: Path | None = None
    tree: list[str] = field(default_factory=list)
    synapomorphies: list[str] = field(default_factory=list)
    children: list["PhyloNode"] = field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "note": str(self.note) if self.note else None,
            "tree": self.tree,
            "synapomorphies": self.synapomorphies,
            "children": [c.to_dict() for c in self.children],
        }


def build_tree(vm: VaultManager, folder: Path, settings: SynaSettings) -> PhyloNode:
    """Build the tree rooted at *folder* using the props from *settings*."""
    validate_level(settings.phylo_header)
    validate_level(settings.syna_header)

    folder = vm.resolve(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Group folder not found: {folder}")

    root = _build_node(vm, folder, settings, seen=set())
    logger.info(
        "Tree built for %s: %d group(s).", folder.name, sum(1 for _ in root.walk())
    )
    return root


def _build_node(
    vm: VaultManager, folder: Path, settings: SynaSettings, seen: set[Path]
) -> PhyloNode:
    seen.add(folder.resolve())
    node = PhyloNode(name=folder.name, path=folder, note=vm.group_note(folder))

    if node.note is None:
        logger.warning("No group note in %s", folder)
    else:
        lines = vm.read_lines(node.note)
        node.tree = extract_section(lines, settings.phylo_prop, settings.phylo_header)
        node.synapomorphies = list_items(
            extract_section(lines, settings.syna_prop, settings.syna_header)
        )

    for child_folder in vm.child_groups(folder, settings.child_folder):
        # Symlinked folders can loop back onto an ancestor
        if child_folder.resolve() in seen:
            logger.warning("Skipping cyclic group folder %s", child_folder)
            continue
        node.children.append(_build_node(vm, child_folder, settings, seen))
    return node


def render_outline(node: PhyloNode, depth: int = 0) -> list[str]:
    """Nested Markdown list: one line per group, synapomorphies in brackets."""
    traits = f" [{'; '.join(node.synapomorphies)}]" if node.synapomorphies else ""
    lines = [f"{'  ' * depth}- [[{node.name}]]{traits}"]
    for child in node.children:
        lines.extend(render_outline(child, depth + 1))
    return lines


def generate_report(node: PhyloNode) -> str:
    """Tree as an Obsidian note with front-matter."""
    today = datetime.now().strftime("%Y-%m-%d")
    sections = [
        "---",
        f'title: "Phylogenetic Tree — {node.name}"',
        "tags: [synapomorphia, phylogenetic-tree]",
        f"date: {today}",
        "---",
        "",
        f"# Phylogenetic Tree — {node.name}",
        "",
    ]
    sections.extend(render_outline(node))
    sections.append("")
    return "\n".join(sections)
