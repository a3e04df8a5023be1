import pytest

from synapomorphia.services.section_extractor import InvalidHeaderLevel
from synapomorphia.services.tree_builder import build_tree, generate_report, render_outline
from synapomorphia.services.vault_manager import VaultManager
from synapomorphia.settings import SynaSettings

from conftest import write_group


def test_tree_follows_children_folders(vault):
    root = build_tree(VaultManager(vault), vault / "Vertebrata", SynaSettings())
    assert root.name == "Vertebrata"
    assert [c.name for c in root.children] == ["Actinopterygii", "Sarcopterygii"]
    assert [c.name for c in root.children[1].children] == ["Tetrapoda"]
    assert [n.name for n in root.walk()] == [
        "Vertebrata", "Actinopterygii", "Sarcopterygii", "Tetrapoda",
    ]


def test_nodes_carry_prop_sections(vault):
    root = build_tree(VaultManager(vault), "Vertebrata", SynaSettings())
    assert root.synapomorphies == ["vertebral column", "shared by all members"]
    assert root.tree[:2] == ["- Vertebrata", "  - Actinopterygii, Sarcopterygii"]
    assert "unrelated" not in root.tree


def test_custom_props_and_child_folder(tmp_path):
    root_dir = tmp_path / "Aves"
    (root_dir).mkdir()
    (root_dir / "Aves.md").write_text(
        "## Traits\n- feathers\n## Other\n- nothing\n", encoding="utf-8"
    )
    write_group(root_dir / "children" / "Palaeognathae", "flat sternum")
    settings = SynaSettings(syna_prop="Traits", syna_header=2, child_folder="children")
    root = build_tree(VaultManager(tmp_path), root_dir, settings)
    assert root.synapomorphies == ["feathers"]
    assert root.tree == []
    assert [c.name for c in root.children] == ["Palaeognathae"]


def test_folder_without_group_note_is_kept_with_empty_sections(vault):
    (vault / "Vertebrata" / "fils" / "Incertae").mkdir()
    root = build_tree(VaultManager(vault), "Vertebrata", SynaSettings())
    orphan = [c for c in root.children if c.name == "Incertae"][0]
    assert orphan.note is None
    assert orphan.synapomorphies == [] and orphan.children == []


def test_invalid_header_rejected(vault):
    with pytest.raises(InvalidHeaderLevel):
        build_tree(VaultManager(vault), "Vertebrata", SynaSettings(syna_header=7))


def test_missing_folder(vault):
    with pytest.raises(FileNotFoundError):
        build_tree(VaultManager(vault), "Nope", SynaSettings())


def test_render_outline_and_report(vault):
    root = build_tree(VaultManager(vault), "Vertebrata", SynaSettings())
    outline = render_outline(root)
    assert outline[0] == "- [[Vertebrata]] [vertebral column; shared by all members]"
    assert outline[3] == "    - [[Tetrapoda]] [four limbs; shared by all members]"
    report = generate_report(root)
    assert report.startswith("---\n")
    assert "# Phylogenetic Tree — Vertebrata" in report


def test_to_dict(vault):
    data = build_tree(VaultManager(vault), "Vertebrata", SynaSettings()).to_dict()
    assert data["children"][1]["children"][0]["name"] == "Tetrapoda"
