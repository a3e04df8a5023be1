from pathlib import Path

import pytest

from synapomorphia.plugin import SynapomorphiaPlugin
from synapomorphia.settings import SettingsStore
from synapomorphia.workspace import Workspace


GROUP_NOTE = """\
---
aliases: []
---
# {name}

### Arbre Phylogénétique
- {name}
  - {children}

### Synapomorphies
- {trait}
- [x] shared by all members

### Notes
unrelated
"""


def write_group(folder: Path, trait: str, children: str = "") -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    note = folder / f"{folder.name}.md"
    note.write_text(
        GROUP_NOTE.format(name=folder.name, children=children, trait=trait),
        encoding="utf-8",
    )
    return note


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """
    Vertebrata
      fils/Actinopterygii
      fils/Sarcopterygii
        fils/Tetrapoda
    """
    root = tmp_path / "vault"
    vert = root / "Vertebrata"
    write_group(vert, "vertebral column", "Actinopterygii, Sarcopterygii")
    write_group(vert / "fils" / "Actinopterygii", "ray fins")
    sarc = vert / "fils" / "Sarcopterygii"
    write_group(sarc, "lobed fins", "Tetrapoda")
    write_group(sarc / "fils" / "Tetrapoda", "four limbs")
    return root


@pytest.fixture
def workspace() -> Workspace:
    ws = Workspace()
    ws.add_leaf()
    return ws


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "plugin" / "data.json")


@pytest.fixture
def plugin(workspace, vault, store) -> SynapomorphiaPlugin:
    p = SynapomorphiaPlugin(workspace, vault_path=vault, store=store)
    p.onload()
    yield p
    p.onunload()
