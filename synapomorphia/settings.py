"""
Settings record and its persistence.

The record is flat: two prop labels, their header levels, and the name of
the children folder inside a group folder.  On load the saved values are
laid over the defaults one field at a time; every edit saves the whole
record.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class SynaSettings:
    phylo_prop: str = "Arbre Phylogénétique"
    phylo_header: int = 3
    syna_prop: str = "Synapomorphies"
    syna_header: int = 3
    child_folder: str = "fils"

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_SETTINGS = SynaSettings()

FIELD_NAMES = tuple(f.name for f in fields(SynaSettings))
HEADER_FIELDS = ("phylo_header", "syna_header")

HEADER_OPTIONS = [(str(n), f"H{n} ({'#' * n})") for n in range(1, 7)]

# Settings tab layout, in display order
SETTING_FIELDS = [
    {
        "field": "phylo_prop",
        "name": "Phylogenetic Tree Prop",
        "desc": "header under which to find a group's phylogenetic tree",
        "kind": "text",
    },
    {
        "field": "phylo_header",
        "name": "Phylogenetic Tree Header Size",
        "desc": "header size for phylogenetic tree prop",
        "kind": "header",
    },
    {
        "field": "syna_prop",
        "name": "Synapomorphy Prop",
        "desc": "header under which to find a group's synapomorphies",
        "kind": "text",
    },
    {
        "field": "syna_header",
        "name": "Synapomorphy Header Size",
        "desc": "header size for synapomorphy prop",
        "kind": "header",
    },
    {
        "field": "child_folder",
        "name": "Children Folder Name",
        "desc": "children folder name inside group folder",
        "kind": "text",
    },
]


class UnknownSetting(KeyError):
    """An edit named a field that the settings record does not have."""


def merge_settings(saved: dict | None) -> SynaSettings:
    """
    Lay *saved* over the defaults, field by field.

    Keys the record does not know are ignored.  Values are taken verbatim;
    header levels are not range-checked here.
    """
    merged = DEFAULT_SETTINGS.to_dict()
    for key, value in (saved or {}).items():
        if key in merged:
            merged[key] = value
        else:
            logger.debug("Ignoring unknown saved setting %r", key)
    return SynaSettings(**merged)


def coerce_value(field: str, value):
    """Convert a raw UI value to the field's type (header sizes are ints)."""
    if field not in FIELD_NAMES:
        raise UnknownSetting(field)
    if field in HEADER_FIELDS:
        return int(value)
    return str(value)


class SettingsStore:
    """Opaque JSON storage for the plugin's data, one file per vault."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_data(self) -> dict | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.error("Failed to parse settings file %s — using defaults", self.path)
            return None
        if not isinstance(data, dict):
            logger.error("Settings file %s does not hold an object — using defaults", self.path)
            return None
        return data

    def save_data(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        logger.debug("Settings saved → %s", self.path)
