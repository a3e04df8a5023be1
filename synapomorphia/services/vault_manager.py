"""
Vault Manager — handles all interactions with the local Obsidian vault:

  - Scanning the vault index for existing notes
  - Reading notes and extracting prop sections from them
  - Resolving group folders: their group note and their child groups
  - Writing generated reports back into the vault
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from synapomorphia import config
from synapomorphia.services.section_extractor import extract_section, iter_headings

logger = logging.getLogger(__name__)


@dataclass
class VaultNote:
    """Lightweight representation of an existing vault note."""
    path: Path
    title: str
    headings: list[str] = field(default_factory=list)


class VaultManager:
    """Reads, writes, and indexes the Obsidian vault."""

    def __init__(self, vault_path: Path | None = None):
        self.vault_path = Path(vault_path or config.SYNAPOMORPHIA_VAULT_PATH)
        self.report_folder = self.vault_path / config.SYNAPOMORPHIA_REPORT_FOLDER
        self._index: list[VaultNote] = []

    # ── Vault scanning ────────────────────────────────────────────────

    def build_index(self) -> list[VaultNote]:
        """Scan every .md file in the vault (skipping dot-folders)."""
        self._index = []
        for md_file in sorted(self.vault_path.rglob("*.md")):
            relative = md_file.relative_to(self.vault_path)
            if any(part.startswith(".") for part in relative.parts):
                continue
            note = self._parse_note(md_file)
            if note:
                self._index.append(note)
        logger.info("Vault index built: %d notes.", len(self._index))
        return self._index

    def _parse_note(self, path: Path) -> VaultNote | None:
        try:
            lines = self.read_lines(path)
        except OSError:
            logger.warning("Cannot read note %s", path)
            return None
        headings = [text for _, _, text in iter_headings(lines)]
        return VaultNote(path=path, title=path.stem, headings=headings)

    @property
    def index(self) -> list[VaultNote]:
        if not self._index:
            self.build_index()
        return self._index

    def resolve(self, path: Path | str) -> Path:
        """Vault-relative paths are taken relative to the vault root."""
        path = Path(path)
        return path if path.is_absolute() else self.vault_path / path

    # ── Reading notes ─────────────────────────────────────────────────

    def read_lines(self, path: Path) -> list[str]:
        return self.resolve(path).read_text(encoding="utf-8", errors="replace").splitlines()

    def extract_prop(self, note: Path, label: str, level: int) -> list[str]:
        """Section of *note* under heading *label* at *level*."""
        return extract_section(self.read_lines(note), label, level)

    # ── Group folders ─────────────────────────────────────────────────

    def group_note(self, folder: Path) -> Path | None:
        """A group's note is the folder note: ``<folder>/<folder name>.md``."""
        folder = self.resolve(folder)
        note = folder / f"{folder.name}.md"
        return note if note.is_file() else None

    def child_groups(self, folder: Path, child_folder: str) -> list[Path]:
        """Sub-folders of ``<folder>/<child_folder>``, sorted by name."""
        children_dir = self.resolve(folder) / child_folder
        if not children_dir.is_dir():
            return []
        return sorted(
            (p for p in children_dir.iterdir() if p.is_dir() and not p.name.startswith(".")),
            key=lambda p: p.name.lower(),
        )

    # ── Report writing ────────────────────────────────────────────────

    def write_report(self, name: str, content: str) -> Path:
        """Write a report note into the report folder."""
        self.report_folder.mkdir(parents=True, exist_ok=True)
        safe_name = re.sub(r'[<>:"/\\|?*]', "-", name).strip()
        dest = self.report_folder / f"{safe_name}.md"
        dest.write_text(content, encoding="utf-8")
        logger.info("Report written → %s", dest)
        return dest
