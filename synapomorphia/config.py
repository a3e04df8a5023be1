"""
Central configuration for Synapomorphia.

Process-level paths and tuning knobs live here.  Values are read from
environment variables (or a .env file) with sensible defaults.  The
user-facing settings record (props, header levels, children folder) is
stored separately in the vault, see ``synapomorphia.settings``.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ── Obsidian Vault ────────────────────────────────────────────────────
SYNAPOMORPHIA_VAULT_PATH = Path(os.getenv("SYNAPOMORPHIA_VAULT_PATH", "."))
# Folder inside the vault where the plugin keeps its data, as the host does
SYNAPOMORPHIA_PLUGIN_DIR = os.getenv(
    "SYNAPOMORPHIA_PLUGIN_DIR", ".obsidian/plugins/synapomorphia"
)
SYNAPOMORPHIA_DATA_FILE = os.getenv("SYNAPOMORPHIA_DATA_FILE", "data.json")
# Sub-folder for generated tree reports
SYNAPOMORPHIA_REPORT_FOLDER = os.getenv("SYNAPOMORPHIA_REPORT_FOLDER", "Synapomorphia")

# ── Plugin behaviour ─────────────────────────────────────────────────
# Period of the background interval registered on load (seconds)
SYNAPOMORPHIA_INTERVAL_SECONDS = int(
    os.getenv("SYNAPOMORPHIA_INTERVAL_SECONDS", str(5 * 60))
)

# ── Logging ───────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "synapomorphia.log")


def settings_path(vault_path: Path | None = None) -> Path:
    """Location of the persisted settings record for a vault."""
    vault = vault_path or SYNAPOMORPHIA_VAULT_PATH
    return vault / SYNAPOMORPHIA_PLUGIN_DIR / SYNAPOMORPHIA_DATA_FILE


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_FILE),
        ],
    )
