"""
CLI entry point for Synapomorphia.

Usage:
  python -m synapomorphia settings show                 # Print the settings record
  python -m synapomorphia settings set FIELD VALUE      # Edit one field (saves all)
  python -m synapomorphia extract <note> --prop syna    # Print a prop's section
  python -m synapomorphia extract <note> --label L --level N
  python -m synapomorphia tree <folder> [--write]       # Build the phylogenetic tree
  python -m synapomorphia serve                         # Settings page on Flask
"""

import argparse
import json
import sys
from pathlib import Path

from synapomorphia import config
from synapomorphia.plugin import SynaSettingTab, SynapomorphiaPlugin
from synapomorphia.services.section_extractor import InvalidHeaderLevel
from synapomorphia.services.tree_builder import generate_report, render_outline
from synapomorphia.settings import FIELD_NAMES, UnknownSetting
from synapomorphia.workspace import Workspace


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synapomorphia",
        description="Synapomorphia — phylogenetic trees from an Obsidian vault.",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to the Obsidian vault (overrides SYNAPOMORPHIA_VAULT_PATH env var).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    settings = sub.add_parser("settings", help="Show or edit the settings record.")
    settings_sub = settings.add_subparsers(dest="action", required=True)
    settings_sub.add_parser("show", help="Print the current settings as JSON.")
    set_parser = settings_sub.add_parser("set", help="Change one field and save.")
    set_parser.add_argument("field", choices=FIELD_NAMES)
    set_parser.add_argument("value")

    extract = sub.add_parser("extract", help="Print the section under a heading of a note.")
    extract.add_argument("note", type=Path, help="Note path (absolute or vault-relative).")
    which = extract.add_mutually_exclusive_group(required=True)
    which.add_argument("--prop", choices=["phylo", "syna"], help="Use a configured prop.")
    which.add_argument("--label", help="Heading text to look for.")
    extract.add_argument("--level", type=int, help="Heading level (1-6), with --label.")

    tree = sub.add_parser("tree", help="Build the phylogenetic tree rooted at a group folder.")
    tree.add_argument("folder", type=Path, help="Group folder (absolute or vault-relative).")
    tree.add_argument("--json", action="store_true", help="Print the tree as JSON.")
    tree.add_argument("--write", action="store_true", help="Also write a report note into the vault.")

    serve = sub.add_parser("serve", help="Run the settings page.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.setup_logging()

    plugin = SynapomorphiaPlugin(Workspace(), vault_path=args.vault)
    plugin.load_settings()

    if args.command == "settings":
        if args.action == "set":
            try:
                SynaSettingTab(plugin).on_change(args.field, args.value)
            except (UnknownSetting, ValueError) as exc:
                _fail(str(exc))
        print(json.dumps(plugin.settings.to_dict(), indent=2, ensure_ascii=False))

    elif args.command == "extract":
        if args.prop:
            label = getattr(plugin.settings, f"{args.prop}_prop")
            level = getattr(plugin.settings, f"{args.prop}_header")
        else:
            if args.level is None:
                _fail("--level is required with --label")
            label, level = args.label, args.level
        note = plugin.vm.resolve(args.note)
        if not note.is_file():
            _fail(f"note not found — {note}")
        try:
            lines = plugin.vm.extract_prop(note, label, level)
        except InvalidHeaderLevel as exc:
            _fail(str(exc))
        for line in lines:
            print(line)

    elif args.command == "tree":
        try:
            node = plugin.generate_tree(args.folder)
        except (InvalidHeaderLevel, FileNotFoundError) as exc:
            _fail(str(exc))
        if args.json:
            print(json.dumps(node.to_dict(), indent=2, ensure_ascii=False))
        else:
            print("\n".join(render_outline(node)))
        if args.write:
            report = plugin.vm.write_report(
                f"Phylogenetic Tree — {node.name}", generate_report(node)
            )
            print(f"Report written → {report}", file=sys.stderr)

    elif args.command == "serve":
        from app import create_app

        app = create_app(vault_path=plugin.vm.vault_path)
        app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
