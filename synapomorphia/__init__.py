"""
Synapomorphia — phylogenetic trees from an Obsidian vault's folder structure.

Reads group notes, extracts the sections named by the user's "props"
(the phylogenetic tree and the synapomorphies of a group), and assembles
the folder hierarchy into a tree.  Ships the plugin wiring (settings,
commands, Tree Quiz panel) over a small in-process workspace model, a
Flask settings page, and a CLI.
"""
