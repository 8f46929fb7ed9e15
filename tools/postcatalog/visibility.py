"""Drop notebook cells that should not end up in a post body."""

from __future__ import annotations

import copy
from typing import Optional

from nbformat import NotebookNode

from .utils import _norm_text

HIDE_SOURCE_TAGS = {"hide-input", "remove-input", "hide_input", "remove_input"}
HIDE_OUTPUT_TAGS = {"hide-output", "remove-output", "hide_output", "remove_output"}
DROP_CELL_TAGS = {"remove-cell", "hide-cell", "remove_cell", "hide_cell"}


def _cell_tags(cell: NotebookNode) -> set:
    md = cell.get("metadata") or {}
    return set(md.get("tags") or [])


def _flag(cell: NotebookNode, tags: set, key: str, tag_set: set) -> bool:
    md = cell.get("metadata") or {}
    jupyter = md.get("jupyter") if isinstance(md.get("jupyter"), dict) else {}
    return bool(jupyter.get(key)) or bool(md.get(key)) or bool(tags & tag_set)


def _is_blank(cell: NotebookNode) -> bool:
    source = _norm_text(cell.get("source", "")).strip()
    if source:
        return False
    if cell.get("cell_type") == "code":
        return not cell.get("outputs")
    return not cell.get("attachments")


def visible_cell(cell: NotebookNode) -> Optional[NotebookNode]:
    """
    Return the cell as it should be published, or None to drop it.

    Hidden markdown cells go away entirely; hidden code input keeps its
    outputs, hidden outputs keep the input.
    """
    tags = _cell_tags(cell)
    if tags & DROP_CELL_TAGS:
        return None

    out = copy.deepcopy(cell)
    kind = out.get("cell_type")

    if _flag(out, tags, "source_hidden", HIDE_SOURCE_TAGS):
        if kind == "markdown":
            return None
        if kind == "code":
            out["source"] = ""

    if kind == "code" and _flag(out, tags, "outputs_hidden", HIDE_OUTPUT_TAGS):
        out["outputs"] = []
        out["execution_count"] = None

    if kind in {"markdown", "code"} and _is_blank(out):
        return None
    return out


def strip_hidden_cells(nb: NotebookNode) -> NotebookNode:
    """Filter `nb.cells` in place and return the notebook."""
    nb.cells = [c for c in map(visible_cell, nb.cells) if c is not None]
    return nb
