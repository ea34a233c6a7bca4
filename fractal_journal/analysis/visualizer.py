"""
Graph Renderer
==============

Turns a GraphExport into diagram source text.
Purely presentational: NO layout, NO rasterization.

Capabilities:
1. Mermaid flowchart source (.mmd)
2. Graphviz DOT source (.dot / .gv)

An external tool (mermaid-cli, graphviz) produces images from either.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Union

from ..contracts.base import ErrorCode, StorageError
from ..contracts.events import GraphExport


GRAPH_NAME = "FractalNLPGraph"


def _node_ids(export: GraphExport) -> Dict[str, str]:
    # Symbols contain spaces and glyphs, so diagrams get synthetic ids
    return {symbol: f"n{i}" for i, symbol in enumerate(export.nodes)}


def _escape(label: str) -> str:
    return label.replace('\\', '\\\\').replace('"', '\\"')


def render_mermaid(export: GraphExport) -> str:
    ids = _node_ids(export)
    lines = ["graph TD"]

    for symbol, node_id in ids.items():
        lines.append(f'    {node_id}["{_escape(symbol)}"]')

    for edge in export.edges:
        lines.append(f"    {ids[edge.source]} -->|{edge.label}| {ids[edge.target]}")

    return "\n".join(lines) + "\n"


def render_dot(export: GraphExport) -> str:
    ids = _node_ids(export)
    lines = [f"digraph {GRAPH_NAME} {{"]

    for symbol, node_id in ids.items():
        lines.append(f'    {node_id} [label="{_escape(symbol)}"];')

    for edge in export.edges:
        lines.append(f'    {ids[edge.source]} -> {ids[edge.target]} [label="{edge.label}"];')

    lines.append("}")
    return "\n".join(lines) + "\n"


def save_graph(export: GraphExport, target: Union[str, Path]) -> Path:
    """Write diagram source, format chosen by suffix (.dot/.gv, else Mermaid)."""
    path = Path(target)
    if path.suffix in (".dot", ".gv"):
        text = render_dot(export)
    else:
        text = render_mermaid(export)

    try:
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise StorageError(
            ErrorCode.EXPORT_FAILED, f"Could not write relationship graph to {path}: {e}"
        ) from e

    return path
