"""
Derived Analyses

RESPONSIBILITY: Power-law fitting over logged entropy, symbol relationship graph
ALLOWED INPUTS: Entropy values and symbol pairs from the journal
OUTPUTS: PowerLawReport, GraphExport, diagram source text

WHAT THIS LAYER MUST NOT DO:
============================
- Read or write the journal
- Draw random numbers
"""

from .power_law import PowerLawAnalyzer
from .topology import RelationshipGraph, GraphConfig, GraphMetrics
from .visualizer import render_mermaid, render_dot, save_graph

__all__ = [
    "PowerLawAnalyzer",
    "RelationshipGraph",
    "GraphConfig",
    "GraphMetrics",
    "render_mermaid",
    "render_dot",
    "save_graph",
]
