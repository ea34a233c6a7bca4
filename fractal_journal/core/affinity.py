"""
Affinity Model

Symmetric compatibility score between two persona identities.
Pure lookup, no state.
"""

from __future__ import annotations
from typing import Dict, FrozenSet

from ..contracts.base import Persona


DEFAULT_AFFINITY = 0.5
SELF_AFFINITY = 1.0

# Keyed by unordered pair so lookups are symmetric by construction
_PAIR_AFFINITY: Dict[FrozenSet[str], float] = {
    frozenset({Persona.GROUNDED_REALIST.display_name, Persona.FLUID_MYSTIC.display_name}): 0.7,
    frozenset({Persona.RECURSIVE_ORACLE.display_name, Persona.FLUID_MYSTIC.display_name}): 0.85,
    frozenset({Persona.GROUNDED_REALIST.display_name, Persona.RECURSIVE_ORACLE.display_name}): 0.6,
}


def affinity(a: str, b: str) -> float:
    """Compatibility between two observer names."""
    if a == b:
        return SELF_AFFINITY
    return _PAIR_AFFINITY.get(frozenset({a, b}), DEFAULT_AFFINITY)
