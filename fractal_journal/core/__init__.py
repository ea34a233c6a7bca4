"""
Core Turn Engine

RESPONSIBILITY: Entropy sampling, persona selection, turn generation, affinity
ALLOWED INPUTS: Observers, timeline state, raw input text, an explicit rng
OUTPUTS: DialogueTurn (immutable)

WHAT THIS LAYER MUST NOT DO:
============================
- Persist anything
- Hold random state of its own
- Interpret the meaning of the input text
"""

from .sampling import sample_power_law, EntropySampler
from .affinity import affinity, DEFAULT_AFFINITY, SELF_AFFINITY
from .selection import ObserverSelector, selection_weights, timeline_pressure
from .dialogue import (
    DialogueTurnGenerator, build_message, generate_tags,
    DIVERGENCE_MESSAGE, STABLE_MESSAGE,
)

__all__ = [
    "sample_power_law",
    "EntropySampler",
    "affinity",
    "DEFAULT_AFFINITY",
    "SELF_AFFINITY",
    "ObserverSelector",
    "selection_weights",
    "timeline_pressure",
    "DialogueTurnGenerator",
    "build_message",
    "generate_tags",
    "DIVERGENCE_MESSAGE",
    "STABLE_MESSAGE",
]
