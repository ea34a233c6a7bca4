"""
Fractal Dialogue Journal

Generates synthetic dialogue turns on two alternating timelines, journals
them append-only, and derives a power-law fit over the entropy metric and
a directed symbol relationship graph.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Observers, personas, turns, journal entries, errors
   - Immutable except TimelineState

2. CORE (core/)
   - Responsibility: Entropy sampling, affinity, persona selection, turn generation
   - MUST NOT: Persist data or hold random state

3. ANALYSIS (analysis/)
   - Responsibility: Power-law fit, relationship graph, diagram source text
   - MUST NOT: Read or write the journal

4. STORAGE (storage/)
   - Responsibility: Append-only journal backends, document export
   - MUST NOT: Compute metrics or tags

5. JOURNAL (journal.py)
   - Responsibility: Turn ingestion, interference, affinity, analysis feeds

6. ENGINE (engine.py) / SHELL (shell.py)
   - Responsibility: Two timelines, parity, shared rng, command surface

7. OBSERVABILITY (observability/)
   - Responsibility: Audit log and metrics, never behavior
"""

from .contracts import (
    ConfigurationError, DomainError, StorageError, FractalJournalError,
    Observer, Persona, DEFAULT_OBSERVERS, TimelineState,
    DialogueTurn, JournalEntry, TurnOutcome,
)
from .engine import DualTimelineEngine, EngineConfig
from .journal import SymbolicJournal, SigilChain

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DomainError",
    "StorageError",
    "FractalJournalError",
    "Observer",
    "Persona",
    "DEFAULT_OBSERVERS",
    "TimelineState",
    "DialogueTurn",
    "JournalEntry",
    "TurnOutcome",
    "DualTimelineEngine",
    "EngineConfig",
    "SymbolicJournal",
    "SigilChain",
]
