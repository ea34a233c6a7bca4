"""
Symbolic Journal
================

Orchestrates turn ingestion for one timeline:

1. Computes the interference narrative and affinity against the
   timeline's previous persona
2. Persists the JournalEntry through the storage backend
3. Feeds the entropy value into the PowerLawAnalyzer
4. Registers symbols and edges in the RelationshipGraph

CROSS-TIMELINE COUPLING:
========================
The "previous sigil" pointer is a SigilChain object shared by BOTH
timelines' journals. A turn on timeline 2 therefore chains from the last
sigil seen on timeline 1 when that was the most recent turn overall.

Analyzer and graph state is session-scoped: it covers the turns ingested
by this journal instance, not history loaded from earlier sessions.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
import time

from .analysis.power_law import PowerLawAnalyzer
from .analysis.topology import GraphConfig, RelationshipGraph
from .analysis.visualizer import save_graph
from .contracts.base import Observer, Persona, StorageError, TimelineState
from .contracts.events import (
    AuditEventType, DialogueTurn, GraphExport, JournalEntry, ObserverSnapshot,
    PowerLawReport, TurnContext,
)
from .core.affinity import SELF_AFFINITY, affinity
from .observability import ObservabilityLayer
from .storage import JournalBackend, export_document


NO_INTERFERENCE = "No interference detected."

_INTERFERENCE_SENTENCES = {
    Persona.GROUNDED_REALIST: "Disagreement sensed, recalibrating.",
    Persona.FLUID_MYSTIC: "Resonant alignment detected.",
}
_DEFAULT_INTERFERENCE_SENTENCE = "Cognitive dissonance, symbolic friction rising."


def interference_narrative(current: str, memory: List[str]) -> str:
    """Persona-specific sentence when the persona changed since the last turn."""
    if not memory or memory[-1] == current:
        return NO_INTERFERENCE

    sentence = _INTERFERENCE_SENTENCES.get(
        Persona.from_name(current), _DEFAULT_INTERFERENCE_SENTENCE
    )
    return f"🔄 Interference from [{memory[-1]}]: {sentence}"


class SigilChain:
    """
    Last sigil seen by any journal that shares this object.
    """

    def __init__(self):
        self._last: Optional[str] = None

    @property
    def last(self) -> Optional[str]:
        return self._last

    def advance(self, sigil: str) -> Optional[str]:
        """Record sigil as the newest; return the one it replaces."""
        previous, self._last = self._last, sigil
        return previous


class SymbolicJournal:
    """
    Append-only journal for one timeline plus its derived analyses.
    """

    def __init__(
        self,
        backend: JournalBackend,
        timeline_id: int,
        sigil_chain: Optional[SigilChain] = None,
        graph_config: Optional[GraphConfig] = None,
        observability: Optional[ObservabilityLayer] = None
    ):
        self._backend = backend
        self._timeline_id = timeline_id
        self._sigil_chain = sigil_chain or SigilChain()
        self._analyzer = PowerLawAnalyzer()
        self._graph = RelationshipGraph(graph_config)
        self._observability = observability or ObservabilityLayer()
        self._audit = self._observability.collector("journal")
        self._labels = {"timeline": str(timeline_id)}

    @property
    def timeline_id(self) -> int:
        return self._timeline_id

    @property
    def analyzer(self) -> PowerLawAnalyzer:
        return self._analyzer

    @property
    def graph(self) -> RelationshipGraph:
        return self._graph

    @property
    def backend(self) -> JournalBackend:
        return self._backend

    def add_turn(self, turn: DialogueTurn, observer: Observer, timeline: TimelineState) -> JournalEntry:
        """
        Persist one turn and update the derived analyses.

        Raises StorageError if the write fails; in that case neither the
        analyzer nor the graph sees the turn.
        """
        first_turn = timeline.is_fresh
        previous = None if first_turn else timeline.memory[-1]

        entry = JournalEntry(
            turn=turn,
            context=TurnContext(
                affinity=SELF_AFFINITY if first_turn else affinity(observer.name, previous),
                interference=interference_narrative(observer.name, timeline.memory),
                previous_observer=previous,
            ),
            observer=ObserverSnapshot.of(observer),
        )

        started = time.perf_counter()
        try:
            self._backend.append(entry)
        except StorageError as e:
            self._observability.metrics.record("storage_errors_total", 1.0)
            self._audit.record(
                AuditEventType.ERROR, "journal_write_failed",
                entity_id=turn.turn_id, metadata={"error": e.message}
            )
            raise
        self._observability.metrics.record(
            "journal_write_latency_ms", (time.perf_counter() - started) * 1000.0
        )

        self._analyzer.log_event(turn.entropy)
        self._graph.add_symbol(turn.sigil)
        self._graph.add_symbol(observer.symbol)
        self._graph.add_relationship(observer.symbol, turn.sigil)
        previous_sigil = self._sigil_chain.advance(turn.sigil)
        if previous_sigil is not None:
            self._graph.add_relationship(previous_sigil, turn.sigil)

        self._observability.metrics.record("turns_total", 1.0, self._labels)
        self._observability.metrics.record("turn_entropy", turn.entropy, self._labels)
        self._observability.metrics.record("turn_delta_o", turn.delta_O, self._labels)
        self._audit.record(
            AuditEventType.TURN, "turn_journaled",
            entity_id=turn.turn_id,
            metadata={"timeline": str(self._timeline_id), "observer": observer.name, "sigil": turn.sigil}
        )
        return entry

    def entries(self) -> List[JournalEntry]:
        """Reload the persisted collection."""
        return self._backend.load()

    def save_power_law(self, target: Union[str, Path]) -> PowerLawReport:
        report = self._analyzer.save(target)
        self._observability.metrics.record("power_law_alpha", report.alpha, self._labels)
        self._audit.record(
            AuditEventType.ANALYSIS, "power_law_saved",
            metadata={"target": str(target), "alpha": f"{report.alpha:g}"}
        )
        return report

    def save_relationship_graph(self, target: Union[str, Path]) -> GraphExport:
        export = self._graph.export()
        save_graph(export, target)
        self._audit.record(
            AuditEventType.EXPORT, "graph_saved",
            metadata={"target": str(target), "edges": str(len(export.edges))}
        )
        return export

    def export_document(self, target: Union[str, Path]) -> Path:
        """Snapshot the whole persisted collection as a single JSON document."""
        path = export_document(self.entries(), target)
        self._audit.record(AuditEventType.EXPORT, "journal_document_saved", metadata={"target": str(path)})
        return path
