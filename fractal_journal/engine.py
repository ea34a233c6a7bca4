"""
Dual-Timeline Engine

This module wires every layer together while keeping the layers
themselves independent.

LAYER FLOW:
===========
1. Sampling: look-ahead entropy for the advancing timeline
2. Selection: pressure-weighted observer draw
3. Generation: DialogueTurn from the selected persona
4. Journal: persistence + power-law + relationship graph
5. Timeline state: cumulative / future entropy, persona memory

SHARED STATE:
=============
- One random.Random instance, threaded explicitly through every draw.
  Per-turn draw order: look-ahead entropy, selection, phrase, delta_O,
  three entropy draws.
- One SigilChain shared by both journals.
- Each timeline reads the other's cumulative_entropy as pressure.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union
import os
import random

from .analysis.topology import GraphConfig
from .contracts.base import (
    ConfigurationError, DEFAULT_OBSERVERS, ErrorCode, Observer, TimelineState
)
from .contracts.events import AuditEventType, GraphExport, PowerLawReport, TurnOutcome
from .core.dialogue import DialogueTurnGenerator
from .core.sampling import EntropySampler
from .core.selection import ObserverSelector
from .journal import SigilChain, SymbolicJournal
from .observability import ObservabilityLayer
from .storage import StorageConfig, create_backend
from .temporal.clock import LogicalClock, TurnIdFactory


TIMELINE_IDS: Tuple[int, int] = (1, 2)


@dataclass
class EngineConfig:
    """Unified configuration for the engine."""
    seed: Optional[int] = None
    observers: Tuple[Observer, ...] = None
    sampler: EntropySampler = None
    graph: GraphConfig = None
    storage: StorageConfig = None
    power_law_template: str = "power_law_analysis_timeline{timeline}.txt"
    graph_template: str = "knowledge_graph_timeline{timeline}.mmd"

    def __post_init__(self):
        self.observers = tuple(self.observers) if self.observers else DEFAULT_OBSERVERS
        self.sampler = self.sampler or EntropySampler()
        self.graph = self.graph or GraphConfig()
        self.storage = self.storage or StorageConfig()

    @classmethod
    def from_env(cls, **overrides) -> EngineConfig:
        """
        Build config from FRACTAL_STORAGE_DIR, FRACTAL_BACKEND and FRACTAL_SEED.
        Keyword overrides win over the environment.
        """
        seed = os.environ.get("FRACTAL_SEED")
        storage = StorageConfig(
            backend_type=os.environ.get("FRACTAL_BACKEND", "file"),
            storage_dir=os.environ.get("FRACTAL_STORAGE_DIR", os.getcwd()),
        )
        params = {
            "seed": int(seed) if seed else None,
            "storage": storage,
        }
        params.update(overrides)
        return cls(**params)


class DualTimelineEngine:
    """
    Two alternating timelines sharing one random source and one sigil chain.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[LogicalClock] = None,
        id_factory: Optional[TurnIdFactory] = None,
        observability: Optional[ObservabilityLayer] = None
    ):
        self._config = config or EngineConfig()
        self._rng = rng or random.Random(self._config.seed)
        self._observability = observability or ObservabilityLayer()
        self._audit = self._observability.collector("engine")

        self._selector = ObserverSelector(self._config.observers)
        self._sampler = self._config.sampler
        self._generator = DialogueTurnGenerator(self._sampler, clock, id_factory)

        self._sigil_chain = SigilChain()
        self._timelines: Dict[int, TimelineState] = {
            tid: TimelineState(timeline_id=tid) for tid in TIMELINE_IDS
        }
        self._journals: Dict[int, SymbolicJournal] = {
            tid: SymbolicJournal(
                backend=create_backend(self._config.storage, tid),
                timeline_id=tid,
                sigil_chain=self._sigil_chain,
                graph_config=self._config.graph,
                observability=self._observability,
            )
            for tid in TIMELINE_IDS
        }
        self._line_count: int = 0

        self._audit.record(
            AuditEventType.SYSTEM, "engine_started",
            metadata={
                "seed": str(self._config.seed),
                "journals": ",".join(j.backend.describe() for j in self._journals.values()),
            }
        )

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def observability(self) -> ObservabilityLayer:
        return self._observability

    @property
    def sigil_chain(self) -> SigilChain:
        return self._sigil_chain

    def timeline(self, timeline_id: int) -> TimelineState:
        return self._timelines[self._check_timeline(timeline_id)]

    def journal(self, timeline_id: int) -> SymbolicJournal:
        return self._journals[self._check_timeline(timeline_id)]

    def list_observers(self) -> Sequence[Observer]:
        return self._selector.observers

    # =========================================================================
    # PARITY
    # =========================================================================

    @property
    def current_timeline(self) -> int:
        """Timeline the next processed line belongs to."""
        return TIMELINE_IDS[self._line_count % 2]

    def next_timeline(self) -> int:
        """Claim the current timeline and advance parity."""
        timeline_id = self.current_timeline
        self._line_count += 1
        return timeline_id

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def submit(self, text: str, timeline_id: Optional[int] = None) -> TurnOutcome:
        """
        Generate and journal one turn.

        Without an explicit timeline the parity counter picks one and
        advances. The timeline state only advances once the journal write
        has succeeded.
        """
        if timeline_id is None:
            timeline_id = self.next_timeline()
        state = self.timeline(timeline_id)
        other = self._timelines[self._other(timeline_id)]

        next_future_entropy = self._sampler.draw(self._rng)
        observer = self._selector.select_for(state, other, self._rng)
        turn = self._generator.generate(text, observer, self._rng)

        entry = self._journals[timeline_id].add_turn(turn, observer, state)
        state.record(observer.name, turn.entropy, next_future_entropy)

        return TurnOutcome(
            timeline_id=timeline_id,
            observer_name=observer.name,
            observer_symbol=observer.symbol,
            response=turn.response,
            message=turn.message,
            sigil=turn.sigil,
            tags=turn.tags,
            entry=entry,
        )

    def save_power_law(
        self,
        timeline_id: int,
        target: Optional[Union[str, Path]] = None
    ) -> Tuple[Path, PowerLawReport]:
        path = Path(target) if target else self._default_path(self._config.power_law_template, timeline_id)
        report = self.journal(timeline_id).save_power_law(path)
        return path, report

    def save_relationship_graph(
        self,
        timeline_id: int,
        target: Optional[Union[str, Path]] = None
    ) -> Tuple[Path, GraphExport]:
        path = Path(target) if target else self._default_path(self._config.graph_template, timeline_id)
        export = self.journal(timeline_id).save_relationship_graph(path)
        return path, export

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _default_path(self, template: str, timeline_id: int) -> Path:
        return Path(self._config.storage.storage_dir) / template.format(timeline=timeline_id)

    def _check_timeline(self, timeline_id: int) -> int:
        if timeline_id not in TIMELINE_IDS:
            raise ConfigurationError(
                ErrorCode.INVALID_TIMELINE,
                f"Unknown timeline {timeline_id}; expected one of {TIMELINE_IDS}"
            )
        return timeline_id

    @staticmethod
    def _other(timeline_id: int) -> int:
        return TIMELINE_IDS[1] if timeline_id == TIMELINE_IDS[0] else TIMELINE_IDS[0]
