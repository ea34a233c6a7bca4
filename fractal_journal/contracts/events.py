"""
Event Contracts

Immutable records that flow between layers: dialogue turns, journal
entries, analysis results, graph exports and audit records.

All types are frozen dataclasses. Once created they are never edited.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from .base import Observer


# =============================================================================
# TURN RECORDS
# =============================================================================

@dataclass(frozen=True)
class DialogueTurn:
    """One generated turn, owned by the journal after persistence."""
    input: str
    response: str
    message: str
    mode: str
    sigil: str
    delta_O: float
    entropy: float
    tags: Tuple[str, ...]
    timestamp: str
    turn_id: str


@dataclass(frozen=True)
class TurnContext:
    """Contextual fields computed by the journal at ingestion time."""
    affinity: float
    interference: str
    previous_observer: Optional[str] = None


@dataclass(frozen=True)
class ObserverSnapshot:
    """Full trait snapshot of the acting observer."""
    name: str
    symbol: str
    belief_field: float
    modulation_strength: float
    perceptual_bandwidth: float

    @staticmethod
    def of(observer: Observer) -> ObserverSnapshot:
        return ObserverSnapshot(
            name=observer.name,
            symbol=observer.symbol,
            belief_field=observer.belief_field,
            modulation_strength=observer.modulation_strength,
            perceptual_bandwidth=observer.perceptual_bandwidth,
        )


@dataclass(frozen=True)
class JournalEntry:
    """Append-only journal record: the turn plus its context."""
    turn: DialogueTurn
    context: TurnContext
    observer: ObserverSnapshot


@dataclass(frozen=True)
class TurnOutcome:
    """What the command surface hands back after a submitted line."""
    timeline_id: int
    observer_name: str
    observer_symbol: str
    response: str
    message: str
    sigil: str
    tags: Tuple[str, ...]
    entry: JournalEntry


# =============================================================================
# ANALYSIS RECORDS
# =============================================================================

@dataclass(frozen=True)
class HistogramBin:
    """Entropy bin: key is floor(value * 100)."""
    key: int
    count: int

    @property
    def scaled_size(self) -> float:
        return self.key / 100.0


@dataclass(frozen=True)
class PowerLawReport:
    """Result of one analysis run, as written to the text export."""
    alpha: float
    sample_count: int
    bins: Tuple[HistogramBin, ...]
    fitted: Tuple[float, ...]


@dataclass(frozen=True)
class GraphEdge:
    """Directed edge with a never-reused integer id."""
    source: str
    target: str
    edge_id: int

    @property
    def label(self) -> str:
        return f"e{self.edge_id}"


@dataclass(frozen=True)
class GraphExport:
    """Node/edge list handed to an external renderer."""
    nodes: Tuple[str, ...]
    edges: Tuple[GraphEdge, ...]


# =============================================================================
# AUDIT RECORDS
# =============================================================================

class AuditEventType(Enum):
    """Explicit audit event types."""
    TURN = "turn"
    ANALYSIS = "analysis"
    EXPORT = "export"
    ERROR = "error"
    SYSTEM = "system"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: datetime
    layer: str  # Which layer generated this
    action: str
    entity_id: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MetricPoint:
    """Immutable metric data point."""
    metric_name: str
    value: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    labels: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
