"""
Observability & Audit Layer

RESPONSIBILITY: Audit logging and metrics for turns, exports and failures
ALLOWED INPUTS: Any event from other layers
OUTPUTS: AuditLogEntry lists, MetricPoint series, aggregates

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Filter or interpret events (only record them)
- Make decisions based on logged data
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple
import itertools

from ..contracts.events import AuditEventType, AuditLogEntry, MetricPoint


# =============================================================================
# LOG COLLECTORS (One per layer)
# =============================================================================

class LogCollector:
    """
    Append-only audit collector for a single layer.
    """

    def __init__(self, layer_name: str):
        self._layer_name = layer_name
        self._entries: List[AuditLogEntry] = []
        self._sequence = itertools.count()

    def record(
        self,
        event_type: AuditEventType,
        action: str,
        entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            entry_id=f"{self._layer_name}-{next(self._sequence):06d}",
            event_type=event_type,
            timestamp=datetime.now(timezone.utc),
            layer=self._layer_name,
            action=action,
            entity_id=entity_id,
            metadata=tuple(sorted(metadata.items())) if metadata else (),
        )
        self._entries.append(entry)
        return entry

    def get_entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditLogEntry]:
        if event_type:
            return [e for e in self._entries if e.event_type == event_type]
        return list(self._entries)

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        return len(self._entries)


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

class MetricType(Enum):
    """Types of metrics collected."""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    TIMING = "timing"


@dataclass
class MetricDefinition:
    """Definition of a metric to collect."""
    name: str
    metric_type: MetricType
    description: str
    labels: Tuple[str, ...] = field(default_factory=tuple)


DEFAULT_METRICS = (
    MetricDefinition(
        name="turns_total",
        metric_type=MetricType.COUNTER,
        description="Turns journaled",
        labels=("timeline",)
    ),
    MetricDefinition(
        name="turn_entropy",
        metric_type=MetricType.HISTOGRAM,
        description="Entropy metric of each journaled turn",
        labels=("timeline",)
    ),
    MetricDefinition(
        name="turn_delta_o",
        metric_type=MetricType.HISTOGRAM,
        description="Divergence metric of each journaled turn",
        labels=("timeline",)
    ),
    MetricDefinition(
        name="journal_write_latency_ms",
        metric_type=MetricType.TIMING,
        description="Journal append latency in milliseconds"
    ),
    MetricDefinition(
        name="storage_errors_total",
        metric_type=MetricType.COUNTER,
        description="Failed journal writes"
    ),
    MetricDefinition(
        name="power_law_alpha",
        metric_type=MetricType.GAUGE,
        description="Most recently fitted power-law exponent",
        labels=("timeline",)
    ),
)


class MetricsCollector:
    """
    Append-only time series per metric name.
    """

    def __init__(self):
        self._metrics: Dict[str, List[MetricPoint]] = {}
        self._definitions: Dict[str, MetricDefinition] = {}
        for definition in DEFAULT_METRICS:
            self.register_metric(definition)

    def register_metric(self, definition: MetricDefinition):
        self._definitions[definition.name] = definition
        self._metrics.setdefault(definition.name, [])

    def record(self, metric_name: str, value: float, labels: Optional[Dict[str, str]] = None):
        label_tuple = tuple(sorted(labels.items())) if labels else ()
        point = MetricPoint(metric_name=metric_name, value=value, labels=label_tuple)
        self._metrics.setdefault(metric_name, []).append(point)

    def get_metric(self, metric_name: str) -> List[MetricPoint]:
        return list(self._metrics.get(metric_name, []))

    def get_latest(self, metric_name: str) -> Optional[MetricPoint]:
        points = self._metrics.get(metric_name, [])
        return points[-1] if points else None

    def definition(self, metric_name: str) -> Optional[MetricDefinition]:
        return self._definitions.get(metric_name)

    def compute_aggregates(self, metric_name: str) -> Dict[str, float]:
        """Aggregate statistics for a metric, empty if never recorded."""
        values = [p.value for p in self._metrics.get(metric_name, [])]
        if not values:
            return {}

        return {
            'count': len(values),
            'sum': sum(values),
            'min': min(values),
            'max': max(values),
            'avg': sum(values) / len(values),
        }


# =============================================================================
# LAYER FACADE
# =============================================================================

class ObservabilityLayer:
    """One collector per layer plus a shared metrics collector."""

    def __init__(self):
        self.metrics = MetricsCollector()
        self._collectors: Dict[str, LogCollector] = {}

    def collector(self, layer_name: str) -> LogCollector:
        if layer_name not in self._collectors:
            self._collectors[layer_name] = LogCollector(layer_name)
        return self._collectors[layer_name]

    def all_entries(self) -> List[AuditLogEntry]:
        """Every audit entry across layers, oldest first."""
        entries = [e for c in self._collectors.values() for e in c.get_entries()]
        return sorted(entries, key=lambda e: e.timestamp)


__all__ = [
    "LogCollector",
    "MetricType",
    "MetricDefinition",
    "MetricsCollector",
    "ObservabilityLayer",
    "DEFAULT_METRICS",
]
