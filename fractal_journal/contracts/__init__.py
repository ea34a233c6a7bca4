"""
Contracts shared by every layer of the journal engine.
"""

from .base import (
    ErrorCode, FractalJournalError, ConfigurationError, DomainError, StorageError,
    Persona, Observer, DEFAULT_OBSERVERS, TimelineState,
)
from .events import (
    DialogueTurn, TurnContext, ObserverSnapshot, JournalEntry, TurnOutcome,
    HistogramBin, PowerLawReport, GraphEdge, GraphExport,
    AuditEventType, AuditLogEntry, MetricPoint,
)

__all__ = [
    "ErrorCode",
    "FractalJournalError",
    "ConfigurationError",
    "DomainError",
    "StorageError",
    "Persona",
    "Observer",
    "DEFAULT_OBSERVERS",
    "TimelineState",
    "DialogueTurn",
    "TurnContext",
    "ObserverSnapshot",
    "JournalEntry",
    "TurnOutcome",
    "HistogramBin",
    "PowerLawReport",
    "GraphEdge",
    "GraphExport",
    "AuditEventType",
    "AuditLogEntry",
    "MetricPoint",
]
