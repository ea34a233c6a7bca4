"""
Persisted Journal Schema

Pydantic models for the on-disk journal record. Records read back from
storage are validated against these models; anything that does not
validate is treated as corrupt.

Layout per entry:
    input, response, message, mode, sigil, tags, timestamp, turn_id,
    metrics {delta_O, entropy},
    context {affinity, interference, previous_observer},
    observer {name, symbol, belief_field, modulation_strength, perceptual_bandwidth}
"""

from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel

from ..contracts.events import (
    DialogueTurn, JournalEntry, ObserverSnapshot, TurnContext
)


class MetricsRecord(BaseModel):
    delta_O: float
    entropy: float


class ContextRecord(BaseModel):
    affinity: float
    interference: str
    previous_observer: Optional[str] = None


class ObserverRecord(BaseModel):
    name: str
    symbol: str
    belief_field: float
    modulation_strength: float
    perceptual_bandwidth: float


class JournalRecord(BaseModel):
    input: str
    response: str
    message: str
    mode: str
    sigil: str
    metrics: MetricsRecord
    tags: List[str]
    timestamp: str
    turn_id: str
    context: ContextRecord
    observer: ObserverRecord


class JournalDocument(BaseModel):
    """Whole-collection export: {"journal": [...]}."""
    journal: List[JournalRecord]


def record_from_entry(entry: JournalEntry) -> JournalRecord:
    turn = entry.turn
    return JournalRecord(
        input=turn.input,
        response=turn.response,
        message=turn.message,
        mode=turn.mode,
        sigil=turn.sigil,
        metrics=MetricsRecord(delta_O=turn.delta_O, entropy=turn.entropy),
        tags=list(turn.tags),
        timestamp=turn.timestamp,
        turn_id=turn.turn_id,
        context=ContextRecord(
            affinity=entry.context.affinity,
            interference=entry.context.interference,
            previous_observer=entry.context.previous_observer,
        ),
        observer=ObserverRecord(
            name=entry.observer.name,
            symbol=entry.observer.symbol,
            belief_field=entry.observer.belief_field,
            modulation_strength=entry.observer.modulation_strength,
            perceptual_bandwidth=entry.observer.perceptual_bandwidth,
        ),
    )


def entry_from_record(record: JournalRecord) -> JournalEntry:
    return JournalEntry(
        turn=DialogueTurn(
            input=record.input,
            response=record.response,
            message=record.message,
            mode=record.mode,
            sigil=record.sigil,
            delta_O=record.metrics.delta_O,
            entropy=record.metrics.entropy,
            tags=tuple(record.tags),
            timestamp=record.timestamp,
            turn_id=record.turn_id,
        ),
        context=TurnContext(
            affinity=record.context.affinity,
            interference=record.context.interference,
            previous_observer=record.context.previous_observer,
        ),
        observer=ObserverSnapshot(
            name=record.observer.name,
            symbol=record.observer.symbol,
            belief_field=record.observer.belief_field,
            modulation_strength=record.observer.modulation_strength,
            perceptual_bandwidth=record.observer.perceptual_bandwidth,
        ),
    )
