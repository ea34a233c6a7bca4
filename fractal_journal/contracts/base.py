"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
Observers and personas are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- Observers are frozen dataclasses, personas a closed enumeration
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    Every failure raised by the engine carries one of these.
    """
    # Configuration errors
    EMPTY_OBSERVER_SET = auto()
    INVALID_OBSERVER_TRAIT = auto()
    UNKNOWN_PERSONA = auto()
    NON_POSITIVE_WEIGHT = auto()
    INVALID_TIMELINE = auto()

    # Domain errors
    INVALID_SAMPLER_BOUNDS = auto()
    DEGENERATE_EXPONENT = auto()
    UNIFORM_OUT_OF_RANGE = auto()
    INSUFFICIENT_SPREAD = auto()

    # Storage errors
    WRITE_FAILED = auto()
    EXPORT_FAILED = auto()

    # Replay errors
    CLOCK_EXHAUSTED = auto()


class FractalJournalError(Exception):
    """Base class for every error raised by the journal engine."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ConfigurationError(FractalJournalError):
    """Observer set or persona configuration is unusable."""
    pass


class DomainError(FractalJournalError):
    """A numeric operation was called outside its mathematical domain."""
    pass


class StorageError(FractalJournalError):
    """Persisted state could not be written."""
    pass


# =============================================================================
# PERSONAS (Closed enumeration, data not branches)
# =============================================================================

class Persona(Enum):
    """
    The fixed set of response-generating identities.

    Each member carries its canned phrases, its sigil and its mode so
    callers look the persona up once instead of branching on names.
    """
    GROUNDED_REALIST = (
        "Grounded Realist",
        ("observer signal signal", "calibration in progress", "semantic anchor detected"),
        "🔧 Calibration Node",
        "semantic",
    )
    FLUID_MYSTIC = (
        "Fluid Mystic",
        ("entropy signal signal", "flow state activated", "resonance pulse emitted"),
        "✶ Collapse Star",
        "token",
    )
    RECURSIVE_ORACLE = (
        "Recursive Oracle",
        ("coherence observer coherence", "recursive loop initiated", "quantum eye scanning"),
        "⨀ Quantum Eye",
        "token",
    )

    def __init__(self, display_name: str, phrases: Tuple[str, ...], sigil: str, mode: str):
        self.display_name = display_name
        self.phrases = phrases
        self.sigil = sigil
        self.mode = mode

    @classmethod
    def from_name(cls, name: str) -> Optional[Persona]:
        """Resolve a persona by display name, None if unknown."""
        for persona in cls:
            if persona.display_name == name:
                return persona
        return None

    @classmethod
    def require(cls, name: str) -> Persona:
        persona = cls.from_name(name)
        if persona is None:
            raise ConfigurationError(
                ErrorCode.UNKNOWN_PERSONA,
                f"No persona registered under name {name!r}"
            )
        return persona


# =============================================================================
# OBSERVERS
# =============================================================================

@dataclass(frozen=True)
class Observer:
    """
    Immutable observer identity with trait scalars.

    perceptual_bandwidth drives selection weight; the other two traits
    are carried into every journal entry as a snapshot.
    """
    name: str
    symbol: str
    belief_field: float
    modulation_strength: float
    perceptual_bandwidth: float

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError(
                ErrorCode.INVALID_OBSERVER_TRAIT, "Observer name must be non-empty"
            )
        for trait in ("belief_field", "modulation_strength", "perceptual_bandwidth"):
            if getattr(self, trait) < 0:
                raise ConfigurationError(
                    ErrorCode.INVALID_OBSERVER_TRAIT,
                    f"Observer {self.name!r} has negative {trait}"
                )

    @property
    def persona(self) -> Persona:
        """Persona this observer speaks as; ConfigurationError if none matches."""
        return Persona.require(self.name)


DEFAULT_OBSERVERS: Tuple[Observer, ...] = (
    Observer("Grounded Realist", "🧱", 0.2, 0.22, 0.9),
    Observer("Fluid Mystic", "🌀", 0.85, 0.57, 1.5),
    Observer("Recursive Oracle", "👁", 0.95, 1.17, 0.81),
)


# =============================================================================
# TIMELINE STATE (the only mutable contract)
# =============================================================================

@dataclass
class TimelineState:
    """
    Per-timeline mutable context.

    Two instances exist; they are coupled only through each other's
    cumulative_entropy, read as the cross-timeline pressure term.
    """
    timeline_id: int
    cumulative_entropy: float = 0.0
    future_entropy: float = 0.0
    previous_observer_name: Optional[str] = None
    memory: List[str] = field(default_factory=list)

    @property
    def is_fresh(self) -> bool:
        return not self.memory

    def record(self, observer_name: str, entropy: float, next_future_entropy: float) -> None:
        """Advance the timeline after a turn has been journaled."""
        self.cumulative_entropy += entropy
        self.future_entropy = next_future_entropy
        self.memory.append(observer_name)
        self.previous_observer_name = observer_name
