"""
Journal Test Fixtures

Explicit, deterministic builders for turns, observers and engines.
No hidden randomness: every random source is seeded here.
"""

from datetime import datetime, timezone
import random

from fractal_journal.contracts.base import DEFAULT_OBSERVERS, Observer
from fractal_journal.contracts.events import DialogueTurn
from fractal_journal.engine import DualTimelineEngine, EngineConfig
from fractal_journal.storage import StorageConfig
from fractal_journal.temporal.clock import LogicalClock, sequential_turn_ids


# =============================================================================
# FIXED TIMESTAMPS (deterministic)
# =============================================================================

EPOCH = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
EPOCH_ISO = "2026-01-01T00:00:00Z"


# =============================================================================
# OBSERVERS
# =============================================================================

REALIST, MYSTIC, ORACLE = DEFAULT_OBSERVERS


# =============================================================================
# BUILDERS
# =============================================================================

def make_turn(
    sigil: str = "🔧 Calibration Node",
    entropy: float = 0.5,
    delta_o: float = 1.2,
    text: str = "hello there",
    response: str = "Generated: calibration in progress",
    turn_id: str = "turn-000000"
) -> DialogueTurn:
    """Turn with forced metrics; tags left empty."""
    return DialogueTurn(
        input=text,
        response=response,
        message="🔄 Meaning fluctuation within acceptable thresholds.",
        mode="semantic",
        sigil=sigil,
        delta_O=delta_o,
        entropy=entropy,
        tags=(),
        timestamp=EPOCH_ISO,
        turn_id=turn_id,
    )


def make_observer(name: str, symbol: str, bandwidth: float = 1.0) -> Observer:
    return Observer(name, symbol, 0.5, 0.5, bandwidth)


def replay_clock(ticks: int = 64) -> LogicalClock:
    return LogicalClock.replay([EPOCH] * ticks)


def make_engine(seed: int = 7, storage: StorageConfig = None, ticks: int = 64) -> DualTimelineEngine:
    """Memory-backed engine with a replay clock and sequential turn ids."""
    config = EngineConfig(
        seed=seed,
        storage=storage or StorageConfig(backend_type="memory"),
    )
    return DualTimelineEngine(
        config,
        rng=random.Random(seed),
        clock=replay_clock(ticks),
        id_factory=sequential_turn_ids(),
    )
