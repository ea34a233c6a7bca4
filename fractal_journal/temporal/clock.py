"""
Logical Clock and Turn Identity
===============================

Injectable clock and id source so that turn timestamps and turn ids can
be replayed.

GUARANTEES:
- Same seed + same clock sequence + same id sequence = identical journal
- Never reads system time implicitly in replay mode
- Live ticks are retained so a session can be replayed from them
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, List, Tuple
import uuid

from ..contracts.base import ErrorCode, FractalJournalError


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class ClockExhausted(FractalJournalError):
    """Raised when replay clock runs out of ticks."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.CLOCK_EXHAUSTED, message)


@dataclass
class LogicalClock:
    """
    Injectable clock for deterministic execution.

    MODES:
    ======
    1. LIVE mode: Uses real system time, logs all ticks
    2. REPLAY mode: Uses pre-recorded tick sequence
    """
    _ticks: List[datetime] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True

    def now(self) -> datetime:
        if self._is_live:
            current = datetime.now(timezone.utc)
            self._ticks.append(current)
            self._current_index = len(self._ticks)
            return current

        if self._current_index >= len(self._ticks):
            raise ClockExhausted(
                f"Replay clock exhausted at index {self._current_index}. "
                f"Recorded run had {len(self._ticks)} ticks."
            )
        tick = self._ticks[self._current_index]
        self._current_index += 1
        return tick

    def timestamp(self) -> str:
        """Current logical time as an ISO-8601 UTC string."""
        return self.now().strftime(TIMESTAMP_FORMAT)

    @property
    def ticks(self) -> Tuple[datetime, ...]:
        """Every tick seen so far; feed to replay() to reproduce them."""
        return tuple(self._ticks)

    def tick_count(self) -> int:
        return self._current_index

    def is_live(self) -> bool:
        return self._is_live

    @classmethod
    def live(cls) -> LogicalClock:
        return cls(_is_live=True)

    @classmethod
    def replay(cls, ticks: Iterable[datetime]) -> LogicalClock:
        """Create clock in REPLAY mode from an explicit tick sequence."""
        return cls(_ticks=list(ticks), _current_index=0, _is_live=False)

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"


# =============================================================================
# TURN IDS
# =============================================================================

TurnIdFactory = Callable[[], str]


def random_turn_id() -> str:
    """Fresh lowercase random UUID."""
    return str(uuid.uuid4())


def sequential_turn_ids(prefix: str = "turn", start: int = 0) -> TurnIdFactory:
    """Deterministic id source for replay and tests."""
    counter: Iterator[int] = iter(range(start, 2 ** 63))

    def next_id() -> str:
        return f"{prefix}-{next(counter):06d}"

    return next_id
