from .clock import (
    LogicalClock, ClockExhausted, TIMESTAMP_FORMAT,
    TurnIdFactory, random_turn_id, sequential_turn_ids,
)

__all__ = [
    "LogicalClock",
    "ClockExhausted",
    "TIMESTAMP_FORMAT",
    "TurnIdFactory",
    "random_turn_id",
    "sequential_turn_ids",
]
