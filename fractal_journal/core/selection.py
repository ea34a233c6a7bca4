"""
Observer Selector
=================

Turns perceptual bandwidth and accumulated entropy into selection
weights and performs one weighted categorical draw.

    pressure = cumulative(this) + future(this) + cumulative(other)
    weight_i = 1 + bandwidth_i * pressure
"""

from __future__ import annotations
from typing import List, Sequence
import random

from ..contracts.base import ConfigurationError, ErrorCode, Observer, TimelineState


def timeline_pressure(state: TimelineState, other: TimelineState) -> float:
    """Cross-timeline pressure term for the timeline about to advance."""
    return state.cumulative_entropy + state.future_entropy + other.cumulative_entropy


def selection_weights(observers: Sequence[Observer], pressure: float) -> List[float]:
    if not observers:
        raise ConfigurationError(ErrorCode.EMPTY_OBSERVER_SET, "Observer list is empty")

    weights = [1.0 + obs.perceptual_bandwidth * pressure for obs in observers]
    for obs, weight in zip(observers, weights):
        if weight <= 0:
            raise ConfigurationError(
                ErrorCode.NON_POSITIVE_WEIGHT,
                f"Observer {obs.name!r} received non-positive weight {weight} at pressure {pressure}"
            )
    return weights


class ObserverSelector:
    """Weighted persona draw over a fixed observer set."""

    def __init__(self, observers: Sequence[Observer]):
        if not observers:
            raise ConfigurationError(ErrorCode.EMPTY_OBSERVER_SET, "Observer list is empty")
        self._observers = tuple(observers)

    @property
    def observers(self) -> Sequence[Observer]:
        return self._observers

    def weights(self, pressure: float) -> List[float]:
        return selection_weights(self._observers, pressure)

    def select(self, pressure: float, rng: random.Random) -> Observer:
        """Single draw; consumes exactly one rng.random() call."""
        weights = self.weights(pressure)
        return rng.choices(self._observers, weights=weights, k=1)[0]

    def select_for(
        self,
        state: TimelineState,
        other: TimelineState,
        rng: random.Random
    ) -> Observer:
        return self.select(timeline_pressure(state, other), rng)
