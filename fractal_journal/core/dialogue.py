"""
Dialogue Turn Generator
=======================

Builds one DialogueTurn from a selected observer and raw input.

NLU FENCE POST:
===============
Responses are drawn from fixed per-persona phrase sets.
The input text is read ONLY by the tag predicates.

DRAW ORDER (per turn, from the shared rng):
===========================================
1. response phrase (uniform over the persona's phrases)
2. delta_O = 0.9 + U
3. three entropy draws, max kept
"""

from __future__ import annotations
from dataclasses import replace
from typing import List, Optional
import random

from ..contracts.base import Observer
from ..contracts.events import DialogueTurn
from ..temporal.clock import LogicalClock, TurnIdFactory, random_turn_id
from .sampling import EntropySampler


RESPONSE_PREFIX = "Generated: "
DIVERGENCE_THRESHOLD = 1.5
ENTROPY_SPIKE_THRESHOLD = 1.0
DELTA_O_FLOOR = 0.9
ENTROPY_DRAWS = 3

DIVERGENCE_MESSAGE = "⚠️ Divergence detected. Semantic clarity unraveling."
STABLE_MESSAGE = "🔄 Meaning fluctuation within acceptable thresholds."

OBSERVER_MENTIONS = (
    "recursive oracle",
    "fluid mystic",
    "grounded realist",
    "recusive",
)


def build_message(delta_o: float) -> str:
    """Advisory text; the threshold is strictly greater-than."""
    if delta_o > DIVERGENCE_THRESHOLD:
        return DIVERGENCE_MESSAGE
    return STABLE_MESSAGE


def generate_tags(turn: DialogueTurn, input_lower: str) -> List[str]:
    """
    Evaluate every tag predicate independently, in fixed order.

    Pure function of (turn, input_lower).
    """
    tags = []
    if turn.entropy > ENTROPY_SPIKE_THRESHOLD:
        tags.append("#entropy-spike")
    if turn.delta_O > DIVERGENCE_THRESHOLD:
        tags.append("#high-decoherence")
    if "happy" in input_lower or "birth day" in input_lower:
        tags.append("#celebration")
    if "uncertainty" in input_lower or "doubt" in input_lower:
        tags.append("#introspection")
    if "quantum eye" in input_lower:
        tags.append("#symbol-request")
    if turn.delta_O > DIVERGENCE_THRESHOLD and "paradox" in turn.response:
        tags.append("#paradox")
    if any(mention in input_lower for mention in OBSERVER_MENTIONS):
        tags.append("#observer-interaction")
    return tags


class DialogueTurnGenerator:
    """
    Produces immutable turns for a selected observer.

    Timestamp and turn id come from injected collaborators so a run can
    be replayed from a clock log and a deterministic id source.
    """

    def __init__(
        self,
        sampler: Optional[EntropySampler] = None,
        clock: Optional[LogicalClock] = None,
        id_factory: Optional[TurnIdFactory] = None
    ):
        self._sampler = sampler or EntropySampler()
        self._clock = clock or LogicalClock.live()
        self._id_factory = id_factory or random_turn_id

    @property
    def sampler(self) -> EntropySampler:
        return self._sampler

    def generate(self, text: str, observer: Observer, rng: random.Random) -> DialogueTurn:
        persona = observer.persona

        phrase = rng.choice(persona.phrases)
        delta_o = DELTA_O_FLOOR + rng.random()
        entropy = self._sampler.draw_max(rng, ENTROPY_DRAWS)

        # Tags read the turn itself, so build it in two steps
        draft = DialogueTurn(
            input=text,
            response=RESPONSE_PREFIX + phrase,
            message=build_message(delta_o),
            mode=persona.mode,
            sigil=persona.sigil,
            delta_O=delta_o,
            entropy=entropy,
            tags=(),
            timestamp=self._clock.timestamp(),
            turn_id=self._id_factory(),
        )
        return replace(draft, tags=tuple(generate_tags(draft, text.lower())))
