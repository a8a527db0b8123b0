"""Topic countdown inference.

Infers from repeated topic observations whether an entity is counting a
number embedded in its topic down toward zero, and emits synthetic
countdown-started / countdown-completed change records.

Algorithm (per observation of a topic change):
1. Replace the "countdown reached" placeholder with the digit 0.
2. Extract every maximal digit run, left to right, as integers.
3. Same non-zero count as the tracked numbers: count per-position
   decrements. The first position (ascending) that decreased this round and
   has reached the decrement threshold decides the round:
   - no active countdown: start one at that position;
   - active at another position: abandon and restart tracking, no event;
   - active at that position and now zero: complete and restart tracking.
   Otherwise the new numbers become the baseline, counters persist.
4. Count changed or no numbers: complete an active countdown (a rewritten
   topic is indistinguishable from a finished one), then restart tracking.

The contract is determinism for a given observation sequence, not semantic
correctness: false positives and negatives are expected.
"""

from __future__ import annotations

import re
from datetime import datetime

import structlog

from pushwatch.domain.models.change_record import ChangeProperty, ChangeRecord

log = structlog.get_logger()

# Decrements seen at one position before it is treated as a countdown
DEFAULT_DECREMENT_THRESHOLD = 2

# Text some countdown widgets show once the goal has been reached
DEFAULT_COUNTDOWN_PLACEHOLDER = "[none]"

_DIGIT_RUN = re.compile(r"[0-9]+")


def extract_numbers(text: str | None, placeholder: str = DEFAULT_COUNTDOWN_PLACEHOLDER) -> list[int]:
    """Extract the integers embedded in topic text, left to right.

    Args:
        text: Topic text, possibly empty or None.
        placeholder: Token rendered as 0 before extraction.

    Returns:
        The maximal digit runs as integers, in order of appearance.
    """
    if not text:
        return []
    if placeholder:
        text = text.replace(placeholder, "0")
    return [int(run) for run in _DIGIT_RUN.findall(text)]


class CountdownInferenceEngine:
    """Per-entity countdown state machine.

    Holds at most one countdown track. Feed it every topic change of its
    entity, whether or not countdown events are pushed for that entity,
    so the tracked baseline always reflects the latest topic.
    """

    def __init__(
        self,
        entity_id: int,
        threshold: int = DEFAULT_DECREMENT_THRESHOLD,
        placeholder: str = DEFAULT_COUNTDOWN_PLACEHOLDER,
    ) -> None:
        """Initialize with empty tracking state.

        Args:
            entity_id: Entity this engine observes (log context only).
            threshold: Decrements at one position that qualify it.
            placeholder: "Countdown reached" token normalized to 0.
        """
        if threshold < 1:
            raise ValueError(f"threshold must be at least 1, got {threshold}")
        self._entity_id = entity_id
        self._threshold = threshold
        self._placeholder = placeholder
        self._numbers: list[int] = []
        self._decrements: list[int] = []
        self._active = False
        self._active_index: int | None = None

    @property
    def tracked_numbers(self) -> list[int]:
        return list(self._numbers)

    @property
    def decrement_counts(self) -> list[int]:
        return list(self._decrements)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def active_index(self) -> int | None:
        return self._active_index

    def observe(
        self, before: str | None, after: str | None, observed_at: datetime
    ) -> list[ChangeRecord]:
        """Consume one topic observation.

        Args:
            before: Previous topic text.
            after: New topic text.
            observed_at: Observation time stamped on emitted records.

        Returns:
            Zero or more synthetic countdown change records.
        """
        numbers = extract_numbers(after, self._placeholder)
        emitted: list[ChangeRecord] = []

        if numbers and len(numbers) == len(self._numbers):
            for index, value in enumerate(numbers):
                if value >= self._numbers[index]:
                    continue
                self._decrements[index] += 1
                if self._decrements[index] < self._threshold:
                    continue

                if not self._active:
                    self._active = True
                    self._active_index = index
                    emitted.append(self._started(value, after, observed_at))
                    break
                if index != self._active_index:
                    log.debug(
                        "countdown_abandoned",
                        entity_id=self._entity_id,
                        active_index=self._active_index,
                        conflicting_index=index,
                    )
                    self._reset(numbers)
                    return emitted
                if value == 0:
                    emitted.append(self._completed(before, after, observed_at))
                    self._reset(numbers)
                    return emitted
                break
            self._numbers = numbers
            return emitted

        if self._active:
            emitted.append(self._completed(before, after, observed_at))
        self._reset(numbers)
        return emitted

    def _reset(self, numbers: list[int]) -> None:
        self._numbers = numbers
        self._decrements = [0] * len(numbers)
        self._active = False
        self._active_index = None

    def _started(self, remaining: int, topic: str | None, observed_at: datetime) -> ChangeRecord:
        log.info(
            "countdown_detected",
            entity_id=self._entity_id,
            position=self._active_index,
            remaining=remaining,
        )
        return ChangeRecord.synthetic(
            ChangeProperty.COUNTDOWN_STARTED,
            f"Countdown detected, {remaining} remaining:\n{topic}",
            observed_at,
        )

    def _completed(
        self, before: str | None, after: str | None, observed_at: datetime
    ) -> ChangeRecord:
        log.info(
            "countdown_completed",
            entity_id=self._entity_id,
            position=self._active_index,
        )
        return ChangeRecord.synthetic(
            ChangeProperty.COUNTDOWN_COMPLETED,
            f"Countdown completed! New topic: {after}\nOld topic: {before}",
            observed_at,
        )
