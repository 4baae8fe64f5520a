"""
Spaced-repetition scheduling for generated flashcards.

Initial state follows SM-2 defaults (interval 1 day, ease factor 2.5);
calculate_next_review applies the SM-2 update after a review.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ..config import Config
from ..models import Flashcard, SRSData, SRSIntegrationResult


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SRSCache:
    """
    Caller-owned store of scheduling state keyed by card id.

    Writes to different keys are independent; concurrent writes to the
    same key leave whichever value was written last.
    """

    def __init__(self):
        self._entries: Dict[str, SRSData] = {}

    def get(self, card_id: str) -> Optional[SRSData]:
        return self._entries.get(card_id)

    def set(self, card_id: str, data: SRSData) -> None:
        self._entries[card_id] = data

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


def deck_id_for(subject_id: Optional[str]) -> str:
    """Deck identifier for a subject, or the shared anonymous deck."""
    return f"user-deck-{subject_id}" if subject_id else Config.ANONYMOUS_DECK_ID


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_next_review(srs_data: SRSData, quality: int,
                          now: Optional[datetime] = None) -> SRSData:
    """
    Apply one SM-2 review to scheduling state.

    Args:
        srs_data: Current scheduling state (left untouched)
        quality: Recall quality from 0 (blackout) to 5 (perfect)
        now: Review time (defaults to the current time)

    Returns:
        New SRSData with updated ease factor, interval and due date

    Raises:
        ValueError: If quality is outside 0-5
    """
    if not 0 <= quality <= 5:
        raise ValueError(f"quality must be between 0 and 5 (received: {quality})")

    now = now or datetime.now()

    if quality >= Config.SRS_FAILURE_THRESHOLD:
        ease_factor = srs_data.ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    else:
        ease_factor = srs_data.ease_factor - Config.SRS_EASE_PENALTY
    ease_factor = max(Config.SRS_MIN_EASE_FACTOR, ease_factor)

    if quality < Config.SRS_FAILURE_THRESHOLD:
        repetition = 0
        interval = Config.SRS_INITIAL_INTERVAL
    else:
        repetition = srs_data.repetition + 1
        if repetition == 1:
            interval = Config.SRS_INITIAL_INTERVAL
        elif repetition == 2:
            interval = Config.SRS_SECOND_INTERVAL
        else:
            interval = _round_half_up(srs_data.interval * ease_factor)

    return replace(
        srs_data,
        ease_factor=ease_factor,
        interval=interval,
        repetition=repetition,
        review_count=srs_data.review_count + 1,
        last_reviewed=now,
        next_review=now + timedelta(days=interval),
    )


class SchedulingInitializer:
    """Attaches initial scheduling state to flashcards."""

    def __init__(self, cache: Optional[SRSCache] = None, clock: Optional[Clock] = None):
        self.cache = cache if cache is not None else SRSCache()
        self.clock = clock or datetime.now

    def attach(self, flashcards: Sequence[Flashcard],
               subject_id: Optional[str] = None) -> SRSIntegrationResult:
        """
        Give every flashcard fresh scheduling state.

        Per-card failures are collected as messages; cards that succeed keep
        their srs_data even when others fail.

        Args:
            flashcards: Cards to schedule (mutated in place)
            subject_id: Optional learner id used to derive the deck

        Returns:
            SRSIntegrationResult
        """
        deck_id = deck_id_for(subject_id)
        errors: List[str] = []
        integrated = 0

        for flashcard in flashcards:
            try:
                srs_data = self._initial_state(flashcard, deck_id)
                self.cache.set(flashcard.id, srs_data)
                flashcard.srs_data = srs_data
                integrated += 1
            except Exception as e:
                card_id = getattr(flashcard, "id", None)
                errors.append(f"Failed to integrate flashcard {card_id}: {e}")

        if errors:
            logger.warning(f"SRS integration failed for {len(errors)} of {len(flashcards)} cards")
        else:
            logger.debug(f"Scheduled {integrated} cards in deck '{deck_id}'")

        return SRSIntegrationResult(
            success=not errors,
            integrated_cards=integrated,
            srs_system_id=Config.SRS_SYSTEM_ID,
            deck_id=deck_id if integrated > 0 else None,
            errors=errors,
        )

    def _initial_state(self, flashcard: Flashcard, deck_id: str) -> SRSData:
        if not flashcard.id:
            raise ValueError("flashcard has no id")
        now = self.clock()
        return SRSData(
            card_id=flashcard.id,
            deck_id=deck_id,
            interval=Config.SRS_INITIAL_INTERVAL,
            ease_factor=Config.SRS_INITIAL_EASE_FACTOR,
            review_count=0,
            next_review=now + timedelta(days=Config.SRS_INITIAL_INTERVAL),
        )
