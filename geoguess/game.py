"""
Round and run state machines.

Round: playing -> won (a guess hits the target) | lost (guess limit reached).
Run:   playing -> over (lives exhausted, or the single round finished).
Both terminal states are final; a new round/run replaces the old object.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from geoguess.catalog import Catalog
from geoguess.geo import compare_guess
from geoguess.models import Country, Guess, RoundStatus, RunMode, RunStatus, SubmitResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_GUESSES = 5
MAX_LIVES = 5


@dataclass
class Round:
    target_id: str
    max_guesses: int = DEFAULT_MAX_GUESSES
    guesses: list[Guess] = field(default_factory=list)
    status: RoundStatus = RoundStatus.PLAYING

    @property
    def guesses_remaining(self) -> int:
        return max(0, self.max_guesses - len(self.guesses))

    @property
    def is_playing(self) -> bool:
        return self.status == RoundStatus.PLAYING

    def has_guessed(self, country_id: str) -> bool:
        return any(g.country_id == country_id for g in self.guesses)


def create_round(catalog: Catalog, max_guesses: int = DEFAULT_MAX_GUESSES,
                 rng: Optional[random.Random] = None) -> Round:
    """Start a round against a target drawn uniformly from the catalog."""
    if len(catalog) == 0:
        raise ValueError("Cannot start a round with an empty catalog")
    if max_guesses < 1:
        raise ValueError(f"max_guesses must be positive, got {max_guesses}")

    rng = rng or random.Random()
    target = catalog[rng.randrange(len(catalog))]
    return Round(target_id=target.id, max_guesses=max_guesses)


def submit_guess(round_: Round, guess_country: Country, target_country: Country) -> SubmitResult:
    """
    Lock in a guess. Mutates the round on acceptance only; stale and
    duplicate submissions leave it untouched.
    """
    if not round_.is_playing:
        return SubmitResult.NOT_PLAYING
    if round_.has_guessed(guess_country.id):
        return SubmitResult.DUPLICATE

    comparison = compare_guess(guess_country, target_country)
    correct = guess_country.id == target_country.id
    round_.guesses.append(Guess(
        country_id=guess_country.id,
        display_name=guess_country.name,
        correct=correct,
        **comparison.model_dump(),
    ))

    if correct:
        round_.status = RoundStatus.WON
    elif len(round_.guesses) >= round_.max_guesses:
        round_.status = RoundStatus.LOST

    logger.debug("Guess %s -> %s (%s, %s)", guess_country.id, round_.status.value,
                 comparison.distance_text, comparison.direction_label)
    return SubmitResult.ACCEPTED


@dataclass
class Run:
    """Scoring across consecutive rounds."""
    mode: RunMode = RunMode.SINGLE
    lives_remaining: int = 1
    score: int = 0
    rounds_played: int = 0
    status: RunStatus = RunStatus.PLAYING

    @classmethod
    def start(cls, mode: RunMode, lives: int = 3) -> Run:
        if mode == RunMode.LIVES:
            lives = max(1, min(MAX_LIVES, lives))
        else:
            # Single and streak runs end on the first loss
            lives = 1
        return cls(mode=mode, lives_remaining=lives)

    @property
    def is_playing(self) -> bool:
        return self.status == RunStatus.PLAYING

    def record_round(self, round_: Round) -> None:
        """Fold a finished round into the run. Unfinished rounds are ignored."""
        if not self.is_playing or round_.is_playing:
            return

        self.rounds_played += 1
        if round_.status == RoundStatus.WON:
            self.score += 1
        else:
            self.lives_remaining = max(0, self.lives_remaining - 1)

        if self.lives_remaining == 0 or self.mode == RunMode.SINGLE:
            self.status = RunStatus.OVER
            logger.info("Run over: mode=%s score=%d rounds=%d",
                        self.mode.value, self.score, self.rounds_played)
