"""
Game session orchestration.

Owns the current Round and Run and the user-facing status line. The
catalog and alias index are shared read-only references built once at
startup; rounds and runs are replaced wholesale, never edited from outside.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from geoguess.aliases import AliasIndex
from geoguess.config import get_settings
from geoguess.game import Round, Run, create_round, submit_guess
from geoguess.models import Country, RoundStatus, RunMode, SubmitResult, Tone
from geoguess.scheduler import RoundScheduler
from geoguess.silhouette import silhouette_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusMessage:
    text: str
    tone: Tone = Tone.INFO


def guesses_left_text(remaining: int) -> str:
    return f"{remaining} guess{'' if remaining == 1 else 'es'} left"


class GameSession:
    def __init__(
        self,
        index: AliasIndex,
        *,
        mode: Optional[RunMode] = None,
        max_guesses: Optional[int] = None,
        lives: Optional[int] = None,
        next_round_delay: Optional[float] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[RoundScheduler] = None,
    ):
        settings = get_settings().game
        self.index = index
        self.catalog = index.catalog
        self.mode = mode or RunMode(settings.run_mode)
        self.max_guesses = max_guesses or settings.max_guesses
        self.lives = lives or settings.lives
        self.next_round_delay = settings.next_round_delay_sec if next_round_delay is None else next_round_delay
        self.rng = rng or random.Random(settings.seed)
        self.scheduler = scheduler

        self.round_number = 0
        self.round: Round
        self.run: Run
        self.status = StatusMessage("")
        self.new_run()

    # ── Lifecycle ────────────────────────────────────────────────────

    def new_run(self) -> None:
        self.run = Run.start(self.mode, self.lives)
        self.round_number = 0
        self.start_new_round()

    def start_new_round(self) -> None:
        if self.scheduler is not None:
            self.scheduler.cancel()
        if not self.run.is_playing:
            # Single mode replays; finished competitive runs start over
            self.run = Run.start(self.mode, self.lives)
            self.round_number = 0

        self.round_number += 1
        self.round = create_round(self.catalog, self.max_guesses, self.rng)
        self.status = StatusMessage("New round started. Pick your first country guess.")
        logger.debug("Round %d started (mode=%s)", self.round_number, self.mode.value)

    @property
    def target(self) -> Country:
        target = self.catalog.get(self.round.target_id)
        if target is None:
            raise RuntimeError(f"Round target {self.round.target_id} is not in the catalog")
        return target

    @property
    def awaiting_next_round(self) -> bool:
        """Round finished and the run continues, but nothing is scheduled."""
        return (not self.round.is_playing and self.run.is_playing
                and (self.scheduler is None or not self.scheduler.pending))

    @property
    def guesses_left(self) -> str:
        return guesses_left_text(self.round.guesses_remaining)

    def silhouette(self) -> str:
        return silhouette_path(self.target)

    # ── Guessing ─────────────────────────────────────────────────────

    def submit(self, text: str, selected_id: Optional[str] = None) -> Optional[SubmitResult]:
        """
        Resolve typed input and lock it in. Returns None when the input
        names no known country.
        """
        if not self.round.is_playing or not self.run.is_playing:
            return SubmitResult.NOT_PLAYING

        country = self.index.resolve_input(text, selected_id)
        if country is None:
            self.status = StatusMessage("That input does not match a valid country in this game.", Tone.ERROR)
            return None
        return self.lock_guess(country)

    def lock_guess(self, country: Country) -> SubmitResult:
        target = self.target
        result = submit_guess(self.round, country, target)

        if result == SubmitResult.DUPLICATE:
            self.status = StatusMessage("You already guessed that country. Pick a new one.", Tone.WARNING)
            return result
        if result == SubmitResult.NOT_PLAYING:
            return result

        guess = self.round.guesses[-1]
        if self.round.status == RoundStatus.WON:
            self.status = StatusMessage(
                f"Correct. {target.name} found in {len(self.round.guesses)} guess(es).", Tone.SUCCESS)
        elif self.round.status == RoundStatus.LOST:
            self.status = StatusMessage(
                f"Round over. The country was {target.name}."
                + (" Start a new round." if self.mode == RunMode.SINGLE else ""), Tone.ERROR)
        else:
            self.status = StatusMessage(
                f"{country.name}: {guess.distance_text} {guess.direction_arrow} {guess.direction_label}")

        if not self.round.is_playing:
            self._finish_round()
        return result

    def _finish_round(self) -> None:
        self.run.record_round(self.round)
        if self.mode == RunMode.SINGLE:
            return
        if not self.run.is_playing:
            self.status = StatusMessage(
                f"{self.status.text} Run over with a score of {self.run.score}.", self.status.tone)
            return
        if self.scheduler is not None:
            self.scheduler.schedule(self.start_new_round, self.next_round_delay)
