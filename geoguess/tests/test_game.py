"""
Tests for the round and run state machines.
"""

from __future__ import annotations

import random

import pytest

from geoguess.catalog import Catalog
from geoguess.game import Round, Run, create_round, submit_guess
from geoguess.models import RoundStatus, RunMode, RunStatus, SubmitResult

from conftest import make_country


def _round_for(catalog, target_id="FRA", max_guesses=3) -> Round:
    return Round(target_id=target_id, max_guesses=max_guesses)


class TestCreateRound:
    def test_initial_state(self, catalog):
        rnd = create_round(catalog, 5, random.Random(1))
        assert rnd.target_id in catalog
        assert rnd.guesses == []
        assert rnd.status == RoundStatus.PLAYING
        assert rnd.guesses_remaining == 5

    def test_seeded_rng_is_deterministic(self, catalog):
        a = [create_round(catalog, rng=random.Random(42)).target_id for _ in range(3)]
        b = [create_round(catalog, rng=random.Random(42)).target_id for _ in range(3)]
        assert a == b

    def test_every_country_reachable(self, catalog):
        rng = random.Random(7)
        seen = {create_round(catalog, rng=rng).target_id for _ in range(200)}
        assert seen == {c.id for c in catalog}

    def test_empty_catalog(self):
        with pytest.raises(ValueError):
            create_round(Catalog([]))

    def test_bad_max_guesses(self, catalog):
        with pytest.raises(ValueError):
            create_round(catalog, 0)


class TestSubmitGuess:
    def test_wrong_guess_appends_feedback(self, catalog):
        rnd = _round_for(catalog)
        result = submit_guess(rnd, catalog.get("DEU"), catalog.get("FRA"))
        assert result == SubmitResult.ACCEPTED
        assert rnd.status == RoundStatus.PLAYING
        guess = rnd.guesses[0]
        assert guess.country_id == "DEU"
        assert guess.display_name == "Germany"
        assert guess.correct is False
        assert guess.direction_label == "SW"
        assert guess.distance_text.endswith(" km")

    def test_correct_guess_wins_immediately(self, catalog):
        rnd = _round_for(catalog)
        submit_guess(rnd, catalog.get("FRA"), catalog.get("FRA"))
        assert rnd.status == RoundStatus.WON
        assert len(rnd.guesses) == 1
        assert rnd.guesses[0].correct
        assert rnd.guesses[0].distance_km == 0
        assert rnd.guesses[0].direction_label == "HERE"

    def test_duplicate_rejected(self, catalog):
        rnd = _round_for(catalog)
        submit_guess(rnd, catalog.get("DEU"), catalog.get("FRA"))
        result = submit_guess(rnd, catalog.get("DEU"), catalog.get("FRA"))
        assert result == SubmitResult.DUPLICATE
        assert len(rnd.guesses) == 1
        assert rnd.status == RoundStatus.PLAYING

    def test_lost_after_max_guesses(self, catalog):
        rnd = _round_for(catalog, max_guesses=3)
        target = catalog.get("FRA")
        for cid in ("DEU", "ESP", "USA"):
            submit_guess(rnd, catalog.get(cid), target)
        assert rnd.status == RoundStatus.LOST
        assert rnd.guesses_remaining == 0

    def test_win_on_last_guess(self, catalog):
        rnd = _round_for(catalog, max_guesses=2)
        target = catalog.get("FRA")
        submit_guess(rnd, catalog.get("DEU"), target)
        submit_guess(rnd, target, target)
        assert rnd.status == RoundStatus.WON

    def test_terminal_round_ignores_guesses(self, catalog):
        rnd = _round_for(catalog)
        target = catalog.get("FRA")
        submit_guess(rnd, target, target)
        result = submit_guess(rnd, catalog.get("ESP"), target)
        assert result == SubmitResult.NOT_PLAYING
        assert len(rnd.guesses) == 1
        assert rnd.status == RoundStatus.WON


def _finished(status: RoundStatus) -> Round:
    return Round(target_id="FRA", status=status)


class TestRun:
    def test_lives_mode(self):
        run = Run.start(RunMode.LIVES, lives=2)
        run.record_round(_finished(RoundStatus.WON))
        run.record_round(_finished(RoundStatus.LOST))
        assert run.score == 1
        assert run.lives_remaining == 1
        assert run.status == RunStatus.PLAYING
        run.record_round(_finished(RoundStatus.LOST))
        assert run.lives_remaining == 0
        assert run.status == RunStatus.OVER

    def test_over_is_terminal(self):
        run = Run.start(RunMode.LIVES, lives=1)
        run.record_round(_finished(RoundStatus.LOST))
        run.record_round(_finished(RoundStatus.WON))
        assert run.score == 0
        assert run.rounds_played == 1

    def test_lives_clamped(self):
        assert Run.start(RunMode.LIVES, lives=9).lives_remaining == 5
        assert Run.start(RunMode.LIVES, lives=0).lives_remaining == 1

    def test_streak_ends_on_first_loss(self):
        run = Run.start(RunMode.STREAK, lives=5)
        for _ in range(3):
            run.record_round(_finished(RoundStatus.WON))
        assert run.score == 3
        assert run.is_playing
        run.record_round(_finished(RoundStatus.LOST))
        assert run.status == RunStatus.OVER
        assert run.score == 3

    def test_single_ends_after_one_round(self):
        run = Run.start(RunMode.SINGLE)
        run.record_round(_finished(RoundStatus.WON))
        assert run.score == 1
        assert run.status == RunStatus.OVER

    def test_unfinished_round_ignored(self):
        run = Run.start(RunMode.LIVES, lives=3)
        run.record_round(Round(target_id="FRA"))
        assert run.rounds_played == 0

    def test_country_repeats_allowed_across_rounds(self):
        catalog = Catalog([make_country("AAA", "Alpha", 0, 0)])
        targets = {create_round(catalog).target_id for _ in range(3)}
        assert targets == {"AAA"}
