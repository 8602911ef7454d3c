"""
Leaderboard rules and JSON-file persistence.

The rules (validate, order, cap) are pure; LeaderboardStore is a thin file
collaborator around them. Stored data is never trusted: rows that fail
validation are dropped and an unreadable file reads as an empty board.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from geoguess.config import get_settings
from geoguess.models import LeaderboardEntry

logger = logging.getLogger(__name__)

LEADERBOARD_CAPACITY = 5


def entry_sort_key(entry: LeaderboardEntry) -> tuple[int, int, float]:
    # Higher score first, then lower difficulty/lives, then earliest
    return (-entry.score, entry.difficulty, entry.created_at)


def sort_entries(entries: Iterable[LeaderboardEntry],
                 capacity: int = LEADERBOARD_CAPACITY) -> list[LeaderboardEntry]:
    return sorted(entries, key=entry_sort_key)[:capacity]


def parse_entries(raw: Any, capacity: int = LEADERBOARD_CAPACITY) -> list[LeaderboardEntry]:
    """Accept a JSON string/bytes or an already-decoded list."""
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Leaderboard data is not valid JSON; starting empty")
            return []
    if not isinstance(raw, list):
        return []

    entries: list[LeaderboardEntry] = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        try:
            entries.append(LeaderboardEntry.model_validate(row))
        except ValidationError as e:
            logger.debug("Dropping malformed leaderboard row %r: %s", row, e.error_count())
    return sort_entries(entries, capacity)


def serialize_entries(entries: Iterable[LeaderboardEntry]) -> str:
    return json.dumps([e.model_dump(by_alias=True) for e in entries], ensure_ascii=False)


def make_entry(name: Optional[str], score: int, difficulty: int,
               created_at: Optional[float] = None) -> LeaderboardEntry:
    return LeaderboardEntry(
        name=name,
        score=score,
        difficulty=difficulty,
        created_at=time.time() if created_at is None else created_at,
    )


def add_entry(entries: Iterable[LeaderboardEntry], entry: LeaderboardEntry,
              capacity: int = LEADERBOARD_CAPACITY) -> list[LeaderboardEntry]:
    return sort_entries([*entries, entry], capacity)


def qualifies(entries: list[LeaderboardEntry], score: int, difficulty: int,
              capacity: int = LEADERBOARD_CAPACITY) -> bool:
    """Would a new entry with this score make the board right now?"""
    if score < 0:
        return False
    if len(entries) < capacity:
        return True
    # A new entry is the latest, so it loses every full tie
    candidate = (-score, max(1, min(5, difficulty)), float("inf"))
    return candidate < entry_sort_key(sort_entries(entries, capacity)[-1])


class LeaderboardStore:
    """Persists the board as a JSON array on disk."""

    def __init__(self, path: Optional[Path] = None, capacity: Optional[int] = None):
        settings = get_settings().leaderboard
        self.path = Path(path) if path is not None else settings.path
        self.capacity = capacity or settings.capacity

    def load(self) -> list[LeaderboardEntry]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Could not read leaderboard %s: %s", self.path, e)
            return []
        return parse_entries(raw, self.capacity)

    def save(self, entries: Iterable[LeaderboardEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(serialize_entries(sort_entries(entries, self.capacity)), encoding="utf-8")

    def record(self, name: Optional[str], score: int, difficulty: int,
               created_at: Optional[float] = None) -> list[LeaderboardEntry]:
        entries = add_entry(self.load(), make_entry(name, score, difficulty, created_at), self.capacity)
        self.save(entries)
        logger.info("Leaderboard updated (%d entries)", len(entries))
        return entries
