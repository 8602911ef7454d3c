"""CLI entrypoint for geoguess."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from geoguess.logging_config import setup_logging
from geoguess.models import RunMode, SubmitResult


def main() -> None:
    setup_logging()

    parser = argparse.ArgumentParser(prog="geoguess")
    parser.add_argument("--data-dir", type=Path, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    play_parser = sub.add_parser("play")
    play_parser.add_argument("--mode", choices=[m.value for m in RunMode], default=None)
    play_parser.add_argument("--lives", type=int, default=None)
    play_parser.add_argument("--max-guesses", type=int, default=None)
    play_parser.add_argument("--svg", type=Path, default=None,
                             help="Write each round's silhouette to this SVG file")

    sub.add_parser("catalog")

    resolve_parser = sub.add_parser("resolve")
    resolve_parser.add_argument("text")

    sub.add_parser("leaderboard")

    args = parser.parse_args()

    if args.command == "play":
        _play(args.data_dir, args.mode, args.lives, args.max_guesses, args.svg)
    elif args.command == "catalog":
        _dump_catalog(args.data_dir)
    elif args.command == "resolve":
        _resolve(args.data_dir, args.text)
    elif args.command == "leaderboard":
        _print_leaderboard()


def _dump_catalog(data_dir: Path | None) -> None:
    from geoguess.datasets import load_catalog

    for country in load_catalog(data_dir):
        print(json.dumps({
            "id": country.id,
            "name": country.name,
            "aliases": list(country.aliases),
            "centroid": [round(c, 4) for c in country.centroid],
        }, ensure_ascii=False))


def _resolve(data_dir: Path | None, text: str) -> None:
    from geoguess.datasets import load_game_data

    _, index = load_game_data(data_dir)
    country = index.resolve(text)
    if country is None:
        print(f"No country matches {text!r}")
        for s in index.suggest(text):
            print(f"  did you mean: {s.name}")
        return
    print(f"{country.id}  {country.name}")


def _print_leaderboard() -> None:
    from geoguess.leaderboard import LeaderboardStore

    entries = LeaderboardStore().load()
    if not entries:
        print("(no scores yet)")
        return
    for i, e in enumerate(entries, 1):
        print(f"{i}. {e.name:<24} {e.score:>4}  (level {e.difficulty})")


def _write_svg(path: Path, path_data: str) -> None:
    path.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 440 280">'
        f'<path d="{path_data}" fill="#222" fill-rule="evenodd"/></svg>\n',
        encoding="utf-8",
    )


def _play(data_dir: Path | None, mode: str | None, lives: int | None,
          max_guesses: int | None, svg: Path | None) -> None:
    from geoguess.datasets import load_game_data
    from geoguess.leaderboard import LeaderboardStore, qualifies
    from geoguess.session import GameSession

    _, index = load_game_data(data_dir)
    session = GameSession(
        index,
        mode=RunMode(mode) if mode else None,
        lives=lives,
        max_guesses=max_guesses,
    )

    print(f"Guess the country ({session.mode.value} mode).")
    print("Type a country name, '?text' for suggestions, 'new' for a new round, 'quit' to exit.")

    shown_round = None
    while True:
        if session.round is not shown_round:
            shown_round = session.round
            print(f"\n── Round {session.round_number} ── {session.guesses_left}")
            if svg:
                _write_svg(svg, session.silhouette())
                print(f"Silhouette written to {svg}")

        raw = input("guess> ").strip()
        if not raw:
            continue
        if raw.lower() in {"quit", "exit", "q"}:
            break
        if raw.lower() == "new":
            session.start_new_round()
            continue
        if raw.startswith("?"):
            for s in index.suggest(raw[1:]):
                print(f"  {s.name}")
            continue

        if session.submit(raw) == SubmitResult.NOT_PLAYING:
            print("This round is over. Type 'new' to play again.")
            continue
        print(f"[{session.status.tone.value}] {session.status.text}")
        if session.round.is_playing:
            print(session.guesses_left)
            continue

        if session.mode != RunMode.SINGLE and not session.run.is_playing:
            store = LeaderboardStore()
            level = session.lives if session.mode == RunMode.LIVES else 1
            if qualifies(store.load(), session.run.score, level):
                name = input("New high score! Your name> ")
                store.record(name, session.run.score, level)
            _print_leaderboard()

        if session.awaiting_next_round:
            session.start_new_round()


if __name__ == "__main__":
    main()
