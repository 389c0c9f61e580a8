"""Application settings, built once at startup and passed to every component."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass

import chess

from tactician.core.moves import promotion_from_letter
from tactician.engine.protocol import DEFAULT_ENGINE_LIMIT
from tactician.i18n import DEFAULT_LANGUAGE, LANGUAGES, Strings, strings_for


@dataclass
class AppSettings:
    """All user-configurable settings."""

    # General
    language: str = DEFAULT_LANGUAGE

    # Puzzles
    puzzle_db_location: str = "lichess_db_puzzle.csv"
    search_results_limit: int = 200_000
    shuffle_puzzles: bool = True
    auto_load_next: bool = False
    promotion_piece: str = "q"

    # Engine
    engine_path: str = "/usr/games/stockfish"
    engine_limit: str = DEFAULT_ENGINE_LIMIT

    @property
    def strings(self) -> Strings:
        return strings_for(self.language)

    @property
    def promotion(self) -> chess.PieceType:
        return promotion_from_letter(self.promotion_piece)

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None) -> AppSettings:
        """Defaults overridden by command-line options."""
        defaults = cls()
        parser = argparse.ArgumentParser(
            prog="tactician",
            description="Solve chess puzzles offline and analyse them with a UCI engine.",
        )
        parser.add_argument(
            "puzzles",
            nargs="?",
            default=defaults.puzzle_db_location,
            help="lichess-format puzzle CSV",
        )
        parser.add_argument("--limit", type=int, default=defaults.search_results_limit)
        parser.add_argument("--no-shuffle", action="store_true")
        parser.add_argument("--auto-next", action="store_true")
        parser.add_argument(
            "--promotion",
            choices=["q", "r", "b", "n"],
            default=defaults.promotion_piece,
        )
        parser.add_argument("--engine", default=defaults.engine_path)
        parser.add_argument("--engine-limit", default=defaults.engine_limit)
        parser.add_argument("--language", choices=LANGUAGES, default=defaults.language)
        args = parser.parse_args(argv)

        return cls(
            language=args.language,
            puzzle_db_location=args.puzzles,
            search_results_limit=args.limit,
            shuffle_puzzles=not args.no_shuffle,
            auto_load_next=args.auto_next,
            promotion_piece=args.promotion,
            engine_path=args.engine,
            engine_limit=args.engine_limit,
        )
