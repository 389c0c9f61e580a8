"""Puzzle records as supplied by the puzzle data source."""

from __future__ import annotations

from dataclasses import dataclass

from tactician.core.moves import CoordinateMove, parse_coordinate_move

LICHESS_TRAINING_URL = "https://lichess.org/training/"


@dataclass(slots=True, frozen=True)
class Puzzle:
    """One tactical puzzle. ``moves[0]`` is the opponent's setup move."""

    puzzle_id: str
    fen: str
    moves: str
    rating: int = 0
    rating_deviation: int = 0
    popularity: int = 0
    nb_plays: int = 0
    themes: str = ""
    game_url: str = ""
    opening_tags: str = ""

    @property
    def move_list(self) -> list[str]:
        return self.moves.split()

    @property
    def coordinate_moves(self) -> list[CoordinateMove]:
        return [parse_coordinate_move(m) for m in self.move_list]

    @property
    def theme_list(self) -> list[str]:
        return self.themes.split()

    @property
    def opening_list(self) -> list[str]:
        return self.opening_tags.split()

    @property
    def lichess_url(self) -> str:
        return LICHESS_TRAINING_URL + self.puzzle_id
