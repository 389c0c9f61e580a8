"""Reading puzzles from lichess-format CSV files.

The lichess puzzle database has the header::

    PuzzleId,FEN,Moves,Rating,RatingDeviation,Popularity,NbPlays,Themes,GameUrl,OpeningTags

Rows are validated here so that the puzzle session never sees a FEN or a
coordinate move it cannot parse.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from tactician.core.moves import parse_coordinate_move
from tactician.core.rules import position_from_fen
from tactician.puzzles.models import Puzzle

_LOGGER = logging.getLogger(__name__)

CSV_FIELDS = (
    "PuzzleId",
    "FEN",
    "Moves",
    "Rating",
    "RatingDeviation",
    "Popularity",
    "NbPlays",
    "Themes",
    "GameUrl",
    "OpeningTags",
)


class PuzzleFormatError(ValueError):
    """Raised for a puzzle row that cannot be played."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"Line {line}: {message}")
        self.line = line


def read_puzzles(
    source: str | Path | Iterable[str],
    *,
    limit: int | None = None,
    skip_invalid: bool = False,
) -> list[Puzzle]:
    """Read puzzles from a CSV path or an iterable of CSV lines.

    A header row is detected by its first cell (``PuzzleId``) and skipped.
    With *skip_invalid* bad rows are logged and dropped, otherwise the first
    one raises :class:`PuzzleFormatError`.
    """
    if isinstance(source, (str, Path)):
        with open(source, newline="", encoding="utf-8") as fh:
            return _collect(fh, limit=limit, skip_invalid=skip_invalid)
    return _collect(source, limit=limit, skip_invalid=skip_invalid)


def _collect(
    lines: Iterable[str],
    *,
    limit: int | None,
    skip_invalid: bool,
) -> list[Puzzle]:
    puzzles: list[Puzzle] = []
    for puzzle in _iter_rows(lines, skip_invalid=skip_invalid):
        puzzles.append(puzzle)
        if limit is not None and len(puzzles) >= limit:
            break
    _LOGGER.info("Loaded %d puzzles", len(puzzles))
    return puzzles


def _iter_rows(lines: Iterable[str], *, skip_invalid: bool) -> Iterator[Puzzle]:
    for line_no, row in enumerate(csv.reader(lines), start=1):
        if not row or (line_no == 1 and row[0] == CSV_FIELDS[0]):
            continue
        try:
            yield puzzle_from_row(row, line_no)
        except PuzzleFormatError as exc:
            if not skip_invalid:
                raise
            _LOGGER.warning("Skipping puzzle: %s", exc)


def puzzle_from_row(row: list[str], line: int = 0) -> Puzzle:
    """Build a validated :class:`Puzzle` from one CSV row."""
    if len(row) < len(CSV_FIELDS) - 1:
        raise PuzzleFormatError(line, f"expected at least 9 fields, got {len(row)}")

    puzzle_id, fen, moves = row[0], row[1], row[2]
    try:
        position_from_fen(fen)
    except ValueError as exc:
        raise PuzzleFormatError(line, f"invalid FEN {fen!r}") from exc

    move_list = moves.split()
    if len(move_list) < 2:
        raise PuzzleFormatError(line, "a puzzle needs a setup move and a solution")
    for text in move_list:
        try:
            parse_coordinate_move(text)
        except ValueError as exc:
            raise PuzzleFormatError(line, str(exc)) from exc

    try:
        rating, rd, popularity, nb_plays = (int(v) for v in row[3:7])
    except ValueError as exc:
        raise PuzzleFormatError(line, "numeric fields must be integers") from exc

    return Puzzle(
        puzzle_id=puzzle_id,
        fen=fen,
        moves=" ".join(move_list),
        rating=rating,
        rating_deviation=rd,
        popularity=popularity,
        nb_plays=nb_plays,
        themes=row[7],
        game_url=row[8],
        opening_tags=row[9] if len(row) > 9 else "",
    )
