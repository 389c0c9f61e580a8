"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tactician.i18n import Strings, strings_for
from tactician.puzzles.models import Puzzle


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for signal and thread tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def english() -> Strings:
    return strings_for("English")


@pytest.fixture
def opening_puzzle() -> Puzzle:
    """White opens 1.e4; the player answers as Black over two plies."""
    return Puzzle(
        puzzle_id="open1",
        fen="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        moves="e2e4 e7e5 g1f3 b8c6",
        rating=600,
        themes="opening short",
    )


@pytest.fixture
def back_rank_puzzle() -> Puzzle:
    """Both Ra8# and Re8# mate; the stored solution is Re8#."""
    return Puzzle(
        puzzle_id="mate1",
        fen="6k1/5ppp/8/8/8/8/5PPP/R3R1K1 b - - 0 1",
        moves="g8h8 e1e8",
        rating=800,
        themes="mateIn1 backRankMate",
    )


@pytest.fixture
def promotion_puzzle() -> Puzzle:
    return Puzzle(
        puzzle_id="promo1",
        fen="k7/4P3/8/8/8/8/8/K7 b - - 0 1",
        moves="a8b7 e7e8q",
        rating=700,
        themes="promotion",
    )
