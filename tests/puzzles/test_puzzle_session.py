"""Tests for the puzzle-solving state machine."""

from __future__ import annotations

import random

import chess

from tactician.core.moves import CoordinateMove
from tactician.puzzles.models import Puzzle
from tactician.puzzles.session import (
    MoveVerdict,
    PuzzleFeedback,
    PuzzleSession,
    PuzzleStatus,
)


def _session(
    puzzles: list[Puzzle],
    *,
    auto_load_next: bool = False,
) -> tuple[PuzzleSession, list[PuzzleFeedback]]:
    session = PuzzleSession(auto_load_next=auto_load_next)
    feedback: list[PuzzleFeedback] = []
    session.events.on_feedback.append(feedback.append)
    session.load(puzzles, shuffle=False)
    return session, feedback


class TestLoading:
    def test_setup_move_is_applied(self, opening_puzzle: Puzzle) -> None:
        session, feedback = _session([opening_puzzle])

        assert session.status == PuzzleStatus.PLAYING
        assert session.current_move == 1
        assert session.side == chess.BLACK
        assert session.position.piece_type_at(chess.E4) == chess.PAWN
        assert session.last_move == (chess.E2, chess.E4)
        assert feedback == [PuzzleFeedback.BLACK_TO_MOVE]

    def test_empty_set_has_no_puzzles(self) -> None:
        session, feedback = _session([])

        assert session.status == PuzzleStatus.NO_PUZZLES
        assert session.current is None
        assert session.position.fen() == chess.STARTING_FEN
        assert feedback == [PuzzleFeedback.NO_PUZZLE_FOUND]

    def test_loaded_and_move_events(self, opening_puzzle: Puzzle) -> None:
        session = PuzzleSession()
        loaded: list[tuple[str, int]] = []
        moves: list[tuple[str, bool]] = []
        session.events.on_puzzle_loaded.append(
            lambda puzzle, index: loaded.append((puzzle.puzzle_id, index))
        )
        session.events.on_move.append(
            lambda move, _before, by_player: moves.append((move.uci(), by_player))
        )

        session.load([opening_puzzle], shuffle=False)

        assert loaded == [("open1", 0)]
        assert moves == [("e2e4", False)]

    def test_shuffle_uses_given_rng(
        self,
        opening_puzzle: Puzzle,
        back_rank_puzzle: Puzzle,
        promotion_puzzle: Puzzle,
    ) -> None:
        puzzles = [opening_puzzle, back_rank_puzzle, promotion_puzzle]
        first = PuzzleSession()
        second = PuzzleSession()
        first.load(puzzles, rng=random.Random(7))
        second.load(puzzles, rng=random.Random(7))

        assert first.puzzles == second.puzzles
        assert sorted(p.puzzle_id for p in first.puzzles) == ["mate1", "open1", "promo1"]


class TestVerifyMove:
    def test_correct_move_plays_reply(self, opening_puzzle: Puzzle) -> None:
        session, feedback = _session([opening_puzzle])

        verdict = session.verify_move(chess.E7, chess.E5)

        assert verdict == MoveVerdict.CORRECT
        assert session.current_move == 3
        assert session.last_move == (chess.G1, chess.F3)
        assert session.position.piece_type_at(chess.F3) == chess.KNIGHT
        assert feedback[-1] == PuzzleFeedback.CORRECT_MOVE

    def test_wrong_move_leaves_state(self, opening_puzzle: Puzzle) -> None:
        session, feedback = _session([opening_puzzle])
        before = session.position.fen()

        verdict = session.verify_move(chess.D7, chess.D5)

        assert verdict == MoveVerdict.WRONG
        assert session.current_move == 1
        assert session.position.fen() == before
        assert session.status == PuzzleStatus.PLAYING
        assert feedback[-1] == PuzzleFeedback.WRONG_MOVE_BLACK

    def test_last_puzzle_solved_means_all_done(self, opening_puzzle: Puzzle) -> None:
        session, feedback = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)

        verdict = session.verify_move(chess.B8, chess.C6)

        assert verdict == MoveVerdict.ALL_DONE
        assert session.status == PuzzleStatus.NO_PUZZLES
        assert session.position.piece_type_at(chess.C6) == chess.KNIGHT
        assert feedback[-1] == PuzzleFeedback.ALL_PUZZLES_DONE

    def test_solved_waits_without_auto_load(
        self, back_rank_puzzle: Puzzle, opening_puzzle: Puzzle
    ) -> None:
        session, feedback = _session([back_rank_puzzle, opening_puzzle])

        verdict = session.verify_move(chess.E1, chess.E8)

        assert verdict == MoveVerdict.SOLVED
        assert session.status == PuzzleStatus.PUZZLE_ENDED
        assert session.current_puzzle == 0
        assert feedback[-1] == PuzzleFeedback.PUZZLE_SOLVED

    def test_auto_load_next(self, back_rank_puzzle: Puzzle, opening_puzzle: Puzzle) -> None:
        session, feedback = _session(
            [back_rank_puzzle, opening_puzzle], auto_load_next=True
        )

        verdict = session.verify_move(chess.E1, chess.E8)

        assert verdict == MoveVerdict.NEXT_LOADED
        assert session.current_puzzle == 1
        assert session.status == PuzzleStatus.PLAYING
        assert feedback[-1] == PuzzleFeedback.BLACK_TO_MOVE

    def test_reply_on_last_ply_ends_puzzle(self, opening_puzzle: Puzzle) -> None:
        rook_chase = Puzzle(
            puzzle_id="rook1",
            fen="6k1/8/8/8/8/8/8/3R2K1 w - - 0 1",
            moves="d1d8 g8g7 d8d7",
        )
        session, _ = _session([rook_chase, opening_puzzle])
        assert session.current_move == 1

        verdict = session.verify_move(chess.G8, chess.G7)

        assert verdict == MoveVerdict.SOLVED
        assert session.current_move == 3
        assert session.status == PuzzleStatus.PUZZLE_ENDED
        assert session.last_move == (chess.D8, chess.D7)

    def test_reply_on_last_ply_auto_loads_next(self, opening_puzzle: Puzzle) -> None:
        rook_chase = Puzzle(
            puzzle_id="rook1",
            fen="6k1/8/8/8/8/8/8/3R2K1 w - - 0 1",
            moves="d1d8 g8g7 d8d7",
        )
        session, _ = _session([rook_chase, opening_puzzle], auto_load_next=True)

        assert session.verify_move(chess.G8, chess.G7) == MoveVerdict.NEXT_LOADED
        assert session.current_puzzle == 1
        assert session.current_move == 1
        assert session.status == PuzzleStatus.PLAYING

    def test_alternative_mate_is_accepted(self, back_rank_puzzle: Puzzle) -> None:
        session, _ = _session([back_rank_puzzle])

        verdict = session.verify_move(chess.A1, chess.A8)

        assert verdict == MoveVerdict.ALL_DONE
        assert session.position.is_checkmate()

    def test_early_mate_ends_longer_line(self, opening_puzzle: Puzzle) -> None:
        scholars_line = Puzzle(
            puzzle_id="early1",
            fen="r1bqkbnr/pppp1ppp/2n5/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR b KQkq - 0 1",
            moves="a7a6 h5f3 a6a5 f3f7",
        )
        session, feedback = _session([scholars_line, opening_puzzle])

        verdict = session.verify_move(chess.H5, chess.F7)

        assert verdict == MoveVerdict.SOLVED
        assert session.status == PuzzleStatus.PUZZLE_ENDED
        assert session.current_move == 2
        assert session.position.is_checkmate()
        assert session.last_move == (chess.H5, chess.F7)
        assert session.hint() is None
        assert feedback[-1] == PuzzleFeedback.PUZZLE_SOLVED

    def test_early_mate_on_last_puzzle(self) -> None:
        scholars_line = Puzzle(
            puzzle_id="early1",
            fen="r1bqkbnr/pppp1ppp/2n5/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR b KQkq - 0 1",
            moves="a7a6 h5f3 a6a5 f3f7",
        )
        session, _ = _session([scholars_line])

        assert session.verify_move(chess.H5, chess.F7) == MoveVerdict.ALL_DONE
        assert session.status == PuzzleStatus.NO_PUZZLES
        assert session.position.is_checkmate()

    def test_missing_promotion_defaults_to_queen(self, promotion_puzzle: Puzzle) -> None:
        session, _ = _session([promotion_puzzle])

        assert session.verify_move(chess.E7, chess.E8) == MoveVerdict.ALL_DONE
        assert session.position.piece_type_at(chess.E8) == chess.QUEEN

    def test_wrong_promotion_piece_rejected(self, promotion_puzzle: Puzzle) -> None:
        session, _ = _session([promotion_puzzle])

        assert session.verify_move(chess.E7, chess.E8, chess.KNIGHT) == MoveVerdict.WRONG

    def test_ignored_after_puzzle_ends(
        self, back_rank_puzzle: Puzzle, opening_puzzle: Puzzle
    ) -> None:
        session, _ = _session([back_rank_puzzle, opening_puzzle])
        session.verify_move(chess.E1, chess.E8)

        assert session.verify_move(chess.A1, chess.A2) == MoveVerdict.IGNORED

    def test_ignored_without_puzzles(self) -> None:
        session, _ = _session([])
        assert session.verify_move(chess.E2, chess.E4) == MoveVerdict.IGNORED


class TestHint:
    def test_hint_is_origin_of_expected_move(self, opening_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle])
        assert session.hint() == chess.E7
        assert session.solution_move() == CoordinateMove(chess.E7, chess.E5)

    def test_no_hint_after_solving(self, opening_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)
        session.verify_move(chess.B8, chess.C6)
        assert session.hint() is None


class TestNavigation:
    def test_next_and_previous(self, opening_puzzle: Puzzle, back_rank_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle, back_rank_puzzle])

        session.next_puzzle()
        assert session.current_puzzle == 1
        assert session.side == chess.WHITE

        session.previous_puzzle()
        assert session.current_puzzle == 0
        assert session.side == chess.BLACK

    def test_previous_at_first_is_noop(self, opening_puzzle: Puzzle) -> None:
        session, feedback = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)
        count = len(feedback)

        session.previous_puzzle()

        assert session.current_move == 3
        assert len(feedback) == count

    def test_next_at_last_is_noop(self, opening_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)

        session.next_puzzle()

        assert session.current_puzzle == 0
        assert session.current_move == 3

    def test_jump_is_one_based(self, opening_puzzle: Puzzle, back_rank_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle, back_rank_puzzle])
        session.jump_to(2)
        assert session.current_puzzle == 1

    def test_jump_out_of_range_reloads_current(self, opening_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)

        session.jump_to(5)

        assert session.current_puzzle == 0
        assert session.current_move == 1

    def test_redo_restarts(self, opening_puzzle: Puzzle) -> None:
        session, _ = _session([opening_puzzle])
        session.verify_move(chess.E7, chess.E5)

        session.redo()

        assert session.current_move == 1
        assert session.position.piece_type_at(chess.F3) is None
        assert session.status == PuzzleStatus.PLAYING
