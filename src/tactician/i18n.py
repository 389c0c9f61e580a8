"""Localized strings for Tactician.

Usage::

    from tactician.i18n import strings_for

    s = strings_for("Spanish")
    print(s.knight)            # "C"
    print(s.mate_in + "3")     # "Mate en 3"

Bundles are plain values: callers keep the one they need (usually through
:class:`tactician.config.AppSettings`) instead of relying on a global locale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tactician.puzzles.session import PuzzleFeedback


@dataclass(frozen=True)
class Strings:
    # ── Piece words used in displayed notation ───────────────────────────
    king: str
    queen: str
    rook: str
    bishop: str
    knight: str

    # ── Puzzle feedback ──────────────────────────────────────────────────
    white_to_move: str
    black_to_move: str
    correct_move: str
    correct_puzzle: str
    all_puzzles_done: str
    wrong_move_white_play: str
    wrong_move_black_play: str
    no_puzzle_found: str
    use_search: str
    hint_square: str  # e.g. "Hint: move the piece on {square}"

    # ── Engine ───────────────────────────────────────────────────────────
    eval: str  # prefix, e.g. "Eval: "
    best_move: str  # prefix, e.g. "Best move: "
    mate_in: str  # prefix, e.g. "Mate in "
    mate: str
    engine_not_found: str  # e.g. "Engine not found: {path}"
    engine_error: str  # e.g. "Engine error: {msg}"
    engine_busy: str
    engine_started: str
    engine_stopped: str

    # ── Modes ────────────────────────────────────────────────────────────
    mode_puzzle: str
    mode_analysis: str
    puzzle_number: str  # e.g. "Puzzle {number} of {total}"


# ── Built-in locales ─────────────────────────────────────────────────────────

_EN = Strings(
    king="K",
    queen="Q",
    rook="R",
    bishop="B",
    knight="N",
    white_to_move="White to move!",
    black_to_move="Black to move!",
    correct_move="Correct! Keep going!",
    correct_puzzle="Well done!",
    all_puzzles_done="All puzzles done for this search!",
    wrong_move_white_play="Wrong move... White to play.",
    wrong_move_black_play="Wrong move... Black to play.",
    no_puzzle_found="No puzzle found! Try a different search.",
    use_search="Load a puzzle file to start.",
    hint_square="Hint: move the piece on {square}",
    eval="Eval: ",
    best_move="Best move: ",
    mate_in="Mate in ",
    mate="Mate",
    engine_not_found="Engine not found: {path}",
    engine_error="Engine error: {msg}",
    engine_busy="Engine is busy, position update skipped.",
    engine_started="Engine started.",
    engine_stopped="Engine stopped.",
    mode_puzzle="Puzzle",
    mode_analysis="Analysis",
    puzzle_number="Puzzle {number} of {total}",
)

_NL = Strings(
    king="K",
    queen="D",
    rook="T",
    bishop="L",
    knight="P",
    white_to_move="Wit aan zet!",
    black_to_move="Zwart aan zet!",
    correct_move="Goed! Ga door!",
    correct_puzzle="Goed gedaan!",
    all_puzzles_done="Alle puzzels van deze zoekopdracht zijn klaar!",
    wrong_move_white_play="Verkeerde zet... Wit aan zet.",
    wrong_move_black_play="Verkeerde zet... Zwart aan zet.",
    no_puzzle_found="Geen puzzel gevonden! Probeer een andere zoekopdracht.",
    use_search="Laad een puzzelbestand om te beginnen.",
    hint_square="Hint: speel het stuk op {square}",
    eval="Evaluatie: ",
    best_move="Beste zet: ",
    mate_in="Mat in ",
    mate="Mat",
    engine_not_found="Engine niet gevonden: {path}",
    engine_error="Engine-fout: {msg}",
    engine_busy="Engine is bezig, stelling niet bijgewerkt.",
    engine_started="Engine gestart.",
    engine_stopped="Engine gestopt.",
    mode_puzzle="Puzzel",
    mode_analysis="Analyse",
    puzzle_number="Puzzel {number} van {total}",
)

_PT = Strings(
    king="R",
    queen="D",
    rook="T",
    bishop="B",
    knight="C",
    white_to_move="Brancas jogam!",
    black_to_move="Pretas jogam!",
    correct_move="Correto! Continue!",
    correct_puzzle="Muito bem!",
    all_puzzles_done="Todos os problemas desta busca foram resolvidos!",
    wrong_move_white_play="Lance errado... Brancas jogam.",
    wrong_move_black_play="Lance errado... Pretas jogam.",
    no_puzzle_found="Nenhum problema encontrado! Tente outra busca.",
    use_search="Carregue um arquivo de problemas para começar.",
    hint_square="Dica: mova a peça em {square}",
    eval="Avaliação: ",
    best_move="Melhor lance: ",
    mate_in="Mate em ",
    mate="Mate",
    engine_not_found="Engine não encontrada: {path}",
    engine_error="Erro na engine: {msg}",
    engine_busy="Engine ocupada, posição não enviada.",
    engine_started="Engine iniciada.",
    engine_stopped="Engine parada.",
    mode_puzzle="Problema",
    mode_analysis="Análise",
    puzzle_number="Problema {number} de {total}",
)

_ES = Strings(
    king="R",
    queen="D",
    rook="T",
    bishop="A",
    knight="C",
    white_to_move="¡Juegan las blancas!",
    black_to_move="¡Juegan las negras!",
    correct_move="¡Correcto! ¡Sigue!",
    correct_puzzle="¡Bien hecho!",
    all_puzzles_done="¡Todos los problemas de esta búsqueda resueltos!",
    wrong_move_white_play="Jugada incorrecta... Juegan las blancas.",
    wrong_move_black_play="Jugada incorrecta... Juegan las negras.",
    no_puzzle_found="¡No se encontró ningún problema! Prueba otra búsqueda.",
    use_search="Carga un archivo de problemas para empezar.",
    hint_square="Pista: mueve la pieza en {square}",
    eval="Evaluación: ",
    best_move="Mejor jugada: ",
    mate_in="Mate en ",
    mate="Mate",
    engine_not_found="Motor no encontrado: {path}",
    engine_error="Error del motor: {msg}",
    engine_busy="El motor está ocupado, posición no enviada.",
    engine_started="Motor iniciado.",
    engine_stopped="Motor detenido.",
    mode_puzzle="Problema",
    mode_analysis="Análisis",
    puzzle_number="Problema {number} de {total}",
)

_FR = Strings(
    king="R",
    queen="D",
    rook="T",
    bishop="F",
    knight="C",
    white_to_move="Les blancs jouent !",
    black_to_move="Les noirs jouent !",
    correct_move="Correct ! Continuez !",
    correct_puzzle="Bien joué !",
    all_puzzles_done="Tous les problèmes de cette recherche sont terminés !",
    wrong_move_white_play="Mauvais coup... Les blancs jouent.",
    wrong_move_black_play="Mauvais coup... Les noirs jouent.",
    no_puzzle_found="Aucun problème trouvé ! Essayez une autre recherche.",
    use_search="Chargez un fichier de problèmes pour commencer.",
    hint_square="Indice : jouez la pièce en {square}",
    eval="Évaluation : ",
    best_move="Meilleur coup : ",
    mate_in="Mat en ",
    mate="Mat",
    engine_not_found="Moteur introuvable : {path}",
    engine_error="Erreur du moteur : {msg}",
    engine_busy="Moteur occupé, position non envoyée.",
    engine_started="Moteur démarré.",
    engine_stopped="Moteur arrêté.",
    mode_puzzle="Problème",
    mode_analysis="Analyse",
    puzzle_number="Problème {number} sur {total}",
)

_LOCALES: dict[str, Strings] = {
    "English": _EN,
    "Dutch": _NL,
    "Portuguese": _PT,
    "Spanish": _ES,
    "French": _FR,
}

LANGUAGES: list[str] = list(_LOCALES.keys())
DEFAULT_LANGUAGE = "English"


def strings_for(language: str) -> Strings:
    """Return the bundle for *language*. Unknown names fall back to English."""
    return _LOCALES.get(language, _EN)


def feedback_text(strings: Strings, feedback: PuzzleFeedback) -> str:
    """Map a puzzle feedback value to its localized message."""
    from tactician.puzzles.session import PuzzleFeedback

    table: dict[PuzzleFeedback, str] = {
        PuzzleFeedback.WHITE_TO_MOVE: strings.white_to_move,
        PuzzleFeedback.BLACK_TO_MOVE: strings.black_to_move,
        PuzzleFeedback.CORRECT_MOVE: strings.correct_move,
        PuzzleFeedback.PUZZLE_SOLVED: strings.correct_puzzle,
        PuzzleFeedback.ALL_PUZZLES_DONE: strings.all_puzzles_done,
        PuzzleFeedback.WRONG_MOVE_WHITE: strings.wrong_move_white_play,
        PuzzleFeedback.WRONG_MOVE_BLACK: strings.wrong_move_black_play,
        PuzzleFeedback.NO_PUZZLE_FOUND: strings.no_puzzle_found,
    }
    return table[feedback]
