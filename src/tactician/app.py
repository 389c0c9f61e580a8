"""Application entry point: a line-oriented console trainer on a Qt event loop."""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable, Sequence

from PyQt6.QtCore import QCoreApplication, QObject, pyqtSignal

from tactician.config import AppSettings
from tactician.engine.protocol import parse_engine_limit
from tactician.i18n import LANGUAGES
from tactician.puzzles.source import PuzzleFormatError, read_puzzles
from tactician.trainer import GameMode, TrainerSession

_LOGGER = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  <from><to>[p] play a move in coordinates, e.g. e2e4; add q, r, b or n
               to choose a promotion piece, e.g. e7e8n
  next / prev  go to the next or previous puzzle
  jump N       go to puzzle number N
  redo         restart the current puzzle
  hint         show the square of the piece to move
  analysis     switch to analysis mode
  puzzle       switch back to puzzle mode
  back         take back the last analysis move
  engine       start or stop the engine
  engine PATH  use the engine executable at PATH from the next start
  limit L      engine search limit, e.g. "depth 20" or "movetime 3000"
  language X   switch language (English, Dutch, Portuguese, Spanish, French)
  board        print the board
  quit         exit"""


class StdinReader(QObject):
    """Reads stdin on a daemon thread and forwards lines to the Qt loop."""

    line_read = pyqtSignal(str)
    finished = pyqtSignal()

    def start(self) -> None:
        threading.Thread(target=self._run, name="stdin-reader", daemon=True).start()

    def _run(self) -> None:
        for line in sys.stdin:
            self.line_read.emit(line.strip())
        self.finished.emit()


class ConsoleTrainer:
    """Dispatches typed commands to a :class:`TrainerSession`."""

    __slots__ = ("_trainer", "_write", "_quit", "_closing", "_last_report")

    def __init__(
        self,
        trainer: TrainerSession,
        *,
        write: Callable[[str], None] = print,
        quit_app: Callable[[], None] | None = None,
    ) -> None:
        self._trainer = trainer
        self._write = write
        self._quit = quit_app
        self._closing = False
        self._last_report = ""

    @property
    def closing(self) -> bool:
        return self._closing

    def handle(self, line: str) -> None:
        words = line.split()
        if not words or self._closing:
            return
        command, args = words[0].lower(), words[1:]
        trainer = self._trainer

        if command in ("quit", "exit", "q"):
            self.quit()
        elif command == "help":
            self._write(HELP_TEXT)
        elif command == "next":
            trainer.next_puzzle()
        elif command in ("prev", "previous"):
            trainer.previous_puzzle()
        elif command == "jump":
            self._jump(args)
        elif command == "redo":
            trainer.redo()
        elif command == "hint":
            trainer.show_hint()
        elif command == "analysis":
            trainer.set_mode(GameMode.ANALYSIS)
        elif command == "puzzle":
            trainer.set_mode(GameMode.PUZZLE)
        elif command == "back":
            trainer.take_back()
        elif command == "engine" and args:
            trainer.set_engine_path(" ".join(args))
        elif command == "engine":
            trainer.toggle_engine()
        elif command == "limit":
            self._set_limit(args)
        elif command == "language":
            self._set_language(args)
        elif command == "board":
            self._write(str(trainer.current_board()))
        else:
            self._play(command)
        self.report()

    def report(self) -> None:
        """Print the status line if anything visible changed."""
        trainer = self._trainer
        parts = [
            part
            for part in (
                trainer.puzzle_number_text(),
                trainer.status_text,
                " ".join(trainer.move_log),
                trainer.evaluation_text(),
            )
            if part
        ]
        text = f"[{trainer.mode_text()}] " + " | ".join(parts)
        if text and text != self._last_report:
            self._last_report = text
            self._write(text)

    def quit(self) -> None:
        if self._closing:
            return
        self._closing = True
        if not self._trainer.close():
            self.finish()

    def finish(self) -> None:
        if self._quit is not None:
            self._quit()

    def _jump(self, args: Sequence[str]) -> None:
        if len(args) != 1 or not args[0].isdigit():
            self._write("usage: jump N")
            return
        self._trainer.jump_to(int(args[0]))

    def _set_limit(self, args: Sequence[str]) -> None:
        limit = " ".join(args)
        try:
            parse_engine_limit(limit)
        except ValueError as exc:
            self._write(str(exc))
            return
        self._trainer.set_engine_limit(limit)

    def _set_language(self, args: Sequence[str]) -> None:
        if len(args) != 1 or args[0].capitalize() not in LANGUAGES:
            self._write("usage: language " + "|".join(LANGUAGES))
            return
        self._trainer.set_language(args[0].capitalize())

    def _play(self, text: str) -> None:
        try:
            accepted = self._trainer.play_text(text)
        except ValueError:
            self._write(f"Unknown command: {text} (type 'help')")
            return
        if not accepted:
            _LOGGER.debug("Move %s rejected", text)


def main(argv: Sequence[str] | None = None) -> None:
    """Launch the Tactician console trainer."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = AppSettings.from_args(argv)

    try:
        puzzles = read_puzzles(
            settings.puzzle_db_location,
            limit=settings.search_results_limit,
            skip_invalid=True,
        )
    except (OSError, PuzzleFormatError) as exc:
        print(f"Could not read puzzles: {exc}", file=sys.stderr)
        sys.exit(1)

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("Tactician")

    console: ConsoleTrainer | None = None

    def _on_changed() -> None:
        if console is not None:
            console.report()

    def _on_exit_ready() -> None:
        if console is not None:
            console.finish()

    trainer = TrainerSession(
        settings,
        on_changed=_on_changed,
        on_exit_ready=_on_exit_ready,
        parent=app,
    )
    console = ConsoleTrainer(trainer, quit_app=app.quit)

    reader = StdinReader()
    reader.line_read.connect(console.handle)
    reader.finished.connect(console.quit)

    trainer.load_puzzles(puzzles)
    console.report()
    reader.start()

    status = app.exec()
    trainer.engine.shutdown()
    sys.exit(status)


if __name__ == "__main__":
    main()
