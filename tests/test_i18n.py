"""Tests for localized string bundles."""

from __future__ import annotations

from dataclasses import fields

import pytest

from tactician.i18n import DEFAULT_LANGUAGE, LANGUAGES, feedback_text, strings_for
from tactician.puzzles.session import PuzzleFeedback


class TestStrings:
    def test_languages(self) -> None:
        assert LANGUAGES == ["English", "Dutch", "Portuguese", "Spanish", "French"]
        assert DEFAULT_LANGUAGE == "English"

    def test_unknown_language_falls_back_to_english(self) -> None:
        assert strings_for("Klingon") == strings_for("English")

    @pytest.mark.parametrize("language", LANGUAGES)
    def test_every_field_is_filled(self, language: str) -> None:
        strings = strings_for(language)
        for f in fields(strings):
            assert getattr(strings, f.name), f"{language}.{f.name} is empty"

    @pytest.mark.parametrize("language", LANGUAGES)
    def test_templates_keep_placeholders(self, language: str) -> None:
        strings = strings_for(language)
        assert "{square}" in strings.hint_square
        assert "{path}" in strings.engine_not_found
        assert "{msg}" in strings.engine_error
        assert "{number}" in strings.puzzle_number and "{total}" in strings.puzzle_number

    @pytest.mark.parametrize("feedback", list(PuzzleFeedback))
    def test_every_feedback_has_text(self, feedback: PuzzleFeedback) -> None:
        assert feedback_text(strings_for("French"), feedback)
