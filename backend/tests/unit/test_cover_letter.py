from unittest.mock import MagicMock

import pytest

from backend.app.core.cover_letter_gen import CoverLetterError, generate_cover_letter
from backend.app.core.text_sanitizer import normalize_glyphs, sanitize_cover_letter, strip_placeholders


class TestSanitizer:
    def test_removes_bracket_and_brace_placeholders(self):
        out = strip_placeholders("Dear [Hiring Manager Name], I love {Company}.")
        assert out == "Dear , I love ."

    def test_removes_fill_in_and_example_parentheticals(self):
        out = strip_placeholders("Call me (fill in phone) or see my profile (e.g., LinkedIn).")
        assert "(" not in out
        assert "fill in" not in out

    def test_keeps_ordinary_parentheticals(self):
        text = "I led the platform team (six engineers) for two years."
        assert strip_placeholders(text) == text

    def test_collapses_runs_of_blank_lines(self):
        assert strip_placeholders("a\n\n\n\nb") == "a\n\nb"

    def test_normalizes_glyphs(self):
        assert normalize_glyphs("● “quoted” – it’s — fine") == '• "quoted" - it\'s - fine'

    def test_full_sanitize(self):
        raw = "\r\n[Date]\r\n\r\nDear Hiring Manager,\r\n\r\nI’m excited.\r\n"
        assert sanitize_cover_letter(raw) == "Dear Hiring Manager,\n\nI'm excited."


class TestGenerateCoverLetter:
    def test_returns_sanitized_text(self):
        llm = MagicMock()
        llm.generate_response.return_value = {"content": "Dear Hiring Manager,\n\nI’m applying [Role].\n"}

        letter = generate_cover_letter(llm, "cv text", "jd text")

        assert letter == "Dear Hiring Manager,\n\nI'm applying ."
        kwargs = llm.generate_response.call_args.kwargs
        assert kwargs["temperature"] == 0.7
        assert "cv text" in kwargs["user_prompt"]
        assert "jd text" in kwargs["user_prompt"]

    def test_empty_output_raises(self):
        llm = MagicMock()
        llm.generate_response.return_value = {"content": "  [Your Name]  "}
        with pytest.raises(CoverLetterError):
            generate_cover_letter(llm, "cv", "jd")

    def test_non_string_output_raises(self):
        llm = MagicMock()
        llm.generate_response.return_value = {"content": {"letter": "hi"}}
        with pytest.raises(CoverLetterError):
            generate_cover_letter(llm, "cv", "jd")
