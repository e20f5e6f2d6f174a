"""Tests for cover letter PDF layout and rendering."""

from io import BytesIO

import pytest
from pypdf import PdfReader

from backend.app.services.document_service import (
    MARGIN,
    PAGE_WIDTH,
    USABLE_WIDTH,
    DocumentService,
    layout_lines,
    paginate,
    text_width,
    wrap_line,
)

LOREM = (
    "Building reliable backend services has been the focus of my career, and the chance to "
    "bring that experience to a team that ships product every week is exactly what I am looking for."
)


def _page_count(pdf_bytes):
    return len(PdfReader(BytesIO(pdf_bytes)).pages)


def test_usable_width_is_page_minus_margins():
    assert USABLE_WIDTH == PAGE_WIDTH - 2 * MARGIN == 468


def test_wrap_respects_width():
    lines = wrap_line(LOREM * 3)
    assert len(lines) > 1
    assert all(text_width(line) <= USABLE_WIDTH for line in lines)


def test_wrap_keeps_all_words_in_order():
    lines = wrap_line(LOREM)
    assert " ".join(lines).split() == LOREM.split()


def test_overlong_word_is_hard_split():
    word = "x" * 400
    lines = wrap_line(f"start {word} end")
    assert all(text_width(line) <= USABLE_WIDTH for line in lines)
    assert "".join(lines).replace(" ", "") == f"start{word}end"


def test_paragraphs_separated_by_one_blank_line():
    lines = layout_lines("Dear Hiring Manager,\n\n\n\nFirst paragraph.\n\nSincerely,\nJane Doe\n\n")
    assert lines == ["Dear Hiring Manager,", "", "First paragraph.", "", "Sincerely,", "Jane Doe"]


def test_layout_drops_unencodable_characters():
    lines = layout_lines("Café • résumé \U0001F680 done")
    assert lines == ["Café • résumé done"]


def test_ascii_only_strips_everything_else():
    lines = layout_lines("Café • done", ascii_only=True)
    assert lines == ["Caf done"]


def test_paginate_empty_gives_one_page():
    assert paginate([]) == [[]]


def test_paginate_grows_with_content():
    one_page = paginate(["line"] * 10)
    many = paginate(["line"] * 200)
    assert len(one_page) == 1
    assert len(many) > 1
    assert sum(len(p) for p in many) == 200


def test_paginate_does_not_start_page_with_blank():
    lines = (["text"] * 43) + [""] + ["more"]
    pages = paginate(lines)
    assert len(pages) == 2
    assert pages[1] == ["more"]


@pytest.mark.parametrize("paragraphs", [1, 5, 40])
def test_every_laid_out_line_fits(paragraphs):
    text = "\n\n".join([LOREM] * paragraphs)
    for line in layout_lines(text):
        assert text_width(line) <= USABLE_WIDTH


def test_cover_letter_pdf_is_a_pdf():
    f = DocumentService().cover_letter_pdf("Dear Hiring Manager,\n\n" + LOREM)
    assert f.content_type == "application/pdf"
    assert f.filename == "cover-letter.pdf"
    assert f.data[:5] == b"%PDF-"
    assert _page_count(f.data) == 1


def test_long_letter_spans_multiple_pages():
    f = DocumentService().cover_letter_pdf("\n\n".join([LOREM] * 40))
    assert _page_count(f.data) > 1


def test_empty_letter_still_renders_one_page():
    f = DocumentService().cover_letter_pdf("")
    assert _page_count(f.data) == 1


def test_text_is_extractable():
    f = DocumentService().cover_letter_pdf("Dear Hiring Manager,\n\nI build APIs.")
    text = PdfReader(BytesIO(f.data)).pages[0].extract_text()
    assert "Dear Hiring Manager" in text
