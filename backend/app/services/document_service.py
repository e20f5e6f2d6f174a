from __future__ import annotations

import re
from dataclasses import dataclass
from io import BytesIO
from typing import List

from reportlab.lib.pagesizes import LETTER
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = LETTER  # 612 x 792
MARGIN = 72
FONT_NAME = "Helvetica"
FONT_SIZE = 11
LINE_HEIGHT = FONT_SIZE + 4
USABLE_WIDTH = PAGE_WIDTH - 2 * MARGIN


@dataclass
class GeneratedFile:
    filename: str
    content_type: str
    data: bytes


def text_width(text: str) -> float:
    return pdfmetrics.stringWidth(text, FONT_NAME, FONT_SIZE)


def _encodable(text: str, ascii_only: bool) -> str:
    # Standard Type1 fonts are WinAnsi encoded
    codec = "ascii" if ascii_only else "cp1252"
    text = text.replace("\t", " ")
    return text.encode(codec, errors="ignore").decode(codec)


def _split_long_word(word: str, max_width: float) -> List[str]:
    if text_width(word) <= max_width:
        return [word]
    pieces: List[str] = []
    cur = ""
    for ch in word:
        if cur and text_width(cur + ch) > max_width:
            pieces.append(cur)
            cur = ch
        else:
            cur += ch
    if cur:
        pieces.append(cur)
    return pieces


def wrap_line(line: str, max_width: float = USABLE_WIDTH) -> List[str]:
    """Greedy word packing by measured width."""
    out: List[str] = []
    cur = ""
    for word in line.split():
        for piece in _split_long_word(word, max_width):
            candidate = f"{cur} {piece}" if cur else piece
            if cur and text_width(candidate) > max_width:
                out.append(cur)
                cur = piece
            else:
                cur = candidate
    if cur:
        out.append(cur)
    return out


def layout_lines(text: str, ascii_only: bool = False) -> List[str]:
    """
    Break text into printable lines. Paragraphs are separated by blank lines
    in the input and by one empty line in the output.
    """
    text = _encodable(text, ascii_only)
    lines: List[str] = []
    for paragraph in re.split(r"\n\s*\n", text.strip()):
        wrapped = []
        for raw_line in paragraph.split("\n"):
            wrapped.extend(wrap_line(raw_line))
        if wrapped:
            lines.extend(wrapped)
            lines.append("")

    while lines and not lines[-1]:
        lines.pop()
    return lines


def paginate(lines: List[str]) -> List[List[str]]:
    """Split lines into pages; always returns at least one page."""
    top = PAGE_HEIGHT - MARGIN
    pages: List[List[str]] = [[]]
    y = top
    for line in lines:
        if y < MARGIN + LINE_HEIGHT:
            pages.append([])
            y = top
        if not line and not pages[-1]:
            continue  # no separator at the top of a page
        pages[-1].append(line)
        y -= LINE_HEIGHT
    return pages


class DocumentService:
    """Generates the downloadable cover letter PDF."""

    def __init__(self, ascii_only: bool = False):
        self.ascii_only = ascii_only

    def cover_letter_pdf(self, cover_letter_text: str, filename: str = "cover-letter.pdf") -> GeneratedFile:
        pages = paginate(layout_lines(cover_letter_text, ascii_only=self.ascii_only))

        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=LETTER)
        for page_lines in pages:
            c.setFont(FONT_NAME, FONT_SIZE)
            y = PAGE_HEIGHT - MARGIN
            for line in page_lines:
                if line:
                    c.drawString(MARGIN, y, line)
                y -= LINE_HEIGHT
            c.showPage()
        c.save()

        return GeneratedFile(filename=filename, content_type="application/pdf", data=buf.getvalue())
