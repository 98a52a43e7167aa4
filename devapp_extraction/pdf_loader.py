"""
PDF Loader - Read positioned text fragments from a register PDF

Uses PyMuPDF's text layer (no rendering, no OCR). Each text span becomes a
TextFragment whose height is recomputed from the span's text matrix, since
the reported line boxes are taller than the glyphs. Whitespace-only spans
are skipped.
"""

import re
from pathlib import Path
from typing import List, Sequence, Tuple

import fitz

from .geometry import TextFragment, sort_reading_order, text_matrix_height

_PAGE_NUMBER_RE = re.compile(r"^\d+$")
PAGE_NUMBER_MAX = 1000


def span_text_matrix(span: dict, direction: Sequence[float]) -> Tuple[float, ...]:
    """Text rendering matrix [a, b, c, d, e, f] of a span."""
    cos, sin = float(direction[0]), float(direction[1])
    size = float(span.get("size", 0.0))
    ox, oy = span.get("origin", (0.0, 0.0))
    return (size * cos, size * sin, -size * sin, size * cos, float(ox), float(oy))


def drop_page_number(fragments: List[TextFragment]) -> List[TextFragment]:
    """Remove a trailing page number so it cannot join a description."""
    if not fragments:
        return fragments
    text = fragments[-1].text.strip()
    if _PAGE_NUMBER_RE.match(text) and int(text) < PAGE_NUMBER_MAX:
        return fragments[:-1]
    return fragments


def page_fragments(page) -> List[TextFragment]:
    """
    Extract the fragments of one PyMuPDF page in reading order.

    Fragment x/width come from the span box; y is the baseline raised by the
    corrected height, so the fragment box hugs the glyphs.
    """
    fragments = []
    content = page.get_text("dict")
    for block in content.get("blocks", []):
        for line in block.get("lines", []):
            direction = line.get("dir", (1.0, 0.0))
            for span in line.get("spans", []):
                if not span.get("text", "").strip():
                    continue
                x0, _, x1, _ = span["bbox"]
                matrix = span_text_matrix(span, direction)
                height = text_matrix_height(matrix)
                fragments.append(TextFragment(
                    x=float(x0),
                    y=matrix[5] - height,
                    width=float(x1) - float(x0),
                    height=height,
                    text=span.get("text", ""),
                ))
    return drop_page_number(sort_reading_order(fragments))


def load_pdf_pages(data: bytes) -> List[List[TextFragment]]:
    """Fragments of every page of an in-memory PDF."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page_fragments(page) for page in doc]


def load_pdf_file(pdf_path: Path) -> List[List[TextFragment]]:
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")
    return load_pdf_pages(pdf_path.read_bytes())
