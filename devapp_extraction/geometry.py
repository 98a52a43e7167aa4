"""
Geometry - Rectangle and text fragment primitives

Pure functions over axis-aligned rectangles in page space (top-left origin,
y grows downwards). Text fragments are rectangles that carry the text run
reported by the PDF text layer.
"""

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

# Candidates that overlap the left element horizontally by more than this
# fraction of its width are never "to the right" of it.
RIGHTWARD_OVERLAP_FACTOR = 0.2


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class TextFragment(Rectangle):
    """A positioned run of text on a PDF page."""
    text: str = ""
    confidence: float = 0.0


EMPTY_RECTANGLE = Rectangle(0.0, 0.0, 0.0, 0.0)


def intersect(a: Rectangle, b: Rectangle) -> Rectangle:
    """
    Intersection of two rectangles.

    Returns EMPTY_RECTANGLE (all zeros) when the rectangles do not overlap;
    callers treat that as "no overlap" rather than a region at the origin.
    """
    x1 = max(a.x, b.x)
    y1 = max(a.y, b.y)
    x2 = min(a.right, b.right)
    y2 = min(a.bottom, b.bottom)
    if x2 >= x1 and y2 >= y1:
        return Rectangle(x1, y1, x2 - x1, y2 - y1)
    return EMPTY_RECTANGLE


def get_area(rectangle: Rectangle) -> float:
    return rectangle.width * rectangle.height


def is_vertical_overlap(a: Rectangle, b: Rectangle) -> bool:
    return b.y < a.bottom and b.bottom > a.y


def vertical_overlap_percentage(a: Rectangle, b: Rectangle) -> float:
    """
    Percentage (0-100) of b's height that lies within a's vertical span.

    Not symmetric: the denominator is always the second rectangle's height.
    Rectangles with no height never overlap anything.
    """
    if b.height <= 0:
        return 0.0
    y1 = max(a.y, b.y)
    y2 = min(a.bottom, b.bottom)
    if y2 < y1:
        return 0.0
    return min(100.0, (y2 - y1) * 100.0 / b.height)


def distance_rightward(a: Rectangle, b: Rectangle) -> float:
    """
    Squared distance from a's right-middle point to b's left-middle point.

    Returns math.inf when b starts more than RIGHTWARD_OVERLAP_FACTOR of a's
    width to the left of a's right edge (b is stacked on a, not beside it).
    """
    x1, y1 = a.right, a.y + a.height / 2
    x2, y2 = b.x, b.y + b.height / 2
    if x2 < x1 - a.width * RIGHTWARD_OVERLAP_FACTOR:
        return math.inf
    return (x2 - x1) * (x2 - x1) + (y2 - y1) * (y2 - y1)


def raise_fragment(fragment: TextFragment, factor: float = 0.5) -> TextFragment:
    """Copy of the fragment moved up by a fraction of its own height."""
    return replace(fragment, y=fragment.y - fragment.height * factor)


def reading_order_key(fragment: Rectangle) -> Tuple[float, float]:
    return (fragment.y, fragment.x)


def sort_reading_order(fragments: Iterable[TextFragment]) -> List[TextFragment]:
    """Sort fragments top-to-bottom, then left-to-right."""
    return sorted(fragments, key=reading_order_key)


def is_reading_order(fragments: Sequence[TextFragment]) -> bool:
    return all(
        reading_order_key(fragments[i]) <= reading_order_key(fragments[i + 1])
        for i in range(len(fragments) - 1)
    )


def text_matrix_height(matrix: Sequence[float]) -> float:
    """
    Effective glyph height from a PDF text matrix [a, b, c, d, e, f].

    PDF text layers tend to exaggerate run heights; the length of the
    matrix's (c, d) column is the rendered font size orthogonal to the
    baseline and is used instead.
    """
    return math.sqrt(matrix[2] * matrix[2] + matrix[3] * matrix[3])
