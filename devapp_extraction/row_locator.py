"""
Row Locator - Find column headings, record markers and row bands on a page

A register page has no table structure, only positioned text. Columns are
located through their heading text ("Applicant", "Application", ...) and
each application's row is located through its "Lodgement" marker, which may
be split over several fragments or slightly misspelled by the text layer.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from . import fuzzy_match
from .geometry import (
    TextFragment,
    distance_rightward,
    is_reading_order,
    is_vertical_overlap,
    raise_fragment,
    vertical_overlap_percentage,
)

MARKER_WORD = "Lodgement"

# Maximum number of fragments joined while rebuilding the marker word.
MARKER_MAX_PARTS = 10
# The joined text is only compared once it is this long ...
MARKER_MIN_LENGTH = 8
# ... and the walk stops once it reaches this length.
MARKER_MAX_LENGTH = 10

# Horizontal gap (page units) beyond which a fragment is not a right neighbour.
RIGHT_NEIGHBOUR_MAX_GAP = 30
# Minimum vertical overlap (percent of the candidate's height) for two
# fragments to be treated as sitting on the same line.
SAME_LINE_OVERLAP_PERCENT = 50

# (label, description) pairs; a page without any of these is rejected.
REQUIRED_HEADINGS = (
    ("Applicant", "Applicant"),
    ("Application", "Application Date"),
    ("Proposal", "Proposal"),
)
REFERRALS_HEADING = "Referrals/"

_WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True)
class HeadingAnchors:
    applicant: TextFragment
    application: TextFragment
    proposal: TextFragment
    referrals: Optional[TextFragment] = None


@dataclass(frozen=True)
class RowBand:
    start_element: TextFragment
    elements: Tuple[TextFragment, ...]
    top: float
    bottom: float


def find_heading(fragments: Sequence[TextFragment], label: str) -> Optional[TextFragment]:
    """First fragment (reading order) whose trimmed text is exactly `label`."""
    return next((f for f in fragments if f.text.strip() == label), None)


def find_heading_anchors(
    fragments: Sequence[TextFragment],
) -> Tuple[Optional[HeadingAnchors], List[str]]:
    """
    Locate the column headings on a page.

    Returns:
        Tuple of (anchors, missing). `anchors` is None when any required
        heading is absent; `missing` lists the descriptions of the absent
        required headings in column order.
    """
    found = {label: find_heading(fragments, label) for label, _ in REQUIRED_HEADINGS}
    missing = [description for label, description in REQUIRED_HEADINGS if found[label] is None]
    if missing:
        return None, missing

    anchors = HeadingAnchors(
        applicant=found["Applicant"],
        application=found["Application"],
        proposal=found["Proposal"],
        referrals=find_heading(fragments, REFERRALS_HEADING),
    )
    return anchors, []


def get_right_element(fragments: Sequence[TextFragment],
                      element: TextFragment) -> Optional[TextFragment]:
    """
    The fragment immediately to the right of `element` on the same line.

    Candidates must overlap the element vertically by more than
    SAME_LINE_OVERLAP_PERCENT of their own height, start strictly right of
    the element, and leave a gap of less than RIGHT_NEIGHBOUR_MAX_GAP.
    """
    closest = None
    closest_distance = math.inf
    for candidate in fragments:
        if not is_vertical_overlap(element, candidate):
            continue
        if vertical_overlap_percentage(element, candidate) <= SAME_LINE_OVERLAP_PERCENT:
            continue
        gap = candidate.x - element.right
        if gap <= 0 or gap >= RIGHT_NEIGHBOUR_MAX_GAP:
            continue
        distance = distance_rightward(element, candidate)
        if distance < closest_distance:
            closest = candidate
            closest_distance = distance
    return closest


def _joined_text(fragments: Sequence[TextFragment]) -> str:
    return _WHITESPACE_RE.sub("", "".join(f.text for f in fragments)).lower()


def _best_marker_match(fragments: Sequence[TextFragment],
                       first: TextFragment) -> Optional[TextFragment]:
    # Walk rightwards from `first` gathering up to MARKER_MAX_PARTS fragments;
    # every prefix long enough is compared against the marker word.
    candidates = []
    parts: List[TextFragment] = []
    current: Optional[TextFragment] = first
    while current is not None and len(parts) < MARKER_MAX_PARTS:
        parts.append(current)
        text = _joined_text(parts)
        if len(text) >= MARKER_MAX_LENGTH:
            break
        if len(text) >= MARKER_MIN_LENGTH:
            threshold = fuzzy_match.match_threshold(text, MARKER_WORD)
            if threshold is not None:
                candidates.append((threshold, abs(len(text) - len(MARKER_WORD)), current))
        current = get_right_element(fragments, current)

    if not candidates:
        return None
    return min(candidates, key=lambda c: (c[0], c[1]))[2]


def find_start_elements(fragments: Sequence[TextFragment]) -> List[TextFragment]:
    """
    Find the marker fragment that starts each application row.

    Every fragment starting with "l" seeds a rightward walk that rebuilds the
    marker word; the fragment completing the best match (lowest edit
    distance, then length closest to the marker) marks the row. Results are
    sorted top to bottom.
    """
    starts: List[TextFragment] = []
    for fragment in fragments:
        if not fragment.text.strip().lower().startswith("l"):
            continue
        match = _best_marker_match(fragments, fragment)
        if match is not None and match not in starts:
            starts.append(match)

    starts.sort(key=lambda f: f.y)
    return starts


def get_row_top(fragments: Sequence[TextFragment], start: TextFragment) -> float:
    """
    Highest y of the fragments sharing a line with `start`.

    Only fragments lying mostly (by their own height) within the start
    element's span count, so a very tall fragment that overlaps every row
    cannot pull every row top up to its own y.
    """
    top = start.y
    for fragment in fragments:
        if (is_vertical_overlap(start, fragment)
                and vertical_overlap_percentage(start, fragment) > SAME_LINE_OVERLAP_PERCENT
                and fragment.y < top):
            top = fragment.y
    return top


def build_row_bands(fragments: Sequence[TextFragment],
                    start_elements: Sequence[TextFragment]) -> List[RowBand]:
    """
    Split a page into one band per start element.

    Band i covers y in [top_i, top_i+1) where top_i is the row top of the
    i-th start element raised by half its height (markers tend to sit a
    little below their row's first line). The last band extends to the
    bottom of the page. Each fragment lands in the band containing its y.

    Raises:
        ValueError: fragments are not in reading order
    """
    if not is_reading_order(fragments):
        raise ValueError("fragments must be sorted in reading order (y, then x)")

    tops = [get_row_top(fragments, raise_fragment(start)) for start in start_elements]
    bottoms = tops[1:] + [math.inf]

    bands = []
    for start, top, bottom in zip(start_elements, tops, bottoms):
        elements = tuple(f for f in fragments if top <= f.y < bottom)
        bands.append(RowBand(start_element=start, elements=elements, top=top, bottom=bottom))
    return bands
