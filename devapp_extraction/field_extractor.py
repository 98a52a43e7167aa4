"""
Field Extractor - Read one development application from its row band

Fields are located relative to the page's column headings:
- application number: left of the "Applicant" heading, near the marker
- application/received dates: in the "Application" heading's column
- address: right of the application date, on the same line
- description: between the "Proposal" and "Referrals/" headings
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from .address_formatter import SuburbReference, format_address
from .diagnostics import MISSING_APPLICATION_DATE, MISSING_APPLICATION_NUMBER, DiagnosticLog
from .geometry import Rectangle, TextFragment, get_area, intersect, vertical_overlap_percentage
from .row_locator import SAME_LINE_OVERLAP_PERCENT, HeadingAnchors, RowBand

NO_DESCRIPTION = "No Description Provided"

_APPLICATION_NUMBER_RE = re.compile(r"/[0-9]{4}$")
_STRICT_DATE_RE = re.compile(r"^\d{1,2}/\d{2}/\d{4}$")
_WHITESPACE_RE = re.compile(r"\s")

# A date cell must cover at least this fraction of the heading-sized probe ...
DATE_MIN_AREA_RATIO = 0.5
# ... and lie within the probe by more than this fraction of its own area.
DATE_MIN_INSIDE_RATIO = 0.75


@dataclass
class ParsedRecord:
    application_number: str
    address: str
    description: str
    information_url: str = ""
    comment_url: str = ""
    scrape_date: str = ""
    application_date: str = ""
    received_date: str = ""

    def same_details(self, other: "ParsedRecord") -> bool:
        return (self.address == other.address
                and self.description == other.description
                and self.received_date == other.received_date)


def parse_strict_date(text: str) -> Optional[date]:
    """Parse D/MM/YYYY (one or two digit day, two digit month) or None."""
    text = str(text or "").strip()
    if not _STRICT_DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        return None


def _iso_date(text: str) -> str:
    parsed = parse_strict_date(text)
    return parsed.isoformat() if parsed is not None else ""


def _first(fragments: Sequence[TextFragment],
           predicate: Callable[[TextFragment], bool]) -> Optional[TextFragment]:
    return next((f for f in fragments if predicate(f)), None)


def in_date_column(fragment: TextFragment, column: TextFragment) -> bool:
    """
    Whether the fragment sits in the column headed by `column`.

    The probe is the heading's box moved down to the fragment's y. The
    fragment must have a real area, be at least half the probe's size and
    lie mostly (by its own area) inside the probe.
    """
    area = get_area(fragment)
    if area <= 0:
        return False
    probe = Rectangle(x=column.x, y=fragment.y, width=column.width, height=column.height)
    return (area >= DATE_MIN_AREA_RATIO * get_area(probe)
            and get_area(intersect(fragment, probe)) > DATE_MIN_INSIDE_RATIO * area)


def find_application_number(band: RowBand, anchors: HeadingAnchors) -> Optional[str]:
    start = band.start_element
    candidates = sorted(
        (f for f in band.elements
         if f.x < anchors.applicant.x and f.y < start.y + 2 * start.height),
        key=lambda f: f.x,
    )
    for index in range(1, len(candidates) + 1):
        text = _WHITESPACE_RE.sub("", "".join(f.text for f in candidates[:index]))
        if _APPLICATION_NUMBER_RE.search(text):
            return text
    return None


def find_application_date(band: RowBand, anchors: HeadingAnchors) -> Optional[TextFragment]:
    return _first(band.elements, lambda f: in_date_column(f, anchors.application))


def find_received_date(band: RowBand, anchors: HeadingAnchors,
                       application_date: TextFragment) -> Optional[TextFragment]:
    # Header words such as "Received" and "Date" share the column; only a
    # real date below the application date qualifies.
    return _first(
        band.elements,
        lambda f: (f.y > application_date.bottom
                   and in_date_column(f, anchors.application)
                   and parse_strict_date(f.text) is not None),
    )


def extract_address(band: RowBand, anchors: HeadingAnchors,
                    application_date: TextFragment) -> str:
    limit = anchors.proposal.x - anchors.proposal.height / 2
    parts = sorted(
        (f for f in band.elements
         if f.x > application_date.right
         and vertical_overlap_percentage(application_date, f) > SAME_LINE_OVERLAP_PERCENT
         and f.x < limit),
        key=lambda f: f.x,
    )
    return "".join(f.text for f in parts)


def extract_description(band: RowBand, anchors: HeadingAnchors) -> str:
    if anchors.referrals is None:
        return ""

    left = anchors.proposal.x - anchors.proposal.height / 2
    description = ""
    previous_y = None
    for fragment in band.elements:
        if not (left <= fragment.x < anchors.referrals.x):
            continue
        if previous_y is not None and fragment.y > previous_y + fragment.height / 2:
            description += " "
        description += fragment.text
        previous_y = fragment.y
    return description


def parse_application_elements(band: RowBand, anchors: HeadingAnchors,
                               reference: SuburbReference,
                               information_url: str = "",
                               comment_url: str = "",
                               scrape_date: str = "",
                               diagnostics: Optional[DiagnosticLog] = None) -> Optional[ParsedRecord]:
    """
    Parse one development application from a row band.

    Args:
        band: Row band (elements in reading order)
        anchors: Column headings of the page
        reference: Suburb names used to normalise the address
        information_url: Document URL recorded against the application
        comment_url: Contact URL recorded against the application
        scrape_date: ISO date the document was processed
        diagnostics: Receives the reason when the band is dropped

    Returns:
        ParsedRecord, or None when the application number or the
        application date cannot be found
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    application_number = find_application_number(band, anchors)
    if application_number is None:
        diagnostics.report(
            MISSING_APPLICATION_NUMBER,
            "Could not find the application number for the current development application. "
            "The development application will be ignored.",
            band.elements,
        )
        return None

    application_date = find_application_date(band, anchors)
    if application_date is None:
        diagnostics.report(
            MISSING_APPLICATION_DATE,
            f"Could not find the application date for development application {application_number}. "
            "The development application will be ignored.",
            band.elements,
        )
        return None

    received_date = find_received_date(band, anchors, application_date) or application_date

    address = format_address(extract_address(band, anchors, application_date), reference, diagnostics)
    description = extract_description(band, anchors)

    return ParsedRecord(
        application_number=application_number,
        address=address,
        description=description if description.strip() else NO_DESCRIPTION,
        information_url=information_url,
        comment_url=comment_url,
        scrape_date=scrape_date,
        application_date=_iso_date(application_date.text),
        received_date=_iso_date(received_date.text),
    )
