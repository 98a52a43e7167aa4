"""
Record Assembler - Turn a document's pages of fragments into applications

Drives the row locator and field extractor page by page and keeps
application numbers unique across the document.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import List, Optional, Sequence

from . import row_locator
from .address_formatter import SuburbReference
from .diagnostics import MISSING_HEADING, DiagnosticLog
from .field_extractor import ParsedRecord, parse_application_elements
from .geometry import TextFragment, sort_reading_order


@dataclass
class DocumentResult:
    records: List[ParsedRecord] = field(default_factory=list)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    pages: int = 0


class ApplicationAssembler:
    """Accumulates the applications parsed from one document."""

    def __init__(self, reference: SuburbReference, information_url: str = "",
                 comment_url: str = "", scrape_date: Optional[str] = None,
                 diagnostics: Optional[DiagnosticLog] = None, verbose: bool = False):
        self.reference = reference
        self.information_url = information_url
        self.comment_url = comment_url
        self.scrape_date = scrape_date if scrape_date is not None else date.today().isoformat()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog(verbose=verbose)
        self.verbose = verbose
        self.records: List[ParsedRecord] = []

    def add_record(self, record: ParsedRecord) -> ParsedRecord:
        """
        Append a record, suffixing its application number when needed.

        The same number with a different address, description or received
        date is a distinct application and becomes "<number> (n)". The same
        number with the same details is kept unchanged.
        """
        number = record.application_number
        suffix = 0
        while any(other.application_number == record.application_number
                  and not other.same_details(record)
                  for other in self.records):
            suffix += 1
            record = replace(record, application_number=f"{number} ({suffix})")
        self.records.append(record)
        return record

    def process_page(self, fragments: Sequence[TextFragment],
                     page_number: Optional[int] = None) -> List[ParsedRecord]:
        """
        Parse the applications on one page.

        Args:
            fragments: All text fragments of the page (any order)
            page_number: 1-indexed page number used in diagnostics

        Returns:
            The records accepted from this page, in row order
        """
        self.diagnostics.page = page_number
        elements = sort_reading_order(fragments)

        anchors, missing = row_locator.find_heading_anchors(elements)
        if anchors is None:
            self.diagnostics.report(
                MISSING_HEADING,
                "No development applications can be parsed from the current page because the "
                + ", ".join(f'"{m}"' for m in missing)
                + " column heading(s) were not found.",
                elements,
            )
            return []

        start_elements = row_locator.find_start_elements(elements)
        bands = row_locator.build_row_bands(elements, start_elements)

        accepted = []
        for band in bands:
            record = parse_application_elements(
                band,
                anchors,
                self.reference,
                information_url=self.information_url,
                comment_url=self.comment_url,
                scrape_date=self.scrape_date,
                diagnostics=self.diagnostics,
            )
            if record is None:
                continue
            record = self.add_record(record)
            if self.verbose:
                print(f'    Found "{record.application_number}".')
            accepted.append(record)
        return accepted


def parse_document(pages: Sequence[Sequence[TextFragment]], reference: SuburbReference,
                   information_url: str = "", comment_url: str = "",
                   scrape_date: Optional[str] = None, verbose: bool = False) -> DocumentResult:
    """
    Parse every page of a document, in page order.

    Args:
        pages: Fragments of each page
        reference: Suburb names used to normalise addresses
        information_url: URL of the document (stored with each record)
        comment_url: Contact URL stored with each record
        scrape_date: ISO date stamp (default today)
        verbose: Print progress

    Returns:
        DocumentResult with the accepted records and all diagnostics
    """
    assembler = ApplicationAssembler(
        reference,
        information_url=information_url,
        comment_url=comment_url,
        scrape_date=scrape_date,
        verbose=verbose,
    )
    for page_index, fragments in enumerate(pages):
        if verbose:
            print(f"Reading and parsing applications from page {page_index + 1} of {len(pages)}.")
        assembler.process_page(fragments, page_number=page_index + 1)

    return DocumentResult(records=assembler.records, diagnostics=assembler.diagnostics, pages=len(pages))
