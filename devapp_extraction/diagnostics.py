"""
Diagnostics - Out-of-band reporting for recoverable extraction problems

Nothing in the extraction engine raises for layout problems. Rejected pages,
dropped records and unrecognised suburbs are recorded here instead, each
with a dump of the fragments involved.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .geometry import TextFragment

MISSING_HEADING = "missing_heading"
MISSING_APPLICATION_NUMBER = "missing_application_number"
MISSING_APPLICATION_DATE = "missing_application_date"
UNRECOGNISED_SUBURB = "unrecognised_suburb"


@dataclass
class Diagnostic:
    kind: str
    message: str
    page: Optional[int] = None
    elements: str = ""

    def __str__(self) -> str:
        where = f"page {self.page}: " if self.page is not None else ""
        text = f"{where}{self.message}"
        if self.elements:
            text += f"  Elements: {self.elements}"
        return text


def summarize_elements(fragments: Iterable[TextFragment]) -> str:
    return "".join(f"[{f.text}]" for f in fragments)


class DiagnosticLog:
    """Collects Diagnostic entries; echoes them when verbose."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.page: Optional[int] = None
        self.entries: List[Diagnostic] = []

    def report(self, kind: str, message: str,
               fragments: Optional[Iterable[TextFragment]] = None) -> Diagnostic:
        entry = Diagnostic(
            kind=kind,
            message=message,
            page=self.page,
            elements=summarize_elements(fragments) if fragments is not None else "",
        )
        self.entries.append(entry)
        if self.verbose:
            print(f"  - {entry}")
        return entry

    def of_kind(self, kind: str) -> List[Diagnostic]:
        return [e for e in self.entries if e.kind == kind]
