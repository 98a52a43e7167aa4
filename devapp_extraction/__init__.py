"""
Development Application Register Extraction

Parses development application records out of council register PDFs whose
only structure is the position of each text run on the page.

Modules:
- geometry: Rectangles, text fragments and overlap/distance measures
- fuzzy_match: Bounded edit-distance matching for marker words and suburbs
- row_locator: Column headings, record markers and row bands
- field_extractor: Application number, dates, address and description of a row
- address_formatter: Suburb reference data and address normalisation
- record_assembler: Page and document driver, unique application numbers
- diagnostics: Out-of-band reports for rejected pages and dropped records
- pdf_loader: PDF text layer to positioned fragments (PyMuPDF)
- register_scraper: Register page links, document selection and download
- sqlite_store: Persist parsed applications
"""

__version__ = "1.0.0"
__all__ = [
    "geometry",
    "fuzzy_match",
    "row_locator",
    "field_extractor",
    "address_formatter",
    "record_assembler",
    "diagnostics",
    "pdf_loader",
    "register_scraper",
    "sqlite_store",
]
