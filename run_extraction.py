#!/usr/bin/env python3
"""
Development Application Register - CLI Entry Point

Scrapes the council's application register, parses the selected PDFs and
stores every application found in an SQLite database:
1. Retrieve the register page and collect the PDF links
2. Select the most recent PDF and random older PDFs (--documents)
3. Read each PDF's text layer and parse the applications page by page
4. Save the applications (keyed by application number)

Usage:
    python run_extraction.py [options]
    python run_extraction.py --pdf register.pdf [--pdf other.pdf] [options]

Options:
    --pdf FILE          Parse a local PDF instead of scraping (repeatable)
    --database FILE     SQLite database (default: data.sqlite)
    --suburbs FILE      Suburb reference file (default: suburbnames.txt)
    --url URL           Register page (default: $DEVAPP_REGISTER_URL or the council page)
    --documents N       Register documents to parse: the most recent plus N-1 random others (default: 2)
    --verbose           Verbose output

Environment:
    MORPH_PROXY               Proxy for register and PDF requests
    DEVAPP_REQUEST_DELAY_SEC  Pause after each request (default: 2, plus 0-4 random)
    DEVAPP_HTTP_TIMEOUT_SEC   Request timeout (default: 60)
    DEVAPP_COMMENT_URL        Comment URL stored with each application
"""

import sys
import argparse
import traceback
from pathlib import Path
from typing import List, Optional

import requests

from devapp_extraction import register_scraper
from devapp_extraction.address_formatter import SuburbReference
from devapp_extraction.pdf_loader import load_pdf_file, load_pdf_pages
from devapp_extraction.record_assembler import parse_document
from devapp_extraction.sqlite_store import SQLiteStore


def process_document(information_url: str, pages, reference: SuburbReference,
                     store: SQLiteStore, verbose: bool = False) -> int:
    result = parse_document(
        pages,
        reference,
        information_url=information_url,
        comment_url=register_scraper.comment_url(),
        verbose=verbose,
    )
    print(f"Parsed {len(result.records)} development application(s) from document: {information_url}")
    if result.diagnostics.entries:
        print(f"  - {len(result.diagnostics.entries)} diagnostic(s) reported")
    if verbose:
        print("Inserting development applications into the database.")
    return store.save_all(result.records)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Development Application Register Extraction',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('--pdf', type=str, action='append', default=[],
                        help='Local PDF to parse instead of scraping (repeatable)')
    parser.add_argument('--database', type=str, default='data.sqlite',
                        help='SQLite database (default: data.sqlite)')
    parser.add_argument('--suburbs', type=str, default='suburbnames.txt',
                        help='Suburb reference file (default: suburbnames.txt)')
    parser.add_argument('--url', type=str, default=None,
                        help='Register page URL')
    parser.add_argument('--documents', type=int, default=register_scraper.DEFAULT_DOCUMENT_COUNT,
                        help='Register documents to parse (default: %(default)s)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)
    if args.documents < 1:
        parser.error('--documents must be at least 1')

    suburbs_path = Path(args.suburbs)
    if not suburbs_path.exists():
        print(f"Error: Suburb reference file not found: {suburbs_path}")
        return 1
    reference = SuburbReference.from_file(suburbs_path)
    if args.verbose:
        print(f"Loaded {len(reference)} suburb name(s) from {suburbs_path}")

    saved = 0
    with SQLiteStore(Path(args.database), verbose=args.verbose) as store:
        if args.pdf:
            for pdf in args.pdf:
                pdf_path = Path(pdf)
                print(f"Parsing document: {pdf_path}")
                try:
                    pages = load_pdf_file(pdf_path)
                    saved += process_document(pdf_path.resolve().as_uri(), pages, reference, store, args.verbose)
                except Exception as e:
                    print(f"Failed to process {pdf_path.name}: {e}")
                    if args.verbose:
                        traceback.print_exc()
        else:
            session = requests.Session()
            pdf_urls = register_scraper.fetch_pdf_urls(args.url, session=session, verbose=args.verbose)
            if not pdf_urls:
                print("No PDF URLs were found on the page.")
                return 0

            for pdf_url in register_scraper.select_pdf_urls(pdf_urls, count=args.documents):
                print(f"Parsing document: {pdf_url}")
                try:
                    pages = load_pdf_pages(register_scraper.download_pdf(pdf_url, session=session))
                    saved += process_document(pdf_url, pages, reference, store, args.verbose)
                except Exception as e:
                    print(f"Failed to process {pdf_url}: {e}")
                    if args.verbose:
                        traceback.print_exc()

    print(f"\nCompleted: {saved} application(s) saved to {args.database}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
