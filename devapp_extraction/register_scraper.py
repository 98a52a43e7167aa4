"""
Register Scraper - Find and download the council's application register PDFs

The register web page lists one PDF per period. Only a couple of documents
are processed per run (the most recent plus random older ones) to keep
memory use and request volume low.
"""

import os
import random
import time
from typing import List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

DEFAULT_REGISTER_URL = "https://www.light.sa.gov.au/develop/applicationregister"
DEFAULT_COMMENT_URL = "mailto:light@light.sa.gov.au"

# Anchors in the register's document list.
PDF_LINK_SELECTOR = "td.u6ListTD a"

# Documents parsed per run: the most recent plus random older ones.
DEFAULT_DOCUMENT_COUNT = 2


def _env_str(key: str, default: str) -> str:
    value = str(os.environ.get(key, "") or "").strip()
    return value or default


def _env_float(key: str, default: float) -> float:
    try:
        return float(str(os.environ.get(key, str(default)) or str(default)).strip())
    except ValueError:
        return float(default)


def register_url() -> str:
    return _env_str("DEVAPP_REGISTER_URL", DEFAULT_REGISTER_URL)


def comment_url() -> str:
    return _env_str("DEVAPP_COMMENT_URL", DEFAULT_COMMENT_URL)


def request_delay_sec() -> float:
    return _env_float("DEVAPP_REQUEST_DELAY_SEC", 2.0)


def http_timeout_sec() -> float:
    return _env_float("DEVAPP_HTTP_TIMEOUT_SEC", 60.0)


def proxies() -> Optional[dict]:
    proxy = str(os.environ.get("MORPH_PROXY", "") or "").strip()
    if not proxy:
        return None
    return {"http": proxy, "https": proxy}


def polite_pause(delay_sec: Optional[float] = None) -> None:
    """Sleep the configured delay plus 0-4 random seconds (no-op for 0)."""
    delay = request_delay_sec() if delay_sec is None else float(delay_sec)
    if delay <= 0:
        return
    time.sleep(delay + random.randint(0, 4))


def _get(session, url: str) -> requests.Response:
    response = session.get(url, proxies=proxies(), timeout=http_timeout_sec())
    response.raise_for_status()
    return response


def parse_pdf_urls(html: str, base_url: str) -> List[str]:
    """Absolute, de-duplicated PDF links of the register page, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    pdf_urls: List[str] = []
    for anchor in soup.select(PDF_LINK_SELECTOR):
        href = anchor.get("href")
        if not href:
            continue
        pdf_url = urljoin(base_url, href)
        if ".pdf" in pdf_url.lower() and pdf_url not in pdf_urls:
            pdf_urls.append(pdf_url)
    return pdf_urls


def fetch_pdf_urls(url: Optional[str] = None, session=None,
                   delay_sec: Optional[float] = None, verbose: bool = False) -> List[str]:
    url = url or register_url()
    session = session or requests.Session()
    if verbose:
        print(f"Retrieving page: {url}")
    response = _get(session, url)
    polite_pause(delay_sec)
    return parse_pdf_urls(response.text, url)


def select_pdf_urls(pdf_urls: List[str], rng: Optional[random.Random] = None,
                    count: int = DEFAULT_DOCUMENT_COUNT) -> List[str]:
    """
    Pick the most recent document and `count - 1` random older documents.

    The register lists the oldest document first. The picks are returned in
    random order.
    """
    rng = rng or random.Random()
    remaining = list(reversed(pdf_urls))
    if not remaining or count < 1:
        return []

    selected = [remaining.pop(0)]
    selected.extend(rng.sample(remaining, min(count - 1, len(remaining))))
    rng.shuffle(selected)
    return selected


def download_pdf(url: str, session=None, delay_sec: Optional[float] = None) -> bytes:
    session = session or requests.Session()
    response = _get(session, url)
    polite_pause(delay_sec)
    return response.content
