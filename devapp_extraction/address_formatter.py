"""
Address Formatter - Normalise street addresses against known suburb names

Addresses in the register end with a suburb name (sometimes misspelled and
sometimes followed by a cadastral reference in parentheses). The suburb is
replaced by its canonical "SUBURB, STATE POSTCODE" form from the reference
data file.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from . import fuzzy_match
from .diagnostics import UNRECOGNISED_SUBURB, DiagnosticLog

SUBURB_MATCH_THRESHOLD = 2
# Longest suburb name, in space-separated tokens, tried at the end of an address.
SUBURB_MAX_TOKENS = 4

# Trailing "(3743)", also when truncated as "(37" or "(".
_CADASTRAL_SUFFIX_RE = re.compile(r"\s*\(\d*\)?\s*$")


class SuburbReference:
    """Known suburb names mapped to their canonical address suffix."""

    def __init__(self, suburbs: Dict[str, str]):
        self._suburbs = dict(suburbs)
        self.keys: Tuple[str, ...] = tuple(self._suburbs)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "SuburbReference":
        """
        Build from "NAME,CANONICAL" lines, e.g.

            PORT AUGUSTA,PORT AUGUSTA, SA 5700

        Only the first comma separates the key; blank lines are ignored.
        """
        suburbs = {}
        for line in lines:
            line = line.replace("\r", "").strip()
            if not line or "," not in line:
                continue
            name, canonical = line.split(",", 1)
            suburbs[name.strip()] = canonical.strip()
        return cls(suburbs)

    @classmethod
    def from_file(cls, path: Path) -> "SuburbReference":
        text = Path(path).read_text(encoding="utf-8")
        return cls.from_lines(text.split("\n"))

    def canonical(self, key: str) -> str:
        return self._suburbs[key]

    def __len__(self) -> int:
        return len(self.keys)


def strip_cadastral_suffix(address: str) -> str:
    return _CADASTRAL_SUFFIX_RE.sub("", address).strip()


def format_address(address: str, reference: SuburbReference,
                   diagnostics: Optional[DiagnosticLog] = None) -> str:
    """
    Append the state and post code to an address.

    The last 1..SUBURB_MAX_TOKENS tokens are matched (within
    SUBURB_MATCH_THRESHOLD edits) against the known suburb names and
    replaced by the canonical suburb string. When no suburb is recognised
    the trimmed address is returned as is.

    Example:
        "7 McAdam RD PORT AUGUSTA (3743)" -> "7 McAdam RD, PORT AUGUSTA, SA 5700"
    """
    address = address.strip()
    if address == "":
        return ""

    tokens = strip_cadastral_suffix(address).split()

    suburb = None
    for count in range(1, SUBURB_MAX_TOKENS + 1):
        if count > len(tokens):
            break
        match = fuzzy_match.closest_match(" ".join(tokens[-count:]), reference.keys,
                                          SUBURB_MATCH_THRESHOLD)
        if match is not None:
            suburb = reference.canonical(match)
            tokens = tokens[:-count]
            break

    if suburb is None:
        if diagnostics is not None:
            diagnostics.report(
                UNRECOGNISED_SUBURB,
                f"The state and post code will not be added because the suburb was not recognised: {address}",
            )
        return address

    street = " ".join(tokens).strip()
    return (street + (", " if street else "") + suburb).strip()
