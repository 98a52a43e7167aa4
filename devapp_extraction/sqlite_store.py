"""
SQLite Store - Persist parsed development applications

One row per application number. Re-saving a number replaces the row, so a
document processed twice (or an identical duplicate within a document)
does not create extra rows.
"""

import sqlite3
from pathlib import Path
from typing import List, Tuple

from .field_extractor import ParsedRecord

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS data (
    council_reference TEXT PRIMARY KEY,
    address TEXT,
    description TEXT,
    info_url TEXT,
    comment_url TEXT,
    date_scraped TEXT,
    date_received TEXT
);
"""


class SQLiteStore:
    """Save ParsedRecords to an SQLite database."""

    def __init__(self, db_path: Path, verbose: bool = False):
        self.db_path = db_path
        self.verbose = verbose
        self.conn = None

    def __enter__(self):
        self.conn = sqlite3.connect(str(self.db_path))
        self._init_schema()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            self.conn.close()
            self.conn = None

    def _init_schema(self):
        self.conn.executescript(SQLITE_SCHEMA)
        self.conn.commit()

    def save(self, record: ParsedRecord) -> None:
        self.conn.execute("""
            INSERT OR REPLACE INTO data
            (council_reference, address, description, info_url,
             comment_url, date_scraped, date_received)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (
            record.application_number, record.address, record.description,
            record.information_url, record.comment_url, record.scrape_date,
            record.received_date,
        ))
        self.conn.commit()
        if self.verbose:
            print(f'    Saved application "{record.application_number}" with address "{record.address}", '
                  f'description "{record.description}" and received date "{record.received_date}" '
                  "to the database.")

    def save_all(self, records: List[ParsedRecord]) -> int:
        for record in records:
            self.save(record)
        return len(records)

    def rows(self) -> List[Tuple]:
        cursor = self.conn.execute(
            "SELECT council_reference, address, description, info_url, comment_url, "
            "date_scraped, date_received FROM data ORDER BY council_reference"
        )
        return cursor.fetchall()
