import sys
import tempfile
import unittest
from pathlib import Path


# Allow `import devapp_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from devapp_extraction.field_extractor import ParsedRecord  # noqa: E402
from devapp_extraction.sqlite_store import SQLiteStore  # noqa: E402


def _record(number: str, description: str = "Dwelling") -> ParsedRecord:
    return ParsedRecord(
        application_number=number,
        address="7 McAdam RD, PORT AUGUSTA, SA 5700",
        description=description,
        information_url="https://example.org/register.pdf",
        comment_url="mailto:council@example.org",
        scrape_date="2018-06-01",
        application_date="2018-05-01",
        received_date="2018-05-03",
    )


class TestSQLiteStore(unittest.TestCase):
    def test_save_and_replace_by_application_number(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "data.sqlite"
            with SQLiteStore(db_path) as store:
                saved = store.save_all([_record("123/4567"), _record("123/4567 (1)", "Shed"), _record("123/4567")])
                self.assertEqual(saved, 3)
                rows = store.rows()

            self.assertEqual(len(rows), 2)
            self.assertEqual(rows[0], (
                "123/4567",
                "7 McAdam RD, PORT AUGUSTA, SA 5700",
                "Dwelling",
                "https://example.org/register.pdf",
                "mailto:council@example.org",
                "2018-06-01",
                "2018-05-03",
            ))
            self.assertEqual(rows[1][0], "123/4567 (1)")

            # Reopening keeps existing rows.
            with SQLiteStore(db_path) as store:
                store.save(_record("200/2018"))
                self.assertEqual(len(store.rows()), 3)


if __name__ == "__main__":
    unittest.main()
