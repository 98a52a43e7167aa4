import sys
import tempfile
import unittest
from pathlib import Path

import fitz


# Allow `import devapp_extraction.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from devapp_extraction import pdf_loader  # noqa: E402
from devapp_extraction.geometry import TextFragment, is_reading_order  # noqa: E402


def _make_pdf(pages: list) -> bytes:
    doc = fitz.open()
    for items in pages:
        page = doc.new_page()
        for (x, y), text, size in items:
            page.insert_text((x, y), text, fontsize=size)
    data = doc.tobytes()
    doc.close()
    return data


class TestPdfLoader(unittest.TestCase):
    def test_fragments_use_matrix_height(self) -> None:
        data = _make_pdf([[((72, 100), "Lodgement", 10), ((300, 130), "Dwelling", 10)]])
        pages = pdf_loader.load_pdf_pages(data)
        self.assertEqual(len(pages), 1)
        texts = [f.text for f in pages[0]]
        self.assertEqual(texts, ["Lodgement", "Dwelling"])
        lodgement = pages[0][0]
        self.assertAlmostEqual(lodgement.height, 10.0, places=3)
        self.assertAlmostEqual(lodgement.y, 90.0, delta=0.5)
        self.assertAlmostEqual(lodgement.x, 72.0, delta=0.5)
        self.assertGreater(lodgement.width, 0)

    def test_reading_order_and_page_number_removed(self) -> None:
        data = _make_pdf([
            [((72, 300), "second", 10), ((72, 100), "first", 10), ((300, 800), "7", 9)],
            [((72, 100), "only", 10)],
        ])
        pages = pdf_loader.load_pdf_pages(data)
        self.assertEqual([[f.text for f in p] for p in pages], [["first", "second"], ["only"]])
        self.assertTrue(is_reading_order(pages[0]))

    def test_drop_page_number_keeps_other_text(self) -> None:
        frags = [TextFragment(0, 0, 10, 10, "Shed"), TextFragment(0, 50, 10, 10, "2018")]
        self.assertEqual(pdf_loader.drop_page_number(frags), frags)
        frags.append(TextFragment(0, 80, 10, 10, " 12 "))
        self.assertEqual(pdf_loader.drop_page_number(frags), frags[:2])
        self.assertEqual(pdf_loader.drop_page_number([]), [])

    def test_whitespace_spans_are_skipped(self) -> None:
        class _Page:
            def get_text(self, option):
                spans = [
                    {"bbox": (60, 92, 100, 102), "size": 10.0, "origin": (60, 100), "text": "123/4567"},
                    {"bbox": (110, 92, 155, 102), "size": 10.0, "origin": (110, 100), "text": "Lodgement"},
                    {"bbox": (155, 92, 158, 102), "size": 10.0, "origin": (155, 100), "text": " "},
                    {"bbox": (160, 92, 162, 102), "size": 10.0, "origin": (160, 100), "text": ""},
                ]
                return {"blocks": [{"lines": [{"dir": (1.0, 0.0), "spans": spans}]}]}

        fragments = pdf_loader.page_fragments(_Page())
        self.assertEqual([f.text for f in fragments], ["123/4567", "Lodgement"])

    def test_span_text_matrix(self) -> None:
        span = {"size": 8.0, "origin": (10.0, 20.0)}
        self.assertEqual(pdf_loader.span_text_matrix(span, (1.0, 0.0)), (8.0, 0.0, -0.0, 8.0, 10.0, 20.0))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                pdf_loader.load_pdf_file(Path(tmp) / "missing.pdf")

    def test_load_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "register.pdf"
            path.write_bytes(_make_pdf([[((72, 100), "Applicant", 10)]]))
            pages = pdf_loader.load_pdf_file(path)
        self.assertEqual([f.text for f in pages[0]], ["Applicant"])


if __name__ == "__main__":
    unittest.main()
